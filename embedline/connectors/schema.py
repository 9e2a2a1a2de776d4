# embedline/connectors/schema.py
"""
Pydantic schema for connector definitions.

Mirrors the administrative connector payload:

    {
      "name": "OpenRouter Connector",
      "version": "1",
      "protocol": "http",
      "parameters": {"endpoint": "openrouter.ai", "model": "openai/text-embedding-3-small"},
      "credential": {"openRouter_key": "..."},
      "actions": [
        {
          "action_type": "PREDICT",
          "method": "POST",
          "url": "https://${parameters.endpoint}/api/v1/embeddings",
          "headers": {"Authorization": "Bearer ${credential.openRouter_key}"},
          "request_body": "{ \"model\": \"${parameters.model}\", \"input\": ${parameters.input} }",
          "post_process_function": "connector.post_process.openai.embedding"
        }
      ]
    }
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConnectorAction(BaseModel):
    action_type: Literal["PREDICT"] = "PREDICT"
    method: str = Field(default="POST", description="HTTP method")
    url: str = Field(..., description="URL template")
    headers: dict[str, str] = Field(default_factory=dict, description="Header templates")
    request_body: str = Field(..., description="JSON body template")
    post_process_function: str = Field(..., description="Name of the extraction rule")

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("method")
    @classmethod
    def upper_method(cls, v: str) -> str:
        return v.upper()


class ConnectorSpec(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    version: str = "1"
    protocol: Literal["http"] = "http"
    parameters: dict[str, Any] = Field(default_factory=dict)
    credential: dict[str, str] = Field(default_factory=dict)
    actions: list[ConnectorAction] = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("actions")
    @classmethod
    def single_predict_action(cls, v: list[ConnectorAction]) -> list[ConnectorAction]:
        predict = [a for a in v if a.action_type == "PREDICT"]
        if len(predict) != 1:
            raise ValueError("connector must define exactly one PREDICT action")
        return v

    @property
    def predict_action(self) -> ConnectorAction:
        return next(a for a in self.actions if a.action_type == "PREDICT")
