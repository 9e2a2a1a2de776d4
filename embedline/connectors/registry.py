# embedline/connectors/registry.py
"""
Connector registry.

Responsibilities:
- Validate connector definitions (placeholders, extraction rule)
- Store immutable connectors under content-derived ids
- Invoke a connector: render, trust-check, send with retries, extract
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from pydantic import ValidationError as PydanticValidationError

from embedline.connectors.extraction import extract, get_extractor
from embedline.connectors.retry import RetryPolicy
from embedline.connectors.schema import ConnectorSpec
from embedline.connectors.template import RequestTemplate
from embedline.connectors.transport import HttpTransport, Transport
from embedline.exceptions import NotFoundError, ReferentialIntegrityError, ValidationError
from embedline.hashing import definition_id
from embedline.logging.logger import get_logger
from embedline.logging.tags import CONNECTOR
from embedline.trust.registry import EndpointTrustRegistry

logger = get_logger(__name__)


@dataclass(frozen=True)
class Connector:
    id: str
    spec: ConnectorSpec
    template: RequestTemplate

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def post_process_function(self) -> str:
        return self.spec.predict_action.post_process_function

    def describe(self) -> dict[str, Any]:
        """Public view of the connector; credentials are never echoed back."""
        data = self.spec.model_dump(mode="json")
        data["credential"] = {k: "***" for k in data["credential"]}
        data["connector_id"] = self.id
        return data


def parse_connector_spec(definition: ConnectorSpec | Mapping[str, Any]) -> ConnectorSpec:
    if isinstance(definition, ConnectorSpec):
        return definition
    try:
        return ConnectorSpec.model_validate(definition)
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid connector definition: {exc}") from exc


class ConnectorRegistry:
    """
    Stores connectors and executes them.

    The connector map is copy-on-write: writers swap in a new dict under the
    lock, readers use whatever snapshot they picked up.
    """

    def __init__(
        self,
        trust: EndpointTrustRegistry,
        transport: Transport | None = None,
        retry: RetryPolicy | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._trust = trust
        self._transport = transport or HttpTransport()
        self._retry = retry or RetryPolicy()
        self._timeout = timeout
        self._lock = threading.Lock()
        self._connectors: dict[str, Connector] = {}
        self._in_use: Callable[[str], list[str]] = lambda connector_id: []

    def set_reference_check(self, fn: Callable[[str], list[str]]) -> None:
        """Install the callback that lists entities referencing a connector."""
        self._in_use = fn

    def create_connector(self, definition: ConnectorSpec | Mapping[str, Any]) -> str:
        spec = parse_connector_spec(definition)
        action = spec.predict_action

        get_extractor(action.post_process_function)
        template = RequestTemplate(action, spec.parameters, spec.credential)

        connector_id = definition_id("connector", spec.model_dump(mode="json"))
        with self._lock:
            if connector_id in self._connectors:
                logger.debug(f"{CONNECTOR} Connector {spec.name!r} already exists as {connector_id}")
                return connector_id
            connector = Connector(id=connector_id, spec=spec, template=template)
            self._connectors = {**self._connectors, connector_id: connector}

        logger.info(f"{CONNECTOR} Created connector {spec.name!r} ({connector_id})")
        return connector_id

    def get(self, connector_id: str) -> Connector:
        try:
            return self._connectors[connector_id]
        except KeyError:
            raise NotFoundError("connector", connector_id) from None

    def exists(self, connector_id: str) -> bool:
        return connector_id in self._connectors

    def list(self) -> list[Connector]:
        return list(self._connectors.values())

    def delete_connector(self, connector_id: str) -> None:
        with self._lock:
            self.get(connector_id)
            users = self._in_use(connector_id)
            if users:
                raise ReferentialIntegrityError("connector", connector_id, users)
            self._connectors = {k: v for k, v in self._connectors.items() if k != connector_id}
        logger.info(f"{CONNECTOR} Deleted connector {connector_id}")

    def invoke(self, connector_id: str, text: str) -> list[float]:
        """
        Produce one embedding through a connector.

        Raises:
            UntrustedEndpointError: destination not allow-listed (no request sent)
            ExtractionError: response had no well-formed vector
            TransientProviderError: retries exhausted
            ProviderRequestError: provider rejected the request
        """
        connector = self.get(connector_id)

        request = connector.template.render([text])
        self._trust.check(request.url)

        payload = self._retry.run(
            lambda: self._transport.send(request, self._timeout),
            label=f"connector {connector.name!r}",
        )
        return extract(connector.post_process_function, payload)
