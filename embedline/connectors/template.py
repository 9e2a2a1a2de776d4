# embedline/connectors/template.py
"""
Typed request templates.

Placeholders use the ${namespace.name} syntax. Only two namespaces exist:
- parameters: declared connector parameters plus the runtime "input"
- credential: declared connector credentials

Every placeholder is resolved against the connector definition when the
template is built, so unknown names fail at creation time, not at call time.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from embedline.connectors.schema import ConnectorAction
from embedline.exceptions import ValidationError

_ANY_PLACEHOLDER = re.compile(r"\$\{([^}]*)\}")
_QUALIFIED = re.compile(r"^(parameters|credential)\.(\w+)$")

INPUT_PARAMETER = "input"
RUNTIME_PARAMETERS = frozenset({INPUT_PARAMETER})


@dataclass(frozen=True)
class Placeholder:
    namespace: str
    name: str

    @property
    def token(self) -> str:
        return f"${{{self.namespace}.{self.name}}}"


@dataclass(frozen=True)
class PreparedRequest:
    """A fully rendered outbound request."""

    method: str
    url: str
    headers: dict[str, str]
    body: Any


def parse_placeholders(template: str) -> list[Placeholder]:
    """Return the placeholders of a template, rejecting malformed ones."""
    found = []
    for match in _ANY_PLACEHOLDER.finditer(template):
        qualified = _QUALIFIED.match(match.group(1).strip())
        if qualified is None:
            raise ValidationError(
                f"Unknown placeholder {match.group(0)!r}: "
                "expected ${parameters.NAME} or ${credential.NAME}"
            )
        found.append(Placeholder(qualified.group(1), qualified.group(2)))
    return found


def _encode_for_json(value: Any) -> str:
    # Strings land inside quotes already present in the template.
    if isinstance(value, str):
        return json.dumps(value)[1:-1]
    return json.dumps(value)


def _encode_raw(value: Any) -> str:
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return str(value)


class RequestTemplate:
    """Request template bound to a connector's parameters and credentials."""

    def __init__(
        self,
        action: ConnectorAction,
        parameters: Mapping[str, Any],
        credential: Mapping[str, str],
    ) -> None:
        self._action = action
        self._parameters = dict(parameters)
        self._credential = dict(credential)
        self._validate()

    def _validate(self) -> None:
        templates = [self._action.url, self._action.request_body, *self._action.headers.values()]
        for template in templates:
            for ph in parse_placeholders(template):
                self._lookup(ph, runtime={INPUT_PARAMETER: []})

        body_placeholders = parse_placeholders(self._action.request_body)
        if Placeholder("parameters", INPUT_PARAMETER) not in body_placeholders:
            raise ValidationError("request_body must reference ${parameters.input}")

        for template in [self._action.url, *self._action.headers.values()]:
            names = {ph.name for ph in parse_placeholders(template) if ph.namespace == "parameters"}
            if names & RUNTIME_PARAMETERS:
                raise ValidationError("${parameters.input} may only appear in request_body")

        # A sample render proves the body is valid JSON once filled in.
        try:
            json.loads(self._render(self._action.request_body, {INPUT_PARAMETER: ["sample"]}, _encode_for_json))
        except json.JSONDecodeError as exc:
            raise ValidationError(f"request_body is not valid JSON after substitution: {exc}") from exc

    def _lookup(self, ph: Placeholder, runtime: Mapping[str, Any]) -> Any:
        if ph.namespace == "credential":
            if ph.name not in self._credential:
                raise ValidationError(f"Undeclared credential in template: {ph.token}")
            return self._credential[ph.name]
        if ph.name in RUNTIME_PARAMETERS:
            return runtime[ph.name]
        if ph.name not in self._parameters:
            raise ValidationError(f"Undeclared parameter in template: {ph.token}")
        return self._parameters[ph.name]

    def _render(self, template: str, runtime: Mapping[str, Any], encode) -> str:
        def replacer(match: re.Match) -> str:
            qualified = _QUALIFIED.match(match.group(1).strip())
            ph = Placeholder(qualified.group(1), qualified.group(2))
            return encode(self._lookup(ph, runtime))

        return _ANY_PLACEHOLDER.sub(replacer, template)

    def render(self, texts: Sequence[str]) -> PreparedRequest:
        runtime = {INPUT_PARAMETER: list(texts)}
        body = json.loads(self._render(self._action.request_body, runtime, _encode_for_json))
        return PreparedRequest(
            method=self._action.method,
            url=self._render(self._action.url, runtime, _encode_raw),
            headers={k: self._render(v, runtime, _encode_raw) for k, v in self._action.headers.items()},
            body=body,
        )

    def resolved_url(self) -> str:
        """URL with connector parameters filled in; runtime input never reaches the URL."""
        return self._render(self._action.url, {}, _encode_raw)
