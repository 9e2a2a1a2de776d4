from embedline.connectors.extraction import available_extractors, extract
from embedline.connectors.registry import Connector, ConnectorRegistry
from embedline.connectors.retry import RetryPolicy
from embedline.connectors.schema import ConnectorAction, ConnectorSpec
from embedline.connectors.template import PreparedRequest, RequestTemplate
from embedline.connectors.transport import HttpTransport, Transport

__all__ = [
    "Connector",
    "ConnectorAction",
    "ConnectorRegistry",
    "ConnectorSpec",
    "HttpTransport",
    "PreparedRequest",
    "RequestTemplate",
    "RetryPolicy",
    "Transport",
    "available_extractors",
    "extract",
]
