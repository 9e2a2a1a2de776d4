from embedline.trust.registry import DEFAULT_TRUSTED_ENDPOINTS, EndpointTrustRegistry, TrustRule

__all__ = ["DEFAULT_TRUSTED_ENDPOINTS", "EndpointTrustRegistry", "TrustRule"]
