# tests/test_trust.py
"""Tests for the endpoint trust registry."""

import threading

import pytest

from embedline.exceptions import UntrustedEndpointError, ValidationError
from embedline.trust import DEFAULT_TRUSTED_ENDPOINTS, EndpointTrustRegistry


class TestIsTrusted:
    def test_default_rules_trust_tutorial_providers(self):
        trust = EndpointTrustRegistry(DEFAULT_TRUSTED_ENDPOINTS)

        assert trust.is_trusted("https://openrouter.ai/api/v1/embeddings")
        assert trust.is_trusted("https://api.openai.com/v1/embeddings")
        assert trust.is_trusted("https://router.huggingface.co/hf-inference/models/x")

    def test_empty_registry_trusts_nothing(self):
        assert not EndpointTrustRegistry().is_trusted("https://openrouter.ai/api")

    def test_rules_are_anchored(self):
        """A rule without ^/$ must still match the whole URL."""
        trust = EndpointTrustRegistry([r"https://openrouter\.ai/.*"])

        assert trust.is_trusted("https://openrouter.ai/api")
        assert not trust.is_trusted("https://evil.example/?u=https://openrouter.ai/api")

    def test_matching_is_case_sensitive(self):
        trust = EndpointTrustRegistry(DEFAULT_TRUSTED_ENDPOINTS)

        assert not trust.is_trusted("HTTPS://openrouter.ai/api")
        assert not trust.is_trusted("https://OpenRouter.ai/api")

    def test_plain_http_not_trusted(self):
        trust = EndpointTrustRegistry(DEFAULT_TRUSTED_ENDPOINTS)
        assert not trust.is_trusted("http://openrouter.ai/api/v1/embeddings")

    def test_check_raises(self):
        trust = EndpointTrustRegistry(DEFAULT_TRUSTED_ENDPOINTS)

        with pytest.raises(UntrustedEndpointError) as exc_info:
            trust.check("https://example.com/embed")
        assert exc_info.value.url == "https://example.com/embed"


class TestRuleUpdates:
    def test_set_rules_replaces(self):
        trust = EndpointTrustRegistry(DEFAULT_TRUSTED_ENDPOINTS)
        trust.set_rules([r"^https://example\.com/.*$"])

        assert trust.is_trusted("https://example.com/x")
        assert not trust.is_trusted("https://openrouter.ai/api")

    def test_invalid_pattern_keeps_old_rules(self):
        trust = EndpointTrustRegistry(DEFAULT_TRUSTED_ENDPOINTS)

        with pytest.raises(ValidationError):
            trust.set_rules([r"^https://ok\.com/.*$", "("])

        assert trust.patterns == list(DEFAULT_TRUSTED_ENDPOINTS)

    def test_add_rule_is_idempotent(self):
        trust = EndpointTrustRegistry()
        trust.add_rule(r"^https://a\.com/.*$")
        trust.add_rule(r"^https://a\.com/.*$")

        assert trust.patterns == [r"^https://a\.com/.*$"]

    def test_concurrent_readers_see_whole_rule_sets(self):
        """Readers see either the old or the new set, never a partial one."""
        old = [r"^https://a\.com/.*$", r"^https://b\.com/.*$"]
        new = [r"^https://c\.com/.*$", r"^https://d\.com/.*$"]
        trust = EndpointTrustRegistry(old)
        mixed = []
        stop = threading.Event()

        def reader():
            while not stop.is_set():
                rules = trust.rules
                patterns = [r.pattern for r in rules]
                if patterns not in (old, new):
                    mixed.append(patterns)

        threads = [threading.Thread(target=reader) for _ in range(4)]
        for t in threads:
            t.start()
        for i in range(200):
            trust.set_rules(new if i % 2 == 0 else old)
        stop.set()
        for t in threads:
            t.join()

        assert mixed == []
