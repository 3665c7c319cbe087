from __future__ import annotations

from types import SimpleNamespace

from core.rate_limits import (
    PriceRateLimiter,
    build_group_rate_limits,
    client_identifier,
    parse_group_rate_limits,
)


def test_parse_group_rate_limits_skips_malformed_entries():
    parsed = parse_group_rate_limits(" Price:10/minute, broken, distance:5/second ,:1/hour")

    assert parsed == {"price": "10/minute", "distance": "5/second"}


def test_configured_rules_override_fallback_per_group():
    rules = build_group_rate_limits("price:5/second", fallback_csv="price:30/minute,distance:20/minute")

    assert rules["price"].amount == 5
    assert rules["distance"].amount == 20


def test_invalid_rules_are_dropped():
    rules = build_group_rate_limits("price:lots", fallback_csv="")
    assert "price" not in rules


def test_limiter_tracks_remaining_and_blocks():
    limiter = PriceRateLimiter("memory://", build_group_rate_limits("price:2/minute", fallback_csv=""))

    first = limiter.hit("price", "1.2.3.4")
    second = limiter.hit("price", "1.2.3.4")
    third = limiter.hit("price", "1.2.3.4")

    assert (first.allowed, first.remaining, first.limit) == (True, 1, 2)
    assert (second.allowed, second.remaining) == (True, 0)
    assert third.allowed is False
    assert 1 <= third.reset_after_seconds <= 60


def test_groups_have_independent_counters():
    limiter = PriceRateLimiter("memory://", build_group_rate_limits("price:1/minute,distance:1/minute", fallback_csv=""))

    assert limiter.hit("price", "client").allowed is True
    assert limiter.hit("distance", "client").allowed is True
    assert limiter.hit("price", "client").allowed is False


def test_unknown_group_uses_default_rule():
    limiter = PriceRateLimiter("memory://", {})
    assert limiter.rule_for("contact").amount == 30


def test_client_identifier_prefers_first_forwarded_hop():
    request = SimpleNamespace(headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1"}, client=SimpleNamespace(host="10.0.0.1"))
    assert client_identifier(request) == "203.0.113.9"


def test_client_identifier_falls_back_to_peer_address():
    request = SimpleNamespace(headers={}, client=SimpleNamespace(host="198.51.100.7"))
    assert client_identifier(request) == "198.51.100.7"


def test_client_identifier_without_peer():
    assert client_identifier(SimpleNamespace(headers={}, client=None)) == "unknown"
