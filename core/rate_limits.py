from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable

from fastapi import Depends, Request
from limits import RateLimitItem, parse as parse_rate
from limits.storage import storage_from_string
from limits.strategies import MovingWindowRateLimiter

from core.errors import too_many_requests
from core.settings import DEFAULT_PRICE_RATE_LIMITS, get_settings

logger = logging.getLogger(__name__)

DEFAULT_GROUP_RATE = "30/minute"


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_after_seconds: int


def parse_group_rate_limits(raw: str | None) -> dict[str, str]:
    parsed: dict[str, str] = {}
    if not raw:
        return parsed

    for entry in raw.split(","):
        value = entry.strip()
        if not value or ":" not in value:
            continue
        group, limit = value.split(":", 1)
        group_key = group.strip().lower()
        limit_value = limit.strip()
        if group_key and limit_value:
            parsed[group_key] = limit_value

    return parsed


def build_group_rate_limits(raw: str | None, *, fallback_csv: str = DEFAULT_PRICE_RATE_LIMITS) -> dict[str, RateLimitItem]:
    selected = parse_group_rate_limits(fallback_csv)
    selected.update(parse_group_rate_limits(raw))

    final_limits: dict[str, RateLimitItem] = {}
    for group, rule in selected.items():
        try:
            final_limits[group] = parse_rate(rule)
        except ValueError:
            logger.warning("Ignoring invalid rate limit rule %r for group %s", rule, group)
    return final_limits


class PriceRateLimiter:
    """Per-client moving window limits keyed by route group."""

    def __init__(self, storage_uri: str, rules: dict[str, RateLimitItem]) -> None:
        self._limiter = MovingWindowRateLimiter(storage_from_string(storage_uri))
        self._rules = rules
        self._default_rule = parse_rate(DEFAULT_GROUP_RATE)

    def rule_for(self, group: str) -> RateLimitItem:
        return self._rules.get(group, self._default_rule)

    def hit(self, group: str, client_id: str) -> RateLimitDecision:
        rule = self.rule_for(group)
        allowed = self._limiter.hit(rule, group, client_id)
        reset_time, remaining = self._limiter.get_window_stats(rule, group, client_id)
        return RateLimitDecision(
            allowed=allowed,
            limit=rule.amount,
            remaining=max(remaining, 0),
            reset_after_seconds=max(math.ceil(reset_time - time.time()), 1),
        )


@lru_cache(maxsize=1)
def get_rate_limiter() -> PriceRateLimiter:
    settings = get_settings()
    return PriceRateLimiter(
        settings.rate_limit_storage_uri,
        build_group_rate_limits(settings.price_rate_limits),
    )


def client_identifier(request: Request) -> str:
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop
    if request.client is not None:
        return request.client.host
    return "unknown"


def rate_limit(group: str) -> Callable:
    """Build a route dependency that enforces the limit for `group`."""

    async def dependency(
        request: Request,
        limiter: PriceRateLimiter = Depends(get_rate_limiter),
    ) -> RateLimitDecision:
        client_id = client_identifier(request)
        decision = limiter.hit(group, client_id)
        if not decision.allowed:
            logger.warning("Rate limit exceeded for %s on group %s", client_id, group)
            raise too_many_requests(decision.reset_after_seconds, group)
        return decision

    return dependency
