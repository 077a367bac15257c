"""
Tiered rate limiting for the API.

Every request under ``/api/`` is checked against an ordered list of tiers.
Each tier keeps one token bucket per client address. Tiers are consulted in
order and the first rejection stops the pipeline; tokens already taken from
earlier tiers are not given back. Response headers always describe the first
tier recorded for the request.
"""
import logging
import math
import re
import threading
import time
from dataclasses import dataclass, field
from typing import Callable

from flask import g, request

logger = logging.getLogger("flask.app")

API_PREFIX = "/api/"
READ_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})
MUTATING_METHODS = frozenset({"POST", "PATCH", "DELETE"})
CART_ITEMS_PATH = re.compile(r"^/api/carts/[^/]+/items")


class RateLimitExceeded(Exception):
    """Raised when one tier has no tokens left for the client"""

    code = "RATE_LIMIT_EXCEEDED"

    def __init__(self, decision: "RateLimitDecision"):
        self.decision = decision
        self.tier = decision.rejected_tier
        self.message = decision.message
        super().__init__(self.message)

    @property
    def headers(self) -> dict:
        return self.decision.headers()


######################################################################
# Token bucket
######################################################################
@dataclass(frozen=True)
class RateLimitOutcome:
    """Result of one consume call against one bucket"""

    accepted: bool
    remaining: int
    limit: int
    reset_at: int | None = None


class TokenBucket:
    """Thread-safe token bucket that starts full"""

    def __init__(
        self,
        capacity: int,
        refill_rate: float,
        clock: Callable[[], float] = time.time,
    ):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        if refill_rate < 0:
            raise ValueError("refill_rate cannot be negative")
        self.capacity = capacity
        self.refill_rate = refill_rate
        self._clock = clock
        self._tokens = float(capacity)
        self._last_refill = clock()
        self._lock = threading.Lock()

    def _refill(self, now: float) -> None:
        elapsed = max(0.0, now - self._last_refill)
        if elapsed and self.refill_rate:
            self._tokens = min(self.capacity, self._tokens + elapsed * self.refill_rate)
        self._last_refill = now

    def consume(self, tokens: int = 1) -> RateLimitOutcome:
        """Take tokens if available; the check and the update are atomic"""
        with self._lock:
            now = self._clock()
            self._refill(now)
            if self._tokens >= tokens:
                self._tokens -= tokens
                return RateLimitOutcome(
                    accepted=True,
                    remaining=int(self._tokens),
                    limit=self.capacity,
                    reset_at=int(now),
                )
            reset_at = None
            if self.refill_rate:
                wait = (tokens - self._tokens) / self.refill_rate
                reset_at = int(math.ceil(now + wait))
            return RateLimitOutcome(
                accepted=False,
                remaining=int(self._tokens),
                limit=self.capacity,
                reset_at=reset_at,
            )

    @property
    def tokens(self) -> float:
        with self._lock:
            self._refill(self._clock())
            return self._tokens


######################################################################
# Tiers
######################################################################
def applies_to_api(method: str, path: str) -> bool:  # pylint: disable=unused-argument
    return path.startswith(API_PREFIX)


def applies_to_reads(method: str, path: str) -> bool:  # pylint: disable=unused-argument
    return method in READ_METHODS


def applies_to_writes(method: str, path: str) -> bool:  # pylint: disable=unused-argument
    return method not in READ_METHODS


def applies_to_cart_items(method: str, path: str) -> bool:
    return method in MUTATING_METHODS and CART_ITEMS_PATH.match(path) is not None


class RateLimitTier:
    """One family of buckets, one bucket per client"""

    def __init__(
        self,
        name: str,
        limit: int,
        interval: float,
        message: str,
        applies: Callable[[str, str], bool],
        clock: Callable[[], float] = time.time,
    ):
        self.name = name
        self.limit = limit
        self.interval = interval
        self.message = message
        self.applies = applies
        self._clock = clock
        self._buckets: dict[str, TokenBucket] = {}
        self._lock = threading.Lock()

    @property
    def refill_rate(self) -> float:
        return self.limit / self.interval if self.interval else 0.0

    def bucket_for(self, client_id: str) -> TokenBucket:
        with self._lock:
            bucket = self._buckets.get(client_id)
            if bucket is None:
                bucket = TokenBucket(self.limit, self.refill_rate, self._clock)
                self._buckets[client_id] = bucket
            return bucket

    def consume(self, client_id: str) -> RateLimitOutcome:
        return self.bucket_for(client_id).consume(1)

    def reset(self) -> None:
        with self._lock:
            self._buckets.clear()

    def __repr__(self):
        return f"<RateLimitTier {self.name} {self.limit}/{self.interval}s>"


def parse_limit(value: str) -> tuple[int, float]:
    """Parse "<limit>/<interval seconds>" into its two numbers"""
    try:
        limit, interval = str(value).split("/", 1)
        return int(limit), float(interval)
    except ValueError as error:
        raise ValueError(
            f"Invalid rate limit '{value}', expected '<limit>/<seconds>'"
        ) from error


@dataclass
class RateLimitDecision:
    """Everything recorded while evaluating one request"""

    outcomes: dict[str, RateLimitOutcome] = field(default_factory=dict)
    rejected_tier: str | None = None
    message: str | None = None

    @property
    def accepted(self) -> bool:
        return self.rejected_tier is None

    @property
    def consulted(self) -> list[str]:
        return list(self.outcomes)

    def headers(self) -> dict:
        """Rate limit headers taken from the first recorded outcome"""
        if not self.outcomes:
            return {}
        first = next(iter(self.outcomes.values()))
        headers = {
            "X-RateLimit-Remaining": str(first.remaining),
            "X-RateLimit-Limit": str(first.limit),
        }
        if first.reset_at is not None:
            headers["X-RateLimit-Reset"] = str(first.reset_at)
            headers["Retry-After"] = str(first.reset_at)
        return headers


######################################################################
# Pipeline
######################################################################
class TieredRateLimiter:
    """Ordered pipeline of rate limit tiers, wired into Flask as hooks"""

    def __init__(self, tiers: list[RateLimitTier] | None = None):
        self.tiers = list(tiers) if tiers else []
        self.enabled = True

    def init_app(self, app, clock: Callable[[], float] = time.time):
        """Build the tiers from configuration and register request hooks"""
        self.enabled = app.config.get("RATE_LIMIT_ENABLED", True)
        self.tiers = self.build_tiers(app.config, clock)
        app.before_request(self._before_request)
        app.after_request(self._after_request)
        app.extensions["rate_limiter"] = self
        logger.info("Rate limiter configured with tiers %s", self.tiers)

    @staticmethod
    def build_tiers(config, clock: Callable[[], float] = time.time) -> list[RateLimitTier]:
        """Global, read, write, then cart item modification"""
        specs = [
            (
                "global",
                config.get("RATE_LIMIT_GLOBAL", "100/60"),
                "API rate limit exceeded. Please try again later.",
                applies_to_api,
            ),
            (
                "read",
                config.get("RATE_LIMIT_READ", "60/60"),
                "Read API rate limit exceeded. Please try again later.",
                applies_to_reads,
            ),
            (
                "write",
                config.get("RATE_LIMIT_WRITE", "30/60"),
                "Write API rate limit exceeded. Please try again later.",
                applies_to_writes,
            ),
            (
                "cart_modify",
                config.get("RATE_LIMIT_CART_MODIFY", "20/60"),
                "Cart modification rate limit exceeded. Please slow down.",
                applies_to_cart_items,
            ),
        ]
        tiers = []
        for name, value, message, applies in specs:
            limit, interval = parse_limit(value)
            tiers.append(RateLimitTier(name, limit, interval, message, applies, clock))
        return tiers

    def evaluate(self, method: str, path: str, client_id: str) -> RateLimitDecision:
        """
        Consume one token per applicable tier, stopping at the first rejection

        Only requests under /api/ are limited; anything else gets an empty,
        accepted decision.
        """
        decision = RateLimitDecision()
        if not path.startswith(API_PREFIX):
            return decision
        method = method.upper()
        for tier in self.tiers:
            if not tier.applies(method, path):
                continue
            outcome = tier.consume(client_id)
            decision.outcomes[tier.name] = outcome
            if not outcome.accepted:
                decision.rejected_tier = tier.name
                decision.message = tier.message
                break
        return decision

    def reset(self) -> None:
        """Forget every client's bucket"""
        for tier in self.tiers:
            tier.reset()

    ##################################################
    # Flask hooks
    ##################################################
    def _before_request(self):
        # g outlives a request when the app context is shared
        g.rate_limit_decision = None
        if not self.enabled:
            return None
        client_id = request.remote_addr or "unknown"
        decision = self.evaluate(request.method, request.path, client_id)
        g.rate_limit_decision = decision
        if not decision.accepted:
            logger.warning(
                "Rate limit '%s' exceeded for %s on %s %s",
                decision.rejected_tier,
                client_id,
                request.method,
                request.path,
            )
            raise RateLimitExceeded(decision)
        return None

    def _after_request(self, response):
        decision = g.get("rate_limit_decision")
        if decision is not None:
            for name, value in decision.headers().items():
                response.headers[name] = value
        return response


# Shared instance initialized in the app factory
rate_limiter = TieredRateLimiter()
