"""
Rate Limiting
Slow down guessing against the code-checking endpoints
"""

import time
from collections import defaultdict
from typing import Iterable, Optional

from fastapi import Request, HTTPException, status


class RateLimiter:
    """
    Sliding window rate limiter.

    Each request counts against the client address and, when given, the
    targeted user, so rotating addresses does not reset an account's budget.
    """

    def __init__(
        self,
        requests_per_minute: int = 10,
        requests_per_hour: int = 100,
        trusted_proxies: Iterable[str] = (),
    ):
        self.rpm = requests_per_minute
        self.rph = requests_per_hour
        self.trusted_proxies = set(trusted_proxies)

        # In-memory storage (use Redis in production)
        self.minute_buckets: dict[str, list[float]] = defaultdict(list)
        self.hour_buckets: dict[str, list[float]] = defaultdict(list)

    def client_address(self, request: Request) -> str:
        """Peer address, or the forwarded one when the peer is a trusted proxy."""
        peer = request.client.host if request.client else "unknown"
        if peer not in self.trusted_proxies:
            return peer

        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

        return peer

    def _keys(self, request: Request, user_id: Optional[str]) -> list[str]:
        keys = [f"client:{self.client_address(request)}"]
        if user_id is not None:
            keys.append(f"user:{user_id}")
        return keys

    def _cleanup_old_requests(self, bucket: list[float], window_seconds: int) -> list[float]:
        """Remove requests outside the time window."""
        cutoff = time.time() - window_seconds
        return [t for t in bucket if t > cutoff]

    def _refresh(self, key: str) -> None:
        self.minute_buckets[key] = self._cleanup_old_requests(self.minute_buckets[key], 60)
        self.hour_buckets[key] = self._cleanup_old_requests(self.hour_buckets[key], 3600)

    def check_rate_limit(self, request: Request, user_id: Optional[str] = None) -> bool:
        """Record the request and report whether it is allowed."""
        keys = self._keys(request, user_id)
        for key in keys:
            self._refresh(key)

        for key in keys:
            if len(self.minute_buckets[key]) >= self.rpm:
                return False
            if len(self.hour_buckets[key]) >= self.rph:
                return False

        now = time.time()
        for key in keys:
            self.minute_buckets[key].append(now)
            self.hour_buckets[key].append(now)

        return True

    def get_remaining(self, request: Request, user_id: Optional[str] = None) -> dict[str, int]:
        """Get remaining requests, the tightest of the client and user budgets."""
        keys = self._keys(request, user_id)
        for key in keys:
            self._refresh(key)

        return {
            "minute_remaining": max(0, min(self.rpm - len(self.minute_buckets[k]) for k in keys)),
            "hour_remaining": max(0, min(self.rph - len(self.hour_buckets[k]) for k in keys)),
        }


def enforce_rate_limit(request: Request, user_id: Optional[str] = None) -> None:
    """Raise 429 when the limiter on app.state refuses the request."""
    limiter: RateLimiter = request.app.state.rate_limiter

    if not limiter.check_rate_limit(request, user_id):
        remaining = limiter.get_remaining(request, user_id)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded",
            headers={
                "X-RateLimit-Remaining-Minute": str(remaining["minute_remaining"]),
                "X-RateLimit-Remaining-Hour": str(remaining["hour_remaining"]),
                "Retry-After": "60",
            },
        )
