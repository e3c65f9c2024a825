"""Audit and rate limiting package."""

from .rate_limit import RateLimiter, enforce_rate_limit
from .audit import AuditEvent, AuditEventType, AuditLogger

__all__ = [
    "RateLimiter", "enforce_rate_limit",
    "AuditEvent", "AuditEventType", "AuditLogger",
]
