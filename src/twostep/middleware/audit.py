"""
Audit Logging
Track two-factor authentication events
"""

import json
import logging
import time
from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from typing import Optional

logger = logging.getLogger("twostep.audit")

FAILURE_WINDOW_SECONDS = 300
ALERT_THRESHOLD = 50


class AuditEventType(str, Enum):
    """Types of audit events."""
    MFA_SETUP = "mfa_setup"
    MFA_VERIFY = "mfa_verify"
    MFA_VALIDATE = "mfa_validate"
    MFA_DISABLE = "mfa_disable"


@dataclass
class AuditEvent:
    """Audit event record."""
    id: str
    timestamp: float
    event_type: AuditEventType
    user_id: Optional[str]
    success: bool
    details: Optional[dict] = None
    risk_score: int = 0  # 0-100

    def to_dict(self) -> dict:
        return {
            **asdict(self),
            "event_type": self.event_type.value,
            "timestamp_iso": datetime.fromtimestamp(self.timestamp).isoformat(),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


class AuditLogger:
    """Audit event logger with risk scoring."""

    def __init__(self, max_events: int = 10_000):
        self.max_events = max_events
        self.events: list[AuditEvent] = []
        self.failed_attempts: dict[str, list[float]] = {}  # user -> timestamps

    def _recent_failures(self, user_id: str, now: float) -> int:
        cutoff = now - FAILURE_WINDOW_SECONDS
        recent = [t for t in self.failed_attempts.get(user_id, []) if t > cutoff]
        if recent:
            self.failed_attempts[user_id] = recent
        else:
            self.failed_attempts.pop(user_id, None)
        return len(recent)

    def _calculate_risk_score(
        self,
        event_type: AuditEventType,
        user_id: Optional[str],
        success: bool,
        now: float,
    ) -> int:
        """Calculate risk score for the event."""
        base_scores = {
            AuditEventType.MFA_DISABLE: 30,
            AuditEventType.MFA_VERIFY: 5,
            AuditEventType.MFA_VALIDATE: 5,
        }
        score = base_scores.get(event_type, 0)

        # Repeated bad codes against one account look like guessing
        if user_id is not None:
            failures = self._recent_failures(user_id, now)
            if failures >= 5:
                score += 40
            elif failures >= 3:
                score += 20

        if not success:
            score += 10

        return min(100, score)

    def record(
        self,
        event_type: AuditEventType,
        user_id: Optional[str] = None,
        success: bool = True,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        """Record an audit event."""
        now = time.time()

        if not success and user_id is not None:
            self.failed_attempts.setdefault(user_id, []).append(now)

        risk_score = self._calculate_risk_score(event_type, user_id, success, now)

        event = AuditEvent(
            id=f"audit_{int(now * 1000)}_{len(self.events)}",
            timestamp=now,
            event_type=event_type,
            user_id=user_id,
            success=success,
            details=details,
            risk_score=risk_score,
        )

        self.events.append(event)
        if len(self.events) > self.max_events:
            del self.events[: len(self.events) - self.max_events]

        logger.info(
            "%s user=%s success=%s risk=%d",
            event_type.value, user_id, success, risk_score,
        )
        if risk_score >= ALERT_THRESHOLD:
            self._trigger_alert(event)

        return event

    def _trigger_alert(self, event: AuditEvent):
        """Raise a security alert for high-risk events."""
        logger.warning(
            "SECURITY ALERT: %s (risk: %d) user=%s",
            event.event_type.value, event.risk_score, event.user_id,
        )

    def get_events(
        self,
        user_id: Optional[str] = None,
        event_type: Optional[AuditEventType] = None,
        min_risk: int = 0,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Query audit events, newest first."""
        filtered = self.events

        if user_id:
            filtered = [e for e in filtered if e.user_id == user_id]

        if event_type:
            filtered = [e for e in filtered if e.event_type == event_type]

        if min_risk > 0:
            filtered = [e for e in filtered if e.risk_score >= min_risk]

        return sorted(filtered, key=lambda e: e.timestamp, reverse=True)[:limit]
