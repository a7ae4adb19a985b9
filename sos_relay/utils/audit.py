"""In-memory audit log of submissions and acknowledgments."""
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class AuditEntry:
    actor: str
    action: str
    report_id: Optional[int]
    details: Optional[str]
    timestamp: datetime = field(default_factory=datetime.utcnow)


_audit_log: deque[AuditEntry] = deque(maxlen=10_000)


def log_action(
    actor: str,
    action: str,
    report_id: Optional[int] = None,
    details: Optional[str] = None,
) -> None:
    """Record an action to the in-memory audit log."""
    _audit_log.append(
        AuditEntry(actor=actor, action=action, report_id=report_id, details=details)
    )


def get_audit_log(limit: int = 100) -> list[AuditEntry]:
    """Retrieve recent audit entries (most recent first)."""
    entries = list(_audit_log)
    return list(reversed(entries[-limit:]))


def clear_audit_log() -> None:
    _audit_log.clear()
