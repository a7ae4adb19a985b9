"""Audit trail models."""
from datetime import datetime
from typing import Optional

from sos_relay.models.report import WireModel


class AuditEntryOut(WireModel):
    actor: str
    action: str
    report_id: Optional[int] = None
    details: Optional[str] = None
    timestamp: datetime
