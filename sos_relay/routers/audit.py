"""Audit router: GET /api/audit (operator)."""
from dataclasses import asdict

from fastapi import APIRouter, Query

from sos_relay.models.audit import AuditEntryOut
from sos_relay.utils.audit import get_audit_log

router = APIRouter(prefix="/api", tags=["audit"])


@router.get("/audit", response_model=list[AuditEntryOut])
async def list_audit(limit: int = Query(100, ge=1, le=1000)):
    """Recent submissions and acknowledgments, most recent first."""
    return [AuditEntryOut(**asdict(entry)) for entry in get_audit_log(limit)]
