"""
Status state machine for reports.

pending -> acknowledged is the only transition; acknowledged is terminal.
Identifiers are validated here, before the store is touched.
"""
import logging
from typing import Any, Dict, List

from sos_relay.errors import ValidationError
from sos_relay.models.report import ReportOut, ReportStatus

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: Dict[ReportStatus, List[ReportStatus]] = {
    ReportStatus.PENDING: [ReportStatus.ACKNOWLEDGED],
    ReportStatus.ACKNOWLEDGED: [],
}


def is_valid_transition(from_status: str, to_status: str) -> bool:
    """
    Check a status transition.

    Re-applying the current status counts as valid so repeated
    acknowledgment is accepted rather than rejected.
    """
    try:
        from_enum = ReportStatus(from_status)
        to_enum = ReportStatus(to_status)
    except ValueError:
        return False
    if from_enum == to_enum:
        return True
    return to_enum in ALLOWED_TRANSITIONS.get(from_enum, [])


def source_statuses(to_status: ReportStatus, include_current: bool = False) -> List[ReportStatus]:
    """Statuses a report may be in for a move to ``to_status``, per ALLOWED_TRANSITIONS.

    ``to_status`` itself is only included with ``include_current``, which lets
    a repeat write re-apply the assignment.
    """
    return [
        s for s in ReportStatus
        if is_valid_transition(s, to_status) and (include_current or s != to_status)
    ]


def _parse_int(value: Any, label: str) -> int:
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{label} is required")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValidationError(f"{label} must be an integer")
    text = str(value).strip()
    if not text:
        raise ValidationError(f"{label} is required")
    try:
        return int(text)
    except ValueError:
        raise ValidationError(f"{label} must be an integer") from None


def parse_operator_id(value: Any) -> int:
    """Operator ids are non-zero integers."""
    operator_id = _parse_int(value, "operatorId")
    if operator_id == 0:
        raise ValidationError("operatorId must be non-zero")
    return operator_id


def parse_report_id(value: Any) -> int:
    report_id = _parse_int(value, "reportId")
    if report_id <= 0:
        raise ValidationError("reportId must be a positive integer")
    return report_id


def acknowledge(store: Any, report_id: Any, operator_id: Any, overwrite: bool = False) -> ReportOut:
    """Validate identifiers and apply the acknowledgment through ``store``.

    Raises ValidationError before any store access, NotFound from the store,
    and ValidationError when the report's status has no transition to
    acknowledged.
    """
    rid = parse_report_id(report_id)
    oid = parse_operator_id(operator_id)
    report = store.acknowledge(rid, oid, overwrite=overwrite)
    if report.status != ReportStatus.ACKNOWLEDGED:
        raise ValidationError(
            f"Report {rid} cannot move from {report.status.value} to {ReportStatus.ACKNOWLEDGED.value}"
        )
    if report.acknowledged_by != oid:
        logger.info(
            "Report %d already acknowledged by operator %s; keeping original authorship",
            rid,
            report.acknowledged_by,
        )
    return report
