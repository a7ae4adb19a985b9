"""Report store: the only component that reads or writes the reports table."""
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy import Column, DateTime, Float, Integer, String, Text, or_, select, update
from sqlalchemy.exc import SQLAlchemyError

from sos_relay.errors import NotFound, UpstreamFailure
from sos_relay.models.report import (
    Attachment,
    AttachmentKind,
    Location,
    ReportCreate,
    ReportMode,
    ReportOut,
    ReportStatus,
)
from sos_relay.pipelines.status import source_statuses
from sos_relay.services.database import Base, Database

logger = logging.getLogger(__name__)


class ReportRow(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, default="")
    phone = Column(String(64), nullable=False, default="")
    complaint_text = Column(Text, nullable=False, default="")

    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    accuracy = Column(Float, nullable=True)

    audio_url = Column(String(1024), nullable=True)
    video_url = Column(String(1024), nullable=True)
    mode = Column(String(16), nullable=False, default=ReportMode.FORM.value)

    status = Column(String(16), nullable=False, default=ReportStatus.PENDING.value, index=True)
    acknowledged_by = Column(Integer, nullable=True)
    acknowledged_at = Column(DateTime, nullable=True)
    submitted_at = Column(DateTime, nullable=False, index=True)


def row_to_report(row: ReportRow) -> ReportOut:
    location = None
    if row.latitude is not None and row.longitude is not None:
        location = Location(latitude=row.latitude, longitude=row.longitude, accuracy=row.accuracy)
    mode = ReportMode(row.mode)
    attachment = None
    if mode == ReportMode.VIDEO and row.video_url:
        attachment = Attachment(kind=AttachmentKind.VIDEO, url=row.video_url)
    elif mode == ReportMode.AUDIO and row.audio_url:
        attachment = Attachment(kind=AttachmentKind.AUDIO, url=row.audio_url)
    return ReportOut(
        id=row.id,
        name=row.name or "",
        phone=row.phone or "",
        complaint_text=row.complaint_text or "",
        location=location,
        attachment=attachment,
        audio_url=row.audio_url,
        video_url=row.video_url,
        mode=mode,
        status=ReportStatus(row.status),
        acknowledged_by=row.acknowledged_by,
        acknowledged_at=row.acknowledged_at,
        submitted_at=row.submitted_at,
    )


class ReportStore:
    """create / list_visible / acknowledge over one relational table.

    Each call is a single statement in its own transaction.
    """

    def __init__(
        self,
        db: Database,
        visibility_delay_seconds: int = 0,
        clock: Callable[[], datetime] = datetime.utcnow,
    ) -> None:
        self._db = db
        self.visibility_delay = timedelta(seconds=max(0, visibility_delay_seconds))
        self._clock = clock

    def create(self, record: ReportCreate) -> int:
        loc = record.location
        row = ReportRow(
            name=record.name,
            phone=record.phone,
            complaint_text=record.complaint_text,
            latitude=loc.latitude if loc else None,
            longitude=loc.longitude if loc else None,
            accuracy=loc.accuracy if loc else None,
            audio_url=record.audio_url,
            video_url=record.video_url,
            mode=record.mode.value,
            status=ReportStatus.PENDING.value,
            submitted_at=self._clock(),
        )
        try:
            with self._db.session() as session:
                session.add(row)
                session.flush()
                report_id = row.id
        except SQLAlchemyError as e:
            logger.exception("Report insert failed: %s", e)
            raise UpstreamFailure("Could not save report") from e
        logger.info("Report %d stored (mode=%s)", report_id, record.mode.value)
        return report_id

    def _visibility_clause(self, now: Optional[datetime] = None):
        """Acknowledged, or pending long enough to clear the visibility delay. None when the delay is off."""
        if not self.visibility_delay:
            return None
        cutoff = (now or self._clock()) - self.visibility_delay
        return or_(
            ReportRow.status == ReportStatus.ACKNOWLEDGED.value,
            ReportRow.submitted_at <= cutoff,
        )

    def get(self, report_id: int, now: Optional[datetime] = None) -> ReportOut:
        """One report under the same visibility rule as the listing."""
        stmt = select(ReportRow).where(ReportRow.id == report_id)
        visible = self._visibility_clause(now)
        if visible is not None:
            stmt = stmt.where(visible)
        try:
            with self._db.session() as session:
                row = session.scalars(stmt).first()
                if row is None:
                    raise NotFound(f"Report {report_id} not found")
                return row_to_report(row)
        except SQLAlchemyError as e:
            logger.exception("Report lookup failed: %s", e)
            raise UpstreamFailure("Could not load report") from e

    def list_visible(self, now: Optional[datetime] = None) -> list[ReportOut]:
        """All reports, newest first, minus pending ones still inside the visibility delay."""
        stmt = select(ReportRow).order_by(ReportRow.submitted_at.desc(), ReportRow.id.desc())
        visible = self._visibility_clause(now)
        if visible is not None:
            stmt = stmt.where(visible)
        try:
            with self._db.session() as session:
                return [row_to_report(r) for r in session.scalars(stmt)]
        except SQLAlchemyError as e:
            logger.exception("Report listing failed: %s", e)
            raise UpstreamFailure("Could not list reports") from e

    def acknowledge(self, report_id: int, operator_id: int, overwrite: bool = False) -> ReportOut:
        """Conditional update to acknowledged.

        Only rows whose status has a transition to acknowledged are touched.
        Without ``overwrite`` that excludes already acknowledged rows, so the
        first operator keeps authorship; repeat calls still succeed.
        """
        stmt = (
            update(ReportRow)
            .where(ReportRow.id == report_id)
            .values(
                status=ReportStatus.ACKNOWLEDGED.value,
                acknowledged_by=operator_id,
                acknowledged_at=self._clock(),
            )
        )
        sources = source_statuses(ReportStatus.ACKNOWLEDGED, include_current=overwrite)
        stmt = stmt.where(ReportRow.status.in_([s.value for s in sources]))
        try:
            with self._db.session() as session:
                session.execute(stmt)
                row = session.get(ReportRow, report_id, populate_existing=True)
                if row is None:
                    raise NotFound(f"Report {report_id} not found")
                return row_to_report(row)
        except SQLAlchemyError as e:
            logger.exception("Report acknowledge failed: %s", e)
            raise UpstreamFailure("Could not acknowledge report") from e
