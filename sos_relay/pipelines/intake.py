"""Intake orchestrator: normalise, classify, store, then tell live viewers."""
import asyncio
import logging
from typing import Any, Iterable, Mapping, Optional

from sos_relay.fanout import ChannelRegistry
from sos_relay.models.report import AttachmentKind, ReportCreate, ReportOut
from sos_relay.pipelines import status
from sos_relay.pipelines.attachments import classify_attachments, derive_mode
from sos_relay.pipelines.normalizer import normalize_fields
from sos_relay.services.object_storage import IncomingFile, ObjectStorage
from sos_relay.services.report_store import ReportStore
from sos_relay.utils.audit import log_action

logger = logging.getLogger(__name__)


class IntakeService:
    """Composes normalizer, classifier, store and fanout.

    Storage failures propagate as UpstreamFailure and nothing is notified.
    Store calls run in worker threads so the event loop keeps serving
    other requests and broadcasts.
    Fanout runs only after the store call returned.
    """

    def __init__(
        self,
        store: ReportStore,
        storage: ObjectStorage,
        fanout: ChannelRegistry,
        reacknowledge_overwrites: bool = False,
    ) -> None:
        self.store = store
        self.storage = storage
        self.fanout = fanout
        self.reacknowledge_overwrites = reacknowledge_overwrites

    async def build_record(
        self,
        raw_fields: Optional[Mapping[str, Any]],
        raw_files: Optional[Iterable[IncomingFile]] = None,
    ) -> ReportCreate:
        fields = normalize_fields(raw_fields)
        selection = classify_attachments(raw_files or [])
        urls: dict[AttachmentKind, str] = {}
        # Only the winning file of each slot is uploaded.
        for kind, incoming in selection.items():
            urls[kind] = await self.storage.upload(incoming)
        return ReportCreate(
            name=fields.name,
            phone=fields.phone,
            complaint_text=fields.complaint_text,
            location=fields.location,
            audio_url=urls.get(AttachmentKind.AUDIO),
            video_url=urls.get(AttachmentKind.VIDEO),
            mode=derive_mode(
                has_video=AttachmentKind.VIDEO in urls,
                has_audio=AttachmentKind.AUDIO in urls,
            ),
        )

    async def submit(
        self,
        raw_fields: Optional[Mapping[str, Any]],
        raw_files: Optional[Iterable[IncomingFile]] = None,
    ) -> int:
        """Create a report and return its id."""
        record = await self.build_record(raw_fields, raw_files)
        report_id = await asyncio.to_thread(self.store.create, record)
        log_action("anonymous", "report_submitted", report_id, record.mode.value)
        await self.fanout.notify()
        return report_id

    async def acknowledge(self, report_id: Any, operator_id: Any) -> ReportOut:
        report = await asyncio.to_thread(
            status.acknowledge,
            self.store,
            report_id,
            operator_id,
            overwrite=self.reacknowledge_overwrites,
        )
        actor = f"operator:{status.parse_operator_id(operator_id)}"
        log_action(actor, "report_acknowledged", report.id, f"by={report.acknowledged_by}")
        await self.fanout.notify()
        return report

    async def list_reports(self) -> list[ReportOut]:
        return await asyncio.to_thread(self.store.list_visible)

    async def get_report(self, report_id: Any) -> ReportOut:
        return await asyncio.to_thread(self.store.get, status.parse_report_id(report_id))
