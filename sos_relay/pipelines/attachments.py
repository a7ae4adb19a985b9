"""Attachment classifier: assign uploaded files to the audio and video slots by declared MIME type."""
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from sos_relay.models.report import AttachmentKind, ReportMode

MIME_PREFIXES: dict[AttachmentKind, str] = {
    AttachmentKind.AUDIO: "audio/",
    AttachmentKind.VIDEO: "video/",
}


@dataclass
class AttachmentSelection:
    """At most one file per slot. Items are whatever descriptors were classified."""

    audio: Optional[Any] = None
    video: Optional[Any] = None

    def get(self, kind: AttachmentKind) -> Optional[Any]:
        return self.video if kind == AttachmentKind.VIDEO else self.audio

    def set(self, kind: AttachmentKind, item: Any) -> None:
        if kind == AttachmentKind.VIDEO:
            self.video = item
        else:
            self.audio = item

    def items(self) -> list[tuple[AttachmentKind, Any]]:
        return [(k, self.get(k)) for k in (AttachmentKind.AUDIO, AttachmentKind.VIDEO) if self.get(k) is not None]


def classify(content_type: Optional[str]) -> Optional[AttachmentKind]:
    """audio/* -> AUDIO, video/* -> VIDEO, anything else -> None."""
    declared = (content_type or "").strip().lower()
    for kind, prefix in MIME_PREFIXES.items():
        if declared.startswith(prefix):
            return kind
    return None


def choose(current: Optional[Any], candidate: Any) -> Any:
    """Same-slot tie-break: the later file replaces the earlier one."""
    return candidate


def classify_attachments(files: Iterable[Any]) -> AttachmentSelection:
    """Classify descriptors exposing ``content_type`` in submission order."""
    selection = AttachmentSelection()
    for item in files or ():
        kind = classify(getattr(item, "content_type", None))
        if kind is None:
            continue
        selection.set(kind, choose(selection.get(kind), item))
    return selection


def derive_mode(has_video: bool, has_audio: bool) -> ReportMode:
    if has_video:
        return ReportMode.VIDEO
    if has_audio:
        return ReportMode.AUDIO
    return ReportMode.FORM
