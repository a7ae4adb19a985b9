"""Report models for distress submissions."""
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ReportMode(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"
    FORM = "form"


class ReportStatus(str, Enum):
    PENDING = "pending"
    ACKNOWLEDGED = "acknowledged"


class AttachmentKind(str, Enum):
    AUDIO = "audio"
    VIDEO = "video"


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Location(WireModel):
    latitude: float
    longitude: float
    accuracy: Optional[float] = None


class Attachment(WireModel):
    kind: AttachmentKind
    url: str


class NormalizedFields(WireModel):
    name: str = ""
    phone: str = ""
    complaint_text: str = ""
    location: Optional[Location] = None


class ReportCreate(WireModel):
    """Canonical record handed to the store."""

    name: str = ""
    phone: str = ""
    complaint_text: str = ""
    location: Optional[Location] = None
    audio_url: Optional[str] = None
    video_url: Optional[str] = None
    mode: ReportMode = ReportMode.FORM


class ReportOut(WireModel):
    id: int
    name: str = ""
    phone: str = ""
    complaint_text: str = ""
    location: Optional[Location] = None
    attachment: Optional[Attachment] = None
    audio_url: Optional[str] = None
    video_url: Optional[str] = None
    mode: ReportMode = ReportMode.FORM
    status: ReportStatus = ReportStatus.PENDING
    acknowledged_by: Optional[int] = None
    acknowledged_at: Optional[datetime] = None
    submitted_at: datetime = Field(default_factory=datetime.utcnow)


class AcknowledgeRequest(WireModel):
    # Validated by the status machine so every failure shares one response shape.
    report_id: Any = None
    operator_id: Any = None


class SubmitResponse(WireModel):
    success: bool = True
    report_id: int
    message: str = "Report submitted"


class ErrorResponse(WireModel):
    success: bool = False
    error: str
