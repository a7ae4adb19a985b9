"""Field normalizer: pull name, phone, complaint and location out of a loose form payload."""
import math
from typing import Any, Mapping, Optional

from sos_relay.models.report import Location, NormalizedFields

# Ordered, closed set. Unknown spellings are never matched.
PHONE_ALIASES: tuple[str, ...] = (
    "phone",
    "phoneNumber",
    "phone_number",
    "phoneNo",
    "mobile",
    "mobileNumber",
    "mobile_number",
    "contact",
    "contactNumber",
    "contact_number",
    "tel",
    "telephone",
)

COMPLAINT_ALIASES: tuple[str, ...] = ("complaint", "text")


def _clean(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def first_present(raw: Mapping[str, Any], aliases: tuple[str, ...]) -> str:
    """Return the first non-empty trimmed value among ``aliases``, else ``""``."""
    for key in aliases:
        value = _clean(raw.get(key))
        if value:
            return value
    return ""


def parse_coordinate(value: Any) -> Optional[float]:
    """Parse a finite float. Anything unparsable degrades to None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_location(raw: Mapping[str, Any]) -> Optional[Location]:
    lat = parse_coordinate(raw.get("latitude"))
    lng = parse_coordinate(raw.get("longitude"))
    if lat is None or lng is None:
        return None
    return Location(latitude=lat, longitude=lng, accuracy=parse_coordinate(raw.get("accuracy")))


def normalize_fields(raw: Optional[Mapping[str, Any]]) -> NormalizedFields:
    """Build the submitter fields of a report. Never raises; worst case is all-empty."""
    raw = raw or {}
    return NormalizedFields(
        name=_clean(raw.get("name")),
        phone=first_present(raw, PHONE_ALIASES),
        complaint_text=first_present(raw, COMPLAINT_ALIASES),
        location=parse_location(raw),
    )
