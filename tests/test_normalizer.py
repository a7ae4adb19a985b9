"""Field normalizer tests."""
import pytest

from sos_relay.pipelines.normalizer import PHONE_ALIASES, normalize_fields, parse_coordinate


class TestNormalizeFields:

    def test_empty_payload_gives_all_empty(self):
        result = normalize_fields({})
        assert result.name == ""
        assert result.phone == ""
        assert result.complaint_text == ""
        assert result.location is None

    def test_none_payload_is_accepted(self):
        assert normalize_fields(None).name == ""

    def test_name_is_trimmed(self):
        assert normalize_fields({"name": "  Asha  "}).name == "Asha"

    def test_complaint_prefers_primary_field(self):
        result = normalize_fields({"complaint": "fire on 3rd floor", "text": "ignored"})
        assert result.complaint_text == "fire on 3rd floor"

    def test_complaint_falls_back_to_text(self):
        assert normalize_fields({"text": "flooding"}).complaint_text == "flooding"
        assert normalize_fields({"complaint": "   ", "text": "flooding"}).complaint_text == "flooding"

    @pytest.mark.parametrize("alias", PHONE_ALIASES)
    def test_every_phone_alias_is_recognised(self, alias):
        assert normalize_fields({alias: " 555-0100 "}).phone == "555-0100"

    def test_phone_alias_order_decides(self):
        result = normalize_fields({"mobile": "222", "phone": "111"})
        assert result.phone == "111"

    def test_empty_alias_is_skipped(self):
        result = normalize_fields({"phone": "", "phoneNumber": "333"})
        assert result.phone == "333"

    def test_unknown_phone_alias_is_not_matched(self):
        assert normalize_fields({"cellphone": "999", "whatsapp": "888"}).phone == ""

    def test_non_string_values_do_not_raise(self):
        result = normalize_fields({"name": 42, "phone": 5550100, "latitude": object()})
        assert result.name == "42"
        assert result.phone == "5550100"
        assert result.location is None


class TestLocation:

    def test_full_triple(self):
        loc = normalize_fields({"latitude": "12.9", "longitude": "77.5", "accuracy": "15"}).location
        assert (loc.latitude, loc.longitude, loc.accuracy) == (12.9, 77.5, 15.0)

    def test_accuracy_is_optional(self):
        loc = normalize_fields({"latitude": "12.9", "longitude": "77.5"}).location
        assert loc.accuracy is None

    def test_unparsable_accuracy_degrades_to_none(self):
        loc = normalize_fields({"latitude": "12.9", "longitude": "77.5", "accuracy": "about 10m"}).location
        assert loc is not None
        assert loc.accuracy is None

    @pytest.mark.parametrize("fields", [
        {"latitude": "12.9"},
        {"longitude": "77.5"},
        {"latitude": "12.9", "longitude": ""},
        {"latitude": "north", "longitude": "77.5"},
        {"latitude": "12.9", "longitude": "NaN"},
        {"latitude": "inf", "longitude": "77.5"},
        {"latitude": None, "longitude": "77.5", "accuracy": "5"},
    ])
    def test_missing_or_bad_coordinate_drops_whole_location(self, fields):
        assert normalize_fields(fields).location is None

    def test_parse_coordinate_rejects_bool(self):
        assert parse_coordinate(True) is None
        assert parse_coordinate(" -33.86 ") == -33.86
