import pytest

from pincode_points.common.models import RawRecord
from pincode_points.pipeline.validate import is_usable_record, validate_records


def _row(**overrides):
    row = {
        "start_gps": "(12.97,77.59)",
        "end_gps": "(12.98,77.60)",
        "start_area_code": "560001",
        "end_area_code": "560002",
    }
    row.update(overrides)
    return row


def test_complete_record_is_usable():
    assert is_usable_record(RawRecord.from_mapping(_row()))


@pytest.mark.parametrize("placeholder", [None, "", "   ", "null", " NULL ", "undefined", "Undefined"])
def test_placeholder_area_code_is_rejected(placeholder):
    assert not is_usable_record(RawRecord.from_mapping(_row(start_area_code=placeholder)))


def test_string_null_rejected_same_as_none():
    as_string = RawRecord.from_mapping(_row(start_area_code="null"))
    as_none = RawRecord.from_mapping(_row(start_area_code=None))
    assert is_usable_record(as_string) is is_usable_record(as_none) is False


def test_absent_field_is_rejected():
    row = _row()
    del row["end_gps"]
    assert not is_usable_record(RawRecord.from_mapping(row))


def test_numeric_area_codes_are_usable():
    assert is_usable_record(RawRecord.from_mapping(_row(start_area_code=560001, end_area_code=0)))


def test_malformed_gps_text_passes_field_validation():
    # Parsing happens later; the validator only checks presence.
    assert is_usable_record(RawRecord.from_mapping(_row(start_gps="garbage")))


def test_validate_records_keeps_order_and_counts_rejections():
    rows = [
        _row(action="a"),
        _row(end_area_code=""),
        "not a mapping",
        _row(action="b"),
    ]
    result = validate_records(rows)
    assert [record.action for record in result.records] == ["a", "b"]
    assert result.rejected == 2


def test_from_mapping_ignores_unknown_keys():
    record = RawRecord.from_mapping(_row(extra_field="x", bap_id="bap-1"))
    assert record.bap_id == "bap-1"
    assert not hasattr(record, "extra_field")
