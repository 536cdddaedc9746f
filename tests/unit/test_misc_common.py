from pincode_points.common.pincode import is_missing_value, normalise_area_code, pincode_sort_key
from pincode_points.common.scaling import clamp, pick_band
from pincode_points.common.time_utils import generate_run_id


def test_is_missing_value_handles_placeholders():
    assert is_missing_value(None)
    assert is_missing_value("  undefined ")
    assert not is_missing_value(0)
    assert not is_missing_value("560001")


def test_normalise_area_code_single_text_form():
    assert normalise_area_code(" 560001 ") == "560001"
    assert normalise_area_code(560001) == "560001"
    assert normalise_area_code(560001.0) == "560001"
    assert normalise_area_code("null") is None


def test_pincode_sort_key_orders_numeric_before_text():
    codes = ["B1", "100", "20", "A9"]
    assert sorted(codes, key=pincode_sort_key) == ["20", "100", "A9", "B1"]


def test_clamp_within_bounds():
    assert clamp(-5, minimum=0, maximum=100) == 0
    assert clamp(50, minimum=0, maximum=100) == 50
    assert clamp(150, minimum=0, maximum=100) == 100


def test_pick_band_first_exceeded_threshold():
    bands = [{"above": 10, "color": "high"}, {"above": 1, "color": "mid"}]
    assert pick_band(11, bands, fallback="low") == "high"
    assert pick_band(10, bands, fallback="low") == "mid"
    assert pick_band(1, bands, fallback="low") == "low"


def test_generate_run_id_prefix():
    assert generate_run_id().startswith("points-")
