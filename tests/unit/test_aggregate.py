import pytest

from pincode_points.common.models import RawRecord
from pincode_points.pipeline.aggregate import aggregate_points, resolve_pincode


def _record(start_gps="(12.97,77.59)", end_gps="(12.98,77.60)", start_code="560001", end_code="560002", **extra):
    return RawRecord(
        start_gps=start_gps,
        end_gps=end_gps,
        start_area_code=start_code,
        end_area_code=end_code,
        **extra,
    )


def test_single_record_produces_start_and_end_groups():
    result = aggregate_points([_record(action="pickup")])

    assert len(result.groups) == 2
    start, end = result.groups
    assert (start.role, start.coordinate, start.count) == ("start", (12.97, 77.59), 1)
    assert (end.role, end.coordinate, end.count) == ("end", (12.98, 77.6), 1)
    assert start.samples[0].action == "pickup"
    assert start.samples[0].start_gps == "(12.97,77.59)"


def test_end_endpoint_uses_start_preferred_pincode():
    result = aggregate_points([_record()])
    assert {group.pincode for group in result.groups} == {"560001"}
    assert result.pincodes == ["560001"]


def test_resolve_pincode_falls_back_to_end_code_then_unknown():
    assert resolve_pincode(_record(start_code=None, end_code=" 560002 ")) == "560002"
    assert resolve_pincode(_record(start_code="null", end_code="")) == "Unknown"
    assert resolve_pincode(_record(start_code=560001.0)) == "560001"


def test_same_point_and_role_accumulates_count_and_samples():
    records = [
        _record(end_gps="(1,1)", transaction_id="t1"),
        _record(end_gps="(2,2)", transaction_id="t2"),
        _record(end_gps="(3,3)", transaction_id="t3"),
    ]
    result = aggregate_points(records)

    start_groups = [group for group in result.groups if group.role == "start"]
    assert len(start_groups) == 1
    assert start_groups[0].count == 3
    assert [sample.transaction_id for sample in start_groups[0].samples] == ["t1", "t2", "t3"]


def test_equivalent_coordinate_text_shares_a_group():
    result = aggregate_points([_record(start_gps="(12.970,77.590)"), _record(start_gps="12.97, 77.59")])
    start_groups = [group for group in result.groups if group.role == "start"]
    assert len(start_groups) == 1
    assert start_groups[0].count == 2


def test_start_and_end_at_same_point_stay_separate():
    result = aggregate_points([_record(start_gps="(5,5)", end_gps="(5,5)")])
    assert sorted(group.role for group in result.groups) == ["end", "start"]


def test_malformed_endpoint_is_skipped_without_dropping_the_other():
    result = aggregate_points([_record(end_gps="(bad)")])

    assert [group.role for group in result.groups] == ["start"]
    assert result.skipped_endpoints == 1


def test_absent_endpoint_is_not_counted_as_skipped():
    result = aggregate_points([_record(end_gps="")])
    assert [group.role for group in result.groups] == ["start"]
    assert result.skipped_endpoints == 0


def test_count_conservation():
    records = [
        _record(),
        _record(start_gps="(1,2)", end_gps="nope"),
        _record(start_gps="(1,2)", end_gps="(3,4)", start_code="110001"),
        _record(start_gps=None, end_gps="(3,4)"),
    ]
    result = aggregate_points(records)

    parseable_endpoints = 2 + 1 + 2 + 1
    assert sum(group.count for group in result.groups) == parseable_endpoints
    assert result.contributions == parseable_endpoints


def test_sample_cap_bounds_storage_but_not_count():
    records = [_record(end_gps=f"({i},{i})", message_id=f"m{i}") for i in range(10)]
    result = aggregate_points(records, sample_cap=4)

    start_group = next(group for group in result.groups if group.role == "start")
    assert start_group.count == 10
    assert [sample.message_id for sample in start_group.samples] == ["m0", "m1", "m2", "m3"]


def test_unbounded_samples_by_default():
    records = [_record(end_gps=f"({i},{i})") for i in range(7)]
    start_group = next(group for group in aggregate_points(records).groups if group.role == "start")
    assert len(start_group.samples) == 7


def test_negative_sample_cap_is_rejected():
    with pytest.raises(ValueError):
        aggregate_points([], sample_cap=-1)


def test_pincodes_are_sorted_naturally():
    records = [
        _record(start_code="560010"),
        _record(start_code="ZONE-B"),
        _record(start_code="90001"),
        _record(start_code="560002"),
        _record(start_code="ZONE-A"),
    ]
    assert aggregate_points(records).pincodes == ["90001", "560002", "560010", "ZONE-A", "ZONE-B"]


def test_negative_zero_shares_a_group_with_zero():
    result = aggregate_points([_record(start_gps="(-0,77.59)"), _record(start_gps="(0,77.59)")])
    start_groups = [group for group in result.groups if group.role == "start"]
    assert len(start_groups) == 1
    assert start_groups[0].count == 2


def test_pincodes_with_underscores_keep_their_own_groups():
    records = [
        _record(start_gps="(1,2)", end_gps="", start_code="A_1.0,2.0"),
        _record(start_gps="(1,2)", end_gps="", start_code="A"),
    ]
    result = aggregate_points(records)
    assert sorted(group.pincode for group in result.groups) == ["A", "A_1.0,2.0"]
    assert all(group.count == 1 for group in result.groups)
