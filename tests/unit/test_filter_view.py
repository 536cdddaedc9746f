from pincode_points.common.models import PointGroup
from pincode_points.pipeline.filter_view import filter_groups


def _groups():
    return [
        PointGroup(pincode="560001", coordinate=(1.0, 2.0), role="start", count=1),
        PointGroup(pincode="560002", coordinate=(3.0, 4.0), role="end", count=2),
        PointGroup(pincode="560001", coordinate=(5.0, 6.0), role="end", count=3),
    ]


def test_empty_selection_returns_everything():
    groups = _groups()
    assert filter_groups(groups, "") == groups
    assert filter_groups(groups, "   ") == groups
    assert filter_groups(groups, None) == groups


def test_selection_matches_trimmed_pincode():
    groups = _groups()
    selected = filter_groups(groups, " 560001 ")
    assert [group.coordinate for group in selected] == [(1.0, 2.0), (5.0, 6.0)]
    assert all(group in groups for group in selected)


def test_unknown_selection_returns_nothing():
    assert filter_groups(_groups(), "999999") == []
