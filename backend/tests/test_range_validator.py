from types import SimpleNamespace

from operators.range_validator import validate_timeline_range


def _parent(from_year, to_year):
    return SimpleNamespace(from_year=from_year, to_year=to_year)


def test_root_only_requires_ordered_bounds():
    assert validate_timeline_range(None, -13700000000, 9999)
    assert validate_timeline_range(None, 5, 5)
    assert not validate_timeline_range(None, 10, 5)


def test_child_inside_parent_is_valid():
    assert validate_timeline_range(_parent(0, 100), 10, 90)


def test_child_may_share_parent_bounds():
    assert validate_timeline_range(_parent(0, 100), 0, 100)


def test_child_past_parent_end_is_rejected():
    assert not validate_timeline_range(_parent(0, 100), 50, 101)


def test_child_before_parent_start_is_rejected():
    assert not validate_timeline_range(_parent(0, 100), -1, 100)


def test_inverted_child_inside_parent_is_rejected():
    assert not validate_timeline_range(_parent(0, 100), 60, 40)
