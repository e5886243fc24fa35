from datetime import timedelta

import pytest

from slotkeeper.domain.time_window import TimeWindow, overlaps

from tests.conftest import tomorrow

TEN_TO_ELEVEN = TimeWindow(tomorrow(10), tomorrow(11))


@pytest.mark.parametrize(
    "other, expected",
    [
        pytest.param(TimeWindow(tomorrow(7), tomorrow(8)), False, id="disjoint-before"),
        pytest.param(TimeWindow(tomorrow(13), tomorrow(14)), False, id="disjoint-after"),
        pytest.param(TimeWindow(tomorrow(9), tomorrow(10)), False, id="adjacent-before"),
        pytest.param(TimeWindow(tomorrow(11), tomorrow(12)), False, id="adjacent-after"),
        pytest.param(TimeWindow(tomorrow(9, 30), tomorrow(10, 30)), True, id="partial-overlap-left"),
        pytest.param(TimeWindow(tomorrow(10, 30), tomorrow(11, 30)), True, id="partial-overlap-right"),
        pytest.param(TimeWindow(tomorrow(10, 15), tomorrow(10, 45)), True, id="contained"),
        pytest.param(TimeWindow(tomorrow(9), tomorrow(12)), True, id="containing"),
        pytest.param(TimeWindow(tomorrow(10), tomorrow(11)), True, id="equal"),
    ],
)
def test_overlap_relations(other, expected):
    assert overlaps(TEN_TO_ELEVEN, other) is expected
    assert overlaps(other, TEN_TO_ELEVEN) is expected


def test_adjacent_windows_do_not_overlap():
    assert not overlaps(
        TimeWindow(tomorrow(10), tomorrow(11)),
        TimeWindow(tomorrow(11), tomorrow(12)),
    )


def test_half_hour_shift_overlaps():
    assert overlaps(
        TimeWindow(tomorrow(10), tomorrow(11)),
        TimeWindow(tomorrow(10, 30), tomorrow(11, 30)),
    )


def test_method_form_matches_function():
    other = TimeWindow(tomorrow(10, 59), tomorrow(12))
    assert TEN_TO_ELEVEN.overlaps(other) == overlaps(TEN_TO_ELEVEN, other)


def test_duration():
    assert TEN_TO_ELEVEN.duration == timedelta(hours=1)


def test_has_started_from_the_start_instant_on():
    assert not TEN_TO_ELEVEN.has_started(tomorrow(9, 59))
    assert TEN_TO_ELEVEN.has_started(tomorrow(10))
    assert TEN_TO_ELEVEN.has_started(tomorrow(12))
