from __future__ import annotations

from datetime import timedelta

import pytest

from binding_engine.controls import DurationControl
from binding_engine.duration import (
    DEFAULT_DURATION_UNITS,
    DurationUnit,
    component_max,
    compose,
    decompose,
)
from binding_engine.errors import ControlConfigurationError
from binding_engine.session import EditingSession
from binding_engine.state import FieldRef

H, M, S, MS, US = (
    DurationUnit.HOURS,
    DurationUnit.MINUTES,
    DurationUnit.SECONDS,
    DurationUnit.MILLISECONDS,
    DurationUnit.MICROSECONDS,
)


def test_decompose_default_units() -> None:
    parts = decompose(timedelta(hours=1, minutes=2, seconds=3, microseconds=999), DEFAULT_DURATION_UNITS)
    assert (parts[H], parts[M], parts[S]) == (1, 2, 3)
    assert parts[MS] == 0 and parts[US] == 0


def test_largest_selected_unit_absorbs_overflow() -> None:
    parts = decompose(timedelta(hours=2, minutes=5), M | S)
    assert parts[M] == 125
    assert parts[H] == 0


@pytest.mark.parametrize(
    ("duration", "mask"),
    [
        (timedelta(hours=3, minutes=4, seconds=5), H | M | S),
        (timedelta(seconds=5, milliseconds=250), S | MS),
        (timedelta(milliseconds=7, microseconds=3), MS | US),
        (timedelta(minutes=90), M),
        (timedelta(0), H | M | S | MS | US),
    ],
)
def test_round_trip_is_exact_at_selected_precision(duration: timedelta, mask: DurationUnit) -> None:
    assert compose(decompose(duration, mask), mask) == duration


def test_round_trip_truncates_finer_precision() -> None:
    d = timedelta(minutes=1, seconds=59, milliseconds=999)
    assert compose(decompose(d, M), M) == timedelta(minutes=1)
    assert compose(decompose(d, M | S), M | S) == timedelta(minutes=1, seconds=59)


def test_component_max_under_larger_unit() -> None:
    assert component_max(S, M | S) == 59
    assert component_max(M, H | M) == 59
    assert component_max(US, MS | US) == 999
    assert component_max(MS, S | MS) == 999
    # Carry bound comes from the next larger selected unit.
    assert component_max(S, H | S) == 3599


def test_component_max_of_largest_unit() -> None:
    assert component_max(H, H | M) is None
    assert component_max(M, M | S) == 999
    assert component_max(US, US) == 99999


def test_control_set_component_recomposes(session: EditingSession) -> None:
    control = session.get_control("fillTime")
    assert isinstance(control, DurationControl)
    assert control.components[M] == 2 and control.components[S] == 30

    control.set_component(H, 1)

    assert session.draft.field("fillTime").value == timedelta(hours=1, minutes=2, seconds=30)
    assert control.components[H] == 1
    assert session.modified


def test_control_visible_units_are_largest_first(session: EditingSession) -> None:
    control = session.get_control("fillTime")
    assert isinstance(control, DurationControl)
    assert control.visible_units() == [H, M, S]


def test_control_rejects_unselected_component(session: EditingSession) -> None:
    control = session.get_control("fillTime")
    assert isinstance(control, DurationControl)
    with pytest.raises(ControlConfigurationError):
        control.set_component(MS, 5)


def test_control_rejects_empty_mask(session: EditingSession) -> None:
    ref = FieldRef(session.handle, session.draft.index_of("fillTime"))
    with pytest.raises(ControlConfigurationError):
        DurationControl(session.records, ref, units=DurationUnit(0))
    with pytest.raises(ControlConfigurationError):
        DurationControl(session.records, ref, step=0)
