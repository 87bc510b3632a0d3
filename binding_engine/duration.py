"""
Duration decomposition over a selectable set of time units.

A duration control mirrors one ``timedelta`` as up to five independently
editable integer components. Which components exist is decided by a
``DurationUnit`` mask.

Invariants
----------
- Decomposing walks the selected units from largest to smallest, so each
  component below the largest selected one stays under the carry bound of the
  next larger selected unit.
- Re-composing the components reproduces the decomposed duration exactly, minus
  anything finer than the smallest selected unit (truncated, not rounded).
"""

from __future__ import annotations

from datetime import timedelta
from enum import Flag
from typing import Final, Mapping


class DurationUnit(Flag):
    """Bit mask of the time units shown by a duration control."""

    MICROSECONDS = 1
    MILLISECONDS = 2
    SECONDS = 4
    MINUTES = 8
    HOURS = 16


# Smallest to largest.
UNITS: Final[tuple[DurationUnit, ...]] = (
    DurationUnit.MICROSECONDS,
    DurationUnit.MILLISECONDS,
    DurationUnit.SECONDS,
    DurationUnit.MINUTES,
    DurationUnit.HOURS,
)

UNIT_MICROSECONDS: Final[Mapping[DurationUnit, int]] = {
    DurationUnit.MICROSECONDS: 1,
    DurationUnit.MILLISECONDS: 1_000,
    DurationUnit.SECONDS: 1_000_000,
    DurationUnit.MINUTES: 60_000_000,
    DurationUnit.HOURS: 3_600_000_000,
}

UNIT_LABELS: Final[Mapping[DurationUnit, str]] = {
    DurationUnit.MICROSECONDS: "Microseconds",
    DurationUnit.MILLISECONDS: "Milliseconds",
    DurationUnit.SECONDS: "Seconds",
    DurationUnit.MINUTES: "Minutes",
    DurationUnit.HOURS: "Hours",
}

DEFAULT_DURATION_UNITS: Final[DurationUnit] = (
    DurationUnit.HOURS | DurationUnit.MINUTES | DurationUnit.SECONDS
)

# Editable maximum of the largest selected unit (nothing above it to carry into).
_STANDALONE_MAX: Final[Mapping[DurationUnit, int | None]] = {
    DurationUnit.MICROSECONDS: 99999,
    DurationUnit.MILLISECONDS: 999,
    DurationUnit.SECONDS: 999,
    DurationUnit.MINUTES: 999,
    DurationUnit.HOURS: None,
}

_ONE_MICROSECOND: Final[timedelta] = timedelta(microseconds=1)


def selected_units(mask: DurationUnit) -> tuple[DurationUnit, ...]:
    """Return the units present in ``mask``, smallest first."""
    return tuple(u for u in UNITS if u in mask)


def to_microseconds(duration: timedelta) -> int:
    """Return ``duration`` as an integer count of microseconds."""
    return duration // _ONE_MICROSECOND


def decompose(duration: timedelta, mask: DurationUnit) -> dict[DurationUnit, int]:
    """
    Split ``duration`` into per-unit components.

    Parameters
    ----------
    duration:
        Non-negative duration to split.
    mask:
        Units to split into.

    Returns
    -------
    dict[DurationUnit, int]
        One entry per unit in ``UNITS``; unselected units are 0.
    """
    components = {u: 0 for u in UNITS}
    remaining = to_microseconds(duration)
    for unit in reversed(selected_units(mask)):
        size = UNIT_MICROSECONDS[unit]
        components[unit] = remaining // size
        remaining -= components[unit] * size
    return components


def compose(components: Mapping[DurationUnit, int], mask: DurationUnit) -> timedelta:
    """Sum the selected components back into a ``timedelta``."""
    micro = sum(components.get(u, 0) * UNIT_MICROSECONDS[u] for u in selected_units(mask))
    return timedelta(microseconds=micro)


def component_max(unit: DurationUnit, mask: DurationUnit) -> int | None:
    """
    Return the editable maximum of ``unit``'s component.

    When a larger unit is selected, the bound is one less than the number of
    ``unit`` steps in that larger unit (59 seconds under minutes, 999
    microseconds under milliseconds). The largest selected unit is bounded for
    display only; hours are unbounded.

    Parameters
    ----------
    unit:
        Unit whose bound is requested.
    mask:
        Units selected on the control.

    Returns
    -------
    int | None
        Inclusive maximum, or None when unbounded.
    """
    size = UNIT_MICROSECONDS[unit]
    for larger in UNITS[UNITS.index(unit) + 1 :]:
        if larger in mask:
            return UNIT_MICROSECONDS[larger] // size - 1
    return _STANDALONE_MAX[unit]
