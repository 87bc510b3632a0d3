"""
Controls: stateful adapters between edit events and entity fields.

Each control is bound to exactly one field of one record, addressed by a
``FieldRef`` resolved through the session's ``RecordRegistry``. A control keeps
a mirrored display state (the text shown in an input, the components shown by
number pickers, ...) and an ordered list of listeners.

Edit protocol
-------------
- ``set(value)`` takes a stored-domain value: it mirrors ``to_display(value)``
  into the display state, then calls ``set_value(to_display(value))``.
- ``set_value(value)`` takes a display-domain value: it writes
  ``from_display(value)`` into the field and calls every listener, in
  registration order, before returning.

No validation happens at this layer; filtering input is the renderer's job.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Mapping, Sequence

from .duration import (
    DEFAULT_DURATION_UNITS,
    UNIT_LABELS,
    DurationUnit,
    compose,
    component_max,
    decompose,
    selected_units,
)
from .errors import ControlConfigurationError, ControlIndexError
from .fields import LIST_KINDS, EntityRecord, FieldDescriptor, FieldKind, split_words
from .state import DirtyTracker, FieldRef, RecordRegistry

Listener = Callable[[], None]
Transform = Callable[[Any], Any]


def _identity(value: Any) -> Any:
    return value


def format_display_text(value: Any, *, as_int: bool = False) -> str:
    """
    Render a stored value as input text.

    Numeric zero renders as an empty string so the input shows its hint.
    Whole floats drop their fractional part.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (int, float)):
        if value == 0:
            return ""
        if isinstance(value, float) and (as_int or value.is_integer()):
            return str(int(value))
    return str(value)


class Control:
    """
    Base control for one entity field.

    Parameters
    ----------
    records:
        Registry owning the bound record.
    ref:
        Record handle and field index.
    tracker:
        Dirty tracker to mark on every listener fan-out.
    hint:
        Input hint; defaults to the field key split into words.
    label:
        Optional text displayed after the input.
    obscure:
        Mask the input text (passwords).
    as_int:
        Display a REAL field as an integer.
    checkbox:
        Render a toggle as a checkbox rather than a switch.
    toggle:
        Treat the field as an on/off value.
    read_only:
        Disallow edits from the renderer.
    complete_values:
        Finite vocabulary offered as completions for text input.
    to_display, from_display:
        Transform pair between stored and displayed values.

    Raises
    ------
    ControlIndexError
        If ``ref.index`` is outside the bound record.
    """

    def __init__(
        self,
        records: RecordRegistry,
        ref: FieldRef,
        *,
        tracker: DirtyTracker | None = None,
        hint: str | None = None,
        label: str | None = None,
        obscure: bool = False,
        as_int: bool = False,
        checkbox: bool = False,
        toggle: bool = False,
        read_only: bool = False,
        complete_values: Sequence[str] | None = None,
        to_display: Transform | None = None,
        from_display: Transform | None = None,
    ) -> None:
        record = records.resolve(ref.handle)
        if not 0 <= ref.index < len(record):
            raise ControlIndexError(
                f"Field index {ref.index} is out of range for {record.name!r} "
                f"({len(record)} fields)."
            )

        self._records = records
        self._ref = ref
        self._listeners: list[Listener] = []

        self.label = label
        self.obscure = obscure
        self.obscured = True
        self.as_int = as_int
        self.checkbox = checkbox
        self.toggle = toggle
        self.read_only = read_only
        self.complete_values = list(complete_values) if complete_values is not None else None
        self.to_display: Transform = to_display or _identity
        self.from_display: Transform = from_display or _identity
        self.display: Any = None

        self.mirror(self.member.value)
        self.hint = split_words(self.member.key) if hint is None else hint
        if tracker is not None:
            self.add_listener(tracker.mark)

    @property
    def ref(self) -> FieldRef:
        return self._ref

    @property
    def index(self) -> int:
        return self._ref.index

    @property
    def entity(self) -> EntityRecord:
        """The bound record, resolved through the registry."""
        return self._records.resolve(self._ref.handle)

    @property
    def member(self) -> FieldDescriptor:
        """The bound field descriptor."""
        return self.entity[self._ref.index]

    @property
    def key(self) -> str:
        return self.member.key

    @property
    def masked(self) -> bool:
        """True when the input text should currently be hidden."""
        return self.obscure and self.obscured

    def set(self, value: Any) -> None:
        """Mirror ``value`` into the display state and write it to the field."""
        self.mirror(value)
        self.set_value(self.to_display(value))

    def mirror(self, value: Any) -> None:
        """Update the display state from a stored-domain value without notifying."""
        shown = self.to_display(value)
        if self.toggle:
            self.display = bool(shown)
        else:
            self.display = format_display_text(shown, as_int=self.as_int)

    def set_value(self, value: Any) -> None:
        """Write a display-domain value into the field and notify listeners."""
        self.member.value = self.from_display(value)
        self.call_listeners()

    def call_listeners(self) -> None:
        for listener in self._listeners:
            listener()

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def parse_text(self, text: str) -> Any:
        """
        Convert input text to a display-domain value for ``set_value``.

        Unparsable numbers become 0 so a cleared numeric input stores zero.
        """
        kind = self.member.kind
        if kind is FieldKind.INTEGER:
            try:
                return int(text)
            except ValueError:
                return 0
        if kind is FieldKind.REAL:
            try:
                return float(text)
            except ValueError:
                return 0.0
        return text

    def toggle_obscured(self) -> bool:
        """Flip whether obscured text is hidden; return the new state."""
        self.obscured = not self.obscured
        return self.obscured

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r}, index={self.index})"


class IntControl(Control):
    """
    Bounded integer control, rendered as a number picker.

    Raises
    ------
    ControlConfigurationError
        If ``step`` is not positive or the bounds are inverted.
    """

    def __init__(
        self,
        records: RecordRegistry,
        ref: FieldRef,
        *,
        min_value: int,
        max_value: int,
        step: int = 1,
        label: str | None = "",
        **options: Any,
    ) -> None:
        if step <= 0:
            raise ControlConfigurationError(f"step must be > 0 (got {step}).")
        if min_value > max_value:
            raise ControlConfigurationError(
                f"min_value {min_value} is greater than max_value {max_value}."
            )
        self.min_value = min_value
        self.max_value = max_value
        self.step = step
        super().__init__(records, ref, label=label, **options)

    def choices(self) -> range:
        return range(self.min_value, self.max_value + 1, self.step)


class EnumControl(Control):
    """Drop-down selection of one enum member."""

    def __init__(
        self,
        records: RecordRegistry,
        ref: FieldRef,
        *,
        labels: Sequence[str] | None = None,
        **options: Any,
    ) -> None:
        self.labels = list(labels) if labels is not None else None
        super().__init__(records, ref, **options)
        enum_type = self.member.value_type
        if not (isinstance(enum_type, type) and issubclass(enum_type, Enum)):
            raise ControlConfigurationError(f"Field {self.key!r} does not hold an enum value.")
        self._enum_type: type[Enum] = enum_type

    def mirror(self, value: Any) -> None:
        self.display = self.to_display(value)

    def members(self) -> list[Enum]:
        return list(self._enum_type)

    def choice_labels(self) -> list[str]:
        """Display label for each enum member, in declaration order."""
        out: list[str] = []
        for position, member in enumerate(self.members()):
            if self.labels is None:
                text = member.name
            elif position < len(self.labels):
                text = self.labels[position]
            else:
                text = "Missing Label"
            out.append(split_words(text))
        return out

    def current_index(self) -> int:
        return self.members().index(self.member.value)

    def select(self, position: int) -> None:
        """Select the enum member at ``position``."""
        chosen = self.members()[position]
        self.display = chosen
        self.set_value(chosen)


class DateTimeMode(str, Enum):
    """Which pickers a date/time control offers."""

    DATE = "date"
    TIME = "time"
    BOTH = "both"


_TIME_RE = r"^(\d\d):(\d\d)(:(\d\d))?$"


def format_time(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}:00"


def parse_datetime_text(text: str, first_year: int = 1) -> datetime | None:
    """
    Parse the text shown by a date/time control.

    Accepts ISO-8601 dates and date-times, or a bare ``HH:MM[:SS]`` time that is
    anchored to January 1 of ``first_year``. Returns None when nothing matches.
    """
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    match = re.match(_TIME_RE, text)
    if match is None:
        return None
    second = int(match.group(4)) if match.group(4) is not None else 0
    try:
        return datetime(max(first_year, 1), 1, 1, int(match.group(1)), int(match.group(2)), second)
    except ValueError:
        return None


class DateTimeControl(Control):
    """Calendar and/or clock control for a ``datetime`` field."""

    def __init__(
        self,
        records: RecordRegistry,
        ref: FieldRef,
        *,
        mode: DateTimeMode = DateTimeMode.BOTH,
        first_year: int = 1,
        hint: str | None = "",
        **options: Any,
    ) -> None:
        self._mode = mode
        self.first_year = first_year
        super().__init__(records, ref, hint=hint, **options)

    @property
    def mode(self) -> DateTimeMode:
        return self._mode

    @mode.setter
    def mode(self, mode: DateTimeMode) -> None:
        self._mode = mode
        self.mirror(self.member.value)

    def mirror(self, value: Any) -> None:
        shown: datetime = self.to_display(value)
        if self._mode is DateTimeMode.DATE:
            self.display = shown.isoformat()[:10]
        elif self._mode is DateTimeMode.TIME:
            self.display = format_time(shown.hour, shown.minute)
        else:
            self.display = shown.isoformat()[:19]

    def apply_text(self, text: str) -> bool:
        """Set the value parsed from ``text``; return False if it does not parse."""
        parsed = parse_datetime_text(text, self.first_year)
        if parsed is None:
            return False
        self.display = text
        self.set_value(parsed)
        return True


class DurationControl(Control):
    """
    A row of number pickers, one per selected time unit.

    Parameters
    ----------
    units:
        Units shown by the control. Fixed for the control's lifetime.
    step:
        Picker step. Must be > 0.
    labels:
        Optional per-unit labels overriding ``UNIT_LABELS``.

    Raises
    ------
    ControlConfigurationError
        If ``units`` is empty or ``step`` is not positive.
    """

    def __init__(
        self,
        records: RecordRegistry,
        ref: FieldRef,
        *,
        units: DurationUnit = DEFAULT_DURATION_UNITS,
        step: int = 1,
        labels: Mapping[DurationUnit, str] | None = None,
        **options: Any,
    ) -> None:
        if not units:
            raise ControlConfigurationError("A duration control needs at least one unit.")
        if step <= 0:
            raise ControlConfigurationError(f"step must be > 0 (got {step}).")
        self._units = units
        self.step = step
        self.labels = dict(UNIT_LABELS) if labels is None else {**UNIT_LABELS, **labels}
        self.components: dict[DurationUnit, int] = {}
        super().__init__(records, ref, **options)

    @property
    def units(self) -> DurationUnit:
        return self._units

    def mirror(self, value: Any) -> None:
        self.components = decompose(self.to_display(value), self._units)
        self.display = self.components

    def set_value(self, value: Any) -> None:
        self.components = decompose(value, self._units)
        self.display = self.components
        super().set_value(value)

    def set_component(self, unit: DurationUnit, value: int) -> None:
        """Change one picker and recompute the whole duration."""
        if unit not in self._units:
            raise ControlConfigurationError(f"{unit.name} is not shown by this control.")
        components = dict(self.components)
        components[unit] = value
        self.set_value(compose(components, self._units))

    def component_max(self, unit: DurationUnit) -> int | None:
        return component_max(unit, self._units)

    def visible_units(self) -> list[DurationUnit]:
        """Selected units, largest first (display order)."""
        return list(reversed(selected_units(self._units)))

    def total(self) -> timedelta:
        return compose(self.components, self._units)


class ListControl(Control):
    """
    Control over a list-valued field.

    Parameters
    ----------
    render_card:
        Optional renderer hook producing one displayable node per item.
    sort_key:
        Optional key applied by ``sorted_items`` at render time.

    Raises
    ------
    ControlConfigurationError
        If the bound field is not list-valued.
    """

    def __init__(
        self,
        records: RecordRegistry,
        ref: FieldRef,
        *,
        render_card: Callable[[Any], Any] | None = None,
        sort_key: Callable[[Any], Any] | None = None,
        hint: str | None = "",
        **options: Any,
    ) -> None:
        self.render_card = render_card
        self.sort_key = sort_key
        self.item_extent = 0.0
        self._last_added: Any = None
        super().__init__(records, ref, hint=hint, **options)
        if self.member.kind not in LIST_KINDS:
            raise ControlConfigurationError(f"Field {self.key!r} is not list-valued.")

    @property
    def last_added(self) -> Any:
        return self._last_added

    def mirror(self, value: Any) -> None:
        shown = self.to_display(value)
        self.display = list(shown) if isinstance(shown, (list, tuple)) else []

    def add(self, value: Any) -> None:
        """Append ``value``, remember it as ``last_added`` and notify listeners."""
        self.member.value.append(value)
        self._last_added = value
        self.call_listeners()

    def remove(self, value: Any) -> bool:
        """Remove the first item equal to ``value``; notify only if one was removed."""
        items = self.member.value
        if value not in items:
            return False
        items.remove(value)
        self.call_listeners()
        return True

    def sorted_items(self) -> list[Any]:
        """Items in display order. The field itself is never reordered."""
        items = list(self.member.value)
        if self.sort_key is not None:
            items.sort(key=self.sort_key)
        return items


def _placeholder(control: "CustomControl") -> None:
    return None


class CustomControl(Control):
    """Control whose visual representation is supplied by the caller."""

    def __init__(
        self,
        records: RecordRegistry,
        ref: FieldRef,
        *,
        create_widget: Callable[["CustomControl"], Any] = _placeholder,
        hint: str | None = "",
        **options: Any,
    ) -> None:
        self.create_widget = create_widget
        super().__init__(records, ref, hint=hint, **options)

    def mirror(self, value: Any) -> None:
        self.display = self.to_display(value)

    def render(self) -> Any:
        """Return whatever the render hook produces; never inspected here."""
        return self.create_widget(self)


@dataclass(frozen=True, slots=True)
class ControlGroup:
    """A titled set of controls rendered together."""

    title: str
    items: Sequence[Control]
