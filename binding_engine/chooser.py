"""
List membership edits driven by a chooser or a text adder.

A chooser presents a pool of candidate items; picking one appends it to a
list-valued field. The only policy applied here is the duplicate check: an item
already present (by value equality) is rejected unless duplicates are allowed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Sequence

from .controls import Control, ListControl
from .errors import ControlConfigurationError
from .fields import LIST_KINDS


def choose_item(control: Control, item: Any, *, allow_duplicates: bool = False) -> bool:
    """
    Append ``item`` to the control's list field unless it is a rejected duplicate.

    Parameters
    ----------
    control:
        Control bound to a list-valued field. A ``ListControl`` records the item
        as ``last_added``; any other control just re-fires its listeners.
    item:
        Candidate picked by the user.
    allow_duplicates:
        Append even if an equal item is already present.

    Returns
    -------
    bool
        True if the item was appended. A rejected item changes nothing and
        fires no listeners.

    Raises
    ------
    ControlConfigurationError
        If the control's field is not list-valued.
    """
    if control.member.kind not in LIST_KINDS:
        raise ControlConfigurationError(f"Field {control.key!r} is not list-valued.")

    items = control.member.value
    if not allow_duplicates and item in items:
        return False

    if isinstance(control, ListControl):
        control.add(item)
    else:
        items.append(item)
        control.call_listeners()
    return True


@dataclass(frozen=True, slots=True)
class ChooserEntry:
    """One row of a chooser: display strings plus the candidate item."""

    title: str
    subtitle: str | None
    item: Any


@dataclass(frozen=True, slots=True)
class ChooserRequest:
    """
    Everything a renderer needs to show a chooser for one list control.

    Attributes
    ----------
    title:
        Chooser heading.
    items:
        Candidate pool, in display order.
    to_string:
        Optional title formatter; ``str`` is used otherwise.
    to_subtitle:
        Optional subtitle formatter.
    index:
        Position to scroll to when the chooser opens.
    allow_duplicates:
        Passed through to ``choose_item``.
    """

    title: str
    items: Sequence[Any]
    to_string: Callable[[Any], str] | None = None
    to_subtitle: Callable[[Any], str] | None = None
    index: int | None = None
    allow_duplicates: bool = False

    def entries(self) -> list[ChooserEntry]:
        out: list[ChooserEntry] = []
        for item in self.items:
            title = self.to_string(item) if self.to_string is not None else str(item)
            subtitle = self.to_subtitle(item) if self.to_subtitle is not None else None
            out.append(ChooserEntry(title=title, subtitle=subtitle, item=item))
        return out

    def initial_scroll_offset(self, control: Control) -> float | None:
        """
        Scroll offset that brings ``index`` into view, if it can be computed.

        Needs a ``ListControl`` whose rendered item extent has been measured.
        """
        if (
            self.index is None
            or not isinstance(control, ListControl)
            or control.item_extent == 0
            or not self.items
        ):
            return None
        return self.index * control.item_extent

    def choose(self, control: Control, position: int) -> bool:
        """Apply the candidate at ``position`` to ``control``."""
        return choose_item(control, self.items[position], allow_duplicates=self.allow_duplicates)


def remember_item_extent(control: Control, extent: float) -> None:
    """Cache the first measured item extent on a list control."""
    if isinstance(control, ListControl) and control.item_extent == 0 and extent > 0:
        control.item_extent = extent


def add_parsed(control: ListControl, text: str, parse: Callable[[str], Any | None]) -> bool:
    """
    Add the value parsed from free text to a list control.

    Returns
    -------
    bool
        False when ``parse`` returns None (the adder stays open), True once the
        value has been added.
    """
    value = parse(text)
    if value is None:
        return False
    control.add(value)
    return True
