"""
Entity binding engine.

This package binds entity records (ordered, typed, named fields) to one editing
control per field, tracks unsaved edits, and decides at save time whether to
create, update or reject a record.

Notes
-----
- The engine is UI-agnostic. Renderers drive controls through ``set`` and
  ``set_value`` and listen for changes.
- Persistence goes through the ``store.api.EntityStorage`` protocol.
"""

from __future__ import annotations

from .chooser import ChooserRequest, add_parsed, choose_item
from .control_registry import CONTROL_FACTORIES, create_controls
from .controls import (
    Control,
    ControlGroup,
    CustomControl,
    DateTimeControl,
    DateTimeMode,
    DurationControl,
    EnumControl,
    IntControl,
    ListControl,
)
from .duration import DurationUnit
from .errors import (
    BindingError,
    ControlConfigurationError,
    ControlIndexError,
    EntityDefinitionError,
    UnknownRecordError,
)
from .fields import EntityRecord, FieldDescriptor, FieldKind
from .listing import EntityListing, ListEntry
from .persistence import SaveStatus, save
from .session import EditingSession
from .validation import has_primary_changed, is_valid

__all__ = [
    "BindingError",
    "CONTROL_FACTORIES",
    "ChooserRequest",
    "Control",
    "ControlConfigurationError",
    "ControlGroup",
    "ControlIndexError",
    "CustomControl",
    "DateTimeControl",
    "DateTimeMode",
    "DurationControl",
    "DurationUnit",
    "EditingSession",
    "EntityDefinitionError",
    "EntityListing",
    "EntityRecord",
    "EnumControl",
    "FieldDescriptor",
    "FieldKind",
    "IntControl",
    "ListControl",
    "ListEntry",
    "SaveStatus",
    "UnknownRecordError",
    "add_parsed",
    "choose_item",
    "create_controls",
    "has_primary_changed",
    "is_valid",
    "save",
]
