"""
Control registry: builds one control per field of an entity record.

The control variant is chosen from the field's declared kind through a single
dispatch table covering every ``FieldKind``. Callers needing a different variant
for a field (for example a bounded ``IntControl``) replace it on the session
after construction.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Final, Mapping

from .controls import (
    Control,
    CustomControl,
    DateTimeControl,
    DurationControl,
    EnumControl,
    ListControl,
)
from .errors import ControlConfigurationError
from .fields import FieldKind
from .state import FieldRef

if TYPE_CHECKING:
    from .session import EditingSession

logger = logging.getLogger(__name__)

ControlFactory = Callable[..., Control]
ControlOptions = Mapping[str, Mapping[str, Any]]

# Keyword arguments the registry itself supplies to every factory.
RESERVED_OPTIONS: Final = frozenset({"tracker"})


def _toggle_control(records: Any, ref: FieldRef, **options: Any) -> Control:
    options.setdefault("toggle", True)
    return Control(records, ref, **options)


CONTROL_FACTORIES: Final[Mapping[FieldKind, ControlFactory]] = {
    FieldKind.ENUM: EnumControl,
    FieldKind.BOOLEAN: _toggle_control,
    FieldKind.LIST: ListControl,
    FieldKind.ENTITY_LIST: ListControl,
    FieldKind.BINARY: CustomControl,
    FieldKind.OBJECT: CustomControl,
    FieldKind.DATETIME: DateTimeControl,
    FieldKind.DURATION: DurationControl,
    FieldKind.TEXT: Control,
    FieldKind.INTEGER: Control,
    FieldKind.REAL: Control,
}


def create_controls(session: "EditingSession", options: ControlOptions | None = None) -> list[Control]:
    """
    Build the default controls for the session's draft record.

    The session's control list is cleared and repopulated, so calling this more
    than once is safe; the last call wins.

    Parameters
    ----------
    session:
        Editing session owning the draft record, its registry and dirty tracker.
    options:
        Extra constructor keyword arguments per field key, e.g.
        ``{"fillTime": {"units": DurationUnit.MINUTES | DurationUnit.SECONDS}}``.

    Returns
    -------
    list[Control]
        The session's control list, index-aligned with the record's fields.

    Raises
    ------
    ControlConfigurationError
        If ``options`` names a key the record does not declare, or sets an
        option the session supplies (``tracker``).
    """
    record = session.draft
    options = options or {}
    unknown = set(options) - {f.key for f in record}
    if unknown:
        raise ControlConfigurationError(
            f"Options given for undeclared fields of {record.name!r}: {sorted(unknown)}"
        )
    for key, opts in options.items():
        reserved = RESERVED_OPTIONS & set(opts)
        if reserved:
            raise ControlConfigurationError(
                f"Options for {key!r} may not set {sorted(reserved)}; the session supplies them."
            )

    controls: list[Control] = []
    for index, descriptor in enumerate(record):
        factory = CONTROL_FACTORIES[descriptor.kind]
        control = factory(
            session.records,
            FieldRef(handle=session.handle, index=index),
            tracker=session.tracker,
            **dict(options.get(descriptor.key, {})),
        )
        controls.append(control)

    logger.debug("Created %d controls for %s", len(controls), record.name)
    session.controls.clear()
    session.controls.extend(controls)
    return session.controls
