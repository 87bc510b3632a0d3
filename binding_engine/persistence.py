"""
Save orchestration: validate, then create, update or rename.

Notes
-----
Storage identities cannot be renamed. A primary-key edit is saved as "create the
new identity, then delete the old one". The two calls are not transactional: if
the delete fails after the create succeeded, both identities remain stored and
the delete error propagates to the caller.
"""

from __future__ import annotations

import logging
from enum import Enum

from .fields import EntityRecord
from .store.api import EntityStorage
from .validation import has_primary_changed, is_valid

logger = logging.getLogger(__name__)


class SaveStatus(str, Enum):
    """Outcome of ``save``."""

    CREATED = "created"
    UPDATED = "updated"
    INVALID = "invalid"


async def save(
    storage: EntityStorage,
    original: EntityRecord | None,
    draft: EntityRecord,
) -> SaveStatus:
    """
    Persist ``draft``, deciding between create, update and the rename path.

    Parameters
    ----------
    storage:
        Storage collaborator.
    original:
        Snapshot of the stored entity being edited, or None for a new entity.
        Read only.
    draft:
        Edited record to store. Never modified here.

    Returns
    -------
    SaveStatus
        ``INVALID`` without touching storage when ``draft`` fails validation,
        ``CREATED`` for a new entity, ``UPDATED`` otherwise.

    Raises
    ------
    Exception
        Any storage failure, unmodified. Nothing is retried.
    """
    if not is_valid(draft):
        logger.debug("Rejected invalid %s", draft.name)
        return SaveStatus.INVALID

    if original is None:
        await storage.create(draft)
        logger.debug("Created %s %r", draft.name, draft.identity())
        return SaveStatus.CREATED

    if has_primary_changed(original, draft):
        # The create must complete before the delete is attempted.
        await storage.create(draft)
        await storage.delete(original)
        logger.debug(
            "Renamed %s %r -> %r", draft.name, original.identity(), draft.identity()
        )
    else:
        await storage.update(draft)
        logger.debug("Updated %s %r", draft.name, draft.identity())
    return SaveStatus.UPDATED
