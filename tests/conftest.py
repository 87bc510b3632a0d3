from __future__ import annotations

import pytest
from kitchen_sink_model import make_kitchen_sink
from recording_storage import RecordingStorage

from binding_engine.fields import EntityRecord
from binding_engine.session import EditingSession


@pytest.fixture
def kitchen_sink() -> EntityRecord:
    """A record holding one field of every kind, titled "Main"."""
    return make_kitchen_sink()


@pytest.fixture
def session(kitchen_sink: EntityRecord) -> EditingSession:
    """Session editing ``kitchen_sink`` with default controls created."""
    s = EditingSession(kitchen_sink)
    s.create_default_controls()
    return s


@pytest.fixture
def storage() -> RecordingStorage:
    return RecordingStorage()
