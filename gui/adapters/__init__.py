"""GUI adapter layer.

This package provides thin Qt-shaped adapters over engine services.

Notes
-----
Adapters exist to:
- keep GUI code free of SQLite and event-loop details,
- keep storage calls off the UI thread.
"""
