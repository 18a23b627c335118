"""Session bookkeeping and export for circle-drawing experiments."""

from sessions.export import SESSION_METADATA_FILE, SessionExporter, raw_points_payload
from sessions.store import InMemorySessionStore

__all__ = [
    "InMemorySessionStore",
    "SessionExporter",
    "SESSION_METADATA_FILE",
    "raw_points_payload",
]
