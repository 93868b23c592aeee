"""ID Generation.

ULID-based identifiers for sessions and todo tasks.

- K-sortable: tasks created later sort later
- Prefixed: ``sess_*`` and ``task_*`` make logs readable
"""

from datetime import datetime
from typing import NewType
from ulid import ULID

SessionID = NewType("SessionID", str)
"""Prompt shell session identifier"""

TaskID = NewType("TaskID", str)
"""Todo task identifier"""


class Prefix:
    """ID prefix constants."""

    SESSION = "sess"
    TASK = "task"


class Generator:
    """ULID generator."""

    def generate(self) -> str:
        """Generate a new ULID."""
        return str(ULID())

    def generate_with_prefix(self, prefix: str) -> str:
        """Generate ULID with type prefix."""
        return f"{prefix}_{self.generate()}"

    def timestamp(self, id_str: str) -> int:
        """Extract timestamp (milliseconds) from ULID."""
        try:
            ulid_str = id_str.split("_")[1] if "_" in id_str else id_str
            return int(ULID.from_str(ulid_str).timestamp * 1000)
        except (ValueError, IndexError):
            return 0


_generator = Generator()


def new_session_id() -> SessionID:
    """Generate new session ID."""
    return SessionID(_generator.generate_with_prefix(Prefix.SESSION))


def new_task_id() -> TaskID:
    """Generate new todo task ID."""
    return TaskID(_generator.generate_with_prefix(Prefix.TASK))


def is_valid(id_str: str) -> bool:
    """Check if string is a (optionally prefixed) ULID."""
    try:
        ulid_part = id_str.split("_")[1] if "_" in id_str else id_str
        if len(ulid_part) != 26:
            return False
        ULID.from_str(ulid_part)
        return True
    except (ValueError, IndexError):
        return False


def extract_timestamp(id_str: str) -> datetime | None:
    """Extract creation time from an ID, None if invalid."""
    timestamp_ms = _generator.timestamp(id_str)
    return datetime.fromtimestamp(timestamp_ms / 1000.0) if timestamp_ms > 0 else None


def is_session_id(id_str: str) -> bool:
    return id_str.startswith(f"{Prefix.SESSION}_") and is_valid(id_str)


def is_task_id(id_str: str) -> bool:
    return id_str.startswith(f"{Prefix.TASK}_") and is_valid(id_str)
