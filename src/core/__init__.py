"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .validate import (
    ValidationError,
    ValidationResult,
    PromptRequest,
    EventRequest,
    SchemaValidator,
    validate_schema,
)
from .logging_config import configure_logging, get_logger, LogContext
from .json import (
    extract_json,
    safe_json_dumps,
    canonical_json,
    JSONParseError,
    validate_json_size,
    validate_json_depth,
)
from .hash import Algorithm, hash_string, hash_bytes, hash_value
from .cache import LRUCache, Stats
from .id import SessionID, TaskID, new_session_id, new_task_id


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Validation
    "ValidationError",
    "ValidationResult",
    "PromptRequest",
    "EventRequest",
    "SchemaValidator",
    "validate_schema",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # JSON
    "extract_json",
    "safe_json_dumps",
    "canonical_json",
    "JSONParseError",
    "validate_json_size",
    "validate_json_depth",
    # Hashing
    "Algorithm",
    "hash_string",
    "hash_bytes",
    "hash_value",
    # Caching
    "LRUCache",
    "Stats",
    # IDs
    "SessionID",
    "TaskID",
    "new_session_id",
    "new_task_id",
]
