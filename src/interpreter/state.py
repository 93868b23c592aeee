"""
State Scopes
Local mutable state owned by State nodes, keyed by node position.
"""

import copy
import threading
from typing import Any, Callable, Mapping, Union

from core import get_logger, hash_value
from monitoring import metrics_collector

logger = get_logger(__name__)

# Reserved context name under which a scope exposes its mutator
SET_STATE_KEY = "setState"

StatePatch = Union[Mapping[str, Any], Callable[[dict[str, Any]], Mapping[str, Any]]]


def structurally_equal(left: Any, right: Any) -> bool:
    """
    Deep equality that ignores mapping key order.

    Unlike ``==``, booleans never equal numbers (``True`` vs ``1``).
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if left.keys() != right.keys():
            return False
        return all(structurally_equal(left[key], right[key]) for key in left)
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(
            structurally_equal(a, b) for a, b in zip(left, right)
        )
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    return type(left) is type(right) and left == right


def fingerprint(value: Any) -> str:
    """Short digest of a value's structure, stable across key order."""
    return hash_value(value)


class StateScope:
    """
    Live state of one State node.

    ``set_state`` shallow-merges a patch into the current state. The merged
    mapping replaces the old one in a single assignment under a lock, so a
    reader sees either the whole update or none of it.
    """

    def __init__(self, path: str, initial_state: Mapping[str, Any]) -> None:
        self.path = path
        self._lock = threading.RLock()
        self.initial_state: dict[str, Any] = {}
        self.fingerprint = ""
        self.version = 0
        self._state: dict[str, Any] = {}
        self.reset(initial_state)

    @property
    def state(self) -> dict[str, Any]:
        """Current state. Treat as read-only; change it through ``set_state``."""
        return self._state

    def matches(self, initial_state: Mapping[str, Any]) -> bool:
        return structurally_equal(self.initial_state, initial_state)

    def reset(self, initial_state: Mapping[str, Any]) -> None:
        """Start over from ``initial_state``."""
        with self._lock:
            self.initial_state = copy.deepcopy(dict(initial_state))
            self.fingerprint = fingerprint(self.initial_state)
            self._state = copy.deepcopy(self.initial_state)
            self.version = 0

    def set_state(self, patch: StatePatch) -> None:
        """
        Shallow-merge ``patch`` into the state.

        Args:
            patch: A mapping, or a function of the current state returning one
        """
        with self._lock:
            if isinstance(patch, Mapping):
                update = patch
            elif callable(patch):
                update = patch(dict(self._state))
            else:
                update = None

            if not isinstance(update, Mapping):
                logger.warning(
                    "invalid_state_patch", path=self.path, patch_type=type(update).__name__
                )
                metrics_collector.record_diagnostic("invalid_state_patch")
                return

            self._state = {**self._state, **update}
            self.version += 1

        logger.debug("state_updated", path=self.path, keys=sorted(update), version=self.version)

    def __repr__(self) -> str:
        return f"StateScope(path={self.path!r}, fingerprint={self.fingerprint!r}, state={self._state!r})"


class StateRegistry:
    """
    Owns every StateScope of one interpreter, keyed by node position.

    A render pass marks the scopes it touches; scopes left untouched belong to
    subtrees that are no longer interpreted and are dropped when the pass ends.
    """

    def __init__(self) -> None:
        self._scopes: dict[str, StateScope] = {}
        self._visited: set[str] | None = None

    def acquire(self, path: str, initial_state: Mapping[str, Any]) -> StateScope:
        """
        Get the scope for ``path``, creating or resetting it as needed.

        Same initial state as before keeps the live state; a structurally
        different one resets it.
        """
        scope = self._scopes.get(path)
        if scope is None:
            scope = StateScope(path, initial_state)
            self._scopes[path] = scope
            logger.debug("state_created", path=path, fingerprint=scope.fingerprint)
        elif not scope.matches(initial_state):
            previous = scope.fingerprint
            scope.reset(initial_state)
            logger.info("state_reset", path=path, previous=previous, fingerprint=scope.fingerprint)
            metrics_collector.record_diagnostic("state_reset")

        if self._visited is not None:
            self._visited.add(path)
        return scope

    def begin_pass(self) -> None:
        self._visited = set()

    def end_pass(self) -> list[str]:
        """Finish a render pass and drop unvisited scopes."""
        if self._visited is None:
            return []
        dropped = [path for path in self._scopes if path not in self._visited]
        for path in dropped:
            del self._scopes[path]
        self._visited = None
        if dropped:
            logger.debug("state_dropped", paths=dropped)
        return dropped

    def get(self, path: str) -> StateScope | None:
        return self._scopes.get(path)

    def scopes(self) -> list[StateScope]:
        return list(self._scopes.values())

    def clear(self) -> None:
        self._scopes.clear()

    def __len__(self) -> int:
        return len(self._scopes)

    def __contains__(self, path: object) -> bool:
        return path in self._scopes
