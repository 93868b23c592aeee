"""
Session Handler
Live app sessions for the prompt shell: interpret, route events, re-render.
"""

import threading
import time
from typing import Any, Mapping

from core import (
    LogContext,
    LRUCache,
    ValidationError,
    get_logger,
    get_settings,
    new_session_id,
)
from apps import AppDefinition
from interpreter import Dispatch, Element, Interpreter
from monitoring import metrics_collector

logger = get_logger(__name__)


class SessionNotFoundError(LookupError):
    """No live session with the given id."""

    def __init__(self, session_id: str):
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class TargetNotFoundError(LookupError):
    """No element at the given path in the session's current tree."""

    def __init__(self, session_id: str, target: str):
        super().__init__(f"No element at {target!r} in session {session_id}")
        self.session_id = session_id
        self.target = target


class Session:
    """
    One running app.

    Owns the interpreter (and so the app's local state), the app's action
    handler and the most recently rendered tree. Events are handled one at a
    time: the dispatch and the re-render that follows it complete before the
    next event is looked at.
    """

    def __init__(self, session_id: str, app: AppDefinition) -> None:
        self.id = session_id
        self.app = app
        self.created_at = time.time()
        self.interpreter = Interpreter()
        self.handler: Dispatch = app.create_handler()
        self.tree: Element | None = None
        self.events_handled = 0
        self._lock = threading.Lock()

        with self._lock:
            self._render()

    def _dispatch(self, action: str, context: Mapping[str, Any]) -> None:
        with LogContext(session_id=self.id, app=self.app.name, action=action):
            start = time.perf_counter()
            self.handler(action, context)
            logger.debug("action_handled", duration_ms=round((time.perf_counter() - start) * 1000, 3))

    def _render(self) -> Element | None:
        self.tree = self.interpreter.render(self.app.schema, self._dispatch)
        return self.tree

    def render(self) -> Element | None:
        """Re-interpret the app's schema against its current state."""
        with self._lock:
            return self._render()

    def handle_event(self, target: str, event_type: str, value: Any = None) -> Element | None:
        """
        Deliver a click or change to the element at ``target``.

        Args:
            target: Element path in the current tree
            event_type: "click" or "change"
            value: New raw value for change events

        Returns:
            The re-rendered tree

        Raises:
            TargetNotFoundError: Nothing at ``target``
            ValidationError: The element does not take this kind of event
        """
        with self._lock:
            element = self.tree.find_by_path(target) if self.tree is not None else None
            if element is None:
                raise TargetNotFoundError(self.id, target)

            if event_type == "click":
                accepted = element.click()
            elif event_type == "change":
                accepted = element.change(value)
            else:
                raise ValidationError(f"Unknown event type: {event_type}")

            if not accepted:
                raise ValidationError(f"Element {target!r} ({element.kind}) does not accept {event_type} events")

            self.events_handled += 1
            logger.info("event_handled", session_id=self.id, target=target, type=event_type)
            return self._render()

    def snapshot(self) -> dict[str, Any]:
        """JSON-serializable view of the session and its current tree."""
        with self._lock:
            return {
                "session_id": self.id,
                "app": self.app.name,
                "title": self.app.title,
                "created_at": self.created_at,
                "events_handled": self.events_handled,
                "state": [
                    {"path": scope.path, "state": _public_state(scope.state)}
                    for scope in self.interpreter.registry.scopes()
                ],
                "tree": self.tree.to_dict() if self.tree is not None else None,
            }


def _public_state(state: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in state.items() if not callable(value)}


class SessionManager:
    """Holds live sessions, evicting the least recently used and idle ones."""

    def __init__(self, max_sessions: int | None = None, ttl_seconds: int | None = None) -> None:
        settings = get_settings()
        self._lock = threading.Lock()
        self._sessions = LRUCache[Session](
            max_size=max_sessions or settings.session_cache_size,
            ttl_seconds=ttl_seconds if ttl_seconds is not None else settings.session_ttl,
            on_evict=self._on_evict,
        )

    def _on_evict(self, session_id: str, session: Session) -> None:
        logger.info("session_evicted", session_id=session_id, app=session.app.name)

    def _update_gauge(self) -> None:
        metrics_collector.set_active_sessions(len(self._sessions))

    def create(self, app: AppDefinition) -> Session:
        session = Session(new_session_id(), app)
        with self._lock:
            self._sessions.set(session.id, session)
            self._update_gauge()
        metrics_collector.record_session_created(app.name)
        logger.info("session_created", session_id=session.id, app=app.name)
        return session

    def get(self, session_id: str) -> Session:
        with self._lock:
            session = self._sessions.get(session_id)
            self._update_gauge()
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def delete(self, session_id: str) -> None:
        with self._lock:
            deleted = self._sessions.delete(session_id)
            self._update_gauge()
        if not deleted:
            raise SessionNotFoundError(session_id)
        logger.info("session_deleted", session_id=session_id)

    def purge_expired(self) -> int:
        with self._lock:
            purged = self._sessions.purge_expired()
            self._update_gauge()
        return purged

    def stats(self) -> dict[str, Any]:
        with self._lock:
            return self._sessions.stats.to_dict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions
