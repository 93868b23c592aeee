"""Tests for prompt shell sessions."""

import threading

import pytest

from apps import get_app
from core import ValidationError
from core.id import is_session_id
from handlers import Session, SessionManager, SessionNotFoundError, TargetNotFoundError


def display(session):
    return session.tree.find_by_path("0.1.0.0").props["content"]


def button_path(session, label):
    return session.tree.find_button(label).path


@pytest.fixture
def calculator():
    return Session("sess_test", get_app("calculator"))


@pytest.mark.unit
def test_session_renders_on_creation(calculator):
    assert calculator.tree is not None
    assert display(calculator) == "0"


@pytest.mark.unit
def test_click_events_drive_the_app(calculator):
    for label in ("7", "+", "3", "="):
        calculator.handle_event(button_path(calculator, label), "click")

    assert display(calculator) == "10"
    assert calculator.events_handled == 4


@pytest.mark.unit
def test_change_events():
    session = Session("sess_todo", get_app("todo"))
    input_path = session.tree.find(lambda e: e.kind == "input").path

    session.handle_event(input_path, "change", "milk")
    session.handle_event(button_path(session, "Add Task"), "click")

    item = session.tree.find(lambda e: e.kind == "list_item")
    assert item is not None
    assert item.path.startswith("0.1.1.1[task_")


@pytest.mark.unit
def test_unknown_target(calculator):
    with pytest.raises(TargetNotFoundError):
        calculator.handle_event("9.9.9", "click")


@pytest.mark.unit
def test_wrong_event_kind(calculator):
    with pytest.raises(ValidationError):
        calculator.handle_event("0.0", "click")  # title text
    with pytest.raises(ValidationError):
        calculator.handle_event(button_path(calculator, "7"), "change", "x")
    with pytest.raises(ValidationError):
        calculator.handle_event(button_path(calculator, "7"), "hover")


@pytest.mark.unit
def test_snapshot(calculator):
    calculator.handle_event(button_path(calculator, "5"), "click")
    data = calculator.snapshot()

    assert data["session_id"] == "sess_test"
    assert data["app"] == "calculator"
    assert data["title"] == "Calculator"
    assert data["events_handled"] == 1
    assert data["state"] == [{"path": "0.1", "state": {"display": "5"}}]
    assert data["tree"]["kind"] == "container"


@pytest.mark.unit
def test_concurrent_events_serialized(calculator):
    path = button_path(calculator, "1")

    def tap():
        for _ in range(10):
            calculator.handle_event(path, "click")

    threads = [threading.Thread(target=tap) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert display(calculator) == "1" * 40


# ============================================================================
# SessionManager
# ============================================================================

@pytest.mark.unit
def test_manager_create_get_delete():
    manager = SessionManager(max_sessions=10, ttl_seconds=60)
    session = manager.create(get_app("todo"))

    assert is_session_id(session.id)
    assert manager.get(session.id) is session
    assert session.id in manager
    assert len(manager) == 1

    manager.delete(session.id)

    with pytest.raises(SessionNotFoundError):
        manager.get(session.id)
    with pytest.raises(SessionNotFoundError):
        manager.delete(session.id)


@pytest.mark.unit
def test_manager_evicts_least_recent():
    manager = SessionManager(max_sessions=2, ttl_seconds=60)
    first = manager.create(get_app("calculator"))
    second = manager.create(get_app("calculator"))
    manager.get(first.id)
    third = manager.create(get_app("todo"))

    assert first.id in manager
    assert second.id not in manager
    assert third.id in manager
    assert manager.stats()["evictions"] == 1


@pytest.mark.unit
def test_sessions_do_not_share_state():
    manager = SessionManager(max_sessions=10, ttl_seconds=60)
    a = manager.create(get_app("calculator"))
    b = manager.create(get_app("calculator"))

    a.handle_event(button_path(a, "8"), "click")

    assert display(a) == "8"
    assert display(b) == "0"
