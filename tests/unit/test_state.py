"""Tests for State scopes and the registry that owns them."""

import threading

import pytest
from hypothesis import given, strategies as st

from interpreter import StateRegistry, StateScope, fingerprint, structurally_equal


# ============================================================================
# Structural equality
# ============================================================================

@pytest.mark.unit
def test_structural_equality_ignores_key_order():
    assert structurally_equal({"a": 1, "b": [1, {"c": 2}]}, {"b": [1, {"c": 2}], "a": 1})
    assert fingerprint({"a": 1, "b": 2}) == fingerprint({"b": 2, "a": 1})


@pytest.mark.unit
def test_structural_equality_distinguishes_booleans():
    assert not structurally_equal({"on": True}, {"on": 1})
    assert not structurally_equal({"n": 0}, {"n": False})
    assert structurally_equal({"n": 1}, {"n": 1.0})


@pytest.mark.unit
def test_structural_inequality():
    assert not structurally_equal({"display": "0"}, {"display": "1"})
    assert not structurally_equal({"a": 1}, {"a": 1, "b": 2})
    assert not structurally_equal([1, 2], [2, 1])
    assert not structurally_equal("1", 1)


_json = st.recursive(
    st.none() | st.booleans() | st.integers() | st.text(),
    lambda children: st.lists(children, max_size=3) | st.dictionaries(st.text(), children, max_size=3),
    max_leaves=10,
)


@pytest.mark.unit
@given(_json)
def test_fingerprint_deterministic(value):
    assert fingerprint(value) == fingerprint(value)
    assert structurally_equal(value, value)


# ============================================================================
# StateScope
# ============================================================================

@pytest.mark.unit
def test_scope_starts_from_initial_state():
    initial = {"tasks": [], "inputValue": ""}
    scope = StateScope("0.1", initial)

    assert scope.state == initial
    assert scope.version == 0
    assert len(scope.fingerprint) == 16

    # Initial state is copied, not shared
    scope.state["tasks"].append("x")
    assert initial["tasks"] == []


@pytest.mark.unit
def test_set_state_shallow_merges():
    """Patch fields win, other fields stay."""
    scope = StateScope("0", {"a": 1, "b": 2})

    scope.set_state({"b": 3, "c": 4})

    assert scope.state == {"a": 1, "b": 3, "c": 4}
    assert scope.version == 1


@pytest.mark.unit
def test_set_state_is_not_a_deep_merge():
    scope = StateScope("0", {"user": {"name": "Amy", "age": 30}})

    scope.set_state({"user": {"name": "Bob"}})

    assert scope.state == {"user": {"name": "Bob"}}


@pytest.mark.unit
def test_set_state_with_function():
    scope = StateScope("0", {"count": 1, "label": "x"})

    scope.set_state(lambda state: {"count": state["count"] + 1})

    assert scope.state == {"count": 2, "label": "x"}


@pytest.mark.unit
def test_set_state_function_gets_a_copy():
    scope = StateScope("0", {"count": 1})

    def patch(state):
        state["count"] = 99
        return {}

    scope.set_state(patch)
    assert scope.state == {"count": 1}


@pytest.mark.unit
def test_invalid_patches_are_dropped():
    scope = StateScope("0", {"count": 1})

    scope.set_state(42)
    scope.set_state(lambda state: "not a mapping")

    assert scope.state == {"count": 1}
    assert scope.version == 0


@pytest.mark.unit
def test_reset_restores_initial_state():
    scope = StateScope("0", {"display": "0"})
    scope.set_state({"display": "12"})

    scope.reset({"display": "1"})

    assert scope.state == {"display": "1"}
    assert scope.version == 0


@pytest.mark.unit
def test_concurrent_updates_are_not_lost():
    scope = StateScope("0", {"count": 0})

    def bump():
        for _ in range(200):
            scope.set_state(lambda state: {"count": state["count"] + 1})

    threads = [threading.Thread(target=bump) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert scope.state["count"] == 800


# ============================================================================
# StateRegistry
# ============================================================================

@pytest.mark.unit
def test_same_fingerprint_preserves_state():
    registry = StateRegistry()
    scope = registry.acquire("0", {"display": "0"})
    scope.set_state({"display": "42"})

    again = registry.acquire("0", {"display": "0"})

    assert again is scope
    assert again.state == {"display": "42"}


@pytest.mark.unit
def test_key_order_does_not_reset():
    registry = StateRegistry()
    scope = registry.acquire("0", {"tasks": [], "inputValue": ""})
    scope.set_state({"inputValue": "milk"})

    again = registry.acquire("0", {"inputValue": "", "tasks": []})

    assert again.state["inputValue"] == "milk"


@pytest.mark.unit
def test_different_fingerprint_resets():
    registry = StateRegistry()
    scope = registry.acquire("0", {"display": "0"})
    scope.set_state({"display": "42"})

    again = registry.acquire("0", {"tasks": []})

    assert again.state == {"tasks": []}


@pytest.mark.unit
def test_scopes_keyed_by_position():
    registry = StateRegistry()
    a = registry.acquire("0.0", {"n": 0})
    b = registry.acquire("0.1", {"n": 0})
    a.set_state({"n": 1})

    assert b.state == {"n": 0}
    assert len(registry) == 2
    assert "0.0" in registry
    assert registry.get("0.1") is b


@pytest.mark.unit
def test_unvisited_scopes_dropped_after_pass():
    registry = StateRegistry()
    registry.begin_pass()
    registry.acquire("0.0", {"n": 0})
    registry.acquire("0.1", {"n": 0})
    assert registry.end_pass() == []

    registry.begin_pass()
    registry.acquire("0.0", {"n": 0})
    assert registry.end_pass() == ["0.1"]

    assert "0.1" not in registry
    assert [s.path for s in registry.scopes()] == ["0.0"]


@pytest.mark.unit
def test_end_pass_without_begin_is_noop():
    registry = StateRegistry()
    registry.acquire("0", {})
    assert registry.end_pass() == []
    assert len(registry) == 1

    registry.clear()
    assert len(registry) == 0
