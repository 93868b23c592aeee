"""Tests for the layered interpretation context."""

import pytest

from interpreter import MISSING, Context, lookup_path


@pytest.mark.unit
def test_innermost_layer_wins():
    root = Context({"display": "0", "theme": "dark"})
    child = root.extend({"display": "7", "buttonLabel": "7"})

    assert child["display"] == "7"
    assert child["theme"] == "dark"
    assert child["buttonLabel"] == "7"


@pytest.mark.unit
def test_extend_never_touches_ancestors():
    root = Context({"display": "0"})
    root.extend({"display": "7", "extra": 1})

    assert root["display"] == "0"
    assert "extra" not in root
    assert root.to_dict() == {"display": "0"}


@pytest.mark.unit
def test_extend_with_nothing_returns_same_context():
    root = Context({"a": 1})
    assert root.extend({}) is root
    assert root.extend(None) is root


@pytest.mark.unit
def test_mapping_protocol():
    ctx = Context({"a": 1, "b": 2}).extend({"b": 3, "c": 4})

    assert len(ctx) == 3
    assert sorted(ctx) == ["a", "b", "c"]
    assert dict(ctx) == {"a": 1, "b": 3, "c": 4}
    assert ctx.get("missing", "default") == "default"
    assert ctx.local == {"b": 3, "c": 4}
    assert ctx.parent is not None and ctx.parent["b"] == 2

    with pytest.raises(KeyError):
        ctx["missing"]


@pytest.mark.unit
def test_lookup_dotted_paths():
    ctx = Context({
        "tasks": [{"id": 1, "text": "x"}],
        "user": {"name": "Amy", "tags": ("a", "b")},
        "title": "Todo",
        "nothing": None,
    })

    assert ctx.lookup("tasks.length") == 1
    assert ctx.lookup("tasks.0.text") == "x"
    assert ctx.lookup("user.name") == "Amy"
    assert ctx.lookup("user.tags.length") == 2
    assert ctx.lookup("title.length") == 4
    assert ctx.lookup("tasks.5.text") is MISSING
    assert ctx.lookup("user.email") is MISSING
    assert ctx.lookup("nothing.field") is MISSING
    assert ctx.lookup("absent") is MISSING


@pytest.mark.unit
def test_lookup_path_helper():
    assert lookup_path({"a": {"b": [10, 20]}}, "a.b.1") == 20
    assert lookup_path(5, "anything") is MISSING


@pytest.mark.unit
def test_missing_is_falsy_singleton():
    assert not MISSING
    assert repr(MISSING) == "MISSING"
    assert type(MISSING)() is MISSING
