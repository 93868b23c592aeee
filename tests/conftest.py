"""Pytest configuration and fixtures."""

import os

import pytest

from core import get_settings
from interpreter import Context, Interpreter
from ui_schema import parse_schema


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["UI_LOG_LEVEL"] = "DEBUG"
    os.environ["UI_SELECTION_DELAY"] = "0"  # No artificial pause in tests
    get_settings.cache_clear()


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings."""
    return get_settings()


@pytest.fixture
def interpreter():
    """Fresh interpreter with its own state registry."""
    return Interpreter()


@pytest.fixture
def recorder():
    """Dispatcher that records every (action, flattened context) it receives."""

    class Recorder:
        def __init__(self):
            self.calls = []

        def __call__(self, action, context):
            self.calls.append((action, dict(context)))

        @property
        def actions(self):
            return [action for action, _ in self.calls]

        @property
        def last(self):
            return self.calls[-1]

    return Recorder()


@pytest.fixture
def empty_context():
    return Context()


# ============================================================================
# Schema Fixtures
# ============================================================================

@pytest.fixture
def counter_schema():
    """State scope with a label and a button, bound to ``count``."""
    return parse_schema({
        "type": "State",
        "props": {"initialState": {"count": 0}},
        "children": [
            {"type": "Text", "props": {"content": "Count: {{count}}"}},
            {"type": "Button", "props": {"label": "+1"}, "onClick": "increment"},
        ],
    })


@pytest.fixture
def task_list_schema():
    """List over ``tasks`` rendering each task's text."""
    return parse_schema({
        "type": "List",
        "props": {"itemsKey": "tasks"},
        "itemSchema": {
            "type": "Container",
            "children": [
                {"type": "Text", "props": {"content": "{{text}}"}},
                {"type": "Button", "props": {"label": "Delete"}, "onClick": "deleteTask"},
            ],
        },
    })
