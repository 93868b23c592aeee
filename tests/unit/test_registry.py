"""Tests for prompt-to-app selection."""

import pytest

from apps import APPS, CalculatorActions, TodoActions, example_prompts, get_app, list_apps, select_app
from ui_schema import SchemaNode


@pytest.mark.unit
@pytest.mark.parametrize("prompt,expected", [
    ("Create a calculator", "calculator"),
    ("  I NEED A CALCULATOR  ", "calculator"),
    ("Create a todo list", "todo"),
    ("my Todo app", "todo"),
    ("calculator and todo", "calculator"),
])
def test_select_app(prompt, expected):
    assert select_app(prompt).name == expected


@pytest.mark.unit
@pytest.mark.parametrize("prompt", ["Create a weather app", "", "calc", "to do"])
def test_select_app_no_match(prompt):
    assert select_app(prompt) is None


@pytest.mark.unit
def test_app_definitions():
    assert [a.name for a in list_apps()] == ["calculator", "todo"]
    assert list_apps() == list(APPS)
    assert get_app("missing") is None

    calculator = get_app("calculator")
    assert isinstance(calculator.schema, SchemaNode)
    assert calculator.schema is calculator.schema  # parsed once
    assert isinstance(calculator.create_handler(), CalculatorActions)
    assert isinstance(get_app("todo").create_handler(), TodoActions)


@pytest.mark.unit
def test_handlers_are_fresh_per_call():
    app = get_app("todo")
    assert app.create_handler() is not app.create_handler()


@pytest.mark.unit
def test_example_prompts_select_their_app():
    prompts = example_prompts()
    assert prompts == ["Create a calculator", "Create a todo list"]
    assert [select_app(p).name for p in prompts] == ["calculator", "todo"]


@pytest.mark.unit
def test_describe():
    data = get_app("todo").describe()
    assert data == {
        "name": "todo",
        "title": "Todo List",
        "keywords": ["todo"],
        "example_prompt": "Create a todo list",
    }
