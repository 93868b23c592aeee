"""
App Registry
Maps free-text prompts onto the built-in schema apps.
"""

from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Callable, Mapping

from core import get_logger
from interpreter import Dispatch
from ui_schema import SchemaNode, parse_schema
from .calculator import CALCULATOR_SCHEMA, CalculatorActions
from .todo import TODO_SCHEMA, TodoActions

logger = get_logger(__name__)


@dataclass(frozen=True)
class AppDefinition:
    """A schema plus the action handler that drives it."""

    name: str
    title: str
    keywords: tuple[str, ...]
    raw_schema: Mapping[str, Any] = field(repr=False)
    handler_factory: Callable[[], Dispatch] = field(repr=False)
    example_prompt: str = ""

    @cached_property
    def schema(self) -> SchemaNode:
        return parse_schema(self.raw_schema)

    def create_handler(self) -> Dispatch:
        return self.handler_factory()

    def matches(self, prompt: str) -> bool:
        normalized = prompt.lower().strip()
        return any(keyword in normalized for keyword in self.keywords)

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "keywords": list(self.keywords),
            "example_prompt": self.example_prompt,
        }


# Checked in order: the first app whose keyword appears in the prompt wins
APPS: tuple[AppDefinition, ...] = (
    AppDefinition(
        name="calculator",
        title="Calculator",
        keywords=("calculator",),
        raw_schema=CALCULATOR_SCHEMA,
        handler_factory=CalculatorActions,
        example_prompt="Create a calculator",
    ),
    AppDefinition(
        name="todo",
        title="Todo List",
        keywords=("todo",),
        raw_schema=TODO_SCHEMA,
        handler_factory=TodoActions,
        example_prompt="Create a todo list",
    ),
)


def list_apps() -> list[AppDefinition]:
    return list(APPS)


def get_app(name: str) -> AppDefinition | None:
    return next((app for app in APPS if app.name == name), None)


def select_app(prompt: str) -> AppDefinition | None:
    """
    Pick the app a prompt asks for.

    Args:
        prompt: Free text such as "Create a calculator"

    Returns:
        Matching app, or None when no keyword matches
    """
    for app in APPS:
        if app.matches(prompt):
            logger.info("app_selected", app=app.name)
            return app
    logger.info("no_app_matched", prompt=prompt[:50])
    return None


def example_prompts() -> list[str]:
    return [app.example_prompt for app in APPS if app.example_prompt]
