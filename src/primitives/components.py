"""
Visual Primitives
One props model and one factory per node kind.

Props models ignore keys they do not know, fill in the same defaults the
browser components use, and compute the CSS ``style`` the element ends up
with (numbers become pixel lengths, explicit ``style`` entries win).
"""

from typing import Any, Callable, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core import get_logger
from monitoring import metrics_collector
from .element import Element

logger = get_logger(__name__)

Length = int | float | str


def px(value: Length) -> str:
    """CSS length: bare numbers are pixels."""
    if isinstance(value, bool):
        value = int(value)
    if isinstance(value, (int, float)):
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return f"{value}px"
    return value


class PrimitiveProps(BaseModel):
    """Shared configuration of every primitive."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    style: dict[str, Any] = Field(default_factory=dict)

    @field_validator("style", mode="before")
    @classmethod
    def default_style(cls, v: Any) -> Any:
        return {} if v is None else v

    def css(self) -> dict[str, Any]:
        return dict(self.style)

    def export(self) -> dict[str, Any]:
        """Props as the element carries them: configuration plus computed style."""
        data = self.model_dump(by_alias=True, exclude={"style"})
        data["style"] = self.css()
        return data


class ContainerProps(PrimitiveProps):
    """Flex layout box."""

    flex_direction: str = Field(default="column", alias="flexDirection")
    gap: Length = 0
    padding: Length = 0
    align_items: str = Field(default="stretch", alias="alignItems")
    justify_content: str = Field(default="flex-start", alias="justifyContent")

    def css(self) -> dict[str, Any]:
        return {
            "display": "flex",
            "flexDirection": self.flex_direction,
            "gap": px(self.gap),
            "padding": px(self.padding),
            "alignItems": self.align_items,
            "justifyContent": self.justify_content,
            **self.style,
        }


class TextProps(PrimitiveProps):
    content: Any = None
    font_size: Length = Field(default=16, alias="fontSize")
    font_weight: str | int = Field(default="normal", alias="fontWeight")
    color: str = "#000"

    def css(self) -> dict[str, Any]:
        return {
            "fontSize": px(self.font_size),
            "fontWeight": self.font_weight,
            "color": self.color,
            **self.style,
        }


class ButtonProps(PrimitiveProps):
    label: Any = None
    disabled: bool = False

    def css(self) -> dict[str, Any]:
        return {
            "padding": "8px 16px",
            "fontSize": "16px",
            "cursor": "not-allowed" if self.disabled else "pointer",
            "border": "none",
            "borderRadius": "8px",
            "backgroundColor": "#e0e0e0" if self.disabled else self.style.get("backgroundColor", "#6366f1"),
            "color": self.style.get("color", "#ffffff"),
            "fontWeight": "500",
            "opacity": 0.6 if self.disabled else 1,
            **self.style,
        }


class GridProps(PrimitiveProps):
    columns: int = Field(default=1, ge=1)
    gap: Length = 0

    def css(self) -> dict[str, Any]:
        return {
            "display": "grid",
            "gridTemplateColumns": f"repeat({self.columns}, 1fr)",
            "gap": px(self.gap),
            **self.style,
        }


class InputProps(PrimitiveProps):
    value: Any = ""
    placeholder: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def empty_value(cls, v: Any) -> Any:
        return "" if v is None else v

    def css(self) -> dict[str, Any]:
        return {
            "padding": "12px 16px",
            "fontSize": "16px",
            "border": "2px solid #e5e7eb",
            "borderRadius": "8px",
            "backgroundColor": "#ffffff",
            "outline": "none",
            **self.style,
        }


class ListProps(PrimitiveProps):
    items_key: str | None = Field(default="items", alias="itemsKey")


P = TypeVar("P", bound=PrimitiveProps)


def load_props(model: type[P], props: Mapping[str, Any]) -> P:
    """
    Validate props, dropping the fields the model rejects.

    A rejected field falls back to its default (an unresolved ``{{cols}}``
    for Grid columns renders a one-column grid), so the primitive and its
    children still render.
    """
    data = dict(props)
    while True:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            rejected = {err["loc"][0] for err in e.errors() if err["loc"] and err["loc"][0] in data}
            if not rejected:
                raise
            logger.warning("invalid_props_dropped", primitive=model.__name__, fields=sorted(map(str, rejected)))
            metrics_collector.record_diagnostic("invalid_props")
            for name in rejected:
                del data[name]


def container(props: Mapping[str, Any], children: list[Element]) -> Element:
    return Element("container", load_props(ContainerProps, props).export(), children)


def text(props: Mapping[str, Any], children: list[Element]) -> Element:
    return Element("text", load_props(TextProps, props).export(), children)


def grid(props: Mapping[str, Any], children: list[Element]) -> Element:
    return Element("grid", load_props(GridProps, props).export(), children)


def button(
    props: Mapping[str, Any],
    children: list[Element],
    on_click: Callable[[], None] | None = None,
) -> Element:
    return Element("button", load_props(ButtonProps, props).export(), children, on_click=on_click)


def text_input(
    props: Mapping[str, Any], on_change: Callable[[Any], None] | None = None
) -> Element:
    return Element("input", load_props(InputProps, props).export(), on_change=on_change)


def list_view(
    props: Mapping[str, Any], items: list[tuple[str | int, Element | None]]
) -> Element:
    """List box; each rendered item is wrapped in a keyed ``list_item``."""
    model = load_props(ListProps, props)
    children = [
        Element("list_item", {"index": index}, [rendered] if rendered is not None else [], key=key)
        for index, (key, rendered) in enumerate(items)
    ]
    exported = model.export()
    exported["count"] = len(items)
    return Element("list", exported, children)


def fragment(children: list[Element]) -> Element:
    """Grouping without visual presence (State scopes render as one)."""
    return Element("fragment", {}, children)


__all__ = [
    "ContainerProps",
    "TextProps",
    "ButtonProps",
    "GridProps",
    "InputProps",
    "ListProps",
    "container",
    "text",
    "grid",
    "button",
    "text_input",
    "list_view",
    "fragment",
    "px",
    "load_props",
]
