"""Visual primitives and the rendered element tree."""

from .element import Element
from .components import (
    ContainerProps,
    TextProps,
    ButtonProps,
    GridProps,
    InputProps,
    ListProps,
    container,
    text,
    grid,
    button,
    text_input,
    list_view,
    fragment,
    px,
    load_props,
)

__all__ = [
    "Element",
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
