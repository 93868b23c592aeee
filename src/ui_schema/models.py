"""Schema Data Models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NodeKind(str, Enum):
    """The closed set of node types the interpreter understands."""

    CONTAINER = "Container"
    TEXT = "Text"
    BUTTON = "Button"
    GRID = "Grid"
    STATE = "State"
    INPUT = "Input"
    LIST = "List"

    @classmethod
    def lookup(cls, value: str) -> "NodeKind | None":
        """Return the matching kind, or None for anything outside the set."""
        try:
            return cls(value)
        except ValueError:
            return None


class SchemaNode(BaseModel):
    """A single element of the declarative UI tree.

    ``kind`` is kept as a plain string: a node of unknown type is still a
    well-formed node, and the interpreter decides what to do with it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    kind: str = Field(..., alias="type", description="Node type")
    props: dict[str, Any] = Field(default_factory=dict)
    children: list["SchemaNode"] = Field(default_factory=list)
    item_schema: "SchemaNode | None" = Field(default=None, alias="itemSchema")
    on_click: str | None = Field(default=None, alias="onClick")
    on_change: str | None = Field(default=None, alias="onChange")

    @property
    def node_kind(self) -> NodeKind | None:
        return NodeKind.lookup(self.kind)

    def to_dict(self) -> dict[str, Any]:
        """Dump in the wire shape (``type``, ``onClick``, ...)."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude_defaults=True)

    def walk(self):
        """Yield this node and every descendant, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()
        if self.item_schema is not None:
            yield from self.item_schema.walk()


SchemaNode.model_rebuild()
