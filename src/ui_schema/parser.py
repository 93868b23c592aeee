"""Schema Parser - JSON or mapping to SchemaNode with validation."""

from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from core import get_logger, get_settings, ValidationError, SchemaValidator
from core.json import extract_json, JSONParseError
from .models import NodeKind, SchemaNode

logger = get_logger(__name__)


# Layout shortcuts expand into Containers with a preset direction
LAYOUT_SHORTCUTS = {
    "Row": "row",
    "Column": "column",
}


class SchemaError(ValidationError):
    """Schema document is structurally invalid."""

    def __init__(self, message: str, path: str = "$") -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class SchemaParser:
    """Parses schema documents into immutable SchemaNode trees."""

    def __init__(self, max_size: int | None = None, max_depth: int | None = None):
        settings = get_settings()
        self.max_size = max_size or settings.max_schema_size
        self.max_depth = max_depth or settings.max_schema_depth

    def parse(self, content: str | Mapping[str, Any]) -> SchemaNode:
        """
        Parse a schema document.

        Args:
            content: JSON text (optionally fenced) or an already decoded mapping

        Returns:
            Root SchemaNode

        Raises:
            SchemaError: If the document does not describe a node tree
            ValidationError: If size or depth limits are exceeded
        """
        if isinstance(content, str):
            try:
                raw = extract_json(content, repair=True)
            except JSONParseError as e:
                logger.error("json_parse_failed", error=str(e))
                raise SchemaError(f"Invalid JSON: {e}") from e
            SchemaValidator.validate(raw, content, self.max_size, self.max_depth)
        elif isinstance(content, Mapping):
            raw = dict(content)
            SchemaValidator.validate(raw, None, self.max_size, self.max_depth)
        else:
            raise SchemaError(f"expected JSON text or mapping, got {type(content).__name__}")

        expanded = self._expand_node(raw, "$")

        try:
            return SchemaNode.model_validate(expanded)
        except PydanticValidationError as e:
            logger.error("schema_invalid", errors=e.error_count())
            raise SchemaError(str(e)) from e

    def _expand_node(self, node: Any, path: str) -> dict[str, Any]:
        """
        Expand a single node

        Special cases:
        - Simple strings: "Hello" -> {type: "Text", props: {content: "Hello"}}
        - Layout shortcuts: type="Row" -> type="Container" + flexDirection="row"
        """
        if isinstance(node, str):
            return {"type": NodeKind.TEXT.value, "props": {"content": node}}

        if not isinstance(node, Mapping):
            raise SchemaError(f"node must be an object, got {type(node).__name__}", path)

        kind = node.get("type")
        if not isinstance(kind, str) or not kind:
            raise SchemaError("node missing 'type'", path)

        props = node.get("props", {})
        if not isinstance(props, Mapping):
            raise SchemaError("'props' must be an object", path)
        props = dict(props)

        if kind in LAYOUT_SHORTCUTS:
            props.setdefault("flexDirection", LAYOUT_SHORTCUTS[kind])
            kind = NodeKind.CONTAINER.value
        elif NodeKind.lookup(kind) is None:
            # Still a valid node: the interpreter renders nothing for it
            logger.warning("unknown_node_kind", kind=kind, path=path)

        for handler in ("onClick", "onChange"):
            if handler in node and node[handler] is not None and not isinstance(node[handler], str):
                raise SchemaError(f"'{handler}' must be an action name", path)

        children = node.get("children", [])
        if not isinstance(children, list):
            raise SchemaError("'children' must be a list", path)

        result: dict[str, Any] = {
            "type": kind,
            "props": props,
            "children": [
                self._expand_node(child, f"{path}.children[{i}]")
                for i, child in enumerate(children)
            ],
        }

        item_schema = node.get("itemSchema")
        if item_schema is not None:
            result["itemSchema"] = self._expand_node(item_schema, f"{path}.itemSchema")
        elif kind == NodeKind.LIST.value:
            logger.warning("list_without_item_schema", path=path)

        if node.get("onClick"):
            result["onClick"] = node["onClick"]
        if node.get("onChange"):
            result["onChange"] = node["onChange"]

        return result


def parse_schema(content: str | Mapping[str, Any]) -> SchemaNode:
    """
    Convenience function to parse a schema document

    Args:
        content: JSON text or mapping

    Returns:
        Root SchemaNode
    """
    return SchemaParser().parse(content)
