"""Node Interpreter - walks a SchemaNode tree into an Element tree."""

import time
from typing import Any, Callable, Mapping

from pydantic import ValidationError as PydanticValidationError

import primitives
from core import get_logger
from monitoring import metrics_collector
from primitives import Element
from ui_schema import NodeKind, SchemaNode
from .context import Context
from .state import SET_STATE_KEY, StateRegistry
from .template import resolve_props

logger = get_logger(__name__)

Dispatch = Callable[[str, Mapping[str, Any]], None]
"""Caller-supplied action dispatcher: ``dispatch(action_name, context)``."""

ROOT_PATH = "0"

BUTTON_LABEL_KEY = "buttonLabel"
CHANGE_VALUE_KEY = "value"
ITEM_INDEX_KEY = "itemIndex"
DEFAULT_ITEMS_KEY = "items"

_Handler = Callable[[SchemaNode, Context, "Dispatch | None", str], "Element | None"]


class Interpreter:
    """
    Interprets schema trees.

    One Interpreter owns the State scopes of the tree it renders, so
    re-rendering the same schema keeps local state while rendering a
    structurally different one resets it.
    """

    def __init__(self, registry: StateRegistry | None = None) -> None:
        self.registry = registry if registry is not None else StateRegistry()
        self._handlers: dict[NodeKind, _Handler] = {
            NodeKind.CONTAINER: self._interpret_container,
            NodeKind.TEXT: self._interpret_text,
            NodeKind.GRID: self._interpret_grid,
            NodeKind.BUTTON: self._interpret_button,
            NodeKind.INPUT: self._interpret_input,
            NodeKind.LIST: self._interpret_list,
            NodeKind.STATE: self._interpret_state,
        }

    def render(
        self,
        node: SchemaNode,
        dispatch: Dispatch | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Element | None:
        """
        Run one full render pass from the root.

        State scopes not reached during the pass are dropped afterwards.
        """
        root_context = context if isinstance(context, Context) else Context(context)
        status = "error"
        start = time.perf_counter()
        self.registry.begin_pass()
        try:
            element = self.interpret(node, root_context, dispatch, ROOT_PATH)
            status = "ok" if element is not None else "empty"
            return element
        finally:
            self.registry.end_pass()
            metrics_collector.record_render(status, time.perf_counter() - start)

    def interpret(
        self,
        node: SchemaNode,
        context: Context,
        dispatch: Dispatch | None = None,
        path: str = ROOT_PATH,
    ) -> Element | None:
        """
        Interpret a single node and its subtree.

        Unknown node kinds render as nothing, as do props a primitive rejects
        beyond what dropping single fields can fix. The rest of the tree is
        unaffected.
        """
        kind = node.node_kind
        if kind is None:
            logger.warning("unknown_node_kind", kind=node.kind, path=path)
            metrics_collector.record_diagnostic("unknown_node_kind")
            return None

        try:
            element = self._handlers[kind](node, context, dispatch, path)
        except PydanticValidationError as e:
            logger.warning("invalid_props", kind=node.kind, path=path, errors=e.errors(include_url=False))
            metrics_collector.record_diagnostic("invalid_props")
            return None

        if element is not None and not element.path:
            element.path = path
        return element

    def _interpret_children(
        self, node: SchemaNode, context: Context, dispatch: Dispatch | None, path: str
    ) -> list[Element]:
        children = []
        for index, child in enumerate(node.children):
            element = self.interpret(child, context, dispatch, f"{path}.{index}")
            if element is not None:
                children.append(element)
        return children

    # Layout and text

    def _interpret_container(self, node, context, dispatch, path):
        props = resolve_props(node.props, context)
        return primitives.container(props, self._interpret_children(node, context, dispatch, path))

    def _interpret_text(self, node, context, dispatch, path):
        props = resolve_props(node.props, context)
        return primitives.text(props, self._interpret_children(node, context, dispatch, path))

    def _interpret_grid(self, node, context, dispatch, path):
        props = resolve_props(node.props, context)
        return primitives.grid(props, self._interpret_children(node, context, dispatch, path))

    # Interactive nodes

    def _interpret_button(self, node, context, dispatch, path):
        props = resolve_props(node.props, context)
        children = self._interpret_children(node, context, dispatch, path)
        element = primitives.button(props, children)

        if node.on_click:
            action = node.on_click

            def handle_click() -> None:
                label = props.get("label")
                if label is None or label == "":
                    label = "".join(child.text_content() for child in children) or None
                self._fire(action, context.extend({BUTTON_LABEL_KEY: label}), dispatch, path)

            element.on_click = handle_click

        return element

    def _interpret_input(self, node, context, dispatch, path):
        props = resolve_props(node.props, context)
        element = primitives.text_input(props)

        if node.on_change:
            action = node.on_change

            def handle_change(value: Any) -> None:
                self._fire(action, context.extend({CHANGE_VALUE_KEY: value}), dispatch, path)

            element.on_change = handle_change

        return element

    def _fire(
        self, action: str, event_context: Context, dispatch: Dispatch | None, path: str
    ) -> None:
        if dispatch is None:
            logger.warning("action_dropped", action=action, path=path, reason="no_dispatcher")
            metrics_collector.record_diagnostic("action_dropped")
            metrics_collector.record_dispatch(action, "dropped")
            return

        logger.debug("action_dispatched", action=action, path=path)
        metrics_collector.record_dispatch(action, "dispatched")
        dispatch(action, event_context)

    # Data binding

    def _interpret_list(self, node, context, dispatch, path):
        props = resolve_props(node.props, context)
        items_key = props.get("itemsKey") or DEFAULT_ITEMS_KEY

        items = context.get(items_key) if isinstance(items_key, str) else None
        if items is None:
            items = []
        elif not isinstance(items, (list, tuple)):
            logger.warning("list_items_not_sequence", path=path, items_key=items_key, type=type(items).__name__)
            metrics_collector.record_diagnostic("list_items_not_sequence")
            items = []

        rendered: list[tuple[str | int, Element | None]] = []
        for index, (item, key) in enumerate(zip(items, _item_keys(items))):
            element = None
            if node.item_schema is not None:
                values = dict(item) if isinstance(item, Mapping) else {}
                values[ITEM_INDEX_KEY] = index
                element = self.interpret(
                    node.item_schema, context.extend(values), dispatch, f"{path}[{key}].0"
                )
            rendered.append((key, element))

        element = primitives.list_view(props, rendered)
        for child in element.children:
            child.path = f"{path}[{child.key}]"
        return element

    # Local state

    def _interpret_state(self, node, context, dispatch, path):
        # initialState is the scope's own vocabulary: never template-resolved
        initial_state = node.props.get("initialState") or {}
        if not isinstance(initial_state, Mapping):
            logger.warning("invalid_initial_state", path=path, type=type(initial_state).__name__)
            metrics_collector.record_diagnostic("invalid_initial_state")
            initial_state = {}

        scope = self.registry.acquire(path, initial_state)
        state_context = context.extend({**scope.state, SET_STATE_KEY: scope.set_state})

        scoped_dispatch: Dispatch | None = None
        if dispatch is not None:
            outer = dispatch

            def scoped_dispatch(action: str, event_context: Mapping[str, Any]) -> None:
                outer(action, state_context.extend(event_context))

        children = self._interpret_children(node, state_context, scoped_dispatch, path)
        return primitives.fragment(children)


def _item_id(item: Any) -> str | int | None:
    if not isinstance(item, Mapping):
        return None
    item_id = item.get("id")
    if isinstance(item_id, (str, int)) and not isinstance(item_id, bool) and item_id != "":
        return item_id
    return None


def _item_keys(items: list[Any] | tuple[Any, ...]) -> list[str | int]:
    """
    Keys for list items, unique by their path text.

    An item keeps its ``id`` when it is the first to use it. Every other item
    falls back to its index, prefixed with ``#`` until the key clashes with
    neither an id in the list nor a key already handed out.
    """
    owners: dict[str, int] = {}
    for index, item in enumerate(items):
        item_id = _item_id(item)
        if item_id is not None:
            owners.setdefault(str(item_id), index)

    keys: list[str | int] = []
    used: set[str] = set()
    for index, item in enumerate(items):
        item_id = _item_id(item)
        if item_id is not None and owners[str(item_id)] == index:
            key: str | int = item_id
        else:
            if item_id is not None:
                logger.warning("duplicate_item_key", key=item_id, index=index)
                metrics_collector.record_diagnostic("duplicate_item_key")
            key = index
            while str(key) in owners or str(key) in used:
                key = f"#{key}"
        used.add(str(key))
        keys.append(key)
    return keys


def interpret(
    node: SchemaNode,
    context: Mapping[str, Any] | None = None,
    dispatch: Dispatch | None = None,
) -> Element | None:
    """Interpret a tree once with a throwaway interpreter (no state carried over)."""
    return Interpreter().render(node, dispatch, context)
