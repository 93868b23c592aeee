"""Rendered output tree."""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

from core.json import safe_json_dumps


@dataclass
class Element:
    """
    One rendered primitive.

    ``path`` addresses the element within its tree (``0.1.2``, list items
    as ``0.3[task_01H...]``) and is how the shell routes events back to it.
    ``key`` is presentation identity only (a list item's ``id`` or index).
    """

    kind: str
    props: dict[str, Any] = field(default_factory=dict)
    children: list["Element"] = field(default_factory=list)
    key: str | int | None = None
    path: str = ""
    on_click: Callable[[], None] | None = field(default=None, repr=False, compare=False)
    on_change: Callable[[Any], None] | None = field(default=None, repr=False, compare=False)

    @property
    def events(self) -> list[str]:
        events = []
        if self.on_click is not None:
            events.append("click")
        if self.on_change is not None:
            events.append("change")
        return events

    def click(self) -> bool:
        """Simulate a click. Returns False when the element is not clickable."""
        if self.on_click is None:
            return False
        self.on_click()
        return True

    def change(self, value: Any) -> bool:
        """Simulate a value change. Returns False when the element takes no input."""
        if self.on_change is None:
            return False
        self.on_change(value)
        return True

    def walk(self) -> Iterator["Element"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, predicate: Callable[["Element"], bool]) -> "Element | None":
        return next((element for element in self.walk() if predicate(element)), None)

    def find_all(self, predicate: Callable[["Element"], bool]) -> list["Element"]:
        return [element for element in self.walk() if predicate(element)]

    def find_by_path(self, path: str) -> "Element | None":
        return self.find(lambda element: element.path == path)

    def find_button(self, label: str) -> "Element | None":
        """First button whose visible text is ``label``."""
        return self.find(
            lambda element: element.kind == "button" and element.text_content() == label
        )

    def text_content(self) -> str:
        """Visible text of this element and its descendants."""
        if self.kind == "text" and self.props.get("content") not in (None, ""):
            return _as_text(self.props["content"])
        if self.kind == "button" and self.props.get("label") not in (None, ""):
            return _as_text(self.props["label"])
        if self.kind == "input":
            return _as_text(self.props.get("value", ""))
        return "".join(child.text_content() for child in self.children)

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable view; callbacks are listed by event name."""
        data: dict[str, Any] = {"kind": self.kind, "path": self.path, "props": self.props}
        if self.key is not None:
            data["key"] = self.key
        if self.events:
            data["events"] = self.events
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data

    def to_json(self, indent: int = 0) -> str:
        return safe_json_dumps(self.to_dict(), indent=indent)


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
