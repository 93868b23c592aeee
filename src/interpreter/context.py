"""
Interpretation Context
Layered, read-only name -> value mapping flowing down the schema tree.
"""

from typing import Any, Iterator, Mapping, Sequence


class _Missing:
    """Marker for a path that does not resolve."""

    _instance = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class Context(Mapping[str, Any]):
    """
    Immutable layered mapping.

    Each layer holds the values introduced at one point of the tree (a State
    scope, a list item, an event). Lookups walk from the innermost layer
    outwards, so the nearest layer wins on collision. Extending never touches
    ancestor layers.

    Examples:
        >>> root = Context({"display": "0"})
        >>> child = root.extend({"display": "7", "buttonLabel": "7"})
        >>> child["display"], root["display"]
        ('7', '0')
    """

    __slots__ = ("_values", "_parent")

    def __init__(
        self, values: Mapping[str, Any] | None = None, parent: "Context | None" = None
    ) -> None:
        self._values: dict[str, Any] = dict(values) if values else {}
        self._parent = parent

    def __getitem__(self, key: str) -> Any:
        layer: Context | None = self
        while layer is not None:
            if key in layer._values:
                return layer._values[key]
            layer = layer._parent
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        layer: Context | None = self
        while layer is not None:
            if key in layer._values:
                return True
            layer = layer._parent
        return False

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        layer: Context | None = self
        while layer is not None:
            for key in layer._values:
                if key not in seen:
                    seen.add(key)
                    yield key
            layer = layer._parent

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"Context({self.to_dict()!r})"

    @property
    def parent(self) -> "Context | None":
        return self._parent

    @property
    def local(self) -> Mapping[str, Any]:
        """Values introduced by this layer only."""
        return dict(self._values)

    def extend(self, values: Mapping[str, Any] | None) -> "Context":
        """Return a child context with ``values`` layered over this one."""
        if not values:
            return self
        return Context(values, parent=self)

    def to_dict(self) -> dict[str, Any]:
        """Flatten all layers (innermost wins)."""
        return {key: self[key] for key in self}

    def lookup(self, path: str) -> Any:
        """Resolve a dotted path, returning ``MISSING`` when any segment fails."""
        head, _, rest = path.partition(".")
        if head not in self:
            return MISSING
        value = self[head]
        return lookup_path(value, rest) if rest else value


def lookup_path(value: Any, path: str) -> Any:
    """
    Walk ``path`` (dot separated) through nested mappings and sequences.

    Supports mapping keys, numeric indices into lists/tuples and ``length``
    on strings and sequences. Returns ``MISSING`` on the first segment that
    does not resolve, including any step through ``None``.
    """
    current = value
    for segment in path.split("."):
        if current is None or current is MISSING:
            return MISSING
        if isinstance(current, Mapping):
            current = current[segment] if segment in current else MISSING
            continue
        if isinstance(current, (str, Sequence)) and segment == "length":
            current = len(current)
            continue
        if isinstance(current, Sequence) and not isinstance(current, str) and segment.isdigit():
            index = int(segment)
            current = current[index] if index < len(current) else MISSING
            continue
        return MISSING
    return current
