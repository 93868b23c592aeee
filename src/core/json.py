"""JSON encoding and decoding for schema documents and rendered trees.

msgspec decodes schema text, json_repair rescues hand-edited documents with
trailing commas or single quotes, orjson encodes Element trees and the
canonical form used for State Scope fingerprints.
"""

from typing import Any
import json
import re

import msgspec
import orjson
from json_repair import repair_json

_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)
_decoder = msgspec.json.Decoder()


class JSONParseError(Exception):
    """JSON parsing failed."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


def _object_text(text: str) -> str | None:
    """Slice the outermost ``{...}`` out of text, unwrapping a code fence first."""
    fenced = _FENCE.search(text)
    if fenced:
        text = fenced.group(1)

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return None
    return text[start:end + 1]


def _expect_dict(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        raise JSONParseError(f"Expected object, got {type(result).__name__}")
    return result


def extract_json(text: str, repair: bool = True) -> dict[str, Any]:
    """
    Extract and decode the JSON object in text.

    Args:
        text: A schema document, optionally inside a markdown code fence
        repair: Retry with json_repair when strict decoding fails

    Raises:
        JSONParseError: If no object can be decoded
    """
    candidate = _object_text(text.strip())
    if candidate is None:
        raise JSONParseError("No JSON object found in text")

    try:
        return _expect_dict(_decoder.decode(candidate.encode("utf-8")))
    except msgspec.DecodeError as e:
        if not repair:
            raise JSONParseError(f"Invalid JSON: {e}", e) from e

    try:
        repaired = repair_json(candidate, return_objects=True)
    except Exception as e:
        raise JSONParseError(f"JSON repair failed: {e}", e) from e
    return _expect_dict(repaired)


def safe_json_dumps(obj: Any, indent: int = 0) -> str:
    """
    Encode an Element tree or snapshot to JSON text.

    orjson handles the common case; integers beyond 64 bits and other values
    it rejects fall back to the stdlib encoder with ``str`` as the default.
    """
    if indent == 0:
        try:
            return orjson.dumps(obj).decode("utf-8")
        except TypeError:
            pass
    elif indent == 2:
        try:
            return orjson.dumps(obj, option=orjson.OPT_INDENT_2).decode("utf-8")
        except TypeError:
            pass

    return json.dumps(obj, indent=indent or None, ensure_ascii=False, default=str)


def canonical_json(obj: Any) -> bytes:
    """
    Encode object deterministically (sorted keys) for fingerprinting.

    Values orjson cannot encode natively (callables, sets) are encoded
    through their ``repr``.
    """
    return orjson.dumps(obj, option=orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS, default=repr)


def validate_json_size(data: str, max_size: int, name: str = "JSON") -> None:
    """
    Reject documents whose UTF-8 encoding exceeds ``max_size`` bytes.

    Raises:
        JSONParseError: If size exceeds limit
    """
    size = len(data.encode("utf-8"))
    if size > max_size:
        raise JSONParseError(f"{name} size {size} bytes exceeds maximum {max_size} bytes")


def validate_json_depth(obj: Any, max_depth: int = 20) -> None:
    """
    Reject decoded documents nested deeper than ``max_depth`` containers.

    Walks iteratively so a hostile document cannot exhaust the stack here.

    Raises:
        JSONParseError: If depth exceeds limit
    """
    stack = [(obj, 0)]
    while stack:
        value, depth = stack.pop()
        if depth > max_depth:
            raise JSONParseError(f"JSON nesting depth {depth} exceeds maximum {max_depth}")
        if isinstance(value, dict):
            stack.extend((child, depth + 1) for child in value.values())
        elif isinstance(value, list):
            stack.extend((child, depth + 1) for child in value)
