"""Fast hashing for non-cryptographic use cases.

State Scope fingerprints are xxhash64 digests of canonical JSON, so two
initial states that differ only in key order hash the same.
"""

from enum import Enum
from typing import Any, Callable
import hashlib

import xxhash

from .json import canonical_json


class Algorithm(str, Enum):
    """Supported hash algorithms."""

    XXHASH64 = "xxhash64"  # Default, fast
    XXH3_64 = "xxh3_64"
    SHA256 = "sha256"  # Stable across xxhash releases


_DIGESTS: dict[Algorithm, Callable[[bytes], str]] = {
    Algorithm.XXHASH64: lambda data: xxhash.xxh64(data).hexdigest(),
    Algorithm.XXH3_64: lambda data: xxhash.xxh3_64(data).hexdigest(),
    Algorithm.SHA256: lambda data: hashlib.sha256(data).hexdigest(),
}


def hash_bytes(
    data: bytes,
    algorithm: Algorithm = Algorithm.XXHASH64,
    truncate: int | None = None,
) -> str:
    """
    Hash bytes to hex digest.

    Raises:
        ValueError: If the algorithm is unknown
    """
    try:
        digest = _DIGESTS[Algorithm(algorithm)](data)
    except (KeyError, ValueError) as e:
        raise ValueError(f"Unknown algorithm: {algorithm}") from e
    return digest[:truncate] if truncate else digest


def hash_string(text: str, algorithm: Algorithm = Algorithm.XXHASH64, truncate: int | None = None) -> str:
    """
    Hash string to hex digest.

    Examples:
        >>> len(hash_string("display"))
        16
        >>> len(hash_string("display", Algorithm.SHA256, truncate=12))
        12
    """
    return hash_bytes(text.encode("utf-8"), algorithm, truncate)


def hash_value(value: Any, algorithm: Algorithm = Algorithm.XXHASH64) -> str:
    """Hash a JSON-like value independently of mapping key order."""
    return hash_bytes(canonical_json(value), algorithm)


__all__ = ["Algorithm", "hash_bytes", "hash_string", "hash_value"]
