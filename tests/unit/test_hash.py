"""Tests for hash module."""

import pytest
from hypothesis import given, strategies as st

from core.hash import Algorithm, hash_bytes, hash_string, hash_value


@pytest.mark.unit
@pytest.mark.parametrize("algorithm,length", [
    (Algorithm.XXHASH64, 16),
    (Algorithm.XXH3_64, 16),
    (Algorithm.SHA256, 64),
])
def test_digest_lengths(algorithm, length):
    result = hash_string("display", algorithm)
    assert len(result) == length
    assert hash_string("display", algorithm) == result


@pytest.mark.unit
def test_hash_string_truncate():
    """Test hash truncation."""
    full = hash_string("tasks", Algorithm.SHA256)
    truncated = hash_string("tasks", Algorithm.SHA256, truncate=12)

    assert len(truncated) == 12
    assert full.startswith(truncated)


@pytest.mark.unit
def test_hash_bytes_matches_string():
    assert hash_bytes(b"inputValue") == hash_string("inputValue")


@pytest.mark.unit
def test_unknown_algorithm():
    with pytest.raises(ValueError):
        hash_bytes(b"x", "md5")


@pytest.mark.unit
def test_hash_value_ignores_key_order():
    assert hash_value({"display": "0", "memory": 0}) == hash_value({"memory": 0, "display": "0"})
    assert hash_value({"done": True}) != hash_value({"done": 1})


@given(st.text(), st.text())
def test_hash_collisions_rare(a, b):
    """Property test: distinct strings give distinct SHA256 digests."""
    if a != b:
        assert hash_string(a, Algorithm.SHA256) != hash_string(b, Algorithm.SHA256)
