"""Tests for ID generation."""

from datetime import datetime, timedelta

import pytest

from core.id import (
    Prefix,
    extract_timestamp,
    is_session_id,
    is_task_id,
    is_valid,
    new_session_id,
    new_task_id,
)


@pytest.mark.unit
def test_prefixes():
    session_id = new_session_id()
    task_id = new_task_id()

    assert session_id.startswith(f"{Prefix.SESSION}_")
    assert task_id.startswith(f"{Prefix.TASK}_")
    assert len(session_id) == len("sess_") + 26


@pytest.mark.unit
def test_ids_are_unique():
    ids = {new_task_id() for _ in range(500)}
    assert len(ids) == 500


@pytest.mark.unit
def test_kind_checks():
    session_id = new_session_id()
    task_id = new_task_id()

    assert is_session_id(session_id)
    assert not is_session_id(task_id)
    assert is_task_id(task_id)
    assert not is_task_id(session_id)


@pytest.mark.unit
@pytest.mark.parametrize("value", ["", "sess_", "sess_short", "task_" + "!" * 26, "nope"])
def test_invalid_ids(value):
    assert not is_valid(value)
    assert extract_timestamp(value) is None


@pytest.mark.unit
def test_extract_timestamp():
    created = extract_timestamp(new_task_id())

    assert isinstance(created, datetime)
    assert abs(datetime.now() - created) < timedelta(minutes=1)
