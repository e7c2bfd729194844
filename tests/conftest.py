"""Shared fixtures."""

from datetime import date

import pytest

from animanga_tui.models import Entry, StoreFile, WatchStatus
from animanga_tui.store import Store


def make_entry(name, status=WatchStatus.WATCHING, total=12, completed=0, **kwargs):
    return Entry(
        name=name,
        status=status,
        total_units=total,
        completed_units=completed,
        started=kwargs.pop("started", date(2023, 4, 1)),
        **kwargs,
    )


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "db.json"


@pytest.fixture
def store(db_path):
    """Two anime (one completed, one watching) and one manga."""
    data = StoreFile(
        anime=[
            make_entry("A", WatchStatus.COMPLETED, total=12, completed=12),
            make_entry("B", WatchStatus.WATCHING, total=24, completed=5),
        ],
        manga=[
            make_entry("M", WatchStatus.PLAN_TO_WATCH, total=0, completed=0),
        ],
    )
    return Store(db_path, data)


@pytest.fixture
def empty_store(db_path):
    return Store(db_path)
