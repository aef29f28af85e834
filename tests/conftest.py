"""Shared pytest fixtures for the analytics tests.

Provides:
- ``now``: fixed reference time every time-dependent call is pinned to
- ``record_set``: two-class, two-student sample bundle (see ``tests.factories``)
- ``settings``: default settings, independent of any local .env
"""

from __future__ import annotations

from datetime import datetime

import pytest

from config.settings import Settings
from models.records import RecordSet
from tests.factories import NOW, sample_record_set


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def record_set() -> RecordSet:
    """Fresh sample records — isolated per test."""
    return sample_record_set()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)
