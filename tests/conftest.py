"""Test configuration and fixtures."""

from __future__ import annotations

import pytest
from helpers import InMemoryLabelStore


@pytest.fixture
def memory_store() -> InMemoryLabelStore:
    return InMemoryLabelStore()
