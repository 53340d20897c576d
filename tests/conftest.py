"""Pytest configuration and shared fixtures."""

import pytest

from .models import Person


@pytest.fixture
def person():
    return Person()
