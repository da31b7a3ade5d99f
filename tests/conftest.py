"""Shared fixtures for the resolver configuration tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

TESTDATA = Path(__file__).parent / "testdata"


@pytest.fixture
def testdata() -> Path:
    """Directory holding the resolver file fixtures."""
    return TESTDATA


@pytest.fixture
def hostname() -> Callable[[], str]:
    """Host name provider for a host inside domain.local."""
    return lambda: "host.domain.local"
