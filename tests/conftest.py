"""Pytest configuration and fixtures for VoxTube tests."""

import sys
from pathlib import Path

import pytest

# Add src and tests to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

from test_helpers import DAY
from voxtube.cache import CacheStore


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Cache root that does not exist yet (the store creates it lazily)."""
    return tmp_path / "cache"


@pytest.fixture
def store(cache_dir: Path) -> CacheStore:
    """Store with the default 7-day TTL."""
    return CacheStore(cache_dir, ttl_seconds=7 * DAY)
