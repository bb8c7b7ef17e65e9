"""
Shared fixtures and utilities for PodcastIndex client tests.

Reply bodies live in fixtures/ as JSON captured in the shape the
PodcastIndex API returns them.
"""

import json
import os
from pathlib import Path

import pytest

from podcastindex.auth import PodcastIndexAuth
from podcastindex.core import PodcastIndexClient

# Load fixtures from JSON files
FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(filename: str) -> dict:
    """Load a fixture from JSON file.

    Args:
        filename: Name of the fixture file relative to fixtures directory

    Returns:
        Parsed JSON data

    Raises:
        FileNotFoundError: If fixture file doesn't exist
    """
    fixture_path = FIXTURES_DIR / filename
    if not fixture_path.exists():
        raise FileNotFoundError(f"Fixture file not found: {fixture_path}")

    with open(fixture_path) as f:
        return json.load(f)


class FakeTransport:
    """Transport double: records every requested path and replays queued bodies."""

    def __init__(self, *bodies: bytes | dict | Exception):
        self.paths: list[str] = []
        self.timeouts: list[float | None] = []
        self._bodies = list(bodies)

    def queue(self, body: bytes | dict | Exception) -> None:
        self._bodies.append(body)

    async def get(self, path: str, timeout: float | None = None) -> bytes:
        self.paths.append(path)
        self.timeouts.append(timeout)
        if not self._bodies:
            raise AssertionError(f"Unexpected request: {path}")
        body = self._bodies.pop(0)
        if isinstance(body, Exception):
            raise body
        if isinstance(body, dict):
            return json.dumps(body).encode()
        return body

    @property
    def last_path(self) -> str:
        return self.paths[-1]


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def client(fake_transport):
    """PodcastIndexClient wired to the recording fake transport."""
    return PodcastIndexClient(transport=fake_transport)


@pytest.fixture
def mock_podcast_api_key():
    """Mock PodcastIndex API key."""
    return "test_api_key_12345"


@pytest.fixture
def mock_podcast_api_secret():
    """Mock PodcastIndex API secret."""
    return "test_api_secret_67890"


@pytest.fixture
def mock_auth(mock_podcast_api_key, mock_podcast_api_secret):
    """Auth populated with test credentials."""
    return PodcastIndexAuth(
        api_key=mock_podcast_api_key,
        api_secret=mock_podcast_api_secret,
        user_agent="podcastindex-tests/1.0",
    )


@pytest.fixture
def podcast_credentials():
    """
    Real PodcastIndex API credentials for integration tests.

    Requires environment variables:
    - PODCASTINDEX_API_KEY
    - PODCASTINDEX_API_SECRET
    """
    api_key = os.getenv("PODCASTINDEX_API_KEY")
    api_secret = os.getenv("PODCASTINDEX_API_SECRET")

    if not api_key or not api_secret:
        pytest.skip(
            "Integration tests require PODCASTINDEX_API_KEY and PODCASTINDEX_API_SECRET "
            "environment variables to be set"
        )

    return {"api_key": api_key, "api_secret": api_secret}
