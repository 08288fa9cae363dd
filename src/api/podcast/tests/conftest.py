"""
Shared fixtures and utilities for podcast insights tests.

Fixture payloads in fixtures/ mirror iTunes Search/Lookup API responses.
"""

# Set environment to test mode FIRST, before any imports
import json
import os
from pathlib import Path

import pytest


def pytest_configure(config):
    """Pytest hook to configure test environment before any tests run."""
    os.environ["ENVIRONMENT"] = "test"
    os.environ.setdefault("ENV_FILE", "config/test.env")


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


class FakeITunesClient:
    """
    Stand-in for ITunesClient returning canned results.

    Used as `async with await service.get_client() as client`.
    """

    def __init__(self, search_results=None, lookup_results=None, lookup_errors=None):
        self.search_results = search_results or []
        self.lookup_results = lookup_results or {}
        self.lookup_errors = lookup_errors or {}
        self.search_calls: list[dict] = []
        self.lookup_calls: list[dict] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return None

    async def search(self, term, entity="podcast", limit=50, country=None, media="podcast"):
        self.search_calls.append(
            {"term": term, "entity": entity, "limit": limit, "country": country}
        )
        return self.search_results

    async def lookup(self, collection_id, entity="podcastEpisode", limit=200):
        self.lookup_calls.append({"collection_id": str(collection_id), "limit": limit})
        if str(collection_id) in self.lookup_errors:
            raise self.lookup_errors[str(collection_id)]
        return self.lookup_results.get(str(collection_id), [])


@pytest.fixture
def lookup_payload():
    """Lookup response: podcast collection followed by 12 weekly episodes."""
    return load_fixture("lookup_podcast.json")


@pytest.fixture
def lookup_results(lookup_payload):
    return lookup_payload["results"]


@pytest.fixture
def collection(lookup_results):
    return lookup_results[0]


@pytest.fixture
def raw_episodes(lookup_results):
    return lookup_results[1:]


@pytest.fixture
def search_podcasts_results():
    return load_fixture("search_podcasts.json")["results"]


@pytest.fixture
def search_episodes_results():
    return load_fixture("search_episodes.json")["results"]


@pytest.fixture
def podcast_settings():
    from api.podcast.core import PodcastSettings

    return PodcastSettings(
        base_url="https://itunes.test",
        timeout_seconds=5.0,
        user_agent="podcast-insights-tests/1.0",
        default_country="us",
    )
