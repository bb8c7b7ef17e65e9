"""
Integration tests for the PodcastIndex client.
These tests hit actual PodcastIndex API endpoints with no mocks.

Requirements:
- PODCASTINDEX_API_KEY environment variable must be set
- PODCASTINDEX_API_SECRET environment variable must be set
- Internet connection required

Run with: pytest -m integration
"""

import pytest
import pytest_asyncio

from podcastindex.auth import PodcastIndexAuth
from podcastindex.core import PodcastIndexClient
from podcastindex.errors import NotFoundError
from podcastindex.models import Category, Episode, Podcast
from podcastindex.transport import AiohttpTransport

pytestmark = pytest.mark.integration

# Podcasting 2.0 - stable, well-known feed
KNOWN_FEED_ID = 920666


@pytest_asyncio.fixture
async def live_client(podcast_credentials):
    auth = PodcastIndexAuth(
        api_key=podcast_credentials["api_key"], api_secret=podcast_credentials["api_secret"]
    )
    async with PodcastIndexClient(transport=AiohttpTransport(auth=auth)) as client:
        yield client


@pytest.mark.asyncio
async def test_search_podcasts(live_client):
    feeds = await live_client.search_podcasts_c("podcasting 2.0", clean=False, max_results=5)

    assert 0 < len(feeds) <= 5
    assert all(isinstance(f, Podcast) and f.id > 0 for f in feeds)


@pytest.mark.asyncio
async def test_podcast_and_episodes_by_feed_id(live_client):
    podcast = await live_client.podcast_by_feed_id(KNOWN_FEED_ID)
    episodes = await live_client.episodes_by_feed_id(KNOWN_FEED_ID, max_results=3)

    assert podcast.id == KNOWN_FEED_ID
    assert 0 < len(episodes) <= 3
    assert all(isinstance(e, Episode) and e.feed_id == KNOWN_FEED_ID for e in episodes)


@pytest.mark.asyncio
async def test_categories(live_client):
    categories = await live_client.categories()

    assert len(categories) > 10
    assert all(isinstance(c, Category) and c.name for c in categories)


@pytest.mark.asyncio
async def test_trending_podcasts(live_client):
    feeds = await live_client.trending_podcasts(languages=["en"], max_results=5)

    assert 0 < len(feeds) <= 5


@pytest.mark.asyncio
async def test_unknown_feed_id_is_not_found(live_client):
    with pytest.raises(NotFoundError):
        await live_client.podcast_by_feed_id(0)
