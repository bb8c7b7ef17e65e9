"""
PodcastIndex Core - typed query client for the PodcastIndex API.

Every public method follows the same template: build the query path, perform
one request through the transport, decode the JSON envelope, then check the
status flag before handing back the payload.
"""

import json
from collections.abc import Sequence
from datetime import datetime
from typing import TypeVar

from podcastindex.errors import NotFoundError
from podcastindex.models import (
    AddByFeedURLResponse,
    Category,
    CategoryListResponse,
    Episode,
    EpisodeListResponse,
    EpisodeResponse,
    NewPodcast,
    NewPodcastsResponse,
    Podcast,
    PodcastIndexResponse,
    PodcastListResponse,
    PodcastResponse,
    RandomEpisodesResponse,
    RecentPodcast,
    RecentPodcastsResponse,
    TrendingPodcastsResponse,
)
from podcastindex.query import (
    add_before,
    add_clean,
    add_exclude,
    add_filters,
    add_max,
    add_time,
    encode_url,
    encode_value,
    quote_term,
)
from podcastindex.transport import AiohttpTransport, Transport
from podcastindex.utils.get_logger import get_logger

logger = get_logger(__name__)

ResponseT = TypeVar("ResponseT", bound=PodcastIndexResponse)

TimeBound = datetime | int | None


class PodcastIndexClient:
    """
    Query client for the PodcastIndex directory.

    Args:
        transport: Collaborator performing the signed GET; defaults to an
            :class:`AiohttpTransport` reading credentials from the environment.

    Usage:
        async with PodcastIndexClient() as client:
            feeds = await client.search_podcasts_c("python", clean=True, max_results=10)

    The default transport opens an aiohttp session on first use. Outside of
    `async with`, call `await client.close()` when done to release it.
    """

    def __init__(self, transport: Transport | None = None):
        self.transport = transport if transport is not None else AiohttpTransport()

    async def __aenter__(self) -> "PodcastIndexClient":
        enter = getattr(self.transport, "__aenter__", None)
        if enter is not None:
            await enter()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        exit_ = getattr(self.transport, "__aexit__", None)
        if exit_ is not None:
            await exit_(exc_type, exc, tb)

    async def close(self) -> None:
        """Release the transport's resources, if it holds any."""
        close = getattr(self.transport, "close", None)
        if close is not None:
            await close()

    async def _request(
        self,
        path: str,
        response_model: type[ResponseT],
        operation: str,
        not_found: str,
        timeout: float | None = None,
    ) -> ResponseT:
        """
        Perform one request and return the decoded envelope.

        Transport and decode errors propagate unchanged. A reply whose status
        is false raises NotFoundError without its payload being looked at.
        """
        logger.debug(f"{operation}: GET {path}")
        body = await self.transport.get(path, timeout=timeout)
        result = response_model.model_validate(json.loads(body))
        if not result.status:
            logger.info(f"{operation}: {not_found}")
            raise NotFoundError(operation, not_found)
        return result

    # ---------- Search ----------

    async def search_podcasts(self, term: str, timeout: float | None = None) -> list[Podcast]:
        """Search podcasts, authors or owners by term."""
        return await self.search_podcasts_c(term, clean=False, max_results=0, timeout=timeout)

    async def search_podcasts_c(
        self,
        term: str,
        clean: bool = False,
        max_results: int = 0,
        timeout: float | None = None,
    ) -> list[Podcast]:
        """
        Search podcasts with options.

        Args:
            term: Free-text search term
            clean: Only return non-explicit feeds (per itunes:explicit)
            max_results: Number of results; 0 uses the service default
        """
        path = (
            f"search/byterm?q={quote_term(term)}&fulltext"
            f"{add_clean(clean)}{add_max(max_results)}"
        )
        result = await self._request(
            path,
            PodcastListResponse,
            "search_podcasts",
            "Could not find a podcast for that term",
            timeout,
        )
        return result.feeds

    async def search_episodes(self, term: str, timeout: float | None = None) -> list[Episode]:
        """
        All episodes where the given person is mentioned.

        Searches person tags, episode title and description, feed owner and
        feed author.
        """
        path = f"search/byperson?q={quote_term(term)}&fulltext"
        return await self._get_episodes(
            path, "search_episodes", "Could not find a episode for that term", timeout
        )

    # ---------- Podcasts ----------

    async def _get_podcast(
        self, path: str, operation: str, not_found: str, timeout: float | None
    ) -> Podcast:
        result = await self._request(path, PodcastResponse, operation, not_found, timeout)
        if result.feed is None:
            raise NotFoundError(operation, not_found)
        return result.feed

    async def podcast_by_feed_url(self, url: str, timeout: float | None = None) -> Podcast:
        path = f"podcasts/byfeedurl?url={encode_url(url)}&fulltext"
        return await self._get_podcast(
            path, "podcast_by_feed_url", "Could not find a podcast for that feed URL", timeout
        )

    async def podcast_by_feed_id(self, feed_id: str | int, timeout: float | None = None) -> Podcast:
        path = f"podcasts/byfeedid?id={encode_value(feed_id)}&fulltext"
        return await self._get_podcast(
            path, "podcast_by_feed_id", "Could not find a podcast for that id", timeout
        )

    async def podcast_by_itunes_id(
        self, itunes_id: str | int, timeout: float | None = None
    ) -> Podcast:
        path = f"podcasts/byitunesid?id={encode_value(itunes_id)}&fulltext"
        return await self._get_podcast(
            path, "podcast_by_itunes_id", "Could not find a podcast for that iTunes id", timeout
        )

    # ---------- Episodes ----------

    async def _get_episodes(
        self, path: str, operation: str, not_found: str, timeout: float | None
    ) -> list[Episode]:
        result = await self._request(path, EpisodeListResponse, operation, not_found, timeout)
        return result.items

    async def episodes_by_feed_id(
        self,
        feed_id: str | int,
        max_results: int = 0,
        since: TimeBound = None,
        timeout: float | None = None,
    ) -> list[Episode]:
        """
        Episodes of a podcast by its PodcastIndex id.

        Args:
            max_results: Number of episodes; 0 uses the service default
            since: Only episodes published after this time; None or 0 disables the filter
        """
        path = (
            f"episodes/byfeedid?id={encode_value(feed_id)}&fulltext"
            f"{add_max(max_results)}{add_time(since)}"
        )
        return await self._get_episodes(
            path, "episodes_by_feed_id", "Could not get episodes by feed id", timeout
        )

    async def episodes_by_feed_url(
        self,
        feed_url: str,
        max_results: int = 0,
        since: TimeBound = None,
        timeout: float | None = None,
    ) -> list[Episode]:
        """Episodes of a podcast by its feed URL. See episodes_by_feed_id for options."""
        path = (
            f'episodes/byfeedurl?url="{encode_url(feed_url)}"&fulltext'
            f"{add_max(max_results)}{add_time(since)}"
        )
        return await self._get_episodes(
            path, "episodes_by_feed_url", "Could not get episodes by feed URL", timeout
        )

    async def episodes_by_itunes_id(
        self,
        itunes_id: str | int,
        max_results: int = 0,
        since: TimeBound = None,
        timeout: float | None = None,
    ) -> list[Episode]:
        """Episodes of a podcast by its iTunes id. See episodes_by_feed_id for options."""
        path = (
            f"episodes/byitunesid?id={encode_value(itunes_id)}&fulltext"
            f"{add_max(max_results)}{add_time(since)}"
        )
        return await self._get_episodes(
            path, "episodes_by_itunes_id", "Could not get episodes by iTunes id", timeout
        )

    async def episode_by_id(self, episode_id: str | int, timeout: float | None = None) -> Episode:
        path = f"episodes/byid?id={encode_value(episode_id)}&fulltext"
        result = await self._request(
            path, EpisodeResponse, "episode_by_id", "Could not find episode", timeout
        )
        if result.episode is None:
            raise NotFoundError("episode_by_id", "Could not find episode")
        return result.episode

    async def random_episodes(
        self,
        languages: Sequence[str] = (),
        categories: Sequence[str] = (),
        not_categories: Sequence[str] = (),
        max_results: int = 0,
        timeout: float | None = None,
    ) -> list[Episode]:
        """
        Random episodes, optionally filtered.

        Args:
            languages: Language codes the episodes should be in ("unknown" when not known);
                empty for any language
            categories: Category names or ids the episodes should be in; empty for any
            not_categories: Category names or ids to exclude; combinable with categories
            max_results: Number of episodes; 0 uses the service default (1)
        """
        path = (
            f"episodes/random?fulltext{add_max(max_results)}"
            f"{add_filters(languages, categories, not_categories)}"
        )
        result = await self._request(
            path,
            RandomEpisodesResponse,
            "random_episodes",
            "Could not get random episodes",
            timeout,
        )
        return result.episodes

    async def recent_episodes(
        self,
        before: int = 0,
        max_results: int = 0,
        exclude: str = "",
        timeout: float | None = None,
    ) -> list[Episode]:
        """
        Most recent episodes across the whole index.

        Args:
            before: Only episodes older than the episode with this id; 0 to ignore
            max_results: Number of episodes; 0 uses the service default (10)
            exclude: Drop episodes with this text in their title or URL; empty for no filter
        """
        path = (
            f"recent/episodes?fulltext{add_max(max_results)}"
            f"{add_exclude(exclude)}{add_before(before)}"
        )
        return await self._get_episodes(
            path, "recent_episodes", "Could not get recent episodes", timeout
        )

    # ---------- Feeds ----------

    async def recent_podcasts(
        self,
        languages: Sequence[str] = (),
        categories: Sequence[str] = (),
        not_categories: Sequence[str] = (),
        max_results: int = 0,
        since: TimeBound = None,
        timeout: float | None = None,
    ) -> list[RecentPodcast]:
        """Most recently updated podcasts; max_results 0 uses the service default (40)."""
        path = (
            f"recent/feeds?fulltext{add_max(max_results)}"
            f"{add_filters(languages, categories, not_categories)}{add_time(since)}"
        )
        result = await self._request(
            path,
            RecentPodcastsResponse,
            "recent_podcasts",
            "Could not find the recently updated podcasts",
            timeout,
        )
        return result.feeds

    async def new_podcasts(self, timeout: float | None = None) -> list[NewPodcast]:
        """Up to 1000 podcasts added to the index over the last week."""
        result = await self._request(
            "recent/newfeeds",
            NewPodcastsResponse,
            "new_podcasts",
            "Could not find the newest podcasts",
            timeout,
        )
        return result.feeds

    async def categories(self, timeout: float | None = None) -> list[Category]:
        result = await self._request(
            "categories/list",
            CategoryListResponse,
            "categories",
            "Could not find the categories",
            timeout,
        )
        return result.feeds

    async def trending_podcasts(
        self,
        languages: Sequence[str] = (),
        categories: Sequence[str] = (),
        not_categories: Sequence[str] = (),
        max_results: int = 0,
        since: TimeBound = None,
        timeout: float | None = None,
    ) -> list[Podcast]:
        """Top podcasts by recent popularity."""
        path = (
            f"podcasts/trending?fulltext{add_max(max_results)}"
            f"{add_filters(languages, categories, not_categories)}{add_time(since)}"
        )
        result = await self._request(
            path,
            TrendingPodcastsResponse,
            "trending_podcasts",
            "Could not find the trending podcasts",
            timeout,
        )
        return result.feeds

    async def add_by_feed_url(self, feed_url: str, timeout: float | None = None) -> None:
        """Ask the index to add a feed. Succeeds silently or raises NotFoundError."""
        await self._request(
            f"add/byfeedurl?url={encode_url(feed_url)}",
            AddByFeedURLResponse,
            "add_by_feed_url",
            "Could not add podcast by feed URL",
            timeout,
        )
