"""
PodcastIndex Models - Pydantic models for PodcastIndex data structures
Follows Pydantic 2.0 patterns; attributes are snake_case with the service's
camelCase field names as aliases.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Keys under which the service places the result payload
_PAYLOAD_KEYS = frozenset({"feed", "feeds", "items", "episode", "episodes"})


def _ts_to_dt(ts: int | None) -> datetime | None:
    if not ts:
        return None
    try:
        return datetime.fromtimestamp(int(ts), tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


class PodcastIndexModel(BaseModel):
    """Base for every record and envelope decoded from the service."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")


# ============================================================================
# Records
# ============================================================================


class Podcast(PodcastIndexModel):
    """A podcast feed as returned by the search, lookup and trending endpoints."""

    # Core identification
    id: int = Field(default=0, description="PodcastIndex feed ID")
    podcast_guid: str | None = Field(default=None, alias="podcastGuid")
    title: str = Field(default="", description="Podcast title")
    url: str = Field(default="", description="Current RSS feed URL")
    original_url: str | None = Field(default=None, alias="originalUrl")
    link: str | None = Field(default=None, description="Podcast website URL")

    # Metadata
    description: str | None = None
    author: str | None = None
    owner_name: str | None = Field(default=None, alias="ownerName")
    image: str | None = None
    artwork: str | None = None
    generator: str | None = None
    language: str | None = None
    explicit: bool | None = None
    type: int | None = Field(default=None, description="0 = RSS, 1 = Atom")
    medium: str | None = None
    content_type: str | None = Field(default=None, alias="contentType")
    categories: dict[str, str] | None = Field(
        default=None, description="Category id to category name"
    )

    # Crawl state
    last_update_time: int | None = Field(default=None, alias="lastUpdateTime")
    last_crawl_time: int | None = Field(default=None, alias="lastCrawlTime")
    last_parse_time: int | None = Field(default=None, alias="lastParseTime")
    last_good_http_status_time: int | None = Field(default=None, alias="lastGoodHttpStatusTime")
    last_http_status: int | None = Field(default=None, alias="lastHttpStatus")
    newest_item_publish_time: int | None = Field(default=None, alias="newestItemPublishTime")
    dead: int | None = None
    locked: int | None = None
    crawl_errors: int | None = Field(default=None, alias="crawlErrors")
    parse_errors: int | None = Field(default=None, alias="parseErrors")
    image_url_hash: int | None = Field(default=None, alias="imageUrlHash")

    # Counts and IDs
    itunes_id: int | None = Field(default=None, alias="itunesId")
    episode_count: int | None = Field(default=None, alias="episodeCount")
    trend_score: int | None = Field(default=None, alias="trendScore")

    @property
    def last_updated(self) -> datetime | None:
        return _ts_to_dt(self.last_update_time)


class Episode(PodcastIndexModel):
    """A single podcast episode."""

    id: int = Field(default=0, description="PodcastIndex episode ID")
    title: str = ""
    link: str | None = None
    description: str | None = None
    guid: str | None = None

    # Publication
    date_published: int | None = Field(default=None, alias="datePublished")
    date_published_pretty: str | None = Field(default=None, alias="datePublishedPretty")
    date_crawled: int | None = Field(default=None, alias="dateCrawled")

    # Media file
    enclosure_url: str | None = Field(default=None, alias="enclosureUrl")
    enclosure_type: str | None = Field(default=None, alias="enclosureType")
    enclosure_length: int | None = Field(default=None, alias="enclosureLength")
    duration: int | None = Field(default=None, description="Duration in seconds")

    # Classification
    explicit: int | None = None
    episode: int | None = None
    episode_type: str | None = Field(default=None, alias="episodeType")
    season: int | None = None
    image: str | None = None

    # Parent podcast
    feed_itunes_id: int | None = Field(default=None, alias="feedItunesId")
    feed_image: str | None = Field(default=None, alias="feedImage")
    feed_id: int | None = Field(default=None, alias="feedId")
    feed_title: str | None = Field(default=None, alias="feedTitle")
    feed_language: str | None = Field(default=None, alias="feedLanguage")

    # Podcasting 2.0 extras
    chapters_url: str | None = Field(default=None, alias="chaptersUrl")
    transcript_url: str | None = Field(default=None, alias="transcriptUrl")

    @property
    def published(self) -> datetime | None:
        return _ts_to_dt(self.date_published)


class RecentPodcast(PodcastIndexModel):
    """A feed from ``recent/feeds``; a lighter shape than :class:`Podcast`."""

    id: int = 0
    url: str = ""
    title: str = ""
    newest_item_publish_time: int | None = Field(default=None, alias="newestItemPublishTime")
    oldest_item_publish_time: int | None = Field(default=None, alias="oldestItemPublishTime")
    description: str | None = None
    author: str | None = None
    image: str | None = None
    itunes_id: int | None = Field(default=None, alias="itunesId")
    language: str | None = None
    categories: dict[str, str] | None = None

    @property
    def newest_item_published(self) -> datetime | None:
        return _ts_to_dt(self.newest_item_publish_time)


class NewPodcast(PodcastIndexModel):
    """A feed added to the index during the last week (``recent/newfeeds``)."""

    id: int = 0
    url: str = ""
    time_added: int | None = Field(default=None, alias="timeAdded")
    status: str | None = None
    content_hash: str | None = Field(default=None, alias="contentHash")
    language: str | None = None
    image: str | None = None

    @property
    def added(self) -> datetime | None:
        return _ts_to_dt(self.time_added)


class Category(PodcastIndexModel):
    id: int
    name: str


# ============================================================================
# Response envelopes
# Every reply carries a status flag; the payload key differs per endpoint.
# ============================================================================


class PodcastIndexResponse(PodcastIndexModel):
    """Fields shared by every PodcastIndex reply."""

    status: bool = Field(default=True, description="false means the payload is absent")
    description: str | None = None

    @model_validator(mode="before")
    @classmethod
    def drop_empty_payload(cls, data: Any) -> Any:
        """The service sends ``null`` or ``[]`` for a missing payload; treat both as absent."""
        if isinstance(data, dict):
            return {
                k: v
                for k, v in data.items()
                if not (k in _PAYLOAD_KEYS and (v is None or v == [] or v == {}))
            }
        return data

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, value: Any) -> Any:
        """Accept the service's "true"/"false" literals as well as JSON booleans."""
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized == "false":
                return False
            if normalized == "true":
                return True
        return value


class PodcastListResponse(PodcastIndexResponse):
    feeds: list[Podcast] = Field(default_factory=list)
    count: int | None = None
    query: Any = None


class PodcastResponse(PodcastIndexResponse):
    feed: Podcast | None = None
    query: Any = None


class EpisodeListResponse(PodcastIndexResponse):
    items: list[Episode] = Field(default_factory=list)
    count: int | None = None
    query: Any = None


class EpisodeResponse(PodcastIndexResponse):
    episode: Episode | None = None
    id: str | int | None = None


class RandomEpisodesResponse(PodcastIndexResponse):
    episodes: list[Episode] = Field(default_factory=list)
    count: int | None = None
    max: str | int | None = None


class RecentPodcastsResponse(PodcastIndexResponse):
    feeds: list[RecentPodcast] = Field(default_factory=list)
    count: int | None = None
    max: str | int | None = None
    since: str | int | None = None


class NewPodcastsResponse(PodcastIndexResponse):
    feeds: list[NewPodcast] = Field(default_factory=list)
    count: int | None = None
    max: str | int | None = None
    since: str | int | None = None


class CategoryListResponse(PodcastIndexResponse):
    feeds: list[Category] = Field(default_factory=list)
    count: int | None = None


class TrendingPodcastsResponse(PodcastIndexResponse):
    feeds: list[Podcast] = Field(default_factory=list)
    count: int | None = None
    max: str | int | None = None
    since: str | int | None = None


class AddByFeedURLResponse(PodcastIndexResponse):
    feed_id: int | None = Field(default=None, alias="feedId")
    existed: bool | None = None
