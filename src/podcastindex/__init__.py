"""
PodcastIndex client package - typed async access to the PodcastIndex API.

This package provides:
- PodcastIndexClient: one coroutine per directory query
- Models: Pydantic models for podcasts, episodes, categories and reply envelopes
- AiohttpTransport: default signed HTTP transport
"""

__version__ = "0.1.0"

from podcastindex.auth import PodcastIndexAuth  # noqa: E402
from podcastindex.core import PodcastIndexClient  # noqa: E402
from podcastindex.errors import (  # noqa: E402
    ConfigurationError,
    NotFoundError,
    PodcastIndexError,
)
from podcastindex.models import (  # noqa: E402
    Category,
    Episode,
    NewPodcast,
    Podcast,
    RecentPodcast,
)
from podcastindex.transport import AiohttpTransport, Transport  # noqa: E402

__all__ = [
    # Client
    "PodcastIndexClient",
    "PodcastIndexAuth",
    "AiohttpTransport",
    "Transport",
    # Models
    "Podcast",
    "Episode",
    "RecentPodcast",
    "NewPodcast",
    "Category",
    # Errors
    "PodcastIndexError",
    "NotFoundError",
    "ConfigurationError",
]
