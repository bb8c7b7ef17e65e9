"""
PodcastIndex Auth - API credential management and request signing.
Provides the signed headers the transport attaches to every request.
"""

import hashlib
import os
import time

from podcastindex import __version__
from podcastindex.errors import ConfigurationError
from podcastindex.utils.get_logger import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.podcastindex.org/api/1.0"
DEFAULT_USER_AGENT = f"podcastindex-client/{__version__}"


class PodcastIndexAuth:
    """
    Credential holder for the PodcastIndex API.
    Explicit arguments win; otherwise values are lazily read from the environment.
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_secret: str | None = None,
        user_agent: str | None = None,
        base_url: str | None = None,
    ):
        self._api_key = api_key
        self._api_secret = api_secret
        self.user_agent = user_agent or os.getenv("PODCASTINDEX_USER_AGENT") or DEFAULT_USER_AGENT
        self.base_url = (
            base_url or os.getenv("PODCASTINDEX_BASE_URL") or DEFAULT_BASE_URL
        ).rstrip("/")

    @property
    def api_key(self) -> str | None:
        """Lazy-load the API key from ``PODCASTINDEX_API_KEY``."""
        if self._api_key is None:
            self._api_key = os.getenv("PODCASTINDEX_API_KEY")
            if self._api_key:
                logger.info("Loaded PodcastIndex API key via env var")
            else:
                logger.error("PODCASTINDEX_API_KEY not available in environment")
        return self._api_key

    @property
    def api_secret(self) -> str | None:
        """Lazy-load the API secret from ``PODCASTINDEX_API_SECRET``."""
        if self._api_secret is None:
            self._api_secret = os.getenv("PODCASTINDEX_API_SECRET")
            if self._api_secret:
                # Handle escaped characters (e.g., \# becomes #)
                self._api_secret = self._api_secret.replace("\\#", "#")
                logger.info(f"Loaded API secret via env var, length: {len(self._api_secret)}")
            else:
                logger.error("PODCASTINDEX_API_SECRET not available in environment")
        return self._api_secret

    def require_credentials(self) -> tuple[str, str]:
        """
        Return (api_key, api_secret).

        Raises:
            ConfigurationError: If either value is missing
        """
        api_key = self.api_key
        api_secret = self.api_secret
        if not api_key or not api_secret:
            raise ConfigurationError(
                "API key and secret are required "
                "(env: PODCASTINDEX_API_KEY, PODCASTINDEX_API_SECRET)"
            )
        return api_key, api_secret

    def headers(self, now: int | None = None) -> dict[str, str]:
        """Signed request headers for the given epoch second (defaults to now)."""
        api_key, api_secret = self.require_credentials()
        epoch = int(time.time()) if now is None else int(now)
        # The hash is api_key + api_secret + epoch_time, then SHA-1'd
        data_to_hash = api_key + api_secret + str(epoch)
        signature = hashlib.sha1(data_to_hash.encode()).hexdigest()
        return {
            "User-Agent": self.user_agent,
            "X-Auth-Key": api_key,
            "X-Auth-Date": str(epoch),
            "Authorization": signature,
            "Accept": "application/json",
        }

    def get_credentials_status(self) -> dict:
        """
        Get status information about the configured credentials.
        Useful for debugging; never includes the secret itself.

        Returns:
            Dictionary with:
            - has_key: bool - Whether an API key is available
            - has_secret: bool - Whether an API secret is available
            - key_prefix: str | None - First 4 characters of the key (if available)
            - base_url: str - Endpoint requests are sent to
        """
        api_key = self.api_key
        return {
            "has_key": bool(api_key),
            "has_secret": bool(self.api_secret),
            "key_prefix": api_key[:4] if api_key and len(api_key) >= 4 else None,
            "base_url": self.base_url,
        }
