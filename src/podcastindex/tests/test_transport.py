"""
Unit tests for AiohttpTransport.
Most tests mock the aiohttp session. TestRequestOnTheWire runs the real
session against a local aiohttp.web server; no outside network access.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer
from conftest import load_fixture

from podcastindex.auth import PodcastIndexAuth
from podcastindex.core import PodcastIndexClient
from podcastindex.transport import AiohttpTransport

pytestmark = pytest.mark.unit


def _mock_session(status: int = 200, body: bytes = b"{}") -> tuple[MagicMock, MagicMock]:
    mock_response = MagicMock()
    mock_response.status = status
    mock_response.read = AsyncMock(return_value=body)
    if status >= 400:
        mock_response.raise_for_status.side_effect = aiohttp.ClientResponseError(
            request_info=MagicMock(), history=(), status=status, message="error"
        )

    mock_session = MagicMock()
    mock_session.get.return_value.__aenter__.return_value = mock_response
    mock_session.get.return_value.__aexit__.return_value = False
    mock_session.close = AsyncMock()
    return mock_session, mock_response


class TestAiohttpTransport:
    @pytest.mark.asyncio
    async def test_get_signs_and_returns_body(self, mock_auth):
        session, _ = _mock_session(body=b'{"status":"true"}')
        transport = AiohttpTransport(auth=mock_auth, session=session)

        body = await transport.get("categories/list")

        assert body == b'{"status":"true"}'
        session.get.assert_called_once()
        args, kwargs = session.get.call_args
        assert str(args[0]) == "https://api.podcastindex.org/api/1.0/categories/list"
        assert kwargs["headers"]["X-Auth-Key"] == "test_api_key_12345"
        assert "Authorization" in kwargs["headers"]
        assert "timeout" not in kwargs

    @pytest.mark.asyncio
    async def test_per_call_timeout(self, mock_auth):
        session, _ = _mock_session()
        transport = AiohttpTransport(auth=mock_auth, session=session)

        await transport.get("recent/newfeeds", timeout=3)

        _, kwargs = session.get.call_args
        assert kwargs["timeout"].total == 3

    @pytest.mark.asyncio
    async def test_http_error_is_raised_once(self, mock_auth):
        session, _ = _mock_session(status=401)
        transport = AiohttpTransport(auth=mock_auth, session=session)

        with pytest.raises(aiohttp.ClientResponseError) as exc_info:
            await transport.get("categories/list")

        assert exc_info.value.status == 401
        assert session.get.call_count == 1

    @pytest.mark.asyncio
    async def test_external_session_is_not_closed(self, mock_auth):
        session, _ = _mock_session()

        async with AiohttpTransport(auth=mock_auth, session=session) as transport:
            await transport.get("categories/list")

        session.close.assert_not_called()

    @pytest.mark.asyncio
    async def test_owned_session_is_closed(self, mock_auth):
        session, _ = _mock_session()

        with patch("podcastindex.transport.aiohttp.ClientSession", return_value=session):
            async with AiohttpTransport(auth=mock_auth) as transport:
                await transport.get("categories/list")

        session.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_client_end_to_end_through_transport(self, mock_auth):
        reply = {"status": "true", "feeds": [{"id": 1, "name": "Arts"}]}
        session, _ = _mock_session(body=json.dumps(reply).encode())
        client = PodcastIndexClient(transport=AiohttpTransport(auth=mock_auth, session=session))

        categories = await client.categories()

        assert [c.name for c in categories] == ["Arts"]
        args, _ = session.get.call_args
        assert str(args[0]).endswith("/categories/list")

    def test_url_keeps_percent_escapes(self, mock_auth):
        transport = AiohttpTransport(auth=mock_auth)

        url = transport.url_for('search/byterm?q="a%2Cb"&fulltext&cat=Society%2C%20Culture,News')

        assert url.raw_path_qs == (
            "/api/1.0/search/byterm?q=%22a%2Cb%22&fulltext&cat=Society%2C%20Culture,News"
        )


class RecordingServer:
    """Local aiohttp.web server that records the raw request target of each GET."""

    def __init__(self):
        self.raw_paths: list[str] = []
        self.headers: list[dict[str, str]] = []
        self.reply: dict = {"status": "true"}
        app = web.Application()
        app.router.add_get("/{tail:.*}", self._handle)
        self.server = TestServer(app)

    async def _handle(self, request: web.Request) -> web.Response:
        self.raw_paths.append(request.raw_path)
        self.headers.append(dict(request.headers))
        return web.json_response(self.reply)

    def client(self, mock_podcast_api_key: str, mock_podcast_api_secret: str) -> PodcastIndexClient:
        auth = PodcastIndexAuth(
            api_key=mock_podcast_api_key,
            api_secret=mock_podcast_api_secret,
            base_url=str(self.server.make_url("/api/1.0")),
        )
        return PodcastIndexClient(transport=AiohttpTransport(auth=auth))


@pytest_asyncio.fixture
async def recording_server():
    recorder = RecordingServer()
    await recorder.server.start_server()
    yield recorder
    await recorder.server.close()


class TestRequestOnTheWire:
    @pytest.mark.asyncio
    async def test_comma_inside_filter_value_stays_encoded(
        self, recording_server, mock_podcast_api_key, mock_podcast_api_secret
    ):
        recording_server.reply = {"status": "true", "feeds": []}

        async with recording_server.client(mock_podcast_api_key, mock_podcast_api_secret) as client:
            await client.trending_podcasts(categories=["Society, Culture", "News"])

        assert recording_server.raw_paths == [
            "/api/1.0/podcasts/trending?fulltext&cat=Society%2C%20Culture,News"
        ]

    @pytest.mark.asyncio
    async def test_feed_url_query_characters_stay_encoded(
        self, recording_server, mock_podcast_api_key, mock_podcast_api_secret
    ):
        recording_server.reply = load_fixture("podcast_byfeedid.json")

        async with recording_server.client(mock_podcast_api_key, mock_podcast_api_secret) as client:
            await client.podcast_by_feed_url("https://example.com/rss?id=1&x=2")

        assert recording_server.raw_paths == [
            "/api/1.0/podcasts/byfeedurl?url=https://example.com/rss%3Fid%3D1%26x%3D2&fulltext"
        ]

    @pytest.mark.asyncio
    async def test_quoted_feed_url_and_term(
        self, recording_server, mock_podcast_api_key, mock_podcast_api_secret
    ):
        recording_server.reply = {"status": "true", "items": [], "feeds": []}

        async with recording_server.client(mock_podcast_api_key, mock_podcast_api_secret) as client:
            await client.episodes_by_feed_url("https://example.com/rss?id=1&x=2", max_results=2)
            await client.search_podcasts("true crime")

        assert recording_server.raw_paths == [
            "/api/1.0/episodes/byfeedurl?url=%22https://example.com/rss%3Fid%3D1%26x%3D2%22"
            "&fulltext&max=2",
            "/api/1.0/search/byterm?q=%22true%20crime%22&fulltext",
        ]

    @pytest.mark.asyncio
    async def test_request_is_signed(
        self, recording_server, mock_podcast_api_key, mock_podcast_api_secret
    ):
        recording_server.reply = {"status": "true", "feeds": [{"id": 1, "name": "Arts"}]}

        async with recording_server.client(mock_podcast_api_key, mock_podcast_api_secret) as client:
            categories = await client.categories()

        assert [c.name for c in categories] == ["Arts"]
        assert recording_server.raw_paths == ["/api/1.0/categories/list"]
        assert recording_server.headers[0]["X-Auth-Key"] == mock_podcast_api_key
        assert len(recording_server.headers[0]["Authorization"]) == 40

    @pytest.mark.asyncio
    async def test_close_releases_session_without_context_manager(
        self, recording_server, mock_podcast_api_key, mock_podcast_api_secret
    ):
        recording_server.reply = {"status": "true", "feeds": []}
        client = recording_server.client(mock_podcast_api_key, mock_podcast_api_secret)

        await client.new_podcasts()
        session = client.transport._session
        await client.close()

        assert session.closed is True
        assert client.transport._session is None
