#!/usr/bin/env python3
"""
Command line access to the PodcastIndex API.

Usage:
    podcastindex search "true crime" --clean --max 5
    podcastindex episodes --feed-id 920666 --max 3 --since 2024-01-01
    podcastindex trending --lang en --cat News --max 10
    podcastindex categories

Credentials come from PODCASTINDEX_API_KEY / PODCASTINDEX_API_SECRET, or a
.env file found from the current directory upwards.

Exit status: 0 ok, 1 not found, 2 missing credentials, 3 request failed,
4 undecodable reply.
"""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

import aiohttp
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ValidationError

from podcastindex.core import PodcastIndexClient
from podcastindex.errors import ConfigurationError, NotFoundError
from podcastindex.utils.get_logger import get_logger, set_level

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_CONFIG = 2
EXIT_REQUEST_FAILED = 3
EXIT_BAD_REPLY = 4


def _since(value: str) -> datetime | int:
    """Accept epoch seconds or an ISO date/datetime (naive means UTC)."""
    if value.isdigit():
        return int(value)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid time: {value!r}") from e
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def _csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def _add_filter_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--lang", type=_csv, default=[], help="Comma-separated language codes")
    parser.add_argument("--cat", type=_csv, default=[], help="Comma-separated categories")
    parser.add_argument(
        "--notcat", type=_csv, default=[], help="Comma-separated categories to exclude"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="podcastindex", description=__doc__.split("\n")[1])
    parser.add_argument("--timeout", type=float, default=None, help="Per-request timeout (s)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log request paths")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("search", help="Search podcasts by term")
    p.add_argument("term")
    p.add_argument("--clean", action="store_true", help="Exclude explicit feeds")
    p.add_argument("--max", type=int, default=0)

    p = sub.add_parser("search-person", help="Episodes mentioning a person")
    p.add_argument("term")

    p = sub.add_parser("podcast", help="Look up one podcast")
    key = p.add_mutually_exclusive_group(required=True)
    key.add_argument("--feed-id")
    key.add_argument("--feed-url")
    key.add_argument("--itunes-id")

    p = sub.add_parser("episodes", help="Episodes of one podcast")
    key = p.add_mutually_exclusive_group(required=True)
    key.add_argument("--feed-id")
    key.add_argument("--feed-url")
    key.add_argument("--itunes-id")
    p.add_argument("--max", type=int, default=0)
    p.add_argument("--since", type=_since, default=None)

    p = sub.add_parser("episode", help="One episode by id")
    p.add_argument("episode_id")

    p = sub.add_parser("random", help="Random episodes")
    _add_filter_args(p)
    p.add_argument("--max", type=int, default=0)

    p = sub.add_parser("recent-episodes", help="Most recent episodes")
    p.add_argument("--max", type=int, default=0)
    p.add_argument("--exclude", default="")
    p.add_argument("--before", type=int, default=0)

    p = sub.add_parser("recent-podcasts", help="Recently updated podcasts")
    _add_filter_args(p)
    p.add_argument("--max", type=int, default=0)
    p.add_argument("--since", type=_since, default=None)

    sub.add_parser("new-podcasts", help="Podcasts added during the last week")
    sub.add_parser("categories", help="List categories")

    p = sub.add_parser("trending", help="Trending podcasts")
    _add_filter_args(p)
    p.add_argument("--max", type=int, default=0)
    p.add_argument("--since", type=_since, default=None)

    p = sub.add_parser("add", help="Add a feed to the index")
    p.add_argument("feed_url")

    return parser


async def run_command(client: PodcastIndexClient, args: argparse.Namespace) -> Any:
    """Dispatch parsed arguments to the matching client call."""
    timeout = args.timeout
    command = args.command

    if command == "search":
        return await client.search_podcasts_c(args.term, args.clean, args.max, timeout=timeout)
    if command == "search-person":
        return await client.search_episodes(args.term, timeout=timeout)
    if command == "podcast":
        if args.feed_id:
            return await client.podcast_by_feed_id(args.feed_id, timeout=timeout)
        if args.feed_url:
            return await client.podcast_by_feed_url(args.feed_url, timeout=timeout)
        return await client.podcast_by_itunes_id(args.itunes_id, timeout=timeout)
    if command == "episodes":
        if args.feed_id:
            return await client.episodes_by_feed_id(
                args.feed_id, args.max, args.since, timeout=timeout
            )
        if args.feed_url:
            return await client.episodes_by_feed_url(
                args.feed_url, args.max, args.since, timeout=timeout
            )
        return await client.episodes_by_itunes_id(
            args.itunes_id, args.max, args.since, timeout=timeout
        )
    if command == "episode":
        return await client.episode_by_id(args.episode_id, timeout=timeout)
    if command == "random":
        return await client.random_episodes(
            args.lang, args.cat, args.notcat, args.max, timeout=timeout
        )
    if command == "recent-episodes":
        return await client.recent_episodes(args.before, args.max, args.exclude, timeout=timeout)
    if command == "recent-podcasts":
        return await client.recent_podcasts(
            args.lang, args.cat, args.notcat, args.max, args.since, timeout=timeout
        )
    if command == "new-podcasts":
        return await client.new_podcasts(timeout=timeout)
    if command == "categories":
        return await client.categories(timeout=timeout)
    if command == "trending":
        return await client.trending_podcasts(
            args.lang, args.cat, args.notcat, args.max, args.since, timeout=timeout
        )
    if command == "add":
        await client.add_by_feed_url(args.feed_url, timeout=timeout)
        return {"added": args.feed_url}
    raise ValueError(f"Unknown command: {command}")


def to_jsonable(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(result, list):
        return [to_jsonable(item) for item in result]
    return result


async def _run(args: argparse.Namespace) -> Any:
    async with PodcastIndexClient() as client:
        return await run_command(client, args)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    dotenv_path = find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path)
    if args.verbose:
        set_level(logging.DEBUG)

    try:
        result = asyncio.run(_run(args))
    except ConfigurationError as e:
        logger.error(str(e))
        return EXIT_CONFIG
    except NotFoundError as e:
        logger.warning(f"{e.operation}: {e.message}")
        return EXIT_NOT_FOUND
    except aiohttp.ClientResponseError as e:
        logger.error(f"API request failed with status {e.status}: {e.message}")
        return EXIT_REQUEST_FAILED
    except aiohttp.ClientError as e:
        logger.error(f"API request failed: {e}")
        return EXIT_REQUEST_FAILED
    except TimeoutError:
        logger.error("API request timed out")
        return EXIT_REQUEST_FAILED
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Could not decode the API reply: {e}")
        return EXIT_BAD_REPLY

    json.dump(to_jsonable(result), sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
