"""
Command-line interface for the feed splitter.

Usage:
    feed-splitter serve                    # Serve per-show feeds, refreshing periodically
    feed-splitter serve --port 8080 --refresh 60
    feed-splitter split                    # Fetch once and write <slug>.xml files
    feed-splitter split --output-dir out/
    feed-splitter shows                    # List the shows found in the feed
    feed-splitter shows --output-json      # JSON output for automation
    feed-splitter --url file:///tmp/feed.xml shows
"""

import argparse
import json
import sys
from pathlib import Path

from feed_splitter.config import get_config
from feed_splitter.errors import CorruptFeedError, FeedFetchError
from feed_splitter.logging_utils import build_uvicorn_log_config, configure_logging


def _load_config(args):
    config = get_config()
    overrides = {}
    if args.url:
        overrides["feed_url"] = args.url
    if args.debug:
        overrides["debug"] = True
    if overrides:
        config = config.model_copy(update=overrides)
    configure_logging(config.debug)
    return config


def _split_or_exit(config):
    from feed_splitter.feeds.splitter import split_feed
    from feed_splitter.ingestion.fetcher import fetch_feed

    try:
        document = fetch_feed(config.feed_url, timeout=config.fetch_timeout)
        return split_feed(document)
    except FeedFetchError as exc:
        print(f"ERROR: error reading feed: {exc}")
        sys.exit(1)
    except CorruptFeedError as exc:
        print(f"ERROR: error parsing feed: {exc}")
        sys.exit(1)


def cmd_serve(args):
    """Serve per-show feeds over HTTP and refresh them in the background."""
    import uvicorn

    from feed_splitter.feeds.registry import FeedRegistry
    from feed_splitter.server.app import create_app
    from feed_splitter.triggers.refresh import FeedRefresher

    config = _load_config(args)
    host = args.host or config.host
    port = args.port if args.port is not None else config.port
    interval = args.refresh if args.refresh is not None else config.refresh_interval

    registry = FeedRegistry()
    refresher = FeedRefresher(
        config.feed_url,
        registry,
        interval=interval,
        timeout=config.fetch_timeout,
    )
    app = create_app(registry, refresher)

    print(f"Splitting feed: {config.feed_url}")
    print(f"Serving on http://{host}:{port}/ (refresh every {interval:g}s)")
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_config=build_uvicorn_log_config(config.debug),
        timeout_graceful_shutdown=5,
    )


def cmd_split(args):
    """Fetch the feed once and write one <slug>.xml file per show."""
    config = _load_config(args)
    output_dir = Path(args.output_dir) if args.output_dir else config.output_dir
    result = _split_or_exit(config)

    output_dir.mkdir(parents=True, exist_ok=True)
    for slug in sorted(result.shows):
        feed = result.shows[slug]
        (output_dir / feed.file_name).write_bytes(feed.data)

    if args.output_json:
        print(json.dumps({
            "output_dir": str(output_dir),
            "shows": [result.shows[s].summary().to_dict() for s in sorted(result.shows)],
            "total_episodes": result.total_episodes,
            "dropped_episodes": result.dropped_episodes,
        }, indent=2, ensure_ascii=False))
        return

    print(f"Wrote {len(result.shows)} show feed(s) to {output_dir}")
    if result.dropped_episodes:
        print(f"Dropped {result.dropped_episodes} unclassified episode(s)")


def cmd_shows(args):
    """List the shows found in the feed."""
    config = _load_config(args)
    result = _split_or_exit(config)
    summaries = [result.shows[s].summary() for s in sorted(result.shows)]

    # JSON output mode (for automation)
    if args.output_json:
        print(json.dumps({
            "shows": [s.to_dict() for s in summaries],
            "total_episodes": result.total_episodes,
            "dropped_episodes": result.dropped_episodes,
        }, indent=2, ensure_ascii=False))
        return

    if not summaries:
        print("No shows found.")
    for s in summaries:
        print(f"  - {s.slug}.xml  {s.name} ({s.episode_count} episodes)")
    print(f"Episodes: {result.total_episodes}, unclassified: {result.dropped_episodes}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="feed-splitter",
        description="Split an aggregated podcast feed into per-show feeds",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Feed to fetch (http, https or file URL; default from config)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # serve
    sub_serve = subparsers.add_parser("serve", help="Serve per-show feeds over HTTP")
    sub_serve.add_argument("--host", default=None, help="Address to serve on")
    sub_serve.add_argument("--port", type=int, default=None, help="Port to serve on")
    sub_serve.add_argument(
        "--refresh",
        type=float,
        default=None,
        help="Feed refresh interval in seconds",
    )
    sub_serve.set_defaults(func=cmd_serve)

    # split
    sub_split = subparsers.add_parser("split", help="Write per-show feed files once")
    sub_split.add_argument(
        "--output-dir",
        default=None,
        help="Directory to write <slug>.xml files to",
    )
    sub_split.add_argument(
        "--output-json",
        action="store_true",
        default=False,
        help="Output result as JSON (for automation)",
    )
    sub_split.set_defaults(func=cmd_split)

    # shows
    sub_shows = subparsers.add_parser("shows", help="List the shows found in the feed")
    sub_shows.add_argument(
        "--output-json",
        action="store_true",
        default=False,
        help="Output result as JSON (for automation)",
    )
    sub_shows.set_defaults(func=cmd_shows)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    args.func(args)


if __name__ == "__main__":
    main()
