"""Command-line entry point — build a feed from CSV tabs or feed URLs and print it."""

from __future__ import annotations

import argparse
import csv
import json
import logging
import sys
from functools import partial
from pathlib import Path
from urllib.parse import urlencode

from crssnt.config import Config, load_config
from crssnt.exceptions import NoSourcesAvailable
from crssnt.feed.builder import SheetTab, build_multi_feed, build_sheet_feed
from crssnt.ingestion.fetch import fetch_feed_text
from crssnt.ingestion.registry import registered_modes
from crssnt.models import Feed
from crssnt.render import FORMATS, render_feed

logger = logging.getLogger("crssnt")


def _setup_logging(log_level: str, log_format: str) -> None:
    """Configure root logger based on config."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    if log_format == "json":
        formatter = logging.Formatter(
            json.dumps(
                {
                    "time": "%(asctime)s",
                    "level": "%(levelname)s",
                    "logger": "%(name)s",
                    "message": "%(message)s",
                }
            )
        )
    else:
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="crssnt", description=__doc__)
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--format", choices=FORMATS, default="rss")
    common.add_argument("--compact", action="store_true", help="token-minimized output")
    common.add_argument("--preview", action="store_true", help="apply the tighter preview limits")
    common.add_argument("--group", action="store_true", help="keep items grouped by source")

    sub = parser.add_subparsers(dest="command", required=True)

    sheet = sub.add_parser("sheet", parents=[common], help="feed from CSV files (one per tab)")
    sheet.add_argument("files", nargs="+", type=Path)
    sheet.add_argument("--mode", choices=registered_modes(), default="auto")
    sheet.add_argument("--title", default=None)
    sheet.add_argument("--sheet-id", default=None)

    feeds = sub.add_parser("feeds", parents=[common], help="aggregate RSS/Atom feeds")
    feeds.add_argument("urls", nargs="+")

    return parser


def _limits(config: Config, preview: bool) -> tuple[int, int]:
    if preview:
        return config.preview_item_limit, config.preview_char_limit
    return config.item_limit, config.char_limit


def _read_csv(path: Path) -> list[list[str]]:
    with path.open(newline="", encoding="utf-8") as fh:
        return list(csv.reader(fh))


def _sheet_feed(args: argparse.Namespace, config: Config) -> Feed:
    tabs = [SheetTab(name=path.stem, rows=_read_csv(path)) for path in args.files]
    sheet_id = args.sheet_id or args.files[0].stem
    item_limit, char_limit = _limits(config, args.preview)
    return build_sheet_feed(
        tabs,
        mode=args.mode,
        sheet_title=args.title or args.files[0].stem,
        sheet_id=sheet_id,
        request_url=f"{config.base_url}/sheet?{urlencode({'id': sheet_id, 'mode': args.mode})}",
        item_limit=item_limit,
        char_limit=char_limit,
        max_rows=config.max_sheet_rows,
        group_by_feed=args.group,
    )


def _multi_feed(args: argparse.Namespace, config: Config) -> Feed:
    item_limit, char_limit = _limits(config, args.preview)
    query = urlencode([("url", url) for url in args.urls])
    return build_multi_feed(
        args.urls,
        item_limit=item_limit,
        char_limit=char_limit,
        group_by_feed=args.group,
        fetch=partial(fetch_feed_text, timeout=config.fetch_timeout_seconds),
        max_sources=config.max_sources,
        request_url=f"{config.base_url}/feed?{query}",
    )


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, build the feed, write the rendered document to stdout."""
    args = _build_parser().parse_args(argv)
    config = load_config()
    _setup_logging(config.log_level, config.log_format)

    try:
        if args.command == "sheet":
            feed = _sheet_feed(args, config)
        else:
            feed = _multi_feed(args, config)
    except (NoSourcesAvailable, ValueError, OSError) as exc:
        logger.error("Could not build feed: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    rendered = render_feed(feed, args.format, compact=args.compact)
    logger.info("Rendered %d items as %s", len(feed.items), rendered.content_type)
    sys.stdout.write(rendered.body)
    if not rendered.body.endswith("\n"):
        sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
