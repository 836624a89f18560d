"""Command line interface for running lead searches outside the desktop app."""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from .config import ConfigurationError, load_settings
from .factory import build_history, build_orchestrators
from .io import write_export
from .models import Coordinates

LOGGER = logging.getLogger(__name__)


def _coordinates_arg(value: str) -> Coordinates:
    latitude, _, longitude = value.partition(",")
    coordinates = Coordinates.from_values(latitude, longitude) if longitude else None
    if coordinates is None:
        raise argparse.ArgumentTypeError(f"expected LAT,LNG but got '{value}'")
    return coordinates


def build_parser(prog: str | None = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Find local business leads on Google Maps and enrich them with website contacts",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a configuration file (YAML or JSON); defaults to $LEAD_FINDER_CONFIG",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Run a search and optionally export the results")
    search.add_argument("query", help="What to search for, e.g. 'plumbers in Springfield'")
    search.add_argument(
        "--output",
        default=None,
        help="Write the results to this CSV or Excel file",
    )
    search.add_argument(
        "--scrape-all",
        action="store_true",
        help="Scrape every result website for contact details before exporting",
    )
    search.add_argument(
        "--near",
        type=_coordinates_arg,
        default=None,
        metavar="LAT,LNG",
        help="Bias the search towards this location",
    )

    history = subparsers.add_parser("history", help="Show or clear the saved search history")
    history.add_argument("--clear", action="store_true", help="Delete every saved search")

    subparsers.add_parser("ui", help="Launch the desktop application")
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def _run_search(args: argparse.Namespace, settings) -> int:
    if args.near is not None:
        settings.location = args.near
    try:
        search, scrape = build_orchestrators(settings)
    except ConfigurationError as exc:
        LOGGER.error("%s", exc)
        return 2

    records = search.search(args.query)
    if search.error:
        LOGGER.error("%s", search.error)
        return 1
    LOGGER.info("Found %s leads for %r", len(records), args.query)

    if args.scrape_all:
        scraped = scrape.scrape_all(
            progress_callback=lambda current, total: LOGGER.info("Scraping website %s of %s", current, total)
        )
        LOGGER.info("Scraped %s websites", scraped)

    results = search.results.snapshot()
    for record in results:
        print(f"{record.name}\t{record.address}\t{record.phone or ''}\t{record.website_url or ''}")

    if args.output:
        written = write_export(args.output, results)
        if written is not None:
            LOGGER.info("Results written to %s", Path(written).resolve())
    return 0


def _run_history(args: argparse.Namespace, settings) -> int:
    history = build_history(settings)
    if args.clear:
        history.clear()
        LOGGER.info("Search history cleared")
        return 0
    for entry in history.entries:
        when = datetime.fromtimestamp(entry.timestamp).strftime("%Y-%m-%d %H:%M")
        print(f"{when}\t{entry.result_count}\t{entry.query}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    try:
        settings = load_settings(args.config)
    except ConfigurationError as exc:
        LOGGER.error("%s", exc)
        return 2

    if args.command == "search":
        return _run_search(args, settings)
    if args.command == "history":
        return _run_history(args, settings)

    from .ui.app import main as run_app

    run_app(settings)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
