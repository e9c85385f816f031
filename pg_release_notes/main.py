"""CLI entry point and orchestrator for the PostgreSQL release notes processor."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .aggregator import build_summary
from .classifier import classify_release
from .constants import (
    CACHE_DIR,
    CVE_LIST_FILE,
    MARKDOWN_FILE,
    OUTPUT_DIR,
    RELEASES_FILE,
    SUMMARY_FILE,
    VERSION_DATES_FILE,
)
from .discovery import scrape_all, scrape_version
from .enricher import enrich_summary
from .exporters.json_exporter import (
    export_version_dates,
    load_releases,
    load_summary,
    write_releases,
    write_summary,
)
from .exporters.markdown_exporter import export_markdown
from .exporters.text_exporter import export_text
from .fetcher import Fetcher
from .links import rewrite_links
from .nvd import NVDClient
from .parser import iter_releases
from .store import DocumentStore

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Process PostgreSQL release notes into categorized JSON.",
    )
    parser.add_argument(
        "--cache-dir",
        type=str,
        default=CACHE_DIR,
        help=f"Directory holding cached release pages (default: {CACHE_DIR})",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=OUTPUT_DIR,
        help=f"Output directory for generated files (default: {OUTPUT_DIR})",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    scrape_all_cmd = commands.add_parser("scrape-all", help="Scrape and cache all release notes")
    scrape_all_cmd.add_argument(
        "--refresh",
        action="store_true",
        help="Re-fetch versions that are already cached",
    )

    scrape_version_cmd = commands.add_parser(
        "scrape-version", help="Scrape and cache release notes for a specific version"
    )
    scrape_version_cmd.add_argument("version", help="Version to fetch, e.g. 16.1")

    commands.add_parser("process", help="Process cached release notes into per-release JSON")
    commands.add_parser("format", help="Build the categorized summary from processed release notes")

    cve_cmd = commands.add_parser("cve", help="Add NVD severity data to security items")
    cve_cmd.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds to wait before each NVD query (default depends on NVD_API_KEY)",
    )

    commands.add_parser("update-links", help="Rewrite documentation links in the summary")
    commands.add_parser("export", help="Write version dates, Markdown report and CVE list")

    run_cmd = commands.add_parser("run", help="process, format, update-links and export in one go")
    run_cmd.add_argument(
        "--with-cve",
        action="store_true",
        help="Also enrich security items from NVD before rewriting links",
    )
    run_cmd.add_argument("--delay", type=float, default=None, help="Seconds to wait before each NVD query")

    return parser.parse_args(argv)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def process(store: DocumentStore, output_dir: Path) -> Optional[int]:
    """Parse and classify every cached page. Returns the release count, or None if there is no cache."""
    if not store.exists():
        logger.error("Cache directory %s not found, run scrape-all first", store.cache_dir)
        return None

    releases = [classify_release(release) for release in iter_releases(store)]
    write_releases(releases, output_dir / RELEASES_FILE)
    logger.info("Processed %d releases into %s", len(releases), output_dir / RELEASES_FILE)
    return len(releases)


def format_summary(output_dir: Path) -> bool:
    releases_path = output_dir / RELEASES_FILE
    if not releases_path.exists():
        logger.error("%s not found, run process first", releases_path)
        return False

    summary = build_summary(load_releases(releases_path))
    write_summary(summary, output_dir / SUMMARY_FILE)
    logger.info("Summary written to %s", output_dir / SUMMARY_FILE)
    return True


def add_cve_data(output_dir: Path, delay: Optional[float] = None) -> bool:
    summary_path = output_dir / SUMMARY_FILE
    if not summary_path.exists():
        logger.error("%s not found, run format first", summary_path)
        return False

    client = NVDClient(delay=delay)
    summary = enrich_summary(
        load_summary(summary_path),
        client.lookup,
        persist=lambda current: write_summary(current, summary_path),
    )
    enriched = sum(1 for item in summary.security if item.is_enriched)
    logger.info(
        "%d of %d security items enriched (%d NVD queries)",
        enriched,
        len(summary.security),
        client.calls,
    )
    return True


def update_links(output_dir: Path) -> bool:
    summary_path = output_dir / SUMMARY_FILE
    if not summary_path.exists():
        logger.error("%s not found, run format first", summary_path)
        return False

    write_summary(rewrite_links(load_summary(summary_path)), summary_path)
    logger.info("Updated links in %s", summary_path)
    return True


def export(output_dir: Path) -> bool:
    summary_path = output_dir / SUMMARY_FILE
    if not summary_path.exists():
        logger.error("%s not found, run format first", summary_path)
        return False

    summary = load_summary(summary_path)
    export_version_dates(summary, output_dir / VERSION_DATES_FILE)
    export_markdown(summary, output_dir / MARKDOWN_FILE)
    export_text(summary, output_dir / CVE_LIST_FILE)
    logger.info("Output written to %s/", output_dir)
    return True


def run(args: argparse.Namespace) -> int:
    """Main orchestrator. Returns exit code."""
    _setup_logging(args.verbose)

    store = DocumentStore(args.cache_dir)
    output_dir = Path(args.output_dir)

    if args.command == "scrape-all":
        cached = scrape_all(Fetcher(), store, refresh=args.refresh)
        return 0 if cached else 1

    if args.command == "scrape-version":
        return 0 if scrape_version(Fetcher(), store, args.version) else 1

    if args.command == "process":
        return 0 if process(store, output_dir) is not None else 1

    if args.command == "format":
        return 0 if format_summary(output_dir) else 1

    if args.command == "cve":
        return 0 if add_cve_data(output_dir, args.delay) else 1

    if args.command == "update-links":
        return 0 if update_links(output_dir) else 1

    if args.command == "export":
        return 0 if export(output_dir) else 1

    if args.command == "run":
        if process(store, output_dir) is None or not format_summary(output_dir):
            return 1
        if args.with_cve and not add_cve_data(output_dir, args.delay):
            return 1
        if not update_links(output_dir) or not export(output_dir):
            return 1
        return 0

    logger.error("Unknown command %s", args.command)
    return 1


def main() -> None:
    args = parse_args()
    sys.exit(run(args))


if __name__ == "__main__":
    main()
