"""Discovers release versions from the PostgreSQL release index and caches their pages."""

from __future__ import annotations

import logging
import time
from typing import Optional

from bs4 import BeautifulSoup

from .constants import INDEX_KEY, RELEASE_INDEX_URL, SCRAPE_DELAY, VERSION_LIST_SELECTOR
from .fetcher import Fetcher
from .store import DocumentStore

logger = logging.getLogger(__name__)


def release_url(version: str) -> str:
    return f"{RELEASE_INDEX_URL}{version}/"


def extract_versions(html: str) -> list[str]:
    """Extract version strings from the release index page, in page order."""
    soup = BeautifulSoup(html, "html.parser")
    versions = []
    seen = set()
    for link in soup.select(VERSION_LIST_SELECTOR):
        version = link.get_text(strip=True)
        if version and version not in seen:
            seen.add(version)
            versions.append(version)
    return versions


def scrape_version(fetcher: Fetcher, store: DocumentStore, version: str) -> bool:
    """Fetch one release notes page and cache it. Returns True on success."""
    logger.info("Fetching version %s", version)
    html = fetcher.fetch(release_url(version))
    if html is None:
        logger.error("Failed to fetch version %s", version)
        return False
    store.put(version, html)
    logger.info("Version %s cached", version)
    return True


def scrape_all(
    fetcher: Fetcher,
    store: DocumentStore,
    refresh: bool = False,
    delay: float = SCRAPE_DELAY,
) -> list[str]:
    """Cache the release index and every release page it lists.

    Versions already in the store are skipped unless refresh is set.
    Returns the versions that are cached once the run finishes.
    """
    index_html: Optional[str] = fetcher.fetch(RELEASE_INDEX_URL)
    if index_html is None:
        logger.error("Failed to fetch release index %s", RELEASE_INDEX_URL)
        index_html = store.get(INDEX_KEY)
        if index_html is None:
            return []
        logger.warning("Using cached release index")
    else:
        store.put(INDEX_KEY, index_html)

    versions = extract_versions(index_html)
    logger.info("Found %d versions on release index", len(versions))

    cached = []
    for i, version in enumerate(versions, 1):
        if not refresh and version in store:
            logger.debug("[%d/%d] %s already cached", i, len(versions), version)
            cached.append(version)
            continue

        logger.info("[%d/%d] Scraping %s", i, len(versions), version)
        if scrape_version(fetcher, store, version):
            cached.append(version)
        time.sleep(delay)

    logger.info("%d of %d versions cached", len(cached), len(versions))
    return cached
