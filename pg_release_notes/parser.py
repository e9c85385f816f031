"""HTML parsing of PostgreSQL release notes pages."""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from bs4 import BeautifulSoup

from .constants import CHANGE_ITEM_SELECTOR, RELEASE_DATE_LABEL, VERSION_HEADING_SELECTOR
from .models import Release
from .normalizer import docs_base_url, normalize_fragment, remove_decorative_anchors
from .store import DocumentStore

logger = logging.getLogger(__name__)


def _extract_version(soup: BeautifulSoup) -> Optional[str]:
    """Last whitespace-delimited token of the first release heading."""
    heading = soup.select_one(VERSION_HEADING_SELECTOR)
    if heading is None:
        return None
    tokens = heading.get_text().split()
    return tokens[-1] if tokens else None


def _extract_release_date(soup: BeautifulSoup) -> Optional[str]:
    """Text after the first colon of the "Release date:" paragraph."""
    for paragraph in soup.find_all("p"):
        text = paragraph.get_text()
        if RELEASE_DATE_LABEL in text:
            date = text.split(":", 1)[1].strip()
            return date or None
    return None


def parse_release_page(html: str, key: str) -> Release:
    """Parse one cached release notes page into a Release.

    Missing pieces of markup leave the matching fields empty rather than
    failing, so one odd page does not stop a batch.
    """
    soup = BeautifulSoup(html, "html.parser")
    remove_decorative_anchors(soup)

    version = _extract_version(soup)
    if version is None:
        logger.warning("No version heading found in %s", key)

    release_date = _extract_release_date(soup)
    if release_date is None:
        logger.warning("No release date found in %s", key)

    base_url = docs_base_url(version)
    changes = []
    for item in soup.select(CHANGE_ITEM_SELECTOR):
        changes.append(normalize_fragment(item.decode_contents().strip(), base_url))

    if not changes:
        logger.warning("No change items found in %s", key)

    logger.debug("Parsed %s: version=%s date=%s items=%d", key, version, release_date, len(changes))
    return Release(key=key, version=version, release_date=release_date, changes=tuple(changes))


def iter_releases(store: DocumentStore) -> Iterator[Release]:
    """Parse every cached release page in lexical key order.

    A page that cannot be read or parsed is logged and skipped.
    """
    keys = store.release_keys()
    for i, key in enumerate(keys, 1):
        logger.info("[%d/%d] Processing %s", i, len(keys), key)
        html = store.get(key)
        if html is None:
            logger.error("Failed to read cached page %s", key)
            continue

        try:
            release = parse_release_page(html, key)
        except Exception as e:
            logger.error("Failed to parse %s: %s", key, e)
            continue
        yield release
