"""Conversion of change item markup into markdown text."""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup, Tag
from markdownify import markdownify

from .constants import ABSOLUTE_TARGET_PATTERN, DECORATIVE_ANCHOR_TEXT, DOCS_BASE_URL
from .models import major_version

logger = logging.getLogger(__name__)

ABSOLUTE_TARGET = re.compile(ABSOLUTE_TARGET_PATTERN)


def docs_base_url(version: str | None) -> str:
    """Documentation root for a release, e.g. https://www.postgresql.org/docs/16/."""
    return f"{DOCS_BASE_URL}/{major_version(version)}/"


def is_relative_href(href: str) -> bool:
    """False for targets with a URL scheme (https:, mailto:, ...) or a bare "#fragment"."""
    return not ABSOLUTE_TARGET.match(href)


def remove_decorative_anchors(root: Tag) -> None:
    """Drop paragraph-link anchors whose only text is the section glyph."""
    for anchor in root.find_all("a"):
        if anchor.get_text() == DECORATIVE_ANCHOR_TEXT:
            anchor.decompose()


def absolutize_links(root: Tag, base_url: str) -> None:
    for anchor in root.find_all("a", href=True):
        href = anchor["href"]
        if is_relative_href(href):
            anchor["href"] = f"{base_url}{href}"


def normalize_fragment(fragment_html: str, base_url: str) -> str:
    """Turn one list item's inner markup into markdown text.

    Relative links are anchored at base_url and section-glyph anchors are
    removed before conversion. Never raises: if conversion fails the
    fragment's plain text is returned instead.
    """
    soup = BeautifulSoup(fragment_html, "html.parser")
    remove_decorative_anchors(soup)
    absolutize_links(soup, base_url)

    try:
        markdown = markdownify(str(soup), escape_underscores=False)
    except Exception as e:
        logger.warning("Markdown conversion failed, using plain text: %s", e)
        markdown = soup.get_text()

    return markdown.strip()
