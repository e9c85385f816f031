"""Rewriting of documentation links in a finished summary."""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Optional

from .constants import CATEGORIES
from .models import ReleaseNotesSummary
from .normalizer import docs_base_url, is_relative_href

# A parenthesized target pointing at a documentation page, e.g. "(sql-copy.html#X)"
HTML_LINK_PATTERN = re.compile(r"\(([^)]+\.html[^)]*)\)")


def absolutize_html_links(text: str, version: Optional[str]) -> str:
    """Anchor relative .html targets at the docs root of the item's major version."""
    base_url = docs_base_url(version)

    def _rewrite(match: re.Match) -> str:
        target = match.group(1)
        if not is_relative_href(target):
            return match.group(0)
        return f"({base_url}{target})"

    return HTML_LINK_PATTERN.sub(_rewrite, text)


def strip_html_links(text: str) -> str:
    """Remove parenthesized .html targets entirely."""
    return HTML_LINK_PATTERN.sub("", text)


def rewrite_links(summary: ReleaseNotesSummary) -> ReleaseNotesSummary:
    """Strip links from titles and absolutize them in descriptions."""
    updated = {}
    for category in CATEGORIES:
        items = []
        for item in summary.items(category):
            items.append(
                replace(
                    item,
                    title=strip_html_links(item.title) if item.title else item.title,
                    description=(
                        absolutize_html_links(item.description, item.version)
                        if item.description
                        else item.description
                    ),
                )
            )
        updated[category] = tuple(items)
    return replace(summary, **updated)
