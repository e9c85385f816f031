"""Keyword-based categorization of change items."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from .constants import CATEGORY_KEYWORDS, FALLBACK_CATEGORY, MAJOR_RELEASE_ONLY_CATEGORIES
from .models import ClassifiedRelease, Release

logger = logging.getLogger(__name__)

CategoryRules = Sequence[tuple[str, Iterable[str]]]


def classify_change(
    change: str,
    major_release: bool,
    rules: CategoryRules = CATEGORY_KEYWORDS,
) -> str:
    """Return the category of one change item.

    Rules are tried in order and the first keyword hit wins. Point releases
    never get performance or feature items, so those rules are skipped and
    such items end up as bug fixes.
    """
    text = change.lower()
    for category, keywords in rules:
        if not major_release and category in MAJOR_RELEASE_ONLY_CATEGORIES:
            continue
        if any(keyword.lower() in text for keyword in keywords):
            return category
    return FALLBACK_CATEGORY


def categorize_changes(
    changes: Iterable[str],
    major_release: bool,
    rules: CategoryRules = CATEGORY_KEYWORDS,
) -> dict[str, list[str]]:
    """Split change items into security/performance/features/bugs buckets."""
    buckets: dict[str, list[str]] = {
        "security": [],
        "performance": [],
        "features": [],
        "bugs": [],
    }
    for change in changes:
        buckets[classify_change(change, major_release, rules)].append(change)
    return buckets


def classify_release(release: Release) -> ClassifiedRelease:
    buckets = categorize_changes(release.changes, release.is_major)
    logger.debug(
        "%s (major=%s): %d security, %d performance, %d features, %d bugs",
        release.version,
        release.is_major,
        len(buckets["security"]),
        len(buckets["performance"]),
        len(buckets["features"]),
        len(buckets["bugs"]),
    )
    for change in buckets["security"]:
        logger.info("Security item in %s: %s", release.version, change.partition("\n")[0])
    return ClassifiedRelease(
        version=release.version,
        release_date=release.release_date,
        security=tuple(buckets["security"]),
        performance=tuple(buckets["performance"]),
        features=tuple(buckets["features"]),
        bugs=tuple(buckets["bugs"]),
    )
