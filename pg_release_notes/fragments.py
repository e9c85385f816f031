"""Parsing of normalized change items into title, description and attribution."""

from __future__ import annotations

import re
from typing import Optional

from .constants import (
    CONTRIBUTOR_EXCLUSION_MARKERS,
    CONTRIBUTOR_EXCLUSION_PREFIXES,
    SIGNIFICANCE_KEYWORDS,
)

CVE_PATTERN = re.compile(r"CVE-\d{4}-\d+")

# Trailing " (…)" on the title line
TITLE_ATTRIBUTION_PATTERN = re.compile(r" \([^)]+\)$")

# A parenthesized group closing a line, not the target of a markdown link "[text](target)"
LINE_END_GROUP_PATTERN = re.compile(r"(?<!\])\(([^()]+)\)(?=\n|$)")

EXCLUSION_PREFIX_PATTERNS = tuple(re.compile(pattern) for pattern in CONTRIBUTOR_EXCLUSION_PREFIXES)


def _is_attribution(item: str, match: re.Match) -> bool:
    content = match.group(1)
    if any(marker in content for marker in CONTRIBUTOR_EXCLUSION_MARKERS):
        return False
    preceding = item[: match.start()]
    if any(pattern.search(preceding) for pattern in EXCLUSION_PREFIX_PATTERNS):
        return False
    return True


def extract_title_description(item: str) -> tuple[str, str]:
    """Split an item into its first line (minus attribution) and the rest."""
    first_line, newline, rest = item.partition("\n")
    title = TITLE_ATTRIBUTION_PATTERN.sub("", first_line.strip())
    description = rest.strip() if newline else ""
    return title, description


def extract_contributors(item: str) -> list[str]:
    """Names from the last line-ending parenthesized group that is an attribution.

    Groups containing URLs or CVE ids, and groups captioning a bare URL,
    are not attributions. A description that ends with an unrelated aside
    in parentheses is still read as an attribution.
    """
    for match in reversed(list(LINE_END_GROUP_PATTERN.finditer(item))):
        if not _is_attribution(item, match):
            continue
        names = []
        for name in match.group(1).split(","):
            name = name.strip()
            if name and name not in names:
                names.append(name)
        return names
    return []


def extract_cve(item: str) -> Optional[str]:
    match = CVE_PATTERN.search(item)
    return match.group(0) if match else None


def is_significant(item: str) -> bool:
    text = item.lower()
    return any(keyword in text for keyword in SIGNIFICANCE_KEYWORDS)
