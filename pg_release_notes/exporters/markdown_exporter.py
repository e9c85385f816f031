"""Export the release notes summary as a human-readable Markdown report."""

from __future__ import annotations

from collections import Counter
from pathlib import Path

from ..constants import CATEGORIES
from ..models import ReleaseNotesSummary


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def export_markdown(summary: ReleaseNotesSummary, output_path: Path) -> None:
    """Write a Markdown overview with totals, per-version breakdown and security fixes."""
    lines = [
        "# PostgreSQL Release Notes - Summary",
        "",
        "## Overview",
        "",
        "| Metric | Value |",
        "|--------|-------|",
        f"| Releases | {len(summary.version_dates)} |",
    ]
    for category in CATEGORIES:
        lines.append(f"| {category.capitalize()} | {len(summary.items(category))} |")
    lines.append(f"| Contributors | {len(summary.contributors)} |")
    lines.append("")

    # Per-version breakdown
    counts: dict[str, Counter] = {category: Counter() for category in CATEGORIES}
    for category in CATEGORIES:
        for item in summary.items(category):
            counts[category][item.version] += 1

    lines.append("## Per-Version Breakdown")
    lines.append("")
    lines.append("| Version | Release Date | Security | Features | Performance | Bugs |")
    lines.append("|---------|--------------|----------|----------|-------------|------|")
    for version, date in summary.version_dates.items():
        lines.append(
            f"| {version} | {date or '-'} "
            f"| {counts['security'][version]} | {counts['features'][version]} "
            f"| {counts['performance'][version]} | {counts['bugs'][version]} |"
        )

    if summary.security:
        lines.append("")
        lines.append("## Security Fixes")
        lines.append("")
        lines.append("| CVE | Fixed In | Severity | Impact | Title |")
        lines.append("|-----|----------|----------|--------|-------|")
        for item in summary.security:
            impact = "-" if item.impact_score is None else item.impact_score
            lines.append(
                f"| {item.cve or '-'} | {item.version or '-'} | {item.severity or '-'} "
                f"| {impact} | {_escape_cell(item.title)} |"
            )

    lines.append("")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines))
