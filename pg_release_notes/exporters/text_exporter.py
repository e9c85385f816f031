"""Export unique CVE IDs as plain text, one per line."""

from __future__ import annotations

from pathlib import Path

from ..models import ReleaseNotesSummary


def export_text(summary: ReleaseNotesSummary, output_path: Path) -> None:
    """Write all unique CVE IDs sorted lexicographically, one per line."""
    cve_ids = {item.cve for item in summary.security if item.cve}

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        for cve_id in sorted(cve_ids):
            f.write(cve_id + "\n")
