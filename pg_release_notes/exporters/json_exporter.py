"""Read and write the JSON artifacts of the pipeline."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Any

from ..models import ClassifiedRelease, ReleaseNotesSummary

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


def _write_json(data: Any, output_path: Path) -> None:
    """Write JSON through a temporary file so a crash never leaves a truncated artifact."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = output_path.with_name(output_path.name + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")
    tmp_path.replace(output_path)


def _read_json(input_path: Path) -> Any:
    with open(input_path, encoding="utf-8") as f:
        return json.load(f)


def write_releases(releases: Iterable[ClassifiedRelease], output_path: Path) -> None:
    """Write the per-release file: raw change text grouped by category."""
    _write_json([release.to_dict() for release in releases], output_path)


def load_releases(input_path: Path) -> list[ClassifiedRelease]:
    return [ClassifiedRelease.from_dict(entry) for entry in _read_json(input_path)]


def write_summary(summary: ReleaseNotesSummary, output_path: Path) -> None:
    _write_json(summary.to_dict(), output_path)


def load_summary(input_path: Path) -> ReleaseNotesSummary:
    return ReleaseNotesSummary.from_dict(_read_json(input_path))


def _is_valid_date(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        return False
    return True


def valid_version_dates(summary: ReleaseNotesSummary) -> dict[str, str]:
    """Version dates with unparseable entries dropped."""
    dates = {}
    for version, date in summary.version_dates.items():
        if _is_valid_date(date):
            dates[version] = date
        else:
            logger.warning("Invalid date for version %s: %s", version, date)
    return dates


def export_version_dates(summary: ReleaseNotesSummary, output_path: Path) -> None:
    _write_json(valid_version_dates(summary), output_path)
