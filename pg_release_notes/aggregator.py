"""Merges classified releases into one cross-release summary."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional

from .fragments import extract_contributors, extract_cve, extract_title_description, is_significant
from .models import (
    BugFix,
    ChangeRecord,
    ClassifiedRelease,
    Feature,
    PerformanceImprovement,
    ReleaseNotesSummary,
    SecurityFix,
)

logger = logging.getLogger(__name__)


def parse_security_item(item: str, version: Optional[str]) -> SecurityFix:
    title, description = extract_title_description(item)
    return SecurityFix(
        cve=extract_cve(item),
        title=title,
        description=description,
        version=version,
        contributors=tuple(extract_contributors(item)),
    )


def parse_change_item(item: str, version: Optional[str], record_type: type[ChangeRecord]) -> ChangeRecord:
    title, description = extract_title_description(item)
    return record_type(
        title=title,
        description=description,
        version=version,
        significant=is_significant(item),
        contributors=tuple(extract_contributors(item)),
    )


@dataclass
class SummaryAccumulator:
    """Running state while releases are folded into a summary."""

    version_dates: dict[str, Optional[str]] = field(default_factory=dict)
    security: list[SecurityFix] = field(default_factory=list)
    features: list[Feature] = field(default_factory=list)
    performance: list[PerformanceImprovement] = field(default_factory=list)
    bugs: list[BugFix] = field(default_factory=list)
    # dict keys keep first-seen order
    contributors: dict[str, None] = field(default_factory=dict)

    def _add_contributors(self, names: Iterable[str]) -> None:
        for name in names:
            self.contributors.setdefault(name, None)

    def add_release(self, release: ClassifiedRelease) -> SummaryAccumulator:
        version = release.version
        if version is None:
            logger.warning("Release without version, items kept without a version date")
        else:
            if version in self.version_dates:
                logger.warning("Duplicate version %s, keeping the later date", version)
            self.version_dates[version] = release.release_date

        for item in release.security:
            record = parse_security_item(item, version)
            self.security.append(record)
            self._add_contributors(record.contributors)

        for items, target, record_type in (
            (release.features, self.features, Feature),
            (release.performance, self.performance, PerformanceImprovement),
            (release.bugs, self.bugs, BugFix),
        ):
            for item in items:
                record = parse_change_item(item, version, record_type)
                target.append(record)
                self._add_contributors(record.contributors)

        return self

    def build(self) -> ReleaseNotesSummary:
        return ReleaseNotesSummary(
            version_dates=dict(self.version_dates),
            security=tuple(self.security),
            features=tuple(self.features),
            performance=tuple(self.performance),
            bugs=tuple(self.bugs),
            contributors=tuple(self.contributors),
        )


def build_summary(releases: Iterable[ClassifiedRelease]) -> ReleaseNotesSummary:
    """Fold releases, in the given order, into a ReleaseNotesSummary."""
    accumulator = SummaryAccumulator()
    count = 0
    for release in releases:
        accumulator = accumulator.add_release(release)
        count += 1

    summary = accumulator.build()
    logger.info(
        "Summary built from %d releases: %d security, %d features, %d performance, %d bugs, %d contributors",
        count,
        len(summary.security),
        len(summary.features),
        len(summary.performance),
        len(summary.bugs),
        len(summary.contributors),
    )
    return summary
