"""Data models for the PostgreSQL release notes processor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional

from .constants import CATEGORIES, DEFAULT_MAJOR_VERSION


def major_version(version: Optional[str]) -> str:
    """Return the text before the first dot, e.g. "16" for "16.4"."""
    if not version:
        return DEFAULT_MAJOR_VERSION
    return version.split(".", 1)[0]


def is_major_release(version: Optional[str]) -> bool:
    """A major release is one whose minor component is 0 (e.g. "16.0")."""
    return bool(version) and version.endswith(".0")


@dataclass(frozen=True)
class Release:
    """One cached release notes page after extraction."""

    key: str
    version: Optional[str] = None
    release_date: Optional[str] = None
    changes: tuple[str, ...] = ()

    @property
    def is_major(self) -> bool:
        return is_major_release(self.version)


@dataclass(frozen=True)
class ClassifiedRelease:
    """A release with its raw change items split into categories."""

    version: Optional[str]
    release_date: Optional[str]
    security: tuple[str, ...] = ()
    performance: tuple[str, ...] = ()
    features: tuple[str, ...] = ()
    bugs: tuple[str, ...] = ()

    def item_count(self) -> int:
        return len(self.security) + len(self.performance) + len(self.features) + len(self.bugs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "releaseDate": self.release_date,
            "categories": {
                "security": list(self.security),
                "performance": list(self.performance),
                "features": list(self.features),
                "bugs": list(self.bugs),
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClassifiedRelease:
        categories = data.get("categories") or {}
        return cls(
            version=data.get("version"),
            release_date=data.get("releaseDate"),
            security=tuple(categories.get("security") or ()),
            performance=tuple(categories.get("performance") or ()),
            features=tuple(categories.get("features") or ()),
            bugs=tuple(categories.get("bugs") or ()),
        )


@dataclass(frozen=True)
class ChangeRecord:
    """A parsed bug fix, feature or performance item."""

    # JSON key holding the version the change belongs to
    version_key: ClassVar[str] = "fixedIn"

    title: str
    description: str
    version: Optional[str]
    significant: bool = False
    contributors: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            self.version_key: self.version,
            "significant": self.significant,
            "contributors": list(self.contributors),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        return cls(
            title=data.get("title", ""),
            description=data.get("description", ""),
            version=data.get(cls.version_key),
            significant=bool(data.get("significant", False)),
            contributors=tuple(data.get("contributors") or ()),
        )


@dataclass(frozen=True)
class BugFix(ChangeRecord):
    version_key: ClassVar[str] = "fixedIn"


@dataclass(frozen=True)
class Feature(ChangeRecord):
    version_key: ClassVar[str] = "sinceVersion"


@dataclass(frozen=True)
class PerformanceImprovement(ChangeRecord):
    version_key: ClassVar[str] = "sinceVersion"


@dataclass(frozen=True)
class SecurityFix:
    """A security item, optionally enriched with NVD metrics."""

    version_key: ClassVar[str] = "fixedIn"

    cve: Optional[str]
    title: str
    description: str
    version: Optional[str]
    contributors: tuple[str, ...] = ()
    # Raw NVD "metrics" object, kept opaque so later runs can re-derive fields
    metrics: Optional[dict[str, Any]] = None
    severity: Optional[str] = None
    impact_score: Optional[float] = None

    @property
    def is_enriched(self) -> bool:
        return self.metrics is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "cve": self.cve,
            "title": self.title,
            "description": self.description,
            "fixedIn": self.version,
            "contributors": list(self.contributors),
        }
        if self.metrics is not None:
            data["metrics"] = self.metrics
        if self.severity is not None:
            data["severity"] = self.severity
        if self.impact_score is not None:
            data["impactScore"] = self.impact_score
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SecurityFix:
        return cls(
            cve=data.get("cve"),
            title=data.get("title", ""),
            description=data.get("description", ""),
            version=data.get("fixedIn"),
            contributors=tuple(data.get("contributors") or ()),
            metrics=data.get("metrics"),
            severity=data.get("severity"),
            impact_score=data.get("impactScore"),
        )


RECORD_TYPES = {
    "security": SecurityFix,
    "features": Feature,
    "performance": PerformanceImprovement,
    "bugs": BugFix,
}


@dataclass(frozen=True)
class ReleaseNotesSummary:
    """Cross-release, category-partitioned view of every change item."""

    version_dates: dict[str, Optional[str]] = field(default_factory=dict)
    security: tuple[SecurityFix, ...] = ()
    features: tuple[Feature, ...] = ()
    performance: tuple[PerformanceImprovement, ...] = ()
    bugs: tuple[BugFix, ...] = ()
    contributors: tuple[str, ...] = ()

    def items(self, category: str) -> tuple:
        return getattr(self, category)

    def total_items(self) -> int:
        return sum(len(self.items(category)) for category in CATEGORIES)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"versionDates": dict(self.version_dates)}
        for category in CATEGORIES:
            data[category] = [item.to_dict() for item in self.items(category)]
        data["contributors"] = list(self.contributors)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReleaseNotesSummary:
        records = {
            category: tuple(
                RECORD_TYPES[category].from_dict(item)
                for item in data.get(category) or ()
                if isinstance(item, dict)
            )
            for category in CATEGORIES
        }
        return cls(
            version_dates=dict(data.get("versionDates") or {}),
            contributors=tuple(data.get("contributors") or ()),
            **records,
        )
