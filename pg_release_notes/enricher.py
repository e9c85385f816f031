"""Enrichment of security items with NVD severity data."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional

import requests

from .models import ReleaseNotesSummary, SecurityFix

logger = logging.getLogger(__name__)

CveLookup = Callable[[str], Optional[dict[str, Any]]]
Persist = Callable[[ReleaseNotesSummary], None]

DEFAULT_SEVERITY = "None"
DEFAULT_IMPACT_SCORE = 0


class CvssSchema(str, Enum):
    """Keys NVD uses for each CVSS metric schema version."""

    V30 = "cvssMetricV30"
    V31 = "cvssMetricV31"
    V2 = "cvssMetricV2"


@dataclass(frozen=True)
class CvssMetric:
    schema: CvssSchema
    base_severity: str
    impact_score: float


def _extract_v3(entry: dict[str, Any]) -> tuple[str, float]:
    # v3.x keeps the severity inside cvssData
    return entry["cvssData"]["baseSeverity"], entry["impactScore"]


def _extract_v2(entry: dict[str, Any]) -> tuple[str, float]:
    return entry["baseSeverity"], entry["impactScore"]


METRIC_EXTRACTORS: dict[CvssSchema, Callable[[dict[str, Any]], tuple[str, float]]] = {
    CvssSchema.V30: _extract_v3,
    CvssSchema.V31: _extract_v3,
    CvssSchema.V2: _extract_v2,
}

# Order in which schemas are consulted
METRIC_PRECEDENCE = (CvssSchema.V30, CvssSchema.V31, CvssSchema.V2)


def parse_metric(schema: CvssSchema, metrics: dict[str, Any]) -> Optional[CvssMetric]:
    """Read the first entry of one schema from an NVD metrics object."""
    entries = metrics.get(schema.value)
    if not entries:
        return None
    try:
        severity, impact_score = METRIC_EXTRACTORS[schema](entries[0])
    except (KeyError, TypeError, IndexError) as e:
        logger.warning("Malformed %s metric: %s", schema.value, e)
        return None
    return CvssMetric(schema=schema, base_severity=severity, impact_score=impact_score)


def select_metric(metrics: dict[str, Any]) -> Optional[CvssMetric]:
    for schema in METRIC_PRECEDENCE:
        metric = parse_metric(schema, metrics)
        if metric is not None:
            return metric
    return None


def derive_severity(metrics: Optional[dict[str, Any]]) -> tuple[str, float]:
    """Severity and impact score from the preferred schema, or ("None", 0)."""
    metric = select_metric(metrics or {})
    if metric is None:
        return DEFAULT_SEVERITY, DEFAULT_IMPACT_SCORE
    return metric.base_severity, metric.impact_score


def with_derived_fields(item: SecurityFix, metrics: dict[str, Any]) -> SecurityFix:
    severity, impact_score = derive_severity(metrics)
    return replace(item, metrics=metrics, severity=severity, impact_score=impact_score)


def _vulnerability_metrics(response: dict[str, Any]) -> Optional[dict[str, Any]]:
    """Metrics of the single matching vulnerability, or None unless exactly one matched."""
    vulnerabilities = response.get("vulnerabilities") or []
    if response.get("totalResults") != 1 or not vulnerabilities:
        return None
    record = vulnerabilities[0]
    # NVD nests the record under "cve"
    if "cve" in record:
        record = record["cve"]
    return record.get("metrics") or {}


def enrich_item(item: SecurityFix, lookup: CveLookup) -> SecurityFix:
    """Return item with metrics, severity and impactScore filled in where possible.

    Items that already carry metrics are not looked up again; only their
    derived fields are recomputed.
    """
    if item.metrics is not None:
        logger.debug("%s already has metrics, recomputing severity", item.cve)
        return with_derived_fields(item, item.metrics)

    if not item.cve:
        logger.debug("Security item without CVE id skipped: %s", item.title)
        return item

    try:
        response = lookup(item.cve)
    except (requests.RequestException, ValueError) as e:
        logger.error("NVD lookup failed for %s: %s", item.cve, e)
        return item

    if response is None:
        logger.error("NVD lookup failed for %s", item.cve)
        return item

    metrics = _vulnerability_metrics(response)
    if metrics is None:
        logger.info("%s: %s results, left unenriched", item.cve, response.get("totalResults"))
        return item

    enriched = with_derived_fields(item, metrics)
    logger.info("%s: severity %s, impact score %s", item.cve, enriched.severity, enriched.impact_score)
    return enriched


def replace_security_item(summary: ReleaseNotesSummary, index: int, item: SecurityFix) -> ReleaseNotesSummary:
    security = summary.security[:index] + (item,) + summary.security[index + 1 :]
    return replace(summary, security=security)


def enrich_summary(
    summary: ReleaseNotesSummary,
    lookup: CveLookup,
    persist: Optional[Persist] = None,
) -> ReleaseNotesSummary:
    """Enrich every security item, persisting the summary after each one.

    An interrupted run can be resumed: items enriched earlier keep their
    metrics and are not queried again.
    """
    total = len(summary.security)
    for index in range(total):
        item = summary.security[index]
        logger.info("[%d/%d] %s", index + 1, total, item.cve)
        summary = replace_security_item(summary, index, enrich_item(item, lookup))
        if persist is not None:
            persist(summary)
    return summary
