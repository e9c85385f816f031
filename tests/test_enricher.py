"""Tests for NVD enrichment of security items."""

from __future__ import annotations

import pytest
import requests

from pg_release_notes.enricher import (
    CvssSchema,
    derive_severity,
    enrich_item,
    enrich_summary,
    select_metric,
)
from pg_release_notes.models import ReleaseNotesSummary, SecurityFix

V2 = {"cvssMetricV2": [{"baseSeverity": "MEDIUM", "impactScore": 6.4, "cvssData": {"baseScore": 6.5}}]}
V30 = {"cvssMetricV30": [{"cvssData": {"baseSeverity": "CRITICAL"}, "impactScore": 5.9}]}
V31 = {"cvssMetricV31": [{"cvssData": {"baseSeverity": "HIGH"}, "impactScore": 3.6}]}


def nvd_response(metrics: dict, total: int = 1) -> dict:
    return {
        "totalResults": total,
        "vulnerabilities": [{"cve": {"id": "CVE-X", "metrics": metrics}}] * total,
    }


class FakeLookup:
    def __init__(self, responses: dict):
        self.responses = responses
        self.calls: list[str] = []

    def __call__(self, cve_id: str):
        self.calls.append(cve_id)
        response = self.responses.get(cve_id)
        if isinstance(response, Exception):
            raise response
        return response


def make_summary(*cves: str | None) -> ReleaseNotesSummary:
    return ReleaseNotesSummary(
        version_dates={"16.1": "2023-11-09"},
        security=tuple(
            SecurityFix(cve=cve, title=f"Fix {cve}", description="", version="16.1") for cve in cves
        ),
    )


class TestMetricPrecedence:
    def test_v30_preferred(self):
        assert derive_severity({**V2, **V31, **V30}) == ("CRITICAL", 5.9)

    def test_v31_over_v2(self):
        assert derive_severity({**V2, **V31}) == ("HIGH", 3.6)

    def test_v2_fallback(self):
        assert derive_severity(V2) == ("MEDIUM", 6.4)

    def test_no_metrics(self):
        assert derive_severity({}) == ("None", 0)
        assert derive_severity(None) == ("None", 0)

    def test_empty_schema_list_is_skipped(self):
        assert derive_severity({"cvssMetricV30": [], **V2}) == ("MEDIUM", 6.4)

    def test_selected_metric_is_tagged(self):
        assert select_metric({**V2, **V31}).schema is CvssSchema.V31


class TestEnrichItem:
    def test_single_match_is_merged(self):
        lookup = FakeLookup({"CVE-2023-5868": nvd_response(V31)})
        item = SecurityFix(cve="CVE-2023-5868", title="t", description="", version="16.1")

        enriched = enrich_item(item, lookup)

        assert enriched.metrics == V31
        assert enriched.severity == "HIGH"
        assert enriched.impact_score == 3.6
        assert item.metrics is None

    def test_response_without_cve_wrapper(self):
        lookup = FakeLookup({"CVE-1": {"totalResults": 1, "vulnerabilities": [{"metrics": V2}]}})
        enriched = enrich_item(SecurityFix(cve="CVE-1", title="t", description="", version="9.6"), lookup)
        assert enriched.severity == "MEDIUM"

    @pytest.mark.parametrize("total", [0, 2])
    def test_other_result_counts_are_skipped(self, total):
        lookup = FakeLookup({"CVE-1": nvd_response(V31, total=total)})
        item = SecurityFix(cve="CVE-1", title="t", description="", version="16.1")
        assert enrich_item(item, lookup) == item

    def test_missing_cve_id_is_not_looked_up(self):
        lookup = FakeLookup({})
        item = SecurityFix(cve=None, title="t", description="", version="16.1")
        assert enrich_item(item, lookup) == item
        assert lookup.calls == []

    def test_failed_lookup_leaves_item(self):
        lookup = FakeLookup({"CVE-1": requests.ConnectionError("down"), "CVE-2": None})
        for cve in ("CVE-1", "CVE-2"):
            item = SecurityFix(cve=cve, title="t", description="", version="16.1")
            assert enrich_item(item, lookup) == item

    def test_existing_metrics_are_not_requeried(self):
        lookup = FakeLookup({})
        item = SecurityFix(cve="CVE-1", title="t", description="", version="16.1", metrics=V30)
        enriched = enrich_item(item, lookup)
        assert lookup.calls == []
        assert (enriched.severity, enriched.impact_score) == ("CRITICAL", 5.9)


class TestEnrichSummary:
    def test_persists_after_every_item(self):
        lookup = FakeLookup({"CVE-1": nvd_response(V31), "CVE-2": nvd_response({}, total=0)})
        persisted = []

        result = enrich_summary(make_summary("CVE-1", "CVE-2", None), lookup, persist=persisted.append)

        assert len(persisted) == 3
        assert persisted[0].security[0].severity == "HIGH"
        assert persisted[0].security[1].metrics is None
        assert persisted[-1] == result
        assert lookup.calls == ["CVE-1", "CVE-2"]

    def test_input_summary_is_not_mutated(self):
        summary = make_summary("CVE-1")
        enrich_summary(summary, FakeLookup({"CVE-1": nvd_response(V2)}))
        assert summary.security[0].metrics is None

    def test_second_run_performs_no_lookups(self):
        responses = {"CVE-1": nvd_response(V31), "CVE-2": nvd_response(V2)}
        first_lookup = FakeLookup(responses)
        first = enrich_summary(make_summary("CVE-1", "CVE-2"), first_lookup)

        second_lookup = FakeLookup(responses)
        second = enrich_summary(first, second_lookup)

        assert len(first_lookup.calls) == 2
        assert second_lookup.calls == []
        assert second == first

    def test_error_on_one_item_does_not_stop_the_pass(self):
        lookup = FakeLookup({"CVE-1": requests.Timeout("slow"), "CVE-2": nvd_response(V30)})
        result = enrich_summary(make_summary("CVE-1", "CVE-2"), lookup)
        assert result.security[0].metrics is None
        assert result.security[1].severity == "CRITICAL"

    def test_resumes_from_partial_enrichment(self):
        lookup = FakeLookup({"CVE-2": nvd_response(V2)})
        partial = make_summary("CVE-1", "CVE-2")
        done = enrich_item(partial.security[0], FakeLookup({"CVE-1": nvd_response(V31)}))
        partial = ReleaseNotesSummary(security=(done, partial.security[1]))

        result = enrich_summary(partial, lookup)

        assert lookup.calls == ["CVE-2"]
        assert [item.severity for item in result.security] == ["HIGH", "MEDIUM"]
