import json

import pytest
from pydantic import ValidationError

from app.features.contact_finder.schemas.crawl import (
    CheckRequest,
    CrawlMethod,
    CrawlResult,
    CrawlStats,
)


def _stats(**kwargs) -> CrawlStats:
    kwargs.setdefault("method", CrawlMethod.DYNAMIC)
    return CrawlStats(**kwargs)


class TestCrawlResult:
    def test_success_requires_stats(self):
        with pytest.raises(ValidationError):
            CrawlResult(site="https://a.com", emails=["info@a.com"])

    def test_error_excludes_data(self):
        with pytest.raises(ValidationError):
            CrawlResult(site="https://a.com", error="boom", emails=["info@a.com"])
        with pytest.raises(ValidationError):
            CrawlResult(site="https://a.com", error="boom", stats=_stats())

    def test_success_record_omits_error(self):
        result = CrawlResult(
            site="https://b.com",
            links=["https://b.com/contact"],
            emails=["hi@b.com"],
            stats=_stats(total_links=4, contact_links=1, main_page_emails=1, total_emails=1),
        )

        record = result.to_record()

        assert "error" not in record
        assert record["stats"] == {
            "totalLinks": 4,
            "contactLinks": 1,
            "mainPageEmails": 1,
            "contactPageEmails": 0,
            "totalEmails": 1,
            "failedLinks": 0,
            "method": "dynamic",
        }

    def test_failed_record_keeps_null_stats(self):
        record = CrawlResult.failed(site="https://slow.com", error="timed out").to_record()

        assert record == {
            "site": "https://slow.com",
            "error": "timed out",
            "links": [],
            "emails": [],
            "stats": None,
        }

    def test_to_line_is_single_json_line(self):
        line = CrawlResult.failed(site="x", error="multi\nline").to_line()

        assert line.endswith("\n")
        assert line.count("\n") == 1
        assert json.loads(line)["error"] == "multi\nline"

    def test_result_is_frozen(self):
        result = CrawlResult.failed(site="x", error="boom")

        with pytest.raises(ValidationError):
            result.site = "y"

    def test_round_trip_from_wire_record(self):
        result = CrawlResult.model_validate(
            {"site": "https://a.com", "links": [], "emails": ["info@a.com"], "stats": {"totalEmails": 1, "method": "static"}}
        )

        assert result.stats.total_emails == 1
        assert result.stats.method == CrawlMethod.STATIC


class TestCheckRequest:
    def test_job_id_alias(self):
        request = CheckRequest.model_validate({"domains": ["a.com"], "jobId": "job-1"})

        assert request.job_id == "job-1"

    def test_blank_domains_dropped_and_stripped(self):
        request = CheckRequest.model_validate({"domains": [" a.com ", "", "   ", "b.com"], "jobId": "job-1"})

        assert request.domains == ["a.com", "b.com"]

    def test_empty_job_id_rejected(self):
        with pytest.raises(ValidationError):
            CheckRequest.model_validate({"domains": ["a.com"], "jobId": ""})
