"""
Contact Finder Schemas

Request bodies for /check and /cancel, and the per-site CrawlResult record
streamed back to the client.
"""
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


# ============================================================================
# Requests
# ============================================================================

class CheckRequest(BaseModel):
    """Batch of domains to crawl under one job id."""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "domains": ["a.com", "https://b.com"],
                "jobId": "job-1700000000",
            }
        },
    )

    domains: List[str]
    job_id: str = Field(..., alias="jobId", min_length=1)

    @field_validator("domains")
    @classmethod
    def _drop_blank_domains(cls, v: List[str]) -> List[str]:
        return [domain.strip() for domain in v if domain and domain.strip()]


class CancelRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    job_id: str = Field(..., alias="jobId", min_length=1)


# ============================================================================
# Internal crawl types
# ============================================================================

@dataclass(frozen=True)
class SiteTask:
    """One input domain and the absolute URL it resolved to."""
    raw: str
    url: str


@dataclass
class PageSnapshot:
    """Serialized markup plus mailto anchors, fed to the email extractor."""
    url: str
    markup: str
    mailto_targets: List[str] = field(default_factory=list)


class CrawlMethod(str, Enum):
    STATIC = "static"
    DYNAMIC = "dynamic"


# ============================================================================
# Results
# ============================================================================

class CrawlStats(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    total_links: int = 0
    contact_links: int = 0
    main_page_emails: int = 0
    contact_page_emails: int = 0
    total_emails: int = 0
    failed_links: int = 0
    method: CrawlMethod


class CrawlResult(BaseModel):
    """Terminal record for one site. Either `error` or the data fields, never both."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    site: str
    error: Optional[str] = None
    links: List[str] = Field(default_factory=list)
    emails: List[str] = Field(default_factory=list)
    stats: Optional[CrawlStats] = None

    @model_validator(mode="after")
    def _error_excludes_data(self) -> "CrawlResult":
        if self.error is not None:
            if self.links or self.emails or self.stats is not None:
                raise ValueError("failed CrawlResult must not carry links, emails or stats")
        elif self.stats is None:
            raise ValueError("successful CrawlResult requires stats")
        return self

    @classmethod
    def failed(cls, site: str, error: str) -> "CrawlResult":
        return cls(site=site, error=error)

    def to_record(self) -> dict:
        record = self.model_dump(mode="json", by_alias=True)
        if record["error"] is None:
            del record["error"]
        return record

    def to_line(self) -> str:
        """One newline-terminated JSON record for the response stream."""
        return json.dumps(self.to_record()) + "\n"
