"""Models for fetch, extraction and crawl results."""

from dataclasses import dataclass

from pydantic import BaseModel, Field


@dataclass
class FetchResult:
    """Result of an HTML fetch operation.

    Attributes:
        url: URL that was requested
        html: Document text, None if the fetch failed
        status_code: HTTP status of the final response, None on transport errors
        error: Why the fetch failed, if it did
        fetch_time: Total time spent fetching, retries included

    """

    url: str
    html: str | None = None
    status_code: int | None = None
    error: str | None = None
    fetch_time: float = 0.0

    @property
    def success(self) -> bool:
        """Whether the fetch produced a document."""
        return self.html is not None and self.error is None


class PathResult(BaseModel):
    """What evaluating one path against one document produced."""

    fields: dict[str, str] = Field(default_factory=dict, description='Named values from Populate steps')
    values: list[str] = Field(default_factory=list, description='Unnamed values from Find steps')


class Record(BaseModel):
    """One document's merged field map and value list.

    Attributes:
        url: Document the record was extracted from, if it was fetched
        fields: Field name to extracted text
        values: Unnamed values in evaluation order

    """

    url: str | None = Field(default=None, description='Source URL')
    fields: dict[str, str] = Field(default_factory=dict, description='Named values')
    values: list[str] = Field(default_factory=list, description='Unnamed values')


class CrawlFailure(BaseModel):
    """A link or page that could not be processed."""

    url: str = Field(description='URL that failed')
    reason: str = Field(description='Why it failed')
    page: int = Field(default=0, description='Page the link was discovered on')


class CrawlResult(BaseModel):
    """Outcome of a crawl: successful records and failures, kept apart.

    Attributes:
        records: One record per successfully fetched link, in link order
        failures: Links or pages that could not be fetched
        pages: Number of pages (seeds) that were processed

    """

    records: list[Record] = Field(default_factory=list)
    failures: list[CrawlFailure] = Field(default_factory=list)
    pages: int = 0

    @property
    def success(self) -> bool:
        """True if nothing failed."""
        return not self.failures
