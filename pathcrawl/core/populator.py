"""Builds one record from one document."""

import logging

import logfire
from bs4 import BeautifulSoup

from pathcrawl.core.evaluator import evaluate_path, populate_field
from pathcrawl.core.fetcher import HTMLFetcher, create_fetcher
from pathcrawl.core.query import parse_document
from pathcrawl.models.results import Record
from pathcrawl.models.selectors import SearchSpec

logger = logging.getLogger(__name__)


def populate_document(document: BeautifulSoup, spec: SearchSpec, url: str | None = None) -> Record:
    """Extract every field and path of ``spec`` from one parsed document.

    Standalone fields are queried against the document root first. Paths are
    then evaluated in declared order: their field maps are merged into the
    record, later paths overwriting earlier ones on a name collision, and
    their value lists are concatenated.

    Args:
        document: Parsed document
        spec: What to extract
        url: Source of the document, stored on the record

    Returns:
        The merged record. Missing matches show up as empty strings, never as errors.

    """
    record = Record(url=url)

    for name, field_spec in spec.fields.items():
        record.fields[name] = populate_field(field_spec, document)

    for path in spec.paths:
        result = evaluate_path(path, document)
        record.fields.update(result.fields)
        record.values.extend(result.values)

    return record


def populate_html(html: str, spec: SearchSpec, url: str | None = None) -> Record:
    """Parse document text and populate it. See populate_document."""
    return populate_document(parse_document(html), spec, url=url)


class SinglePopulator:
    """Extracts one record from a single URL.

    Attributes:
        url: Document to fetch
        spec: What to extract from it
        fetcher: Transport used to fetch the document
        record: Result of the last run, None before the first run

    """

    def __init__(self, url: str, spec: SearchSpec, fetcher: HTMLFetcher | None = None):
        self.url = url
        self.spec = spec
        self.fetcher = fetcher or create_fetcher()
        self.record: Record | None = None

    def run(self) -> Record:
        """Fetch the URL and populate it.

        Raises:
            FetchError: If the document cannot be fetched

        """
        with logfire.span('populate', url=self.url):
            html = self.fetcher.fetch_text(self.url)
            self.record = populate_html(html, self.spec, url=self.url)
            logger.info(f'Populated {self.url}: {len(self.record.fields)} fields, {len(self.record.values)} values')
            return self.record
