"""Crawls the links of a seed page and populates every linked document.

A crawl evaluates a link path against the seed document, rewrites or drops
each discovered link through an optional filter, fetches every surviving
link and populates it with the same SearchSpec. Pages of the seed can be
walked by substituting a counter into a URL template.
"""

import itertools
import logging
import threading
import time
from collections.abc import Callable, Iterator
from concurrent.futures import ThreadPoolExecutor
from typing import Literal
from urllib.parse import urljoin, urlparse

import logfire
from pydantic import BaseModel, Field, model_validator

from pathcrawl.core.evaluator import evaluate_path
from pathcrawl.core.fetcher import HTMLFetcher, create_fetcher
from pathcrawl.core.populator import populate_html
from pathcrawl.core.query import parse_document
from pathcrawl.models.results import CrawlFailure, CrawlResult, Record
from pathcrawl.models.selectors import Path, SearchSpec
from pathcrawl.utils.exceptions import FetchError, SeedUnreachableError

logger = logging.getLogger(__name__)

# Returns the link to follow, or None to drop it. Raising ValueError also drops it.
LinkFilter = Callable[[str], str | None]

PAGE_PLACEHOLDER = '{}'


def prefix_links(prefix: str) -> LinkFilter:
    """Return a filter prepending ``prefix`` to every link."""

    def _prefix(link: str) -> str | None:
        return prefix + link

    return _prefix


def absolutize_links(base_url: str) -> LinkFilter:
    """Return a filter resolving links against ``base_url``.

    Links that do not resolve to an http(s) URL (mailto:, javascript:, empty)
    or that are not valid URLs at all are dropped.
    """

    def _absolutize(link: str) -> str | None:
        if not link.strip():
            return None
        try:
            joined = urljoin(base_url, link.strip())
        except ValueError as e:
            logger.debug(f'Malformed link {link!r}: {e}')
            return None
        if urlparse(joined).scheme not in ('http', 'https'):
            return None
        return joined

    return _absolutize


class Paging(BaseModel):
    """How to walk the pages of a seed.

    Attributes:
        mode: 'disabled' crawls the base URL only, 'indefinite' walks pages until
            one yields no records, 'fixed' walks exactly ``pages`` pages
        extension: Appended to the base URL; every '{}' becomes the page number
        pages: Page count for 'fixed', optional upper bound for 'indefinite'

    """

    mode: Literal['disabled', 'indefinite', 'fixed'] = 'disabled'
    extension: str = ''
    pages: int | None = Field(default=None, ge=0)

    @model_validator(mode='after')
    def _check(self) -> 'Paging':
        if self.mode == 'disabled':
            return self
        if PAGE_PLACEHOLDER not in self.extension:
            raise ValueError(f"paging extension must contain '{PAGE_PLACEHOLDER}'")
        if self.mode == 'fixed' and self.pages is None:
            raise ValueError('fixed paging needs a page count')
        return self

    @classmethod
    def disabled(cls) -> 'Paging':
        return cls()

    @classmethod
    def indefinite(cls, extension: str, max_pages: int | None = None) -> 'Paging':
        return cls(mode='indefinite', extension=extension, pages=max_pages)

    @classmethod
    def fixed(cls, extension: str, pages: int) -> 'Paging':
        return cls(mode='fixed', extension=extension, pages=pages)

    def page_urls(self, base_url: str) -> Iterator[tuple[int, str]]:
        """Yield (page number, URL) for every page to crawl."""
        if self.mode == 'disabled':
            yield 0, base_url
            return

        template = base_url + self.extension
        counter = range(self.pages) if self.pages is not None else itertools.count()
        for page in counter:
            yield page, template.replace(PAGE_PLACEHOLDER, str(page))


class Crawler:
    """Populates every document linked from a seed page.

    Links are processed one by one (``parallel=False``) or on a thread pool of at
    most ``max_workers`` threads. Each worker owns the document it fetched; the
    only shared state is the result list, appended under a lock and sorted
    back into link order once every worker of the page has finished.

    A link that cannot be fetched becomes a CrawlFailure and the crawl goes on.
    A seed that cannot be fetched aborts the run with SeedUnreachableError.

    Attributes:
        base_url: Seed URL
        link_path: Path whose Find values are the links to follow
        spec: What to extract from every linked document
        fetcher: Transport shared by all workers
        link_filter: Rewrites a link, or drops it by returning None
        paging: Which pages of the seed to crawl
        parallel: Use the worker pool
        max_workers: Upper bound on worker threads, whatever the page fan-out
        deadline: Seconds after which unstarted links are abandoned
        preserve_order: Sort parallel results back into link order
        clock: Monotonic time source the deadline is measured with
        result: Result of the last run

    """

    def __init__(
        self,
        base_url: str,
        link_path: Path,
        spec: SearchSpec,
        fetcher: HTMLFetcher | None = None,
        link_filter: LinkFilter | None = None,
        paging: Paging | None = None,
        parallel: bool = True,
        max_workers: int = 8,
        deadline: float | None = None,
        preserve_order: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_workers < 1:
            raise ValueError('max_workers must be at least 1')
        self.base_url = base_url
        self.link_path = link_path
        self.spec = spec
        self.fetcher = fetcher or create_fetcher()
        self.link_filter = link_filter
        self.paging = paging or Paging.disabled()
        self.parallel = parallel
        self.max_workers = max_workers
        self.deadline = deadline
        self.preserve_order = preserve_order
        self.clock = clock
        self.result: CrawlResult | None = None

        self._cancelled = threading.Event()
        self._started_at = 0.0

    def cancel(self):
        """Stop the running crawl: links not yet started are recorded as failures.

        The next call to run starts afresh.
        """
        self._cancelled.set()

    def run(self) -> CrawlResult:
        """Crawl every page and return the collected records and failures.

        Raises:
            SeedUnreachableError: If the first page cannot be fetched

        """
        result = CrawlResult()
        # A cancel only stops the run in progress
        self._cancelled.clear()
        self._started_at = self.clock()

        with logfire.span('crawl', base_url=self.base_url, paging=self.paging.mode, parallel=self.parallel):
            for page, page_url in self.paging.page_urls(self.base_url):
                reason = self._stop_reason()
                if reason:
                    logger.info(f'Crawl stopped before page {page}: {reason}')
                    break

                try:
                    html = self.fetcher.fetch_text(page_url)
                except FetchError as e:
                    if page == 0:
                        raise SeedUnreachableError(page_url, e.reason) from e
                    logger.warning(f'Page {page} unreachable: {e}')
                    result.failures.append(CrawlFailure(url=page_url, reason=e.reason, page=page))
                    if self.paging.mode == 'indefinite':
                        break
                    continue

                records, failures = self.crawl_page(html, page)
                result.pages += 1
                result.records.extend(records)
                result.failures.extend(failures)

                if self.paging.mode == 'indefinite' and not records:
                    logger.info(f'Page {page} yielded no records, paging stops')
                    break

            logfire.info(
                'Crawl finished',
                pages=result.pages,
                records=len(result.records),
                failures=len(result.failures),
            )

        self.result = result
        return result

    def discover_links(self, html: str) -> list[str]:
        """Evaluate the link path against a page and filter the links it finds."""
        links = evaluate_path(self.link_path, parse_document(html)).values
        if self.link_filter is None:
            return links

        kept = []
        for link in links:
            try:
                converted = self.link_filter(link)
            except ValueError as e:
                logger.warning(f'Link filter rejected {link!r}: {e}')
                continue
            if converted is None:
                logger.debug(f'Link dropped by filter: {link!r}')
                continue
            kept.append(converted)
        return kept

    def crawl_page(self, html: str, page: int = 0) -> tuple[list[Record], list[CrawlFailure]]:
        """Populate every link discovered on one page.

        Returns:
            Records and failures of this page, each in link order when
            preserve_order is set

        """
        with logfire.span('crawl_page', page=page):
            links = self.discover_links(html)
            logger.info(f'Page {page}: {len(links)} links discovered')
            if not links:
                return [], []

            if self.parallel:
                outcomes = self._populate_parallel(links, page)
            else:
                outcomes = [(index, self._populate_link(link, page)) for index, link in enumerate(links)]

            records = [outcome for _, outcome in outcomes if isinstance(outcome, Record)]
            failures = [outcome for _, outcome in outcomes if isinstance(outcome, CrawlFailure)]
            return records, failures

    def _populate_parallel(self, links: list[str], page: int) -> list[tuple[int, Record | CrawlFailure]]:
        outcomes: list[tuple[int, Record | CrawlFailure]] = []
        lock = threading.Lock()

        def work(index: int, link: str):
            outcome = self._populate_link(link, page)
            with lock:
                outcomes.append((index, outcome))

        workers = min(self.max_workers, len(links))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='pathcrawl') as executor:
            futures = [executor.submit(work, index, link) for index, link in enumerate(links)]
            for future in futures:
                # Surfaces unexpected worker exceptions
                future.result()

        if self.preserve_order:
            outcomes.sort(key=lambda outcome: outcome[0])
        return outcomes

    def _populate_link(self, link: str, page: int) -> Record | CrawlFailure:
        reason = self._stop_reason()
        if reason:
            return CrawlFailure(url=link, reason=reason, page=page)

        try:
            html = self.fetcher.fetch_text(link)
        except FetchError as e:
            logger.warning(f'Link failed: {e}')
            return CrawlFailure(url=link, reason=e.reason, page=page)

        return populate_html(html, self.spec, url=link)

    def _stop_reason(self) -> str | None:
        if self._cancelled.is_set():
            return 'cancelled'
        if self.deadline is not None and self.clock() - self._started_at > self.deadline:
            return 'deadline exceeded'
        return None
