"""Abstract base class for HTML fetchers."""

from abc import ABC, abstractmethod

from pathcrawl.models.results import FetchResult
from pathcrawl.utils.exceptions import FetchError


class HTMLFetcher(ABC):
    """Abstract base class for HTML fetchers.

    Implement this interface to plug in another transport. Implementations
    are shared by every crawl worker, so ``fetch`` must be safe to call from
    several threads at once.
    """

    @abstractmethod
    def fetch(self, url: str) -> FetchResult:
        """Fetch HTML from a URL.

        Args:
            url: URL to fetch

        Returns:
            FetchResult with the document text, or with an error set.
            Transport failures are reported in the result, not raised.

        """
        pass

    def fetch_text(self, url: str) -> str:
        """Fetch a URL and return its document text.

        Raises:
            FetchError: If the fetch did not produce a document

        """
        result = self.fetch(url)
        if not result.success:
            raise FetchError(url, result.error or 'empty response', status_code=result.status_code)
        assert result.html is not None
        return result.html

    def close(self):
        """Release any held resources."""
        pass

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
