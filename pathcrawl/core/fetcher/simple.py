"""Simple HTTP fetcher built on requests with tenacity retries."""

import logging
import threading
import time

import requests

from pathcrawl.core.fetcher.base import HTMLFetcher
from pathcrawl.models.results import FetchResult
from pathcrawl.utils.retry import RetryableStatusError, fetch_retryer, raise_for_retry_status

DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) '
    'Chrome/120.0.0.0 Safari/537.36'
)


class SimpleFetcher(HTMLFetcher):
    """HTTP fetcher with realistic headers, connection pooling and retries.

    With ``use_session`` every thread gets its own requests.Session, so crawl
    workers never share cookie jars or connection pools.

    Attributes:
        timeout: Request timeout in seconds
        user_agent: User-Agent header sent with every request
        max_retries: Attempts per URL, the first one included
        wait_min: Minimum backoff between attempts in seconds
        wait_max: Maximum backoff between attempts in seconds
        use_session: Whether requests go through per-thread sessions

    """

    def __init__(
        self,
        timeout: float = 30,
        user_agent: str | None = None,
        max_retries: int = 3,
        wait_min: float = 1.0,
        wait_max: float = 10.0,
        use_session: bool = True,
    ):
        """Initialize the simple fetcher.

        Args:
            timeout: Request timeout in seconds
            user_agent: User-Agent header, defaults to a desktop Chrome string
            max_retries: Attempts per URL, the first one included
            wait_min: Minimum backoff between attempts in seconds
            wait_max: Maximum backoff between attempts in seconds
            use_session: If True reuse one requests.Session per thread for connection pooling

        """
        self.timeout = timeout
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.max_retries = max_retries
        self.wait_min = wait_min
        self.wait_max = wait_max
        self.use_session = use_session

        self._local = threading.local()
        self._sessions: list[requests.Session] = []
        self._sessions_lock = threading.Lock()
        self.logger = logging.getLogger(__name__)

    @property
    def session(self) -> requests.Session | None:
        """The calling thread's session, created on first use."""
        if not self.use_session:
            return None
        session = getattr(self._local, 'session', None)
        if session is None:
            session = requests.Session()
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def _get_headers(self) -> dict[str, str]:
        return {
            'User-Agent': self.user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.9',
            'Connection': 'keep-alive',
        }

    def _get(self, url: str) -> requests.Response:
        session = self.session
        getter = session.get if session else requests.get
        response = getter(url, headers=self._get_headers(), timeout=self.timeout, allow_redirects=True)
        return raise_for_retry_status(response)

    def fetch(self, url: str) -> FetchResult:
        """Fetch a URL, retrying transport errors and transient statuses.

        Args:
            url: The URL that is being fetched

        Returns:
            The fetch result; ``error`` is set when no usable document arrived

        """
        start_time = time.time()
        retryer = fetch_retryer(max_attempts=self.max_retries, wait_min=self.wait_min, wait_max=self.wait_max)

        try:
            response = retryer(self._get, url)
        except RetryableStatusError as e:
            status_code = e.response.status_code if e.response is not None else None
            self.logger.warning(f'Giving up on {url}: HTTP {status_code}')
            return FetchResult(url=url, status_code=status_code, error=str(e), fetch_time=time.time() - start_time)
        except requests.RequestException as e:
            self.logger.warning(f'Giving up on {url}: {e}')
            return FetchResult(url=url, error=str(e), fetch_time=time.time() - start_time)

        fetch_time = time.time() - start_time
        if response.status_code >= 400:
            return FetchResult(
                url=url,
                status_code=response.status_code,
                error=f'HTTP {response.status_code}',
                fetch_time=fetch_time,
            )

        self.logger.debug(f'Fetched {url} ({response.status_code}) in {fetch_time:.2f}s')
        return FetchResult(url=url, html=response.text, status_code=response.status_code, fetch_time=fetch_time)

    def close(self):
        """Close every session opened by any thread."""
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
        self._local = threading.local()
