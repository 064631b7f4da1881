import logfire
import pytest

from pathcrawl.core.fetcher import HTMLFetcher
from pathcrawl.utils.exceptions import FetchError


@pytest.fixture(scope='session', autouse=True)
def quiet_logfire():
    logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def comment_html():
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>Comments</title>
    </head>
    <body>
        <div class="comment" id="c1">
            <a class="user" href="/user/ada">ada</a>
            <span class="age">2 hours ago</span>
            <p class="text">First <b>comment</b> with a <a href="https://example.com/one">link</a></p>
        </div>
        <div class="comment" id="c2">
            <a class="user" href="/user/linus">linus</a>
            <span class="age">1 hour ago</span>
            <p class="text">Second comment <a href="/two">here</a> and <a href="/three">there</a></p>
        </div>
    </body>
    </html>
    """


@pytest.fixture
def list_html():
    return """
    <html>
    <body>
        <ul id="items">
            <li><a href="/a">A</a></li>
            <li><a href="/b">B</a></li>
            <li><a href="/c">C</a></li>
        </ul>
    </body>
    </html>
    """


@pytest.fixture
def article_html():
    """Build an article page with the given title and author."""

    def _build(title: str, author: str = 'Jane Doe') -> str:
        return f"""
    <html>
    <head><title>{title} | Site</title></head>
    <body>
        <article>
            <h1>{title}</h1>
            <span class="author">{author}</span>
            <a class="tag" href="/tag/news">news</a>
            <a class="tag" href="/tag/tech">tech</a>
        </article>
    </body>
    </html>
    """

    return _build


@pytest.fixture
def make_fetcher(mocker):
    """Build a fetcher serving the given URL -> HTML map; other URLs fail."""

    def _make(pages: dict[str, str]):
        fetcher = mocker.Mock(spec=HTMLFetcher)

        def fetch_text(url):
            if url not in pages:
                raise FetchError(url, 'HTTP 404', status_code=404)
            return pages[url]

        fetcher.fetch_text.side_effect = fetch_text
        return fetcher

    return _make


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line('markers', 'integration: marks tests as integration tests')
    config.addinivalue_line('markers', 'unit: marks tests as unit tests')


def pytest_collection_modifyitems(config, items):
    """Apply directory-based marks to collected test items."""

    for item in items:
        # Get the test file path
        if hasattr(item, 'fspath'):
            file_path = str(item.fspath)

            # Add marks based on directory
            if '/tests/integration/' in file_path:
                item.add_marker(pytest.mark.integration)
            elif '/tests/unit/' in file_path:
                item.add_marker(pytest.mark.unit)
