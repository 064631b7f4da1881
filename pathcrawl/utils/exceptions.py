"""Custom exceptions for pathcrawl."""

from rich.text import Text


class PathcrawlError(Exception):
    """Base class for all pathcrawl exceptions."""

    pass


class CompileError(PathcrawlError):
    """A malformed or incomplete step in a path text.

    Compile errors are collected into a diagnostics list instead of being raised,
    so one compilation reports every broken step at once.
    """

    def __init__(self, step: str, message: str):
        """Initialize compile error.

        Args:
            step: Text of the offending step
            message: What is wrong with the step

        """
        self.step = step
        self.message = message
        super().__init__(f'{message}: {step}')

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompileError):
            return NotImplemented
        return (self.step, self.message) == (other.step, other.message)

    def __hash__(self) -> int:
        return hash((self.step, self.message))

    def __repr__(self) -> str:
        return f'CompileError(step={self.step!r}, message={self.message!r})'

    def render(self) -> Text:
        """Render the error with the offending step underlined."""
        text = Text()
        text.append('error', style='bold red')
        text.append(f': {self.message}\n')
        text.append(f'{self.step}\n')
        text.append('^' * max(len(self.step), 1), style='red')
        return text


class PathCompilationError(PathcrawlError):
    """Raised when a strict compilation finds any diagnostics."""

    def __init__(self, text: str, diagnostics: list[CompileError]):
        """Initialize compilation error.

        Args:
            text: The path text that was compiled
            diagnostics: Every compile error found in the text

        """
        self.text = text
        self.diagnostics = diagnostics
        messages = '; '.join(str(d) for d in diagnostics)
        super().__init__(f'Path has {len(diagnostics)} error(s): {messages}')


class FetchError(PathcrawlError):
    """Raised when a document cannot be fetched."""

    def __init__(self, url: str, reason: str, status_code: int | None = None):
        """Initialize fetch error.

        Args:
            url: URL that failed
            reason: Transport error or HTTP status description
            status_code: HTTP status code, if a response was received

        """
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f'Failed to fetch {url}: {reason}')


class FatalConfigError(PathcrawlError):
    """Raised when a run cannot start or continue at all."""

    pass


class SeedUnreachableError(FatalConfigError):
    """Raised when the seed document of a crawl cannot be fetched."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f'Seed {url} is unreachable: {reason}')
