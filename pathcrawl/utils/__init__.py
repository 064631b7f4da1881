"""Utility components for pathcrawl."""

from pathcrawl.utils.exceptions import (
    CompileError,
    FatalConfigError,
    FetchError,
    PathCompilationError,
    PathcrawlError,
    SeedUnreachableError,
)
from pathcrawl.utils.files import init_pathcrawl, is_initialized
from pathcrawl.utils.logging import setup_local_logging
from pathcrawl.utils.retry import RETRY_STATUSES, RetryableStatusError, fetch_retryer, log_fetch_retry

__all__ = [
    'RETRY_STATUSES',
    'RetryableStatusError',
    'CompileError',
    'FatalConfigError',
    'FetchError',
    'PathCompilationError',
    'PathcrawlError',
    'SeedUnreachableError',
    'fetch_retryer',
    'init_pathcrawl',
    'is_initialized',
    'log_fetch_retry',
    'setup_local_logging',
]
