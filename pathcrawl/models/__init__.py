"""Pydantic models for paths, configuration and results."""

from pathcrawl.models.config import CrawlConfig
from pathcrawl.models.results import CrawlFailure, CrawlResult, FetchResult, PathResult, Record
from pathcrawl.models.selectors import (
    All,
    Attribute,
    Class,
    Descend,
    Destination,
    FieldSpec,
    Find,
    Id,
    Path,
    PathBuilder,
    Populate,
    SearchSpec,
    Single,
    Start,
    Text,
)

__all__ = [
    'All',
    'Attribute',
    'Class',
    'CrawlConfig',
    'CrawlFailure',
    'CrawlResult',
    'Descend',
    'Destination',
    'FetchResult',
    'FieldSpec',
    'Find',
    'Id',
    'Path',
    'PathBuilder',
    'PathResult',
    'Populate',
    'Record',
    'SearchSpec',
    'Single',
    'Start',
    'Text',
]
