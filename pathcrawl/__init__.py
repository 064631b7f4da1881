"""pathcrawl - declarative path extraction and link crawling.

Describe once where the data sits in a page, extract it from one document or
from every document a page links to.
"""

from pathcrawl.core import (
    Crawler,
    HTMLFetcher,
    Paging,
    PathCompiler,
    PathEvaluator,
    SimpleFetcher,
    SinglePopulator,
    absolutize_links,
    compile_field,
    compile_or_raise,
    compile_path,
    create_fetcher,
    evaluate_path,
    populate_document,
    populate_html,
    prefix_links,
)
from pathcrawl.models import (
    All,
    Attribute,
    Class,
    CrawlConfig,
    CrawlFailure,
    CrawlResult,
    Descend,
    Destination,
    FetchResult,
    FieldSpec,
    Find,
    Id,
    Path,
    PathBuilder,
    PathResult,
    Populate,
    Record,
    SearchSpec,
    Single,
    Start,
    Text,
)
from pathcrawl.pipeline import Pipeline, build_populator, build_search_spec
from pathcrawl.utils.exceptions import (
    CompileError,
    FatalConfigError,
    FetchError,
    PathCompilationError,
    PathcrawlError,
    SeedUnreachableError,
)

__version__ = '0.3.0'

__all__ = [
    # Compilation
    'PathCompiler',
    'compile_path',
    'compile_field',
    'compile_or_raise',
    # Evaluation and population
    'PathEvaluator',
    'evaluate_path',
    'populate_document',
    'populate_html',
    'SinglePopulator',
    # Crawling
    'Crawler',
    'Paging',
    'absolutize_links',
    'prefix_links',
    # Fetchers
    'HTMLFetcher',
    'SimpleFetcher',
    'create_fetcher',
    # Configuration
    'CrawlConfig',
    'Pipeline',
    'build_populator',
    'build_search_spec',
    # Models
    'All',
    'Attribute',
    'Class',
    'Descend',
    'Destination',
    'FieldSpec',
    'Find',
    'Id',
    'Path',
    'PathBuilder',
    'Populate',
    'SearchSpec',
    'Single',
    'Start',
    'Text',
    'CrawlFailure',
    'CrawlResult',
    'FetchResult',
    'PathResult',
    'Record',
    # Errors
    'CompileError',
    'FatalConfigError',
    'FetchError',
    'PathCompilationError',
    'PathcrawlError',
    'SeedUnreachableError',
]
