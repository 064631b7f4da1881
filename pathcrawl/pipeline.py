"""Builds populators from a CrawlConfig and runs them with console reporting."""

import logging

import logfire
from pydantic import ValidationError
from rich.console import Console
from rich.theme import Theme

from pathcrawl.core.compiler import compile_field, compile_path
from pathcrawl.core.crawler import Crawler, Paging, absolutize_links, prefix_links
from pathcrawl.core.fetcher import HTMLFetcher, create_fetcher
from pathcrawl.core.populator import SinglePopulator
from pathcrawl.models.config import CrawlConfig
from pathcrawl.models.results import CrawlResult
from pathcrawl.models.selectors import SearchSpec
from pathcrawl.outputs.table import print_diagnostics, print_failures, print_records, print_values
from pathcrawl.utils.exceptions import CompileError, FatalConfigError, FetchError, SeedUnreachableError

logger = logging.getLogger(__name__)

POPULATOR_KINDS = ('single', 'multiple')


def build_search_spec(paths: list[str], fields: dict[str, str]) -> tuple[SearchSpec, list[CompileError]]:
    """Compile path texts and field selector texts into one SearchSpec.

    Paths that compile to nothing are left out; fields that fail to compile
    are left out. Every diagnostic is returned.
    """
    diagnostics: list[CompileError] = []
    compiled_fields = {}
    for name, text in fields.items():
        spec, errors = compile_field(text)
        diagnostics.extend(errors)
        if spec is not None:
            compiled_fields[name] = spec

    compiled_paths = []
    for text in paths:
        path, errors = compile_path(text)
        diagnostics.extend(errors)
        if len(path):
            compiled_paths.append(path)

    return SearchSpec(fields=compiled_fields, paths=tuple(compiled_paths)), diagnostics


def build_paging(config: CrawlConfig) -> Paging:
    """Translate the paging settings of a config."""
    if config.paging is None:
        return Paging.disabled()
    try:
        if config.max_pages is None:
            return Paging.indefinite(config.paging)
        return Paging.fixed(config.paging, config.max_pages)
    except ValidationError as e:
        raise FatalConfigError(f'Invalid paging {config.paging!r}: {e}') from e


def build_populator(
    config: CrawlConfig, fetcher: HTMLFetcher | None = None
) -> tuple[SinglePopulator | Crawler, list[CompileError]]:
    """Compile a config into a ready-to-run populator.

    Args:
        config: Validated configuration
        fetcher: Transport to use, defaults to a SimpleFetcher

    Returns:
        The populator ('single' -> SinglePopulator, 'multiple' -> Crawler) and
        the diagnostics of every compiled text

    Raises:
        FatalConfigError: Unknown populator kind, missing or empty link path,
            invalid paging

    """
    kind = config.populator.strip().lower()
    if kind not in POPULATOR_KINDS:
        raise FatalConfigError(f"Invalid populator type {config.populator!r}. Use 'single' or 'multiple'!")

    fetcher = fetcher or create_fetcher()
    spec, diagnostics = build_search_spec(config.paths, config.fields)

    if kind == 'single':
        return SinglePopulator(config.base_url, spec, fetcher=fetcher), diagnostics

    if not config.link_path:
        raise FatalConfigError('Link path must be provided for the multiple populator')
    link_path, link_errors = compile_path(config.link_path)
    diagnostics.extend(link_errors)
    if not len(link_path):
        raise FatalConfigError('Link path did not compile to any step')

    link_filter = prefix_links(config.link_prefix) if config.link_prefix else absolutize_links(config.base_url)
    crawler = Crawler(
        config.base_url,
        link_path,
        spec,
        fetcher=fetcher,
        link_filter=link_filter,
        paging=build_paging(config),
        parallel=config.parallel,
        max_workers=config.workers,
        deadline=config.deadline,
    )
    return crawler, diagnostics


class Pipeline:
    """Runs a configured extraction and reports it on the console.

    Attributes:
        config: Configuration being run
        console: Rich console instance for formatted output
        fetcher: Transport shared by every fetch of the run
        diagnostics: Compile errors of the last build

    """

    def __init__(self, config: CrawlConfig, fetcher: HTMLFetcher | None = None, console: Console | None = None):
        self.config = config
        self.console = console or Console(
            theme=Theme(
                {
                    'info': 'dim cyan',
                    'warning': 'magenta',
                    'danger': 'bold red',
                    'success': 'bold green',
                    'step': 'bold blue',
                }
            )
        )
        self.fetcher = fetcher or create_fetcher()
        self.diagnostics: list[CompileError] = []

    def run(self, show: bool = False) -> CrawlResult:
        """Build the populator, run it and return its records.

        Compile diagnostics are reported before any fetch starts.

        Args:
            show: Print records, values and failures as tables

        Raises:
            FatalConfigError: If the config cannot be run or the seed is unreachable

        """
        with logfire.span('run', base_url=self.config.base_url, populator=self.config.populator):
            populator, self.diagnostics = build_populator(self.config, fetcher=self.fetcher)
            if self.diagnostics:
                logger.warning(f'{len(self.diagnostics)} compile error(s) in config')
                print_diagnostics(self.diagnostics, console=self.console)

            if isinstance(populator, SinglePopulator):
                result = self._run_single(populator)
            else:
                self.console.print(f'[step]Crawling links of {self.config.base_url}...[/step]')
                result = populator.run()

        self.console.print(
            f'[success]✓ {len(result.records)} record(s)[/success] from {result.pages} page(s), '
            f'[warning]{len(result.failures)} failure(s)[/warning]'
        )
        if show:
            print_records(result.records, console=self.console)
            if isinstance(populator, SinglePopulator) and result.records:
                print_values(result.records[0].values, console=self.console)
            print_failures(result.failures, console=self.console)
        return result

    def _run_single(self, populator: SinglePopulator) -> CrawlResult:
        self.console.print(f'[step]Populating {populator.url}...[/step]')
        try:
            record = populator.run()
        except FetchError as e:
            raise SeedUnreachableError(populator.url, e.reason) from e
        return CrawlResult(records=[record], pages=1)

    def close(self):
        """Close the fetcher."""
        self.fetcher.close()
