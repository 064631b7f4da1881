"""Rich table output for records, values, failures and diagnostics."""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pathcrawl.models.results import CrawlFailure, Record
from pathcrawl.utils.exceptions import CompileError


def print_records(records: list[Record], console: Console | None = None):
    """Print one row per record with its field map."""
    if not records:
        return
    console = console or Console()

    table = Table(title='Records', show_lines=True)
    table.add_column('#', style='bold', justify='right')
    table.add_column('URL', style='cyan')
    table.add_column('Fields')
    for index, record in enumerate(records):
        fields = '\n'.join(f'{escape(name)}: {escape(value)}' for name, value in record.fields.items())
        table.add_row(str(index), escape(record.url or ''), fields)
    console.print(table)


def print_values(values: list[str], console: Console | None = None):
    """Print unnamed values, one per row."""
    if not values:
        return
    console = console or Console()

    table = Table(title='Values')
    table.add_column('Values', style='bold')
    for value in values:
        table.add_row(escape(value))
    console.print(table)


def print_failures(failures: list[CrawlFailure], console: Console | None = None):
    """Print failed links and pages."""
    if not failures:
        return
    console = console or Console()

    table = Table(title='Failures', title_style='bold red')
    table.add_column('Page', justify='right')
    table.add_column('URL', style='cyan')
    table.add_column('Reason', style='red')
    for failure in failures:
        table.add_row(str(failure.page), escape(failure.url), escape(failure.reason))
    console.print(table)


def print_diagnostics(diagnostics: list[CompileError], console: Console | None = None):
    """Print every compile error with its step underlined."""
    console = console or Console()
    for error in diagnostics:
        console.print(error.render())
