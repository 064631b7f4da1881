"""Output formatters for crawl results."""

from pathcrawl.outputs.json_output import format_result, save_json
from pathcrawl.outputs.table import print_diagnostics, print_failures, print_records, print_values

__all__ = [
    'format_result',
    'print_diagnostics',
    'print_failures',
    'print_records',
    'print_values',
    'save_json',
]
