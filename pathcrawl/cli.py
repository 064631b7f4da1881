"""
cli.py
=======
Command-line entry point: run a crawl config and print or save the result.

Usage:
    pathcrawl --config crawl.json --print
    pathcrawl --config crawl.json --out results.json --sequential
    pathcrawl --config crawl.json --out          # .pathcrawl/output/<site>_<time>.json
"""

import argparse
import os
import sys

import logfire
from dotenv import load_dotenv
from rich.console import Console

from pathcrawl.core.fetcher import create_fetcher
from pathcrawl.models.config import CrawlConfig
from pathcrawl.outputs.json_output import save_json
from pathcrawl.pipeline import Pipeline
from pathcrawl.utils.exceptions import FatalConfigError
from pathcrawl.utils.files import get_output_file
from pathcrawl.utils.logging import setup_local_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description='Extract data from web pages with path expressions')
    parser.add_argument('--config', '-c', required=True, help='JSON config file')
    parser.add_argument('--print', dest='show', action='store_true', help='Print results as tables')
    parser.add_argument(
        '--out',
        nargs='?',
        const='',
        help='Save results as JSON to this file (default with no value: .pathcrawl/output)',
    )
    parser.add_argument('--sequential', action='store_true', help='Fetch links one by one')
    parser.add_argument('--workers', type=int, help='Worker pool size (overrides the config)')
    parser.add_argument('--timeout', type=float, default=30.0, help='Request timeout in seconds (default: 30)')
    parser.add_argument(
        '--log-level',
        default=os.getenv('PATHCRAWL_LOG_LEVEL', 'INFO'),
        help='Level of the log file in .pathcrawl/logs (default: INFO)',
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    load_dotenv()
    args = parse_args(argv)
    console = Console()

    logfire_token = os.getenv('LOGFIRE_TOKEN')
    if logfire_token:
        logfire.configure(token=logfire_token, service_name='pathcrawl')

    log_file = setup_local_logging(args.log_level)

    try:
        config = CrawlConfig.from_file(args.config)
    except FatalConfigError as e:
        console.print(f'[bold red]✗ {e}[/bold red]')
        return 1

    updates = {}
    if args.sequential:
        updates['parallel'] = False
    if args.workers:
        updates['workers'] = args.workers
    if updates:
        config = config.model_copy(update=updates)

    fetcher = create_fetcher('simple', timeout=args.timeout, user_agent=os.getenv('PATHCRAWL_USER_AGENT'))
    pipeline = Pipeline(config, fetcher=fetcher, console=console)
    try:
        result = pipeline.run(show=args.show)
    except FatalConfigError as e:
        console.print(f'[bold red]✗ {e}[/bold red]')
        return 1
    finally:
        pipeline.close()

    if args.out is not None:
        out_file = args.out or str(get_output_file(config.base_url))
        save_json(out_file, config.base_url, result)
        console.print(f'Results written to: {out_file}')
    console.print(f'[dim]Log file: {log_file}[/dim]')
    return 0


if __name__ == '__main__':
    sys.exit(main())
