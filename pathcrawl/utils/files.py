"""Utility functions for locating pathcrawl's working directories."""

from datetime import datetime
from pathlib import Path
from urllib.parse import urlparse


def get_project_root() -> Path:
    """Find the project root by searching upwards from the Current Working Directory.

    Stops at the first directory containing a marker file.
    """
    current_path = Path.cwd()

    markers = {'.git', 'pyproject.toml', '.pathcrawl', 'requirements.txt'}

    for parent in [current_path] + list(current_path.parents):
        if any((parent / marker).exists() for marker in markers):
            return parent

    # No markers found (e.g., running in /tmp)
    return current_path


def get_logs_path() -> Path:
    """Return the path to the logs directory in .pathcrawl."""
    return get_project_root() / '.pathcrawl' / 'logs'


def get_output_path() -> Path:
    """Return the path to the crawl output directory in .pathcrawl."""
    return get_project_root() / '.pathcrawl' / 'output'


def get_output_file(base_url: str) -> Path:
    """Return a timestamped JSON file in the output directory named after the crawled site."""
    domain = urlparse(base_url).netloc.replace('www.', '') or 'local'
    safe_domain = domain.replace('.', '_').replace(':', '_')
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    return get_output_path() / f'{safe_domain}_{timestamp}.json'


def is_initialized() -> bool:
    """Check if the .pathcrawl directory exists in the project root."""
    pathcrawl_dir = get_project_root() / '.pathcrawl'
    return pathcrawl_dir.is_dir() and (pathcrawl_dir / '.gitignore').exists()


def init_pathcrawl() -> Path:
    """Initialize the .pathcrawl directory and return it."""
    pathcrawl_dir = get_project_root() / '.pathcrawl'
    get_logs_path().mkdir(parents=True, exist_ok=True)
    get_output_path().mkdir(parents=True, exist_ok=True)

    # Keep generated files out of source control
    gitignore = pathcrawl_dir / '.gitignore'
    if not gitignore.exists():
        gitignore.write_text('# Automatically created by pathcrawl\n*\n')

    return pathcrawl_dir
