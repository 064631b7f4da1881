"""JSON output formatter for crawl results."""

import json
import os
from datetime import datetime

from pathcrawl.models.results import CrawlResult


def format_result(base_url: str, result: CrawlResult) -> dict:
    """Format a crawl result as JSON-ready data with metadata.

    Args:
        base_url: Seed URL of the run
        result: Records and failures of the run

    Returns:
        Dictionary with metadata, records and failures, ready for JSON serialization.

    """
    return {
        'base_url': base_url,
        'extracted_at': datetime.now().isoformat(),
        'pages': result.pages,
        'records': [record.model_dump() for record in result.records],
        'failures': [failure.model_dump() for failure in result.failures],
    }


def save_json(filepath: str, base_url: str, result: CrawlResult):
    """Format and save a crawl result as a JSON file.

    Args:
        filepath: Path to save the file
        base_url: Seed URL of the run
        result: Records and failures of the run

    """
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(format_result(base_url, result), f, indent=2, ensure_ascii=False)
