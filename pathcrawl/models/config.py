"""Pydantic model for a crawl configuration file."""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from pathcrawl.utils.exceptions import FatalConfigError


class CrawlConfig(BaseModel):
    """Everything needed to build a populator.

    Attributes:
        populator: 'single' extracts from base_url only, 'multiple' crawls links
        base_url: Seed URL, and prefix of every page URL when paging
        paths: Path texts evaluated against every document
        link_path: Path text whose Find values are the links to crawl
        paging: URL extension appended to base_url, '{}' is the page counter
        max_pages: Fixed number of pages; None pages until one yields no records
        link_prefix: String prepended to every discovered link
        fields: Standalone field name to selector text
        parallel: Fetch links on a worker pool instead of one by one
        workers: Size of the worker pool
        deadline: Seconds after which remaining links are abandoned

    """

    populator: str = Field(default='single', description="'single' or 'multiple'")
    base_url: str = Field(description='Seed URL')
    paths: list[str] = Field(default_factory=list, description='Path texts')
    link_path: str | None = Field(default=None, description='Path text producing links')
    paging: str | None = Field(default=None, description="Page URL extension containing '{}'")
    max_pages: int | None = Field(default=None, ge=0, description='Fixed page count')
    link_prefix: str | None = Field(default=None, description='Prepended to discovered links')
    fields: dict[str, str] = Field(default_factory=dict, description='Standalone fields')
    parallel: bool = Field(default=True, description='Use the worker pool')
    workers: int = Field(default=8, ge=1, description='Worker pool size')
    deadline: float | None = Field(default=None, gt=0, description='Run deadline in seconds')

    @model_validator(mode='before')
    @classmethod
    def _flatten_meta(cls, data: Any) -> Any:
        """Accept the nested {"meta": {...}, "paths": [...], "fields": {...}} layout."""
        if not isinstance(data, dict) or 'meta' not in data:
            return data
        flat = {key: value for key, value in data.items() if key != 'meta'}
        meta = dict(data['meta'] or {})
        if 'prepend_links' in meta:
            meta.setdefault('link_prefix', meta.pop('prepend_links'))
        for key, value in meta.items():
            flat.setdefault(key, value)
        return flat

    @classmethod
    def from_file(cls, path: str | Path) -> 'CrawlConfig':
        """Load and validate a JSON config file.

        Raises:
            FatalConfigError: If the file cannot be read or is not a valid config

        """
        try:
            with open(path, encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise FatalConfigError(f'Cannot read config {path}: {e}') from e

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise FatalConfigError(f'Invalid config {path}: {e}') from e
