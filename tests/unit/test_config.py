import json

import pytest

from pathcrawl.models.config import CrawlConfig
from pathcrawl.utils.exceptions import FatalConfigError


def test_defaults():
    config = CrawlConfig(base_url='https://x.test')

    assert config.populator == 'single'
    assert config.paths == []
    assert config.fields == {}
    assert config.parallel is True
    assert config.workers == 8
    assert config.link_path is None
    assert config.deadline is None


def test_nested_meta_layout_is_flattened():
    config = CrawlConfig.model_validate(
        {
            'meta': {
                'populator': 'multiple',
                'base_url': 'https://x.test/list',
                'link_path': 'START(SELECTOR: ul) -> FIND(SELECTOR: a, SELECT: ALL(), LOC: ATTR(href))',
                'prepend_links': 'https://x.test',
                'paging': '?page={}',
            },
            'paths': ['START(SELECTOR: article) -> POPULATE(NAME: t, SELECTOR: h1, LOC: TEXT)'],
            'fields': {'title': 'h1'},
        }
    )

    assert config.populator == 'multiple'
    assert config.base_url == 'https://x.test/list'
    assert config.link_prefix == 'https://x.test'
    assert config.paging == '?page={}'
    assert config.fields == {'title': 'h1'}
    assert len(config.paths) == 1


def test_top_level_keys_win_over_meta():
    config = CrawlConfig.model_validate({'meta': {'base_url': 'https://meta.test'}, 'base_url': 'https://top.test'})

    assert config.base_url == 'https://top.test'


@pytest.mark.parametrize('data', [{}, {'base_url': 'https://x.test', 'workers': 0}, {'base_url': 'x', 'max_pages': -2}])
def test_invalid_config(data):
    with pytest.raises(ValueError):
        CrawlConfig.model_validate(data)


def test_from_file(tmp_path):
    path = tmp_path / 'crawl.json'
    path.write_text(json.dumps({'base_url': 'https://x.test', 'workers': 2}), encoding='utf-8')

    config = CrawlConfig.from_file(path)

    assert config.base_url == 'https://x.test'
    assert config.workers == 2


@pytest.mark.parametrize(
    ('content', 'message'),
    [
        (None, 'Cannot read config'),
        ('{not json', 'Cannot read config'),
        ('{"paths": []}', 'Invalid config'),
    ],
)
def test_from_file_errors(tmp_path, content, message):
    path = tmp_path / 'crawl.json'
    if content is not None:
        path.write_text(content, encoding='utf-8')

    with pytest.raises(FatalConfigError, match=message):
        CrawlConfig.from_file(path)
