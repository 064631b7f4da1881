"""Compiler, evaluator, populator and crawler."""

from pathcrawl.core.compiler import PathCompiler, compile_field, compile_or_raise, compile_path
from pathcrawl.core.crawler import Crawler, LinkFilter, Paging, absolutize_links, prefix_links
from pathcrawl.core.evaluator import PathEvaluator, evaluate_path
from pathcrawl.core.fetcher import HTMLFetcher, SimpleFetcher, create_fetcher
from pathcrawl.core.populator import SinglePopulator, populate_document, populate_html

__all__ = [
    'Crawler',
    'HTMLFetcher',
    'LinkFilter',
    'Paging',
    'PathCompiler',
    'PathEvaluator',
    'SimpleFetcher',
    'SinglePopulator',
    'absolutize_links',
    'compile_field',
    'compile_or_raise',
    'compile_path',
    'create_fetcher',
    'evaluate_path',
    'populate_document',
    'populate_html',
    'prefix_links',
]
