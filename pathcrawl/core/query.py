"""Selector matching over a parsed document, backed by BeautifulSoup."""

import logging

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from pathcrawl.models.selectors import Attribute, Class, Id, Text

logger = logging.getLogger(__name__)


def parse_document(html: str) -> BeautifulSoup:
    """Parse document text into a tree the query functions accept."""
    return BeautifulSoup(html, 'lxml')


def query(selector: str, root: BeautifulSoup | Tag) -> list[Tag]:
    """Return every element under ``root`` matching ``selector``, in document order.

    ``root`` itself is never part of the result, only its descendants. A selector
    the engine rejects matches nothing.
    """
    try:
        return root.select(selector)
    except SelectorSyntaxError as e:
        logger.warning(f'Invalid selector {selector!r}: {e}')
        return []


def extract_text(node: Tag) -> str:
    """Return the text of every string under ``node``, stripped and joined by spaces."""
    return node.get_text(separator=' ', strip=True)


def extract_attribute(node: Tag, name: str) -> str | None:
    """Return an attribute value, or None if the element lacks it."""
    value = node.get(name)
    if value is None:
        return None
    # BeautifulSoup returns multi-valued attributes (class, rel) as lists
    return ' '.join(value) if isinstance(value, list) else value


def extract(node: Tag, target: Text | Attribute | Id | Class) -> str:
    """Pull the requested piece of ``node`` as plain text."""
    if isinstance(target, Text):
        return extract_text(node)
    if isinstance(target, Attribute):
        return extract_attribute(node, target.name) or ''
    # Id and Class are reserved
    return ''
