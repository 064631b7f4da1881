"""Executes a compiled Path against one parsed document."""

import logging

from bs4 import BeautifulSoup, Tag

from pathcrawl.core.query import extract, query
from pathcrawl.models.results import PathResult
from pathcrawl.models.selectors import All, Descend, FieldSpec, Find, Path, Populate, Start

logger = logging.getLogger(__name__)


def _nth(selector: str, root: BeautifulSoup | Tag, index: int) -> Tag | None:
    matches = query(selector, root)
    if index < len(matches):
        return matches[index]
    logger.debug(f'No match #{index} for {selector!r} ({len(matches)} found)')
    return None


def populate_field(spec: FieldSpec, root: BeautifulSoup | Tag) -> str:
    """Extract one named value from inside ``root``.

    A single selection yields the value of that match, an all selection joins
    every match's value with the delimiter. A miss yields an empty string.
    """
    selection = spec.destination.selection
    if isinstance(selection, All):
        return selection.delimiter.join(extract(node, spec.target) for node in query(spec.destination.query, root))

    node = _nth(spec.destination.query, root, selection.index)
    return extract(node, spec.target) if node is not None else ''


def find_values(spec: FieldSpec, root: BeautifulSoup | Tag) -> list[str]:
    """Extract unnamed values from inside ``root``, in document order."""
    selection = spec.destination.selection
    if isinstance(selection, All):
        return [extract(node, spec.target) for node in query(spec.destination.query, root)]

    node = _nth(spec.destination.query, root, selection.index)
    return [extract(node, spec.target)] if node is not None else []


class PathEvaluator:
    """Walks a document following the steps of one Path.

    Every Descend narrows the current element; Populate and Find read from
    inside it. A query that matches nothing never raises: Start or Descend
    misses end the walk, keeping whatever was already extracted.
    """

    def __init__(self, path: Path):
        self.path = path

    def evaluate(self, document: BeautifulSoup) -> PathResult:
        """Evaluate the path against a whole parsed document."""
        result = PathResult()
        if not self.path.steps:
            return result

        start = self.path.steps[0]
        assert isinstance(start, Start), 'paths always begin with Start'
        current = _nth(start.destination.query, document, start.destination.selection.index)
        if current is None:
            return result

        for step in self.path.steps[1:]:
            if isinstance(step, Descend):
                current = _nth(step.destination.query, current, step.destination.selection.index)
                if current is None:
                    break
            elif isinstance(step, Populate):
                for name, spec in step.fields.items():
                    result.fields[name] = populate_field(spec, current)
            elif isinstance(step, Find):
                result.values.extend(find_values(step.field, current))
            else:
                raise TypeError(f'Unexpected step in path: {step!r}')

        return result


def evaluate_path(path: Path, document: BeautifulSoup) -> PathResult:
    """Evaluate ``path`` against ``document``. See PathEvaluator."""
    return PathEvaluator(path).evaluate(document)

