"""Compiles path texts into Path models.

A path text is a chain of steps::

    START(SELECTOR: div.item, SELECT: 0) -> DESCEND(SELECTOR: span) ->
    POPULATE(NAME: title, SELECTOR: a, LOC: TEXT) ->
    FIND(SELECTOR: a, SELECT: ALL(|), LOC: ATTR(href))

Step keywords and argument keys are case-insensitive. Arguments sit between
the first '(' and the last ')' of a step. They are separated by the commas
outside parentheses and split on their first ':', so selectors may contain
pseudo-classes like ``:not(.a, .b)`` and delimiters like ``ALL(, )``.

Compilation never raises on malformed text. Every broken step becomes a
CompileError in the returned diagnostics and compilation moves on to the
next step.
"""

import logging
import re

from pathcrawl.models.selectors import (
    All,
    Attribute,
    Class,
    Descend,
    Destination,
    FieldSpec,
    Find,
    Id,
    Path,
    Populate,
    Single,
    Start,
    Text,
)
from pathcrawl.utils.exceptions import CompileError, PathCompilationError

logger = logging.getLogger(__name__)

STEP_SEPARATOR = '->'
KEYWORDS = ('start', 'descend', 'find', 'populate')

_SELECTOR_ARGUMENT = re.compile(r'^\s*selector\s*:', re.IGNORECASE)


def _between_brackets(text: str, step: str) -> str:
    opening = text.find('(')
    if opening == -1:
        raise CompileError(step, "Expected '(' to open the arguments")
    closing = text.rfind(')')
    if closing < opening:
        raise CompileError(step, 'Unclosed parenthesis')
    return text[opening + 1 : closing]


def _split_arguments(inner: str) -> list[str]:
    """Split on the commas that are not inside parentheses."""
    parts = []
    depth = 0
    current = []
    for char in inner:
        if char == '(':
            depth += 1
        elif char == ')':
            depth = max(depth - 1, 0)
        elif char == ',' and depth == 0:
            parts.append(''.join(current))
            current = []
            continue
        current.append(char)
    parts.append(''.join(current))
    return parts


def _keyword(step: str) -> str:
    return step.split('(', 1)[0].strip().lower()


class PathCompiler:
    """Turns path texts into Paths plus diagnostics.

    Attributes:
        populate_in_place: Compile every POPULATE as its own step at its position
            in the text. By default all POPULATE steps of a text are merged into
            one Populate step appended after the last step, which is how path
            texts have always been read.

    """

    def __init__(self, populate_in_place: bool = False):
        self.populate_in_place = populate_in_place

    def compile(self, text: str) -> tuple[Path, list[CompileError]]:
        """Compile one path text.

        Args:
            text: Steps separated by '->'

        Returns:
            The compiled Path and every CompileError found, in text order.
            The Path is empty when the text does not start with a valid START.

        """
        steps: list[Start | Descend | Populate | Find] = []
        errors: list[CompileError] = []
        merged: dict[str, FieldSpec] = {}

        tokens = [token.strip() for token in text.split(STEP_SEPARATOR)]
        first, rest = tokens[0], tokens[1:]
        anchored = False

        if _keyword(first) == 'start':
            try:
                steps.append(self._start(first))
                anchored = True
            except CompileError as e:
                errors.append(e)
        else:
            errors.append(CompileError(first, 'First step must be Start'))
            if _keyword(first) in KEYWORDS:
                # Still report what else is wrong with it
                rest = tokens

        for token in rest:
            try:
                keyword = _keyword(token)
                if keyword == 'descend':
                    steps.append(self._descend(token))
                elif keyword == 'find':
                    steps.append(self._find(token))
                elif keyword == 'populate':
                    name, spec = self._populate(token)
                    if self.populate_in_place:
                        steps.append(Populate(fields={name: spec}))
                    else:
                        merged[name] = spec
                elif keyword == 'start':
                    raise CompileError(token, 'Start may only be the first step')
                else:
                    raise CompileError(token, 'Invalid command')
            except CompileError as e:
                errors.append(e)

        if merged:
            steps.append(Populate(fields=merged))

        for error in errors:
            logger.debug(f'Compile error in {text!r}: {error}')

        if not anchored:
            return Path(), errors
        return Path(steps=tuple(steps)), errors

    def compile_field(self, text: str) -> tuple[FieldSpec | None, list[CompileError]]:
        """Compile a standalone field selector text.

        A bare CSS selector extracts the text of its first match. Text starting
        with 'SELECTOR:' is read with the POPULATE argument grammar, without NAME
        and with LOC defaulting to TEXT.

        Returns:
            The FieldSpec, or None if the text is invalid, and the diagnostics

        """
        stripped = text.strip()
        if not _SELECTOR_ARGUMENT.match(stripped):
            if not stripped:
                return None, [CompileError(text, 'Missing selector string')]
            return FieldSpec(destination=Destination(query=stripped)), []

        try:
            args = self._parse_arguments(stripped, stripped)
            destination = Destination(
                query=self._selector(stripped, args),
                selection=self._selection(stripped, args, allow_all=True),
            )
            target = self._location(stripped, args) if 'loc' in args else Text()
        except CompileError as e:
            return None, [e]
        return FieldSpec(destination=destination, target=target), []

    def _start(self, token: str) -> Start:
        args = self._arguments(token)
        selector = self._selector(token, args)
        return Start(destination=Destination(query=selector, selection=self._selection(token, args)))

    def _descend(self, token: str) -> Descend:
        args = self._arguments(token)
        selector = self._selector(token, args)
        return Descend(destination=Destination(query=selector, selection=self._selection(token, args)))

    def _find(self, token: str) -> Find:
        args = self._arguments(token)
        selector = self._selector(token, args)
        target = self._location(token, args)
        selection = self._selection(token, args, allow_all=True)
        return Find(field=FieldSpec(destination=Destination(query=selector, selection=selection), target=target))

    def _populate(self, token: str) -> tuple[str, FieldSpec]:
        args = self._arguments(token)
        selector = self._selector(token, args)
        target = self._location(token, args)
        name = self._field_name(token, args)
        selection = self._selection(token, args, allow_all=True)
        return name, FieldSpec(destination=Destination(query=selector, selection=selection), target=target)

    def _arguments(self, token: str) -> dict[str, str]:
        return self._parse_arguments(_between_brackets(token, token), token)

    @staticmethod
    def _parse_arguments(inner: str, token: str) -> dict[str, str]:
        args: dict[str, str] = {}
        for part in _split_arguments(inner):
            if not part.strip():
                continue
            key, separator, value = part.partition(':')
            if not separator:
                raise CompileError(token, f"Malformed argument '{part.strip()}', expected KEY: VALUE")
            args[key.strip().lower()] = value.strip()
        return args

    @staticmethod
    def _selector(token: str, args: dict[str, str]) -> str:
        selector = args.get('selector')
        if not selector:
            raise CompileError(token, 'Missing selector string')
        return selector

    @staticmethod
    def _field_name(token: str, args: dict[str, str]) -> str:
        name = args.get('name')
        if not name:
            raise CompileError(token, 'Missing field name')
        return name

    @staticmethod
    def _selection(token: str, args: dict[str, str], allow_all: bool = False) -> Single | All:
        raw = args.get('select')
        if not raw:
            return Single()

        if raw.lower().startswith('all'):
            if not allow_all:
                raise CompileError(token, 'ALL selection is not allowed on this step')
            if raw.lower() == 'all':
                return All()
            return All(delimiter=_between_brackets(raw, token))

        try:
            index = int(raw)
        except ValueError:
            raise CompileError(token, 'Invalid select element number') from None
        if index < 0:
            raise CompileError(token, 'Select element number must not be negative')
        return Single(index=index)

    @staticmethod
    def _location(token: str, args: dict[str, str]) -> Text | Attribute | Id | Class:
        raw = args.get('loc')
        if not raw:
            raise CompileError(token, 'Missing location')

        lowered = raw.lower()
        if lowered == 'text':
            return Text()
        if lowered.startswith('attr'):
            # HTML parsers lowercase attribute names
            name = _between_brackets(raw, token).strip().lower()
            if not name:
                raise CompileError(token, 'Missing attribute name')
            return Attribute(name=name)
        if lowered == 'id':
            return Id()
        if lowered == 'class':
            return Class()
        raise CompileError(token, 'Invalid location')


_default_compiler = PathCompiler()


def compile_path(text: str, populate_in_place: bool = False) -> tuple[Path, list[CompileError]]:
    """Compile a path text with a default compiler. See PathCompiler.compile."""
    compiler = PathCompiler(populate_in_place=True) if populate_in_place else _default_compiler
    return compiler.compile(text)


def compile_field(text: str) -> tuple[FieldSpec | None, list[CompileError]]:
    """Compile a standalone field selector text. See PathCompiler.compile_field."""
    return _default_compiler.compile_field(text)


def compile_or_raise(text: str, populate_in_place: bool = False) -> Path:
    """Compile a path text, raising if it has any diagnostics.

    Raises:
        PathCompilationError: Carrying every diagnostic of the text

    """
    path, errors = compile_path(text, populate_in_place=populate_in_place)
    if errors:
        raise PathCompilationError(text, errors)
    return path
