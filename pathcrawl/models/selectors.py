"""Pydantic models describing where and what to extract.

Every model here is frozen: a compiled Path or SearchSpec is built once and then
read concurrently by crawl workers without copying.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Single(_Frozen):
    """Take the match at ``index`` (zero-based, document order)."""

    kind: Literal['single'] = 'single'
    index: int = Field(default=0, ge=0, description='Zero-based match index')


class All(_Frozen):
    """Take every match, joined by ``delimiter`` where a single string is needed."""

    kind: Literal['all'] = 'all'
    delimiter: str = Field(default='', description='Joins values of all matches')


Selection = Annotated[Single | All, Field(discriminator='kind')]


class Destination(_Frozen):
    """A selector query paired with how many of its matches to take.

    Attributes:
        query: CSS selector handed to the query engine
        selection: Single match by index, or all matches

    """

    query: str = Field(description='CSS selector')
    selection: Selection = Field(default_factory=Single)


class Text(_Frozen):
    kind: Literal['text'] = 'text'


class Attribute(_Frozen):
    kind: Literal['attribute'] = 'attribute'
    name: str = Field(description='Attribute name, e.g. href')


class Id(_Frozen):
    """Reserved: always extracts an empty string."""

    kind: Literal['id'] = 'id'


class Class(_Frozen):
    """Reserved: always extracts an empty string."""

    kind: Literal['class'] = 'class'


ExtractionTarget = Annotated[Text | Attribute | Id | Class, Field(discriminator='kind')]


class FieldSpec(_Frozen):
    """Where to look and what to pull from the matched element."""

    destination: Destination
    target: ExtractionTarget = Field(default_factory=Text)


def _require_single(destination: Destination) -> Destination:
    if not isinstance(destination.selection, Single):
        raise ValueError('only a single element selection can anchor a step')
    return destination


class Start(_Frozen):
    """Anchor a path on the Nth match of the whole document."""

    kind: Literal['start'] = 'start'
    destination: Destination

    @field_validator('destination')
    @classmethod
    def _single_only(cls, value: Destination) -> Destination:
        return _require_single(value)


class Descend(_Frozen):
    """Move to the Nth match inside the current element."""

    kind: Literal['descend'] = 'descend'
    destination: Destination

    @field_validator('destination')
    @classmethod
    def _single_only(cls, value: Destination) -> Destination:
        return _require_single(value)


class Populate(_Frozen):
    """Fill named fields from inside the current element."""

    kind: Literal['populate'] = 'populate'
    fields: dict[str, FieldSpec] = Field(default_factory=dict)


class Find(_Frozen):
    """Collect unnamed values from inside the current element."""

    kind: Literal['find'] = 'find'
    field: FieldSpec


Step = Annotated[Start | Descend | Populate | Find, Field(discriminator='kind')]


class Path(_Frozen):
    """An ordered sequence of steps, anchored by a Start.

    An empty path is valid: it is what a failed compilation produces, and it
    evaluates to nothing.
    """

    steps: tuple[Step, ...] = ()

    @model_validator(mode='after')
    def _anchored(self) -> 'Path':
        if not self.steps:
            return self
        if not isinstance(self.steps[0], Start):
            raise ValueError('first step of a path must be Start')
        if any(isinstance(step, Start) for step in self.steps[1:]):
            raise ValueError('Start may only appear as the first step')
        return self

    def __len__(self) -> int:
        return len(self.steps)

    def __getitem__(self, index: int) -> Start | Descend | Populate | Find:
        return self.steps[index]


class PathBuilder:
    """Fluent helper to build a Path in code instead of from text."""

    def __init__(self):
        self._steps: list[Start | Descend | Populate | Find] = []

    def start(self, query: str, index: int = 0) -> 'PathBuilder':
        self._steps.append(Start(destination=Destination(query=query, selection=Single(index=index))))
        return self

    def descend(self, query: str, index: int = 0) -> 'PathBuilder':
        self._steps.append(Descend(destination=Destination(query=query, selection=Single(index=index))))
        return self

    def populate(self, fields: dict[str, FieldSpec]) -> 'PathBuilder':
        self._steps.append(Populate(fields=dict(fields)))
        return self

    def populate_one(
        self,
        name: str,
        query: str,
        selection: Single | All | None = None,
        target: Text | Attribute | Id | Class | None = None,
    ) -> 'PathBuilder':
        spec = FieldSpec(
            destination=Destination(query=query, selection=selection or Single()),
            target=target or Text(),
        )
        return self.populate({name: spec})

    def find_one(
        self, query: str, index: int = 0, target: Text | Attribute | Id | Class | None = None
    ) -> 'PathBuilder':
        destination = Destination(query=query, selection=Single(index=index))
        self._steps.append(Find(field=FieldSpec(destination=destination, target=target or Text())))
        return self

    def find_all(
        self, query: str, delimiter: str = '', target: Text | Attribute | Id | Class | None = None
    ) -> 'PathBuilder':
        destination = Destination(query=query, selection=All(delimiter=delimiter))
        self._steps.append(Find(field=FieldSpec(destination=destination, target=target or Text())))
        return self

    def build(self) -> Path:
        """Return the constructed path."""
        return Path(steps=tuple(self._steps))


class SearchSpec(_Frozen):
    """Everything to extract from one document.

    Attributes:
        fields: Standalone named fields, queried against the document root
        paths: Paths evaluated hierarchically, in declared order

    """

    fields: dict[str, FieldSpec] = Field(default_factory=dict)
    paths: tuple[Path, ...] = ()

    def with_field(
        self,
        name: str,
        query: str,
        target: Text | Attribute | Id | Class | None = None,
        selection: Single | All | None = None,
    ) -> 'SearchSpec':
        """Return a copy with one more standalone field."""
        spec = FieldSpec(
            destination=Destination(query=query, selection=selection or Single()),
            target=target or Text(),
        )
        return self.model_copy(update={'fields': {**self.fields, name: spec}})

    def with_attr_field(
        self, name: str, query: str, attribute: str, selection: Single | All | None = None
    ) -> 'SearchSpec':
        """Return a copy with one more standalone attribute field."""
        return self.with_field(name, query, target=Attribute(name=attribute), selection=selection)

    def with_path(self, path: Path) -> 'SearchSpec':
        """Return a copy with one more path appended."""
        return self.model_copy(update={'paths': (*self.paths, path)})
