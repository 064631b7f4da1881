import pytest

from pathcrawl.core.compiler import PathCompiler, compile_field, compile_or_raise, compile_path
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


def messages(errors: list[CompileError]) -> list[str]:
    return [error.message for error in errors]


def test_start_is_first_step_with_query_and_index():
    path, errors = compile_path('START(SELECTOR: div.comment, SELECT: 2)')

    assert errors == []
    assert len(path) == 1
    assert path[0] == Start(destination=Destination(query='div.comment', selection=Single(index=2)))


def test_start_select_defaults_to_zero():
    path, errors = compile_path('START(SELECTOR: div)')

    assert errors == []
    assert path[0].destination.selection == Single(index=0)


def test_start_without_selector_gives_empty_path():
    path, errors = compile_path('START(SELECT: 0)')

    assert len(path) == 0
    assert 'Missing selector string' in messages(errors)


def test_full_chain():
    text = (
        'START(SELECTOR: div.comment, SELECT: 1) -> DESCEND(SELECTOR: p.text) -> '
        'FIND(SELECTOR: a, SELECT: ALL(|), LOC: ATTR(href))'
    )
    path, errors = compile_path(text)

    assert errors == []
    assert [type(step) for step in path.steps] == [Start, Descend, Find]
    assert path[1] == Descend(destination=Destination(query='p.text'))
    assert path[2].field == FieldSpec(
        destination=Destination(query='a', selection=All(delimiter='|')),
        target=Attribute(name='href'),
    )


def test_first_step_must_be_start():
    path, errors = compile_path('DESCEND(SELECTOR: span) -> FIND(SELECTOR: a, LOC: TEXT)')

    assert len(path) == 0
    assert messages(errors)[0] == 'First step must be Start'


def test_first_step_not_start_is_still_diagnosed():
    _, errors = compile_path('FIND(SELECTOR: a)')

    assert messages(errors) == ['First step must be Start', 'Missing location']


def test_empty_text():
    path, errors = compile_path('')

    assert len(path) == 0
    assert messages(errors) == ['First step must be Start']


def test_errors_are_batched_in_text_order():
    text = (
        'START(SELECTOR: div) -> JUMP(SELECTOR: a) -> FIND(SELECTOR: a, LOC: NOWHERE) -> '
        'POPULATE(SELECTOR: b, LOC: TEXT) -> DESCEND(SELECTOR: span, SELECT: x)'
    )
    path, errors = compile_path(text)

    assert messages(errors) == [
        'Invalid command',
        'Invalid location',
        'Missing field name',
        'Invalid select element number',
    ]
    assert [error.step for error in errors][0] == 'JUMP(SELECTOR: a)'
    # Broken steps are skipped, the rest of the path survives
    assert path.steps == (Start(destination=Destination(query='div')),)


def test_failed_start_still_reports_later_steps():
    path, errors = compile_path('START(SELECT: 0) -> FIND(SELECTOR: a)')

    assert len(path) == 0
    assert messages(errors) == ['Missing selector string', 'Missing location']


def test_second_start_is_rejected():
    path, errors = compile_path('START(SELECTOR: div) -> START(SELECTOR: span)')

    assert messages(errors) == ['Start may only be the first step']
    assert len(path) == 1


@pytest.mark.parametrize(
    ('select', 'message'),
    [
        ('-1', 'Select element number must not be negative'),
        ('first', 'Invalid select element number'),
        ('ALL()', 'ALL selection is not allowed on this step'),
    ],
)
def test_descend_selection_errors(select, message):
    _, errors = compile_path(f'START(SELECTOR: div) -> DESCEND(SELECTOR: span, SELECT: {select})')

    assert messages(errors) == [message]


def test_all_on_start_is_rejected():
    path, errors = compile_path('START(SELECTOR: div, SELECT: ALL())')

    assert len(path) == 0
    assert messages(errors) == ['ALL selection is not allowed on this step']


@pytest.mark.parametrize(
    ('step', 'message'),
    [
        ('FIND(SELECTOR: a, LOC: ATTR())', 'Missing attribute name'),
        ('FIND(SELECTOR: a)', 'Missing location'),
        ('FIND(LOC: TEXT)', 'Missing selector string'),
        ('FIND', "Expected '(' to open the arguments"),
        ('FIND SELECTOR: a', 'Invalid command'),
        ('FIND(SELECTOR a, LOC: TEXT)', "Malformed argument 'SELECTOR a', expected KEY: VALUE"),
    ],
)
def test_find_errors(step, message):
    _, errors = compile_path(f'START(SELECTOR: div) -> {step}')

    assert messages(errors) == [message]


def test_unclosed_parenthesis():
    _, errors = compile_path('START(SELECTOR: div')

    assert messages(errors) == ['Unclosed parenthesis']


def test_populate_steps_merge_at_end_by_default():
    text = (
        'START(SELECTOR: div) -> POPULATE(NAME: title, SELECTOR: h1, LOC: TEXT) -> '
        'DESCEND(SELECTOR: article) -> POPULATE(NAME: link, SELECTOR: a, LOC: ATTR(href))'
    )
    path, errors = compile_path(text)

    assert errors == []
    assert [type(step) for step in path.steps] == [Start, Descend, Populate]
    assert list(path[2].fields) == ['title', 'link']
    assert path[2].fields['link'].target == Attribute(name='href')


def test_populate_in_place():
    text = (
        'START(SELECTOR: div) -> POPULATE(NAME: title, SELECTOR: h1, LOC: TEXT) -> '
        'DESCEND(SELECTOR: article) -> POPULATE(NAME: link, SELECTOR: a, LOC: ATTR(href))'
    )
    path, errors = PathCompiler(populate_in_place=True).compile(text)

    assert errors == []
    assert [type(step) for step in path.steps] == [Start, Populate, Descend, Populate]
    assert list(path[1].fields) == ['title']
    assert list(path[3].fields) == ['link']


def test_populate_same_name_keeps_last():
    text = (
        'START(SELECTOR: div) -> POPULATE(NAME: title, SELECTOR: h1, LOC: TEXT) -> '
        'POPULATE(NAME: title, SELECTOR: h2, LOC: TEXT)'
    )
    path, _ = compile_path(text)

    assert path[1].fields['title'].destination.query == 'h2'


def test_keywords_and_keys_are_case_insensitive():
    lower, lower_errors = compile_path('start(selector: div) -> find(selector: a, select: all(), loc: attr(HREF))')
    upper, upper_errors = compile_path('START(SELECTOR: div) -> FIND(SELECTOR: a, SELECT: ALL(), LOC: ATTR(href))')

    assert lower_errors == upper_errors == []
    assert lower == upper


def test_selector_values_keep_case_and_inner_spaces():
    path, errors = compile_path('START(SELECTOR: div#Main  > ul.Items li, SELECT: 3)')

    assert errors == []
    assert path[0].destination.query == 'div#Main  > ul.Items li'
    assert path[0].destination.selection == Single(index=3)


def test_selector_with_pseudo_class():
    path, errors = compile_path('START(SELECTOR: li:nth-of-type(2)) -> FIND(SELECTOR: a:not(.hidden), LOC: TEXT)')

    assert errors == []
    assert path[0].destination.query == 'li:nth-of-type(2)'
    assert path[1].field.destination.query == 'a:not(.hidden)'


def test_commas_inside_parentheses_stay_in_the_value():
    path, errors = compile_path(
        'START(SELECTOR: ul) -> POPULATE(NAME: tags, SELECTOR: li:not(.ad, .promo), SELECT: ALL(, ), LOC: TEXT)'
    )

    assert errors == []
    tags = path[1].fields['tags']
    assert tags.destination.query == 'li:not(.ad, .promo)'
    assert tags.destination.selection == All(delimiter=', ')


def test_comma_delimiter_in_field_text():
    spec, errors = compile_field('SELECTOR: a.tag, SELECT: ALL(,), LOC: TEXT')

    assert errors == []
    assert spec.destination.selection == All(delimiter=',')


def test_whitespace_around_steps_and_separators():
    path, errors = compile_path('  START( SELECTOR : div )->\n  FIND( SELECTOR : a , LOC : TEXT )  ')

    assert errors == []
    assert path == Path(
        steps=(
            Start(destination=Destination(query='div')),
            Find(field=FieldSpec(destination=Destination(query='a'), target=Text())),
        )
    )


@pytest.mark.parametrize(('loc', 'target'), [('ID', Id()), ('class', Class()), ('Text', Text())])
def test_reserved_locations(loc, target):
    path, errors = compile_path(f'START(SELECTOR: div) -> FIND(SELECTOR: a, LOC: {loc})')

    assert errors == []
    assert path[1].field.target == target


def test_compilation_is_deterministic():
    text = 'START(SELECTOR: div) -> FIND(SELECTOR: a, LOC: ATTR(href)) -> BOGUS(x: y)'

    assert compile_path(text) == compile_path(text)


def test_compile_or_raise():
    path = compile_or_raise('START(SELECTOR: div) -> FIND(SELECTOR: a, LOC: TEXT)')
    assert len(path) == 2

    with pytest.raises(PathCompilationError) as exc_info:
        compile_or_raise('START(SELECTOR: div) -> FIND(SELECTOR: a) -> NOPE()')

    assert messages(exc_info.value.diagnostics) == ['Missing location', 'Invalid command']
    assert '2 error(s)' in str(exc_info.value)


def test_compile_field_bare_selector():
    spec, errors = compile_field('  h1.title ')

    assert errors == []
    assert spec == FieldSpec(destination=Destination(query='h1.title'), target=Text())


def test_compile_field_with_arguments():
    spec, errors = compile_field('SELECTOR: a.tag, SELECT: ALL(;), LOC: ATTR(href)')

    assert errors == []
    assert spec.destination.selection == All(delimiter=';')
    assert spec.target == Attribute(name='href')


def test_compile_field_errors():
    assert compile_field('') == (None, [CompileError('', 'Missing selector string')])

    spec, errors = compile_field('SELECTOR: a, LOC: SOMEWHERE')
    assert spec is None
    assert messages(errors) == ['Invalid location']


def test_compile_error_render_underlines_step():
    rendered = CompileError('JUMP(x: y)', 'Invalid command').render()

    assert rendered.plain == 'error: Invalid command\nJUMP(x: y)\n' + '^' * len('JUMP(x: y)')
