from reahl.tofu import Fixture
from reahl.tofu import expected
from reahl.tofu import scenario
from reahl.tofu import with_fixtures

from reahl.terminalmcp.applescript import ValidationError
from reahl.terminalmcp.applescript import cast
from reahl.terminalmcp.applescript import escape_for_applescript
from reahl.terminalmcp.applescript.values import BooleanValue
from reahl.terminalmcp.applescript.values import DateLiteral
from reahl.terminalmcp.applescript.values import FloatValue
from reahl.terminalmcp.applescript.values import IntegerValue
from reahl.terminalmcp.applescript.values import ListLiteral
from reahl.terminalmcp.applescript.values import MissingValue
from reahl.terminalmcp.applescript.values import NullValue
from reahl.terminalmcp.applescript.values import ObjectReference
from reahl.terminalmcp.applescript.values import RectangleLiteral
from reahl.terminalmcp.applescript.values import StringValue


class InferenceScenarios(Fixture):
    @scenario
    def empty_text_stays_text(self):
        self.raw_value = ''
        self.expected_class = StringValue
        self.expected_literal = '""'

    @scenario
    def yes_is_true(self):
        self.raw_value = 'YES'
        self.expected_class = BooleanValue
        self.expected_literal = 'true'

    @scenario
    def no_is_false(self):
        self.raw_value = 'no'
        self.expected_class = BooleanValue
        self.expected_literal = 'false'

    @scenario
    def whole_number(self):
        self.raw_value = '-42'
        self.expected_class = IntegerValue
        self.expected_literal = '-42'

    @scenario
    def decimal_number(self):
        self.raw_value = '3.25'
        self.expected_class = FloatValue
        self.expected_literal = '3.25'

    @scenario
    def braces_pass_through(self):
        self.raw_value = '{1, "two", 3}'
        self.expected_class = ListLiteral
        self.expected_literal = '{1, "two", 3}'

    @scenario
    def four_numbers_make_a_rectangle(self):
        self.raw_value = '10,20,300,400'
        self.expected_class = RectangleLiteral
        self.expected_literal = '{10,20,300,400}'

    @scenario
    def other_comma_text_makes_a_list(self):
        self.raw_value = 'alpha, 2, yes'
        self.expected_class = ListLiteral
        self.expected_literal = '{"alpha", 2, true}'

    @scenario
    def five_numbers_make_a_list(self):
        self.raw_value = '1,2,3,4,5'
        self.expected_class = ListLiteral
        self.expected_literal = '{1, 2, 3, 4, 5}'

    @scenario
    def date_expression_passes_through(self):
        self.raw_value = 'date "Monday 1 January 2024"'
        self.expected_class = DateLiteral
        self.expected_literal = 'date "Monday 1 January 2024"'

    @scenario
    def iso_date_becomes_a_date(self):
        self.raw_value = '2024-01-31'
        self.expected_class = DateLiteral
        self.expected_literal = 'date "2024-01-31"'

    @scenario
    def quoted_text_loses_its_quotes(self):
        self.raw_value = "'Basic'"
        self.expected_class = StringValue
        self.expected_literal = '"Basic"'

    @scenario
    def plain_text(self):
        self.raw_value = '  Homebrew  '
        self.expected_class = StringValue
        self.expected_literal = '"Homebrew"'


@with_fixtures(InferenceScenarios)
def test_cast_infers_the_kind_of_value_from_text(fixture):
    """AI: Without a hint, text is cast following the fixed inference order."""
    value = cast(fixture.raw_value)
    assert isinstance(value, fixture.expected_class)
    assert value.as_literal() == fixture.expected_literal


def test_cast_of_none_is_null_and_is_not_the_placeholder():
    null_value = cast(None)
    assert isinstance(null_value, NullValue)
    assert null_value.is_null
    placeholder = cast(None, 'missing value')
    assert isinstance(placeholder, MissingValue)
    assert not placeholder.is_null
    assert placeholder.as_literal() == 'missing value'


def test_cast_of_native_values():
    assert cast(True).as_literal() == 'true'
    assert cast(7).as_literal() == '7'
    assert cast(2.5).as_literal() == '2.5'
    assert cast(['a', 1]).as_literal() == '{"a", 1}'
    assert cast({'font size': 12, 'name': 'Pro'}).as_literal() == (
        '{font size:12, name:"Pro"}'
    )


def test_record_with_invalid_property_name_is_rejected():
    with expected(ValidationError):
        cast({'name:"x"} & {a': 1})


def test_numeric_text_round_trips_through_its_literal():
    for numeric_text in ['0', '-17', '12345678901234567890', '0.5', '-2.75']:
        value = cast(numeric_text)
        assert isinstance(value, (IntegerValue, FloatValue))
        assert float(value.as_literal()) == float(numeric_text)


def test_boolean_hint_accepts_yes_no_true_false_in_any_case():
    for raw_value in ['Yes', 'yes', 'TRUE']:
        assert cast(raw_value, 'boolean').as_literal() == 'true'
    for raw_value in ['no', 'False']:
        assert cast(raw_value, 'boolean').as_literal() == 'false'
    maybe = cast('maybe', 'boolean')
    assert isinstance(maybe, StringValue)
    assert maybe.as_literal() == '"maybe"'


def test_integer_hint_falls_back_to_text_for_non_numbers():
    assert cast('80', 'integer').as_literal() == '80'
    assert cast(24, 'integer').as_literal() == '24'
    assert cast('eighty', 'integer').as_literal() == '"eighty"'


def test_text_hint_skips_inference():
    assert cast('true', 'text').as_literal() == '"true"'
    assert cast('1,2,3,4', 'text').as_literal() == '"1,2,3,4"'


def test_shape_hints_render_number_tuples():
    assert cast('0, 0, 640, 480', 'rectangle').as_literal() == '{0,0,640,480}'
    assert cast('{0, 0, 640, 480}', 'rectangle').as_literal() == '{0,0,640,480}'
    assert cast('100,200', 'point').as_literal() == '{100,200}'
    assert cast([65535, 0, 0], 'color').as_literal() == '{65535,0,0}'
    assert cast('{65535, 0}', 'color').as_literal() == '{65535, 0}'


def test_reference_hints_render_unquoted():
    for hint in ['settings set', 'window', 'specifier', 'location specifier']:
        value = cast(' settings set "Pro" ', hint)
        assert isinstance(value, ObjectReference)
        assert value.as_literal() == 'settings set "Pro"'


def test_file_hint_renders_posix_file_reference():
    assert cast('/tmp/a "b".txt', 'file').as_literal() == (
        'POSIX file "/tmp/a \\"b\\".txt"'
    )
    assert cast('alias "Macintosh HD:Users:"', 'file').as_literal() == (
        'alias "Macintosh HD:Users:"'
    )
    assert cast(['/tmp/a', '/tmp/b'], 'list of file').as_literal() == (
        '{POSIX file "/tmp/a", POSIX file "/tmp/b"}'
    )


def test_record_hint_wraps_bare_text_in_braces():
    assert cast('copies:2', 'record').as_literal() == '{copies:2}'
    assert cast('{copies:2}', 'print settings').as_literal() == '{copies:2}'


def test_escape_doubles_backslashes_before_escaping_quotes_and_line_breaks():
    assert escape_for_applescript('a\\"b') == 'a\\\\\\"b'
    assert escape_for_applescript('one\ntwo\rthree') == 'one\\ntwo\\rthree'


def test_escaped_text_cannot_leave_its_quotes():
    hostile_text = 'x" & (do shell script "rm -rf ~") & "\n\\"'
    literal = cast(hostile_text, 'text').as_literal()
    interior = literal[1:-1]
    assert literal.startswith('"') and literal.endswith('"')
    assert '\n' not in literal and '\r' not in literal
    index = 0
    while index < len(interior):
        if interior[index] == '\\':
            index += 2
            continue
        assert interior[index] != '"'
        index += 1


def test_date_expression_is_rebuilt_around_its_escaped_interior():
    injected = cast('date "x" & (do shell script "id")')
    assert isinstance(injected, DateLiteral)
    assert injected.as_literal() == (
        'date "date \\"x\\" & (do shell script \\"id\\")"'
    )
    closed = cast('date "x" & (do shell script "id") & "y"')
    assert closed.as_literal() == (
        'date "x\\" & (do shell script \\"id\\") & \\"y"'
    )

    unterminated = cast('date "x & (do shell script \\"id\\")', 'date')
    assert unterminated.as_literal().startswith('date "date \\"x & ')
    assert cast('date "Jan 1 2024"', 'date').as_literal() == 'date "Jan 1 2024"'


def test_commas_inside_quotes_do_not_split_the_value():
    assert cast('"hello, world"').as_literal() == '"hello, world"'
    assert cast('date "Jan 1, 2024"').as_literal() == 'date "Jan 1, 2024"'
    assert cast('"a, b", c').as_literal() == '{"a, b", "c"}'
    assert cast('"a \\", b", c').as_literal() == '{"a \\\\\\", b", "c"}'
    assert cast('"a, b", c', 'list').as_literal() == '{"a, b", "c"}'


def test_text_with_an_open_quote_is_kept_whole():
    value = cast('don\'t, stop')
    assert isinstance(value, StringValue)
    assert value.as_literal() == '"don\'t, stop"'


def test_non_finite_numbers_are_rejected():
    for raw_value in [float('nan'), float('inf'), [1, float('-inf')]]:
        with expected(ValidationError):
            cast(raw_value)
    with expected(ValidationError):
        cast(float('inf'), 'integer')
