import math
import re

from reahl.terminalmcp.applescript.errors import ValidationError


numeric_pattern = re.compile('^-?[0-9]+(\\.[0-9]+)?$')
leading_date_pattern = re.compile('^[0-9]{4}-[0-9]{2}-[0-9]{2}')
date_expression_pattern = re.compile('^date "(.*)"$', re.DOTALL)
record_key_pattern = re.compile('^[A-Za-z][A-Za-z0-9 _]*$')

true_words = {'true', 'yes'}
false_words = {'false', 'no'}
file_reference_prefixes = ('file "', 'alias "', 'POSIX file "')
reference_hints = {
    'reference',
    'specifier',
    'location specifier',
    'application',
    'document',
    'window',
    'tab',
    'settings set',
    'save options',
}


def escape_for_applescript(value):
    """Escape text for use inside a double-quoted AppleScript literal.

    Backslashes are doubled first so the backslashes introduced by the
    later substitutions are not escaped again.
    """
    return (
        value.replace('\\', '\\\\')
        .replace('"', '\\"')
        .replace('\n', '\\n')
        .replace('\r', '\\r')
    )


class TypedValue:
    is_null = False
    is_quoted = False

    def as_literal(self):
        raise NotImplementedError()

    def __repr__(self):
        return '<%s %s>' % (self.__class__.__name__, self.as_literal())


class NullValue(TypedValue):
    is_null = True

    def as_literal(self):
        return 'missing value'


class MissingValue(TypedValue):
    def as_literal(self):
        return 'missing value'


class BooleanValue(TypedValue):
    def __init__(self, value):
        self.value = value

    def as_literal(self):
        return 'true' if self.value else 'false'


class IntegerValue(TypedValue):
    def __init__(self, value):
        self.value = value

    def as_literal(self):
        return str(self.value)


class FloatValue(TypedValue):
    def __init__(self, value):
        self.value = value

    def as_literal(self):
        return repr(self.value)


class StringValue(TypedValue):
    is_quoted = True

    def __init__(self, value):
        self.value = value

    def as_literal(self):
        return '"%s"' % escape_for_applescript(self.value)


class ListLiteral(TypedValue):
    def __init__(self, items=None, verbatim=None):
        self.items = items or []
        self.verbatim = verbatim

    def as_literal(self):
        if self.verbatim is not None:
            return self.verbatim
        return '{%s}' % ', '.join(item.as_literal() for item in self.items)


class RecordLiteral(TypedValue):
    def __init__(self, entries=None, verbatim=None):
        self.entries = entries or []
        self.verbatim = verbatim

    def as_literal(self):
        if self.verbatim is not None:
            return self.verbatim
        return '{%s}' % ', '.join(
            '%s:%s' % (key, value.as_literal()) for key, value in self.entries
        )


class NumberTupleLiteral(TypedValue):
    number_count = None

    def __init__(self, numbers):
        self.numbers = numbers

    def as_literal(self):
        return '{%s}' % ','.join(number.as_literal() for number in self.numbers)


class RectangleLiteral(NumberTupleLiteral):
    number_count = 4


class PointLiteral(NumberTupleLiteral):
    number_count = 2


class ColorLiteral(NumberTupleLiteral):
    number_count = 3


class DateLiteral(TypedValue):
    def __init__(self, text):
        self.text = text

    def as_literal(self):
        return 'date "%s"' % escape_for_applescript(self.text)


class ObjectReference(TypedValue):
    def __init__(self, expression):
        self.expression = expression

    def as_literal(self):
        return self.expression


def boolean_from_text(text):
    lowered = text.lower()
    if lowered in true_words:
        return True
    if lowered in false_words:
        return False
    return None


def is_native_number(raw):
    return isinstance(raw, (int, float)) and not isinstance(raw, bool)


def number_value(raw):
    if isinstance(raw, int):
        return IntegerValue(raw)
    if isinstance(raw, float):
        if not math.isfinite(raw):
            raise ValidationError('Numbers must be finite, not %r.' % raw)
        return FloatValue(raw)
    if '.' in raw:
        return FloatValue(float(raw))
    return IntegerValue(int(raw))


def numeric_parts(text):
    return [part.strip() for part in text.split(',')]


def comma_separated_parts(text):
    """Split text on the commas that sit outside quoted spans.

    Returns None when a quoted span is left open.
    """
    parts = []
    current_part = []
    open_quote = None
    escaping = False
    for character in text:
        if escaping:
            escaping = False
        elif open_quote == '"' and character == '\\':
            escaping = True
        elif open_quote is not None:
            if character == open_quote:
                open_quote = None
        elif character in '"\'':
            open_quote = character
        elif character == ',':
            parts.append(''.join(current_part).strip())
            current_part = []
            continue
        current_part.append(character)
    if open_quote is not None:
        return None
    parts.append(''.join(current_part).strip())
    return parts


def all_numeric(parts):
    return all(
        is_native_number(part)
        or (isinstance(part, str) and numeric_pattern.match(part))
        for part in parts
    )


def record_entries(mapping, hint=None):
    entries = []
    for key, value in mapping.items():
        if not isinstance(key, str) or not record_key_pattern.match(key):
            raise ValidationError('Invalid record property name: %r' % (key,))
        entries.append((key, cast(value, hint)))
    return entries


def inferred_value(raw):
    if raw is None:
        return NullValue()
    if isinstance(raw, bool):
        return BooleanValue(raw)
    if is_native_number(raw):
        return number_value(raw)
    if isinstance(raw, (list, tuple)):
        return ListLiteral(items=[inferred_value(item) for item in raw])
    if isinstance(raw, dict):
        return RecordLiteral(entries=record_entries(raw))
    text = str(raw).strip()
    if text == '':
        return StringValue('')
    boolean = boolean_from_text(text)
    if boolean is not None:
        return BooleanValue(boolean)
    if numeric_pattern.match(text):
        return number_value(text)
    if text.startswith('{') and text.endswith('}'):
        return ListLiteral(verbatim=text)
    parts = comma_separated_parts(text) if ',' in text else None
    if parts is not None and len(parts) > 1:
        if len(parts) == 4 and all_numeric(parts):
            return RectangleLiteral([number_value(part) for part in parts])
        return ListLiteral(items=[inferred_value(part) for part in parts])
    if text.startswith('date "') or leading_date_pattern.match(text):
        return date_for(text)
    if len(text) >= 2 and text[0] == text[-1] and text[0] in '"\'':
        return StringValue(text[1:-1])
    return StringValue(text)


def boolean_for(raw):
    if isinstance(raw, bool):
        return BooleanValue(raw)
    boolean = boolean_from_text(str(raw).strip())
    if boolean is None:
        return StringValue(str(raw))
    return BooleanValue(boolean)


def number_for(raw):
    if is_native_number(raw):
        return number_value(raw)
    text = str(raw).strip()
    if numeric_pattern.match(text):
        return number_value(text)
    return StringValue(str(raw))


def text_for(raw):
    if isinstance(raw, str):
        return StringValue(raw)
    return StringValue(str(raw))


def number_tuple_for(literal_class):
    def cast_number_tuple(raw):
        if isinstance(raw, (list, tuple)):
            parts = list(raw)
        else:
            text = str(raw).strip()
            if text.startswith('{') and text.endswith('}'):
                parts = numeric_parts(text[1:-1])
                if not (len(parts) == literal_class.number_count and all_numeric(parts)):
                    return ListLiteral(verbatim=text)
            else:
                parts = numeric_parts(text)
        if len(parts) == literal_class.number_count and all_numeric(parts):
            return literal_class([number_value(part) for part in parts])
        return inferred_value(raw)

    return cast_number_tuple


def list_for(raw):
    if isinstance(raw, (list, tuple)):
        return ListLiteral(items=[inferred_value(item) for item in raw])
    text = str(raw).strip()
    if text.startswith('{') and text.endswith('}'):
        return ListLiteral(verbatim=text)
    parts = comma_separated_parts(text)
    if parts is not None and len(parts) > 1:
        return ListLiteral(items=[inferred_value(part) for part in parts])
    return ListLiteral(items=[inferred_value(raw)])


def record_for(raw):
    if isinstance(raw, dict):
        return RecordLiteral(entries=record_entries(raw))
    text = str(raw).strip()
    if text.startswith('{') and text.endswith('}'):
        return RecordLiteral(verbatim=text)
    return RecordLiteral(verbatim='{%s}' % text)


def date_for(raw):
    text = str(raw).strip()
    date_expression = date_expression_pattern.match(text)
    if date_expression:
        return DateLiteral(date_expression.group(1))
    return DateLiteral(text)


def file_for(raw):
    text = str(raw).strip()
    if text.startswith(file_reference_prefixes):
        return ObjectReference(text)
    return ObjectReference('POSIX file "%s"' % escape_for_applescript(text))


def file_list_for(raw):
    if isinstance(raw, (list, tuple)):
        return ListLiteral(items=[file_for(item) for item in raw])
    return file_for(raw)


def missing_value_for(raw):
    if str(raw).strip() == 'missing value':
        return MissingValue()
    return inferred_value(raw)


def reference_for(raw):
    return ObjectReference(str(raw).strip())


hint_strategies = {
    'boolean': boolean_for,
    'integer': number_for,
    'real': number_for,
    'number': number_for,
    'text': text_for,
    'string': text_for,
    'rectangle': number_tuple_for(RectangleLiteral),
    'point': number_tuple_for(PointLiteral),
    'color': number_tuple_for(ColorLiteral),
    'list': list_for,
    'record': record_for,
    'print settings': record_for,
    'date': date_for,
    'file': file_for,
    'list of file': file_list_for,
    'missing value': missing_value_for,
    'any': inferred_value,
}


def cast(raw, hint=None):
    """Cast a raw argument into the AppleScript value it denotes.

    Without a hint the kind of value is inferred from the text. A hint
    selects how the value is rendered instead, and object reference hints
    render the value as an unquoted expression.
    """
    if raw is None:
        return MissingValue() if hint == 'missing value' else NullValue()
    if hint in reference_hints:
        return reference_for(raw)
    return hint_strategies.get(hint, inferred_value)(raw)
