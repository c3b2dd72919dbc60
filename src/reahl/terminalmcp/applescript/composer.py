import logging

from reahl.terminalmcp.applescript.values import escape_for_applescript


clause_order_by_verb = {
    'close': ['saving', 'saving in'],
    'save': ['in'],
    'print': ['with properties', 'print dialog'],
    'quit': ['saving'],
    'make': ['at', 'with data', 'with properties'],
    'duplicate': ['to', 'with properties'],
    'move': ['to'],
    'do script': ['with command', 'in'],
    'set': ['to'],
}
verb_keywords = {
    'open url': 'get URL',
}


class ObjectPath:
    """Where an object sits in the containment hierarchy, innermost first.

    Each segment is an already-rendered reference such as ``tab 1`` or
    ``window "Main"``.
    """

    def __init__(self, segments):
        self.segments = list(segments)

    def as_expression(self):
        if len(self.segments) == 1:
            return self.segments[0]
        return '(%s)' % ' of '.join(self.segments)


class Clause:
    def __init__(self, keyword, value):
        self.keyword = keyword
        self.value = value

    @property
    def is_omitted(self):
        return self.value is None or self.value.is_null


class OperationDescriptor:
    def __init__(
        self,
        verb,
        target=None,
        property_name=None,
        class_name=None,
        direct_parameter=None,
        clauses=None,
        properties=None,
    ):
        self.verb = verb
        self.target = target
        self.property_name = property_name
        self.class_name = class_name
        self.direct_parameter = direct_parameter
        self.clauses = list(clauses or [])
        self.properties = list(properties or [])

    def clause_value(self, keyword):
        for clause in self.clauses:
            if clause.keyword == keyword:
                return clause.value
        return None

    def ordered_clauses(self):
        clause_order = clause_order_by_verb.get(self.verb, [])
        present_clauses = [
            clause for clause in self.clauses if not clause.is_omitted
        ]
        known_clauses = sorted(
            [clause for clause in present_clauses if clause.keyword in clause_order],
            key=lambda clause: clause_order.index(clause.keyword),
        )
        other_clauses = [
            clause
            for clause in present_clauses
            if clause.keyword not in clause_order
        ]
        return known_clauses + other_clauses

    def properties_literal(self):
        present_properties = [
            (name, value)
            for name, value in self.properties
            if value is not None and not value.is_null
        ]
        if not present_properties:
            return None
        return '{%s}' % ', '.join(
            '%s:%s' % (name, value.as_literal())
            for name, value in present_properties
        )


def rendered_clauses(clauses):
    return ''.join(
        ' %s %s' % (clause.keyword, clause.value.as_literal())
        for clause in clauses
    )


def subject_of(operation):
    if operation.direct_parameter is not None and not operation.direct_parameter.is_null:
        return operation.direct_parameter.as_literal()
    if operation.target is not None:
        return 'it'
    return None


def statement_for(operation):
    verb = operation.verb
    if verb == 'get':
        return 'return %s of it' % operation.property_name
    if verb == 'set':
        return 'set %s of it%s' % (
            operation.property_name,
            rendered_clauses(operation.ordered_clauses()),
        )
    if verb == 'count':
        statement = 'count each %s' % operation.class_name
        if operation.target is not None:
            statement += ' of it'
        return statement
    if verb == 'make':
        statement = 'make new %s' % operation.class_name
        clauses = operation.ordered_clauses()
        if operation.target is not None and operation.clause_value('at') is None:
            statement += ' at it'
        properties_literal = operation.properties_literal()
        if properties_literal is not None:
            clauses = [
                clause for clause in clauses if clause.keyword != 'with properties'
            ]
            statement += rendered_clauses(clauses)
            return statement + ' with properties %s' % properties_literal
        return statement + rendered_clauses(clauses)
    statement = verb_keywords.get(verb, verb)
    subject = subject_of(operation)
    if subject is not None:
        statement += ' %s' % subject
    return statement + rendered_clauses(operation.ordered_clauses())


def compose(operation, application_name='Terminal'):
    """Assemble the complete script text for the given operation.

    The target object is addressed once by an enclosing ``tell`` block and
    referred to as ``it`` by the statement inside it. Composition is plain
    string assembly and does not fail.
    """
    statement = statement_for(operation)
    lines = ['tell application "%s"' % escape_for_applescript(application_name)]
    if operation.target is not None:
        lines.append('    tell %s' % operation.target.as_expression())
        lines.append('        %s' % statement)
        lines.append('    end tell')
    else:
        lines.append('    %s' % statement)
    lines.append('end tell')
    script = '\n'.join(lines)
    logging.getLogger(__name__).debug('Composed %s script: %s', operation.verb, script)
    return script
