import logging

from reahl.terminalmcp.applescript import AppleScriptExecutor
from reahl.terminalmcp.applescript import Clause
from reahl.terminalmcp.applescript import DomainException
from reahl.terminalmcp.applescript import ObjectPath
from reahl.terminalmcp.applescript import OperationDescriptor
from reahl.terminalmcp.applescript import UnavailableError
from reahl.terminalmcp.applescript import ValidationError
from reahl.terminalmcp.applescript import cast
from reahl.terminalmcp.applescript import compose
from reahl.terminalmcp.applescript.values import reference_hints
from reahl.terminalmcp.mcp.catalog import tool_catalog
from reahl.terminalmcp.mcp.catalog import tool_definition_named


sentinel_failure_output = 'Error'
non_empty_hints = reference_hints | {'file', 'list of file'}


class ToolDispatcher:
    """Turns a tool call into a script, runs it and reports the outcome.

    Every domain failure is reported in the response instead of being
    raised, so a single bad call never takes the server down.
    """

    def __init__(self, executor=None, catalog=None, settings=None):
        self.executor = executor or AppleScriptExecutor(settings)
        self.catalog = tool_catalog if catalog is None else catalog

    @property
    def application_name(self):
        return self.executor.settings.application_name

    async def handle(self, tool_name, arguments=None):
        arguments = dict(arguments or {})
        logging.getLogger(__name__).debug(
            'Handling tool call %s with arguments %s',
            tool_name,
            arguments,
        )
        try:
            await self.require_available_application()
        except UnavailableError as error:
            return {'success': False, 'error': str(error)}
        try:
            tool_definition = tool_definition_named(tool_name, self.catalog)
            bound_values = self.bound_values(tool_definition, arguments)
            script = compose(
                self.operation_for(tool_definition, bound_values),
                application_name=self.application_name,
            )
            output = await self.executor.execute(script)
        except DomainException as error:
            logging.getLogger(__name__).warning(
                'Tool call %s failed: %s',
                tool_name,
                error,
            )
            return {
                'success': False,
                'error': str(error),
                'tool': tool_name,
                'args': arguments,
            }
        return self.response_for(tool_definition, arguments, script, output)

    async def require_available_application(self):
        if not await self.executor.is_application_available():
            raise UnavailableError('Application is not available or not running')

    def bound_values(self, tool_definition, arguments):
        unexpected_names = sorted(
            set(arguments) - set(tool_definition.argument_names)
        )
        if unexpected_names:
            raise ValidationError(
                'Unexpected argument(s) for %s: %s'
                % (tool_definition.name, ', '.join(unexpected_names))
            )
        bound_values = {}
        for argument in tool_definition.arguments:
            raw_value = arguments.get(argument.wire_name)
            if argument.required:
                if raw_value is None:
                    raise ValidationError('%s is required.' % argument.wire_name)
            elif raw_value == '' or argument.wire_name not in arguments:
                continue
            elif raw_value is None and argument.hint != 'missing value':
                continue
            bound_values[argument.wire_name] = self.validated_value(
                argument,
                raw_value,
            )
        return bound_values

    def validated_value(self, argument, raw_value):
        if argument.hint in non_empty_hints:
            accepted_types = (str, list) if argument.hint == 'list of file' else str
            if not isinstance(raw_value, accepted_types) or not raw_value:
                raise ValidationError(
                    '%s must be a non-empty string.' % argument.wire_name
                )
            if isinstance(raw_value, str) and not raw_value.strip():
                raise ValidationError('%s cannot be empty.' % argument.wire_name)
        if argument.choices is not None:
            raw_value = str(raw_value).strip().lower()
            if raw_value not in argument.choices:
                raise ValidationError(
                    '%s must be one of: %s.'
                    % (argument.wire_name, ', '.join(argument.choices))
                )
        value = cast(raw_value, argument.hint)
        literal = value.as_literal()
        if '\n' in literal or '\r' in literal:
            raise ValidationError(
                '%s cannot span more than one line.' % argument.wire_name
            )
        if '\x00' in literal:
            raise ValidationError(
                '%s cannot contain a null character.' % argument.wire_name
            )
        return value

    def operation_for(self, tool_definition, bound_values):
        def bound_for(role):
            return [
                (argument, bound_values[argument.wire_name])
                for argument in tool_definition.arguments_with_role(role)
                if argument.wire_name in bound_values
            ]

        target_segments = [value.as_literal() for argument, value in bound_for('target')]
        direct_parameters = [value for argument, value in bound_for('direct')]
        return OperationDescriptor(
            tool_definition.verb,
            target=ObjectPath(target_segments) if target_segments else None,
            property_name=tool_definition.property_name,
            class_name=tool_definition.class_name,
            direct_parameter=direct_parameters[0] if direct_parameters else None,
            clauses=[
                Clause(argument.keyword, value)
                for argument, value in bound_for('value') + bound_for('clause')
            ],
            properties=[
                (argument.keyword, value) for argument, value in bound_for('property')
            ],
        )

    def response_for(self, tool_definition, arguments, script, output):
        response = {'success': output != sentinel_failure_output}
        if tool_definition.verb == 'get':
            response['value'] = output
        elif tool_definition.verb == 'set':
            response['message'] = 'Property set successfully'
            response['value'] = arguments.get(
                tool_definition.arguments_with_role('value')[0].wire_name
            )
        else:
            response['message'] = output
        response['script'] = script
        for argument in tool_definition.arguments:
            if argument.role != 'value':
                response.setdefault(
                    argument.echo_name,
                    arguments.get(argument.wire_name),
                )
        return response
