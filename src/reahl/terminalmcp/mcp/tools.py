import inspect
from typing import Optional
from typing import Union

from reahl.terminalmcp.mcp.dispatcher import ToolDispatcher


annotations_by_json_type = {
    'string': str,
    'number': Union[int, float],
    'boolean': bool,
}


def tool_signature(tool_definition):
    parameters = []
    for argument in tool_definition.arguments:
        annotation = annotations_by_json_type[argument.json_type]
        if argument.required:
            parameters.append(
                inspect.Parameter(
                    argument.wire_name,
                    inspect.Parameter.KEYWORD_ONLY,
                    annotation=annotation,
                )
            )
        else:
            parameters.append(
                inspect.Parameter(
                    argument.wire_name,
                    inspect.Parameter.KEYWORD_ONLY,
                    default=None,
                    annotation=Optional[annotation],
                )
            )
    return inspect.Signature(parameters)


def register_tools(mcp_server, dispatcher=None, settings=None):
    if dispatcher is None:
        dispatcher = ToolDispatcher(settings=settings)

    def tool_function_for(tool_definition):
        async def invoke_tool(**arguments):
            # Over MCP an omitted optional argument arrives as None.
            return await dispatcher.handle(
                tool_definition.name,
                {
                    argument_name: argument_value
                    for argument_name, argument_value in arguments.items()
                    if argument_value is not None
                },
            )

        invoke_tool.__name__ = tool_definition.name
        invoke_tool.__qualname__ = tool_definition.name
        invoke_tool.__doc__ = tool_definition.description
        invoke_tool.__signature__ = tool_signature(tool_definition)
        return invoke_tool

    for tool_definition in dispatcher.catalog.values():
        mcp_server.tool(
            name=tool_definition.name,
            description=tool_definition.description,
        )(tool_function_for(tool_definition))
    return dispatcher
