import inspect

from reahl.terminalmcp import __version__


class McpDependencyNotInstalled(Exception):
    pass


def import_fast_mcp():
    try:
        from mcp.server.fastmcp import FastMCP
    except ModuleNotFoundError as module_not_found_error:
        raise McpDependencyNotInstalled(
            'TerminalMCP requires the mcp package. '
            'Install with: pip install reahl-terminalmcp'
        ) from module_not_found_error
    return FastMCP


def import_tool_registration():
    from reahl.terminalmcp.mcp.tools import register_tools

    return register_tools


def create_server(settings=None):
    fast_mcp = import_fast_mcp()
    register_tools = import_tool_registration()
    try:
        constructor_signature = inspect.signature(fast_mcp)
    except (TypeError, ValueError):
        constructor_signature = None
    supports_keyword_arguments = any(
        parameter.kind == inspect.Parameter.VAR_KEYWORD
        for parameter in (
            constructor_signature.parameters.values()
            if constructor_signature
            else []
        )
    )
    server_arguments = {'name': 'TerminalMCP'}
    if (
        supports_keyword_arguments
        or (
            constructor_signature
            and 'version' in constructor_signature.parameters
        )
    ):
        server_arguments['version'] = __version__
    mcp_server = fast_mcp(**server_arguments)
    register_tools(mcp_server, settings=settings)
    return mcp_server
