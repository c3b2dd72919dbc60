from reahl.terminalmcp.mcp.catalog import ArgumentDefinition
from reahl.terminalmcp.mcp.catalog import ToolDefinition
from reahl.terminalmcp.mcp.catalog import tool_catalog
from reahl.terminalmcp.mcp.catalog import tool_definition_named
from reahl.terminalmcp.mcp.dispatcher import ToolDispatcher

__all__ = [
    'ArgumentDefinition',
    'ToolDefinition',
    'ToolDispatcher',
    'tool_catalog',
    'tool_definition_named',
]
