from reahl.terminalmcp.applescript.composer import Clause
from reahl.terminalmcp.applescript.composer import ObjectPath
from reahl.terminalmcp.applescript.composer import OperationDescriptor
from reahl.terminalmcp.applescript.composer import compose
from reahl.terminalmcp.applescript.errors import DomainException
from reahl.terminalmcp.applescript.errors import ExecutionError
from reahl.terminalmcp.applescript.errors import UnavailableError
from reahl.terminalmcp.applescript.errors import UnknownOperationError
from reahl.terminalmcp.applescript.errors import ValidationError
from reahl.terminalmcp.applescript.execution import AppleScriptExecutor
from reahl.terminalmcp.applescript.execution import ExecutionSettings
from reahl.terminalmcp.applescript.values import TypedValue
from reahl.terminalmcp.applescript.values import cast
from reahl.terminalmcp.applescript.values import escape_for_applescript

__all__ = [
    'AppleScriptExecutor',
    'Clause',
    'DomainException',
    'ExecutionError',
    'ExecutionSettings',
    'ObjectPath',
    'OperationDescriptor',
    'TypedValue',
    'UnavailableError',
    'UnknownOperationError',
    'ValidationError',
    'cast',
    'compose',
    'escape_for_applescript',
]
