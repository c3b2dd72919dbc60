import argparse
import logging
import sys

from reahl.terminalmcp.applescript import ExecutionSettings
from reahl.terminalmcp.mcp.server import create_server


def create_argument_parser():
    parser = argparse.ArgumentParser(
        description='Run TerminalMCP server.'
    )
    parser.add_argument(
        '--transport',
        default='stdio',
        choices=['stdio'],
        help='MCP transport type.',
    )
    parser.add_argument(
        '--log-level',
        default='WARNING',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level for diagnostics written to stderr.',
    )
    parser.add_argument(
        '--timeout-ms',
        type=int,
        help='Time allowed for each script attempt (default 10000).',
    )
    parser.add_argument(
        '--max-retries',
        type=int,
        help='Attempts made after a failed one (default 3).',
    )
    parser.add_argument(
        '--retry-delay-ms',
        type=int,
        help='Delay before the first retry, doubled for each next one (default 1000).',
    )
    parser.add_argument(
        '--max-output-bytes',
        type=int,
        help='Largest script output accepted (default 1048576).',
    )
    parser.add_argument(
        '--interpreter',
        help='Program used to run scripts (default osascript).',
    )
    parser.add_argument(
        '--application',
        dest='application_name',
        help='Scriptable application to control (default Terminal).',
    )
    return parser


def run_application():
    parser = create_argument_parser()
    arguments = parser.parse_args()
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, arguments.log_level),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    try:
        settings = ExecutionSettings.from_environment(
            timeout_ms=arguments.timeout_ms,
            max_retries=arguments.max_retries,
            retry_delay_ms=arguments.retry_delay_ms,
            max_output_bytes=arguments.max_output_bytes,
            interpreter=arguments.interpreter,
            application_name=arguments.application_name,
        )
    except ValueError as error:
        parser.error(str(error))
    mcp_server = create_server(settings=settings)
    mcp_server.run(transport=arguments.transport)


if __name__ == '__main__':
    run_application()
