import asyncio
import contextlib
import logging
import os

from reahl.terminalmcp.applescript.errors import ExecutionError
from reahl.terminalmcp.applescript.values import escape_for_applescript


class ExecutionSettings:
    """How scripts are run: interpreter, host application and the limits
    applied to every attempt.

    Each setting can also be given through an environment variable, see
    ``environment_variable_names``.
    """

    environment_variable_names = {
        'timeout_ms': 'TERMINAL_MCP_TIMEOUT_MS',
        'max_retries': 'TERMINAL_MCP_MAX_RETRIES',
        'retry_delay_ms': 'TERMINAL_MCP_RETRY_DELAY_MS',
        'max_output_bytes': 'TERMINAL_MCP_MAX_OUTPUT_BYTES',
        'interpreter': 'TERMINAL_MCP_INTERPRETER',
        'application_name': 'TERMINAL_MCP_APPLICATION',
    }
    integer_setting_names = [
        'timeout_ms',
        'max_retries',
        'retry_delay_ms',
        'max_output_bytes',
    ]

    def __init__(
        self,
        timeout_ms=10000,
        max_retries=3,
        retry_delay_ms=1000,
        max_output_bytes=1048576,
        interpreter='osascript',
        application_name='Terminal',
    ):
        self.timeout_ms = self.validated_count(timeout_ms, 'timeout_ms', minimum=1)
        self.max_retries = self.validated_count(max_retries, 'max_retries')
        self.retry_delay_ms = self.validated_count(retry_delay_ms, 'retry_delay_ms')
        self.max_output_bytes = self.validated_count(
            max_output_bytes,
            'max_output_bytes',
            minimum=1,
        )
        if not isinstance(interpreter, str) or not interpreter.strip():
            raise ValueError('interpreter cannot be empty.')
        if not isinstance(application_name, str) or not application_name.strip():
            raise ValueError('application_name cannot be empty.')
        self.interpreter = interpreter
        self.application_name = application_name

    @classmethod
    def from_environment(cls, environment=None, **overrides):
        environment = os.environ if environment is None else environment
        setting_values = {}
        for setting_name, variable_name in cls.environment_variable_names.items():
            if environment.get(variable_name, '').strip():
                setting_values[setting_name] = environment[variable_name].strip()
        setting_values.update(
            {
                setting_name: value
                for setting_name, value in overrides.items()
                if value is not None
            }
        )
        for setting_name in cls.integer_setting_names:
            if setting_name in setting_values:
                setting_values[setting_name] = cls.parsed_integer(
                    setting_values[setting_name],
                    setting_name,
                )
        return cls(**setting_values)

    @classmethod
    def parsed_integer(cls, value, setting_name):
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        try:
            return int(str(value).strip())
        except ValueError as error:
            raise ValueError('%s must be an integer.' % setting_name) from error

    def validated_count(self, value, setting_name, minimum=0):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError('%s must be an integer.' % setting_name)
        if value < minimum:
            raise ValueError(
                '%s must be at least %s.' % (setting_name, minimum)
            )
        return value

    @property
    def timeout_seconds(self):
        return self.timeout_ms / 1000

    def retry_delay_seconds(self, attempt_number):
        return self.retry_delay_ms * 2**attempt_number / 1000

    @property
    def availability_script(self):
        return 'tell application "%s" to return "available"' % (
            escape_for_applescript(self.application_name)
        )


class AppleScriptExecutor:
    """Runs composed scripts through the external interpreter.

    A failed attempt is retried after an exponentially growing delay. Once
    the retries run out the last failure is raised as an ExecutionError.
    """

    def __init__(self, settings=None):
        self.settings = settings or ExecutionSettings()

    async def execute(self, script):
        last_error = None
        for attempt_number in range(self.settings.max_retries + 1):
            logging.getLogger(__name__).debug(
                'Running script attempt %s of %s',
                attempt_number + 1,
                self.settings.max_retries + 1,
            )
            try:
                return await self.run_attempt(script)
            except ExecutionError as error:
                last_error = error
            if attempt_number < self.settings.max_retries:
                delay_seconds = self.settings.retry_delay_seconds(attempt_number)
                logging.getLogger(__name__).warning(
                    'Script attempt %s failed: %s (retrying in %ss)',
                    attempt_number + 1,
                    last_error,
                    delay_seconds,
                )
                await self.pause(delay_seconds)
        logging.getLogger(__name__).error(
            'Script failed after %s attempts: %s',
            self.settings.max_retries + 1,
            last_error,
        )
        raise ExecutionError('AppleScript error: %s' % last_error) from last_error

    async def is_application_available(self):
        try:
            output = await self.execute(self.settings.availability_script)
        except ExecutionError as error:
            logging.getLogger(__name__).warning(
                '%s is not available: %s',
                self.settings.application_name,
                error,
            )
            return False
        return output == 'available'

    async def pause(self, seconds):
        await asyncio.sleep(seconds)

    async def run_attempt(self, script):
        try:
            process = await asyncio.create_subprocess_exec(
                self.settings.interpreter,
                '-e',
                script,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as error:
            raise ExecutionError(
                'Could not start %s: %s' % (self.settings.interpreter, error)
            ) from error
        try:
            stdout, stderr = await asyncio.wait_for(
                self.communicate_within_limit(process),
                timeout=self.settings.timeout_seconds,
            )
        except asyncio.TimeoutError as error:
            await self.terminate(process)
            raise ExecutionError(
                'Timed out after %s ms' % self.settings.timeout_ms
            ) from error
        except (ExecutionError, asyncio.CancelledError):
            await self.terminate(process)
            raise
        stderr_text = stderr.decode('utf-8', errors='replace').strip()
        if stderr_text:
            logging.getLogger(__name__).warning('AppleScript stderr: %s', stderr_text)
        if process.returncode != 0:
            raise ExecutionError(
                stderr_text
                or '%s exited with status %s'
                % (self.settings.interpreter, process.returncode)
            )
        return stdout.decode('utf-8', errors='replace').strip()

    async def communicate_within_limit(self, process):
        stdout, stderr = await asyncio.gather(
            self.read_within_limit(process.stdout),
            self.read_within_limit(process.stderr),
        )
        await process.wait()
        return stdout, stderr

    async def read_within_limit(self, stream):
        chunks = []
        total_size = 0
        while True:
            chunk = await stream.read(65536)
            if not chunk:
                return b''.join(chunks)
            total_size += len(chunk)
            if total_size > self.settings.max_output_bytes:
                raise ExecutionError(
                    'Output exceeded %s bytes' % self.settings.max_output_bytes
                )
            chunks.append(chunk)

    async def terminate(self, process):
        if process.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()
