"""browserop - declarative browser operation executor.

Runs an ordered list of commands (navigate, fill, click, wait, assert, ...)
against a live window or a remote protocol session and reports a result per
command.

Components:
- Config: Parses YAML, interpolates ${getenv:...} secrets, validates
- Registry: Maps command names to externally supplied executors
- Executor: Runs commands in order and applies the continue/stop policy
- CLI handlers: Verify/test/execute helpers and output formatters
- API: REST interface for verification and execution
"""

from browserop.cli.handlers import (
	OperatorCliContext,
	VerifyResult,
	format_test_output,
	format_verify_output,
	handle_execute,
	handle_test,
	handle_verify,
)
from browserop.config.service import ConfigLoader
from browserop.config.views import (
	Command,
	ConfigErrorKind,
	ConfigFileNotFoundError,
	ConfigParseError,
	ConfigValidationError,
	InterpolationError,
	OperationConfig,
	OperationConfigError,
	Settings,
)
from browserop.executor.service import Executor
from browserop.executor.views import ExecutionProgress, ExecutorConfig
from browserop.operation import OperatorInput, execute_operation
from browserop.registry.service import (
	CommandExecutor,
	CommandRegistry,
	get_command_executor,
	get_default_registry,
	get_registered_commands,
	register_command,
	reset_default_registry,
)
from browserop.shared_views import (
	DEFAULT_COMMAND_TIMEOUT_MS,
	BackendType,
	CdpBackendConfig,
	CommandError,
	CommandResult,
	ErrorContext,
	ErrorType,
	ExecutionContext,
	ExecutionResult,
	window_url,
)

__version__ = '1.0.0'

__all__ = [
	# Entry point
	'execute_operation',
	'OperatorInput',
	# Services
	'ConfigLoader',
	'Executor',
	'CommandRegistry',
	# Registry
	'CommandExecutor',
	'register_command',
	'get_command_executor',
	'get_registered_commands',
	'get_default_registry',
	'reset_default_registry',
	# Config models
	'OperationConfig',
	'Command',
	'Settings',
	# Config errors
	'ConfigErrorKind',
	'OperationConfigError',
	'ConfigFileNotFoundError',
	'ConfigParseError',
	'InterpolationError',
	'ConfigValidationError',
	# Execution
	'ExecutorConfig',
	'ExecutionContext',
	'ExecutionProgress',
	'ExecutionResult',
	'CommandResult',
	'CommandError',
	'ErrorContext',
	'ErrorType',
	'BackendType',
	'CdpBackendConfig',
	'DEFAULT_COMMAND_TIMEOUT_MS',
	'window_url',
	# CLI handlers
	'OperatorCliContext',
	'VerifyResult',
	'handle_verify',
	'handle_test',
	'handle_execute',
	'format_verify_output',
	'format_test_output',
]
