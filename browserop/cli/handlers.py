"""Verify / test / execute handlers and their text and JSON formatters.

Argument parsing is left to the embedding tool; these functions take an
already-built OperatorCliContext and never raise for configuration or run
failures, reporting them in the returned result instead.
"""

import json
import logging
from collections import Counter
from collections.abc import Awaitable
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field
from pydantic_core import to_jsonable_python

from browserop.config.service import ConfigLoader
from browserop.config.views import OperationConfig, OperationConfigError
from browserop.operation import OperatorInput, execute_operation, load_operation
from browserop.shared_views import BackendType, ExecutionResult, get_field

logger = logging.getLogger(__name__)

FetchFunction = Callable[..., Awaitable[Any]]


class OperatorCliContext(BaseModel):
	"""Inputs shared by the operator commands."""

	model_config = ConfigDict(extra='forbid')

	config_path: str = Field(description='Path to the YAML configuration')
	url: str | None = Field(default=None, description='Page to test against (overrides settings.baseUrl)')
	json_output: bool = Field(default=False, description='Emit JSON instead of text')
	verbose: bool = Field(default=False, description='Include per-step details')
	fetch_options: dict[str, Any] = Field(default_factory=dict, description='Options passed to the fetch function')
	backend: BackendType | None = Field(default=None, description='Backend to execute against')


class VerifyResult(BaseModel):
	"""Outcome of validating a configuration file."""

	model_config = ConfigDict(extra='forbid')

	valid: bool
	config: OperationConfig | None = None
	error: str | None = None


class TestResult(BaseModel):
	"""Outcome of running a configuration."""

	model_config = ConfigDict(extra='forbid')

	success: bool
	config: OperationConfig | None = None
	result: ExecutionResult | None = None
	error: str | None = None


def handle_verify(ctx: OperatorCliContext, loader: ConfigLoader | None = None) -> VerifyResult:
	"""Validate an operator configuration file."""
	try:
		config = (loader or ConfigLoader()).load(ctx.config_path)
		return VerifyResult(valid=True, config=config)
	except OperationConfigError as e:
		return VerifyResult(valid=False, error=str(e))


async def handle_test(
	ctx: OperatorCliContext, fetch_fn: FetchFunction, loader: ConfigLoader | None = None
) -> TestResult:
	"""Load a configuration, fetch the target page, and execute the commands.

	Args:
		ctx: Operator context
		fetch_fn: Async callable returning a window for a URL; injected so this
			module does not depend on any browser backend
		loader: Optional config loader

	Returns:
		Test result with the execution result when the run happened
	"""
	loader = loader or ConfigLoader()
	try:
		config = loader.load(ctx.config_path)
	except OperationConfigError as e:
		return TestResult(success=False, error=str(e))

	test_url = ctx.url or (config.settings.base_url if config.settings else None)
	if not test_url:
		return TestResult(
			success=False,
			config=config,
			error='URL is required for test command (provide via CLI or baseUrl in config)',
		)

	try:
		window = await fetch_fn(test_url, dict(ctx.fetch_options))
	except Exception as e:
		logger.error(f'Failed to fetch {test_url}: {e}')
		return TestResult(success=False, config=config, error=f'Failed to fetch {test_url}: {e}')

	request_result = get_field(window, 'request_result')
	if request_result is None:
		request_result = get_field(window, 'requestResult')

	result = await execute_operation(
		{'backend': ctx.backend or BackendType.HAPPY_DOM, 'window': window, 'request_result': request_result},
		config,
		loader=loader,
	)
	return TestResult(success=result.success, config=config, result=result)


async def handle_execute(
	window: Any,
	config_or_commands: OperatorInput,
	request_result: Any = None,
	backend: BackendType | None = None,
	loader: ConfigLoader | None = None,
) -> TestResult:
	"""Execute a configuration or command list against an existing window."""
	loader = loader or ConfigLoader()
	try:
		config = load_operation(config_or_commands, loader)
	except OperationConfigError as e:
		return TestResult(success=False, error=str(e))

	result = await execute_operation(
		{'backend': backend or BackendType.HAPPY_DOM, 'window': window, 'request_result': request_result},
		config,
		loader=loader,
	)
	return TestResult(success=result.success, config=config, result=result)


def format_verify_output(result: VerifyResult, json_output: bool) -> str:
	"""Render a verify result for display."""
	if json_output:
		if result.valid and result.config:
			payload = {
				'valid': True,
				'config': {
					'name': result.config.name,
					'version': result.config.version,
					'totalCommands': len(result.config.commands),
					'commandTypes': [c.command for c in result.config.commands],
				},
			}
		else:
			payload = {'valid': False, 'error': result.error}
		return json.dumps(payload, indent=2)

	if not (result.valid and result.config):
		return f'✗ Configuration is invalid\n\nError: {result.error}'

	config = result.config
	lines = ['✓ Configuration is valid', '  File: (validated)']
	if config.name:
		lines.append(f'  Name: {config.name}')
	lines.append(f'  Version: {config.version}')
	lines.append(f'  Commands: {len(config.commands)}')
	lines.append('\nCommand breakdown:')

	for name, count in Counter(c.command for c in config.commands).items():
		lines.append(f'  - {name}: {count}')

	return '\n'.join(lines)


def _step_description(data: Any, fallback: str) -> str:
	description = get_field(data, 'description')
	return description if isinstance(description, str) and description else fallback


def format_test_output(result: TestResult, verbose: bool, json_output: bool) -> str:
	"""Render a test or execute result for display."""
	if json_output:
		if result.result:
			return json.dumps(to_jsonable_python(result.result, fallback=repr), indent=2)
		return json.dumps({'success': False, 'error': result.error}, indent=2)

	if not result.result:
		return f'Error: {result.error}'

	r = result.result
	lines: list[str] = []

	if verbose:
		lines.append('')
		lines.append('=' * 60)

	lines.append('✅ Test PASSED' if r.success else '❌ Test FAILED')
	lines.append(f'   Steps: {r.success_count}/{r.total_commands} succeeded')
	lines.append(f'   Duration: {r.duration}ms')

	if not r.success:
		lines.append('\n❌ Failed steps:')
		for res in r.results:
			if res.success:
				continue
			lines.append(f'   [Step {res.command_index + 1}] {_step_description(res.data, res.command)}')
			lines.append(f'      Error: {res.error.message if res.error else "unknown error"}')

	if verbose:
		lines.append('=' * 60)
		lines.append('')
		lines.append('\U0001f4ca Step Details:')
		for res in r.results:
			status = '✓' if res.success else '✗'
			lines.append(f'   {status} [{res.command_index + 1}] {res.command}: {_step_description(res.data, res.command)}')
			lines.append(f'      Time: {res.duration}ms')
			if not res.success and res.error:
				lines.append(f'      Error: {res.error.message}')
		lines.append('')

	return '\n'.join(lines)
