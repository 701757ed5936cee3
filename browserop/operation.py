"""Operation entry point - load a configuration and execute it against a context."""

import logging
import os
import time
from collections.abc import Mapping
from typing import Any, Union

from browserop.config.service import ConfigLoader
from browserop.config.views import Command, OperationConfig
from browserop.executor.service import Executor, ProgressCallback
from browserop.registry.service import CommandRegistry
from browserop.shared_views import ExecutionContext, ExecutionResult, get_field

logger = logging.getLogger(__name__)

# A configuration object or mapping, a bare command list, or a YAML file path
OperatorInput = Union[OperationConfig, Mapping[str, Any], list[Union[Command, Mapping[str, Any]]], str, os.PathLike]


def load_operation(source: OperatorInput, loader: ConfigLoader | None = None) -> OperationConfig:
	"""Resolve any accepted input form into a validated configuration."""
	loader = loader or ConfigLoader()

	if isinstance(source, list):
		return loader.validate_commands(source)

	return loader.load(source)


def build_context(context: ExecutionContext | Mapping[str, Any] | None) -> ExecutionContext:
	"""Copy caller-supplied run state into a fresh context for one execution."""
	if context is None:
		return ExecutionContext()

	if isinstance(context, ExecutionContext):
		fields = {name: getattr(context, name) for name in context.model_fields_set}
	else:
		fields = dict(context)

	fields['results'] = []
	fields['start_time'] = None
	return ExecutionContext.model_validate(fields)


def configure_cookie_protection(context: ExecutionContext, config: OperationConfig) -> None:
	"""Hand ``settings.autoProtectCookies`` patterns to the session's cookie jar."""
	patterns = config.settings.get('autoProtectCookies') if config.settings else None
	if not patterns:
		return

	cookie_jar = get_field(context.request_result, 'cookie_jar') or get_field(context.request_result, 'cookieJar')
	if cookie_jar is None:
		return

	setter = getattr(cookie_jar, 'set_auto_protect_patterns', None) or getattr(cookie_jar, 'setAutoProtectPatterns', None)
	if setter is None:
		logger.warning('Cookie jar does not support auto-protect patterns, ignoring autoProtectCookies')
		return

	setter(patterns)
	logger.debug(f'Auto-protect cookies configured: {len(patterns)} patterns')


async def execute_operation(
	context: ExecutionContext | Mapping[str, Any] | None,
	source: OperatorInput,
	*,
	registry: CommandRegistry | None = None,
	loader: ConfigLoader | None = None,
	on_progress: ProgressCallback | None = None,
) -> ExecutionResult:
	"""Load a configuration and execute it.

	Args:
		context: Partial run state (backend, window, session state, overrides)
		source: OperationConfig, mapping, list of commands, or YAML file path
		registry: Registry to dispatch through (defaults to the process-wide one)
		loader: Loader to use (defaults to one reading ``os.environ``)
		on_progress: Optional progress callback

	Returns:
		The execution result

	Raises:
		OperationConfigError: If the configuration cannot be loaded; command
			failures are reported in the result instead
	"""
	config = load_operation(source, loader)
	run_context = build_context(context)

	logger.debug(f'Executing {len(config.commands)} commands (backend: {run_context.backend.value})')

	configure_cookie_protection(run_context, config)

	run_context.start_time = time.time()
	executor = Executor(registry=registry, on_progress=on_progress)
	return await executor.execute(config, run_context)
