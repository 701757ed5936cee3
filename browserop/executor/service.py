"""Executor service - runs an operation configuration command by command."""

import inspect
import logging
import time
from collections.abc import Awaitable
from typing import Any, Callable

from browserop.config.views import Command, OperationConfig
from browserop.executor.views import ExecutionProgress, ExecutorConfig
from browserop.registry.service import CommandRegistry, get_default_registry
from browserop.shared_views import (
	CommandResult,
	ErrorType,
	ExecutionContext,
	ExecutionResult,
	get_field,
	set_field,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ExecutionProgress], None] | Callable[[ExecutionProgress], Awaitable[None]]


class Executor:
	"""Executes a configuration against any backend through an ExecutionContext.

	Commands run strictly one after another. Each one is dispatched through the
	command registry, so this class never branches on what a command does.
	Failures are returned as data in the result and never raised out of
	``execute``.
	"""

	def __init__(
		self,
		registry: CommandRegistry | None = None,
		config: ExecutorConfig | None = None,
		on_progress: ProgressCallback | None = None,
	):
		"""Initialize the Executor.

		Args:
			registry: Registry to dispatch through (defaults to the process-wide one)
			config: Optional executor configuration
			on_progress: Optional callback, sync or async, called around each command
		"""
		self._registry = registry
		self.config = config or ExecutorConfig()
		self.on_progress = on_progress

	@property
	def registry(self) -> CommandRegistry:
		return self._registry if self._registry is not None else get_default_registry()

	async def execute(self, config: OperationConfig, context: ExecutionContext) -> ExecutionResult:
		"""Execute every command of a configuration in declared order.

		Args:
			config: A validated configuration
			context: Run state; unset fields are filled from ``config.settings``

		Returns:
			The aggregate execution result
		"""
		start_time = context.start_time or time.time()
		context.start_time = start_time
		context.apply_defaults(config.settings)

		total = len(config.commands)
		logger.info(f'Starting execution ({context.backend.value}): {config.name or "Unnamed operation"}')
		logger.debug(f'Total commands: {total}')

		for index, command in enumerate(config.commands):
			logger.debug(f'Executing command {index + 1}/{total}: {command.command}')
			await self._emit_progress(total, index, command.command, 'running', start_time)

			result = await self._execute_command(context.window, command, context, index)
			context.results.append(result)

			if self._carries_new_window(command, result):
				await self._replace_window(context, result, command.command)

			await self._emit_progress(total, index, command.command, 'success' if result.success else 'error', start_time)

			if not result.success:
				logger.debug(f'Command {index + 1} failed: {result.error.message if result.error else "unknown error"}')

				if not context.continue_on_error:
					logger.debug('Stopping execution due to error')
					break

		duration = int((time.time() - start_time) * 1000)
		success_count = sum(1 for r in context.results if r.success)
		error_count = len(context.results) - success_count

		logger.info(f'Execution complete: {success_count}/{total} succeeded ({duration}ms)')

		return ExecutionResult(
			success=error_count == 0,
			config_name=config.name,
			backend=context.backend,
			total_commands=total,
			success_count=success_count,
			error_count=error_count,
			duration=duration,
			results=list(context.results),
		)

	async def _execute_command(
		self, window: Any, command: Command, context: ExecutionContext, command_index: int
	) -> CommandResult:
		"""Dispatch one command through the registry.

		Unknown commands and anything raised by the executor become failed
		results of type execution_error.
		"""
		executor = self.registry.get(command.command)
		if executor is None:
			return CommandResult.failure(
				command=command.command,
				command_index=command_index,
				error_type=ErrorType.EXECUTION_ERROR,
				message=f'Unknown command type: {command.command}',
				url=context.current_url(),
			)

		try:
			outcome = executor(window, command, context, command_index)
			if inspect.isawaitable(outcome):
				outcome = await outcome

			if isinstance(outcome, CommandResult):
				return outcome
			if outcome is None:
				raise TypeError(f'Executor for {command.command!r} returned no result')
			return CommandResult.model_validate(outcome)

		except Exception as e:
			logger.error(f'Unexpected error executing command {command.command}: {e}', exc_info=True)
			return CommandResult.failure(
				command=command.command or 'unknown',
				command_index=command_index,
				error_type=ErrorType.EXECUTION_ERROR,
				message=str(e) or type(e).__name__,
				url=context.current_url(),
			)

	def _carries_new_window(self, command: Command, result: CommandResult) -> bool:
		if not result.success or command.command not in self.config.window_replacing_commands:
			return False
		return self._new_window(result) is not None

	@staticmethod
	def _new_window(result: CommandResult) -> Any:
		new_window = get_field(result.data, 'newWindow')
		if new_window is None:
			new_window = get_field(result.data, 'new_window')
		return new_window

	async def _replace_window(self, context: ExecutionContext, result: CommandResult, command_name: str) -> None:
		"""Swap the active window for the one a command reported.

		The old handle is released best-effort. Session state is taken from the
		new handle; a remapper attached to the previous session state is kept
		when the new state has none.
		"""
		logger.debug(f'Replacing window after {command_name} command')

		old_window = context.window
		new_window = self._new_window(result)

		if self.config.release_replaced_windows and old_window is not None and old_window is not new_window:
			await self._release_window(old_window)

		context.window = new_window

		previous_remapper = get_field(context.request_result, 'remapper')
		new_state = get_field(new_window, 'request_result')
		if new_state is None:
			new_state = get_field(new_window, 'requestResult')

		if new_state is not None:
			context.request_result = new_state
			if previous_remapper is not None and get_field(new_state, 'remapper') is None:
				try:
					set_field(new_state, 'remapper', previous_remapper)
					logger.debug('Preserved remapper across window replacement')
				except Exception as e:
					logger.warning(f'Could not carry remapper to new session state: {e}')

	async def _release_window(self, window: Any) -> None:
		try:
			happy_dom = get_field(window, 'happyDOM') or get_field(window, 'happy_dom')
			release = getattr(happy_dom, 'abort', None) if happy_dom is not None else None
			if release is None:
				release = getattr(window, 'close', None)
			if release is None:
				return

			outcome = release()
			if inspect.isawaitable(outcome):
				await outcome

		except Exception as e:
			logger.warning(f'Ignoring error while releasing replaced window: {e}')

	async def _emit_progress(
		self, total: int, index: int, command_name: str, status: str, start_time: float
	) -> None:
		if not self.on_progress:
			return

		progress = ExecutionProgress(
			total_commands=total,
			current_command=index,
			current_command_name=command_name,
			status=status,
			elapsed_ms=int((time.time() - start_time) * 1000),
		)

		try:
			outcome = self.on_progress(progress)
			if inspect.isawaitable(outcome):
				await outcome
		except Exception as e:
			logger.error(f'Progress callback failed: {e}')
