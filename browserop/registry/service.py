"""Command registry - maps command names to executor callables.

Concrete commands live outside this package and register themselves here, so
the executor can dispatch to them without knowing what they do.
"""

import logging
from collections.abc import Awaitable
from typing import Any, Callable, Union

from browserop.config.views import Command
from browserop.shared_views import CommandResult, ExecutionContext

logger = logging.getLogger(__name__)

# (window, command, context, command_index) -> CommandResult, sync or async.
# Mapping results may spell the index as command_index or commandIndex.
CommandExecutor = Callable[
	[Any, Command, ExecutionContext, int],
	Union[CommandResult, dict[str, Any], Awaitable[Union[CommandResult, dict[str, Any]]]],
]


class CommandRegistry:
	"""Name to executor mapping used by the Executor for dispatch."""

	def __init__(self):
		self._executors: dict[str, CommandExecutor] = {}

	def register(self, name: str, executor: CommandExecutor) -> None:
		"""Register an executor under a command name.

		The last registration for a name wins.

		Args:
			name: Command name as written in configurations
			executor: Callable implementing the command

		Raises:
			ValueError: If the name is empty
			TypeError: If the executor is not callable
		"""
		if not name:
			raise ValueError('Command name cannot be empty')
		if not callable(executor):
			raise TypeError(f'Executor for {name!r} must be callable')

		if name in self._executors:
			logger.debug(f'Replacing executor for command: {name}')
		self._executors[name] = executor

	def unregister(self, name: str) -> bool:
		"""Remove a command. Returns False if it was not registered."""
		return self._executors.pop(name, None) is not None

	def get(self, name: str) -> CommandExecutor | None:
		return self._executors.get(name)

	def has(self, name: str) -> bool:
		return name in self._executors

	def list_registered(self) -> list[str]:
		"""Registered command names, in registration order."""
		return list(self._executors)

	def clear(self) -> None:
		self._executors.clear()

	def __contains__(self, name: object) -> bool:
		return name in self._executors

	def __len__(self) -> int:
		return len(self._executors)


_default_registry = CommandRegistry()


def get_default_registry() -> CommandRegistry:
	"""Process-wide registry used when callers do not pass their own."""
	return _default_registry


def reset_default_registry() -> CommandRegistry:
	"""Replace the process-wide registry with an empty one."""
	global _default_registry
	_default_registry = CommandRegistry()
	return _default_registry


def register_command(name: str, executor: CommandExecutor) -> None:
	_default_registry.register(name, executor)


def get_command_executor(name: str) -> CommandExecutor | None:
	return _default_registry.get(name)


def get_registered_commands() -> list[str]:
	return _default_registry.list_registered()
