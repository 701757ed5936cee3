"""Command registry for browserop."""

from browserop.registry.service import (
	CommandExecutor,
	CommandRegistry,
	get_command_executor,
	get_default_registry,
	get_registered_commands,
	register_command,
	reset_default_registry,
)

__all__ = [
	'CommandExecutor',
	'CommandRegistry',
	'get_default_registry',
	'reset_default_registry',
	'register_command',
	'get_command_executor',
	'get_registered_commands',
]
