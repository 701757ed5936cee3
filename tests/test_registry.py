"""Tests for the command registry."""

import pytest

from browserop.registry.service import (
	CommandRegistry,
	get_command_executor,
	get_default_registry,
	get_registered_commands,
	register_command,
	reset_default_registry,
)


def first(window, cmd, context, index):
	return {'command': cmd.command, 'command_index': index, 'success': True}


def second(window, cmd, context, index):
	return {'command': cmd.command, 'command_index': index, 'success': False}


class TestCommandRegistry:
	def test_register_and_lookup(self):
		registry = CommandRegistry()
		registry.register('fill', first)

		assert registry.get('fill') is first
		assert registry.has('fill')
		assert 'fill' in registry
		assert registry.get('click') is None

	def test_last_registration_wins(self):
		registry = CommandRegistry()
		registry.register('fill', first)
		registry.register('fill', second)

		assert registry.get('fill') is second
		assert len(registry) == 1

	def test_lists_names_in_registration_order(self):
		registry = CommandRegistry()
		for name in ('navigate', 'fill', 'click'):
			registry.register(name, first)

		assert registry.list_registered() == ['navigate', 'fill', 'click']

	def test_unregister_and_clear(self):
		registry = CommandRegistry()
		registry.register('fill', first)
		registry.register('click', first)

		assert registry.unregister('fill') is True
		assert registry.unregister('fill') is False
		registry.clear()
		assert registry.list_registered() == []

	def test_rejects_bad_registrations(self):
		registry = CommandRegistry()

		with pytest.raises(ValueError):
			registry.register('', first)
		with pytest.raises(TypeError):
			registry.register('fill', 'not callable')

	def test_instances_are_isolated(self):
		a, b = CommandRegistry(), CommandRegistry()
		a.register('fill', first)

		assert b.get('fill') is None


class TestDefaultRegistry:
	def test_module_helpers_use_default_instance(self):
		register_command('see', first)

		assert get_command_executor('see') is first
		assert get_registered_commands() == ['see']
		assert get_default_registry().has('see')

	def test_reset_gives_an_empty_registry(self):
		register_command('see', first)
		old = get_default_registry()

		new = reset_default_registry()

		assert new is not old
		assert get_default_registry() is new
		assert get_registered_commands() == []
