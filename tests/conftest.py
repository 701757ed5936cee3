"""Shared fixtures: an in-memory window and a registry of simple commands."""

import asyncio
import time

import pytest

from browserop.registry.service import CommandRegistry, reset_default_registry
from browserop.shared_views import CommandResult, ErrorType, window_url


class FakeElement:
	def __init__(self, tag_name: str, element_id: str):
		self.tag_name = tag_name
		self.id = element_id
		self.value = ''
		self.clicks = 0


class FakeLocation:
	def __init__(self, href: str):
		self.href = href


class FakeHappyDom:
	def __init__(self):
		self.aborted = False

	async def abort(self):
		self.aborted = True


class FakeWindow:
	"""Minimal window: elements addressed by ``#id`` plus visible body text."""

	def __init__(self, href: str = 'http://test', elements: dict[str, str] | None = None, text: str = ''):
		self.location = FakeLocation(href)
		self.happy_dom = FakeHappyDom()
		self.request_result = None
		self.elements = {
			f'#{element_id}': FakeElement(tag, element_id) for element_id, tag in (elements or {}).items()
		}
		self.text = text

	def query_selector(self, selector: str) -> FakeElement | None:
		return self.elements.get(selector)


def _not_found(name: str, index: int, selector: str, window) -> CommandResult:
	return CommandResult.failure(
		command=name,
		command_index=index,
		error_type=ErrorType.SELECTOR_NOT_FOUND,
		message=f'Element not found: {selector}',
		selector=selector,
		url=window_url(window) or '',
	)


async def fill_command(window, cmd, context, index):
	element = window.query_selector(cmd.selector)
	if element is None:
		return _not_found('fill', index, cmd.selector, window)
	element.value = cmd.value
	return CommandResult(command='fill', command_index=index, success=True)


async def click_command(window, cmd, context, index):
	element = window.query_selector(cmd.selector)
	if element is None:
		return _not_found('click', index, cmd.selector, window)
	element.clicks += 1
	return CommandResult(command='click', command_index=index, success=True)


async def wait_command(window, cmd, context, index):
	started = time.time()
	await asyncio.sleep(cmd.get('timeout', 0) / 1000)
	return CommandResult(
		command='wait', command_index=index, success=True, duration=(time.time() - started) * 1000
	)


def see_command(window, cmd, context, index):
	found = cmd.text in window.text
	if found == cmd.get('assertion', True):
		return {'command': 'see', 'command_index': index, 'success': True}
	return CommandResult.failure(
		command='see',
		command_index=index,
		error_type=ErrorType.VALIDATION_ERROR,
		message=f'Text "{cmd.text}" {"not found" if cmd.get("assertion", True) else "found"}',
	)


async def navigate_command(window, cmd, context, index):
	new_window = FakeWindow(href=cmd.url, elements={'go': 'button'})
	return CommandResult(command='navigate', command_index=index, success=True, data={'newWindow': new_window})


async def boom_command(window, cmd, context, index):
	raise RuntimeError('executor exploded')


@pytest.fixture
def registry() -> CommandRegistry:
	registry = CommandRegistry()
	registry.register('fill', fill_command)
	registry.register('click', click_command)
	registry.register('wait', wait_command)
	registry.register('see', see_command)
	registry.register('navigate', navigate_command)
	registry.register('boom', boom_command)
	return registry


@pytest.fixture
def window() -> FakeWindow:
	return FakeWindow(
		elements={'username': 'input', 'password': 'input', 'submit-btn': 'button', 'u': 'input', 'go': 'button'},
		text='Login form',
	)


@pytest.fixture(autouse=True)
def clean_default_registry():
	reset_default_registry()
	yield
	reset_default_registry()
