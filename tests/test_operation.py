"""End-to-end tests for execute_operation."""

import time

import pytest

from browserop import execute_operation, register_command
from browserop.config.service import ConfigLoader
from browserop.config.views import ConfigFileNotFoundError, ConfigValidationError, InterpolationError
from browserop.shared_views import BackendType, ErrorType, ExecutionContext

from tests.conftest import FakeWindow, click_command, fill_command, wait_command

LOGIN = {
	'version': '1.0',
	'commands': [
		{'command': 'fill', 'selector': '#u', 'value': 'x'},
		{'command': 'click', 'selector': '#go'},
	],
}


@pytest.mark.asyncio
async def test_fill_and_click_succeed(registry, window):
	result = await execute_operation({'backend': 'happy-dom', 'window': window}, LOGIN, registry=registry)

	assert result.success is True
	assert result.success_count == 2
	assert result.error_count == 0
	assert result.results[0].command_index == 0
	assert window.elements['#u'].value == 'x'
	assert window.elements['#go'].clicks == 1


@pytest.mark.asyncio
async def test_missing_element_is_selector_not_found(registry):
	window = FakeWindow(elements={'u': 'input'})

	result = await execute_operation({'window': window}, LOGIN, registry=registry)

	assert result.results[1].success is False
	assert result.results[1].error.type is ErrorType.SELECTOR_NOT_FOUND
	assert result.results[1].error.type.value == 'selector_not_found'
	assert result.results[1].error.selector == '#go'
	assert result.success is False


@pytest.mark.asyncio
async def test_stop_on_error_keeps_total_count(registry, window):
	config = {
		'version': '1.0',
		'settings': {'continueOnError': False},
		'commands': [
			{'command': 'fill', 'selector': '#nonexistent', 'value': 'test'},
			{'command': 'click', 'selector': '#submit-btn'},
		],
	}

	result = await execute_operation({'window': window}, config, registry=registry)

	assert len(result.results) == 1
	assert result.total_commands == 2
	assert result.results[0].success is False


@pytest.mark.asyncio
async def test_continue_on_error(registry, window):
	config = {
		'version': '1.0',
		'settings': {'continueOnError': True},
		'commands': [
			{'command': 'fill', 'selector': '#nonexistent', 'value': 'test'},
			{'command': 'click', 'selector': '#submit-btn'},
		],
	}

	result = await execute_operation({'window': window}, config, registry=registry)

	assert [r.success for r in result.results] == [False, True]


@pytest.mark.asyncio
async def test_wait_takes_at_least_its_timeout(registry, window):
	started = time.time()
	result = await execute_operation(
		{'window': window}, {'version': '1.0', 'commands': [{'command': 'wait', 'timeout': 50}]}, registry=registry
	)
	elapsed_ms = (time.time() - started) * 1000

	assert result.success is True
	assert result.results[0].duration >= 50
	assert elapsed_ms >= 50


@pytest.mark.asyncio
async def test_accepts_bare_command_list(registry, window):
	result = await execute_operation({'window': window}, [{'command': 'click', 'selector': '#go'}], registry=registry)

	assert result.success is True
	assert result.total_commands == 1


@pytest.mark.asyncio
async def test_accepts_yaml_file_with_secrets(registry, window, tmp_path):
	path = tmp_path / 'login.yaml'
	path.write_text(
		'version: "1.0"\nname: Login\ncommands:\n  - command: fill\n    selector: "#password"\n    value: ${getenv:PW}\n',
		encoding='utf-8',
	)

	result = await execute_operation(
		{'window': window}, str(path), registry=registry, loader=ConfigLoader(environ={'PW': 'hunter2'})
	)

	assert result.config_name == 'Login'
	assert window.elements['#password'].value == 'hunter2'


@pytest.mark.asyncio
async def test_config_errors_are_raised_before_anything_runs(registry, window, tmp_path):
	calls = []
	registry.register('spy', lambda *args: calls.append(args))

	with pytest.raises(ConfigValidationError):
		await execute_operation({'window': window}, {'version': '1.0', 'commands': []}, registry=registry)
	with pytest.raises(ConfigFileNotFoundError):
		await execute_operation({'window': window}, str(tmp_path / 'nope.yaml'), registry=registry)

	path = tmp_path / 'secret.yaml'
	path.write_text('version: "1"\ncommands:\n  - command: spy\n    token: ${getenv:UNSET_TOKEN}\n', encoding='utf-8')
	with pytest.raises(InterpolationError):
		await execute_operation(
			{'window': window}, path, registry=registry, loader=ConfigLoader(environ={})
		)

	assert calls == []


@pytest.mark.asyncio
async def test_uses_default_registry(window):
	register_command('fill', fill_command)
	register_command('click', click_command)
	register_command('wait', wait_command)

	result = await execute_operation({'window': window}, LOGIN)

	assert result.success is True


@pytest.mark.asyncio
async def test_caller_context_is_not_mutated(registry, window):
	context = ExecutionContext(backend=BackendType.CDP, window=window, timeout=10)

	result = await execute_operation(context, LOGIN, registry=registry)

	assert result.backend is BackendType.CDP
	assert context.results == []
	assert context.start_time is None


@pytest.mark.asyncio
async def test_configures_cookie_auto_protection(registry, window):
	class CookieJar:
		def __init__(self):
			self.patterns = None

		def set_auto_protect_patterns(self, patterns):
			self.patterns = patterns

	jar = CookieJar()
	config = {
		'version': '1.0',
		'settings': {'autoProtectCookies': ['session*', 'csrf']},
		'commands': [{'command': 'click', 'selector': '#go'}],
	}

	await execute_operation({'window': window, 'request_result': {'cookie_jar': jar}}, config, registry=registry)

	assert jar.patterns == ['session*', 'csrf']
