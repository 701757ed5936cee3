"""Shared data models for the browserop execution engine."""

import time
from collections.abc import Mapping, MutableMapping
from enum import Enum
from typing import Any, Callable, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from uuid_extensions import uuid7str

DEFAULT_COMMAND_TIMEOUT_MS = 5000


class BackendType(str, Enum):
	"""Execution backends a context can target."""

	HAPPY_DOM = 'happy-dom'
	CDP = 'cdp'


class ErrorType(str, Enum):
	"""Kinds of command-level failures."""

	SELECTOR_NOT_FOUND = 'selector_not_found'
	TIMEOUT = 'timeout'
	VALIDATION_ERROR = 'validation_error'
	EXECUTION_ERROR = 'execution_error'
	ENV_INTERPOLATION_ERROR = 'env_interpolation_error'


class ErrorContext(BaseModel):
	"""Where and when a command failure happened."""

	model_config = ConfigDict(extra='forbid')

	url: str = Field(default='', description='URL of the page where the error occurred')
	timestamp: int = Field(default_factory=lambda: int(time.time() * 1000), description='Epoch milliseconds')


class CommandError(BaseModel):
	"""Error information attached to a failed command result."""

	model_config = ConfigDict(extra='forbid')

	type: ErrorType = Field(description='Kind of failure')
	message: str = Field(description='Human-readable error message')
	selector: str | None = Field(default=None, description='Selector that failed, if any')
	context: ErrorContext = Field(default_factory=ErrorContext, description='Failure location')
	suggestions: list[str] | None = Field(default=None, description='Alternative selectors that might work')


class CommandResult(BaseModel):
	"""Outcome of a single attempted command."""

	model_config = ConfigDict(extra='forbid', frozen=True, arbitrary_types_allowed=True)

	command: str = Field(description='Name of the command that was executed')
	command_index: int = Field(
		ge=0,
		validation_alias=AliasChoices('command_index', 'commandIndex'),
		description='Zero-based position in the command sequence',
	)
	success: bool = Field(description='Whether the command succeeded')
	duration: int = Field(default=0, ge=0, description='Time taken in milliseconds')
	error: CommandError | None = Field(default=None, description='Failure details')
	data: Any = Field(default=None, description='Free-form payload returned by the command')

	@field_validator('duration', mode='before')
	@classmethod
	def _round_duration(cls, value: Any) -> Any:
		if isinstance(value, float):
			return max(int(round(value)), 0)
		return value

	@classmethod
	def failure(
		cls,
		command: str,
		command_index: int,
		error_type: ErrorType,
		message: str,
		url: str = '',
		selector: str | None = None,
		duration: int = 0,
		suggestions: list[str] | None = None,
	) -> 'CommandResult':
		"""Build a failed result with a populated error record."""
		return cls(
			command=command,
			command_index=command_index,
			success=False,
			duration=duration,
			error=CommandError(
				type=error_type,
				message=message,
				selector=selector,
				context=ErrorContext(url=url),
				suggestions=suggestions,
			),
		)


class ExecutionResult(BaseModel):
	"""Aggregate result of executing an operation configuration."""

	model_config = ConfigDict(extra='forbid', frozen=True)

	execution_id: str = Field(default_factory=uuid7str, description='Unique execution identifier')
	success: bool = Field(description='True when no command failed')
	config_name: str | None = Field(default=None, description='Name of the executed configuration')
	backend: BackendType | None = Field(default=None, description='Backend the run targeted')
	total_commands: int = Field(description='Number of commands in the configuration')
	success_count: int = Field(description='Number of commands that succeeded')
	error_count: int = Field(description='Number of commands that failed')
	duration: int = Field(description='Total run time in milliseconds')
	results: list[CommandResult] = Field(default_factory=list, description='Per-command results in order')


class CdpBackendConfig(BaseModel):
	"""Settings for the remote-protocol backend."""

	model_config = ConfigDict(extra='forbid', arbitrary_types_allowed=True)

	user_data_dir: str | None = Field(default=None, description='Chrome user data directory')
	mcp_type: Literal['stdio', 'http'] | None = Field(default=None, description='MCP transport type')
	execute: Callable[..., Any] | None = Field(default=None, description='Protocol call function')


def get_field(obj: Any, name: str) -> Any:
	"""Read a key from a mapping or an attribute from an object."""
	if obj is None:
		return None
	if isinstance(obj, Mapping):
		return obj.get(name)
	return getattr(obj, name, None)


def set_field(obj: Any, name: str, value: Any) -> None:
	if isinstance(obj, MutableMapping):
		obj[name] = value
	else:
		setattr(obj, name, value)


def window_url(window: Any) -> str | None:
	"""Return the current URL reported by a window/session handle, if any."""
	href = get_field(get_field(window, 'location'), 'href')
	if isinstance(href, str) and href:
		return href
	url = get_field(window, 'url')
	if isinstance(url, str) and url:
		return url
	return None


class ExecutionContext(BaseModel):
	"""Mutable state threaded through every command of one run.

	Fields left as None are filled from the configuration settings when the
	executor starts. A context belongs to a single in-flight execution and is
	discarded once the result is returned.
	"""

	model_config = ConfigDict(extra='forbid', arbitrary_types_allowed=True)

	backend: BackendType = Field(default=BackendType.HAPPY_DOM, description='Execution backend')
	window: Any = Field(default=None, description='Opaque window/session handle')
	cdp: CdpBackendConfig | None = Field(default=None, description='Remote-protocol backend settings')
	base_url: str | None = Field(default=None, description='Base URL for relative URLs')
	timeout: int | None = Field(default=None, description='Default command timeout in milliseconds')
	continue_on_error: bool | None = Field(default=None, description='Keep going after a failed command')
	results: list[CommandResult] = Field(default_factory=list, description='Results accumulated so far')
	start_time: float | None = Field(default=None, description='Epoch seconds when execution started')
	request_result: Any = Field(default=None, description='Session/request state carried across windows')
	settings: dict[str, Any] | None = Field(default=None, description='Backend pass-through settings')
	window_polyfills: Any = Field(default=None, description='Polyfills applied to in-process windows')

	def apply_defaults(self, settings: Any = None) -> 'ExecutionContext':
		"""Fill unset fields from configuration settings, then built-in defaults."""
		if self.base_url is None:
			self.base_url = (settings.base_url if settings else None) or window_url(self.window) or ''
		if self.timeout is None:
			self.timeout = (settings.timeout if settings else None) or DEFAULT_COMMAND_TIMEOUT_MS
		if self.continue_on_error is None:
			configured = settings.continue_on_error if settings else None
			self.continue_on_error = bool(configured) if configured is not None else False
		if settings is not None:
			document = settings.to_document()
			if self.settings is None:
				self.settings = document
			if self.window_polyfills is None:
				self.window_polyfills = document.get('windowPolyfills')
		return self

	def current_url(self) -> str:
		"""URL of the active window, falling back to the base URL."""
		return window_url(self.window) or self.base_url or ''
