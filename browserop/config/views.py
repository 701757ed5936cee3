"""Data models and errors for operation configurations."""

from enum import Enum
from typing import Any

from pydantic import (
	AnyUrl,
	BaseModel,
	ConfigDict,
	Field,
	StrictBool,
	StrictInt,
	StrictStr,
	TypeAdapter,
	ValidationError,
	field_validator,
)
from pydantic_core import PydanticCustomError

_URL_ADAPTER = TypeAdapter(AnyUrl)


class ConfigErrorKind(str, Enum):
	"""Failure kinds raised while obtaining a configuration."""

	FILE_NOT_FOUND = 'file-not-found'
	PARSE_ERROR = 'parse-error'
	INTERPOLATION_ERROR = 'interpolation-error'
	VALIDATION_ERROR = 'validation-error'


class OperationConfigError(Exception):
	"""Base class for configuration loading failures.

	Every subclass carries a ``kind`` and a message starting with its ``prefix``,
	so callers can branch on either without parsing the message body.
	"""

	kind: ConfigErrorKind
	prefix: str = ''

	def __init__(self, message: str):
		super().__init__(message)
		self.message = message


class ConfigFileNotFoundError(OperationConfigError, FileNotFoundError):
	kind = ConfigErrorKind.FILE_NOT_FOUND
	prefix = 'Configuration file not'

	def __init__(self, message: str, path: str | None = None):
		super().__init__(message)
		self.path = path


class ConfigParseError(OperationConfigError):
	kind = ConfigErrorKind.PARSE_ERROR
	prefix = 'YAML parsing error'


class InterpolationError(OperationConfigError):
	"""A ``${getenv:NAME}`` placeholder referenced an unset variable."""

	kind = ConfigErrorKind.INTERPOLATION_ERROR
	prefix = 'Environment variable not found'

	def __init__(self, message: str, variable: str):
		super().__init__(message)
		self.variable = variable


class ConfigValidationError(OperationConfigError):
	kind = ConfigErrorKind.VALIDATION_ERROR
	prefix = 'Configuration validation failed'

	def __init__(self, issues: list[str]):
		super().__init__(f'{self.prefix}:\n' + '\n'.join(issues))
		self.issues = issues

	@classmethod
	def from_pydantic(cls, error: ValidationError) -> 'ConfigValidationError':
		"""Turn pydantic errors into ``<dotted.path>: <rule>`` lines."""
		issues = []
		for detail in error.errors():
			path = '.'.join(str(part) for part in detail['loc'])
			issues.append(f'{path or "root"}: {detail["msg"]}')
		return cls(issues)


class Settings(BaseModel):
	"""Run defaults attached to a configuration.

	Backend-specific keys not listed here are kept as extra fields.
	"""

	model_config = ConfigDict(extra='allow', populate_by_name=True, frozen=True)

	timeout: StrictInt | None = Field(default=None, description='Default command timeout in milliseconds')
	wait_for_completion: StrictBool | None = Field(
		default=None, alias='waitForCompletion', description='Wait for page activity to settle'
	)
	continue_on_error: StrictBool | None = Field(
		default=None, alias='continueOnError', description='Keep running after a failed command'
	)
	base_url: StrictStr | None = Field(default=None, alias='baseUrl', description='Base URL for relative URLs')

	@field_validator('timeout')
	@classmethod
	def _check_timeout(cls, value: int | None) -> int | None:
		if value is not None and value <= 0:
			raise PydanticCustomError('positive_timeout', 'timeout must be a positive integer')
		return value

	@field_validator('base_url')
	@classmethod
	def _check_base_url(cls, value: str | None) -> str | None:
		if value is None:
			return value
		try:
			_URL_ADAPTER.validate_python(value)
		except ValidationError:
			raise PydanticCustomError('invalid_base_url', 'baseUrl must be a valid URL') from None
		return value

	def get(self, key: str, default: Any = None) -> Any:
		"""Read a setting by its document key, including pass-through keys."""
		return self.to_document().get(key, default)

	def to_document(self) -> dict[str, Any]:
		return self.model_dump(by_alias=True, exclude_unset=True)


class Command(BaseModel):
	"""One declarative instruction.

	Only ``command`` is required; the remaining keys belong to the command kind
	and are kept verbatim, readable as attributes or through ``params``.
	"""

	model_config = ConfigDict(extra='allow', frozen=True)

	command: StrictStr = Field(description='Name selecting the registered executor')
	description: StrictStr | None = Field(default=None, description='Human-readable description')

	@field_validator('command')
	@classmethod
	def _check_command(cls, value: str) -> str:
		if not value:
			raise PydanticCustomError('empty_command', 'command name cannot be empty')
		return value

	@property
	def params(self) -> dict[str, Any]:
		"""Command-specific fields beyond ``command`` and ``description``."""
		return dict(self.model_extra or {})

	def get(self, key: str, default: Any = None) -> Any:
		if key in ('command', 'description'):
			return getattr(self, key)
		return (self.model_extra or {}).get(key, default)


class OperationConfig(BaseModel):
	"""A validated operation configuration: settings plus ordered commands."""

	model_config = ConfigDict(extra='ignore', frozen=True)

	version: StrictStr = Field(description='Configuration format tag')
	name: StrictStr | None = Field(default=None, description='Operation name')
	description: StrictStr | None = Field(default=None, description='What the operation does')
	settings: Settings | None = Field(default=None, description='Run defaults')
	commands: list[Command] = Field(description='Commands in execution order')

	@field_validator('version')
	@classmethod
	def _check_version(cls, value: str) -> str:
		if not value:
			raise PydanticCustomError('empty_version', 'version cannot be empty')
		return value

	@field_validator('commands')
	@classmethod
	def _check_commands(cls, value: list[Command]) -> list[Command]:
		if not value:
			raise PydanticCustomError('no_commands', 'at least one command is required')
		return value

	def to_document(self) -> dict[str, Any]:
		"""Serialize back to the textual document shape."""
		return self.model_dump(by_alias=True, exclude_unset=True)
