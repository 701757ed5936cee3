"""Configuration model, interpolation and loading."""

from browserop.config.interpolator import ENV_PATTERN, interpolate_config, interpolate_env, interpolate_value
from browserop.config.service import ConfigLoader
from browserop.config.views import (
	Command,
	ConfigErrorKind,
	ConfigFileNotFoundError,
	ConfigParseError,
	ConfigValidationError,
	InterpolationError,
	OperationConfig,
	OperationConfigError,
	Settings,
)

__all__ = [
	# Loader
	'ConfigLoader',
	# Models
	'OperationConfig',
	'Command',
	'Settings',
	# Errors
	'ConfigErrorKind',
	'OperationConfigError',
	'ConfigFileNotFoundError',
	'ConfigParseError',
	'InterpolationError',
	'ConfigValidationError',
	# Interpolation
	'ENV_PATTERN',
	'interpolate_env',
	'interpolate_value',
	'interpolate_config',
]
