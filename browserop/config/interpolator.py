"""Environment variable interpolation for parsed configurations.

Placeholders of the form ``${getenv:NAME}`` are replaced with the value of
``NAME`` from the environment. A reference to an unset variable fails the whole
document; nothing partially substituted is ever returned.
"""

import logging
import os
import re
from collections.abc import Mapping
from typing import Any

from browserop.config.views import InterpolationError

logger = logging.getLogger(__name__)

ENV_PATTERN = re.compile(r'\$\{getenv:([A-Z_][A-Z0-9_]*)\}')


def interpolate_env(value: Any, environ: Mapping[str, str] | None = None) -> Any:
	"""Replace every placeholder in a single string.

	Args:
		value: String to interpolate; any other type is returned as-is
		environ: Variables to resolve against (defaults to ``os.environ``)

	Returns:
		The interpolated string

	Raises:
		InterpolationError: If a referenced variable is not set
	"""
	if not isinstance(value, str):
		return value

	env = os.environ if environ is None else environ

	def _replace(match: re.Match) -> str:
		name = match.group(1)
		env_value = env.get(name)
		if env_value is None:
			message = f'Environment variable not found: {name}'
			logger.error(message)
			raise InterpolationError(message, variable=name)
		logger.debug(f'Replaced {match.group(0)} with the value of {name}')
		return env_value

	return ENV_PATTERN.sub(_replace, value)


def interpolate_value(value: Any, environ: Mapping[str, str] | None = None) -> Any:
	"""Recursively interpolate strings inside lists and mappings."""
	if isinstance(value, str):
		return interpolate_env(value, environ)

	if isinstance(value, (list, tuple)):
		return [interpolate_value(item, environ) for item in value]

	if isinstance(value, Mapping):
		return {key: interpolate_value(item, environ) for key, item in value.items()}

	return value


def interpolate_config(config: Any, environ: Mapping[str, str] | None = None) -> Any:
	"""Interpolate an entire parsed configuration document."""
	return interpolate_value(config, environ)
