"""Config loader - turns files, YAML text or objects into validated configurations."""

import logging
import os
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from browserop.config.interpolator import interpolate_config
from browserop.config.views import (
	ConfigFileNotFoundError,
	ConfigParseError,
	ConfigValidationError,
	OperationConfig,
)

logger = logging.getLogger(__name__)

SLOW_PARSE_THRESHOLD_MS = 100


class ConfigLoader:
	"""Single entry point for obtaining a trusted OperationConfig.

	Text input goes through parse, then environment interpolation, then schema
	validation. In-memory objects are only validated. Every failure raises one
	OperationConfigError subclass; nothing partially loaded is returned.
	"""

	def __init__(self, environ: Mapping[str, str] | None = None):
		"""Initialize the ConfigLoader.

		Args:
			environ: Variables used for ``${getenv:...}`` placeholders (defaults to ``os.environ``)
		"""
		self.environ = environ

	def load_from_file(self, file_path: str | os.PathLike) -> OperationConfig:
		"""Load and validate a YAML configuration file.

		Args:
			file_path: Relative or absolute path to the file

		Returns:
			The validated configuration

		Raises:
			ConfigFileNotFoundError: If the path is missing or unreadable
			ConfigParseError: If the file is not valid YAML
			InterpolationError: If a referenced environment variable is unset
			ConfigValidationError: If the document does not match the schema
		"""
		start_time = time.time()
		resolved_path = Path(file_path).resolve()

		if not resolved_path.is_file():
			raise ConfigFileNotFoundError(f'Configuration file not found: {resolved_path}', path=str(resolved_path))

		try:
			raw_content = resolved_path.read_bytes()
		except OSError as e:
			raise ConfigFileNotFoundError(
				f'Configuration file not readable: {resolved_path}: {e}', path=str(resolved_path)
			) from e

		try:
			content = raw_content.decode('utf-8')
		except UnicodeDecodeError as e:
			raise ConfigParseError(f'YAML parsing error: {resolved_path} is not valid UTF-8 ({e})') from e

		config = self.parse_yaml(content)

		duration = int((time.time() - start_time) * 1000)
		logger.debug(f'Loaded config from {resolved_path} in {duration}ms')
		if duration > SLOW_PARSE_THRESHOLD_MS:
			logger.warning(f'Parsing {resolved_path} took {duration}ms (>{SLOW_PARSE_THRESHOLD_MS}ms threshold)')

		return config

	def parse_yaml(self, yaml_text: str) -> OperationConfig:
		"""Parse YAML text, interpolate secrets, then validate.

		Raises:
			ConfigParseError: If the text is not valid YAML or not a mapping
			InterpolationError: If a referenced environment variable is unset
			ConfigValidationError: If the document does not match the schema
		"""
		try:
			parsed = yaml.safe_load(yaml_text)
		except yaml.YAMLError as e:
			raise ConfigParseError(f'YAML parsing error: {e}') from e

		if not isinstance(parsed, dict):
			raise ConfigParseError('YAML parsing error: Configuration must be a valid YAML object')

		interpolated = interpolate_config(parsed, self.environ)
		logger.debug('Environment variables interpolated successfully')

		return self.validate(interpolated)

	def validate(self, candidate: Any) -> OperationConfig:
		"""Validate an in-memory configuration without parsing or interpolation.

		Raises:
			ConfigValidationError: With one ``<path>: <rule>`` line per violation
		"""
		try:
			return OperationConfig.model_validate(candidate)
		except ValidationError as e:
			error = ConfigValidationError.from_pydantic(e)
			logger.debug(f'Configuration rejected with {len(error.issues)} issue(s)')
			raise error from e

	def validate_commands(self, commands: list[Any]) -> OperationConfig:
		"""Wrap a bare command list into a configuration and validate it."""
		return self.validate({'version': '1', 'commands': list(commands)})

	def load(self, config_or_path: OperationConfig | Mapping[str, Any] | str | os.PathLike) -> OperationConfig:
		"""Load from a file path, or validate an already-built configuration.

		Args:
			config_or_path: A path to a YAML file, an OperationConfig, or a mapping

		Returns:
			The validated configuration
		"""
		if isinstance(config_or_path, (str, os.PathLike)):
			return self.load_from_file(config_or_path)

		return self.validate(config_or_path)
