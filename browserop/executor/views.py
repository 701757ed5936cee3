"""Data models for the Executor component."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ExecutorConfig(BaseModel):
	"""Configuration for the Executor."""

	model_config = ConfigDict(extra='forbid')

	window_replacing_commands: list[str] = Field(
		default_factory=lambda: ['navigate', 'click', 'submit'],
		description='Commands whose result may carry a replacement window handle',
	)
	release_replaced_windows: bool = Field(default=True, description='Abort or close windows that get replaced')


class ExecutionProgress(BaseModel):
	"""Progress update emitted around each command."""

	model_config = ConfigDict(extra='forbid')

	total_commands: int = Field(description='Number of commands in the configuration')
	current_command: int = Field(description='Zero-based index of the current command')
	current_command_name: str = Field(description='Name of the current command')
	status: Literal['running', 'success', 'error'] = Field(description='State of the current command')
	elapsed_ms: int = Field(description='Time elapsed since the run started')
