"""Execution engine for browserop."""

from browserop.executor.service import Executor, ProgressCallback
from browserop.executor.views import ExecutionProgress, ExecutorConfig

__all__ = [
	'Executor',
	'ExecutorConfig',
	'ExecutionProgress',
	'ProgressCallback',
]
