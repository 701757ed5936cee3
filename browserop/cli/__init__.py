"""Operator command handlers and formatters."""

from browserop.cli.handlers import (
	OperatorCliContext,
	TestResult,
	VerifyResult,
	format_test_output,
	format_verify_output,
	handle_execute,
	handle_test,
	handle_verify,
)

__all__ = [
	'OperatorCliContext',
	'VerifyResult',
	'TestResult',
	'handle_verify',
	'handle_test',
	'handle_execute',
	'format_verify_output',
	'format_test_output',
]
