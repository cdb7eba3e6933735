"""Build runner: child processes, diagnostics, Prisma CLI and the smart build."""

from .diagnostics import Diagnostic, DiagnosticKind, group_by_kind, parse_build_output
from .process import CommandResult, run_command

__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "parse_build_output",
    "group_by_kind",
    "CommandResult",
    "run_command",
]
