"""
Error types for crudsmith parsing, generation, patching and builds.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class CrudsmithError(Exception):
    """Base exception for all crudsmith errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ParseError(CrudsmithError):
    """
    Raised when a TypeScript source file cannot be read into the IR.

    Examples:
    - Missing types file
    - Unterminated interface body
    - Malformed type alias
    """

    pass


class GenerationError(CrudsmithError):
    """
    Raised when a generator fails to produce output.

    Examples:
    - Types file declares no interfaces
    - Template rendering errors
    - Output directory issues
    """

    pass


class PatchError(CrudsmithError):
    """
    Raised when a fixer cannot be applied to a file.

    Examples:
    - Target file missing
    - Backup could not be written
    """

    pass


class BuildError(CrudsmithError):
    """
    Raised when a shell command cannot be run.

    Examples:
    - npm / npx not on PATH
    - Command timed out
    """

    pass


class ConfigError(CrudsmithError):
    """Raised when crudsmith.toml cannot be loaded."""

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path to the source file where error occurred
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional code snippet showing the error location
    """

    file: Path
    line: int
    column: int
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "src/lib/types.ts:10:5"
        """
        location = f"{self.file}:{self.line}:{self.column}"
        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format code snippet with line numbers and error marker."""
        if not self.snippet:
            return ""

        lines = self.snippet.split("\n")
        formatted = []

        # Snippet starts at the error line
        for i, line in enumerate(lines):
            line_num = self.line + i
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + line)

            if line_num == self.line:
                marker_pos = len(prefix) + self.column - 1
                formatted.append(" " * marker_pos + "^^^")

        return "\n".join(formatted)


def make_parse_error(
    message: str,
    file: Path | None,
    line: int,
    column: int,
    snippet: str | None = None,
) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        message: Error description
        file: Source file path (the error carries no location if None)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional code snippet

    Returns:
        ParseError with context attached
    """
    if file is None:
        return ParseError(f"line {line}, column {column}: {message}")
    context = ErrorContext(file=file, line=line, column=column, snippet=snippet)
    return ParseError(message, context)
