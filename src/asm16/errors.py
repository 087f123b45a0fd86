"""
asm16 Error Hierarchy
=====================

This module defines the exception hierarchy for the asm16 toolchain.
All exceptions inherit from Asm16Error, allowing callers to catch all
toolchain errors with a single except clause if desired.

Exception Hierarchy
-------------------
Asm16Error (base)
└── AssemblerError (assembler-related)
    └── AssemblyFailedError - a lex/resolve run reported fatal diagnostics

Design Philosophy
-----------------
The lexer and resolver never raise for problems in the source text. They
report diagnostics and keep going so that a single run surfaces as many
independent problems as possible (see asm16.diagnostics). Exceptions are
raised only at the edges: by the Assembler facade when a run has failed,
and by the CLI.

Error messages follow this format:
    filename:line: error: description
        source_line_text
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from asm16.diagnostics import Diagnostic


# =============================================================================
# Base Exception Class
# =============================================================================

class Asm16Error(Exception):
    """
    Base exception for all asm16 errors.

        try:
            assembler.assemble_file("program.asm")
        except Asm16Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    The source line a failed run is reported against.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
    """
    filename: str
    line: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(Asm16Error):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the message with its location, source text and hint.

        Example output:
            dup.asm:3: error: assembly of 'dup.asm' failed
                .loop   hlt
            hint: 1 error reported
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblyFailedError(AssemblerError):
    """
    A lex/resolve run finished with its success flag cleared.

    The individual problems were already reported as diagnostics while the
    run was in progress. This exception carries them so callers that only
    see the exception can still print a full report. A label table from a
    failed run is never handed out.

    Attributes:
        filename: The source that failed
        diagnostics: Every diagnostic delivered during the run, in order
        report: Human readable rendering of the diagnostics
        location: Line of the first delivered error, if it had one
        error_count: Every error of the run, delivered or suppressed
        hidden_count: Errors the verbosity kept from the sink
    """

    def __init__(
        self,
        filename: str,
        diagnostics: Optional[list["Diagnostic"]] = None,
        report: str = "",
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        error_count: Optional[int] = None,
    ):
        self.filename = filename
        self.diagnostics = diagnostics or []
        self.report = report

        shown = sum(1 for d in self.diagnostics if d.is_error)
        self.error_count = shown if error_count is None else error_count
        self.hidden_count = self.error_count - shown

        error_word = "error" if self.error_count == 1 else "errors"
        hint = None
        if self.hidden_count > 0:
            hint = f"{self.error_count} {error_word}, {self.hidden_count} not shown at this verbosity"
        elif self.error_count:
            hint = f"{self.error_count} {error_word} reported"

        super().__init__(
            f"assembly of '{filename}' failed",
            location=location,
            hint=hint,
            source_line=source_line,
        )
