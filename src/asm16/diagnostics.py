"""
Leveled Diagnostics
===================

Every stage of the assembler reports problems through a Diagnostics
instance instead of raising. This lets the lexer and the resolver recover
locally and keep going, so a single run surfaces as many independent
problems as possible.

Severities
----------
| Severity | Value | Affects success | Delivered when verbosity >= |
|----------|-------|-----------------|-----------------------------|
| NONE     | 0     | -               | -                           |
| ERROR    | 1     | yes (always)    | ERROR                       |
| WARNING  | 2     | no              | WARNING                     |
| LOG      | 3     | no              | LOG                         |

An error clears the success flag even when the configured verbosity
suppresses its delivery.

Shared Run State
----------------
A run owns exactly one RunState. Component reporters derived with
child() hold a reference to the same RunState, so a failure reported by
the lexer is visible through the resolver's reporter and through the
root reporter held by the orchestrator.

Example
-------
>>> sink = CollectingSink()
>>> root = Diagnostics("asm16", verbosity=Severity.LOG, sink=sink)
>>> lexer_diag = root.child("lexer")
>>> lexer_diag.warning("unrecognized escape character", "'\\\\p'", line=3)
>>> root.good()
True
>>> lexer_diag.error("empty label definition", line=4)
>>> root.good()
False
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Optional
import logging

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Severity
# =============================================================================

class Severity(IntEnum):
    """Diagnostic severities, ordered by increasing verbosity."""
    NONE = 0
    ERROR = 1
    WARNING = 2
    LOG = 3

    @classmethod
    def from_name(cls, name: str) -> "Severity":
        """Look up a severity by case-insensitive name ("warning" -> WARNING)."""
        try:
            return cls[name.upper()]
        except KeyError:
            valid = ", ".join(s.name.lower() for s in cls)
            raise ValueError(f"unknown verbosity '{name}' (valid: {valid})") from None


# =============================================================================
# Diagnostic Record
# =============================================================================

@dataclass(frozen=True)
class Diagnostic:
    """
    A single message delivered to a sink.

    Attributes:
        severity: ERROR, WARNING or LOG
        component: Name of the reporting component ("lexer", "resolver", ...)
        message: Short description
        detail: Optional extra context (offending text, a suggestion)
        line: Optional 1-based source line
    """
    severity: Severity
    component: str
    message: str
    detail: Optional[str] = None
    line: Optional[int] = None

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def __str__(self) -> str:
        label = "log" if self.severity == Severity.LOG else self.severity.name.lower()
        where = f"{self.component}:{self.line}" if self.line is not None else self.component
        text = f"{where}: {label}: {self.message}"
        if self.detail:
            text += f" ({self.detail})"
        return text


Sink = Callable[[Diagnostic], None]


# =============================================================================
# Sinks
# =============================================================================

class LoggingSink:
    """
    Forwards diagnostics to the standard logging module.

    This is the default sink. Verbosity gating has already happened by the
    time a diagnostic reaches the sink, so everything received is logged.
    """

    LEVELS = {
        Severity.ERROR: logging.ERROR,
        Severity.WARNING: logging.WARNING,
        Severity.LOG: logging.INFO,
    }

    def __call__(self, diagnostic: Diagnostic) -> None:
        logger.log(self.LEVELS.get(diagnostic.severity, logging.INFO), str(diagnostic))


class CollectingSink:
    """
    Collects diagnostics in delivery order for batch reporting.

    Used by the Assembler facade and the CLI to print every problem
    together once a run has finished.
    """

    def __init__(self, forward: Optional[Sink] = None):
        """
        Args:
            forward: Optional sink that also receives every diagnostic
        """
        self.diagnostics: list[Diagnostic] = []
        self._forward = forward

    def __call__(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        if self._forward is not None:
            self._forward(diagnostic)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]

    def has_errors(self) -> bool:
        """Return True if any delivered diagnostic was an error."""
        return any(d.is_error for d in self.diagnostics)

    def report(self) -> str:
        """
        Format all errors and warnings for display.

        Log-level messages are omitted; they are progress information,
        not problems.

        Returns:
            Formatted string with all errors and warnings plus a summary line
        """
        lines = [str(d) for d in self.diagnostics if d.severity != Severity.LOG]

        errors = len(self.errors)
        warnings = len(self.warnings)
        error_word = "error" if errors == 1 else "errors"
        warning_word = "warning" if warnings == 1 else "warnings"
        lines.append(f"{errors} {error_word}, {warnings} {warning_word}")

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected diagnostics."""
        self.diagnostics.clear()


# =============================================================================
# Diagnostics Reporter
# =============================================================================

@dataclass
class RunState:
    """Aggregate result of one run. success never goes back to True."""
    success: bool = True
    error_count: int = 0


class Diagnostics:
    """
    Leveled reporter with a shared success flag.

    Attributes:
        component: Name shown with every diagnostic from this reporter
        verbosity: Highest severity delivered to the sink
        state: The RunState shared with every derived reporter
    """

    def __init__(
        self,
        component: str = "asm16",
        verbosity: Severity = Severity.WARNING,
        sink: Optional[Sink] = None,
        state: Optional[RunState] = None,
    ):
        self.component = component
        self.verbosity = Severity(verbosity)
        self.state = state if state is not None else RunState()
        self._sink: Sink = sink if sink is not None else LoggingSink()

    def child(self, component: str) -> "Diagnostics":
        """
        Derive a reporter for a sub-component.

        The child reports under its own name but shares this reporter's
        sink, verbosity and RunState.
        """
        return Diagnostics(component, self.verbosity, self._sink, self.state)

    def log(self, message: str, detail: Optional[str] = None,
            line: Optional[int] = None) -> None:
        """Report an informational message."""
        self._emit(Severity.LOG, message, detail, line)

    def warning(self, message: str, detail: Optional[str] = None,
                line: Optional[int] = None) -> None:
        """Report a non-fatal problem."""
        self._emit(Severity.WARNING, message, detail, line)

    def error(self, message: str, detail: Optional[str] = None,
              line: Optional[int] = None) -> None:
        """Report a fatal problem. Clears the success flag even if suppressed."""
        self.state.success = False
        self.state.error_count += 1
        self._emit(Severity.ERROR, message, detail, line)

    def good(self) -> bool:
        """Return the shared success flag."""
        return self.state.success

    def _emit(self, severity: Severity, message: str,
              detail: Optional[str], line: Optional[int]) -> None:
        if severity > self.verbosity:
            return
        self._sink(Diagnostic(severity, self.component, message, detail, line))
