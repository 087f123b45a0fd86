"""
asm16 Assembler - Main Interface
================================

This module provides the Assembler class, the primary interface for
running the asm16 front end. It coordinates the lexer and the resolver,
owns the diagnostics of a run, and turns a failed run into an exception.

Example Usage
-------------
>>> from asm16.assembler import Assembler
>>>
>>> asm = Assembler()
>>> result = asm.assemble_string('''
... @data
... .hello
...     "Hello World!\\n"
... @prog
... .start  ld r2 hello
...         hlt
... ''')
>>> result.labels.lookup("start").offset
0
>>> asm.write_symbols("hello.sym")

Command-Line Usage
------------------
    $ asm16 hello.asm -s hello.sym

Options:
    -s, --symbols FILE     Write the label table
    --tokens               Print the token stream
    -v, --verbose          Report informational messages too
    -q, --quiet            Report errors only
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging

from asm16.assembler.lexer import Lexer, Token
from asm16.assembler.resolver import Resolver
from asm16.assembler.symbols import LabelTable
from asm16.diagnostics import (
    CollectingSink,
    Diagnostic,
    Diagnostics,
    LoggingSink,
    Severity,
    Sink,
)
from asm16.errors import AssemblyFailedError, SourceLocation

# Logger for this module
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssemblyResult:
    """
    Output of a successful run.

    Attributes:
        filename: Name of the assembled source
        tokens: Validated token stream for the encoder
        labels: Complete label table
    """
    filename: str
    tokens: list[Token]
    labels: LabelTable


class Assembler:
    """
    Main asm16 assembler class.

    Each assemble call is one run: a fresh RunState shared by a "lexer"
    and a "resolver" reporter. Every diagnostic delivered during the run is
    collected for get_error_report() and also passed on to the configured
    sink.

    Attributes:
        verbosity: Highest diagnostic severity delivered
    """

    def __init__(self, verbosity: Severity = Severity.WARNING,
                 sink: Optional[Sink] = None):
        """
        Initialize the assembler.

        Args:
            verbosity: Highest severity delivered (ERROR, WARNING or LOG);
                       errors fail the run regardless
            sink: Where diagnostics go as they happen (default: logging)
        """
        self.verbosity = Severity(verbosity)
        self._sink: Sink = sink if sink is not None else LoggingSink()
        self._collector = CollectingSink()
        self._result: Optional[AssemblyResult] = None

    # =========================================================================
    # Assembly
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> AssemblyResult:
        """
        Lex and resolve source text.

        Args:
            source: Assembly source text
            filename: Name used in reports

        Returns:
            The token stream and label table

        Raises:
            AssemblyFailedError: If any fatal diagnostic was reported
        """
        self._collector = CollectingSink(forward=self._sink)
        self._result = None

        root = Diagnostics(filename, self.verbosity, self._collector)
        root.log("assembling", filename)

        lexer = Lexer(source, root.child("lexer"))
        tokens = lexer.tokenize()

        resolver = Resolver(tokens, root.child("resolver"))
        labels = resolver.resolve()

        if labels is None or not root.good():
            logger.debug(f"Assembly of {filename} failed")
            location, source_line = self._first_error_location(source, filename)
            raise AssemblyFailedError(
                filename,
                diagnostics=list(self._collector.diagnostics),
                report=self._collector.report(),
                location=location,
                source_line=source_line,
                error_count=root.state.error_count,
            )

        self._result = AssemblyResult(filename, tokens, labels)
        logger.debug(f"Assembled {filename}: {len(tokens)} tokens, {len(labels)} labels")
        return self._result

    def _first_error_location(
        self, source: str, filename: str
    ) -> tuple[Optional[SourceLocation], Optional[str]]:
        """Locate the first delivered error that names a line."""
        for diagnostic in self._collector.errors:
            if diagnostic.line is None:
                continue
            lines = source.splitlines()
            text = None
            if diagnostic.line <= len(lines):
                text = lines[diagnostic.line - 1].strip()
            return SourceLocation(filename, diagnostic.line), text
        return None, None

    def assemble_file(self, filepath: str | Path) -> AssemblyResult:
        """
        Lex and resolve a source file.

        Args:
            filepath: Path to the .asm file

        Raises:
            FileNotFoundError: If the file does not exist
            AssemblyFailedError: If any fatal diagnostic was reported
        """
        filepath = Path(filepath)
        source = filepath.read_text(encoding="utf-8")
        return self.assemble_string(source, str(filepath))

    # =========================================================================
    # Results
    # =========================================================================

    def get_result(self) -> Optional[AssemblyResult]:
        """Result of the last successful run, or None."""
        return self._result

    def get_labels(self) -> LabelTable:
        """
        Label table of the last successful run.

        Raises:
            RuntimeError: If no run has succeeded yet
        """
        if self._result is None:
            raise RuntimeError("no successful assembly")
        return self._result.labels

    def get_diagnostics(self) -> list[Diagnostic]:
        """Every diagnostic delivered during the last run."""
        return list(self._collector.diagnostics)

    def has_errors(self) -> bool:
        """Check if the last run reported errors."""
        return self._collector.has_errors()

    def get_error_report(self) -> str:
        """Formatted errors and warnings of the last run."""
        return self._collector.report()

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write the label table of the last successful run.

        Raises:
            RuntimeError: If no run has succeeded yet
        """
        Path(filepath).write_text(self.get_labels().format_symbols(), encoding="utf-8")


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>",
             verbosity: Severity = Severity.WARNING) -> AssemblyResult:
    """
    Assemble source text with a default Assembler.

    Raises:
        AssemblyFailedError: If the source has errors
    """
    return Assembler(verbosity=verbosity).assemble_string(source, filename)


def assemble_file(filepath: str | Path,
                  verbosity: Severity = Severity.WARNING) -> AssemblyResult:
    """
    Assemble a source file with a default Assembler.

    Raises:
        AssemblyFailedError: If the source has errors
    """
    return Assembler(verbosity=verbosity).assemble_file(filepath)
