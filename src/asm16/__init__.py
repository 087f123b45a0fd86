"""
asm16 - Assembler Front End for a 16-bit Instruction Set
========================================================

This package provides the front end of an assembler for a small 16-bit
custom instruction set: a lexer producing a line-annotated token stream,
and a resolver that validates the section layout and builds the label
table an instruction encoder needs.

Main Components
---------------
- **assembler**: Lexer, Resolver, label table and the Assembler facade
- **diagnostics**: Leveled error/warning/log reporting with a shared
  success flag
- **cli**: The asm16 command-line tool

Quick Start
-----------
    >>> from asm16 import Assembler
    >>> result = Assembler().assemble_file("helloworld.asm")
    >>> result.labels.lookup("helloworld").data
    b'Hello World!\\n\\x00\\x00'

Or from the command line:
    $ asm16 helloworld.asm -s helloworld.sym

Source Format
-------------
    @data
    .helloworld
        "Hello World!\\n"

    @prog
    .start  port 1          ; comments run to end of line
            ld r2 helloworld
    .loop   ldb r1 r2
            hlt
"""

__version__ = "1.0.0"
__author__ = "asm16 Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from asm16.assembler import (
    Assembler,
    AssemblyResult,
    Label,
    LabelKind,
    LabelTable,
    Lexer,
    Resolver,
    Token,
    TokenKind,
)
from asm16.diagnostics import (
    CollectingSink,
    Diagnostic,
    Diagnostics,
    LoggingSink,
    RunState,
    Severity,
)
from asm16.errors import (
    Asm16Error,
    AssemblerError,
    AssemblyFailedError,
    SourceLocation,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Assembler
    "Assembler",
    "AssemblyResult",
    "Label",
    "LabelKind",
    "LabelTable",
    "Lexer",
    "Resolver",
    "Token",
    "TokenKind",
    # Diagnostics
    "CollectingSink",
    "Diagnostic",
    "Diagnostics",
    "LoggingSink",
    "RunState",
    "Severity",
    # Exception hierarchy
    "Asm16Error",
    "AssemblerError",
    "AssemblyFailedError",
    "SourceLocation",
]
