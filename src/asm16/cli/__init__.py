"""
asm16 Command-Line Interface
============================

This package provides the command-line tools of asm16:

- **asm16**: lexes and resolves an assembly source file, reports
  diagnostics and optionally writes the label table

Each tool is implemented as a Click-based CLI application with
help and error reporting.
"""

__all__ = ["asm16"]
