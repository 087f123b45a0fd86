"""
asm16 Assembler Front End
=========================

This package turns asm16 assembly source into a validated token stream and
a label table, ready for an instruction encoder.

Main Components
---------------
- **Assembler**: Runs the pipeline for a string or a file
- **Lexer**: Tokenizes source into Tokens
- **Resolver**: Checks the section structure and builds the LabelTable
- **Cursor**: Lookahead reader shared by the lexer and the resolver

Assembly Process
----------------
1. **Lexing**: characters -> tokens. Integers are normalized to unsigned
   16-bit values, string escapes are decoded, comments and blank lines are
   dropped.

2. **Resolution**: tokens -> label table.
   - @prog lines get fixed 4-byte slots; labels take the slot offset
   - @data labels own the concatenation of their string lines plus a NUL

Example Usage
-------------
>>> from asm16.assembler import Assembler
>>> result = Assembler().assemble_file("helloworld.asm")
>>> for label in result.labels:
...     print(label.name, label.offset)
"""

from asm16.assembler.assembler import Assembler, AssemblyResult, assemble, assemble_file
from asm16.assembler.cursor import Cursor
from asm16.assembler.lexer import Lexer, Token, TokenKind, tokenize
from asm16.assembler.resolver import INSTRUCTION_WIDTH, Resolver, SectionKind, resolve
from asm16.assembler.symbols import Label, LabelKind, LabelTable

__all__ = [
    "Assembler",
    "AssemblyResult",
    "assemble",
    "assemble_file",
    "Cursor",
    "Lexer",
    "Token",
    "TokenKind",
    "tokenize",
    "Resolver",
    "SectionKind",
    "INSTRUCTION_WIDTH",
    "resolve",
    "Label",
    "LabelKind",
    "LabelTable",
]
