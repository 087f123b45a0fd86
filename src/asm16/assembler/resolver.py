"""
Section Validator and Label Resolver
====================================

This module walks the lexer's token list, checks the section structure of
the program and builds the label table. It is the first pass of a
two-pass assembler: the encoder that follows re-walks the program section
with every label address already known.

Source Layout
-------------
```asm
@data
.greeting
    "Hello "
    "World!\\n"

@prog
.start  ld r2 greeting
.loop   ldb r1 r2
        hlt
```

Each section starts with an '@name' line. Two sections exist:

Program sections (@prog)
------------------------
Every line is one instruction slot of INSTRUCTION_WIDTH bytes. A line may
begin with a label, which gets the offset of that slot. The instruction
itself is not inspected here. The offset advances for every line, even a
line that was rejected, so later labels keep the addresses the encoder
will give them.

Data sections (@data)
---------------------
A label on its own line followed by zero or more lines holding one string
literal each. The decoded strings are concatenated, a NUL terminator is
appended, and the label gets the running data offset. The offset then
advances by the buffer length.

Error Recovery
--------------
Problems are reported through Diagnostics and recovery skips forward to
the next boundary (end of line, next label or next section) before
carrying on. A program section is mandatory; without one resolve()
returns None.
"""

from enum import Enum
from typing import Optional
import logging

from asm16.assembler.cursor import Cursor
from asm16.assembler.lexer import Token, TokenKind
from asm16.assembler.symbols import Label, LabelKind, LabelTable
from asm16.diagnostics import Diagnostics

# Logger for this module
logger = logging.getLogger(__name__)

# Bytes per program line. Every instruction is assumed to encode to one
# fixed-width slot.
INSTRUCTION_WIDTH = 4

# Terminator appended to every data label
DATA_TERMINATOR = 0


class SectionKind(Enum):
    """The section types a '@name' line can open."""
    PROGRAM = "prog"
    DATA = "data"

    @classmethod
    def parse(cls, name: str) -> Optional["SectionKind"]:
        """Return the section kind for name, or None if it is not a section."""
        try:
            return cls(name)
        except ValueError:
            return None


def describe(token: Optional[Token]) -> str:
    """Short human readable description of a token for diagnostics."""
    if token is None:
        return "end of input"
    if token.kind == TokenKind.END_OF_LINE:
        return "end of line"
    if token.kind == TokenKind.END_OF_FILE:
        return "end of file"
    return f"{token.kind.name.lower().replace('_', ' ')} '{token.text}'"


class Resolver:
    """
    Builds the label table from a token list.

    Usage:
        tokens = Lexer(source).tokenize()
        resolver = Resolver(tokens, diagnostics)
        labels = resolver.resolve()
        if labels is None or not resolver.good():
            ...

    Attributes:
        labels: The label table (complete only once resolve() returned)
    """

    def __init__(self, tokens: list[Token], diagnostics: Optional[Diagnostics] = None):
        """
        Initialize the resolver.

        Args:
            tokens: Token list from the lexer, ending with END_OF_FILE
            diagnostics: Where problems are reported (default: a fresh
                         "resolver" reporter logging to the standard logger)
        """
        self._cursor: Cursor[Token] = Cursor(tokens)
        self._diag = diagnostics if diagnostics is not None else Diagnostics("resolver")
        self._labels = LabelTable()

        self._program_offset = 0
        self._data_offset = 0
        self._seen_program = False
        self._finished = False

    @property
    def labels(self) -> LabelTable:
        return self._labels

    def good(self) -> bool:
        """Return False if any fatal problem has been reported."""
        return self._diag.good()

    def resolve(self) -> Optional[LabelTable]:
        """
        Validate the sections and build the label table.

        The tokens are walked once; later calls return the same result.

        Returns:
            The label table, or None if no program section was found.
            A table is only usable when good() is also True.
        """
        if not self._finished:
            while not self._at_end():
                self._resolve_section()
            self._finished = True

            if not self._seen_program:
                self._diag.error("a program section was not found")
            else:
                logger.debug(
                    f"Resolved {len(self._labels)} labels "
                    f"(program {self._program_offset} bytes, data {self._data_offset} bytes)"
                )
                self._diag.log("resolution finished", f"{len(self._labels)} labels")

        return self._labels if self._seen_program else None

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _check(self, kind: TokenKind) -> bool:
        """Check if the current token has the given kind."""
        token = self._cursor.peek()
        return token is not None and token.kind == kind

    def _at_end(self) -> bool:
        token = self._cursor.peek()
        return token is None or token.kind == TokenKind.END_OF_FILE

    def _at_section_end(self) -> bool:
        return self._at_end() or self._check(TokenKind.SECTION)

    def _skip_to(self, kinds: set[TokenKind]) -> int:
        """Discard tokens up to one of kinds (or end of input)."""
        return self._cursor.skip_until(kinds | {TokenKind.END_OF_FILE}, key=lambda t: t.kind)

    def _flush_line(self) -> None:
        """Discard the rest of the current line, including its END_OF_LINE."""
        self._skip_to({TokenKind.END_OF_LINE})
        if self._check(TokenKind.END_OF_LINE):
            self._cursor.consume()

    # =========================================================================
    # Sections
    # =========================================================================

    def _resolve_section(self) -> None:
        """Handle one '@name' line and the section body that follows it."""
        token = self._cursor.peek()

        if token.kind != TokenKind.SECTION:
            self._diag.error("expected section declaration", f"got {describe(token)}", token.line)
            self._flush_line()
            return

        self._cursor.consume()
        if self._check(TokenKind.END_OF_LINE):
            self._cursor.consume()
        else:
            self._diag.error(
                "expected newline after section declaration",
                f"'@{token.text}' followed by {describe(self._cursor.peek())}",
                token.line,
            )
            self._flush_line()

        kind = SectionKind.parse(token.text)
        if kind is None:
            self._diag.error(
                "not a valid section",
                f"'@{token.text}' (expected @prog or @data)",
                token.line,
            )
            self._skip_to({TokenKind.SECTION})
        elif kind == SectionKind.PROGRAM:
            self._seen_program = True
            self._resolve_program()
        else:
            self._resolve_data()

    # =========================================================================
    # Program Sections
    # =========================================================================

    def _resolve_program(self) -> None:
        """Assign an instruction slot to every line up to the next section."""
        while not self._at_section_end():
            token = self._cursor.peek()

            if token.kind == TokenKind.LABEL:
                self._cursor.consume()
                if self._check(TokenKind.END_OF_LINE):
                    self._diag.error(
                        "expected instruction after label definition",
                        f"'.{token.text}'",
                        token.line,
                    )
                else:
                    self._define(Label(token.text, token.line, self._program_offset,
                                       LabelKind.PROGRAM))

            # The instruction is the encoder's business
            self._flush_line()
            self._program_offset += INSTRUCTION_WIDTH

    # =========================================================================
    # Data Sections
    # =========================================================================

    def _resolve_data(self) -> None:
        """Build one data label per block up to the next section."""
        while not self._at_section_end():
            self._resolve_data_block()

    def _resolve_data_block(self) -> None:
        token = self._cursor.peek()

        if token.kind != TokenKind.LABEL:
            self._diag.error("expected label definition", f"got {describe(token)}", token.line)
            self._flush_line()
            return

        self._cursor.consume()
        if not self._check(TokenKind.END_OF_LINE):
            self._diag.error(
                "expected newline after label definition",
                f"'.{token.text}' followed by {describe(self._cursor.peek())}",
                token.line,
            )
            self._flush_line()
            return
        self._cursor.consume()

        existing = self._labels.lookup(token.text)
        if existing is not None:
            self._report_redefinition(token.text, token.line, existing)
            self._skip_to({TokenKind.LABEL, TokenKind.SECTION})
            return

        data = bytearray()
        while not self._at_section_end() and not self._check(TokenKind.LABEL):
            self._read_string_line(data)
        data.append(DATA_TERMINATOR)

        if self._define(Label(token.text, token.line, self._data_offset,
                              LabelKind.DATA, bytes(data))):
            self._data_offset += len(data)

    def _read_string_line(self, data: bytearray) -> None:
        """Append the bytes of one 'string literal' line to data."""
        token = self._cursor.peek()

        if token.kind != TokenKind.STRING_LITERAL:
            self._diag.error(
                "unexpected token",
                f"expected string literal, got {describe(token)}",
                token.line,
            )
            self._flush_line()
            return

        self._cursor.consume()
        if not self._check(TokenKind.END_OF_LINE):
            self._diag.error(
                "expected newline after string literal",
                f"got {describe(self._cursor.peek())}",
                token.line,
            )
            self._flush_line()
            return
        self._cursor.consume()

        data.extend(token.text.encode("utf-8"))

    # =========================================================================
    # Label Table
    # =========================================================================

    def _define(self, label: Label) -> bool:
        """
        Add a label to the table, reporting a clash with an earlier one.

        Returns:
            True if the label was added
        """
        existing = self._labels.define(label)
        if existing is not None:
            self._report_redefinition(label.name, label.line, existing)
            return False

        kind = label.kind.name.lower()
        logger.debug(f"Defined {kind} label '{label.name}' at offset {label.offset}")
        self._diag.log(f"defined {kind} label", f"'{label.name}' at offset {label.offset}",
                       label.line)
        return True

    def _report_redefinition(self, name: str, line: int, existing: Label) -> None:
        self._diag.error(
            "redefinition of label",
            f"'{name}' was first defined on line {existing.line}",
            line,
        )


def resolve(tokens: list[Token], diagnostics: Optional[Diagnostics] = None) -> Optional[LabelTable]:
    """
    Convenience function to build a label table from tokens.

    Returns:
        The label table, or None if no program section was found
    """
    return Resolver(tokens, diagnostics).resolve()
