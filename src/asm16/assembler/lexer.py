"""
asm16 Assembly Language Lexer
=============================

This module implements the lexer (tokenizer) for asm16 assembly language.
It converts source text into a list of tokens that the resolver walks.

Token Kinds
-----------
- LABEL: Label definition (.name)
- SECTION: Section declaration (@name)
- INT_LITERAL: Integer or character literal, normalized to 16 bits
- STRING_LITERAL: Double-quoted string with escapes decoded
- IDENTIFIER: Mnemonics, registers, label references (not classified here)
- END_OF_LINE: End of a non-empty line
- END_OF_FILE: End of input (always exactly one, always last)

Number Formats
--------------
| Format      | Prefix | Example  | Token text |
|-------------|--------|----------|------------|
| Decimal     | (none) | 123      | 123        |
| Hexadecimal | 0x     | 0x7F     | 127        |
| Binary      | 0b     | 0b1010   | 10         |
| Negative    | -      | -1       | 65535      |
| Character   | '      | 'A'      | A          |

Integer token text is always the unsigned 16-bit decimal value, never the
source spelling. Out of range values are truncated with a warning.

Error Recovery
--------------
The lexer never raises on bad input. Each problem is reported through
Diagnostics, the offending token is dropped, and scanning continues. An
unknown character is skipped one character at a time.

Example
-------
>>> from asm16.assembler.lexer import Lexer
>>> for token in Lexer(".loop ldb r1 r2 ; comment").tokenize():
...     print(token)
Token(LABEL, 'loop', 1:5)
Token(IDENTIFIER, 'ldb', 1:9)
Token(IDENTIFIER, 'r1', 1:12)
Token(IDENTIFIER, 'r2', 1:15)
Token(END_OF_LINE, 1:26)
Token(END_OF_FILE, 2:0)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional
import logging
import string

from asm16.assembler.cursor import Cursor
from asm16.diagnostics import Diagnostics

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Token Kind Enumeration
# =============================================================================

class TokenKind(Enum):
    """Token kinds produced by the lexer."""

    # Structural tokens
    END_OF_LINE = auto()
    END_OF_FILE = auto()

    # Definitions
    LABEL = auto()      # .name
    SECTION = auto()    # @name

    # Values
    INT_LITERAL = auto()     # 123, 0x7F, 0b101, -1, 'c'
    STRING_LITERAL = auto()  # "text"
    IDENTIFIER = auto()      # mnemonics, registers, references


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    Represents a single token from the source code.

    Attributes:
        kind: The TokenKind classification
        text: Label/section name, decoded literal, or normalized number
        line: Line where the token started (1-indexed)
        column: Lexer column when the token was emitted
    """
    kind: TokenKind
    text: str
    line: int
    column: int

    def __repr__(self) -> str:
        if self.text:
            return f"Token({self.kind.name}, {self.text!r}, {self.line}:{self.column})"
        return f"Token({self.kind.name}, {self.line}:{self.column})"

    __str__ = __repr__


# =============================================================================
# Numeric Limits
# =============================================================================

INT16_MIN = -0x8000
UINT16_MAX = 0xFFFF
INT32_MAX = 0x7FFFFFFF


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes asm16 assembly source code.

    Each branch of the scanning loop owns exactly one token kind, chosen
    from the first character:

        whitespace  ->  (END_OF_LINE on '\\n')
        ;           ->  comment, no token
        .           ->  LABEL
        @           ->  SECTION
        " or '      ->  STRING_LITERAL / INT_LITERAL
        digit or -  ->  INT_LITERAL
        letter      ->  IDENTIFIER

    Usage:
        lexer = Lexer(source_text, diagnostics)
        tokens = lexer.tokenize()
        if not lexer.good():
            ...

    Attributes:
        source: The source code being tokenized (with trailing newline)
    """

    # Characters that make up label, section and identifier names
    NAME_CHARS = string.ascii_letters + string.digits

    # Escape sequences in string and character literals
    ESCAPE_SEQUENCES = {
        "'": "'",       # Single quote
        '"': '"',       # Double quote
        "\\": "\\",     # Backslash
        "t": "\t",      # Tab
        "n": "\n",      # Newline
        "0": "\0",      # Null
    }

    # Literal kind named in diagnostics, by opening quote
    QUOTE_NAMES = {
        '"': "string",
        "'": "character",
    }

    def __init__(self, source: str, diagnostics: Optional[Diagnostics] = None):
        """
        Initialize the lexer with source code.

        Args:
            source: The assembly source code to tokenize. A newline is
                    appended so the last line is always terminated.
            diagnostics: Where problems are reported (default: a fresh
                         "lexer" reporter logging to the standard logger)
        """
        self.source = source + "\n"
        self._diag = diagnostics if diagnostics is not None else Diagnostics("lexer")
        self._cursor: Cursor[str] = Cursor(self.source)
        self._tokens: list[Token] = []
        self._finished = False

        self._line = 1
        self._column = 0

    def good(self) -> bool:
        """Return False if any fatal problem has been reported."""
        return self._diag.good()

    def tokenize(self) -> list[Token]:
        """
        Scan the whole source.

        The source is scanned once; later calls return the same tokens.

        Returns:
            Token list ending with exactly one END_OF_FILE
        """
        if self._finished:
            return list(self._tokens)

        while not self._cursor.at_end():
            char = self._cursor.peek()

            if char in string.whitespace:
                self._scan_whitespace()
            elif char == ";":
                self._skip_comment()
            elif char == ".":
                self._scan_name(TokenKind.LABEL, "label")
            elif char == "@":
                self._scan_name(TokenKind.SECTION, "section")
            elif char in self.QUOTE_NAMES:
                self._scan_quoted()
            elif char in string.digits or char == "-":
                self._scan_integer()
            elif char in string.ascii_letters:
                self._scan_identifier()
            else:
                self._diag.error("invalid or unknown symbol", repr(char), self._line)
                self._advance()

        self._emit(TokenKind.END_OF_FILE, "")
        self._finished = True

        logger.debug(f"Lexed {len(self._tokens)} tokens from {self._line - 1} lines")
        self._diag.log("lexing finished", f"{len(self._tokens)} tokens")
        return list(self._tokens)

    # =========================================================================
    # Character Access
    # =========================================================================

    def _advance(self) -> str:
        """Consume one character, keeping the column counter current."""
        self._column += 1
        return self._cursor.consume()

    def _read_name(self) -> str:
        """Consume a maximal run of ASCII alphanumeric characters."""
        chars = []
        # Note: peek() returns None at the end, so test it before 'in'
        while self._cursor.peek() is not None and self._cursor.peek() in self.NAME_CHARS:
            chars.append(self._advance())
        return "".join(chars)

    def _emit(self, kind: TokenKind, text: str, line: Optional[int] = None) -> None:
        self._tokens.append(Token(kind, text, line or self._line, self._column))

    # =========================================================================
    # Whitespace and Comments
    # =========================================================================

    def _scan_whitespace(self) -> None:
        """
        Consume a single whitespace character.

        A newline ends the current line. END_OF_LINE is only emitted after a
        line that produced tokens, so blank and comment-only lines vanish.
        """
        if self._advance() != "\n":
            return

        if self._tokens and self._tokens[-1].kind != TokenKind.END_OF_LINE:
            self._emit(TokenKind.END_OF_LINE, "")
        self._column = 0
        self._line += 1

    def _skip_comment(self) -> None:
        """Skip from ';' up to (not including) the newline."""
        self._column += self._cursor.skip_until({"\n"})

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_name(self, kind: TokenKind, what: str) -> None:
        """Scan a '.label' or '@section' definition."""
        line = self._line
        self._advance()  # consume . or @
        name = self._read_name()

        if not name:
            self._diag.error(f"empty {what} definition", line=line)
        elif name[0] in string.digits:
            self._diag.error(f"{what} name can't begin with a digit", repr(name), line)
        else:
            self._emit(kind, name, line)

    def _scan_identifier(self) -> None:
        """Scan a mnemonic, register or label reference."""
        line = self._line
        self._emit(TokenKind.IDENTIFIER, self._read_name(), line)

    def _scan_quoted(self) -> None:
        """
        Scan a string ("...") or character ('.') literal.

        A raw newline before the closing quote aborts the literal. The
        newline itself is left for the whitespace scanner, so the line is
        counted exactly once.
        """
        line = self._line
        quote = self._advance()
        what = self.QUOTE_NAMES[quote]

        chars = []
        terminated = False
        while not self._cursor.at_end():
            char = self._cursor.peek()

            if char == quote:
                self._advance()  # consume closing quote
                terminated = True
                break

            if char == "\n":
                break

            self._advance()
            # A backslash right before the newline is not an escape
            if char == "\\" and self._cursor.peek() not in (None, "\n"):
                chars.append(self._scan_escape(line))
            else:
                chars.append(char)

        if not terminated:
            self._diag.error(f"{what} literal missing terminating {quote} character", line=line)
            return

        text = "".join(chars)

        if quote == '"':
            self._emit(TokenKind.STRING_LITERAL, text, line)
        elif not text:
            self._diag.error("empty character literal", line=line)
        elif len(text) > 1:
            self._diag.error(
                "character literal contains more than one character",
                f"use \"{text}\" for a string literal",
                line,
            )
        else:
            # Downstream stages read the character's ordinal value
            self._emit(TokenKind.INT_LITERAL, text, line)

    def _scan_escape(self, line: int) -> str:
        """Decode the character after a backslash (always consumed)."""
        code = self._advance()
        if code in self.ESCAPE_SEQUENCES:
            return self.ESCAPE_SEQUENCES[code]

        self._diag.warning("unrecognized escape character", f"'\\{code}'", line)
        return code

    def _scan_integer(self) -> None:
        """
        Scan an integer literal.

        The first character (digit or '-') is taken unconditionally, then a
        maximal alphanumeric run, so hex and binary letters are collected
        before the base is known.
        """
        line = self._line
        spelling = self._advance() + self._read_name()

        if spelling == "-":
            self._diag.error("empty integer literal after '-'", line=line)
            return

        negative = spelling.startswith("-")
        digits = spelling[1:] if negative else spelling

        detected = self._detect_base(digits)
        if detected is None:
            self._diag.error(
                "invalid integer literal format",
                f"'{spelling}': only decimal, binary (0b) and hexadecimal (0x) are supported",
                line,
            )
            return

        base, body = detected
        value = int(body, base)

        limit = INT32_MAX + 1 if negative else INT32_MAX
        if value > limit:
            self._diag.error("integer literal out of 32-bit range", repr(spelling), line)
            return

        if negative:
            value = -value
            if value < INT16_MIN:
                self._diag.warning(
                    "integer literal too small to be represented with 16 bits",
                    repr(spelling), line,
                )
        elif value > UINT16_MAX:
            self._diag.warning(
                "integer literal too large to be represented with 16 bits",
                repr(spelling), line,
            )

        self._emit(TokenKind.INT_LITERAL, str(value & UINT16_MAX), line)

    @staticmethod
    def _detect_base(digits: str) -> Optional[tuple[int, str]]:
        """
        Work out the base of an unsigned literal.

        Returns:
            (base, digits without prefix), or None if the format is invalid
        """
        prefix, body = digits[:2], digits[2:]

        if prefix == "0x" and body and all(c in string.hexdigits for c in body):
            return 16, body
        if prefix == "0b" and body and all(c in "01" for c in body):
            return 2, body
        if digits and all(c in string.digits for c in digits):
            return 10, digits
        return None


def tokenize(source: str, diagnostics: Optional[Diagnostics] = None) -> list[Token]:
    """
    Convenience function to tokenize source text.

    Args:
        source: Assembly source text
        diagnostics: Optional reporter (default: a fresh "lexer" reporter)

    Returns:
        Token list ending with END_OF_FILE
    """
    return Lexer(source, diagnostics).tokenize()
