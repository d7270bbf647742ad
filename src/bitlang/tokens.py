"""
Token types for the BIT lexer.

BIT programs are written entirely in uppercase keywords. Whitespace is
insignificant, even inside a keyword, so "THE JUMP REGISTER" and
"THEJUMPREGISTER" spell the same token.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional


class TokenType(Enum):
    """All token types recognized by the lexer."""

    # --- Digits ---
    ZERO = auto()
    ONE = auto()

    # --- Line structure ---
    LINENUMBER = auto()
    CODE = auto()
    GOTO = auto()
    IFTHEJUMPREGISTERIS = auto()

    # --- Expressions ---
    THEJUMPREGISTER = auto()
    VARIABLE = auto()
    THEVALUEAT = auto()
    THEVALUEBEYOND = auto()
    THEADDRESSOF = auto()
    NAND = auto()
    OPENPARENTHESIS = auto()
    CLOSEPARENTHESIS = auto()

    # --- Commands ---
    EQUALS = auto()
    PRINT = auto()
    READ = auto()


@dataclass(frozen=True)
class SourceLocation:
    """Represents a position in source code."""
    line: int           # 1-indexed line number
    column: int         # 1-indexed column number
    offset: int         # 0-indexed character offset from start
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a range in source code."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"


@dataclass(frozen=True)
class Token:
    """A single token from the lexer."""
    type: TokenType
    span: SourceSpan        # Location in source, from first to last letter

    def __str__(self) -> str:
        return self.type.name


# Keyword spellings. No spelling is a prefix of another, which lets the
# lexer emit a token the moment its letters match.
KEYWORDS: dict[str, TokenType] = {
    token_type.name: token_type for token_type in TokenType
}

# Digit tokens and the bit they stand for
DIGITS: dict[TokenType, int] = {
    TokenType.ZERO: 0,
    TokenType.ONE: 1,
}


def is_digit_token(token_type: TokenType) -> bool:
    """Check if a token type is one of the two binary digits."""
    return token_type in DIGITS


# Multi-word keywords, as they are conventionally written in programs
DISPLAY_SPELLINGS: dict[TokenType, str] = {
    TokenType.LINENUMBER: "LINE NUMBER",
    TokenType.IFTHEJUMPREGISTERIS: "IF THE JUMP REGISTER IS",
    TokenType.THEJUMPREGISTER: "THE JUMP REGISTER",
    TokenType.THEVALUEAT: "THE VALUE AT",
    TokenType.THEVALUEBEYOND: "THE VALUE BEYOND",
    TokenType.THEADDRESSOF: "THE ADDRESS OF",
    TokenType.OPENPARENTHESIS: "OPEN PARENTHESIS",
    TokenType.CLOSEPARENTHESIS: "CLOSE PARENTHESIS",
}


def spell(token_type: TokenType) -> str:
    """Return the readable source spelling of a token type."""
    return DISPLAY_SPELLINGS.get(token_type, token_type.name)
