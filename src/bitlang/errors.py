"""
Interpreter exceptions and diagnostics.

Error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E2xx: Load-time operation errors
- E3xx: Runtime errors
- Wxxx: Warnings (never fatal)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List
from .tokens import SourceSpan


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    WARNING = "warning"


@dataclass
class Diagnostic:
    """A single diagnostic message (error or warning)."""
    code: str                       # E001, W001, etc.
    message: str                    # Human-readable message
    severity: ErrorSeverity
    span: Optional[SourceSpan] = None
    source_line: Optional[str] = None   # The actual line of source code
    hints: List[str] = field(default_factory=list)

    def format(self, show_source: bool = True) -> str:
        """Format the diagnostic for display."""
        parts = []

        # Header: location: severity[code]: message
        header = f"{self.severity.value}[{self.code}]: {self.message}"
        if self.span is not None:
            header = f"{self.span.start}: {header}"
        parts.append(header)

        # Source line with caret
        if show_source and self.span is not None and self.source_line is not None:
            parts.append("  |")
            line_num = str(self.span.start.line)
            parts.append(f"{line_num:>3} | {self.source_line}")

            col = self.span.start.column
            if self.span.start.line == self.span.end.line:
                end_col = self.span.end.column
            else:
                end_col = len(self.source_line) + 1
            underline_len = max(1, end_col - col)
            parts.append(f"    | {' ' * (col - 1)}{'^' * underline_len}")

        for hint in self.hints:
            parts.append(f"    = hint: {hint}")

        return "\n".join(parts)


class BitError(Exception):
    """Base exception for every interpreter error."""

    code = "E000"

    def __init__(self, message: str, span: Optional[SourceSpan] = None,
                 source_line: Optional[str] = None, hints: List[str] = None):
        self.diagnostic = Diagnostic(
            code=self.code,
            message=message,
            severity=ErrorSeverity.ERROR,
            span=span,
            source_line=source_line,
            hints=hints or [],
        )
        super().__init__(message)

    def __str__(self) -> str:
        return self.diagnostic.format()


class LexerError(BitError):
    """Error during lexical analysis (E0xx)."""
    pass


class ParserError(BitError):
    """Error during parsing (E1xx)."""
    pass


class ExecutionError(BitError):
    """Error while running a loaded program (E3xx)."""
    pass


# --- Lexer errors ---

class InvalidCharacter(LexerError):
    """E001: A character that is neither whitespace nor an uppercase letter."""

    code = "E001"

    def __init__(self, char: str, span: Optional[SourceSpan] = None,
                 source_line: Optional[str] = None):
        self.char = char
        super().__init__(
            f"invalid character {char!r} ({ord(char)})",
            span, source_line,
            hints=["programs consist only of uppercase keywords and whitespace"],
        )


class InvalidToken(LexerError):
    """E002: Letters left over at end of input that spell no keyword."""

    code = "E002"

    def __init__(self, word: str, span: Optional[SourceSpan] = None,
                 source_line: Optional[str] = None):
        self.word = word
        super().__init__(f"invalid token '{word}'", span, source_line)


# --- Parser errors ---

class UnexpectedToken(ParserError):
    """E101: A token that does not fit the grammar where it appears."""

    code = "E101"

    def __init__(self, token: str, context: str, span: Optional[SourceSpan] = None,
                 source_line: Optional[str] = None):
        self.token = token
        self.context = context
        super().__init__(
            f"unexpected token {token} while parsing {context}", span, source_line
        )


class UnexpectedEndOfProgram(ParserError):
    """E102: The token stream ended in the middle of a construct."""

    code = "E102"

    def __init__(self, context: str, span: Optional[SourceSpan] = None):
        self.context = context
        super().__init__(f"unexpected end of program while parsing {context}", span)


class DuplicateGoto(ParserError):
    """E103: Two gotos on one line cover the same jump register value."""

    code = "E103"

    def __init__(self, line_number: int, span: Optional[SourceSpan] = None,
                 source_line: Optional[str] = None):
        self.line_number = line_number
        super().__init__(
            f"multiple gotos on line {line_number} cover one condition",
            span, source_line,
            hints=["a line takes either one GOTO, or one conditional GOTO per jump register value"],
        )


# --- Operation errors (load time and run time) ---

class InvalidOperation(BitError):
    """E201/E301: A type misuse of bits, addresses or variables."""

    code = "E301"

    def __init__(self, description: str, span: Optional[SourceSpan] = None,
                 source_line: Optional[str] = None, line_number: Optional[int] = None,
                 at_load: bool = False):
        self.description = description
        self.line_number = line_number
        if at_load:
            self.code = "E201"
        message = f"invalid operation: {description}"
        if line_number is not None:
            message += f" (line {line_number})"
        super().__init__(message, span, source_line)


class NestingTooDeep(BitError):
    """E104/E304: An expression nested deeper than the interpreter can follow."""

    code = "E304"

    def __init__(self, line_number: Optional[int] = None, span: Optional[SourceSpan] = None,
                 source_line: Optional[str] = None, at_load: bool = False):
        self.line_number = line_number
        if at_load:
            self.code = "E104"
        message = "expression nested too deeply"
        if line_number is not None:
            message += f" (line {line_number})"
        super().__init__(
            message, span, source_line,
            hints=["split the expression across several EQUALS commands"],
        )


# --- Runtime errors ---

class UndefinedLine(ExecutionError):
    """E302: Control reached a line number that the program does not define."""

    code = "E302"

    def __init__(self, line_number: Optional[int], source: Optional[int] = None,
                 span: Optional[SourceSpan] = None):
        self.line_number = line_number
        self.source = source
        if line_number is None:
            message = "program defines no lines"
        elif source is None:
            message = f"line {line_number} is not defined"
        else:
            message = f"goto on line {source} targets undefined line {line_number}"
        super().__init__(message, span)


class EndOfInput(ExecutionError):
    """E303: READ reached the end of its input before matching a bit."""

    code = "E303"

    def __init__(self, line_number: Optional[int] = None, span: Optional[SourceSpan] = None):
        self.line_number = line_number
        message = "input ended before ZERO or ONE was read"
        if line_number is not None:
            message += f" (line {line_number})"
        super().__init__(message, span)


# --- Warnings ---

def warning_jump_register_rhs(line_number: int, span: Optional[SourceSpan] = None,
                              source_line: Optional[str] = None) -> Diagnostic:
    """W001: THE JUMP REGISTER read on the right-hand side of EQUALS."""
    return Diagnostic(
        code="W001",
        message=f"THE JUMP REGISTER on right-hand side of EQUALS command on line {line_number}",
        severity=ErrorSeverity.WARNING,
        span=span,
        source_line=source_line,
        hints=["run in strict mode to reject this program"],
    )


def warning_duplicate_line(line_number: int, span: Optional[SourceSpan] = None,
                           source_line: Optional[str] = None) -> Diagnostic:
    """W002: A line number defined twice; the later definition wins."""
    return Diagnostic(
        code="W002",
        message=f"line {line_number} is defined more than once; the last definition is used",
        severity=ErrorSeverity.WARNING,
        span=span,
        source_line=source_line,
    )


class DiagnosticCollector:
    """Collects diagnostics during loading."""

    def __init__(self):
        self.diagnostics: List[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> None:
        """Add a diagnostic."""
        self.diagnostics.append(diagnostic)
