"""
Recursive descent parser for BIT.

Converts a token list into a ``Program``: a sparse table of lines keyed by
line number. Grammar:

    Line      := LINENUMBER Literal CODE Body Gotos
    Body      := PRINT Operand | READ | Expr EQUALS Operand
    Literal   := (ZERO | ONE)+                  most significant digit first
    Expr      := Primary (NAND Expr)?           right-associative
    Primary   := Literal | THEJUMPREGISTER | VARIABLE Literal
               | THEVALUEAT Expr | THEVALUEBEYOND Expr | THEADDRESSOF Expr
               | OPENPARENTHESIS Expr CLOSEPARENTHESIS
    Gotos     := (GOTO Literal (IFTHEJUMPREGISTERIS (ZERO | ONE))?)*

Type misuse that is visible in the syntax (multi-bit literals where a bit is
required, assigning to something that is not a memory cell) is rejected here
so that no ill-formed program ever starts running.
"""

from typing import List, Optional, TextIO, Union
from .tokens import Token, TokenType, SourceSpan, DIGITS, is_digit_token
from .ast import (
    Expression, Operand, ADDRESSABLE, is_literal,
    JumpRegister, Variable, ValueAt, ValueBeyond, AddressOf, Nand,
    Command, Read, Print, Equals,
    Line, Program,
)
from .errors import (
    UnexpectedToken,
    UnexpectedEndOfProgram,
    DuplicateGoto,
    InvalidOperation,
    NestingTooDeep,
    DiagnosticCollector,
    warning_jump_register_rhs,
    warning_duplicate_line,
)
from .lexer import tokenize


class Parser:
    """
    Recursive descent parser for BIT.

    Usage:
        parser = Parser(tokens)
        program = parser.parse_program()

    In strict mode, reading THE JUMP REGISTER on the right-hand side of
    EQUALS is an error; otherwise it is reported as a warning.
    """

    def __init__(self, tokens: List[Token], strict: bool = False,
                 source: Optional[str] = None):
        self.tokens = tokens
        self.strict = strict
        self.source = source  # Original source code for diagnostics
        self.pos = 0
        self.diagnostics = DiagnosticCollector()
        self._source_lines: Optional[List[str]] = None

        # Line currently being parsed, for error messages
        self._line_number: Optional[int] = None
        self._line_start: Optional[Token] = None

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def _current(self) -> Optional[Token]:
        """Get current token, or None at end of input."""
        if self._is_at_end():
            return None
        return self.tokens[self.pos]

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token is of given type."""
        return not self._is_at_end() and self.tokens[self.pos].type == token_type

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def _match(self, token_type: TokenType) -> Optional[Token]:
        """Consume token if it matches the given type."""
        if self._check(token_type):
            return self._advance()
        return None

    def _next(self, context: str) -> Token:
        """Consume and return the next token, which must exist."""
        if self._is_at_end():
            self._eof(context)
        return self._advance()

    def _consume(self, token_type: TokenType, context: str) -> Token:
        """Consume token of expected type, or raise error."""
        token = self._next(context)
        if token.type != token_type:
            self._unexpected(token, context)
        return token

    def _eof(self, context: str) -> None:
        span = self.tokens[-1].span if self.tokens else None
        raise UnexpectedEndOfProgram(context, span)

    def _unexpected(self, token: Token, context: str) -> None:
        raise UnexpectedToken(token.type.name, context, token.span,
                              self._get_source_line(token.span))

    def _invalid(self, description: str) -> None:
        span = self._line_span()
        raise InvalidOperation(description, span, self._get_source_line(span),
                               line_number=self._line_number, at_load=True)

    def _line_span(self) -> Optional[SourceSpan]:
        """Span from the current line's LINENUMBER to the last consumed token."""
        if self._line_start is None or self.pos == 0:
            return None
        end_token = self.tokens[self.pos - 1]
        return SourceSpan(self._line_start.span.start, end_token.span.end)

    def _get_source_line(self, span: Optional[SourceSpan]) -> Optional[str]:
        if span is None or self.source is None:
            return None
        if self._source_lines is None:
            self._source_lines = self.source.splitlines()
        line_num = span.start.line
        if 1 <= line_num <= len(self._source_lines):
            return self._source_lines[line_num - 1]
        return None

    # =========================================================================
    # Expressions
    # =========================================================================

    def _parse_literal(self) -> int:
        """Parse one or more binary digits, most significant first."""
        if self._is_at_end():
            self._eof("literal number")
        if not is_digit_token(self._current().type):
            self._unexpected(self._current(), "literal number")

        value = 0
        while not self._is_at_end() and is_digit_token(self._current().type):
            value = (value << 1) | DIGITS[self._advance().type]
        return value

    def _parse_expression(self) -> Operand:
        """Parse a chain of primaries joined by NAND, folded to the right."""
        operands = [self._parse_primary()]
        while self._match(TokenType.NAND):
            operands.append(self._parse_primary())

        expr = operands.pop()
        while operands:
            expr = Nand(operands.pop(), expr)
        return expr

    def _parse_primary(self) -> Operand:
        if self._is_at_end():
            self._eof("expression")
        token = self._current()

        if is_digit_token(token.type):
            return self._parse_literal()

        if token.type == TokenType.THEJUMPREGISTER:
            self._advance()
            return JumpRegister()

        if token.type == TokenType.VARIABLE:
            self._advance()
            return Variable(self._parse_literal())

        if token.type == TokenType.THEVALUEAT:
            self._advance()
            return ValueAt(self._parse_subexpression("THE VALUE AT"))

        if token.type == TokenType.THEVALUEBEYOND:
            self._advance()
            return ValueBeyond(self._parse_subexpression("THE VALUE BEYOND"))

        if token.type == TokenType.THEADDRESSOF:
            self._advance()
            return AddressOf(self._parse_subexpression("THE ADDRESS OF"))

        if token.type == TokenType.OPENPARENTHESIS:
            self._advance()
            inner = self._parse_expression()
            self._consume(TokenType.CLOSEPARENTHESIS, "parentheses")
            return inner

        self._unexpected(token, "expression")

    def _parse_subexpression(self, operator: str) -> Expression:
        """Parse the operand of an address operator, which cannot be a literal."""
        operand = self._parse_expression()
        if is_literal(operand):
            self._invalid(f"{operator} applied to a literal number")
        return operand

    # =========================================================================
    # Commands
    # =========================================================================

    def _parse_command(self) -> Command:
        if self._is_at_end():
            self._eof("line")
        token = self._current()

        if token.type == TokenType.PRINT:
            self._advance()
            if self._is_at_end():
                self._eof("print command")
            value = self._parse_expression()
            if is_literal(value) and value > 1:
                self._invalid("used multi-bit literal in PRINT command")
            return Print(value)

        if token.type == TokenType.READ:
            self._advance()
            return Read()

        return self._parse_equals()

    def _parse_equals(self) -> Equals:
        target = self._parse_expression()
        if is_literal(target):
            self._invalid("literal number on left-hand side of EQUALS command")
        if not isinstance(target, ADDRESSABLE + (JumpRegister,)):
            self._invalid(
                f"cannot assign to {type(target).__name__} expression in EQUALS command"
            )

        self._consume(TokenType.EQUALS, "line")
        if self._is_at_end():
            self._eof("line")
        value = self._parse_expression()

        if is_literal(value) and value > 1:
            self._invalid("used multi-bit literal in EQUALS command")
        if isinstance(value, JumpRegister):
            if self.strict:
                self._invalid("used THE JUMP REGISTER on right-hand side of EQUALS command")
            span = self._line_span()
            self.diagnostics.add(warning_jump_register_rhs(
                self._line_number, span, self._get_source_line(span)
            ))

        return Equals(target, value)

    # =========================================================================
    # Gotos
    # =========================================================================

    def _parse_gotos(self) -> dict:
        """Parse zero or more GOTO clauses into Line keyword arguments."""
        gotos = {"goto": None, "goto_false": None, "goto_true": None}

        while self._match(TokenType.GOTO):
            if self._is_at_end():
                self._eof("goto")
            destination = self._parse_literal()

            if self._match(TokenType.IFTHEJUMPREGISTERIS):
                condition = self._next("goto")
                if condition.type == TokenType.ZERO:
                    key = "goto_false"
                elif condition.type == TokenType.ONE:
                    key = "goto_true"
                else:
                    self._unexpected(condition, "goto")
                if gotos["goto"] is not None or gotos[key] is not None:
                    self._duplicate_goto()
            else:
                key = "goto"
                if any(dest is not None for dest in gotos.values()):
                    self._duplicate_goto()

            gotos[key] = destination

        if not self._is_at_end() and not self._check(TokenType.LINENUMBER):
            self._unexpected(self._current(), "goto")
        return gotos

    def _duplicate_goto(self) -> None:
        span = self._line_span()
        raise DuplicateGoto(self._line_number, span, self._get_source_line(span))

    # =========================================================================
    # Program
    # =========================================================================

    def _parse_line(self) -> Line:
        self._line_start = self._consume(TokenType.LINENUMBER, "line number")
        self._line_number = self._parse_literal()
        self._consume(TokenType.CODE, "line number")

        command = self._parse_command()
        gotos = self._parse_gotos()
        return Line(self._line_number, command, span=self._line_span(), **gotos)

    def parse_program(self) -> Program:
        """Parse every line. Any error aborts loading of the whole program."""
        program = Program()

        while not self._is_at_end():
            try:
                line = self._parse_line()
            except RecursionError:
                span = self._line_span()
                raise NestingTooDeep(self._line_number, span, self._get_source_line(span),
                                     at_load=True) from None
            if line.number in program:
                self.diagnostics.add(warning_duplicate_line(
                    line.number, line.span, self._get_source_line(line.span)
                ))
            program.lines[line.number] = line

        self._line_start = None
        self._line_number = None
        program.diagnostics = list(self.diagnostics.diagnostics)
        return program


def parse(tokens: List[Token], strict: bool = False,
          source: Optional[str] = None) -> Program:
    """
    Convenience function to parse tokens into a program.

    Args:
        tokens: List of tokens from the lexer
        strict: Reject THE JUMP REGISTER on the right-hand side of EQUALS
        source: Optional original source code for error messages

    Returns:
        Parsed Program

    Raises:
        ParserError: If parsing fails
        InvalidOperation: If the program misuses bits or addresses visibly
        NestingTooDeep: If an expression is nested too deeply to parse
    """
    parser = Parser(tokens, strict, source)
    return parser.parse_program()


def load(source: Union[str, TextIO], strict: bool = False,
         filename: Optional[str] = None) -> Program:
    """Tokenize and parse program text in one call."""
    if not isinstance(source, str):
        source = source.read()
    return parse(tokenize(source, filename), strict, source)
