"""
bitlang - an interpreter for the BIT programming language.

BIT is a line-numbered, goto-structured language whose only value is a
single bit. This package provides:
- Lexer: Tokenizes program text
- Parser: Builds a line table of syntax trees from tokens
- Interpreter: Runs a loaded program
- bitio: Reading and writing bits as ZERO/ONE text

Usage:
    from bitlang import load, Interpreter

    program = load('''
        LINE NUMBER ZERO CODE VARIABLE ZERO EQUALS ONE GOTO ONE
        LINE NUMBER ONE CODE PRINT VARIABLE ZERO
    ''')
    Interpreter(program).run()

Or in one call, capturing output:
    from bitlang import compile_and_run

    result = compile_and_run("LINE NUMBER ZERO CODE PRINT ONE")
    print(result.output, end="")
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("bitlang")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from .tokens import (
    Token,
    TokenType,
    SourceLocation,
    SourceSpan,
    KEYWORDS,
)

from .lexer import (
    Lexer,
    tokenize,
)

from .parser import (
    Parser,
    parse,
    load,
)

from .ast import (
    # Expressions
    Expression,
    Operand,
    JumpRegister,
    Variable,
    ValueAt,
    ValueBeyond,
    AddressOf,
    Nand,
    # Commands
    Command,
    Read,
    Print,
    Equals,
    # Program
    Line,
    Program,
    # Listing
    format_operand,
    format_line,
    format_program,
)

from .errors import (
    BitError,
    LexerError,
    ParserError,
    ExecutionError,
    InvalidCharacter,
    InvalidToken,
    UnexpectedToken,
    UnexpectedEndOfProgram,
    DuplicateGoto,
    InvalidOperation,
    NestingTooDeep,
    UndefinedLine,
    EndOfInput,
    Diagnostic,
    DiagnosticCollector,
    ErrorSeverity,
)

from .bitio import (
    BitReader,
    write_bit,
)

from .runtime import (
    Interpreter,
    ExecutionResult,
    execute,
    compile_and_run,
    Address,
    ExecutionContext,
    VariableKind,
)

__all__ = [
    '__version__',

    # Tokens
    'Token',
    'TokenType',
    'SourceLocation',
    'SourceSpan',
    'KEYWORDS',

    # Lexer
    'Lexer',
    'tokenize',

    # Parser
    'Parser',
    'parse',
    'load',

    # Syntax tree
    'Expression',
    'Operand',
    'JumpRegister',
    'Variable',
    'ValueAt',
    'ValueBeyond',
    'AddressOf',
    'Nand',
    'Command',
    'Read',
    'Print',
    'Equals',
    'Line',
    'Program',
    'format_operand',
    'format_line',
    'format_program',

    # Errors
    'BitError',
    'LexerError',
    'ParserError',
    'ExecutionError',
    'InvalidCharacter',
    'InvalidToken',
    'UnexpectedToken',
    'UnexpectedEndOfProgram',
    'DuplicateGoto',
    'InvalidOperation',
    'NestingTooDeep',
    'UndefinedLine',
    'EndOfInput',
    'Diagnostic',
    'DiagnosticCollector',
    'ErrorSeverity',

    # Bit I/O
    'BitReader',
    'write_bit',

    # Runtime
    'Interpreter',
    'ExecutionResult',
    'execute',
    'compile_and_run',
    'Address',
    'ExecutionContext',
    'VariableKind',
]
