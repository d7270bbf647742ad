"""
Syntax tree definitions for BIT.

Expressions and commands are closed sets of frozen dataclasses, combined into
the ``Expression``, ``Operand`` and ``Command`` unions. Code that walks them
dispatches on every member and raises on anything else.

A parsed program is a sparse table of lines keyed by line number. It is
built once by the parser and never mutated while running.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Union
from .tokens import SourceSpan, TokenType, spell
from .errors import Diagnostic, ErrorSeverity


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class JumpRegister:
    """THE JUMP REGISTER."""


@dataclass(frozen=True)
class Variable:
    """VARIABLE <literal>: a named variable, identified by number."""
    index: int


@dataclass(frozen=True)
class ValueAt:
    """THE VALUE AT <expr>: the bit stored at the address of an expression."""
    operand: "Expression"


@dataclass(frozen=True)
class ValueBeyond:
    """THE VALUE BEYOND <expr>: the bit one cell past the address of an expression."""
    operand: "Expression"


@dataclass(frozen=True)
class AddressOf:
    """THE ADDRESS OF <expr>: the address itself, without dereferencing."""
    operand: "Expression"


@dataclass(frozen=True)
class Nand:
    """<operand> NAND <operand>. Chains associate to the right."""
    left: "Operand"
    right: "Operand"


Expression = Union[JumpRegister, Variable, ValueAt, ValueBeyond, AddressOf, Nand]

# A literal number or an expression
Operand = Union[int, Expression]

# Expressions that name a memory cell
ADDRESSABLE = (Variable, ValueAt, ValueBeyond)


def is_literal(operand: Operand) -> bool:
    """Check if an operand is a literal number rather than an expression."""
    return isinstance(operand, int)


# =============================================================================
# Commands
# =============================================================================

@dataclass(frozen=True)
class Read:
    """READ: set the jump register from input."""


@dataclass(frozen=True)
class Print:
    """PRINT <bit>: write a bit to output."""
    value: Operand


@dataclass(frozen=True)
class Equals:
    """<target> EQUALS <value>: assign a bit or an address."""
    target: Expression
    value: Operand


Command = Union[Read, Print, Equals]


# =============================================================================
# Lines and Programs
# =============================================================================

@dataclass(frozen=True)
class Line:
    """
    One numbered line: a command followed by its gotos.

    A line has either a single unconditional goto, or at most one
    conditional goto per jump register value, or no goto at all (in which
    case reaching it halts the program after its command).
    """
    number: int
    command: Command
    goto: Optional[int] = None          # GOTO n
    goto_false: Optional[int] = None    # GOTO n IF THE JUMP REGISTER IS ZERO
    goto_true: Optional[int] = None     # GOTO n IF THE JUMP REGISTER IS ONE
    span: Optional[SourceSpan] = None   # LINE NUMBER ... through the last token

    @property
    def has_gotos(self) -> bool:
        return self.goto is not None or self.goto_false is not None or self.goto_true is not None

    def next_line(self, jump_register: bool) -> Optional[int]:
        """The line number to continue at, or None to halt."""
        if self.goto is not None:
            return self.goto
        if not jump_register and self.goto_false is not None:
            return self.goto_false
        if jump_register and self.goto_true is not None:
            return self.goto_true
        return None


@dataclass
class Program:
    """A loaded program: a sparse line table plus load-time diagnostics."""
    lines: Dict[int, Line] = field(default_factory=dict)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == ErrorSeverity.WARNING]

    @property
    def first_line_number(self) -> Optional[int]:
        """The lowest defined line number, where execution starts."""
        if not self.lines:
            return None
        return min(self.lines)

    def get(self, number: int) -> Optional[Line]:
        return self.lines.get(number)

    def __contains__(self, number: int) -> bool:
        return number in self.lines

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[Line]:
        """Iterate over defined lines in line number order."""
        for number in sorted(self.lines):
            yield self.lines[number]


# =============================================================================
# Listing
# =============================================================================

def format_literal(value: int) -> str:
    """Spell a number as ZERO/ONE digits, most significant first."""
    return " ".join(spell(TokenType.ONE) if digit == "1" else spell(TokenType.ZERO)
                    for digit in format(value, "b"))


def format_operand(operand: Operand) -> str:
    """Render an operand as source text that parses back to the same tree."""
    if is_literal(operand):
        return format_literal(operand)
    elif isinstance(operand, JumpRegister):
        return spell(TokenType.THEJUMPREGISTER)
    elif isinstance(operand, Variable):
        return f"{spell(TokenType.VARIABLE)} {format_literal(operand.index)}"
    elif isinstance(operand, ValueAt):
        return f"{spell(TokenType.THEVALUEAT)} {format_operand(operand.operand)}"
    elif isinstance(operand, ValueBeyond):
        return f"{spell(TokenType.THEVALUEBEYOND)} {format_operand(operand.operand)}"
    elif isinstance(operand, AddressOf):
        return f"{spell(TokenType.THEADDRESSOF)} {format_operand(operand.operand)}"
    elif isinstance(operand, Nand):
        parts = []
        while isinstance(operand, Nand):
            left = format_operand(operand.left)
            # A prefix operator or NAND on the left would swallow the NAND
            if isinstance(operand.left, (Nand, ValueAt, ValueBeyond, AddressOf)):
                left = (f"{spell(TokenType.OPENPARENTHESIS)} {left} "
                        f"{spell(TokenType.CLOSEPARENTHESIS)}")
            parts.append(left)
            operand = operand.right
        parts.append(format_operand(operand))
        return f" {spell(TokenType.NAND)} ".join(parts)
    else:
        raise ValueError(f"Unknown operand type: {type(operand).__name__}")


def format_command(command: Command) -> str:
    if isinstance(command, Read):
        return spell(TokenType.READ)
    elif isinstance(command, Print):
        return f"{spell(TokenType.PRINT)} {format_operand(command.value)}"
    elif isinstance(command, Equals):
        return (f"{format_operand(command.target)} {spell(TokenType.EQUALS)} "
                f"{format_operand(command.value)}")
    else:
        raise ValueError(f"Unknown command type: {type(command).__name__}")


def format_line(line: Line) -> str:
    """Render one line in normalized source form."""
    parts = [
        spell(TokenType.LINENUMBER), format_literal(line.number),
        spell(TokenType.CODE), format_command(line.command),
    ]
    goto = spell(TokenType.GOTO)
    condition = spell(TokenType.IFTHEJUMPREGISTERIS)
    if line.goto is not None:
        parts += [goto, format_literal(line.goto)]
    if line.goto_false is not None:
        parts += [goto, format_literal(line.goto_false), condition, spell(TokenType.ZERO)]
    if line.goto_true is not None:
        parts += [goto, format_literal(line.goto_true), condition, spell(TokenType.ONE)]
    return " ".join(parts)


def format_program(program: Program) -> str:
    """Render a whole program, one line per line number, in order."""
    return "\n".join(format_line(line) for line in program)
