"""
Tree-walking interpreter for BIT programs.

Execution is a state machine over line numbers. Each step runs the command
on the current line, then follows the line's unconditional goto, or the
conditional goto matching the jump register. A line with no applicable goto
halts the program. There is no step limit unless one is requested: programs
that never halt are valid.
"""

import io
import sys
from dataclasses import dataclass, field
from typing import List, Optional, TextIO, Union

from .values import Address, Value, bit_val, is_address, describe
from .context import ExecutionContext
from ..ast import (
    Program, Line, Operand, is_literal,
    JumpRegister, Variable, ValueAt, ValueBeyond, AddressOf, Nand,
    Read, Print, Equals,
)
from ..bitio import BitReader, write_bit
from ..errors import BitError, Diagnostic, EndOfInput, NestingTooDeep, UndefinedLine


@dataclass
class ExecutionResult:
    """Result of running a program."""
    success: bool
    halted: bool = False
    steps: int = 0
    output: Optional[str] = None
    error_message: Optional[str] = None
    error: Optional[BitError] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)


class Interpreter:
    """
    Tree-walking interpreter for a loaded program.

    Usage:
        interpreter = Interpreter(program, stdin=sys.stdin, stdout=sys.stdout)
        result = interpreter.run()

    Each interpreter owns its own ExecutionContext, so several can run
    side by side without sharing state.
    """

    def __init__(self, program: Program, stdin: Optional[TextIO] = None,
                 stdout: Optional[TextIO] = None):
        self.program = program
        self.reader = BitReader(stdin)
        self.stdout = stdout if stdout is not None else sys.stdout
        self.ctx = ExecutionContext()
        self._started = False

    def start(self) -> None:
        """Position execution at the lowest numbered line."""
        first = self.program.first_line_number
        if first is None:
            raise UndefinedLine(None)
        self.ctx.current_line = self.program.get(first)
        self._started = True

    def run(self, max_steps: Optional[int] = None) -> ExecutionResult:
        """
        Run until the program halts, or until ``max_steps`` steps have been
        taken when a limit is given.

        Raises:
            InvalidOperation, UndefinedLine, EndOfInput, NestingTooDeep: On runtime errors
        """
        if not self._started:
            self.start()
        while not self.ctx.halted:
            if max_steps is not None and self.ctx.steps >= max_steps:
                break
            self.step()
        return ExecutionResult(
            success=True,
            halted=self.ctx.halted,
            steps=self.ctx.steps,
            diagnostics=list(self.program.diagnostics),
        )

    def step(self) -> bool:
        """Execute one line. Returns False once the program has halted."""
        if not self._started:
            self.start()
        if self.ctx.halted:
            return False

        line = self.ctx.current_line
        try:
            self._execute_command(line)
        except RecursionError:
            raise NestingTooDeep(line.number, line.span) from None
        self.ctx.steps += 1

        destination = line.next_line(self.ctx.jump_register)
        if destination is None:
            self.ctx.halted = True
            return False

        if destination not in self.program:
            raise UndefinedLine(destination, line.number, line.span)
        self.ctx.current_line = self.program.get(destination)
        return True

    # =========================================================================
    # Commands
    # =========================================================================

    def _execute_command(self, line: Line) -> None:
        command = line.command
        if isinstance(command, Read):
            try:
                self.ctx.jump_register = self.reader.read_bit()
            except EndOfInput:
                raise EndOfInput(line.number, line.span) from None
        elif isinstance(command, Print):
            write_bit(self.stdout, self._bit(command.value, "PRINT"))
        elif isinstance(command, Equals):
            self._execute_equals(command)
        else:
            raise RuntimeError(f"Unknown command type: {type(command).__name__}")

    def _execute_equals(self, command: Equals) -> None:
        """Assign a bit to a cell or the jump register, or an address to a variable."""
        value = self._evaluate(command.value)
        target = command.target

        if is_address(value):
            if isinstance(target, JumpRegister):
                raise self.ctx.invalid_operation(
                    f"tried to place {describe(value)} in THE JUMP REGISTER"
                )
            if not isinstance(target, Variable):
                raise self.ctx.invalid_operation(
                    f"tried to place {describe(value)} in a memory cell"
                )
            self.ctx.bind_address(target.index, value)
        elif isinstance(target, JumpRegister):
            self.ctx.jump_register = value
        else:
            self.ctx.write_cell(self._address(target), value)

    # =========================================================================
    # Expressions
    # =========================================================================

    def _evaluate(self, operand: Operand) -> Value:
        """Evaluate an operand to a bit or an address."""
        if is_literal(operand):
            return bit_val(operand)
        elif isinstance(operand, JumpRegister):
            return self.ctx.jump_register
        elif isinstance(operand, Variable):
            return self.ctx.variable_value(operand.index)
        elif isinstance(operand, (ValueAt, ValueBeyond)):
            return self.ctx.read_cell(self._address(operand))
        elif isinstance(operand, AddressOf):
            return Address(self._address(operand.operand))
        elif isinstance(operand, Nand):
            # Every operand of the chain is evaluated, left first, so type errors always surface
            lefts = []
            while isinstance(operand, Nand):
                lefts.append(self._bit(operand.left, "NAND"))
                operand = operand.right
            result = self._bit(operand, "NAND")
            for left in reversed(lefts):
                result = not (left and result)
            return result
        else:
            raise RuntimeError(f"Unknown expression type: {type(operand).__name__}")

    def _bit(self, operand: Operand, user: str) -> bool:
        """Evaluate an operand that must produce a bit."""
        value = self._evaluate(operand)
        if is_address(value):
            raise self.ctx.invalid_operation(f"{user} needs a bit, got {describe(value)}")
        return value

    def _address(self, operand: Operand) -> int:
        """Resolve the memory cell an expression names."""
        if isinstance(operand, Variable):
            return self.ctx.variable_address(operand.index)
        elif isinstance(operand, (ValueAt, ValueBeyond)):
            value = self._evaluate(operand.operand)
            if not is_address(value):
                raise self.ctx.invalid_operation(
                    f"tried to dereference {describe(value)}, which is not an address"
                )
            if isinstance(operand, ValueBeyond):
                value = value.beyond()
            return value.index
        else:
            name = "a literal number" if is_literal(operand) else type(operand).__name__
            raise self.ctx.invalid_operation(f"cannot take the address of {name}")


def execute(
    program: Program,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    max_steps: Optional[int] = None,
) -> ExecutionResult:
    """
    Run a loaded program, reporting runtime errors in the result.

    Args:
        program: The parsed program
        stdin: Stream READ takes bits from (default: sys.stdin)
        stdout: Stream PRINT writes bits to (default: sys.stdout)
        max_steps: Optional step limit; None runs until the program halts

    Returns:
        ExecutionResult; ``success`` is False if a runtime error occurred
    """
    interpreter = Interpreter(program, stdin, stdout)
    try:
        return interpreter.run(max_steps)
    except BitError as e:
        return ExecutionResult(
            success=False,
            steps=interpreter.ctx.steps,
            error_message=str(e),
            error=e,
            diagnostics=list(program.diagnostics),
        )


def compile_and_run(
    source: Union[str, TextIO],
    input: Union[str, TextIO] = "",
    strict: bool = False,
    max_steps: Optional[int] = None,
    filename: Optional[str] = None,
) -> ExecutionResult:
    """
    High-level API to load and run program text in one call.

    This is the simplest way to run a program:

        from bitlang import compile_and_run

        result = compile_and_run("LINE NUMBER ZERO CODE PRINT ONE")
        if result.success:
            print(result.output, end="")
        else:
            print(f"Error: {result.error_message}")

    Args:
        source: Program text
        input: Text (or a stream) that READ commands take bits from
        strict: Reject THE JUMP REGISTER on the right-hand side of EQUALS
        max_steps: Optional step limit
        filename: Optional filename for error messages

    Returns:
        ExecutionResult with the captured output and any error
    """
    from ..parser import load

    try:
        program = load(source, strict=strict, filename=filename)
    except BitError as e:
        return ExecutionResult(
            success=False,
            error_message=f"Load error: {e}",
            error=e,
        )

    stdin = io.StringIO(input) if isinstance(input, str) else input
    stdout = io.StringIO()
    result = execute(program, stdin, stdout, max_steps)
    result.output = stdout.getvalue()
    return result
