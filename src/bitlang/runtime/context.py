"""
Execution context for the interpreter.

Holds all mutable state of one run: memory, the variable table, the jump
register and the current line. Memory and variables are allocated lazily on
first use and never freed, so an address stays valid for the whole run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .values import Address, Value
from ..ast import Line
from ..errors import InvalidOperation


class VariableKind(Enum):
    """What a variable refers to. Once BIT or ADDRESS, it never changes."""
    UNSET = "unset"
    BIT = "bit"
    ADDRESS = "address"


@dataclass
class VariableSlot:
    """
    One entry of the variable table.

    For a BIT variable, ``index`` is the memory cell the variable names.
    For an ADDRESS variable, ``index`` is the address the variable holds.
    """
    kind: VariableKind = VariableKind.UNSET
    index: int = 0


class Memory:
    """A growable sequence of bits. Cells past the end read as ZERO."""

    def __init__(self):
        self.bits: List[bool] = []

    def __len__(self) -> int:
        return len(self.bits)

    def _ensure(self, index: int) -> None:
        if index >= len(self.bits):
            self.bits.extend([False] * (index + 1 - len(self.bits)))

    def allocate(self) -> int:
        """Append one cell and return its index."""
        self.bits.append(False)
        return len(self.bits) - 1

    def read(self, index: int) -> bool:
        self._ensure(index)
        return self.bits[index]

    def write(self, index: int, bit: bool) -> None:
        self._ensure(index)
        self.bits[index] = bit


class VariableTable:
    """A growable sequence of variable slots, UNSET until first use."""

    def __init__(self):
        self.slots: List[VariableSlot] = []

    def __len__(self) -> int:
        return len(self.slots)

    def get(self, index: int) -> VariableSlot:
        """Return the slot for a variable, growing the table if needed."""
        if index >= len(self.slots):
            self.slots.extend(VariableSlot() for _ in range(index + 1 - len(self.slots)))
        return self.slots[index]


@dataclass
class ExecutionContext:
    """
    The full state of one program run.

    Tracks:
    - Memory and variable table
    - The jump register
    - The line being executed and the number of steps taken
    """
    memory: Memory = field(default_factory=Memory)
    variables: VariableTable = field(default_factory=VariableTable)
    jump_register: bool = False

    # Execution state
    current_line: Optional[Line] = None
    steps: int = 0
    halted: bool = False

    def invalid_operation(self, description: str) -> InvalidOperation:
        """Build a runtime InvalidOperation pointing at the current line."""
        line = self.current_line
        if line is None:
            return InvalidOperation(description)
        return InvalidOperation(description, line.span, line_number=line.number)

    # --- Variables ---

    def variable_address(self, index: int) -> int:
        """
        The memory cell a variable names.

        An UNSET variable becomes a BIT variable bound to a freshly
        allocated cell at the end of memory.
        """
        slot = self.variables.get(index)
        if slot.kind == VariableKind.UNSET:
            slot.kind = VariableKind.BIT
            slot.index = self.memory.allocate()
        elif slot.kind == VariableKind.ADDRESS:
            raise self.invalid_operation(
                f"tried to take the address of address variable {index}"
            )
        return slot.index

    def variable_value(self, index: int) -> Value:
        """
        The value of a variable: its bit, or for an ADDRESS variable the
        address it holds (not the bit at that address).
        """
        slot = self.variables.get(index)
        if slot.kind == VariableKind.UNSET:
            raise self.invalid_operation(f"read of uninitialized variable {index}")
        if slot.kind == VariableKind.BIT:
            return self.memory.read(slot.index)
        return Address(slot.index)

    def bind_address(self, index: int, address: Address) -> None:
        """Make a variable an ADDRESS variable holding ``address``."""
        slot = self.variables.get(index)
        if slot.kind == VariableKind.BIT:
            raise self.invalid_operation(
                f"tried to place an address in bit variable {index}"
            )
        slot.kind = VariableKind.ADDRESS
        slot.index = address.index

    # --- Memory ---

    def read_cell(self, address: int) -> bool:
        return self.memory.read(address)

    def write_cell(self, address: int, bit: bool) -> None:
        self.memory.write(address, bit)
