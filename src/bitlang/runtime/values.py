"""
Runtime values for the interpreter.

An expression evaluates either to a bit (a Python ``bool``) or to an
``Address``: the raw index of a memory cell. Only THE ADDRESS OF and address
variables produce addresses; everything else produces bits.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Address:
    """The index of a memory cell, as held by an address variable."""
    index: int

    def beyond(self) -> "Address":
        """The address of the next cell."""
        return Address(self.index + 1)


Value = Union[bool, Address]


def bit_val(b) -> bool:
    """Create a bit value. Literal numbers are true when nonzero."""
    return bool(b)


def is_address(value: Value) -> bool:
    """Check if a value is an address rather than a bit."""
    return isinstance(value, Address)


def describe(value: Value) -> str:
    """Short description of a value for error messages."""
    if is_address(value):
        return f"address {value.index}"
    return "bit ONE" if value else "bit ZERO"
