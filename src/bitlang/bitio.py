"""
Reading and writing single bits as the words ZERO and ONE.

Output is one word per line. Input is scanned a character at a time by a
small matcher that picks the words ZERO and ONE out of arbitrary text and
ignores everything else.
"""

import sys
from enum import Enum, auto
from typing import Optional, TextIO

from .errors import EndOfInput


class PartialBit(Enum):
    """States of the input matcher: how much of a word has been seen."""
    EMPTY = auto()
    Z = auto()
    ZE = auto()
    ZER = auto()
    O = auto()
    ON = auto()


# (state, character) -> next state, for every transition that extends a match
_TRANSITIONS = {
    (PartialBit.Z, 'E'): PartialBit.ZE,
    (PartialBit.ZE, 'R'): PartialBit.ZER,
    (PartialBit.O, 'N'): PartialBit.ON,
}

# (state, character) -> bit, for every transition that completes a word
_COMPLETIONS = {
    (PartialBit.ZER, 'O'): False,
    (PartialBit.ON, 'E'): True,
}

# Characters that begin a new word when they do not continue the current one
_RESTARTS = {
    'Z': PartialBit.Z,
    'O': PartialBit.O,
}


def write_bit(stream: TextIO, bit: bool) -> None:
    """Write a bit as ONE or ZERO followed by a newline."""
    stream.write("ONE\n" if bit else "ZERO\n")
    stream.flush()


class BitReader:
    """
    Reads bits from a text stream.

    Usage:
        reader = BitReader(sys.stdin)
        bit = reader.read_bit()

    The reader keeps no state between calls: each read starts a fresh match.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdin

    def read_bit(self) -> bool:
        """
        Block until ZERO or ONE has been read.

        Returns:
            True for ONE, False for ZERO

        Raises:
            EndOfInput: If the stream ends first
        """
        state = PartialBit.EMPTY
        while True:
            ch = self.stream.read(1)
            if not ch:
                raise EndOfInput()
            if ch.isspace():
                continue

            key = (state, ch)
            if key in _COMPLETIONS:
                return _COMPLETIONS[key]
            state = _TRANSITIONS.get(key) or _RESTARTS.get(ch, PartialBit.EMPTY)
