"""
Tests for reading and writing bits as ZERO/ONE text.
"""

import io

import pytest

from bitlang import BitReader, write_bit, EndOfInput


def read_all(text: str) -> list:
    """Helper to read bits until the input runs out."""
    reader = BitReader(io.StringIO(text))
    bits = []
    with pytest.raises(EndOfInput):
        while True:
            bits.append(reader.read_bit())
    return bits


class TestWriteBit:
    """Test bit output."""

    def test_write_one(self):
        out = io.StringIO()
        write_bit(out, True)
        assert out.getvalue() == "ONE\n"

    def test_write_zero(self):
        out = io.StringIO()
        write_bit(out, False)
        assert out.getvalue() == "ZERO\n"


class TestReadBit:
    """Test the input matcher."""

    def test_plain_words(self):
        assert read_all("ZERO ONE\nONE") == [False, True, True]

    def test_adjacent_words(self):
        assert read_all("ONEZEROONE") == [True, False, True]

    def test_whitespace_inside_word(self):
        """Whitespace is skipped without breaking a partial match."""
        assert read_all("Z E\tR\nO O N E") == [False, True]

    def test_noise_is_ignored(self):
        assert read_all("abc ONE, then... ZERO!") == [True, False]

    def test_lowercase_does_not_match(self):
        assert read_all("one zero") == []

    def test_restart_on_z(self):
        """A Z that breaks a partial ZERO starts a new one."""
        assert read_all("ZEZERO") == [False]

    def test_restart_on_o(self):
        """An O that breaks a partial ONE starts a new one."""
        assert read_all("OONE") == [True]

    def test_zer_then_one(self):
        """ZER followed by ONE completes ZERO using the O."""
        assert read_all("ZERONE") == [False]

    def test_one_bit_per_call(self):
        """Each call consumes only as far as the end of one word."""
        stream = io.StringIO("ONE rest")
        assert BitReader(stream).read_bit() is True
        assert stream.read() == " rest"

    def test_empty_input(self):
        with pytest.raises(EndOfInput) as exc_info:
            BitReader(io.StringIO("")).read_bit()
        assert "E303" in str(exc_info.value)

    def test_partial_word_at_end(self):
        with pytest.raises(EndOfInput):
            BitReader(io.StringIO("ZER")).read_bit()
