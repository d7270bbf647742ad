"""
Lexer for BIT.

Converts source text into a list of keyword tokens for the parser.

Whitespace is skipped everywhere, including between the letters of a
keyword. Letters accumulate into a candidate word until the word equals a
keyword spelling; because no spelling is a prefix of another, the token can
be emitted at that instant without lookahead or backtracking.
"""

from typing import List, Optional, Iterator, TextIO, Union
from .tokens import Token, SourceLocation, SourceSpan, KEYWORDS
from .errors import InvalidCharacter, InvalidToken


class Lexer:
    """
    Tokenizer for BIT.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()

    Or for streaming:
        lexer = Lexer(source_code)
        for token in lexer:
            process(token)
    """

    def __init__(self, source: Union[str, TextIO], filename: Optional[str] = None):
        if not isinstance(source, str):
            source = source.read()
        self.source = source
        self.filename = filename
        self.pos = 0            # Current position in source
        self.line = 1           # Current line (1-indexed)
        self.column = 1         # Current column (1-indexed)
        self._lines: Optional[List[str]] = None  # Cached line list

        # Candidate keyword being accumulated
        self.word = ""
        self.word_start: Optional[SourceLocation] = None

    @property
    def lines(self) -> List[str]:
        """Lazy-load line list for error reporting."""
        if self._lines is None:
            self._lines = self.source.splitlines()
        return self._lines

    def get_source_line(self, line_num: int) -> Optional[str]:
        """Get a specific line of source (1-indexed)."""
        if 1 <= line_num <= len(self.lines):
            return self.lines[line_num - 1]
        return None

    def _location(self) -> SourceLocation:
        """Get current source location."""
        return SourceLocation(self.line, self.column, self.pos, self.filename)

    def _is_at_end(self) -> bool:
        """Check if we've reached end of source."""
        return self.pos >= len(self.source)

    def _advance(self) -> str:
        """Consume and return current character."""
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _scan_token(self) -> Optional[Token]:
        """Scan characters until a keyword completes; None at end of input."""
        while not self._is_at_end():
            start = self._location()
            ch = self._advance()

            if ch.isspace():
                continue
            if not ('A' <= ch <= 'Z'):
                raise InvalidCharacter(
                    ch,
                    SourceSpan(start, self._location()),
                    self.get_source_line(start.line),
                )

            if not self.word:
                self.word_start = start
            self.word += ch

            token_type = KEYWORDS.get(self.word)
            if token_type is not None:
                token = Token(token_type, SourceSpan(self.word_start, self._location()))
                self.word = ""
                self.word_start = None
                return token

        if self.word:
            raise InvalidToken(
                self.word,
                SourceSpan(self.word_start, self._location()),
                self.get_source_line(self.word_start.line),
            )
        return None

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source, returning a list of tokens."""
        return list(self)

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens."""
        while True:
            token = self._scan_token()
            if token is None:
                break
            yield token


def tokenize(source: Union[str, TextIO], filename: Optional[str] = None) -> List[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: The source code to tokenize, as a string or readable text stream
        filename: Optional filename for error messages

    Returns:
        List of tokens

    Raises:
        LexerError: If tokenization fails
    """
    lexer = Lexer(source, filename)
    return lexer.tokenize()
