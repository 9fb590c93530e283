"""
Kaleidoscope Lexer - turns characters into tokens

Works on any iterable of characters with a single character of lookahead,
so it can sit directly on a string, a file object read char by char, or a
generator. Tokens are produced lazily; iterating a Lexer stops at end of
input without yielding the EOF marker.

xwest
"""

import logging
import string
from typing import Iterable, Iterator, List, Optional

from ..errors import SourceLocation
from .tokens import Token, TokenType, KEYWORDS, PUNCTUATION, OPERATORS
from .errors import InvalidNumberError, UnknownCharacterError

logger = logging.getLogger(__name__)

# ASCII only, on purpose: str.isalpha() and friends accept Unicode
IDENTIFIER_START = frozenset(string.ascii_letters)
IDENTIFIER_CONTINUE = frozenset(string.ascii_letters + string.digits)
NUMBER_CHARS = frozenset(string.digits + ".")
WHITESPACE = frozenset(" \t\n\r\x0c")
COMMENT_END = frozenset("\n\r")


class Lexer:
    """
    Kaleidoscope lexical analyzer.

    Keeps the current unconsumed character in `last_char` (None once the
    input is exhausted) and implements maximal munch on top of it.
    """

    def __init__(self, source: Iterable[str], filename: str = "<stdin>", line: int = 1):
        """
        Initialize the lexer.

        Args:
            source: Characters to tokenize (a str or any iterable of chars)
            filename: Name used in source locations
            line: Line number of the first character, for input fed line by line
        """
        self.filename = filename
        self._chars: Iterator[str] = iter(source)
        self.pos = 0
        self.line = line
        self.column = 1
        self.last_char: Optional[str] = next(self._chars, None)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            if token.type == TokenType.EOF:
                return
            yield token

    def tokenize(self) -> List[Token]:
        """
        Tokenize the remaining input.

        Returns:
            All tokens up to end of input, without an EOF token

        Raises:
            LexerError: On the first malformed number or unknown character
        """
        tokens = list(self)
        logger.debug("Tokenized %s into %d tokens", self.filename, len(tokens))
        return tokens

    def next_token(self) -> Token:
        """Return the next token; EOF on every call once input is exhausted."""
        while True:
            self._skip_whitespace()
            if self.last_char != "#":
                break
            # Line comment; tokenizing resumes on the next line
            while self.last_char is not None and self.last_char not in COMMENT_END:
                self._advance()

        location = self._location()
        char = self.last_char

        if char is None:
            return Token(TokenType.EOF, None, location)

        if char in IDENTIFIER_START:
            ident = self._take_while(IDENTIFIER_CONTINUE)
            token_type = KEYWORDS.get(ident)
            if token_type is not None:
                return Token(token_type, None, location)
            return Token(TokenType.IDENTIFIER, ident, location)

        if char in NUMBER_CHARS:
            lexeme = self._take_while(NUMBER_CHARS)
            try:
                value = float(lexeme)
            except ValueError:
                raise InvalidNumberError(lexeme, location) from None
            return Token(TokenType.NUMBER, value, location)

        if char in PUNCTUATION:
            self._advance()
            return Token(PUNCTUATION[char], None, location)

        if char in OPERATORS:
            self._advance()
            return Token(TokenType.OPERATOR, OPERATORS[char], location)

        raise UnknownCharacterError(char, location)

    def _skip_whitespace(self):
        while self.last_char is not None and self.last_char in WHITESPACE:
            self._advance()

    def _take_while(self, allowed: frozenset) -> str:
        chars = []
        while self.last_char is not None and self.last_char in allowed:
            chars.append(self.last_char)
            self._advance()
        return "".join(chars)

    def _advance(self):
        """Consume the lookahead character, updating line/column."""
        if self.last_char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.pos += 1
        self.last_char = next(self._chars, None)

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Raises:
        LexerError: If lexing fails
    """
    return Lexer(source, filename).tokenize()
