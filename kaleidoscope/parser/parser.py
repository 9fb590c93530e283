"""
Kaleidoscope Precedence-Climbing Parser

Recursive descent for statements and prototypes, precedence climbing for
binary expressions. One call to parse() produces one top-level statement.

Grammar:
    statement  ::= 'def' prototype expression | 'extern' prototype | expression
    prototype  ::= identifier '(' identifier* ')'
    expression ::= primary (binop primary)*
    primary    ::= number | identifier | identifier '(' args? ')' | '(' expression ')'
    args       ::= expression (',' expression)*

Author: xwest
"""

import logging
from typing import List, Optional, Iterable

from ..lexer.tokens import Token, TokenType, Operator
from .ast_nodes import (
    ExprAST, NumberLiteral, VariableRef, BinaryOp, Call, Prototype, FunctionDef
)
from .errors import (
    ParseError, ParseWarning, create_missing_token_error,
    create_invalid_expression_error,
    EXPECTED_STATEMENT, EXPECTED_FUNCTION_NAME, EXPECTED_PROTO_OPEN,
    EXPECTED_PROTO_CLOSE, EXPECTED_ARG_SEPARATOR, EXPECTED_CLOSE_PAREN,
    NESTED_TOO_DEEPLY, MISSING_SEMICOLON, TRAILING_TOKENS
)

logger = logging.getLogger(__name__)


class Parser:
    """
    Kaleidoscope parser.

    Takes an already-tokenized, finite sequence and reads it with one
    token of lookahead. Warnings for unterminated statements are collected
    in `warnings`; errors are raised as ParseError.
    """

    def __init__(self, tokens: Iterable[Token]):
        """
        Initialize parser with a sequence of tokens.

        Args:
            tokens: Tokens from the lexer, EOF marker optional
        """
        self.tokens: List[Token] = [t for t in tokens if t.type != TokenType.EOF]
        self.current = 0
        self.warnings: List[ParseWarning] = []

    def parse(self) -> ExprAST:
        """
        Parse one top-level statement.

        Returns:
            FunctionDef for 'def', Prototype for 'extern', otherwise the
            expression itself

        Raises:
            ParseError: If the statement is malformed, nested too deeply or
                there is no input
        """
        if self._is_at_end():
            raise ParseError(EXPECTED_STATEMENT)

        try:
            if self._match(TokenType.DEF):
                node = self._parse_definition()
            elif self._match(TokenType.EXTERN):
                node = self._parse_prototype()
            else:
                node = self._parse_expression()
        except RecursionError:
            found = self._peek()
            raise ParseError(
                NESTED_TOO_DEEPLY,
                found.location if found is not None else None,
                token=found
            ) from None

        self._finish_statement()
        return node

    def _parse_definition(self) -> FunctionDef:
        proto = self._parse_prototype()
        body = self._parse_expression()
        return FunctionDef(proto, body)

    def _parse_prototype(self) -> Prototype:
        """Parse `name ( arg* )`; parameters are not comma separated."""
        name_token = self._consume(TokenType.IDENTIFIER, EXPECTED_FUNCTION_NAME)
        self._consume(TokenType.LEFT_PAREN, EXPECTED_PROTO_OPEN)

        args = []
        while self._check(TokenType.IDENTIFIER):
            args.append(self._advance().value)

        self._consume(TokenType.RIGHT_PAREN, EXPECTED_PROTO_CLOSE)
        return Prototype(name_token.value, tuple(args))

    def _parse_expression(self) -> ExprAST:
        lhs = self._parse_primary()
        return self._parse_op_and_rhs(0, lhs)

    def _parse_op_and_rhs(self, min_precedence: int, lhs: ExprAST) -> ExprAST:
        """
        Fold binary operators into lhs while they bind at least as tightly
        as min_precedence.

        Equal precedence folds left, so `a-b-c` is `(a-b)-c`. When the
        operator after the right-hand primary binds tighter than the current
        one, that primary is first extended with a recursive call at
        precedence + 1, so `a+b*c` is `a+(b*c)`.
        """
        while True:
            op = self._peek_operator()
            if op is None or op.precedence < min_precedence:
                return lhs
            self._advance()

            rhs = self._parse_primary()

            next_op = self._peek_operator()
            if next_op is not None and op.precedence < next_op.precedence:
                rhs = self._parse_op_and_rhs(op.precedence + 1, rhs)

            lhs = BinaryOp(op, lhs, rhs)

    def _parse_primary(self) -> ExprAST:
        token = self._peek()
        if token is None:
            raise create_invalid_expression_error(None)

        if token.type == TokenType.NUMBER:
            self._advance()
            return NumberLiteral(token.value)
        elif token.type == TokenType.IDENTIFIER:
            return self._parse_identifier()
        elif token.type == TokenType.LEFT_PAREN:
            return self._parse_grouping()

        raise create_invalid_expression_error(token)

    def _parse_identifier(self) -> ExprAST:
        """Parse a variable reference or, if followed by '(', a call."""
        name = self._advance().value
        if not self._match(TokenType.LEFT_PAREN):
            return VariableRef(name)

        args = []
        if not self._match(TokenType.RIGHT_PAREN):
            while True:
                args.append(self._parse_expression())
                if self._match(TokenType.RIGHT_PAREN):
                    break
                if not self._match(TokenType.COMMA):
                    raise create_missing_token_error(
                        EXPECTED_ARG_SEPARATOR, TokenType.RIGHT_PAREN, self._peek()
                    )
        return Call(name, tuple(args))

    def _parse_grouping(self) -> ExprAST:
        self._advance()  # '('
        expr = self._parse_expression()
        self._consume(TokenType.RIGHT_PAREN, EXPECTED_CLOSE_PAREN)
        return expr

    def _finish_statement(self):
        """Consume the ';' and drain whatever follows, warning as needed."""
        if not self._match(TokenType.SEMICOLON):
            found = self._peek()
            self._warn(ParseWarning(
                MISSING_SEMICOLON,
                found.location if found is not None else None,
                help_text=f"found {found}" if found is not None else "found end of input"
            ))

        if not self._is_at_end():
            remaining = self.tokens[self.current:]
            self.current = len(self.tokens)
            self._warn(ParseWarning(
                TRAILING_TOKENS,
                remaining[0].location,
                tokens=remaining,
                help_text=" ".join(t.lexeme for t in remaining)
            ))

    def _warn(self, warning: ParseWarning):
        self.warnings.append(warning)
        logger.warning("%s", warning.message)

    # Token helpers

    def _peek_operator(self) -> Optional[Operator]:
        token = self._peek()
        if token is not None and token.type == TokenType.OPERATOR:
            return token.value
        return None

    def _match(self, token_type: TokenType) -> bool:
        """Consume the next token if it has the given type."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        token = self._peek()
        return token is not None and token.type == token_type

    def _advance(self) -> Token:
        token = self.tokens[self.current]
        self.current += 1
        return token

    def _is_at_end(self) -> bool:
        return self.current >= len(self.tokens)

    def _peek(self) -> Optional[Token]:
        """Return current token without consuming, None past the end."""
        if self.current < len(self.tokens):
            return self.tokens[self.current]
        return None

    def _consume(self, token_type: TokenType, message: str) -> Token:
        """Consume token of expected type or raise error."""
        if self._check(token_type):
            return self._advance()
        raise create_missing_token_error(message, token_type, self._peek())


def parse_string(source: str, filename: str = "<string>") -> ExprAST:
    """
    Convenience function to parse one statement from a source string.

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
    """
    from ..lexer import tokenize_string

    tokens = tokenize_string(source, filename)
    return Parser(tokens).parse()
