"""Parser for mathematical expressions.

Turns a token list into an AST by precedence climbing. Operator
precedence (lowest to highest):
1. && || (left); prefix ! binds its operand at relational level
2. = <> > < >= <= (left)
3. + - (left)
4. * / (left), unary minus
5. ^ (right)
6. postfix ! and !! (factorial, semi-factorial)

Before parsing, whitespace is dropped, delimiters are checked and, when
enabled, a '*' token is inserted between adjacent factors ("2x" becomes
"2*x"). With simplification on, every operator node is built through the
OperationBuilder, so constant subexpressions fold as they are parsed.

Conditionals come in three spellings, all producing the same node:
    IF (x < 1) THEN 0 ELSE x
    if (x < 1) { return 0; } else { return x; }
    IF(x < 1; 0; x)

Usage:
    parser = Parser(simplify=False)
    ast = parser.parse(StdMathLexer().tokenize("2x + 1"))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from mathexpr.config import ParserOptions
from mathexpr.errors import (
    DelimiterMismatchError,
    ExpressionSyntaxError,
    UnexpectedOperatorError,
)
from mathexpr.lexer import Lexer, Token, TokenType
from mathexpr.nodes import (
    OPERATORS,
    Associativity,
    BooleanNode,
    CloseBraceNode,
    CloseParenthesisNode,
    ConstantNode,
    FloatNode,
    FunctionNode,
    InfixNode,
    IntegerNode,
    Node,
    PostfixNode,
    StringNode,
    TernaryNode,
    VariableNode,
)
from mathexpr.operations import OperationBuilder

logger = logging.getLogger(__name__)

_INFIX_TYPES = frozenset({
    TokenType.ADDITION_OPERATOR,
    TokenType.SUBTRACTION_OPERATOR,
    TokenType.MULTIPLICATION_OPERATOR,
    TokenType.DIVISION_OPERATOR,
    TokenType.EXPONENTIAL_OPERATOR,
    TokenType.EQUAL_TO,
    TokenType.DIFFERENT_THAN,
    TokenType.GREATER_THAN,
    TokenType.LESS_THAN,
    TokenType.GREATER_OR_EQUAL_THAN,
    TokenType.LESS_OR_EQUAL_THAN,
    TokenType.AND,
    TokenType.OR,
})

_POSTFIX_TYPES = frozenset({
    TokenType.FACTORIAL_OPERATOR,
    TokenType.SEMI_FACTORIAL_OPERATOR,
})

_OPENING = {
    TokenType.OPEN_PARENTHESIS: TokenType.CLOSE_PARENTHESIS,
    TokenType.OPEN_BRACE: TokenType.CLOSE_BRACE,
}

# Operand precedence for unary minus and logical negation
_UNARY_MINUS_PRECEDENCE = 4
_NOT_PRECEDENCE = 2

_END = Token("", TokenType.SENTINEL)


@dataclass(frozen=True)
class ParseStep:
    """One row of the debug trace.

    Attributes:
        token: The token just consumed
        operands: Operands waiting for an operator's right-hand side
        operators: Operators waiting for their right-hand side, innermost last
    """

    token: str
    operands: tuple[str, ...]
    operators: tuple[str, ...]


class Parser:
    """Precedence-climbing parser producing immutable AST nodes.

    A parser holds only its options; every call to ``parse`` works on its
    own state, so one instance can serve many expressions. ``trace`` holds
    the steps of the most recent parse when ``debug`` is on.

    Usage:
        parser = Parser(ParserOptions(simplify=False))
        parser = Parser(allow_implicit_multiplication=False)
    """

    def __init__(self, options: ParserOptions | None = None, **flags: bool):
        options = options or ParserOptions()
        if flags:
            options = replace(options, **flags)
        self.options = options
        self.builder = OperationBuilder()
        self.trace: list[ParseStep] = []

    @property
    def simplify(self) -> bool:
        return self.options.simplify

    @property
    def allow_implicit_multiplication(self) -> bool:
        return self.options.allow_implicit_multiplication

    @property
    def debug(self) -> bool:
        return self.options.debug

    def parse(self, tokens: list[Token]) -> Node:
        """Parse a token list into the AST root.

        Raises:
            ExpressionSyntaxError: If the tokens do not form an expression
            DelimiterMismatchError: For unbalanced parentheses or braces
            UnexpectedOperatorError: For an operator where an operand belongs
            DivisionByZeroError: If simplification divides by a literal zero
            ExponentialError: If simplification meets 0^0
        """
        tokens = [t for t in tokens if t.type != TokenType.WHITESPACE]
        self._check_delimiters(tokens)
        if self.options.allow_implicit_multiplication:
            tokens = self._insert_implicit_multiplication(tokens)

        if all(t.type == TokenType.TERMINATOR for t in tokens):
            raise ExpressionSyntaxError("", "Empty expression")

        run = _ParseRun(tokens, self.options, self.builder)
        try:
            return run.parse()
        finally:
            self.trace = run.trace

    # -------------------------------------------------------------------------
    # Token pre-passes
    # -------------------------------------------------------------------------

    @staticmethod
    def _check_delimiters(tokens: list[Token]) -> None:
        """Every close delimiter must match the innermost open one."""
        expected: list[Token] = []
        for token in tokens:
            if token.type in _OPENING:
                expected.append(token)
            elif token.type in (TokenType.CLOSE_PARENTHESIS, TokenType.CLOSE_BRACE):
                if not expected or _OPENING[expected[-1].type] != token.type:
                    node = (
                        CloseParenthesisNode()
                        if token.type == TokenType.CLOSE_PARENTHESIS
                        else CloseBraceNode()
                    )
                    raise DelimiterMismatchError(token.value, node)
                expected.pop()
        if expected:
            raise DelimiterMismatchError(expected[-1].value)

    @staticmethod
    def _insert_implicit_multiplication(tokens: list[Token]) -> list[Token]:
        result: list[Token] = []
        previous: Token | None = None
        for token in tokens:
            if Token.can_factor_implicitly(previous, token):
                result.append(
                    Token("*", TokenType.MULTIPLICATION_OPERATOR, position=token.position)
                )
            result.append(token)
            previous = token
        return result


class _ParseRun:
    """State of a single parse: token cursor, pending operators, trace."""

    def __init__(self, tokens: list[Token], options: ParserOptions, builder: OperationBuilder):
        self.tokens = tokens
        self.position = 0
        self.options = options
        self.builder = builder
        self.trace: list[ParseStep] = []
        self._pending: list[tuple[str, Node]] = []

    def parse(self) -> Node:
        node = self._expression(0)
        while self._match(TokenType.TERMINATOR):
            self._advance()
        if not self._is_at_end():
            token = self._current()
            raise ExpressionSyntaxError(
                token.value, f"Unexpected '{token.value}' at position {token.position}"
            )
        return node

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _current(self) -> Token:
        return self._peek()

    def _peek(self, offset: int = 0) -> Token:
        pos = self.position + offset
        if pos >= len(self.tokens):
            return _END
        return self.tokens[pos]

    def _is_at_end(self) -> bool:
        return self._current().type == TokenType.SENTINEL

    def _advance(self) -> Token:
        token = self._current()
        self.position += 1
        if self.options.debug:
            self._record(token)
        return token

    def _match(self, *types: TokenType) -> bool:
        return self._current().type in types

    def _consume(self, token_type: TokenType, message: str) -> Token:
        if self._match(token_type):
            return self._advance()
        raise ExpressionSyntaxError(self._current().value, message)

    def _skip_terminators(self) -> None:
        while self._match(TokenType.TERMINATOR):
            self._advance()

    def _record(self, token: Token) -> None:
        # Imported here: printers depend on the visitor layer, not the parser
        from mathexpr.printers import ASCIIPrinter

        printer = ASCIIPrinter()
        step = ParseStep(
            token=token.value,
            operands=tuple(node.accept(printer) for _, node in self._pending),
            operators=tuple(symbol for symbol, _ in self._pending),
        )
        self.trace.append(step)
        logger.debug(
            "%-10s | %-40s | %s",
            step.token,
            " ".join(step.operands),
            " ".join(step.operators),
        )

    # -------------------------------------------------------------------------
    # Node construction
    # -------------------------------------------------------------------------

    def _infix(self, symbol: str, left: Node, right: Node | None) -> Node:
        if self.options.simplify:
            return self.builder.build(symbol, left, right)
        return InfixNode(symbol, left, right)

    def _conditional(self, condition: Node, then_branch: Node, else_branch: Node) -> Node:
        if self.options.simplify:
            return self.builder.condition(condition, then_branch, else_branch)
        return TernaryNode(condition, then_branch, else_branch)

    # -------------------------------------------------------------------------
    # Parsing methods
    # -------------------------------------------------------------------------

    def _expression(self, min_precedence: int) -> Node:
        """Parse operands joined by infix operators binding at least this tightly."""
        left = self._prefix(min_precedence)

        while self._current().type in _INFIX_TYPES:
            symbol = self._current().value
            precedence, associativity = OPERATORS[symbol]
            if precedence < min_precedence:
                break

            self._pending.append((symbol, left))
            self._advance()
            next_min = precedence + 1 if associativity == Associativity.LEFT else precedence
            right = self._expression(next_min)
            self._pending.pop()

            left = self._infix(symbol, left, right)

        return left

    def _prefix(self, min_precedence: int = 0) -> Node:
        """Parse a unary operator applied to an operand, or a plain operand."""
        token = self._current()

        if token.type == TokenType.ADDITION_OPERATOR:
            self._advance()
            return self._prefix(min_precedence)

        if token.type == TokenType.SUBTRACTION_OPERATOR:
            self._advance()
            operand = self._expression(max(min_precedence, _UNARY_MINUS_PRECEDENCE))
            return self._infix("-", operand, None)

        if token.type == TokenType.NOT:
            self._advance()
            operand = self._expression(max(min_precedence, _NOT_PRECEDENCE))
            return self._infix("!", operand, None)

        return self._postfix()

    def _postfix(self) -> Node:
        node = self._primary()
        while self._current().type in _POSTFIX_TYPES:
            symbol = self._advance().value
            node = PostfixNode(symbol, node).fold()
        return node

    def _primary(self) -> Node:
        token = self._current()

        if token.type == TokenType.NATURAL_NUMBER:
            self._advance()
            return IntegerNode(int(token.value))

        if token.type == TokenType.REAL_NUMBER:
            self._advance()
            return FloatNode(float(token.value.replace(",", ".")))

        if token.type == TokenType.BOOLEAN:
            self._advance()
            return BooleanNode(token.value.lower() == "true")

        if token.type == TokenType.CONSTANT:
            self._advance()
            return ConstantNode(token.value)

        if token.type == TokenType.VARIABLE:
            self._advance()
            return VariableNode(token.value)

        if token.type == TokenType.STRING:
            self._advance()
            return StringNode(token.value)

        if token.type == TokenType.OPEN_PARENTHESIS:
            self._advance()
            node = self._expression(0)
            self._consume(TokenType.CLOSE_PARENTHESIS, "Expected ')'")
            return node

        if token.type == TokenType.OPEN_BRACE:
            return self._block()

        if token.type == TokenType.FUNCTION_NAME:
            return self._function_call()

        if token.type == TokenType.IF:
            return self._if()

        if token.type in _INFIX_TYPES or token.type in _POSTFIX_TYPES:
            raise UnexpectedOperatorError(token.value)

        if token.type == TokenType.SENTINEL:
            raise ExpressionSyntaxError("", "Unexpected end of expression")

        raise ExpressionSyntaxError(
            token.value, f"Unexpected '{token.value}' at position {token.position}"
        )

    def _function_call(self) -> Node:
        name = self._advance().value
        self._consume(TokenType.OPEN_PARENTHESIS, f"Function '{name}' requires '('")

        arguments: list[Node] = []
        if not self._match(TokenType.CLOSE_PARENTHESIS):
            arguments.append(self._expression(0))
            while self._match(TokenType.TERMINATOR):
                self._advance()
                arguments.append(self._expression(0))

        self._consume(TokenType.CLOSE_PARENTHESIS, f"Expected ')' after arguments of '{name}'")
        return FunctionNode(name, tuple(arguments))

    def _block(self) -> Node:
        """Parse ``{ [return] expression [;] }``."""
        self._consume(TokenType.OPEN_BRACE, "Expected '{'")
        self._skip_terminators()
        if self._match(TokenType.RETURN):
            self._advance()
        node = self._expression(0)
        self._skip_terminators()
        self._consume(TokenType.CLOSE_BRACE, "Expected '}'")
        return node

    def _if(self) -> Node:
        self._advance()

        if self._match(TokenType.OPEN_PARENTHESIS) and self._has_argument_list():
            return self._if_function()

        condition = self._expression(0)

        if self._match(TokenType.THEN):
            self._advance()
            then_branch = self._expression(0)
            self._consume(TokenType.ELSE, "Expected ELSE")
            else_branch = self._expression(0)
            return self._conditional(condition, then_branch, else_branch)

        if self._match(TokenType.OPEN_BRACE):
            then_branch = self._block()
            self._consume(TokenType.ELSE, "Expected 'else'")
            if self._match(TokenType.IF):
                else_branch = self._if()
            else:
                else_branch = self._block()
            return self._conditional(condition, then_branch, else_branch)

        raise ExpressionSyntaxError(
            self._current().value, "Expected THEN or '{' after the condition"
        )

    def _if_function(self) -> Node:
        """Parse ``IF(condition; then; else)``."""
        self._consume(TokenType.OPEN_PARENTHESIS, "Expected '('")
        condition = self._expression(0)
        self._consume(TokenType.TERMINATOR, "Expected ';' after the condition")
        then_branch = self._expression(0)
        self._consume(TokenType.TERMINATOR, "Expected ';' after the first branch")
        else_branch = self._expression(0)
        self._consume(TokenType.CLOSE_PARENTHESIS, "Expected ')'")
        return self._conditional(condition, then_branch, else_branch)

    def _has_argument_list(self) -> bool:
        """Whether the parenthesis at the cursor holds a top-level terminator."""
        depth = 0
        offset = 0
        while True:
            token = self._peek(offset)
            if token.type == TokenType.SENTINEL:
                return False
            if token.type in _OPENING:
                depth += 1
            elif token.type in (TokenType.CLOSE_PARENTHESIS, TokenType.CLOSE_BRACE):
                depth -= 1
                if depth == 0:
                    return False
            elif token.type == TokenType.TERMINATOR and depth == 1:
                return True
            offset += 1


def parse(text: str, lexer: Lexer | None = None, **options: bool) -> Node:
    """Tokenize and parse an expression string.

    Args:
        text: The expression
        lexer: Lexer configuration; defaults to StdMathLexer
        **options: ParserOptions flags

    Returns:
        The AST root
    """
    if lexer is None:
        from mathexpr.lexers import StdMathLexer

        lexer = StdMathLexer()
    return Parser(**options).parse(lexer.tokenize(text))
