"""Tokenizer for mathematical expressions.

Converts expression strings into a list of tokens for the parser.

A Lexer owns an ordered list of TokenDefinitions. At each offset the
definitions are tried in registration order and the first one that matches
at the current position wins, so multi-character operators and long
function-name synonyms must be registered before their prefixes.

Whitespace and terminators (',', ';', newline) are emitted as tokens; the
parser filters whitespace and treats terminators as separators.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto

from mathexpr.errors import UnknownTokenError


class TokenType(Enum):
    """Types of tokens in the expression language."""

    # Operands
    NATURAL_NUMBER = auto()
    REAL_NUMBER = auto()
    BOOLEAN = auto()
    VARIABLE = auto()
    CONSTANT = auto()
    STRING = auto()          # decimal tail such as .99

    # Prefix operators
    NOT = auto()

    # Postfix operators
    FACTORIAL_OPERATOR = auto()        # !
    SEMI_FACTORIAL_OPERATOR = auto()   # !!

    # Infix operators
    ADDITION_OPERATOR = auto()
    SUBTRACTION_OPERATOR = auto()
    MULTIPLICATION_OPERATOR = auto()
    DIVISION_OPERATOR = auto()
    EXPONENTIAL_OPERATOR = auto()
    EQUAL_TO = auto()
    DIFFERENT_THAN = auto()
    GREATER_THAN = auto()
    LESS_THAN = auto()
    GREATER_OR_EQUAL_THAN = auto()
    LESS_OR_EQUAL_THAN = auto()
    AND = auto()
    OR = auto()

    # Ternary
    IF = auto()
    THEN = auto()
    ELSE = auto()
    RETURN = auto()

    FUNCTION_NAME = auto()

    # Punctuation
    OPEN_PARENTHESIS = auto()
    CLOSE_PARENTHESIS = auto()
    OPEN_BRACE = auto()
    CLOSE_BRACE = auto()
    WHITESPACE = auto()
    TERMINATOR = auto()

    # Internal end-of-input marker used by the parser
    SENTINEL = auto()


# Tokens that may end the left factor of an implicit multiplication
_IMPLICIT_LEFT = frozenset({
    TokenType.NATURAL_NUMBER,
    TokenType.REAL_NUMBER,
    TokenType.CONSTANT,
    TokenType.VARIABLE,
    TokenType.FUNCTION_NAME,
    TokenType.CLOSE_PARENTHESIS,
    TokenType.FACTORIAL_OPERATOR,
    TokenType.SEMI_FACTORIAL_OPERATOR,
})

# Tokens that may start the right factor of an implicit multiplication
_IMPLICIT_RIGHT = frozenset({
    TokenType.NATURAL_NUMBER,
    TokenType.REAL_NUMBER,
    TokenType.CONSTANT,
    TokenType.VARIABLE,
    TokenType.FUNCTION_NAME,
    TokenType.OPEN_PARENTHESIS,
})


@dataclass(frozen=True)
class Token:
    """A single token from the lexer.

    Attributes:
        value: Canonical value; synonyms such as 'asin' and 'arcsin' share one
        type: The token type
        match: The substring actually matched in the source
        position: Character offset of the match in the source string
    """

    value: str
    type: TokenType
    match: str = ""
    position: int = 0

    def __post_init__(self) -> None:
        if not self.match:
            object.__setattr__(self, "match", self.value)

    def __len__(self) -> int:
        return len(self.match)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, pos={self.position})"

    @staticmethod
    def can_factor_implicitly(first: "Token | None", second: "Token | None") -> bool:
        """Whether an implicit '*' belongs between two adjacent tokens.

        "2x", "3(x+1)", "(a)(b)" and "2 sin(x)" qualify; a function name
        directly followed by '(' does not, since that is a call.
        """
        if first is None or second is None:
            return False
        if (
            first.type == TokenType.FUNCTION_NAME
            and second.type == TokenType.OPEN_PARENTHESIS
        ):
            return False
        return first.type in _IMPLICIT_LEFT and second.type in _IMPLICIT_RIGHT


class TokenDefinition:
    """Pattern recognising one kind of token.

    Usage:
        definition = TokenDefinition(r"arcsin|asin", TokenType.FUNCTION_NAME, "arcsin")
        definition.match("asin(x)")  # Token('arcsin', FUNCTION_NAME, match='asin')
    """

    def __init__(self, pattern: str, token_type: TokenType, value: str | None = None):
        self.pattern = pattern
        self.token_type = token_type
        self.value = value
        self._regex = re.compile(pattern)

    def __repr__(self) -> str:
        return f"TokenDefinition({self.pattern!r}, {self.token_type.name})"

    def match(self, source: str, position: int = 0) -> Token | None:
        """Match at exactly ``position``; empty matches count as no match."""
        found = self._regex.match(source, position)
        if found is None or not found.group():
            return None
        text = found.group()
        return Token(self.value or text, self.token_type, text, position)


class Lexer:
    """Tokenizer holding an ordered list of token definitions.

    Instances keep no per-call state, so one lexer may tokenize many
    expressions, including from several threads.

    Usage:
        lexer = StdMathLexer()
        tokens = lexer.tokenize("2x + sin(pi)")
    """

    def __init__(self, definitions: list[TokenDefinition] | None = None):
        self._definitions: list[TokenDefinition] = list(definitions or [])

    @property
    def definitions(self) -> tuple[TokenDefinition, ...]:
        """Registered definitions, in match-priority order."""
        return tuple(self._definitions)

    def add(self, definition: TokenDefinition) -> None:
        """Register a definition after all existing ones."""
        self._definitions.append(definition)

    def tokenize(self, source: str) -> list[Token]:
        """Tokenize the entire source and return the list of tokens.

        Raises:
            UnknownTokenError: If no definition matches at some offset
        """
        tokens: list[Token] = []
        position = 0

        while position < len(source):
            token = self._next_token(source, position)
            if token is None:
                raise UnknownTokenError(source[position], position)
            tokens.append(token)
            position += len(token)

        return tokens

    def _next_token(self, source: str, position: int) -> Token | None:
        """Return the first definition's match at ``position``."""
        for definition in self._definitions:
            token = definition.match(source, position)
            if token is not None:
                return token
        return None
