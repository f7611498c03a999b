"""Lexer configurations.

Each configuration is an ordered list of TokenDefinitions over the same
Lexer. The first definition that matches wins, so within every list:

- multi-character operators precede their single-character prefixes
  ('!!' before '!', '<=' before '<', '==' before '=')
- longer function names precede their prefixes ('sinh' and 'sind' before
  'sin', 'arcsinh' before 'arcsin', 'log10' before 'log')
- keywords, functions and constants precede the identifier pattern

The single-letter lexers (StdMathLexer, ComplexMathLexer) read "2xy" as
2*x*y. The multi-letter lexers (LogicLexer, PricingLexer) read whole words
as identifiers, so their keyword, function and constant patterns only
match whole words.
"""

from mathexpr.lexer import Lexer, TokenDefinition, TokenType

# Lookahead appended to word patterns in the multi-letter lexers
_WORD_END = r"(?![A-Za-z0-9_])"

# (pattern, canonical value) pairs; hyperbolic inverses come first so that
# 'arcsinh' is not read as 'arcsin' followed by 'h'
_FUNCTION_PATTERNS: list[tuple[str, str | None]] = [
    (r"sqrt", None),
    (r"round", None),
    (r"ceil", None),
    (r"floor", None),
    (r"ending", None),
    (r"sind", None),
    (r"cosd", None),
    (r"tand", None),
    (r"cotd", None),
    (r"sinh", None),
    (r"cosh", None),
    (r"tanh", None),
    (r"coth", None),
    (r"sin", None),
    (r"cos", None),
    (r"tan", None),
    (r"cot", None),
    (r"arsinh|arcsinh|asinh", "arsinh"),
    (r"arcosh|arccosh|acosh", "arcosh"),
    (r"artanh|arctanh|atanh", "artanh"),
    (r"arcoth|arccoth|acoth", "arcoth"),
    (r"arcsin|asin", "arcsin"),
    (r"arccos|acos", "arccos"),
    (r"arctan|atan", "arctan"),
    (r"arccot|acot", "arccot"),
    (r"exp", None),
    (r"log10|lg", "lg"),
    (r"log", "log"),
    (r"ln", "ln"),
    (r"abs", None),
    (r"sgn", None),
]

_PRICING_FUNCTION_PATTERNS: list[tuple[str, str | None]] = [
    (r"round", None),
    (r"ceil", None),
    (r"floor", None),
    (r"ending", None),
]


def _word(pattern: str, whole_word: bool) -> str:
    if not whole_word:
        return pattern
    return f"(?:{pattern}){_WORD_END}"


def _number_definitions() -> list[TokenDefinition]:
    return [
        TokenDefinition(r"\d+[,.]\d+(e[+-]?\d+)?", TokenType.REAL_NUMBER),
        TokenDefinition(r"\d+", TokenType.NATURAL_NUMBER),
        TokenDefinition(r"\d*(\.\d\d)", TokenType.STRING),
    ]


def _function_definitions(
    patterns: list[tuple[str, str | None]], whole_word: bool = False
) -> list[TokenDefinition]:
    return [
        TokenDefinition(_word(pattern, whole_word), TokenType.FUNCTION_NAME, value)
        for pattern, value in patterns
    ]


def _delimiter_definitions() -> list[TokenDefinition]:
    return [
        TokenDefinition(r"\(", TokenType.OPEN_PARENTHESIS),
        TokenDefinition(r"\)", TokenType.CLOSE_PARENTHESIS),
        TokenDefinition(r"\{", TokenType.OPEN_BRACE),
        TokenDefinition(r"\}", TokenType.CLOSE_BRACE),
    ]


def _arithmetic_definitions() -> list[TokenDefinition]:
    return [
        TokenDefinition(r"\+", TokenType.ADDITION_OPERATOR),
        TokenDefinition(r"-", TokenType.SUBTRACTION_OPERATOR),
        TokenDefinition(r"\*", TokenType.MULTIPLICATION_OPERATOR),
        TokenDefinition(r"/", TokenType.DIVISION_OPERATOR),
        TokenDefinition(r"\^", TokenType.EXPONENTIAL_OPERATOR),
    ]


def _separator_definitions() -> list[TokenDefinition]:
    return [
        TokenDefinition(r",", TokenType.TERMINATOR),
        TokenDefinition(r";", TokenType.TERMINATOR),
        TokenDefinition(r"\n", TokenType.TERMINATOR),
        TokenDefinition(r"\s+", TokenType.WHITESPACE),
    ]


def common_definitions(whole_word: bool = False) -> list[TokenDefinition]:
    """Numbers, elementary functions, arithmetic and delimiters."""
    definitions = _number_definitions()
    definitions += _function_definitions(_FUNCTION_PATTERNS, whole_word)
    definitions += _delimiter_definitions()
    definitions += _arithmetic_definitions()
    definitions += [
        TokenDefinition(r"!!", TokenType.SEMI_FACTORIAL_OPERATOR),
        TokenDefinition(r"!", TokenType.FACTORIAL_OPERATOR),
        TokenDefinition(_word(r"NAN", whole_word), TokenType.CONSTANT),
        TokenDefinition(_word(r"INF", whole_word), TokenType.CONSTANT),
        TokenDefinition(_word(r"pi", whole_word), TokenType.CONSTANT),
    ]
    definitions += _separator_definitions()
    return definitions


def logic_definitions(not_symbol: bool = False) -> list[TokenDefinition]:
    """Ternary keywords, relational and boolean operators, boolean literals."""
    definitions = [
        TokenDefinition(_word(r"IF|if", True), TokenType.IF, "if"),
        TokenDefinition(_word(r"THEN|then", True), TokenType.THEN, "then"),
        TokenDefinition(_word(r"ELSE|else", True), TokenType.ELSE, "else"),
        TokenDefinition(_word(r"return", True), TokenType.RETURN),
        TokenDefinition(_word(r"NOT|not", True), TokenType.NOT, "!"),
        TokenDefinition(r"==", TokenType.EQUAL_TO, "="),
        TokenDefinition(r"!=", TokenType.DIFFERENT_THAN, "<>"),
    ]
    if not_symbol:
        definitions.append(TokenDefinition(r"!", TokenType.NOT, "!"))
    definitions += [
        TokenDefinition(r"=", TokenType.EQUAL_TO, "="),
        TokenDefinition(r"<>", TokenType.DIFFERENT_THAN, "<>"),
        TokenDefinition(r">=", TokenType.GREATER_OR_EQUAL_THAN, ">="),
        TokenDefinition(r"<=", TokenType.LESS_OR_EQUAL_THAN, "<="),
        TokenDefinition(r">", TokenType.GREATER_THAN, ">"),
        TokenDefinition(r"<", TokenType.LESS_THAN, "<"),
        TokenDefinition(r"&&", TokenType.AND, "&&"),
        TokenDefinition(r"\|\|", TokenType.OR, "||"),
        TokenDefinition(_word(r"AND|and", True), TokenType.AND, "&&"),
        TokenDefinition(_word(r"OR|or", True), TokenType.OR, "||"),
        TokenDefinition(_word(r"TRUE|true", True), TokenType.BOOLEAN, "true"),
        TokenDefinition(_word(r"FALSE|false", True), TokenType.BOOLEAN, "false"),
    ]
    return definitions


class StdMathLexer(Lexer):
    """Lexer for real and rational arithmetic.

    Identifiers are single letters, which lets "2xy" parse as 2*x*y.
    """

    def __init__(self) -> None:
        definitions = common_definitions()
        definitions += [
            TokenDefinition(r"e", TokenType.CONSTANT),
            TokenDefinition(r"[a-zA-Z]", TokenType.VARIABLE),
        ]
        super().__init__(definitions)


class ComplexMathLexer(Lexer):
    """StdMathLexer plus the imaginary unit and re, im, conj, arg."""

    def __init__(self) -> None:
        definitions = common_definitions()
        definitions += [
            TokenDefinition(r"arg", TokenType.FUNCTION_NAME),
            TokenDefinition(r"conj", TokenType.FUNCTION_NAME),
            TokenDefinition(r"re", TokenType.FUNCTION_NAME),
            TokenDefinition(r"im", TokenType.FUNCTION_NAME),
            TokenDefinition(r"i", TokenType.CONSTANT),
            TokenDefinition(r"e", TokenType.CONSTANT),
            TokenDefinition(r"[a-zA-Z]", TokenType.VARIABLE),
        ]
        super().__init__(definitions)


class LogicLexer(Lexer):
    """Lexer for boolean and ternary expressions over multi-letter names."""

    def __init__(self) -> None:
        # Logic operators go first so '!=' is not read as factorial then '='
        definitions = logic_definitions()
        definitions += common_definitions(whole_word=True)
        definitions += [
            TokenDefinition(_word(r"e", True), TokenType.CONSTANT),
            TokenDefinition(r"\$?[a-zA-Z_][a-zA-Z0-9_]*", TokenType.VARIABLE),
        ]
        super().__init__(definitions)


class PricingLexer(Lexer):
    """Lexer for the pricing DSL.

    Only the rounding functions and ``ending`` are recognised, and '!' is
    logical negation rather than factorial.

    Usage:
        tokens = PricingLexer().tokenize("if ($price < 20) { $price } else { ending($price, .90) }")
    """

    def __init__(self) -> None:
        definitions = _number_definitions()
        definitions += _function_definitions(_PRICING_FUNCTION_PATTERNS, whole_word=True)
        definitions += _delimiter_definitions()
        definitions += _arithmetic_definitions()
        definitions += _separator_definitions()
        definitions += logic_definitions(not_symbol=True)
        definitions.append(
            TokenDefinition(r"\$?[a-zA-Z_][a-zA-Z0-9_]*", TokenType.VARIABLE)
        )
        super().__init__(definitions)
