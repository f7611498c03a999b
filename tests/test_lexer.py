"""Tests for the tokenizer and the four lexer configurations."""

import pytest

from mathexpr.errors import UnknownTokenError
from mathexpr.lexer import Lexer, Token, TokenDefinition, TokenType
from mathexpr.lexers import ComplexMathLexer, LogicLexer, PricingLexer, StdMathLexer


def _significant(tokens):
    return [t for t in tokens if t.type != TokenType.WHITESPACE]


def _types(tokens):
    return [t.type for t in _significant(tokens)]


def _values(tokens):
    return [t.value for t in _significant(tokens)]


# =============================================================================
# Tokenizer
# =============================================================================


class TestTokenDefinition:
    def test_match_at_position(self):
        definition = TokenDefinition(r"\d+", TokenType.NATURAL_NUMBER)
        token = definition.match("ab123", 2)

        assert token == Token("123", TokenType.NATURAL_NUMBER, "123", 2)

    def test_no_match_elsewhere(self):
        definition = TokenDefinition(r"\d+", TokenType.NATURAL_NUMBER)
        assert definition.match("ab123", 0) is None

    def test_empty_match_is_no_match(self):
        definition = TokenDefinition(r"\d*", TokenType.NATURAL_NUMBER)
        assert definition.match("abc") is None

    def test_canonical_value(self):
        definition = TokenDefinition(r"arcsin|asin", TokenType.FUNCTION_NAME, "arcsin")
        token = definition.match("asin(x)")

        assert token.value == "arcsin"
        assert token.match == "asin"
        assert len(token) == 4


class TestLexer:
    def test_first_registered_definition_wins(self):
        lexer = Lexer([
            TokenDefinition(r"<", TokenType.LESS_THAN),
            TokenDefinition(r"<=", TokenType.LESS_OR_EQUAL_THAN),
            TokenDefinition(r"=", TokenType.EQUAL_TO),
        ])
        tokens = lexer.tokenize("<=")

        # Not longest match: '<' is registered first
        assert _types(tokens) == [TokenType.LESS_THAN, TokenType.EQUAL_TO]
        assert tokens[0].value == "<"

    def test_add_appends_definition(self):
        lexer = Lexer()
        lexer.add(TokenDefinition(r"\d+", TokenType.NATURAL_NUMBER))
        lexer.add(TokenDefinition(r"\+", TokenType.ADDITION_OPERATOR))

        assert len(lexer.definitions) == 2
        assert _types(lexer.tokenize("1+2")) == [
            TokenType.NATURAL_NUMBER,
            TokenType.ADDITION_OPERATOR,
            TokenType.NATURAL_NUMBER,
        ]

    def test_unknown_token(self):
        with pytest.raises(UnknownTokenError) as exc_info:
            StdMathLexer().tokenize("2 # 3")

        assert exc_info.value.data == "#"
        assert exc_info.value.position == 2

    def test_empty_input(self):
        assert StdMathLexer().tokenize("") == []

    def test_whitespace_and_terminators_are_tokens(self):
        tokens = StdMathLexer().tokenize("1 ;2")

        assert [t.type for t in tokens] == [
            TokenType.NATURAL_NUMBER,
            TokenType.WHITESPACE,
            TokenType.TERMINATOR,
            TokenType.NATURAL_NUMBER,
        ]

    def test_positions(self):
        tokens = StdMathLexer().tokenize("12 + x")
        assert [t.position for t in tokens] == [0, 2, 3, 4, 5]

    def test_tokenize_is_repeatable(self):
        lexer = StdMathLexer()
        assert lexer.tokenize("2x + sin(pi)") == lexer.tokenize("2x + sin(pi)")


class TestImplicitFactors:
    def test_number_then_variable(self):
        first, second = StdMathLexer().tokenize("2x")
        assert Token.can_factor_implicitly(first, second)

    def test_function_then_parenthesis(self):
        first, second = StdMathLexer().tokenize("sin(")
        assert not Token.can_factor_implicitly(first, second)

    def test_close_then_open_parenthesis(self):
        tokens = StdMathLexer().tokenize(")(")
        assert Token.can_factor_implicitly(tokens[0], tokens[1])

    def test_operator_is_not_a_factor(self):
        tokens = StdMathLexer().tokenize("2+")
        assert not Token.can_factor_implicitly(tokens[0], tokens[1])

    def test_missing_token(self):
        assert not Token.can_factor_implicitly(None, Token("x", TokenType.VARIABLE))


# =============================================================================
# Lexer configurations
# =============================================================================


class TestStdMathLexer:
    def test_implicit_multiplication_tokens(self):
        tokens = StdMathLexer().tokenize("2x")

        assert tokens == [
            Token("2", TokenType.NATURAL_NUMBER, "2", 0),
            Token("x", TokenType.VARIABLE, "x", 1),
        ]

    def test_single_letter_variables(self):
        assert _values(StdMathLexer().tokenize("xy")) == ["x", "y"]

    def test_numbers(self):
        tokens = StdMathLexer().tokenize("42 3.14 1,5 1.5e-3")

        assert _types(tokens) == [
            TokenType.NATURAL_NUMBER,
            TokenType.REAL_NUMBER,
            TokenType.REAL_NUMBER,
            TokenType.REAL_NUMBER,
        ]
        assert _values(tokens) == ["42", "3.14", "1,5", "1.5e-3"]

    def test_decimal_tail_is_string(self):
        tokens = StdMathLexer().tokenize(".99")
        assert tokens == [Token(".99", TokenType.STRING, ".99", 0)]

    def test_constants(self):
        tokens = StdMathLexer().tokenize("pi e NAN INF")
        assert _types(tokens) == [TokenType.CONSTANT] * 4

    def test_operators(self):
        tokens = StdMathLexer().tokenize("+-*/^!!!")

        assert _types(tokens) == [
            TokenType.ADDITION_OPERATOR,
            TokenType.SUBTRACTION_OPERATOR,
            TokenType.MULTIPLICATION_OPERATOR,
            TokenType.DIVISION_OPERATOR,
            TokenType.EXPONENTIAL_OPERATOR,
            TokenType.SEMI_FACTORIAL_OPERATOR,
            TokenType.FACTORIAL_OPERATOR,
        ]

    def test_function_next_to_variable(self):
        assert _values(StdMathLexer().tokenize("sinx")) == ["sin", "x"]

    def test_exp_before_e(self):
        assert _values(StdMathLexer().tokenize("exp(e)")) == ["exp", "(", "e", ")"]

    @pytest.mark.parametrize(
        "written,canonical",
        [
            ("sin", "sin"),
            ("sinh", "sinh"),
            ("sind", "sind"),
            ("cos", "cos"),
            ("cosh", "cosh"),
            ("cosd", "cosd"),
            ("tan", "tan"),
            ("tanh", "tanh"),
            ("cot", "cot"),
            ("coth", "coth"),
            ("cotd", "cotd"),
            ("arcsin", "arcsin"),
            ("asin", "arcsin"),
            ("arccos", "arccos"),
            ("acos", "arccos"),
            ("arctan", "arctan"),
            ("atan", "arctan"),
            ("arccot", "arccot"),
            ("acot", "arccot"),
            ("arsinh", "arsinh"),
            ("arcsinh", "arsinh"),
            ("asinh", "arsinh"),
            ("arcosh", "arcosh"),
            ("arccosh", "arcosh"),
            ("acosh", "arcosh"),
            ("artanh", "artanh"),
            ("arctanh", "artanh"),
            ("atanh", "artanh"),
            ("arcoth", "arcoth"),
            ("arccoth", "arcoth"),
            ("acoth", "arcoth"),
            ("log10", "lg"),
            ("lg", "lg"),
            ("log", "log"),
            ("ln", "ln"),
            ("exp", "exp"),
            ("sqrt", "sqrt"),
        ],
    )
    def test_longer_names_registered_before_prefixes(self, written, canonical):
        """Every spelling is consumed whole, never as a shorter name plus letters."""
        tokens = StdMathLexer().tokenize(f"{written}(x)")

        assert tokens[0].type == TokenType.FUNCTION_NAME
        assert tokens[0].value == canonical
        assert tokens[0].match == written
        assert tokens[1].type == TokenType.OPEN_PARENTHESIS

    def test_prefix_definitions_follow_longer_ones(self):
        patterns = [d.pattern for d in StdMathLexer().definitions]

        assert patterns.index("sinh") < patterns.index("sin")
        assert patterns.index("arsinh|arcsinh|asinh") < patterns.index("arcsin|asin")
        assert patterns.index("log10|lg") < patterns.index("log")
        assert patterns.index("!!") < patterns.index("!")


class TestLogicLexer:
    def test_multi_letter_variables(self):
        tokens = LogicLexer().tokenize("price > limit_2")

        assert _types(tokens) == [
            TokenType.VARIABLE,
            TokenType.GREATER_THAN,
            TokenType.VARIABLE,
        ]
        assert _values(tokens) == ["price", ">", "limit_2"]

    def test_keywords_match_whole_words_only(self):
        tokens = LogicLexer().tokenize("sinful ifx piano")
        assert _types(tokens) == [TokenType.VARIABLE] * 3

    def test_relational_operators(self):
        tokens = LogicLexer().tokenize("= == <> != >= <= > <")

        assert _types(tokens) == [
            TokenType.EQUAL_TO,
            TokenType.EQUAL_TO,
            TokenType.DIFFERENT_THAN,
            TokenType.DIFFERENT_THAN,
            TokenType.GREATER_OR_EQUAL_THAN,
            TokenType.LESS_OR_EQUAL_THAN,
            TokenType.GREATER_THAN,
            TokenType.LESS_THAN,
        ]
        assert _values(tokens) == ["=", "=", "<>", "<>", ">=", "<=", ">", "<"]

    def test_boolean_operators_and_literals(self):
        tokens = LogicLexer().tokenize("TRUE && false || a AND b OR NOT c")

        assert _types(tokens) == [
            TokenType.BOOLEAN,
            TokenType.AND,
            TokenType.BOOLEAN,
            TokenType.OR,
            TokenType.VARIABLE,
            TokenType.AND,
            TokenType.VARIABLE,
            TokenType.OR,
            TokenType.NOT,
            TokenType.VARIABLE,
        ]

    def test_conditional_keywords(self):
        tokens = LogicLexer().tokenize("IF (2<1) THEN 1 ELSE 0")

        assert _types(tokens) == [
            TokenType.IF,
            TokenType.OPEN_PARENTHESIS,
            TokenType.NATURAL_NUMBER,
            TokenType.LESS_THAN,
            TokenType.NATURAL_NUMBER,
            TokenType.CLOSE_PARENTHESIS,
            TokenType.THEN,
            TokenType.NATURAL_NUMBER,
            TokenType.ELSE,
            TokenType.NATURAL_NUMBER,
        ]

    def test_brace_conditional(self):
        tokens = LogicLexer().tokenize("if (x) { return 1; } else { return 2; }")
        types = _types(tokens)

        assert types.count(TokenType.RETURN) == 2
        assert types.count(TokenType.OPEN_BRACE) == 2
        assert types.count(TokenType.TERMINATOR) == 2

    def test_exclamation_is_factorial(self):
        assert _types(LogicLexer().tokenize("n!")) == [
            TokenType.VARIABLE,
            TokenType.FACTORIAL_OPERATOR,
        ]


class TestPricingLexer:
    def test_pricing_rule(self):
        tokens = PricingLexer().tokenize("ending($price, .90)")

        assert _types(tokens) == [
            TokenType.FUNCTION_NAME,
            TokenType.OPEN_PARENTHESIS,
            TokenType.VARIABLE,
            TokenType.TERMINATOR,
            TokenType.STRING,
            TokenType.CLOSE_PARENTHESIS,
        ]
        assert _values(tokens)[2] == "$price"
        assert _values(tokens)[4] == ".90"

    def test_exclamation_is_negation(self):
        assert _types(PricingLexer().tokenize("!flag")) == [
            TokenType.NOT,
            TokenType.VARIABLE,
        ]

    def test_only_pricing_functions(self):
        tokens = PricingLexer().tokenize("round sin")
        assert _types(tokens) == [TokenType.FUNCTION_NAME, TokenType.VARIABLE]


class TestComplexMathLexer:
    def test_imaginary_unit(self):
        assert _types(ComplexMathLexer().tokenize("2i")) == [
            TokenType.NATURAL_NUMBER,
            TokenType.CONSTANT,
        ]

    def test_complex_functions(self):
        tokens = ComplexMathLexer().tokenize("re(z) im(z) conj(z) arg(z)")
        names = [t.value for t in tokens if t.type == TokenType.FUNCTION_NAME]

        assert names == ["re", "im", "conj", "arg"]
