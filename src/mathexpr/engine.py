"""Convenience wrappers: lexer + parser + evaluator in one object.

Usage:
    StdMathEval().evaluate("2x + 1", {"x": 3})  # 7.0
    evaluate("if (3 < 2) { 1 } else { 2 }", domain="logic")  # 2
"""

from __future__ import annotations

from typing import Any, Mapping

from mathexpr.complex import ComplexEvaluator
from mathexpr.config import ParserOptions
from mathexpr.evaluator import LogicEvaluator, PricingEvaluator, StdMathEvaluator
from mathexpr.lexer import Lexer, Token
from mathexpr.lexers import ComplexMathLexer, LogicLexer, PricingLexer, StdMathLexer
from mathexpr.nodes import Node
from mathexpr.parser import Parser
from mathexpr.rational import RationalEvaluator
from mathexpr.visitor import Visitor


class MathEval:
    """Base wrapper; subclasses choose the lexer and evaluator.

    After a call, ``tokens`` and ``tree`` hold the last expression's
    tokens and AST.
    """

    lexer_class: type[Lexer] = StdMathLexer
    evaluator_class: type[Visitor] = StdMathEvaluator

    def __init__(self, options: ParserOptions | None = None, **flags: bool):
        self.lexer = self.lexer_class()
        self.parser = Parser(options, **flags)
        self.tokens: list[Token] = []
        self.tree: Node | None = None

    def parse(self, expression: str) -> Node:
        """Tokenize and parse an expression, keeping tokens and tree."""
        self.tokens = self.lexer.tokenize(expression)
        self.tree = self.parser.parse(self.tokens)
        return self.tree

    def evaluate(self, expression: str, variables: Mapping[str, Any] | None = None) -> Any:
        """Parse and evaluate an expression against variable bindings."""
        tree = self.parse(expression)
        return tree.accept(self.evaluator_class(variables))


class StdMathEval(MathEval):
    pass


class RationalMathEval(MathEval):
    evaluator_class = RationalEvaluator


class ComplexMathEval(MathEval):
    lexer_class = ComplexMathLexer
    evaluator_class = ComplexEvaluator


class LogicEval(MathEval):
    lexer_class = LogicLexer
    evaluator_class = LogicEvaluator


class PricingEval(MathEval):
    lexer_class = PricingLexer
    evaluator_class = PricingEvaluator


ENGINES: dict[str, type[MathEval]] = {
    "real": StdMathEval,
    "rational": RationalMathEval,
    "complex": ComplexMathEval,
    "logic": LogicEval,
    "pricing": PricingEval,
}


def evaluate(
    expression: str,
    variables: Mapping[str, Any] | None = None,
    domain: str = "real",
    **flags: bool,
) -> Any:
    """Evaluate an expression in one of the domains listed in ``ENGINES``.

    Raises:
        ValueError: If the domain is unknown
    """
    if domain not in ENGINES:
        raise ValueError(f"Unknown domain '{domain}'; expected one of {', '.join(ENGINES)}")
    return ENGINES[domain](**flags).evaluate(expression, variables)
