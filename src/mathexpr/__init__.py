"""Math expression compiler.

This package provides:
- Lexers: ordered token definitions for real, complex and logic/pricing input
- Parser: precedence-climbing parser with constant folding
- Nodes: immutable AST with visitor dispatch
- Evaluators: real, rational, complex, logic and pricing
- Printers: ASCII, LaTeX and tree rendering
- Differentiator: symbolic derivatives
- FunctionRegistry: per-domain function tables
"""

from mathexpr.builtins import register_all_builtins
from mathexpr.complex import ComplexEvaluator
from mathexpr.config import ParserOptions
from mathexpr.differentiator import Differentiator
from mathexpr.engine import (
    ComplexMathEval,
    LogicEval,
    MathEval,
    PricingEval,
    RationalMathEval,
    StdMathEval,
    evaluate,
)
from mathexpr.errors import (
    DelimiterMismatchError,
    DivisionByZeroError,
    ExponentialError,
    ExpressionSyntaxError,
    LogarithmOfZeroError,
    MathExpressionError,
    NullOperandError,
    UnexpectedOperatorError,
    UnknownConstantError,
    UnknownFunctionError,
    UnknownOperatorError,
    UnknownTokenError,
    UnknownVariableError,
)
from mathexpr.evaluator import LogicEvaluator, PricingEvaluator, StdMathEvaluator
from mathexpr.functions import (
    Domain,
    FunctionCategory,
    FunctionDefinition,
    FunctionParameter,
    FunctionRegistry,
)
from mathexpr.lexer import Lexer, Token, TokenDefinition, TokenType
from mathexpr.lexers import ComplexMathLexer, LogicLexer, PricingLexer, StdMathLexer
from mathexpr.nodes import (
    BooleanNode,
    ConstantNode,
    FloatNode,
    FunctionNode,
    InfixNode,
    IntegerNode,
    Node,
    RationalNode,
    StringNode,
    TernaryNode,
    VariableNode,
)
from mathexpr.operations import OperationBuilder
from mathexpr.parser import ParseStep, Parser, parse
from mathexpr.printers import ASCIIPrinter, LaTeXPrinter, TreePrinter
from mathexpr.rational import RationalEvaluator
from mathexpr.visitor import Visitor

register_all_builtins()

__all__ = [
    # Lexing
    "Lexer",
    "Token",
    "TokenDefinition",
    "TokenType",
    "StdMathLexer",
    "LogicLexer",
    "PricingLexer",
    "ComplexMathLexer",
    # Parsing
    "Parser",
    "ParserOptions",
    "ParseStep",
    "OperationBuilder",
    "parse",
    # Nodes
    "Node",
    "IntegerNode",
    "RationalNode",
    "FloatNode",
    "BooleanNode",
    "ConstantNode",
    "VariableNode",
    "StringNode",
    "InfixNode",
    "TernaryNode",
    "FunctionNode",
    "Visitor",
    # Evaluation
    "StdMathEvaluator",
    "LogicEvaluator",
    "PricingEvaluator",
    "RationalEvaluator",
    "ComplexEvaluator",
    "MathEval",
    "StdMathEval",
    "RationalMathEval",
    "ComplexMathEval",
    "LogicEval",
    "PricingEval",
    "evaluate",
    # Functions
    "Domain",
    "FunctionCategory",
    "FunctionDefinition",
    "FunctionParameter",
    "FunctionRegistry",
    "register_all_builtins",
    # Printing
    "ASCIIPrinter",
    "LaTeXPrinter",
    "TreePrinter",
    # Differentiation
    "Differentiator",
    # Errors
    "MathExpressionError",
    "UnknownTokenError",
    "ExpressionSyntaxError",
    "DelimiterMismatchError",
    "UnknownOperatorError",
    "UnexpectedOperatorError",
    "UnknownFunctionError",
    "UnknownVariableError",
    "UnknownConstantError",
    "DivisionByZeroError",
    "ExponentialError",
    "LogarithmOfZeroError",
    "NullOperandError",
]
