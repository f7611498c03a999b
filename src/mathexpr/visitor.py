"""Dispatch protocol shared by evaluators and printers.

A Visitor has one method per node variant. Nodes call back into exactly
one of them from ``accept()``, so visitors never inspect node types.

Two class-level capabilities refine the dispatch:

- ``logic_aware``: relational and boolean InfixNodes are routed to
  ``visit_logical_infix`` instead of ``visit_infix``
- ``renders_placeholders``: only such visitors (the printers) may visit
  structural placeholder nodes; any other visitor gets a syntax error
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from mathexpr.errors import ExpressionSyntaxError
from mathexpr.nodes import (
    BooleanNode,
    ConstantNode,
    FloatNode,
    FunctionNode,
    InfixNode,
    IntegerNode,
    PlaceholderNode,
    RationalNode,
    StringNode,
    TernaryNode,
    VariableNode,
)


class Visitor(ABC):
    """Base class for everything that walks an AST."""

    logic_aware: bool = False
    renders_placeholders: bool = False

    @abstractmethod
    def visit_integer(self, node: IntegerNode) -> Any: ...

    @abstractmethod
    def visit_rational(self, node: RationalNode) -> Any: ...

    @abstractmethod
    def visit_float(self, node: FloatNode) -> Any: ...

    @abstractmethod
    def visit_boolean(self, node: BooleanNode) -> Any: ...

    @abstractmethod
    def visit_constant(self, node: ConstantNode) -> Any: ...

    @abstractmethod
    def visit_variable(self, node: VariableNode) -> Any: ...

    @abstractmethod
    def visit_string(self, node: StringNode) -> Any: ...

    @abstractmethod
    def visit_infix(self, node: InfixNode) -> Any: ...

    @abstractmethod
    def visit_ternary(self, node: TernaryNode) -> Any: ...

    @abstractmethod
    def visit_function(self, node: FunctionNode) -> Any: ...

    def visit_logical_infix(self, node: InfixNode) -> Any:
        """Relational/boolean infix; only reached when ``logic_aware`` is set."""
        return self.visit_infix(node)

    def visit_placeholder(self, node: PlaceholderNode) -> Any:
        raise ExpressionSyntaxError(node.symbol)
