"""Function registry for expression evaluation.

Every numeric domain has its own table of functions: the same name (say
``sqrt``) maps to a float routine for real evaluation, an exact routine
for rational evaluation and a cmath routine for complex evaluation.
Each entry carries metadata for documentation and for the CLI's
``functions`` listing.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable


class Domain(Enum):
    """Numeric domains an evaluator works in."""

    REAL = "real"
    RATIONAL = "rational"
    COMPLEX = "complex"
    PRICING = "pricing"


class FunctionCategory(Enum):
    """Categories for organizing functions in documentation."""

    TRIGONOMETRIC = "trigonometric"
    HYPERBOLIC = "hyperbolic"
    EXPONENTIAL = "exponential"
    ROUNDING = "rounding"
    ARITHMETIC = "arithmetic"
    COMPLEX = "complex"
    PRICING = "pricing"


@dataclass
class FunctionParameter:
    """Definition of a function parameter.

    Attributes:
        name: Parameter name
        type: Expected type ("number", "decimal tail", "complex", ...)
        description: Human-readable description
    """

    name: str
    type: str
    description: str


@dataclass
class FunctionDefinition:
    """Complete definition of an expression function.

    Attributes:
        name: Canonical function name as produced by the lexer
        description: Human-readable description
        category: Category for documentation organization
        domain: Numeric domain the implementation works in
        parameters: Parameter definitions; their count is the arity
        implementation: The Python callable
        examples: Example expressions using this function
    """

    name: str
    description: str
    category: FunctionCategory
    domain: Domain
    parameters: list[FunctionParameter]
    implementation: Callable[..., Any]
    examples: list[str] = field(default_factory=list)

    @property
    def arity(self) -> int:
        return len(self.parameters)

    def to_dict(self) -> dict[str, Any]:
        """Export for documentation listings."""
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category.value,
            "domain": self.domain.value,
            "parameters": [
                {
                    "name": p.name,
                    "type": p.type,
                    "description": p.description,
                }
                for p in self.parameters
            ],
            "examples": self.examples,
        }


class FunctionRegistry:
    """Registry of expression functions, keyed by domain and name.

    Example:
        FunctionRegistry.register(FunctionDefinition(
            name="sqrt",
            domain=Domain.REAL,
            ...
        ))

        func = FunctionRegistry.get("sqrt", Domain.REAL)
        result = func.implementation(4.0)  # Returns 2.0
    """

    _functions: dict[tuple[Domain, str], FunctionDefinition] = {}

    @classmethod
    def register(cls, func_def: FunctionDefinition) -> None:
        """Register a function definition, replacing any previous one.

        Args:
            func_def: Complete function definition with implementation
        """
        cls._functions[(func_def.domain, func_def.name)] = func_def

    @classmethod
    def get(cls, name: str, domain: Domain) -> FunctionDefinition:
        """Get a function definition by name.

        Args:
            name: Function name
            domain: Domain to look the name up in

        Returns:
            The function definition

        Raises:
            ValueError: If function is not registered for the domain
        """
        key = (domain, name)
        if key not in cls._functions:
            raise ValueError(f"Unknown {domain.value} function: {name}")
        return cls._functions[key]

    @classmethod
    def is_registered(cls, name: str, domain: Domain) -> bool:
        """Check if a function is registered for a domain."""
        return (domain, name) in cls._functions

    @classmethod
    def list_functions(
        cls,
        domain: Domain | None = None,
        category: FunctionCategory | None = None,
    ) -> list[FunctionDefinition]:
        """List registered functions, optionally filtered.

        Args:
            domain: Only functions of this domain
            category: Only functions of this category

        Returns:
            Matching definitions sorted by domain, then name
        """
        definitions = [
            f
            for f in cls._functions.values()
            if (domain is None or f.domain == domain)
            and (category is None or f.category == category)
        ]
        return sorted(definitions, key=lambda f: (f.domain.value, f.name))

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._functions.clear()
