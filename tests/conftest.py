"""Shared fixtures for the mathexpr test suite."""

import pytest

from mathexpr.builtins import register_all_builtins
from mathexpr.functions import FunctionRegistry


# Register built-in functions for tests
@pytest.fixture(autouse=True)
def setup_functions():
    """Register built-in functions before each test."""
    FunctionRegistry.clear()
    register_all_builtins()
    yield
    FunctionRegistry.clear()
    register_all_builtins()
