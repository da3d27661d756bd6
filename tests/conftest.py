import pytest
from llvmlite import ir

from llvm_typeid import TypeResolver


@pytest.fixture
def context() -> ir.Context:
    """Fresh IR context so named structs never leak between tests."""
    return ir.Context()


@pytest.fixture
def resolver(context: ir.Context) -> TypeResolver:
    return TypeResolver(context)


@pytest.fixture
def module(context: ir.Context) -> ir.Module:
    return ir.Module(name="test", context=context)
