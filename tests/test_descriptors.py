"""
Descriptor construction, validation and spelling.
"""
import pytest

from llvm_typeid import (
    Array, Bool, Function, Pointer, Qualified, Reference, SignedInt, Struct, UnsignedInt,
    BOOL, CHAR, FLOAT64, INT8, INT32, UINT64, VOID,
    DescriptorError, const, function, strip_qualifiers, struct, volatile,
)
from llvm_typeid.descriptors import is_void


def test_integer_widths_are_a_closed_menu():
    for width in (8, 16, 32, 64):
        assert SignedInt(width).width == width
        assert UnsignedInt(width).width == width
    for width in (0, 1, 7, 24, 128):
        with pytest.raises(DescriptorError) as excinfo:
            SignedInt(width)
        assert excinfo.value.code == "TE0001"


def test_module_constants():
    import llvm_typeid.descriptors as descriptors

    assert descriptors.INT8 == SignedInt(8)
    assert descriptors.UINT64 == UnsignedInt(64)
    assert descriptors.VOID == descriptors.Void()
    assert all(isinstance(c, descriptors.DESCRIPTOR_CLASSES) for c in (BOOL, CHAR, FLOAT64, VOID))


def test_descriptors_are_values():
    assert SignedInt(32) == INT32
    assert Pointer(INT32) == Pointer(SignedInt(32))
    assert hash(Struct("P", [INT32])) == hash(Struct("P", (INT32,)))
    assert Bool() == BOOL
    assert INT32 != UnsignedInt(32)


def test_sequences_are_stored_as_tuples():
    point = Struct("Point", [FLOAT64, FLOAT64])
    sig = Function(VOID, [INT32])
    assert point.fields == (FLOAT64, FLOAT64)
    assert sig.params == (INT32,)


def test_void_only_as_return_or_pointee():
    Function(VOID, ())
    Pointer(VOID)
    with pytest.raises(DescriptorError):
        Array(VOID, 4)
    with pytest.raises(DescriptorError):
        Struct("S", [INT32, VOID])
    with pytest.raises(DescriptorError):
        Function(INT32, [const(VOID)])


def test_function_types_must_be_wrapped_in_pointer():
    callback = Function(VOID, [INT32])
    Function(VOID, [Pointer(callback)])
    with pytest.raises(DescriptorError) as excinfo:
        Function(VOID, [callback])
    assert excinfo.value.code == "TE0004"
    with pytest.raises(DescriptorError):
        Function(callback, ())
    with pytest.raises(DescriptorError):
        Array(callback, 2)


def test_invalid_payloads_rejected():
    with pytest.raises(DescriptorError):
        Array(INT8, -1)
    with pytest.raises(DescriptorError):
        Struct("", [INT8])
    with pytest.raises(DescriptorError):
        Qualified(INT8, const=False, volatile=False)
    with pytest.raises(DescriptorError) as excinfo:
        Pointer("int32_t")
    assert excinfo.value.code == "TE0007"


def test_descriptor_error_is_value_error():
    with pytest.raises(ValueError, match="TE0002: array length must be non-negative, got -3"):
        Array(INT8, -3)


def test_strip_qualifiers_removes_outer_layers_only():
    nested = const(volatile(Pointer(const(CHAR))))
    assert strip_qualifiers(nested) == Pointer(const(CHAR))
    assert strip_qualifiers(INT32) is INT32
    assert is_void(const(VOID))
    assert not is_void(Pointer(VOID))


def test_forward_struct_reference():
    node = Struct("Node", [INT32, Pointer(Struct("Node"))])
    assert not node.is_forward
    assert Struct("Node").is_forward
    assert struct("Node") == Struct("Node")
    assert struct("Node", [INT32]).fields == (INT32,)


def test_spelling():
    assert str(INT32) == "int32_t"
    assert str(UINT64) == "uint64_t"
    assert str(Pointer(const(CHAR))) == "char const*"
    assert str(Reference(FLOAT64)) == "double&"
    assert str(Array(INT8)) == "int8_t[]"
    assert str(Array(INT8, 16)) == "int8_t[16]"
    assert str(Struct("Point", [FLOAT64, FLOAT64])) == "struct Point { double; double; }"
    assert str(Struct("Empty", [])) == "struct Empty { }"
    assert str(function(INT32, Pointer(CHAR), variadic=True)) == "int32_t(char*, ...)"
    assert str(Function(VOID, (), variadic=True)) == "void(...)"
    assert str(Pointer(Function(VOID, [INT32]))) == "void(int32_t)*"
    assert str(Qualified(INT32, const=True, volatile=True)) == "int32_t const volatile"
