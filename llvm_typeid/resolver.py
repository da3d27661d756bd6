"""
Resolution of type descriptors into llvmlite IR types.

This module maps the closed descriptor menu onto the factories of an
`llvmlite.ir.Context`. Qualifiers are stripped before any shape is looked
at, pointers and references share one IR type, and structs are interned
by name in the context.
"""
from __future__ import annotations

import logging

from llvmlite import ir

from llvm_typeid.descriptors import (
    TypeDescriptor, Bool, Char, SignedInt, UnsignedInt, Float32, Float64, Void,
    Pointer, Reference, Array, Struct, Function, strip_qualifiers,
)
from llvm_typeid.errors import raise_error
from llvm_typeid.sizing import TypeSizing
from llvm_typeid.target import TargetInfo

logger = logging.getLogger(__name__)


class TypeResolver:
    """Turns descriptors into IR types owned by one llvmlite context."""

    def __init__(self, context: ir.Context | None = None, target: TargetInfo | None = None) -> None:
        """Initialize the resolver.

        Args:
            context: The IR context that owns named structs. Defaults to
                llvmlite's global context.
            target: Target facts (char width, pointer size). Defaults to a
                64-bit target with 8-bit chars.
        """
        self.context = context if context is not None else ir.global_context
        self.target = target or TargetInfo()
        self.sizing = TypeSizing(self.target)

        self.i1: ir.IntType = ir.IntType(1)
        self.i8: ir.IntType = ir.IntType(8)
        self.char: ir.IntType = ir.IntType(self.target.char_bits)
        self.f32: ir.Type = ir.FloatType()
        self.f64: ir.Type = ir.DoubleType()
        self.void: ir.VoidType = ir.VoidType()

        # Structs whose fields are being resolved right now, mapped to the
        # inner definitions of the same name met behind a pointer
        self._building: dict[str, list[Struct]] = {}

    def resolve(self, descriptor: TypeDescriptor) -> ir.Type:
        """Map a descriptor to its IR type.

        Args:
            descriptor: Any descriptor from llvm_typeid.descriptors.

        Returns:
            The corresponding llvmlite IR type.

        Raises:
            ResolutionError: On conflicting or self-containing struct
                definitions, or for values outside the descriptor menu.
        """
        return self._resolve(descriptor, indirect=False)

    def size_of(self, descriptor: TypeDescriptor) -> int:
        """Storage size in bytes of the type a descriptor resolves to."""
        return self.sizing.size_of(self.resolve(descriptor))

    def _resolve(self, descriptor: TypeDescriptor, indirect: bool) -> ir.Type:
        descriptor = strip_qualifiers(descriptor)

        match descriptor:
            case Bool():
                return self.i1
            case Char():
                return self.char
            case SignedInt() | UnsignedInt():
                # Signedness lives in the instructions, not in the IR type
                return ir.IntType(descriptor.width)
            case Float32():
                return self.f32
            case Float64():
                return self.f64
            case Void():
                return self.void
            case Pointer() | Reference():
                if isinstance(strip_qualifiers(descriptor.to), Void):
                    # LLVM has no void*, use i8* like C front ends do
                    return ir.PointerType(self.i8)
                return ir.PointerType(self._resolve(descriptor.to, indirect=True))
            case Array():
                element = self._resolve(descriptor.of, indirect)
                if not indirect and _is_opaque(element):
                    raise_error("TE0014", type=descriptor, element=element)
                return ir.ArrayType(element, descriptor.length or 0)
            case Struct():
                return self._get_struct_type(descriptor, indirect)
            case Function():
                return self._get_function_type(descriptor, indirect)
            case _:
                raise_error("TE0010", type=descriptor)

    def _get_struct_type(self, descriptor: Struct, indirect: bool) -> ir.IdentifiedStructType:
        """Get the named LLVM struct for a struct descriptor.

        Structs are interned by name: the first descriptor carrying fields
        sets the body, later ones must agree with it, and forward references
        (fields=None) just return the named type.
        """
        name = descriptor.name
        if name in self._building:
            if not indirect:
                raise_error("TE0012", name=name)
            # Cycle through a pointer: the outer resolution sets the body,
            # an inner definition is checked against it once fields are known
            if descriptor.fields is not None:
                self._building[name].append(descriptor)
            return self.context.get_identified_type(name)

        llvm_struct = self.context.get_identified_type(name)
        if descriptor.fields is None:
            return llvm_struct

        field_types = self._resolve_fields(descriptor)

        for index, field_type in enumerate(field_types):
            if _is_opaque(field_type):
                raise_error("TE0013", name=name, index=index, field=field_type)

        if llvm_struct.is_opaque:
            llvm_struct.set_body(*field_types)
            logger.debug("defined struct %s = %s", name, llvm_struct.structure_repr())
            return llvm_struct

        if tuple(llvm_struct.elements) != tuple(field_types):
            requested = ir.LiteralStructType(field_types)
            raise_error("TE0011", name=name, existing=llvm_struct.structure_repr(), requested=requested)
        return llvm_struct

    def _resolve_fields(self, descriptor: Struct) -> list[ir.Type]:
        """Resolve the field types of a struct that is about to be defined.

        Definitions of the same struct nested behind a pointer must resolve
        to the same fields; they are compared while the name is still
        marked as under construction, so their own self-pointers resolve.
        """
        name = descriptor.name
        nested = self._building[name] = []
        try:
            field_types = [self._resolve(f, indirect=False) for f in descriptor.fields]
            # nested may grow while inner definitions are resolved
            for inner in nested:
                inner_types = [self._resolve(f, indirect=False) for f in inner.fields]
                if inner_types != field_types:
                    raise_error("TE0011", name=name,
                                existing=ir.LiteralStructType(field_types),
                                requested=ir.LiteralStructType(inner_types))
        finally:
            del self._building[name]
        return field_types

    def _get_function_type(self, descriptor: Function, indirect: bool) -> ir.FunctionType:
        # Only reachable by value at the top level; behind a pointer the
        # signature may name a struct that is still being built
        return_type = self._resolve(descriptor.returns, indirect)
        param_types = [self._resolve(p, indirect) for p in descriptor.params]
        return ir.FunctionType(return_type, param_types, var_arg=descriptor.variadic)


def _is_opaque(llvm_type: ir.Type) -> bool:
    return isinstance(llvm_type, ir.IdentifiedStructType) and llvm_type.is_opaque


def resolve(
    descriptor: TypeDescriptor,
    context: ir.Context | None = None,
    *,
    target: TargetInfo | None = None,
) -> ir.Type:
    """Resolve one descriptor against an IR context.

    Convenience wrapper around TypeResolver for one-off calls.
    """
    return TypeResolver(context, target).resolve(descriptor)
