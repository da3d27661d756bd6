"""Storage size and alignment of resolved LLVM types."""
from __future__ import annotations

from llvmlite import ir

from llvm_typeid.errors import raise_error
from llvm_typeid.target import TargetInfo


class TypeSizing:
    """Computes ABI sizes and alignments of LLVM IR types for one target.

    Layout follows LLVM's default rules: every field is aligned to its ABI
    alignment, structs are padded to a multiple of their own alignment,
    and packed structs get no padding at all.
    """

    def __init__(self, target: TargetInfo | None = None) -> None:
        self.target = target or TargetInfo()

    def size_of(self, llvm_type: ir.Type) -> int:
        """Get the allocation size in bytes of an LLVM type.

        This is the number of bytes a dereferenceable attribute promises for
        a pointer to this type.

        Args:
            llvm_type: A sized LLVM type.

        Returns:
            Size in bytes including tail padding.

        Raises:
            ResolutionError: If the type is void, a function, or an opaque struct.
        """
        match llvm_type:
            case ir.IntType():
                return _round_up(_store_bytes(llvm_type.width), self.align_of(llvm_type))
            case ir.HalfType():
                return 2
            case ir.FloatType():
                return 4
            case ir.DoubleType():
                return 8
            case ir.PointerType():
                return self.target.pointer_size
            case ir.ArrayType():
                return llvm_type.count * self.size_of(llvm_type.element)
            case ir.IdentifiedStructType() if llvm_type.is_opaque:
                raise_error("TE0020", type=llvm_type)
            case ir.BaseStructType():
                return self._calculate_struct_size(llvm_type)
            case _:
                raise_error("TE0020", type=llvm_type)

    def align_of(self, llvm_type: ir.Type) -> int:
        """Get the ABI alignment in bytes of an LLVM type."""
        match llvm_type:
            case ir.IntType():
                store = _store_bytes(llvm_type.width)
                return self.target.int_align.get(llvm_type.width, _next_power_of_two(store))
            case ir.HalfType():
                return self.target.float_align.get(16, 2)
            case ir.FloatType():
                return self.target.float_align.get(32, 4)
            case ir.DoubleType():
                return self.target.float_align.get(64, 8)
            case ir.PointerType():
                return self.target.pointer_align
            case ir.ArrayType():
                return self.align_of(llvm_type.element)
            case ir.IdentifiedStructType() if llvm_type.is_opaque:
                raise_error("TE0020", type=llvm_type)
            case ir.BaseStructType():
                if llvm_type.packed:
                    return 1
                return max((self.align_of(t) for t in llvm_type.elements), default=1)
            case _:
                raise_error("TE0020", type=llvm_type)

    def field_offsets(self, struct_type: ir.BaseStructType) -> list[int]:
        """Byte offset of every field of a struct, in declaration order."""
        offsets = []
        offset = 0
        for element in struct_type.elements:
            if not struct_type.packed:
                offset = _round_up(offset, self.align_of(element))
            offsets.append(offset)
            offset += self.size_of(element)
        return offsets

    def _calculate_struct_size(self, struct_type: ir.BaseStructType) -> int:
        if not struct_type.elements:
            return 0
        offsets = self.field_offsets(struct_type)
        end = offsets[-1] + self.size_of(struct_type.elements[-1])
        if struct_type.packed:
            return end
        return _round_up(end, self.align_of(struct_type))


def _store_bytes(width: int) -> int:
    return (width + 7) // 8


def _next_power_of_two(n: int) -> int:
    power = 1
    while power < n:
        power *= 2
    return power


def _round_up(value: int, align: int) -> int:
    if value % align != 0:
        value += align - (value % align)
    return value
