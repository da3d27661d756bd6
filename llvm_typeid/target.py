"""
Target description used for character width and storage sizes.

The defaults describe a 64-bit target with 8-bit chars. Other targets are
described either from an LLVM data layout string or from a target triple.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict

from llvm_typeid.errors import raise_error

DEFAULT_CHAR_BITS = 8
DEFAULT_POINTER_BITS = 64

# Architectures whose pointers are 32 bits wide
_32BIT_ARCHES = frozenset({
    "i386", "i486", "i586", "i686", "x86",
    "arm", "armv6", "armv7", "armv7a", "armv7l", "thumbv7",
    "mips", "mipsel", "powerpc", "ppc",
    "riscv32", "wasm32", "sparc", "hexagon",
})


@dataclass
class TargetInfo:
    """Size facts about the compilation target."""
    char_bits: int = DEFAULT_CHAR_BITS
    pointer_bits: int = DEFAULT_POINTER_BITS
    pointer_align_bits: int | None = None
    int_align: Dict[int, int] = field(default_factory=dict)    # bit width -> ABI alignment in bytes
    float_align: Dict[int, int] = field(default_factory=dict)  # bit width -> ABI alignment in bytes

    @property
    def pointer_size(self) -> int:
        return self.pointer_bits // 8

    @property
    def pointer_align(self) -> int:
        bits = self.pointer_align_bits or self.pointer_bits
        return bits // 8

    @classmethod
    def from_data_layout(cls, data_layout: str, char_bits: int = DEFAULT_CHAR_BITS) -> "TargetInfo":
        """Build a target from an LLVM data layout string.

        Reads pointer (`p[addrspace]:size:abi`), integer (`iN:abi`) and float
        (`fN:abi`) components; everything else is ignored.

        Example:
            e-m:e-p270:32:32-p271:32:32-p272:64:64-i64:64-f80:128-n8:16:32:64-S128
        """
        info = cls(char_bits=char_bits)
        for component in filter(None, data_layout.split("-")):
            kind = component[0]
            if kind not in "pif":
                continue
            parts = component[1:].split(":")
            try:
                if kind == "p":
                    # Only the default address space decides pointer width
                    if parts[0] not in ("", "0"):
                        continue
                    info.pointer_bits = int(parts[1])
                    if len(parts) > 2:
                        info.pointer_align_bits = int(parts[2])
                else:
                    width, abi_bits = int(parts[0]), int(parts[1])
                    table = info.int_align if kind == "i" else info.float_align
                    table[width] = abi_bits // 8
            except (IndexError, ValueError):
                raise_error("TE0021", component=component)
        return info

    @classmethod
    def from_triple(cls, triple: str, char_bits: int = DEFAULT_CHAR_BITS) -> "TargetInfo":
        """Build a target from an LLVM triple such as x86_64-pc-linux-gnu."""
        arch = triple.split("-")[0].lower()
        pointer_bits = 32 if arch in _32BIT_ARCHES else DEFAULT_POINTER_BITS
        return cls(char_bits=char_bits, pointer_bits=pointer_bits)

    @classmethod
    def host(cls) -> "TargetInfo":
        """Describe the machine llvmlite was built for."""
        from llvmlite import binding as llvm
        return cls.from_triple(llvm.get_default_triple())
