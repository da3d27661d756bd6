"""
Type descriptors: the closed menu of native type shapes llvm_typeid resolves.

Descriptors are immutable values. Every shape is a frozen dataclass and
`TypeDescriptor` is their union. Shapes that can never be resolved (odd
integer widths, void stored by value, function types by value) are
rejected when the descriptor is constructed, so a descriptor that exists
is always resolvable.

`str(descriptor)` gives the C-style spelling understood by
`llvm_typeid.typespec.parse_type`.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from llvm_typeid.errors import raise_error

INT_WIDTHS: tuple[int, ...] = (8, 16, 32, 64)


@dataclass(frozen=True)
class Bool:
    """1-bit logical value."""

    def __str__(self) -> str:
        return "bool"


@dataclass(frozen=True)
class Char:
    """Platform character; its width comes from the target, not from here."""

    def __str__(self) -> str:
        return "char"


@dataclass(frozen=True)
class SignedInt:
    width: int

    def __post_init__(self) -> None:
        _check_width(self.width)

    def __str__(self) -> str:
        return f"int{self.width}_t"


@dataclass(frozen=True)
class UnsignedInt:
    """Unsigned integer. Signedness is not visible in the IR type."""
    width: int

    def __post_init__(self) -> None:
        _check_width(self.width)

    def __str__(self) -> str:
        return f"uint{self.width}_t"


@dataclass(frozen=True)
class Float32:
    def __str__(self) -> str:
        return "float"


@dataclass(frozen=True)
class Float64:
    def __str__(self) -> str:
        return "double"


@dataclass(frozen=True)
class Void:
    """Absence of a value. Valid as a function return or behind a pointer."""

    def __str__(self) -> str:
        return "void"


@dataclass(frozen=True)
class Pointer:
    to: "TypeDescriptor"

    def __post_init__(self) -> None:
        _check_descriptor(self.to)

    def __str__(self) -> str:
        return f"{self.to}*"


@dataclass(frozen=True)
class Reference:
    """A pointer to non-null storage of known size.

    Resolves to the same IR type as `Pointer`; only function parameter
    annotation tells the two apart.
    """
    to: "TypeDescriptor"

    def __post_init__(self) -> None:
        _check_descriptor(self.to)

    def __str__(self) -> str:
        return f"{self.to}&"


@dataclass(frozen=True)
class Array:
    """Array of `of`. A length of None (or 0) is a flexible array."""
    of: "TypeDescriptor"
    length: Optional[int] = None

    def __post_init__(self) -> None:
        _check_descriptor(self.of)
        _check_storable(self.of, "an array element")
        if self.length is not None and self.length < 0:
            raise_error("TE0002", length=self.length)

    def __str__(self) -> str:
        if self.length is None:
            return f"{self.of}[]"
        return f"{self.of}[{self.length}]"


@dataclass(frozen=True)
class Struct:
    """Nominal aggregate.

    Field order is kept exactly as given. `fields=None` names the struct
    without defining it, which is how a struct refers to itself through a
    pointer: Struct("Node", (INT32, Pointer(Struct("Node")))).
    """
    name: str
    fields: Optional[tuple["TypeDescriptor", ...]] = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise_error("TE0005")
        if self.fields is not None:
            # Accept any sequence, store a tuple so the descriptor stays hashable
            object.__setattr__(self, "fields", tuple(self.fields))
            for index, field in enumerate(self.fields):
                _check_descriptor(field)
                _check_storable(field, f"field {index} of struct '{self.name}'")

    @property
    def is_forward(self) -> bool:
        return self.fields is None

    def __str__(self) -> str:
        if self.fields is None:
            return f"struct {self.name}"
        body = " ".join(f"{field};" for field in self.fields)
        return f"struct {self.name} {{ {body} }}" if body else f"struct {self.name} {{ }}"


@dataclass(frozen=True)
class Function:
    """Callable signature; `variadic` allows an untyped trailing argument tail."""
    returns: "TypeDescriptor"
    params: tuple["TypeDescriptor", ...] = ()
    variadic: bool = False

    def __post_init__(self) -> None:
        _check_descriptor(self.returns)
        if isinstance(strip_qualifiers(self.returns), Function):
            raise_error("TE0004", type=self.returns, position="a function return")
        object.__setattr__(self, "params", tuple(self.params))
        for index, param in enumerate(self.params):
            _check_descriptor(param)
            _check_storable(param, f"parameter {index}")

    def __str__(self) -> str:
        params = [str(p) for p in self.params]
        if self.variadic:
            params.append("...")
        return f"{self.returns}({', '.join(params)})"


@dataclass(frozen=True)
class Qualified:
    """const/volatile wrapper. It has no IR representation and is stripped
    before resolution."""
    inner: "TypeDescriptor"
    const: bool = True
    volatile: bool = False

    def __post_init__(self) -> None:
        _check_descriptor(self.inner)
        if not (self.const or self.volatile):
            raise_error("TE0006")

    def __str__(self) -> str:
        quals = [q for q, on in (("const", self.const), ("volatile", self.volatile)) if on]
        return f"{self.inner} {' '.join(quals)}"


TypeDescriptor = Union[
    Bool, Char, SignedInt, UnsignedInt, Float32, Float64, Void,
    Pointer, Reference, Array, Struct, Function, Qualified,
]

DESCRIPTOR_CLASSES: tuple[type, ...] = (
    Bool, Char, SignedInt, UnsignedInt, Float32, Float64, Void,
    Pointer, Reference, Array, Struct, Function, Qualified,
)


def const(descriptor: TypeDescriptor) -> Qualified:
    return Qualified(descriptor, const=True)


def volatile(descriptor: TypeDescriptor) -> Qualified:
    return Qualified(descriptor, const=False, volatile=True)


def strip_qualifiers(descriptor: TypeDescriptor) -> TypeDescriptor:
    """Remove every outer const/volatile wrapper.

    Only the outermost layers are removed; qualifiers nested under a
    pointer or array are stripped when resolution reaches them.
    """
    while isinstance(descriptor, Qualified):
        descriptor = descriptor.inner
    return descriptor


def is_void(descriptor: TypeDescriptor) -> bool:
    return isinstance(strip_qualifiers(descriptor), Void)


def function(returns: TypeDescriptor, *params: TypeDescriptor, variadic: bool = False) -> Function:
    """Shorthand for Function(returns, params, variadic)."""
    return Function(returns, params, variadic)


def struct(name: str, fields: Optional[Sequence[TypeDescriptor]] = None) -> Struct:
    return Struct(name, None if fields is None else tuple(fields))


#
# --- Validation helpers
#

def _check_width(width: int) -> None:
    if width not in INT_WIDTHS:
        raise_error("TE0001", width=width, allowed=", ".join(map(str, INT_WIDTHS)))


def _check_descriptor(value: object) -> None:
    if not isinstance(value, DESCRIPTOR_CLASSES):
        raise_error("TE0007", value=value)


def _check_storable(descriptor: TypeDescriptor, position: str) -> None:
    bare = strip_qualifiers(descriptor)
    if isinstance(bare, Void):
        raise_error("TE0003", position=position)
    if isinstance(bare, Function):
        raise_error("TE0004", type=descriptor, position=position)


BOOL = Bool()
CHAR = Char()
INT8 = SignedInt(8)
INT16 = SignedInt(16)
INT32 = SignedInt(32)
INT64 = SignedInt(64)
UINT8 = UnsignedInt(8)
UINT16 = UnsignedInt(16)
UINT32 = UnsignedInt(32)
UINT64 = UnsignedInt(64)
FLOAT32 = Float32()
FLOAT64 = Float64()
VOID = Void()
