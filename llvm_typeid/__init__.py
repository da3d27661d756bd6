"""llvm_typeid - native type descriptors resolved into llvmlite IR types."""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("llvm-typeid")
except PackageNotFoundError:
    __version__ = "unknown"

from llvm_typeid.descriptors import (
    TypeDescriptor, Bool, Char, SignedInt, UnsignedInt, Float32, Float64, Void,
    Pointer, Reference, Array, Struct, Function, Qualified,
    BOOL, CHAR, INT8, INT16, INT32, INT64, UINT8, UINT16, UINT32, UINT64,
    FLOAT32, FLOAT64, VOID,
    const, volatile, strip_qualifiers, function, struct,
)
from llvm_typeid.errors import TypeIDError, DescriptorError, ResolutionError, TypeSpecError
from llvm_typeid.target import TargetInfo
from llvm_typeid.sizing import TypeSizing
from llvm_typeid.resolver import TypeResolver, resolve
from llvm_typeid.annotate import Dereferenceable, plan_annotations, annotate, declare_function
from llvm_typeid.typespec import parse_type, resolve_spec
