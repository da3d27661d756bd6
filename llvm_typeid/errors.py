# llvm_typeid/errors.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, NoReturn


class Category(str, Enum):
    DESCRIPTOR = "descriptor"
    RESOLUTION = "resolution"
    LAYOUT     = "layout"
    ANNOTATION = "annotation"
    SPELLING   = "spelling"


@dataclass(frozen=True)
class ErrorMessage:
    code: str
    text: str
    category: Category
    doc: str = ""

    def format(self, **kwargs) -> str:
        try:
            return self.text.format(**kwargs)
        except KeyError as key_error:
            raise KeyError(f"{self.code} needs '{key_error.args[0]}' "
                           f"to format {self.text!r}") from None


class TypeIDError(Exception):
    """Base class for every error raised by llvm_typeid."""

    def __init__(self, code: str, text: str) -> None:
        super().__init__(f"{code}: {text}")
        self.code = code
        self.text = text


class DescriptorError(TypeIDError, ValueError):
    """A type descriptor was constructed with an unsupported shape."""


class ResolutionError(TypeIDError, RuntimeError):
    """A descriptor could not be turned into an IR type, size or attribute."""


class TypeSpecError(TypeIDError, ValueError):
    """A C-style type spelling could not be parsed."""


REGISTRY: Dict[str, ErrorMessage] = {}

_EXCEPTIONS = {
    Category.DESCRIPTOR: DescriptorError,
    Category.RESOLUTION: ResolutionError,
    Category.LAYOUT: ResolutionError,
    Category.ANNOTATION: ResolutionError,
    Category.SPELLING: TypeSpecError,
}

def lookup(code: str) -> ErrorMessage:
    if code not in REGISTRY:
        raise KeyError(f"unknown error code: {code}")
    return REGISTRY[code]

def raise_error(code: str, **kwargs) -> NoReturn:
    """Raise the exception registered for an error code.

    The exception class is picked from the message category, so callers
    only name the code and the format parameters.

    Args:
        code: Error code (e.g., "TE0001")
        **kwargs: Format parameters for the error message

    Raises:
        TypeIDError: Always, as the subclass matching the code's category
    """
    msg = lookup(code)
    raise _EXCEPTIONS[msg.category](code, msg.format(**kwargs))


def _register(msg: ErrorMessage) -> None:
    if msg.code in REGISTRY:
        raise ValueError(f"error code {msg.code} is already registered as {REGISTRY[msg.code].text!r}")
    REGISTRY[msg.code] = msg

#
# --- Registry population
#

# Descriptor construction (TE0001-TE0009)
_register(ErrorMessage("TE0001",
    "unsupported integer width {width}; expected one of {allowed}",
    Category.DESCRIPTOR, "Integers are limited to the fixed-width menu."))

_register(ErrorMessage("TE0002",
    "array length must be non-negative, got {length}",
    Category.DESCRIPTOR, "Use None (or 0) for a flexible array."))

_register(ErrorMessage("TE0003",
    "'void' is not allowed as {position}",
    Category.DESCRIPTOR, "void is valid only as a function return or behind a pointer."))

_register(ErrorMessage("TE0004",
    "function type '{type}' is not allowed by value as {position}",
    Category.DESCRIPTOR, "Wrap function types in a pointer to pass or store them."))

_register(ErrorMessage("TE0005",
    "struct name must be a non-empty string",
    Category.DESCRIPTOR, "Nominal aggregates are identified by their name."))

_register(ErrorMessage("TE0006",
    "qualifier wrapper must set const or volatile",
    Category.DESCRIPTOR, "An empty qualifier carries no meaning."))

_register(ErrorMessage("TE0007",
    "expected a type descriptor, got {value!r}",
    Category.DESCRIPTOR, "Nested payloads must themselves be descriptors."))

# Resolution (TE0010-TE0019)
_register(ErrorMessage("TE0010",
    "no resolution rule for '{type}'",
    Category.RESOLUTION, "Only the closed descriptor menu can be resolved."))

_register(ErrorMessage("TE0011",
    "struct '{name}' is already defined as {existing}, cannot redefine as {requested}",
    Category.RESOLUTION, "Structs are interned by name in the IR context."))

_register(ErrorMessage("TE0012",
    "struct '{name}' contains itself by value",
    Category.RESOLUTION, "Recursive structs must refer to themselves through a pointer."))

_register(ErrorMessage("TE0013",
    "struct '{name}' field {index} has incomplete type '{field}'",
    Category.RESOLUTION, "By-value fields need a defined struct body."))

_register(ErrorMessage("TE0014",
    "array '{type}' has incomplete element type '{element}'",
    Category.RESOLUTION, "Arrays stored by value need a defined element struct."))

# Layout (TE0020-TE0029)
_register(ErrorMessage("TE0020",
    "type '{type}' has no storage size",
    Category.LAYOUT, "void, function and opaque struct types are unsized."))

_register(ErrorMessage("TE0021",
    "malformed data layout component '{component}'",
    Category.LAYOUT, "Expected LLVM data layout syntax, e.g. 'p:64:64' or 'i64:64'."))

# Annotation (TE0030-TE0039)
_register(ErrorMessage("TE0030",
    "expected a function descriptor, got '{type}'",
    Category.ANNOTATION, "Parameter annotation walks a function signature."))

_register(ErrorMessage("TE0031",
    "function '{name}' has {got} parameter(s), descriptor '{type}' declares {expected}",
    Category.ANNOTATION, "The IR function must be built from the same signature."))

_register(ErrorMessage("TE0032",
    "'{name}' is already declared with type {existing}, requested {requested}",
    Category.ANNOTATION, "A module global can only carry one function signature."))

# Type spellings (TE0040-TE0049)
_register(ErrorMessage("TE0040",
    "cannot parse type '{text}': {detail}",
    Category.SPELLING, "See the typespec grammar for accepted spellings."))
