"""Lark parser for C-style type spellings."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from lark import Lark, Token, Transformer, UnexpectedEOF, UnexpectedInput
from lark.exceptions import VisitError
from llvmlite import ir

from llvm_typeid.descriptors import (
    TypeDescriptor, BOOL, CHAR, FLOAT32, FLOAT64, VOID,
    INT8, INT16, INT32, INT64, UINT8, UINT16, UINT32, UINT64,
    Pointer, Reference, Array, Struct, Function, Qualified,
)
from llvm_typeid.errors import TypeIDError, raise_error
from llvm_typeid.resolver import TypeResolver
from llvm_typeid.target import TargetInfo

GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"

_PRIMITIVES: dict[str, TypeDescriptor] = {
    "bool": BOOL,
    "char": CHAR,
    "float": FLOAT32,
    "double": FLOAT64,
    "void": VOID,
    "int8_t": INT8,
    "int16_t": INT16,
    "int32_t": INT32,
    "int64_t": INT64,
    "uint8_t": UINT8,
    "uint16_t": UINT16,
    "uint32_t": UINT32,
    "uint64_t": UINT64,
}


def _qualify(inner: TypeDescriptor, qualifiers: list[str]) -> Qualified:
    return Qualified(inner, const="const" in qualifiers, volatile="volatile" in qualifiers)


class DescriptorBuilder(Transformer):
    """Builds descriptors bottom-up from the parse tree.

    Suffix rules return a callable that wraps the descriptor built so far,
    so `type` can apply them in source order.
    """

    def start(self, children):
        return children[0]

    def type(self, children):
        qualifiers, descriptor, suffixes = children
        if qualifiers:
            descriptor = _qualify(descriptor, qualifiers)
        for wrap in suffixes:
            descriptor = wrap(descriptor)
        return descriptor

    def qualifiers(self, children):
        return [str(token) for token in children]

    def suffixes(self, children):
        return list(children)

    def primitive(self, children):
        return _PRIMITIVES[str(children[0])]

    def struct(self, children):
        name = str(children[0])
        if len(children) == 1:
            return Struct(name)
        return Struct(name, children[1])

    def struct_body(self, children):
        return tuple(children)

    def pointer(self, _children):
        return Pointer

    def reference(self, _children):
        return Reference

    def array(self, children):
        length = int(children[0]) if children else None
        return lambda of: Array(of, length)

    def qualified(self, children):
        qualifier = str(children[0])
        return lambda inner: _qualify(inner, [qualifier])

    def function(self, children):
        params, variadic = children[0] if children else ((), False)
        return lambda returns: Function(returns, params, variadic)

    def params(self, children):
        variadic = isinstance(children[-1], Token) and children[-1].type == "ELLIPSIS"
        types = children[:-1] if variadic else children
        if types == [VOID] and not variadic:
            # C spelling of an empty parameter list: int32_t(void)
            return (), False
        return tuple(types), variadic


@lru_cache(maxsize=None)
def _parser() -> Lark:
    return Lark.open(str(GRAMMAR_PATH), parser="lalr", maybe_placeholders=False)


def improve_parse_error(e: UnexpectedInput) -> str:
    """Short, single-line description of a lark parse failure."""
    if isinstance(e, UnexpectedEOF):
        return "unexpected end of input"
    token = getattr(e, "token", None)
    if token is not None and token.type != "$END":
        return f"unexpected '{token}' at column {e.column}"
    if token is not None:
        return "unexpected end of input"
    char = getattr(e, "char", None)
    if char is not None:
        return f"unexpected character '{char}' at column {e.column}"
    return str(e).splitlines()[0]


def parse_type(text: str) -> TypeDescriptor:
    """Parse a C-style spelling such as "int32_t(const char*, ...)".

    Raises:
        TypeSpecError: If the text is not a valid spelling.
        DescriptorError: If it spells a shape that cannot be resolved,
            e.g. "void[4]".
    """
    try:
        tree = _parser().parse(text)
    except UnexpectedInput as e:
        raise_error("TE0040", text=text, detail=improve_parse_error(e))
    try:
        return DescriptorBuilder().transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, TypeIDError):
            raise e.orig_exc from None
        raise


def resolve_spec(
    text: str,
    context: ir.Context | None = None,
    *,
    target: TargetInfo | None = None,
) -> ir.Type:
    """Parse a spelling and resolve it in one step."""
    return TypeResolver(context, target).resolve(parse_type(text))
