"""
Parameter annotation for functions built from function descriptors.

A `Reference` parameter promises non-null storage of a known size. LLVM
pointer types cannot say that, so the promise is attached to the IR
function as a `dereferenceable(N)` parameter attribute. Plain `Pointer`
parameters carry no such promise and are left alone.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from llvmlite import ir

from llvm_typeid.descriptors import TypeDescriptor, Function, Reference, strip_qualifiers
from llvm_typeid.errors import raise_error
from llvm_typeid.resolver import TypeResolver
from llvm_typeid.target import TargetInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dereferenceable:
    """Parameter `index` is readable for `size` bytes."""
    index: int
    size: int


def plan_annotations(
    descriptor: TypeDescriptor,
    context: ir.Context | None = None,
    *,
    target: TargetInfo | None = None,
) -> list[Dereferenceable]:
    """Work out which parameters of a signature get a dereferenceable attribute.

    Args:
        descriptor: A function descriptor (qualifiers allowed).
        context: IR context used to resolve the referenced types.
        target: Target facts used for the sizes.

    Returns:
        One entry per Reference parameter, in parameter order. References
        to zero-sized storage (flexible arrays, empty structs) are left
        out, since LLVM has no dereferenceable(0).
    """
    signature = _expect_function(descriptor)
    resolver = TypeResolver(context, target)
    plan = []
    for index, param in enumerate(signature.params):
        param = strip_qualifiers(param)
        if not isinstance(param, Reference):
            continue
        size = resolver.size_of(param.to)
        if size:
            plan.append(Dereferenceable(index, size))
    return plan


def annotate(
    descriptor: TypeDescriptor,
    ir_function: ir.Function,
    *,
    target: TargetInfo | None = None,
) -> None:
    """Attach dereferenceable attributes to an existing IR function.

    The function must have been built from the same descriptor, so its
    argument list lines up with the descriptor's parameters.
    """
    signature = _expect_function(descriptor)
    args = ir_function.args
    if len(args) != len(signature.params):
        raise_error("TE0031", name=ir_function.name, got=len(args),
                    type=signature, expected=len(signature.params))

    context = ir_function.module.context
    for entry in plan_annotations(signature, context, target=target):
        args[entry.index].attributes.dereferenceable = entry.size
        logger.debug("%s: parameter %d dereferenceable(%d)", ir_function.name, entry.index, entry.size)


def declare_function(
    module: ir.Module,
    name: str,
    descriptor: TypeDescriptor,
    *,
    target: TargetInfo | None = None,
) -> ir.Function:
    """Declare a function in a module from its descriptor and annotate it.

    If the function already exists in the module with the same type, the
    existing declaration is returned.

    Args:
        module: The LLVM module to declare the function in.
        name: Symbol name of the function.
        descriptor: Function descriptor describing its signature.
        target: Target facts used for char width and sizes.

    Returns:
        The declared (or existing) function.
    """
    signature = _expect_function(descriptor)
    fn_type = TypeResolver(module.context, target).resolve(signature)

    if name in module.globals:
        existing = module.globals[name]
        if isinstance(existing, ir.Function) and existing.ftype == fn_type:
            return existing
        raise_error("TE0032", name=name, existing=existing.type, requested=fn_type)

    func = ir.Function(module, fn_type, name=name)
    annotate(signature, func, target=target)
    return func


def _expect_function(descriptor: TypeDescriptor) -> Function:
    signature = strip_qualifiers(descriptor)
    if not isinstance(signature, Function):
        raise_error("TE0030", type=descriptor)
    return signature
