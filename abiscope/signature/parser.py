"""Function signature parser using Lark."""

import logging
import os
import re
from typing import Any

from lark import Lark, Token
from lark.exceptions import LarkError, UnexpectedInput, VisitError
from lark.visitors import Transformer

from .types import (
    AbiComponent,
    AbiType,
    FunctionSignature,
    TypeKind,
    array,
    fixed_bytes,
)

logger = logging.getLogger(__name__)

_g_parser: Lark | None = None

# Data locations and event keywords that may sit between a type and its name
_QUALIFIERS = frozenset(["memory", "calldata", "storage", "indexed", "payable"])

_INT_RE = re.compile(r"(u?int)(\d*)")
_BYTES_RE = re.compile(r"bytes(\d+)")
_NAMED_KINDS = {
    "bool": TypeKind.BOOL,
    "address": TypeKind.ADDRESS,
    "string": TypeKind.STRING,
    "bytes": TypeKind.BYTES,
}


class MalformedSignature(RuntimeError):
    """Raised when a function signature cannot be parsed."""

    def __init__(self, message: str, column: int | None = None):
        super().__init__(message if column is None else f"{message} (column {column})")
        self.column = column


def resolve_base_type(name: str) -> AbiType:
    """Resolve an elementary type token such as ``uint256`` or ``bytes4``."""
    if name in _NAMED_KINDS:
        return AbiType(_NAMED_KINDS[name])
    if name == "byte":
        return fixed_bytes(1)

    m = _INT_RE.fullmatch(name)
    if m:
        bits = int(m.group(2)) if m.group(2) else 256
        if bits < 8 or bits > 256 or bits % 8 != 0:
            raise MalformedSignature(f"Invalid integer width in '{name}'")
        kind = TypeKind.UINT if m.group(1) == "uint" else TypeKind.INT
        return AbiType(kind, size=bits)

    m = _BYTES_RE.fullmatch(name)
    if m:
        size = int(m.group(1))
        if size < 1 or size > 32:
            raise MalformedSignature(f"Invalid fixed bytes size in '{name}'")
        return fixed_bytes(size)

    raise MalformedSignature(f"Unknown type '{name}'")


class _Dim:
    def __init__(self, length: int | None):
        self.length = length


class TreeTransformer(Transformer):
    """Transform parse tree into ABI types."""

    def signature(self, args: list[Any]) -> FunctionSignature:
        params = args[1] if len(args) > 1 and args[1] is not None else []
        return FunctionSignature(name=str(args[0]), inputs=params)

    def params(self, args: list[Any]) -> list[AbiComponent]:
        components = []
        for i, (t, name) in enumerate(args):
            components.append(AbiComponent(name=name or f"arg{i}", type=t))
        return components

    def param(self, args: list[Any]) -> tuple[AbiType, str | None]:
        names = [str(a) for a in args[1:] if str(a) not in _QUALIFIERS]
        if len(names) > 1:
            raise MalformedSignature(f"Unexpected token '{names[0]}' after type")
        return args[0], names[0] if names else None

    def type(self, args: list[Any]) -> AbiType:
        t = args[0]
        for dim in args[1:]:
            t = array(t, dim.length)
        return t

    def prim(self, args: list[Token]) -> AbiType:
        return resolve_base_type(str(args[0]))

    def tuple(self, args: list[Any]) -> AbiType:
        components = args[0] if args and args[0] is not None else []
        if not components:
            raise MalformedSignature("Records must have at least one field")
        return AbiType(TypeKind.TUPLE, components=components)

    def dim(self, args: list[Any]) -> _Dim:
        if not args or args[0] is None:
            return _Dim(None)
        length = int(args[0])
        if length < 1:
            raise MalformedSignature("Fixed array length must be at least 1")
        return _Dim(length)


def _get_parser() -> Lark:
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/signature.lark", encoding="utf-8") as f:
            grammar = f.read()

        _g_parser = Lark(
            grammar,
            parser="lalr",
            start=["signature", "type"],
            maybe_placeholders=True,
        )
    return _g_parser


def _parse(text: str, start: str) -> Any:
    try:
        tree = _get_parser().parse(text, start=start)
        return TreeTransformer().transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, MalformedSignature):
            raise e.orig_exc from None
        raise
    except UnexpectedInput as e:
        raise MalformedSignature(f"Cannot parse '{text.strip()}'", column=e.column) from e
    except LarkError as e:
        raise MalformedSignature(f"Cannot parse '{text.strip()}'") from e


def parse(text: str) -> FunctionSignature:
    """Parse a function declaration such as ``transfer(address to, uint256)``."""
    if "(" not in text:
        raise MalformedSignature(f"No parameter list in '{text.strip()}'")

    signature = _parse(text, "signature")
    logger.debug("parsed %s with %d inputs", signature.name, len(signature.inputs))
    return signature


def parse_type(text: str) -> AbiType:
    """Parse a single bare type token such as ``(uint8,string)[]``."""
    return _parse(text, "type")
