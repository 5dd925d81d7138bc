"""Type definitions for function signatures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum, auto

from dataclasses_json import DataClassJsonMixin


class TypeKind(StrEnum):
    """Tag of an ABI type node."""

    UINT = auto()
    INT = auto()
    BOOL = auto()
    ADDRESS = auto()
    FIXED_BYTES = auto()
    BYTES = auto()
    STRING = auto()
    ARRAY = auto()
    TUPLE = auto()


SCALAR_KINDS = frozenset(
    [
        TypeKind.UINT,
        TypeKind.INT,
        TypeKind.BOOL,
        TypeKind.ADDRESS,
        TypeKind.FIXED_BYTES,
    ]
)


@dataclass
class AbiType(DataClassJsonMixin):
    """Represents a parameter type.

    - size: bit width for uint/int, byte count for fixed_bytes, else None
    - element: element type for arrays
    - length: None for ``T[]``, ``k`` for ``T[k]``
    - components: ordered fields for tuples (records)
    """

    kind: TypeKind
    size: int | None = None
    element: AbiType | None = None
    length: int | None = None
    components: list[AbiComponent] = field(default_factory=list)


@dataclass
class AbiComponent(DataClassJsonMixin):
    """A named parameter or record field. The name is display-only."""

    name: str
    type: AbiType


@dataclass
class FunctionSignature(DataClassJsonMixin):
    """A parsed function declaration."""

    name: str
    inputs: list[AbiComponent]


def fixed_bytes(n: int) -> AbiType:
    return AbiType(TypeKind.FIXED_BYTES, size=n)


def array(element: AbiType, length: int | None = None) -> AbiType:
    return AbiType(TypeKind.ARRAY, element=element, length=length)


def is_scalar(t: AbiType) -> bool:
    """Check if a type occupies exactly one word with no indirection."""
    return t.kind in SCALAR_KINDS


def canonical_type(t: AbiType) -> str:
    """Render the bare type token used in canonical signatures."""
    if t.kind in (TypeKind.UINT, TypeKind.INT):
        return f"{t.kind.value}{t.size}"
    if t.kind == TypeKind.FIXED_BYTES:
        return f"bytes{t.size}"
    if t.kind == TypeKind.ARRAY:
        assert t.element is not None
        suffix = "[]" if t.length is None else f"[{t.length}]"
        return canonical_type(t.element) + suffix
    if t.kind == TypeKind.TUPLE:
        return "(" + ",".join(canonical_type(c.type) for c in t.components) + ")"
    return t.kind.value
