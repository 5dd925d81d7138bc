"""Static/dynamic classification and head sizes for ABI types."""

from dataclasses import dataclass
from enum import StrEnum, auto

from .types import AbiComponent, AbiType, TypeKind, canonical_type, is_scalar

WORD_SIZE = 32


class SizeKind(StrEnum):
    """Classification of encoded size characteristics."""

    STATIC = auto()  # Size known from the type alone, encoded in place
    DYNAMIC = auto()  # Size known only at runtime, encoded behind an offset


@dataclass(frozen=True)
class SizeInfo:
    """Size information for a type as seen from its enclosing head region."""

    head_words: int
    kind: SizeKind

    @property
    def is_static(self) -> bool:
        return self.kind == SizeKind.STATIC

    @property
    def head_size(self) -> int:
        return self.head_words * WORD_SIZE


class SizeCalculator:
    """Calculate head sizes for ABI types."""

    def __init__(self) -> None:
        self._cache: dict[str, SizeInfo] = {}

    def calc_type_size(self, t: AbiType) -> SizeInfo:
        key = canonical_type(t)
        if key in self._cache:
            return self._cache[key]

        if is_scalar(t):
            info = SizeInfo(1, SizeKind.STATIC)
        elif t.kind in (TypeKind.BYTES, TypeKind.STRING):
            info = SizeInfo(1, SizeKind.DYNAMIC)
        elif t.kind == TypeKind.ARRAY:
            assert t.element is not None
            elem = self.calc_type_size(t.element)
            # T[] always needs a runtime count; T[k] is inlined when T is
            if t.length is None or not elem.is_static:
                info = SizeInfo(1, SizeKind.DYNAMIC)
            else:
                info = SizeInfo(t.length * elem.head_words, SizeKind.STATIC)
        elif t.kind == TypeKind.TUPLE:
            info = self.calc_components_size(t.components)
        else:
            raise ValueError(f"Unknown type kind: {t.kind}")

        self._cache[key] = info
        return info

    def calc_components_size(self, components: list[AbiComponent]) -> SizeInfo:
        """Calculate the size of a record-like sequence of fields."""
        sizes = [self.calc_type_size(c.type) for c in components]
        if all(s.is_static for s in sizes):
            return SizeInfo(sum(s.head_words for s in sizes), SizeKind.STATIC)
        return SizeInfo(1, SizeKind.DYNAMIC)

    def head_size(self, components: list[AbiComponent]) -> int:
        """Bytes reserved by a parameter list's head region."""
        return sum(self.calc_type_size(c.type).head_size for c in components)


def is_dynamic(t: AbiType) -> bool:
    """Check if a type must be encoded behind an offset."""
    return not SizeCalculator().calc_type_size(t).is_static


def head_words(t: AbiType) -> int:
    """Number of head words a type occupies in its enclosing head region."""
    return SizeCalculator().calc_type_size(t).head_words
