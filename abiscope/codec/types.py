"""Result types produced by the encoder and the decomposer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum, auto

from dataclasses_json import DataClassJsonMixin


class RegionKind(StrEnum):
    """What a byte range of encoded calldata holds."""

    SELECTOR = auto()
    HEAD_SLOT = auto()
    TAIL_LENGTH_WORD = auto()
    TAIL_CONTENT = auto()
    TAIL_PADDING = auto()


@dataclass(frozen=True)
class ByteRegion(DataClassJsonMixin):
    """A (start, length, kind) range over the final byte string.

    ``path`` names the owning parameter, e.g. ``orders[1].amount``.
    """

    start: int
    length: int
    kind: RegionKind
    path: str

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass(frozen=True)
class Encoding:
    """Encoded calldata together with the regions that tile it."""

    data: bytes
    regions: tuple[ByteRegion, ...]


@dataclass(frozen=True)
class BreakdownPart(DataClassJsonMixin):
    """A labeled, typed segment of calldata for display.

    Leaf parts carry the exact bytes they cover; composite parts cover the
    concatenation of their children.
    """

    name: str
    type: str
    value: str
    offset: int
    description: str | None = None
    children: list[BreakdownPart] = field(default_factory=list)

    @property
    def size(self) -> int:
        return (len(self.value) - 2) // 2


def leaves(parts: list[BreakdownPart]) -> list[BreakdownPart]:
    """Flatten a breakdown tree into its leaf parts, in tree order."""
    result: list[BreakdownPart] = []
    for part in parts:
        if part.children:
            result.extend(leaves(part.children))
        else:
            result.append(part)
    return result


def reassemble(parts: list[BreakdownPart]) -> bytes:
    """Rebuild the byte string covered by a breakdown tree."""
    ordered = sorted(leaves(parts), key=lambda p: p.offset)
    return b"".join(bytes.fromhex(p.value[2:]) for p in ordered)
