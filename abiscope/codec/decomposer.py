"""Decompose encoded calldata into a labeled breakdown tree.

The decomposer never sees the original values. It walks the byte string
using only the declared types:

1. Each head slot is a static value, an offset to dynamic content, or one
   of the consecutive words of an inlined static record.
2. Offsets are sorted ascending; each dynamic item owns the bytes from its
   offset up to the next item's offset (or the end of the window).
3. Dynamic content is unpacked recursively with the same procedure, with
   offsets relative to the start of the enclosing window.
"""

import logging

from abiscope.signature.sizes import WORD_SIZE, SizeCalculator
from abiscope.signature.types import AbiComponent, AbiType, TypeKind, canonical_type, is_scalar

from .types import BreakdownPart

logger = logging.getLogger(__name__)

SELECTOR_SIZE = 4


class CorruptLayout(RuntimeError):
    """Raised when the byte string does not match the declared types."""

    def __init__(self, offset: int, message: str):
        super().__init__(f"{message} (at byte {offset})")
        self.offset = offset


def _hex(data: bytes) -> str:
    return "0x" + data.hex()


def describe_scalar(t: AbiType, word: bytes) -> str:
    """Human-readable rendering of a scalar head word."""
    n = int.from_bytes(word, "big")
    if t.kind == TypeKind.UINT:
        return str(n)
    if t.kind == TypeKind.INT:
        if n >= 1 << (WORD_SIZE * 8 - 1):
            n -= 1 << (WORD_SIZE * 8)
        return str(n)
    if t.kind == TypeKind.BOOL:
        return {0: "false", 1: "true"}.get(n, f"invalid bool ({n})")
    if t.kind == TypeKind.ADDRESS:
        return _hex(word[-20:])
    if t.kind == TypeKind.FIXED_BYTES:
        assert t.size is not None
        return _hex(word[: t.size])
    return _hex(word)


class Decomposer:
    """Walk a byte string against a list of types."""

    def __init__(self, data: bytes):
        self.data = data
        self.sizes = SizeCalculator()

    def read_uint(self, pos: int) -> int:
        return int.from_bytes(self.data[pos : pos + WORD_SIZE], "big")

    def decompose_window(
        self, params: list[tuple[str, AbiType]], start: int, end: int
    ) -> list[BreakdownPart]:
        """Break ``data[start:end]`` into head parts, then tail parts."""
        head_size = sum(self.sizes.calc_type_size(t).head_size for _, t in params)
        if start + head_size > end:
            raise CorruptLayout(start, f"head region of {head_size} bytes exceeds window")

        parts: list[BreakdownPart] = []
        pending: list[tuple[int, str, AbiType]] = []
        pos = start
        for name, t in params:
            info = self.sizes.calc_type_size(t)
            if info.is_static:
                parts.append(self.static_part(name, t, pos, pos + info.head_size))
            else:
                offset = self.read_uint(pos)
                pending.append((offset, name, t))
                parts.append(
                    BreakdownPart(
                        name=f"{name} (offset)",
                        type="uint256",
                        value=_hex(self.data[pos : pos + WORD_SIZE]),
                        offset=pos,
                        description=f"{canonical_type(t)} content at byte {start + offset}",
                    )
                )
            pos += info.head_size

        window = end - start
        if not pending:
            if head_size != window:
                raise CorruptLayout(pos, f"{window - head_size} unexpected bytes after head region")
            return parts

        # declaration order and offset order diverge once content nests
        pending.sort(key=lambda item: item[0])
        if pending[0][0] != head_size:
            raise CorruptLayout(
                start, f"first offset {pending[0][0]} does not follow head region of {head_size}"
            )

        for i, (offset, name, t) in enumerate(pending):
            next_offset = pending[i + 1][0] if i + 1 < len(pending) else window
            if next_offset <= offset:
                raise CorruptLayout(start + offset, f"overlapping offsets for {name}")
            if next_offset > window:
                raise CorruptLayout(start + next_offset, "offset points past the end of data")
            logger.debug("%s content at %d..%d", name, start + offset, start + next_offset)
            parts.append(self.dynamic_part(name, t, start + offset, start + next_offset))

        return parts

    def static_part(self, name: str, t: AbiType, start: int, end: int) -> BreakdownPart:
        if is_scalar(t):
            word = self.data[start:end]
            return BreakdownPart(
                name=name,
                type=canonical_type(t),
                value=_hex(word),
                offset=start,
                description=describe_scalar(t, word),
            )

        # inlined static record or fixed array
        return BreakdownPart(
            name=name,
            type=canonical_type(t),
            value=_hex(self.data[start:end]),
            offset=start,
            children=self.decompose_window(self._children(name, t), start, end),
        )

    def dynamic_part(self, name: str, t: AbiType, start: int, end: int) -> BreakdownPart:
        if t.kind in (TypeKind.BYTES, TypeKind.STRING):
            children = self.blob_parts(t, start, end)
        elif t.kind == TypeKind.ARRAY and t.length is None:
            assert t.element is not None
            if end - start < WORD_SIZE:
                raise CorruptLayout(start, f"missing element count for {name}")
            count = self.read_uint(start)
            elem_size = self.sizes.calc_type_size(t.element).head_size
            if count * elem_size > end - start - WORD_SIZE:
                raise CorruptLayout(start, f"{count} elements do not fit in {name}")
            children = [
                BreakdownPart(
                    name=f"{name} (length)",
                    type="uint256",
                    value=_hex(self.data[start : start + WORD_SIZE]),
                    offset=start,
                    description=f"{count} element{'s' if count != 1 else ''}",
                )
            ]
            elems = [(f"{name}[{i}]", t.element) for i in range(count)]
            children.extend(self.decompose_window(elems, start + WORD_SIZE, end))
        else:
            children = self.decompose_window(self._children(name, t), start, end)

        return BreakdownPart(
            name=name,
            type=canonical_type(t),
            value=_hex(self.data[start:end]),
            offset=start,
            children=children,
        )

    def blob_parts(self, t: AbiType, start: int, end: int) -> list[BreakdownPart]:
        """Split string/bytes content into length word, raw bytes and padding."""
        if end - start < WORD_SIZE:
            raise CorruptLayout(start, "missing length word")
        length = self.read_uint(start)
        padded = -(-length // WORD_SIZE) * WORD_SIZE
        if WORD_SIZE + padded != end - start:
            raise CorruptLayout(
                start, f"declared length {length} does not match {end - start - WORD_SIZE} content bytes"
            )

        parts = [
            BreakdownPart(
                name="length",
                type="uint256",
                value=_hex(self.data[start : start + WORD_SIZE]),
                offset=start,
                description=f"{length} byte{'s' if length != 1 else ''}",
            )
        ]
        content_start = start + WORD_SIZE
        if length:
            raw = self.data[content_start : content_start + length]
            description = None
            if t.kind == TypeKind.STRING:
                description = raw.decode("utf-8", errors="replace")
            parts.append(
                BreakdownPart(
                    name="data",
                    type=canonical_type(t),
                    value=_hex(raw),
                    offset=content_start,
                    description=description,
                )
            )
        if padded > length:
            padding = self.data[content_start + length : end]
            if any(padding):
                raise CorruptLayout(content_start + length, "non-zero padding")
            parts.append(
                BreakdownPart(
                    name="padding",
                    type=f"bytes{len(padding)}",
                    value=_hex(padding),
                    offset=content_start + length,
                    description=f"{len(padding)} zero byte{'s' if len(padding) != 1 else ''}",
                )
            )
        return parts

    def _children(self, name: str, t: AbiType) -> list[tuple[str, AbiType]]:
        if t.kind == TypeKind.TUPLE:
            return [(f"{name}.{c.name}", c.type) for c in t.components]
        assert t.element is not None and t.length is not None
        return [(f"{name}[{i}]", t.element) for i in range(t.length)]


def decompose(
    inputs: list[AbiComponent], data: bytes, signature: str | None = None
) -> list[BreakdownPart]:
    """Break calldata (selector included) into a labeled tree.

    ``signature`` is the canonical signature, used only to describe the
    selector part.
    """
    if len(data) < SELECTOR_SIZE:
        raise CorruptLayout(0, "calldata is shorter than a selector")

    selector = BreakdownPart(
        name="Function Selector",
        type="bytes4",
        value=_hex(data[:SELECTOR_SIZE]),
        offset=0,
        description=f'keccak256("{signature}")' if signature else None,
    )
    params = [(c.name, c.type) for c in inputs]
    return [selector] + Decomposer(data).decompose_window(params, SELECTOR_SIZE, len(data))
