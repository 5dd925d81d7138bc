"""Head/tail calldata encoder."""

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from abiscope.signature.sizes import WORD_SIZE, SizeCalculator
from abiscope.signature.types import AbiComponent, AbiType, TypeKind, canonical_type, is_scalar

from .types import ByteRegion, Encoding, RegionKind

logger = logging.getLogger(__name__)

_INT_LITERAL = re.compile(r"-?(0x[0-9a-fA-F]+|[0-9]+)")
_HEX_LITERAL = re.compile(r"0x([0-9a-fA-F]{2})*")
_ADDRESS_LITERAL = re.compile(r"0x[0-9a-fA-F]{40}")


class EncodeError(RuntimeError):
    """Base class for errors raised while encoding a value."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


class TypeMismatch(EncodeError):
    """Raised when a value's shape does not match its declared type."""


class NumericOverflow(EncodeError):
    """Raised when a value does not fit its declared width."""


class InvalidScalar(EncodeError):
    """Raised when a literal cannot be read as its declared scalar kind."""


@dataclass(frozen=True)
class _Segment:
    kind: RegionKind
    data: bytes
    path: str


def pad_left(data: bytes) -> bytes:
    return data.rjust(WORD_SIZE, b"\x00")


def pad_right(data: bytes) -> bytes:
    """Zero-pad to the next word boundary."""
    remainder = len(data) % WORD_SIZE
    if remainder == 0:
        return data
    return data + bytes(WORD_SIZE - remainder)


def uint_word(value: int) -> bytes:
    return value.to_bytes(WORD_SIZE, "big")


def _to_int(value: Any, path: str) -> int:
    if isinstance(value, bool):
        raise InvalidScalar(path, f"expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not _INT_LITERAL.fullmatch(text):
            raise InvalidScalar(path, f"'{value}' is not a number")
        negative = text.startswith("-")
        digits = text.lstrip("-")
        n = int(digits, 16) if digits.startswith("0x") else int(digits)
        return -n if negative else n
    _check_not_composite(value, path)
    raise InvalidScalar(path, f"expected an integer, got {type(value).__name__}")


def _to_bytes(value: Any, path: str) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        text = value.strip()
        if not _HEX_LITERAL.fullmatch(text):
            raise InvalidScalar(path, f"'{value}' is not 0x-prefixed hex")
        return bytes.fromhex(text[2:])
    _check_not_composite(value, path)
    raise InvalidScalar(path, f"expected bytes, got {type(value).__name__}")


def _to_bool(value: Any, path: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in ("true", "false", "0", "1"):
        return value.strip().lower() in ("true", "1")
    _check_not_composite(value, path)
    raise InvalidScalar(path, f"'{value}' is not a boolean")


def _check_not_composite(value: Any, path: str) -> None:
    if isinstance(value, (Sequence, Mapping)) and not isinstance(value, (str, bytes)):
        raise TypeMismatch(path, "expected a single value, got a list")


def encode_scalar(t: AbiType, value: Any, path: str) -> bytes:
    """Encode a scalar into one word, applying its padding direction."""
    if t.kind == TypeKind.UINT:
        assert t.size is not None
        n = _to_int(value, path)
        if n < 0:
            raise NumericOverflow(path, f"{n} is negative for {canonical_type(t)}")
        if n.bit_length() > t.size:
            raise NumericOverflow(path, f"{n} does not fit in {canonical_type(t)}")
        return uint_word(n)

    if t.kind == TypeKind.INT:
        assert t.size is not None
        n = _to_int(value, path)
        bound = 1 << (t.size - 1)
        if n < -bound or n >= bound:
            raise NumericOverflow(path, f"{n} does not fit in {canonical_type(t)}")
        # two's complement across the whole word
        return uint_word(n % (1 << (WORD_SIZE * 8)))

    if t.kind == TypeKind.BOOL:
        return uint_word(int(_to_bool(value, path)))

    if t.kind == TypeKind.ADDRESS:
        if isinstance(value, str):
            if not _ADDRESS_LITERAL.fullmatch(value.strip()):
                raise InvalidScalar(path, f"'{value}' is not a 20-byte hex address")
            return pad_left(bytes.fromhex(value.strip()[2:]))
        n = _to_int(value, path)
        if n < 0 or n.bit_length() > 160:
            raise NumericOverflow(path, f"{n} does not fit in address")
        return uint_word(n)

    if t.kind == TypeKind.FIXED_BYTES:
        assert t.size is not None
        raw = _to_bytes(value, path)
        if len(raw) > t.size:
            raise NumericOverflow(path, f"{len(raw)} bytes do not fit in {canonical_type(t)}")
        return raw.ljust(WORD_SIZE, b"\x00")

    raise TypeMismatch(path, f"{canonical_type(t)} is not a scalar type")


class Encoder:
    """Encode values into the head/tail layout.

    Every parameter list, dynamic record and array body is encoded by the
    same rule: heads first, then tails in the order their owners appear.
    Tails are built before heads so offsets are known up front.
    """

    def __init__(self) -> None:
        self.sizes = SizeCalculator()

    def encode_components(self, items: list[tuple[AbiType, Any, str]]) -> list[_Segment]:
        tails: list[list[_Segment] | None] = []
        heads: list[list[_Segment] | None] = []
        for t, value, path in items:
            if self.sizes.calc_type_size(t).is_static:
                heads.append(self.encode_static(t, value, path))
                tails.append(None)
            else:
                heads.append(None)
                tails.append(self.encode_dynamic(t, value, path))

        head_size = sum(self.sizes.calc_type_size(t).head_size for t, _, _ in items)
        cursor = head_size
        segments: list[_Segment] = []
        for (_, _, path), head, tail in zip(items, heads, tails):
            if head is not None:
                segments.extend(head)
            else:
                assert tail is not None
                segments.append(_Segment(RegionKind.HEAD_SLOT, uint_word(cursor), path))
                cursor += sum(len(s.data) for s in tail)

        for tail in tails:
            if tail is not None:
                segments.extend(tail)
        return segments

    def encode_static(self, t: AbiType, value: Any, path: str) -> list[_Segment]:
        if is_scalar(t):
            return [_Segment(RegionKind.HEAD_SLOT, encode_scalar(t, value, path), path)]
        return self.encode_components(self._children(t, value, path))

    def encode_dynamic(self, t: AbiType, value: Any, path: str) -> list[_Segment]:
        if t.kind in (TypeKind.BYTES, TypeKind.STRING):
            if t.kind == TypeKind.STRING:
                if not isinstance(value, str):
                    _check_not_composite(value, path)
                    raise InvalidScalar(path, f"expected text, got {type(value).__name__}")
                raw = value.encode("utf-8")
            else:
                raw = _to_bytes(value, path)

            padded = pad_right(raw)
            segments = [_Segment(RegionKind.TAIL_LENGTH_WORD, uint_word(len(raw)), path)]
            if raw:
                segments.append(_Segment(RegionKind.TAIL_CONTENT, raw, path))
            if len(padded) > len(raw):
                segments.append(_Segment(RegionKind.TAIL_PADDING, padded[len(raw):], path))
            return segments

        children = self._children(t, value, path)
        if t.kind == TypeKind.ARRAY and t.length is None:
            count = _Segment(RegionKind.TAIL_LENGTH_WORD, uint_word(len(children)), path)
            return [count] + self.encode_components(children)
        return self.encode_components(children)

    def _children(self, t: AbiType, value: Any, path: str) -> list[tuple[AbiType, Any, str]]:
        if t.kind == TypeKind.ARRAY:
            assert t.element is not None
            if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
                raise TypeMismatch(path, f"expected a list for {canonical_type(t)}")
            if t.length is not None and len(value) != t.length:
                raise TypeMismatch(
                    path, f"expected {t.length} elements for {canonical_type(t)}, got {len(value)}"
                )
            return [(t.element, v, f"{path}[{i}]") for i, v in enumerate(value)]

        if t.kind == TypeKind.TUPLE:
            if isinstance(value, Mapping):
                missing = [c.name for c in t.components if c.name not in value]
                if missing:
                    raise TypeMismatch(path, f"missing fields {', '.join(missing)}")
                value = [value[c.name] for c in t.components]
            if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
                raise TypeMismatch(path, f"expected a record for {canonical_type(t)}")
            if len(value) != len(t.components):
                raise TypeMismatch(
                    path, f"expected {len(t.components)} fields, got {len(value)}"
                )
            return [
                (c.type, v, f"{path}.{c.name}") for c, v in zip(t.components, value)
            ]

        raise TypeMismatch(path, f"{canonical_type(t)} has no elements")


def encode(inputs: list[AbiComponent], values: Sequence[Any], selector: bytes = b"") -> Encoding:
    """Encode argument values, prefixed with an optional selector.

    Returns the byte string and the regions that tile it, in offset order.
    """
    if len(values) != len(inputs):
        raise TypeMismatch("arguments", f"expected {len(inputs)} values, got {len(values)}")

    items = [(c.type, v, c.name) for c, v in zip(inputs, values)]
    segments = Encoder().encode_components(items)

    regions: list[ByteRegion] = []
    buf = bytearray()
    if selector:
        regions.append(ByteRegion(0, len(selector), RegionKind.SELECTOR, "selector"))
        buf.extend(selector)
    for segment in segments:
        regions.append(ByteRegion(len(buf), len(segment.data), segment.kind, segment.path))
        buf.extend(segment.data)

    logger.debug("encoded %d parameters into %d bytes", len(inputs), len(buf))
    return Encoding(data=bytes(buf), regions=tuple(regions))
