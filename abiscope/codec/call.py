"""Encode or decode a whole function call in one step."""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from abiscope.signature import canonical_signature, parse, selector_of
from abiscope.signature.types import FunctionSignature

from .decomposer import SELECTOR_SIZE, decompose
from .encoder import encode
from .types import BreakdownPart, ByteRegion

logger = logging.getLogger(__name__)

_CALLDATA = re.compile(r"(0x)?([0-9a-fA-F]{2})*")


class SelectorMismatch(RuntimeError):
    """Raised when calldata was not produced for the given signature."""


class MalformedCalldata(RuntimeError):
    """Raised when calldata text is not hex."""


@dataclass(frozen=True)
class CallBreakdown:
    """Everything produced for one call: calldata, regions and parts."""

    signature: FunctionSignature
    canonical: str
    selector: bytes
    calldata: bytes
    parts: list[BreakdownPart]
    regions: tuple[ByteRegion, ...] = field(default_factory=tuple)

    @property
    def calldata_hex(self) -> str:
        return "0x" + self.calldata.hex()

    @property
    def selector_hex(self) -> str:
        return "0x" + self.selector.hex()


def _resolve(signature: str | FunctionSignature) -> FunctionSignature:
    return parse(signature) if isinstance(signature, str) else signature


def encode_call(signature: str | FunctionSignature, values: Sequence[Any]) -> CallBreakdown:
    """Encode values and break the result back down.

    ``signature`` is declaration text or an already parsed signature.
    """
    signature = _resolve(signature)
    canonical = canonical_signature(signature.name, signature.inputs)
    selector = selector_of(canonical)

    encoding = encode(signature.inputs, values, selector=selector)
    parts = decompose(signature.inputs, encoding.data, signature=canonical)
    logger.debug("%s: %d bytes, %d parts", canonical, len(encoding.data), len(parts))

    return CallBreakdown(
        signature=signature,
        canonical=canonical,
        selector=selector,
        calldata=encoding.data,
        parts=parts,
        regions=encoding.regions,
    )


def parse_calldata(text: str) -> bytes:
    stripped = "".join(text.split())
    if not _CALLDATA.fullmatch(stripped):
        raise MalformedCalldata(f"'{text}' is not hex calldata")
    return bytes.fromhex(stripped.removeprefix("0x"))


def decode_call(signature: str | FunctionSignature, calldata: bytes | str) -> CallBreakdown:
    """Break down existing calldata against a signature."""
    signature = _resolve(signature)
    canonical = canonical_signature(signature.name, signature.inputs)
    selector = selector_of(canonical)

    data = parse_calldata(calldata) if isinstance(calldata, str) else calldata
    if data[:SELECTOR_SIZE] != selector:
        raise SelectorMismatch(
            f"calldata selector 0x{data[:SELECTOR_SIZE].hex()} does not match "
            f"{canonical} (0x{selector.hex()})"
        )

    return CallBreakdown(
        signature=signature,
        canonical=canonical,
        selector=selector,
        calldata=data,
        parts=decompose(signature.inputs, data, signature=canonical),
    )
