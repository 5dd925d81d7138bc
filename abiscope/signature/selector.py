"""Canonical signatures and 4-byte call selectors."""

import logging

from Crypto.Hash import keccak

from .types import AbiComponent, canonical_type

logger = logging.getLogger(__name__)

SELECTOR_SIZE = 4


def canonical_signature(name: str, inputs: list[AbiComponent]) -> str:
    """Render ``name(type,...)`` without argument names or whitespace."""
    return f"{name}({','.join(canonical_type(c.type) for c in inputs)})"


def keccak256(data: bytes) -> bytes:
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


def selector_of(canonical: str) -> bytes:
    """Return the first 4 bytes of the Keccak-256 digest of a canonical signature."""
    selector = keccak256(canonical.encode("utf-8"))[:SELECTOR_SIZE]
    logger.debug("selector of %s is 0x%s", canonical, selector.hex())
    return selector


def selector_hex(canonical: str) -> str:
    return "0x" + selector_of(canonical).hex()
