"""Parse argument text into value trees for the encoder."""

import json
import os
from typing import Any

from lark import Lark, Token
from lark.exceptions import LarkError, UnexpectedInput

from abiscope.signature.types import AbiComponent, AbiType, TypeKind

from .encoder import TypeMismatch

_g_parser: Lark | None = None


class ValueSyntaxError(RuntimeError):
    """Raised when argument text cannot be parsed."""


def _get_parser() -> Lark:
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/values.lark", encoding="utf-8") as f:
            grammar = f.read()
        _g_parser = Lark(grammar, parser="lalr")
    return _g_parser


def _to_value(node: Any) -> Any:
    if isinstance(node, Token):
        return str(node)
    if node.data == "string":
        return json.loads(node.children[0])
    if node.data == "bare":
        return str(node.children[0])
    return [_to_value(child) for child in node.children]


def parse_literal(text: str) -> Any:
    """Parse a literal into nested lists of strings."""
    try:
        return _to_value(_get_parser().parse(text))
    except UnexpectedInput as e:
        raise ValueSyntaxError(f"Cannot parse '{text}' at column {e.column}") from e
    except LarkError as e:
        raise ValueSyntaxError(f"Cannot parse '{text}'") from e


def _is_enclosed(text: str, opener: str, closer: str) -> bool:
    """Check if text is exactly one ``opener ... closer`` group."""
    if not text.startswith(opener) or not text.endswith(closer):
        return False

    depth = 0
    quoted = False
    escaped = False
    for i, ch in enumerate(text):
        if quoted:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                quoted = False
            continue
        if ch == '"':
            quoted = True
        elif ch in "[(":
            depth += 1
        elif ch in "])":
            depth -= 1
            if depth == 0 and i != len(text) - 1:
                return False
    return True


def parse_argument(text: str, t: AbiType) -> Any:
    """Read one argument's text as a value for type ``t``.

    Text and byte strings are taken verbatim. Arrays and records accept
    their outer brackets being left off, so ``1,2,3`` reads as ``[1,2,3]``
    and ``[1,2],[3]`` reads as ``[[1,2],[3]]``.
    """
    if t.kind in (TypeKind.ARRAY, TypeKind.TUPLE):
        opener, closer = ("[", "]") if t.kind == TypeKind.ARRAY else ("(", ")")
        stripped = text.strip()
        if not stripped and t.kind == TypeKind.ARRAY:
            return []
        if not _is_enclosed(stripped, opener, closer):
            stripped = f"{opener}{stripped}{closer}"
        return parse_literal(stripped)

    if t.kind == TypeKind.STRING:
        return text
    return text.strip()


def parse_arguments(inputs: list[AbiComponent], texts: list[str]) -> list[Any]:
    if len(texts) != len(inputs):
        raise TypeMismatch("arguments", f"expected {len(inputs)} values, got {len(texts)}")
    return [parse_argument(text, c.type) for c, text in zip(inputs, texts)]
