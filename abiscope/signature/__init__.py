"""Function signatures: type model, parser, sizes and selectors."""

from .parser import MalformedSignature as MalformedSignature
from .parser import parse as parse
from .parser import parse_type as parse_type
from .selector import canonical_signature as canonical_signature
from .selector import selector_hex as selector_hex
from .selector import selector_of as selector_of
from .sizes import SizeCalculator as SizeCalculator
from .sizes import SizeInfo as SizeInfo
from .sizes import SizeKind as SizeKind
from .sizes import is_dynamic as is_dynamic
from .types import *
