"""Calldata encoding and breakdown."""

from .call import CallBreakdown as CallBreakdown
from .call import MalformedCalldata as MalformedCalldata
from .call import SelectorMismatch as SelectorMismatch
from .call import decode_call as decode_call
from .call import encode_call as encode_call
from .decomposer import CorruptLayout as CorruptLayout
from .decomposer import decompose as decompose
from .encoder import EncodeError as EncodeError
from .encoder import InvalidScalar as InvalidScalar
from .encoder import NumericOverflow as NumericOverflow
from .encoder import TypeMismatch as TypeMismatch
from .encoder import encode as encode
from .types import *
from .values import ValueSyntaxError as ValueSyntaxError
from .values import parse_arguments as parse_arguments
