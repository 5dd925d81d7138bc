"""Tests for static/dynamic classification."""

from abiscope.signature import parse, parse_type
from abiscope.signature.sizes import SizeCalculator, SizeKind, head_words, is_dynamic


def describe_scalar_sizes():
    def scalars_are_one_static_word(expect):
        for token in ["uint8", "int256", "bool", "address", "bytes32"]:
            info = SizeCalculator().calc_type_size(parse_type(token))
            expect(info.kind) == SizeKind.STATIC
            expect(info.head_words) == 1

    def strings_and_bytes_are_dynamic(expect):
        expect(is_dynamic(parse_type("string"))) == True
        expect(is_dynamic(parse_type("bytes"))) == True


def describe_array_sizes():
    def dynamic_arrays_are_always_dynamic(expect):
        expect(is_dynamic(parse_type("uint256[]"))) == True
        expect(head_words(parse_type("uint256[]"))) == 1

    def fixed_arrays_of_static_elements_are_inlined(expect):
        info = SizeCalculator().calc_type_size(parse_type("uint256[3]"))
        expect(info.kind) == SizeKind.STATIC
        expect(info.head_words) == 3
        expect(info.head_size) == 96

    def fixed_arrays_of_dynamic_elements_are_dynamic(expect):
        expect(is_dynamic(parse_type("string[2]"))) == True
        expect(head_words(parse_type("string[2]"))) == 1


def describe_record_sizes():
    def static_records_sum_their_fields(expect):
        expect(is_dynamic(parse_type("(uint256,bool)"))) == False
        expect(head_words(parse_type("((uint8,uint8),address)"))) == 3
        expect(head_words(parse_type("(uint8,uint8)[2]"))) == 4

    def records_with_a_dynamic_field_are_dynamic(expect):
        expect(is_dynamic(parse_type("(uint256,string)"))) == True
        expect(is_dynamic(parse_type("(uint256,(bool,bytes))"))) == True
        expect(head_words(parse_type("(uint256,string)"))) == 1

    def head_size_counts_every_parameter(expect):
        sig = parse("f(uint256 a, (uint8,bool) b, string c, uint8[2] d)")
        expect(SizeCalculator().head_size(sig.inputs)) == 32 * (1 + 2 + 1 + 2)
