"""Tests for argument text parsing."""

from pytest import raises

from abiscope.codec.encoder import TypeMismatch
from abiscope.codec.values import ValueSyntaxError, parse_argument, parse_arguments, parse_literal
from abiscope.signature import parse_type


def describe_parse_literal():
    def parses_nested_lists(expect):
        expect(parse_literal("[1, 2, [3, 4], []]")) == ["1", "2", ["3", "4"], []]

    def parses_records(expect):
        expect(parse_literal("(0xab, true)")) == ["0xab", "true"]

    def unescapes_quoted_strings(expect):
        expect(parse_literal('["a, b", "say \\"hi\\""]')) == ["a, b", 'say "hi"']

    def rejects_unbalanced_brackets(expect):
        with raises(ValueSyntaxError):
            parse_literal("[1, 2")


def describe_parse_argument():
    def reads_comma_separated_arrays(expect):
        expect(parse_argument("1,2,3", parse_type("uint256[]"))) == ["1", "2", "3"]
        expect(parse_argument("[1,2,3]", parse_type("uint256[]"))) == ["1", "2", "3"]

    def reads_empty_text_as_an_empty_array(expect):
        expect(parse_argument("  ", parse_type("uint256[]"))) == []

    def reads_records_without_outer_parentheses(expect):
        t = parse_type("(address,string)")
        expect(parse_argument('0x01, "hi, there"', t)) == ["0x01", "hi, there"]

    def keeps_strings_verbatim(expect):
        expect(parse_argument(" a, [b] ", parse_type("string"))) == " a, [b] "

    def strips_scalars(expect):
        expect(parse_argument(" 42 ", parse_type("uint8"))) == "42"

    def wraps_arrays_whose_first_element_is_a_list(expect):
        t = parse_type("uint256[][]")
        expect(parse_argument("[1,2],[3]", t)) == [["1", "2"], ["3"]]
        expect(parse_argument("[[1,2],[3]]", t)) == [["1", "2"], ["3"]]

    def wraps_records_whose_first_field_is_a_record(expect):
        t = parse_type("((uint8,uint8),uint8)")
        expect(parse_argument("(1,2),3", t)) == [["1", "2"], "3"]
        expect(parse_argument("((1,2),3)", t)) == [["1", "2"], "3"]

    def ignores_brackets_inside_quoted_strings(expect):
        t = parse_type("string[]")
        expect(parse_argument('["a]", "[b"]', t)) == ["a]", "[b"]
        expect(parse_argument('"a]", "[b"', t)) == ["a]", "[b"]


def describe_parse_arguments():
    def parses_each_argument_against_its_type(expect, inputs):
        values = parse_arguments(inputs("f(string s, uint8[] xs)"), ["hello", "1,2"])
        expect(values) == ["hello", ["1", "2"]]

    def rejects_wrong_argument_count(expect, inputs):
        with raises(TypeMismatch):
            parse_arguments(inputs("f(string s, uint8[] xs)"), ["hello"])
