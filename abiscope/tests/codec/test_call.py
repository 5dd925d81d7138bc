"""Tests for whole-call encoding and decoding."""

from pytest import raises

from abiscope.codec import MalformedCalldata, SelectorMismatch, decode_call, encode_call
from abiscope.codec.call import parse_calldata
from abiscope.codec.types import reassemble
from abiscope.signature import MalformedSignature, parse


def describe_encode_call():
    def encodes_transfer(expect):
        result = encode_call("transfer(address to, uint256 amount)", ["0x" + "11" * 20, 7])
        expect(result.canonical) == "transfer(address,uint256)"
        expect(result.selector_hex) == "0xa9059cbb"
        expect(result.calldata_hex) == (
            "0xa9059cbb"
            + "000000000000000000000000"
            + "11" * 20
            + "00" * 31
            + "07"
        )
        expect([p.name for p in result.parts]) == ["Function Selector", "to", "amount"]

    def breaks_down_its_own_output(expect):
        result = encode_call("f(string s, uint256[] xs)", ["hi", [1, 2]])
        expect(reassemble(result.parts)) == result.calldata
        expect(result.regions[0].length) == 4

    def accepts_a_parsed_signature(expect):
        sig = parse("f(string s, uint256[] xs)")
        from_text = encode_call("f(string s, uint256[] xs)", ["hi", [1, 2]])
        from_signature = encode_call(sig, ["hi", [1, 2]])
        expect(from_signature.signature) == sig
        expect(from_signature.calldata) == from_text.calldata
        expect(from_signature.parts) == from_text.parts

    def rejects_malformed_signatures(expect):
        with raises(MalformedSignature):
            encode_call("transfer", [])


def describe_decode_call():
    def decodes_encoded_calldata(expect):
        encoded = encode_call("f((uint256 a, string b)[] rows)", [[(1, "x")]])
        decoded = decode_call("f((uint256 a, string b)[] rows)", encoded.calldata_hex)
        expect(decoded.parts) == encoded.parts
        expect(decoded.calldata) == encoded.calldata

    def rejects_a_foreign_selector(expect):
        with raises(SelectorMismatch):
            decode_call("f(uint256)", "0xdeadbeef" + "00" * 32)

    def accepts_calldata_without_prefix_or_with_whitespace(expect):
        expect(parse_calldata("a9059cbb 0001")) == bytes.fromhex("a9059cbb0001")

    def rejects_non_hex_calldata(expect):
        with raises(MalformedCalldata):
            parse_calldata("0xzz")
        with raises(MalformedCalldata):
            decode_call("f(uint256)", "0xabc")
