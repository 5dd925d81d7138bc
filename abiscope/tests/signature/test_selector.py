"""Tests for canonical signatures and selectors."""

from abiscope.signature import canonical_signature, parse, selector_hex, selector_of
from abiscope.signature.selector import keccak256


def canonical(text):
    sig = parse(text)
    return canonical_signature(sig.name, sig.inputs)


def describe_canonical_signature():
    def drops_names_and_whitespace(expect):
        expect(canonical("transfer(address to, uint256 amount)")) == "transfer(address,uint256)"

    def renders_records_and_arrays(expect):
        expect(canonical("submit((address target, bytes data)[] calls, bool strict)")) == (
            "submit((address,bytes)[],bool)"
        )
        expect(canonical("f(uint[2][] grid, tuple(int a, string b)[3] rows)")) == (
            "f(uint256[2][],(int256,string)[3])"
        )

    def renders_empty_argument_list(expect):
        expect(canonical("totalSupply()")) == "totalSupply()"


def describe_selector():
    def hashes_with_keccak256(expect):
        expect(keccak256(b"").hex()) == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def matches_well_known_selectors(expect):
        expect(selector_hex("transfer(address,uint256)")) == "0xa9059cbb"
        expect(selector_hex("approve(address,uint256)")) == "0x095ea7b3"
        expect(selector_hex("balanceOf(address)")) == "0x70a08231"

    def is_four_bytes(expect):
        expect(len(selector_of("f(string)"))) == 4

    def ignores_argument_names(expect):
        expect(selector_of(canonical("transfer(address to, uint256 amount)"))) == (
            selector_of(canonical("transfer(address,uint256)"))
        )

    def is_deterministic(expect):
        expect(selector_of("f(uint8[])")) == selector_of("f(uint8[])")
