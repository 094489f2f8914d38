"""
Tests for multi-item payload framing.
"""

import pytest

from scopelink.remote.command_builder import to_base64
from scopelink.remote.errors import DecodeError
from scopelink.remote.packing import (
    FRAMING_VERSION,
    PACK_DELIMITER,
    decode_items,
    decode_one,
    is_nil,
    pack,
    unpack,
)


class TestUnpack:
    """Test splitting payloads into items."""

    def test_empty_payload(self):
        assert unpack("") == []
        assert decode_items("") == []

    def test_single_item(self):
        assert unpack(to_base64("one")) == [to_base64("one")]

    def test_items_stay_encoded(self):
        payload = pack(["one", "two"])
        assert unpack(payload) == [to_base64("one"), to_base64("two")]

    def test_whitespace_and_blank_items_ignored(self):
        payload = f" {to_base64('one')} ,,\n{to_base64('two')}\n"
        assert unpack(payload) == [to_base64("one"), to_base64("two")]

    def test_delimiter_outside_base64_alphabet(self):
        assert PACK_DELIMITER not in to_base64("\xfb\xef\xbe+/=" * 10)
        assert FRAMING_VERSION == 1


class TestDecodeItems:
    """Test decoding and nil filtering."""

    def test_nil_items_dropped_in_order(self):
        payload = pack(["first", "null", "", "second", "third"])
        assert decode_items(payload) == ["first", "second", "third"]

    def test_whitespace_item_is_not_nil(self):
        payload = pack(["first", "  ", "\n", " null "])
        assert decode_items(payload) == ["first", "  ", "\n", " null "]

    @pytest.mark.parametrize("value", [None, "", "null"])
    def test_is_nil(self, value):
        assert is_nil(value)

    def test_items_with_delimiters_inside_survive(self):
        payload = pack(["a,b", "c,d"])
        assert decode_items(payload) == ["a,b", "c,d"]

    def test_decode_one(self):
        assert decode_one(to_base64("hello") + "\n") == "hello"

    def test_invalid_item_raises(self):
        with pytest.raises(DecodeError):
            decode_items(f"{to_base64('ok')},@@@")
