import base64
import zlib
from decimal import Decimal

import pytest

from keypager import InvalidArgument, InvalidToken, PageToken
from keypager.core.token import compute_checksum, from_base36, to_base36


class TestEncoding:
    def test_integer_order_value_is_base36(self):
        token = PageToken(690948000, 1, zlib.crc32(b"9c5f6ff7-b28f-48fb-ba47-8bcc3b235bed"))
        assert str(token) == "bfdew0_1_1jvdwz4"

    def test_string_order_value_is_prefixed_base64(self):
        token = PageToken("9c5f6ff7-b28f-48fb-ba47-8bcc3b235bed", 1, 0)
        order_part, offset, checksum = str(token).split("_")
        assert order_part == "=" + base64.b64encode(b"9c5f6ff7-b28f-48fb-ba47-8bcc3b235bed").decode()
        assert offset == "1"
        assert checksum == "0"

    def test_negative_integer(self):
        assert str(PageToken(-36, 2, 35)) == "-10_2_z"

    @pytest.mark.parametrize(
        "order_value, offset, checksum",
        [
            (0, 1, 0),
            (1262338074, 3, 3632233996),
            (-5, 1, 1),
            ("b4902bde-28d2-4ff9-8971-8bfeb3e943c1", 7, 0xFFFFFFFF),
            ("with_underscores_and ünicode", 2, 12345),
            ("123", 1, 9),
            ("", 1, 1),
        ],
    )
    def test_round_trip(self, order_value, offset, checksum):
        token = PageToken(order_value, offset, checksum)
        assert PageToken.parse(str(token)) == token


class TestParse:
    def test_parse(self):
        token = PageToken.parse("bfdew0_1_1jvdwz4")
        assert token.order_value == 690948000
        assert token.offset == 1
        assert token.checksum == zlib.crc32(b"9c5f6ff7-b28f-48fb-ba47-8bcc3b235bed")

    def test_parse_is_case_insensitive_for_base36(self):
        assert PageToken.parse("BFDEW0_1_1JVDWZ4") == PageToken.parse("bfdew0_1_1jvdwz4")

    @pytest.mark.parametrize(
        "raw",
        ["", "bfdew0", "bfdew0_1", "bfdew0_1_2_3", "bf!ew0_1_1", "bfdew0_x_1", "bfdew0_1_!!", "=not base64!_1_1", "=/w==_1_1", "a_1_zzzzzzzz"],
    )
    def test_malformed(self, raw):
        with pytest.raises(InvalidToken):
            PageToken.parse(raw)

    @pytest.mark.parametrize("raw", ["bfdew0_0_1jvdwz4", "bfdew0_-3_1jvdwz4"])
    def test_offset_below_one(self, raw):
        with pytest.raises(InvalidArgument, match="Offset cannot be less than 1"):
            PageToken.parse(raw)

    def test_invalid_token_is_a_value_error(self):
        with pytest.raises(ValueError):
            PageToken.parse("nope")


class TestIsValid:
    @pytest.mark.parametrize("raw", ["bfdew0_1_1jvdwz4", "BFDEW0_1_x", "=abc_1_1", "_1_1", "=_x_y"])
    def test_valid_shapes(self, raw):
        assert PageToken.is_valid(raw) is True

    @pytest.mark.parametrize("raw", ["", "bfdew0_1", "a_b_c_d", "bf-ew0_1_1", "-10_1_1"])
    def test_invalid_shapes(self, raw):
        assert PageToken.is_valid(raw) is False

    def test_from_string(self):
        assert PageToken.from_string(None) is None
        assert PageToken.from_string("") is None
        assert PageToken.from_string("garbage") is None
        assert PageToken.from_string("bfdew0_1_1jvdwz4") == PageToken.parse("bfdew0_1_1jvdwz4")

    def test_from_string_still_raises_on_unparsable_segments(self):
        with pytest.raises(InvalidToken):
            PageToken.from_string("bfdew0_x_1")


class TestConstruction:
    def test_offset_must_be_positive(self):
        with pytest.raises(InvalidArgument):
            PageToken(1, 0, 0)

    def test_checksum_must_fit_32_bits(self):
        with pytest.raises(InvalidArgument):
            PageToken(1, 1, 2**32)

    @pytest.mark.parametrize("order_value", [2.5, 3.0, Decimal("1.5"), True])
    def test_non_integer_numbers_are_rejected(self, order_value):
        with pytest.raises(InvalidArgument, match="cannot be carried by a token"):
            PageToken(order_value, 1, 0)

    def test_tokens_are_immutable(self):
        token = PageToken(1, 1, 1)
        with pytest.raises(AttributeError):
            token.offset = 2


class TestHelpers:
    @pytest.mark.parametrize("value", [0, 1, 35, 36, 690948000, 2**40])
    def test_base36(self, value):
        assert from_base36(to_base36(value)) == value
        assert to_base36(value) == to_base36(value).lower()

    def test_checksum_joins_string_forms_with_commas(self):
        assert compute_checksum(["a", 1, "b"]) == zlib.crc32(b"a,1,b")

    def test_checksum_depends_on_order(self):
        assert compute_checksum(["a", "b"]) != compute_checksum(["b", "a"])
