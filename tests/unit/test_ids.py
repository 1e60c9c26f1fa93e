"""Test canonical record ID resolution."""

import pytest

from dat_icons.core.errors import InvalidIdentifier
from dat_icons.core.ids import BASE, format_id, resolve


class TestResolveHex:
    def test_short_hex_is_relative_to_base(self):
        assert resolve("0x6957") == 100690263
        assert resolve("0x0F5A") == 100667226

    def test_long_hex_is_absolute(self):
        assert resolve("0x06006957") == 100690263
        assert resolve("0x06000F5A") == 100667226

    def test_short_hex_is_signed(self):
        # 0xFFFF is -1 as a signed 16-bit value
        assert resolve("0xFFFF") == 100663295
        assert resolve("0xFFFF") == BASE - 1

    def test_long_hex_is_signed(self):
        assert resolve("0xFFFFFFFF") == -1
        assert resolve("0x80000000") == -(2**31)

    def test_prefix_and_digits_are_case_insensitive(self):
        assert resolve("0X0f5a") == resolve("0x0F5A")

    @pytest.mark.parametrize("text", ["0x1", "0x12345", "0x123", "0x1234567", "0x123456789"])
    def test_wrong_digit_count_rejected(self, text):
        with pytest.raises(InvalidIdentifier, match="4 or 8 digits"):
            resolve(text)

    @pytest.mark.parametrize("text", ["0x", "0xGGGG", "0x12 4", "0x-123"])
    def test_non_hex_digits_rejected(self, text):
        with pytest.raises(InvalidIdentifier):
            resolve(text)


class TestResolveDecimal:
    def test_short_decimal_is_relative_to_base(self):
        assert resolve("26967") == 100690263
        assert resolve("3930") == 100667226

    def test_long_decimal_is_absolute(self):
        assert resolve("100690263") == 100690263
        assert resolve("100667226") == 100667226

    def test_base_itself_is_absolute(self):
        assert resolve(str(BASE)) == BASE

    def test_negative_decimal_is_offset_from_base(self):
        assert resolve("-1234") == 100662062

    def test_zero_is_base(self):
        assert resolve("0") == BASE

    @pytest.mark.parametrize("text", ["", "text", "12.34", "1e5", " 12", "0b101"])
    def test_malformed_rejected(self, text):
        with pytest.raises(InvalidIdentifier):
            resolve(text)

    @pytest.mark.parametrize("text", ["2147483648", "-2147483649"])
    def test_out_of_int32_range_rejected(self, text):
        with pytest.raises(InvalidIdentifier, match="32-bit"):
            resolve(text)


class TestEquivalentSpellings:
    @pytest.mark.parametrize(
        "spellings, expected",
        [
            (["0x6957", "0x06006957", "26967", "100690263"], 100690263),
            (["0x0F5A", "0x06000F5A", "3930", "100667226"], 100667226),
        ],
    )
    def test_all_spellings_agree(self, spellings, expected):
        assert {resolve(s) for s in spellings} == {expected}


class TestFormatId:
    def test_formats_as_padded_upper_hex(self):
        assert format_id(100667226) == "0x06000F5A"

    def test_negative_ids_format_as_unsigned(self):
        assert format_id(-1) == "0xFFFFFFFF"
