import pytest

from minikernel.numbers import atoi, format_hex, hex_to_int, log2, pow2


def test_atoi_parses_decimal_digits():
    assert atoi("1024") == 1024
    assert atoi("0") == 0
    assert atoi("") == 0


def test_atoi_leading_zeros():
    assert atoi("007") == atoi("7")


@pytest.mark.parametrize("text", ["12a", "-1", " 5", "1.0"])
def test_atoi_rejects_non_digits(text):
    with pytest.raises(ValueError):
        atoi(text)


def test_log2_inverts_pow2():
    for exponent in range(19):
        assert log2(pow2(exponent)) == exponent


def test_log2_rounds_down():
    for exponent in range(1, 19):
        assert log2(pow2(exponent + 1) - 1) == exponent


def test_log2_of_zero_and_one():
    assert log2(0) == 0
    assert log2(1) == 0


def test_log2_rejects_negative():
    with pytest.raises(ValueError):
        log2(-4)


def test_pow2_page_size():
    assert pow2(12) == 0x1000


def test_pow2_rejects_negative():
    with pytest.raises(ValueError):
        pow2(-1)


@pytest.mark.parametrize("value", [0, 1, 110, 0x3F000000, 0xFFFFFFFF, 0x9000000])
def test_hex_round_trip(value):
    assert hex_to_int(format_hex(value)) == value


def test_format_hex_pads_and_uppercases():
    assert format_hex(0x3F000000) == "3F000000"
    text = format_hex(0xABCDEF)
    assert len(text) == 8
    assert text == text.upper()
    assert text.endswith("ABCDEF")


def test_format_hex_keeps_low_word_only():
    assert format_hex((1 << 32) | 5) == format_hex(5)


def test_hex_to_int_header_size():
    assert hex_to_int("0000006E") == 110
    assert hex_to_int(b"0000006e") == 110


def test_hex_to_int_reads_only_eight_digits():
    assert hex_to_int("000000FFzzzz") == 0xFF


def test_hex_to_int_rejects_short_field():
    with pytest.raises(ValueError):
        hex_to_int("ABC")


def test_hex_to_int_rejects_bad_digit():
    with pytest.raises(ValueError):
        hex_to_int("0000G000")