#
# Binsize - Formatting Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
from decimal import Decimal

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from binsize.formatting import (
    DEFAULT_SUFFIX,
    InvalidFormatError,
    format_into,
    format_number,
    format_size,
    parse_format,
)
from binsize.scale import INT64_MAX, INT64_MIN, MEBI, ScaleDirective, ScaleMode
from binsize.units import Prefix, SizeConfig

TARGET = 123456789012345678


# Tests ----------------------------------------------------------------------------------------------------------------

class TestParseFormat:

    def test_default(self):
        assert parse_format(None) is DEFAULT_SUFFIX
        assert parse_format("") is DEFAULT_SUFFIX
        assert parse_format("G") is DEFAULT_SUFFIX

    def test_full_suffix(self):
        suffix = parse_format("0.0 KiB  ")
        assert suffix.number_format == "0.0"
        assert suffix.whitespace == " "
        assert suffix.trailing == "  "
        assert suffix.directive == ScaleDirective.explicit(Prefix.KIBI)
        assert suffix.iec
        assert suffix.has_byte
        assert not suffix.unabbreviated

    @pytest.mark.parametrize(
        "fmt, number_format, iec, has_byte",
        [
            pytest.param("Bi", "Bi", False, False, id="i-after-b"),
            pytest.param("i", "i", False, False, id="lone-i"),
            pytest.param("B", "", False, True, id="byte-only"),
            pytest.param("#.0", "#.0", False, False, id="number-only"),
            pytest.param("0.0xiB", "0.0xi", False, True, id="i-without-letter"),
        ],
    )
    def test_no_scale(self, fmt, number_format, iec, has_byte):
        suffix = parse_format(fmt)
        assert suffix.number_format == number_format
        assert suffix.iec is iec
        assert suffix.has_byte is has_byte
        assert suffix.directive.mode is ScaleMode.BYTE

    def test_long_units(self):
        suffix = parse_format(" Kibytes")
        assert suffix.unabbreviated
        assert suffix.iec
        assert suffix.directive == ScaleDirective.explicit(Prefix.KIBI)

    def test_lowercase_letter_with_i_is_binary(self):
        assert parse_format("kIb").directive == ScaleDirective.explicit(Prefix.KIBI)
        assert parse_format("aiB").directive == ScaleDirective.auto_exact()

    def test_double_g(self):
        suffix = parse_format("GG")
        assert suffix.number_format == "G"
        assert suffix.directive == ScaleDirective.explicit(Prefix.GIBI)

    def test_type_error(self):
        with pytest.raises(TypeError, match="format must be a str"):
            parse_format(42)


class TestFormatExplicit:

    @pytest.mark.parametrize(
        "fmt, expected",
        [
            pytest.param(None, "123456789012345678 B", id="default"),
            pytest.param("B", "123456789012345678B", id="bytes"),
            pytest.param(" B", "123456789012345678 B", id="space-bytes"),
            pytest.param("KB", "120563270519868.826171875KB", id="kibi"),
            pytest.param("KiB", "120563270519868.826171875KiB", id="kibi-iec"),
            pytest.param("K", "120563270519868.826171875K", id="kibi-no-byte"),
            pytest.param("kB", "123456789012345.678kB", id="kilo"),
            pytest.param("kiB", "120563270519868.826171875KiB", id="kilo-iec-is-binary"),
            pytest.param("mB", "123456789012.345678MB", id="mega"),
            pytest.param("gB", "123456789.012345678GB", id="giga"),
            pytest.param("tB", "123456.789012345678TB", id="tera"),
            pytest.param("pB", "123.456789012345678PB", id="peta"),
            pytest.param("eB", "0.123456789012345678EB", id="exa"),
            pytest.param("  pB  ", "123.456789012345678  PB  ", id="whitespace-verbatim"),
            pytest.param("0.# PB", "109.7 PB", id="digit-pattern"),
            pytest.param("0.#SB", "109.7PB", id="shortest"),
            pytest.param(",.1f KB", "120,563,270,519,868.8 KB", id="python-spec"),
        ],
    )
    def test_target(self, fmt, expected):
        assert format_size(TARGET, fmt) == expected

    def test_fraction(self):
        assert format_size(512, "KB") == "0.5KB"

    def test_zero(self):
        assert format_size(0) == "0 B"
        assert format_size(0, "SB") == "0B"
        assert format_size(0, "AiB") == "0B"
        assert format_size(0, " AiB") == "0 B"
        assert format_size(0, "KB") == "0KB"


class TestFormatAutomatic:

    @pytest.mark.parametrize(
        "value, fmt, expected",
        [
            pytest.param(123, "AB", "123B", id="small-exact"),
            pytest.param(123, "SB", "123B", id="small-shortest"),
            pytest.param(126464, "AB", "126464B", id="not-divisible"),
            pytest.param(126464, "SB", "123.5KB", id="shortest-kibi"),
            pytest.param(129499136, "AB", "126464KB", id="exact-kibi"),
            pytest.param(129499136, "SB", "123.5MB", id="shortest-mebi"),
            pytest.param(126464, "A", "126464", id="no-byte-exact"),
            pytest.param(126464, "S", "123.5K", id="no-byte-shortest"),
            pytest.param(126464, "AiB", "126464B", id="iec-dropped-without-prefix"),
            pytest.param(126464, "SiB", "123.5KiB", id="iec-shortest"),
            pytest.param(129499136, None, "126464 KiB", id="default"),
            pytest.param(2684354560, "#.0 SiB", "2.5 GiB", id="pattern-shortest"),
        ],
    )
    def test_binary(self, value, fmt, expected):
        assert format_size(value, fmt) == expected

    @pytest.mark.parametrize(
        "value, fmt, expected",
        [
            pytest.param(1234000, "aB", "1234kB", id="exact-kilo"),
            pytest.param(1234000, " aiB", "1234000 B", id="i-makes-exact-binary"),
            pytest.param(1234000, "sB", "1.234MB", id="shortest-mega"),
            pytest.param(1234000, "siB", "1.1768341064453125MiB", id="i-makes-shortest-binary"),
        ],
    )
    def test_decimal(self, value, fmt, expected):
        assert format_size(value, fmt) == expected

    @pytest.mark.parametrize(
        "value, fmt, expected",
        [
            pytest.param(1024, "Kb", "1KB", id="byte-case"),
            pytest.param(1024, "kIb", "1KiB", id="iec-case"),
            pytest.param(1024, "Ab", "1KB", id="auto-byte-case"),
            pytest.param(1536, "sIb", "1.5KiB", id="shortest-iec-case"),
        ],
    )
    def test_case_correction(self, value, fmt, expected):
        assert format_size(value, fmt) == expected

    @pytest.mark.parametrize(
        "value, fmt, expected",
        [
            pytest.param(-2 * MEBI, "KiB", "-2048KiB", id="explicit"),
            pytest.param(-2 * MEBI, "AiB", "-2MiB", id="exact"),
            pytest.param(-1536, "SiB", "-1.5KiB", id="shortest"),
        ],
    )
    def test_negative(self, value, fmt, expected):
        assert format_size(value, fmt) == expected

    @pytest.mark.parametrize("fmt", ["A", "S", "AiB", "0.0 sB", "KB"])
    @pytest.mark.parametrize("value", [1, 1536, 2684354560, 1234000, INT64_MAX])
    def test_negative_mirrors_positive(self, value, fmt):
        assert format_size(-value, fmt) == "-" + format_size(value, fmt)


class TestFormatUnits:

    @pytest.mark.parametrize(
        "value, fmt, expected",
        [
            pytest.param(2048, " KiB", "2 Lj-Cs", id="plural"),
            pytest.param(1024, " KiB", "1 Lj-C", id="singular"),
            pytest.param(1024, " KB", "1 L-C", id="binary-kilo"),
            pytest.param(1000, " kB", "1 l-C", id="decimal-kilo"),
            pytest.param(5, " B", "5 Cs", id="no-prefix-no-connector"),
        ],
    )
    def test_custom_units(self, custom_units, value, fmt, expected):
        assert format_size(value, fmt, custom_units) == expected

    def test_builder_provider(self, custom_units):
        assert format_size(2048, " KiB", custom_units.to_builder()) == "2 Lj-Cs"

    @pytest.mark.parametrize(
        "value, fmt, expected",
        [
            pytest.param(1024, " Kbyte", "1 kilobyte", id="singular"),
            pytest.param(2048, " KiByte", "2 kibibytes", id="plural-iec"),
            pytest.param(2048, " Kibytes", "2 kibibytes", id="bytes-word"),
            pytest.param(1, " byte", "1 byte", id="byte"),
            pytest.param(5, " byte", "5 bytes", id="bytes"),
            pytest.param(0, " byte", "0 bytes", id="zero"),
            pytest.param(3 * MEBI, " Abytes", "3 megabytes", id="auto"),
        ],
    )
    def test_long_units(self, value, fmt, expected):
        assert format_size(value, fmt) == expected

    @pytest.mark.parametrize(
        "value, fmt, expected",
        [
            pytest.param(1034, "0 Kbyte", "1 kilobyte", id="rounds-to-one"),
            pytest.param(1034, "0.00 Kbyte", "1.01 kilobytes", id="stays-above-one"),
            pytest.param(1024, "0.00 Kbyte", "1.00 kilobyte", id="padded-one"),
            pytest.param(1034, ".1f Kbyte", "1.0 kilobyte", id="python-spec-one"),
        ],
    )
    def test_singular_uses_rendered_number(self, value, fmt, expected):
        assert format_size(value, fmt) == expected

    def test_localized(self, comma_config):
        assert format_size(TARGET, "0.#PB", comma_config) == "109,7PB"
        assert format_size(TARGET, "#,##0 KB", comma_config) == "120.563.270.519.869 KB"
        assert format_size(1034, "0.00 Kbyte", SizeConfig(decimal_point=",", group_separator="")) == "1,01 kilobytes"


class TestFormatErrors:

    def test_overflow(self):
        with pytest.raises(OverflowError, match="outside the signed 64-bit range"):
            format_size(INT64_MAX + 1)
        with pytest.raises(OverflowError):
            format_size(INT64_MIN - 1)
        with pytest.raises(OverflowError, match="unsigned"):
            format_size(-1, signed=False)

    def test_unsigned(self):
        assert format_size(INT64_MAX + 1, signed=False) == "8 EiB"

    def test_value_type(self):
        with pytest.raises(TypeError, match="value must be an int"):
            format_size("1")
        with pytest.raises(TypeError):
            format_size(True)

    def test_invalid_number_format(self):
        with pytest.raises(InvalidFormatError, match="Invalid numeric format 'Q'"):
            format_size(1024, "Q KB")
        with pytest.raises(ValueError):
            format_size(1024, "Q KB")

    def test_provider_type(self):
        with pytest.raises(TypeError, match="provider must be"):
            format_size(1024, None, "en-US")


class TestFormatInto:

    @pytest.mark.parametrize(
        "fmt, expected",
        [
            pytest.param("SB", "123.5KB", id="shortest"),
            pytest.param("0.00 SiB ", "123.50 KiB ", id="trailing"),
            pytest.param("0", "126464", id="number-only"),
            pytest.param("  KB  ", "123.5  KB  ", id="whitespace"),
        ],
    )
    def test_written(self, fmt, expected):
        buffer = bytearray(20)
        assert format_into(126464, buffer, fmt) == len(expected)
        assert buffer[:len(expected)].decode() == expected
        assert not any(buffer[len(expected):])

    def test_exact_fit(self):
        buffer = bytearray(7)
        assert format_into(126464, buffer, "SB") == 7
        assert buffer == b"123.5KB"

    def test_too_small(self):
        buffer = bytearray(6)
        assert format_into(126464, buffer, "SB") is None
        assert buffer == bytearray(6)

    def test_memoryview(self):
        buffer = bytearray(10)
        assert format_into(2048, memoryview(buffer)[2:], " KiB") == 5
        assert buffer[2:7] == b"2 KiB"

    def test_readonly(self):
        with pytest.raises(TypeError, match="writable buffer"):
            format_into(1, b"          ")

    def test_encoding(self, custom_units):
        units = custom_units.clone(short_kibi="Kiµ")
        buffer = bytearray(20)
        assert format_into(1024, buffer, " KiB", units) == len("1 Kiµ-C".encode("utf-8"))


class TestFormatNumber:

    @pytest.mark.parametrize(
        "number, pattern, expected",
        [
            pytest.param(Decimal("1234567.891"), "#,##0.00", "1,234,567.89", id="grouped"),
            pytest.param(Decimal("0.5"), "#.0", ".5", id="optional-integer"),
            pytest.param(Decimal("2.5"), "0", "3", id="half-up"),
            pytest.param(Decimal("-2.5"), "0", "-3", id="half-away-from-zero"),
            pytest.param(Decimal("-0.04"), "0.0", "0.0", id="no-negative-zero"),
            pytest.param(Decimal("5"), "000", "005", id="padded"),
            pytest.param(Decimal("1.5"), "0.0#", "1.5", id="optional-fraction"),
            pytest.param(Decimal("1.234"), "0.0#", "1.23", id="max-fraction"),
            pytest.param(Decimal("0"), "#", "0", id="empty-is-zero"),
            pytest.param(Decimal("999"), "#,##0", "999", id="no-group-needed"),
        ],
    )
    def test_digit_pattern(self, number, pattern, expected):
        assert format_number(number, pattern) == expected

    def test_empty_format_is_exact(self):
        assert format_number(Decimal("120563270519868.826171875"), "") == "120563270519868.826171875"

    def test_python_spec(self):
        assert format_number(Decimal("2.5"), ".2f") == "2.50"
        assert format_number(Decimal("2.5"), ">6.1f") == "   2.5"

    def test_localized(self, comma_config):
        assert format_number(Decimal("1234.5"), "#,##0.0", comma_config) == "1.234,5"
