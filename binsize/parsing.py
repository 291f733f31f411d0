"""
Binsize parsing: read byte counts from text such as "5G", "1.5 MiB" or "10 kilobytes".

The unit is stripped from the end of the text (byte word, connector, prefix) using the unit
table's compare mode, case-insensitive by default; what remains is parsed as a decimal number
and multiplied by the prefix factor. Binary prefixes ("Ki", "kibi") are always powers of 1024.
SI-style prefixes ("K", "M", "kilo"...) are powers of 1024 by default and powers of 1000 with
ParseOptions.USE_IEC_STANDARD.

Examples:
    >>> parse_size("5G")
    5368709120
    >>> parse_size("5G", ParseOptions.USE_IEC_STANDARD)
    5000000000
    >>> parse_size("2 mebibytes", ParseOptions.ALLOW_LONG_UNITS)
    2097152
"""

# Standard library -----------------------------------------------------------------------------------------------------
import re
from decimal import Decimal, localcontext
from enum import IntFlag
from functools import lru_cache
from typing import NamedTuple

# Local ----------------------------------------------------------------------------------------------------------------
from .scale import value_range
from .units import (
    BINARY_PREFIXES, DECIMAL_PREFIXES, Prefix,
    SizeConfig, UnitInfo, UnitInfoBuilder, resolve_config,
)

_DECIMAL_PRECISION = 100


# Classes --------------------------------------------------------------------------------------------------------------

class ParseOptions(IntFlag):
    """
    Options of the parse functions.

    Attributes:
        DEFAULT               : Short units only, SI-style prefixes are powers of 1024.
        USE_IEC_STANDARD      : SI-style prefixes ("K", "kilo") are powers of 1000.
        ALLOW_LONG_UNITS      : Accept long units ("kibibytes") as well as short ones.
        ALLOW_LONG_UNITS_ONLY : Accept long units only.
    """
    DEFAULT = 0
    USE_IEC_STANDARD = 0x1
    ALLOW_LONG_UNITS = 0x2
    ALLOW_LONG_UNITS_ONLY = 0x4


_VALID_OPTIONS = ParseOptions.USE_IEC_STANDARD | ParseOptions.ALLOW_LONG_UNITS | ParseOptions.ALLOW_LONG_UNITS_ONLY


class SizeFormatError(ValueError):
    """Text is not a number followed by a known unit."""


class InvalidOptionsError(ValueError):
    """Unknown ParseOptions bits."""


class ParseFailure(NamedTuple):
    """Failed parse, carries the exception type and message the raising API reports."""
    error: type[Exception]
    message: str

    def exception(self) -> Exception:
        return self.error(self.message)


# Methods --------------------------------------------------------------------------------------------------------------

def parse_size(
        text: str,
        options: ParseOptions | int = ParseOptions.DEFAULT,
        provider: SizeConfig | UnitInfo | UnitInfoBuilder | None = None,
        *,
        signed: bool = True,
) -> int:
    """
    Parse a byte count from text.

    Args:
        text: A number with an optional unit, e.g. "123", "1.5KB", "-2 MiB". Empty or
              whitespace-only text is 0.
        options: ParseOptions flags.
        provider: Unit table or SizeConfig; INVARIANT_UNITS with "." and "," when None.
        signed: Target range, signed or unsigned 64-bit.

    Returns:
        int: The number of bytes, truncated toward zero.

    Raises:
        SizeFormatError: If text is not a number followed by a known unit.
        OverflowError: If the result is outside the target range.
        InvalidOptionsError: If options has unknown bits.
        TypeError: If text is not a str or provider is not a unit table or SizeConfig.
    """
    result = _parse(text, options, provider, signed)
    if isinstance(result, ParseFailure):
        raise result.exception()
    return result


def try_parse_size(
        text: str | None,
        options: ParseOptions | int = ParseOptions.DEFAULT,
        provider: SizeConfig | UnitInfo | UnitInfoBuilder | None = None,
        *,
        signed: bool = True,
) -> int | None:
    """
    Parse a byte count from text, None on failure.

    Same as parse_size() but format, overflow, options, text and provider type errors all return None.
    """
    result = _parse(text, options, provider, signed)
    return None if isinstance(result, ParseFailure) else result


def _parse(text, options, provider, signed: bool) -> int | ParseFailure:
    if not isinstance(text, str):
        return ParseFailure(TypeError, f"text must be a str, got {type(text).__name__}")

    options = _validate_options(options)
    if isinstance(options, ParseFailure):
        return options

    if provider is not None and not isinstance(provider, (SizeConfig, UnitInfo, UnitInfoBuilder)):
        return ParseFailure(
            TypeError,
            f"provider must be SizeConfig | UnitInfo | UnitInfoBuilder | None, got {type(provider).__name__}",
        )

    config = resolve_config(provider)
    if not text.strip():
        return 0

    factor, number_text = _strip_unit(text, options, config.units)
    number = _parse_number(number_text, config)
    if isinstance(number, ParseFailure):
        return ParseFailure(SizeFormatError, f"Invalid size {text!r}: {number.message}")

    return _scale(number, factor, signed, text)


def _validate_options(options) -> ParseOptions | ParseFailure:
    if isinstance(options, bool) or not isinstance(options, int):
        return ParseFailure(InvalidOptionsError, f"options must be ParseOptions, got {type(options).__name__}")
    if options < 0 or int(options) & ~int(_VALID_OPTIONS):
        return ParseFailure(InvalidOptionsError, f"Invalid parse options: {options!r}")
    return ParseOptions(options)


def _strip_unit(text: str, options: ParseOptions, units: UnitInfo) -> tuple[int, str]:
    """
    Remove the unit from the end of text.

    Returns:
        tuple[int, str]: The prefix factor (1 without a prefix) and the remaining number text.
    """
    allow_long = bool(options & (ParseOptions.ALLOW_LONG_UNITS | ParseOptions.ALLOW_LONG_UNITS_ONLY))
    long_only = bool(options & ParseOptions.ALLOW_LONG_UNITS_ONLY)
    use_decimal = bool(options & ParseOptions.USE_IEC_STANDARD)

    value = text.rstrip()
    with_connector = value
    unit_found = False
    if allow_long:
        stripped = _strip_first(units, value, (units.long_bytes, units.long_byte))
        if stripped is not None:
            unit_found = True
            value = with_connector = stripped
            value = _strip_optional(units, value, units.long_connector)

    if not unit_found and not long_only:
        stripped = _strip_first(units, value, (units.short_bytes, units.short_byte))
        if stripped is not None:
            value = with_connector = stripped
            value = _strip_optional(units, value, units.short_connector)

    for suffix, factor in _prefix_candidates(units, allow_long, long_only, use_decimal):
        stripped = units.strip_suffix(value, suffix)
        if stripped is not None:
            return factor, stripped

    # No prefix: the connector belongs to the number text
    return 1, with_connector


def _prefix_candidates(units: UnitInfo, allow_long: bool, long_only: bool, use_decimal: bool):
    def si_factor(prefix: Prefix) -> int:
        return prefix.factor if use_decimal else prefix.binary.factor

    if allow_long:
        for prefix in BINARY_PREFIXES:
            yield units.prefix_string(prefix, abbreviated=False), prefix.factor
        for prefix in DECIMAL_PREFIXES:
            yield units.prefix_string(prefix, abbreviated=False), si_factor(prefix)

    if not long_only:
        for prefix in BINARY_PREFIXES:
            yield units.prefix_string(prefix), prefix.factor
        yield units.short_kilo, si_factor(Prefix.KILO)
        for prefix in DECIMAL_PREFIXES[1:]:
            yield units.prefix_string(prefix), si_factor(prefix)
        yield units.short_decimal_kilo, si_factor(Prefix.KILO)


def _strip_first(units: UnitInfo, value: str, suffixes) -> str | None:
    for suffix in suffixes:
        stripped = units.strip_suffix(value, suffix)
        if stripped is not None:
            return stripped
    return None


def _strip_optional(units: UnitInfo, value: str, suffix: str) -> str:
    stripped = units.strip_suffix(value, suffix)
    return value if stripped is None else stripped


@lru_cache(maxsize=16)
def _number_regex(decimal_point: str, group_separator: str) -> re.Pattern:
    group = f"(?:{re.escape(group_separator)}[0-9]+)*" if group_separator else ""
    return re.compile(
        rf"(?P<sign>[+-]?)(?P<whole>(?:[0-9]+{group})?)(?:{re.escape(decimal_point)}(?P<frac>[0-9]*))?"
    )


def _parse_number(text: str, config: SizeConfig) -> Decimal | ParseFailure:
    stripped = text.strip()
    match = _number_regex(config.decimal_point, config.group_separator).fullmatch(stripped)
    if match is None or not (match["whole"] or match["frac"]):
        return ParseFailure(SizeFormatError, f"{stripped!r} is not a number")

    whole = match["whole"]
    if config.group_separator:
        whole = whole.replace(config.group_separator, "")
    return Decimal(f"{match['sign']}{whole or '0'}.{match['frac'] or '0'}")


def _scale(number: Decimal, factor: int, signed: bool, text: str) -> int | ParseFailure:
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        product = int(number * factor)

    low, high = value_range(signed)
    if not low <= product <= high:
        kind = "signed" if signed else "unsigned"
        return ParseFailure(OverflowError, f"Size {text!r} is outside the {kind} 64-bit range [{low}, {high}]")
    return product
