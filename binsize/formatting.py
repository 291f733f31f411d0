"""
Binsize format strings: render byte counts as text.

A format string is a numeric format followed by an optional unit suffix:

    [numeric format][whitespace][scale letter]["i"]["B" | "byte" | "bytes"][whitespace]

Scale letters:
    K M G T P E - explicit power-of-1024 prefix
    k m g t p e - explicit power-of-1000 prefix
    A / a       - automatic, largest prefix that divides the value exactly (binary / decimal)
    S / s       - automatic, largest prefix not greater than the value (binary / decimal)

The "i" renders the IEC binary prefix ("KiB") and forces the binary factor whatever the letter case.
"B" appends the abbreviated byte unit, "byte" or "bytes" the unabbreviated one. Whitespace between
the numeric format and the unit, and after the unit, is copied verbatim.

The empty format and "G" are the default, equivalent to " AiB": "2560 MiB".

Examples:
    >>> format_size(2684354560)
    '2560 MiB'
    >>> format_size(2684354560, "#.0 SiB")
    '2.5 GiB'
    >>> format_size(1234000, "sB")
    '1.234MB'
    >>> format_size(1024, " Kbyte")
    '1 kilobyte'
"""

# Standard library -----------------------------------------------------------------------------------------------------
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext

# Local ----------------------------------------------------------------------------------------------------------------
from .scale import ScaleDirective, determine_factor, value_range
from .units import Prefix, SizeConfig, UnitInfo, UnitInfoBuilder, resolve_config

# Exact quotients of 64-bit values by 1024**6 need about 80 significant digits
DECIMAL_PRECISION = 100

_DIGIT_PATTERN = re.compile(r"[#0,]*(\.[#0]*)?")


# Classes --------------------------------------------------------------------------------------------------------------

class InvalidFormatError(ValueError):
    """The numeric part of a format string is not a valid format."""


@dataclass(frozen=True)
class FormatSuffix:
    """
    A format string split into its numeric format and unit suffix.

    Attributes:
        number_format: Numeric format applied to the scaled value.
        whitespace: Whitespace between the number and the unit, copied verbatim.
        trailing: Whitespace after the unit, copied verbatim.
        directive: How the divisor is chosen.
        iec: Render IEC binary prefixes ("Ki").
        has_byte: Append the byte unit.
        unabbreviated: Use long unit strings ("kibibytes").
    """
    number_format: str = ""
    whitespace: str = ""
    trailing: str = ""
    directive: ScaleDirective = field(default_factory=ScaleDirective.byte)
    iec: bool = False
    has_byte: bool = False
    unabbreviated: bool = False


# @formatter:off
_SCALE_LETTERS = {
    "E": ScaleDirective.explicit(Prefix.EXBI), "e": ScaleDirective.explicit(Prefix.EXA),
    "P": ScaleDirective.explicit(Prefix.PEBI), "p": ScaleDirective.explicit(Prefix.PETA),
    "T": ScaleDirective.explicit(Prefix.TEBI), "t": ScaleDirective.explicit(Prefix.TERA),
    "G": ScaleDirective.explicit(Prefix.GIBI), "g": ScaleDirective.explicit(Prefix.GIGA),
    "M": ScaleDirective.explicit(Prefix.MEBI), "m": ScaleDirective.explicit(Prefix.MEGA),
    "K": ScaleDirective.explicit(Prefix.KIBI), "k": ScaleDirective.explicit(Prefix.KILO),
    "A": ScaleDirective.auto_exact(),          "a": ScaleDirective.auto_exact(decimal=True),
    "S": ScaleDirective.auto_shortest(),       "s": ScaleDirective.auto_shortest(decimal=True),
}
# @formatter:on

DEFAULT_SUFFIX = FormatSuffix(
    whitespace=" ",
    directive=ScaleDirective.auto_exact(),
    iec=True,
    has_byte=True,
)


# Methods --------------------------------------------------------------------------------------------------------------

def parse_format(fmt: str | None) -> FormatSuffix:
    """
    Split a format string into its numeric format and unit suffix.

    Tokens are taken from the right: trailing whitespace, the byte unit ("bytes", "byte" or "b",
    case-insensitive), an optional "i", and one scale letter. An "i" only counts as the IEC marker
    when a scale letter precedes it; otherwise both stay in the numeric format.

    Examples:
        >>> parse_format("0.0 KiB").number_format
        '0.0'
        >>> parse_format("Bi").has_byte
        False
    """
    if fmt is not None and not isinstance(fmt, str):
        raise TypeError(f"format must be a str or None, got {type(fmt).__name__}")
    if not fmt or fmt == "G":
        return DEFAULT_SUFFIX

    trimmed = fmt.rstrip()
    trailing = fmt[len(trimmed):]

    has_byte = unabbreviated = False
    lowered = trimmed.lower()
    for word in ("bytes", "byte"):
        if lowered.endswith(word):
            trimmed = trimmed[:-len(word)]
            has_byte = unabbreviated = True
            break
    else:
        if lowered.endswith("b"):
            trimmed = trimmed[:-1]
            has_byte = True

    directive = ScaleDirective.byte()
    iec = False
    if trimmed:
        index = len(trimmed) - 1
        if len(trimmed) > 1 and trimmed[index] in "iI":
            iec = True
            index -= 1

        letter = trimmed[index]
        if iec:
            # "i" forces the binary factor regardless of case
            letter = letter.upper()

        found = _SCALE_LETTERS.get(letter)
        if found is None:
            iec = False
        else:
            directive = found
            trimmed = trimmed[:index]

    number_format = trimmed.rstrip()
    return FormatSuffix(
        number_format=number_format,
        whitespace=trimmed[len(number_format):],
        trailing=trailing,
        directive=directive,
        iec=iec,
        has_byte=has_byte,
        unabbreviated=unabbreviated,
    )


def format_size(
        value: int,
        fmt: str | None = None,
        provider: SizeConfig | UnitInfo | UnitInfoBuilder | None = None,
        *,
        signed: bool = True,
) -> str:
    """
    Format a byte count using the binsize format mini-language.

    Args:
        value: Byte count in the signed (or unsigned, if signed=False) 64-bit range.
        fmt: Format string, see module docstring. None or "" selects the default " AiB".
        provider: Unit table or SizeConfig; INVARIANT_UNITS with "." and "," when None.
        signed: Range of value, signed or unsigned 64-bit.

    Returns:
        str: The formatted size.

    Raises:
        OverflowError: If value is outside the 64-bit range.
        InvalidFormatError: If the numeric part of fmt is not a valid format.

    The byte unit is singular only when the rendered number equals 1, so a value that rounds
    to "1" under the numeric format uses the singular form:

        >>> format_size(1034, "0 Kbyte")
        '1 kilobyte'
    """
    config = resolve_config(provider)
    _check_range(value, signed)
    suffix = parse_format(fmt)

    divisor, prefix = determine_factor(value, suffix.directive)
    number = format_number(_divide(value, divisor), suffix.number_format, config)

    units = config.units
    abbreviated = not suffix.unabbreviated
    parts = [number, suffix.whitespace]
    if prefix is not None:
        # No "i" without a prefix: "AiB" renders 512 as "512B"
        parts.append(units.unit_scale(prefix, iec=suffix.iec, abbreviated=abbreviated))
        if suffix.has_byte:
            parts.append(units.connector(abbreviated))

    if suffix.has_byte:
        parts.append(units.byte_word(plural=not _is_one(number, config), abbreviated=abbreviated))

    parts.append(suffix.trailing)
    return "".join(parts)


def format_into(
        value: int,
        destination,
        fmt: str | None = None,
        provider: SizeConfig | UnitInfo | UnitInfoBuilder | None = None,
        *,
        signed: bool = True,
        encoding: str = "utf-8",
) -> int | None:
    """
    Format a byte count into a writable buffer.

    Args:
        value: Byte count, see format_size().
        destination: Writable buffer (bytearray, memoryview, array...), written from offset 0.
        fmt: Format string, see format_size().
        provider: Unit table or SizeConfig, see format_size().
        signed: Range of value, see format_size().
        encoding: Text encoding of the written bytes.

    Returns:
        int | None: Number of bytes written, or None if the text does not fit. The buffer is
        unchanged when the text does not fit.

    Raises:
        TypeError: If destination is not a writable buffer.
    """
    view = memoryview(destination)
    if view.readonly:
        raise TypeError(f"destination must be a writable buffer, got read-only {type(destination).__name__}")

    data = format_size(value, fmt, provider, signed=signed).encode(encoding)
    if len(data) > view.nbytes:
        return None

    view.cast("B")[:len(data)] = data
    return len(data)


def format_number(number: Decimal, number_format: str, config: SizeConfig | None = None) -> str:
    """
    Render a scaled value with a numeric format.

    Supported numeric formats:
        - "" : all digits of the exact value, no exponent, no grouping - 120563270519868.826171875
        - digit patterns of "0", "#", "," and "." - "0.0", "#,##0.##", "#.0"
          ("0" is a required digit, "#" an optional one, "," in the integer part groups thousands,
          rounding is half away from zero)
        - any other string is a Python format spec for Decimal - ".2f", ",.1f", ">10.3f"

    Raises:
        InvalidFormatError: If number_format is not a valid Python format spec.
    """
    config = config or resolve_config()
    if not number_format:
        text = format(number, "f")
    elif _is_digit_pattern(number_format):
        text = _format_digit_pattern(number, number_format)
    else:
        try:
            with localcontext() as ctx:
                ctx.prec = DECIMAL_PRECISION
                text = format(number, number_format)
        except ValueError as exc:
            raise InvalidFormatError(f"Invalid numeric format {number_format!r}: {exc}") from exc

    return _localize(text, config)


def _check_range(value: int, signed: bool) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"value must be an int, got {type(value).__name__}")

    low, high = value_range(signed)
    if not low <= value <= high:
        kind = "signed" if signed else "unsigned"
        raise OverflowError(f"Value {value} is outside the {kind} 64-bit range [{low}, {high}]")


def _divide(value: int, divisor: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return Decimal(value) / Decimal(divisor)


def _is_digit_pattern(number_format: str) -> bool:
    return (_DIGIT_PATTERN.fullmatch(number_format) is not None
            and ("0" in number_format or "#" in number_format))


def _format_digit_pattern(number: Decimal, pattern: str) -> str:
    int_pattern, _, frac_pattern = pattern.partition(".")
    min_int = int_pattern.count("0")
    max_frac = len(frac_pattern)
    min_frac = frac_pattern.rfind("0") + 1

    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        rounded = number.quantize(Decimal(1).scaleb(-max_frac), rounding=ROUND_HALF_UP)

    whole, _, frac = format(abs(rounded), "f").partition(".")
    whole = whole.lstrip("0").rjust(min_int, "0")
    frac = frac.rstrip("0").ljust(min_frac, "0")
    if not whole and not frac:
        whole = "0"

    if "," in int_pattern and len(whole) > 3:
        groups = []
        while whole:
            groups.insert(0, whole[-3:])
            whole = whole[:-3]
        whole = ",".join(groups)

    sign = "-" if rounded < 0 else ""
    return f"{sign}{whole}.{frac}" if frac else f"{sign}{whole}"


def _localize(text: str, config: SizeConfig) -> str:
    if config.decimal_point == "." and config.group_separator == ",":
        return text
    # Swap both symbols in one pass
    return "".join(
        config.decimal_point if ch == "." else config.group_separator if ch == "," else ch
        for ch in text
    )


def _is_one(number: str, config: SizeConfig) -> bool:
    """True if the rendered number reads as exactly 1."""
    text = number.strip()
    if config.group_separator:
        text = text.replace(config.group_separator, "")
    text = text.replace(config.decimal_point, ".")
    try:
        return Decimal(text) == 1
    except InvalidOperation:
        return False
