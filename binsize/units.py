#
# Binsize Unit Table
#

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass, fields, asdict
from enum import Enum, StrEnum, unique
from typing import Any, Self

# Third-party ----------------------------------------------------------------------------------------------------------
from frozendict import frozendict

# @formatter:off

KIBI = 1024
MEBI = 1024 * KIBI
GIBI = 1024 * MEBI
TEBI = 1024 * GIBI
PEBI = 1024 * TEBI
EXBI = 1024 * PEBI

KILO = 1000
MEGA = 1000 * KILO
GIGA = 1000 * MEGA
TERA = 1000 * GIGA
PETA = 1000 * TERA
EXA = 1000 * PETA

# @formatter:on


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class Prefix(Enum):
    """
    Unit prefixes known to the unit table.

    Binary prefixes (KIBI..EXBI) are always powers of 1024; decimal prefixes (KILO..EXA) are powers of 1000.
    Every prefix knows its counterpart in the other family, e.g. ``Prefix.KILO.binary is Prefix.KIBI``.
    """
    KIBI = "kibi"
    MEBI = "mebi"
    GIBI = "gibi"
    TEBI = "tebi"
    PEBI = "pebi"
    EXBI = "exbi"
    KILO = "kilo"
    MEGA = "mega"
    GIGA = "giga"
    TERA = "tera"
    PETA = "peta"
    EXA = "exa"

    @property
    def factor(self) -> int:
        return _PREFIX_FACTORS[self]

    @property
    def is_binary(self) -> bool:
        return self in _BINARY_TO_DECIMAL

    @property
    def binary(self) -> "Prefix":
        """The power-of-1024 prefix with the same exponent."""
        return self if self.is_binary else _DECIMAL_TO_BINARY[self]

    @property
    def decimal(self) -> "Prefix":
        """The power-of-1000 prefix with the same exponent."""
        return _BINARY_TO_DECIMAL[self] if self.is_binary else self


_PREFIX_FACTORS = frozendict({
    Prefix.KIBI: KIBI, Prefix.MEBI: MEBI, Prefix.GIBI: GIBI,
    Prefix.TEBI: TEBI, Prefix.PEBI: PEBI, Prefix.EXBI: EXBI,
    Prefix.KILO: KILO, Prefix.MEGA: MEGA, Prefix.GIGA: GIGA,
    Prefix.TERA: TERA, Prefix.PETA: PETA, Prefix.EXA: EXA,
})

_BINARY_TO_DECIMAL = frozendict({
    Prefix.KIBI: Prefix.KILO, Prefix.MEBI: Prefix.MEGA, Prefix.GIBI: Prefix.GIGA,
    Prefix.TEBI: Prefix.TERA, Prefix.PEBI: Prefix.PETA, Prefix.EXBI: Prefix.EXA,
})

_DECIMAL_TO_BINARY = frozendict({v: k for k, v in _BINARY_TO_DECIMAL.items()})

BINARY_PREFIXES = tuple(_BINARY_TO_DECIMAL.keys())
DECIMAL_PREFIXES = tuple(_BINARY_TO_DECIMAL.values())


@unique
class CompareMode(StrEnum):
    """
    How unit strings are matched when parsing.

    Attributes:
        IGNORE_CASE (str) : Case-insensitive suffix match (default) - "10kb" == "10KB"
        ORDINAL (str)     : Exact character match
    """
    IGNORE_CASE = "ignore_case"
    ORDINAL = "ordinal"


@dataclass(frozen=True)
class UnitInfo:
    """
    Frozen table of unit strings used to format and parse binary sizes.

    Instances are immutable and safe to share between threads. To customize the strings,
    get a mutable copy with to_builder(), change it and call build() again, or use clone()
    with keyword changes:

        >>> units = INVARIANT_UNITS.clone(short_byte="o", short_bytes="o")
        >>> units.byte_word(plural=True)
        'o'

    The "kilo" prefix has two abbreviated spellings: short_kilo ("K") is used for the
    1024-based kilo, short_decimal_kilo ("k") for the 1000-based one.
    """

    short_byte: str = "B"
    short_bytes: str = "B"
    short_connector: str = ""
    short_kibi: str = "Ki"
    short_mebi: str = "Mi"
    short_gibi: str = "Gi"
    short_tebi: str = "Ti"
    short_pebi: str = "Pi"
    short_exbi: str = "Ei"
    short_kilo: str = "K"
    short_decimal_kilo: str = "k"
    short_mega: str = "M"
    short_giga: str = "G"
    short_tera: str = "T"
    short_peta: str = "P"
    short_exa: str = "E"

    long_byte: str = "byte"
    long_bytes: str = "bytes"
    long_connector: str = ""
    long_kibi: str = "kibi"
    long_mebi: str = "mebi"
    long_gibi: str = "gibi"
    long_tebi: str = "tebi"
    long_pebi: str = "pebi"
    long_exbi: str = "exbi"
    long_kilo: str = "kilo"
    long_mega: str = "mega"
    long_giga: str = "giga"
    long_tera: str = "tera"
    long_peta: str = "peta"
    long_exa: str = "exa"

    compare_mode: CompareMode = CompareMode.IGNORE_CASE

    def __post_init__(self):
        for name in _UNIT_FIELDS:
            _validate_unit_string(name, getattr(self, name))
        object.__setattr__(self, "compare_mode", CompareMode(self.compare_mode))

    # ----- Lookups -----

    def prefix_string(self, prefix: Prefix, abbreviated: bool = True) -> str:
        """
        Table string for a prefix.

        The abbreviated KILO is short_decimal_kilo ("k"); use unit_scale() to get the
        "K" spelling of the 1024-based kilo.
        """
        if prefix is Prefix.KILO and abbreviated:
            return self.short_decimal_kilo
        style = "short" if abbreviated else "long"
        return getattr(self, f"{style}_{prefix.value}")

    def unit_scale(self, prefix: Prefix, *, iec: bool, abbreviated: bool = True) -> str:
        """
        Prefix string as rendered in front of the byte unit.

        Args:
            prefix: The resolved prefix, binary or decimal.
            iec: Render the IEC binary form ("Ki", "kibi") regardless of the prefix family.
            abbreviated: Short ("Ki", "K") or long ("kibi", "kilo") form.

        Examples:
            unit_scale(Prefix.KIBI, iec=False) == "K"
            unit_scale(Prefix.KILO, iec=False) == "k"
            unit_scale(Prefix.MEGA, iec=True) == "Mi"
        """
        if iec:
            return self.prefix_string(prefix.binary, abbreviated)
        if abbreviated and prefix is Prefix.KIBI:
            return self.short_kilo
        return self.prefix_string(prefix.decimal, abbreviated)

    def byte_word(self, plural: bool, abbreviated: bool = True) -> str:
        if abbreviated:
            return self.short_bytes if plural else self.short_byte
        return self.long_bytes if plural else self.long_byte

    def connector(self, abbreviated: bool = True) -> str:
        return self.short_connector if abbreviated else self.long_connector

    def compare_options(self) -> CompareMode:
        return self.compare_mode

    def strip_suffix(self, text: str, suffix: str) -> str | None:
        """
        Remove suffix from the end of text using the table's compare mode.

        Returns:
            The text without the suffix, or None if text does not end with suffix.
            An empty suffix never matches.
        """
        if not suffix or len(text) < len(suffix):
            return None

        head, tail = text[:len(text) - len(suffix)], text[len(text) - len(suffix):]
        if tail == suffix:
            return head
        if self.compare_mode is CompareMode.IGNORE_CASE and tail.casefold() == suffix.casefold():
            return head
        return None

    # ----- Copies -----

    def clone(self, **changes: Any) -> Self:
        """Frozen copy with the given fields replaced."""
        return self.to_builder(**changes).build()

    def to_builder(self, **changes: Any) -> "UnitInfoBuilder":
        """Fresh mutable copy, independent of this table."""
        return UnitInfoBuilder(self, **changes)


class UnitInfoBuilder:
    """
    Mutable counterpart of UnitInfo.

    Setters reject None and non-str unit strings; build() returns a frozen UnitInfo snapshot,
    further changes to the builder do not affect tables built before.

        >>> builder = UnitInfoBuilder(short_kilo="L", short_connector="-")
        >>> builder.short_byte = "C"
        >>> units = builder.build()
    """
    __slots__ = ("_values",)

    def __init__(self, base: UnitInfo | None = None, **changes: Any) -> None:
        if base is not None and not isinstance(base, UnitInfo):
            raise TypeError(f"base must be a UnitInfo or None, got {type(base).__name__}")
        object.__setattr__(self, "_values", asdict(base if base is not None else INVARIANT_UNITS))
        for name, value in changes.items():
            setattr(self, name, value)

    def __getattr__(self, name: str) -> Any:
        if name == "_values":
            raise AttributeError(name)
        try:
            return self._values[name]
        except KeyError:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'") from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name not in self._values:
            raise AttributeError(f"'{type(self).__name__}' object has no unit field '{name}'")
        if name == "compare_mode":
            value = CompareMode(value)
        else:
            _validate_unit_string(name, value)
        self._values[name] = value

    def __repr__(self) -> str:
        changed = {k: v for k, v in self._values.items() if getattr(INVARIANT_UNITS, k) != v}
        args = ", ".join(f"{k}={v!r}" for k, v in changed.items())
        return f"{type(self).__name__}({args})"

    def build(self) -> UnitInfo:
        return UnitInfo(**self._values)

    def copy(self) -> "UnitInfoBuilder":
        return UnitInfoBuilder(self.build())


@dataclass(frozen=True)
class SizeConfig:
    """
    Unit table plus the number symbols used when formatting and parsing.

    Attributes:
        units: Unit strings and compare mode.
        decimal_point: Separator between integer and fractional digits.
        group_separator: Thousands separator, accepted when parsing and used by grouping formats.
    """
    units: UnitInfo | None = None
    decimal_point: str = "."
    group_separator: str = ","

    def __post_init__(self):
        if self.units is None:
            object.__setattr__(self, "units", INVARIANT_UNITS)
        elif not isinstance(self.units, UnitInfo):
            raise TypeError(f"units must be a UnitInfo, got {type(self.units).__name__}")

        if not isinstance(self.decimal_point, str) or not self.decimal_point:
            raise ValueError(f"decimal_point must be a non-empty str, got {self.decimal_point!r}")
        if not isinstance(self.group_separator, str):
            raise TypeError(f"group_separator must be a str, got {type(self.group_separator).__name__}")
        if self.group_separator == self.decimal_point:
            raise ValueError(f"decimal_point and group_separator must differ, both are {self.decimal_point!r}")


# Methods --------------------------------------------------------------------------------------------------------------

def resolve_config(provider: "SizeConfig | UnitInfo | UnitInfoBuilder | None" = None) -> SizeConfig:
    """
    Normalize the provider argument of the format and parse functions.

    Raises:
        TypeError: If provider is not None, a SizeConfig, a UnitInfo or a UnitInfoBuilder.
    """
    if provider is None:
        return DEFAULT_CONFIG
    if isinstance(provider, SizeConfig):
        return provider
    if isinstance(provider, UnitInfo):
        return SizeConfig(units=provider)
    if isinstance(provider, UnitInfoBuilder):
        return SizeConfig(units=provider.build())
    raise TypeError(
        f"provider must be SizeConfig | UnitInfo | UnitInfoBuilder | None, got {type(provider).__name__}"
    )


def _validate_unit_string(name: str, value: Any) -> None:
    if value is None:
        raise TypeError(f"Unit string '{name}' cannot be None")
    if not isinstance(value, str):
        raise TypeError(f"Unit string '{name}' must be a str, got {type(value).__name__}")


_UNIT_FIELDS = tuple(f.name for f in fields(UnitInfo) if f.name != "compare_mode")

INVARIANT_UNITS = UnitInfo()
DEFAULT_CONFIG = SizeConfig(units=INVARIANT_UNITS)
