"""
Binsize Scale Resolver

Select the divisor and unit prefix used to display a byte count: a fixed prefix, the largest
prefix that divides the value exactly (auto-exact), or the largest prefix not greater than the
value (auto-shortest).
"""

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass
from enum import StrEnum, unique

# Local ----------------------------------------------------------------------------------------------------------------
from .units import (
    BINARY_PREFIXES, DECIMAL_PREFIXES, Prefix,
    KIBI, MEBI, GIBI, TEBI, PEBI, EXBI,
    KILO, MEGA, GIGA, TERA, PETA, EXA,
)

__all__ = [
    "KIBI", "MEBI", "GIBI", "TEBI", "PEBI", "EXBI",
    "KILO", "MEGA", "GIGA", "TERA", "PETA", "EXA",
    "INT64_MIN", "INT64_MAX", "UINT64_MAX",
    "BINARY_FACTORS", "DECIMAL_FACTORS",
    "ScaleMode", "ScaleDirective",
    "determine_factor", "value_range",
]

INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1
UINT64_MAX = 2 ** 64 - 1

# Largest first, the scan order of the automatic modes
BINARY_FACTORS = tuple((p.factor, p) for p in reversed(BINARY_PREFIXES))
DECIMAL_FACTORS = tuple((p.factor, p) for p in reversed(DECIMAL_PREFIXES))


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class ScaleMode(StrEnum):
    """
    Scaling directive kinds.

    Attributes:
        BYTE (str)          : No scaling, divisor 1
        EXPLICIT (str)      : Caller-selected prefix
        AUTO_EXACT (str)    : Largest prefix with zero remainder - 2560 MiB
        AUTO_SHORTEST (str) : Largest prefix not greater than the value - 2.5 GiB
    """
    BYTE = "byte"
    EXPLICIT = "explicit"
    AUTO_EXACT = "auto_exact"
    AUTO_SHORTEST = "auto_shortest"


@dataclass(frozen=True)
class ScaleDirective:
    """
    How to choose the divisor for a value.

    Attributes:
        mode: The directive kind.
        prefix: The prefix of an EXPLICIT directive, None otherwise.
        decimal: For automatic modes, scan the power-of-1000 prefixes instead of the power-of-1024 ones.
    """
    mode: ScaleMode = ScaleMode.BYTE
    prefix: Prefix | None = None
    decimal: bool = False

    def __post_init__(self):
        object.__setattr__(self, "mode", ScaleMode(self.mode))
        if self.mode is ScaleMode.EXPLICIT:
            if not isinstance(self.prefix, Prefix):
                raise ValueError(f"EXPLICIT directive requires a Prefix, got {self.prefix!r}")
            object.__setattr__(self, "decimal", not self.prefix.is_binary)
        elif self.prefix is not None:
            raise ValueError(f"Only EXPLICIT directives take a prefix, got mode {self.mode.value!r}")

    @classmethod
    def byte(cls) -> "ScaleDirective":
        return cls(ScaleMode.BYTE)

    @classmethod
    def explicit(cls, prefix: Prefix) -> "ScaleDirective":
        return cls(ScaleMode.EXPLICIT, prefix=prefix)

    @classmethod
    def auto_exact(cls, decimal: bool = False) -> "ScaleDirective":
        return cls(ScaleMode.AUTO_EXACT, decimal=decimal)

    @classmethod
    def auto_shortest(cls, decimal: bool = False) -> "ScaleDirective":
        return cls(ScaleMode.AUTO_SHORTEST, decimal=decimal)

    @property
    def is_auto(self) -> bool:
        return self.mode in (ScaleMode.AUTO_EXACT, ScaleMode.AUTO_SHORTEST)


# Methods --------------------------------------------------------------------------------------------------------------

def determine_factor(magnitude: int, directive: ScaleDirective) -> tuple[int, Prefix | None]:
    """
    Resolve a scale directive to a divisor and its prefix.

    Automatic directives scan the prefixes from the largest (Exbi/Exa) down to the smallest
    (Kibi/kilo) and fall back to the byte unit (1, None). The sign of magnitude is ignored, so
    negative values pick the same prefix as their absolute value.

    Args:
        magnitude: The byte count to scale.
        directive: The scale directive.

    Returns:
        tuple[int, Prefix | None]: The divisor and the selected prefix, None for the byte unit.

    Examples:
        >>> determine_factor(2684354560, ScaleDirective.auto_exact())
        (1048576, <Prefix.MEBI: 'mebi'>)
        >>> determine_factor(2684354560, ScaleDirective.auto_shortest())
        (1073741824, <Prefix.GIBI: 'gibi'>)
        >>> determine_factor(1234000, ScaleDirective.auto_exact(decimal=True))
        (1000, <Prefix.KILO: 'kilo'>)
    """
    if isinstance(magnitude, bool) or not isinstance(magnitude, int):
        raise TypeError(f"magnitude must be an int, got {type(magnitude).__name__}")
    if not isinstance(directive, ScaleDirective):
        raise TypeError(f"directive must be a ScaleDirective, got {type(directive).__name__}")

    if directive.mode is ScaleMode.BYTE:
        return 1, None
    if directive.mode is ScaleMode.EXPLICIT:
        return directive.prefix.factor, directive.prefix

    absolute = abs(magnitude)
    exact = directive.mode is ScaleMode.AUTO_EXACT
    for factor, prefix in (DECIMAL_FACTORS if directive.decimal else BINARY_FACTORS):
        if absolute >= factor and (not exact or absolute % factor == 0):
            return factor, prefix

    return 1, None


def value_range(signed: bool = True) -> tuple[int, int]:
    """Inclusive bounds of the signed or unsigned 64-bit domain."""
    return (INT64_MIN, INT64_MAX) if signed else (0, UINT64_MAX)
