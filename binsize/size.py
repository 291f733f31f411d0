#
# Binsize Size Values
#

# Standard library -----------------------------------------------------------------------------------------------------
import math
import numbers
from dataclasses import dataclass
from decimal import Decimal, localcontext
from typing import Any, ClassVar, Self

# Local ----------------------------------------------------------------------------------------------------------------
from .formatting import format_into, format_size
from .parsing import ParseOptions, parse_size, try_parse_size
from .scale import value_range
from .units import SizeConfig, UnitInfo, UnitInfoBuilder, KIBI, MEBI, GIBI, TEBI, PEBI, EXBI

Provider = SizeConfig | UnitInfo | UnitInfoBuilder | None


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class BinarySize:
    """
    A number of bytes in the signed 64-bit range.

    Sizes behave like ints in arithmetic and comparisons, with results checked against the
    64-bit range, and support the binsize format mini-language in format() and f-strings:

        >>> size = BinarySize.from_gibi(2.5)
        >>> str(size)
        '2560 MiB'
        >>> f"{size:0.0 SiB}"
        '2.5 GiB'
        >>> BinarySize.parse("2560MiB") == size
        True

    Attributes:
        value: The number of bytes.
    """

    value: int = 0

    KIBI: ClassVar[int] = KIBI
    MEBI: ClassVar[int] = MEBI
    GIBI: ClassVar[int] = GIBI
    TEBI: ClassVar[int] = TEBI
    PEBI: ClassVar[int] = PEBI
    EXBI: ClassVar[int] = EXBI

    signed: ClassVar[bool] = True
    parse_options: ClassVar[ParseOptions] = ParseOptions.DEFAULT

    def __post_init__(self):
        value = self.value
        if isinstance(value, BinarySize):
            value = value.value
        elif isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{type(self).__name__} value must be an int, got {type(value).__name__}")

        low, high = value_range(self.signed)
        if not low <= value <= high:
            raise OverflowError(f"{value} is outside the {type(self).__name__} range [{low}, {high}]")
        object.__setattr__(self, "value", value)

    # ----- Factories -----

    @classmethod
    def from_kibi(cls, number: int | float | Decimal) -> Self:
        """Size of number kibibytes, truncated toward zero: from_kibi(2.5) == 2560 bytes."""
        return cls._from_scale(number, KIBI)

    @classmethod
    def from_mebi(cls, number: int | float | Decimal) -> Self:
        return cls._from_scale(number, MEBI)

    @classmethod
    def from_gibi(cls, number: int | float | Decimal) -> Self:
        return cls._from_scale(number, GIBI)

    @classmethod
    def from_tebi(cls, number: int | float | Decimal) -> Self:
        return cls._from_scale(number, TEBI)

    @classmethod
    def from_pebi(cls, number: int | float | Decimal) -> Self:
        return cls._from_scale(number, PEBI)

    @classmethod
    def from_exbi(cls, number: int | float | Decimal) -> Self:
        return cls._from_scale(number, EXBI)

    @classmethod
    def _from_scale(cls, number: int | float | Decimal, factor: int) -> Self:
        if isinstance(number, bool) or not isinstance(number, (int, float, Decimal)):
            raise TypeError(f"number must be int | float | Decimal, got {type(number).__name__}")
        if isinstance(number, float) and not math.isfinite(number):
            raise ValueError(f"Cannot create a size from {number}")
        if isinstance(number, Decimal) and not number.is_finite():
            raise ValueError(f"Cannot create a size from {number}")

        with localcontext() as ctx:
            ctx.prec = 100
            return cls(int(Decimal(number) * factor))

    @classmethod
    def parse(cls, text: str, options: ParseOptions | int | None = None, provider: Provider = None) -> Self:
        """
        Parse a size such as "123", "1.5KB", "2 GiB" or "-4M".

        Args:
            text: Number with an optional unit. Empty text is zero.
            options: ParseOptions, defaults to the class parse_options.
            provider: Unit table or SizeConfig.

        Raises:
            SizeFormatError: If text is not a size.
            OverflowError: If the size does not fit the range of the class.
        """
        options = cls.parse_options if options is None else options
        return cls(parse_size(text, options, provider, signed=cls.signed))

    @classmethod
    def try_parse(cls, text: str | None, options: ParseOptions | int | None = None,
                  provider: Provider = None) -> Self | None:
        """Like parse(), None if text is not a valid size for this class."""
        options = cls.parse_options if options is None else options
        value = try_parse_size(text, options, provider, signed=cls.signed)
        return None if value is None else cls(value)

    # ----- Scaled views -----

    @property
    def as_kibi(self) -> float:
        return self.value / KIBI

    @property
    def as_mebi(self) -> float:
        return self.value / MEBI

    @property
    def as_gibi(self) -> float:
        return self.value / GIBI

    @property
    def as_tebi(self) -> float:
        return self.value / TEBI

    @property
    def as_pebi(self) -> float:
        return self.value / PEBI

    @property
    def as_exbi(self) -> float:
        return self.value / EXBI

    # ----- Formatting -----

    def format(self, fmt: str | None = None, provider: Provider = None) -> str:
        return format_size(self.value, fmt, provider, signed=self.signed)

    def format_into(self, destination, fmt: str | None = None, provider: Provider = None,
                    *, encoding: str = "utf-8") -> int | None:
        """Write the formatted size into a writable buffer, None if it does not fit."""
        return format_into(self.value, destination, fmt, provider, signed=self.signed, encoding=encoding)

    def __format__(self, format_spec: str) -> str:
        return self.format(format_spec)

    def __str__(self) -> str:
        return self.format()

    # ----- Conversions -----

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    def __bool__(self) -> bool:
        return self.value != 0

    def __hash__(self) -> int:
        return hash(self.value)

    # ----- Comparisons -----

    def __eq__(self, other: Any) -> bool:
        other = _compared(other)
        return NotImplemented if other is NotImplemented else self.value == other

    def __lt__(self, other: Any) -> bool:
        other = _compared(other)
        return NotImplemented if other is NotImplemented else self.value < other

    def __le__(self, other: Any) -> bool:
        other = _compared(other)
        return NotImplemented if other is NotImplemented else self.value <= other

    def __gt__(self, other: Any) -> bool:
        other = _compared(other)
        return NotImplemented if other is NotImplemented else self.value > other

    def __ge__(self, other: Any) -> bool:
        other = _compared(other)
        return NotImplemented if other is NotImplemented else self.value >= other

    # ----- Arithmetic -----

    def __add__(self, other: Any) -> Self:
        other = _operand(other)
        return NotImplemented if other is NotImplemented else type(self)(self.value + other)

    def __radd__(self, other: Any) -> Self:
        return self.__add__(other)

    def __sub__(self, other: Any) -> Self:
        other = _operand(other)
        return NotImplemented if other is NotImplemented else type(self)(self.value - other)

    def __rsub__(self, other: Any) -> Self:
        other = _operand(other)
        return NotImplemented if other is NotImplemented else type(self)(other - self.value)

    def __mul__(self, other: Any) -> Self:
        other = _operand(other)
        return NotImplemented if other is NotImplemented else type(self)(self.value * other)

    def __rmul__(self, other: Any) -> Self:
        return self.__mul__(other)

    def __floordiv__(self, other: Any) -> Self:
        other = _operand(other)
        return NotImplemented if other is NotImplemented else type(self)(self.value // other)

    def __mod__(self, other: Any) -> Self:
        other = _operand(other)
        return NotImplemented if other is NotImplemented else type(self)(self.value % other)

    def __rfloordiv__(self, other: Any) -> Self:
        other = _operand(other)
        return NotImplemented if other is NotImplemented else type(self)(other // self.value)

    def __rmod__(self, other: Any) -> Self:
        other = _operand(other)
        return NotImplemented if other is NotImplemented else type(self)(other % self.value)

    def __truediv__(self, other: Any) -> float:
        """Ratio of two sizes, or of a size and a number, as a float."""
        other = _operand(other)
        return NotImplemented if other is NotImplemented else self.value / other

    def __rtruediv__(self, other: Any) -> float:
        other = _operand(other)
        return NotImplemented if other is NotImplemented else other / self.value

    def __neg__(self) -> Self:
        return type(self)(-self.value)

    def __pos__(self) -> Self:
        return self

    def __abs__(self) -> Self:
        return type(self)(abs(self.value))

    def __lshift__(self, shift: int) -> Self:
        return type(self)(self.value << shift)

    def __rshift__(self, shift: int) -> Self:
        return type(self)(self.value >> shift)

    def __rlshift__(self, other: Any) -> Self:
        other = _operand(other)
        return NotImplemented if other is NotImplemented else type(self)(other << self.value)

    def __rrshift__(self, other: Any) -> Self:
        other = _operand(other)
        return NotImplemented if other is NotImplemented else type(self)(other >> self.value)

    def __and__(self, other: Any) -> Self:
        other = _operand(other)
        return NotImplemented if other is NotImplemented else type(self)(self.value & other)

    def __or__(self, other: Any) -> Self:
        other = _operand(other)
        return NotImplemented if other is NotImplemented else type(self)(self.value | other)

    def __xor__(self, other: Any) -> Self:
        other = _operand(other)
        return NotImplemented if other is NotImplemented else type(self)(self.value ^ other)

    __rand__ = __and__
    __ror__ = __or__
    __rxor__ = __xor__

    def __invert__(self) -> Self:
        if self.signed:
            return type(self)(~self.value)
        return type(self)(~self.value & value_range(False)[1])


class UBinarySize(BinarySize):
    """
    A number of bytes in the unsigned 64-bit range.

        >>> UBinarySize.parse("16EiB")
        Traceback (most recent call last):
        OverflowError: ...
        >>> UBinarySize.parse("15EiB").value
        17293822569102704640
    """
    signed: ClassVar[bool] = False


class IecBinarySize(BinarySize):
    """Signed size whose parse() reads "KB", "MB"... as powers of 1000, while "KiB", "MiB"... stay binary."""
    parse_options: ClassVar[ParseOptions] = ParseOptions.USE_IEC_STANDARD


class UIecBinarySize(UBinarySize):
    """Unsigned size whose parse() reads "KB", "MB"... as powers of 1000, while "KiB", "MiB"... stay binary."""
    parse_options: ClassVar[ParseOptions] = ParseOptions.USE_IEC_STANDARD


# Methods --------------------------------------------------------------------------------------------------------------

def _operand(other: Any) -> int:
    if isinstance(other, BinarySize):
        return other.value
    if isinstance(other, int) and not isinstance(other, bool):
        return other
    return NotImplemented


def _compared(other: Any) -> numbers.Real | Decimal:
    """Comparison operand: sizes and any real number, the way int compares with float."""
    if isinstance(other, BinarySize):
        return other.value
    if isinstance(other, (numbers.Real, Decimal)):
        return other
    return NotImplemented


# Module Constants -----------------------------------------------------------------------------------------------------

for _cls in (BinarySize, UBinarySize, IecBinarySize, UIecBinarySize):
    _low, _high = value_range(_cls.signed)
    _cls.ZERO = _cls(0)
    _cls.MIN_VALUE = _cls(_low)
    _cls.MAX_VALUE = _cls(_high)

del _cls, _low, _high
