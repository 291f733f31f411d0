#
# Pytest Fixtures
#

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from binsize.units import INVARIANT_UNITS, SizeConfig, UnitInfo


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture
def custom_units() -> UnitInfo:
    """Unit table with every abbreviated string used by the byte formats replaced."""
    return INVARIANT_UNITS.clone(
        short_kilo="L",
        short_decimal_kilo="l",
        short_kibi="Lj",
        short_byte="C",
        short_bytes="Cs",
        short_connector="-",
    )


@pytest.fixture
def comma_config() -> SizeConfig:
    """Config with "," as decimal point and "." as group separator."""
    return SizeConfig(decimal_point=",", group_separator=".")
