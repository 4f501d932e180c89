"""
Physical unit handling for user-entered signal parameters.

This module defines the supported unit categories (frequency, power, time),
their multiplicative factors to the base SI unit, and the PhysicalQuantity
container used to carry a possibly-missing value together with its unit.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class UnitError(ValueError):
    """Raised when a unit or a quantity value cannot be interpreted."""

    pass


# Factors to the base SI unit of each category (Hz, W, s)
UNIT_FACTORS: Dict[str, Dict[str, float]] = {
    "frequency": {
        "Hz": 1.0,
        "kHz": 1e3,
        "MHz": 1e6,
        "GHz": 1e9,
        "THz": 1e12,
    },
    "power": {
        "mW": 1e-3,
        "W": 1.0,
        "kW": 1e3,
    },
    "time": {
        "ns": 1e-9,
        "µs": 1e-6,
        "ms": 1e-3,
        "s": 1.0,
    },
}

BASE_UNITS: Dict[str, str] = {"frequency": "Hz", "power": "W", "time": "s"}

_UNIT_ALIASES = {"us": "µs", "μs": "µs"}


def get_categories() -> List[str]:
    """Names of all supported unit categories."""
    return list(UNIT_FACTORS)


def get_units(category: str) -> List[str]:
    """List the units declared for a category, smallest first.

    Raises:
        UnitError: If the category is unknown
    """
    return list(_factors_for(category))


def _factors_for(category: str) -> Dict[str, float]:
    try:
        return UNIT_FACTORS[category]
    except KeyError:
        raise UnitError(
            f"Unknown unit category '{category}'. Supported: {get_categories()}"
        ) from None


def normalize_unit(unit: str, category: str) -> str:
    """Resolve aliases and check that a unit belongs to a category.

    Args:
        unit: Unit symbol, e.g. "MHz" or "us"
        category: Unit category the symbol must belong to

    Returns:
        Canonical unit symbol

    Raises:
        UnitError: If the unit is not declared for the category
    """
    factors = _factors_for(category)
    canonical = _UNIT_ALIASES.get(unit, unit)
    if canonical not in factors:
        raise UnitError(
            f"Unit '{unit}' is not a {category} unit. Supported: {list(factors)}"
        )
    return canonical


def unit_factor(unit: str, category: str) -> float:
    """Multiplicative factor taking a value in ``unit`` to the base unit."""
    return _factors_for(category)[normalize_unit(unit, category)]


@dataclass(frozen=True)
class PhysicalQuantity:
    """A user-entered value with its unit.

    Attributes:
        value: Entered number, or None when nothing has been entered yet
        unit: Unit symbol belonging to ``category``
        category: Unit category ("frequency", "power" or "time")
    """

    value: Optional[float] = None
    unit: str = "Hz"
    category: str = "frequency"

    def __post_init__(self):
        """Canonicalize the unit and reject units outside the category."""
        object.__setattr__(self, "unit", normalize_unit(self.unit, self.category))

    @classmethod
    def empty(cls, category: str, unit: Optional[str] = None) -> "PhysicalQuantity":
        """Create a not-yet-entered quantity, defaulting to the base unit."""
        _factors_for(category)
        return cls(value=None, unit=unit or BASE_UNITS[category], category=category)

    @property
    def is_entered(self) -> bool:
        """Whether a value has been entered (zero counts as entered)."""
        return self.value is not None

    def with_value(self, value: Optional[float]) -> "PhysicalQuantity":
        """Copy of this quantity holding a new value."""
        return replace(self, value=value)

    def with_unit(self, unit: str) -> "PhysicalQuantity":
        """Copy of this quantity expressed in another unit of the same category.

        The entered number is kept as-is, matching the unit dropdown of the
        form: switching from kHz to MHz reinterprets the same digits.
        """
        return replace(self, unit=unit)

    def to_base(self) -> Optional[float]:
        """Value in the base SI unit of the category."""
        return to_base_unit(self, self.category)

    def __str__(self) -> str:
        if self.value is None:
            return f"-- {self.unit}"
        return f"{self.value:g} {self.unit}"


def to_base_unit(quantity: PhysicalQuantity, category: str) -> Optional[float]:
    """Convert a quantity to the base SI unit of a category.

    Args:
        quantity: Quantity to convert
        category: Category whose factor table applies

    Returns:
        Value in the base unit, or None if no value was entered

    Raises:
        UnitError: If the quantity's unit is not declared for ``category``
    """
    if quantity.value is None:
        return None
    return quantity.value * unit_factor(quantity.unit, category)


def from_base_unit(value: Optional[float], unit: str, category: str) -> Optional[float]:
    """Express a base-unit value in ``unit``. Inverse of :func:`to_base_unit`."""
    if value is None:
        return None
    return value / unit_factor(unit, category)


def _parse_number(text: Optional[str]) -> Optional[float]:
    stripped = text.strip() if text is not None else ""
    if stripped == "":
        return None

    try:
        value = float(stripped)
    except ValueError:
        raise UnitError(f"'{text}' is not a numeric value") from None
    if math.isnan(value):
        raise UnitError(f"'{text}' is not a numeric value")
    return value


def parse_quantity_text(text: str, unit: str, category: str) -> PhysicalQuantity:
    """Build a quantity from raw input text.

    Empty text means "not entered". Anything else must parse as a number.

    Args:
        text: Raw text typed by the user
        unit: Selected unit
        category: Unit category

    Returns:
        PhysicalQuantity for the text

    Raises:
        UnitError: If the text is not a number
    """
    value = _parse_number(text)
    if value is not None:
        logger.debug(f"Parsed quantity {value} {unit} ({category})")
    return PhysicalQuantity(value=value, unit=unit, category=category)


def parse_count_text(text: str) -> Optional[float]:
    """Parse a unitless count such as the number of subcarriers.

    Returns None for empty text. Integrality is left to validation.

    Raises:
        UnitError: If the text is not a number
    """
    return _parse_number(text)
