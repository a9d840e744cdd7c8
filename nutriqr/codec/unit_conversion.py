"""Metric/imperial conversion of decoded NutriQR records.

DESIGN DECISIONS:
- Fixed US customary factors (1 oz = 28.3495 g, 1 fl oz = 29.5735 ml)
- Mass only converts to mass, volume only to volume (no density guessing)
- Unknown or cross-dimension requests RAISE errors
- Energy is independent of the quantity unit and is never scaled

A record converts by converting its base quantity, then scaling every
mass-derived nutrient by new_base / old_base. The portion quantity is
converted separately from the original unit, which gives the same result
because the conversion is linear.
"""

import logging
from dataclasses import replace
from typing import Dict, Optional, Tuple

from nutriqr.data_layer.models import ExpandedRecord, Unit, UnitLike, UnitSystem

logger = logging.getLogger(__name__)


# ============================================================================
# CONVERSION TABLE
# ============================================================================
#
# Each metric unit has exactly one imperial counterpart of the same
# dimension. Values are "metric units per imperial unit".
# ============================================================================

GRAMS_PER_OUNCE = 28.3495
MILLILITRES_PER_FLUID_OUNCE = 29.5735

UNIT_COUNTERPARTS: Dict[Unit, Tuple[Unit, float]] = {
    Unit.GRAM: (Unit.OUNCE, GRAMS_PER_OUNCE),
    Unit.MILLILITRE: (Unit.FLUID_OUNCE, MILLILITRES_PER_FLUID_OUNCE),
    Unit.OUNCE: (Unit.GRAM, GRAMS_PER_OUNCE),
    Unit.FLUID_OUNCE: (Unit.MILLILITRE, MILLILITRES_PER_FLUID_OUNCE),
}


class UnsupportedConversionError(ValueError):
    """Raised when a quantity cannot be converted.

    This error is raised when:
    - The source or target unit is not a NutriQR unit
    - The target system is neither metric nor imperial
    - Mass is asked to become volume, or the other way round

    Attributes:
        from_unit: The source unit as given
        target: The requested unit or system as given
        message: Human-readable error message
    """

    def __init__(self, from_unit: object, target: object, message: str):
        self.from_unit = from_unit
        self.target = target
        self.message = message
        super().__init__(f"Unsupported conversion: {from_unit} to {target}: {message}")


def _coerce_unit(unit: UnitLike, target: object) -> Unit:
    try:
        return Unit(unit)
    except ValueError:
        raise UnsupportedConversionError(unit, target, f"unknown unit '{unit}'") from None


def _coerce_system(system: object, from_unit: object) -> UnitSystem:
    try:
        return UnitSystem(system)
    except ValueError:
        raise UnsupportedConversionError(
            from_unit, system, f"unknown unit system '{system}'"
        ) from None


def _scale(value: float, from_unit: Unit) -> float:
    _, factor = UNIT_COUNTERPARTS[from_unit]
    if from_unit.system == UnitSystem.METRIC:
        return value / factor
    return value * factor


def convert_unit(
    value: float, from_unit: UnitLike, target_system: UnitSystem
) -> Tuple[float, Unit]:
    """Convert a quantity into the given measurement system.

    Args:
        value: Quantity in from_unit
        from_unit: Unit of value
        target_system: UnitSystem (or "metric"/"imperial")

    Returns:
        (converted value, new unit); unchanged when from_unit already
        belongs to target_system

    Raises:
        UnsupportedConversionError: For an unknown unit or system
    """
    unit = _coerce_unit(from_unit, target_system)
    system = _coerce_system(target_system, from_unit)

    if unit.system == system:
        return value, unit

    counterpart, _ = UNIT_COUNTERPARTS[unit]
    return _scale(value, unit), counterpart


def convert_between_units(value: float, from_unit: UnitLike, to_unit: UnitLike) -> float:
    """Convert a quantity to a specific unit of the same dimension.

    Raises:
        UnsupportedConversionError: For unknown units, or when mass is
            converted to volume (or volume to mass)
    """
    source = _coerce_unit(from_unit, to_unit)
    target = _coerce_unit(to_unit, to_unit)

    if source.dimension != target.dimension:
        raise UnsupportedConversionError(
            from_unit,
            to_unit,
            f"cannot convert {source.dimension} to {target.dimension}",
        )
    if source == target:
        return value
    return _scale(value, source)


def _scaled(value: Optional[float], factor: float) -> Optional[float]:
    return None if value is None else value * factor


def convert_decoded_nutriqr(record: ExpandedRecord, target_system: UnitSystem) -> ExpandedRecord:
    """Express a decoded record in the metric or imperial system.

    Nutrient masses are scaled by the same factor as the base quantity;
    energy_kcal and energy_kj are left untouched. The input record is not
    re-validated and is never modified.

    Args:
        record: ExpandedRecord, typically from decode_nutriqr_string
        target_system: UnitSystem (or "metric"/"imperial")

    Returns:
        New ExpandedRecord in the target system
    """
    new_base, new_unit = convert_unit(record.base_quantity, record.unit, target_system)
    new_portion, _ = convert_unit(record.portion_quantity, record.unit, target_system)

    factor = new_base / record.base_quantity
    nutrients = record.nutrients
    scaled_nutrients = replace(
        nutrients,
        fat=nutrients.fat * factor,
        saturated_fat=nutrients.saturated_fat * factor,
        carbs=nutrients.carbs * factor,
        sugar=nutrients.sugar * factor,
        salt=nutrients.salt * factor,
        protein=nutrients.protein * factor,
        fibre=_scaled(nutrients.fibre, factor),
    )

    if new_unit != record.unit:
        logger.debug(
            "Converted record %r from %s to %s (factor %.6f)",
            record.product_name,
            record.unit.value,
            new_unit.value,
            factor,
        )

    return replace(
        record,
        unit=new_unit,
        base_quantity=new_base,
        portion_quantity=new_portion,
        nutrients=scaled_nutrients,
    )
