"""Encoding and decoding of NutriQR strings.

A NutriQR string is a compact JSON array:

    ["8720828249062","Brand|Product","g",100,1,[50,10,5,20,10,1,4]]

The encoder refuses to emit a string the decoder would reject, and the
decoder refuses any string that fails validation. Both raise NutriQRError
carrying the first violated invariant.
"""

import json
import logging
import math
from typing import Any, List

from nutriqr.codec.delimiter import (
    DEFAULT_DELIMITER,
    join_escaped_delimiter,
    split_escaped_delimiter,
)
from nutriqr.codec.errors import NutriQRError, NutriQRErrorType
from nutriqr.codec.validator import (
    CARBS,
    ENERGY_KCAL,
    FAT,
    FIBRE,
    PROTEIN,
    SALT,
    SATURATED_FAT,
    SUGAR,
    find_validation_issue,
)
from nutriqr.data_layer.models import (
    CanonicalRecord,
    ExpandedRecord,
    NutrientInput,
    Nutrients,
    Unit,
    UnitLike,
)

logger = logging.getLogger(__name__)

KJ_PER_KCAL = 4.184


def kcal_to_kj(energy_kcal: float) -> int:
    """Convert kilocalories to whole kilojoules (half rounds up)."""
    # round() rounds half to even
    return math.floor(energy_kcal * KJ_PER_KCAL + 0.5)


def _wire_number(value: Any) -> Any:
    """Write integral floats as integers (100.0 -> 100)."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _unit_value(unit: UnitLike) -> Any:
    return unit.value if isinstance(unit, Unit) else unit


def build_nutriqr_array(
    gtin13: str,
    manufacturer: str,
    product_name: str,
    unit: UnitLike,
    base_quantity: float,
    portion_factor: float,
    nutrients: NutrientInput,
) -> CanonicalRecord:
    """Assemble the six-element wire array without validating it.

    Raises:
        NutriQRError: EMPTY_MANUFACTURER_OR_PRODUCT if either name is not a string
    """
    if not isinstance(manufacturer, str) or not isinstance(product_name, str):
        raise NutriQRError(NutriQRErrorType.EMPTY_MANUFACTURER_OR_PRODUCT)

    return [
        gtin13,
        join_escaped_delimiter(manufacturer, product_name, DEFAULT_DELIMITER),
        _unit_value(unit),
        _wire_number(base_quantity),
        _wire_number(portion_factor),
        [_wire_number(value) for value in nutrients.to_array()],
    ]


def create_nutriqr_string(
    gtin13: str,
    manufacturer: str,
    product_name: str,
    unit: UnitLike,
    base_quantity: float,
    portion_factor: float,
    nutrients: NutrientInput,
) -> str:
    """Create a NutriQR string from product data.

    Live delimiters inside manufacturer and product_name are escaped before
    the two are packed into one field.

    Args:
        gtin13: GTIN-13 code, or "" when unknown
        manufacturer: Manufacturer name
        product_name: Product name
        unit: Unit of base_quantity
        base_quantity: Reference quantity the nutrients are given for
        portion_factor: Portion size as a multiple of base_quantity
        nutrients: Nutrient values per base_quantity

    Returns:
        Compact JSON array string

    Raises:
        NutriQRError: If the assembled record is not a valid NutriQR record
    """
    arr = build_nutriqr_array(
        gtin13,
        manufacturer,
        product_name,
        unit,
        base_quantity,
        portion_factor,
        nutrients,
    )

    issue = find_validation_issue(arr)
    if issue is not None:
        logger.debug("Refusing to encode record: %s", issue.error_type.value)
        raise issue.to_error()

    return json.dumps(arr, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


_PARSE_FAILED = object()


def _parse(text: str) -> Any:
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return _PARSE_FAILED


def is_nutriqr_string(text: Any) -> bool:
    """Check whether text is a valid NutriQR string.

    Never raises; any parse or validation failure yields False.
    """
    if not isinstance(text, str):
        return False
    arr = _parse(text)
    if arr is _PARSE_FAILED:
        return False
    return find_validation_issue(arr) is None


def expand_nutriqr_array(arr: List[Any]) -> ExpandedRecord:
    """Expand an already-validated wire array into an ExpandedRecord."""
    manufacturer = ""
    product_name = ""
    split = split_escaped_delimiter(arr[1], DEFAULT_DELIMITER)
    if split is not None:
        manufacturer, product_name = split

    values = arr[5]
    nutrients = Nutrients(
        energy_kcal=values[ENERGY_KCAL],
        energy_kj=kcal_to_kj(values[ENERGY_KCAL]),
        fat=values[FAT],
        saturated_fat=values[SATURATED_FAT],
        carbs=values[CARBS],
        sugar=values[SUGAR],
        salt=values[SALT],
        protein=values[PROTEIN],
        fibre=values[FIBRE] if len(values) > FIBRE else None,
    )

    return ExpandedRecord(
        gtin13=arr[0],
        manufacturer=manufacturer,
        product_name=product_name,
        unit=Unit(arr[2]),
        base_quantity=arr[3],
        portion_quantity=arr[3] * arr[4],
        nutrients=nutrients,
    )


def decode_nutriqr_string(text: Any) -> ExpandedRecord:
    """Decode a NutriQR string into an ExpandedRecord.

    Args:
        text: NutriQR string

    Returns:
        ExpandedRecord with derived portion quantity and kJ energy

    Raises:
        NutriQRError: NON_STRING_INPUT, INVALID_JSON, or the first failed
            validation check
    """
    if not isinstance(text, str):
        raise NutriQRError(NutriQRErrorType.NON_STRING_INPUT)

    arr = _parse(text)
    if arr is _PARSE_FAILED:
        logger.debug("Rejected NutriQR string: not parseable as JSON")
        raise NutriQRError(NutriQRErrorType.INVALID_JSON)

    issue = find_validation_issue(arr)
    if issue is not None:
        logger.debug("Rejected NutriQR string: %s", issue.error_type.value)
        raise issue.to_error()

    return expand_nutriqr_array(arr)
