"""Strict, deterministic validation of raw NutriQR arrays.

The validator inspects a decoded wire array and reports the first invariant
it violates, or nothing when the array is a legal NutriQR record. Checks run
in this fixed order and stop at the first failure:

 1. top-level array has exactly 6 elements
 2. GTIN-13 is "" or 13 decimal digits
 3. brand/product is a non-empty string
 4. brand/product has exactly one live delimiter
    (both parts non-empty after trimming)
 5. unit is one of g, ml, oz, fl
 6. base quantity is a finite positive number
 7. portion factor is a finite positive number
 8. nutrients array has 7 or 8 elements, each finite and >= 0
 9. sugar <= carbs
10. saturated fat <= fat
11. energy + fat + carbs + salt + protein (+ fibre) <= base quantity

The order is part of the contract: callers may assert on which error a
multiply-invalid array produces. Validation never mutates its input and has
no side effects.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple

from nutriqr.codec.delimiter import DEFAULT_DELIMITER, split_escaped_delimiter
from nutriqr.codec.errors import NutriQRError, NutriQRErrorType
from nutriqr.data_layer.models import UNIT_VALUES

RECORD_LENGTH = 6
NUTRIENT_LENGTHS = (7, 8)

_GTIN13_PATTERN = re.compile(r"[0-9]{13}")

# Positions inside the nutrients array
ENERGY_KCAL = 0
FAT = 1
SATURATED_FAT = 2
CARBS = 3
SUGAR = 4
SALT = 5
PROTEIN = 6
FIBRE = 7


@dataclass(frozen=True)
class ValidationIssue:
    """First invariant violated by a NutriQR array.

    index is set only for INVALID_NUTRIENT_VALUE and names the offending
    position in the nutrients array.
    """

    error_type: NutriQRErrorType
    index: Optional[int] = None

    def to_error(self) -> NutriQRError:
        context = {} if self.index is None else {"index": self.index}
        return NutriQRError(self.error_type, context=context)


def _is_finite_number(value: Any) -> bool:
    # bool is an int subclass but JSON true/false are not numbers
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _is_positive_number(value: Any) -> bool:
    return _is_finite_number(value) and value > 0


def _check_length(arr: Any) -> Optional[ValidationIssue]:
    if not isinstance(arr, list) or len(arr) != RECORD_LENGTH:
        return ValidationIssue(NutriQRErrorType.INVALID_ARRAY_LENGTH)
    return None


def _check_gtin13(arr: Sequence[Any]) -> Optional[ValidationIssue]:
    gtin13 = arr[0]
    if not isinstance(gtin13, str) or not (gtin13 == "" or _GTIN13_PATTERN.fullmatch(gtin13)):
        return ValidationIssue(NutriQRErrorType.INVALID_GTIN13)
    return None


def _check_brand_product(arr: Sequence[Any]) -> Optional[ValidationIssue]:
    if not isinstance(arr[1], str) or not arr[1]:
        return ValidationIssue(NutriQRErrorType.EMPTY_BRAND_PRODUCT)
    return None


def _check_delimiter(arr: Sequence[Any]) -> Optional[ValidationIssue]:
    split = split_escaped_delimiter(arr[1], DEFAULT_DELIMITER)
    if split is None:
        return ValidationIssue(NutriQRErrorType.MISSING_DELIMITER)
    manufacturer, product_name = split
    if not manufacturer or not product_name:
        return ValidationIssue(NutriQRErrorType.EMPTY_MANUFACTURER_OR_PRODUCT)
    return None


def _check_unit(arr: Sequence[Any]) -> Optional[ValidationIssue]:
    if not isinstance(arr[2], str) or arr[2] not in UNIT_VALUES:
        return ValidationIssue(NutriQRErrorType.INVALID_UNIT)
    return None


def _check_base_quantity(arr: Sequence[Any]) -> Optional[ValidationIssue]:
    if not _is_positive_number(arr[3]):
        return ValidationIssue(NutriQRErrorType.INVALID_BASE_QUANTITY)
    return None


def _check_portion_factor(arr: Sequence[Any]) -> Optional[ValidationIssue]:
    if not _is_positive_number(arr[4]):
        return ValidationIssue(NutriQRErrorType.INVALID_PORTION_FACTOR)
    return None


def _check_nutrients(arr: Sequence[Any]) -> Optional[ValidationIssue]:
    nutrients = arr[5]
    if not isinstance(nutrients, list) or len(nutrients) not in NUTRIENT_LENGTHS:
        return ValidationIssue(NutriQRErrorType.INVALID_NUTRIENTS_ARRAY)
    for index, value in enumerate(nutrients):
        if not _is_finite_number(value) or value < 0:
            return ValidationIssue(NutriQRErrorType.INVALID_NUTRIENT_VALUE, index=index)
    return None


def _check_sugar(arr: Sequence[Any]) -> Optional[ValidationIssue]:
    nutrients = arr[5]
    if nutrients[SUGAR] > nutrients[CARBS]:
        return ValidationIssue(NutriQRErrorType.SUGAR_EXCEEDS_CARBS)
    return None


def _check_saturated_fat(arr: Sequence[Any]) -> Optional[ValidationIssue]:
    nutrients = arr[5]
    if nutrients[SATURATED_FAT] > nutrients[FAT]:
        return ValidationIssue(NutriQRErrorType.SATURATED_FAT_EXCEEDS_TOTAL_FAT)
    return None


def nutrient_total(nutrients: Sequence[float]) -> float:
    """Sum the nutrients that count against the base quantity.

    Saturated fat and sugar are left out because they are already part of
    fat and carbs.
    """
    total = (
        nutrients[ENERGY_KCAL]
        + nutrients[FAT]
        + nutrients[CARBS]
        + nutrients[SALT]
        + nutrients[PROTEIN]
    )
    if len(nutrients) > FIBRE:
        total += nutrients[FIBRE]
    return total


def _check_total(arr: Sequence[Any]) -> Optional[ValidationIssue]:
    if nutrient_total(arr[5]) > arr[3]:
        return ValidationIssue(NutriQRErrorType.NUTRIENTS_EXCEED_BASE_QUANTITY)
    return None


# Evaluated in order; each check may rely on every earlier one having passed
VALIDATION_CHECKS: Tuple[Callable[[Any], Optional[ValidationIssue]], ...] = (
    _check_length,
    _check_gtin13,
    _check_brand_product,
    _check_delimiter,
    _check_unit,
    _check_base_quantity,
    _check_portion_factor,
    _check_nutrients,
    _check_sugar,
    _check_saturated_fat,
    _check_total,
)


def find_validation_issue(arr: Any) -> Optional[ValidationIssue]:
    """Return the first invariant violated by arr, or None if it is valid."""
    for check in VALIDATION_CHECKS:
        issue = check(arr)
        if issue is not None:
            return issue
    return None


def validate_nutriqr_array(arr: Any) -> Optional[NutriQRErrorType]:
    """Validate a decoded NutriQR array.

    Args:
        arr: Candidate array, typically the result of json.loads

    Returns:
        None if valid, otherwise the error type of the first failed check
    """
    issue = find_validation_issue(arr)
    return issue.error_type if issue is not None else None
