"""Structured error types for NutriQR encoding and decoding.

Every fallible codec operation raises exactly one NutriQRError, carrying the
kind of the first invariant the input violated. Validation never collects
multiple failures: the checks run in a fixed order and the first one that
fails decides the error.

ERROR FLOW:
    ┌─────────────────────────────────────────────────────┐
    │ decode input      → NON_STRING_INPUT                │
    └─────────────────────────────────────────────────────┘
                              │
                              ▼
    ┌─────────────────────────────────────────────────────┐
    │ JSON parsing      → INVALID_JSON                    │
    └─────────────────────────────────────────────────────┘
                              │
                              ▼
    ┌─────────────────────────────────────────────────────┐
    │ Array validation  → INVALID_ARRAY_LENGTH ...        │
    │                     NUTRIENTS_EXCEED_BASE_QUANTITY  │
    └─────────────────────────────────────────────────────┘
                              │
                              ▼
    ┌─────────────────────────────────────────────────────┐
    │ ExpandedRecord (success)                            │
    └─────────────────────────────────────────────────────┘
"""

from enum import Enum
from typing import Any, Dict, Optional


class NutriQRErrorType(Enum):
    """Enumeration of all NutriQR error kinds.

    Members are listed in validation order; INVALID_JSON and NON_STRING_INPUT
    are raised by the decoder before validation starts.
    """

    INVALID_ARRAY_LENGTH = "INVALID_ARRAY_LENGTH"
    INVALID_GTIN13 = "INVALID_GTIN13"
    EMPTY_BRAND_PRODUCT = "EMPTY_BRAND_PRODUCT"
    MISSING_DELIMITER = "MISSING_DELIMITER"
    EMPTY_MANUFACTURER_OR_PRODUCT = "EMPTY_MANUFACTURER_OR_PRODUCT"
    INVALID_UNIT = "INVALID_UNIT"
    INVALID_BASE_QUANTITY = "INVALID_BASE_QUANTITY"
    INVALID_PORTION_FACTOR = "INVALID_PORTION_FACTOR"
    INVALID_NUTRIENTS_ARRAY = "INVALID_NUTRIENTS_ARRAY"
    INVALID_NUTRIENT_VALUE = "INVALID_NUTRIENT_VALUE"
    SUGAR_EXCEEDS_CARBS = "SUGAR_EXCEEDS_CARBS"
    SATURATED_FAT_EXCEEDS_TOTAL_FAT = "SATURATED_FAT_EXCEEDS_TOTAL_FAT"
    NUTRIENTS_EXCEED_BASE_QUANTITY = "NUTRIENTS_EXCEED_BASE_QUANTITY"

    INVALID_JSON = "INVALID_JSON"
    NON_STRING_INPUT = "NON_STRING_INPUT"


ERROR_MESSAGES: Dict[NutriQRErrorType, str] = {
    NutriQRErrorType.INVALID_ARRAY_LENGTH: "Top-level array must have 6 elements.",
    NutriQRErrorType.INVALID_GTIN13: "GTIN-13 must be an empty string or a 13-digit string.",
    NutriQRErrorType.EMPTY_BRAND_PRODUCT: "Brand|Product must be a non-empty string.",
    NutriQRErrorType.MISSING_DELIMITER: (
        "Brand|Product must include a | delimiter (unescaped) "
        "between manufacturer and product name."
    ),
    NutriQRErrorType.EMPTY_MANUFACTURER_OR_PRODUCT: (
        "Both manufacturer and product name must be non-empty."
    ),
    NutriQRErrorType.INVALID_UNIT: 'Unit must be one of "g", "ml", "oz", "fl".',
    NutriQRErrorType.INVALID_BASE_QUANTITY: "Base quantity must be a positive number.",
    NutriQRErrorType.INVALID_PORTION_FACTOR: "Portion factor must be a positive number.",
    NutriQRErrorType.INVALID_NUTRIENTS_ARRAY: "Nutrients array must have 7 or 8 elements.",
    NutriQRErrorType.INVALID_NUTRIENT_VALUE: (
        "Nutrient at index {index} must be a non-negative number."
    ),
    NutriQRErrorType.SUGAR_EXCEEDS_CARBS: "Sugars must be less than or equal to carbohydrates.",
    NutriQRErrorType.SATURATED_FAT_EXCEEDS_TOTAL_FAT: (
        "Saturated fat must be less than or equal to total fat."
    ),
    NutriQRErrorType.NUTRIENTS_EXCEED_BASE_QUANTITY: (
        "Sum of nutrients (excluding saturated fat and sugar) must not exceed base quantity."
    ),
    NutriQRErrorType.INVALID_JSON: "Invalid JSON string.",
    NutriQRErrorType.NON_STRING_INPUT: "Input must be a string.",
}


def format_error_message(
    error_type: NutriQRErrorType,
    context: Optional[Dict[str, Any]] = None,
) -> str:
    """Render the fixed message template for an error kind.

    Templates with placeholders (INVALID_NUTRIENT_VALUE) are filled from
    context; a missing placeholder value renders as "?".
    """
    template = ERROR_MESSAGES[error_type]
    if "{index}" in template:
        index = (context or {}).get("index")
        return template.format(index="?" if index is None else index)
    return template


class NutriQRError(Exception):
    """Raised when a NutriQR string or record fails encoding or decoding.

    Attributes:
        error_type: NutriQRErrorType identifying the failure
        message: Human-readable error description
        context: Extra details (e.g. the offending nutrient index)
    """

    def __init__(
        self,
        error_type: NutriQRErrorType,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """Initialize NutriQR error.

        Args:
            error_type: Error kind enum value
            message: Custom message (defaults to the kind's template)
            context: Additional context dictionary (defaults to empty)
        """
        self.error_type = error_type
        self.context = context or {}
        self.message = message or format_error_message(error_type, self.context)

        super().__init__(f"NutriQR validation failed: {self.message}")

    def __str__(self) -> str:
        return f"NutriQR validation failed: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"error_type={self.error_type!r}, "
            f"message={self.message!r}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for API responses.

        Returns:
            Dictionary with error code, message, and context
        """
        return {
            "error_code": self.error_type.value,
            "message": self.message,
            "context": self.context,
        }
