"""NutriQR - nutrition facts packed into a QR-code sized JSON array.

Typical use:

    payload = create_nutriqr_string(
        "8720828249062", "Brand", "Product", "g", 100, 1,
        NutrientInput(energy_kcal=50, fat=10, saturated_fat=5, carbs=20,
                      sugar=10, salt=1, protein=4),
    )
    record = decode_nutriqr_string(payload)
    imperial = convert_decoded_nutriqr(record, UnitSystem.IMPERIAL)
"""

from nutriqr.data_layer.models import (
    CanonicalRecord,
    ExpandedRecord,
    NutrientInput,
    Nutrients,
    Unit,
    UnitSystem,
)

from nutriqr.codec import (
    NutriQRError,
    NutriQRErrorType,
    ERROR_MESSAGES,
    split_escaped_delimiter,
    join_escaped_delimiter,
    escape_delimiter,
    validate_nutriqr_array,
    find_validation_issue,
    ValidationIssue,
    create_nutriqr_string,
    decode_nutriqr_string,
    is_nutriqr_string,
    convert_unit,
    convert_between_units,
    convert_decoded_nutriqr,
    UnsupportedConversionError,
)

from nutriqr.data_layer.product_sheet import ProductEntry, ProductSheetLoader

__all__ = [
    # Models
    "CanonicalRecord",
    "ExpandedRecord",
    "NutrientInput",
    "Nutrients",
    "Unit",
    "UnitSystem",
    # Errors
    "NutriQRError",
    "NutriQRErrorType",
    "ERROR_MESSAGES",
    "UnsupportedConversionError",
    # Delimiter packing
    "split_escaped_delimiter",
    "join_escaped_delimiter",
    "escape_delimiter",
    # Validation
    "validate_nutriqr_array",
    "find_validation_issue",
    "ValidationIssue",
    # Encoding / decoding
    "create_nutriqr_string",
    "decode_nutriqr_string",
    "is_nutriqr_string",
    # Unit conversion
    "convert_unit",
    "convert_between_units",
    "convert_decoded_nutriqr",
    # Product sheets
    "ProductEntry",
    "ProductSheetLoader",
]
