"""NutriQR codec: validation, delimiter packing, encoding and unit conversion."""

from nutriqr.codec.errors import (
    NutriQRError,
    NutriQRErrorType,
    ERROR_MESSAGES,
    format_error_message,
)

from nutriqr.codec.delimiter import (
    split_escaped_delimiter,
    join_escaped_delimiter,
    escape_delimiter,
    unescape_delimiter,
    find_unescaped_delimiters,
    DEFAULT_DELIMITER,
    ESCAPE_CHAR,
)

from nutriqr.codec.validator import (
    validate_nutriqr_array,
    find_validation_issue,
    nutrient_total,
    ValidationIssue,
    VALIDATION_CHECKS,
)

from nutriqr.codec.codec import (
    create_nutriqr_string,
    decode_nutriqr_string,
    is_nutriqr_string,
    build_nutriqr_array,
    expand_nutriqr_array,
    kcal_to_kj,
    KJ_PER_KCAL,
)

from nutriqr.codec.unit_conversion import (
    convert_unit,
    convert_between_units,
    convert_decoded_nutriqr,
    UnsupportedConversionError,
    UNIT_COUNTERPARTS,
    GRAMS_PER_OUNCE,
    MILLILITRES_PER_FLUID_OUNCE,
)

__all__ = [
    # Error taxonomy
    "NutriQRError",
    "NutriQRErrorType",
    "ERROR_MESSAGES",
    "format_error_message",
    # Delimiter packing
    "split_escaped_delimiter",
    "join_escaped_delimiter",
    "escape_delimiter",
    "unescape_delimiter",
    "find_unescaped_delimiters",
    "DEFAULT_DELIMITER",
    "ESCAPE_CHAR",
    # Validation
    "validate_nutriqr_array",
    "find_validation_issue",
    "nutrient_total",
    "ValidationIssue",
    "VALIDATION_CHECKS",
    # Encoding / decoding
    "create_nutriqr_string",
    "decode_nutriqr_string",
    "is_nutriqr_string",
    "build_nutriqr_array",
    "expand_nutriqr_array",
    "kcal_to_kj",
    "KJ_PER_KCAL",
    # Unit conversion
    "convert_unit",
    "convert_between_units",
    "convert_decoded_nutriqr",
    "UnsupportedConversionError",
    "UNIT_COUNTERPARTS",
    "GRAMS_PER_OUNCE",
    "MILLILITRES_PER_FLUID_OUNCE",
]
