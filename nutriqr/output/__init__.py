"""Output formatting for decoded NutriQR records."""

from nutriqr.output.formatters import (
    format_record_json,
    format_record_json_string,
    format_record_markdown,
    format_quantity
)

__all__ = [
    "format_record_json",
    "format_record_json_string",
    "format_record_markdown",
    "format_quantity"
]
