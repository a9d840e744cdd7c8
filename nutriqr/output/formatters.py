"""Formatters for decoded NutriQR records (JSON and Markdown)."""

import json
from typing import Any, Dict, List, Optional

from nutriqr.codec.unit_conversion import GRAMS_PER_OUNCE, MILLILITRES_PER_FLUID_OUNCE
from nutriqr.data_layer.models import ExpandedRecord, Unit, UnitSystem

# (label, attribute) in label order; energy is rendered separately
NUTRIENT_ROWS = [
    ("Fat", "fat"),
    ("of which saturates", "saturated_fat"),
    ("Carbohydrate", "carbs"),
    ("of which sugars", "sugar"),
    ("Fibre", "fibre"),
    ("Protein", "protein"),
    ("Salt", "salt"),
]


def format_quantity(value: float) -> str:
    """Format a quantity without trailing zeros (e.g. 100.0 -> "100", 2.50 -> "2.5").

    Args:
        value: Quantity to format

    Returns:
        Whole numbers without decimals, others with at most one decimal
    """
    if value == int(value):
        return str(int(value))
    return f"{value:.1f}".rstrip("0").rstrip(".")


def _portion_value(record: ExpandedRecord, value: float) -> float:
    return value * record.portion_quantity / record.base_quantity


def _nutrient_mass_factor(record: ExpandedRecord) -> float:
    """Factor that turns a record's nutrient values into label masses.

    Fluid-ounce records carry nutrient grams divided by ml per fl oz, so
    printing them as ounces needs the ml/g ratio of the two factors.
    """
    if record.unit == Unit.FLUID_OUNCE:
        return MILLILITRES_PER_FLUID_OUNCE / GRAMS_PER_OUNCE
    return 1.0


def format_record_markdown(record: ExpandedRecord) -> str:
    """Format an ExpandedRecord as a Markdown nutrition label.

    Args:
        record: Decoded record

    Returns:
        Markdown with a per-base and a per-portion column
    """
    unit = record.unit.value
    base_header = f"Per {format_quantity(record.base_quantity)} {unit}"
    portion_header = f"Per portion ({format_quantity(record.portion_quantity)} {unit})"

    lines: List[str] = [f"# {record.manufacturer} {record.product_name}", ""]
    if record.gtin13:
        lines.append(f"**GTIN-13:** {record.gtin13}")
        lines.append("")

    lines.append(f"| Nutrition | {base_header} | {portion_header} |")
    lines.append("|---|---|---|")

    nutrients = record.nutrients
    lines.append(
        f"| Energy | {nutrients.energy_kj} kJ / {format_quantity(nutrients.energy_kcal)} kcal "
        f"| {format_quantity(_portion_value(record, nutrients.energy_kj))} kJ / "
        f"{format_quantity(_portion_value(record, nutrients.energy_kcal))} kcal |"
    )

    # Nutrient masses follow the record's measurement system
    suffix = "g" if record.unit.system == UnitSystem.METRIC else "oz"
    mass_factor = _nutrient_mass_factor(record)
    for label, attribute in NUTRIENT_ROWS:
        value: Optional[float] = getattr(nutrients, attribute)
        if value is None:
            continue
        value *= mass_factor
        lines.append(
            f"| {label} | {format_quantity(value)}{suffix} "
            f"| {format_quantity(_portion_value(record, value))}{suffix} |"
        )

    return "\n".join(lines)


def format_record_json(record: ExpandedRecord) -> Dict[str, Any]:
    """Format an ExpandedRecord as a JSON-serializable dictionary."""
    return record.to_dict()


def format_record_json_string(record: ExpandedRecord, indent: int = 2) -> str:
    """Format an ExpandedRecord as a JSON string."""
    return json.dumps(format_record_json(record), indent=indent, ensure_ascii=False)
