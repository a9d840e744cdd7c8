"""Data models for NutriQR records."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union


class UnitSystem(str, Enum):
    """Measurement systems a record can be expressed in."""

    METRIC = "metric"
    IMPERIAL = "imperial"


class Unit(str, Enum):
    """Quantity units allowed in a NutriQR record."""

    GRAM = "g"
    MILLILITRE = "ml"
    OUNCE = "oz"  # US ounce
    FLUID_OUNCE = "fl"  # US fluid ounce

    @property
    def system(self) -> UnitSystem:
        if self in (Unit.GRAM, Unit.MILLILITRE):
            return UnitSystem.METRIC
        return UnitSystem.IMPERIAL

    @property
    def dimension(self) -> str:
        """Physical dimension measured by the unit ("mass" or "volume")."""
        if self in (Unit.GRAM, Unit.OUNCE):
            return "mass"
        return "volume"


UNIT_VALUES = frozenset(unit.value for unit in Unit)

# Raw decoded wire array: [gtin13, brand|product, unit, base, factor, nutrients]
CanonicalRecord = List[Any]

UnitLike = Union[Unit, str]

# Wire documentation uses camelCase nutrient names
_NUTRIENT_KEY_ALIASES = {
    "energyKcal": "energy_kcal",
    "saturatedFat": "saturated_fat",
}


@dataclass(frozen=True)
class NutrientInput:
    """Nutrient values per base quantity, as supplied to the encoder."""

    energy_kcal: float
    fat: float
    saturated_fat: float
    carbs: float
    sugar: float
    salt: float
    protein: float
    fibre: Optional[float] = None

    def to_array(self) -> List[float]:
        """Return the positional nutrient sequence (7 values, 8 with fibre)."""
        values = [
            self.energy_kcal,
            self.fat,
            self.saturated_fat,
            self.carbs,
            self.sugar,
            self.salt,
            self.protein,
        ]
        if self.fibre is not None:
            values.append(self.fibre)
        return values

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NutrientInput":
        """Build from a mapping with snake_case or camelCase keys.

        Raises:
            KeyError: If a required nutrient is missing
        """
        normalized = {_NUTRIENT_KEY_ALIASES.get(key, key): value for key, value in data.items()}
        return cls(
            energy_kcal=normalized["energy_kcal"],
            fat=normalized["fat"],
            saturated_fat=normalized["saturated_fat"],
            carbs=normalized["carbs"],
            sugar=normalized["sugar"],
            salt=normalized["salt"],
            protein=normalized["protein"],
            fibre=normalized.get("fibre"),
        )


@dataclass(frozen=True)
class Nutrients:
    """Decoded nutrient values, including the derived kJ energy."""

    energy_kcal: float
    energy_kj: int
    fat: float
    saturated_fat: float
    carbs: float
    sugar: float
    salt: float
    protein: float
    fibre: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "energy_kcal": self.energy_kcal,
            "energy_kj": self.energy_kj,
            "fat": self.fat,
            "saturated_fat": self.saturated_fat,
            "carbs": self.carbs,
            "sugar": self.sugar,
            "salt": self.salt,
            "protein": self.protein,
        }
        if self.fibre is not None:
            data["fibre"] = self.fibre
        return data


@dataclass(frozen=True)
class ExpandedRecord:
    """Human-usable form of a decoded NutriQR string."""

    gtin13: str
    manufacturer: str
    product_name: str
    unit: Unit
    base_quantity: float
    portion_quantity: float  # base_quantity * portion factor
    nutrients: Nutrients

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gtin13": self.gtin13,
            "manufacturer": self.manufacturer,
            "product_name": self.product_name,
            "unit": self.unit.value,
            "base_quantity": self.base_quantity,
            "portion_quantity": self.portion_quantity,
            "nutrients": self.nutrients.to_dict(),
        }
