"""Product sheet loader for encoding products listed in YAML."""
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from nutriqr.codec.codec import create_nutriqr_string
from nutriqr.data_layer.models import NutrientInput


@dataclass(frozen=True)
class ProductEntry:
    """One product from a product sheet, ready to encode."""

    gtin13: str
    manufacturer: str
    product_name: str
    unit: str
    base_quantity: float
    portion_factor: float
    nutrients: NutrientInput

    def encode(self) -> str:
        """Encode the product as a NutriQR string.

        Raises:
            NutriQRError: If the product is not a valid NutriQR record
        """
        return create_nutriqr_string(
            self.gtin13,
            self.manufacturer,
            self.product_name,
            self.unit,
            self.base_quantity,
            self.portion_factor,
            self.nutrients,
        )


class ProductSheetLoader:
    """Loader for product sheets stored as YAML."""

    def __init__(self, yaml_path: str):
        """Initialize product sheet loader from YAML file.

        Args:
            yaml_path: Path to YAML file with a top-level "products" list
        """
        self.yaml_path = Path(yaml_path)

    def load(self) -> List[ProductEntry]:
        """Load all products from the YAML file.

        Returns:
            List of ProductEntry objects in file order

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            KeyError: If required fields are missing
        """
        with open(self.yaml_path, "r") as f:
            data = yaml.safe_load(f) or {}

        return [self._parse_entry(item) for item in data["products"]]

    @staticmethod
    def _parse_entry(item: Dict[str, Any]) -> ProductEntry:
        # An unquoted GTIN arrives as an int and has lost any leading zeros
        gtin13 = item.get("gtin13", "")

        return ProductEntry(
            gtin13="" if gtin13 is None else str(gtin13),
            manufacturer=str(item["manufacturer"]),
            product_name=str(item["product_name"]),
            unit=str(item["unit"]),
            base_quantity=item["base_quantity"],
            portion_factor=item.get("portion_factor", 1),
            nutrients=NutrientInput.from_dict(item["nutrients"]),
        )
