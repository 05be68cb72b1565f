"""Food composition domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class NutrientProfile:
    """Nutrients for a food, per 100 g unless stated otherwise."""

    calories: float
    protein_g: float
    carbs_g: float
    fats_g: float
    fiber_g: float = 0.0
    sugar_g: float = 0.0
    sodium_mg: float = 0.0


@dataclass(frozen=True)
class FoodSummary:
    """Search hit from FoodData Central."""

    fdc_id: int
    description: str
    brand_owner: str | None
    brand_name: str | None
    data_type: str | None

    @property
    def display_name(self) -> str:
        """Description without cooking suffixes, prefixed by brand."""
        name = self.description
        for suffix in (", raw", ", cooked"):
            if name.lower().endswith(suffix):
                name = name[: -len(suffix)]
        if self.brand_name and self.brand_name.lower() not in name.lower():
            name = f"{self.brand_name} {name}"
        return name

    @property
    def source_label(self) -> str:
        """Human label for the FDC data type."""
        labels = {
            "Foundation": "USDA Foundation",
            "SR Legacy": "USDA SR Legacy",
            "Survey (FNDDS)": "USDA Survey",
        }
        if self.data_type == "Branded":
            return self.brand_owner or "Branded"
        return labels.get(self.data_type or "", "USDA")


@dataclass(frozen=True)
class FoodDetails:
    """Full food record with nutrients per 100 g."""

    summary: FoodSummary
    per_100g: NutrientProfile
    serving_size_g: float | None
