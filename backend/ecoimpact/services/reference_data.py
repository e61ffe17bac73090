# ecoimpact/services/reference_data.py

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

UNKNOWN_ORIGIN = "Unknown"
DEFAULT_CATEGORY = "Default"
DEFAULT_MATERIALS = ("plastic",)

COUNTRY_DISTANCES_KM = MappingProxyType(
    {
        "China": 12000,
        "USA": 3000,
        "Germany": 1000,
        "Japan": 15000,
        "India": 8000,
        UNKNOWN_ORIGIN: 5000,
    }
)

CARBON_FACTORS = MappingProxyType(
    {
        "Electronics": 0.8,
        "Clothing": 0.4,
        "Food": 0.2,
        "Furniture": 0.6,
        "Books": 0.1,
        DEFAULT_CATEGORY: 0.5,
    }
)

MATERIAL_IMPACT = MappingProxyType(
    {
        "plastic": 2.5,
        "metal": 1.8,
        "glass": 1.2,
        "wood": 0.8,
        "paper": 0.3,
        "cotton": 1.5,
        "synthetic": 2.0,
    }
)

# Checked in order, first match wins
CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Electronics", ("phone", "laptop", "tv", "electronic")),
    ("Clothing", ("shirt", "dress", "clothing", "fashion")),
    ("Food", ("food", "snack", "drink")),
    ("Furniture", ("chair", "table", "furniture")),
    ("Books", ("book", "magazine")),
)


@dataclass(frozen=True)
class ReferenceTables:
    country_distances_km: Mapping[str, float] = field(
        default_factory=lambda: COUNTRY_DISTANCES_KM
    )
    carbon_factors: Mapping[str, float] = field(default_factory=lambda: CARBON_FACTORS)
    material_impact: Mapping[str, float] = field(default_factory=lambda: MATERIAL_IMPACT)
    category_keywords: tuple[tuple[str, tuple[str, ...]], ...] = CATEGORY_KEYWORDS
    default_material_impact: float = 1.0

    def distance_for(self, origin: str | None) -> float:
        if origin and origin in self.country_distances_km:
            return self.country_distances_km[origin]
        return self.country_distances_km[UNKNOWN_ORIGIN]

    def carbon_factor_for(self, category: str) -> float:
        return self.carbon_factors.get(category, self.carbon_factors[DEFAULT_CATEGORY])

    def material_factor_for(self, material: str) -> float:
        return self.material_impact.get(material.lower(), self.default_material_impact)


DEFAULT_TABLES = ReferenceTables()
