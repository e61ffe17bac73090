# ecoimpact/services/impact_estimator.py

from __future__ import annotations

import asyncio
import logging
import random
import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable, Protocol

from ecoimpact.schemas.analyze import (
    AnalysisResult,
    AnalyzedProduct,
    BreakdownItem,
    Grade,
    ImpactBreakdown,
    ProductInput,
)
from ecoimpact.services.reference_data import (
    DEFAULT_CATEGORY,
    DEFAULT_MATERIALS,
    DEFAULT_TABLES,
    UNKNOWN_ORIGIN,
    ReferenceTables,
)
from ecoimpact.services.rounding import round_half_up

logger = logging.getLogger(__name__)

SHIPPING_EMISSION_FACTOR = 0.0001
LONG_SHIPPING_KM = 8000

PACKAGING_RANGE = (1.0, 3.0)
END_OF_LIFE_RANGE = (0.5, 2.0)


class RandomSource(Protocol):
    def random(self) -> float: ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def classify_category(
    name: str, description: str = "", tables: ReferenceTables = DEFAULT_TABLES
) -> str:
    text = f"{name} {description or ''}".lower()
    for category, keywords in tables.category_keywords:
        if any(keyword in text for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def calculate_shipping_impact(
    origin: str | None, weight: float = 1, tables: ReferenceTables = DEFAULT_TABLES
) -> float:
    distance = tables.distance_for(origin)
    return round_half_up(distance * weight * SHIPPING_EMISSION_FACTOR, 2)


def calculate_manufacturing_impact(
    category: str,
    materials: Iterable[str] = DEFAULT_MATERIALS,
    tables: ReferenceTables = DEFAULT_TABLES,
) -> float:
    materials = list(materials) or list(DEFAULT_MATERIALS)
    base_factor = tables.carbon_factor_for(category)
    material_factor = sum(tables.material_factor_for(m) for m in materials) / len(
        materials
    )
    return round_half_up(base_factor * material_factor * 10, 2)


def grade_for_score(score: float) -> Grade:
    # Higher score means more impact, hence the worse grade
    if score >= 7:
        return Grade.POOR
    if score >= 5:
        return Grade.FAIR
    if score >= 3:
        return Grade.GOOD
    return Grade.EXCELLENT


def generate_recommendations(
    score: float,
    category: str,
    origin: str | None,
    tables: ReferenceTables = DEFAULT_TABLES,
) -> list[str]:
    recommendations: list[str] = []

    if score > 7:
        recommendations.append("🔴 Consider alternatives with lower environmental impact")
        recommendations.append("♻️ Look for recycled or refurbished versions")
    elif score > 5:
        recommendations.append("🟡 Moderate impact - use responsibly")
        recommendations.append("🌱 Consider eco-friendly alternatives when replacing")
    else:
        recommendations.append("🟢 Good choice! Lower environmental impact")
        recommendations.append("👍 Continue making sustainable choices")

    if origin and origin != UNKNOWN_ORIGIN:
        distance = tables.country_distances_km.get(origin)
        if distance is not None and distance > LONG_SHIPPING_KM:
            recommendations.append(
                "✈️ Consider local alternatives to reduce shipping impact"
            )

    if category == "Electronics":
        recommendations.append("🔋 Properly recycle at end of life")
        recommendations.append("⚡ Use energy-efficient settings")

    return recommendations


def _percentages(components: dict[str, float], total: float) -> dict[str, float]:
    shares = {k: round_half_up(v / total * 100, 1) for k, v in components.items()}
    drift = round_half_up(100 - sum(shares.values()), 1)
    if abs(drift) > 0.1:
        largest = max(components, key=components.__getitem__)
        shares[largest] = round_half_up(shares[largest] + drift, 1)
    return shares


class ImpactEstimator:
    """
    Turns a ProductInput into an AnalysisResult.

    Packaging and end-of-life are filler values drawn from ``rng``; pass a
    seeded ``random.Random`` (or any object with ``random()``) for repeatable
    results. ``clock`` supplies the result timestamp.
    """

    def __init__(
        self,
        tables: ReferenceTables = DEFAULT_TABLES,
        rng: RandomSource | None = None,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self.tables = tables
        self.rng = rng or random.Random()
        self.clock = clock
        self.id_factory = id_factory

    def _draw(self, bounds: tuple[float, float]) -> float:
        low, high = bounds
        return low + self.rng.random() * (high - low)

    def estimate(self, product: ProductInput) -> AnalysisResult:
        category = classify_category(product.name, product.description, self.tables)

        # Materials are not extracted from the description yet
        materials = DEFAULT_MATERIALS

        manufacturing = calculate_manufacturing_impact(category, materials, self.tables)
        shipping = calculate_shipping_impact(product.origin, tables=self.tables)
        packaging = self._draw(PACKAGING_RANGE)
        end_of_life = self._draw(END_OF_LIFE_RANGE)

        components = {
            "manufacturing": manufacturing,
            "shipping": shipping,
            "packaging": packaging,
            "end_of_life": end_of_life,
        }
        total = sum(components.values())
        score = round_half_up(min(total / 2, 10), 1)
        grade = grade_for_score(score)
        shares = _percentages(components, total)

        breakdown = ImpactBreakdown(
            **{
                key: BreakdownItem(score=round_half_up(value, 2), percentage=shares[key])
                for key, value in components.items()
            }
        )

        result = AnalysisResult(
            id=self.id_factory(),
            timestamp=self.clock().isoformat(),
            product=AnalyzedProduct(**product.model_dump(), category=category),
            environmental_score=score,
            breakdown=breakdown,
            recommendations=generate_recommendations(
                score, category, product.origin, self.tables
            ),
            total_impact=round_half_up(total, 2),
            grade=grade,
        )

        logger.debug(
            "Estimated %r: category=%s score=%s grade=%s",
            product.name,
            category,
            score,
            grade.value,
        )
        return result

    async def estimate_async(
        self, product: ProductInput, delay_seconds: float = 0.0
    ) -> AnalysisResult:
        if delay_seconds > 0:
            await asyncio.sleep(delay_seconds)
        return self.estimate(product)


def estimate_impact(
    product: ProductInput, rng: RandomSource | None = None
) -> AnalysisResult:
    return ImpactEstimator(rng=rng).estimate(product)
