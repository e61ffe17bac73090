# ecoimpact/services/export.py
import re

from ecoimpact.schemas.analyze import AnalysisResult
from ecoimpact.schemas.history import ExportPayload


def build_export(result: AnalysisResult) -> ExportPayload:
    return ExportPayload(
        product=result.product.name,
        score=result.environmental_score,
        grade=result.grade,
        timestamp=result.timestamp,
        breakdown=result.breakdown,
        recommendations=list(result.recommendations),
    )


def export_filename(result: AnalysisResult) -> str:
    slug = re.sub(r"\s+", "-", result.product.name.strip())
    return f"eco-analysis-{slug}.json"
