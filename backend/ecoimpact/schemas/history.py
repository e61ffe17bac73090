from pydantic import BaseModel, ConfigDict, Field

from ecoimpact.schemas.analyze import Grade, ImpactBreakdown


class HistorySummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int
    average_score: float = Field(..., alias="averageScore")
    grade_distribution: dict[Grade, int] = Field(..., alias="gradeDistribution")
    best_grade: Grade | None = Field(default=None, alias="bestGrade")
    latest_timestamp: str | None = Field(default=None, alias="latestTimestamp")


class ExportPayload(BaseModel):
    product: str
    score: float
    grade: Grade
    timestamp: str
    breakdown: ImpactBreakdown
    recommendations: list[str]
