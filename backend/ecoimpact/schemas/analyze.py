from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InputMethod(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    BARCODE = "barcode"


class Grade(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


class ProductInput(BaseModel):
    """Normalized product description handed to the estimator."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1, description="Product name, e.g. 'iPhone 15'")
    description: str = Field(default="", description="Free text details")
    origin: str = Field(default="Unknown", description="Country of origin")
    input_method: InputMethod = Field(default=InputMethod.TEXT, alias="inputMethod")

    # Extra details some sources can provide
    barcode: str | None = None
    brand: str | None = None
    confidence: float | None = Field(default=None, ge=0, le=1)

    @field_validator("description", mode="before")
    @classmethod
    def _description_default(cls, v):
        return v or ""

    @field_validator("origin", mode="before")
    @classmethod
    def _origin_default(cls, v):
        if v is None or not str(v).strip():
            return "Unknown"
        return str(v).strip()


class AnalyzedProduct(ProductInput):
    category: str = Field(..., description="Inferred category, e.g. Electronics")


class BreakdownItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: float = Field(..., ge=0)
    percentage: float = Field(..., ge=0, le=100)


class ImpactBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    manufacturing: BreakdownItem
    shipping: BreakdownItem
    packaging: BreakdownItem
    end_of_life: BreakdownItem = Field(..., alias="endOfLife")


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    timestamp: str
    product: AnalyzedProduct
    environmental_score: float = Field(..., ge=0, le=10, alias="environmentalScore")
    breakdown: ImpactBreakdown
    recommendations: list[str]
    total_impact: float = Field(..., alias="totalImpact")
    grade: Grade


class TextAnalyzeRequest(BaseModel):
    name: str | None = None
    description: str = ""
    origin: str | None = None


class BarcodeAnalyzeRequest(BaseModel):
    barcode: str
