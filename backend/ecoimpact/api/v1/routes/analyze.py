import logging

from fastapi import APIRouter, Depends, File, UploadFile

from ecoimpact.api.deps import get_estimator, get_history
from ecoimpact.core.config import settings
from ecoimpact.schemas.analyze import (
    AnalysisResult,
    BarcodeAnalyzeRequest,
    TextAnalyzeRequest,
)
from ecoimpact.services.history import AnalysisHistory
from ecoimpact.services.impact_estimator import ImpactEstimator
from ecoimpact.services.product_sources import (
    BarcodeLookupSource,
    ImageExtractionSource,
    ManualTextSource,
    ProductInputSource,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analyze"])


async def _analyze(
    source: ProductInputSource,
    estimator: ImpactEstimator,
    history: AnalysisHistory,
) -> AnalysisResult:
    # 1) Source -> normalized product
    product = await source.load()

    # 2) Product -> impact report
    result = await estimator.estimate_async(
        product, delay_seconds=settings.ANALYSIS_DELAY_SECONDS
    )

    history.add(result)
    logger.info(
        "Analyzed %r via %s: score=%s grade=%s",
        product.name,
        source.input_method.value,
        result.environmental_score,
        result.grade.value,
    )
    return result


@router.post("/analyze/text", response_model=AnalysisResult)
async def analyze_text(
    body: TextAnalyzeRequest,
    estimator: ImpactEstimator = Depends(get_estimator),
    history: AnalysisHistory = Depends(get_history),
):
    source = ManualTextSource(
        name=body.name, description=body.description, origin=body.origin
    )
    return await _analyze(source, estimator, history)


@router.post("/analyze/image", response_model=AnalysisResult)
async def analyze_image(
    image: UploadFile = File(...),
    estimator: ImpactEstimator = Depends(get_estimator),
    history: AnalysisHistory = Depends(get_history),
):
    image_bytes = await image.read()
    source = ImageExtractionSource(
        image_bytes=image_bytes,
        filename=image.filename,
        mime_type=image.content_type,
    )
    return await _analyze(source, estimator, history)


@router.post("/analyze/barcode", response_model=AnalysisResult)
async def analyze_barcode(
    body: BarcodeAnalyzeRequest,
    estimator: ImpactEstimator = Depends(get_estimator),
    history: AnalysisHistory = Depends(get_history),
):
    source = BarcodeLookupSource(barcode=body.barcode)
    return await _analyze(source, estimator, history)
