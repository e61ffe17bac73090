from functools import lru_cache

from ecoimpact.core.config import settings
from ecoimpact.services.history import AnalysisHistory
from ecoimpact.services.impact_estimator import ImpactEstimator


@lru_cache
def get_estimator() -> ImpactEstimator:
    return ImpactEstimator()


@lru_cache
def get_history() -> AnalysisHistory:
    return AnalysisHistory(max_items=settings.HISTORY_MAX_ITEMS)
