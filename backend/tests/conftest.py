import random
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from ecoimpact.api.deps import get_estimator, get_history
from ecoimpact.core.config import settings
from ecoimpact.main import app
from ecoimpact.services.history import AnalysisHistory
from ecoimpact.services.impact_estimator import ImpactEstimator


class ScriptedRandom:
    """Stands in for random.Random, replaying fixed draws in order."""

    def __init__(self, *values: float):
        self.values = list(values)

    def random(self) -> float:
        return self.values.pop(0)


FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def scripted():
    return ScriptedRandom


@pytest.fixture
def make_estimator():
    def _make(*draws: float) -> ImpactEstimator:
        return ImpactEstimator(rng=ScriptedRandom(*draws), clock=lambda: FIXED_NOW)

    return _make


@pytest.fixture(autouse=True)
def offline_settings(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
    monkeypatch.setattr(settings, "BARCODE_LOOKUP_ENABLED", False)
    monkeypatch.setattr(settings, "ANALYSIS_DELAY_SECONDS", 0.0)


@pytest.fixture
def history():
    return AnalysisHistory(max_items=50)


@pytest.fixture
def client(history):
    app.dependency_overrides[get_estimator] = lambda: ImpactEstimator(
        rng=random.Random(7)
    )
    app.dependency_overrides[get_history] = lambda: history
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
