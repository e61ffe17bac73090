# ecoimpact/services/history.py

from __future__ import annotations

import threading
from collections import Counter
from datetime import datetime
from typing import Literal

from ecoimpact.schemas.analyze import AnalysisResult, Grade
from ecoimpact.schemas.history import HistorySummary
from ecoimpact.services.rounding import round_half_up

SortKey = Literal["date", "score", "name"]

# Best first
GRADE_RANK = (Grade.EXCELLENT, Grade.GOOD, Grade.FAIR, Grade.POOR)


class AnalysisHistory:
    """In-memory list of past analyses, newest first."""

    def __init__(self, max_items: int = 500):
        self.max_items = max_items
        self._items: list[AnalysisResult] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._items)

    def add(self, result: AnalysisResult) -> None:
        with self._lock:
            self._items.insert(0, result)
            del self._items[self.max_items :]

    def get(self, result_id: str) -> AnalysisResult | None:
        with self._lock:
            return next((r for r in self._items if r.id == result_id), None)

    def remove(self, result_id: str) -> bool:
        with self._lock:
            for i, r in enumerate(self._items):
                if r.id == result_id:
                    del self._items[i]
                    return True
            return False

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def query(
        self,
        search: str = "",
        sort_by: SortKey = "date",
        grade: Grade | Literal["all"] = "all",
    ) -> list[AnalysisResult]:
        with self._lock:
            items = list(self._items)

        term = (search or "").lower()
        items = [
            r
            for r in items
            if (term in r.product.name.lower() or term in r.product.description.lower())
            and (grade == "all" or r.grade == grade)
        ]

        if sort_by == "score":
            items.sort(key=lambda r: r.environmental_score, reverse=True)
        elif sort_by == "name":
            items.sort(key=lambda r: r.product.name.lower())
        else:
            items.sort(key=lambda r: datetime.fromisoformat(r.timestamp), reverse=True)
        return items

    def summary(self) -> HistorySummary:
        with self._lock:
            items = list(self._items)

        if not items:
            return HistorySummary(total=0, average_score=0.0, grade_distribution={})

        distribution = Counter(r.grade for r in items)
        average = sum(r.environmental_score for r in items) / len(items)
        best = next((g for g in GRADE_RANK if distribution.get(g)), None)

        return HistorySummary(
            total=len(items),
            average_score=round_half_up(average, 1),
            grade_distribution=dict(distribution),
            best_grade=best,
            latest_timestamp=items[0].timestamp,
        )
