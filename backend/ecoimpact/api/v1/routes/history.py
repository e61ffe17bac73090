from typing import Literal
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import JSONResponse

from ecoimpact.api.deps import get_history
from ecoimpact.schemas.analyze import AnalysisResult
from ecoimpact.schemas.history import ExportPayload, HistorySummary
from ecoimpact.services.export import build_export, export_filename
from ecoimpact.services.history import AnalysisHistory

router = APIRouter(tags=["history"])


def _get_or_404(history: AnalysisHistory, result_id: str) -> AnalysisResult:
    result = history.get(result_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Analysis not found.")
    return result


@router.get("/history", response_model=list[AnalysisResult])
async def list_history(
    search: str = "",
    sort_by: Literal["date", "score", "name"] = "date",
    grade: Literal["all", "Excellent", "Good", "Fair", "Poor"] = "all",
    history: AnalysisHistory = Depends(get_history),
):
    return history.query(search=search, sort_by=sort_by, grade=grade)


@router.get("/history/summary", response_model=HistorySummary)
async def history_summary(history: AnalysisHistory = Depends(get_history)):
    return history.summary()


@router.get("/history/{result_id}", response_model=AnalysisResult)
async def get_analysis(
    result_id: str, history: AnalysisHistory = Depends(get_history)
):
    return _get_or_404(history, result_id)


@router.delete("/history/{result_id}", status_code=204)
async def delete_analysis(
    result_id: str, history: AnalysisHistory = Depends(get_history)
):
    if not history.remove(result_id):
        raise HTTPException(status_code=404, detail="Analysis not found.")
    return Response(status_code=204)


@router.get("/history/{result_id}/export", response_model=ExportPayload)
async def export_analysis(
    result_id: str, history: AnalysisHistory = Depends(get_history)
):
    result = _get_or_404(history, result_id)
    payload = build_export(result)
    return JSONResponse(
        content=payload.model_dump(mode="json", by_alias=True),
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(export_filename(result))}"
        },
    )
