from __future__ import annotations

from pathlib import Path
from typing import Optional
import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from teamowners.core.dependencies import get_query_evaluator, get_registry
from teamowners.data.registry import TeamRegistry
from teamowners.domain.models import QueryResult, RefreshResult
from teamowners.services.query_evaluator import QueryEvaluator

logger = logging.getLogger(__name__)
router = APIRouter()

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parents[1] / "templates"))

DEGRADED_BODY = "<html><body><h1>Something went wrong</h1></body></html>"


# ---------------------------------------------------------------------------
# 1. GET /  (HTML lookup page)
# ---------------------------------------------------------------------------

@router.get("/", response_class=HTMLResponse)
def index(
    request: Request,
    q: Optional[str] = Query(default=None, description="One identifier or stack frame per line."),
    evaluator: QueryEvaluator = Depends(get_query_evaluator),
) -> HTMLResponse:
    """
    Resolve the owners of every line of `q` and render them as HTML.

    Without `q`, a greeting page is shown.
    """
    try:
        result = evaluator.evaluate(q)
        return templates.TemplateResponse(request, "index.html", {"result": result})
    except Exception as e:
        logger.error(f"Failed to render ownership page: {e}", exc_info=True)
        return HTMLResponse(DEGRADED_BODY, status_code=500)


# ---------------------------------------------------------------------------
# 2. GET /init  (rebuild the registry)
# ---------------------------------------------------------------------------

@router.get("/init")
def refresh_registry(registry: TeamRegistry = Depends(get_registry)) -> RefreshResult:
    """
    Reload the ownership files. Returns right away if a reload is already running.
    """
    return registry.refresh()


# ---------------------------------------------------------------------------
# 3. GET /api/lookup  (structured results)
# ---------------------------------------------------------------------------

@router.get("/api/lookup")
def lookup(
    q: Optional[str] = Query(default=None),
    evaluator: QueryEvaluator = Depends(get_query_evaluator),
) -> QueryResult:
    return evaluator.evaluate(q)


@router.get("/health")
def health(registry: TeamRegistry = Depends(get_registry)) -> dict:
    """
    Lightweight health check endpoint.
    """
    snapshot = registry.snapshot
    return {
        "status": "ok",
        "generation": snapshot.generation,
        "teams": len(snapshot.teams),
    }
