from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

from core.config import LLM_ENABLED, SESSION_STORE_PATH, difficulty_config_from_env
from neuropath.auth import get_owner_id
from neuropath.feedback.messages import encouragement_for
from neuropath.schemas import (
    DifficultyDecisionResponse,
    ScoreResponse,
    SessionMetricsRequest,
    TrendSummaryResponse,
)
from neuropath.services.progress_service import DEFAULT_ADVICE_WINDOW, ProgressService
from neuropath.sessions.store import SessionHistoryStore
from neuropath.system_metrics import get_metrics_snapshot

logger = logging.getLogger("neuropath.main")


def _get_allowed_origins() -> list[str]:
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if not raw:
        return [
            "http://localhost:5000",
            "http://127.0.0.1:5000",
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
    return [item.strip() for item in raw.split(",") if item.strip()]


_allowed_origins = _get_allowed_origins()

progress_service = ProgressService(
    store=SessionHistoryStore(SESSION_STORE_PATH or None),
    config=difficulty_config_from_env(),
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    cfg = progress_service.config
    logger.info("[SYSTEM] CORS allow_origins=%s", _allowed_origins)
    logger.info(
        "[SYSTEM] difficulty range=%s-%s store=%s llm_enabled=%s",
        cfg.min_level,
        cfg.max_level,
        SESSION_STORE_PATH or "memory",
        LLM_ENABLED,
    )
    yield
    logger.info("[SYSTEM] shutting down")


app = FastAPI(title="NeuroPath Adaptive Difficulty", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)


@app.get("/healthz")
async def healthz():
    return {"status": "ok", "service": "neuropath"}


@app.post("/api/sessions/score", response_model=ScoreResponse)
def score_session(req: SessionMetricsRequest, request: Request):
    get_owner_id(request)
    return progress_service.score(req.to_metrics())


@app.post("/api/sessions")
def record_session(req: SessionMetricsRequest, request: Request):
    owner_id = get_owner_id(request)
    try:
        return progress_service.record_session(owner_id, req.to_metrics())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.get("/api/sessions")
def list_sessions(request: Request, limit: int = 50):
    owner_id = get_owner_id(request)
    capped = max(1, min(int(limit or 50), 200))
    return {"items": [item.to_dict() for item in progress_service.history(owner_id, limit=capped)]}


@app.get("/api/difficulty/advice", response_model=DifficultyDecisionResponse)
async def difficulty_advice(
    request: Request,
    current_level: int,
    window: int = DEFAULT_ADVICE_WINDOW,
    annotate: bool = False,
):
    owner_id = get_owner_id(request)
    if window < 1:
        raise HTTPException(status_code=400, detail="window must be at least 1")

    decision, ready = progress_service.advise(owner_id, current_level, window=window)
    latest = progress_service.history(owner_id, limit=1)
    breakdown = latest[-1].breakdown if latest else None
    if annotate:
        message = await progress_service.annotate(decision, breakdown)
    else:
        message = encouragement_for(decision)
    return progress_service.decision_payload(decision, ready, message)


@app.get("/api/progress/trend", response_model=TrendSummaryResponse)
def progress_trend(request: Request):
    owner_id = get_owner_id(request)
    return progress_service.trend(owner_id)


@app.get("/api/progress/summary")
def progress_summary(request: Request):
    owner_id = get_owner_id(request)
    return progress_service.summary(owner_id)


@app.get("/api/system/metrics")
def system_metrics(request: Request):
    get_owner_id(request)
    return get_metrics_snapshot()
