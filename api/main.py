"""
GreenLie API — Main Application

GET  /statements                  — List curated statements
GET  /statements/{id}             — One curated statement
POST /statements/{id}/feedback    — Corrective feedback for one answer
POST /statements/{id}/evaluate    — Finish a fact-based session
GET  /statements/{id}/votes       — Community votes per criterion
POST /statements/{id}/votes       — Cast a per-criterion vote
POST /custom                      — Submit a custom statement
GET  /custom/{id}                 — One custom statement
POST /custom/{id}/evaluate        — Finish a user-based session
GET  /custom/{id}/votes           — Community votes on a custom statement
POST /custom/{id}/votes           — Cast a whole-statement vote
POST /evaluate/selections         — User-based verdict without storing
POST /evaluate/dynamic            — Heuristic verdict from text alone
GET  /target-groups/{group}       — Power profile and context for a group
POST /suggestions                 — Remediation and makeover suggestions
GET  /criteria                    — Criteria labels and questions
GET  /analyses                    — Stored analyses
GET  /insights                    — Aggregate dashboard statistics
GET  /health                      — Health check
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.requests import Request

from greenlie import __version__
from greenlie.config import settings
from greenlie.engine import engine
from greenlie.insights import aggregated_stats, dashboard_stats
from greenlie.logging import setup_logging, get_logger
from greenlie.models import CRITERIA_ORDER
from greenlie.power_profiles import known_groups
from greenlie.service import (
    AlreadyAnalyzedError,
    InvalidStatementError,
    complete_custom_analysis,
    complete_fact_analysis,
    record_custom_vote,
    record_vote,
    submit_custom_statement,
)
from greenlie.storage import AnalysisStore, get_store
from greenlie.schemas.api import (
    CustomAnalysisResponse,
    CustomStatementCreated,
    CustomStatementRequest,
    CustomVoteRequest,
    DynamicRequest,
    DynamicVerdictResponse,
    FeedbackRequest,
    FeedbackResponse,
    HealthResponse,
    SelectionsRequest,
    SuggestionsRequest,
    SuggestionsResponse,
    TargetGroupResponse,
    UserVerdictResponse,
    VoteRequest,
)

logger = get_logger("api")


# ============================================================
# STARTUP / SHUTDOWN
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(
        f"GreenLie API starting with {len(engine.list_statements())} reference statements",
    )
    yield
    logger.info("GreenLie API shutting down")


app = FastAPI(
    title="GreenLie API",
    description="Structural honesty evaluator for sustainability statements",
    version=f"{__version__} (engine {settings.ENGINE_VERSION})",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
    allow_credentials=False,
)


# ============================================================
# GLOBAL ERROR HANDLER
# ============================================================

@app.exception_handler(Exception)
async def global_error_handler(request: Request, exc: Exception):
    """Catch unhandled exceptions — return structured error, don't leak internals."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra={"error": str(exc), "path": request.url.path, "method": request.method},
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error. The evaluation could not be completed."},
    )


def _statement_or_404(statement_id: str):
    statement = engine.lookup_statement(statement_id)
    if statement is None:
        raise HTTPException(404, f"Statement not found: {statement_id}")
    return statement


# ============================================================
# CURATED STATEMENTS
# ============================================================

@app.get("/statements")
async def list_statements():
    statements = engine.list_statements()
    return {
        "total": len(statements),
        "statements": [s.to_dict() for s in statements],
    }


@app.get("/statements/{statement_id}")
async def get_statement(statement_id: str):
    return _statement_or_404(statement_id).to_dict()


@app.post("/statements/{statement_id}/feedback", response_model=FeedbackResponse)
async def statement_feedback(statement_id: str, request: FeedbackRequest):
    """Grade one questionnaire answer against the curated status."""
    statement = _statement_or_404(statement_id)
    return engine.corrective_feedback(statement, request.criterion, request.user_choice).to_dict()


@app.post("/statements/{statement_id}/evaluate")
async def evaluate_statement(
    statement_id: str,
    request: SelectionsRequest,
    store: AnalysisStore = Depends(get_store),
):
    """Finish a fact-based session. The verdict comes from ground truth."""
    result = complete_fact_analysis(statement_id, request.selections, store)
    if result is None:
        raise HTTPException(404, f"Statement not found: {statement_id}")
    return result


@app.get("/statements/{statement_id}/votes")
async def statement_votes(
    statement_id: str,
    store: AnalysisStore = Depends(get_store),
):
    _statement_or_404(statement_id)
    tallies = store.get_votes_for_statement(statement_id)
    return {
        "statement_id": statement_id,
        "votes": {c.value: counts for c, counts in tallies.items()},
    }


@app.post("/statements/{statement_id}/votes")
async def cast_statement_vote(
    statement_id: str,
    request: VoteRequest,
    store: AnalysisStore = Depends(get_store),
):
    vote = record_vote(statement_id, request.criterion, request.vote_type, store)
    if vote is None:
        raise HTTPException(404, f"Statement not found: {statement_id}")
    return vote.to_dict()


# ============================================================
# CUSTOM STATEMENTS
# ============================================================

@app.post("/custom", response_model=CustomStatementCreated, status_code=201)
async def create_custom_statement(
    request: CustomStatementRequest,
    store: AnalysisStore = Depends(get_store),
):
    try:
        custom_id = submit_custom_statement(
            request.statement, request.source_type, request.target_group, store,
        )
    except InvalidStatementError as e:
        raise HTTPException(422, str(e))
    return {"id": custom_id}


@app.get("/custom/{custom_id}")
async def get_custom_statement(
    custom_id: str,
    store: AnalysisStore = Depends(get_store),
):
    record = store.get_custom_statement(custom_id)
    if record is None:
        raise HTTPException(404, f"Custom statement not found: {custom_id}")
    return {
        **record.to_dict(),
        "target_context": engine.typical_power_context(record.target_group).to_dict(),
    }


@app.post("/custom/{custom_id}/evaluate", response_model=CustomAnalysisResponse)
async def evaluate_custom_statement(
    custom_id: str,
    request: SelectionsRequest,
    store: AnalysisStore = Depends(get_store),
):
    """Finish a user-based session. The verdict comes from the user's answers."""
    try:
        result = complete_custom_analysis(custom_id, request.selections, store)
    except AlreadyAnalyzedError as e:
        raise HTTPException(409, str(e))
    if result is None:
        raise HTTPException(404, f"Custom statement not found: {custom_id}")
    return result


@app.get("/custom/{custom_id}/votes")
async def custom_statement_votes(
    custom_id: str,
    store: AnalysisStore = Depends(get_store),
):
    if store.get_custom_statement(custom_id) is None:
        raise HTTPException(404, f"Custom statement not found: {custom_id}")
    return {
        "statement_id": custom_id,
        "votes": store.get_votes_for_custom_statement(custom_id),
    }


@app.post("/custom/{custom_id}/votes")
async def cast_custom_vote(
    custom_id: str,
    request: CustomVoteRequest,
    store: AnalysisStore = Depends(get_store),
):
    vote = record_custom_vote(custom_id, request.vote_type, store)
    if vote is None:
        raise HTTPException(404, f"Custom statement not found: {custom_id}")
    return vote.to_dict()


# ============================================================
# STATELESS EVALUATION
# ============================================================

@app.post("/evaluate/selections", response_model=UserVerdictResponse)
async def evaluate_selections(request: SelectionsRequest):
    return engine.evaluate_from_user_selections(request.selections).to_dict()


@app.post("/evaluate/dynamic", response_model=DynamicVerdictResponse)
async def evaluate_dynamic(request: DynamicRequest):
    result = engine.dynamic_verdict(request.statement, request.target_group, request.source_type)
    return result.to_dict()


@app.get("/target-groups/{target_group}", response_model=TargetGroupResponse)
async def target_group(target_group: str):
    return {
        "target_group": target_group,
        "known": target_group in known_groups(),
        "power_profile": [c.value for c in engine.power_profile(target_group)],
        "context": engine.typical_power_context(target_group).to_dict(),
    }


@app.post("/suggestions", response_model=SuggestionsResponse)
async def suggestions(request: SuggestionsRequest):
    remediation = engine.remediation_suggestions(request.missing_conditions)
    makeover = []
    if request.statement and request.target_group:
        makeover = engine.honest_makeover_suggestions(
            request.statement, request.target_group, request.missing_conditions,
        )
    return {
        "remediation": {c.value: text for c, text in remediation.items()},
        "makeover": makeover,
    }


@app.get("/criteria")
async def criteria():
    return {
        "criteria": [
            {"id": c.value, "label": c.label, "question": c.question}
            for c in CRITERIA_ORDER
        ],
        "target_groups": known_groups(),
    }


# ============================================================
# STORED DATA
# ============================================================

@app.get("/analyses")
async def analyses(store: AnalysisStore = Depends(get_store)):
    records = store.get_analyses()
    return {
        "total": len(records),
        "analyses": [a.to_dict() for a in records],
        "stats": aggregated_stats(records),
    }


@app.get("/insights")
async def insights(store: AnalysisStore = Depends(get_store)):
    return dashboard_stats(
        engine.list_statements(),
        store.get_all_analyzed_statements(),
        store.get_analyses(),
    )


@app.get("/health", response_model=HealthResponse)
async def health(store: AnalysisStore = Depends(get_store)):
    """Health check."""
    return {
        "status": "operational",
        "version": __version__,
        "engine_version": settings.ENGINE_VERSION,
        "statements_loaded": len(engine.list_statements()),
        "stored_analyses": len(store.get_analyses()),
    }


# --- Version Headers Middleware ---
@app.middleware("http")
async def add_version_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-GreenLie-Version"] = __version__
    response.headers["X-Engine-Version"] = settings.ENGINE_VERSION
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


# --- Request Logging Middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with method, path, status, duration."""
    path = request.url.path
    if path == "/health":
        return await call_next(request)

    start = time.time()
    response = await call_next(request)
    duration_ms = round((time.time() - start) * 1000, 1)

    logger.info(
        f"{request.method} {path} → {response.status_code} ({duration_ms}ms)",
        extra={
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response
