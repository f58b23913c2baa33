import logging
import random
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from starlette.concurrency import run_in_threadpool

from schedule_api import db
from schedule_api.config import OptimizerSettings
from schedule_api.dependencies import OptionalScheduleCache, Optimizer, require_database
from schedule_api.errors import BadRequestError, DatabaseError, EventNotFoundError
from schedule_api.models.events import (
    ConflictAnalysisRequest,
    ConflictAnalysisResponse,
    CreateEventRequest,
    CreateResponseRequest,
    CreateResponseResult,
    Event,
    EventSummary,
    Response,
)
from schedule_api.models.schedule import OptimalScheduleResponse
from schedule_api.scheduling import AnnealingConfig, analyze_conflicts, plan_schedule, summarize_event

logger = logging.getLogger("schedule_api.events")
router = APIRouter(prefix="/events", tags=["events"], dependencies=[Depends(require_database)])

MAX_SESSIONS = 20


async def _load_event(event_id: str) -> Dict[str, Any]:
    try:
        event = await db.get_event(event_id)
    except Exception:
        logger.exception("Failed to load event %s", event_id)
        raise DatabaseError(detail="Failed to load event")
    if not event:
        logger.warning("Event not found: %s", event_id)
        raise EventNotFoundError(event_id)
    return event


async def _load_responses(event_id: str) -> List[Dict[str, Any]]:
    try:
        return await db.get_responses(event_id)
    except Exception:
        logger.exception("Failed to load responses for event %s", event_id)
        raise DatabaseError(detail="Failed to get responses")


@router.post("", status_code=201, response_model=Event)
async def create_event(req: CreateEventRequest) -> Dict[str, Any]:
    logger.info(
        "POST /events title=%s dates=%d performances=%d",
        req.title, len(req.dates), len(req.performances),
    )
    try:
        event = await db.create_event(
            title=req.title,
            description=req.description,
            dates=req.dates,
            performances=[p.model_dump() for p in req.performances],
        )
    except Exception:
        logger.exception("Failed to create event")
        raise DatabaseError(detail="Failed to create event")
    logger.info("Created event id=%s", event["id"])
    return event


@router.get("/{event_id}", response_model=Event)
async def get_event(event_id: str) -> Dict[str, Any]:
    logger.info("GET /events/%s", event_id)
    return await _load_event(event_id)


@router.post("/{event_id}/responses", status_code=201, response_model=CreateResponseResult)
async def add_response(
    event_id: str,
    req: CreateResponseRequest,
    cache: OptionalScheduleCache,
) -> CreateResponseResult:
    logger.info(
        "POST /events/%s/responses name=%s answers=%d performances=%d",
        event_id, req.name, len(req.answers), len(req.performances),
    )
    event = await _load_event(event_id)

    date_ids = {d["id"] for d in event["dates"]}
    unknown_dates = sorted(set(req.answers) - date_ids)
    if unknown_dates:
        raise BadRequestError(detail="Answer for a date outside this event", date_ids=unknown_dates)
    perf_ids = {p["id"] for p in event["performances"]}
    unknown_perfs = sorted(set(req.performances) - perf_ids)
    if unknown_perfs:
        raise BadRequestError(detail="Unknown performance for this event", performance_ids=unknown_perfs)

    try:
        response = await db.add_response(event_id, req.name, dict(req.answers), list(req.performances))
    except Exception:
        logger.exception("Failed to add response to event %s", event_id)
        raise DatabaseError(detail="Failed to create response")

    if cache is not None:
        await cache.invalidate(event_id)
    logger.info("Added response id=%s to event %s", response["id"], event_id)
    return CreateResponseResult(message="Response added successfully", id=response["id"])


@router.get("/{event_id}/responses", response_model=List[Response])
async def get_responses(event_id: str) -> List[Dict[str, Any]]:
    logger.info("GET /events/%s/responses", event_id)
    await _load_event(event_id)
    return await _load_responses(event_id)


@router.post("/{event_id}/conflicts/analyze", response_model=ConflictAnalysisResponse)
async def analyze_event_conflicts(
    event_id: str,
    req: Optional[ConflictAnalysisRequest] = None,
) -> Dict[str, Any]:
    date_ids = req.date_ids if req else []
    logger.info("POST /events/%s/conflicts/analyze date_ids=%s", event_id, date_ids)
    event = await _load_event(event_id)
    responses = await _load_responses(event_id)
    return {"conflicts": analyze_conflicts(event, responses, date_ids)}


@router.get("/{event_id}/summary", response_model=EventSummary)
async def get_event_summary(event_id: str) -> Dict[str, Any]:
    logger.info("GET /events/%s/summary", event_id)
    event = await _load_event(event_id)
    responses = await _load_responses(event_id)
    return summarize_event(event, responses)


async def _optimal_schedule(
    event_id: str,
    sessions: int,
    cache: OptionalScheduleCache,
    optimizer: OptimizerSettings,
) -> Dict[str, Any]:
    generation = await cache.generation(event_id) if cache is not None else None
    if generation is not None:
        cached = await cache.get(event_id, generation, sessions)
        if cached is not None:
            logger.info("Schedule cache hit event=%s sessions=%d", event_id, sessions)
            return cached

    event = await _load_event(event_id)
    responses = await _load_responses(event_id)
    rng = random.Random(optimizer.seed)
    result = await run_in_threadpool(
        plan_schedule,
        event,
        responses,
        sessions,
        AnnealingConfig.from_settings(optimizer),
        rng,
    )
    if generation is not None:
        await cache.set(event_id, generation, sessions, result)
    return result


def _parse_sessions(raw: Optional[str], fallback: int) -> int:
    if raw is None:
        return 1
    try:
        sessions = int(raw)
    except ValueError:
        return fallback
    if sessions < 1:
        return fallback
    if sessions > MAX_SESSIONS:
        raise BadRequestError(detail=f"sessions must be at most {MAX_SESSIONS}")
    return sessions


@router.get("/{event_id}/optimal-schedule", response_model=OptimalScheduleResponse)
async def suggest_optimal_schedule(
    event_id: str,
    cache: OptionalScheduleCache,
    optimizer: Optimizer,
) -> Dict[str, Any]:
    logger.info("GET /events/%s/optimal-schedule", event_id)
    return await _optimal_schedule(event_id, 1, cache, optimizer)


@router.get("/{event_id}/multi-optimal-schedule", response_model=OptimalScheduleResponse)
async def suggest_multi_session_schedule(
    event_id: str,
    cache: OptionalScheduleCache,
    optimizer: Optimizer,
    sessions: Optional[str] = Query(None, description="Sessions needed per performance"),
) -> Dict[str, Any]:
    count = _parse_sessions(sessions, optimizer.default_sessions)
    logger.info("GET /events/%s/multi-optimal-schedule sessions=%d", event_id, count)
    return await _optimal_schedule(event_id, count, cache, optimizer)
