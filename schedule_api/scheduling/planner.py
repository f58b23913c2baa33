"""Optimal schedule suggestion for an event.

``plan_schedule`` runs the whole pipeline: it expands performances into
sessions, scores every (unit, date) pair, places units greedily and then
refines the placement by annealing. It returns the JSON-ready result with
summary metrics.
"""

import logging
import random
import time
from collections.abc import Mapping, Sequence
from dataclasses import asdict
from typing import Any

from schedule_api.scheduling.annealing import AnnealingConfig, optimize_schedule
from schedule_api.scheduling.scoring import (
    ScheduleUnit,
    ScoredOption,
    build_users,
    greedy_schedule,
    score_options,
)

logger = logging.getLogger("schedule_api.scheduling")


def expand_units(performances: Sequence[Mapping[str, Any]], sessions: int = 1) -> list[ScheduleUnit]:
    """One unit per performance and session, in performance order then session order."""
    if sessions < 1:
        raise ValueError("sessions must be at least 1")
    units = []
    for perf in performances:
        for session in range(1, sessions + 1):
            title = perf["title"] if sessions == 1 else f"{perf['title']} (session {session})"
            units.append(ScheduleUnit(performance_id=perf["id"], session=session, title=title))
    return units


def schedule_metrics(
    schedule: list[ScoredOption],
    unit_count: int,
    scheduled: int,
    sessions: int,
    elapsed_ms: float,
) -> dict[str, Any]:
    return {
        "total_weighted_score": sum(o.weighted_score for o in schedule),
        "total_conflicts": sum(o.conflict_count for o in schedule),
        "total_available": sum(o.available_count for o in schedule),
        "total_maybe": sum(o.maybe_count for o in schedule),
        "total_unavailable": sum(o.unavailable_count for o in schedule),
        "performance_count": unit_count,
        "scheduled_performances": scheduled,
        "session_count": sessions,
        "computation_time_ms": round(elapsed_ms, 3),
    }


def plan_schedule(
    event: Mapping[str, Any],
    responses: Sequence[Mapping[str, Any]],
    sessions: int = 1,
    config: AnnealingConfig | None = None,
    rng: random.Random | None = None,
) -> dict[str, Any]:
    started = time.perf_counter()
    config = config or AnnealingConfig()
    rng = rng or random.Random()

    units = expand_units(event["performances"], sessions)
    dates = list(event["dates"])
    users = build_users(responses, sessions)

    options = score_options(units, dates, users)
    initial = greedy_schedule(options, len(units))
    suggested = optimize_schedule(
        options,
        initial,
        [unit.key for unit in units],
        users,
        config,
        rng,
    )

    elapsed_ms = (time.perf_counter() - started) * 1000.0
    logger.info(
        "Planned schedule event=%s units=%d dates=%d users=%d sessions=%d in %.1fms",
        event.get("id"), len(units), len(dates), len(users), sessions, elapsed_ms,
    )
    return {
        "suggested_schedule": [asdict(o) for o in suggested],
        "metrics": schedule_metrics(suggested, len(units), len(initial), sessions, elapsed_ms),
    }
