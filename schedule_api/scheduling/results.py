"""Aggregated results grid: per-date tallies, per-participant totals, per-performance headcount."""

from collections import Counter
from collections.abc import Mapping, Sequence
from typing import Any

from schedule_api.scheduling.scoring import AVAILABLE, MAYBE, MAYBE_WEIGHT, STATUSES, UNAVAILABLE


def _tally(statuses) -> dict[str, int]:
    counts = Counter(s if s in STATUSES else UNAVAILABLE for s in statuses)
    return {status: counts.get(status, 0) for status in STATUSES}


def summarize_event(event: Mapping[str, Any], responses: Sequence[Mapping[str, Any]]) -> dict[str, Any]:
    date_ids = {d["id"] for d in event["dates"]}

    participants = []
    by_date: dict[int, list[str]] = {d["id"]: [] for d in event["dates"]}
    perf_counts: Counter = Counter()
    for response in responses:
        answers = {a["date_id"]: a["status"] for a in response.get("answers") or [] if a["date_id"] in date_ids}
        for date_id, status in answers.items():
            by_date[date_id].append(status)
        perf_ids = sorted({p["performance_id"] for p in response.get("performances") or []})
        perf_counts.update(perf_ids)
        participants.append({
            "response_id": response["id"],
            "name": response["name"],
            "answers": {str(k): v for k, v in answers.items()},
            "totals": _tally(answers.values()),
            "performance_ids": perf_ids,
        })

    dates = []
    for d in event["dates"]:
        counts = _tally(by_date[d["id"]])
        dates.append({
            "date_id": d["id"],
            "value": d["value"],
            **counts,
            "no_answer": len(responses) - sum(counts.values()),
            "score": counts[AVAILABLE] + MAYBE_WEIGHT * counts[MAYBE],
        })

    best_score = max((d["score"] for d in dates), default=0.0)
    return {
        "event_id": event["id"],
        "response_count": len(responses),
        "dates": dates,
        "best_date_ids": [d["date_id"] for d in dates if best_score > 0 and d["score"] == best_score],
        "participants": participants,
        "performances": [
            {
                "performance_id": p["id"],
                "title": p["title"],
                "participant_count": perf_counts.get(p["id"], 0),
            }
            for p in event["performances"]
        ],
    }
