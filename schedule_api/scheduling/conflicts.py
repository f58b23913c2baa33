from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from schedule_api.scheduling.scoring import ATTENDING, build_users


def analyze_conflicts(
    event: Mapping[str, Any],
    responses: Sequence[Mapping[str, Any]],
    date_ids: Iterable[int] | None = None,
) -> list[dict[str, Any]]:
    """Report dates where attending participants are signed up for several performances.

    Any performance may happen on any date, so a participant who can attend
    (available or maybe) and picked more than one performance conflicts on
    that date. Dates without conflicts are omitted. ``date_ids`` limits the
    analysis to those dates; an empty or missing filter analyzes all of them.
    """
    wanted = set(date_ids or ())
    dates = [d for d in event["dates"] if not wanted or d["id"] in wanted]
    users = build_users(responses)

    reports = []
    for d in dates:
        names = [
            user.name for user in users.values()
            if user.availability.get(d["id"]) in ATTENDING and len(user.performance_ids) > 1
        ]
        if names:
            reports.append({
                "date": d,
                "performances": list(event["performances"]),
                "conflicting_users": names,
            })
    return reports
