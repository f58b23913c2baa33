"""Per (performance, date) availability scoring and the greedy placement."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

AVAILABLE = "available"
MAYBE = "maybe"
UNAVAILABLE = "unavailable"
STATUSES = (AVAILABLE, MAYBE, UNAVAILABLE)
ATTENDING = frozenset({AVAILABLE, MAYBE})

MAYBE_WEIGHT = 0.5

# (performance_id, session)
UnitKey = tuple[int, int]


@dataclass(frozen=True)
class ScheduleUnit:
    """One thing to place on a date: a performance, or one session of it."""

    performance_id: int
    session: int
    title: str

    @property
    def key(self) -> UnitKey:
        return (self.performance_id, self.session)


@dataclass
class UserData:
    name: str
    units: set[UnitKey] = field(default_factory=set)
    availability: dict[int, str] = field(default_factory=dict)

    @property
    def performance_ids(self) -> set[int]:
        return {perf_id for perf_id, _ in self.units}


@dataclass
class ScoredOption:
    performance_id: int
    session: int
    date_id: int
    performance_name: str
    date_value: str
    available_count: int = 0
    maybe_count: int = 0
    unavailable_count: int = 0
    total_count: int = 0
    conflict_count: int = 0
    weighted_score: float = 0.0
    conflicting_users: list[str] = field(default_factory=list)

    @property
    def key(self) -> UnitKey:
        return (self.performance_id, self.session)

    @property
    def attendance(self) -> float:
        return self.available_count + MAYBE_WEIGHT * self.maybe_count


def build_users(responses: Iterable[Mapping[str, Any]], sessions: int = 1) -> dict[str, UserData]:
    """Collapse responses into per-participant records keyed by name.

    A later response under the same name replaces an earlier one. A selected
    performance counts as selecting every one of its ``sessions``.
    """
    users: dict[str, UserData] = {}
    for response in responses:
        user = UserData(name=response["name"])
        for selection in response.get("performances") or []:
            perf_id = selection["performance_id"]
            for session in range(1, sessions + 1):
                user.units.add((perf_id, session))
        for answer in response.get("answers") or []:
            user.availability[answer["date_id"]] = answer["status"]
        users[user.name] = user
    return users


def _sort_key(option: ScoredOption) -> tuple:
    return (
        -option.weighted_score,
        option.conflict_count,
        -option.available_count,
        -option.maybe_count,
    )


def score_options(
    units: list[ScheduleUnit],
    dates: list[Mapping[str, Any]],
    users: Mapping[str, UserData],
) -> list[ScoredOption]:
    """Score every unit on every date, best first.

    A participant who picked more than one distinct performance is counted as
    a potential conflict on every option they answered for.
    """
    options: dict[tuple[UnitKey, int], ScoredOption] = {}
    for unit in units:
        for d in dates:
            options[(unit.key, d["id"])] = ScoredOption(
                performance_id=unit.performance_id,
                session=unit.session,
                date_id=d["id"],
                performance_name=unit.title,
                date_value=d["value"],
            )

    known_units = {unit.key for unit in units}
    for user in users.values():
        has_multiple = len(user.performance_ids) > 1
        for key in sorted(user.units & known_units):
            for d in dates:
                status = user.availability.get(d["id"])
                if status is None:
                    continue
                option = options[(key, d["id"])]
                option.total_count += 1
                if status == AVAILABLE:
                    option.available_count += 1
                    option.weighted_score += 1.0
                elif status == MAYBE:
                    option.maybe_count += 1
                    option.weighted_score += MAYBE_WEIGHT
                else:
                    option.unavailable_count += 1
                if has_multiple:
                    option.conflict_count += 1
                    if user.name not in option.conflicting_users:
                        option.conflicting_users.append(user.name)

    return sorted(options.values(), key=_sort_key)


def greedy_schedule(options: list[ScoredOption], unit_count: int) -> dict[UnitKey, int]:
    """Place each unit on its best free date, then reuse dates for any leftovers.

    ``options`` must already be sorted best first.
    """
    schedule: dict[UnitKey, int] = {}
    used_dates: set[int] = set()
    for option in options:
        if len(schedule) == unit_count:
            break
        if option.key in schedule or option.date_id in used_dates:
            continue
        schedule[option.key] = option.date_id
        used_dates.add(option.date_id)

    for option in options:
        if len(schedule) == unit_count:
            break
        if option.key not in schedule:
            schedule[option.key] = option.date_id
    return schedule
