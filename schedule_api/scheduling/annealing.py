"""Simulated-annealing refinement of a unit -> date schedule.

Energy (lower is better) combines three terms:

* 15 per distinct participant double-booked on some date,
* minus the expected attendance (available + 0.5 * maybe) of every placement,
* 2 * (k - 1) ** 1.5 for each date holding k > 1 units.
"""

import logging
import math
import random
from collections import defaultdict
from collections.abc import Mapping
from dataclasses import dataclass, replace

from schedule_api.scheduling.scoring import ATTENDING, ScoredOption, UnitKey, UserData

logger = logging.getLogger("schedule_api.scheduling")

CONFLICT_WEIGHT = 15.0
OVERLAP_WEIGHT = 2.0
OVERLAP_EXPONENT = 1.5

Schedule = dict[UnitKey, int]
OptionMap = Mapping[tuple[UnitKey, int], ScoredOption]


@dataclass(frozen=True)
class AnnealingConfig:
    max_iterations: int = 10000
    initial_temperature: float = 100.0
    min_temperature: float = 0.1
    cooling_rate: float = 0.99

    @classmethod
    def from_settings(cls, settings) -> "AnnealingConfig":
        return cls(
            max_iterations=settings.max_iterations,
            initial_temperature=settings.initial_temperature,
            min_temperature=settings.min_temperature,
            cooling_rate=settings.cooling_rate,
        )


def _units_by_date(schedule: Schedule) -> dict[int, list[UnitKey]]:
    by_date: dict[int, list[UnitKey]] = defaultdict(list)
    for key, date_id in schedule.items():
        by_date[date_id].append(key)
    return by_date


def _is_double_booked(user: UserData, key: UnitKey, date_id: int, same_day: list[UnitKey]) -> bool:
    if key not in user.units:
        return False
    if user.availability.get(date_id) not in ATTENDING:
        return False
    return any(other != key and other in user.units for other in same_day)


def conflicting_users(
    schedule: Schedule,
    users: Mapping[str, UserData],
    key: UnitKey,
    date_id: int,
) -> list[str]:
    """Participants who would attend ``key`` on ``date_id`` and another unit that same day."""
    same_day = [k for k, d in schedule.items() if d == date_id]
    if len(same_day) <= 1:
        return []
    return [
        name for name, user in users.items()
        if _is_double_booked(user, key, date_id, same_day)
    ]


def schedule_energy(schedule: Schedule, option_map: OptionMap, users: Mapping[str, UserData]) -> float:
    by_date = _units_by_date(schedule)
    conflicted: set[str] = set()
    attendance = 0.0

    for key, date_id in schedule.items():
        option = option_map.get((key, date_id))
        if option is not None:
            attendance += option.attendance
        same_day = by_date[date_id]
        if len(same_day) <= 1:
            continue
        for name, user in users.items():
            if name not in conflicted and _is_double_booked(user, key, date_id, same_day):
                conflicted.add(name)

    overlap = sum(
        OVERLAP_WEIGHT * (len(keys) - 1) ** OVERLAP_EXPONENT
        for keys in by_date.values()
        if len(keys) > 1
    )
    return CONFLICT_WEIGHT * len(conflicted) - attendance + overlap


def _neighbor(
    schedule: Schedule,
    unit_keys: list[UnitKey],
    candidate_dates: Mapping[UnitKey, list[int]],
    rng: random.Random,
) -> Schedule:
    neighbor = dict(schedule)
    key = rng.choice(unit_keys)
    dates = candidate_dates.get(key)
    if dates:
        # may pick the current date
        neighbor[key] = rng.choice(dates)
    return neighbor


def _accept(current: float, candidate: float, temperature: float, rng: random.Random) -> bool:
    if candidate < current:
        return True
    return rng.random() < math.exp(-(candidate - current) / temperature)


def anneal(
    initial: Schedule,
    option_map: OptionMap,
    users: Mapping[str, UserData],
    config: AnnealingConfig,
    rng: random.Random,
) -> Schedule:
    """Return the lowest-energy schedule seen while annealing from ``initial``."""
    unit_keys = list(initial)
    if not unit_keys:
        return {}
    candidate_dates: dict[UnitKey, list[int]] = defaultdict(list)
    for key, date_id in option_map:
        candidate_dates[key].append(date_id)

    current = dict(initial)
    current_energy = schedule_energy(current, option_map, users)
    best, best_energy = current, current_energy
    temperature = config.initial_temperature

    iterations = 0
    while iterations < config.max_iterations and temperature > config.min_temperature:
        candidate = _neighbor(current, unit_keys, candidate_dates, rng)
        candidate_energy = schedule_energy(candidate, option_map, users)
        if _accept(current_energy, candidate_energy, temperature, rng):
            current, current_energy = candidate, candidate_energy
            if current_energy < best_energy:
                best, best_energy = current, current_energy
        temperature *= config.cooling_rate
        iterations += 1

    logger.debug("annealing finished iterations=%d best_energy=%.2f", iterations, best_energy)
    return best


def optimize_schedule(
    options: list[ScoredOption],
    initial: Schedule,
    unit_order: list[UnitKey],
    users: Mapping[str, UserData],
    config: AnnealingConfig,
    rng: random.Random,
) -> list[ScoredOption]:
    """Anneal ``initial`` and return the chosen options in ``unit_order``.

    Conflict fields on the returned options reflect the final schedule, not
    the per-option estimates from scoring.
    """
    option_map = {(o.key, o.date_id): o for o in options}
    final = anneal(initial, option_map, users, config, rng)

    result = []
    for key in unit_order:
        date_id = final.get(key)
        option = option_map.get((key, date_id)) if date_id is not None else None
        if option is None:
            continue
        names = conflicting_users(final, users, key, date_id)
        result.append(replace(option, conflict_count=len(names), conflicting_users=names))
    return result
