from pydantic import BaseModel


class ScoredOption(BaseModel):
    performance_id: int
    session: int = 1
    date_id: int
    performance_name: str
    date_value: str
    available_count: int
    maybe_count: int
    unavailable_count: int
    total_count: int
    conflict_count: int
    weighted_score: float
    conflicting_users: list[str]


class ScheduleMetrics(BaseModel):
    total_weighted_score: float
    total_conflicts: int
    total_available: int
    total_maybe: int
    total_unavailable: int
    performance_count: int
    scheduled_performances: int
    session_count: int = 1
    computation_time_ms: float


class OptimalScheduleResponse(BaseModel):
    suggested_schedule: list[ScoredOption]
    metrics: ScheduleMetrics
