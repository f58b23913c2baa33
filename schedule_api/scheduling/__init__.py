from schedule_api.scheduling.annealing import AnnealingConfig
from schedule_api.scheduling.conflicts import analyze_conflicts
from schedule_api.scheduling.planner import plan_schedule
from schedule_api.scheduling.results import summarize_event

__all__ = ["AnnealingConfig", "analyze_conflicts", "plan_schedule", "summarize_event"]
