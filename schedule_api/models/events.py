from typing import Literal

from pydantic import BaseModel, Field, field_validator

from schedule_api.scheduling.dates import parse_date_value, parse_day, parse_time

AnswerStatus = Literal["available", "maybe", "unavailable"]


class EventDate(BaseModel):
    id: int
    event_id: str
    value: str


class Performance(BaseModel):
    id: int
    event_id: str
    title: str
    description: str = ""


class Event(BaseModel):
    id: str
    title: str
    description: str = ""
    dates: list[EventDate]
    performances: list[Performance]
    created_at: str
    updated_at: str


class ResponseAnswer(BaseModel):
    id: int
    response_id: int
    date_id: int
    status: AnswerStatus


class UserPerformance(BaseModel):
    id: int
    response_id: int
    performance_id: int


class Response(BaseModel):
    id: int
    event_id: str
    name: str
    answers: list[ResponseAnswer] = []
    performances: list[UserPerformance] = []
    created_at: str


class PerformanceInput(BaseModel):
    title: str
    description: str = ""

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v or len(v) > 200:
            raise ValueError("title must be 1-200 characters")
        return v


class CreateEventRequest(BaseModel):
    title: str
    description: str = ""
    dates: list[str]
    performances: list[PerformanceInput]

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v or len(v) > 200:
            raise ValueError("title must be 1-200 characters")
        return v

    @field_validator("dates")
    @classmethod
    def validate_dates(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("dates must not be empty")
        return [parse_date_value(d).format() for d in v]

    @field_validator("performances")
    @classmethod
    def validate_performances(cls, v: list[PerformanceInput]) -> list[PerformanceInput]:
        if not v:
            raise ValueError("performances must not be empty")
        return v


class CreateResponseRequest(BaseModel):
    name: str
    answers: dict[int, AnswerStatus]
    performances: list[int]

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v or len(v) > 100:
            raise ValueError("name must be 1-100 characters")
        return v

    @field_validator("performances")
    @classmethod
    def dedupe_performances(cls, v: list[int]) -> list[int]:
        return list(dict.fromkeys(v))


class CreateResponseResult(BaseModel):
    message: str
    id: int


class ConflictAnalysisRequest(BaseModel):
    date_ids: list[int] = []


class ConflictReport(BaseModel):
    date: EventDate
    performances: list[Performance]
    conflicting_users: list[str]


class ConflictAnalysisResponse(BaseModel):
    conflicts: list[ConflictReport]


class DateSummary(BaseModel):
    date_id: int
    value: str
    available: int
    maybe: int
    unavailable: int
    no_answer: int
    score: float


class ParticipantSummary(BaseModel):
    response_id: int
    name: str
    answers: dict[str, AnswerStatus]
    totals: dict[str, int]
    performance_ids: list[int]


class PerformanceSummary(BaseModel):
    performance_id: int
    title: str
    participant_count: int


class EventSummary(BaseModel):
    event_id: str
    response_count: int
    dates: list[DateSummary]
    best_date_ids: list[int]
    participants: list[ParticipantSummary]
    performances: list[PerformanceSummary]


class BulkDatesRequest(BaseModel):
    start_date: str
    days: int = Field(default=3, ge=1, le=31)
    start_time: str = "19:00"
    end_time: str = "21:00"

    @field_validator("start_date")
    @classmethod
    def validate_start_date(cls, v: str) -> str:
        parse_day(v)
        return v

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        parse_time(v)
        return v


class DatesResponse(BaseModel):
    dates: list[str]


class TimeOptionsResponse(BaseModel):
    step: int
    options: list[str]
