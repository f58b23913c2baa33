import logging

from fastapi import APIRouter, Query

from schedule_api.errors import BadRequestError
from schedule_api.models.events import BulkDatesRequest, DatesResponse, TimeOptionsResponse
from schedule_api.scheduling.dates import bulk_dates, parse_day, parse_time, time_options

logger = logging.getLogger("schedule_api.dates")
router = APIRouter(prefix="/dates", tags=["dates"])


@router.post("/bulk", response_model=DatesResponse)
async def generate_bulk_dates(req: BulkDatesRequest) -> DatesResponse:
    logger.info("POST /dates/bulk start=%s days=%d %s-%s", req.start_date, req.days, req.start_time, req.end_time)
    try:
        dates = bulk_dates(parse_day(req.start_date), req.days, parse_time(req.start_time), parse_time(req.end_time))
    except ValueError as e:
        raise BadRequestError(detail=str(e))
    return DatesResponse(dates=dates)


@router.get("/time-options", response_model=TimeOptionsResponse)
async def get_time_options(
    step: int = Query(30, ge=1, le=720, description="Minutes between options"),
) -> TimeOptionsResponse:
    try:
        options = time_options(step)
    except ValueError as e:
        raise BadRequestError(detail=str(e))
    return TimeOptionsResponse(step=step, options=options)
