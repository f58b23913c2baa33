"""Thin HTTP client for the schedule coordination API.

Usage:
    from schedule_api.client import ScheduleClient

    client = ScheduleClient("http://localhost:8080/api")
    event = client.create_event(
        title="Spring concert",
        dates=["2025-04-15 15:00-17:00"],
        performances=[{"title": "Opening", "description": ""}],
    )
    client.add_response(event["id"], "Aiko", {event["dates"][0]["id"]: "available"}, [])
    schedule = client.optimal_schedule(event["id"])
"""

import logging
import os
from typing import Any, Optional

import requests

logger = logging.getLogger("schedule_api.client")

DEFAULT_API_URL = "http://localhost:8080/api"


class ScheduleAPIError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, body: Any):
        self.status_code = status_code
        self.body = body
        detail = body.get("detail") if isinstance(body, dict) else body
        super().__init__(f"API request failed ({status_code}): {detail}")


class ScheduleClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or os.getenv("SCHEDULE_API_URL", DEFAULT_API_URL)).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        if resp.status_code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = resp.text
            raise ScheduleAPIError(resp.status_code, body)
        return resp.json()

    def create_event(
        self,
        title: str,
        dates: list[str],
        performances: list[dict[str, str]],
        description: str = "",
    ) -> dict[str, Any]:
        payload = {
            "title": title,
            "description": description,
            "dates": dates,
            "performances": performances,
        }
        return self._request("POST", "/events", json=payload)

    def get_event(self, event_id: str) -> dict[str, Any]:
        return self._request("GET", f"/events/{event_id}")

    def add_response(
        self,
        event_id: str,
        name: str,
        answers: dict[int, str],
        performances: list[int],
    ) -> dict[str, Any]:
        payload = {
            "name": name,
            "answers": {str(date_id): status for date_id, status in answers.items()},
            "performances": performances,
        }
        return self._request("POST", f"/events/{event_id}/responses", json=payload)

    def get_responses(self, event_id: str) -> list[dict[str, Any]]:
        return self._request("GET", f"/events/{event_id}/responses")

    def analyze_conflicts(self, event_id: str, date_ids: Optional[list[int]] = None) -> dict[str, Any]:
        payload = {"date_ids": date_ids} if date_ids else {}
        return self._request("POST", f"/events/{event_id}/conflicts/analyze", json=payload)

    def event_summary(self, event_id: str) -> dict[str, Any]:
        return self._request("GET", f"/events/{event_id}/summary")

    def optimal_schedule(self, event_id: str) -> dict[str, Any]:
        return self._request("GET", f"/events/{event_id}/optimal-schedule")

    def multi_session_schedule(self, event_id: str, sessions: int) -> dict[str, Any]:
        return self._request(
            "GET",
            f"/events/{event_id}/multi-optimal-schedule",
            params={"sessions": sessions},
        )

    def bulk_dates(self, start_date: str, days: int, start_time: str, end_time: str) -> list[str]:
        payload = {
            "start_date": start_date,
            "days": days,
            "start_time": start_time,
            "end_time": end_time,
        }
        return self._request("POST", "/dates/bulk", json=payload)["dates"]

    def time_options(self, step: int = 30) -> list[str]:
        return self._request("GET", "/dates/time-options", params={"step": step})["options"]
