"""Event repository: events, candidate dates, performances and responses."""

import secrets
import string
from datetime import UTC, datetime
from typing import Any

from psycopg import errors as pg_errors

from schedule_api.db.core import _get_connection

EVENT_ID_LENGTH = 10
EVENT_ID_ATTEMPTS = 10


def _generate_event_id(length: int = EVENT_ID_LENGTH) -> str:
    chars = string.ascii_letters + string.digits
    return "".join(secrets.choice(chars) for _ in range(length))


def _iso(ts: datetime) -> str:
    return ts.astimezone(UTC).isoformat()


async def create_event(
    title: str,
    description: str,
    dates: list[str],
    performances: list[dict[str, str]],
) -> dict[str, Any]:
    """Insert an event with its dates and performances in one transaction."""
    now = datetime.now(UTC)
    async with _get_connection() as conn:
        for _ in range(EVENT_ID_ATTEMPTS):
            event_id = _generate_event_id()
            try:
                async with conn.transaction():
                    await conn.execute(
                        """INSERT INTO events (id, title, description, created_at, updated_at)
                           VALUES (%s, %s, %s, %s, %s)""",
                        (event_id, title, description, now, now),
                    )
                    date_rows = []
                    for value in dates:
                        row = await (await conn.execute(
                            "INSERT INTO event_dates (event_id, value) VALUES (%s, %s) RETURNING id",
                            (event_id, value),
                        )).fetchone()
                        date_rows.append({"id": row[0], "event_id": event_id, "value": value})
                    perf_rows = []
                    for perf in performances:
                        perf_description = perf.get("description") or ""
                        row = await (await conn.execute(
                            """INSERT INTO performances (event_id, title, description)
                               VALUES (%s, %s, %s) RETURNING id""",
                            (event_id, perf["title"], perf_description),
                        )).fetchone()
                        perf_rows.append({
                            "id": row[0],
                            "event_id": event_id,
                            "title": perf["title"],
                            "description": perf_description,
                        })
            except pg_errors.UniqueViolation:
                continue
            return {
                "id": event_id,
                "title": title,
                "description": description,
                "dates": date_rows,
                "performances": perf_rows,
                "created_at": now.isoformat(),
                "updated_at": now.isoformat(),
            }
        raise RuntimeError("Failed to generate unique event ID")


async def get_event(event_id: str) -> dict[str, Any] | None:
    """Fetch an event with its dates and performances in insertion order."""
    async with _get_connection() as conn:
        row = await (await conn.execute(
            "SELECT id, title, description, created_at, updated_at FROM events WHERE id = %s",
            (event_id,),
        )).fetchone()
        if not row:
            return None
        event = {
            "id": row[0],
            "title": row[1],
            "description": row[2] or "",
            "created_at": _iso(row[3]),
            "updated_at": _iso(row[4]),
            "dates": [],
            "performances": [],
        }
        rows = await conn.execute(
            "SELECT id, value FROM event_dates WHERE event_id = %s ORDER BY id",
            (event_id,),
        )
        async for date_id, value in rows:
            event["dates"].append({"id": date_id, "event_id": event_id, "value": value})
        rows = await conn.execute(
            "SELECT id, title, description FROM performances WHERE event_id = %s ORDER BY id",
            (event_id,),
        )
        async for perf_id, title, description in rows:
            event["performances"].append({
                "id": perf_id,
                "event_id": event_id,
                "title": title,
                "description": description or "",
            })
        return event


async def add_response(
    event_id: str,
    name: str,
    answers: dict[int, str],
    performance_ids: list[int],
) -> dict[str, Any]:
    """Insert a response with its answers and performance selections in one transaction."""
    now = datetime.now(UTC)
    async with _get_connection() as conn:
        async with conn.transaction():
            row = await (await conn.execute(
                "INSERT INTO responses (event_id, name, created_at) VALUES (%s, %s, %s) RETURNING id",
                (event_id, name, now),
            )).fetchone()
            response_id = row[0]
            answer_rows = []
            for date_id, status in answers.items():
                row = await (await conn.execute(
                    """INSERT INTO response_answers (response_id, date_id, status)
                       VALUES (%s, %s, %s) RETURNING id""",
                    (response_id, date_id, status),
                )).fetchone()
                answer_rows.append({
                    "id": row[0],
                    "response_id": response_id,
                    "date_id": date_id,
                    "status": status,
                })
            perf_rows = []
            for perf_id in performance_ids:
                row = await (await conn.execute(
                    """INSERT INTO user_performances (response_id, performance_id)
                       VALUES (%s, %s) RETURNING id""",
                    (response_id, perf_id),
                )).fetchone()
                perf_rows.append({"id": row[0], "response_id": response_id, "performance_id": perf_id})
    return {
        "id": response_id,
        "event_id": event_id,
        "name": name,
        "answers": answer_rows,
        "performances": perf_rows,
        "created_at": now.isoformat(),
    }


async def get_responses(event_id: str) -> list[dict[str, Any]]:
    """Fetch all responses for an event, oldest first, with answers and selections."""
    async with _get_connection() as conn:
        rows = await conn.execute(
            "SELECT id, name, created_at FROM responses WHERE event_id = %s ORDER BY created_at, id",
            (event_id,),
        )
        responses: dict[int, dict[str, Any]] = {}
        async for response_id, name, created_at in rows:
            responses[response_id] = {
                "id": response_id,
                "event_id": event_id,
                "name": name,
                "answers": [],
                "performances": [],
                "created_at": _iso(created_at),
            }
        if not responses:
            return []

        rows = await conn.execute(
            """SELECT a.id, a.response_id, a.date_id, a.status
               FROM response_answers a JOIN responses r ON r.id = a.response_id
               WHERE r.event_id = %s ORDER BY a.id""",
            (event_id,),
        )
        async for answer_id, response_id, date_id, status in rows:
            if response_id in responses:
                responses[response_id]["answers"].append({
                    "id": answer_id,
                    "response_id": response_id,
                    "date_id": date_id,
                    "status": status,
                })

        rows = await conn.execute(
            """SELECT p.id, p.response_id, p.performance_id
               FROM user_performances p JOIN responses r ON r.id = p.response_id
               WHERE r.event_id = %s ORDER BY p.id""",
            (event_id,),
        )
        async for row_id, response_id, perf_id in rows:
            if response_id in responses:
                responses[response_id]["performances"].append({
                    "id": row_id,
                    "response_id": response_id,
                    "performance_id": perf_id,
                })
        return list(responses.values())
