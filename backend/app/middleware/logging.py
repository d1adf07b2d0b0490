"""
NoteShelf Backend — Note Access Log Middleware
================================================

What:  One log line per note operation: which operation ran, with what
       paging window or id, and how it ended.
How:   Classifies the request (list / create / get) from method and path,
       times the rest of the stack and maps the status code to a note
       outcome on the `noteshelf.access` logger.
When:  Runs inside RequestIDMiddleware, so the request ID is already set.

Log Line:
    notes.list page=2 limit=5 -> 200 ok 4.2ms [a1b2c3d4]
    notes.create -> 409 duplicate_title 3.0ms [a1b2c3d4]
    notes.get id=6f1c... -> 404 not_found 1.1ms [a1b2c3d4]

Requests outside /api/notes (health probes, docs) are not logged.
Note titles and content are never logged.
"""

import logging
import time
from typing import Mapping, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("noteshelf.access")

NOTES_PATH = "/api/notes"

OUTCOMES = {
    200: "ok",
    201: "created",
    404: "not_found",
    409: "duplicate_title",
    422: "invalid_request",
    500: "storage_fault",
}


def describe_operation(method: str, path: str, query: Mapping[str, str]) -> Optional[str]:
    """Name the note operation a request targets, or None if it is not one."""
    if path == NOTES_PATH:
        if method == "GET":
            return f"list page={query.get('page', '-')} limit={query.get('limit', '-')}"
        if method == "POST":
            return "create"
    elif path.startswith(NOTES_PATH + "/") and method == "GET":
        return f"get id={path[len(NOTES_PATH) + 1:]}"
    return None


def level_for(status: int) -> int:
    # Duplicate titles and unknown ids are ordinary answers, not client mistakes
    if status >= 500:
        return logging.ERROR
    if status in (404, 409):
        return logging.INFO
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class NoteAccessLogMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        operation = describe_operation(
            request.method, request.url.path, request.query_params
        )
        if operation is None:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        outcome = OUTCOMES.get(status, "other")
        rid = request_id_var.get("")

        logger.log(
            level_for(status),
            "notes.%s -> %d %s %.1fms [%s]",
            operation,
            status,
            outcome,
            duration_ms,
            rid,
            extra={
                "request_id": rid,
                "operation": operation.split(" ", 1)[0],
                "status": status,
                "outcome": outcome,
                "duration_ms": round(duration_ms, 2),
            },
        )

        return response
