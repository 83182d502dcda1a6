"""
Structured access logging.

One JSON record per request. Responses with status >= 400 are logged at
ERROR (stderr), everything else at INFO (stdout).
"""

import logging
import time
import uuid
from datetime import timedelta
from typing import Awaitable, Callable

from fastapi import Request, Response


logger = logging.getLogger("tiktok_auth.access")

REQUEST_ID_HEADER = "X-Request-ID"


def _content_length(value: str | None) -> int:
    if value and value.isdigit():
        return int(value)
    return 0


async def access_log_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Log method, URI, status, latency and sizes for every request."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    start = time.perf_counter()

    response = await call_next(request)

    latency = time.perf_counter() - start
    response.headers[REQUEST_ID_HEADER] = request_id

    uri = request.url.path
    if request.url.query:
        uri = f"{uri}?{request.url.query}"

    entry = {
        "id": request_id,
        "remote_ip": request.client.host if request.client else "",
        "host": request.headers.get("host", ""),
        "method": request.method,
        "uri": uri,
        "user_agent": request.headers.get("user-agent", ""),
        "status": response.status_code,
        "latency": int(latency * 1e9),
        "latency_human": str(timedelta(seconds=latency)),
        "bytes_in": _content_length(request.headers.get("content-length")),
        "bytes_out": _content_length(response.headers.get("content-length")),
    }

    if response.status_code >= 400:
        logger.error("request", extra={"extra_fields": entry})
    else:
        logger.info("request", extra={"extra_fields": entry})

    return response
