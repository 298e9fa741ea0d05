"""Request correlation IDs.

Every HTTP request gets an ID, taken from the ``X-Correlation-ID`` header
when the caller sends one, otherwise freshly generated. The ID is bound
to the logging context for the life of the request and echoed back on
the response.
"""

import time
import uuid

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from neuracare.logging_config import correlation_id_ctx, get_logger

logger = get_logger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"
_HEADER_KEY = CORRELATION_ID_HEADER.lower().encode()

# Callers may send anything; cap what ends up in logs and headers.
_MAX_ID_LENGTH = 128

# Probes hit these constantly and would drown out real traffic.
_UNLOGGED_PATHS = frozenset({"/api/health", "/api/health/ready"})


def _incoming_id(scope: Scope) -> str | None:
    for key, value in scope.get("headers", []):
        if key == _HEADER_KEY:
            candidate = value.decode("latin-1").strip()
            if candidate and len(candidate) <= _MAX_ID_LENGTH:
                return candidate
    return None


class CorrelationIdMiddleware:
    """Pure ASGI middleware binding a correlation ID to each request.

    Emits a single access log line per request with method, path, status
    and duration. Non-HTTP scopes (lifespan) pass straight through.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        correlation_id = _incoming_id(scope) or uuid.uuid4().hex
        token = correlation_id_ctx.set(correlation_id)

        method = scope.get("method", "")
        path = scope.get("path", "")
        started = time.perf_counter()
        status_code = 500

        async def send_with_id(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers = [*message.get("headers", []), (_HEADER_KEY, correlation_id.encode())]
                message = {**message, "headers": headers}
            await send(message)

        try:
            await self.app(scope, receive, send_with_id)
        except Exception:
            logger.exception(
                "Unhandled error while serving request",
                method=method,
                path=path,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise
        else:
            if path not in _UNLOGGED_PATHS:
                log = logger.warning if status_code >= 500 else logger.info
                log(
                    "Request handled",
                    method=method,
                    path=path,
                    status_code=status_code,
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )
        finally:
            correlation_id_ctx.reset(token)
