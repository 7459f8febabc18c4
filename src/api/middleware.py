"""
FastAPI Middleware

Request ID propagation, request logging and request body size limits.
"""

import time
import uuid
from typing import Awaitable, Callable, List

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from src.api.errors import build_error_response
from src.core.error_codes import APIErrorCode
from src.core.logger import clear_request_id, get_logger, set_request_id

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Simple middleware to log API requests and responses.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_time = time.time()
        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"
        request_id = getattr(request.state, "request_id", "unknown")

        logger.debug("Request: %s %s from %s [%s]", method, path, client_ip, request_id)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed: %s %s - %s (%.3fs) [%s]",
                method,
                path,
                str(e),
                time.time() - start_time,
                request_id,
                exc_info=True,
            )
            raise

        duration = time.time() - start_time
        if response.status_code >= 500:
            log = logger.error
        elif response.status_code >= 400:
            log = logger.warning
        else:
            log = logger.info
        log(
            "%s %s - %d (%.3fs) [%s]",
            method,
            path,
            response.status_code,
            duration,
            request_id,
        )
        return response


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle request ID generation and propagation.

    Reads X-Request-ID from request headers or generates a new UUID, stores it
    in request.state.request_id and the logging context, and echoes it in the
    response headers.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        request.state.request_id = request_id
        set_request_id(request_id)
        try:
            response = await call_next(request)
        finally:
            clear_request_id()

        response.headers["X-Request-ID"] = request_id
        return response


class BodySizeLimitMiddleware:
    """
    Reject request bodies larger than ``max_body_bytes`` with 413.

    A declared Content-Length is checked up front; otherwise the body is
    counted as it arrives and only handed to the app once it fits. Record
    bodies may embed base64 images, so the limit is generous.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes

    def _reject(self, request: Request, size: str) -> Response:
        logger.warning(
            "Rejected %s %s: body of %s bytes exceeds %d",
            request.method,
            request.url.path,
            size,
            self.max_body_bytes,
        )
        return build_error_response(
            request,
            413,
            message=(
                f"Request body of {size} bytes exceeds the "
                f"{self.max_body_bytes} byte limit"
            ),
            error_type="PayloadTooLarge",
            code=APIErrorCode.PAYLOAD_TOO_LARGE.value,
            details={"max_body_bytes": self.max_body_bytes},
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit():
            if int(content_length) > self.max_body_bytes:
                await self._reject(request, content_length)(scope, receive, send)
                return

        # Chunked bodies carry no length, so count what actually arrives.
        buffered: List[Message] = []
        received = 0
        while True:
            message = await receive()
            buffered.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > self.max_body_bytes:
                await self._reject(request, f"more than {received}")(
                    scope, receive, send
                )
                return
            if not message.get("more_body", False):
                break

        async def replay() -> Message:
            if buffered:
                return buffered.pop(0)
            return await receive()

        await self.app(scope, replay, send)
