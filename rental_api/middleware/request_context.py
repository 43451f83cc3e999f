"""
Request context middleware.
Assigns a request id, enforces the request size limit and logs each request.
"""

from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging
import time
import uuid

from rental_api.services.error_handler import ErrorHandlerService, REQUEST_ID_HEADER
from rental_api.utils.exceptions import BadRequestError, RequestTooLargeError

logger = logging.getLogger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware tagging every request with an id returned in X-Request-ID.
    Oversized bodies are rejected before they reach a handler.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_request_size: int = 50 * 1024 * 1024,
        enable_request_logging: bool = True
    ):
        super().__init__(app)
        self.max_request_size = max_request_size
        self.enable_request_logging = enable_request_logging

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process request through the middleware.

        Args:
            request: FastAPI request object
            call_next: Next middleware/handler in chain

        Returns:
            Response object
        """
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        start_time = time.time()

        try:
            self._validate_request_size(request)
        except (BadRequestError, RequestTooLargeError) as exc:
            return ErrorHandlerService.handle_api_exception(exc, request)

        response = await call_next(request)
        processing_time = time.time() - start_time

        if self.enable_request_logging:
            self._log_response(request, response, request_id, processing_time)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    def _validate_request_size(self, request: Request) -> None:
        """
        Validate request content length.

        Raises:
            RequestTooLargeError: If request size exceeds limit
            BadRequestError: If the header is not a number
        """
        content_length = request.headers.get("content-length")
        if not content_length:
            return

        try:
            size = int(content_length)
        except ValueError:
            raise BadRequestError("Invalid content-length header")

        if size > self.max_request_size:
            raise RequestTooLargeError(size, self.max_request_size)

    def _log_response(
        self,
        request: Request,
        response: Response,
        request_id: str,
        processing_time: float
    ) -> None:
        logger.info(
            f"[{request_id}] {request.method} {request.url.path} -> {response.status_code} ({processing_time:.3f}s)",
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "processing_time": processing_time,
                "path": request.url.path,
                "method": request.method
            }
        )
