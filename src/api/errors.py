"""
Error boundary - Maps domain errors to HTTP responses.

All error responses leave the application through map_error(). Domain
errors with a caller-visible kind keep their message verbatim. Anything
else becomes a generic 500 carrying only the request's correlation id; the
real exception is logged server-side under that id.
"""

import logging
import uuid

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from src.domain.exceptions import BadRequestError, DomainError, ErrorKind

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
INTERNAL_ERROR_MESSAGE = "Internal Server Error"

STATUS_BY_KIND = {
    ErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.GONE: status.HTTP_410_GONE,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def map_error(exc: BaseException, request_id: str) -> tuple[int, dict]:
    """
    Translate an exception into (status code, response body).

    Args:
        exc: Any exception raised while handling a request
        request_id: Correlation id of the request

    Returns:
        HTTP status code and JSON-serializable body
    """
    if isinstance(exc, DomainError) and exc.kind is not ErrorKind.INTERNAL:
        body: dict = {"message": exc.message}
        if isinstance(exc, BadRequestError) and exc.errors:
            body["errors"] = exc.errors
        return STATUS_BY_KIND[exc.kind], body

    return status.HTTP_500_INTERNAL_SERVER_ERROR, {
        "message": INTERNAL_ERROR_MESSAGE,
        "request_id": request_id,
    }


def get_request_id(request: Request) -> str:
    """Correlation id assigned by the middleware, or a fresh one."""
    request_id = getattr(request.state, "request_id", None)
    if request_id is None:
        request_id = uuid.uuid4().hex
        request.state.request_id = request_id
    return request_id


def operation_name(request: Request) -> str:
    """Module-qualified name of the route handler, or "unknown" before routing."""
    endpoint = request.scope.get("endpoint")
    if endpoint is None:
        return "unknown"
    return f"{endpoint.__module__}.{endpoint.__name__}"


def error_response(request: Request, exc: BaseException) -> JSONResponse:
    """Build the response for exc and record it server-side."""
    request_id = get_request_id(request)
    status_code, body = map_error(exc, request_id)

    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "Unhandled error in %s: %s %s request_id=%s",
            operation_name(request),
            request.method,
            request.url.path,
            request_id,
            exc_info=(type(exc), exc, exc.__traceback__),
        )
    else:
        logger.info(
            "Request rejected: %s %s status=%d request_id=%s message=%s",
            request.method,
            request.url.path,
            status_code,
            request_id,
            body["message"],
        )

    return JSONResponse(status_code=status_code, content=body)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    return error_response(request, exc)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report request-shape errors as BadRequest with a field -> message map."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        location = error.get("loc") or ()
        field = str(location[-1]) if location else "body"
        message = "Field is required" if error.get("type") == "missing" else "Invalid value"
        errors.setdefault(field, message)
    return error_response(request, BadRequestError("validation failed", errors))


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Assigns each request a correlation id and catches unhandled errors.

    An inbound X-Request-ID header is reused; otherwise a new id is
    generated. The id is echoed on every response.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception as exc:
            response = error_response(request, exc)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def install_error_handling(app: FastAPI) -> None:
    """Register the error boundary on an application."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_middleware(RequestIdMiddleware)
