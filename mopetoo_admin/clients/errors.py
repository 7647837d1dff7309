from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    code: str
    message: str
    status_code: int | None = None
    data: object | None = None
    trace_id: str | None = None

    def __str__(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        return f"[{self.status_code}] {self.code}: {self.message}{trace}"


class AuthError(ApiError):
    """Authentication failed or the session token expired."""


class PermissionDeniedError(ApiError):
    """The token is valid but lacks the admin role."""


class NotFoundError(ApiError):
    pass


class ValidationError(ApiError):
    pass


class ConflictError(ApiError):
    pass


class RateLimitError(ApiError):
    pass


class ServerError(ApiError):
    """5xx server-side failures."""


class TransportError(ApiError):
    """Network failure before an HTTP response was returned."""


def map_error(status_code: int, payload: object, trace_id: str | None) -> ApiError:
    body = payload if isinstance(payload, Mapping) else {}
    code = str(body.get("code") or "HTTP_ERROR")
    message = next(
        (value for value in (body.get("error"), body.get("message")) if isinstance(value, str) and value),
        "Request failed",
    )
    payload_trace_id = body.get("trace_id")
    resolved_trace_id = str(payload_trace_id) if payload_trace_id is not None else trace_id
    mapped: type[ApiError]
    if status_code == 401:
        mapped = AuthError
    elif status_code == 403:
        mapped = PermissionDeniedError
    elif status_code == 404:
        mapped = NotFoundError
    elif status_code in {400, 422}:
        mapped = ValidationError
    elif status_code == 409:
        mapped = ConflictError
    elif status_code == 429:
        mapped = RateLimitError
    elif status_code >= 500:
        mapped = ServerError
    else:
        mapped = ApiError
    return mapped(
        code=code,
        message=str(message),
        status_code=status_code,
        data=payload,
        trace_id=resolved_trace_id,
    )
