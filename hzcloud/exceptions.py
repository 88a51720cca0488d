"""Exception hierarchy raised by the Hetzner Cloud client."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .models import Action


class HCloudError(Exception):
    """Base class for every error raised by :mod:`hzcloud`."""


class APIException(HCloudError):
    """Represents an error returned from the Hetzner Cloud API."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
        details: Any = None,
        correlation_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details
        self.correlation_id = correlation_id

    def __str__(self) -> str:
        prefix = f"[{self.status_code}] " if self.status_code else ""
        suffix = f" ({self.code})" if self.code else ""
        return f"{prefix}{self.message}{suffix}"


class AuthenticationFailed(APIException):
    """The API token is missing or invalid (HTTP 401)."""


class PermissionDenied(APIException):
    """The token is valid but not allowed to perform the request (HTTP 403)."""


class NotFound(APIException):
    """The addressed resource does not exist (HTTP 404)."""


class ValidationFailed(APIException):
    """The request was rejected because of invalid input.

    ``fields`` maps each offending field name to the list of messages the
    API reported for it, unchanged, so callers can attach them to form
    fields.
    """

    @property
    def fields(self) -> Dict[str, List[str]]:
        details = self.details if isinstance(self.details, Mapping) else {}
        result: Dict[str, List[str]] = {}
        for item in details.get("fields") or []:
            if not isinstance(item, Mapping):
                continue
            name = item.get("name")
            if name is None:
                continue
            result[name] = list(item.get("messages") or [])
        return result


class RateLimited(APIException):
    """The rate limit of the project was exceeded (HTTP 429)."""

    def __init__(self, message: str, *, headers: Mapping[str, str] | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        headers = headers or {}
        self.limit = _int_header(headers, "RateLimit-Limit")
        self.remaining = _int_header(headers, "RateLimit-Remaining")
        self.reset = _int_header(headers, "RateLimit-Reset")


class ServerUnavailable(APIException):
    """The API failed on its side (HTTP 5xx)."""


class TransportFailure(HCloudError):
    """No HTTP response was received at all."""

    def __init__(self, message: str, *, timed_out: bool = False) -> None:
        super().__init__(message)
        self.message = message
        self.timed_out = timed_out


class PollTimeout(HCloudError):
    """An action did not reach a terminal status before the deadline."""

    def __init__(self, action: "Action", timeout: float) -> None:
        super().__init__(
            f"Action {action.id} ({action.command}) still {action.status} after {timeout}s"
        )
        self.action = action
        self.timeout = timeout


def _int_header(headers: Mapping[str, str], name: str) -> Optional[int]:
    value = headers.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


__all__ = [
    "HCloudError",
    "APIException",
    "AuthenticationFailed",
    "PermissionDenied",
    "NotFound",
    "ValidationFailed",
    "RateLimited",
    "ServerUnavailable",
    "TransportFailure",
    "PollTimeout",
]
