"""Python client for the Hetzner Cloud API."""

from __future__ import annotations

from .actions import wait_for_action
from .client import Client, RequestDescriptor, ResponseEnvelope
from .exceptions import (
    APIException,
    AuthenticationFailed,
    HCloudError,
    NotFound,
    PermissionDenied,
    PollTimeout,
    RateLimited,
    ServerUnavailable,
    TransportFailure,
    ValidationFailed,
)
from .models import Action, ActionResult, CreateResult, PaginatedCollection

__version__ = "0.1.0"

__all__ = [
    "Client",
    "RequestDescriptor",
    "ResponseEnvelope",
    "Action",
    "ActionResult",
    "CreateResult",
    "PaginatedCollection",
    "wait_for_action",
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
