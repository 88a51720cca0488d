"""HTTP transport for the Hetzner Cloud API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import requests
from requests import Response, Session
from requests import exceptions as requests_exceptions

from .actions import ActionsClient
from .catalog import (
    DatacentersClient,
    ISOsClient,
    LoadBalancerTypesClient,
    LocationsClient,
    PricingClient,
    ServerTypesClient,
)
from .dns import ZonesClient
from .exceptions import (
    APIException,
    AuthenticationFailed,
    NotFound,
    PermissionDenied,
    RateLimited,
    ServerUnavailable,
    TransportFailure,
    ValidationFailed,
)
from .networking import FloatingIPsClient, LoadBalancersClient, NetworksClient, PrimaryIPsClient
from .security import CertificatesClient, FirewallsClient, SSHKeysClient
from .servers import ImagesClient, PlacementGroupsClient, ServersClient
from .storage import VolumesClient

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.hetzner.cloud/v1"
DEFAULT_TIMEOUT = 30.0

_USER_AGENT = "hzcloud/0.1.0"

_STATUS_ERRORS: Dict[int, type[APIException]] = {
    401: AuthenticationFailed,
    403: PermissionDenied,
    404: NotFound,
    422: ValidationFailed,
    429: RateLimited,
}

_CODE_ERRORS: Dict[str, type[APIException]] = {
    "unauthorized": AuthenticationFailed,
    "forbidden": PermissionDenied,
    "not_found": NotFound,
    "invalid_input": ValidationFailed,
    "rate_limit_exceeded": RateLimited,
}


@dataclass(frozen=True)
class RequestDescriptor:
    """Everything needed to issue one call against the API."""

    method: str
    path: str
    params: Optional[Mapping[str, Any]] = None
    json: Any = None
    timeout: Optional[float] = None


@dataclass(frozen=True)
class ResponseEnvelope:
    """Successful response as received from the API."""

    status_code: int
    headers: Mapping[str, str]
    body: bytes
    data: Dict[str, Any]


def classify_error(response: Response) -> APIException:
    """Turn an HTTP error response into the matching exception instance."""

    message = response.reason or f"HTTP {response.status_code}"
    code = None
    details = None
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        error = payload["error"]
        message = error.get("message") or message
        code = error.get("code")
        details = error.get("details")

    status = response.status_code
    if status >= 500:
        error_class: type[APIException] = ServerUnavailable
    else:
        error_class = _STATUS_ERRORS.get(status) or _CODE_ERRORS.get(code or "", APIException)

    kwargs: Dict[str, Any] = {
        "status_code": status,
        "code": code,
        "details": details,
        "correlation_id": response.headers.get("X-Correlation-Id"),
    }
    if error_class is RateLimited:
        kwargs["headers"] = response.headers
    return error_class(message, **kwargs)


class Client:
    """Hetzner Cloud API client.

    The client only holds its configuration; every call is independent so
    one instance can be shared between threads. ``session`` lets callers
    plug in their own ``requests.Session`` (connection pooling, adapters,
    proxies). It is never modified by the client.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        session: Session | None = None,
        application_name: str | None = None,
        application_version: str | None = None,
        poll_interval: float = 1.0,
    ) -> None:
        if not token:
            raise ValueError("A Hetzner Cloud API token is required")
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._session = session or requests.Session()
        self._poll_interval = poll_interval
        self._user_agent = _build_user_agent(application_name, application_version)

        self.actions = ActionsClient(self)
        self.servers = ServersClient(self)
        self.images = ImagesClient(self)
        self.placement_groups = PlacementGroupsClient(self)
        self.server_types = ServerTypesClient(self)
        self.locations = LocationsClient(self)
        self.datacenters = DatacentersClient(self)
        self.isos = ISOsClient(self)
        self.load_balancer_types = LoadBalancerTypesClient(self)
        self.pricing = PricingClient(self)
        self.volumes = VolumesClient(self)
        self.networks = NetworksClient(self)
        self.floating_ips = FloatingIPsClient(self)
        self.primary_ips = PrimaryIPsClient(self)
        self.load_balancers = LoadBalancersClient(self)
        self.firewalls = FirewallsClient(self)
        self.certificates = CertificatesClient(self)
        self.ssh_keys = SSHKeysClient(self)
        self.zones = ZonesClient(self)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def verify_ssl(self) -> bool:
        return self._verify_ssl

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Issue a request and return the decoded JSON body."""

        descriptor = RequestDescriptor(method, path, params=params, json=json, timeout=timeout)
        return self.send(descriptor).data

    def send(self, descriptor: RequestDescriptor) -> ResponseEnvelope:
        """Send ``descriptor`` and return the envelope, or raise a classified error."""

        url = f"{self._base_url}{descriptor.path}"
        timeout = descriptor.timeout if descriptor.timeout is not None else self._timeout
        logger.debug(
            "Sending request to Hetzner Cloud",
            extra={"method": descriptor.method, "path": descriptor.path},
        )

        try:
            response = self._session.request(
                descriptor.method,
                url,
                params=descriptor.params,
                json=descriptor.json,
                headers=self._headers(),
                timeout=timeout,
                verify=self._verify_ssl,
            )
        except requests_exceptions.Timeout as exc:
            logger.error("HTTP request to Hetzner timed out", exc_info=exc)
            raise TransportFailure(
                f"Request to {descriptor.path} timed out after {timeout}s", timed_out=True
            ) from exc
        except requests_exceptions.RequestException as exc:
            logger.error("HTTP request to Hetzner failed", exc_info=exc)
            raise TransportFailure("Failed to communicate with Hetzner Cloud API") from exc

        return self._handle_response(response)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self._user_agent,
        }

    def _handle_response(self, response: Response) -> ResponseEnvelope:
        if response.status_code >= 400:
            error = classify_error(response)
            logger.debug(
                "Hetzner Cloud API returned an error",
                extra={
                    "status_code": error.status_code,
                    "code": error.code,
                    "correlation_id": error.correlation_id,
                },
            )
            raise error

        data: Dict[str, Any] = {}
        if response.content:
            try:
                data = response.json()
            except ValueError as exc:
                logger.error("Failed to parse JSON response", exc_info=exc)
                raise APIException(
                    "Invalid JSON received from Hetzner Cloud API",
                    status_code=response.status_code,
                    code="invalid_response",
                ) from exc
            if not isinstance(data, dict):
                logger.error(
                    "Unexpected JSON payload type",
                    extra={"status_code": response.status_code, "payload_type": type(data).__name__},
                )
                raise APIException(
                    "Unexpected JSON payload received from Hetzner Cloud API",
                    status_code=response.status_code,
                    code="invalid_response",
                )

        return ResponseEnvelope(
            status_code=response.status_code,
            headers=response.headers,
            body=response.content,
            data=data,
        )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"Client(base_url={self._base_url!r})"


def _build_user_agent(name: str | None, version: str | None) -> str:
    if not name:
        return _USER_AGENT
    application = f"{name}/{version}" if version else name
    return f"{application} {_USER_AGENT}"
