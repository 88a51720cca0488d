"""Typed representations of Hetzner Cloud API objects.

Every model keeps the fields it does not declare (``extra="allow"``), so
values added to the API later remain reachable through ``model_extra``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Generic, Iterator, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

ACTION_RUNNING = "running"
ACTION_SUCCESS = "success"
ACTION_ERROR = "error"
TERMINAL_STATUSES = frozenset({ACTION_SUCCESS, ACTION_ERROR})


class HCloudModel(BaseModel):
    """Base class for API objects."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @property
    def extra(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class _IdentifiedModel(HCloudModel):
    id: Optional[int] = None
    name: Optional[str] = None


class _LabeledModel(_IdentifiedModel):
    labels: Dict[str, str] = {}
    created: Optional[datetime] = None
    protection: Optional[Dict[str, bool]] = None


class ActionError(HCloudModel):
    code: Optional[str] = None
    message: Optional[str] = None


class ActionResource(HCloudModel):
    id: int
    type: str


class Action(HCloudModel):
    """Server-side record of an asynchronous operation."""

    id: int
    command: Optional[str] = None
    status: str = ACTION_RUNNING
    progress: int = 0
    started: Optional[datetime] = None
    finished: Optional[datetime] = None
    error: Optional[ActionError] = None
    resources: List[ActionResource] = []

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def succeeded(self) -> bool:
        return self.status == ACTION_SUCCESS

    @property
    def failed(self) -> bool:
        return self.status == ACTION_ERROR


class Pagination(HCloudModel):
    page: int = 1
    per_page: int = 25
    previous_page: Optional[int] = None
    next_page: Optional[int] = None
    last_page: Optional[int] = None
    total_entries: Optional[int] = None


class Location(_IdentifiedModel):
    description: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    network_zone: Optional[str] = None


class Datacenter(_IdentifiedModel):
    description: Optional[str] = None
    location: Optional[Location] = None


class ServerType(_IdentifiedModel):
    description: Optional[str] = None
    cores: int = 0
    memory: float = 0
    disk: int = 0
    cpu_type: Optional[str] = None
    architecture: Optional[str] = None
    deprecated: Optional[bool] = None
    prices: List[Dict[str, Any]] = []


class LoadBalancerType(_IdentifiedModel):
    description: Optional[str] = None
    max_connections: Optional[int] = None
    max_services: Optional[int] = None
    max_targets: Optional[int] = None
    prices: List[Dict[str, Any]] = []


class Image(_LabeledModel):
    type: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None
    os_flavor: Optional[str] = None
    os_version: Optional[str] = None
    architecture: Optional[str] = None
    image_size: Optional[float] = None
    disk_size: Optional[float] = None


class ISO(_IdentifiedModel):
    description: Optional[str] = None
    type: Optional[str] = None
    architecture: Optional[str] = None


class PlacementGroup(_LabeledModel):
    type: Optional[str] = None
    servers: List[int] = []


class Server(_LabeledModel):
    status: Optional[str] = None
    server_type: Optional[ServerType] = None
    image: Optional[Image] = None
    iso: Optional[ISO] = None
    datacenter: Optional[Datacenter] = None
    public_net: Optional[Dict[str, Any]] = None
    private_net: List[Dict[str, Any]] = []
    volumes: List[int] = []
    placement_group: Optional[PlacementGroup] = None
    rescue_enabled: Optional[bool] = None
    locked: Optional[bool] = None

    @property
    def ipv4(self) -> Optional[str]:
        ipv4 = (self.public_net or {}).get("ipv4") or {}
        return ipv4.get("ip")

    @property
    def ipv6(self) -> Optional[str]:
        ipv6 = (self.public_net or {}).get("ipv6") or {}
        return ipv6.get("ip")


class Volume(_LabeledModel):
    size: Optional[int] = None
    server: Optional[int] = None
    location: Optional[Location] = None
    linux_device: Optional[str] = None
    status: Optional[str] = None
    format: Optional[str] = None


class Network(_LabeledModel):
    ip_range: Optional[str] = None
    subnets: List[Dict[str, Any]] = []
    routes: List[Dict[str, Any]] = []
    servers: List[int] = []
    load_balancers: List[int] = []
    expose_routes_to_vswitch: Optional[bool] = None


class FloatingIP(_LabeledModel):
    description: Optional[str] = None
    ip: Optional[str] = None
    type: Optional[str] = None
    server: Optional[int] = None
    home_location: Optional[Location] = None
    dns_ptr: List[Dict[str, Any]] = []
    blocked: Optional[bool] = None


class PrimaryIP(_LabeledModel):
    ip: Optional[str] = None
    type: Optional[str] = None
    assignee_id: Optional[int] = None
    assignee_type: Optional[str] = None
    auto_delete: Optional[bool] = None
    datacenter: Optional[Datacenter] = None
    dns_ptr: List[Dict[str, Any]] = []
    blocked: Optional[bool] = None


class LoadBalancer(_LabeledModel):
    load_balancer_type: Optional[LoadBalancerType] = None
    location: Optional[Location] = None
    algorithm: Optional[Dict[str, Any]] = None
    public_net: Optional[Dict[str, Any]] = None
    private_net: List[Dict[str, Any]] = []
    services: List[Dict[str, Any]] = []
    targets: List[Dict[str, Any]] = []


class Firewall(_LabeledModel):
    rules: List[Dict[str, Any]] = []
    applied_to: List[Dict[str, Any]] = []


class Certificate(_LabeledModel):
    type: Optional[str] = None
    certificate: Optional[str] = None
    domain_names: List[str] = []
    fingerprint: Optional[str] = None
    not_valid_before: Optional[datetime] = None
    not_valid_after: Optional[datetime] = None
    status: Optional[Dict[str, Any]] = None
    used_by: List[Dict[str, Any]] = []


class SSHKey(_LabeledModel):
    fingerprint: Optional[str] = None
    public_key: Optional[str] = None


class Zone(_LabeledModel):
    mode: Optional[str] = None
    ttl: Optional[int] = None
    status: Optional[str] = None
    record_count: Optional[int] = None
    primary_nameservers: List[Dict[str, Any]] = []
    authoritative_nameservers: Optional[Dict[str, Any]] = None
    registrar: Optional[str] = None


class Record(HCloudModel):
    value: str
    comment: Optional[str] = None


class RRSet(HCloudModel):
    """A DNS resource record set, addressed by ``name`` and ``type``."""

    id: Optional[str] = None
    name: str
    type: str
    ttl: Optional[int] = None
    labels: Dict[str, str] = {}
    records: List[Record] = []
    zone: Optional[int] = None
    protection: Optional[Dict[str, bool]] = None


class Pricing(HCloudModel):
    currency: Optional[str] = None
    vat_rate: Optional[str] = None
    server_types: List[Dict[str, Any]] = []
    load_balancer_types: List[Dict[str, Any]] = []
    volume: Optional[Dict[str, Any]] = None
    floating_ips: List[Dict[str, Any]] = []
    primary_ips: List[Dict[str, Any]] = []
    server_backup: Optional[Dict[str, Any]] = None
    image: Optional[Dict[str, Any]] = None


T = TypeVar("T")


@dataclass(slots=True)
class PaginatedCollection(Generic[T]):
    """One page of a listing, in the order the API returned it."""

    items: List[T]
    pagination: Optional[Pagination] = None

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> T:
        return self.items[index]

    @property
    def next_page(self) -> Optional[int]:
        return self.pagination.next_page if self.pagination else None


@dataclass(slots=True)
class CreateResult(Generic[T]):
    """Result of a create call whose completion is tracked by an Action."""

    resource: T
    action: Optional[Action] = None
    next_actions: List[Action] = field(default_factory=list)
    root_password: Optional[str] = None


@dataclass(slots=True)
class ActionResult:
    """Action plus the extra values some commands return alongside it."""

    action: Action
    payload: Dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, key: str) -> Any:
        return self.payload[key]
