"""Read-only catalogue endpoints: what can be ordered, where, and at what price."""

from __future__ import annotations

from .models import (
    ISO,
    Datacenter,
    LoadBalancerType,
    Location,
    Pricing,
    ServerType,
)
from .resources import ReadOnlyResourceClient, _BaseClient


class ServerTypesClient(ReadOnlyResourceClient[ServerType]):
    path = "/server_types"
    collection_key = "server_types"
    item_key = "server_type"
    model = ServerType


class LoadBalancerTypesClient(ReadOnlyResourceClient[LoadBalancerType]):
    path = "/load_balancer_types"
    collection_key = "load_balancer_types"
    item_key = "load_balancer_type"
    model = LoadBalancerType


class LocationsClient(ReadOnlyResourceClient[Location]):
    path = "/locations"
    collection_key = "locations"
    item_key = "location"
    model = Location


class DatacentersClient(ReadOnlyResourceClient[Datacenter]):
    path = "/datacenters"
    collection_key = "datacenters"
    item_key = "datacenter"
    model = Datacenter


class ISOsClient(ReadOnlyResourceClient[ISO]):
    path = "/isos"
    collection_key = "isos"
    item_key = "iso"
    model = ISO


class PricingClient(_BaseClient):
    """Prices for every billable resource in the account's currency."""

    def retrieve(self) -> Pricing:
        data = self._request("GET", "/pricing")
        return Pricing.model_validate(data["pricing"])
