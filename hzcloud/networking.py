"""Private networks, public IP addresses and load balancers."""

from __future__ import annotations

from typing import Any, Dict, Optional

from .models import Action, FloatingIP, LoadBalancer, Network, PrimaryIP
from .resources import (
    DnsPtrActionsMixin,
    Identifier,
    ResourceActionsClient,
    ResourceClient,
    extract_identifier,
)


class NetworkActionsClient(ResourceActionsClient):
    def add_subnet(
        self,
        network: Identifier,
        *,
        type: str,
        network_zone: str,
        ip_range: Optional[str] = None,
        vswitch_id: Optional[int] = None,
    ) -> Action:
        return self._perform(
            network,
            "add_subnet",
            {"type": type, "network_zone": network_zone, "ip_range": ip_range, "vswitch_id": vswitch_id},
        )

    def delete_subnet(self, network: Identifier, *, ip_range: str) -> Action:
        return self._perform(network, "delete_subnet", {"ip_range": ip_range})

    def add_route(self, network: Identifier, *, destination: str, gateway: str) -> Action:
        return self._perform(network, "add_route", {"destination": destination, "gateway": gateway})

    def delete_route(self, network: Identifier, *, destination: str, gateway: str) -> Action:
        return self._perform(network, "delete_route", {"destination": destination, "gateway": gateway})

    def change_ip_range(self, network: Identifier, *, ip_range: str) -> Action:
        return self._perform(network, "change_ip_range", {"ip_range": ip_range})


class NetworksClient(ResourceClient[Network]):
    path = "/networks"
    collection_key = "networks"
    item_key = "network"
    model = Network
    actions_class = NetworkActionsClient


class FloatingIPActionsClient(DnsPtrActionsMixin, ResourceActionsClient):
    def assign(self, floating_ip: Identifier, *, server: Identifier) -> Action:
        return self._perform(floating_ip, "assign", {"server": extract_identifier(server)})

    def unassign(self, floating_ip: Identifier) -> Action:
        return self._perform(floating_ip, "unassign")


class FloatingIPsClient(ResourceClient[FloatingIP]):
    path = "/floating_ips"
    collection_key = "floating_ips"
    item_key = "floating_ip"
    model = FloatingIP
    actions_class = FloatingIPActionsClient
    async_create = True


class PrimaryIPActionsClient(DnsPtrActionsMixin, ResourceActionsClient):
    def assign(self, primary_ip: Identifier, *, assignee_id: int, assignee_type: str = "server") -> Action:
        return self._perform(
            primary_ip,
            "assign",
            {"assignee_id": assignee_id, "assignee_type": assignee_type},
        )

    def unassign(self, primary_ip: Identifier) -> Action:
        return self._perform(primary_ip, "unassign")


class PrimaryIPsClient(ResourceClient[PrimaryIP]):
    path = "/primary_ips"
    collection_key = "primary_ips"
    item_key = "primary_ip"
    model = PrimaryIP
    actions_class = PrimaryIPActionsClient
    async_create = True


class LoadBalancerActionsClient(DnsPtrActionsMixin, ResourceActionsClient):
    def add_service(self, load_balancer: Identifier, **service: Any) -> Action:
        return self._perform(load_balancer, "add_service", service)

    def update_service(self, load_balancer: Identifier, *, listen_port: int, **changes: Any) -> Action:
        return self._perform(load_balancer, "update_service", {"listen_port": listen_port, **changes})

    def delete_service(self, load_balancer: Identifier, *, listen_port: int) -> Action:
        return self._perform(load_balancer, "delete_service", {"listen_port": listen_port})

    def add_target(self, load_balancer: Identifier, **target: Any) -> Action:
        """Add a target, e.g. ``type="server", server={"id": 42}``."""
        return self._perform(load_balancer, "add_target", target)

    def remove_target(self, load_balancer: Identifier, **target: Any) -> Action:
        return self._perform(load_balancer, "remove_target", target)

    def change_algorithm(self, load_balancer: Identifier, *, type: str) -> Action:
        return self._perform(load_balancer, "change_algorithm", {"type": type})

    def change_type(self, load_balancer: Identifier, *, load_balancer_type: Identifier) -> Action:
        return self._perform(
            load_balancer,
            "change_type",
            {"load_balancer_type": extract_identifier(load_balancer_type)},
        )

    def attach_to_network(self, load_balancer: Identifier, *, network: Identifier, ip: Optional[str] = None) -> Action:
        return self._perform(
            load_balancer,
            "attach_to_network",
            {"network": extract_identifier(network), "ip": ip},
        )

    def detach_from_network(self, load_balancer: Identifier, *, network: Identifier) -> Action:
        return self._perform(load_balancer, "detach_from_network", {"network": extract_identifier(network)})

    def enable_public_interface(self, load_balancer: Identifier) -> Action:
        return self._perform(load_balancer, "enable_public_interface")

    def disable_public_interface(self, load_balancer: Identifier) -> Action:
        return self._perform(load_balancer, "disable_public_interface")


class LoadBalancersClient(ResourceClient[LoadBalancer]):
    path = "/load_balancers"
    collection_key = "load_balancers"
    item_key = "load_balancer"
    model = LoadBalancer
    actions_class = LoadBalancerActionsClient
    async_create = True

    def metrics(self, load_balancer: Identifier, *, type: str, start: str, end: str, step: Optional[int] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = {"type": type, "start": start, "end": end}
        if step is not None:
            params["step"] = str(step)
        data = self._request("GET", f"{self._item_path(load_balancer)}/metrics", params=params)
        return data.get("metrics", {})

