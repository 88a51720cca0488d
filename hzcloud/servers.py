"""Servers, the images they boot from and their placement groups."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from .models import Action, ActionResult, CreateResult, Image, PlacementGroup, Server
from .resources import (
    DnsPtrActionsMixin,
    Identifier,
    MutableResourceClient,
    ResourceActionsClient,
    ResourceClient,
    extract_identifier,
)


class ServerActionsClient(DnsPtrActionsMixin, ResourceActionsClient):
    """State changing operations on servers."""

    def power_on(self, server: Identifier) -> Action:
        return self._perform(server, "poweron")

    def power_off(self, server: Identifier) -> Action:
        """Cut power immediately; use :meth:`shutdown` for a graceful stop."""
        return self._perform(server, "poweroff")

    def reboot(self, server: Identifier) -> Action:
        return self._perform(server, "reboot")

    def reset(self, server: Identifier) -> Action:
        return self._perform(server, "reset")

    def shutdown(self, server: Identifier) -> Action:
        return self._perform(server, "shutdown")

    def reset_password(self, server: Identifier) -> ActionResult:
        """Reset the root password; the new one is in ``result["root_password"]``."""
        return self._perform_with_result(server, "reset_password")

    def enable_rescue(
        self,
        server: Identifier,
        *,
        type: str = "linux64",
        ssh_keys: Optional[Sequence[Identifier]] = None,
    ) -> ActionResult:
        keys = [extract_identifier(key) for key in ssh_keys] if ssh_keys else None
        return self._perform_with_result(server, "enable_rescue", {"type": type, "ssh_keys": keys})

    def disable_rescue(self, server: Identifier) -> Action:
        return self._perform(server, "disable_rescue")

    def create_image(
        self,
        server: Identifier,
        *,
        description: Optional[str] = None,
        type: str = "snapshot",
        labels: Optional[Mapping[str, str]] = None,
    ) -> ActionResult:
        """Create a snapshot or backup image; the image is in ``result["image"]``."""
        return self._perform_with_result(
            server,
            "create_image",
            {"description": description, "type": type, "labels": dict(labels) if labels else None},
        )

    def rebuild(self, server: Identifier, *, image: Identifier) -> ActionResult:
        return self._perform_with_result(server, "rebuild", {"image": extract_identifier(image)})

    def change_type(self, server: Identifier, *, server_type: Identifier, upgrade_disk: bool = False) -> Action:
        return self._perform(
            server,
            "change_type",
            {"server_type": _maybe_id(server_type), "upgrade_disk": upgrade_disk},
        )

    def enable_backup(self, server: Identifier) -> Action:
        return self._perform(server, "enable_backup")

    def disable_backup(self, server: Identifier) -> Action:
        return self._perform(server, "disable_backup")

    def attach_iso(self, server: Identifier, *, iso: Identifier) -> Action:
        return self._perform(server, "attach_iso", {"iso": extract_identifier(iso)})

    def detach_iso(self, server: Identifier) -> Action:
        return self._perform(server, "detach_iso")

    def change_protection(
        self,
        server: Identifier,
        *,
        delete: Optional[bool] = None,
        rebuild: Optional[bool] = None,
    ) -> Action:
        return self._perform(server, "change_protection", {"delete": delete, "rebuild": rebuild})

    def request_console(self, server: Identifier) -> ActionResult:
        """Open a VNC console; ``wss_url`` and ``password`` are in the result."""
        return self._perform_with_result(server, "request_console")

    def attach_to_network(
        self,
        server: Identifier,
        *,
        network: Identifier,
        ip: Optional[str] = None,
        alias_ips: Optional[Sequence[str]] = None,
    ) -> Action:
        return self._perform(
            server,
            "attach_to_network",
            {
                "network": extract_identifier(network),
                "ip": ip,
                "alias_ips": list(alias_ips) if alias_ips is not None else None,
            },
        )

    def detach_from_network(self, server: Identifier, *, network: Identifier) -> Action:
        return self._perform(server, "detach_from_network", {"network": extract_identifier(network)})

    def add_to_placement_group(self, server: Identifier, *, placement_group: Identifier) -> Action:
        return self._perform(
            server,
            "add_to_placement_group",
            {"placement_group": extract_identifier(placement_group)},
        )

    def remove_from_placement_group(self, server: Identifier) -> Action:
        return self._perform(server, "remove_from_placement_group")


class ServersClient(ResourceClient[Server]):
    path = "/servers"
    collection_key = "servers"
    item_key = "server"
    model = Server
    actions_class = ServerActionsClient
    async_create = True

    def create(  # type: ignore[override]
        self,
        *,
        name: Optional[str] = None,
        server_type: Optional[Identifier] = None,
        image: Optional[Identifier] = None,
        location: Optional[Identifier] = None,
        datacenter: Optional[Identifier] = None,
        ssh_keys: Optional[Sequence[Identifier]] = None,
        volumes: Optional[Sequence[Identifier]] = None,
        networks: Optional[Sequence[Identifier]] = None,
        firewalls: Optional[Sequence[Identifier]] = None,
        user_data: Optional[str] = None,
        labels: Optional[Mapping[str, str]] = None,
        automount: Optional[bool] = None,
        start_after_create: Optional[bool] = None,
        placement_group: Optional[Identifier] = None,
        public_net: Optional[Mapping[str, Any]] = None,
        **extra: Any,
    ) -> CreateResult[Server]:
        """Create a server.

        Returns a ``CreateResult`` holding the server (usually still
        ``initializing``), the creation action and any follow-up actions.
        """

        payload: Dict[str, Any] = {
            "name": name,
            "server_type": _maybe_id(server_type),
            "image": _maybe_id(image),
            "location": _maybe_id(location),
            "datacenter": _maybe_id(datacenter),
            "ssh_keys": _ids(ssh_keys),
            "volumes": _ids(volumes),
            "networks": _ids(networks),
            "firewalls": [{"firewall": item} for item in _ids(firewalls)] if firewalls else None,
            "user_data": user_data,
            "labels": dict(labels) if labels is not None else None,
            "automount": automount,
            "start_after_create": start_after_create,
            "placement_group": _maybe_id(placement_group),
            "public_net": dict(public_net) if public_net is not None else None,
            **extra,
        }
        return super().create(**payload)

    def metrics(
        self,
        server: Identifier,
        *,
        type: Sequence[str] | str,
        start: str,
        end: str,
        step: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Return raw time series for ``cpu``, ``disk`` and/or ``network``."""

        metric_types = type if isinstance(type, str) else ",".join(type)
        params = {"type": metric_types, "start": start, "end": end}
        if step is not None:
            params["step"] = str(step)
        data = self._request("GET", f"{self._item_path(server)}/metrics", params=params)
        return data.get("metrics", {})



class ImagesClient(MutableResourceClient[Image]):
    """Images cannot be created directly; see ``ServerActionsClient.create_image``."""

    path = "/images"
    collection_key = "images"
    item_key = "image"
    model = Image


class PlacementGroupsClient(ResourceClient[PlacementGroup]):
    path = "/placement_groups"
    collection_key = "placement_groups"
    item_key = "placement_group"
    model = PlacementGroup


def _maybe_id(resource: Optional[Identifier]):
    return extract_identifier(resource) if resource is not None else None


def _ids(resources: Optional[Sequence[Identifier]]) -> Optional[List[Any]]:
    if resources is None:
        return None
    return [extract_identifier(item) for item in resources]
