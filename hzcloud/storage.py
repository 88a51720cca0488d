"""Block storage volumes."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .models import Action, CreateResult, Volume
from .resources import Identifier, ResourceActionsClient, ResourceClient, extract_identifier


class VolumeActionsClient(ResourceActionsClient):
    def attach(self, volume: Identifier, *, server: Identifier, automount: Optional[bool] = None) -> Action:
        return self._perform(
            volume,
            "attach",
            {"server": extract_identifier(server), "automount": automount},
        )

    def detach(self, volume: Identifier) -> Action:
        return self._perform(volume, "detach")

    def resize(self, volume: Identifier, *, size: int) -> Action:
        """Grow the volume to ``size`` GB. Volumes cannot shrink."""
        return self._perform(volume, "resize", {"size": size})


class VolumesClient(ResourceClient[Volume]):
    path = "/volumes"
    collection_key = "volumes"
    item_key = "volume"
    model = Volume
    actions_class = VolumeActionsClient
    async_create = True

    def create(  # type: ignore[override]
        self,
        *,
        name: Optional[str] = None,
        size: Optional[int] = None,
        location: Optional[Identifier] = None,
        server: Optional[Identifier] = None,
        automount: Optional[bool] = None,
        format: Optional[str] = None,
        labels: Optional[Mapping[str, str]] = None,
        **extra: Any,
    ) -> CreateResult[Volume]:
        """Create a volume, either in ``location`` or attached to ``server``."""

        return super().create(  # type: ignore[return-value]
            name=name,
            size=size,
            location=extract_identifier(location) if location is not None else None,
            server=extract_identifier(server) if server is not None else None,
            automount=automount,
            format=format,
            labels=dict(labels) if labels is not None else None,
            **extra,
        )
