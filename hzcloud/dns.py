"""DNS zones and the resource record sets (RRSets) inside them.

RRSets have no numeric id: they are addressed by ``name`` and ``type``
within their zone, e.g. ``/zones/example.com/rrsets/www/A``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

from .exceptions import ValidationFailed
from .models import Action, CreateResult, PaginatedCollection, Record, RRSet, Zone
from .resources import (
    ITER_PAGE_SIZE,
    Identifier,
    ResourceActionsClient,
    ResourceClient,
    _BaseClient,
    _pagination,
    build_query,
    compact,
    extract_identifier,
    parse_actions,
)

RRSET_TYPES = frozenset(
    {
        "A",
        "AAAA",
        "CAA",
        "CNAME",
        "DS",
        "HINFO",
        "HTTPS",
        "MX",
        "NS",
        "PTR",
        "RP",
        "SOA",
        "SRV",
        "SVCB",
        "TLSA",
        "TXT",
    }
)

RecordInput = Union[str, Mapping[str, Any], Record]


def normalize_rrset_type(value: str) -> str:
    """Return the upper-cased record type or raise ``ValidationFailed``."""

    normalized = (value or "").strip().upper()
    if normalized not in RRSET_TYPES:
        message = f"unsupported record type {value!r}"
        raise ValidationFailed(
            f"invalid input in field 'type': {message}",
            code="invalid_input",
            details={"fields": [{"name": "type", "messages": [message]}]},
        )
    return normalized


def _records_payload(records: Iterable[RecordInput]) -> List[Dict[str, Any]]:
    payload = []
    for record in records:
        if isinstance(record, str):
            payload.append({"value": record})
        elif isinstance(record, Record):
            payload.append(record.model_dump(exclude_none=True, include={"value", "comment"}))
        else:
            payload.append(compact(record))
    return payload


class ZoneActionsClient(ResourceActionsClient):
    def change_ttl(self, zone: Identifier, *, ttl: int) -> Action:
        """Change the zone's default TTL; record sets with their own TTL keep it."""
        return self._perform(zone, "change_ttl", {"ttl": ttl})

    def change_primary_nameservers(
        self, zone: Identifier, *, primary_nameservers: Sequence[Mapping[str, Any]]
    ) -> Action:
        return self._perform(
            zone,
            "change_primary_nameservers",
            {"primary_nameservers": [dict(item) for item in primary_nameservers]},
        )

    def import_zonefile(self, zone: Identifier, *, zonefile: str) -> Action:
        return self._perform(zone, "import_zonefile", {"zonefile": zonefile})


class ZonesClient(ResourceClient[Zone]):
    path = "/zones"
    collection_key = "zones"
    item_key = "zone"
    model = Zone
    actions_class = ZoneActionsClient
    async_create = True

    def export_zonefile(self, zone: Identifier) -> str:
        data = self._request("GET", f"{self._item_path(zone)}/zonefile")
        return data.get("zonefile", "")

    def rrsets(self, zone: Identifier) -> "RRSetsClient":
        """Return the client for record sets of ``zone`` (id or name)."""
        return RRSetsClient(self._client, zone)


class RRSetActionsClient(ResourceActionsClient):
    """Commands on one record set. Their actions are tracked by the zone."""

    def __init__(self, client, zone: Identifier) -> None:
        self._zone = extract_identifier(zone)
        super().__init__(client, f"/zones/{self._zone}/rrsets")

    def list(self, **filters: Any) -> PaginatedCollection[Action]:  # type: ignore[override]
        """Actions of the zone; record set actions have no listing of their own."""
        data = self._request("GET", f"/zones/{self._zone}/actions", params=build_query(filters))
        return PaginatedCollection(parse_actions(data.get("actions")), _pagination(data))

    def retrieve(self, action_id: int) -> Action:
        data = self._request("GET", f"/zones/actions/{action_id}")
        return Action.model_validate(data["action"])

    def set_records(self, name: str, type: str, *, records: Iterable[RecordInput]) -> Action:
        """Replace every record of the set."""
        return self._perform(_rrset_id(name, type), "set_records", {"records": _records_payload(records)})

    def add_records(
        self, name: str, type: str, *, records: Iterable[RecordInput], ttl: Optional[int] = None
    ) -> Action:
        return self._perform(
            _rrset_id(name, type),
            "add_records",
            {"records": _records_payload(records), "ttl": ttl},
        )

    def remove_records(self, name: str, type: str, *, records: Iterable[RecordInput]) -> Action:
        return self._perform(_rrset_id(name, type), "remove_records", {"records": _records_payload(records)})

    def change_ttl(self, name: str, type: str, *, ttl: Optional[int]) -> Action:
        """Set the TTL of the set; ``None`` falls back to the zone default."""
        return self._perform(_rrset_id(name, type), "change_ttl", {"ttl": ttl}, keep_none=("ttl",))

    def change_protection(self, name: str, type: str, *, change: bool) -> Action:  # type: ignore[override]
        return self._perform(_rrset_id(name, type), "change_protection", {"change": change})


class RRSetsClient(_BaseClient):
    """CRUD for the record sets of one zone."""

    def __init__(self, client, zone: Identifier) -> None:
        super().__init__(client)
        self._zone = extract_identifier(zone)
        self._path = f"/zones/{self._zone}/rrsets"

    @property
    def zone(self) -> Union[int, str]:
        return self._zone

    def list(self, **filters: Any) -> PaginatedCollection[RRSet]:
        """List record sets; ``type`` may be one type or a sequence of them."""

        rrset_type = filters.get("type")
        if isinstance(rrset_type, str):
            filters["type"] = normalize_rrset_type(rrset_type)
        elif rrset_type is not None:
            filters["type"] = [normalize_rrset_type(item) for item in rrset_type]
        data = self._request("GET", self._path, params=build_query(filters))
        items = [RRSet.model_validate(item) for item in data.get("rrsets", [])]
        return PaginatedCollection(items, _pagination(data))

    def iter_all(self, **filters: Any) -> Iterator[RRSet]:
        filters.setdefault("per_page", ITER_PAGE_SIZE)
        page: Optional[int] = filters.pop("page", None) or 1
        while page is not None:
            collection = self.list(page=page, **filters)
            yield from collection
            page = collection.next_page

    def create(
        self,
        *,
        name: str,
        type: str,
        records: Iterable[RecordInput],
        ttl: Optional[int] = None,
        labels: Optional[Mapping[str, str]] = None,
    ) -> CreateResult[RRSet]:
        """Create a record set. ``ttl=None`` uses the zone default."""

        payload = compact(
            {
                "name": name,
                "type": normalize_rrset_type(type),
                "records": _records_payload(records),
                "ttl": ttl,
                "labels": dict(labels) if labels is not None else None,
            }
        )
        data = self._request("POST", self._path, json=payload)
        action = data.get("action")
        return CreateResult(
            resource=RRSet.model_validate(data["rrset"]),
            action=Action.model_validate(action) if action else None,
        )

    def retrieve(self, name: str, type: str) -> RRSet:
        data = self._request("GET", self._item_path(name, type))
        return RRSet.model_validate(data["rrset"])

    def update(self, name: str, type: str, **params: Any) -> RRSet:
        data = self._request("PUT", self._item_path(name, type), json=params)
        return RRSet.model_validate(data["rrset"])

    def delete(self, name: str, type: str) -> Optional[Action]:
        data = self._request("DELETE", self._item_path(name, type))
        action = data.get("action") if data else None
        return Action.model_validate(action) if action else None

    def actions(self) -> RRSetActionsClient:
        return RRSetActionsClient(self._client, self._zone)

    def _item_path(self, name: str, type: str) -> str:
        return f"{self._path}/{_rrset_id(name, type)}"


def _rrset_id(name: str, type: str) -> str:
    return f"{name}/{normalize_rrset_type(type)}"
