"""Generic building blocks shared by every resource client."""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    ClassVar,
    Dict,
    Generic,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Type,
    TypeVar,
    Union,
)

from .models import (
    Action,
    ActionResult,
    CreateResult,
    HCloudModel,
    PaginatedCollection,
    Pagination,
)

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .client import Client

T = TypeVar("T", bound=HCloudModel)

Identifier = Union[int, str, HCloudModel]

ITER_PAGE_SIZE = 50


def extract_identifier(resource: Identifier) -> Union[int, str]:
    """Return the id of ``resource``, which may already be an id or a name."""

    if isinstance(resource, (int, str)):
        return resource
    identifier = getattr(resource, "id", None)
    if identifier is None:
        raise ValueError(f"{type(resource).__name__} has no id")
    return identifier


def format_label_selector(selector: Union[str, Mapping[str, Optional[str]]]) -> str:
    """Render a label selector; ``{"env": "prod", "team": None}`` -> ``env=prod,team``."""

    if isinstance(selector, str):
        return selector
    parts = []
    for key, value in selector.items():
        parts.append(key if value is None else f"{key}={value}")
    return ",".join(parts)


def build_query(filters: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert keyword filters into query parameters understood by the API."""

    params: Dict[str, Any] = {}
    for key, value in filters.items():
        if value is None:
            continue
        if key == "label_selector":
            params[key] = format_label_selector(value)
        elif isinstance(value, bool):
            params[key] = "true" if value else "false"
        elif isinstance(value, (list, tuple, set, frozenset)):
            params[key] = [str(item) for item in value]
        else:
            params[key] = value
    return params


def compact(payload: Mapping[str, Any], keep: Sequence[str] = ()) -> Dict[str, Any]:
    """Drop keys whose value is ``None`` from a request body, except ``keep``."""

    return {key: value for key, value in payload.items() if value is not None or key in keep}


def parse_actions(items: Optional[List[Dict[str, Any]]]) -> List[Action]:
    return [Action.model_validate(item) for item in items or []]


class _BaseClient:
    def __init__(self, client: "Client") -> None:
        self._client = client

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        return self._client.request(method, path, **kwargs)


class ResourceActionsClient(_BaseClient):
    """Actions belonging to one resource type, e.g. ``/servers/actions``."""

    def __init__(self, client: "Client", base_path: str) -> None:
        super().__init__(client)
        self._base_path = base_path

    def list(self, resource: Optional[Identifier] = None, **filters: Any) -> PaginatedCollection[Action]:
        """List actions of every resource of this type, or of one resource."""

        if resource is None:
            path = f"{self._base_path}/actions"
        else:
            path = f"{self._base_path}/{extract_identifier(resource)}/actions"
        data = self._request("GET", path, params=build_query(filters))
        return PaginatedCollection(parse_actions(data.get("actions")), _pagination(data))

    def retrieve(self, action_id: int) -> Action:
        data = self._request("GET", f"{self._base_path}/actions/{action_id}")
        return Action.model_validate(data["action"])

    def _post(
        self,
        resource: Identifier,
        command: str,
        payload: Optional[Mapping[str, Any]] = None,
        *,
        keep_none: Sequence[str] = (),
    ) -> Dict[str, Any]:
        path = f"{self._base_path}/{extract_identifier(resource)}/actions/{command}"
        body = compact(payload, keep_none) if payload is not None else None
        return self._request("POST", path, json=body)

    def _perform(
        self,
        resource: Identifier,
        command: str,
        payload: Optional[Mapping[str, Any]] = None,
        *,
        keep_none: Sequence[str] = (),
    ) -> Action:
        data = self._post(resource, command, payload, keep_none=keep_none)
        return Action.model_validate(data["action"])

    def _perform_with_result(
        self, resource: Identifier, command: str, payload: Optional[Mapping[str, Any]] = None
    ) -> ActionResult:
        data = self._post(resource, command, payload)
        extras = {key: value for key, value in data.items() if key != "action"}
        return ActionResult(Action.model_validate(data["action"]), extras)

    def _perform_many(
        self, resource: Identifier, command: str, payload: Optional[Mapping[str, Any]] = None
    ) -> List[Action]:
        data = self._post(resource, command, payload)
        return parse_actions(data.get("actions"))

    def change_protection(self, resource: Identifier, *, delete: Optional[bool] = None, **flags: Optional[bool]) -> Action:
        """Toggle delete (and, where supported, rebuild) protection."""

        return self._perform(resource, "change_protection", {"delete": delete, **flags})


class DnsPtrActionsMixin:
    """``change_dns_ptr`` for resources owning public IP addresses."""

    def change_dns_ptr(self, resource: Identifier, *, ip: str, dns_ptr: Optional[str]) -> Action:
        """Set the reverse DNS entry of ``ip``; ``None`` restores the default."""

        return self._perform(  # type: ignore[attr-defined]
            resource, "change_dns_ptr", {"ip": ip, "dns_ptr": dns_ptr}, keep_none=("dns_ptr",)
        )


class ReadOnlyResourceClient(_BaseClient, Generic[T]):
    """List and retrieve for resources the API does not let callers modify."""

    path: ClassVar[str]
    collection_key: ClassVar[str]
    item_key: ClassVar[str]
    model: ClassVar[Type[HCloudModel]]

    def list(self, **filters: Any) -> PaginatedCollection[T]:
        """Return one page of resources matching ``filters``."""

        data = self._request("GET", self.path, params=build_query(filters))
        items = [self._parse(item) for item in data.get(self.collection_key, [])]
        return PaginatedCollection(items, _pagination(data))

    def iter_all(self, **filters: Any) -> Iterator[T]:
        """Yield every matching resource, following ``next_page`` links."""

        filters.setdefault("per_page", ITER_PAGE_SIZE)
        page: Optional[int] = filters.pop("page", None) or 1
        while page is not None:
            collection = self.list(page=page, **filters)
            yield from collection
            page = collection.next_page

    def get_by_name(self, name: str) -> Optional[T]:
        collection = self.list(name=name)
        if not collection.items:
            return None
        return collection.items[0]

    def retrieve(self, resource: Identifier) -> T:
        data = self._request("GET", self._item_path(resource))
        return self._parse(data[self.item_key])

    def _item_path(self, resource: Identifier) -> str:
        return f"{self.path}/{extract_identifier(resource)}"

    def _parse(self, payload: Dict[str, Any]) -> T:
        return self.model.model_validate(payload)  # type: ignore[return-value]


class MutableResourceClient(ReadOnlyResourceClient[T]):
    """Resources that can be updated, deleted and acted upon."""

    actions_class: ClassVar[Type[ResourceActionsClient]] = ResourceActionsClient

    def update(self, resource: Identifier, **params: Any) -> T:
        """Change the supplied fields only; omitted fields keep their value."""

        data = self._request("PUT", self._item_path(resource), json=params)
        return self._parse(data[self.item_key])

    def delete(self, resource: Identifier) -> Optional[Action]:
        data = self._request("DELETE", self._item_path(resource))
        action = data.get("action") if data else None
        return Action.model_validate(action) if action else None

    def actions(self) -> ResourceActionsClient:
        return self.actions_class(self._client, self.path)


class ResourceClient(MutableResourceClient[T]):
    """Full CRUD resource.

    ``create`` returns the resource itself, or a :class:`CreateResult` when
    ``async_create`` is set because the API tracks creation with an Action.
    """

    async_create: ClassVar[bool] = False

    def create(self, **params: Any) -> Union[T, CreateResult[T]]:
        data = self._request("POST", self.path, json=compact(params))
        return self._parse_created(data)

    def _parse_created(self, data: Dict[str, Any]) -> Union[T, CreateResult[T]]:
        resource = self._parse(data[self.item_key])
        if not self.async_create:
            return resource
        action = data.get("action")
        next_actions = parse_actions(data.get("next_actions"))
        if action is None and data.get("actions"):
            actions = parse_actions(data.get("actions"))
            action, next_actions = actions[0], actions[1:] + next_actions
        elif action is not None:
            action = Action.model_validate(action)
        return CreateResult(
            resource=resource,
            action=action,
            next_actions=next_actions,
            root_password=data.get("root_password"),
        )


def _pagination(data: Mapping[str, Any]) -> Optional[Pagination]:
    meta = data.get("meta") or {}
    pagination = meta.get("pagination")
    if not pagination:
        return None
    return Pagination.model_validate(pagination)
