"""Global actions endpoint and helpers for waiting on asynchronous actions."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Iterable, List, Optional, Union

from .exceptions import PollTimeout
from .models import Action, PaginatedCollection
from .resources import _BaseClient, _pagination, build_query, parse_actions

logger = logging.getLogger(__name__)

ActionRef = Union[Action, int]


def wait_for_action(
    retrieve: Callable[[int], Action],
    action: ActionRef,
    *,
    poll_interval: float = 1.0,
    timeout: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> Action:
    """Re-fetch ``action`` until it reaches ``success`` or ``error``.

    The terminal action is returned whatever its outcome; check
    ``action.succeeded``. ``PollTimeout`` is raised when ``timeout`` seconds
    pass while the action is still running. Errors raised by ``retrieve``
    propagate unchanged.
    """

    current = action if isinstance(action, Action) else retrieve(action)
    deadline = clock() + timeout if timeout is not None else None
    while not current.is_terminal:
        if deadline is not None and clock() >= deadline:
            logger.warning(
                "Gave up waiting for action",
                extra={"action_id": current.id, "command": current.command, "progress": current.progress},
            )
            raise PollTimeout(current, timeout or 0.0)
        sleep(poll_interval)
        current = retrieve(current.id)
        logger.debug(
            "Polled action",
            extra={"action_id": current.id, "status": current.status, "progress": current.progress},
        )
    return current


class ActionsClient(_BaseClient):
    """Access to ``/actions`` regardless of the resource an action belongs to."""

    def list(self, **filters: Any) -> PaginatedCollection[Action]:
        data = self._request("GET", "/actions", params=build_query(filters))
        return PaginatedCollection(parse_actions(data.get("actions")), _pagination(data))

    def retrieve(self, action_id: int) -> Action:
        data = self._request("GET", f"/actions/{action_id}")
        return Action.model_validate(data["action"])

    def wait(
        self,
        action: ActionRef,
        *,
        poll_interval: Optional[float] = None,
        timeout: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> Action:
        """Block until ``action`` is terminal, see :func:`wait_for_action`."""

        interval = self._client.poll_interval if poll_interval is None else poll_interval
        return wait_for_action(self.retrieve, action, poll_interval=interval, timeout=timeout, sleep=sleep)

    def wait_all(
        self,
        actions: Iterable[ActionRef],
        *,
        poll_interval: Optional[float] = None,
        timeout: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> List[Action]:
        """Wait for several actions, sharing one deadline. Order is preserved."""

        interval = self._client.poll_interval if poll_interval is None else poll_interval
        deadline = clock() + timeout if timeout is not None else None
        result: List[Action] = []
        for action in actions:
            remaining = None if deadline is None else max(deadline - clock(), 0.0)
            result.append(
                wait_for_action(
                    self.retrieve,
                    action,
                    poll_interval=interval,
                    timeout=remaining,
                    sleep=sleep,
                    clock=clock,
                )
            )
        return result
