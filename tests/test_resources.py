"""Tests for the resource clients built on top of the transport."""

from __future__ import annotations

import unittest

from fakes import FakeResponse, FakeSession, action_payload, error_response, pagination_meta
from hzcloud import Action, ActionResult, Client, CreateResult, NotFound, ValidationFailed
from hzcloud.models import Server
from hzcloud.resources import build_query, format_label_selector


def _server_payload(server_id: int = 42, *, status: str = "running", name: str = "my-server") -> dict:
    return {
        "id": server_id,
        "name": name,
        "status": status,
        "created": "2024-05-01T12:00:00+00:00",
        "labels": {"env": "prod"},
        "server_type": {"id": 22, "name": "cpx11", "cores": 2, "memory": 2.0, "disk": 40},
        "image": {"id": 114690387, "name": "ubuntu-24.04", "type": "system"},
        "public_net": {"ipv4": {"ip": "198.51.100.10"}, "ipv6": {"ip": "2001:db8::/64"}},
        "rescue_enabled": False,
        "primary_disk_size": 40,
    }


class QueryBuildingTests(unittest.TestCase):
    def test_label_selector_mapping(self) -> None:
        self.assertEqual(format_label_selector({"env": "prod", "team": None}), "env=prod,team")
        self.assertEqual(format_label_selector("env!=dev"), "env!=dev")

    def test_build_query_normalizes_values(self) -> None:
        params = build_query(
            {
                "label_selector": {"env": "prod"},
                "sort": ["name:asc", "id:desc"],
                "status": None,
                "include_deprecated": True,
                "per_page": 10,
            }
        )

        self.assertEqual(
            params,
            {
                "label_selector": "env=prod",
                "sort": ["name:asc", "id:desc"],
                "include_deprecated": "true",
                "per_page": 10,
            },
        )


class ServersClientTests(unittest.TestCase):
    """Verify the CRUD contract using the servers resource."""

    def setUp(self) -> None:
        self.session = FakeSession()
        self.client = Client("token", session=self.session)  # type: ignore[arg-type]

    def test_list_returns_paginated_collection(self) -> None:
        self.session.queue(
            FakeResponse(
                {
                    "servers": [_server_payload(1, name="a"), _server_payload(2, name="b")],
                    "meta": pagination_meta(1, per_page=2, next_page=2, total=3),
                }
            )
        )

        collection = self.client.servers.list(label_selector={"env": "prod"}, per_page=2)

        self.assertEqual([server.name for server in collection], ["a", "b"])
        self.assertLessEqual(len(collection), 2)
        self.assertEqual(collection.pagination.total_entries, 3)
        self.assertEqual(collection.next_page, 2)
        self.assertEqual(self.session.last_call["params"], {"label_selector": "env=prod", "per_page": 2})

    def test_list_with_out_of_range_per_page_fails_validation(self) -> None:
        details = {"fields": [{"name": "per_page", "messages": ["must be between 1 and 100"]}]}
        self.session.queue(error_response(400, "invalid_input", "invalid input in field 'per_page'", details))

        with self.assertRaises(ValidationFailed):
            self.client.servers.list(per_page=101)

        self.assertEqual(self.session.last_call["params"], {"per_page": 101})

    def test_iter_all_follows_next_page(self) -> None:
        self.session.queue(
            FakeResponse({"servers": [_server_payload(1)], "meta": pagination_meta(1, per_page=1, next_page=2)}),
            FakeResponse({"servers": [_server_payload(2)], "meta": pagination_meta(2, per_page=1)}),
        )

        servers = list(self.client.servers.iter_all(per_page=1))

        self.assertEqual([server.id for server in servers], [1, 2])
        self.assertEqual([call["params"]["page"] for call in self.session.calls], [1, 2])

    def test_create_returns_server_and_running_action(self) -> None:
        self.session.queue(
            FakeResponse(
                {
                    "server": _server_payload(42, status="initializing"),
                    "action": action_payload(7, command="create_server"),
                    "next_actions": [action_payload(8, command="start_server")],
                    "root_password": "YItygq1v3GYjjMomLaKc",
                },
                status_code=201,
            )
        )

        result = self.client.servers.create(
            name="my-server", server_type="cpx11", image="ubuntu-24.04", location="nbg1"
        )

        self.assertIsInstance(result, CreateResult)
        self.assertIn(result.resource.status, {"initializing", "starting"})
        self.assertEqual(result.action.status, "running")
        self.assertEqual([action.id for action in result.next_actions], [8])
        self.assertEqual(result.root_password, "YItygq1v3GYjjMomLaKc")
        self.assertEqual(
            self.session.last_call["json"],
            {"name": "my-server", "server_type": "cpx11", "image": "ubuntu-24.04", "location": "nbg1"},
        )

    def test_create_without_required_field_fails_validation(self) -> None:
        details = {"fields": [{"name": "server_type", "messages": ["Missing data for required field."]}]}
        self.session.queue(error_response(422, "invalid_input", "invalid input in field 'server_type'", details))

        with self.assertRaises(ValidationFailed) as ctx:
            self.client.servers.create(name="my-server", image="ubuntu-24.04")

        self.assertIn("server_type", ctx.exception.fields)
        self.assertNotIn("server_type", self.session.last_call["json"])

    def test_retrieve_parses_server_and_keeps_unknown_fields(self) -> None:
        self.session.queue(FakeResponse({"server": _server_payload(42)}))

        server = self.client.servers.retrieve(42)

        self.assertIsInstance(server, Server)
        self.assertEqual(self.session.last_call["url"], "https://api.hetzner.cloud/v1/servers/42")
        self.assertEqual(server.server_type.name, "cpx11")
        self.assertEqual(server.ipv4, "198.51.100.10")
        self.assertEqual(server.created.year, 2024)
        self.assertEqual(server.extra["primary_disk_size"], 40)

    def test_retrieve_missing_server_raises_not_found(self) -> None:
        self.session.queue(error_response(404, "not_found", "server with ID '999' not found"))

        with self.assertRaises(NotFound):
            self.client.servers.retrieve(999)

    def test_update_sends_only_supplied_fields(self) -> None:
        self.session.queue(FakeResponse({"server": _server_payload(42, name="renamed")}))
        server = Server(id=42, name="my-server")

        updated = self.client.servers.update(server, name="renamed")

        self.assertEqual(updated.name, "renamed")
        self.assertEqual(self.session.last_call["method"], "PUT")
        self.assertEqual(self.session.last_call["json"], {"name": "renamed"})

    def test_delete_returns_action_when_reported(self) -> None:
        self.session.queue(FakeResponse({"action": action_payload(9, command="delete_server")}))

        action = self.client.servers.delete(42)

        self.assertIsInstance(action, Action)
        self.assertEqual(action.command, "delete_server")
        self.assertEqual(self.session.last_call["method"], "DELETE")

    def test_get_by_name_returns_none_when_missing(self) -> None:
        self.session.queue(FakeResponse({"servers": [], "meta": pagination_meta()}))

        self.assertIsNone(self.client.servers.get_by_name("ghost"))
        self.assertEqual(self.session.last_call["params"], {"name": "ghost"})


class ResourceActionsTests(unittest.TestCase):
    """Resource specific state changes return Actions."""

    def setUp(self) -> None:
        self.session = FakeSession()
        self.client = Client("token", session=self.session)  # type: ignore[arg-type]

    def test_server_power_on(self) -> None:
        self.session.queue(FakeResponse({"action": action_payload(3, command="start_server")}, status_code=201))

        action = self.client.servers.actions().power_on(42)

        self.assertEqual(action.command, "start_server")
        self.assertEqual(self.session.last_call["url"], "https://api.hetzner.cloud/v1/servers/42/actions/poweron")
        self.assertIsNone(self.session.last_call["json"])

    def test_server_reset_password_returns_extra_payload(self) -> None:
        self.session.queue(
            FakeResponse({"action": action_payload(4, command="reset_password"), "root_password": "s3cr3t"})
        )

        result = self.client.servers.actions().reset_password(42)

        self.assertIsInstance(result, ActionResult)
        self.assertEqual(result["root_password"], "s3cr3t")

    def test_change_dns_ptr_sends_null_to_reset(self) -> None:
        self.session.queue(FakeResponse({"action": action_payload(5, command="change_dns_ptr")}))

        self.client.floating_ips.actions().change_dns_ptr(4711, ip="198.51.100.1", dns_ptr=None)

        self.assertEqual(self.session.last_call["json"], {"ip": "198.51.100.1", "dns_ptr": None})

    def test_volume_attach(self) -> None:
        self.session.queue(FakeResponse({"action": action_payload(6, command="attach_volume")}))

        self.client.volumes.actions().attach(11, server=Server(id=42), automount=True)

        call = self.session.last_call
        self.assertEqual(call["url"], "https://api.hetzner.cloud/v1/volumes/11/actions/attach")
        self.assertEqual(call["json"], {"server": 42, "automount": True})

    def test_primary_ip_assign_and_unassign(self) -> None:
        self.session.queue(
            FakeResponse({"action": action_payload(10, command="assign_primary_ip")}),
            FakeResponse({"action": action_payload(11, command="unassign_primary_ip")}),
        )

        actions = self.client.primary_ips.actions()
        actions.assign(5, assignee_id=42)
        actions.unassign(5)

        self.assertEqual(self.session.calls[0]["json"], {"assignee_id": 42, "assignee_type": "server"})
        self.assertTrue(self.session.calls[1]["url"].endswith("/primary_ips/5/actions/unassign"))

    def test_firewall_set_rules_returns_action_list(self) -> None:
        self.session.queue(
            FakeResponse({"actions": [action_payload(12, command="set_firewall_rules"), action_payload(13)]})
        )

        actions = self.client.firewalls.actions().set_rules(3, rules=[])

        self.assertEqual([action.id for action in actions], [12, 13])
        self.assertEqual(self.session.last_call["json"], {"rules": []})

    def test_list_actions_of_one_resource(self) -> None:
        self.session.queue(FakeResponse({"actions": [action_payload(1)], "meta": pagination_meta()}))

        collection = self.client.volumes.actions().list(11, status="running")

        self.assertEqual(len(collection), 1)
        self.assertTrue(self.session.last_call["url"].endswith("/volumes/11/actions"))
        self.assertEqual(self.session.last_call["params"], {"status": "running"})


    def test_firewall_create_splits_applied_actions(self) -> None:
        self.session.queue(
            FakeResponse(
                {
                    "firewall": {"id": 3, "name": "web", "rules": [], "applied_to": []},
                    "actions": [
                        action_payload(21, command="apply_firewall"),
                        action_payload(22, command="apply_firewall"),
                    ],
                },
                status_code=201,
            )
        )

        result = self.client.firewalls.create(name="web", apply_to=[{"type": "server", "server": {"id": 42}}])

        self.assertIsInstance(result, CreateResult)
        self.assertEqual(result.resource.name, "web")
        self.assertEqual(result.action.id, 21)
        self.assertEqual([action.id for action in result.next_actions], [22])


class SSHKeyLookupTests(unittest.TestCase):
    def setUp(self) -> None:
        self.session = FakeSession()
        self.client = Client("token", session=self.session)  # type: ignore[arg-type]

    def test_get_by_fingerprint_filters_server_side(self) -> None:
        fingerprint = "b7:2f:30:a0:2f:6c:58:6c:21:04:58:61:ba:06:3b:2f"
        self.session.queue(
            FakeResponse({"ssh_keys": [{"id": 5, "name": "laptop", "fingerprint": fingerprint}]}),
            FakeResponse({"ssh_keys": []}),
        )

        key = self.client.ssh_keys.get_by_fingerprint(fingerprint)
        missing = self.client.ssh_keys.get_by_fingerprint("00:00")

        self.assertEqual(key.id, 5)
        self.assertIsNone(missing)
        self.assertEqual(self.session.calls[0]["params"], {"fingerprint": fingerprint})

    def test_find_by_public_key_ignores_surrounding_whitespace(self) -> None:
        self.session.queue(
            FakeResponse(
                {
                    "ssh_keys": [{"id": 1, "name": "old", "public_key": "ssh-ed25519 AAAAold user@host"}],
                    "meta": pagination_meta(1, per_page=50, next_page=2, total=2),
                }
            ),
            FakeResponse(
                {
                    "ssh_keys": [{"id": 2, "name": "new", "public_key": "ssh-ed25519 AAAAnew user@host\n"}],
                    "meta": pagination_meta(2, per_page=50, total=2),
                }
            ),
        )

        key = self.client.ssh_keys.find_by_public_key("  ssh-ed25519 AAAAnew user@host ")

        self.assertEqual(key.id, 2)
        self.assertEqual([call["params"]["page"] for call in self.session.calls], [1, 2])

    def test_find_by_public_key_returns_none_when_absent(self) -> None:
        self.session.queue(FakeResponse({"ssh_keys": [{"id": 1, "public_key": "ssh-rsa AAAAother"}]}))

        self.assertIsNone(self.client.ssh_keys.find_by_public_key("ssh-ed25519 AAAAmissing"))




class CatalogTests(unittest.TestCase):
    def test_server_types_and_pricing(self) -> None:
        session = FakeSession(
            FakeResponse({"server_types": [{"id": 22, "name": "cpx11", "cores": 2, "memory": 2.0, "disk": 40}]}),
            FakeResponse({"pricing": {"currency": "EUR", "vat_rate": "19.00", "server_types": []}}),
        )
        client = Client("token", session=session)  # type: ignore[arg-type]

        server_types = client.server_types.list()
        pricing = client.pricing.retrieve()

        self.assertEqual(server_types[0].cores, 2)
        self.assertIsNone(server_types.pagination)
        self.assertEqual(pricing.currency, "EUR")
        self.assertFalse(hasattr(client.server_types, "create"))


if __name__ == "__main__":  # pragma: no cover - convenience
    unittest.main()
