"""Firewalls, TLS certificates and SSH keys."""

from __future__ import annotations

from typing import Any, List, Mapping, Sequence

from .models import Action, Certificate, Firewall, SSHKey
from .resources import Identifier, ResourceActionsClient, ResourceClient


class FirewallActionsClient(ResourceActionsClient):
    """Firewall commands; each may fan out into one action per affected resource."""

    def set_rules(self, firewall: Identifier, *, rules: Sequence[Mapping[str, Any]]) -> List[Action]:
        # An empty list is meaningful here: it removes every rule.
        return self._perform_many(firewall, "set_rules", {"rules": [dict(rule) for rule in rules]})

    def apply_to_resources(self, firewall: Identifier, *, apply_to: Sequence[Mapping[str, Any]]) -> List[Action]:
        return self._perform_many(firewall, "apply_to_resources", {"apply_to": [dict(item) for item in apply_to]})

    def remove_from_resources(self, firewall: Identifier, *, remove_from: Sequence[Mapping[str, Any]]) -> List[Action]:
        return self._perform_many(
            firewall,
            "remove_from_resources",
            {"remove_from": [dict(item) for item in remove_from]},
        )


class FirewallsClient(ResourceClient[Firewall]):
    path = "/firewalls"
    collection_key = "firewalls"
    item_key = "firewall"
    model = Firewall
    actions_class = FirewallActionsClient
    async_create = True


class CertificateActionsClient(ResourceActionsClient):
    def retry(self, certificate: Identifier) -> Action:
        """Retry issuance or renewal of a managed certificate."""
        return self._perform(certificate, "retry")


class CertificatesClient(ResourceClient[Certificate]):
    path = "/certificates"
    collection_key = "certificates"
    item_key = "certificate"
    model = Certificate
    actions_class = CertificateActionsClient
    async_create = True


class SSHKeysClient(ResourceClient[SSHKey]):
    path = "/ssh_keys"
    collection_key = "ssh_keys"
    item_key = "ssh_key"
    model = SSHKey

    def get_by_fingerprint(self, fingerprint: str) -> SSHKey | None:
        collection = self.list(fingerprint=fingerprint)
        return collection.items[0] if collection.items else None

    def find_by_public_key(self, public_key: str) -> SSHKey | None:
        """Return the stored key whose public key matches, ignoring whitespace."""

        normalized = public_key.strip()
        for key in self.iter_all():
            stored = key.public_key
            if stored and stored.strip() == normalized:
                return key
        return None

