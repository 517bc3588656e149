"""Cloud provider contract consumed by the host orchestrator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .models import NodeAddress, Zone


@runtime_checkable
class Instances(Protocol):
    """Instance lookups by node name."""

    def list(self, name_filter: str) -> list[str]:
        """Return the names of running instances matching the filter."""
        ...

    def node_addresses(self, name: str) -> list[NodeAddress]:
        ...

    def external_id(self, name: str) -> str:
        ...

    def instance_id(self, name: str) -> str:
        ...

    def current_node_name(self, hostname: str) -> str:
        ...

    def add_ssh_key_to_all_instances(self, user: str, key_data: bytes) -> None:
        ...


@runtime_checkable
class Zones(Protocol):
    def get_zone(self) -> Zone:
        """Return the zone of the node this process runs on."""
        ...


@runtime_checkable
class Clusters(Protocol):
    def list_clusters(self) -> list[str]:
        ...

    def master(self, cluster_name: str) -> str:
        ...


@runtime_checkable
class Interface(Protocol):
    """Protocol that every cloud provider must satisfy.

    Each capability accessor returns the capability (or None) and whether it is
    supported.
    """

    def provider_name(self) -> str:
        ...

    def instances(self) -> tuple[Instances | None, bool]:
        ...

    def zones(self) -> tuple[Zones | None, bool]:
        ...

    def clusters(self) -> tuple[Clusters | None, bool]:
        ...

    def scrub_dns(self, nameservers: list[str], searches: list[str]) -> tuple[list[str], list[str]]:
        ...
