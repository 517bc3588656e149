"""Value types shared between the host orchestrator and cloud providers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class NodeAddressType(str, Enum):
    INTERNAL_IP = "InternalIP"
    EXTERNAL_IP = "ExternalIP"


@dataclass(frozen=True)
class NodeAddress:
    """One address a node is reachable at."""

    type: NodeAddressType
    address: str


@dataclass(frozen=True)
class Zone:
    """Locality of the node the provider runs on."""

    region: str
    failure_domain: str = ""


def add_to_node_addresses(addresses: list[NodeAddress], *candidates: NodeAddress) -> None:
    """Append candidates to addresses in order, skipping empty and duplicate entries.

    Two entries are duplicates when both type and address are equal.
    """
    seen = {(a.type, a.address) for a in addresses}
    for candidate in candidates:
        key = (candidate.type, candidate.address)
        if not candidate.address or key in seen:
            continue
        addresses.append(candidate)
        seen.add(key)
