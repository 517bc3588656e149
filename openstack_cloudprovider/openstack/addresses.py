"""Address extraction from server records and the address-selection policy."""

from __future__ import annotations

import logging
from typing import Mapping

from ..cloudprovider.models import NodeAddress, NodeAddressType, add_to_node_addresses
from ..exceptions import NoAddressFound
from .models import AddressDescriptor, ServerRecord

logger = logging.getLogger(__name__)

FIXED = "fixed"
FLOATING = "floating"


def find_addrs(addresses: Mapping[str, list[AddressDescriptor]], ip_type: str) -> list[str]:
    """Return the addresses of the given type across all networks.

    Only the first entry of each network is inspected; a server is expected to
    expose at most one address of each type per network. Networks with an
    incomplete first entry are skipped.
    """
    ret: list[str] = []
    for entries in addresses.values():
        if not entries:
            continue
        first = entries[0]
        if first.addr is None or first.ip_type is None:
            continue
        if first.ip_type == ip_type:
            ret.append(first.addr)
    return ret


def first_addr(addresses: Mapping[str, list[AddressDescriptor]], ip_type: str) -> str | None:
    found = find_addrs(addresses, ip_type)
    return found[0] if found else None


def select_address(server: ServerRecord) -> str:
    """Pick one address: fixed, then floating, then accessIPv4, then accessIPv6."""
    for candidate in (
        first_addr(server.addresses, FIXED),
        first_addr(server.addresses, FLOATING),
        server.access_ipv4,
        server.access_ipv6,
    ):
        if candidate:
            return candidate
    raise NoAddressFound()


def node_addresses_for(server: ServerRecord) -> list[NodeAddress]:
    """All known addresses of a server, internal first.

    Fixed addresses are InternalIP and floating addresses ExternalIP. The
    access IPs usually duplicate a public address and are only added when new.
    """
    addrs: list[NodeAddress] = []

    add_to_node_addresses(addrs, *(
        NodeAddress(NodeAddressType.INTERNAL_IP, a) for a in find_addrs(server.addresses, FIXED)
    ))
    add_to_node_addresses(addrs, *(
        NodeAddress(NodeAddressType.EXTERNAL_IP, a) for a in find_addrs(server.addresses, FLOATING)
    ))
    add_to_node_addresses(
        addrs,
        NodeAddress(NodeAddressType.EXTERNAL_IP, server.access_ipv6),
        NodeAddress(NodeAddressType.EXTERNAL_IP, server.access_ipv4),
    )

    logger.debug("Addresses of %s: %s", server.name, addrs, extra={"server": server.name})
    return addrs
