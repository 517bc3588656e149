"""Typed views of OpenStack compute server records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

IP_TYPE_KEY = "OS-EXT-IPS:type"
MAC_ADDR_KEY = "OS-EXT-IPS-MAC:mac_addr"


@dataclass(frozen=True)
class AddressDescriptor:
    """One entry of a server's per-network address list.

    Any field the API returned with a missing or unexpected type is None.
    """

    addr: str | None = None
    ip_type: str | None = None  # "fixed" or "floating"
    version: int | None = None
    mac_addr: str | None = None

    @classmethod
    def from_raw(cls, raw: Any) -> AddressDescriptor:
        if not isinstance(raw, Mapping):
            return cls()
        version = raw.get("version")
        return cls(
            addr=_str_or_none(raw.get("addr")),
            ip_type=_str_or_none(raw.get(IP_TYPE_KEY)),
            version=version if isinstance(version, int) and not isinstance(version, bool) else None,
            mac_addr=_str_or_none(raw.get(MAC_ADDR_KEY)),
        )


@dataclass(frozen=True)
class ServerRecord:
    """A compute server as seen by the provider. Fetched fresh per query."""

    id: str
    name: str
    status: str = ""
    addresses: dict[str, list[AddressDescriptor]] = field(default_factory=dict)
    access_ipv4: str = ""
    access_ipv6: str = ""

    @classmethod
    def from_resource(cls, server: Any) -> ServerRecord:
        """Build a record from an openstacksdk Server resource or a raw API dict."""
        # SDK resources are dict subclasses too; prefer their attributes
        if isinstance(server, Mapping) and not hasattr(server, "addresses"):
            get = server.get
            access_ipv4 = get("accessIPv4", get("access_ipv4"))
            access_ipv6 = get("accessIPv6", get("access_ipv6"))
        else:
            def get(key, default=None):
                return getattr(server, key, default)
            access_ipv4 = get("access_ipv4")
            access_ipv6 = get("access_ipv6")

        return cls(
            id=get("id") or "",
            name=get("name") or "",
            status=get("status") or "",
            addresses=parse_addresses(get("addresses")),
            access_ipv4=_str_or_none(access_ipv4) or "",
            access_ipv6=_str_or_none(access_ipv6) or "",
        )


def parse_addresses(blob: Any) -> dict[str, list[AddressDescriptor]]:
    """Parse the weakly-typed address blob (network name -> list of entries).

    Networks whose value is not a list are dropped; malformed entries become
    empty descriptors so list positions are preserved.
    """
    if not isinstance(blob, Mapping):
        return {}

    networks: dict[str, list[AddressDescriptor]] = {}
    for network, entries in blob.items():
        if not isinstance(entries, list):
            continue
        networks[str(network)] = [AddressDescriptor.from_raw(e) for e in entries]
    return networks


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None
