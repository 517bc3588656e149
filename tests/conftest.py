"""Shared fixtures: an in-memory paginated compute proxy."""

from __future__ import annotations

import re
from typing import Any

import pytest


def make_server(
    name: str,
    server_id: str | None = None,
    status: str = "ACTIVE",
    addresses: Any = None,
    access_ipv4: str = "",
    access_ipv6: str = "",
) -> dict:
    """Build a server dict as returned by GET /servers/detail."""
    return {
        "id": server_id or f"id-{name}",
        "name": name,
        "status": status,
        "addresses": addresses if addresses is not None else {},
        "accessIPv4": access_ipv4,
        "accessIPv6": access_ipv6,
    }


def fixed(addr: str) -> dict:
    return {"addr": addr, "version": 4, "OS-EXT-IPS:type": "fixed"}


def floating(addr: str) -> dict:
    return {"addr": addr, "version": 4, "OS-EXT-IPS:type": "floating"}


class FakeCompute:
    """Mimics the openstacksdk compute proxy's lazily paginated servers() generator.

    The name filter is applied as an unanchored regular expression, the way
    Nova does.
    """

    def __init__(self, servers: list[dict], page_size: int = 2):
        self._servers = servers
        self._page_size = page_size
        self.pages_fetched = 0
        self.queries: list[dict] = []

    def servers(self, details: bool = True, **query):
        self.queries.append(query)
        matching = [s for s in self._servers if self._matches(s, query)]
        for start in range(0, len(matching), self._page_size):
            self.pages_fetched += 1
            yield from matching[start:start + self._page_size]

    @staticmethod
    def _matches(server: dict, query: dict) -> bool:
        if "status" in query and server["status"] != query["status"]:
            return False
        if "name" in query and not re.search(query["name"], server["name"]):
            return False
        return True


@pytest.fixture
def compute_factory():
    return FakeCompute
