"""Instance locator: ACTIVE server lookups over the paginated compute API."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Iterable

from ..exceptions import MultipleResults, NotFound
from .addresses import FIXED, find_addrs, select_address
from .models import ServerRecord

logger = logging.getLogger(__name__)

ACTIVE = "ACTIVE"


def _list_active(compute: Any, name_filter: str | None = None) -> Iterable[ServerRecord]:
    """Yield ACTIVE servers, fetching pages from the SDK only as they are consumed."""
    query: dict[str, Any] = {"status": ACTIVE}
    if name_filter:
        query["name"] = name_filter
    for server in compute.servers(details=True, **query):
        yield ServerRecord.from_resource(server)


def _exactly_one(servers: Iterable[ServerRecord], matches: Callable[[ServerRecord], bool]) -> ServerRecord:
    """Return the single matching server.

    Stops consuming `servers` as soon as a second match is seen, so no
    further pages are requested once the result is known to be ambiguous.
    """
    found: ServerRecord | None = None
    for server in servers:
        if not matches(server):
            continue
        if found is not None:
            raise MultipleResults()
        found = server
    if found is None:
        raise NotFound()
    return found


def find_instances(compute: Any, name_filter: str) -> list[str]:
    """Names of all ACTIVE servers matching the filter. No uniqueness requirement."""
    ret = [server.name for server in _list_active(compute, name_filter)]
    logger.debug(
        "Found %d instances matching %s: %s", len(ret), name_filter, ret,
        extra={"name_filter": name_filter, "matches": len(ret)},
    )
    return ret


def get_server_by_name(compute: Any, name: str) -> ServerRecord:
    """The one ACTIVE server named exactly `name`.

    The compute API treats the name filter as a regular expression matched
    anywhere in the name, so the name is escaped and anchored.
    """
    name_filter = f"^{re.escape(name)}$"
    return _exactly_one(_list_active(compute, name_filter), lambda server: True)


def get_server_by_address(compute: Any, ip: str) -> ServerRecord:
    """The one ACTIVE server whose first fixed address is `ip`.

    Servers without a fixed address never match.
    """

    def _matches(server: ServerRecord) -> bool:
        fixed = find_addrs(server.addresses, FIXED)
        return bool(fixed) and fixed[0] == ip

    return _exactly_one(_list_active(compute), _matches)


def get_address_by_name(compute: Any, name: str) -> str:
    """Resolve one address for the ACTIVE server named exactly `name`."""
    return select_address(get_server_by_name(compute, name))
