"""Authenticated OpenStack session and per-service endpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import openstack.connection
import openstack.exceptions
from keystoneauth1 import exceptions as ks_exceptions

from ..config import Config
from ..exceptions import EndpointResolutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderHandle:
    """Authenticated connection plus region-scoped compute and network proxies.

    Created once and shared read-only. Token renewal happens inside the
    keystoneauth session.
    """

    connection: openstack.connection.Connection
    compute: Any
    network: Any
    compute_endpoint: str
    network_endpoint: str
    region: str


def connect(config: Config) -> openstack.connection.Connection:
    """Open a connection that authenticates with the [Global] credentials.

    keystoneauth identity plugins reauthenticate on token expiry, which the
    provider relies on since it is long-lived.
    """
    return openstack.connection.Connection(
        region_name=config.global_opts.region or None,
        auth_type="password",
        auth=config.to_auth_options(),
    )


def resolve_endpoint(conn: openstack.connection.Connection, service: str, region: str) -> tuple[Any, str]:
    """Return the service proxy and its catalog endpoint, or raise EndpointResolutionError.

    The SDK builds proxies lazily, so a service missing from the catalog can
    fail on attribute access as well as on get_endpoint().
    """
    try:
        proxy = getattr(conn, service)
        endpoint = proxy.get_endpoint()
    except (
        ks_exceptions.EndpointNotFound,
        openstack.exceptions.EndpointNotFound,
        openstack.exceptions.ConfigException,
    ) as exc:
        logger.warning("Failed to find %s endpoint: %s", service, exc, extra={"region": region})
        raise EndpointResolutionError(service, region) from exc

    if not endpoint:
        logger.warning("Failed to find %s endpoint", service, extra={"region": region})
        raise EndpointResolutionError(service, region)
    return proxy, endpoint


def new_provider_handle(config: Config, conn: openstack.connection.Connection | None = None) -> ProviderHandle:
    """Authenticate and resolve the network and compute endpoints for the configured region."""
    region = config.global_opts.region
    conn = conn or connect(config)
    conn.authorize()

    network, network_endpoint = resolve_endpoint(conn, "network", region)
    compute, compute_endpoint = resolve_endpoint(conn, "compute", region)
    logger.debug(
        "Resolved endpoints compute=%s network=%s", compute_endpoint, network_endpoint,
        extra={"region": region},
    )

    return ProviderHandle(
        connection=conn,
        compute=compute,
        network=network,
        compute_endpoint=compute_endpoint,
        network_endpoint=network_endpoint,
        region=region,
    )
