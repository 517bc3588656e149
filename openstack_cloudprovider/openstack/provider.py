"""OpenStack implementation of the host cloud-provider contract."""

from __future__ import annotations

import logging
from typing import TextIO

from ..cloudprovider.models import NodeAddress, Zone
from ..config import Config, LoadBalancerOpts, RouteOpts, read_config, validate_config
from ..exceptions import CloudProviderError, Unimplemented
from .addresses import node_addresses_for
from .client import ProviderHandle, new_provider_handle
from .metadata import read_instance_id
from .servers import find_instances, get_address_by_name, get_server_by_address, get_server_by_name

logger = logging.getLogger(__name__)

PROVIDER_NAME = "openstack"


class OpenStack:
    """Cloud provider backed by the OpenStack compute API.

    Supports zones and instances; clusters are not supported. Every call goes
    straight to the API: nothing is cached and nothing is retried.

    The object holds no mutable per-call state, so it may be shared between
    threads as far as the underlying openstacksdk/requests session is
    reentrant.
    """

    def __init__(self, handle: ProviderHandle, config: Config, local_instance_id: str = ""):
        self._handle = handle
        self._compute = handle.compute
        self._region = config.global_opts.region
        self._lb_opts = config.load_balancer
        self._route_opts = config.route
        self._local_instance_id = local_instance_id

    @property
    def region(self) -> str:
        return self._region

    @property
    def local_instance_id(self) -> str:
        """Instance ID of the server this provider was created on, or "" if unknown."""
        return self._local_instance_id

    @property
    def load_balancer_opts(self) -> LoadBalancerOpts:
        return self._lb_opts

    @property
    def route_opts(self) -> RouteOpts:
        return self._route_opts

    # ── Capabilities ────────────────────────────────────────────────

    def provider_name(self) -> str:
        return PROVIDER_NAME

    def zones(self) -> tuple[OpenStack, bool]:
        logger.info("Claiming to support Zones")
        return self, True

    def instances(self) -> tuple[OpenStack, bool]:
        logger.info("Claiming to support Instances")
        return self, True

    def clusters(self) -> tuple[None, bool]:
        return None, False

    def scrub_dns(self, nameservers: list[str], searches: list[str]) -> tuple[list[str], list[str]]:
        return nameservers, searches

    # ── Zones ───────────────────────────────────────────────────────

    def get_zone(self) -> Zone:
        logger.info("Current zone is %s", self._region, extra={"region": self._region})
        return Zone(region=self._region)

    # ── Instances ───────────────────────────────────────────────────

    def list(self, name_filter: str) -> list[str]:
        logger.debug("List(%s) called", name_filter, extra={"name_filter": name_filter})
        return find_instances(self._compute, name_filter)

    def node_addresses(self, name: str) -> list[NodeAddress]:
        logger.debug("NodeAddresses(%s) called", name, extra={"server": name})
        addrs = node_addresses_for(get_server_by_name(self._compute, name))
        logger.debug("NodeAddresses(%s) => %s", name, addrs, extra={"server": name})
        return addrs

    def get_address(self, name: str) -> str:
        """Single preferred address of the named server."""
        return get_address_by_name(self._compute, name)

    def external_id(self, name: str) -> str:
        """Cloud provider ID of the named instance (deprecated in favour of instance_id)."""
        return get_server_by_name(self._compute, name).id

    def instance_id(self, name: str) -> str:
        """Cloud provider ID of the named instance, in the form "/<id>"."""
        return "/" + get_server_by_name(self._compute, name).id

    def instance_name_by_address(self, ip: str) -> str:
        """Name of the one ACTIVE server whose fixed address is `ip`."""
        return get_server_by_address(self._compute, ip).name

    def current_node_name(self, hostname: str) -> str:
        return hostname

    def add_ssh_key_to_all_instances(self, user: str, key_data: bytes) -> None:
        raise Unimplemented()


def new_openstack(config: Config) -> OpenStack:
    """Build a provider from parsed configuration.

    Failing to determine the local instance ID is not fatal: the provider is
    still usable for every lookup that does not need it.
    """
    handle = new_provider_handle(config)

    try:
        local_id = read_instance_id()
    except CloudProviderError as exc:
        logger.info("Not running on an OpenStack instance: %s", exc)
        local_id = ""

    return OpenStack(handle, config, local_instance_id=local_id)


def create_provider(config_stream: TextIO | None) -> OpenStack:
    """Factory for a host provider registry: read, validate, then construct."""
    config = read_config(config_stream)
    validate_config(config)
    return new_openstack(config)
