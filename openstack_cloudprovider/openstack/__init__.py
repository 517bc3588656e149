"""OpenStack cloud provider."""

from __future__ import annotations

from .provider import PROVIDER_NAME, OpenStack, create_provider, new_openstack

__all__ = ["PROVIDER_NAME", "OpenStack", "create_provider", "new_openstack"]
