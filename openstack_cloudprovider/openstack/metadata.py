"""Discovery of the instance ID of the server this process runs on."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import requests

from ..exceptions import AttributeNotFound, MetadataError

logger = logging.getLogger(__name__)

# Written by cloud-init
INSTANCE_ID_FILE = "/var/lib/cloud/data/instance-id"
METADATA_URL = "http://169.254.169.254/openstack/2012-08-10/meta_data.json"
METADATA_TIMEOUT = 5


def read_instance_id(
    path: str | Path | None = None,
    url: str | None = None,
    session: requests.Session | None = None,
    timeout: float = METADATA_TIMEOUT,
) -> str:
    """Return the local instance ID.

    The cloud-init marker file is preferred; the metadata service is only
    queried when the file is missing or empty.
    """
    path = Path(path or INSTANCE_ID_FILE)
    url = url or METADATA_URL
    try:
        instance_id = path.read_text().strip()
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Cannot read %s: %s, trying metadata server", path, exc)
    else:
        logger.debug("Got instance id from %s: %s", path, instance_id, extra={"instance_id": instance_id})
        if instance_id:
            return instance_id
        logger.debug("%s is empty, trying metadata server", path)

    http = session or requests
    try:
        resp = http.get(url, timeout=timeout)
    except requests.RequestException as exc:
        logger.debug("Cannot read %s: %s", url, exc)
        raise MetadataError(f"Request to {url} failed: {exc}") from exc

    if resp.status_code != 200:
        logger.debug("Unexpected status code %d from %s", resp.status_code, url)
        raise MetadataError(
            f"got unexpected status code when reading metadata from {url}: {resp.status_code}",
            status_code=resp.status_code,
        )

    instance_id = parse_metadata_uuid(resp.content)
    logger.debug("Got instance id from %s: %s", url, instance_id, extra={"instance_id": instance_id})
    return instance_id


def parse_metadata_uuid(body: bytes | str) -> str:
    """Extract the instance ID from the metadata service's JSON document.

    The document is an object with a "uuid" property and other properties
    which are ignored.
    """
    try:
        obj = json.loads(body)
    except ValueError as exc:
        raise MetadataError(f"cannot parse OpenStack metadata: {exc}") from exc

    if not isinstance(obj, dict):
        raise AttributeNotFound("cannot parse OpenStack metadata, expected a JSON object")

    uuid = obj.get("uuid")
    if not isinstance(uuid, str) or not uuid:
        raise AttributeNotFound("cannot parse OpenStack metadata, got empty uuid")
    return uuid
