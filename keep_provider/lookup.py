"""Resolve an external identifier to the remote object it names."""

import logging
from typing import Any

from keep_provider.client import KeepClient
from keep_provider.decoding import UnexpectedShape, as_id
from keep_provider.errors import DecodeError, NotFoundError, TransportError

logger = logging.getLogger(__name__)


def ids_match(value: Any, identifier: str) -> bool:
    """Compare a wire id with a local one as strings."""
    try:
        return as_id(value) == identifier
    except UnexpectedShape:
        return False


def _unwrap(body: Any, key: str | None) -> Any:
    if key and isinstance(body, dict) and isinstance(body.get(key), (dict, list)):
        return body[key]
    return body


def scan(items: Any, identifier: str, id_field: str = "id") -> dict[str, Any] | None:
    """Linear scan of a list response for the item whose id matches."""
    if not isinstance(items, list):
        return None
    for item in items:
        if not isinstance(item, dict):
            continue
        if id_field not in item:
            logger.warning(f"Skipping list item without '{id_field}': {item}")
            continue
        if ids_match(item[id_field], identifier):
            return item
    return None


def find_remote(
    client: KeepClient,
    identifier: str,
    list_path: str,
    direct_path: str | None = None,
    direct_key: str | None = None,
    list_key: str | None = None,
    kind: str = "object",
    log: logging.Logger | None = None,
) -> dict[str, Any]:
    """Fetch one object, falling back from a direct lookup to a list scan.

    Args:
        client: The shared Keep client
        identifier: Id to look for, compared as a string
        list_path: Endpoint returning every object of the kind
        direct_path: Optional endpoint returning the object itself
        direct_key: Envelope key of the direct response, e.g. "provider"
        list_key: Envelope key of the list response, e.g. "providers"
        kind: Object kind used in messages

    Raises NotFoundError when neither path yields the object.
    """
    log = log or logger

    if direct_path:
        try:
            body = _unwrap(client.get(direct_path), direct_key)
            if isinstance(body, dict) and body:
                log.debug(f"Found {kind} {identifier} by direct lookup")
                return body
            log.debug(f"Direct lookup of {kind} {identifier} returned no object")
        except (TransportError, DecodeError) as e:
            log.debug(f"Direct lookup of {kind} {identifier} failed, falling back to list: {e}")

    items = _unwrap(client.get(list_path), list_key)
    if not isinstance(items, list):
        raise DecodeError(f"expected a list of {kind}s from {list_path}", body=str(items))

    log.debug(f"Searching {len(items)} {kind}(s) for ID {identifier}")
    found = scan(items, identifier)
    if found is None:
        raise NotFoundError(kind, identifier)
    return found
