"""Endpoint specifier resolution with wildcard defaulting."""

from __future__ import annotations

from kitectl.core.model import WILDCARD, Endpoint

_FIELDS = ("domain", "type", "host", "address", "id")
_DELIMITER = "."


def _field_value(token: str) -> str:
    token = token.strip()
    return token if token else WILDCARD


def resolve_endpoint(specifier: str | None) -> Endpoint:
    """Expand ``domain.type.host.address.id`` into an Endpoint.

    Missing or empty fields become ``*``; fields beyond the fifth are ignored.
    Resolution never fails.
    """
    tokens = (specifier or "").split(_DELIMITER)[: len(_FIELDS)]
    values = {name: WILDCARD for name in _FIELDS}
    for name, token in zip(_FIELDS, tokens):
        values[name] = _field_value(token)
    return Endpoint(**values)


def resolve_destination(specifier: str | None, sender: Endpoint) -> Endpoint:
    """Resolve ``specifier`` as a message receiver on behalf of ``sender``.

    Cross-domain wildcards are not allowed, so a wildcard domain is pinned to
    the sender's own domain.
    """
    endpoint = resolve_endpoint(specifier)
    if endpoint.domain == WILDCARD:
        endpoint = Endpoint(
            domain=sender.domain,
            type=endpoint.type,
            host=endpoint.host,
            address=endpoint.address,
            id=endpoint.id,
        )
    return endpoint
