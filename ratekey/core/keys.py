"""Rate limit bucket key derivation.

Maps the identity signals of an inbound request to the string key used to
bucket rate limit counters:

    rl:<category>:<identifier>

The identifier is taken from the ``Authorization`` header when it carries a
``Bearer`` credential, otherwise from the client network address, otherwise
the literal ``anonymous``. Nothing else on the request is consulted; in
particular a ``token`` attribute attached by other middleware is never read,
since its presence is under the caller's control and omitting it used to let
a single client escape its bucket.

Header-name casing is the transport's job: the lookup is a literal
``"authorization"``. Starlette ``Headers`` are case-insensitive, plain dicts
must use lower-case names.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping

KEY_NAMESPACE = "rl"
AUTHORIZATION_HEADER = "authorization"
BEARER_PREFIX = "Bearer "
ANONYMOUS_IDENTIFIER = "anonymous"


class IdentifierSource(str, Enum):
    """Which request signal produced the bucket identifier."""

    BEARER = "bearer"
    ADDRESS = "address"
    ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class RequestView:
    """Read-only view of the request fields key derivation may use.

    Attributes:
        headers: Mapping of header names to values.
        network_address: Originating client address, if known.
    """

    headers: Mapping[str, str]
    network_address: str | None = None


def _bearer_credential(headers: Mapping[str, str]) -> str | None:
    """Return the raw credential after ``Bearer `` or None when absent."""
    auth_header = headers.get(AUTHORIZATION_HEADER)
    if auth_header and auth_header.startswith(BEARER_PREFIX):
        return auth_header[len(BEARER_PREFIX):]
    return None


def identifier_source(headers: Mapping[str, str], network_address: str | None) -> IdentifierSource:
    """Classify which branch :func:`extract_identifier` takes.

    Used for logging; never part of the key.
    """
    if _bearer_credential(headers) is not None:
        return IdentifierSource.BEARER
    if network_address:
        return IdentifierSource.ADDRESS
    return IdentifierSource.ANONYMOUS


def extract_identifier(headers: Mapping[str, str], network_address: str | None) -> str:
    """Pick the identity string for a request.

    Args:
        headers: Request header mapping.
        network_address: Client address, or None.

    Returns:
        The bearer credential verbatim (whitespace preserved), else the
        network address, else ``"anonymous"``.

    Examples:
        >>> extract_identifier({"authorization": "Bearer abc"}, "127.0.0.1")
        'abc'
        >>> extract_identifier({"authorization": "bearer abc"}, "127.0.0.1")
        '127.0.0.1'
        >>> extract_identifier({}, None)
        'anonymous'
    """
    credential = _bearer_credential(headers)
    if credential is not None:
        return credential
    return network_address or ANONYMOUS_IDENTIFIER


def derive_key(headers: Mapping[str, str], network_address: str | None, category: str) -> str:
    """Derive the rate limit bucket key for a request.

    Pure and total: no I/O, no state, never raises for missing or malformed
    header values. ``category`` is used as given; callers pick it from a
    closed set.

    Args:
        headers: Request header mapping.
        network_address: Client address, or None.
        category: Limit category label (e.g. ``"comments"``).

    Returns:
        Key of the form ``rl:<category>:<identifier>``.
    """
    identifier = extract_identifier(headers, network_address)
    return f"{KEY_NAMESPACE}:{category}:{identifier}"


def derive_request_key(view: RequestView, category: str) -> str:
    """Derive the bucket key from a :class:`RequestView`."""
    return derive_key(view.headers, view.network_address, category)
