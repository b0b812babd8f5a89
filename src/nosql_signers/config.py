# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from dataclasses import dataclass
from urllib.parse import urlsplit

from .cache import DEFAULT_REFRESH_AHEAD, MAX_ENTRY_LIFETIME
from .exceptions import ConfigurationError


@dataclass(kw_only=True)
class AuthorizerConfig:
    """Configuration for a :py:class:`SignatureAuthorizer`."""

    signature_lifetime: float = MAX_ENTRY_LIFETIME
    """Seconds a signature may be reused, at most 300."""

    refresh_ahead: float = DEFAULT_REFRESH_AHEAD
    """Seconds before a signature expires at which it is replaced in the background.

    Background refresh is disabled when this isn't smaller than
    ``signature_lifetime``.
    """

    endpoint: str | None = None
    """Service endpoint, either a URL or a bare host name.

    The host may also be set later with
    :py:meth:`SignatureAuthorizer.set_service_host`.
    """


def resolve_service_host(endpoint: str) -> str:
    """Extract the host name from an endpoint URL or bare host.

    ``https://nosql.us-phoenix-1.oci.oraclecloud.com:443/V2`` and
    ``nosql.us-phoenix-1.oci.oraclecloud.com`` both resolve to
    ``nosql.us-phoenix-1.oci.oraclecloud.com``.
    """
    endpoint = endpoint.strip() if endpoint else ""
    if not endpoint:
        raise ConfigurationError("Service endpoint must not be empty.")
    if "://" not in endpoint:
        endpoint = f"https://{endpoint}"
    try:
        host = urlsplit(endpoint).hostname
    except ValueError as e:
        raise ConfigurationError(f"Invalid service endpoint {endpoint!r}: {e}") from e
    if not host:
        raise ConfigurationError(f"Unable to find a host in endpoint {endpoint!r}.")
    return host
