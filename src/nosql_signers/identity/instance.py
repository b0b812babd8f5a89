# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from dataclasses import dataclass
from typing import Protocol

from ..exceptions import CredentialsError
from ..interfaces.identity import CredentialProfile, SigningCredentials

SECURITY_TOKEN_KEY_ID_PREFIX = "ST$"


@dataclass(frozen=True, kw_only=True)
class SessionCredentials:
    """A security token and the ephemeral key pair it was issued for."""

    security_token: str
    private_key: bytes
    """PEM encoded session private key."""

    passphrase: bytes | None = None


class SessionTokenSupplier(Protocol):
    """Exchanges the instance certificate for session credentials.

    Implementations talk to the IAM federation endpoint and are expected to cache the
    session until the token is close to expiring. Any exception they raise is
    reported as a :py:class:`CredentialsError`.
    """

    def get_session(self) -> SessionCredentials:
        """Return current session credentials, refreshing them if needed."""
        ...


class InstancePrincipalProfile(CredentialProfile):
    """Signing identity of the compute instance the process runs on.

    The session key pair rotates whenever the security token is refreshed, so the
    key is fetched from the supplier on every signing operation. Instance principals
    have no tenancy to fall back on; every request must name its compartment.
    """

    rotates_keys = True

    def __init__(self, supplier: SessionTokenSupplier, *, region: str | None = None):
        self._supplier = supplier
        self._region = region

    def session(self) -> SessionCredentials:
        """Fetch the current session credentials from the supplier.

        :raises CredentialsError: If the supplier fails or returns no security token.
        """
        try:
            session = self._supplier.get_session()
        except CredentialsError:
            raise
        except Exception as e:
            raise CredentialsError(
                f"Unable to get instance principal session: {e}"
            ) from e
        if not session.security_token:
            raise CredentialsError("Instance principal session has no security token.")
        return session

    def credentials(self) -> SigningCredentials:
        session = self.session()
        return SigningCredentials(
            key_id=f"{SECURITY_TOKEN_KEY_ID_PREFIX}{session.security_token}",
            private_key=session.private_key,
            passphrase=session.passphrase,
        )

    def key_id(self) -> str:
        return f"{SECURITY_TOKEN_KEY_ID_PREFIX}{self.session().security_token}"

    def private_key(self) -> bytes:
        return self.session().private_key

    def passphrase(self) -> bytes | None:
        return self.session().passphrase

    def region(self) -> str | None:
        return self._region
