# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, kw_only=True)
class SigningCredentials:
    """Key material read from a profile at one point in time."""

    key_id: str
    private_key: bytes
    passphrase: bytes | None = None


@runtime_checkable
class CredentialProfile(Protocol):
    """A source of signing identity: a key id and the private key bound to it."""

    rotates_keys: bool = False
    """Whether key material may change between calls.

    When set, the private key is reloaded from the profile before every signing
    operation.
    """

    def key_id(self) -> str:
        """The key id placed in the ``keyId`` field of the authorization header."""
        ...

    def private_key(self) -> bytes:
        """PEM encoded RSA private key."""
        ...

    def passphrase(self) -> bytes | None:
        """Passphrase of the private key, if it is encrypted."""
        ...

    def region(self) -> str | None:
        """The region the profile is bound to, if known."""
        ...

    def credentials(self) -> SigningCredentials:
        """Return the key id and the private key it names as one consistent set.

        Profiles whose key material rotates must read all of it from the same
        source state, so a signature is never computed with a key that doesn't
        match its key id.
        """
        return SigningCredentials(
            key_id=self.key_id(),
            private_key=self.private_key(),
            passphrase=self.passphrase(),
        )


@runtime_checkable
class TenantProfile(CredentialProfile, Protocol):
    """A profile that belongs to a user in a known tenancy."""

    def tenant_id(self) -> str:
        """The tenancy id, used as the default compartment of a request."""
        ...


@runtime_checkable
class ClaimsProfile(CredentialProfile, Protocol):
    """A profile backed by a session token that carries claims."""

    def get_claim(self, name: str) -> str | None:
        """Return the value of the claim ``name`` from the session token."""
        ...
