# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

import jwt

from ..exceptions import CredentialsError
from ..interfaces.identity import ClaimsProfile
from .instance import SECURITY_TOKEN_KEY_ID_PREFIX

logger: Final = logging.getLogger(__name__)

RP_VERSION_ENV_VAR: Final = "OCI_RESOURCE_PRINCIPAL_VERSION"
RP_RPST_ENV_VAR: Final = "OCI_RESOURCE_PRINCIPAL_RPST"
RP_PRIVATE_PEM_ENV_VAR: Final = "OCI_RESOURCE_PRINCIPAL_PRIVATE_PEM"
RP_PRIVATE_PEM_PASSPHRASE_ENV_VAR: Final = "OCI_RESOURCE_PRINCIPAL_PRIVATE_PEM_PASSPHRASE"
RP_REGION_ENV_VAR: Final = "OCI_RESOURCE_PRINCIPAL_REGION"

SUPPORTED_VERSION: Final = "2.2"

COMPARTMENT_ID_CLAIM_KEY: Final = "res_compartment"
"""Claim holding the OCID of the resource's compartment."""

TENANT_ID_CLAIM_KEY: Final = "res_tenant"
"""Claim holding the OCID of the resource's tenancy."""


class _Source:
    """A value given either inline or as the absolute path of a file holding it.

    File backed values are re-read on every access so rotated files are picked up.
    """

    def __init__(self, name: str, value: str):
        self.name = name
        self._value = value
        self._path = Path(value) if os.path.isabs(value) else None

    def read(self) -> bytes:
        if self._path is None:
            return self._value.encode("utf-8")
        try:
            return self._path.read_bytes()
        except OSError as e:
            raise CredentialsError(f"Unable to read {self.name} from {self._path}: {e}") from e


class ResourcePrincipalProfile(ClaimsProfile):
    """Signing identity of an OCI resource, such as a function, using its resource
    principal session token (RPST).

    Use :py:meth:`from_environment` to build one from the variables the runtime
    injects. The token is a JWT whose claims describe the resource; they can be
    read with :py:meth:`get_claim`.
    """

    rotates_keys = True

    def __init__(
        self,
        *,
        session_token: str,
        private_key: str,
        passphrase: str | None = None,
        region: str | None = None,
    ):
        """Construct a ResourcePrincipalProfile.

        :param session_token: The RPST, or the absolute path of a file holding it.
        :param private_key: PEM private key, or the absolute path of a file holding
            it.
        :param passphrase: Key passphrase, or the absolute path of a file holding it.
        :param region: The region the resource runs in.
        """
        self._token = _Source(RP_RPST_ENV_VAR, session_token)
        self._private_key = _Source(RP_PRIVATE_PEM_ENV_VAR, private_key)
        self._passphrase = (
            _Source(RP_PRIVATE_PEM_PASSPHRASE_ENV_VAR, passphrase)
            if passphrase is not None
            else None
        )
        self._region = region

    @classmethod
    def from_environment(
        cls, env: Mapping[str, str] | None = None
    ) -> "ResourcePrincipalProfile":
        """Build a profile from ``OCI_RESOURCE_PRINCIPAL_*`` environment variables.

        :raises CredentialsError: If the version is unsupported or a required
            variable is missing.
        """
        if env is None:
            env = os.environ
        version = env.get(RP_VERSION_ENV_VAR)
        if version != SUPPORTED_VERSION:
            raise CredentialsError(
                f"Unsupported resource principal version {version!r}, "
                f"supported versions: {SUPPORTED_VERSION}"
            )
        session_token = env.get(RP_RPST_ENV_VAR)
        private_key = env.get(RP_PRIVATE_PEM_ENV_VAR)
        if not session_token or not private_key:
            raise CredentialsError(
                f"{RP_RPST_ENV_VAR} and {RP_PRIVATE_PEM_ENV_VAR} are required"
            )
        logger.debug("Loaded resource principal from environment.")
        return cls(
            session_token=session_token,
            private_key=private_key,
            passphrase=env.get(RP_PRIVATE_PEM_PASSPHRASE_ENV_VAR),
            region=env.get(RP_REGION_ENV_VAR),
        )

    def security_token(self) -> str:
        return self._token.read().decode("utf-8").strip()

    def key_id(self) -> str:
        return f"{SECURITY_TOKEN_KEY_ID_PREFIX}{self.security_token()}"

    def private_key(self) -> bytes:
        return self._private_key.read()

    def passphrase(self) -> bytes | None:
        if self._passphrase is None:
            return None
        return self._passphrase.read().strip()

    def region(self) -> str | None:
        return self._region

    def claims(self) -> dict[str, Any]:
        """Decode the claims of the session token.

        The token is not verified here; it is verified by the service it is sent to.
        """
        try:
            return jwt.decode(
                self.security_token(), options={"verify_signature": False}
            )
        except jwt.InvalidTokenError as e:
            raise CredentialsError(f"Unable to decode resource principal token: {e}") from e

    def get_claim(self, name: str) -> str | None:
        value = self.claims().get(name)
        return None if value is None else str(value)
