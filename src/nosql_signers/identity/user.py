# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import threading
from pathlib import Path

from ..exceptions import ConfigurationError, CredentialsError
from ..interfaces.identity import TenantProfile


def _to_bytes(value: str | bytes | None) -> bytes | None:
    if value is None or isinstance(value, bytes):
        return value
    return value.encode("utf-8")


class UserProfile(TenantProfile):
    """Signing identity of a specific user, identified by tenancy, user, and key
    fingerprint.

    The private key is given either directly as PEM text or as the path of a PEM
    file. A key file is read once, on first use.
    """

    rotates_keys = False

    def __init__(
        self,
        *,
        tenant_id: str,
        user_id: str,
        fingerprint: str,
        private_key: str | bytes | None = None,
        private_key_file: str | Path | None = None,
        passphrase: str | bytes | None = None,
        region: str | None = None,
    ):
        for name, value in (
            ("tenant_id", tenant_id),
            ("user_id", user_id),
            ("fingerprint", fingerprint),
        ):
            if not value:
                raise ConfigurationError(f"{name} is required for a user profile.")
        if (private_key is None) == (private_key_file is None):
            raise ConfigurationError(
                "Exactly one of private_key or private_key_file must be provided."
            )

        self._tenant_id = tenant_id
        self._user_id = user_id
        self._fingerprint = fingerprint
        self._private_key = _to_bytes(private_key)
        self._private_key_file = (
            Path(private_key_file).expanduser() if private_key_file is not None else None
        )
        self._passphrase = _to_bytes(passphrase)
        self._region = region
        self._load_lock = threading.Lock()

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def fingerprint(self) -> str:
        return self._fingerprint

    def key_id(self) -> str:
        return f"{self._tenant_id}/{self._user_id}/{self._fingerprint}"

    def tenant_id(self) -> str:
        return self._tenant_id

    def private_key(self) -> bytes:
        with self._load_lock:
            if self._private_key is None:
                assert self._private_key_file is not None  # noqa: S101
                try:
                    self._private_key = self._private_key_file.read_bytes()
                except OSError as e:
                    raise CredentialsError(
                        f"Unable to read private key file {self._private_key_file}: {e}"
                    ) from e
            return self._private_key

    def passphrase(self) -> bytes | None:
        return self._passphrase

    def region(self) -> str | None:
        return self._region

    def __repr__(self) -> str:
        return (
            f"UserProfile(tenant_id={self._tenant_id!r}, user_id={self._user_id!r}, "
            f"fingerprint={self._fingerprint!r}, region={self._region!r})"
        )
