# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from pathlib import Path

import pytest
from nosql_signers import ConfigurationError, CredentialsError
from nosql_signers.identity import UserProfile
from nosql_signers.interfaces.identity import (
    ClaimsProfile,
    CredentialProfile,
    TenantProfile,
)


def _profile(**kwargs) -> UserProfile:
    params = {
        "tenant_id": "ocid1.tenancy.acme",
        "user_id": "ocid1.user.acme.alice",
        "fingerprint": "aa:bb:cc:dd",
    }
    params.update(kwargs)
    return UserProfile(**params)


def test_user_profile(private_key_pem: bytes) -> None:
    profile = _profile(
        private_key=private_key_pem, passphrase="secret", region="us-phoenix-1"
    )
    assert profile.key_id() == "ocid1.tenancy.acme/ocid1.user.acme.alice/aa:bb:cc:dd"
    assert profile.tenant_id() == "ocid1.tenancy.acme"
    assert profile.user_id == "ocid1.user.acme.alice"
    assert profile.fingerprint == "aa:bb:cc:dd"
    assert profile.private_key() == private_key_pem
    assert profile.passphrase() == b"secret"
    assert profile.region() == "us-phoenix-1"
    assert profile.rotates_keys is False

    credentials = profile.credentials()
    assert credentials.key_id == profile.key_id()
    assert credentials.private_key == private_key_pem
    assert credentials.passphrase == b"secret"


def test_user_profile_capabilities(private_key_pem: bytes) -> None:
    profile = _profile(private_key=private_key_pem)
    assert isinstance(profile, CredentialProfile)
    assert isinstance(profile, TenantProfile)
    assert not isinstance(profile, ClaimsProfile)


def test_private_key_as_string(private_key_pem: bytes) -> None:
    profile = _profile(private_key=private_key_pem.decode())
    assert profile.private_key() == private_key_pem
    assert profile.passphrase() is None
    assert profile.region() is None


def test_private_key_file_read_once(tmp_path: Path, private_key_pem: bytes) -> None:
    key_file = tmp_path / "key.pem"
    key_file.write_bytes(private_key_pem)
    profile = _profile(private_key_file=str(key_file))

    assert profile.private_key() == private_key_pem
    key_file.write_bytes(b"rotated")
    assert profile.private_key() == private_key_pem


def test_missing_private_key_file(tmp_path: Path) -> None:
    profile = _profile(private_key_file=tmp_path / "missing.pem")
    with pytest.raises(CredentialsError, match="Unable to read private key file"):
        profile.private_key()


def test_private_key_required() -> None:
    with pytest.raises(ConfigurationError, match="Exactly one"):
        _profile()


def test_private_key_and_file_exclusive(private_key_pem: bytes) -> None:
    with pytest.raises(ConfigurationError, match="Exactly one"):
        _profile(private_key=private_key_pem, private_key_file="/tmp/key.pem")


@pytest.mark.parametrize("missing", ["tenant_id", "user_id", "fingerprint"])
def test_identifiers_required(private_key_pem: bytes, missing: str) -> None:
    with pytest.raises(ConfigurationError, match=missing):
        _profile(private_key=private_key_pem, **{missing: ""})


def test_repr_hides_key_material(private_key_pem: bytes) -> None:
    profile = _profile(private_key=private_key_pem, passphrase="secret")
    assert "PRIVATE KEY" not in repr(profile)
    assert "secret" not in repr(profile)
