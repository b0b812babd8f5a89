# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import configparser
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Final

from ..exceptions import CredentialsError
from .user import UserProfile

logger: Final = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE: Final = "~/.oci/config"
DEFAULT_PROFILE: Final = "DEFAULT"

CONFIG_FILE_ENV_VAR: Final = "OCI_CONFIG_FILE"
PROFILE_ENV_VAR: Final = "OCI_CONFIG_PROFILE"

_REQUIRED_KEYS: Final = ("tenancy", "user", "fingerprint", "key_file")


def load_config_file_profile(
    config_file: str | Path | None = None,
    profile_name: str | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> UserProfile:
    """Load a user profile from an OCI SDK configuration file.

    The file is INI formatted. Named profiles inherit any value they don't set from
    the ``DEFAULT`` profile::

        [DEFAULT]
        tenancy=ocid1.tenancy.oc1..example
        user=ocid1.user.oc1..example
        fingerprint=aa:bb:cc
        key_file=~/.oci/oci_api_key.pem
        pass_phrase=secret
        region=us-phoenix-1

    :param config_file: Path of the file. Defaults to ``$OCI_CONFIG_FILE`` or
        ``~/.oci/config``.
    :param profile_name: Profile to load. Defaults to ``$OCI_CONFIG_PROFILE`` or
        ``DEFAULT``.
    :param env: Environment to resolve defaults from, ``os.environ`` if not given.
    :raises CredentialsError: If the file, profile, or a required key is missing.
    """
    if env is None:
        env = os.environ
    if config_file is None:
        config_file = env.get(CONFIG_FILE_ENV_VAR, DEFAULT_CONFIG_FILE)
    if profile_name is None:
        profile_name = env.get(PROFILE_ENV_VAR, DEFAULT_PROFILE)

    path = Path(config_file).expanduser()
    parser = configparser.ConfigParser(interpolation=None)
    try:
        with path.open(encoding="utf-8") as f:
            parser.read_file(f)
    except OSError as e:
        raise CredentialsError(f"Unable to read config file {path}: {e}") from e
    except configparser.Error as e:
        raise CredentialsError(f"Malformed config file {path}: {e}") from e

    if profile_name == DEFAULT_PROFILE:
        section = parser.defaults()
    elif parser.has_section(profile_name):
        section = parser[profile_name]
    else:
        raise CredentialsError(f"Profile {profile_name!r} not found in {path}.")

    missing = [key for key in _REQUIRED_KEYS if not section.get(key)]
    if missing:
        raise CredentialsError(
            f"Profile {profile_name!r} in {path} is missing required keys: "
            f"{', '.join(missing)}."
        )

    logger.debug("Loaded profile %s from %s.", profile_name, path)
    key_file = Path(section["key_file"]).expanduser()
    if not key_file.is_absolute():
        key_file = path.parent / key_file
    return UserProfile(
        tenant_id=section["tenancy"],
        user_id=section["user"],
        fingerprint=section["fingerprint"],
        private_key_file=key_file,
        passphrase=section.get("pass_phrase") or None,
        region=section.get("region") or None,
    )
