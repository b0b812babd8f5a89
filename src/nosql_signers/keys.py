# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import logging
import threading
from typing import Final

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from cryptography.hazmat.primitives.serialization import load_pem_private_key

from .exceptions import SigningError

logger: Final = logging.getLogger(__name__)


def load_private_key(private_key: bytes, passphrase: bytes | None = None) -> RSAPrivateKey:
    """Parse a PEM encoded RSA private key.

    :param private_key: PKCS#1 or PKCS#8 PEM bytes, optionally encrypted.
    :param passphrase: Passphrase of an encrypted key.
    :raises SigningError: If the key can't be parsed or isn't an RSA key.
    """
    try:
        key = load_pem_private_key(private_key, password=passphrase or None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise SigningError(f"Unable to load private key: {e}") from e
    if not isinstance(key, RSAPrivateKey):
        raise SigningError(
            f"Expected an RSA private key but received {type(key).__name__}."
        )
    return key


class PrivateKeyProvider:
    """Holds the RSA key used for request signing.

    The key can be swapped in place with :py:meth:`reload` while other threads are
    reading it; readers observe either the previous or the new key, never a partially
    loaded one.
    """

    def __init__(self, private_key: bytes, passphrase: bytes | None = None) -> None:
        self._lock = threading.Lock()
        self._key = load_private_key(private_key, passphrase)

    @property
    def key(self) -> RSAPrivateKey:
        with self._lock:
            return self._key

    def reload(self, private_key: bytes, passphrase: bytes | None = None) -> None:
        """Replace the held key with one parsed from ``private_key``.

        The previous key is kept if parsing fails.
        """
        key = load_private_key(private_key, passphrase)
        with self._lock:
            self._key = key
        logger.debug("Reloaded request signing key.")
