# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import base64
import datetime
from dataclasses import dataclass
from email.utils import format_datetime

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from .exceptions import SigningError
from .keys import PrivateKeyProvider

NOSQL_DATA_PATH: str = "V2/nosql/data"

REQUEST_TARGET: str = "(request-target)"
HOST: str = "host"
DATE: str = "date"
HEADER_DELIMITER: str = ": "

SIGNING_HEADERS: str = f"{REQUEST_TARGET} {HOST} {DATE}"
SIGNATURE_ALGORITHM: str = "rsa-sha256"
SIGNATURE_VERSION: str = "1"


@dataclass(frozen=True)
class SignatureEntry:
    """A computed authorization header and the date it was signed with.

    The date must be sent with every request that reuses the header.
    """

    header_value: str
    signed_date: str


def format_http_date(date_obj: datetime.datetime | None = None) -> str:
    """Format a timestamp as an RFC 7231 IMF-fixdate, e.g.
    ``Tue, 01 Jan 2030 00:00:00 GMT``."""
    if date_obj is None:
        date_obj = datetime.datetime.now(datetime.UTC)
    return format_datetime(date_obj.astimezone(datetime.UTC), usegmt=True)


class RequestSigner:
    """Signs the fixed request target of the NoSQL data endpoint.

    Every request to the data endpoint is a ``POST`` to the same path, so the
    signature only depends on the host, the date, and the key. That lets a single
    signature be reused for many requests while the date is still acceptable to
    the service.
    """

    def sign(
        self,
        *,
        service_host: str,
        key_id: str,
        private_key: PrivateKeyProvider | RSAPrivateKey,
        date: str | None = None,
    ) -> SignatureEntry:
        """Compute a new signature.

        :param service_host: Host name of the service endpoint.
        :param key_id: Key id to advertise in the authorization header.
        :param private_key: The RSA key, or a provider holding it.
        :param date: An already formatted date. Defaults to the current time.
        :raises SigningError: If the signing primitive fails.
        """
        if date is None:
            date = format_http_date()
        if isinstance(private_key, PrivateKeyProvider):
            private_key = private_key.key

        content = self.signing_content(service_host=service_host, date=date)
        signature = self._signature(content=content, private_key=private_key)
        header_value = self.generate_authorization_header(
            key_id=key_id, signature=signature
        )
        return SignatureEntry(header_value=header_value, signed_date=date)

    def signing_content(self, *, service_host: str, date: str) -> str:
        """Build the newline separated string to sign.

        The order of the lines is part of the service contract.
        """
        lines = (
            f"{REQUEST_TARGET}{HEADER_DELIMITER}post /{NOSQL_DATA_PATH}",
            f"{HOST}{HEADER_DELIMITER}{service_host}",
            f"{DATE}{HEADER_DELIMITER}{date}",
        )
        return "\n".join(lines)

    def generate_authorization_header(self, *, key_id: str, signature: str) -> str:
        """Generate the value of the `Authorization` header.

        :param key_id: Identifies the key the signature was produced with.
        :param signature: Base64 encoded RSA-SHA256 signature of the signing content.
        """
        return (
            f'Signature headers="{SIGNING_HEADERS}",keyId="{key_id}",'
            f'algorithm="{SIGNATURE_ALGORITHM}",signature="{signature}",'
            f'version="{SIGNATURE_VERSION}"'
        )

    def _signature(self, *, content: str, private_key: RSAPrivateKey) -> str:
        try:
            raw = private_key.sign(
                content.encode("utf-8"), padding.PKCS1v15(), hashes.SHA256()
            )
        except (ValueError, TypeError, AttributeError, UnsupportedAlgorithm) as e:
            raise SigningError(f"Error signing request: {e}") from e
        return base64.b64encode(raw).decode("ascii")
