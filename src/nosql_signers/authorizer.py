# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import logging
import threading
import time
from collections.abc import Callable, Mapping
from pathlib import Path
from types import TracebackType
from typing import Any, Final, Self

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from ._http import AUTHORIZATION, COMPARTMENT_ID, DATE, Field, Fields
from ._scheduler import Scheduler
from .cache import SignatureCache
from .config import AuthorizerConfig, resolve_service_host
from .exceptions import ConfigurationError, SigningError, UnsupportedOperationError
from .identity import (
    InstancePrincipalProfile,
    ResourcePrincipalProfile,
    SessionTokenSupplier,
    UserProfile,
    load_config_file_profile,
)
from .interfaces.http import Request
from .interfaces.identity import (
    ClaimsProfile,
    CredentialProfile,
    SigningCredentials,
    TenantProfile,
)
from .keys import PrivateKeyProvider
from .signers import RequestSigner, SignatureEntry

logger: Final = logging.getLogger(__name__)


class SignatureAuthorizer:
    """Authorizes requests to the NoSQL cloud service with cached request signatures.

    A signature covers only the service host and a date, so a single signature is
    computed, cached for up to five minutes, and attached to every request during
    that window. The cached signature is replaced in the background shortly before
    it expires.

    The service host must be set, either through
    :py:attr:`AuthorizerConfig.endpoint` or :py:meth:`set_service_host`, before any
    request is authorized.

    Requests that don't name a compartment default to the tenancy of a user
    profile. Instance and resource principals have no such default, so requests
    made with them must always carry a compartment.
    """

    def __init__(
        self,
        profile: CredentialProfile,
        *,
        config: AuthorizerConfig | None = None,
        scheduler: Scheduler | None = None,
        clock: Callable[[], float] = time.monotonic,
        signer: RequestSigner | None = None,
    ):
        """Construct a SignatureAuthorizer.

        :param profile: Source of the key id and private key.
        :param config: Signature lifetime and endpoint settings.
        :param scheduler: Runs the background refresh. Defaults to daemon timers.
        :param clock: Monotonic clock, in seconds, used to expire signatures.
        :param signer: Signer used to compute signatures.
        :raises ConfigurationError: If the signature lifetime settings are invalid.
        """
        if not isinstance(profile, CredentialProfile):
            raise ConfigurationError(
                "Received unexpected value for profile parameter. Expected "
                f"CredentialProfile but received {type(profile)}."
            )
        config = config or AuthorizerConfig()
        self._profile = profile
        self._signer = signer or RequestSigner()
        self._key_provider: PrivateKeyProvider | None = None
        self._key_lock = threading.Lock()
        self._service_host: str | None = None
        if config.endpoint is not None:
            self._service_host = resolve_service_host(config.endpoint)
        self._cache = SignatureCache(
            self._compute_signature,
            lifetime=config.signature_lifetime,
            refresh_ahead=config.refresh_ahead,
            scheduler=scheduler,
            clock=clock,
        )

    @classmethod
    def with_user_profile(
        cls,
        *,
        tenant_id: str,
        user_id: str,
        fingerprint: str,
        private_key: str | bytes | None = None,
        private_key_file: str | Path | None = None,
        passphrase: str | bytes | None = None,
        region: str | None = None,
        **kwargs: Any,
    ) -> Self:
        """Authorize as a user with directly provided credentials."""
        profile = UserProfile(
            tenant_id=tenant_id,
            user_id=user_id,
            fingerprint=fingerprint,
            private_key=private_key,
            private_key_file=private_key_file,
            passphrase=passphrase,
            region=region,
        )
        return cls(profile, **kwargs)

    @classmethod
    def from_config_file(
        cls,
        config_file: str | Path | None = None,
        profile_name: str | None = None,
        **kwargs: Any,
    ) -> Self:
        """Authorize as the user described by a profile of an OCI config file.

        See :py:func:`~nosql_signers.identity.load_config_file_profile`.
        """
        return cls(load_config_file_profile(config_file, profile_name), **kwargs)

    @classmethod
    def with_instance_principal(
        cls,
        supplier: SessionTokenSupplier,
        *,
        region: str | None = None,
        **kwargs: Any,
    ) -> Self:
        """Authorize as the compute instance the process runs on.

        :param supplier: Provides session credentials issued by the IAM federation
            endpoint.
        :param region: The region requests are sent to.
        """
        return cls(InstancePrincipalProfile(supplier, region=region), **kwargs)

    @classmethod
    def with_resource_principal(
        cls, env: Mapping[str, str] | None = None, **kwargs: Any
    ) -> Self:
        """Authorize as the resource principal described by the
        ``OCI_RESOURCE_PRINCIPAL_*`` environment variables."""
        return cls(ResourcePrincipalProfile.from_environment(env), **kwargs)

    @property
    def profile(self) -> CredentialProfile:
        return self._profile

    @property
    def region(self) -> str | None:
        """The region of the credential profile, if it specifies one."""
        return self._profile.region()

    @property
    def service_host(self) -> str | None:
        return self._service_host

    def set_service_host(self, endpoint: str) -> Self:
        """Set the host requests are signed for.

        :param endpoint: A service URL or a bare host name.
        """
        self._service_host = resolve_service_host(endpoint)
        return self

    def get_authorization_string(self, request: Request | None = None) -> str | None:
        """Return the value of the ``Authorization`` header.

        :returns: The header value, or None if a signature couldn't be computed. The
            failure is logged; the caller may retry the request.
        :raises ConfigurationError: If the service host hasn't been set.
        """
        entry = self._signature()
        return entry.header_value if entry is not None else None

    def authorize(self, request: Request) -> Fields | None:
        """Return the headers that authorize ``request``.

        The headers are ``Authorization``, ``Date``, and the compartment header. The
        compartment is the request's own, or the tenancy of a user profile if the
        request has none.

        :returns: The headers to attach, or None if a signature couldn't be
            computed.
        :raises ConfigurationError: If the service host hasn't been set, or the
            request has no compartment and the profile provides no default.
        """
        entry = self._signature()
        if entry is None:
            return None

        compartment = request.compartment or self._default_compartment()
        if not compartment:
            raise ConfigurationError(
                "Compartment is not set. When authenticating with an instance or "
                "resource principal the compartment of the operation must be "
                "specified."
            )
        return Fields(
            [
                Field(name=AUTHORIZATION, values=[entry.header_value]),
                Field(name=DATE, values=[entry.signed_date]),
                Field(name=COMPARTMENT_ID, values=[compartment]),
            ]
        )

    def set_required_headers(self, request: Request) -> bool:
        """Attach the headers returned by :py:meth:`authorize` to ``request``,
        replacing any existing values.

        :returns: Whether the headers were attached.
        """
        fields = self.authorize(request)
        if fields is None:
            return False
        for field in fields:
            request.fields.set_field(field)
        return True

    def get_resource_principal_claim(self, name: str) -> str | None:
        """Return a claim of the resource principal session token.

        See :py:data:`~nosql_signers.identity.COMPARTMENT_ID_CLAIM_KEY` and
        :py:data:`~nosql_signers.identity.TENANT_ID_CLAIM_KEY`.

        :raises UnsupportedOperationError: If the profile isn't a resource principal.
        """
        if not isinstance(self._profile, ClaimsProfile):
            raise UnsupportedOperationError(
                "Claims are only available when authenticating with a resource "
                "principal."
            )
        return self._profile.get_claim(name)

    def close(self) -> None:
        """Stop refreshing the signature in the background and release it."""
        self._cache.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def _signature(self) -> SignatureEntry | None:
        if self._service_host is None:
            raise ConfigurationError(
                "Unable to find the service host, use set_service_host or "
                "AuthorizerConfig.endpoint to configure it."
            )
        try:
            return self._cache.get_or_compute()
        except SigningError as e:
            logger.error("Error signing request: %s", e)
            return None

    def _default_compartment(self) -> str | None:
        # Only user profiles know their tenancy, which is the root compartment.
        if isinstance(self._profile, TenantProfile):
            return self._profile.tenant_id()
        return None

    def _private_key(self, credentials: SigningCredentials) -> RSAPrivateKey:
        # The parsed key is taken under the lock so a concurrent reload for another
        # session can't swap it before signing.
        with self._key_lock:
            if self._key_provider is None:
                self._key_provider = PrivateKeyProvider(
                    credentials.private_key, credentials.passphrase
                )
            elif self._profile.rotates_keys:
                self._key_provider.reload(
                    credentials.private_key, credentials.passphrase
                )
            return self._key_provider.key

    def _compute_signature(self) -> SignatureEntry:
        assert self._service_host is not None  # noqa: S101
        credentials = self._profile.credentials()
        return self._signer.sign(
            service_host=self._service_host,
            key_id=credentials.key_id,
            private_key=self._private_key(credentials),
        )
