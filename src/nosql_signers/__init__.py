# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""NoSQL Signers issues cached, RSA-SHA256 signed authorization headers for requests
to the NoSQL cloud service."""

from __future__ import annotations

from ._http import Field, Fields, NoSQLRequest
from ._scheduler import ThreadingScheduler
from .authorizer import SignatureAuthorizer
from .cache import DEFAULT_REFRESH_AHEAD, MAX_ENTRY_LIFETIME, SignatureCache
from .config import AuthorizerConfig
from .exceptions import (
    ConfigurationError,
    CredentialsError,
    NoSQLSignerError,
    SigningError,
    UnsupportedOperationError,
)
from .interfaces.identity import SigningCredentials
from .keys import PrivateKeyProvider
from .signers import RequestSigner, SignatureEntry

__license__ = "Apache-2.0"
__version__ = "0.1.0"

__all__ = (
    "DEFAULT_REFRESH_AHEAD",
    "MAX_ENTRY_LIFETIME",
    "AuthorizerConfig",
    "ConfigurationError",
    "CredentialsError",
    "Field",
    "Fields",
    "NoSQLRequest",
    "NoSQLSignerError",
    "PrivateKeyProvider",
    "RequestSigner",
    "SignatureAuthorizer",
    "SignatureCache",
    "SignatureEntry",
    "SigningCredentials",
    "SigningError",
    "ThreadingScheduler",
    "UnsupportedOperationError",
)
