# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0


class NoSQLSignerError(Exception):
    """Top-level exception to capture request signing errors."""


class ConfigurationError(NoSQLSignerError, ValueError):
    """The signer was set up incorrectly and must be fixed before it can be used.

    Raised for a missing service host, a request without a compartment when no
    default is available, or invalid signature lifetime settings. Not retryable.
    """


class SigningError(NoSQLSignerError):
    """The private key could not be loaded or could not sign the request."""


class CredentialsError(NoSQLSignerError):
    """Credential material could not be acquired from its source."""


class UnsupportedOperationError(NoSQLSignerError):
    """The operation isn't supported by the active credential profile."""
