# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from .config_file import load_config_file_profile
from .instance import InstancePrincipalProfile, SessionCredentials, SessionTokenSupplier
from .resource import (
    COMPARTMENT_ID_CLAIM_KEY,
    TENANT_ID_CLAIM_KEY,
    ResourcePrincipalProfile,
)
from .user import UserProfile

__all__ = (
    "COMPARTMENT_ID_CLAIM_KEY",
    "TENANT_ID_CLAIM_KEY",
    "InstancePrincipalProfile",
    "ResourcePrincipalProfile",
    "SessionCredentials",
    "SessionTokenSupplier",
    "UserProfile",
    "load_config_file_profile",
)
