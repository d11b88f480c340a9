"""Ownership package: delegation, authorization and owner group provisioning."""
from __future__ import annotations

from project_group_structure.ownership.delegation import (
    DELEGATE_PROJECT_CREATION_TO,
    DISABLE_GRANTING_PROJECT_OWNERSHIP,
    DelegationPolicy,
    DelegationResolver,
)
from project_group_structure.ownership.gate import AuthorizationDecision, OwnershipGate
from project_group_structure.ownership.provisioner import (
    GroupProvisioner,
    fallback_group_name,
    owner_group_name,
)

__all__ = [
    "AuthorizationDecision",
    "DELEGATE_PROJECT_CREATION_TO",
    "DISABLE_GRANTING_PROJECT_OWNERSHIP",
    "DelegationPolicy",
    "DelegationResolver",
    "GroupProvisioner",
    "OwnershipGate",
    "fallback_group_name",
    "owner_group_name",
]
