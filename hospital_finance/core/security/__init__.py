"""
Security module: roles, entitlements and the signed-in principal.
"""

from .access_control import (
    ROLE_DEFINITIONS,
    EntitlementModel,
    Principal,
    Role,
    RoleDefinition,
    describe_role,
)
from .session import PrincipalSession, demo_principal

__all__ = [
    'ROLE_DEFINITIONS',
    'EntitlementModel',
    'Principal',
    'Role',
    'RoleDefinition',
    'describe_role',
    'PrincipalSession',
    'demo_principal',
]
