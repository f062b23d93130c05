"""Role-based entitlement model for hospital financial data."""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple, Union

import structlog

from ..models import Hospital

logger = structlog.get_logger(__name__)


class Role(str, Enum):
    """System roles."""
    ADMIN = "admin"
    HOSPITAL_OWNER = "hospital_owner"
    BRANCH_OWNER = "branch_owner"

    @classmethod
    def resolve(cls, value: object) -> Optional["Role"]:
        """Map a raw role value to a Role, or None if it is not recognized."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (ValueError, TypeError):
            return None


@dataclass(frozen=True)
class RoleDefinition:
    """Definition of a role for display in selection and account screens."""
    title: str
    description: str
    capabilities: Tuple[str, ...]


ROLE_DEFINITIONS = {
    Role.ADMIN: RoleDefinition(
        title="System Administrator",
        description="Full access to all hospitals and system-wide analytics",
        capabilities=("View all hospitals", "Manage users", "System configuration"),
    ),
    Role.HOSPITAL_OWNER: RoleDefinition(
        title="Hospital Owner",
        description="Access to owned hospitals across multiple locations",
        capabilities=("Manage owned hospitals", "View financial reports", "Manage branch managers"),
    ),
    Role.BRANCH_OWNER: RoleDefinition(
        title="Branch Manager",
        description="Access to specific hospital location data only",
        capabilities=("View branch data", "Generate reports", "Monitor performance"),
    ),
}


@dataclass(frozen=True)
class Principal:
    """An authenticated user as handed over by the sign-in flow.

    ``role`` is kept as received; values outside the Role set are allowed
    here and are denied everything by the EntitlementModel.
    """
    id: str
    name: str
    role: Union[Role, str]
    hospital_ids: Tuple[str, ...] = field(default_factory=tuple)
    email: Optional[str] = None

    def __post_init__(self):
        # Accept a single id or any iterable of ids; store an immutable tuple.
        ids = self.hospital_ids
        if isinstance(ids, str):
            ids = (ids,)
        elif not isinstance(ids, tuple):
            ids = tuple(ids or ())
        object.__setattr__(self, "hospital_ids", ids)


class EntitlementModel:
    """Decide which hospitals a principal may address.

    A pure classification over the principal's role: nothing is granted by
    default, and an unrecognized role or a missing association yields no
    access at all.
    """

    def __init__(self, known_hospital_ids: Iterable[str]):
        self.known_hospital_ids: FrozenSet[str] = frozenset(known_hospital_ids)

    def accessible_entities(self, principal: Optional[Principal]) -> FrozenSet[str]:
        """Hospital ids the principal is entitled to."""
        if principal is None:
            return frozenset()

        role = Role.resolve(principal.role)
        if role is Role.ADMIN:
            return self.known_hospital_ids
        if role is Role.HOSPITAL_OWNER:
            return frozenset(principal.hospital_ids)
        if role is Role.BRANCH_OWNER:
            return frozenset(principal.hospital_ids[:1])
        return frozenset()

    def can_access(self, principal: Optional[Principal], hospital_id: str) -> bool:
        """Check whether the principal may retrieve data for ``hospital_id``."""
        if principal is None:
            return False

        role = Role.resolve(principal.role)
        if role is Role.ADMIN:
            return True
        if role is Role.HOSPITAL_OWNER:
            return hospital_id in principal.hospital_ids
        if role is Role.BRANCH_OWNER:
            return bool(principal.hospital_ids) and principal.hospital_ids[0] == hospital_id

        logger.warning("Unrecognized role denied",
                       principal_id=principal.id,
                       role=str(principal.role))
        return False

    def accessible_hospitals(
        self,
        principal: Optional[Principal],
        hospitals: Sequence[Hospital],
    ) -> List[Hospital]:
        """Filter ``hospitals`` to those the principal may select, keeping order."""
        allowed = self.accessible_entities(principal)
        return [hospital for hospital in hospitals if hospital.id in allowed]


def describe_role(role: object) -> Optional[RoleDefinition]:
    """Display definition for a role, or None for unrecognized roles."""
    resolved = Role.resolve(role)
    return ROLE_DEFINITIONS.get(resolved) if resolved else None
