"""Current-principal holder for sign-in and sign-out."""

import threading
from typing import Dict, Optional

import structlog

from ..reference_data import DEMO_PRINCIPALS
from .access_control import Principal

logger = structlog.get_logger(__name__)


class PrincipalSession:
    """Holds the signed-in principal as a single, atomically replaced value.

    Credentials are checked by the authentication flow before ``sign_in``
    is called; this class only records the outcome.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._current: Optional[Principal] = None

    @property
    def current(self) -> Optional[Principal]:
        with self._lock:
            return self._current

    @property
    def is_authenticated(self) -> bool:
        return self.current is not None

    def sign_in(self, principal: Principal) -> Optional[Principal]:
        """Replace the current principal, returning the one signed out."""
        with self._lock:
            previous, self._current = self._current, principal

        logger.info("Principal signed in",
                    principal_id=principal.id,
                    role=str(principal.role),
                    replaced=previous.id if previous else None)
        return previous

    def sign_out(self) -> Optional[Principal]:
        """Clear the current principal, returning it."""
        with self._lock:
            previous, self._current = self._current, None

        if previous is not None:
            logger.info("Principal signed out", principal_id=previous.id)
        return previous


def demo_principal(principal_id: str, directory: Optional[Dict[str, Dict[str, object]]] = None) -> Principal:
    """Build a Principal for one of the demo accounts; KeyError if unknown."""
    entry = (directory or DEMO_PRINCIPALS)[principal_id]
    return Principal(
        id=principal_id,
        name=str(entry["name"]),
        role=str(entry["role"]),
        hospital_ids=tuple(entry.get("hospital_ids", ())),
        email=entry.get("email"),
    )
