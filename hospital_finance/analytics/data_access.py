"""Entitlement-checked access to the dataset catalog.

DataAccessFacade is the only public way to read a FinancialRecord. It
asks the EntitlementModel before it ever touches the catalog, so a caller
that forgets to filter hospitals still cannot read data it is not
entitled to.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union

import structlog

from ..core.logging import get_audit_logger
from ..core.models import FinancialRecord, Hospital
from ..core.security.access_control import EntitlementModel, Principal
from ..processing.catalog import NOT_FOUND, DatasetCatalog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Denied:
    """The principal is not entitled to the requested hospital."""
    message: str = "You are not authorized to view this hospital's data."


@dataclass(frozen=True)
class NotFound:
    """No record exists for the requested hospital and year."""
    message: str = "No financial data is available for this hospital and year."


DENIED = Denied()
NOT_AVAILABLE = NotFound()

FetchResult = Union[FinancialRecord, Denied, NotFound]


class DataAccessFacade:
    """Compose entitlement and catalog lookup into one guarded fetch."""

    def __init__(
        self,
        entitlements: EntitlementModel,
        catalog: DatasetCatalog,
        hospitals: Sequence[Hospital] = (),
        audit_logger: Optional[Any] = None,
    ):
        self.entitlements = entitlements
        self.catalog = catalog
        self.hospitals = tuple(hospitals)
        self.audit_logger = audit_logger or get_audit_logger()

    def fetch(self, principal: Optional[Principal], hospital_id: str, year: int) -> FetchResult:
        """Return the record, DENIED, or NOT_AVAILABLE.

        Entitlement is checked first and unconditionally; a denial never
        reveals whether the record exists.
        """
        principal_id = principal.id if principal else None

        if not self.entitlements.can_access(principal, hospital_id):
            self.audit_logger.warning("Data access denied",
                                      principal_id=principal_id,
                                      hospital_id=hospital_id,
                                      year=year,
                                      result="denied")
            return DENIED

        record = self.catalog.lookup(hospital_id, year)
        if record is NOT_FOUND:
            self.audit_logger.info("Data access not found",
                                   principal_id=principal_id,
                                   hospital_id=hospital_id,
                                   year=year,
                                   result="not_found")
            return NOT_AVAILABLE

        self.audit_logger.info("Data access granted",
                               principal_id=principal_id,
                               hospital_id=hospital_id,
                               year=year,
                               result="granted")
        return record

    def selectable_hospitals(self, principal: Optional[Principal]) -> List[Hospital]:
        """Hospitals to offer in selection controls.

        Only a convenience for building menus; ``fetch`` enforces access on
        its own.
        """
        return self.entitlements.accessible_hospitals(principal, self.hospitals)

    def fetch_history(self, principal: Optional[Principal], hospital_id: str) -> Union[List[FinancialRecord], Denied]:
        """All available years for a hospital, oldest first."""
        if not self.entitlements.can_access(principal, hospital_id):
            self.audit_logger.warning("History access denied",
                                      principal_id=principal.id if principal else None,
                                      hospital_id=hospital_id,
                                      result="denied")
            return DENIED

        history = []
        for year in self.catalog.years_for(hospital_id):
            result = self.fetch(principal, hospital_id, year)
            if isinstance(result, FinancialRecord):
                history.append(result)
        return history

    def fetch_peers(self, principal: Optional[Principal], hospital_id: str, year: int) -> List[FinancialRecord]:
        """Same-year records of other hospitals the principal may see."""
        peers = []
        for peer_id in sorted(self.entitlements.accessible_entities(principal)):
            if peer_id == hospital_id:
                continue
            result = self.fetch(principal, peer_id, year)
            if isinstance(result, FinancialRecord):
                peers.append(result)

        logger.debug("Peer records collected",
                     hospital_id=hospital_id,
                     year=year,
                     peers=len(peers))
        return peers
