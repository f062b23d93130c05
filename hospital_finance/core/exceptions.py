"""Exception hierarchy for dataset generation and catalog construction."""

from typing import Any, Dict, Optional


class HospitalFinanceError(Exception):
    """Base class for all engine errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvariantViolationError(HospitalFinanceError):
    """An arithmetic relationship could not be established or does not hold.

    Only raised while records are being generated; a catalog that has been
    built never produces one.
    """


class CatalogBuildError(HospitalFinanceError):
    """Catalog construction failed and startup must not continue."""
