"""Startup routine: settings, logging, catalog build, and access wiring."""

from dataclasses import dataclass, field
from typing import Optional, Sequence

from .analytics.data_access import DataAccessFacade
from .core.config import Settings, get_settings
from .core.logging import configure_logging, get_logger
from .core.models import Hospital
from .core.reference_data import HOSPITALS
from .core.security.access_control import EntitlementModel
from .core.security.session import PrincipalSession
from .processing.catalog import DatasetCatalog, build_catalog, default_assembler_factory

logger = get_logger(__name__)


@dataclass
class Application:
    """Objects shared by the presentation layer for the process lifetime."""
    settings: Settings
    catalog: DatasetCatalog
    entitlements: EntitlementModel
    data_access: DataAccessFacade
    session: PrincipalSession = field(default_factory=PrincipalSession)


def initialize(
    settings: Optional[Settings] = None,
    hospitals: Sequence[Hospital] = HOSPITALS,
    configure_logs: bool = True,
) -> Application:
    """Build the catalog once and wire it behind the data access facade.

    Raises CatalogBuildError if any record fails its invariants; the
    application must not start with a partial catalog.
    """
    settings = settings or get_settings()
    if configure_logs:
        configure_logging(settings)

    logger.info("Initializing dataset engine",
                app_env=settings.app_env,
                hospitals=len(hospitals),
                years=settings.supported_years,
                seeded=settings.random_seed is not None)

    factory = default_assembler_factory(
        seed=settings.random_seed,
        variation_percent=settings.variation_percent,
        percentage_places=settings.percentage_places,
    )
    catalog = build_catalog(hospitals, settings.supported_years, factory, workers=settings.build_workers)

    entitlements = EntitlementModel(hospital.id for hospital in hospitals)
    data_access = DataAccessFacade(entitlements, catalog, hospitals)

    return Application(
        settings=settings,
        catalog=catalog,
        entitlements=entitlements,
        data_access=data_access,
    )
