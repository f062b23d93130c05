"""In-memory catalog of generated financial records."""

import time
from concurrent.futures import ThreadPoolExecutor
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

import structlog

from ..core.exceptions import CatalogBuildError, HospitalFinanceError
from ..core.models import FinancialRecord, Hospital
from .generation.assembler import DatasetAssembler
from .generation.invariants import InvariantEnforcer
from .generation.variation import VariationGenerator

logger = structlog.get_logger(__name__)

CatalogKey = Tuple[str, int]
AssemblerFactory = Callable[[Hospital, int], DatasetAssembler]


class _NotFound:
    """Sentinel returned by ``DatasetCatalog.lookup`` for absent keys."""

    _instance: Optional["_NotFound"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = _NotFound()


class DatasetCatalog:
    """Read-only index of records keyed by (hospital_id, year)."""

    def __init__(self, records: Mapping[CatalogKey, FinancialRecord]):
        self._records = MappingProxyType(dict(records))

    def lookup(self, hospital_id: str, year: int) -> Union[FinancialRecord, _NotFound]:
        """Return the stored record, or NOT_FOUND when the pair was never built."""
        return self._records.get((hospital_id, year), NOT_FOUND)

    def keys(self) -> Iterator[CatalogKey]:
        return iter(self._records.keys())

    def years_for(self, hospital_id: str) -> Tuple[int, ...]:
        return tuple(sorted(year for (hid, year) in self._records if hid == hospital_id))

    def hospital_ids(self) -> Tuple[str, ...]:
        return tuple(sorted({hid for (hid, _) in self._records}))

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __len__(self) -> int:
        return len(self._records)


def default_assembler_factory(
    seed: Optional[int] = None,
    variation_percent: float = 15.0,
    percentage_places: int = 2,
) -> AssemblerFactory:
    """Factory giving every (hospital, year) task its own random stream.

    Streams are derived from ``seed`` and the key, so a seeded build is
    reproducible regardless of worker count or task order.
    """
    enforcer = InvariantEnforcer(percentage_places)

    def factory(hospital: Hospital, year: int) -> DatasetAssembler:
        generator = VariationGenerator.for_key(
            seed, hospital.id, year, default_percent=variation_percent
        )
        return DatasetAssembler(generator, enforcer)

    return factory


def build_catalog(
    hospitals: Iterable[Hospital],
    years: Iterable[int],
    assembler_factory: Optional[AssemblerFactory] = None,
    workers: int = 1,
) -> DatasetCatalog:
    """Assemble and verify a record for every hospital × year pair.

    Any failure aborts the whole build: a partially valid catalog is never
    returned.
    """
    factory = assembler_factory or default_assembler_factory()
    hospitals = list(hospitals)
    years = list(years)
    pairs = [(hospital, year) for hospital in hospitals for year in years]

    def build_one(pair: Tuple[Hospital, int]) -> Tuple[CatalogKey, FinancialRecord]:
        hospital, year = pair
        assembler = factory(hospital, year)
        record = assembler.assemble(hospital, year)
        assembler.enforcer.verify(record)
        return (hospital.id, year), record

    start_time = time.perf_counter()
    records: Dict[CatalogKey, FinancialRecord] = {}

    try:
        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                results = list(executor.map(build_one, pairs))
        else:
            results = [build_one(pair) for pair in pairs]
    except HospitalFinanceError as e:
        logger.error("Catalog build aborted", error=e.message, details=e.details)
        raise CatalogBuildError(f"Catalog build failed: {e.message}", details=e.details) from e
    except Exception as e:
        logger.error("Catalog build aborted", error=str(e), error_type=type(e).__name__)
        raise CatalogBuildError(f"Catalog build failed: {type(e).__name__}: {e}") from e

    for key, record in results:
        if key in records:
            raise CatalogBuildError("Duplicate catalog key", details={"key": key})
        records[key] = record

    catalog = DatasetCatalog(records)
    logger.info("Dataset catalog built",
                records=len(catalog),
                workers=workers,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2))
    return catalog
