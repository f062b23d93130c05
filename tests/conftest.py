"""Pytest configuration and fixtures for the dataset engine tests."""

import random
from unittest.mock import Mock

import pytest

from hospital_finance.analytics.data_access import DataAccessFacade
from hospital_finance.core.config import Settings
from hospital_finance.core.models import Hospital, HospitalType
from hospital_finance.core.reference_data import HOSPITALS, SUPPORTED_YEARS, get_hospital
from hospital_finance.core.security.access_control import EntitlementModel, Principal, Role
from hospital_finance.core.security.session import demo_principal
from hospital_finance.processing.catalog import build_catalog, default_assembler_factory
from hospital_finance.processing.generation.assembler import DatasetAssembler
from hospital_finance.processing.generation.invariants import InvariantEnforcer
from hospital_finance.processing.generation.variation import VariationGenerator

TEST_SEED = 20240131


@pytest.fixture
def test_settings():
    """Settings isolated from the environment and any local .env file."""
    return Settings(
        _env_file=None,
        app_env="test",
        log_level="WARNING",
        random_seed=TEST_SEED,
    )


@pytest.fixture
def seeded_generator():
    """Variation generator over a fixed random stream."""
    return VariationGenerator(random.Random(TEST_SEED))


@pytest.fixture
def enforcer():
    return InvariantEnforcer(percentage_places=2)


@pytest.fixture
def assembler(seeded_generator, enforcer):
    return DatasetAssembler(seeded_generator, enforcer)


@pytest.fixture
def general_hospital():
    return get_hospital("general-1")


@pytest.fixture
def pediatric_hospital():
    return get_hospital("pediatric-1")


@pytest.fixture(scope="session")
def full_catalog():
    """Seeded catalog over every reference hospital and year."""
    factory = default_assembler_factory(seed=TEST_SEED)
    return build_catalog(HOSPITALS, SUPPORTED_YEARS, factory)


@pytest.fixture
def small_catalog():
    """Two hospitals, one year."""
    hospitals = [get_hospital("general-1"), get_hospital("cardio-1")]
    return build_catalog(hospitals, [2024], default_assembler_factory(seed=TEST_SEED))


@pytest.fixture
def entitlements():
    return EntitlementModel(hospital.id for hospital in HOSPITALS)


@pytest.fixture
def mock_audit_logger():
    """Stand-in for the security audit logger."""
    return Mock()


@pytest.fixture
def data_access(entitlements, full_catalog, mock_audit_logger):
    return DataAccessFacade(entitlements, full_catalog, HOSPITALS, audit_logger=mock_audit_logger)


@pytest.fixture
def admin():
    return demo_principal("admin-1")


@pytest.fixture
def hospital_owner():
    """Owner of general-1 and cardio-1."""
    return demo_principal("owner-1")


@pytest.fixture
def cardio_branch_owner():
    return demo_principal("branch-2")


@pytest.fixture
def unknown_role_principal():
    return Principal(id="auditor-1", name="Outside Auditor", role="auditor", hospital_ids=("general-1",))


@pytest.fixture
def sample_hospital():
    """A hospital outside the reference set."""
    return Hospital(id="test-1", name="Test Hospital", location="Testville", type=HospitalType.GENERAL)


@pytest.fixture
def branch_owner_factory():
    def make(*hospital_ids: str) -> Principal:
        return Principal(id="branch-x", name="Branch Manager", role=Role.BRANCH_OWNER, hospital_ids=hospital_ids)
    return make


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "security: mark test as a security test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
