"""Security tests for roles, entitlements and the principal session."""

import threading

import pytest

from hospital_finance.core.reference_data import DEMO_PRINCIPALS, HOSPITALS
from hospital_finance.core.security.access_control import (
    ROLE_DEFINITIONS,
    EntitlementModel,
    Principal,
    Role,
    describe_role,
)
from hospital_finance.core.security.session import PrincipalSession, demo_principal

ALL_IDS = frozenset(hospital.id for hospital in HOSPITALS)


@pytest.mark.security
class TestRoleResolution:
    """Test mapping raw role values onto the closed Role set."""

    def test_known_roles(self):
        assert Role.resolve("admin") is Role.ADMIN
        assert Role.resolve("hospital_owner") is Role.HOSPITAL_OWNER
        assert Role.resolve(Role.BRANCH_OWNER) is Role.BRANCH_OWNER

    @pytest.mark.parametrize("value", ["Admin", "superuser", "", None, 3, ["admin"]])
    def test_unknown_roles_resolve_to_none(self, value):
        assert Role.resolve(value) is None

    def test_role_descriptions(self):
        assert describe_role("branch_owner").title == "Branch Manager"
        assert describe_role(Role.ADMIN) is ROLE_DEFINITIONS[Role.ADMIN]
        assert describe_role("auditor") is None


@pytest.mark.security
class TestPrincipal:
    """Test principal normalization."""

    def test_hospital_ids_become_tuple(self):
        principal = Principal(id="p", name="P", role="hospital_owner", hospital_ids=["general-1", "cardio-1"])
        assert principal.hospital_ids == ("general-1", "cardio-1")

    def test_single_id_is_not_split(self):
        principal = Principal(id="p", name="P", role="branch_owner", hospital_ids="general-1")
        assert principal.hospital_ids == ("general-1",)

    def test_missing_ids(self):
        assert Principal(id="p", name="P", role="admin", hospital_ids=None).hospital_ids == ()
        assert Principal(id="p", name="P", role="admin").hospital_ids == ()


@pytest.mark.security
class TestEntitlementModel:
    """Test role projections and fail-closed behaviour."""

    def test_admin_sees_everything(self, entitlements, admin):
        assert entitlements.accessible_entities(admin) == ALL_IDS
        assert all(entitlements.can_access(admin, hid) for hid in ALL_IDS)

    def test_hospital_owner_sees_owned_hospitals(self, entitlements, hospital_owner):
        assert entitlements.accessible_entities(hospital_owner) == {"general-1", "cardio-1"}
        assert entitlements.can_access(hospital_owner, "cardio-1")
        assert not entitlements.can_access(hospital_owner, "trauma-1")

    def test_branch_owner_sees_single_branch(self, entitlements, cardio_branch_owner):
        assert entitlements.accessible_entities(cardio_branch_owner) == {"cardio-1"}
        assert entitlements.can_access(cardio_branch_owner, "cardio-1")
        assert not entitlements.can_access(cardio_branch_owner, "general-1")

    def test_branch_owner_only_first_association_counts(self, entitlements, branch_owner_factory):
        principal = branch_owner_factory("pediatric-1", "trauma-1")
        assert entitlements.accessible_entities(principal) == {"pediatric-1"}
        assert not entitlements.can_access(principal, "trauma-1")

    def test_unknown_role_denied_everything(self, entitlements, unknown_role_principal):
        assert entitlements.accessible_entities(unknown_role_principal) == frozenset()
        assert not entitlements.can_access(unknown_role_principal, "general-1")

    def test_missing_principal_denied(self, entitlements):
        assert entitlements.accessible_entities(None) == frozenset()
        assert not entitlements.can_access(None, "general-1")

    def test_owner_without_hospitals_denied(self, entitlements):
        owner = Principal(id="o", name="O", role=Role.HOSPITAL_OWNER)
        assert entitlements.accessible_entities(owner) == frozenset()
        assert not entitlements.can_access(owner, "general-1")

    def test_branch_owner_without_hospitals_denied(self, entitlements, branch_owner_factory):
        principal = branch_owner_factory()
        assert entitlements.accessible_entities(principal) == frozenset()
        assert not entitlements.can_access(principal, "general-1")

    def test_accessible_hospitals_keep_order(self, entitlements, hospital_owner):
        hospitals = entitlements.accessible_hospitals(hospital_owner, HOSPITALS)
        assert [hospital.id for hospital in hospitals] == ["general-1", "cardio-1"]

    def test_every_demo_account_is_consistent(self, entitlements):
        """can_access agrees with accessible_entities for every known id."""
        for principal_id in DEMO_PRINCIPALS:
            principal = demo_principal(principal_id)
            allowed = entitlements.accessible_entities(principal)
            for hospital_id in ALL_IDS:
                assert entitlements.can_access(principal, hospital_id) == (hospital_id in allowed)

    def test_model_is_independent_of_hospital_list(self):
        model = EntitlementModel(["general-1"])
        owner = Principal(id="o", name="O", role="hospital_owner", hospital_ids=("cardio-1",))
        assert model.can_access(owner, "cardio-1")


@pytest.mark.security
class TestPrincipalSession:
    """Test sign-in and sign-out of the current principal."""

    def test_sign_in_and_out(self, admin, hospital_owner):
        session = PrincipalSession()
        assert not session.is_authenticated

        assert session.sign_in(admin) is None
        assert session.current is admin

        assert session.sign_in(hospital_owner) is admin
        assert session.current is hospital_owner

        assert session.sign_out() is hospital_owner
        assert session.current is None
        assert session.sign_out() is None

    def test_concurrent_sign_ins_leave_one_principal(self):
        session = PrincipalSession()
        principals = [demo_principal(pid) for pid in DEMO_PRINCIPALS]
        threads = [threading.Thread(target=session.sign_in, args=(p,)) for p in principals]

        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert session.current in principals

    def test_demo_principal(self):
        principal = demo_principal("owner-2")
        assert principal.role == "hospital_owner"
        assert principal.hospital_ids == ("pediatric-1",)
        assert principal.email == "owner@childrensmed.com"

    def test_unknown_demo_principal(self):
        with pytest.raises(KeyError):
            demo_principal("nobody")
