"""Static reference data loaded once at startup."""

from datetime import date
from typing import Dict, Tuple

from .models import ContextualEvent, EventType, Hospital, HospitalType, ImpactLevel


HOSPITALS: Tuple[Hospital, ...] = (
    Hospital(
        id="general-1",
        name="Metro General Hospital",
        location="Downtown",
        type=HospitalType.GENERAL,
    ),
    Hospital(
        id="cardio-1",
        name="Heart & Vascular Institute",
        location="Midtown",
        type=HospitalType.SPECIALTY,
    ),
    Hospital(
        id="pediatric-1",
        name="Children's Medical Center",
        location="Westside",
        type=HospitalType.PEDIATRIC,
    ),
    Hospital(
        id="trauma-1",
        name="Regional Trauma Center",
        location="Northside",
        type=HospitalType.TRAUMA,
    ),
)

SUPPORTED_YEARS: Tuple[int, ...] = (2021, 2022, 2023, 2024)

# Events without a hospital_id apply to every hospital.
CONTEXTUAL_EVENTS: Tuple[ContextualEvent, ...] = (
    ContextualEvent(
        id="evt-2021-medicaid-expansion",
        date=date(2021, 7, 1),
        title="State Medicaid Expansion",
        description="Eligibility expansion increased the share of government payers.",
        type=EventType.REGULATORY,
        impact=ImpactLevel.HIGH,
        affected_metrics=("total-revenue", "payer-mix"),
    ),
    ContextualEvent(
        id="evt-2022-cardio-acquisition",
        date=date(2022, 3, 15),
        title="Outpatient Cardiology Clinic Acquired",
        description="Acquisition of a three-site outpatient cardiology practice.",
        type=EventType.ACQUISITION,
        impact=ImpactLevel.MEDIUM,
        affected_metrics=("total-revenue", "operating-expenses"),
        hospital_id="cardio-1",
    ),
    ContextualEvent(
        id="evt-2022-labor-market",
        date=date(2022, 9, 1),
        title="Regional Nursing Shortage",
        description="Agency staffing costs rose sharply across the region.",
        type=EventType.MARKET_CHANGE,
        impact=ImpactLevel.HIGH,
        affected_metrics=("operating-expenses", "net-profit"),
    ),
    ContextualEvent(
        id="evt-2023-general-cfo",
        date=date(2023, 1, 9),
        title="New Chief Financial Officer",
        description="Leadership change in the finance office at Metro General.",
        type=EventType.LEADERSHIP_CHANGE,
        impact=ImpactLevel.LOW,
        affected_metrics=("profit-margin",),
        hospital_id="general-1",
    ),
    ContextualEvent(
        id="evt-2023-pediatric-merger",
        date=date(2023, 6, 30),
        title="Pediatric Network Merger",
        description="Merger with a neighbouring children's clinic network.",
        type=EventType.MERGER,
        impact=ImpactLevel.HIGH,
        affected_metrics=("total-revenue", "operating-expenses", "net-profit"),
        hospital_id="pediatric-1",
    ),
    ContextualEvent(
        id="evt-2024-trauma-designation",
        date=date(2024, 2, 20),
        title="Level I Trauma Designation Renewed",
        description="State renewed the Level I trauma designation for five years.",
        type=EventType.REGULATORY,
        impact=ImpactLevel.MEDIUM,
        affected_metrics=("total-revenue",),
        hospital_id="trauma-1",
    ),
    ContextualEvent(
        id="evt-2024-price-transparency",
        date=date(2024, 10, 1),
        title="Price Transparency Enforcement",
        description="Federal enforcement of hospital price transparency rules began.",
        type=EventType.REGULATORY,
        impact=ImpactLevel.LOW,
        affected_metrics=("total-revenue",),
    ),
    ContextualEvent(
        id="evt-2025-system-integration",
        date=date(2025, 4, 1),
        title="Health System Integration",
        description="Planned integration of the four hospitals under a single system.",
        type=EventType.OTHER,
        impact=ImpactLevel.MEDIUM,
        affected_metrics=("operating-expenses",),
    ),
)

# Demo sign-in accounts, keyed by principal id.
DEMO_PRINCIPALS: Dict[str, Dict[str, object]] = {
    "admin-1": {
        "name": "System Administrator",
        "email": "admin@hospitalfinance.com",
        "role": "admin",
        "hospital_ids": (),
    },
    "owner-1": {
        "name": "Sarah Johnson",
        "email": "owner@metrogeneral.com",
        "role": "hospital_owner",
        "hospital_ids": ("general-1", "cardio-1"),
    },
    "owner-2": {
        "name": "Dr. Michael Chen",
        "email": "owner@childrensmed.com",
        "role": "hospital_owner",
        "hospital_ids": ("pediatric-1",),
    },
    "branch-1": {
        "name": "John Doe",
        "email": "manager@metrogeneral.com",
        "role": "branch_owner",
        "hospital_ids": ("general-1",),
    },
    "branch-2": {
        "name": "Dr. Emily Rodriguez",
        "email": "manager@heartcenter.com",
        "role": "branch_owner",
        "hospital_ids": ("cardio-1",),
    },
    "branch-3": {
        "name": "Lisa Thompson",
        "email": "manager@childrensmed.com",
        "role": "branch_owner",
        "hospital_ids": ("pediatric-1",),
    },
    "branch-4": {
        "name": "Dr. Robert Kim",
        "email": "manager@traumacenter.com",
        "role": "branch_owner",
        "hospital_ids": ("trauma-1",),
    },
}


def get_hospital(hospital_id: str) -> Hospital:
    """Look up a hospital by id; raises KeyError for unknown ids."""
    for hospital in HOSPITALS:
        if hospital.id == hospital_id:
            return hospital
    raise KeyError(hospital_id)
