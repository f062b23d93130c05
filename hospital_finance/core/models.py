"""Domain models for hospitals and their generated financial records."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple


class HospitalType(str, Enum):
    """Closed set of hospital types."""
    GENERAL = "General"
    SPECIALTY = "Specialty"
    PEDIATRIC = "Pediatric"
    TRAUMA = "Trauma"


class MetricFormat(str, Enum):
    """How a summary metric is displayed."""
    CURRENCY = "currency"
    PERCENTAGE = "percentage"
    NUMBER = "number"


class ChangeType(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"


class EventType(str, Enum):
    """Contextual event categories."""
    MERGER = "merger"
    ACQUISITION = "acquisition"
    LEADERSHIP_CHANGE = "leadership_change"
    MARKET_CHANGE = "market_change"
    REGULATORY = "regulatory"
    OTHER = "other"


class ImpactLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class Hospital:
    """A hospital, the unit of financial reporting."""
    id: str
    name: str
    location: str
    type: HospitalType


@dataclass(frozen=True)
class FinancialMetric:
    """Headline metric shown on a summary card."""
    id: str
    title: str
    value: float
    change: float
    change_type: ChangeType
    format: MetricFormat
    period: str = "vs last month"


@dataclass(frozen=True)
class MonthlyRevenue:
    month: str
    revenue: int
    expenses: int
    net_income: int


@dataclass(frozen=True)
class DepartmentFinance:
    department: str
    revenue: int
    expenses: int
    profit: int
    profit_margin: float


@dataclass(frozen=True)
class PatientMetrics:
    total_patients: int
    inpatients: int
    outpatients: int
    emergency_visits: int
    average_stay_duration: float
    occupancy_rate: float


@dataclass(frozen=True)
class ExpenseCategory:
    """One slice of the expense breakdown.

    ``percentage`` is a fixed-place Decimal so that the slices of a
    breakdown add up to exactly 100.
    """
    category: str
    amount: int
    percentage: Decimal
    color: str


@dataclass(frozen=True)
class CashFlowPeriod:
    date: str
    operating_cash_flow: int
    investing_cash_flow: int
    financing_cash_flow: int
    net_cash_flow: int


@dataclass(frozen=True)
class PayerMix:
    """Revenue split by payer; the four amounts sum to ``total_revenue``."""
    government: int
    commercial: int
    self_pay: int
    other: int
    total_revenue: int
    government_percent: Decimal
    commercial_percent: Decimal
    self_pay_percent: Decimal
    other_percent: Decimal

    def amounts(self) -> Tuple[int, int, int, int]:
        return (self.government, self.commercial, self.self_pay, self.other)

    def percentages(self) -> Tuple[Decimal, Decimal, Decimal, Decimal]:
        return (
            self.government_percent,
            self.commercial_percent,
            self.self_pay_percent,
            self.other_percent,
        )


@dataclass(frozen=True)
class EBIDAMetrics:
    operating_income: int
    depreciation: int
    interest: int
    ebida: int


@dataclass(frozen=True)
class DonationMetrics:
    new_donations: int
    released_from_restrictions: int
    total_donations: int
    change: float


@dataclass(frozen=True)
class FinancialAssets:
    cash_and_equivalents: int
    short_term_investments: int
    long_term_investments: int
    accounts_receivable: int
    inventory: int
    property_plant_equipment: int
    other_assets: int
    total_assets: int
    days_cash_on_hand: int

    def components(self) -> Tuple[int, ...]:
        return (
            self.cash_and_equivalents,
            self.short_term_investments,
            self.long_term_investments,
            self.accounts_receivable,
            self.inventory,
            self.property_plant_equipment,
            self.other_assets,
        )


@dataclass(frozen=True)
class BondRatings:
    moodys_rating: str
    sp_rating: str
    fitch_rating: str
    outlook: str
    debt_outstanding: int
    interest_coverage_ratio: float
    last_updated: date


@dataclass(frozen=True)
class StateProgramDependency:
    medicaid_revenue: int
    other_state_programs: int
    total_state_revenue: int
    dependency_percentage: float


@dataclass(frozen=True)
class ContextualEvent:
    """A dated event that gives context to a hospital's figures."""
    id: str
    date: date
    title: str
    description: str
    type: EventType
    impact: ImpactLevel
    affected_metrics: Tuple[str, ...] = ()
    hospital_id: Optional[str] = None


@dataclass(frozen=True)
class FinancialRecord:
    """Everything generated for one (hospital, year) pair."""
    hospital_id: str
    year: int
    last_updated: date
    financial_metrics: Tuple[FinancialMetric, ...]
    revenue_data: Tuple[MonthlyRevenue, ...]
    department_finances: Tuple[DepartmentFinance, ...]
    patient_metrics: PatientMetrics
    expense_breakdown: Tuple[ExpenseCategory, ...]
    cash_flow_data: Tuple[CashFlowPeriod, ...]
    payer_mix: PayerMix
    ebida_metrics: EBIDAMetrics
    donation_data: DonationMetrics
    financial_assets: FinancialAssets
    bond_ratings: BondRatings
    state_program_dependency: StateProgramDependency
    contextual_events: Tuple[ContextualEvent, ...] = field(default_factory=tuple)

    def metric(self, metric_id: str) -> Optional[FinancialMetric]:
        """Return the summary metric with the given id, if present."""
        for metric in self.financial_metrics:
            if metric.id == metric_id:
                return metric
        return None

    @property
    def total_revenue(self) -> int:
        metric = self.metric("total-revenue")
        return int(metric.value) if metric else 0
