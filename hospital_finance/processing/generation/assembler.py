"""Assemble the synthetic financial record for one hospital and year."""

from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

import structlog

from ...core.models import (
    BondRatings,
    CashFlowPeriod,
    ChangeType,
    ContextualEvent,
    DepartmentFinance,
    DonationMetrics,
    EBIDAMetrics,
    ExpenseCategory,
    FinancialAssets,
    FinancialMetric,
    FinancialRecord,
    Hospital,
    HospitalType,
    MetricFormat,
    MonthlyRevenue,
    PatientMetrics,
    PayerMix,
    StateProgramDependency,
)
from ...core.reference_data import CONTEXTUAL_EVENTS
from .invariants import InvariantEnforcer
from .variation import VariationGenerator

logger = structlog.get_logger(__name__)


class ScaleFactors:
    """Deterministic multipliers applied to every base figure."""

    # Most recent year is the reference scale.
    PERIOD_MULTIPLIERS: Dict[int, float] = {
        2024: 1.0,
        2023: 0.92,
        2022: 0.85,
        2021: 0.78,
    }

    TYPE_MULTIPLIERS: Dict[HospitalType, float] = {
        HospitalType.GENERAL: 1.0,
        HospitalType.SPECIALTY: 0.7,
        HospitalType.PEDIATRIC: 0.5,
        HospitalType.TRAUMA: 0.8,
    }

    @classmethod
    def for_pair(cls, hospital: Hospital, year: int) -> float:
        return cls.PERIOD_MULTIPLIERS[year] * cls.TYPE_MULTIPLIERS[hospital.type]


# (id, title, base value, change base, change spread %, probability of increase)
SUMMARY_CHANGES = {
    "total-revenue": ("Total Revenue", 8.5, 50, 0.7),
    "net-profit": ("Net Profit", 12.3, 60, 0.75),
    "profit-margin": ("Profit Margin", 2.1, 80, 0.6),
    "operating-expenses": ("Operating Expenses", 3.2, 40, 0.4),
}
ANNUAL_REVENUE_BASE = 12_500_000
ANNUAL_EXPENSES_BASE = 9_800_000

# (month, revenue, expenses)
MONTHLY_BASES: Tuple[Tuple[str, int, int], ...] = (
    ("Jan", 8_500_000, 6_200_000),
    ("Feb", 9_200_000, 7_100_000),
    ("Mar", 15_600_000, 11_800_000),
    ("Apr", 7_800_000, 5_900_000),
    ("May", 18_200_000, 13_500_000),
    ("Jun", 6_900_000, 5_400_000),
    ("Jul", 21_400_000, 15_800_000),
    ("Aug", 11_200_000, 8_600_000),
    ("Sep", 16_800_000, 12_200_000),
    ("Oct", 9_600_000, 7_300_000),
    ("Nov", 19_500_000, 14_100_000),
    ("Dec", 13_700_000, 10_200_000),
)

# Revenue/expense bases for the five department slots.
DEPARTMENT_BASES: Tuple[Tuple[int, int], ...] = (
    (3_200_000, 2_400_000),
    (4_500_000, 3_100_000),
    (2_800_000, 1_900_000),
    (1_900_000, 1_400_000),
    (1_100_000, 800_000),
)

DEPARTMENT_NAMES: Dict[HospitalType, Tuple[str, ...]] = {
    HospitalType.GENERAL: ("Emergency", "Surgery", "Cardiology", "Oncology", "Orthopedics"),
    HospitalType.SPECIALTY: ("Emergency", "Surgery", "Cardiology", "Oncology", "Orthopedics"),
    HospitalType.PEDIATRIC: ("Emergency", "Surgery", "Cardiology", "Pediatrics", "Orthopedics"),
    HospitalType.TRAUMA: ("Emergency", "Surgery", "Cardiology", "Oncology", "Trauma"),
}

# (category, base amount, color tag)
EXPENSE_CATEGORIES: Tuple[Tuple[str, int, str], ...] = (
    ("Salaries & Benefits", 5_200_000, "#f59e0b"),
    ("Medical Supplies", 1_800_000, "#3b82f6"),
    ("Equipment", 1_200_000, "#22c55e"),
    ("Utilities", 600_000, "#06b6d4"),
    ("Maintenance", 500_000, "#ef4444"),
    ("Other", 500_000, "#14b8a6"),
)

# (operating, investing, financing) for Jan..Jun
CASH_FLOW_BASES: Tuple[Tuple[int, int, int], ...] = (
    (2_100_000, -800_000, -300_000),
    (1_950_000, -200_000, -400_000),
    (2_300_000, -1_200_000, -200_000),
    (2_200_000, -300_000, -350_000),
    (2_500_000, -150_000, -300_000),
    (2_350_000, -600_000, -250_000),
)

# Share of total revenue by payer; "other" takes the remainder.
PAYER_SHARES: Dict[HospitalType, Tuple[float, float, float]] = {
    HospitalType.GENERAL: (0.45, 0.38, 0.07),
    HospitalType.SPECIALTY: (0.40, 0.46, 0.05),
    HospitalType.PEDIATRIC: (0.55, 0.32, 0.04),
    HospitalType.TRAUMA: (0.48, 0.30, 0.10),
}
PAYER_VARIATION_PERCENT = 5

MEDICAID_SHARE: Dict[HospitalType, float] = {
    HospitalType.GENERAL: 0.16,
    HospitalType.SPECIALTY: 0.11,
    HospitalType.PEDIATRIC: 0.28,
    HospitalType.TRAUMA: 0.19,
}
OTHER_STATE_PROGRAM_SHARE = 0.04

ASSET_BASES = {
    "cash_and_equivalents": 28_000_000,
    "short_term_investments": 9_000_000,
    "long_term_investments": 42_000_000,
    "accounts_receivable": 14_000_000,
    "inventory": 2_500_000,
    "property_plant_equipment": 65_000_000,
    "other_assets": 4_500_000,
}

# (Moody's, S&P, Fitch)
BOND_RATINGS: Dict[HospitalType, Tuple[str, str, str]] = {
    HospitalType.GENERAL: ("Aa3", "AA-", "AA-"),
    HospitalType.SPECIALTY: ("A1", "A+", "A+"),
    HospitalType.PEDIATRIC: ("A2", "A", "A"),
    HospitalType.TRAUMA: ("A3", "A-", "A-"),
}
OUTLOOKS = ("stable", "stable", "positive", "negative")


class DatasetAssembler:
    """Build a FinancialRecord from scaled base figures.

    Every base figure is multiplied by the period and hospital-type scale,
    varied, and combined through the InvariantEnforcer so that derived
    figures (net income, profit, totals, percentages) are exact.
    """

    def __init__(
        self,
        generator: VariationGenerator,
        enforcer: Optional[InvariantEnforcer] = None,
        events: Iterable[ContextualEvent] = CONTEXTUAL_EVENTS,
    ):
        self.generator = generator
        self.enforcer = enforcer or InvariantEnforcer()
        self.events = tuple(events)

    def assemble(self, hospital: Hospital, year: int) -> FinancialRecord:
        """Generate the full record for ``hospital`` in ``year``."""
        scale = ScaleFactors.for_pair(hospital, year)
        year_end = date(year, 12, 31)

        metrics = self._summary_metrics(scale)
        total_revenue = int(metrics[0].value)
        revenue_data = self._monthly_revenue(scale)
        annual_expenses = sum(entry.expenses for entry in revenue_data)
        ebida = self._ebida(scale)

        record = FinancialRecord(
            hospital_id=hospital.id,
            year=year,
            last_updated=year_end,
            financial_metrics=metrics,
            revenue_data=revenue_data,
            department_finances=self._departments(hospital, scale),
            patient_metrics=self._patient_metrics(scale),
            expense_breakdown=self._expense_breakdown(scale),
            cash_flow_data=self._cash_flow(year, scale),
            payer_mix=self._payer_mix(hospital, total_revenue),
            ebida_metrics=ebida,
            donation_data=self._donations(scale),
            financial_assets=self._assets(scale, annual_expenses),
            bond_ratings=self._bond_ratings(hospital, scale, ebida, year_end),
            state_program_dependency=self._state_programs(hospital, total_revenue),
            contextual_events=self._events_for(hospital, year_end),
        )

        logger.debug("Assembled financial record",
                     hospital_id=hospital.id,
                     year=year,
                     scale=scale,
                     total_revenue=total_revenue)
        return record

    def _metric(self, metric_id: str, value: float, fmt: MetricFormat) -> FinancialMetric:
        title, change_base, change_spread, p_increase = SUMMARY_CHANGES[metric_id]
        return FinancialMetric(
            id=metric_id,
            title=title,
            value=value,
            change=self.generator.vary(change_base, change_spread),
            change_type=ChangeType.INCREASE if self.generator.chance(p_increase) else ChangeType.DECREASE,
            format=fmt,
        )

    def _summary_metrics(self, scale: float) -> Tuple[FinancialMetric, ...]:
        revenue = self.generator.vary(ANNUAL_REVENUE_BASE * scale)
        expenses = self.generator.vary(ANNUAL_EXPENSES_BASE * scale)
        profit = self.enforcer.difference(revenue, expenses)
        margin = self.enforcer.margin(profit, revenue)

        return (
            self._metric("total-revenue", revenue, MetricFormat.CURRENCY),
            self._metric("net-profit", profit, MetricFormat.CURRENCY),
            self._metric("profit-margin", margin, MetricFormat.PERCENTAGE),
            self._metric("operating-expenses", expenses, MetricFormat.CURRENCY),
        )

    def _monthly_revenue(self, scale: float) -> Tuple[MonthlyRevenue, ...]:
        entries = []
        for month, revenue_base, expenses_base in MONTHLY_BASES:
            revenue = self.generator.vary(revenue_base * scale)
            expenses = self.generator.vary(expenses_base * scale)
            entries.append(MonthlyRevenue(
                month=month,
                revenue=revenue,
                expenses=expenses,
                net_income=self.enforcer.difference(revenue, expenses),
            ))
        return tuple(entries)

    def _departments(self, hospital: Hospital, scale: float) -> Tuple[DepartmentFinance, ...]:
        departments = []
        names = DEPARTMENT_NAMES[hospital.type]
        for name, (revenue_base, expenses_base) in zip(names, DEPARTMENT_BASES):
            revenue = self.generator.vary(revenue_base * scale)
            expenses = self.generator.vary(expenses_base * scale)
            profit = self.enforcer.difference(revenue, expenses)
            departments.append(DepartmentFinance(
                department=name,
                revenue=revenue,
                expenses=expenses,
                profit=profit,
                profit_margin=self.enforcer.margin(profit, revenue),
            ))
        return tuple(departments)

    def _patient_metrics(self, scale: float) -> PatientMetrics:
        inpatients = self.generator.vary(2180 * scale, 25)
        outpatients = self.generator.vary(11850 * scale, 20)
        emergency_visits = self.generator.vary(1390 * scale, 30)
        return PatientMetrics(
            total_patients=self.enforcer.total(inpatients, outpatients, emergency_visits),
            inpatients=inpatients,
            outpatients=outpatients,
            emergency_visits=emergency_visits,
            average_stay_duration=self.generator.vary(42, 15) / 10,
            occupancy_rate=float(min(100, self.generator.vary(87.5, 10))),
        )

    def _expense_breakdown(self, scale: float) -> Tuple[ExpenseCategory, ...]:
        # Floor of one unit keeps the breakdown total away from zero.
        amounts = [max(1, self.generator.vary(base * scale)) for _, base, _ in EXPENSE_CATEGORIES]
        shares = self.enforcer.percentages(amounts)
        return tuple(
            ExpenseCategory(category=name, amount=amount, percentage=share, color=color)
            for (name, _, color), amount, share in zip(EXPENSE_CATEGORIES, amounts, shares)
        )

    def _cash_flow(self, year: int, scale: float) -> Tuple[CashFlowPeriod, ...]:
        periods = []
        for month, (operating_base, investing_base, financing_base) in enumerate(CASH_FLOW_BASES, start=1):
            operating = self.generator.vary(operating_base * scale)
            investing = self.generator.vary(investing_base * scale)
            financing = self.generator.vary(financing_base * scale)
            periods.append(CashFlowPeriod(
                date=f"{year}-{month:02d}",
                operating_cash_flow=operating,
                investing_cash_flow=investing,
                financing_cash_flow=financing,
                net_cash_flow=self.enforcer.total(operating, investing, financing),
            ))
        return tuple(periods)

    def _payer_mix(self, hospital: Hospital, total_revenue: int) -> PayerMix:
        government_share, commercial_share, self_pay_share = PAYER_SHARES[hospital.type]
        government = self.generator.vary(total_revenue * government_share, PAYER_VARIATION_PERCENT)
        commercial = self.generator.vary(total_revenue * commercial_share, PAYER_VARIATION_PERCENT)
        self_pay = self.generator.vary(total_revenue * self_pay_share, PAYER_VARIATION_PERCENT)
        other = self.enforcer.difference(total_revenue, government + commercial + self_pay)

        shares = self.enforcer.percentages([government, commercial, self_pay, other])
        return PayerMix(
            government=government,
            commercial=commercial,
            self_pay=self_pay,
            other=other,
            total_revenue=total_revenue,
            government_percent=shares[0],
            commercial_percent=shares[1],
            self_pay_percent=shares[2],
            other_percent=shares[3],
        )

    def _ebida(self, scale: float) -> EBIDAMetrics:
        operating_income = self.generator.vary(1_800_000 * scale)
        depreciation = self.generator.vary(650_000 * scale)
        interest = self.generator.vary(220_000 * scale)
        return EBIDAMetrics(
            operating_income=operating_income,
            depreciation=depreciation,
            interest=interest,
            ebida=self.enforcer.total(operating_income, depreciation, interest),
        )

    def _donations(self, scale: float) -> DonationMetrics:
        new_donations = self.generator.vary(850_000 * scale)
        released = self.generator.vary(400_000 * scale)
        return DonationMetrics(
            new_donations=new_donations,
            released_from_restrictions=released,
            total_donations=self.enforcer.total(new_donations, released),
            change=float(self.generator.vary(6.5, 80)),
        )

    def _assets(self, scale: float, annual_expenses: int) -> FinancialAssets:
        values = {name: self.generator.vary(base * scale) for name, base in ASSET_BASES.items()}
        daily_expenses = annual_expenses / 365
        days_cash = round(values["cash_and_equivalents"] / daily_expenses) if daily_expenses > 0 else 0
        return FinancialAssets(
            total_assets=self.enforcer.total(*values.values()),
            days_cash_on_hand=days_cash,
            **values,
        )

    def _bond_ratings(
        self,
        hospital: Hospital,
        scale: float,
        ebida: EBIDAMetrics,
        year_end: date,
    ) -> BondRatings:
        moodys, sp, fitch = BOND_RATINGS[hospital.type]
        coverage = ebida.ebida / ebida.interest if ebida.interest else 0.0
        return BondRatings(
            moodys_rating=moodys,
            sp_rating=sp,
            fitch_rating=fitch,
            outlook=self.generator.choice(OUTLOOKS),
            debt_outstanding=self.generator.vary(85_000_000 * scale),
            interest_coverage_ratio=coverage,
            last_updated=year_end,
        )

    def _state_programs(self, hospital: Hospital, total_revenue: int) -> StateProgramDependency:
        medicaid = self.generator.vary(total_revenue * MEDICAID_SHARE[hospital.type])
        other_programs = self.generator.vary(total_revenue * OTHER_STATE_PROGRAM_SHARE)
        total_state = self.enforcer.total(medicaid, other_programs)
        return StateProgramDependency(
            medicaid_revenue=medicaid,
            other_state_programs=other_programs,
            total_state_revenue=total_state,
            dependency_percentage=self.enforcer.share_of(total_state, total_revenue),
        )

    def _events_for(self, hospital: Hospital, year_end: date) -> Tuple[ContextualEvent, ...]:
        """Events for this hospital (or all hospitals) dated on or before year end."""
        selected: List[ContextualEvent] = [
            event for event in self.events
            if event.date <= year_end and event.hospital_id in (None, hospital.id)
        ]
        return tuple(sorted(selected, key=lambda event: event.date))
