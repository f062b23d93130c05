"""Arithmetic invariants for composite financial figures.

Composite values are never varied on their own. Components are varied
independently and the composite is derived from them, so relationships
such as ``net = revenue - expenses`` hold by construction. Percentage
breakdowns are quantized to a fixed number of decimal places and the
rounding residue is absorbed by the final category, which keeps the
total at exactly 100 while the underlying amounts stay as generated.
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence, Tuple

import structlog

from ...core.exceptions import InvariantViolationError
from ...core.models import FinancialRecord

logger = structlog.get_logger(__name__)

HUNDRED = Decimal(100)
MARGIN_TOLERANCE = 1e-9


class InvariantEnforcer:
    """Derive composite values so their invariants hold exactly."""

    def __init__(self, percentage_places: int = 2):
        if percentage_places < 0:
            raise ValueError("percentage_places must not be negative")
        self.percentage_places = percentage_places
        self.quantum = Decimal(1).scaleb(-percentage_places)

    @staticmethod
    def difference(minuend: int, subtrahend: int) -> int:
        return minuend - subtrahend

    @staticmethod
    def total(*addends: int) -> int:
        return sum(addends)

    @staticmethod
    def margin(profit: float, revenue: float) -> float:
        """Profit as a percentage of revenue."""
        return InvariantEnforcer.share_of(profit, revenue)

    @staticmethod
    def share_of(part: float, whole: float) -> float:
        """``part`` as a percentage of ``whole``; a zero ``whole`` is rejected."""
        if whole == 0:
            raise InvariantViolationError(
                "Cannot compute a percentage of zero",
                details={"part": part, "whole": whole},
            )
        return part / whole * 100

    def percentages(self, amounts: Sequence[int]) -> Tuple[Decimal, ...]:
        """Share of each amount in the total, summing to exactly 100."""
        if not amounts:
            raise InvariantViolationError("Cannot build a percentage breakdown with no categories")
        if any(amount < 0 for amount in amounts):
            raise InvariantViolationError(
                "Percentage breakdown amounts must not be negative",
                details={"amounts": list(amounts)},
            )

        total = sum(amounts)
        if total == 0:
            raise InvariantViolationError(
                "Percentage breakdown total is zero",
                details={"amounts": list(amounts)},
            )

        total_dec = Decimal(total)
        shares = [
            (Decimal(amount) * HUNDRED / total_dec).quantize(self.quantum, rounding=ROUND_HALF_UP)
            for amount in amounts[:-1]
        ]
        shares.append(HUNDRED - sum(shares, Decimal(0)))
        return tuple(shares)

    def verify(self, record: FinancialRecord) -> None:
        """Check every invariant on an assembled record.

        Raises InvariantViolationError on the first relationship that does
        not hold.
        """
        key = {"hospital_id": record.hospital_id, "year": record.year}

        for entry in record.revenue_data:
            if entry.net_income != entry.revenue - entry.expenses:
                self._fail("Monthly net income mismatch", key, month=entry.month)

        for dept in record.department_finances:
            if dept.profit != dept.revenue - dept.expenses:
                self._fail("Department profit mismatch", key, department=dept.department)
            if not math.isclose(dept.profit_margin, self.margin(dept.profit, dept.revenue),
                                abs_tol=MARGIN_TOLERANCE):
                self._fail("Department margin mismatch", key, department=dept.department)

        revenue = record.metric("total-revenue")
        expenses = record.metric("operating-expenses")
        profit = record.metric("net-profit")
        margin = record.metric("profit-margin")
        if None in (revenue, expenses, profit, margin):
            self._fail("Summary metrics incomplete", key)
        if profit.value != revenue.value - expenses.value:
            self._fail("Annual net profit mismatch", key)
        if not math.isclose(margin.value, self.margin(profit.value, revenue.value),
                            abs_tol=MARGIN_TOLERANCE):
            self._fail("Annual profit margin mismatch", key)

        self._verify_breakdown(
            [item.amount for item in record.expense_breakdown],
            [item.percentage for item in record.expense_breakdown],
            "expense breakdown",
            key,
        )

        mix = record.payer_mix
        if sum(mix.amounts()) != mix.total_revenue:
            self._fail("Payer mix does not sum to total revenue", key)
        self._verify_breakdown(list(mix.amounts()), list(mix.percentages()), "payer mix", key)

        for period in record.cash_flow_data:
            expected = period.operating_cash_flow + period.investing_cash_flow + period.financing_cash_flow
            if period.net_cash_flow != expected:
                self._fail("Net cash flow mismatch", key, period=period.date)

        ebida = record.ebida_metrics
        if ebida.ebida != ebida.operating_income + ebida.depreciation + ebida.interest:
            self._fail("EBIDA mismatch", key)

        donations = record.donation_data
        if donations.total_donations != donations.new_donations + donations.released_from_restrictions:
            self._fail("Donation total mismatch", key)

        assets = record.financial_assets
        if assets.total_assets != sum(assets.components()):
            self._fail("Total assets mismatch", key)

        state = record.state_program_dependency
        if state.total_state_revenue != state.medicaid_revenue + state.other_state_programs:
            self._fail("State program revenue mismatch", key)

    def _verify_breakdown(self, amounts, shares, label, key) -> None:
        if sum(shares, Decimal(0)) != HUNDRED:
            self._fail(f"Percentages in {label} do not sum to 100", key)

        # Each share may be off by half a quantum; the last one carries the
        # residue of all the others.
        total = Decimal(sum(amounts))
        tolerance = self.quantum * len(amounts)
        for amount, share in zip(amounts, shares):
            if abs(Decimal(amount) * HUNDRED / total - share) > tolerance:
                self._fail(f"Percentage in {label} does not match its amount", key)

    @staticmethod
    def _fail(message: str, key, **extra) -> None:
        details = dict(key, **extra)
        logger.error("Invariant violated", reason=message, **details)
        raise InvariantViolationError(message, details=details)
