"""Derived health indicators for the extended financial blocks."""

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from ..core.models import BondRatings, EBIDAMetrics, FinancialAssets, FinancialRecord

# S&P / Fitch ladder.
RATING_SCORES: Dict[str, int] = {
    "AAA": 100, "AA+": 95, "AA": 90, "AA-": 85, "A+": 80, "A": 75, "A-": 70,
    "BBB+": 65, "BBB": 60, "BBB-": 55, "BB+": 50, "BB": 45, "BB-": 40,
    "B+": 35, "B": 30, "B-": 25, "CCC+": 20, "CCC": 15, "CCC-": 10,
    "CC": 5, "C": 2, "D": 0,
}

# Moody's notation mapped onto the same ladder.
MOODYS_EQUIVALENTS: Dict[str, str] = {
    "Aaa": "AAA", "Aa1": "AA+", "Aa2": "AA", "Aa3": "AA-",
    "A1": "A+", "A2": "A", "A3": "A-",
    "Baa1": "BBB+", "Baa2": "BBB", "Baa3": "BBB-",
    "Ba1": "BB+", "Ba2": "BB", "Ba3": "BB-",
    "B1": "B+", "B2": "B", "B3": "B-",
    "Caa1": "CCC+", "Caa2": "CCC", "Caa3": "CCC-",
    "Ca": "CC", "C": "C",
}

HEALTHY_INTEREST_COVERAGE = 2.5


@dataclass(frozen=True)
class EBIDAHealth:
    ebida: int
    interest_coverage: float
    operating_income_positive: bool
    is_healthy: bool


@dataclass(frozen=True)
class LiquidityMetrics:
    liquid_assets: int
    liquidity_ratio: float
    days_cash_on_hand: int


@dataclass(frozen=True)
class EBIDATrend:
    ebida_change: int
    ebida_change_percent: float
    improving: bool
    is_significant: bool


def rating_score(rating: Optional[str]) -> Optional[int]:
    """Ladder score for a rating in either notation; None for NR or unknown."""
    if not rating or rating == "NR":
        return None
    rating = MOODYS_EQUIVALENTS.get(rating, rating)
    return RATING_SCORES.get(rating)


def credit_health_score(bond_ratings: BondRatings) -> int:
    """Average ladder score across the three agencies, rounded."""
    scores = [
        score
        for score in (
            rating_score(bond_ratings.moodys_rating),
            rating_score(bond_ratings.sp_rating),
            rating_score(bond_ratings.fitch_rating),
        )
        if score is not None
    ]
    if not scores:
        return 0
    return round(sum(scores) / len(scores))


def ebida_health(ebida: EBIDAMetrics) -> EBIDAHealth:
    coverage = ebida.ebida / ebida.interest if ebida.interest > 0 else 0.0
    return EBIDAHealth(
        ebida=ebida.ebida,
        interest_coverage=coverage,
        operating_income_positive=ebida.operating_income > 0,
        is_healthy=ebida.ebida > 0 and coverage > HEALTHY_INTEREST_COVERAGE,
    )


def liquidity_metrics(assets: FinancialAssets) -> LiquidityMetrics:
    liquid = assets.cash_and_equivalents + assets.short_term_investments + assets.accounts_receivable
    ratio = liquid / assets.total_assets * 100 if assets.total_assets else 0.0
    return LiquidityMetrics(
        liquid_assets=liquid,
        liquidity_ratio=ratio,
        days_cash_on_hand=assets.days_cash_on_hand,
    )


def ebida_trend(history: Sequence[FinancialRecord]) -> Optional[EBIDATrend]:
    """Year-over-year EBIDA movement between the two most recent records.

    Returns None with fewer than two years of history.
    """
    if len(history) < 2:
        return None

    ordered = sorted(history, key=lambda record: record.year)
    previous = ordered[-2].ebida_metrics.ebida
    latest = ordered[-1].ebida_metrics.ebida
    change = latest - previous
    change_percent = change / abs(previous) * 100 if previous else 0.0
    return EBIDATrend(
        ebida_change=change,
        ebida_change_percent=change_percent,
        improving=change > 0,
        is_significant=abs(change_percent) > 10,
    )
