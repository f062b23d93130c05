"""Benchmark a hospital's summary metrics against its peers."""

from dataclasses import dataclass
from statistics import mean, median
from typing import Dict, List, Sequence

from ..core.models import FinancialRecord

OPERATIONAL_METRICS = ("occupancy_rate", "average_stay_duration", "total_patients")


@dataclass(frozen=True)
class PeerBenchmark:
    """Where one metric of the current hospital sits among its peers."""
    metric_id: str
    title: str
    current_value: float
    peer_average: float
    peer_median: float
    percentile: float
    peer_count: int


def percentile_rank(value: float, peer_values: Sequence[float]) -> float:
    """Share of the combined population at or below ``value``, in percent.

    The current value is counted as part of the population, so a hospital
    with no peers ranks at 100.
    """
    population = list(peer_values) + [value]
    at_or_below = sum(1 for v in population if v <= value)
    return at_or_below / len(population) * 100


def compare_to_peers(record: FinancialRecord, peers: Sequence[FinancialRecord]) -> List[PeerBenchmark]:
    """Benchmark every summary metric of ``record`` against ``peers``."""
    benchmarks = []
    for metric in record.financial_metrics:
        peer_values = []
        for peer in peers:
            peer_metric = peer.metric(metric.id)
            if peer_metric is not None:
                peer_values.append(float(peer_metric.value))

        benchmarks.append(PeerBenchmark(
            metric_id=metric.id,
            title=metric.title,
            current_value=float(metric.value),
            peer_average=mean(peer_values) if peer_values else 0.0,
            peer_median=median(peer_values + [float(metric.value)]),
            percentile=percentile_rank(float(metric.value), peer_values),
            peer_count=len(peer_values),
        ))
    return benchmarks


def compare_operations(record: FinancialRecord, peers: Sequence[FinancialRecord]) -> Dict[str, PeerBenchmark]:
    """Benchmark occupancy, length of stay and patient volume."""
    benchmarks = {}
    for name in OPERATIONAL_METRICS:
        current = float(getattr(record.patient_metrics, name))
        peer_values = [float(getattr(peer.patient_metrics, name)) for peer in peers]
        benchmarks[name] = PeerBenchmark(
            metric_id=name,
            title=name.replace("_", " ").title(),
            current_value=current,
            peer_average=mean(peer_values) if peer_values else 0.0,
            peer_median=median(peer_values + [current]),
            percentile=percentile_rank(current, peer_values),
            peer_count=len(peer_values),
        )
    return benchmarks
