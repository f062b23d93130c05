#!/usr/bin/env python3
"""
Hospital Finance Dataset Inspector

Builds the synthetic catalog and prints what a demo account is allowed to see.

Usage:
    hospital-finance hospitals --user owner-1
    hospital-finance show --user admin-1 --hospital general-1 --year 2024
    hospital-finance peers --user owner-1 --hospital general-1 --year 2024 --seed 42
"""

import argparse
import sys
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .analytics.data_access import Denied, NotFound
from .analytics.financial_health import credit_health_score, ebida_health, liquidity_metrics
from .analytics.peer_comparison import compare_to_peers
from .bootstrap import Application, initialize
from .core.config import Settings
from .core.models import ChangeType, MetricFormat
from .core.reference_data import DEMO_PRINCIPALS
from .core.security.access_control import describe_role
from .core.security.session import demo_principal

EXIT_UNKNOWN_USER = 2
EXIT_DENIED = 3
EXIT_NOT_FOUND = 4

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hospital-finance",
        description="Inspect the synthetic hospital financial catalog",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible catalog")
    parser.add_argument("--log-level", default="WARNING", help="Log level for console output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    hospitals = subparsers.add_parser("hospitals", help="List hospitals the user may select")
    hospitals.add_argument("--user", required=True, help="Demo principal id, e.g. admin-1")

    for name, help_text in (("show", "Show one financial record"),
                            ("peers", "Benchmark a hospital against entitled peers")):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument("--user", required=True, help="Demo principal id, e.g. admin-1")
        command.add_argument("--hospital", required=True, help="Hospital id, e.g. general-1")
        command.add_argument("--year", type=int, required=True, help="Reporting year")

    return parser


def _money(value: float) -> str:
    return f"${value:,.0f}"


def cmd_hospitals(app: Application, args) -> int:
    principal = demo_principal(args.user)
    role = describe_role(principal.role)

    table = Table(title=f"Hospitals for {principal.name} ({role.title if role else principal.role})")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Location")
    table.add_column("Years")

    for hospital in app.data_access.selectable_hospitals(principal):
        years = ", ".join(str(y) for y in app.catalog.years_for(hospital.id))
        table.add_row(hospital.id, hospital.name, hospital.type.value, hospital.location, years)

    console.print(table)
    return 0


def _fetch_or_report(app: Application, args):
    principal = demo_principal(args.user)
    result = app.data_access.fetch(principal, args.hospital, args.year)
    if isinstance(result, Denied):
        console.print(Panel(result.message, title="Not authorized", style="red"))
        return principal, None, EXIT_DENIED
    if isinstance(result, NotFound):
        console.print(Panel(result.message, title="No data", style="yellow"))
        return principal, None, EXIT_NOT_FOUND
    return principal, result, 0


def cmd_show(app: Application, args) -> int:
    _, record, code = _fetch_or_report(app, args)
    if record is None:
        return code

    summary = Table(title=f"{record.hospital_id} · {record.year} (updated {record.last_updated:%B %d, %Y})")
    summary.add_column("Metric")
    summary.add_column("Value", justify="right")
    summary.add_column("Change", justify="right")
    for metric in record.financial_metrics:
        value = f"{metric.value:.1f}%" if metric.format is MetricFormat.PERCENTAGE else _money(metric.value)
        arrow = "↑" if metric.change_type is ChangeType.INCREASE else "↓"
        summary.add_row(metric.title, value, f"{arrow} {metric.change}%")
    console.print(summary)

    departments = Table(title="Department Performance")
    for column in ("Department", "Revenue", "Expenses", "Profit", "Margin"):
        departments.add_column(column, justify="right" if column != "Department" else "left")
    for dept in record.department_finances:
        departments.add_row(dept.department, _money(dept.revenue), _money(dept.expenses),
                            _money(dept.profit), f"{dept.profit_margin:.1f}%")
    console.print(departments)

    expenses = Table(title="Expense Breakdown")
    expenses.add_column("Category")
    expenses.add_column("Amount", justify="right")
    expenses.add_column("Share", justify="right")
    for item in record.expense_breakdown:
        expenses.add_row(item.category, _money(item.amount), f"{item.percentage}%")
    console.print(expenses)

    health = ebida_health(record.ebida_metrics)
    liquidity = liquidity_metrics(record.financial_assets)
    console.print(Panel(
        f"EBIDA {_money(health.ebida)} · interest coverage {health.interest_coverage:.1f}x\n"
        f"Liquidity {liquidity.liquidity_ratio:.1f}% · {liquidity.days_cash_on_hand} days cash on hand\n"
        f"Credit health {credit_health_score(record.bond_ratings)}/100 "
        f"({record.bond_ratings.outlook} outlook)",
        title="Financial Health",
    ))
    return 0


def cmd_peers(app: Application, args) -> int:
    principal, record, code = _fetch_or_report(app, args)
    if record is None:
        return code

    peers = app.data_access.fetch_peers(principal, args.hospital, args.year)
    table = Table(title=f"{record.hospital_id} vs {len(peers)} entitled peer(s), {record.year}")
    for column in ("Metric", "Current", "Peer Avg", "Peer Median", "Percentile"):
        table.add_column(column, justify="right" if column != "Metric" else "left")
    for benchmark in compare_to_peers(record, peers):
        table.add_row(benchmark.title,
                      f"{benchmark.current_value:,.1f}",
                      f"{benchmark.peer_average:,.1f}",
                      f"{benchmark.peer_median:,.1f}",
                      f"{benchmark.percentile:.0f}")
    console.print(table)
    return 0


COMMANDS = {
    "hospitals": cmd_hospitals,
    "show": cmd_show,
    "peers": cmd_peers,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.user not in DEMO_PRINCIPALS:
        console.print(f"[red]ERROR: Unknown user '{args.user}'. "
                      f"Known users: {', '.join(sorted(DEMO_PRINCIPALS))}[/red]")
        return EXIT_UNKNOWN_USER

    settings = Settings(random_seed=args.seed, log_level=args.log_level)
    app = initialize(settings)
    return COMMANDS[args.command](app, args)


if __name__ == "__main__":
    sys.exit(main())
