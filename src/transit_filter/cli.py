"""Extract or remove operators/lines from a CSV transit dataset."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from rich.console import Console
from rich.table import Table

from transit_filter.errors import TransitModelError
from transit_filter.filter import Action, FilterReport, FilterSpec, apply_with_report
from transit_filter.filter.filter_spec import parse_filter_token
from transit_filter.model.csv_io import read_model, write_model

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--input", required=True, help="Directory holding the source CSV files.")
    parser.add_argument("--output", required=True, help="Directory receiving the filtered CSV files.")
    parser.add_argument(
        "--action",
        choices=[action.value for action in Action],
        default=None,
        help="Keep (extract) or drop (remove) the selected objects. Defaults to the "
        "config file's action, then to extract.",
    )
    parser.add_argument(
        "--filter",
        dest="filters",
        action="append",
        default=[],
        metavar="TYPE:PROPERTY:VALUE",
        help="Predicate such as operator:operator_id:O1 or line:line_code:12. Repeatable.",
    )
    parser.add_argument(
        "--filter-config",
        default=None,
        help="Optional YAML file with an 'action' and a 'filters' mapping.",
    )
    parser.add_argument(
        "--no-summary",
        action="store_true",
        help="Do not print the summary table.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


def build_spec(args: argparse.Namespace) -> FilterSpec:
    spec = FilterSpec.from_yaml(args.filter_config) if args.filter_config else FilterSpec()
    if args.action:
        spec.action = Action.parse(args.action)
    for token in args.filters:
        spec.add(*parse_filter_token(token))
    return spec


def print_summary_table(report: FilterReport, console: Console | None = None) -> None:
    console = console or Console()
    table = Table(title="Transit Filter Summary", show_header=True, header_style="bold cyan")
    table.add_column("Objects", style="bold")
    table.add_column("Before", justify="right")
    table.add_column("After", justify="right", style="green")
    table.add_column("Removed", justify="right", style="yellow")
    for name, before in report.before.items():
        table.add_row(
            name.replace("_", " ").title(),
            f"{before:,}",
            f"{report.after.get(name, 0):,}",
            f"{report.removed(name):,}",
        )
    console.print(table)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    try:
        spec = build_spec(args)
        model = read_model(args.input)
        report = apply_with_report(model, spec)
        write_model(report.model, args.output)
    except (TransitModelError, ValueError, TypeError, OSError) as exc:
        raise SystemExit(str(exc)) from exc
    if not args.no_summary:
        print_summary_table(report)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
