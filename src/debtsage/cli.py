"""Command-line interface for DebtSage."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Optional

import click

from .config import BaseConfig
from .domain.repositories.liability import LiabilityRepository
from .infra.database import bootstrap_database
from .infra.repositories.liability import SQLModelLiabilityRepository
from .logging_config import setup_logging
from .services.debt_classification import classify_debts
from .services.debt_manager import DebtManagerData, DebtStrategy, build_debt_manager
from .services.debts import STRATEGIES, DebtAccount
from .services.export_csv import export_payoff_plan_csv, export_timeline_csv
from .services.import_csv import load_debts_csv, to_liabilities
from .utils import format_months, parse_year_month


def _repository(config: BaseConfig) -> LiabilityRepository:
    _, session_factory = bootstrap_database(config)
    return SQLModelLiabilityRepository(session_factory)


def _load_debts(config: BaseConfig, csv_path: Optional[Path]) -> list[DebtAccount]:
    if csv_path is not None:
        try:
            return load_debts_csv(csv_path)
        except (OSError, ValueError) as exc:
            raise click.ClickException(f"Could not read {csv_path}: {exc}") from exc
    liabilities = _repository(config).list_all(user_id=config.USER_ID)
    return [DebtAccount.from_liability(liability) for liability in liabilities]


def _parse_start(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return parse_year_month(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--start") from exc


def _print_strategy(strategy: DebtStrategy, total_debt: float) -> None:
    click.echo(f"{strategy.name.capitalize()}: {strategy.description}")
    click.echo("-" * 72)
    click.echo(f"Time to debt free : {format_months(strategy.total_months)}")
    click.echo(f"Debt-free date    : {strategy.debt_free_date.strftime('%Y-%m')}")
    share = strategy.total_interest_paid / total_debt * 100 if total_debt else 0.0
    click.echo(f"Total interest    : {strategy.total_interest_paid:.2f} ({share:.1f}% of total)")
    if not strategy.converged:
        click.secho(
            "Warning: some debts are not paid off within 30 years at these payments.",
            fg="yellow",
        )
    for rank, item in enumerate(strategy.payoff_order, start=1):
        when = format_months(item.months_to_payoff) if item.paid_off else "not within 30 years"
        click.echo(
            f"  {rank}. {item.name:24s} {item.balance:12.2f} {item.interest_rate:6.2f}%  {when}"
        )
    click.echo("")


def _print_plan(data: DebtManagerData) -> None:
    click.echo("Summary")
    click.echo("-" * 72)
    click.echo(f"Debts              : {data.debts_count}")
    click.echo(f"Total debt         : {data.total_debt:.2f}")
    click.echo(f"Minimum payments   : {data.total_minimum_payments:.2f}")
    click.echo(f"Extra payment      : {data.extra_payment:.2f}")
    click.echo(f"Average rate       : {data.average_interest_rate:.2f}%")
    click.echo(f"Highest rate       : {data.highest_interest_rate:.2f}%")
    click.echo(f"Lowest balance     : {data.lowest_balance:.2f}")
    click.echo("")
    if data.avalanche_strategy is None or data.snowball_strategy is None:
        click.echo("No debts registered.")
        return
    _print_strategy(data.avalanche_strategy, data.total_debt)
    _print_strategy(data.snowball_strategy, data.total_debt)
    click.echo(f"Recommended strategy: {data.recommended_strategy}")
    click.echo(f"Avalanche saves     : {data.potential_savings:.2f} in interest")


@click.group()
@click.option("--verbose", is_flag=True, default=False, help="Log to the console in dev format")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Plan debt payoff with the avalanche and snowball strategies."""
    config = BaseConfig()
    if not verbose:
        # Console shows warnings only unless asked otherwise.
        config.DEV_MODE = False
    setup_logging(config)
    ctx.obj = config


@cli.command()
@click.option("--csv", "csv_path", type=click.Path(path_type=Path), help="Read debts from a CSV file")
@click.option("--extra", "extra", type=float, default=None, help="Extra monthly payment")
@click.option("--start", "start", help="Simulation start month (YYYY-MM)")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the plan as JSON")
@click.pass_obj
def plan(
    config: BaseConfig,
    csv_path: Optional[Path],
    extra: Optional[float],
    start: Optional[str],
    as_json: bool,
) -> None:
    """Compare avalanche and snowball for the current debts."""
    extra_payment = config.EXTRA_PAYMENT if extra is None else extra
    if extra_payment < 0:
        raise click.BadParameter("Extra payment cannot be negative", param_hint="--extra")
    debts = _load_debts(config, csv_path)
    data = build_debt_manager(debts, extra_payment, start_date=_parse_start(start))
    if as_json:
        click.echo(json.dumps(data.to_dict(), indent=2))
    else:
        _print_plan(data)


@cli.command("import-csv")
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def import_csv_command(config: BaseConfig, csv_path: Path) -> None:
    """Store debts from a CSV file as liabilities."""
    debts = _load_debts(config, csv_path)
    repository = _repository(config)
    for liability in to_liabilities(debts, user_id=config.USER_ID):
        repository.create(liability, user_id=config.USER_ID)
    click.echo(f"Imported {len(debts)} debts from {csv_path}")


@cli.command()
@click.pass_obj
def classify(config: BaseConfig) -> None:
    """Split stored debts into good and bad debt."""
    result = classify_debts(_repository(config).list_all(user_id=config.USER_ID))
    click.echo(f"Good debt : {result.total_good_debt:.2f} ({len(result.good_debt)} debts)")
    click.echo(f"Bad debt  : {result.total_bad_debt:.2f} ({len(result.bad_debt)} debts)")
    click.echo(f"Good debt ratio: {result.good_debt_ratio:.1f}%")
    for line in result.recommendations:
        click.echo(f"- {line}")


@cli.command()
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--csv", "csv_path", type=click.Path(path_type=Path), help="Read debts from a CSV file")
@click.option("--extra", "extra", type=float, default=None, help="Extra monthly payment")
@click.option("--start", "start", help="Simulation start month (YYYY-MM)")
@click.option(
    "--timeline",
    "timeline",
    type=click.Choice(list(STRATEGIES)),
    help="Export the monthly balances of one strategy instead of the plan",
)
@click.pass_obj
def export(
    config: BaseConfig,
    output: Path,
    csv_path: Optional[Path],
    extra: Optional[float],
    start: Optional[str],
    timeline: Optional[str],
) -> None:
    """Export the payoff plan to a CSV file."""
    if output.suffix.lower() != ".csv":
        raise click.BadParameter("Export must use .csv extension", param_hint="OUTPUT")
    extra_payment = config.EXTRA_PAYMENT if extra is None else extra
    if extra_payment < 0:
        raise click.BadParameter("Extra payment cannot be negative", param_hint="--extra")
    data = build_debt_manager(
        _load_debts(config, csv_path), extra_payment, start_date=_parse_start(start)
    )
    if timeline:
        strategy = data.strategy(timeline)
        if strategy is None:
            raise click.ClickException("No debts registered; nothing to export.")
        export_timeline_csv(strategy=strategy, output_path=output)
    else:
        export_payoff_plan_csv(data=data, output_path=output)
    click.echo(f"Export written: {output}")


if __name__ == "__main__":
    cli()
