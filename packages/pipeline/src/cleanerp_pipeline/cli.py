"""
cli.py — Click CLI entrypoint for CleanERP bulk data work.

Usage:
    cleanerp import-sites sites.csv --client-id 6f1c... --dry-run
    cleanerp convert 500 weekly monthly
    cleanerp convert -120 fortnightly weekly
    cleanerp breakdown 2165 monthly --currency AUD
"""

from __future__ import annotations

from pathlib import Path

import click
import structlog

from cleanerp_shared.billing import (
    calculate_all_billing_frequencies,
    convert_billing_amount,
    format_currency,
)
from cleanerp_shared.config import settings
from cleanerp_shared.constants import BILLING_FREQUENCIES
from cleanerp_shared.log_config import configure_logging

log = structlog.get_logger(__name__)

_FREQUENCY = click.Choice(list(BILLING_FREQUENCIES), case_sensitive=False)
# Lets a negative AMOUNT such as -50 through as an argument
_SIGNED_AMOUNT = {"ignore_unknown_options": True}


@click.group()
@click.option(
    "--log-level",
    default=settings.log_level,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level",
)
def main(log_level: str) -> None:
    """CleanERP command-line tools."""
    configure_logging(log_level=log_level)


@main.command("import-sites")
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--client-id", default=None, help="Client for rows without a client_id column.")
@click.option(
    "--batch-size",
    default=settings.import_batch_size,
    show_default=True,
    type=click.IntRange(min=1),
    help="Rows per insert request.",
)
@click.option("--dry-run", is_flag=True, help="Validate only, do not write to Supabase.")
def import_sites(csv_path: Path, client_id: str | None, batch_size: int, dry_run: bool) -> None:
    """Import sites from CSV_PATH."""
    from cleanerp_pipeline.loaders.site_importer import SiteImporter

    log.info("import_sites_start", path=str(csv_path), dry_run=dry_run)
    result = SiteImporter(batch_size=batch_size).run(
        csv_path, client_id=client_id, dry_run=dry_run
    )

    for reject in result.rejects:
        click.echo(f"  ✗ {reject.describe()}", err=True)
    for error in result.errors:
        click.echo(f"  ✗ {error}", err=True)

    click.echo(
        f"Rows read: {result.rows_read}  valid: {result.rows_valid}  "
        f"rejected: {len(result.rejects)}"
    )
    if dry_run:
        click.echo("Dry run: nothing written.")
    else:
        click.echo(
            f"Inserted: {result.records_loaded}  failed: {result.records_failed}  "
            f"({result.batches_failed}/{result.batches_total} batches failed)"
        )

    if result.status == "failure":
        raise SystemExit(1)


@main.command(context_settings=_SIGNED_AMOUNT)
@click.argument("amount", type=float)
@click.argument("from_frequency", metavar="FROM", type=_FREQUENCY)
@click.argument("to_frequency", metavar="TO", type=_FREQUENCY)
def convert(amount: float, from_frequency: str, to_frequency: str) -> None:
    """Convert AMOUNT quoted FROM one billing frequency TO another."""
    converted = convert_billing_amount(amount, from_frequency.lower(), to_frequency.lower())
    click.echo(f"{converted:.2f}")


@main.command(context_settings=_SIGNED_AMOUNT)
@click.argument("amount", type=float)
@click.argument("frequency", type=_FREQUENCY, default="weekly")
@click.option("--currency", default=settings.default_currency, show_default=True)
def breakdown(amount: float, frequency: str, currency: str) -> None:
    """Show weekly, monthly and annual equivalents of AMOUNT."""
    values = calculate_all_billing_frequencies(amount, frequency.lower())
    for period, value in values.to_dict().items():
        click.echo(f"{period:<9} {format_currency(value, currency):>14}")


if __name__ == "__main__":
    main()
