"""
Command-line interface for the options strategy risk engine.

This CLI provides access to:
- Full strategy evaluation from a JSON request document
- Expiration profit/loss of a single option
- Profit/loss curve export as CSV
- The strategy catalog

Exit codes: 0 on success, 1 on validation failure or a request that
cannot be evaluated, 2 on usage errors.
"""

import json
import logging
import sys
from datetime import date

import click

from options_risk.core.catalog import STRATEGY_CONFIG
from options_risk.core.curve import curve_frame
from options_risk.core.evaluation import evaluate_strategy
from options_risk.core.payoff import profit_loss
from options_risk.core.serialization import evaluation_to_dict, request_from_dict
from options_risk.utils.exceptions import InputValidationError, OptionsRiskError
from options_risk.utils.logging import configure_logging
from options_risk.utils.types import OptionLeg

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _evaluate_document(input_file, today, workers):
    """Decode and evaluate a request, exiting with status 1 on bad input."""
    try:
        document = json.load(input_file)
        symbol, underlying_price, strategy, market_data = request_from_dict(document)
        return evaluate_strategy(
            symbol,
            underlying_price,
            strategy,
            market_data,
            today=today.date() if today else None,
            max_workers=workers,
        )
    except InputValidationError as e:
        errors = [{"field": error.field, "message": error.message} for error in e.errors]
        click.echo(json.dumps({"errors": errors}, indent=2), err=True)
        sys.exit(1)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON: {e}")
    except (OptionsRiskError, ValueError) as e:
        raise click.ClickException(str(e))


@click.group()
@click.version_option(version="1.0.0")
@click.option("--log-level", type=click.Choice(LOG_LEVELS), default="WARNING", help="Log verbosity")
def cli(log_level):
    """Options Strategy Risk Engine - payoff, Greeks and probability analysis."""
    configure_logging(getattr(logging, log_level))


@cli.command()
@click.argument("input_file", type=click.File("r"))
@click.option("--today", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Reference date for expiry windows (default: today)")
@click.option("--workers", "-w", type=int, default=None, help="Threads for curve generation")
def analyze(input_file, today, workers):
    """Evaluate a strategy request (JSON file or '-' for stdin)."""
    evaluation = _evaluate_document(input_file, today, workers)
    click.echo(json.dumps(evaluation_to_dict(evaluation), indent=2))


@cli.command()
@click.argument("input_file", type=click.File("r"))
@click.option("--today", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Reference date for expiry windows (default: today)")
@click.option("--workers", "-w", type=int, default=None, help="Threads for curve generation")
def curve(input_file, today, workers):
    """Write the profit/loss curve of a strategy request as CSV."""
    evaluation = _evaluate_document(input_file, today, workers)
    frame = curve_frame(evaluation.risk_profile.profit_loss_curve)
    click.echo(frame.to_csv(index=False), nl=False)


@cli.command()
@click.option("--type", "-t", "kind", type=click.Choice(["call", "put"]), default="call")
@click.option("--position", "-p", type=click.Choice(["long", "short"]), default="long")
@click.option("--strike", "-K", type=str, required=True, help="Strike price")
@click.option("--premium", "-c", type=str, required=True, help="Premium per share")
@click.option("--quantity", "-q", type=int, default=1, help="Number of contracts")
@click.option("--price", "-S", type=str, required=True, help="Underlying price at expiration")
def payoff(kind, position, strike, premium, quantity, price):
    """Calculate the expiration profit/loss of a single option."""
    try:
        # Expiry does not affect the expiration payoff
        leg = OptionLeg(kind, position, strike, premium, quantity, date.today())
        result = profit_loss(price, [leg])
    except ValueError as e:
        raise click.ClickException(str(e))

    click.echo(f"\n{position.capitalize()} {kind} profit/loss at ${price}: ${result:,.2f}")


@cli.command()
def strategies():
    """List supported strategy variants."""
    click.echo(f"\n{'Variant':<16} {'Legs':>4}  {'Risk':<7} {'Profit':<10} Name")
    for variant, config in STRATEGY_CONFIG.items():
        click.echo(
            f"{variant.value:<16} {config.max_legs:>4}  {config.risk_level:<7} "
            f"{config.profit_potential:<10} {config.name}"
        )


if __name__ == "__main__":
    cli()
