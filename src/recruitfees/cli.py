"""Typer CLI entrypoint for the fee engine."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from pydantic import ValidationError

from .container import create_container
from .core import InvalidHeadcountError
from .logging import configure_logging
from .pipeline import JobOrderLoader
from .rates import DEFAULT_RATES_ENDPOINT, HTTPRateClient
from .schemas import load_config

app = typer.Typer(help="Job-order fee and revenue calculator.")


def _load_settings(config: Optional[Path]) -> dict[str, Any]:
    if not config:
        return {}
    with config.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, dict):
        raise typer.BadParameter("Config file must be a YAML object", param_name="config")
    try:
        return load_config(loaded).to_settings()
    except ValidationError as exc:
        raise typer.BadParameter(str(exc), param_name="config") from exc


def _build_container(settings: dict[str, Any], live_rates: bool, rates_endpoint: str):
    rate_table = None
    if live_rates:
        base_currency = settings.get("engine", {}).get("base_currency", "UGX")
        rate_table = HTTPRateClient(rates_endpoint, base_currency=base_currency).fetch()
    return create_container(settings=settings, rate_table=rate_table)


@app.command()
def run(
    orders: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Job orders JSONL path."),
    output: Path = typer.Option(
        ...,
        exists=False,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Output JSON path.",
    ),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    live_rates: bool = typer.Option(False, help="Fetch exchange rates before computing."),
    rates_endpoint: str = typer.Option(DEFAULT_RATES_ENDPOINT, help="Exchange-rate API endpoint."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
) -> None:
    """Quote every job order in a JSONL file."""
    settings = _load_settings(config)
    configure_logging(log_level)

    container = _build_container(settings, live_rates, rates_endpoint)
    pipeline = container.pipeline()

    results = pipeline.run(orders_path=orders, output_path=output)
    typer.echo(f"Quoted {len(results)} job orders. Results saved to {output}.")


@app.command()
def quote(
    order: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Job order JSON path."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    summary: bool = typer.Option(False, help="Print the formatted job-order summary instead of raw amounts."),
    live_rates: bool = typer.Option(False, help="Fetch exchange rates before computing."),
    rates_endpoint: str = typer.Option(DEFAULT_RATES_ENDPOINT, help="Exchange-rate API endpoint."),
    log_level: str = typer.Option("WARNING", help="Log level for structured logging."),
) -> None:
    """Compute the financial breakdown of a single job order."""
    settings = _load_settings(config)
    configure_logging(log_level)

    try:
        record = json.loads(order.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"Invalid job order JSON: {exc}", param_name="order") from exc
    if not isinstance(record, dict):
        raise typer.BadParameter("Job order must be a JSON object", param_name="order")

    container = _build_container(settings, live_rates, rates_endpoint)
    loader = JobOrderLoader(container.adapter_registry())
    try:
        job_order = loader.parse(record)
    except (KeyError, ValidationError) as exc:
        typer.echo(f"Invalid job order: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    try:
        result = container.pipeline().quote(job_order)
    except InvalidHeadcountError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    payload = result["summary"] if summary else result["breakdown"]
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
