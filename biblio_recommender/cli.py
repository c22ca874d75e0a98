"""
biblio-recommender — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load the loan ledger and book catalog.
  4. Run one recommendation engine with explicit parameters.
  5. Print an ASCII table (and optionally write CSV + JSON reports).

Install and run::

    pip install -e .
    biblio-recommender --help
    biblio-recommender validate-config
    biblio-recommender trending --window-days 7 --limit 10
    biblio-recommender for-member 2021001 --limit 5
    biblio-recommender similar B1 --limit 5 --output-dir data/outputs
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, Optional

import typer

app = typer.Typer(
    name="biblio-recommender",
    help="Library loan analytics — trending, content-based and collaborative recommendations.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from pydantic import ValidationError

    from biblio_recommender.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except (ValidationError, ValueError) as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from biblio_recommender.utils.logging import configure_logging
    configure_logging(config.logging)


def _parse_as_of_or_exit(as_of: Optional[str]) -> Optional[date]:
    if as_of is None:
        return None
    try:
        return date.fromisoformat(as_of)
    except ValueError:
        typer.echo(f"[ERROR] --as-of must be YYYY-MM-DD, got '{as_of}'.", err=True)
        raise typer.Exit(code=1)


def _load_data_or_exit(config, ledger_file: Optional[str], catalog_file: Optional[str]):
    """Load (loans, catalog), exiting with code 1 on any boundary error."""
    from biblio_recommender.ingestion.catalog import load_catalog
    from biblio_recommender.ingestion.ledger import load_ledger

    ledger_path = Path(ledger_file or config.data.ledger_file)
    catalog_path = Path(catalog_file or config.data.catalog_file)

    try:
        loans = load_ledger(ledger_path)
        catalog = load_catalog(catalog_path)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Loaded {len(loans)} loan(s) and {len(catalog)} book(s).")
    return loans, catalog


def _emit(entries, heading: str, label: str, output_dir: Optional[str], params: dict[str, Any]):
    """Print the table and write reports when an output dir is given."""
    from biblio_recommender.recommendations.reporter import (
        write_recommendations_csv,
        write_recommendations_json,
    )
    from biblio_recommender.reporting.formatters import format_recommendation_table

    typer.echo(format_recommendation_table(entries, heading))

    if output_dir:
        out = Path(output_dir)
        csv_path = write_recommendations_csv(entries, out, label)
        json_path = write_recommendations_json(entries, out, label, params=params)
        typer.echo("")
        typer.echo(f"  CSV:  {csv_path}")
        typer.echo(f"  JSON: {json_path}")


_LEDGER_OPTION = typer.Option(None, "--ledger", help="Loan ledger file (.csv or .json).")
_CATALOG_OPTION = typer.Option(None, "--catalog", help="Book catalog file (.csv or .json).")
_AS_OF_OPTION = typer.Option(
    None, "--as-of", help="Evaluation date YYYY-MM-DD (default: today, UTC).",
)
_OUTPUT_OPTION = typer.Option(
    None, "--output-dir", help="Also write CSV + JSON reports to this directory.",
)
_CONFIG_OPTION = typer.Option(None, "--config", help="Path to TOML config file.")


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Ledger file:      {config.data.ledger_file}")
    typer.echo(f"  Catalog file:     {config.data.catalog_file}")
    typer.echo(f"  Trending window:  {config.recommendations.trending_window_days} day(s)")
    typer.echo(f"  Trending limit:   {config.recommendations.trending_limit}")
    typer.echo(f"  Personal limit:   {config.recommendations.personal_limit}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("trending")
def trending_cmd(
    window_days: Optional[int] = typer.Option(
        None, "--window-days", help="Trailing window in days (default from config).",
    ),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-n", help="Max results (default from config).",
    ),
    as_of: Optional[str] = _AS_OF_OPTION,
    ledger_file: Optional[str] = _LEDGER_OPTION,
    catalog_file: Optional[str] = _CATALOG_OPTION,
    output_dir: Optional[str] = _OUTPUT_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Most-borrowed books within a trailing window."""
    from biblio_recommender.recommendations.trending import trending

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    as_of_date = _parse_as_of_or_exit(as_of)

    window = window_days if window_days is not None else config.recommendations.trending_window_days
    n = limit if limit is not None else config.recommendations.trending_limit

    loans, catalog = _load_data_or_exit(config, ledger_file, catalog_file)
    entries = trending(loans, catalog, window, n, as_of=as_of_date)

    _emit(
        entries,
        heading=f"Trending (last {window} days)",
        label="trending",
        output_dir=output_dir,
        params={"window_days": window, "limit": n, "as_of": as_of_date},
    )


@app.command("for-member")
def for_member(
    member_id: str = typer.Argument(..., help="Member identifier."),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-n", help="Max results (default from config).",
    ),
    as_of: Optional[str] = _AS_OF_OPTION,
    ledger_file: Optional[str] = _LEDGER_OPTION,
    catalog_file: Optional[str] = _CATALOG_OPTION,
    output_dir: Optional[str] = _OUTPUT_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Content-based picks from a member's favourite categories."""
    from biblio_recommender.recommendations.content import content_based

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    as_of_date = _parse_as_of_or_exit(as_of)

    n = limit if limit is not None else config.recommendations.personal_limit
    window = config.recommendations.trending_window_days

    loans, catalog = _load_data_or_exit(config, ledger_file, catalog_file)
    entries = content_based(
        member_id, loans, catalog, n, as_of=as_of_date, fallback_window_days=window,
    )

    _emit(
        entries,
        heading=f"For member {member_id}",
        label=f"member-{member_id}",
        output_dir=output_dir,
        params={"member_id": member_id, "limit": n, "as_of": as_of_date},
    )


@app.command("similar")
def similar(
    book_id: str = typer.Argument(..., help="Query book identifier."),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-n", help="Max results (default from config).",
    ),
    as_of: Optional[str] = _AS_OF_OPTION,
    ledger_file: Optional[str] = _LEDGER_OPTION,
    catalog_file: Optional[str] = _CATALOG_OPTION,
    output_dir: Optional[str] = _OUTPUT_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Books also borrowed by readers of BOOK_ID."""
    from biblio_recommender.recommendations.collaborative import collaborative

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    as_of_date = _parse_as_of_or_exit(as_of)

    n = limit if limit is not None else config.recommendations.personal_limit
    window = config.recommendations.trending_window_days

    loans, catalog = _load_data_or_exit(config, ledger_file, catalog_file)
    entries = collaborative(
        book_id, loans, catalog, n, as_of=as_of_date, fallback_window_days=window,
    )

    title = catalog[book_id].title if book_id in catalog else book_id
    _emit(
        entries,
        heading=f"Readers of '{title}' also borrowed",
        label=f"book-{book_id}",
        output_dir=output_dir,
        params={"book_id": book_id, "limit": n, "as_of": as_of_date},
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
