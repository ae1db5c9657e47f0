"""CLI interface for ArtPivot.

Uses Click for command parsing and Rich for output formatting.
"""

import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from artpivot.extractors.document import DocumentExtractor, MissingCredentialError
from artpivot.extractors.llm_fallback import LLMExtractionError
from artpivot.extractors.reader import DocumentReadError, UnsupportedFormatError, read_document_text
from artpivot.settings import get_settings
from artpivot.storage.database import Database
from artpivot.timeline import format_year
from artpivot.validation.schemas import AIConfig, ArtworkCreate

console = Console()
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
@click.option("--db", "db_path", default=None, help="Database path (default: DATABASE_PATH setting).")
@click.pass_context
def cli(ctx, verbose, db_path):
    """ArtPivot — Catalogue artworks and periods on a timeline."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["db"] = Database(db_path or get_settings().database_path)
    ctx.obj["db"].create_tables()


@cli.command()
@click.pass_context
def migrate(ctx):
    """Add any tables or columns missing from an older database."""
    from artpivot.storage.migrations import migrate as run_migrate

    db: Database = ctx.obj["db"]
    applied = run_migrate(db.engine)
    if not applied:
        console.print("[green]Schema is up to date.[/green]")
        return
    for change in applied:
        console.print(f"  {change}")
    console.print(f"Applied [green]{len(applied)}[/green] changes.")


@cli.command()
@click.pass_context
def seed(ctx):
    """Insert the demo periods and artworks."""
    db: Database = ctx.obj["db"]
    result = db.seed()
    console.print(
        f"Periods: [green]{result['periods']}[/green], "
        f"new artworks: [green]{result['artworks_inserted']}[/green]"
    )


@cli.command()
@click.pass_context
def stats(ctx):
    """Show catalogue statistics."""
    db: Database = ctx.obj["db"]
    s = db.stats()

    table = Table(title="ArtPivot — Catalogue Stats")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")

    table.add_row("Periods", str(s["total_periods"]))
    table.add_row("Artworks", str(s["total_artworks"]))
    table.add_row("Artworks without a period", str(s["unassigned_artworks"]))
    table.add_row("Extraction runs", str(s["total_extractions"]))

    console.print(table)


@cli.command("list-periods")
@click.pass_context
def list_periods(ctx):
    """List periods in timeline order."""
    db: Database = ctx.obj["db"]
    periods = db.list_periods()
    if not periods:
        console.print("[yellow]No periods found.[/yellow]")
        return

    table = Table(title=f"Periods ({len(periods)})")
    table.add_column("Name", style="cyan")
    table.add_column("From", justify="right")
    table.add_column("To", justify="right")
    table.add_column("ID", style="dim")
    for p in periods:
        table.add_row(p.name, format_year(p.start_year), format_year(p.end_year), p.id)
    console.print(table)


@cli.command("list-artworks")
@click.option("--period", "period_id", default=None, help="Only artworks in this period ID.")
@click.option("--limit", default=50, help="Number of records to show.")
@click.pass_context
def list_artworks(ctx, period_id, limit):
    """List artworks in timeline order."""
    db: Database = ctx.obj["db"]
    artworks = db.list_artworks(period_id=period_id)[:limit]
    if not artworks:
        console.print("[yellow]No artworks found.[/yellow]")
        return

    period_names = {p.id: p.name for p in db.list_periods()}

    table = Table(title=f"Artworks (showing {len(artworks)})")
    table.add_column("Year", style="cyan", justify="right")
    table.add_column("Title", max_width=40)
    table.add_column("Artist", style="green")
    table.add_column("Period")
    for a in artworks:
        # Dangling period ids render the same as no period
        period = period_names.get(a.period_id, "[dim]no period[/dim]")
        table.add_row(format_year(a.year), a.title, a.artist, period)
    console.print(table)


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--api-key", envvar="OPENAI_API_KEY", default=None, help="Key for the AI fallback.")
@click.option("--model", default=None, help="Model for the AI fallback.")
@click.option("--base-url", default=None, help="Chat-completions base URL for the AI fallback.")
@click.option("--save", is_flag=True, help="Add the extracted artworks to the catalogue.")
@click.option("--period", "period_id", default=None, help="Period ID for saved artworks.")
@click.pass_context
def extract(ctx, path, api_key, model, base_url, save, period_id):
    """Extract artworks from a .docx/.txt document."""
    db: Database = ctx.obj["db"]

    try:
        text = read_document_text(path)
    except (UnsupportedFormatError, DocumentReadError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    extractor = DocumentExtractor(record_history=db.record_extraction)
    config = AIConfig(api_key=api_key, model=model, base_url=base_url)
    try:
        result = extractor.extract(text, ai_config=config, filename=path.name)
    except MissingCredentialError:
        console.print(
            "[red]Error:[/red] No IMAGES entries found locally; "
            "pass --api-key (or set OPENAI_API_KEY) for AI extraction."
        )
        sys.exit(1)
    except LLMExtractionError as e:
        console.print(f"[red]AI extraction failed:[/red] {e}")
        sys.exit(1)

    table = Table(title=f"{path.name}: {len(result.artworks)} artworks ({result.source})")
    table.add_column("Year", style="cyan", justify="right")
    table.add_column("Artist", style="green")
    table.add_column("Title", max_width=50)
    for a in result.artworks:
        year = a.get("year") if isinstance(a, dict) else None
        table.add_row(
            format_year(year) if isinstance(year, int) else "?",
            str(a.get("artist", "")) if isinstance(a, dict) else "",
            str(a.get("title", "")) if isinstance(a, dict) else str(a),
        )
    console.print(table)

    if save:
        saved = _save_artworks(db, result.artworks, period_id)
        console.print(f"Saved [green]{saved}[/green] artworks to the catalogue.")


def _save_artworks(db: Database, artworks: list, period_id: str | None) -> int:
    """Store extracted artworks, skipping any the schema rejects."""
    saved = 0
    for raw in artworks:
        if not isinstance(raw, dict):
            continue
        try:
            payload = ArtworkCreate.model_validate({**raw, "periodId": period_id})
        except ValidationError as e:
            logger.warning("Skipping %r: %s", raw.get("title"), e)
            continue
        db.create_artwork(**payload.model_dump())
        saved += 1
    return saved


@cli.command()
@click.option("--limit", default=20, help="Number of records to show.")
@click.pass_context
def history(ctx, limit):
    """Show recent extraction runs."""
    db: Database = ctx.obj["db"]
    records = db.list_history(limit=limit)
    if not records:
        console.print("[yellow]No extraction runs recorded.[/yellow]")
        return

    table = Table(title="Extraction History")
    table.add_column("When", style="cyan")
    table.add_column("File")
    for r in records:
        table.add_row(r.created_at.strftime("%Y-%m-%d %H:%M:%S"), r.filename)
    console.print(table)


@cli.command()
@click.option("--host", default="127.0.0.1", help="Interface to bind.")
@click.option("--port", default=5001, help="Port for the API server.")
@click.pass_context
def serve(ctx, host, port):
    """Run the HTTP API."""
    import uvicorn

    from artpivot.api.routes import configure_db
    from artpivot.api.server import app

    configure_db(ctx.obj["db"])
    console.print(f"Serving API at [cyan]http://{host}:{port}/api[/cyan]")
    uvicorn.run(app, host=host, port=port)


@cli.command()
@click.option("--port", default=8501, help="Port for the dashboard.")
@click.pass_context
def dashboard(ctx, port):
    """Launch the Streamlit timeline dashboard."""
    import os
    import subprocess

    dashboard_path = Path(__file__).parent / "dashboard" / "app.py"
    console.print(f"Launching dashboard at [cyan]http://localhost:{port}[/cyan]")
    env = {**os.environ, "DATABASE_PATH": str(ctx.obj["db"].db_path)}
    subprocess.run(
        [sys.executable, "-m", "streamlit", "run", str(dashboard_path), "--server.port", str(port)],
        check=True,
        env=env,
    )


if __name__ == "__main__":
    cli()
