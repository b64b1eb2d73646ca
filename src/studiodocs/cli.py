"""studiodocs CLI: render studio documents from JSON requests."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from datetime import date
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from . import __version__
from .config import EngineConfig
from .core.categories import CATEGORY_COLORS, CATEGORY_LABELS, Category
from .core.formatting import format_date
from .core.models import DocumentKind, Modality, ScheduleRequest, ServiceType
from .core.timeline import RULE_TABLE, build_timeline
from .engine import DocumentEngine
from .generators.themes import list_themes, to_hex

console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _config(company: str | None, image_timeout: float | None) -> EngineConfig:
    config = EngineConfig.from_env()
    if company:
        config = replace(config, company_name=company)
    if image_timeout is not None:
        config = replace(config, image_timeout=image_timeout)
    return config


def _report(result, output_dir: str) -> None:
    if not result.success:
        label = result.kind.value if result.kind else "render"
        console.print(f"[bold red]✗ {label} failed:[/] {escape(result.error or '')}")
        raise SystemExit(1)
    path = result.save(output_dir)
    console.print(f"[green]✓[/] {path}  [dim]({len(result.data):,} bytes, {result.mime_type})[/dim]")


@click.group()
@click.version_option(version=__version__, prog_name="studiodocs")
def main():
    """studiodocs: budget, shopping-list, proposal and schedule documents."""
    pass


@main.command()
@click.argument("kind", type=click.Choice([k.value for k in DocumentKind], case_sensitive=False))
@click.argument("request_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o", "--output",
    "output_dir",
    type=click.Path(file_okay=False),
    default="./output",
    help="Output directory (default: ./output).",
)
@click.option(
    "--theme",
    "theme_name",
    type=click.Choice([t.name for t in list_themes()], case_sensitive=False),
    default=None,
    help="Override the theme named in the request.",
)
@click.option(
    "--company",
    envvar="STUDIODOCS_COMPANY_NAME",
    default=None,
    help="Studio name printed on documents (or set STUDIODOCS_COMPANY_NAME).",
)
@click.option("--image-timeout", type=float, default=None, help="Seconds per image download.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Debug logging.")
def render(
    kind: str,
    request_file: Path,
    output_dir: str,
    theme_name: str | None,
    company: str | None,
    image_timeout: float | None,
    verbose: bool,
):
    """Render KIND from the JSON request in REQUEST_FILE."""
    _setup_logging(verbose)
    try:
        payload = json.loads(request_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        console.print(f"[bold red]✗ {request_file} is not valid JSON:[/] {escape(str(exc))}")
        raise SystemExit(2)
    if theme_name:
        payload["theme"] = theme_name

    engine = DocumentEngine(_config(company, image_timeout))
    with console.status(f"[bold blue]Rendering {kind}…"):
        result = engine.render(kind, payload)
    _report(result, output_dir)


@main.command()
@click.argument("service", type=click.Choice([s.value for s in ServiceType], case_sensitive=False))
@click.option(
    "--start",
    "start",
    type=click.DateTime(formats=["%Y-%m-%d", "%d/%m/%Y"]),
    default=None,
    help="Project start date (default: today).",
)
@click.option(
    "--modality",
    type=click.Choice([m.value for m in Modality], case_sensitive=False),
    default=Modality.ONLINE.value,
    show_default=True,
)
@click.option("--rooms", type=click.IntRange(1, 10), default=1, show_default=True)
@click.option("--client", "client", default="Cliente", help="Client name for rendered documents.")
@click.option(
    "--render",
    "render_as",
    type=click.Choice(["none", "pdf", "pptx"], case_sensitive=False),
    default="none",
    help="Also render the schedule as a document.",
)
@click.option("-o", "--output", "output_dir", type=click.Path(file_okay=False), default="./output")
@click.option("-v", "--verbose", is_flag=True, default=False)
def schedule(
    service: str,
    start,
    modality: str,
    rooms: int,
    client: str,
    render_as: str,
    output_dir: str,
    verbose: bool,
):
    """Print the delivery timeline of SERVICE (optionally render it)."""
    from rich.table import Table as RichTable

    _setup_logging(verbose)
    request = ScheduleRequest(
        client=client,
        service_type=ServiceType(service),
        modality=Modality(modality),
        rooms=rooms,
        start_date=start.date() if start else date.today(),
    )
    timeline = build_timeline(request)

    table = RichTable(title=f"{timeline.label} · regras {RULE_TABLE.version}")
    table.add_column("Data", style="bold")
    table.add_column("Dia")
    table.add_column("Etapa")
    table.add_column("Descrição", style="dim")
    for m in timeline.milestones:
        table.add_row(
            format_date(m.date),
            m.weekday,
            f"[bold cyan]{m.title}[/]" if m.milestone else m.title,
            m.description,
        )
    console.print(table)
    console.print(
        f"[bold]{timeline.total_days}[/] dias · reuniões: [bold]{timeline.meetings}[/] · "
        f"entrega: [bold]{timeline.final_delivery}[/]"
    )

    if render_as != "none":
        kind = DocumentKind.SCHEDULE_PDF if render_as == "pdf" else DocumentKind.SCHEDULE_DECK
        engine = DocumentEngine(EngineConfig.from_env())
        _report(engine.render(kind, request), output_dir)


@main.command()
def themes():
    """List available document themes."""
    from rich.table import Table as RichTable

    table = RichTable(title="Available Themes", show_lines=False)
    table.add_column("Name", style="bold cyan")
    table.add_column("Primary Color", style="bold")
    table.add_column("Accent Color", style="bold")
    table.add_column("Fonts")
    table.add_column("Description", style="dim")

    for t in list_themes():
        p_hex = f"#{to_hex(t.colors.primary)}"
        a_hex = f"#{to_hex(t.colors.accent)}"
        table.add_row(
            t.name,
            f"[{p_hex}]██ {p_hex}[/]",
            f"[{a_hex}]██ {a_hex}[/]",
            f"{t.fonts.heading} / {t.fonts.body}",
            t.description,
        )

    console.print(table)


@main.command()
def categories():
    """List item categories with their labels and colors."""
    from rich.table import Table as RichTable

    table = RichTable(title="Categories")
    table.add_column("Key", style="bold cyan")
    table.add_column("Label")
    table.add_column("Color")
    for category in Category:
        color = f"#{CATEGORY_COLORS[category]}"
        table.add_row(category.value, CATEGORY_LABELS[category], f"[{color}]██ {color}[/]")
    console.print(table)


@main.command()
def kinds():
    """List document kinds, their formats and filename prefixes."""
    from rich.table import Table as RichTable

    table = RichTable(title="Document Kinds")
    table.add_column("Kind", style="bold cyan")
    table.add_column("Format")
    table.add_column("Filename")
    for kind in DocumentKind:
        fmt = kind.output_format
        table.add_row(kind.value, fmt.value, f"{kind.filename_prefix}-<cliente>.{fmt.extension}")
    console.print(table)


if __name__ == "__main__":
    main()
