"""variant-inspector: faceted filtering and HGVS annotation of variant calls."""

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .annotations import BackendClient
from .config import ConfigValidationError, InspectorConfig, load_config
from .errors import InspectorError, LookupFailure, MissingContextError
from .facets import NO_QUALITY
from .index import VariantIndex
from .models import ALL, Facet
from .notifications import ConsoleNotificationSink
from .report_marks import JsonReportStore, ReportMarkSet
from .session import VariantListSession

logger = logging.getLogger(__name__)


def version_callback(value: bool) -> None:
    if value:
        print(__version__)
        raise typer.Exit()


app = typer.Typer(
    name="variant-inspector", help="Filter, count and annotate clinical variant calls"
)
console = Console()


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version", callback=version_callback, is_eager=True, help="Show version and exit"
        ),
    ] = None,
) -> None:
    pass


def setup_logging(verbose: bool, quiet: bool, default_level: str = "INFO") -> None:
    """Configure logging based on verbosity flags.

    The flags win over ``default_level``, which normally comes from the
    config file's ``log_level``.
    """
    level: int | str
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = default_level.upper()

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("variant_inspector").setLevel(level)


def get_default_store_path() -> Path:
    return Path.home() / ".variant-inspector" / "report_marks.json"


def _load_config(config_path: Path | None) -> InspectorConfig:
    if config_path is None:
        return InspectorConfig()
    try:
        return load_config(config_path)
    except (FileNotFoundError, ConfigValidationError) as e:
        console.print(f"[red]Config Error: {e}[/red]")
        raise typer.Exit(1) from None


def _open_report_marks(store_path: Path) -> ReportMarkSet:
    try:
        return ReportMarkSet(JsonReportStore(store_path))
    except InspectorError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None


def _load_index(variants_file: Path) -> VariantIndex:
    try:
        return VariantIndex.from_file(variants_file)
    except FileNotFoundError:
        console.print(f"[red]Error: Variant file not found: {variants_file}[/red]")
        raise typer.Exit(1) from None
    except InspectorError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None


def _build_session(
    variants_file: Path,
    config: InspectorConfig,
    client: BackendClient,
    job_id: str | None = None,
    variant_type: str | None = None,
    patient: str | None = None,
    quality: str | None = None,
    consequence: str | None = None,
    search: str | None = None,
) -> VariantListSession:
    session = VariantListSession(
        client,
        job_id=job_id,
        notifier=ConsoleNotificationSink(console),
        default_quality=config.default_quality,
    )
    session.load(_load_index(variants_file))

    if variant_type:
        session.set_type(variant_type)
    if patient:
        session.set_patient(patient)
    if quality:
        session.set_quality(quality)
    if consequence:
        session.set_consequence(consequence)
    if search:
        session.set_search(search)
    return session


TypeOption = Annotated[str | None, typer.Option("--type", "-t", help="Variant type facet")]
PatientOption = Annotated[str | None, typer.Option("--patient", "-p", help="Patient facet")]
QualityOption = Annotated[
    str | None,
    typer.Option("--quality", help="Quality facet (defaults to PASS when present, 'All' to clear)"),
]
ConsequenceOption = Annotated[
    str | None, typer.Option("--consequence", "-c", help="Consequence facet")
]
SearchOption = Annotated[str | None, typer.Option("--search", "-s", help="Free-text search")]
ConfigOption = Annotated[
    Path | None, typer.Option("--config", help="TOML configuration file")
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")]
QuietOption = Annotated[bool, typer.Option("--quiet", "-q", help="Suppress non-error output")]


@app.command("filter")
def filter_variants(
    variants_file: Path = typer.Argument(..., help="Analysis result JSON or VCF file"),
    variant_type: TypeOption = None,
    patient: PatientOption = None,
    quality: QualityOption = None,
    consequence: ConsequenceOption = None,
    search: SearchOption = None,
    job_id: Annotated[str | None, typer.Option("--job-id", help="Analysis job ID")] = None,
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
) -> None:
    """Show the variants that pass the selected facets and search text."""
    config = _load_config(config_path)
    setup_logging(verbose, quiet, config.log_level)
    client = BackendClient(config.backend_url, timeout=config.request_timeout)
    session = _build_session(
        variants_file, config, client, job_id, variant_type, patient, quality, consequence, search
    )

    store_path = config.report_store_path or get_default_store_path()
    session.report_marks = _open_report_marks(store_path)

    table = Table(title=f"{session.total_count} of {len(session.index)} variants")
    table.add_column("Variant")
    table.add_column("Type")
    table.add_column("Patients")
    table.add_column("Quality")
    table.add_column("Consequence")
    table.add_column("Report")
    table.add_column("Comments")

    for v in session.filtered:
        table.add_row(
            session.display_name(v),
            v.type,
            ", ".join(v.involved_patients),
            v.filter or NO_QUALITY,
            v.consequence or "",
            "✓" if session.is_marked_for_report(v) else "",
            str(len(session.comments_for(v)) or ""),
        )

    console.print(table)
    state = session.state
    if state.is_neutral:
        console.print("[dim]No filters applied[/dim]")
    else:
        console.print(
            f"[dim]type={state.type} patient={state.patient} quality={state.quality} "
            f"consequence={state.consequence} search={state.search!r}[/dim]"
        )


@app.command("facets")
def facets(
    variants_file: Path = typer.Argument(..., help="Analysis result JSON or VCF file"),
    variant_type: TypeOption = None,
    patient: PatientOption = None,
    quality: QualityOption = None,
    consequence: ConsequenceOption = None,
    search: SearchOption = None,
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
) -> None:
    """Show per-value counts for each facet, ignoring that facet's own filter."""
    config = _load_config(config_path)
    setup_logging(verbose, quiet, config.log_level)
    client = BackendClient(config.backend_url, timeout=config.request_timeout)
    session = _build_session(
        variants_file, config, client, None, variant_type, patient, quality, consequence, search
    )

    for facet in Facet:
        counts = session.facet_counts(facet)
        selected = session.state.get(facet)
        console.print(f"[cyan]{facet.value.title()}[/cyan] (selected: {selected})")
        console.print(f"  {ALL}: {counts.get(ALL, 0):,}")
        for value in sorted(k for k in counts if k != ALL):
            console.print(f"  {value}: {counts[value]:,}")
        console.print()


@app.command("alternatives")
def alternatives(
    variants_file: Path = typer.Argument(..., help="Analysis result JSON or VCF file"),
    position: int = typer.Argument(..., help="Position of the variant to annotate"),
    job_id: Annotated[
        str | None, typer.Option("--job-id", help="Save the alternatives to this job")
    ] = None,
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
) -> None:
    """Fetch alternative HGVS names for the variant at POSITION."""
    config = _load_config(config_path)
    setup_logging(verbose, quiet, config.log_level)

    async def run_lookup() -> list[str]:
        async with BackendClient(config.backend_url, timeout=config.request_timeout) as client:
            session = _build_session(variants_file, config, client, job_id)

            persisted: dict[str, list[str]] = {}
            if job_id:
                try:
                    persisted = await client.fetch_job_alternatives(job_id)
                except LookupFailure as e:
                    logger.warning("Could not load saved alternatives: %s", e)
            if persisted:
                session.load(session.index, persisted)

            matches = session.index.find_by_position(position)
            if not matches:
                console.print(f"[red]No variant at position {position}[/red]")
                raise typer.Exit(1)

            record = matches[0]
            await session.request_alternatives(record)
            state = session.hgvs_state(record)
            if state is not None and state.error:
                raise typer.Exit(1)
            return session.resolve_hgvs(record)

    names = asyncio.run(run_lookup())
    if not names:
        console.print("[dim]No HGVS names available[/dim]")
    for name in names:
        console.print(name)


@app.command("mark")
def mark(
    job_id: str = typer.Argument(..., help="Analysis job ID"),
    position: int = typer.Argument(..., help="Variant position to toggle"),
    store: Annotated[
        Path | None, typer.Option("--store", help="Report marks JSON file")
    ] = None,
    config_path: ConfigOption = None,
) -> None:
    """Toggle whether the variant at POSITION is marked for the job's report."""
    config = _load_config(config_path)
    setup_logging(False, False, config.log_level)
    store_path = store or config.report_store_path or get_default_store_path()
    report_marks = _open_report_marks(store_path)

    try:
        marked = report_marks.toggle(job_id, position)
    except MissingContextError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    if marked:
        console.print(f"[green]✓ Added {position} to report for job {job_id}[/green]")
    else:
        console.print(f"[yellow]Removed {position} from report for job {job_id}[/yellow]")

    positions = report_marks.marked_positions(job_id)
    console.print(f"Marked positions: {', '.join(str(p) for p in positions) or 'none'}")


if __name__ == "__main__":
    app()
