"""CLI for claimlens: classify / extract / process commands."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from claimlens.core.config import (
    AppSettings,
    ObservabilityConfig,
    PersistenceConfig,
    RulesConfig,
)
from claimlens.core.logging_config import setup_logging
from claimlens.core.startup_checks import validate_settings
from claimlens.domains.claims.classifier import PageClassifier
from claimlens.domains.claims.extractor import FieldExtractor
from claimlens.domains.claims.models import Claim, DocumentType, Page
from claimlens.services.claim_service import create_claim_service
from claimlens.validation.summary import build_claim_summary

app = typer.Typer(name="claimlens", help="Classify, extract and check insurance claim documents")
console = Console()


def _configure_logging(verbose: bool) -> None:
    setup_logging(ObservabilityConfig(log_level="DEBUG" if verbose else "WARNING"))


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise typer.BadParameter(f"Cannot read {path}: {exc}") from exc


def _load_pages(pages_path: Path) -> list[Page]:
    """Load pages from a JSON array of page objects."""
    raw = json.loads(_read_text(pages_path))
    if not isinstance(raw, list):
        raise typer.BadParameter(f"Expected JSON array in {pages_path}")
    base = pages_path.parent
    pages = []
    for number, item in enumerate(raw, start=1):
        item = dict(item)
        item.setdefault("page_number", number)
        source = item.get("source_path")
        if source and not Path(source).is_absolute():
            item["source_path"] = str(base / source)
        try:
            pages.append(Page(**item))
        except ValidationError as exc:
            raise typer.BadParameter(f"Invalid page #{number} in {pages_path}: {exc}") from exc
    return sorted(pages, key=lambda p: p.page_number)


@app.command()
def classify(
    file: Path = typer.Argument(..., help="Text file holding one page"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Classify one page of text."""
    _configure_logging(verbose)
    result = PageClassifier().classify(_read_text(file))

    console.print(f"[bold]Type:[/bold] {result.document_type.value}")
    console.print(f"[bold]Confidence:[/bold] {result.confidence:.2f}")
    console.print(f"[bold]Reason:[/bold] {result.reason}")


@app.command()
def extract(
    kind: str = typer.Argument(..., help="prescription or bill"),
    file: Path = typer.Argument(..., help="Text file holding the document text"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Extract structured fields from a prescription or bill."""
    _configure_logging(verbose)
    if kind not in (DocumentType.PRESCRIPTION.value, DocumentType.BILL.value):
        raise typer.BadParameter("KIND must be 'prescription' or 'bill'")

    fields = FieldExtractor().extract(DocumentType(kind), _read_text(file))
    console.print_json(fields.model_dump_json() if fields is not None else "null")


@app.command()
def process(
    pages_file: Path = typer.Argument(..., help="JSON array of pages"),
    patient: str = typer.Option("Unknown patient", help="Patient name"),
    insurer: str = typer.Option("Unknown insurer", help="Insurer name"),
    policy: Optional[Path] = typer.Option(None, help="Exclusion policy YAML/JSON file"),
    output: Optional[Path] = typer.Option(None, help="Write the scrutiny report JSON here"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Run the whole pipeline over a claim's pages."""
    _configure_logging(verbose)
    settings = AppSettings(
        rules=RulesConfig(policy_path=policy) if policy else RulesConfig(),
        persistence=PersistenceConfig(backend="memory"),
    )
    validate_settings(settings)
    service = create_claim_service(settings)

    pages = _load_pages(pages_file)
    console.print(f"[bold]Loaded {len(pages)} pages from {pages_file}[/bold]")
    claim = service.create_claim(patient, insurer, pages)

    async def _run() -> Claim:
        return await service.process(claim.claim_id)

    claim = asyncio.run(_run())

    _print_pages(claim)
    _print_report(claim)

    if output:
        output.write_bytes(service.export(claim.claim_id))
        console.print(f"[green]Scrutiny report saved to {output}[/green]")


def _print_pages(claim: Claim) -> None:
    table = Table(title="Pages")
    table.add_column("Page", style="cyan", justify="right")
    table.add_column("Type")
    table.add_column("Confidence", justify="right")
    table.add_column("Reason")
    for page in claim.pages:
        table.add_row(
            str(page.page_number),
            page.document_type.value if page.document_type else "-",
            f"{page.confidence:.2f}",
            page.classification_reason,
        )
    console.print(table)


def _print_report(claim: Claim) -> None:
    summary = build_claim_summary(claim)
    report = claim.validation
    if report is None:
        console.print("[yellow]Claim was not evaluated[/yellow]")
        return

    console.print(f"\n[bold]Claim subtype:[/bold] {report.claim_subtype.value}")
    console.print(
        f"[bold]Documents:[/bold] {summary.document_summary.prescriptions} prescription(s), "
        f"{summary.document_summary.bills} bill(s), {summary.document_summary.reports} report(s)"
    )
    console.print(
        f"[bold]Eligible / total:[/bold] {report.eligible_amount:.2f} / {report.total_amount:.2f}"
    )
    if report.policy_source != "builtin":
        console.print(f"[dim]Exclusion policy: {report.policy_source}[/dim]")

    table = Table(title="Findings")
    table.add_column("Severity")
    table.add_column("Type")
    table.add_column("Message")
    styles = {"error": "red", "warning": "yellow", "info": "blue"}
    for issue in [*report.errors, *report.warnings, *report.flags]:
        style = styles[issue.severity.value]
        table.add_row(f"[{style}]{issue.severity.value}[/{style}]", issue.type.value, issue.message)
    console.print(table)

    console.print("\n[bold]Recommendations:[/bold]")
    for line in summary.recommendations:
        console.print(f"  - {line}")


if __name__ == "__main__":
    app()
