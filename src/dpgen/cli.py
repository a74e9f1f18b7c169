from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from dpgen.config import load_generator_config
from dpgen.exceptions import SymbolGraphError
from dpgen.ingest.registry import load_graph_document
from dpgen.order_contract import canonical_payload
from dpgen.pipeline import GenerationResult, run_document
from dpgen.schema import DiagnosticDTO, GenerationResponse
from dpgen.timeout_context import TimeoutExceeded, generation_scope

EXIT_OK = 0
EXIT_DIAGNOSTICS = 1
EXIT_INVALID_INPUT = 2
EXIT_TIMEOUT = 3

app = typer.Typer(add_completion=False, help="Synthesize WPF dependency-property boilerplate.")


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


def _overrides(nullable: Optional[bool], order: Optional[str]) -> dict[str, object]:
    overrides: dict[str, object] = {}
    if nullable is not None:
        overrides["nullable_context"] = nullable
    if order is not None:
        if order not in {"source", "sorted"}:
            raise typer.BadParameter(
                f"order must be 'source' or 'sorted', not {order!r}",
                param_hint="--order",
            )
        overrides["order"] = order
    return overrides


def _run(
    graph_path: Path,
    *,
    config: Optional[Path],
    nullable: Optional[bool],
    order: Optional[str],
    timeout_ms: int,
    graph_format: Optional[str],
) -> GenerationResult:
    generator_config = load_generator_config(
        root=graph_path.parent,
        config_path=config,
        overrides=_overrides(nullable, order),
    )
    try:
        document = load_graph_document(graph_path, format_id=graph_format)
    except (OSError, SymbolGraphError) as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=EXIT_INVALID_INPUT) from exc
    try:
        with generation_scope(timeout_ms=timeout_ms):
            return run_document(document, config=generator_config)
    except TimeoutExceeded as exc:
        typer.echo(f"error: {exc} ({exc.context.reason})", err=True)
        raise typer.Exit(code=EXIT_TIMEOUT) from exc


def _response(result: GenerationResult) -> GenerationResponse:
    errors = []
    if not result.preconditions_met:
        errors.append("required framework types are missing from the symbol graph")
    return GenerationResponse(
        artifact_name=result.artifact.name if result.artifact is not None else None,
        source=result.artifact.source if result.artifact is not None else None,
        admitted=result.admitted,
        diagnostics=[
            DiagnosticDTO.model_validate(diagnostic.as_payload())
            for diagnostic in result.diagnostics
        ],
        errors=errors,
    )


def _echo_diagnostics(result: GenerationResult) -> None:
    for diagnostic in result.diagnostics:
        typer.echo(f"{diagnostic.severity} {diagnostic.code}: {diagnostic.message}", err=True)


@app.command()
def generate(
    graph: Path = typer.Argument(..., help="Symbol graph document."),
    out: Optional[Path] = typer.Option(
        None, "--out", "-o", help="Output file, or '-' for stdout. Defaults to the artifact name."
    ),
    config: Optional[Path] = typer.Option(None, "--config"),
    nullable: Optional[bool] = typer.Option(None, "--nullable/--no-nullable"),
    order: Optional[str] = typer.Option(None, "--order", help="'source' or 'sorted'."),
    timeout_ms: int = typer.Option(120_000, "--timeout-ms", min=1),
    graph_format: Optional[str] = typer.Option(None, "--format"),
    json_output: bool = typer.Option(False, "--json", help="Print a JSON response payload."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Generate dependency-property declarations for GRAPH."""
    _configure_logging(verbose)
    result = _run(
        graph,
        config=config,
        nullable=nullable,
        order=order,
        timeout_ms=timeout_ms,
        graph_format=graph_format,
    )
    if json_output:
        typer.echo(json.dumps(canonical_payload(_response(result).model_dump()), indent=2))
        return
    _echo_diagnostics(result)
    if result.artifact is None:
        typer.echo("No dependency properties to generate.", err=True)
        return
    if out is not None and str(out) == "-":
        typer.echo(result.artifact.source, nl=False)
        return
    target = out if out is not None else graph.parent / result.artifact.name
    target.write_text(result.artifact.source, encoding="utf-8")
    typer.echo(f"Wrote {target}")


@app.command()
def check(
    graph: Path = typer.Argument(..., help="Symbol graph document."),
    config: Optional[Path] = typer.Option(None, "--config"),
    timeout_ms: int = typer.Option(120_000, "--timeout-ms", min=1),
    graph_format: Optional[str] = typer.Option(None, "--format"),
    json_output: bool = typer.Option(False, "--json"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Report diagnostics for GRAPH without writing any output."""
    _configure_logging(verbose)
    result = _run(
        graph,
        config=config,
        nullable=None,
        order=None,
        timeout_ms=timeout_ms,
        graph_format=graph_format,
    )
    if json_output:
        payload = _response(result).model_dump(include={"admitted", "diagnostics", "errors"})
        typer.echo(json.dumps(canonical_payload(payload), indent=2))
    else:
        _echo_diagnostics(result)
        typer.echo(f"{len(result.requests)} admitted, {len(result.diagnostics)} diagnostics")
    if result.diagnostics:
        raise typer.Exit(code=EXIT_DIAGNOSTICS)


def main() -> None:
    app()
