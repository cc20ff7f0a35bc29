"""Typer CLI entrypoint for the résumé parser."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional

import typer
from pydantic import ValidationError

from .config import ConfigError, load_settings
from .container import ParserContainer, create_container
from .logging import configure_logging
from .schemas import UploadedDocument

app = typer.Typer(help="Résumé parsing CLI with adapter fallback and benchmarking.")


def _build_container(config: Optional[Path], log_level: str) -> ParserContainer:
    try:
        settings = load_settings(config).to_settings()
    except (ConfigError, ValidationError) as exc:
        raise typer.BadParameter(str(exc), param_hint="'--config'") from exc
    configure_logging(log_level)
    return create_container(settings=settings)


def _write(payload: dict[str, Any], output: Optional[Path]) -> None:
    rendered = json.dumps(payload, ensure_ascii=False, indent=2)
    if output is None:
        typer.echo(rendered)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(rendered + "\n", encoding="utf-8")


def _finish(payload: dict[str, Any], output: Optional[Path]) -> None:
    _write(payload, output)
    if not payload.get("success"):
        raise typer.Exit(code=1)


@app.command()
def parse(
    file: Path = typer.Argument(..., exists=True, readable=True, dir_okay=False, help="Résumé file to parse."),
    media_type: Optional[str] = typer.Option(None, help="Declared media type; sniffed from the file when omitted."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    output: Optional[Path] = typer.Option(None, dir_okay=False, help="Write the JSON envelope here instead of stdout."),
) -> None:
    """Parse one résumé through the adapter fallback chain."""
    container = _build_container(config, log_level)
    document = UploadedDocument.from_path(file, media_type=media_type)
    _finish(container.service().parse(document), output)


@app.command()
def benchmark(
    files: List[Path] = typer.Argument(..., exists=True, readable=True, dir_okay=False, help="Résumé files to benchmark."),
    media_type: Optional[str] = typer.Option(None, help="Declared media type applied to every file."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    output: Optional[Path] = typer.Option(None, dir_okay=False, help="Write the JSON envelope here instead of stdout."),
) -> None:
    """Run every applicable adapter and compare their results."""
    container = _build_container(config, log_level)
    service = container.service()
    documents = [UploadedDocument.from_path(path, media_type=media_type) for path in files]
    if len(documents) == 1:
        payload = service.benchmark(documents[0])
    else:
        payload = service.benchmark_many(documents)
    _finish(payload, output)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
