"""policyscan CLI — run the service or a one-off analysis from a terminal.

Usage:
    python cli/main.py --help

Commands:
    serve    → start the HTTP API (uvicorn)
    analyze  → run the full fetch → sanitize → analyze pipeline for one URL
    clean    → sanitize a file (or stdin) and print the plain text
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from policyscan.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import json
from typing import Optional

import typer

from policyscan.config import settings
from policyscan.errors import PipelineError
from policyscan.logging_config import setup_logging
from policyscan.scraper.sanitizer import sanitize

app = typer.Typer(
    name="policyscan",
    help="Check a web page against a compliance-policy document.",
    no_args_is_help=True,
)


@app.command("serve")
def serve(
    host: str = typer.Option(settings.host, help="Interface to bind."),
    port: int = typer.Option(settings.port, help="Port to listen on."),
) -> None:
    """Start the HTTP API."""
    import uvicorn

    setup_logging(settings.log_level)
    typer.echo(f"[serve] Listening on http://{host}:{port}")
    uvicorn.run("policyscan.api.app:app", host=host, port=port, log_config=None)


@app.command("analyze")
def analyze(
    url: str = typer.Argument(..., help="Bare host+path, e.g. example.com/pricing."),
) -> None:
    """Fetch URL through the rendering proxy and print its compliance report as JSON."""
    from policyscan.analysis.orchestrator import ComplianceAnalyzer

    setup_logging(settings.log_level)
    analyzer = ComplianceAnalyzer(settings)
    try:
        report = asyncio.run(analyzer.analyze_url(url))
    except PipelineError as exc:
        typer.echo(json.dumps(exc.to_payload(), indent=2), err=True)
        raise typer.Exit(1)

    typer.echo(report.model_dump_json(indent=2))


@app.command("clean")
def clean(
    file: Optional[Path] = typer.Option(
        None, "--file", help="File to sanitize. Reads stdin when omitted."
    ),
) -> None:
    """Sanitize markup into the plain text that would be sent to the model."""
    if file is None:
        raw = sys.stdin.read()
    else:
        raw = file.read_text(encoding="utf-8", errors="replace")
    typer.echo(sanitize(raw))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
