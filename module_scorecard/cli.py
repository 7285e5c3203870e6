"""
Command-line interface for Module Scorecard.
"""

from pathlib import Path

import typer
import uvicorn
from rich.console import Console

from module_scorecard.batch import DEFAULT_MAX_CONCURRENT, evaluate_file
from module_scorecard.config import load_config, set_verify_ssl
from module_scorecard.core import evaluate_module
from module_scorecard.errors import InvalidURLError, ScorecardError
from module_scorecard.logger import configure_logging

# --- Typer App ---
app = typer.Typer(help="Trust scorecards for npm packages and GitHub repositories.")
console = Console(stderr=True)


@app.command()
def score(
    url: str | None = typer.Option(
        None,
        "--url",
        "-u",
        help="URL of the module to evaluate (GitHub repository or npm package page).",
    ),
    file: Path | None = typer.Option(
        None,
        "--file",
        "-f",
        help="Path to a file with one URL per line.",
    ),
    max_concurrent: int = typer.Option(
        DEFAULT_MAX_CONCURRENT,
        "--max-concurrent",
        help="Maximum number of URLs from --file evaluated at once.",
    ),
    insecure: bool = typer.Option(
        False,
        "--insecure",
        help="Disable SSL certificate verification for HTTPS requests.",
    ),
):
    """Score a module URL, or every URL in a file. Prints one JSON line per module."""
    if not url and not file:
        console.print("[yellow]⚠️  Provide --url or --file.[/yellow]")
        raise typer.Exit(code=1)

    config = load_config()
    if insecure:
        config = config._replace(verify_ssl=False)
    set_verify_ssl(config.verify_ssl)
    configure_logging(config.log_level, config.log_file)

    exit_code = 0
    try:
        if url:
            try:
                typer.echo(evaluate_module(url, config=config))
            except InvalidURLError as e:
                console.print(f"[red]Error: {e}: {url}[/red]")
                exit_code = 1
            except ScorecardError as e:
                console.print(f"[red]Could not resolve {url}: {e}[/red]")
                exit_code = 1

        if file:
            if not file.is_file():
                console.print(f"[yellow]⚠️  URL file not found: {file}[/yellow]")
                raise typer.Exit(code=1)
            evaluate_file(file, config=config, max_concurrent=max_concurrent, echo=typer.echo)
    except ValueError as e:
        # Missing credential
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    if exit_code:
        raise typer.Exit(code=exit_code)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind."),
    port: int = typer.Option(3000, "--port", "-p", help="Port to listen on."),
):
    """Serve POST /process-url/ over HTTP."""
    from module_scorecard.server import create_app

    config = load_config()
    configure_logging(config.log_level, config.log_file)
    console.print(f"Serving on [bold cyan]http://{host}:{port}/process-url/[/bold cyan]")
    uvicorn.run(create_app(config), host=host, port=port, log_level="warning")


if __name__ == "__main__":
    app()
