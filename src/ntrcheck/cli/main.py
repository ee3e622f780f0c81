"""CLI entry point."""

import logging

import typer

from ntrcheck.cli.analyze import analyze_cmd
from ntrcheck.cli.settings_cmd import app as settings_app

app = typer.Typer(
    name="ntrcheck",
    help="ntrcheck — Mondo new term request analyzer",
    no_args_is_help=True,
)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log pipeline stages")):
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


app.command(name="analyze")(analyze_cmd)
app.add_typer(settings_app, name="settings", help="Manage the stored OpenAI API key")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Bind host"),
    port: int = typer.Option(8420, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
) -> None:
    """Start the broker / analysis API server."""
    try:
        import uvicorn
    except ImportError:
        typer.echo("Error: uvicorn not installed. Run: pip install 'ntrcheck[server]'", err=True)
        raise typer.Exit(1)

    typer.echo(f"Starting ntrcheck server on {host}:{port}")
    uvicorn.run(
        "ntrcheck.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
