"""ntrcheck settings — manage the stored OpenAI API key."""

import asyncio

import typer
from rich.console import Console

from ntrcheck.config import config
from ntrcheck.host.settings_store import JsonFileSettingsStore

app = typer.Typer(no_args_is_help=True)
console = Console()


def _store() -> JsonFileSettingsStore:
    return JsonFileSettingsStore(config.settings_store.path)


def _mask(key: str) -> str:
    return f"{key[:3]}...{key[-4:]}" if len(key) > 10 else "****"


@app.command("set-key")
def set_key(api_key: str = typer.Argument(..., help="OpenAI API key")):
    """Save the OpenAI API key."""
    try:
        asyncio.run(_store().set(config.settings_store.api_key_name, api_key))
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)
    console.print("[green]API Key saved successfully![/green]")


@app.command("show")
def show():
    """Show whether an API key is stored."""
    key = asyncio.run(_store().get(config.settings_store.api_key_name))
    console.print(f"Settings file: {config.settings_store.path}")
    console.print(f"Model:         {config.llm.model}")
    if key:
        console.print(f"API key:       {_mask(key)}")
    else:
        console.print("API key:       [yellow]not set[/yellow]")


@app.command("clear")
def clear():
    """Remove the stored API key."""
    asyncio.run(_store().delete(config.settings_store.api_key_name))
    console.print("API key removed.")
