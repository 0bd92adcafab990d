"""
Supashim - CLI Entry Point.

Usage:
    supashim serve           Start the API server
    supashim health          Check configuration and database
    supashim --help          Show help
"""

import asyncio
import logging
from typing import List, Optional

import typer
from rich.console import Console

app = typer.Typer(
    name="supashim",
    help="Supashim - Knex-style query builder backend on Supabase.",
    add_completion=False,
)
console = Console()


def configure_logging(level: str) -> None:
    """Route all module loggers to stderr at the configured level."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Interface to bind"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to run on"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload for development"),
) -> None:
    """Start the API server."""
    import os

    import uvicorn

    from supashim.config import settings

    configure_logging(settings.log_level)

    # Hosting platforms set PORT
    actual_port = int(os.environ.get("PORT", port))

    console.print("\n[bold green]Supashim API[/bold green]")
    console.print(f"Starting server on http://{host}:{actual_port}")
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    uvicorn.run(
        "supashim.web.app:app",
        host=host,
        port=actual_port,
        reload=reload,
    )


@app.command()
def health(
    tables: Optional[List[str]] = typer.Argument(None, help="Tables to probe for existence"),
) -> None:
    """Check configuration and database reachability."""
    from supashim.config import get_settings

    console.print("\n[bold]Supashim Health Check[/bold]\n")

    try:
        settings = get_settings()
        console.print("✅ Configuration loaded")
        console.print(f"   Environment: {settings.shim_env}")
        console.print(f"   Log level: {settings.log_level}")

        if settings.supabase_url.startswith("https://"):
            console.print("✅ Supabase URL configured")
        else:
            console.print("⚠️  Supabase URL is not https")

        if settings.supabase_service_role_key:
            console.print("✅ Service role key configured")
        else:
            console.print("ℹ️  Service role key missing (logout will fail)")
    except Exception as e:
        console.print(f"\n[red]❌ Configuration error: {e}[/red]")
        console.print("[dim]Make sure you have a .env file with required variables.[/dim]")
        raise typer.Exit(1)

    missing = asyncio.run(_check_database(tables or []))
    if missing:
        console.print(f"\n[yellow]{missing} table(s) not reachable.[/yellow]")
        raise typer.Exit(1)

    console.print("\n[green]All checks passed![/green]")


async def _check_database(tables: list[str]) -> int:
    """Ping the shim and probe each table; return how many were missing."""
    from supashim.db import db

    result = await db.raw("SELECT 1")
    console.print(f"✅ Raw ping: {result}")

    missing = 0
    if tables:
        console.print("\n[bold]Table Status:[/bold]")
    for table in tables:
        # has_table reports permission/network errors as missing too
        if await db.schema.has_table(table):
            console.print(f"  ✅ {table}")
        else:
            console.print(f"  ❌ {table}: missing or not readable")
            missing += 1
    return missing


@app.command()
def version() -> None:
    """Show version information."""
    from supashim import __version__

    console.print(f"Supashim version {__version__}")


if __name__ == "__main__":
    app()
