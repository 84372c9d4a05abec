"""
Intake - CLI Entry Point.

Usage:
    intake serve             Start the wizard web server
    intake db                Check the projects table and storage bucket
    intake version           Show version
"""

import os

import typer
from rich.console import Console

app = typer.Typer(
    name="intake",
    help="Intake - project onboarding wizard.",
    add_completion=False,
)
console = Console()


@app.command()
def serve(
    port: int = typer.Option(8000, "--port", "-p", help="Port to run on"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload for development"),
) -> None:
    """Start the web server."""
    import uvicorn

    # Hosting platforms set PORT
    actual_port = int(os.environ.get("PORT", port))

    console.print("\n[bold green]Intake[/bold green]")
    console.print(f"Starting server on http://localhost:{actual_port}/onboarding")
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    uvicorn.run(
        "intake.web.app:app",
        host="0.0.0.0",
        port=actual_port,
        reload=reload,
    )


@app.command()
def db() -> None:
    """Check the Supabase connection, projects table and storage bucket."""
    from intake.config import get_settings
    from intake.db.client import get_client

    settings = get_settings()
    console.print("\n[bold]Supabase Check[/bold]\n")

    try:
        client = get_client()
        console.print("[green]OK[/green] Client created")
    except Exception as e:
        console.print(f"[red]FAIL[/red] Could not create client: {e}")
        raise typer.Exit(1)

    failed = False

    try:
        result = client.table(settings.projects_table).select("*", count="exact").limit(0).execute()
        count = result.count if result.count is not None else "?"
        console.print(f"  [green]OK[/green] {settings.projects_table}: {count} rows")
    except Exception as e:
        console.print(f"  [red]FAIL[/red] {settings.projects_table}: {e}")
        failed = True

    try:
        files = client.storage.from_(settings.storage_bucket).list(settings.upload_prefix)
        console.print(f"  [green]OK[/green] {settings.storage_bucket}/{settings.upload_prefix}: {len(files)} objects")
    except Exception as e:
        console.print(f"  [red]FAIL[/red] {settings.storage_bucket}: {e}")
        failed = True

    if failed:
        raise typer.Exit(1)
    console.print("\n[green]Supabase check complete![/green]")


@app.command()
def version() -> None:
    """Show version information."""
    from intake import __version__

    console.print(f"Intake version {__version__}")


if __name__ == "__main__":
    app()
