"""CLI commands for wedding-hooks."""

import asyncio

import typer
from rich.console import Console

from src.core.config import get_settings
from src.core.exceptions import WeddingHooksException
from src.storage.database.base import AsyncSessionLocal, close_db, init_db
from src.storage.database.repository import WeddingRepository
from src.storage.database.webhook_repository import TokenRepository

app = typer.Typer(name="wedding-hooks", help="Wedding planning webhook service CLI")
console = Console()
settings = get_settings()


@app.command()
def version() -> None:
    """Show version."""
    console.print("[bold green]Wedding Hooks v0.1.0[/bold green]")


@app.command("init-db")
def init_database() -> None:
    """Create database tables."""

    async def _run() -> None:
        try:
            await init_db()
        finally:
            await close_db()

    asyncio.run(_run())
    console.print("[green]✓ Database initialized[/green]")


@app.command("issue-token")
def issue_token(
    wedding_id: str = typer.Argument(..., help="Wedding the token belongs to"),
    name: str = typer.Argument(..., help="Label shown in the token list"),
) -> None:
    """Issue an access token for outbound webhook calls.

    The token is printed once; afterwards only its masked form is shown.
    """

    async def _run() -> str:
        async with AsyncSessionLocal() as session:
            if await WeddingRepository(session).get_by_id(wedding_id) is None:
                raise WeddingHooksException(f"Wedding not found: {wedding_id}")
            api_token = await TokenRepository(session).issue_token(wedding_id, name)
            await session.commit()
            return api_token.token

    try:
        token = asyncio.run(_run())
    except WeddingHooksException as e:
        console.print(f"[red]✗ {e.message}[/red]")
        raise typer.Exit(code=1) from e

    console.print(f"[green]✓ Token issued:[/green] {token}")
    console.print("[yellow]Store it now, it will not be shown again.[/yellow]")


@app.command()
def serve(
    host: str = typer.Option(settings.api_host, help="Host to bind"),
    port: int = typer.Option(settings.api_port, help="Port to bind"),
) -> None:
    """Start API server.

    Args:
        host: Host to bind
        port: Port to bind
    """
    import uvicorn

    console.print(f"[yellow]Starting server on {host}:{port}[/yellow]")
    uvicorn.run("src.api.app:app", host=host, port=port, reload=settings.debug)


if __name__ == "__main__":
    app()
