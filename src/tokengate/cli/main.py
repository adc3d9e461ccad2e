"""tokengate CLI — run the server and manage its database.

Usage:
    tokengate serve                    # Run the API with uvicorn
    tokengate serve --reload           # ...with auto-reload for development
    tokengate init-db                  # Create tables (dev/test; prod uses Alembic)
    tokengate gen-secret               # Print a random JWT signing secret
"""

from __future__ import annotations

import asyncio
import secrets

import click

from tokengate import __version__


@click.group()
@click.version_option(__version__, prog_name="tokengate")
def cli():
    """tokengate — authentication and session-lifecycle service."""


@cli.command()
@click.option("--host", default=None, help="Bind address (default: TOKENGATE_HOST).")
@click.option("--port", default=None, type=int, help="Port (default: TOKENGATE_PORT).")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes.")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the HTTP API."""
    import uvicorn

    from tokengate.config import settings

    uvicorn.run(
        "tokengate.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@cli.command("init-db")
@click.option(
    "--database-url",
    default=None,
    help="Database URL (default: TOKENGATE_DATABASE_URL).",
)
def init_db(database_url: str | None):
    """Create the users and refresh_tokens tables if they don't exist."""
    from tokengate.config import settings
    from tokengate.db.engine import create_tables, make_engine

    url = database_url or settings.database_url

    async def _run():
        engine = make_engine(url)
        try:
            await create_tables(engine)
        finally:
            await engine.dispose()

    asyncio.run(_run())
    click.echo("Tables created.")


@cli.command("gen-secret")
@click.option("--bytes", "nbytes", default=48, show_default=True, type=click.IntRange(32, 256))
def gen_secret(nbytes: int):
    """Print a random secret suitable for TOKENGATE_JWT_SECRET."""
    click.echo(secrets.token_urlsafe(nbytes))


def main():
    cli()


if __name__ == "__main__":
    main()
