"""Command line interface for running checks and the alert service."""

import asyncio

import typer
from loguru import logger

from stockflow.config import config
from stockflow.exceptions import ConfigurationError
from stockflow.monitor import AlertMonitor
from stockflow.pipeline.classifier import classify
from stockflow.storage import close_database, init_database

app = typer.Typer(
    name="stockflow",
    help="NSE announcement alerts over Telegram and WhatsApp",
)


@app.command("check")
def check_command() -> None:
    """Run one announcement check in the foreground and print a summary."""
    try:
        result = asyncio.run(AlertMonitor(config).run_once())
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}")
        raise typer.Exit(code=2)  # noqa: B904

    typer.echo(
        f"Fetched: {result['fetched_count']}  New: {result['new_count']}  "
        f"Processed: {result['processed_count']}  Delivered: {result['delivered_count']}  "
        f"Failed: {result['failed_count']}"
    )

    if not result["success"]:
        typer.echo(f"Cycle failed: {result['error']}")
        raise typer.Exit(code=1)


@app.command("classify")
def classify_command(
    text: str = typer.Argument(..., help="Announcement description"),
) -> None:
    """Show the alert tier a description would be given."""
    typer.echo(classify(text).value)


@app.command("init-db")
def init_db_command() -> None:
    """Create database tables if they do not exist."""
    init_database(config.database.url, create_tables=True)
    close_database()
    typer.echo(f"Database ready: {config.database.url}")


@app.command("serve")
def serve_command(
    host: str | None = typer.Option(None, help="Bind address (default from config)"),
    port: int | None = typer.Option(None, help="Bind port (default from config)"),
) -> None:
    """Run the HTTP API with the background monitor."""
    import uvicorn

    bind_host = host or config.api.host
    bind_port = port or config.api.port
    logger.info(f"Serving on {bind_host}:{bind_port}")

    uvicorn.run(
        "stockflow.main:app",
        host=bind_host,
        port=bind_port,
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    app()
