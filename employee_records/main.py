from __future__ import annotations

import json
import sys
from typing import Optional

import psycopg
import typer
import uvicorn

from employee_records.api.http_app import create_http_app
from employee_records.bootstrap import build_container
from employee_records.config import get_settings
from employee_records.domain.errors import AggregationError, ValidationError
from employee_records.infrastructure.db_factory import verify_connection
from employee_records.salary_sources import JsonSalarySource
from employee_records.service import EmployeeService
from employee_records.store.memory import InMemoryEmployeeStore
from employee_records.utils.logging import configure_logging

app = typer.Typer(help="Employee Records service CLI.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    database = (
        "DB_URL (override)"
        if settings.db_url
        else f"{settings.db_user}:***@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )
    typer.echo(
        f"env={settings.app_env} | DB={database} | "
        f"pool=({settings.db_pool_min_size},{settings.db_pool_max_size}) | "
        f"listen={settings.server_host}:{settings.server_port} | "
        f"salary_sources={settings.salary_sources_dir or 'packaged'}"
    )


@app.command("check-db")
def check_db() -> None:
    """
    Verify database connectivity (retries transient failures).
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    try:
        version = verify_connection(settings)
    except psycopg.Error as exc:
        typer.echo(f"Database unreachable: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Connected: {version}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(
        None,
        "--host",
        help="Interface to bind (default from settings).",
    ),
    port: Optional[int] = typer.Option(
        None,
        "--port",
        "-p",
        help="Port to listen on (default from settings).",
    ),
    in_memory: bool = typer.Option(
        False,
        "--in-memory",
        help="Serve from an in-memory store instead of PostgreSQL.",
    ),
    check_db_first: bool = typer.Option(
        False,
        "--check-db",
        help="Verify database connectivity before accepting requests.",
    ),
) -> None:
    """
    Run the standalone HTTP listener.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    if check_db_first and not in_memory:
        verify_connection(settings)

    container = build_container(
        settings,
        store=InMemoryEmployeeStore() if in_memory else None,
    )
    http_app = create_http_app(container.router, on_shutdown=container.close)
    uvicorn.run(
        http_app,
        host=host or settings.server_host,
        port=port or settings.server_port,
        log_config=None,
    )


@app.command("top-salaries")
def top_salaries(
    n: Optional[int] = typer.Option(
        None,
        "--n",
        "-n",
        help="Number of entries (default from settings).",
    ),
) -> None:
    """
    Print the highest salaries merged from the salary sources.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    # The report never touches the record store.
    service = EmployeeService(
        InMemoryEmployeeStore(),
        JsonSalarySource(settings.salary_sources_dir),
        default_top_n=settings.salary_top_default,
    )
    try:
        samples = service.top_n_by_salary(n)
    except (AggregationError, ValidationError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps([sample.to_payload() for sample in samples], indent=2))


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
