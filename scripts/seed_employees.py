"""
Schema setup and sample-data loading for the Employee Records service.

Applies `db/init.sql`, then generates deterministic pseudo-random employees as
CSV and loads them with Postgres COPY.
"""

from __future__ import annotations

import csv
import random
import sys
import tempfile
import time
from datetime import date, timedelta
from pathlib import Path

import psycopg
import typer

from employee_records.config import get_settings
from employee_records.infrastructure.db_factory import build_dsn

INIT_SQL_PATH = Path(__file__).resolve().parent.parent / "db" / "init.sql"

app = typer.Typer(help="Apply the schema and load sample employees into Postgres (CSV + COPY).")

_FIRST_NAMES = ["Jane", "Luis", "Amara", "Chen", "Sofia", "Marta", "Tomas", "Priya", "Omar", "Lena"]
_LAST_NAMES = ["Smith", "Ortega", "Okafor", "Wei", "Rossi", "Nowak", "Lind", "Rao", "Haddad", "Berg"]
_ROLES = {
    "Engineering": ["Developer", "QA Engineer", "Engineering Manager"],
    "Finance": ["Accountant", "Data Analyst"],
    "People": ["Recruiter", "HR Partner"],
    "Operations": ["Support Specialist", "Operations Lead"],
}


def _build_dsn(dsn_override: str | None) -> str:
    if dsn_override:
        return dsn_override
    return build_dsn(get_settings())


def _generate_rows_csv(csv_path: Path, rows: int, seed: int) -> None:
    rng = random.Random(seed)
    departments = sorted(_ROLES)
    first_hire = date(2015, 1, 1)

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["full_name", "position", "department", "hire_date", "salary"])
        for _ in range(rows):
            department = rng.choice(departments)
            writer.writerow(
                [
                    f"{rng.choice(_FIRST_NAMES)} {rng.choice(_LAST_NAMES)}",
                    rng.choice(_ROLES[department]),
                    department,
                    (first_hire + timedelta(days=rng.randint(0, 3650))).isoformat(),
                    f"{rng.uniform(2_500, 12_000):.2f}",
                ]
            )


def _apply_schema(dsn: str, sql_path: Path = INIT_SQL_PATH) -> None:
    with psycopg.connect(dsn) as conn:
        with conn.cursor() as cur:
            cur.execute(sql_path.read_text(encoding="utf-8"))
        conn.commit()


def _copy_into_db(dsn: str, csv_path: Path) -> None:
    with psycopg.connect(dsn) as conn:
        with conn.cursor() as cur:
            with cur.copy(
                """
                COPY public.employees (full_name, position, department, hire_date, salary)
                FROM STDIN WITH (FORMAT csv, HEADER TRUE)
                """
            ) as copy:
                with csv_path.open("r", encoding="utf-8") as f:
                    for line in f:
                        copy.write(line)
            conn.commit()


@app.command()
def main(
    rows: int = typer.Option(
        25,
        "--rows",
        "-r",
        help="Number of employees to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    dsn: str | None = typer.Option(
        None,
        "--dsn",
        help="Optional DSN override for Postgres.",
    ),
    schema_only: bool = typer.Option(
        False,
        "--schema-only",
        help="Only apply db/init.sql; skip loading employees.",
    ),
) -> None:
    """
    Apply the schema and optionally load sample employees using COPY.
    """
    start = time.perf_counter()
    conn_dsn = _build_dsn(dsn)

    typer.echo(f"Applying schema from {INIT_SQL_PATH}")
    _apply_schema(conn_dsn)
    if schema_only:
        typer.echo("Skipping load (schema-only flag set).")
        return

    tmpdir = Path(tempfile.mkdtemp(prefix="employees_csv_"))
    csv_path = tmpdir / "employees.csv"
    typer.echo(f"Generating {rows:,} employees -> {csv_path} (seed={seed})")
    _generate_rows_csv(csv_path, rows=rows, seed=seed)
    _copy_into_db(conn_dsn, csv_path)

    typer.echo(f"Loaded {rows:,} employees in {time.perf_counter() - start:.2f}s.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
