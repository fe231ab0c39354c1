"""CLI commands for examdesk.

Commands:
- init-db: Create the database schema
- serve: Run the Web API with uvicorn
- create-user: Add a user (e.g. the first teacher or admin)
- generate-test: Draw a random test from a category
- report-result: Write the PDF report of a result to a file
"""

from pathlib import Path

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from examdesk.config.app_config import load_app_config
from examdesk.core.auth import hash_password
from examdesk.core.errors import ExamDeskError
from examdesk.core.generator import generate_test as do_generate_test
from examdesk.core.reports import build_result_report, render_report
from examdesk.db.database import init_db
from examdesk.db.users_repository import ACCOUNT_TYPES, insert_user
from examdesk.utils.validators import validate_email

app = typer.Typer(
    name="examdesk",
    help="School test platform backend: database, API server and reports.",
    no_args_is_help=True,
)

console = Console()


def _open_db(db: str | None) -> Path:
    """Initialize the database given on the command line or in config."""
    db_path = Path(db) if db else load_app_config().database.path
    init_db(db_path)
    return db_path


@app.command(name="init-db")
def init_database(
    db: str | None = typer.Option(None, "--db", help="Path to the SQLite file"),
) -> None:
    """Create the database schema (safe to run repeatedly)."""
    db_path = _open_db(db)
    console.print(f"[green]✓ Database ready:[/green] {db_path}")


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port (default from config/PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
    log_level: str = typer.Option("info", "--log-level", help="uvicorn log level"),
) -> None:
    """Run the Web API."""
    config = load_app_config()
    effective_host = host or config.server.host
    effective_port = port or config.server.port

    console.print(
        f"[green]▶ examdesk API on http://{effective_host}:{effective_port}[/green] "
        f"[dim](db: {config.database.path}, reports: {config.reports.mode})[/dim]"
    )
    uvicorn.run(
        "examdesk.web.api:app",
        host=effective_host,
        port=effective_port,
        reload=reload,
        log_level=log_level,
    )


@app.command(name="create-user")
def create_user(
    name: str = typer.Argument(..., help="First name"),
    surname: str = typer.Argument(..., help="Last name"),
    email: str = typer.Argument(..., help="Email (login)"),
    password: str = typer.Option(
        ..., "--password", prompt=True, hide_input=True, confirmation_prompt=True
    ),
    account_type: str = typer.Option("student", "--type", "-t", help="student, teacher or admin"),
    student_number: str | None = typer.Option(None, "--student-number", help="Index number"),
    db: str | None = typer.Option(None, "--db", help="Path to the SQLite file"),
) -> None:
    """Add a user to the database."""
    if account_type not in ACCOUNT_TYPES:
        console.print(f"[red]✗ Unknown account type '{account_type}'[/red]")
        raise typer.Exit(code=1)
    if not validate_email(email):
        console.print(f"[red]✗ Invalid email: {email}[/red]")
        raise typer.Exit(code=1)

    _open_db(db)
    try:
        user = insert_user(
            name=name,
            surname=surname,
            email=email,
            password=hash_password(password),
            account_type=account_type,
            student_number=student_number,
        )
    except ExamDeskError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Created {user.account_type} #{user.id}:[/green] {user.full_name}")


@app.command(name="generate-test")
def generate_test(
    category_id: int = typer.Argument(..., help="Category to draw questions from"),
    count: int | None = typer.Option(None, "--count", "-n", help="Number of questions"),
    name: str | None = typer.Option(None, "--name", help="Test name"),
    db: str | None = typer.Option(None, "--db", help="Path to the SQLite file"),
) -> None:
    """Draw a random test from a category."""
    _open_db(db)
    if count is None:
        count = load_app_config().tests.default_question_count

    try:
        generated = do_generate_test(category_id, count, name=name)
    except ExamDeskError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Test #{generated.test_id}:[/green] {generated.name}")
    table = Table("#", "question_id")
    for position, question_id in enumerate(generated.question_ids, 1):
        table.add_row(str(position), str(question_id))
    console.print(table)


@app.command(name="report-result")
def report_result(
    result_id: int = typer.Argument(..., help="Result ID"),
    output: str = typer.Argument(..., help="Output PDF path"),
    db: str | None = typer.Option(None, "--db", help="Path to the SQLite file"),
) -> None:
    """Write the PDF report of a result."""
    _open_db(db)

    try:
        document = build_result_report(result_id)
        pdf = render_report(document, load_app_config().reports)
    except ExamDeskError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    output_path = Path(output).expanduser()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(pdf)
    console.print(f"[green]✓ Report written:[/green] {output_path} ({len(pdf)} bytes)")


if __name__ == "__main__":
    app()
