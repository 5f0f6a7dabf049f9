"""CLI commands for Hobby University.

Commands:
- init-db: Create the database
- signup: Register a learner and start the trial
- list: List learners
- progress: Show a learner's dashboard
- attend: Record a completed lesson-day
- set-status: Set lifecycle flags (trial completed, certificate, course)
- import-lessons: Import lessons from a YAML file
- certificate: Show a learner's certificate
- serve: Run the Web API
"""

from datetime import date
from pathlib import Path

import typer
from rich.console import Console

from hobbyu.config.app_config import AppConfig, ConfigError, load_app_config
from hobbyu.config.catalog import Catalog, load_catalog
from hobbyu.core.certificate import CertificateUnavailableError, build_certificate
from hobbyu.core.dashboard import build_dashboard
from hobbyu.core.lesson_plan import LessonDayError, check_lesson_day
from hobbyu.core.models import Hobby
from hobbyu.core.progress_tracker import InvalidRangeError
from hobbyu.core.signup import SignUpApplication, SignUpError, register_learner
from hobbyu.db.attendance_repository import get_completed_dates, record_attendance
from hobbyu.db.database import Database, init_db
from hobbyu.db.learners_repository import (
    DuplicateLearnerError,
    InvalidTransitionError,
    LearnerNotFoundError,
    get_all_learners,
    get_learner,
    update_learner_status,
)
from hobbyu.db.lessons_repository import LessonImportError, import_lessons_yaml
from hobbyu.db.results_repository import get_results

app = typer.Typer(
    name="hobby",
    help="Hobby University: learner progress, daily lessons and certificates.",
    no_args_is_help=True,
)

console = Console()

PHASE_COLORS = {
    "trial": "blue",
    "certified": "green",
    "advanced": "magenta",
}


def _load_config() -> AppConfig:
    try:
        return load_app_config()
    except ConfigError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)


def _load_context() -> tuple[AppConfig, Database, Catalog]:
    """Load config, database and catalog from the data directory."""
    config = _load_config()
    return config, init_db(config.db_path), load_catalog(config.catalog_path)


def _parse_day(value: str | None, option: str) -> date:
    """Parse YYYY-MM-DD, defaulting to today."""
    if value is None:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        console.print(f"[red]✗ Invalid date for {option}: {value} (use YYYY-MM-DD)[/red]")
        raise typer.Exit(code=1)


def _get_learner_or_exit(db: Database, learner_id: str):
    learner = get_learner(db, learner_id)
    if learner is None:
        console.print(f"[red]✗ Learner '{learner_id}' not found[/red]")
        raise typer.Exit(code=1)
    return learner


@app.command(name="init-db")
def init_database() -> None:
    """Create the database and tables."""
    config = _load_config()
    init_db(config.db_path)
    console.print(f"[green]✓ Database ready:[/green] {config.db_path}")


@app.command()
def signup(
    full_name: str = typer.Option(..., "--name", "-n", help="Full name"),
    email: str = typer.Option(..., "--email", "-e", help="Email address"),
    age: int = typer.Option(..., "--age", help="Age (13-100)"),
    location: str = typer.Option(..., "--location", "-l", help="City, Country"),
    hobby: str = typer.Option(
        ..., "--hobby", help=f"One of: {', '.join(h.value for h in Hobby)}"
    ),
    motivation: str = typer.Option(
        ..., "--motivation", "-m", help="Why you want to turn this hobby into a career"
    ),
    password: str = typer.Option(
        ..., prompt=True, hide_input=True, help="Account password"
    ),
    confirm_password: str = typer.Option(
        ..., prompt="Confirm password", hide_input=True, help="Repeat the password"
    ),
) -> None:
    """Submit a student application. The trial starts today."""
    config, db, catalog = _load_context()

    application = SignUpApplication(
        full_name=full_name,
        email=email,
        password=password,
        confirm_password=confirm_password,
        age=age,
        location=location,
        chosen_hobby=hobby,
        motivation=motivation,
    )

    try:
        learner = register_learner(db, application, date.today(), config.signup)
    except SignUpError as e:
        console.print("[red]✗ Application rejected:[/red]")
        for error in e.errors:
            console.print(f"  [yellow]• {error}[/yellow]")
        raise typer.Exit(code=1)
    except DuplicateLearnerError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    course = catalog.trial_course_for(learner.chosen_hobby)
    console.print(f"[green]✓ Welcome, {learner.full_name}![/green]")
    console.print(f"  [dim]learner:[/dim] {learner.learner_id}")
    console.print(f"  [dim]course:[/dim]  {course.title}")
    console.print(f"  [dim]starts:[/dim]  {learner.trial_start_date.isoformat()}")


@app.command(name="list")
def list_learners() -> None:
    """List all learners."""
    _, db, _ = _load_context()
    learners = get_all_learners(db)

    if not learners:
        console.print("[yellow]No learners yet[/yellow]")
        console.print("  Use: hobby signup --name ... --email ...")
        return

    console.print(f"\n[bold]Learners ({len(learners)}):[/bold]\n")
    for learner in learners:
        console.print(f"  [bold]{learner.learner_id}[/bold] {learner.full_name}")
        console.print(f"    [dim]hobby:[/dim]  {learner.chosen_hobby.value}")
        console.print(f"    [dim]since:[/dim]  {learner.trial_start_date.isoformat()}")
        console.print()


@app.command()
def progress(
    learner_id: str = typer.Argument(..., help="Learner ID (e.g., 'lrn01')"),
    today: str | None = typer.Option(None, "--today", help="Reference day YYYY-MM-DD"),
) -> None:
    """Show a learner's dashboard."""
    config, db, catalog = _load_context()
    learner = _get_learner_or_exit(db, learner_id)
    day = _parse_day(today, "--today")

    try:
        dashboard = build_dashboard(
            learner,
            get_completed_dates(db, learner_id, end=day),
            day,
            catalog,
            config.trial.length_days,
        )
    except InvalidRangeError as e:
        console.print(f"[red]✗ Progress unavailable: {e}[/red]")
        raise typer.Exit(code=1)

    snap = dashboard.snapshot
    color = PHASE_COLORS.get(dashboard.phase.value, "white")

    console.print(f"\n[bold]{dashboard.full_name}[/bold] · {dashboard.course_title}")
    console.print(f"  [dim]phase:[/dim]       [{color}]{dashboard.phase.label}[/{color}]")
    console.print(f"  [dim]total days:[/dim]  {snap.total_days}")
    console.print(f"  [dim]completed:[/dim]   {snap.completed_days}")
    console.print(f"  [dim]streak:[/dim]      {snap.current_streak} days")
    console.print(f"  [dim]attendance:[/dim]  {snap.attendance_rate}%")
    console.print(
        f"  [dim]next lesson:[/dim] Day {dashboard.next_lesson_day} of {snap.total_days}"
    )

    if dashboard.achievements:
        console.print("\n[bold]Achievements:[/bold]")
        for achievement in dashboard.achievements:
            console.print(f"  [green]✓[/green] {achievement.title} - {achievement.description}")


@app.command()
def attend(
    learner_id: str = typer.Argument(..., help="Learner ID"),
    day: str | None = typer.Option(None, "--date", "-d", help="Day YYYY-MM-DD"),
) -> None:
    """Record a completed lesson-day without a quiz."""
    config, db, _ = _load_context()
    learner = _get_learner_or_exit(db, learner_id)
    when = _parse_day(day, "--date")

    try:
        check_lesson_day(
            learner.trial_start_date, when, trial_length_days=config.trial.length_days
        )
    except InvalidRangeError:
        console.print(
            f"[red]✗ {when.isoformat()} is before the trial start "
            f"({learner.trial_start_date.isoformat()})[/red]"
        )
        raise typer.Exit(code=1)
    except LessonDayError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    created = record_attendance(db, learner_id, when, lesson_completed=True)
    if created:
        console.print(f"[green]✓ Attendance recorded for {when.isoformat()}[/green]")
    else:
        console.print(f"[yellow]• {when.isoformat()} was already recorded[/yellow]")


@app.command(name="set-status")
def set_status(
    learner_id: str = typer.Argument(..., help="Learner ID"),
    trial_completed: bool | None = typer.Option(
        None, "--trial-completed/--no-trial-completed", help="Trial completion flag"
    ),
    certificate_earned: bool | None = typer.Option(
        None, "--certificate-earned/--no-certificate-earned", help="Certificate flag"
    ),
    course: str | None = typer.Option(None, "--course", help="Current course ID"),
) -> None:
    """Set lifecycle flags for a learner."""
    _, db, catalog = _load_context()

    try:
        learner = update_learner_status(
            db,
            learner_id,
            trial_completed=trial_completed,
            certificate_earned=certificate_earned,
            current_course_id=course,
            catalog=catalog,
        )
    except LearnerNotFoundError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)
    except InvalidTransitionError as e:
        console.print(f"[red]✗ Invalid status change: {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Status updated for {learner.learner_id}[/green]")
    console.print(f"  [dim]trial completed:[/dim]    {learner.trial_completed}")
    console.print(f"  [dim]certificate earned:[/dim] {learner.certificate_earned}")
    enrolled = (
        catalog.course_by_id(learner.current_course_id, learner.chosen_hobby)
        if learner.current_course_id
        else None
    )
    if enrolled is None:
        console.print(f"  [dim]current course:[/dim]     {learner.current_course_id or '-'}")
    else:
        price = f" (${enrolled.price:.2f})" if enrolled.price is not None else ""
        console.print(f"  [dim]current course:[/dim]     {enrolled.title}{price}")


@app.command(name="import-lessons")
def import_lessons(
    file: str = typer.Argument(..., help="Path to lessons YAML file"),
) -> None:
    """Import daily lessons and quiz questions from YAML."""
    _, db, _ = _load_context()
    path = Path(file).expanduser().resolve()

    try:
        lessons = import_lessons_yaml(db, path)
    except LessonImportError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Imported {len(lessons)} lessons[/green]")
    for lesson in lessons:
        console.print(
            f"  [dim]day {lesson.day_number:>2}:[/dim] {lesson.title} "
            f"({len(lesson.questions)} questions)"
        )


@app.command()
def certificate(
    learner_id: str = typer.Argument(..., help="Learner ID"),
    issued_on: str | None = typer.Option(None, "--issued-on", help="Date YYYY-MM-DD"),
) -> None:
    """Show the certificate for a learner who earned it."""
    config, db, catalog = _load_context()
    learner = _get_learner_or_exit(db, learner_id)
    day = _parse_day(issued_on, "--issued-on")

    try:
        payload = build_certificate(
            learner, get_results(db, learner_id), day, catalog, config.certificate
        )
    except CertificateUnavailableError as e:
        console.print(f"[yellow]✗ {e}[/yellow]")
        raise typer.Exit(code=1)

    console.print(f"\n[bold]{payload.institution}[/bold]")
    console.print("Certificate of Professional Development\n")
    console.print(f"  [dim]student:[/dim]   {payload.student_name}")
    console.print(f"  [dim]course:[/dim]    {payload.course_name}")
    console.print(f"  [dim]completed:[/dim] {payload.completion_date}")
    console.print(f"  [dim]location:[/dim]  {payload.location}")
    console.print(f"  [dim]grade:[/dim]     {payload.grade}")
    console.print(f"  [dim]id:[/dim]        {payload.certificate_id}")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port"),
) -> None:
    """Run the Web API with uvicorn."""
    import uvicorn

    uvicorn.run("hobbyu.web.api:create_app", host=host, port=port, factory=True)


if __name__ == "__main__":
    app()
