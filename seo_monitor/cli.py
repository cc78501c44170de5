"""Typer CLI application for SEO Monitor.

Provides commands to initialise the database, register users, create
projects through the wizard, inspect projects, and launch the dashboard.
"""

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from seo_monitor.utils.helpers import format_date, pluralize

console = Console()
app = typer.Typer(
    name="seo",
    help="SEO Monitor -- projects, keywords, competitors & rank changes.",
    add_completion=False,
    no_args_is_help=True,
)


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging level and format."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _bootstrap(verbose: bool):
    """Load config, initialise the database, and return (config, store, auth)."""
    _setup_logging(verbose)
    from seo_monitor.auth import AuthService
    from seo_monitor.config import load_config
    from seo_monitor.database import init_db
    from seo_monitor.store import RecordStore

    config = load_config()
    init_db(database_url=config["database"]["url"], echo=config["database"]["echo"])
    store = RecordStore()
    auth = AuthService(store, min_password_length=config["auth"]["min_password_length"])
    return config, store, auth


def _sign_in(auth, email: str, password: str) -> None:
    from seo_monitor.auth import AuthError
    try:
        auth.sign_in_with_password(email, password)
    except AuthError as exc:
        console.print("[red]✘[/red] " + str(exc))
        raise typer.Exit(code=1)


def _parse_competitor(value: str) -> tuple[str, str]:
    """``"https://x.com|X Corp"`` -> ``("https://x.com", "X Corp")``."""
    url, _, name = value.partition("|")
    return url.strip(), name.strip()


# ------------------------------------------------------------------
# init-db
# ------------------------------------------------------------------
@app.command("init-db")
def init_db_command(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Create all database tables."""
    _bootstrap(verbose)
    console.print("[green]✔[/green] Database tables created.")


# ------------------------------------------------------------------
# signup
# ------------------------------------------------------------------
@app.command()
def signup(
    email: str = typer.Option(..., "--email", "-e", help="Account email."),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Create a dashboard account."""
    from seo_monitor.auth import AuthError

    _, _, auth = _bootstrap(verbose)
    try:
        user = auth.sign_up(email, password)
    except AuthError as exc:
        console.print("[red]✘[/red] " + str(exc))
        raise typer.Exit(code=1)
    console.print(f"[green]✔[/green] Account created for {user.email} (id={user.id}).")


# ------------------------------------------------------------------
# projects
# ------------------------------------------------------------------
@app.command()
def projects(
    email: str = typer.Option(..., "--email", "-e", help="Account email."),
    password: str = typer.Option(..., prompt=True, hide_input=True),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """List your projects with keyword, competitor and change counts."""
    from seo_monitor.dashboard_data import list_projects, project_stats

    _, store, auth = _bootstrap(verbose)
    _sign_in(auth, email, password)
    rows = list_projects(store, user_id=auth.get_user().id)

    table = Table(
        title="Your Projects (" + pluralize(len(rows), "project") + " monitored)",
        show_header=True, header_style="bold magenta",
    )
    table.add_column("ID", style="cyan")
    table.add_column("Name", min_width=15)
    table.add_column("Website", max_width=40)
    table.add_column("Status")
    table.add_column("Keywords", justify="right")
    table.add_column("Competitors", justify="right")
    table.add_column("Changes", justify="right")
    table.add_column("Created")

    for row in rows:
        stats = project_stats(store, row["id"])
        table.add_row(
            str(row["id"]), row["name"], row["website_url"], row["status"],
            str(stats.keywords), str(stats.competitors), str(stats.changes),
            format_date(row["created_at"]),
        )
    console.print(table)


# ------------------------------------------------------------------
# create-project
# ------------------------------------------------------------------
@app.command("create-project")
def create_project(
    email: str = typer.Option(..., "--email", "-e", help="Account email."),
    password: str = typer.Option(..., prompt=True, hide_input=True),
    name: str = typer.Option(..., "--name", "-n", help="Project name."),
    url: str = typer.Option(..., "--url", "-u", help="Website URL, e.g. https://example.com."),
    keyword: Optional[list[str]] = typer.Option(None, "--keyword", "-k", help="Keyword to track (repeatable)."),
    location: str = typer.Option("United States", "--location", help="Location for every keyword."),
    device: str = typer.Option("desktop", "--device", help="desktop, mobile or tablet."),
    competitor: Optional[list[str]] = typer.Option(
        None, "--competitor", "-c", help="Competitor URL, optionally 'URL|Name' (repeatable).",
    ),
    frequency: str = typer.Option("weekly", "--frequency", "-f", help="weekly, twice_weekly or daily."),
    threshold: int = typer.Option(3, "--threshold", "-t", help="Alert on rank drops of N+ positions (1-10)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Create a project by walking the six-step wizard non-interactively."""
    from seo_monitor.wizard import (
        CompetitorEntry,
        KeywordEntry,
        ProjectWizard,
        WizardData,
        WizardError,
        WizardStep,
    )

    config, store, auth = _bootstrap(verbose)
    _sign_in(auth, email, password)

    data = WizardData(
        name=name,
        website_url=url,
        keywords=[KeywordEntry(keyword=k, location=location, device=device) for k in keyword or []],
        competitors=[CompetitorEntry(*_parse_competitor(c)) for c in competitor or []],
    )
    wizard = ProjectWizard(store, auth, data=data)
    try:
        wizard.set_frequency(frequency)
        wizard.set_alert_threshold(threshold)
        for k in range(len(data.keywords)):
            wizard.set_keyword(k, "device", device)
    except WizardError as exc:
        console.print("[red]✘[/red] " + str(exc))
        raise typer.Exit(code=1)

    while wizard.step != WizardStep.REVIEW:
        if not wizard.next():
            console.print(
                f"[red]✘[/red] Step {int(wizard.step)} ({wizard.step.title}) is incomplete."
            )
            raise typer.Exit(code=1)

    summary = wizard.review()
    console.print(Panel(
        f"[bold]{summary['name']}[/bold]  {summary['website']}\n"
        f"Frequency: {summary['frequency']}   Alert at: {summary['alert_at']}\n"
        f"Keywords ({len(summary['keywords'])}): "
        + ", ".join(k.keyword for k in summary["keywords"]) + "\n"
        f"Competitors ({len(summary['competitors'])}): "
        + ", ".join(c.url for c in summary["competitors"]),
        title="Review & Create",
    ))

    result = wizard.submit()
    if not result.ok:
        console.print("[red]✘[/red] " + result.error)
        if result.completed_steps:
            console.print(
                "[yellow]⚠[/yellow] Already saved: " + ", ".join(result.completed_steps)
            )
        raise typer.Exit(code=1)
    console.print(f"[green]✔[/green] Project {result.project['id']} created.")


# ------------------------------------------------------------------
# show
# ------------------------------------------------------------------
@app.command()
def show(
    project_id: int = typer.Argument(..., help="Project ID."),
    email: str = typer.Option(..., "--email", "-e", help="Account email."),
    password: str = typer.Option(..., prompt=True, hide_input=True),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Show a project's keywords, competitors and recent rank changes."""
    from seo_monitor.dashboard_data import load_project_detail, position_delta
    from seo_monitor.store import RecordNotFound

    _, store, auth = _bootstrap(verbose)
    _sign_in(auth, email, password)
    try:
        detail = load_project_detail(store, project_id, user_id=auth.get_user().id)
    except RecordNotFound:
        console.print(f"[red]✘[/red] Project {project_id} not found.")
        raise typer.Exit(code=1)

    project = detail.project
    stats = detail.stats
    console.print(Panel(
        f"[bold cyan]{project['name']}[/bold cyan] ({project['status']})\n"
        f"{project['website_url']}\n"
        f"Created {format_date(project['created_at'], long=True)}\n"
        f"{stats.keywords} keywords · {stats.competitors} competitors · "
        f"{stats.changes} changes ({detail.rank_ups} up, {detail.rank_downs} down)"
    ))

    changes = Table(title="Recent Changes", show_header=True, header_style="bold magenta")
    changes.add_column("Keyword", style="cyan")
    changes.add_column("Before", justify="right")
    changes.add_column("After", justify="right")
    changes.add_column("Change", justify="right")
    changes.add_column("Detected")
    for change in detail.changes:
        delta = position_delta(change)
        style = "green" if delta > 0 else "red" if delta < 0 else "white"
        changes.add_row(
            change["keyword"],
            str(change["position_before"] or "-"),
            str(change["position_after"] or "-"),
            f"[{style}]{delta:+d}[/{style}]",
            format_date(change["detected_at"]),
        )
    console.print(changes)


# ------------------------------------------------------------------
# dashboard
# ------------------------------------------------------------------
@app.command()
def dashboard(
    port: int = typer.Option(8501, "--port", "-p", help="Streamlit server port."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Launch the Streamlit dashboard."""
    _setup_logging(verbose)
    console.print("[bold cyan]Launching dashboard on port " + str(port) + "...[/bold cyan]")
    import subprocess
    subprocess.run(
        ["streamlit", "run", "dashboard/app.py", "--server.port", str(port)],
        check=False,
    )


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
