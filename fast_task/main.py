"""fast-task CLI: all commands."""

import logging
from collections.abc import Callable
from typing import Annotated

import typer
from pydantic import ValidationError
from rich import print as rprint
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from fast_task import settings
from fast_task.errors import Cancelled, ConfigError, RemoteClientError, WorkflowFailure
from fast_task.models import ConnectionProfile, is_valid_endpoint, is_valid_identity
from fast_task.prompts import Prompter, TerminalPrompter
from fast_task.workflow import run_create_issue, run_test_connection

app = typer.Typer(
    help="Create Jira issues quickly from the command line. Use 'fast-task create' for guided issue creation.",
    no_args_is_help=True,
)

logger = logging.getLogger("fast_task")


def get_prompter() -> Prompter:
    return TerminalPrompter()


# ---------------------------------------------------------------------------
# Startup
# ---------------------------------------------------------------------------


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log HTTP requests and config access")] = False,
) -> None:
    try:
        process_settings = settings.get_settings()
    except ValidationError as exc:
        rprint(f"[red]Invalid FAST_TASK_* settings:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc
    logger.setLevel(logging.DEBUG if verbose else process_settings.log_level)
    if not logger.handlers:
        logger.addHandler(RichHandler(show_path=False, markup=False))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _prompt_until(
    prompter: Prompter,
    message: str,
    valid: Callable[[str], bool],
    error: str,
    help_text: str = "",
    hide_input: bool = False,
) -> str:
    while True:
        value = prompter.text(message, help_text=help_text, hide_input=hide_input).strip()
        if valid(value):
            return value
        rprint(f"[red]{error}. Try again[/red]")


def _save(profile: ConnectionProfile) -> None:
    try:
        settings.save(profile)
    except ConfigError as exc:
        rprint(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from exc


def _require_configured(profile: ConnectionProfile) -> None:
    if not settings.is_configured(profile):
        rprint("[red]Please configure Jira connection first:[/red]")
        rprint("  fast-task config")
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("config")
def config_cmd() -> None:
    """Configure Jira connection settings."""
    prompter = get_prompter()
    profile = settings.load()
    rprint("[bold]Set up a Jira connection[/bold]")
    rprint("")

    endpoint = _prompt_until(
        prompter,
        "Jira URL",
        is_valid_endpoint,
        "Jira URL is not valid",
        help_text="Your Jira instance URL including https://, e.g. https://company.atlassian.net",
    )
    identity = _prompt_until(
        prompter,
        "Your Jira email",
        is_valid_identity,
        "Email is not valid",
        help_text="Email address used for Jira authentication",
    )
    token = _prompt_until(prompter, "Your Jira API token", bool, "API token cannot be empty", hide_input=True)

    _save(profile.with_connection(endpoint, identity, token))
    rprint("[green]✓[/green] Configuration saved!")


@app.command("add-project")
def add_project(
    key: Annotated[str | None, typer.Argument(help="Project key, e.g. OPS")] = None,
    name: Annotated[str | None, typer.Option("--name", "-n", help="Display name for the project")] = None,
) -> None:
    """Add a project to work with."""
    prompter = get_prompter()
    profile = settings.load()

    key = (key or "").strip() or _prompt_until(
        prompter, "Your project key", bool, "Project key cannot be empty", help_text="e.g. PRKEY"
    )
    name = (name or "").strip() or _prompt_until(
        prompter,
        "Your Jira project name",
        bool,
        "Project name cannot be empty",
        help_text="Name of your project (for display)",
    )

    _save(profile.with_project(key, name))
    rprint(f"[green]✓[/green] Project {escape(key)} added!")


@app.command("list-projects")
def list_projects() -> None:
    """List configured projects."""
    profile = settings.load()
    if not profile.projects:
        rprint("No projects configured. Use 'fast-task add-project' to add one.")
        return

    table = Table(title="Configured projects")
    table.add_column("Key", style="cyan")
    table.add_column("Name")
    for key, name in profile.projects.items():
        table.add_row(key, name)

    rprint(table)


@app.command("test")
def test_cmd() -> None:
    """Test the Jira connection."""
    profile = settings.load()
    _require_configured(profile)

    rprint("Testing Jira connection...")
    try:
        run_test_connection(profile)
    except RemoteClientError as exc:
        rprint(f"[red]Connection failed:[/red] {escape(str(exc))}")
        rprint("Check your configuration:")
        rprint(f"  - URL: {profile.endpoint}")
        rprint(f"  - Email: {profile.identity}")
        raise typer.Exit(1) from exc

    rprint("[green]✓[/green] Connection successful!")
    rprint(f"  URL: {profile.endpoint}")
    rprint(f"  Email: {profile.identity}")


@app.command("create")
def create_cmd() -> None:
    """Create a new issue."""
    profile = settings.load()
    _require_configured(profile)
    if not profile.projects:
        rprint("[red]No projects configured. Add one first:[/red]")
        rprint("  fast-task add-project <KEY> --name <NAME>")
        raise typer.Exit(1)

    rprint("[bold]Creating a new Jira issue[/bold]")
    rprint("")
    try:
        issue_url = run_create_issue(profile, get_prompter())
    except Cancelled:
        rprint("[yellow]Issue creation cancelled.[/yellow]")
        return
    except WorkflowFailure as exc:
        rprint(f"[red]Failed to create issue:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc

    rprint("[green]✓[/green] Issue created successfully!")
    rprint(f"  {issue_url}")
