"""Interactive issue creation, driven step by step against a tracker client."""

from collections.abc import Callable
from enum import Enum

from rich.markup import escape

from fast_task.errors import (
    Cancelled,
    NoIssueTypes,
    RemoteClientError,
    RemoteFailure,
    SelectionResolutionFailed,
    WorkflowFailure,
)
from fast_task.models import ConnectionProfile, IssueDraft, IssueType
from fast_task.prompts import Prompter, TerminalPrompter
from fast_task.providers.base import TrackerClient
from fast_task.providers.jira import JiraClient

TYPE_DESCRIPTION_LIMIT = 60
SUMMARY_DESCRIPTION_LIMIT = 50


class WorkflowState(str, Enum):
    SELECT_PROJECT = "select_project"
    ENTER_TITLE = "enter_title"
    OPTIONAL_DESCRIPTION = "optional_description"
    FETCH_ISSUE_TYPES = "fetch_issue_types"
    SELECT_ISSUE_TYPE = "select_issue_type"
    CONFIRM = "confirm"
    SUBMIT = "submit"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def truncate(text: str, limit: int, keep: int | None = None) -> str:
    """Return text unchanged if it fits in limit characters, else its first keep characters plus '...'.

    Counts characters, not bytes, so multi-byte characters are never split.
    """
    if len(text) <= limit:
        return text
    return f"{text[: limit if keep is None else keep]}..."


def issue_type_label(issue_type: IssueType) -> str:
    """Display string for an issue type: 'Bug' or 'Bug - <description>'."""
    if issue_type.description is None:
        return issue_type.name
    return f"{issue_type.name} - {truncate(issue_type.description, TYPE_DESCRIPTION_LIMIT, keep=57)}"


def issue_type_options(issue_types: list[IssueType]) -> list[tuple[str, IssueType]]:
    """Pair each issue type with a display string unique within the list.

    Labels that would collide get the first free ' (2)', ' (3)', ... suffix in list order.
    """
    emitted: set[str] = set()
    options = []
    for issue_type in issue_types:
        base = issue_type_label(issue_type)
        label, n = base, 1
        while label in emitted:
            n += 1
            label = f"{base} ({n})"
        emitted.add(label)
        options.append((label, issue_type))
    return options


class IssueCreationWorkflow:
    """One run of the create dialog.

    States advance strictly forward; the first failure ends the run with a
    single WorkflowFailure and nothing is retried.
    """

    def __init__(self, profile: ConnectionProfile, client: TrackerClient, prompter: Prompter) -> None:
        self.profile = profile
        self.client = client
        self.prompter = prompter
        self.state = WorkflowState.SELECT_PROJECT
        self.draft = IssueDraft()

    def run(self) -> str:
        steps: list[tuple[WorkflowState, Callable[[IssueDraft], IssueDraft]]] = [
            (WorkflowState.SELECT_PROJECT, self.select_project),
            (WorkflowState.ENTER_TITLE, self.enter_title),
            (WorkflowState.OPTIONAL_DESCRIPTION, self.optional_description),
            (WorkflowState.FETCH_ISSUE_TYPES, self.fetch_and_select_issue_type),
            (WorkflowState.CONFIRM, self.confirm),
        ]
        try:
            for state, step in steps:
                self.state = state
                self.draft = step(self.draft)
            self.state = WorkflowState.SUBMIT
            issue_url = self.submit(self.draft)
        except WorkflowFailure:
            self.state = WorkflowState.FAILED
            raise
        self.state = WorkflowState.SUCCEEDED
        return issue_url

    def _project_label(self, key: str) -> str:
        return escape(f"{key} ({self.profile.projects.get(key, key)})")

    def select_project(self, draft: IssueDraft) -> IssueDraft:
        key = self.prompter.select(
            "Which project?",
            list(self.profile.projects),
            help_text="Select the project where you want to create the issue",
        )
        self.prompter.show(f"[green]✓[/green] Selected project: {self._project_label(key)}")
        return draft.model_copy(update={"project_key": key})

    def enter_title(self, draft: IssueDraft) -> IssueDraft:
        while True:
            title = self.prompter.text(
                "Issue title",
                help_text="Enter a brief, descriptive title, e.g. Fix login button styling",
            ).strip()
            if title:
                return draft.model_copy(update={"title": title})
            self.prompter.show("[red]Title cannot be empty. Try again[/red]")

    def optional_description(self, draft: IssueDraft) -> IssueDraft:
        if not self.prompter.confirm("Add description?", default=False):
            return draft.model_copy(update={"description": None})
        text = self.prompter.text(
            "Issue description",
            help_text="Steps to reproduce, expected behavior, etc.",
        )
        return draft.model_copy(update={"description": text if text.strip() else None})

    def fetch_issue_types(self, project_key: str) -> list[IssueType]:
        self.state = WorkflowState.FETCH_ISSUE_TYPES
        self.prompter.show(f"Fetching available issue types for project {project_key}...")
        try:
            issue_types = self.client.fetch_issue_types(project_key)
        except RemoteClientError as exc:
            raise RemoteFailure(exc) from exc
        if not issue_types:
            raise NoIssueTypes(project_key)
        self.prompter.show(f"[green]✓[/green] Found {len(issue_types)} issue type(s) for project {project_key}")
        return issue_types

    def select_issue_type(self, draft: IssueDraft, issue_types: list[IssueType]) -> IssueDraft:
        self.state = WorkflowState.SELECT_ISSUE_TYPE
        options = issue_type_options(issue_types)
        choice = self.prompter.select(
            "Issue type",
            [label for label, _ in options],
            help_text="Select the type of issue you're creating",
        )
        for label, issue_type in options:
            if label == choice:
                return draft.model_copy(update={"issue_type": issue_type})
        raise SelectionResolutionFailed(choice)

    def fetch_and_select_issue_type(self, draft: IssueDraft) -> IssueDraft:
        if draft.project_key is None:
            raise RuntimeError("Cannot fetch issue types before a project is selected")
        issue_types = self.fetch_issue_types(draft.project_key)
        return self.select_issue_type(draft, issue_types)

    def summary(self, draft: IssueDraft) -> str:
        project_key, issue_type = draft.project_key, draft.issue_type
        if project_key is None or issue_type is None:
            raise RuntimeError("Cannot summarize a draft without project and issue type")
        lines = [
            "",
            "[bold]Issue Summary:[/bold]",
            f"   Project: {self._project_label(project_key)}",
            f"   Title: {escape(draft.title or '')}",
        ]
        if draft.description is not None:
            lines.append(f"   Description: {escape(truncate(draft.description, SUMMARY_DESCRIPTION_LIMIT))}")
        lines.append(f"   Type: {escape(issue_type.name)}")
        if issue_type.description:
            lines.append(f"   Type Description: {escape(issue_type.description)}")
        return "\n".join(lines)

    def confirm(self, draft: IssueDraft) -> IssueDraft:
        self.prompter.show(self.summary(draft))
        if not self.prompter.confirm("Create this issue?", default=True):
            raise Cancelled()
        return draft.model_copy(update={"confirmed": True})

    def submit(self, draft: IssueDraft) -> str:
        project_key, title, issue_type = draft.project_key, draft.title, draft.issue_type
        if not (draft.confirmed and project_key and title and issue_type):
            raise RuntimeError("Refusing to submit an incomplete or unconfirmed draft")
        self.prompter.show("Creating issue...")
        try:
            return self.client.create_issue(project_key, title, draft.description, issue_type.id)
        except RemoteClientError as exc:
            raise RemoteFailure(exc) from exc


# ---------------------------------------------------------------------------
# Entry points for the commands
# ---------------------------------------------------------------------------


def run_test_connection(profile: ConnectionProfile) -> None:
    """Raise RemoteClientError if the tracker cannot be reached with this profile."""
    JiraClient(profile).check_connectivity()


def run_create_issue(profile: ConnectionProfile, prompter: Prompter | None = None) -> str:
    """Run the create dialog and return the new issue's browse URL.

    The caller must check that the profile is configured and has at least one
    project before calling.
    """
    workflow = IssueCreationWorkflow(profile, JiraClient(profile), prompter or TerminalPrompter())
    return workflow.run()
