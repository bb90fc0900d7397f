"""Error hierarchy. Callers branch on the exception type, never on message text."""


class FastTaskError(Exception):
    """Base for every error raised by fast-task."""


class ConfigError(FastTaskError):
    """The config file could not be written."""


class NotConfiguredError(FastTaskError):
    """A remote call was attempted with an incomplete connection profile."""

    def __init__(self) -> None:
        super().__init__("Jira connection is not configured. Run: fast-task config")


# ---------------------------------------------------------------------------
# Remote client
# ---------------------------------------------------------------------------


class RemoteClientError(FastTaskError):
    """Base for failures talking to the issue tracker."""


class TransportFailure(RemoteClientError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Could not reach Jira: {detail}")


class ServiceError(RemoteClientError):
    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self.body = body
        super().__init__(f"Jira API returned error {status}: {body}")


class MalformedResponse(RemoteClientError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Unexpected response from Jira: {detail}")


# ---------------------------------------------------------------------------
# Workflow
# ---------------------------------------------------------------------------


class WorkflowFailure(FastTaskError):
    """Terminal failure of the issue-creation workflow."""


class RemoteFailure(WorkflowFailure):
    def __init__(self, cause: RemoteClientError) -> None:
        self.cause = cause
        super().__init__(str(cause))


class NoIssueTypes(WorkflowFailure):
    def __init__(self, project_key: str) -> None:
        self.project_key = project_key
        super().__init__(f"No issue types found for project {project_key}")


class SelectionResolutionFailed(WorkflowFailure):
    def __init__(self, choice: str) -> None:
        self.choice = choice
        super().__init__(f"Selected option not found: {choice!r}")


class Cancelled(WorkflowFailure):
    def __init__(self) -> None:
        super().__init__("Issue creation cancelled")
