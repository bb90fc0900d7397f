"""Shared pydantic models, the contract between the config store, the client and the workflow."""

import re

import httpx
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_valid_endpoint(url: str) -> bool:
    """True for an absolute http(s) URL with a host."""
    try:
        parsed = httpx.URL(url.strip())
    except (httpx.InvalidURL, TypeError):
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.host)


def is_valid_identity(email: str) -> bool:
    return bool(_EMAIL_RE.match(email.strip()))


class ConnectionProfile(BaseModel):
    """Stored connection settings plus the project alias table.

    Field aliases match the on-disk JSON keys.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    endpoint: str = Field("", alias="jira_url")
    identity: str = Field("", alias="email")
    credential: SecretStr = Field(SecretStr(""), alias="api_token")
    projects: dict[str, str] = {}  # project key -> display name

    @field_validator("endpoint")
    @classmethod
    def _check_endpoint(cls, value: str) -> str:
        if value and not is_valid_endpoint(value):
            raise ValueError(f"not an absolute http(s) URL: {value!r}")
        return value

    @field_validator("projects")
    @classmethod
    def _check_projects(cls, value: dict[str, str]) -> dict[str, str]:
        if any(not k.strip() or not v.strip() for k, v in value.items()):
            raise ValueError("project keys and names must be non-empty")
        return value

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint and self.identity and self.credential.get_secret_value())

    def browse_url(self, key: str) -> str:
        return f"{self.endpoint.rstrip('/')}/browse/{key}"

    def with_connection(self, endpoint: str, identity: str, credential: str) -> "ConnectionProfile":
        return self.model_copy(
            update={"endpoint": endpoint, "identity": identity, "credential": SecretStr(credential)}
        )

    def with_project(self, key: str, name: str) -> "ConnectionProfile":
        return self.model_copy(update={"projects": {**self.projects, key: name}})


class IssueType(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str  # opaque handle, sent back on create
    name: str
    description: str | None = None


class IssueTypePage(BaseModel):
    """Body of GET /rest/api/2/issue/createmeta/{projectKey}/issuetypes."""

    model_config = ConfigDict(frozen=True)

    max_results: int = Field(alias="maxResults")
    start_at: int = Field(alias="startAt")
    total: int
    is_last: bool = Field(alias="isLast")
    values: list[IssueType]


class CreatedIssue(BaseModel):
    """Body of POST /rest/api/2/issue; only the key is needed."""

    key: str


class IssueDraft(BaseModel):
    """Answers collected during one workflow run.

    Frozen: each step returns an updated copy via ``model_copy``.
    """

    model_config = ConfigDict(frozen=True)

    project_key: str | None = None
    title: str | None = None
    description: str | None = None
    issue_type: IssueType | None = None
    confirmed: bool = False

    @property
    def is_ready(self) -> bool:
        return bool(self.project_key and self.title and self.issue_type and self.confirmed)
