"""Abstract base class for issue tracker clients."""

from abc import ABC, abstractmethod

from fast_task.models import IssueType


class TrackerClient(ABC):
    @abstractmethod
    def check_connectivity(self) -> None: ...

    @abstractmethod
    def fetch_issue_types(self, project_key: str) -> list[IssueType]: ...

    @abstractmethod
    def create_issue(
        self,
        project_key: str,
        title: str,
        description: str | None,
        issue_type_id: str,
    ) -> str: ...
