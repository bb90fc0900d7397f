"""Jira REST API v2 client."""

import logging

import httpx
from pydantic import ValidationError

from fast_task.errors import MalformedResponse, NotConfiguredError, ServiceError, TransportFailure
from fast_task.models import ConnectionProfile, CreatedIssue, IssueType, IssueTypePage
from fast_task.providers.base import TrackerClient

logger = logging.getLogger(__name__)

API_PREFIX = "/rest/api/2"


class JiraClient(TrackerClient):
    def __init__(self, profile: ConnectionProfile, timeout: float = 30) -> None:
        if not profile.is_configured:
            raise NotConfiguredError()
        self._profile = profile
        self._base_url = f"{profile.endpoint.rstrip('/')}{API_PREFIX}"
        self._timeout = timeout
        # Built once from the stored token and reused for every call.
        self._headers = {
            "Authorization": f"Bearer {profile.credential.get_secret_value()}",
            "Accept": "application/json",
        }

    def _request(self, method: str, path: str, body: dict | None = None) -> httpx.Response:
        url = f"{self._base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            response = httpx.request(method, url, headers=self._headers, json=body, timeout=self._timeout)
        except httpx.DecodingError as exc:
            # Body arrived but could not be decoded, e.g. a bad Content-Encoding.
            raise MalformedResponse(f"undecodable body from {url}: {exc}") from exc
        except httpx.RequestError as exc:
            raise TransportFailure(str(exc) or type(exc).__name__) from exc
        logger.debug("%s %s -> %s", method, url, response.status_code)
        if not response.is_success:
            raise ServiceError(response.status_code, response.text)
        return response

    def check_connectivity(self) -> None:
        # Any 2xx counts; the body is not inspected.
        self._request("GET", "/myself")

    def fetch_issue_types(self, project_key: str) -> list[IssueType]:
        response = self._request("GET", f"/issue/createmeta/{project_key}/issuetypes")
        try:
            page = IssueTypePage.model_validate_json(response.content)
        except ValidationError as exc:
            raise MalformedResponse(f"issue types for {project_key}: {exc}") from exc
        return page.values

    def create_issue(
        self,
        project_key: str,
        title: str,
        description: str | None,
        issue_type_id: str,
    ) -> str:
        body = {
            "fields": {
                "project": {"key": project_key},
                "summary": title,
                # Jira expects the field to be present; an absent description is sent as "".
                "description": description or "",
                "issuetype": {"id": issue_type_id},
            }
        }
        response = self._request("POST", "/issue", body)
        try:
            created = CreatedIssue.model_validate_json(response.content)
        except ValidationError as exc:
            raise MalformedResponse(f"created issue: {exc}") from exc
        return self._profile.browse_url(created.key)
