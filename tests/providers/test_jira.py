"""Tests for JiraClient using pytest-httpx."""

import json

import httpx
import pytest
from pytest_httpx import HTTPXMock

from fast_task.errors import MalformedResponse, NotConfiguredError, ServiceError, TransportFailure
from fast_task.models import ConnectionProfile, IssueType
from fast_task.providers.jira import JiraClient

ENDPOINT = "https://jira.example.com"
MYSELF_URL = f"{ENDPOINT}/rest/api/2/myself"
ISSUE_TYPES_URL = f"{ENDPOINT}/rest/api/2/issue/createmeta/OPS/issuetypes"
CREATE_URL = f"{ENDPOINT}/rest/api/2/issue"


def _page(values: list[dict]) -> dict:
    return {"maxResults": 50, "startAt": 0, "total": len(values), "isLast": True, "values": values}


class TestConstruction:
    def test_unconfigured_profile_rejected(self) -> None:
        with pytest.raises(NotConfiguredError):
            JiraClient(ConnectionProfile())

    def test_missing_token_rejected(self) -> None:
        with pytest.raises(NotConfiguredError):
            JiraClient(ConnectionProfile(endpoint=ENDPOINT, identity="a@b.io"))


class TestCheckConnectivity:
    def test_success_sends_bearer_header(self, httpx_mock: HTTPXMock, profile: ConnectionProfile) -> None:
        httpx_mock.add_response(url=MYSELF_URL, method="GET", text="not even json")
        JiraClient(profile).check_connectivity()

        request = httpx_mock.get_request()
        assert request is not None
        assert request.headers["Authorization"] == "Bearer tok_secret"

    def test_trailing_slash_in_endpoint(self, httpx_mock: HTTPXMock, profile: ConnectionProfile) -> None:
        httpx_mock.add_response(url=MYSELF_URL, method="GET", status_code=204)
        JiraClient(profile.model_copy(update={"endpoint": f"{ENDPOINT}/"})).check_connectivity()

    def test_unauthorized_is_service_error(self, httpx_mock: HTTPXMock, profile: ConnectionProfile) -> None:
        httpx_mock.add_response(url=MYSELF_URL, method="GET", status_code=401, text="Unauthorized")
        with pytest.raises(ServiceError) as exc_info:
            JiraClient(profile).check_connectivity()
        assert exc_info.value.status == 401
        assert exc_info.value.body == "Unauthorized"

    def test_connect_error_is_transport_failure(self, httpx_mock: HTTPXMock, profile: ConnectionProfile) -> None:
        httpx_mock.add_exception(httpx.ConnectError("Connection refused"), url=MYSELF_URL)
        with pytest.raises(TransportFailure, match="Connection refused"):
            JiraClient(profile).check_connectivity()

    def test_timeout_is_transport_failure(self, httpx_mock: HTTPXMock, profile: ConnectionProfile) -> None:
        httpx_mock.add_exception(httpx.ReadTimeout("timed out"), url=MYSELF_URL)
        with pytest.raises(TransportFailure):
            JiraClient(profile).check_connectivity()

    def test_undecodable_body_is_malformed(self, httpx_mock: HTTPXMock, profile: ConnectionProfile) -> None:
        httpx_mock.add_response(
            url=MYSELF_URL,
            method="GET",
            headers={"Content-Encoding": "gzip"},
            content=b"not gzip at all",
        )
        with pytest.raises(MalformedResponse, match="undecodable"):
            JiraClient(profile).check_connectivity()

    def test_other_request_errors_are_transport_failures(
        self, httpx_mock: HTTPXMock, profile: ConnectionProfile
    ) -> None:
        httpx_mock.add_exception(httpx.TooManyRedirects("Exceeded maximum allowed redirects."), url=MYSELF_URL)
        with pytest.raises(TransportFailure, match="redirects"):
            JiraClient(profile).check_connectivity()


class TestFetchIssueTypes:
    def test_returns_issue_types(self, httpx_mock: HTTPXMock, profile: ConnectionProfile) -> None:
        httpx_mock.add_response(
            url=ISSUE_TYPES_URL,
            method="GET",
            json=_page(
                [
                    {"id": "10001", "name": "Bug", "description": None},
                    {"id": "10002", "name": "Task", "description": "A unit of work"},
                ]
            ),
        )
        issue_types = JiraClient(profile).fetch_issue_types("OPS")

        assert issue_types == [
            IssueType(id="10001", name="Bug", description=None),
            IssueType(id="10002", name="Task", description="A unit of work"),
        ]

    def test_empty_list_is_not_an_error(self, httpx_mock: HTTPXMock, profile: ConnectionProfile) -> None:
        httpx_mock.add_response(url=ISSUE_TYPES_URL, method="GET", json=_page([]))
        assert JiraClient(profile).fetch_issue_types("OPS") == []

    def test_missing_values_is_malformed(self, httpx_mock: HTTPXMock, profile: ConnectionProfile) -> None:
        httpx_mock.add_response(url=ISSUE_TYPES_URL, method="GET", json={"issueTypes": []})
        with pytest.raises(MalformedResponse):
            JiraClient(profile).fetch_issue_types("OPS")

    def test_non_json_is_malformed(self, httpx_mock: HTTPXMock, profile: ConnectionProfile) -> None:
        httpx_mock.add_response(url=ISSUE_TYPES_URL, method="GET", text="<html>login</html>")
        with pytest.raises(MalformedResponse):
            JiraClient(profile).fetch_issue_types("OPS")

    def test_not_found_is_service_error(self, httpx_mock: HTTPXMock, profile: ConnectionProfile) -> None:
        httpx_mock.add_response(url=ISSUE_TYPES_URL, method="GET", status_code=404, text='{"errorMessages":[]}')
        with pytest.raises(ServiceError) as exc_info:
            JiraClient(profile).fetch_issue_types("OPS")
        assert exc_info.value.status == 404


class TestCreateIssue:
    def test_posts_fields_and_returns_browse_url(self, httpx_mock: HTTPXMock, profile: ConnectionProfile) -> None:
        httpx_mock.add_response(
            url=CREATE_URL,
            method="POST",
            status_code=201,
            json={"id": "1", "key": "OPS-42", "self": f"{ENDPOINT}/rest/api/2/issue/1"},
        )
        url = JiraClient(profile).create_issue("OPS", "Disk full", "df shows 100%", "10001")

        assert url == f"{ENDPOINT}/browse/OPS-42"
        request = httpx_mock.get_request()
        assert request is not None
        assert request.headers["Authorization"] == "Bearer tok_secret"
        assert json.loads(request.content) == {
            "fields": {
                "project": {"key": "OPS"},
                "summary": "Disk full",
                "description": "df shows 100%",
                "issuetype": {"id": "10001"},
            }
        }

    def test_missing_description_sent_as_empty_string(
        self, httpx_mock: HTTPXMock, profile: ConnectionProfile
    ) -> None:
        httpx_mock.add_response(url=CREATE_URL, method="POST", json={"key": "OPS-43"})
        JiraClient(profile).create_issue("OPS", "Disk full", None, "10001")

        request = httpx_mock.get_request()
        assert request is not None
        assert json.loads(request.content)["fields"]["description"] == ""

    def test_bad_request_is_service_error(self, httpx_mock: HTTPXMock, profile: ConnectionProfile) -> None:
        body = '{"errors":{"summary":"You must specify a summary of the issue."}}'
        httpx_mock.add_response(url=CREATE_URL, method="POST", status_code=400, text=body)
        with pytest.raises(ServiceError) as exc_info:
            JiraClient(profile).create_issue("OPS", "x", None, "10001")
        assert exc_info.value.status == 400
        assert exc_info.value.body == body

    def test_missing_key_is_malformed(self, httpx_mock: HTTPXMock, profile: ConnectionProfile) -> None:
        httpx_mock.add_response(url=CREATE_URL, method="POST", json={"id": "1"})
        with pytest.raises(MalformedResponse):
            JiraClient(profile).create_issue("OPS", "x", None, "10001")
