"""Test configuration ensuring local package import when editable install not active.

If users invoke `pytest` outside the project's virtualenv, we still add the project
root to sys.path so `import harvester` works. Also provides raw Jira payload
builders and an offline stand-in for the Jira API.
"""

from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from harvester.core.jira_client import IssueFetchError, JiraAPI  # noqa: E402


def raw_issue(
    key,
    *,
    resolution="Fixed",
    issuetype="Bug",
    priority="Major",
    summary=None,
    assignee="Alice",
    description="Steps\r\nto reproduce",
    links=None,
    comments=None,
):
    return {
        "key": key,
        "fields": {
            "summary": summary or f"Summary of {key}",
            "priority": {"name": priority} if priority else None,
            "issuetype": {"name": issuetype} if issuetype else None,
            "resolution": {"name": resolution} if resolution else None,
            "assignee": {"displayName": assignee} if assignee else None,
            "creator": {"displayName": "Carol"},
            "reporter": {"displayName": "Bob"},
            "created": "2024-03-01T09:00:00.000+0200",
            "resolutiondate": "2024-03-11T10:15:00.000+0200",
            "description": description,
            "issuelinks": links or [],
            "comment": {"comments": comments or []},
        },
    }


class DummyAPI(JiraAPI):
    """Serves canned issues; keys listed in ``missing`` fail their detail fetch."""

    def __init__(self, issues, missing=()):
        self.server = "https://jira.example.org"
        self.issues = list(issues)
        self.missing = set(missing)
        self.searches = []
        self.fetched = []

    def iter_search(self, jql, fields=None, page_size=100):
        self.searches.append(jql)
        for issue in self.issues:
            yield {"key": issue["key"], "fields": {"summary": issue["fields"]["summary"]}}

    def fetch_issue_raw(self, issue_key, fields=None):
        self.fetched.append(issue_key)
        if issue_key in self.missing:
            raise IssueFetchError(f"Failed to fetch issue {issue_key}: 404")
        for issue in self.issues:
            if issue["key"] == issue_key:
                return issue
        return {}


@pytest.fixture
def make_issue():
    return raw_issue


@pytest.fixture
def dummy_api_cls():
    return DummyAPI


class FakeResponse:
    """HTTP response stand-in; a payload that is an exception is raised by ``json()``."""

    def __init__(self, status_code, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Answers GETs from a list of (url suffix, response) pairs, in order."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None):
        self.calls.append((url, dict(params or {})))
        suffix, response = self.responses.pop(0)
        assert url.endswith(suffix), url
        return response


def api_over_session(session, server="https://jira.example.org"):
    api = JiraAPI.__new__(JiraAPI)
    api.server = server
    api.client = SimpleNamespace(_session=session)
    return api


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def session_api():
    return api_over_session
