"""Jira API client wrapper (REST v2 + lazily paginated search)."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from typing import Any

from jira import JIRA, JIRAError
from requests.exceptions import RequestException

from .config import JIRA_REST_API_VERSION, SEARCH_PAGE_SIZE

logger = logging.getLogger(__name__)


class TrackerError(RuntimeError):
    """The tracker answered, but not with something we can use."""


class TrackerConnectionError(TrackerError):
    """The tracker could not be reached or rejected the credentials."""


class IssueFetchError(TrackerError):
    """A single issue could not be fetched."""


class _EndpointMissing(TrackerError):
    """The server does not offer the requested search endpoint."""


class JiraAPI:
    def __init__(self, server: str, username: str, password: str):
        self.server = server.rstrip("/")
        try:
            self.client = JIRA(
                basic_auth=(username, password),
                options={"server": self.server, "rest_api_version": JIRA_REST_API_VERSION},
            )
        except (JIRAError, RequestException) as exc:
            raise TrackerConnectionError(str(exc)) from exc

    def _session(self):
        session = getattr(self.client, "_session", None)
        if session is None:
            raise TrackerError("JIRA session unavailable")
        return session

    def iter_search(
        self,
        jql: str,
        fields: Sequence[str] | None = None,
        page_size: int = SEARCH_PAGE_SIZE,
    ) -> Iterator[dict[str, Any]]:
        """Yield raw issues matching ``jql`` in query order.

        Pages are requested only as the caller advances, so the first issue is
        available before the whole result set has been downloaded. Servers without
        the enhanced search endpoint are walked with classic ``startAt`` paging.
        """
        started = False
        try:
            for issue in self._iter_enhanced(jql, fields, page_size):
                started = True
                yield issue
        except _EndpointMissing as exc:
            if started:
                raise TrackerError("Search endpoint vanished in the middle of a walk") from exc
            logger.debug("Enhanced search unavailable, using startAt pagination")
            yield from self._iter_legacy(jql, fields, page_size)

    def _get_page(self, url: str, params: dict[str, Any]) -> dict[str, Any]:
        try:
            resp = self._session().get(url, params=params)
        except RequestException as exc:
            raise TrackerConnectionError(str(exc)) from exc
        if resp.status_code in (404, 405):
            raise _EndpointMissing(f"Search endpoint not found {resp.status_code}: {url}")
        if resp.status_code >= 400:
            raise TrackerError(f"Search failed {resp.status_code}: {resp.text[:200]}")
        try:
            data = resp.json()
        except ValueError as exc:
            raise TrackerError(f"Search returned non-JSON response: {resp.text[:200]}") from exc
        return data or {}

    def _iter_enhanced(
        self, jql: str, fields: Sequence[str] | None, page_size: int
    ) -> Iterator[dict[str, Any]]:
        url = f"{self.server}/rest/api/{JIRA_REST_API_VERSION}/search/jql"
        params: dict[str, Any] = {"jql": jql, "maxResults": page_size}
        if fields:
            params["fields"] = ",".join(fields)
        token = None
        while True:
            qp = dict(params)
            if token:
                qp["nextPageToken"] = token
            data = self._get_page(url, qp)
            yield from data.get("issues", [])
            token = data.get("nextPageToken")
            if not token or data.get("isLast") is True:
                break

    def _iter_legacy(
        self, jql: str, fields: Sequence[str] | None, page_size: int
    ) -> Iterator[dict[str, Any]]:
        url = f"{self.server}/rest/api/{JIRA_REST_API_VERSION}/search"
        params: dict[str, Any] = {"jql": jql, "maxResults": page_size}
        if fields:
            params["fields"] = ",".join(fields)
        start_at = 0
        while True:
            data = self._get_page(url, {**params, "startAt": start_at})
            batch = data.get("issues", [])
            yield from batch
            start_at += len(batch)
            total = data.get("total")
            if not batch or (isinstance(total, int) and start_at >= total):
                break

    def fetch_issue_raw(
        self,
        issue_key: str,
        fields: Sequence[str] | None = None,
    ) -> dict[str, Any]:
        try:
            issue = self.client.issue(issue_key, fields=",".join(fields) if fields else None)
        except (JIRAError, RequestException) as exc:  # pragma: no cover - network error path
            raise IssueFetchError(f"Failed to fetch issue {issue_key}: {exc}") from exc
        if hasattr(issue, "raw"):
            return issue.raw
        if isinstance(issue, dict):
            return issue
        raise IssueFetchError(f"Unexpected issue payload type for {issue_key}: {type(issue)!r}")
