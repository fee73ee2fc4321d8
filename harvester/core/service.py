"""ReleaseReportService: orchestrates fetching, extraction, and classification."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from typing import Any, TextIO

from harvester.visual.report import render_report

from .config import JIRA_DETAIL_FIELDS, JIRA_SEARCH_FIELDS
from .jira_client import IssueFetchError, JiraAPI
from .mappers import ExtractionError, map_ticket
from .models import Buckets, Tally, TicketModel
from .rules import RuleTables, classify

DETAIL_FIELDS: Sequence[str] = tuple(JIRA_DETAIL_FIELDS)
ProgressCallback = Callable[[str, int | None, int | None], None]

logger = logging.getLogger(__name__)


class ReleaseReportService:
    def __init__(self, api: JiraAPI, rules: RuleTables | None = None):
        self.api = api
        self.rules = rules or RuleTables()

    # ------------------ Extraction ------------------
    def extract(self, issue: dict[str, Any]) -> TicketModel:
        """Build a ticket from a search hit by refetching the full issue.

        The search listing does not carry complete comment data, so every hit
        is fetched again by key. Raises ``ExtractionError`` when that fails.
        """
        key = issue.get("key")
        if not key:
            raise ExtractionError(None, "search result has no key")
        try:
            raw = self.api.fetch_issue_raw(key, fields=DETAIL_FIELDS)
        except IssueFetchError as exc:
            raise ExtractionError(key, str(exc)) from exc
        if not raw:
            raise ExtractionError(key, "detail fetch returned nothing")
        return map_ticket(raw)

    def iter_tickets(
        self,
        jql: str,
        *,
        progress: ProgressCallback | None = None,
    ) -> Iterator[TicketModel]:
        """Yield tickets for ``jql`` in query order, skipping failed extractions."""
        for idx, issue in enumerate(self.api.iter_search(jql, fields=JIRA_SEARCH_FIELDS), start=1):
            if progress:
                progress(f"Fetching {issue.get('key')}", idx, None)
            try:
                ticket = self.extract(issue)
            except ExtractionError as exc:
                logger.warning("Skipping issue %s: %s", exc.key, exc.reason)
                continue
            yield ticket

    # ------------------ Aggregation ------------------
    def collect(
        self,
        jql: str,
        *,
        progress: ProgressCallback | None = None,
    ) -> Buckets:
        buckets = Buckets()
        for ticket in self.iter_tickets(jql, progress=progress):
            bucket = classify(ticket, self.rules)
            if bucket is None:
                logger.debug("Dropping %s (resolution %r)", ticket.key, ticket.resolution)
                continue
            buckets.add(bucket, ticket)
        return buckets

    # ------------------ Pipeline ------------------
    def run(
        self,
        jql: str,
        open_sink: Callable[[], TextIO],
        *,
        progress: ProgressCallback | None = None,
    ) -> Tally:
        """Collect tickets for ``jql`` and write the report to ``open_sink()``.

        The sink is opened only once every ticket has been classified, so a
        run that fails while talking to the tracker leaves no report behind.
        """
        buckets = self.collect(jql, progress=progress)
        if progress:
            progress("Writing report", None, None)
        with open_sink() as sink:
            return render_report(sink, buckets)
