"""Mapping raw Jira issue JSON into TicketModel instances."""

from __future__ import annotations

from typing import Any

from .models import CommentModel, LinkModel, TicketModel


class ExtractionError(RuntimeError):
    """No ticket could be built for an issue."""

    def __init__(self, key: str | None, reason: str):
        super().__init__(f"{key or '<no key>'}: {reason}")
        self.key = key
        self.reason = reason


def date_only(value: Any) -> str:
    """Keep the calendar date of a Jira timestamp.

    >>> date_only("2024-03-11T10:15:00.000+0200")
    '2024-03-11'
    """
    if not value:
        return ""
    text = str(value)
    head, sep, _ = text.partition("T")
    return head if sep and head else text


def strip_cr(value: Any) -> str:
    if not value:
        return ""
    return str(value).replace("\r", "")


def _name(node: Any, attr: str = "name") -> str:
    if not isinstance(node, dict):
        return ""
    return node.get(attr) or ""


def map_link(raw_link: dict[str, Any]) -> LinkModel | None:
    """Outward link summary, or ``None`` when the target carries no metadata."""
    outward = raw_link.get("outwardIssue")
    if not isinstance(outward, dict):
        return None
    fields = outward.get("fields")
    if not isinstance(fields, dict):
        return None
    return LinkModel(
        key=outward.get("key") or "",
        summary=fields.get("summary") or "",
        issuetype=_name(fields.get("issuetype")),
        priority=_name(fields.get("priority")),
        status=_name(fields.get("status")),
    )


def map_comment(raw_comment: dict[str, Any]) -> CommentModel:
    return CommentModel(
        author=_name(raw_comment.get("author"), "displayName"),
        updated=date_only(raw_comment.get("updated")),
        body=strip_cr(raw_comment.get("body")),
    )


def map_ticket(raw: dict[str, Any]) -> TicketModel:
    key = raw.get("key")
    if not key:
        raise ExtractionError(None, "issue has no key")
    fields = raw.get("fields")
    if not isinstance(fields, dict):
        raise ExtractionError(key, "issue has no fields")

    links = []
    for raw_link in fields.get("issuelinks") or []:
        link = map_link(raw_link)
        if link is not None:
            links.append(link)

    comment_block = fields.get("comment") or {}
    comments = [map_comment(c) for c in comment_block.get("comments") or []]

    return TicketModel(
        key=key,
        summary=fields.get("summary") or "",
        issuetype=_name(fields.get("issuetype")),
        priority=_name(fields.get("priority")),
        resolution=_name(fields.get("resolution")),
        assignee=_name(fields.get("assignee"), "displayName"),
        creator=_name(fields.get("creator"), "displayName"),
        reporter=_name(fields.get("reporter"), "displayName"),
        created=date_only(fields.get("created")),
        resolution_date=date_only(fields.get("resolutiondate")),
        description=strip_cr(fields.get("description")),
        links=tuple(links),
        comments=tuple(comments),
    )
