"""Plain-text release summary rendering."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TextIO

from harvester.core.config import (
    ENTRY_SEPARATOR,
    RELATED_TICKETS_HEADER,
    RUN_SUMMARY_TEMPLATE,
    SECTION_ORDER,
    SECTION_TITLES,
    TALLY_TEMPLATE,
)
from harvester.core.models import Bucket, Buckets, DisplayMode, Tally, TicketModel


def section_styles() -> dict[Bucket, tuple[str, DisplayMode]]:
    """Title and display mode per bucket, in report order."""
    styles: dict[Bucket, tuple[str, DisplayMode]] = {}
    for name in SECTION_ORDER:
        title, full = SECTION_TITLES[name]
        styles[Bucket(name)] = (title, DisplayMode.FULL_DETAIL if full else DisplayMode.KEY_ONLY)
    return styles


def format_ticket(ticket: TicketModel, mode: DisplayMode) -> str:
    lines = [
        f"{ticket.key:<14}{ticket.summary}\n",
        f"{ticket.issuetype:<14}{ticket.priority:<18}{ticket.resolution}\n",
    ]
    if mode is DisplayMode.FULL_DETAIL:
        lines.append(
            f"{ticket.created:<14}{ticket.assignee:<18}{ticket.resolution_date}\n\n"
            f"{ticket.description}\n\n"
        )
        if ticket.links:
            lines.append(f"{RELATED_TICKETS_HEADER}\n")
        for link in ticket.links:
            lines.append(
                f"\t{link.key:<20}{link.summary}\n"
                f"\t{link.issuetype}/{link.priority}/{link.status}\n\n"
            )
        for comment in ticket.comments:
            lines.append(f"{comment.author} ({comment.updated}): {comment.body}\n\n")
    lines.append(f"\n{ENTRY_SEPARATOR}\n\n")
    return "".join(lines)


def format_tally(tally: Tally) -> str:
    return TALLY_TEMPLATE.format(
        done=tally.done, fixes=tally.fixes, noop=tally.noop, total=tally.total
    )


def format_run_summary(tally: Tally) -> str:
    return RUN_SUMMARY_TEMPLATE.format(
        done=tally.done, fixes=tally.fixes, noop=tally.noop, total=tally.total
    )


def render_report(
    sink: TextIO,
    buckets: Buckets,
    styles: Mapping[Bucket, tuple[str, DisplayMode]] | None = None,
) -> Tally:
    """Write every section followed by the tally line; return the tally.

    Empty sections get no title but still leave their trailing spacing, so
    the layout of a report does not depend on which sections are populated.
    """
    styles = styles or section_styles()
    for bucket, (title, mode) in styles.items():
        tickets = buckets.get(bucket)
        if tickets:
            sink.write(f"{title}\n\n")
        for ticket in tickets:
            sink.write(format_ticket(ticket, mode))
        sink.write("\n\n\n")
    tally = buckets.tally()
    sink.write(format_tally(tally))
    return tally
