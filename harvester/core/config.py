"""Central configuration: rule tables, report literals, and Jira field lists."""

from __future__ import annotations

from collections.abc import Sequence

# =============================================================================
# Defaults for the command line / configuration file
# =============================================================================
DEFAULT_CONFIG_FILE = "harvester.yaml"
DEFAULT_PROJECT = "Finna"
DEFAULT_REPORT_PREFIX = "Finna-release-summary"
TIMEZONE = "Europe/Helsinki"
REPORT_TIMESTAMP_FORMAT = "%Y%m%d-%H%M"

# =============================================================================
# Classification rule tables
# =============================================================================
# Verdict names accepted in the resolution table. "weird" is also what any
# resolution missing from the table degrades to.
RESOLUTION_VERDICTS: frozenset[str] = frozenset({"done", "fixes", "noop", "weird", "skip"})
ISSUE_TYPE_VERDICTS: frozenset[str] = frozenset({"done", "fixes"})

DEFAULT_RESOLUTIONS: dict[str, str] = {
    "Fixed": "fixes",
    "Answered": "noop",
    "Partly fixed": "fixes",
    "Won't Fix": "noop",
    "Duplicate": "noop",
    "Incomplete": "noop",
    "Continued in another issue": "noop",
    "Noted for Later Evaluation": "noop",
    "Not Ours": "noop",
    "Cannot Reproduce": "noop",
    "Spam": "skip",  # never reported
    "No action required": "noop",
    "Done": "done",
    "Won't Do": "noop",
    "To be reviewed for development (Melinda)": "skip",  # never reported
}

DEFAULT_ISSUE_TYPES: dict[str, str] = {
    "Story": "done",
    "Feature": "done",
    "Epic": "done",
    "Improvement": "done",
    "Bug": "fixes",
    "Feature Request": "done",
    # Task, Sub-task and Problem come from service-desk projects
    "Task": "done",
    "Sub-task": "done",
    "Problem": "fixes",
}

# =============================================================================
# Report literals
# =============================================================================
SECTION_ORDER: Sequence[str] = ("done", "fixes", "noop", "weird")

# (title, full detail?) per section
SECTION_TITLES: dict[str, tuple[str, bool]] = {
    "done": ("Parannukset", True),
    "fixes": ("Vikakorjaukset", True),
    "noop": ("Ei tarvitse välittää", False),
    "weird": ("Tarkista nämä!", False),
}

RELATED_TICKETS_HEADER = "Aiheeseen liittyvät tiketit:"
ENTRY_SEPARATOR = "-" * 53
TALLY_TEMPLATE = (
    "Yhteensä {done} parannusta, {fixes} vikakorjausta ja {noop} tarpeetonta "
    "muutospyyntöä, kaikkiaan {total} kappaletta.\n\n"
)
RUN_SUMMARY_TEMPLATE = (
    "Done. {done} improvements, {fixes} fixes, {noop} to be ignored.  {total} issues total."
)

# =============================================================================
# Jira fetch settings
# =============================================================================
JIRA_REST_API_VERSION = "2"
SEARCH_PAGE_SIZE = 100

# The listing only needs keys; everything else comes from the detail fetch.
JIRA_SEARCH_FIELDS: Sequence[str] = ("summary",)

JIRA_DETAIL_FIELDS: Sequence[str] = (
    "summary",
    "created",
    "assignee",
    "creator",
    "reporter",
    "priority",
    "issuetype",
    "resolution",
    "resolutiondate",
    "description",
    "issuelinks",
    "comment",
)
