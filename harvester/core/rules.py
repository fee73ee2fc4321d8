"""Rule tables and ticket classification.

A ticket is filed in two stages. Its resolution says *whether* something
shipped (or whether it should be reported at all); for tickets that did ship,
the issue type says *what kind* of change it was. Anything the tables do not
know about ends up in the ``weird`` bucket for manual review.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from .config import (
    DEFAULT_ISSUE_TYPES,
    DEFAULT_RESOLUTIONS,
    ISSUE_TYPE_VERDICTS,
    RESOLUTION_VERDICTS,
)
from .models import Bucket, TicketModel

logger = logging.getLogger(__name__)

SKIP = "skip"


class RuleTableError(ValueError):
    """A rule table holds a verdict the classifier does not understand."""


def _freeze(table: Mapping[str, Any], allowed: frozenset[str], label: str) -> Mapping[str, str]:
    if not isinstance(table, Mapping):
        raise RuleTableError(f"{label} must be a mapping, got {type(table).__name__}")
    frozen: dict[str, str] = {}
    for name, verdict in table.items():
        text = str(verdict).strip().lower()
        if text not in allowed:
            raise RuleTableError(
                f"{label}: unknown verdict {verdict!r} for {name!r} "
                f"(expected one of {', '.join(sorted(allowed))})"
            )
        frozen[str(name)] = text
    return MappingProxyType(frozen)


@dataclass(slots=True, frozen=True)
class RuleTables:
    resolutions: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_RESOLUTIONS))
    )
    issue_types: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_ISSUE_TYPES))
    )

    @classmethod
    def from_mappings(
        cls,
        resolutions: Mapping[str, Any] | None = None,
        issue_types: Mapping[str, Any] | None = None,
    ) -> RuleTables:
        """Build validated, read-only tables; ``None`` keeps the built-in table."""
        return cls(
            resolutions=_freeze(
                DEFAULT_RESOLUTIONS if resolutions is None else resolutions,
                RESOLUTION_VERDICTS,
                "resolutions",
            ),
            issue_types=_freeze(
                DEFAULT_ISSUE_TYPES if issue_types is None else issue_types,
                ISSUE_TYPE_VERDICTS,
                "issue_types",
            ),
        )


def classify(ticket: TicketModel, rules: RuleTables) -> Bucket | None:
    """Return the bucket for ``ticket``, or ``None`` when it must be dropped.

    Never raises: unknown resolutions, and unknown issue types under a
    completed resolution, are logged and filed as ``Bucket.WEIRD``.
    """
    verdict = rules.resolutions.get(ticket.resolution)
    if verdict is None:
        logger.warning(
            "Unexpected resolution for issue %s, please check: %r", ticket.key, ticket.resolution
        )
        return Bucket.WEIRD
    if verdict == SKIP:
        return None
    if verdict in (Bucket.NOOP.value, Bucket.WEIRD.value):
        return Bucket(verdict)

    # Completed work: the issue type decides between improvement and fix
    refined = rules.issue_types.get(ticket.issuetype)
    if refined is None:
        logger.warning(
            "Unexpected issue type for resolved issue %s, please check: %r",
            ticket.key,
            ticket.issuetype,
        )
        return Bucket.WEIRD
    return Bucket(refined)
