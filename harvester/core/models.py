"""Domain data models for classified tickets, their links and comments."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum


class Bucket(str, Enum):
    """Report section a ticket is filed under."""

    DONE = "done"
    FIXES = "fixes"
    NOOP = "noop"
    WEIRD = "weird"


class DisplayMode(Enum):
    FULL_DETAIL = "full"
    KEY_ONLY = "key"


@dataclass(slots=True, frozen=True)
class LinkModel:
    key: str
    summary: str
    issuetype: str
    priority: str
    status: str


@dataclass(slots=True, frozen=True)
class CommentModel:
    author: str
    updated: str
    body: str


@dataclass(slots=True, frozen=True)
class TicketModel:
    key: str
    summary: str = ""
    issuetype: str = ""
    priority: str = ""
    resolution: str = ""
    assignee: str = ""
    creator: str = ""
    reporter: str = ""
    created: str = ""
    resolution_date: str = ""
    description: str = ""
    links: tuple[LinkModel, ...] = ()
    comments: tuple[CommentModel, ...] = ()


@dataclass(slots=True)
class Buckets:
    """Per-section ticket lists, append-only, in arrival order."""

    done: list[TicketModel] = field(default_factory=list)
    fixes: list[TicketModel] = field(default_factory=list)
    noop: list[TicketModel] = field(default_factory=list)
    weird: list[TicketModel] = field(default_factory=list)

    def get(self, bucket: Bucket) -> list[TicketModel]:
        return getattr(self, bucket.value)

    def add(self, bucket: Bucket, ticket: TicketModel) -> None:
        self.get(bucket).append(ticket)

    def __iter__(self) -> Iterator[tuple[Bucket, list[TicketModel]]]:
        for bucket in Bucket:
            yield bucket, self.get(bucket)

    def tally(self) -> Tally:
        return Tally(done=len(self.done), fixes=len(self.fixes), noop=len(self.noop))


@dataclass(slots=True, frozen=True)
class Tally:
    """Reportable counts; unclassifiable tickets are deliberately not counted."""

    done: int = 0
    fixes: int = 0
    noop: int = 0

    @property
    def total(self) -> int:
        return self.done + self.fixes + self.noop
