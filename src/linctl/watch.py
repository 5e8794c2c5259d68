"""Polling watch engine with change detection.

A watch session repeatedly fetches either a single issue or a filtered
collection of issues and emits an event only when the observable state
changes:

- Entity mode compares the issue's ``updatedAt`` token between polls. The
  first poll always emits ``initial``; later polls emit ``updated`` only when
  the token differs.
- Collection mode keeps a set of seen issue ids. The first poll only records
  the baseline; later polls emit ``new_issue`` once per id never seen before.
  Ids are never forgotten, so an issue that disappears and comes back does
  not fire again.
"""

from __future__ import annotations

import functools
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

import orjson
import typer

from linctl.constants import (
    MISSING_ASSIGNEE,
    MISSING_IDENTIFIER,
    MISSING_STATUS,
    WATCH_COLLECTION_PAGE_SIZE,
)
from linctl.errors import NotFoundError
from linctl.json_path import get_list, get_path, get_str

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

logger = logging.getLogger(__name__)

ISSUE_QUERY = """
query($id: String!) {
    issue(id: $id) {
        id
        identifier
        title
        updatedAt
        state { name }
        assignee { name }
        priority
        labels { nodes { name } }
    }
}
"""

ISSUES_QUERY = f"""
query($filter: IssueFilter) {{
    issues(first: {WATCH_COLLECTION_PAGE_SIZE}, filter: $filter, orderBy: createdAt) {{
        nodes {{
            id
            identifier
            title
            createdAt
            state {{ name }}
            assignee {{ name }}
        }}
    }}
}}
"""


class Fetcher(Protocol):
    """Anything that can run a GraphQL document and return the response."""

    def query(
        self,
        query: str,
        variables: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]: ...


@dataclass(frozen=True)
class EntityTarget:
    """Watch a single issue by id or identifier."""

    id: str


@dataclass(frozen=True)
class CollectionTarget:
    """Watch the issues matching a filter (optionally one team)."""

    team: str | None = None

    def filter(self) -> dict[str, Any]:
        """Build the ``IssueFilter`` for this target."""
        issue_filter: dict[str, Any] = {}
        if self.team:
            issue_filter["team"] = {"key": {"eq": self.team}}
        return issue_filter


WatchTarget = EntityTarget | CollectionTarget


class ChangeKind(str, Enum):
    """Classification of a detected change."""

    INITIAL = "initial"
    UPDATED = "updated"
    NEW_MEMBER = "new_issue"


@dataclass
class ChangeEvent:
    """A detected change, ready to be rendered."""

    kind: ChangeKind
    issue: Any
    timestamp: datetime  # when the change was detected, not when it happened

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary for JSON serialization."""
        return {
            "event": self.kind.value,
            "issue": self.issue,
            "timestamp": self.timestamp.astimezone(timezone.utc).isoformat(),
        }


class EntityChangeDetector:
    """Tracks the version token of one issue across polls."""

    def __init__(self) -> None:
        self.initialized = False
        self.version: Any = None

    def observe(self, version: Any, issue: Any, now: datetime) -> ChangeEvent | None:
        """Classify a freshly fetched version token.

        An absent token is compared like any other value.

        Args:
            version: The issue's version token (``None`` when absent)
            issue: The full fetched issue document
            now: Detection timestamp

        Returns:
            An ``initial`` or ``updated`` event, or None when unchanged
        """
        if not self.initialized:
            self.initialized = True
            self.version = version
            return ChangeEvent(ChangeKind.INITIAL, issue, now)

        if version == self.version:
            return None

        logger.debug("Version changed: %r -> %r", self.version, version)
        self.version = version
        return ChangeEvent(ChangeKind.UPDATED, issue, now)


class CollectionChangeDetector:
    """Tracks every issue id seen in a collection across polls."""

    def __init__(self) -> None:
        self.seen: set[str] = set()
        self.baseline_done = False

    def observe(self, issues: list[Any], now: datetime) -> list[ChangeEvent]:
        """Record ids from one poll and classify the new ones.

        Args:
            issues: Issue documents in the order the API returned them
            now: Detection timestamp

        Returns:
            One ``new_issue`` event per unseen id, in remote order; always
            empty on the first poll
        """
        events: list[ChangeEvent] = []
        for issue in issues:
            issue_id = get_str(issue, ("id",))
            if issue_id in self.seen:
                continue
            self.seen.add(issue_id)
            if self.baseline_done:
                events.append(ChangeEvent(ChangeKind.NEW_MEMBER, issue, now))

        if not self.baseline_done:
            logger.debug("Baseline recorded with %d issues", len(self.seen))
        self.baseline_done = True
        return events


class EventEmitter:
    """Renders change events as JSON lines or human-readable text."""

    def __init__(
        self,
        json_output: bool = False,
        fallback_id: str | None = None,
        echo: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize the emitter.

        Args:
            json_output: Emit one JSON object per event instead of text
            fallback_id: Identifier shown when an issue has none (entity mode)
            echo: Line writer; must flush each line (default: ``typer.echo``)
        """
        self.json_output = json_output
        self.fallback_id = fallback_id
        self.echo = echo or typer.echo

    def emit(self, event: ChangeEvent) -> None:
        """Write one rendered unit for ``event``."""
        for line in self.render(event):
            self.echo(line)

    def render(self, event: ChangeEvent) -> list[str]:
        """Render ``event`` into the lines that ``emit`` writes."""
        if self.json_output:
            return [orjson.dumps(event.to_dict()).decode()]

        issue = event.issue
        identifier = get_str(issue, ("identifier",), self.fallback_id or MISSING_IDENTIFIER)
        title = get_str(issue, ("title",))
        status = get_str(issue, ("state", "name"), MISSING_STATUS)
        assignee = get_str(issue, ("assignee", "name"), MISSING_ASSIGNEE)
        clock = event.timestamp.astimezone(timezone.utc).strftime("%H:%M:%S")

        if event.kind is ChangeKind.INITIAL:
            return [
                f"Initial state: {identifier} - {title}",
                f"  Status: {status}, Assignee: {assignee}",
            ]
        if event.kind is ChangeKind.UPDATED:
            return [
                f"[{clock}] {identifier} updated - "
                f"Status: {status}, Assignee: {assignee}",
            ]
        return [
            f"[{clock}] NEW: {identifier} - {title} "
            f"(Status: {status}, Assignee: {assignee})",
        ]


class WatchSession:
    """One polling loop bound to one target.

    The session owns its detector state exclusively. Exactly one fetch is
    in flight at a time, and the only suspension point is the wait between
    polls.
    """

    def __init__(
        self,
        client: Fetcher,
        target: WatchTarget,
        emitter: EventEmitter,
        interval: float,
        cancel: threading.Event | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            client: Fetcher used for every poll
            target: What to watch
            emitter: Where events are written
            interval: Seconds to wait after each poll
            cancel: Token that stops the loop when set
            clock: Source of detection timestamps (default: UTC now)
        """
        if interval < 0:
            msg = f"Interval must not be negative, got {interval}"
            raise ValueError(msg)
        self.client = client
        self.target = target
        self.emitter = emitter
        self.interval = interval
        self.cancel = cancel or threading.Event()
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.polls = 0

        self.detector: EntityChangeDetector | CollectionChangeDetector
        self._poll: Callable[[], list[ChangeEvent]]
        if isinstance(target, EntityTarget):
            entity_detector = EntityChangeDetector()
            self.detector = entity_detector
            self._poll = functools.partial(self._poll_entity, target, entity_detector)
        else:
            collection_detector = CollectionChangeDetector()
            self.detector = collection_detector
            self._poll = functools.partial(
                self._poll_collection,
                target,
                collection_detector,
            )

    def poll_once(self) -> list[ChangeEvent]:
        """Fetch once, classify, and emit the resulting events.

        Returns:
            The events emitted by this poll

        Raises:
            ApiError: If the fetch fails
            NotFoundError: If the watched issue is absent (entity mode)
        """
        events = self._poll()
        self.polls += 1
        for event in events:
            self.emitter.emit(event)
        return events

    def _poll_entity(
        self,
        target: EntityTarget,
        detector: EntityChangeDetector,
    ) -> list[ChangeEvent]:
        response = self.client.query(ISSUE_QUERY, {"id": target.id})
        issue = get_path(response, ("data", "issue"))
        if issue is None:
            msg = f"Issue not found: {target.id}"
            raise NotFoundError(msg)

        version = get_path(issue, ("updatedAt",))
        event = detector.observe(version, issue, self.clock())
        return [event] if event is not None else []

    def _poll_collection(
        self,
        target: CollectionTarget,
        detector: CollectionChangeDetector,
    ) -> list[ChangeEvent]:
        response = self.client.query(ISSUES_QUERY, {"filter": target.filter()})
        issues = get_list(response, ("data", "issues", "nodes"))
        return detector.observe(issues, self.clock())

    def run(self) -> None:
        """Poll until the cancel token is set or a poll fails.

        The interval is applied after each poll completes, so slow fetches
        stretch the cadence. Setting the token interrupts the wait at once.
        """
        logger.debug("Starting watch on %s every %ss", self.target, self.interval)
        while not self.cancel.is_set():
            self.poll_once()
            if self.cancel.wait(self.interval):
                break
        logger.debug("Watch on %s cancelled after %d polls", self.target, self.polls)
