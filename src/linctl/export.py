"""Issue export to CSV and Markdown."""

from __future__ import annotations

import csv
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from linctl.constants import EXPORT_PAGE_SIZE
from linctl.json_path import get_list, get_path, get_str

if TYPE_CHECKING:
    from typing import TextIO

CSV_QUERY = f"""
query($filter: IssueFilter) {{
    issues(first: {EXPORT_PAGE_SIZE}, filter: $filter) {{
        nodes {{
            identifier
            title
            description
            priority
            estimate
            dueDate
            createdAt
            updatedAt
            state {{ name type }}
            assignee {{ name email }}
            team {{ key name }}
            labels {{ nodes {{ name }} }}
            project {{ name }}
            cycle {{ number name }}
        }}
    }}
}}
"""

MARKDOWN_QUERY = f"""
query($filter: IssueFilter) {{
    issues(first: {EXPORT_PAGE_SIZE}, filter: $filter) {{
        nodes {{
            identifier
            title
            description
            priority
            state {{ name }}
            assignee {{ name }}
            team {{ key }}
            labels {{ nodes {{ name }} }}
        }}
    }}
}}
"""

CSV_HEADER = [
    "Identifier",
    "Title",
    "Status",
    "Priority",
    "Estimate",
    "Due Date",
    "Assignee",
    "Team",
    "Project",
    "Cycle",
    "Labels",
    "Created",
    "Updated",
]

_NOT_COMPLETED = {"type": {"neq": "completed"}}


def build_filter(team: str | None, include_completed: bool = False) -> dict[str, Any]:
    """Build the ``IssueFilter`` used by both exports."""
    issue_filter: dict[str, Any] = {}
    if team:
        issue_filter["team"] = {"key": {"eq": team}}
    if not include_completed:
        issue_filter["state"] = _NOT_COMPLETED
    return issue_filter


def label_names(issue: Any) -> list[str]:
    """Return the label names attached to an issue."""
    names: list[str] = []
    for label in get_list(issue, ("labels", "nodes")):
        name = get_path(label, ("name",))
        if isinstance(name, str):
            names.append(name)
    return names


def _number(value: Any, default: int | float) -> int | float:
    # bool is an int subclass but never a valid priority/estimate
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return default


def _estimate(value: Any) -> int | float:
    estimate = float(_number(value, 0))
    return int(estimate) if estimate.is_integer() else estimate


def write_csv(issues: list[Any], out: TextIO) -> None:
    """Write issues as CSV.

    Text columns are quoted, numeric columns (priority, estimate) are not.
    Missing numbers default to 0 and whole estimates are written without a
    fraction. Dates are cut to ``YYYY-MM-DD``.

    Args:
        issues: Issue documents from ``CSV_QUERY``
        out: Text stream to write to
    """
    writer = csv.writer(out, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    out.write(",".join(CSV_HEADER) + "\n")
    for issue in issues:
        writer.writerow(
            [
                get_str(issue, ("identifier",)),
                get_str(issue, ("title",)),
                get_str(issue, ("state", "name")),
                int(_number(get_path(issue, ("priority",)), 0)),
                _estimate(get_path(issue, ("estimate",))),
                get_str(issue, ("dueDate",)),
                get_str(issue, ("assignee", "name")),
                get_str(issue, ("team", "key")),
                get_str(issue, ("project", "name")),
                get_str(issue, ("cycle", "name")),
                "; ".join(label_names(issue)),
                get_str(issue, ("createdAt",))[:10],
                get_str(issue, ("updatedAt",))[:10],
            ],
        )


def write_markdown(
    issues: list[Any],
    out: TextIO,
    now: datetime | None = None,
) -> None:
    """Write issues as a Markdown document grouped by status.

    Status sections appear in the order their first issue was returned.

    Args:
        issues: Issue documents from ``MARKDOWN_QUERY``
        out: Text stream to write to
        now: Generation timestamp (default: current UTC time)
    """
    generated = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    out.write("# Issues Export\n\n")
    out.write(f"Generated: {generated.strftime('%Y-%m-%d %H:%M UTC')}\n\n")

    by_status: dict[str, list[Any]] = {}
    for issue in issues:
        status = get_str(issue, ("state", "name"), "Unknown")
        by_status.setdefault(status, []).append(issue)

    for status, status_issues in by_status.items():
        out.write(f"## {status}\n\n")
        for issue in status_issues:
            labels = label_names(issue)
            label_str = f" `{'` `'.join(labels)}`" if labels else ""
            identifier = get_str(issue, ("identifier",))
            title = get_str(issue, ("title",))
            out.write(f"- **{identifier}** {title}{label_str}\n")

            assignee = get_path(issue, ("assignee", "name"))
            if isinstance(assignee, str):
                out.write(f"  - Assignee: {assignee}\n")
        out.write("\n")
