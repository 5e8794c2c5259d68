"""Tests for CSV and Markdown export."""

import csv
import io
from datetime import datetime, timezone
from typing import Any

from linctl.export import (
    CSV_HEADER,
    build_filter,
    label_names,
    write_csv,
    write_markdown,
)

FULL_ISSUE: dict[str, Any] = {
    "identifier": "ENG-1",
    "title": 'Fix "quoted" login',
    "priority": 2,
    "estimate": 3.5,
    "dueDate": "2024-06-01",
    "createdAt": "2024-01-02T03:04:05.000Z",
    "updatedAt": "2024-02-03T04:05:06.000Z",
    "state": {"name": "In Progress", "type": "started"},
    "assignee": {"name": "Ada", "email": "ada@example.com"},
    "team": {"key": "ENG", "name": "Engineering"},
    "labels": {"nodes": [{"name": "bug"}, {"name": "auth"}]},
    "project": {"name": "Q2"},
    "cycle": {"number": 4, "name": "Cycle 4"},
}


class TestBuildFilter:
    """Tests for export filters."""

    def test_defaults_exclude_completed(self) -> None:
        """Completed issues are excluded by default."""
        assert build_filter(None) == {"state": {"type": {"neq": "completed"}}}

    def test_team_and_completed(self) -> None:
        """Team filter is added and completed issues can be included."""
        assert build_filter("ENG", include_completed=True) == {
            "team": {"key": {"eq": "ENG"}},
        }


class TestLabelNames:
    """Tests for label extraction."""

    def test_names(self) -> None:
        """Label names are returned in order."""
        assert label_names(FULL_ISSUE) == ["bug", "auth"]

    def test_malformed(self) -> None:
        """Malformed label data degrades to nothing."""
        assert label_names({"labels": {"nodes": "x"}}) == []
        assert label_names({"labels": {"nodes": [{"name": None}, "y"]}}) == []


class TestWriteCsv:
    """Tests for CSV output."""

    def test_header_and_row(self) -> None:
        """The header is fixed and the row follows the column order."""
        out = io.StringIO()
        write_csv([FULL_ISSUE], out)

        lines = out.getvalue().splitlines()
        assert lines[0] == ",".join(CSV_HEADER)
        row = next(csv.reader([lines[1]]))
        assert row == [
            "ENG-1",
            'Fix "quoted" login',
            "In Progress",
            "2",
            "3.5",
            "2024-06-01",
            "Ada",
            "ENG",
            "Q2",
            "Cycle 4",
            "bug; auth",
            "2024-01-02",
            "2024-02-03",
        ]

    def test_quoting(self) -> None:
        """Text is quoted with doubled quotes, numbers are bare."""
        out = io.StringIO()
        write_csv([FULL_ISSUE], out)

        line = out.getvalue().splitlines()[1]
        assert line.startswith('"ENG-1","Fix ""quoted"" login","In Progress",2,3.5,')

    def test_missing_fields(self) -> None:
        """Missing fields become empty strings and zero numbers."""
        out = io.StringIO()
        write_csv([{}], out)

        row = next(csv.reader([out.getvalue().splitlines()[1]]))
        assert row == ["", "", "", "0", "0", "", "", "", "", "", "", "", ""]

    def test_whole_estimate_has_no_fraction(self) -> None:
        """Whole-point estimates are written like integers."""
        out = io.StringIO()
        write_csv([{**FULL_ISSUE, "estimate": 2.0}, {**FULL_ISSUE, "estimate": 5}], out)

        rows = out.getvalue().splitlines()[1:]
        assert rows[0].startswith('"ENG-1","Fix ""quoted"" login","In Progress",2,2,')
        assert rows[1].startswith('"ENG-1","Fix ""quoted"" login","In Progress",2,5,')

    def test_no_issues(self) -> None:
        """No issues writes only the header."""
        out = io.StringIO()
        write_csv([], out)

        assert out.getvalue() == ",".join(CSV_HEADER) + "\n"


class TestWriteMarkdown:
    """Tests for Markdown output."""

    NOW = datetime(2024, 5, 1, 9, 7, tzinfo=timezone.utc)

    def test_grouped_by_status(self) -> None:
        """Issues are grouped under status headings in first-seen order."""
        issues = [
            FULL_ISSUE,
            {"identifier": "ENG-2", "title": "Docs", "state": {"name": "Todo"}},
            {"identifier": "ENG-3", "title": "Tests", "state": {"name": "In Progress"}},
        ]
        out = io.StringIO()
        write_markdown(issues, out, now=self.NOW)

        assert out.getvalue() == (
            "# Issues Export\n\n"
            "Generated: 2024-05-01 09:07 UTC\n\n"
            "## In Progress\n\n"
            '- **ENG-1** Fix "quoted" login `bug` `auth`\n'
            "  - Assignee: Ada\n"
            "- **ENG-3** Tests\n"
            "\n"
            "## Todo\n\n"
            "- **ENG-2** Docs\n"
            "\n"
        )

    def test_unknown_status(self) -> None:
        """Issues without a state land under Unknown."""
        out = io.StringIO()
        write_markdown([{"identifier": "X-1", "title": "t"}], out, now=self.NOW)

        assert "## Unknown\n\n- **X-1** t\n" in out.getvalue()

    def test_empty(self) -> None:
        """No issues writes only the heading."""
        out = io.StringIO()
        write_markdown([], out, now=self.NOW)

        assert out.getvalue() == "# Issues Export\n\nGenerated: 2024-05-01 09:07 UTC\n\n"
