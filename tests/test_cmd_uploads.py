"""Tests for the uploads commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from cli_test_helpers import FakeClient, runner

from linctl.cli import app
from linctl.cli._cmd_uploads import validate_upload_url
from linctl.errors import UploadError

if TYPE_CHECKING:
    from pathlib import Path

URL = "https://uploads.linear.app/abc/def/screenshot.png"


def _install(monkeypatch: pytest.MonkeyPatch, client: FakeClient) -> None:
    monkeypatch.setattr("linctl.cli._cmd_uploads.get_client", lambda config=None: client)


class TestValidateUploadUrl:
    """Test upload URL validation."""

    def test_accepts_upload_url(self) -> None:
        """Linear upload URLs pass."""
        validate_upload_url(URL)

    @pytest.mark.parametrize(
        "url",
        [
            "http://uploads.linear.app/x",
            "https://example.com/x",
            "https://uploads.linear.app.evil.com/x",
        ],
    )
    def test_rejects_other_urls(self, url: str) -> None:
        """Anything else is rejected."""
        with pytest.raises(UploadError, match="Invalid URL"):
            validate_upload_url(url)


class TestFetch:
    """Test `linctl uploads fetch`."""

    def test_to_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """The upload is streamed into the file."""
        client = FakeClient(upload=b"\x89PNG data")
        _install(monkeypatch, client)
        target = tmp_path / "shot.png"

        result = runner.invoke(app, ["uploads", "fetch", URL, "--file", str(target)])

        assert result.exit_code == 0
        assert target.read_bytes() == b"\x89PNG data"
        assert f"Downloaded 9 bytes to {target}" in result.output
        assert client.fetched_urls == [URL]

    def test_to_stdout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without --file the bytes go to stdout."""
        _install(monkeypatch, FakeClient(upload=b"hello"))

        result = runner.invoke(app, ["uploads", "fetch", URL])

        assert result.exit_code == 0
        assert b"hello" in result.stdout_bytes
        assert "Downloaded 5 bytes" in result.output

    def test_get_alias(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """`get` is an alias for `fetch`."""
        _install(monkeypatch, FakeClient(upload=b"x"))

        result = runner.invoke(app, ["uploads", "get", URL])

        assert result.exit_code == 0

    def test_invalid_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Non-upload URLs are refused before any request."""
        client = FakeClient()
        _install(monkeypatch, client)

        result = runner.invoke(app, ["uploads", "fetch", "https://example.com/x"])

        assert result.exit_code == 1
        assert "Invalid URL" in result.output
        assert client.fetched_urls == []
