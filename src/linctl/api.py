"""HTTP client for the Linear GraphQL API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, BinaryIO

import requests

from linctl.config import get_api_key, get_timeout
from linctl.constants import DEFAULT_API_URL, DEFAULT_TIMEOUT, DOWNLOAD_CHUNK_SIZE
from linctl.errors import ApiError, AuthenticationError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


class LinearClient:
    """Thin client that sends GraphQL documents to Linear.

    A client is constructed explicitly and handed to whatever needs it;
    there is no process-wide instance.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Linear personal API key or OAuth token
            api_url: GraphQL endpoint
            timeout: Per-request timeout in seconds
            session: Optional pre-built session (for connection reuse or tests)
        """
        self.api_url = api_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": api_key,
                "Content-Type": "application/json",
            },
        )

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> LinearClient:
        """Build a client from a loaded config dictionary.

        Raises:
            ConfigError: If no API key is configured or the timeout is invalid
        """
        return cls(
            api_key=get_api_key(dict(config)),
            api_url=str(config.get("api_url", DEFAULT_API_URL)),
            timeout=get_timeout(dict(config)),
        )

    def query(
        self,
        query: str,
        variables: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Execute a GraphQL document and return the decoded response.

        Args:
            query: GraphQL query or mutation text
            variables: Variables for the document

        Returns:
            The full response document (``{"data": ...}``)

        Raises:
            AuthenticationError: If the API key is rejected
            ApiError: On transport errors, HTTP errors, undecodable bodies,
                or GraphQL errors
        """
        payload: dict[str, Any] = {"query": query}
        if variables is not None:
            payload["variables"] = dict(variables)

        logger.debug("POST %s variables=%s", self.api_url, payload.get("variables"))
        try:
            response = self.session.post(
                self.api_url,
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            msg = f"Request to Linear failed: {e}"
            raise ApiError(msg) from e

        self._raise_for_status(response)

        try:
            body = response.json()
        except ValueError as e:
            msg = "Linear returned a response that is not valid JSON"
            raise ApiError(msg, response.status_code) from e

        if not isinstance(body, dict):
            msg = "Linear returned an unexpected response shape"
            raise ApiError(msg, response.status_code)

        errors = body.get("errors")  # type: ignore[reportUnknownMemberType]
        if errors:
            raise ApiError(_format_graphql_errors(errors), response.status_code)

        return body  # type: ignore[reportUnknownVariableType]

    def mutate(
        self,
        mutation: str,
        variables: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Execute a GraphQL mutation. Same transport as ``query``."""
        return self.query(mutation, variables)

    def fetch_to_writer(self, url: str, writer: BinaryIO) -> int:
        """Stream the body at ``url`` into ``writer``.

        Args:
            url: Absolute URL to download (sent with the API key)
            writer: Binary file-like object to write to

        Returns:
            Number of bytes written

        Raises:
            ApiError: On transport or HTTP errors
        """
        logger.debug("GET %s", url)
        try:
            with self.session.get(url, stream=True, timeout=self.timeout) as response:
                self._raise_for_status(response)
                written = 0
                for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    if chunk:
                        writer.write(chunk)
                        written += len(chunk)
        except requests.RequestException as e:
            msg = f"Download failed: {e}"
            raise ApiError(msg) from e

        logger.debug("Downloaded %d bytes from %s", written, url)
        return written

    @staticmethod
    def _raise_for_status(response: requests.Response) -> None:
        """Translate HTTP error statuses into linctl errors."""
        if response.status_code in (401, 403):
            msg = (
                f"Authentication failed ({response.status_code}). "
                "Check your Linear API key."
            )
            raise AuthenticationError(msg, response.status_code)
        if response.status_code >= 400:
            msg = f"Linear API returned HTTP {response.status_code}: {response.text[:200]}"
            raise ApiError(msg, response.status_code)


def _format_graphql_errors(errors: Any) -> str:
    """Join the messages of a GraphQL ``errors`` array."""
    if not isinstance(errors, list):
        return f"GraphQL error: {errors}"
    messages = [
        str(err.get("message", err)) if isinstance(err, dict) else str(err)  # type: ignore[reportUnknownMemberType]
        for err in errors  # type: ignore[reportUnknownVariableType]
    ]
    return "GraphQL error: " + "; ".join(messages)
