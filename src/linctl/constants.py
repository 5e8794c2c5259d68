"""Constants for linctl."""

from __future__ import annotations

# Linear endpoints
DEFAULT_API_URL = "https://api.linear.app/graphql"
UPLOADS_URL_PREFIX = "https://uploads.linear.app/"

# Environment variables
API_KEY_ENV = "LINEAR_API_KEY"
CONFIG_PATH_ENV = "LINCTL_CONFIG"

# Config filename, stored under $XDG_CONFIG_HOME/linctl/
CONFIG_DIRNAME = "linctl"
CONFIG_FILENAME = "config.toml"

# Default values
DEFAULT_TIMEOUT = 30.0
DEFAULT_WATCH_INTERVAL = 30
DEFAULT_MAX_WIDTH = 40

# Page sizes used by the queries (no cursoring)
WATCH_COLLECTION_PAGE_SIZE = 10
EXPORT_PAGE_SIZE = 250
ROADMAP_PAGE_SIZE = 250

# Chunk size for streamed upload downloads
DOWNLOAD_CHUNK_SIZE = 64 * 1024

# Placeholders used when a field is absent from a fetched document
MISSING_STATUS = "-"
MISSING_ASSIGNEE = "Unassigned"
MISSING_IDENTIFIER = "-"
