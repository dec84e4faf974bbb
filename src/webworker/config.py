"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the web worker server.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m webworker --port 3000                           │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── WEBWORKER_PORT=3000 python -m webworker                   │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The CLI reads ServerConfig.from_env() first and uses it as the argparse
defaults, so flags override the environment and the environment overrides
the dataclass defaults.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return float(value)


def _env_log_level(name: str, default: str) -> str:
    value = os.getenv(name, default).strip().upper()
    if value not in LOG_LEVELS:
        raise ValueError(f"{name}={value!r} is not one of {', '.join(LOG_LEVELS)}")
    return value


@dataclass
class ServerConfig:
    """
    Configuration for the web worker server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, timeout

    CONTENT
    - document_root, encoding, strict_content_type

    IDENTITY
    - server_name

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only (development)
    - "0.0.0.0" - All network interfaces
    """

    port: int = 8080
    """
    The port number to listen on. 0 lets the OS pick a free port.
    """

    backlog: int = 128
    """
    Maximum number of queued connections waiting for accept().
    """

    timeout: Optional[float] = None
    """
    Per-connection socket timeout in seconds.
    None = block forever. A client that never sends the blank line ending
    its headers, or never drains the response, then holds its worker
    thread indefinitely.
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    document_root: str = "."
    """
    Directory that requested file names are resolved against.
    Names are joined as-is: no sanitization, no canonicalization.
    """

    encoding: str = "utf-8"
    """
    Text encoding for request lines and HTML template files.
    """

    strict_content_type: bool = False
    """
    When True, 404 responses declare text/html (matching the 404 page).
    When False, the Content-Type inferred from the file name is declared
    even for the 404 page, so a missing image is announced as image/png.
    """

    # ─────────────────────────────────────────────────────────────────────
    # SERVER IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    server_name: str = "WebWorker/1.0"
    """
    Used for the Server header and for the <cs371server> template tag.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    DEBUG also logs every raw request line.
    """

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        WEBWORKER_HOST                 Server host (default: 127.0.0.1)
        WEBWORKER_PORT                 Server port (default: 8080)
        WEBWORKER_ROOT                 Document root (default: .)
        WEBWORKER_SERVER_NAME          Server identity string
        WEBWORKER_TIMEOUT              Socket timeout in seconds (default: none)
        WEBWORKER_STRICT_CONTENT_TYPE  1/true to declare text/html on 404
        WEBWORKER_LOG_LEVEL            Logging level (default: INFO)

        =====================================================================
        """
        defaults = cls()
        return cls(
            host=os.getenv("WEBWORKER_HOST", defaults.host),
            port=int(os.getenv("WEBWORKER_PORT", str(defaults.port))),
            document_root=os.getenv("WEBWORKER_ROOT", defaults.document_root),
            server_name=os.getenv("WEBWORKER_SERVER_NAME", defaults.server_name),
            timeout=_env_float("WEBWORKER_TIMEOUT"),
            strict_content_type=_env_flag("WEBWORKER_STRICT_CONTENT_TYPE"),
            log_level=_env_log_level("WEBWORKER_LOG_LEVEL", defaults.log_level),
        )

    @property
    def log_level_value(self) -> int:
        """Numeric logging level for the configured level name."""
        return getattr(logging, self.log_level.upper(), logging.INFO)

    def validate(self) -> None:
        """
        Validate configuration values.

        Called once at startup so a bad value fails before the first
        connection is accepted.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")

        if not Path(self.document_root).is_dir():
            raise ValueError(f"Document root is not a directory: {self.document_root}")
