"""
Configuration for the curl speed test.

This module contains:
- Defaults for file locations and the reporting endpoint
- Environment variable names for object storage credentials
- Report record defaults (placeholder token, "N/A" sentinel)
- The Settings object built once at startup and passed to every component
"""

import os
import shlex
from dataclasses import dataclass, field
from typing import List, Optional

from curl_bench.errors import ConfigError

# =============================================================================
# INPUT / OUTPUT LOCATIONS
# =============================================================================

DEFAULT_TARGETS_FILE: str = "urlsToTest.txt"
DEFAULT_LOG_DIRECTORY: str = "./curl_logs"
DEFAULT_SUMMARY_PREFIX: str = "speedtest"

# =============================================================================
# CURL PROBE
# =============================================================================

DEFAULT_CURL_BINARY: str = "curl"
SPEED_WRITE_OUT: str = "%{speed_download}\n"  # Written to stdout by curl -w
READ_CHUNK_BYTES: int = 4096

# =============================================================================
# CLOUD STORAGE CONFIGURATION
# =============================================================================

S3_ENV_VARS = (
    "S3_BUCKET_NAME",
    "S3_REGION",
    "S3_ENDPOINT",
    "S3_ACCESS_KEY_ID",
    "S3_SECRET_ACCESS_KEY",
)
LOG_CONTENT_TYPE: str = "text/plain"

# =============================================================================
# LOG SERVER
# =============================================================================

DEFAULT_LOG_SERVER_ENDPOINT: str = "http://localhost:3000/tests"
DEFAULT_LOG_SERVER_TIMEOUT_SECONDS: float = 30.0

# =============================================================================
# REPORT RECORD DEFAULTS
# =============================================================================

URL_PLACEHOLDER: str = "URL_GOES_HERE"
NOT_AVAILABLE: str = "N/A"

DEFAULT_LOG_LEVEL: str = "INFO"


def _env(*names: str, default: str = "") -> str:
    """Return the first non-empty environment variable among names."""
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value else default
    except ValueError:
        return default


@dataclass
class StorageSettings:
    """Credentials and location of the bucket that receives curl logs."""

    bucket_name: str = ""
    region: str = ""
    endpoint: str = ""
    access_key_id: str = ""
    secret_access_key: str = ""

    def missing(self) -> List[str]:
        """Names of the environment variables that are not set."""
        values = (
            self.bucket_name,
            self.region,
            self.endpoint,
            self.access_key_id,
            self.secret_access_key,
        )
        return [name for name, value in zip(S3_ENV_VARS, values) if not value]

    @property
    def is_complete(self) -> bool:
        return not self.missing()


@dataclass
class Settings:
    """Process-wide settings, evaluated once from the environment."""

    storage: StorageSettings = field(default_factory=StorageSettings)
    curl_command: str = ""
    location: str = ""
    machine_type: str = ""
    log_server_endpoint: str = DEFAULT_LOG_SERVER_ENDPOINT
    log_server_timeout: float = DEFAULT_LOG_SERVER_TIMEOUT_SECONDS
    curl_binary: str = DEFAULT_CURL_BINARY
    curl_extra_args: List[str] = field(default_factory=list)
    targets_file: str = DEFAULT_TARGETS_FILE
    log_directory: str = DEFAULT_LOG_DIRECTORY
    summary_directory: Optional[str] = None
    prometheus_port: Optional[int] = None
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables (evaluated at call time)."""
        storage = StorageSettings(
            bucket_name=_env("S3_BUCKET_NAME"),
            region=_env("S3_REGION"),
            endpoint=_env("S3_ENDPOINT"),
            access_key_id=_env("S3_ACCESS_KEY_ID"),
            secret_access_key=_env("S3_SECRET_ACCESS_KEY"),
        )
        return cls(
            storage=storage,
            curl_command=_env("CURL_COMMAND", "curl_command"),
            location=_env("LOCATION", "location"),
            machine_type=_env("MACHINE_TYPE", "machine_type"),
            log_server_endpoint=os.getenv("LOG_SERVER_ENDPOINT", DEFAULT_LOG_SERVER_ENDPOINT),
            log_server_timeout=_float_env("LOG_SERVER_TIMEOUT", DEFAULT_LOG_SERVER_TIMEOUT_SECONDS),
            curl_binary=_env("CURL_BINARY", default=DEFAULT_CURL_BINARY),
            curl_extra_args=shlex.split(_env("CURL_EXTRA_ARGS")),
            log_directory=_env("LOG_DIRECTORY", default=DEFAULT_LOG_DIRECTORY),
            log_level=_env("CURL_BENCH_LOG_LEVEL", default=DEFAULT_LOG_LEVEL).upper(),
        )

    def require_storage(self) -> StorageSettings:
        """Return the storage settings, raising ConfigError if any value is missing."""
        missing = self.storage.missing()
        if missing:
            raise ConfigError(
                f"Object storage is not configured, missing: {', '.join(missing)}"
            )
        return self.storage

    def render_curl_command(self, url: str) -> str:
        """Substitute the URL into the configured command template."""
        if not self.curl_command:
            return NOT_AVAILABLE
        return self.curl_command.replace(URL_PLACEHOLDER, url)


def load_settings() -> Settings:
    """Load settings from the environment with defaults."""
    return Settings.from_env()
