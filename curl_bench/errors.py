"""
Error taxonomy for the curl speed test.

Probe errors stop processing of a single target. Storage and reporting errors
are raised by the sinks and caught by the runner, so they never stop the run.
"""

from typing import Optional


class CurlBenchError(Exception):
    """Base class for all curl-bench errors."""


class ConfigError(CurlBenchError):
    """A required setting is missing or unreadable."""


class ProbeError(CurlBenchError):
    """The curl probe did not produce a result."""


class LaunchError(ProbeError):
    """The curl executable could not be started."""

    def __init__(self, command: str, cause: Optional[BaseException] = None):
        self.command = command
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to launch {command}{detail}")


class ProcessError(ProbeError):
    """curl exited with a non-zero status."""

    def __init__(self, exit_code: int, trace: str):
        self.exit_code = exit_code
        self.trace = trace
        super().__init__(f"curl process exited with code {exit_code}.\nLog:\n{trace}")


class UploadError(CurlBenchError):
    """The object storage service rejected an operation."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"Object storage error for {key}: {message}")


class ReportError(CurlBenchError):
    """Posting results to the log server failed."""


class ServerError(ReportError):
    """The log server answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Server responded with {status_code}: {body}")


class NetworkError(ReportError):
    """The request was sent but no response was received."""

    def __init__(self, endpoint: str, cause: Optional[BaseException] = None):
        self.endpoint = endpoint
        self.cause = cause
        super().__init__(f"No response from server at {endpoint}")


class RequestError(ReportError):
    """The report request could not be built or sent."""
