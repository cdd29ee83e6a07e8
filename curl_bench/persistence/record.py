"""
Basic data structures for the curl speed test.
"""

import time
from typing import Any, Dict, Optional


class ParsedHeaders:
    """Response headers picked out of a curl verbose trace."""

    def __init__(self, served_by: str = "", cache_status: str = "", response_date: str = ""):
        self.served_by = served_by
        self.cache_status = cache_status
        self.response_date = response_date

    def __eq__(self, other):
        if not isinstance(other, ParsedHeaders):
            return NotImplemented
        return (
            self.served_by == other.served_by
            and self.cache_status == other.cache_status
            and self.response_date == other.response_date
        )

    def __repr__(self):
        return (
            f"ParsedHeaders(served_by={self.served_by!r}, "
            f"cache_status={self.cache_status!r}, response_date={self.response_date!r})"
        )


class ProbeResult:
    """Outcome of one successful curl run."""

    def __init__(self, url: str, speed: str, raw_trace: str, exit_code: int = 0,
                 headers: Optional[ParsedHeaders] = None):
        self.url = url
        self.speed = speed
        self.raw_trace = raw_trace
        self.exit_code = exit_code
        self.headers = headers or ParsedHeaders()


class ReportRecord:
    """Summary posted to the log server for one target."""

    FIELDS = (
        "url",
        "curl_command",
        "location",
        "machine_type",
        "test_date",
        "speed",
        "x_cache",
        "x_served_by",
        "s3_log_key",
    )

    def __init__(self, url, curl_command, location, machine_type, test_date,
                 speed, x_cache, x_served_by, s3_log_key):
        self.url = url
        self.curl_command = curl_command
        self.location = location
        self.machine_type = machine_type
        self.test_date = test_date
        self.speed = speed
        self.x_cache = x_cache
        self.x_served_by = x_served_by
        self.s3_log_key = s3_log_key

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.FIELDS}


class TargetOutcome:
    """What happened to one target during a run."""

    def __init__(self, url: str, success: bool, error: str = "",
                 result: Optional[ProbeResult] = None, log_file_name: str = "",
                 saved_locally: bool = False, uploaded: bool = False, reported: bool = False,
                 start_ts: float = None, end_ts: float = None):
        self.url = url
        self.success = success
        self.error = error
        self.result = result
        self.log_file_name = log_file_name
        self.saved_locally = saved_locally
        self.uploaded = uploaded
        self.reported = reported
        self.start_ts = start_ts or time.time()
        self.end_ts = end_ts or time.time()

    @property
    def speed(self) -> str:
        return self.result.speed if self.result else ""

    @property
    def headers(self) -> ParsedHeaders:
        return self.result.headers if self.result else ParsedHeaders()
