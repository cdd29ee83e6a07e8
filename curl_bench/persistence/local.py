"""
Local file persistence for curl logs.
"""

import logging
import os
import re
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlparse

from curl_bench.configuration import DEFAULT_LOG_DIRECTORY

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def create_log_file_name(url: str, now: Optional[datetime] = None) -> str:
    """Create a file-friendly name from a URL and a timestamp.

    e.g. 'https://host/file.140gb?bs=10' -> 'file.140gb_2025-11-13T15-00-00.log'

    Args:
        url: Target URL; only its path is used
        now: Timestamp to embed (default: current UTC time)
    """
    path_part = urlparse(url).path[1:]
    friendly_name = _UNSAFE_CHARS.sub("_", path_part) or "download"

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    timestamp = now.strftime("%Y-%m-%dT%H-%M-%S")

    return f"{friendly_name}_{timestamp}.log"


class LocalLogStorage:
    """Writes curl traces into a log directory.

    Attributes:
        directory: Directory where log files are written
    """

    def __init__(self, directory: str = DEFAULT_LOG_DIRECTORY):
        self.directory: str = directory

    def ensure_directory(self) -> None:
        """Create the log directory (and parents) if it does not exist."""
        os.makedirs(self.directory, exist_ok=True)

    def path_for(self, file_name: str) -> str:
        return os.path.join(self.directory, file_name)

    def save(self, content: str, file_name: str) -> str:
        """Write content to file_name, replacing any existing file.

        Returns:
            Path of the written file

        Raises:
            OSError: On permission or disk errors
        """
        self.ensure_directory()
        path = self.path_for(file_name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path
