"""
Target list loading.
"""

import logging
from dataclasses import dataclass
from typing import List
from urllib.parse import urlparse

from curl_bench.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Target:
    """One URL under test."""

    url: str

    def __post_init__(self):
        parsed = urlparse(self.url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"Not an absolute URL: {self.url!r}")


def parse_targets(text: str) -> List[Target]:
    """Parse one URL per line, ignoring blank lines and invalid URLs."""
    targets = []
    for line_number, line in enumerate(text.split("\n"), start=1):
        url = line.strip()
        if not url:
            continue
        try:
            targets.append(Target(url))
        except ValueError as e:
            logger.warning(f"Skipping line {line_number}: {e}")
    return targets


def load_targets(path: str) -> List[Target]:
    """Read the target list file.

    Raises:
        ConfigError: If the file cannot be read
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise ConfigError(f"Cannot read target list {path}: {e}") from e

    targets = parse_targets(text)
    logger.debug(f"Loaded {len(targets)} target(s) from {path}")
    return targets
