"""
curl probe: one download of a target URL with verbose diagnostics.
"""

import asyncio
import codecs
import logging
import os
from typing import List, Optional

from curl_bench.configuration import DEFAULT_CURL_BINARY, READ_CHUNK_BYTES, SPEED_WRITE_OUT
from curl_bench.errors import LaunchError, ProcessError
from curl_bench.persistence.record import ProbeResult
from curl_bench.probe.headers import parse_headers
from curl_bench.targets import Target

logger = logging.getLogger(__name__)


class CurlProbe:
    """Runs curl against a single URL and collects its output.

    The downloaded body goes to the null device, the transfer speed is written
    to stdout with ``-w`` and the verbose trace goes to stderr. Both streams
    are drained concurrently into one trace buffer.
    """

    def __init__(self, curl_binary: str = DEFAULT_CURL_BINARY, extra_args: Optional[List[str]] = None):
        self.curl_binary = curl_binary
        self.extra_args = list(extra_args or [])

    def build_command(self, url: str) -> List[str]:
        """Build the argv for one probe."""
        return [
            self.curl_binary,
            "-w", SPEED_WRITE_OUT,  # Write speed to stdout
            "-o", os.devnull,       # Discard the body
            *self.extra_args,
            url,
            "-v",                   # Verbose output to stderr
        ]

    async def run(self, target: Target) -> ProbeResult:
        """Probe the target.

        Returns:
            ProbeResult with speed, full trace and parsed headers

        Raises:
            LaunchError: If curl cannot be started
            ProcessError: If curl exits with a non-zero status
        """
        command = self.build_command(target.url)
        logger.debug(f"Launching {' '.join(command)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise LaunchError(command[0], e) from e

        trace: List[str] = []
        speed: List[str] = []

        await asyncio.gather(
            self._drain(process.stdout, trace, speed),
            self._drain(process.stderr, trace),
        )
        exit_code = await process.wait()
        full_trace = "".join(trace)

        if exit_code != 0:
            raise ProcessError(exit_code, full_trace)

        return ProbeResult(
            url=target.url,
            speed="".join(speed).strip(),
            raw_trace=full_trace,
            exit_code=exit_code,
            headers=parse_headers(full_trace),
        )

    @staticmethod
    async def _drain(stream: asyncio.StreamReader, trace: List[str], copy: Optional[List[str]] = None):
        """Read a stream to EOF, appending decoded chunks in arrival order."""
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            data = await stream.read(READ_CHUNK_BYTES)
            text = decoder.decode(data, final=not data)
            if text:
                trace.append(text)
                if copy is not None:
                    copy.append(text)
            if not data:
                break
