"""
Speed test runner: probes every target in turn and stores the results.
"""

import asyncio
import logging
import time
from contextlib import AsyncExitStack
from email.utils import parsedate_to_datetime
from typing import List, Optional

from botocore.exceptions import BotoCoreError

from curl_bench.common.storage_factory import create_storage_system
from curl_bench.configuration import NOT_AVAILABLE, Settings
from curl_bench.errors import ProbeError, ReportError, UploadError
from curl_bench.persistence.base import SimpleMetricsCollector
from curl_bench.persistence.local import LocalLogStorage, create_log_file_name
from curl_bench.persistence.parquet import ParquetPersistence
from curl_bench.persistence.prom import SimplePrometheusExporter
from curl_bench.persistence.record import ProbeResult, ReportRecord, TargetOutcome
from curl_bench.probe.runner import CurlProbe
from curl_bench.reporting.log_server import LogServerReporter
from curl_bench.systems.base import UnconfiguredStorage
from curl_bench.targets import Target

logger = logging.getLogger(__name__)

SEPARATOR = "-----------------------------------"


def format_response_date(date: str) -> str:
    """Render an HTTP date header in local time, or N/A if it cannot be parsed."""
    if not date:
        return NOT_AVAILABLE
    try:
        return parsedate_to_datetime(date).astimezone().strftime("%Y-%m-%d %H:%M:%S %Z")
    except (TypeError, ValueError, IndexError, OverflowError):
        return NOT_AVAILABLE


class SpeedTestRunner:
    """Runs the curl speed test over a list of targets.

    Targets are processed strictly one after another. For each successful
    probe the trace is saved locally, uploaded to object storage and a summary
    is posted to the log server; each of those steps fails independently.
    """

    def __init__(
        self,
        settings: Settings,
        probe: Optional[CurlProbe] = None,
        local_storage: Optional[LocalLogStorage] = None,
        storage_system=None,
        reporter: Optional[LogServerReporter] = None,
        parquet: Optional[ParquetPersistence] = None,
        exporter: Optional[SimplePrometheusExporter] = None,
    ):
        self.settings = settings
        self.probe = probe or CurlProbe(settings.curl_binary, settings.curl_extra_args)
        self.local_storage = local_storage or LocalLogStorage(settings.log_directory)
        self.storage_system = storage_system or create_storage_system(settings)
        self.reporter = reporter or LogServerReporter(
            settings.log_server_endpoint, settings.log_server_timeout
        )
        self.parquet = parquet
        self.exporter = exporter
        self.collector = SimpleMetricsCollector()

    def build_report_record(self, target: Target, result: ProbeResult, log_file_name: str) -> ReportRecord:
        """Compose the log server record for one successful probe."""
        return ReportRecord(
            url=target.url,
            curl_command=self.settings.render_curl_command(target.url),
            location=self.settings.location or NOT_AVAILABLE,
            machine_type=self.settings.machine_type or NOT_AVAILABLE,
            test_date=result.headers.response_date,
            speed=result.speed,
            x_cache=result.headers.cache_status,
            x_served_by=result.headers.served_by,
            s3_log_key=log_file_name,
        )

    async def run(self, targets: List[Target]) -> SimpleMetricsCollector:
        """Test every target.

        Raises:
            OSError: If the log directory cannot be created
        """
        logger.info(f"Starting curl speed tests for {len(targets)} URL(s)...")
        logger.info(f"Logs will be saved in: {self.local_storage.directory}")

        try:
            self.local_storage.ensure_directory()
        except OSError as e:
            logger.error(f"Failed to create log directory at {self.local_storage.directory}: {e}")
            raise

        async with AsyncExitStack() as stack:
            try:
                await stack.enter_async_context(self.storage_system)
            except (BotoCoreError, ValueError) as e:
                logger.error(f"Failed to open object storage client, uploads disabled: {e}")
                self.storage_system = UnconfiguredStorage(str(e))

            for target in targets:
                outcome = await self.test_target(target)
                self._record(outcome)

        self._finish()
        return self.collector

    async def test_target(self, target: Target) -> TargetOutcome:
        """Probe one target and hand its trace to every sink."""
        logger.info(f"--- Testing {target.url} ---")
        start_ts = time.time()

        try:
            result = await self.probe.run(target)
        except ProbeError as e:
            logger.error(f"  Failed to test {target.url}: {e}")
            logger.info(SEPARATOR)
            return TargetOutcome(target.url, success=False, error=str(e), start_ts=start_ts)
        except Exception as e:
            logger.error(f"  Unexpected error testing {target.url}: {e}", exc_info=True)
            logger.info(SEPARATOR)
            return TargetOutcome(target.url, success=False, error=str(e), start_ts=start_ts)

        log_file_name = create_log_file_name(target.url)
        outcome = TargetOutcome(
            target.url, success=True, result=result,
            log_file_name=log_file_name, start_ts=start_ts,
        )

        outcome.saved_locally = self._save_locally(result, log_file_name)
        outcome.uploaded = await self._upload(result, log_file_name)
        outcome.reported = await self._report(target, result, log_file_name)

        self._print_summary(result, log_file_name, outcome.uploaded)
        logger.info(SEPARATOR)
        outcome.end_ts = time.time()
        return outcome

    def _save_locally(self, result: ProbeResult, log_file_name: str) -> bool:
        log_file_path = self.local_storage.path_for(log_file_name)
        try:
            logger.info(f"  Saving full log locally to {log_file_path}...")
            self.local_storage.save(result.raw_trace, log_file_name)
            return True
        except OSError as e:
            logger.error(f"  Failed to save log file locally: {e}")
            self._sink_failed("local")
            return False

    async def _upload(self, result: ProbeResult, log_file_name: str) -> bool:
        try:
            logger.info(f"  Uploading full log to S3 as {log_file_name}...")
            return await self.storage_system.upload_log(result.raw_trace, log_file_name)
        except UploadError as e:
            logger.error(f"  Failed to upload log to S3: {e}")
        except Exception as e:
            logger.error(f"  Unexpected error uploading log to S3: {e}", exc_info=True)
        self._sink_failed("object_storage")
        return False

    async def _report(self, target: Target, result: ProbeResult, log_file_name: str) -> bool:
        try:
            logger.info("  Posting results to log server...")
            record = self.build_report_record(target, result, log_file_name)
            await asyncio.to_thread(self.reporter.report, record)
            return bool(self.reporter.enabled)
        except ReportError as e:
            logger.error(f"  Failed to post results to log server: {e}")
        except Exception as e:
            logger.error(f"  Unexpected error posting results to log server: {e}", exc_info=True)
        self._sink_failed("log_server")
        return False

    def _print_summary(self, result: ProbeResult, log_file_name: str, uploaded: bool):
        headers = result.headers
        logger.info(f"  Date : {format_response_date(headers.response_date)}")
        logger.info(f"  Speed: {result.speed} B/s")
        logger.info(f"  x-cache: {headers.cache_status or NOT_AVAILABLE}")
        logger.info(f"  x-served-by: {headers.served_by or NOT_AVAILABLE}")
        logger.info(f"  date: {headers.response_date or NOT_AVAILABLE}")
        logger.info(f"  Full log saved to: {self.local_storage.path_for(log_file_name)}")
        if uploaded:
            logger.info(f"  Log uploaded to S3 as: {self.storage_system.location_of(log_file_name)}")

    def _record(self, outcome: TargetOutcome):
        self.collector.add_record(outcome)
        if self.parquet is not None:
            self.parquet.store_record(outcome)
        if self.exporter is not None:
            self.exporter.record_probe(outcome.success, outcome.url, outcome.speed)

    def _sink_failed(self, sink: str):
        if self.exporter is not None:
            self.exporter.record_sink_failure(sink)

    def _finish(self):
        summary = self.collector.get_summary()
        logger.info(
            f"Tested {summary['total_targets']} URL(s): "
            f"{summary['successful_targets']} succeeded, {summary['failed_targets']} failed"
        )

        if self.parquet is not None:
            try:
                parquet_file = self.parquet.save_to_file()
                if parquet_file:
                    logger.info(f"Summary saved to: {parquet_file}")
            except (OSError, ValueError, ImportError) as e:
                logger.error(f"Failed to save summary file: {e}")

        logger.info("All tests finished.")
