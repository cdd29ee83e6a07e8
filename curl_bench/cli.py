"""
Command line interface for the curl speed test.
"""

import sys
import logging
import argparse

import uvloop

from curl_bench.configuration import (
    DEFAULT_LOG_DIRECTORY, DEFAULT_TARGETS_FILE, load_settings
)

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def setup_logging(level: str):
    """Configure root logging (only if not already configured)."""
    if not logging.root.handlers:
        logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


class SpeedTestCLI:
    """CLI interface for the curl speed test."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self):
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            prog='curl-bench',
            description='Download speed tests with curl',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Test every URL in urlsToTest.txt
  curl-bench run

  # Custom target list, keep a Parquet summary of the run
  curl-bench run --targets urls.txt --summary-dir results

  # Check bucket access and whether a log was uploaded
  curl-bench verify --key socket.jpg_2025-11-13T15-00-00.log
            """
        )
        parser.add_argument('--log-level', type=str, default=None,
                            help='Logging level (default: CURL_BENCH_LOG_LEVEL or INFO)')

        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        run_parser = subparsers.add_parser('run', help='Run the speed test')
        run_parser.add_argument('--targets', type=str, default=None,
                                help=f'File with one URL per line (default: {DEFAULT_TARGETS_FILE})')
        run_parser.add_argument('--log-dir', type=str, default=None,
                                help=f'Directory for curl logs (default: LOG_DIRECTORY or {DEFAULT_LOG_DIRECTORY})')
        run_parser.add_argument('--summary-dir', type=str, default=None,
                                help='Write a Parquet summary of the run to this directory')
        run_parser.add_argument('--prometheus-port', type=int, default=None,
                                help='Expose Prometheus metrics on this port')

        verify_parser = subparsers.add_parser('verify', help='Verify object storage access')
        verify_parser.add_argument('--key', action='append', default=[],
                                   help='Log key to look up in the bucket (repeatable)')

        return parser

    def _settings_for(self, args):
        settings = load_settings()
        if args.log_level:
            settings.log_level = args.log_level.upper()
        if getattr(args, 'targets', None):
            settings.targets_file = args.targets
        if getattr(args, 'log_dir', None):
            settings.log_directory = args.log_dir
        if getattr(args, 'summary_dir', None):
            settings.summary_directory = args.summary_dir
        if getattr(args, 'prometheus_port', None):
            settings.prometheus_port = args.prometheus_port
        return settings

    async def run_speed_test(self, settings):
        """Run the speed test over the target list."""
        from curl_bench.errors import ConfigError
        from curl_bench.persistence.parquet import ParquetPersistence
        from curl_bench.persistence.prom import SimplePrometheusExporter
        from curl_bench.runner import SpeedTestRunner
        from curl_bench.targets import load_targets

        try:
            targets = load_targets(settings.targets_file)
        except ConfigError as e:
            logger.error(str(e))
            return 1

        exporter = None
        if settings.prometheus_port:
            exporter = SimplePrometheusExporter(settings.prometheus_port)
            exporter.start_server()

        parquet = None
        if settings.summary_directory:
            parquet = ParquetPersistence(settings.summary_directory)

        runner = SpeedTestRunner(settings, parquet=parquet, exporter=exporter)
        try:
            await runner.run(targets)
        except OSError:
            return 1
        finally:
            runner.reporter.close()
        return 0

    async def run_verify(self, settings, keys):
        """Check bucket access and look up log keys."""
        from curl_bench.common.storage_factory import create_storage_system
        from curl_bench.errors import UploadError

        storage_system = create_storage_system(settings)
        async with storage_system:
            if not await storage_system.verify_connection():
                return 1

            status = 0
            for key in keys:
                try:
                    if await storage_system.exists(key):
                        logger.info(f"✓ {storage_system.location_of(key)} exists")
                    else:
                        logger.warning(f"✗ {storage_system.location_of(key)} not found")
                        status = 1
                except UploadError as e:
                    logger.error(f"✗ {e}")
                    status = 1
            return status

    def run(self, args=None):
        """Run the CLI with the given arguments."""
        if args is None:
            args = sys.argv[1:]

        parsed_args = self.parser.parse_args(args)
        command = parsed_args.command or 'run'
        if parsed_args.command is None:
            parsed_args = self.parser.parse_args(list(args) + ['run'])

        settings = self._settings_for(parsed_args)
        setup_logging(settings.log_level)

        try:
            if command == 'run':
                return uvloop.run(self.run_speed_test(settings))
            elif command == 'verify':
                return uvloop.run(self.run_verify(settings, parsed_args.key))
            else:
                logger.error(f"Unknown command: {command}")
                return 1

        except KeyboardInterrupt:
            logger.info("Operation interrupted by user")
            return 1


def main():
    """Main entry point."""
    cli = SpeedTestCLI()
    sys.exit(cli.run())


if __name__ == '__main__':
    main()
