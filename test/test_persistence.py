"""
Tests for run aggregation, Parquet summaries and Prometheus metrics.
"""

import os
import tempfile
import unittest

import pandas as pd
from prometheus_client import CollectorRegistry

from curl_bench.persistence.base import SimpleMetricsCollector
from curl_bench.persistence.parquet import ParquetPersistence
from curl_bench.persistence.prom import SimplePrometheusExporter
from curl_bench.persistence.record import ParsedHeaders, ProbeResult, ReportRecord, TargetOutcome


def success(url, speed="1000.0", **flags):
    result = ProbeResult(url, speed, "trace", headers=ParsedHeaders("cache-1", "HIT", "Mon, 01 Jan 2024 00:00:00 GMT"))
    return TargetOutcome(url, success=True, result=result, log_file_name="a.log", **flags)


class TestSimpleMetricsCollector(unittest.TestCase):
    """Test SimpleMetricsCollector functionality."""

    def test_empty(self):
        summary = SimpleMetricsCollector().get_summary()
        self.assertEqual(summary['total_targets'], 0)
        self.assertEqual(summary['avg_speed_bytes_per_sec'], 0)

    def test_summary(self):
        collector = SimpleMetricsCollector()
        collector.add_record(success("https://example.com/a", "1000.0", saved_locally=True, uploaded=True))
        collector.add_record(success("https://example.com/b", "3000.0", saved_locally=True, reported=True))
        collector.add_record(TargetOutcome("https://example.com/c", success=False, error="exit 7"))

        summary = collector.get_summary()

        self.assertEqual(summary['total_targets'], 3)
        self.assertEqual(summary['successful_targets'], 2)
        self.assertEqual(summary['failed_targets'], 1)
        self.assertEqual(summary['saved_locally'], 2)
        self.assertEqual(summary['uploaded'], 1)
        self.assertEqual(summary['reported'], 1)
        self.assertEqual(summary['avg_speed_bytes_per_sec'], 2000.0)

    def test_non_numeric_speed_ignored(self):
        collector = SimpleMetricsCollector()
        collector.add_record(success("https://example.com/a", "fast"))
        self.assertEqual(collector.get_summary()['avg_speed_bytes_per_sec'], 0)


class TestReportRecord(unittest.TestCase):

    def test_to_dict_field_order(self):
        record = ReportRecord("u", "c", "l", "m", "d", "s", "x", "y", "k")
        self.assertEqual(list(record.to_dict()), list(ReportRecord.FIELDS))
        self.assertEqual(record.to_dict()['s3_log_key'], "k")


class TestParquetPersistence(unittest.TestCase):
    """Test Parquet summary files."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.output_dir = os.path.join(self.tmp.name, "results")

    def test_no_records(self):
        persistence = ParquetPersistence(self.output_dir)
        self.assertTrue(os.path.isdir(self.output_dir))
        self.assertIsNone(persistence.save_to_file())

    def test_save_to_file(self):
        persistence = ParquetPersistence(self.output_dir)
        persistence.store_record(success("https://example.com/a", "1234.5", saved_locally=True))
        persistence.store_record(TargetOutcome("https://example.com/b", success=False, error="exit 7"))

        path = persistence.save_to_file()

        self.assertTrue(os.path.basename(path).startswith("speedtest_"))
        df = pd.read_parquet(path)
        self.assertEqual(len(df), 2)
        self.assertEqual(df.loc[0, 'x_cache'], "HIT")
        self.assertEqual(df.loc[0, 'speed_bytes_per_sec'], 1234.5)
        self.assertFalse(df.loc[1, 'success'])
        self.assertTrue(pd.isna(df.loc[1, 'speed_bytes_per_sec']))


class TestSimplePrometheusExporter(unittest.TestCase):
    """Test metric recording against a private registry."""

    def setUp(self):
        self.registry = CollectorRegistry()
        self.exporter = SimplePrometheusExporter(registry=self.registry)

    def value(self, name, labels):
        return self.registry.get_sample_value(name, labels)

    def test_record_probe(self):
        self.exporter.record_probe(True, "https://example.com/a", "1500.0")
        self.exporter.record_probe(False, "https://example.com/b")
        self.exporter.record_probe(False, "https://example.com/c")

        self.assertEqual(self.value('curl_bench_probes_total', {'status': 'success'}), 1)
        self.assertEqual(self.value('curl_bench_probes_total', {'status': 'failure'}), 2)
        self.assertEqual(
            self.value('curl_bench_speed_bytes_per_second', {'url': 'https://example.com/a'}), 1500.0
        )

    def test_record_sink_failure(self):
        self.exporter.record_sink_failure("log_server")
        self.assertEqual(self.value('curl_bench_sink_failures_total', {'sink': 'log_server'}), 1)

    def test_separate_instances_do_not_collide(self):
        """Each exporter registers into its own registry."""
        other = SimplePrometheusExporter()
        other.record_probe(True, "https://example.com/a", "1.0")
        self.assertIsNone(self.value('curl_bench_probes_total', {'status': 'success'}))


if __name__ == '__main__':
    unittest.main()
