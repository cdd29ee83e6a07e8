"""
Run-level aggregation of target outcomes.
"""

from curl_bench.persistence.record import TargetOutcome


class SimpleMetricsCollector:
    """Simple metrics collection."""

    def __init__(self):
        self.records = []

    def add_record(self, record: TargetOutcome):
        """Add a target outcome."""
        self.records.append(record)

    @property
    def succeeded(self):
        return [r for r in self.records if r.success]

    @property
    def failed(self):
        return [r for r in self.records if not r.success]

    def get_summary(self):
        """Get basic summary statistics."""
        total_targets = len(self.records)
        successful = self.succeeded

        speeds = []
        for r in successful:
            try:
                speeds.append(float(r.speed))
            except ValueError:
                continue

        return {
            'total_targets': total_targets,
            'successful_targets': len(successful),
            'failed_targets': total_targets - len(successful),
            'saved_locally': sum(1 for r in self.records if r.saved_locally),
            'uploaded': sum(1 for r in self.records if r.uploaded),
            'reported': sum(1 for r in self.records if r.reported),
            'avg_speed_bytes_per_sec': sum(speeds) / len(speeds) if speeds else 0,
        }
