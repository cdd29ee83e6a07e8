"""
Parquet persistence for speed test summaries.
"""

import os
import logging
from typing import List, Optional
from datetime import datetime

import pandas as pd

from curl_bench.configuration import DEFAULT_SUMMARY_PREFIX
from curl_bench.persistence.record import TargetOutcome

logger = logging.getLogger(__name__)


class ParquetPersistence:
    """Parquet file persistence for per-target outcomes.

    Outcomes are kept in memory during the run and written to one Parquet
    file at the end.

    Attributes:
        output_dir: Directory where Parquet files will be saved
        records: Outcomes accumulated during the run
    """

    def __init__(self, output_dir: str):
        """Initialize Parquet persistence.

        Args:
            output_dir: Directory for saving Parquet files
        """
        self.output_dir: str = output_dir
        self.records: List[TargetOutcome] = []

        os.makedirs(output_dir, exist_ok=True)

    def store_record(self, record: TargetOutcome) -> None:
        """Store an outcome in memory.

        Args:
            record: Outcome to store
        """
        self.records.append(record)

    def to_dataframe(self) -> pd.DataFrame:
        data = []
        for record in self.records:
            headers = record.headers
            data.append({
                'url': record.url,
                'success': record.success,
                'error': record.error,
                'speed': record.speed,
                'x_cache': headers.cache_status,
                'x_served_by': headers.served_by,
                'test_date': headers.response_date,
                'log_file_name': record.log_file_name,
                'saved_locally': record.saved_locally,
                'uploaded': record.uploaded,
                'reported': record.reported,
                'start_ts': record.start_ts,
                'end_ts': record.end_ts,
            })
        df = pd.DataFrame(data)
        df['speed_bytes_per_sec'] = pd.to_numeric(df['speed'], errors='coerce')
        return df

    def save_to_file(self, filename_prefix: str = DEFAULT_SUMMARY_PREFIX) -> Optional[str]:
        """Save all outcomes to a Parquet file.

        Args:
            filename_prefix: Prefix for the generated filename

        Returns:
            Path to the saved file, or None if no records to save
        """
        if not self.records:
            return None

        logger.info(f"Saving {len(self.records)} records to file")
        df = self.to_dataframe()

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"{filename_prefix}_{timestamp}.parquet"
        filepath = os.path.join(self.output_dir, filename)

        df.to_parquet(filepath, index=False)

        return filepath
