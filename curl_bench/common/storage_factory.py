"""
Factory module for creating the object storage sink.
"""

import logging

# Suppress boto3/botocore logging BEFORE importing any boto3-related modules
logging.getLogger('botocore').setLevel(logging.CRITICAL)
logging.getLogger('botocore.credentials').setLevel(logging.CRITICAL)
logging.getLogger('boto3').setLevel(logging.CRITICAL)
logging.getLogger('aioboto3').setLevel(logging.CRITICAL)
logging.getLogger('urllib3').setLevel(logging.CRITICAL)
logging.getLogger('s3transfer').setLevel(logging.CRITICAL)

from curl_bench.configuration import Settings
from curl_bench.errors import ConfigError
from curl_bench.systems.base import ObjectStorageSystem, UnconfiguredStorage

logger = logging.getLogger(__name__)


def create_storage_system(settings: Settings):
    """Create the storage sink for the given settings.

    Args:
        settings: Process-wide settings

    Returns:
        ObjectStorageSystem when all five storage settings are present,
        otherwise UnconfiguredStorage
    """
    try:
        storage = settings.require_storage()
    except ConfigError as e:
        return UnconfiguredStorage(str(e))

    return ObjectStorageSystem(storage)
