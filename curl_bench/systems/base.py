"""
Async object storage sink for curl logs.
"""

import logging

import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from curl_bench.configuration import LOG_CONTENT_TYPE, StorageSettings
from curl_bench.errors import UploadError

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = {"404", "NotFound", "NoSuchKey"}


class ObjectStorageSystem:
    """S3-compatible bucket that receives curl logs.

    The client is opened once with ``async with`` and reused for every upload
    of the run.
    """

    configured = True

    def __init__(self, storage: StorageSettings):
        self.endpoint = storage.endpoint
        self.bucket_name = storage.bucket_name
        self.region = storage.region

        self._config = self._create_config()

        self.session = aioboto3.Session(
            aws_access_key_id=storage.access_key_id,
            aws_secret_access_key=storage.secret_access_key,
            region_name=storage.region,
        )

        self.client = None
        self._client_context = None

        logger.info(f"Initialized object storage for {self.endpoint} (bucket: {self.bucket_name})")

    def _create_config(self) -> Config:
        """Create the botocore config."""
        return Config(
            connect_timeout=5,
            read_timeout=60,
            s3={
                # Required for most S3-compatible services
                'addressing_style': 'path',
            },
            tcp_keepalive=True,
        )

    async def __aenter__(self):
        """Async context manager entry."""
        self._client_context = self.session.client(
            "s3",
            endpoint_url=self.endpoint,
            config=self._config,
        )
        self.client = await self._client_context.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.client:
            await self._client_context.__aexit__(exc_type, exc_val, exc_tb)
            self._client_context = None
            self.client = None

    def _require_client(self):
        if not self.client:
            raise RuntimeError("Storage client not initialized. Use async context manager.")

    def location_of(self, key: str) -> str:
        return f"s3://{self.bucket_name}/{key}"

    async def upload_log(self, content: str, key: str) -> bool:
        """Upload a log as a plain text object.

        Returns:
            True if an object was written, False if there was nothing to upload

        Raises:
            UploadError: If the service rejects the upload
        """
        self._require_client()

        if not content:
            logger.info(f"No log content to upload for {key}")
            return False

        try:
            await self.client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=content.encode("utf-8"),
                ContentType=LOG_CONTENT_TYPE,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error uploading to S3: {e}")
            raise UploadError(key, str(e)) from e

        logger.info(f"Successfully uploaded log to {self.location_of(key)}")
        return True

    async def exists(self, key: str) -> bool:
        """Check whether an object exists in the bucket.

        Raises:
            UploadError: For any failure other than "not found"
        """
        self._require_client()

        try:
            await self.client.head_object(Bucket=self.bucket_name, Key=key)
            return True
        except ClientError as e:
            error_code = str(e.response.get('Error', {}).get('Code', 'Unknown'))
            status_code = e.response.get('ResponseMetadata', {}).get('HTTPStatusCode', 0)
            if error_code in NOT_FOUND_CODES or status_code == 404:
                return False
            logger.error(f"Error checking file in S3: {error_code} (HTTP {status_code})")
            raise UploadError(key, str(e)) from e
        except BotoCoreError as e:
            logger.error(f"Error checking file in S3: {e}")
            raise UploadError(key, str(e)) from e

    async def verify_connection(self) -> bool:
        """Verify storage connection and configuration."""
        if not self.client:
            logger.error("Client not initialized. Use async context manager.")
            return False

        try:
            logger.info("Verifying storage connection...")
            await self.client.head_bucket(Bucket=self.bucket_name)
            logger.info(f"✓ Successfully connected to bucket: {self.bucket_name}")
            logger.info(f"✓ Endpoint: {self.endpoint}")
            return True
        except (ClientError, BotoCoreError) as e:
            logger.error(f"✗ Connection verification failed: {e}")
            return False


class UnconfiguredStorage:
    """Stand-in used when object storage settings are incomplete.

    Every operation logs a warning and does nothing.
    """

    configured = False

    def __init__(self, reason: str = ""):
        self.reason = reason
        logger.warning(f"S3 client not initialized due to missing configuration. {reason}".rstrip())

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None

    def location_of(self, key: str) -> str:
        return key

    async def upload_log(self, content: str, key: str) -> bool:
        logger.warning(f"S3 upload skipped for {key}: S3 client is not configured.")
        return False

    async def exists(self, key: str) -> bool:
        logger.warning(f"S3 check skipped for {key}: S3 client is not configured.")
        return False

    async def verify_connection(self) -> bool:
        logger.error(f"Object storage is not configured. {self.reason}".rstrip())
        return False
