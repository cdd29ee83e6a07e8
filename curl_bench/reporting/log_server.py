"""
Client for the log server that stores test results.
"""

import json
import logging
from typing import Optional

import requests

from curl_bench.configuration import DEFAULT_LOG_SERVER_ENDPOINT, DEFAULT_LOG_SERVER_TIMEOUT_SECONDS
from curl_bench.errors import NetworkError, RequestError, ServerError
from curl_bench.persistence.record import ReportRecord

logger = logging.getLogger(__name__)


class LogServerReporter:
    """Posts one JSON record per tested URL to the log server."""

    def __init__(self, endpoint: str = DEFAULT_LOG_SERVER_ENDPOINT,
                 timeout: float = DEFAULT_LOG_SERVER_TIMEOUT_SECONDS,
                 session: Optional[requests.Session] = None):
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'Content-Type': 'application/json'})

        if endpoint:
            logger.info(f"Initialized log server reporter for {endpoint}")
        else:
            logger.warning("Log server endpoint is empty, results will not be posted")

    @property
    def enabled(self) -> bool:
        return bool(self.endpoint)

    def report(self, record: ReportRecord):
        """Post a record.

        Returns:
            The id assigned by the server, or None if reporting is disabled
            or the server did not return one

        Raises:
            ServerError: Non-2xx response
            NetworkError: No response received
            RequestError: The request could not be built or sent
        """
        if not self.enabled:
            logger.info(f"Log server disabled, not posting results for {record.url}")
            return None

        try:
            body = json.dumps(record.to_dict())
        except (TypeError, ValueError) as e:
            raise RequestError(f"Cannot serialize report for {record.url}: {e}") from e

        try:
            response = self.session.post(self.endpoint, data=body, timeout=self.timeout)
        except (requests.ConnectionError, requests.Timeout) as e:
            raise NetworkError(self.endpoint, e) from e
        except requests.RequestException as e:
            raise RequestError(f"Failed to post results: {e}") from e

        if not response.ok:
            raise ServerError(response.status_code, response.text)

        try:
            result_id = response.json().get('id')
        except (ValueError, AttributeError):
            result_id = None

        logger.info(f"Result saved to log server (ID: {result_id})")
        return result_id

    def close(self):
        self.session.close()
