"""
Shared provider plumbing: call-log adapters and the call-log fetcher
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List, Optional, Any, Tuple
from urllib.parse import urljoin

import requests
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log
)

from ..analysis.models import CallDirection, CallRecord, UNKNOWN_CALLER
from .exceptions import ProviderAPIError

logger = logging.getLogger(__name__)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 provider timestamp, returning None when unusable"""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except (TypeError, ValueError, AttributeError):
        logger.debug(f"Unparseable call timestamp: {value!r}")
        return None

    # Offset-less timestamps are UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class CallLogAdapter(ABC):
    """
    Maps one provider's raw call-log records onto CallRecord and decides
    which of its result codes mean missed and which mean accepted.
    """

    provider_name: str = ""

    # Lower-cased substrings that mark a result code as missed
    MISSED_PATTERNS: Tuple[str, ...] = ()
    # Exact (lower-cased) result codes that mark a record as missed
    MISSED_CODES: Tuple[str, ...] = ()
    # Lower-cased substrings that mark a result code as a genuine connection
    ACCEPTED_PATTERNS: Tuple[str, ...] = ()

    @abstractmethod
    def direction(self, raw: Dict[str, Any]) -> CallDirection:
        """Direction of the raw record"""

    @abstractmethod
    def start_time(self, raw: Dict[str, Any]) -> Optional[datetime]:
        """Call start timestamp"""

    @abstractmethod
    def caller_number(self, raw: Dict[str, Any]) -> Optional[str]:
        """Originating phone number, if the provider reported one"""

    @abstractmethod
    def result_code(self, raw: Dict[str, Any]) -> str:
        """Provider-native outcome string"""

    def duration(self, raw: Dict[str, Any]) -> int:
        return int(raw.get('duration') or 0)

    def is_inbound(self, raw: Dict[str, Any]) -> bool:
        return self.direction(raw) == CallDirection.INBOUND

    def is_missed(self, result_code: Optional[str]) -> bool:
        if not result_code:
            return False
        code = result_code.strip().lower()
        if code in self.MISSED_CODES:
            return True
        return any(pattern in code for pattern in self.MISSED_PATTERNS)

    def is_accepted(self, result_code: Optional[str]) -> bool:
        if not result_code or self.is_missed(result_code):
            return False
        code = result_code.strip().lower()
        return any(pattern in code for pattern in self.ACCEPTED_PATTERNS)

    def caller_key(self, raw: Dict[str, Any]) -> str:
        return self.caller_number(raw) or UNKNOWN_CALLER

    def normalize(self, raw: Dict[str, Any]) -> CallRecord:
        """Convert a raw provider record into a CallRecord"""
        return CallRecord(
            direction=self.direction(raw),
            start_time=self.start_time(raw),
            caller_number=self.caller_key(raw),
            result_code=self.result_code(raw) or "",
            duration_seconds=self.duration(raw)
        )


class CallLogFetcher(ABC):
    """
    Requests one page of call records for a date window.

    Only the first page is read: accounts with more calls than
    PAGE_SIZE in the window lose their oldest records.
    """

    PAGE_SIZE: int = 100
    ENDPOINT: str = ""
    RECORDS_KEY: str = "records"

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the fetcher

        Args:
            base_url: Provider API root
            timeout: Request timeout in seconds
            session: Optional pre-built requests session
        """
        self.base_url = base_url.rstrip('/') + '/'
        self.timeout = timeout
        self.session = session or requests.Session()

    @abstractmethod
    def build_params(self, date_from: datetime, date_to: datetime) -> Dict[str, Any]:
        """Query parameters for the call-log request"""

    def has_more(self, payload: Dict[str, Any]) -> bool:
        """Whether the provider reported records beyond the returned page"""
        return False

    @property
    def url(self) -> str:
        return urljoin(self.base_url, self.ENDPOINT.lstrip('/'))

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )
    def _send(self, access_token: str, params: Dict[str, Any]) -> requests.Response:
        return self.session.get(
            self.url,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json"
            },
            params=params,
            timeout=self.timeout
        )

    def fetch(
        self,
        access_token: str,
        date_from: datetime,
        date_to: datetime
    ) -> List[Dict[str, Any]]:
        """
        Fetch raw call records for the window

        Args:
            access_token: Valid bearer token
            date_from: Window start
            date_to: Window end

        Returns:
            Provider-native call records

        Raises:
            ProviderAPIError: On any non-success response or network failure
        """
        params = self.build_params(date_from, date_to)

        try:
            logger.debug(f"GET {self.url}")
            response = self._send(access_token, params)
        except requests.RequestException as e:
            logger.error(f"Call log request failed: {e}")
            raise ProviderAPIError(f"Call log request failed: {e}")

        if not response.ok:
            logger.error(f"Call log request failed: {response.status_code} {response.text}")
            raise ProviderAPIError(
                f"Failed to fetch call log: {response.status_code}",
                status_code=response.status_code,
                response_data={'body': response.text}
            )

        try:
            payload = response.json()
        except ValueError:
            raise ProviderAPIError(
                "Call log response was not valid JSON",
                status_code=response.status_code,
                response_data={'body': response.text}
            )

        if not isinstance(payload, dict):
            raise ProviderAPIError(
                "Call log response was not a JSON object",
                status_code=response.status_code,
                response_data={'body': response.text}
            )

        records = payload.get(self.RECORDS_KEY) or []

        if self.has_more(payload):
            logger.warning(
                f"Call log truncated at {self.PAGE_SIZE} records; older calls in the window are ignored"
            )

        return records
