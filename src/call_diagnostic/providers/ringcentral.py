"""
RingCentral call-log integration
"""

from datetime import datetime
from typing import Dict, Optional, Any

from ..analysis.models import CallDirection
from .base import CallLogAdapter, CallLogFetcher, parse_timestamp

PROVIDER_NAME = "RingCentral"
DEFAULT_SERVER_URL = "https://platform.ringcentral.com"
TOKEN_ENDPOINT = "/restapi/oauth/token"


def token_url(server_url: str = DEFAULT_SERVER_URL) -> str:
    return server_url.rstrip('/') + TOKEN_ENDPOINT


class RingCentralAdapter(CallLogAdapter):
    """
    RingCentral call log records

    Results seen on inbound calls: "Missed", "Voicemail", "Abandoned",
    "Declined", "Busy", "Rejected", "No Answer", "Accepted", "Call accepted",
    "Call connected".
    """

    provider_name = PROVIDER_NAME

    MISSED_PATTERNS = ("missed", "voicemail", "abandoned", "declined", "busy", "rejected")
    MISSED_CODES = ("no answer", "not answered")
    ACCEPTED_PATTERNS = ("accepted", "connected")

    def direction(self, raw: Dict[str, Any]) -> CallDirection:
        if (raw.get('direction') or '').lower() == 'inbound':
            return CallDirection.INBOUND
        return CallDirection.OUTBOUND

    def start_time(self, raw: Dict[str, Any]) -> Optional[datetime]:
        return parse_timestamp(raw.get('startTime'))

    def caller_number(self, raw: Dict[str, Any]) -> Optional[str]:
        return (raw.get('from') or {}).get('phoneNumber')

    def result_code(self, raw: Dict[str, Any]) -> str:
        return raw.get('result') or ""


class RingCentralCallLogFetcher(CallLogFetcher):
    """
    Account-level call log, detailed view
    """

    PAGE_SIZE = 1000
    ENDPOINT = "/restapi/v1.0/account/~/call-log"
    RECORDS_KEY = "records"

    def build_params(self, date_from: datetime, date_to: datetime) -> Dict[str, Any]:
        return {
            'dateFrom': date_from.strftime('%Y-%m-%dT%H:%M:%S.000Z'),
            'dateTo': date_to.strftime('%Y-%m-%dT%H:%M:%S.000Z'),
            'view': 'Detailed',
            'perPage': self.PAGE_SIZE
        }

    def has_more(self, payload: Dict[str, Any]) -> bool:
        return 'nextPage' in (payload.get('navigation') or {})
