"""
Zoom Phone call-history integration
"""

from datetime import datetime
from typing import Dict, Optional, Any

from ..analysis.models import CallDirection
from .base import CallLogAdapter, CallLogFetcher, parse_timestamp

PROVIDER_NAME = "Zoom Phone"
DEFAULT_API_URL = "https://api.zoom.us/v2"
DEFAULT_TOKEN_URL = "https://zoom.us/oauth/token"


class ZoomPhoneAdapter(CallLogAdapter):
    """
    Zoom Phone call history records

    Results seen on inbound calls: "Call connected", "Answered", "Missed",
    "Voicemail", "Declined", "Busy", "Not Answered".
    """

    provider_name = PROVIDER_NAME

    MISSED_PATTERNS = ("missed", "voicemail", "declined", "busy", "abandoned")
    MISSED_CODES = ("not answered", "no answer")
    ACCEPTED_PATTERNS = ("connected", "answered", "accepted")

    def direction(self, raw: Dict[str, Any]) -> CallDirection:
        if (raw.get('direction') or '').lower() == 'inbound':
            return CallDirection.INBOUND
        return CallDirection.OUTBOUND

    def start_time(self, raw: Dict[str, Any]) -> Optional[datetime]:
        return parse_timestamp(raw.get('date_time') or raw.get('start_time'))

    def caller_number(self, raw: Dict[str, Any]) -> Optional[str]:
        return raw.get('caller_number')

    def result_code(self, raw: Dict[str, Any]) -> str:
        return raw.get('result') or ""


class ZoomPhoneCallLogFetcher(CallLogFetcher):
    """
    Account call history; the API accepts whole dates only
    """

    PAGE_SIZE = 300
    ENDPOINT = "phone/call_history"
    RECORDS_KEY = "call_logs"

    def build_params(self, date_from: datetime, date_to: datetime) -> Dict[str, Any]:
        return {
            'from': date_from.strftime('%Y-%m-%d'),
            'to': date_to.strftime('%Y-%m-%d'),
            'page_size': self.PAGE_SIZE,
            'type': 'all'
        }

    def has_more(self, payload: Dict[str, Any]) -> bool:
        return bool(payload.get('next_page_token'))
