"""
Shared fixtures for the diagnostic test suite.

Provider HTTP traffic is faked by handing a MagicMock in place of the
requests.Session; responses are real requests.Response objects so status and
JSON handling behave exactly as in production.
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from unittest.mock import MagicMock

import pytest
import requests

from call_diagnostic.analysis.models import CallDirection, CallRecord, ClassifiedCall
from call_diagnostic.config.settings import Settings
from call_diagnostic.database import SessionManager, ConnectionStore, DiagnosticStore

# Wednesday 2026-10-14 15:00 UTC = 11:00 US Eastern (EDT)
BASE_TIME = datetime(2026, 10, 14, 15, 0, tzinfo=timezone.utc)


def make_response(status_code: int, payload: Any = None, text: Optional[str] = None) -> requests.Response:
    """Build a real requests.Response with a JSON or text body"""
    response = requests.Response()
    response.status_code = status_code
    if payload is not None:
        response._content = json.dumps(payload).encode()
        response.headers['Content-Type'] = 'application/json'
    else:
        response._content = (text or '').encode()
    return response


def iso(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S.000Z')


def rc_record(
    result: str,
    start: datetime = BASE_TIME,
    number: Optional[str] = "+15551230001",
    direction: str = "Inbound",
    duration: int = 30
) -> Dict[str, Any]:
    """RingCentral call-log record"""
    record = {
        'direction': direction,
        'type': 'Voice',
        'action': 'Phone Call',
        'result': result,
        'startTime': iso(start),
        'duration': duration,
        'to': {'phoneNumber': '+15559990000'},
    }
    if number is not None:
        record['from'] = {'phoneNumber': number}
    return record


def zoom_record(
    result: str,
    start: datetime = BASE_TIME,
    number: Optional[str] = "+15551230001",
    direction: str = "inbound",
    duration: int = 30
) -> Dict[str, Any]:
    """Zoom Phone call-history record"""
    return {
        'id': f"{number}-{start.timestamp()}",
        'direction': direction,
        'result': result,
        'date_time': start.astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%SZ'),
        'duration': duration,
        'caller_number': number,
        'callee_number': '+15559990000',
    }


def make_call(
    minutes: float,
    missed: bool = False,
    accepted: bool = False,
    caller: str = "+15551230001",
    after_hours: bool = False
) -> ClassifiedCall:
    """Classified inbound call starting `minutes` after BASE_TIME"""
    record = CallRecord(
        direction=CallDirection.INBOUND,
        start_time=BASE_TIME + timedelta(minutes=minutes),
        caller_number=caller,
        result_code="Missed" if missed else ("Call connected" if accepted else "Unknown"),
    )
    return ClassifiedCall(
        record=record,
        is_missed=missed,
        is_accepted=accepted,
        is_after_hours=after_hours
    )


@pytest.fixture
def settings():
    """Settings with deterministic provider credentials"""
    s = Settings()
    s.database_url = 'sqlite://'
    s.ringcentral_client_id = 'rc-client'
    s.ringcentral_client_secret = 'rc-secret'
    s.ringcentral_server_url = 'https://platform.ringcentral.com'
    s.ringcentral_default_revenue = 350
    s.zoom_client_id = 'zoom-client'
    s.zoom_client_secret = 'zoom-secret'
    s.zoom_api_url = 'https://api.zoom.us/v2'
    s.zoom_token_url = 'https://zoom.us/oauth/token'
    s.zoom_default_revenue = 1000
    s.business_timezone = 'America/New_York'
    s.business_hours_start = 8
    s.business_hours_end = 18
    s.analysis_window_days = 30
    s.http_timeout = 30
    return s


@pytest.fixture
def session_manager():
    manager = SessionManager('sqlite://')
    manager.init_db()
    yield manager
    manager.close()


@pytest.fixture
def connection_store(session_manager):
    return ConnectionStore(session_manager)


@pytest.fixture
def diagnostic_store(session_manager):
    return DiagnosticStore(session_manager)


@pytest.fixture
def http_session():
    """Stand-in for requests.Session shared by token guard and fetcher"""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def valid_expiry():
    return datetime.now(timezone.utc) + timedelta(hours=1)


@pytest.fixture
def past_expiry():
    return datetime.now(timezone.utc) - timedelta(hours=1)
