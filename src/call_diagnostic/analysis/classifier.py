"""
Call classification
Labels inbound call records as missed, accepted and after-hours
"""

from datetime import datetime, tzinfo
from typing import Iterable, List, Optional, Dict, Any

import pytz

from .models import CallRecord, ClassifiedCall

DEFAULT_TIMEZONE = "America/New_York"
BUSINESS_HOURS_START = 8
BUSINESS_HOURS_END = 18


class BusinessHours:
    """
    Weekday opening hours evaluated in a single reference timezone
    """

    def __init__(
        self,
        timezone: str = DEFAULT_TIMEZONE,
        start_hour: int = BUSINESS_HOURS_START,
        end_hour: int = BUSINESS_HOURS_END
    ):
        if not 0 <= start_hour < end_hour <= 24:
            raise ValueError(f"Invalid business hours: {start_hour}-{end_hour}")
        self.tz: tzinfo = pytz.timezone(timezone)
        self.start_hour = start_hour
        self.end_hour = end_hour

    def is_after_hours(self, moment: Optional[datetime]) -> bool:
        if moment is None:
            return False
        if moment.tzinfo is None:
            moment = pytz.UTC.localize(moment)
        local = moment.astimezone(self.tz)
        if local.weekday() >= 5:
            return True
        return local.hour < self.start_hour or local.hour >= self.end_hour


def classify_record(record: CallRecord, adapter, business_hours: BusinessHours) -> ClassifiedCall:
    """Derive the outcome flags for a single normalized record"""
    return ClassifiedCall(
        record=record,
        is_missed=adapter.is_missed(record.result_code),
        is_accepted=adapter.is_accepted(record.result_code),
        is_after_hours=business_hours.is_after_hours(record.start_time)
    )


def classify_calls(
    raw_records: Iterable[Dict[str, Any]],
    adapter,
    business_hours: Optional[BusinessHours] = None
) -> List[ClassifiedCall]:
    """
    Normalize and classify raw provider records, keeping inbound calls only

    Args:
        raw_records: Provider-native call records
        adapter: CallLogAdapter for the provider
        business_hours: Opening hours; defaults to 08:00-18:00 US Eastern

    Returns:
        Classified inbound calls in input order
    """
    business_hours = business_hours or BusinessHours()
    classified = []

    for raw in raw_records:
        if not adapter.is_inbound(raw):
            continue
        classified.append(classify_record(adapter.normalize(raw), adapter, business_hours))

    return classified
