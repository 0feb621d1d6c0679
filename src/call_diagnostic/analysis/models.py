"""
Value objects for call-log analysis
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Dict, Any

from ..utils.formatting import as_number

UNKNOWN_CALLER = "unknown"


class CallDirection(str, Enum):
    """
    Enum for call direction
    """
    INBOUND = "inbound"
    OUTBOUND = "outbound"


@dataclass(frozen=True)
class CallRecord:
    """
    Provider-neutral call log record
    """
    direction: CallDirection
    start_time: Optional[datetime]
    caller_number: str
    result_code: str
    duration_seconds: int = 0

    def __post_init__(self):
        # Naive start times are UTC
        if self.start_time is not None and self.start_time.tzinfo is None:
            object.__setattr__(self, 'start_time', self.start_time.replace(tzinfo=timezone.utc))

    @property
    def is_inbound(self) -> bool:
        return self.direction == CallDirection.INBOUND


@dataclass(frozen=True)
class ClassifiedCall:
    """
    Inbound call record with its derived outcome flags
    """
    record: CallRecord
    is_missed: bool
    is_accepted: bool
    is_after_hours: bool

    @property
    def start_time(self) -> Optional[datetime]:
        return self.record.start_time

    @property
    def caller_key(self) -> str:
        return self.record.caller_number or UNKNOWN_CALLER


@dataclass(frozen=True)
class AnalysisResult:
    """
    Summary of one trailing-window call-log analysis for one provider connection
    """
    provider: str
    month: str
    total_inbound_calls: int
    missed_calls: int
    after_hours_calls: int
    accepted_calls: int
    avg_revenue_per_call: float
    total_loss: float
    avg_callback_time_minutes: Optional[int] = None
    company_name: Optional[str] = None
    industry: Optional[str] = None
    generated_at: datetime = field(default=None, compare=False)

    @property
    def total_missed_opportunities(self) -> int:
        return self.missed_calls

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape consumed by the UI, PDF and email layers"""
        data = {
            'provider': self.provider,
            'month': self.month,
            'totalInboundCalls': self.total_inbound_calls,
            'missedCalls': self.missed_calls,
            'afterHoursCalls': self.after_hours_calls,
            'acceptedCalls': self.accepted_calls,
            'avgRevenuePerCall': as_number(self.avg_revenue_per_call),
            'totalLoss': as_number(self.total_loss),
            'totalMissedOpportunities': self.total_missed_opportunities,
            'avgCallbackTimeMinutes': self.avg_callback_time_minutes,
        }
        if self.company_name:
            data['companyName'] = self.company_name
        if self.industry:
            data['industry'] = self.industry
        return data
