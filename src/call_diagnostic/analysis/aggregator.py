"""
Loss aggregation
"""

from datetime import datetime, timezone
from typing import Optional, Sequence

from .callback import average_callback_minutes
from .models import AnalysisResult, ClassifiedCall


def month_label(moment: datetime) -> str:
    """Human-readable label for the analysis window, e.g. 'October 2026'"""
    return moment.strftime('%B %Y')


def validate_revenue_per_call(value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValueError("Average revenue per call must be a positive number")


def aggregate(
    calls: Sequence[ClassifiedCall],
    avg_revenue_per_call: float,
    provider: str,
    now: Optional[datetime] = None,
    company_name: Optional[str] = None,
    industry: Optional[str] = None
) -> AnalysisResult:
    """
    Package classified calls into an AnalysisResult

    Args:
        calls: Classified inbound calls
        avg_revenue_per_call: Revenue attributed to each missed call
        provider: Provider name
        now: Analysis time, used for the month label
        company_name: Optional business name
        industry: Optional industry label

    Returns:
        AnalysisResult

    Raises:
        ValueError: If avg_revenue_per_call is not positive
    """
    validate_revenue_per_call(avg_revenue_per_call)

    now = now or datetime.now(timezone.utc)

    missed_calls = sum(1 for c in calls if c.is_missed)
    # After-hours is tracked as a subset of missed calls
    after_hours_calls = sum(1 for c in calls if c.is_missed and c.is_after_hours)
    accepted_calls = sum(1 for c in calls if c.is_accepted)

    return AnalysisResult(
        provider=provider,
        month=month_label(now),
        total_inbound_calls=len(calls),
        missed_calls=missed_calls,
        after_hours_calls=after_hours_calls,
        accepted_calls=accepted_calls,
        avg_revenue_per_call=avg_revenue_per_call,
        total_loss=missed_calls * avg_revenue_per_call,
        avg_callback_time_minutes=average_callback_minutes(calls),
        company_name=company_name,
        industry=industry,
        generated_at=now
    )
