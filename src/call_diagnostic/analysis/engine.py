"""
Diagnostic analysis pipeline
Token guard -> call-log fetch -> classify -> callback latency -> aggregate
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from .aggregator import aggregate, validate_revenue_per_call
from .classifier import BusinessHours, classify_calls
from .models import AnalysisResult
from ..utils.industry import detect_industry

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 30


class DiagnosticAnalyzer:
    """
    Runs one provider's call-log analysis for the trailing window
    """

    def __init__(
        self,
        provider,
        connection_store,
        business_hours: Optional[BusinessHours] = None,
        window_days: int = DEFAULT_WINDOW_DAYS
    ):
        """
        Initialize the analyzer

        Args:
            provider: Provider bundle from build_provider
            connection_store: Store exposing find(provider)
            business_hours: Opening hours used for after-hours detection
            window_days: Length of the trailing window in days
        """
        self.provider = provider
        self.connection_store = connection_store
        self.business_hours = business_hours or BusinessHours()
        self.window_days = window_days

    def analyze(
        self,
        avg_revenue_per_call: Optional[float] = None,
        company_name: Optional[str] = None,
        industry: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> Optional[AnalysisResult]:
        """
        Analyze the provider's call log

        Args:
            avg_revenue_per_call: Revenue per missed call; provider default if omitted
            company_name: Optional business name
            industry: Optional industry; detected from company_name if omitted
            now: Analysis time (defaults to the current UTC time)

        Returns:
            AnalysisResult, or None when the provider has no stored connection

        Raises:
            ConfigurationError: Missing credentials for an expired token
            TokenRefreshError: Token endpoint rejected the refresh
            ProviderAPIError: Call-log request failed
        """
        provider_name = self.provider.name

        connection = self.connection_store.find(provider_name)
        if not connection:
            logger.info(f"No {provider_name} connection found")
            return None

        if avg_revenue_per_call is None:
            avg_revenue_per_call = self.provider.default_revenue_per_call
        validate_revenue_per_call(avg_revenue_per_call)

        access_token = self.provider.token_guard.get_access_token(connection)

        now = now or datetime.now(timezone.utc)
        date_from = now - timedelta(days=self.window_days)

        records = self.provider.fetcher.fetch(access_token, date_from, now)
        logger.info(
            f"{provider_name} returned {len(records)} call records for the last {self.window_days} days"
        )

        calls = classify_calls(records, self.provider.adapter, self.business_hours)

        if company_name and not industry:
            industry = detect_industry(company_name)

        result = aggregate(
            calls,
            avg_revenue_per_call,
            provider=provider_name,
            now=now,
            company_name=company_name,
            industry=industry
        )

        logger.info(
            f"{provider_name} analysis: {result.total_inbound_calls} inbound, "
            f"{result.missed_calls} missed, {result.accepted_calls} accepted, "
            f"{result.after_hours_calls} after hours, loss {result.total_loss}"
        )
        return result
