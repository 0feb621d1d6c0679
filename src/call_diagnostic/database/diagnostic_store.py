"""
Append-only storage for diagnostic results
"""

import logging
from typing import List, Optional, Dict, Any

from .models import DiagnosticRecord
from .session import SessionManager
from ..analysis.models import AnalysisResult

logger = logging.getLogger(__name__)


class DiagnosticStore:
    """
    Saves AnalysisResult snapshots under generated ids
    """

    def __init__(self, session_manager: SessionManager):
        self.session_manager = session_manager

    def save(self, result: AnalysisResult, business_email: Optional[str] = None) -> str:
        """
        Persist a result

        Args:
            result: Analysis result to snapshot
            business_email: Optional contact email for follow-up

        Returns:
            Generated diagnostic id
        """
        with self.session_manager.get_session() as session:
            record = DiagnosticRecord(
                provider=result.provider,
                month=result.month,
                total_inbound_calls=result.total_inbound_calls,
                missed_calls=result.missed_calls,
                after_hours_calls=result.after_hours_calls,
                accepted_calls=result.accepted_calls,
                total_missed_opportunities=result.total_missed_opportunities,
                avg_revenue_per_call=result.avg_revenue_per_call,
                total_loss=result.total_loss,
                avg_callback_time_minutes=result.avg_callback_time_minutes,
                company_name=result.company_name,
                industry=result.industry,
                business_email=business_email
            )
            session.add(record)
            session.flush()
            diagnostic_id = record.id

        logger.info(f"Saved diagnostic {diagnostic_id} for {result.provider}")
        return diagnostic_id

    def get(self, diagnostic_id: str) -> Optional[Dict[str, Any]]:
        with self.session_manager.get_session() as session:
            record = session.get(DiagnosticRecord, diagnostic_id)
            return record.to_dict() if record else None

    def list_all(self) -> List[Dict[str, Any]]:
        """All diagnostics, newest first"""
        with self.session_manager.get_session() as session:
            records = session.query(DiagnosticRecord).order_by(
                DiagnosticRecord.created_at.desc()
            ).all()
            return [r.to_dict() for r in records]

    def list_by_email(self, email: str) -> List[Dict[str, Any]]:
        """Diagnostics for one business email, newest first"""
        with self.session_manager.get_session() as session:
            records = session.query(DiagnosticRecord).filter(
                DiagnosticRecord.business_email == email
            ).order_by(
                DiagnosticRecord.created_at.desc()
            ).all()
            return [r.to_dict() for r in records]
