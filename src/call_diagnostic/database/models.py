"""
SQLAlchemy models for the diagnostic application
"""

import uuid
from datetime import datetime, timezone
from typing import Dict, Any

from sqlalchemy import (
    Column, String, Integer, Float, DateTime, Text, UniqueConstraint, Index
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

from ..utils.formatting import as_number

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class OAuthConnection(Base):
    """
    Stored OAuth tokens for one provider account
    """
    __tablename__ = "oauth_connections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    provider = Column(String(50), nullable=False, index=True)
    account_id = Column(String(100), nullable=False)
    user_id = Column(String(100))

    access_token = Column(Text, nullable=False)
    refresh_token = Column(Text)
    token_expiry = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint('provider', 'account_id', name='uq_provider_account'),
    )

    def __repr__(self):
        return (f"<OAuthConnection(id={self.id}, provider={self.provider}, "
                f"account_id={self.account_id}, token_expiry={self.token_expiry})>")


class DiagnosticRecord(Base):
    """
    Snapshot of one AnalysisResult; rows are never updated after insert
    """
    __tablename__ = "diagnostic_results"

    id = Column(String(36), primary_key=True, default=_new_id)
    provider = Column(String(50), nullable=False)
    month = Column(String(30), nullable=False)

    total_inbound_calls = Column(Integer, nullable=False, default=0)
    missed_calls = Column(Integer, nullable=False, default=0)
    after_hours_calls = Column(Integer, nullable=False, default=0)
    accepted_calls = Column(Integer, nullable=False, default=0)
    total_missed_opportunities = Column(Integer, nullable=False, default=0)
    avg_revenue_per_call = Column(Float, nullable=False)
    total_loss = Column(Float, nullable=False)
    avg_callback_time_minutes = Column(Integer)

    company_name = Column(String(200))
    industry = Column(String(100))
    business_email = Column(String(200), index=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        Index('idx_diagnostic_created_at', 'created_at'),
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'id': self.id,
            'provider': self.provider,
            'month': self.month,
            'totalInboundCalls': self.total_inbound_calls,
            'missedCalls': self.missed_calls,
            'afterHoursCalls': self.after_hours_calls,
            'acceptedCalls': self.accepted_calls,
            'totalMissedOpportunities': self.total_missed_opportunities,
            'avgRevenuePerCall': as_number(self.avg_revenue_per_call),
            'totalLoss': as_number(self.total_loss),
            'avgCallbackTimeMinutes': self.avg_callback_time_minutes,
            'companyName': self.company_name,
            'industry': self.industry,
            'businessEmail': self.business_email,
            'createdAt': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return (f"<DiagnosticRecord(id={self.id}, provider={self.provider}, "
                f"missed_calls={self.missed_calls}, total_loss={self.total_loss})>")
