"""
OAuth connection persistence
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from .models import OAuthConnection
from .session import SessionManager
from ..providers.auth import is_token_fresh

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredConnection:
    """
    Detached copy of an OAuthConnection row
    """
    id: int
    provider: str
    account_id: str
    access_token: str
    refresh_token: Optional[str]
    token_expiry: Optional[datetime]

    @classmethod
    def from_model(cls, row: OAuthConnection) -> 'StoredConnection':
        return cls(
            id=row.id,
            provider=row.provider,
            account_id=row.account_id,
            access_token=row.access_token,
            refresh_token=row.refresh_token,
            token_expiry=row.token_expiry
        )


class ConnectionStore:
    """
    Reads and writes provider OAuth connections
    """

    def __init__(self, session_manager: SessionManager):
        self.session_manager = session_manager

    def find(self, provider: str) -> Optional[StoredConnection]:
        """
        Find the connection for a provider

        Args:
            provider: Provider name

        Returns:
            StoredConnection or None when the provider was never connected
        """
        with self.session_manager.get_session() as session:
            row = session.query(OAuthConnection).filter(
                OAuthConnection.provider == provider
            ).order_by(OAuthConnection.id).first()
            return StoredConnection.from_model(row) if row else None

    def get(self, connection_id: int) -> Optional[StoredConnection]:
        with self.session_manager.get_session() as session:
            row = session.get(OAuthConnection, connection_id)
            return StoredConnection.from_model(row) if row else None

    def update(
        self,
        connection_id: int,
        access_token: str,
        refresh_token: Optional[str],
        token_expiry: Optional[datetime]
    ):
        """Store a refreshed token pair"""
        with self.session_manager.get_session() as session:
            row = session.get(OAuthConnection, connection_id)
            if row is None:
                logger.warning(f"OAuth connection {connection_id} no longer exists")
                return

            row.access_token = access_token
            row.refresh_token = refresh_token
            row.token_expiry = token_expiry
            row.updated_at = datetime.now(timezone.utc)

    def upsert(
        self,
        provider: str,
        account_id: str,
        access_token: str,
        refresh_token: Optional[str] = None,
        token_expiry: Optional[datetime] = None
    ) -> StoredConnection:
        """
        Insert or update the connection for a provider account

        A missing refresh token keeps the one already stored.
        """
        with self.session_manager.get_session() as session:
            row = session.query(OAuthConnection).filter(
                OAuthConnection.provider == provider,
                OAuthConnection.account_id == account_id
            ).first()

            if row:
                row.access_token = access_token
                row.refresh_token = refresh_token or row.refresh_token
                row.token_expiry = token_expiry
                row.updated_at = datetime.now(timezone.utc)
            else:
                row = OAuthConnection(
                    provider=provider,
                    account_id=account_id,
                    user_id=account_id,
                    access_token=access_token,
                    refresh_token=refresh_token,
                    token_expiry=token_expiry
                )
                session.add(row)

            session.flush()
            logger.info(f"Saved {provider} connection for account {account_id}")
            return StoredConnection.from_model(row)

    def delete(self, provider: str) -> int:
        """Remove every connection for a provider, returning the number removed"""
        with self.session_manager.get_session() as session:
            removed = session.query(OAuthConnection).filter(
                OAuthConnection.provider == provider
            ).delete()
            logger.info(f"Disconnected {provider} ({removed} connection(s) removed)")
            return removed

    def status(self, provider: str) -> Dict[str, Any]:
        """Connection status as reported to the UI"""
        connection = self.find(provider)
        if not connection:
            return {'connected': False}

        return {
            'connected': True,
            'expired': not is_token_fresh(connection.token_expiry),
            'accountId': connection.account_id
        }
