"""
OAuth token guard
Keeps a stored provider connection's bearer token valid, refreshing it
through the provider token endpoint when it has expired
"""

import base64
import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, Tuple

import requests

from .exceptions import ConfigurationError, TokenRefreshError

logger = logging.getLogger(__name__)

DEFAULT_EXPIRES_IN = 3600

_refresh_locks: Dict[Tuple[str, str], threading.Lock] = {}
_refresh_locks_guard = threading.Lock()


def _refresh_lock(provider: str, account_id: Optional[str]) -> threading.Lock:
    key = (provider, account_id or '')
    with _refresh_locks_guard:
        lock = _refresh_locks.get(key)
        if lock is None:
            lock = _refresh_locks[key] = threading.Lock()
        return lock


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes (as returned by SQLite) as UTC"""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def is_token_fresh(token_expiry: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """A token with no recorded expiry is assumed valid"""
    if token_expiry is None:
        return True
    now = now or datetime.now(timezone.utc)
    return now < as_utc(token_expiry)


class TokenGuard:
    """
    Returns a valid bearer token for a stored connection.

    Documentation: https://datatracker.ietf.org/doc/html/rfc6749#section-6
    """

    def __init__(
        self,
        provider: str,
        token_url: str,
        connection_store,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        timeout: int = 30,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the token guard

        Args:
            provider: Provider name used as the connection key
            token_url: Provider OAuth token endpoint
            connection_store: Store exposing get(id) and update(id, ...)
            client_id: OAuth client ID
            client_secret: OAuth client secret
            timeout: Request timeout in seconds
            session: Optional pre-built requests session
        """
        self.provider = provider
        self.token_url = token_url
        self.connection_store = connection_store
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout
        self.session = session or requests.Session()

    def _basic_auth_header(self) -> str:
        credentials = f"{self.client_id}:{self.client_secret}"
        return f"Basic {base64.b64encode(credentials.encode()).decode()}"

    def get_access_token(self, connection) -> str:
        """
        Get a valid access token for the connection, refreshing if necessary

        Args:
            connection: Stored connection with access_token, refresh_token,
                token_expiry, id and account_id

        Returns:
            Valid access token

        Raises:
            ConfigurationError: If credentials or the refresh token are missing
            TokenRefreshError: If the token endpoint rejects the refresh
        """
        if is_token_fresh(connection.token_expiry):
            return connection.access_token

        with _refresh_lock(self.provider, connection.account_id):
            # Another request may have refreshed while we waited
            current = self.connection_store.get(connection.id) or connection
            if is_token_fresh(current.token_expiry):
                logger.debug(f"{self.provider} token already refreshed by another request")
                return current.access_token

            return self._refresh(current)

    def _refresh(self, connection) -> str:
        if not connection.refresh_token or not self.client_id or not self.client_secret:
            raise ConfigurationError(
                f"Cannot refresh {self.provider} token: missing credentials"
            )

        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
            "Authorization": self._basic_auth_header()
        }

        data = {
            "grant_type": "refresh_token",
            "refresh_token": connection.refresh_token
        }

        try:
            logger.info(f"Refreshing {self.provider} access token")

            response = self.session.post(
                self.token_url,
                headers=headers,
                data=data,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Network error during {self.provider} token refresh: {e}")
            raise TokenRefreshError(f"Network error during token refresh: {e}")

        if not response.ok:
            error_data = self._error_body(response)
            logger.error(f"{self.provider} token refresh failed: {response.status_code}")
            raise TokenRefreshError(
                f"Failed to refresh {self.provider} token",
                status_code=response.status_code,
                response_data=error_data
            )

        token_data = response.json()
        access_token = token_data.get('access_token')
        if not access_token:
            raise TokenRefreshError(
                f"{self.provider} token response did not include an access token",
                status_code=response.status_code,
                response_data=token_data
            )

        expires_in = token_data.get('expires_in') or DEFAULT_EXPIRES_IN
        token_expiry = datetime.now(timezone.utc) + timedelta(seconds=expires_in)

        self.connection_store.update(
            connection.id,
            access_token=access_token,
            refresh_token=token_data.get('refresh_token') or connection.refresh_token,
            token_expiry=token_expiry
        )

        logger.info(f"Refreshed {self.provider} access token, expires in {expires_in} seconds")
        return access_token

    @staticmethod
    def _error_body(response: requests.Response) -> Dict[str, Any]:
        try:
            return response.json()
        except ValueError:
            return {'body': response.text}
