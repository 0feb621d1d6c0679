"""
Database package for OAuth connections and diagnostic results
"""

from .models import Base, OAuthConnection, DiagnosticRecord
from .session import SessionManager
from .connection_store import ConnectionStore, StoredConnection
from .diagnostic_store import DiagnosticStore

__all__ = [
    'Base',
    'OAuthConnection',
    'DiagnosticRecord',
    'SessionManager',
    'ConnectionStore',
    'StoredConnection',
    'DiagnosticStore'
]
