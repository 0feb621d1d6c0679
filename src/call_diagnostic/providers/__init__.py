"""
Telephony provider integrations

Token refresh and call-log retrieval for RingCentral and Zoom Phone.
"""

from .auth import TokenGuard
from .base import CallLogAdapter, CallLogFetcher
from .ringcentral import RingCentralAdapter, RingCentralCallLogFetcher
from .zoom import ZoomPhoneAdapter, ZoomPhoneCallLogFetcher
from .registry import Provider, build_provider, resolve_provider_name, SUPPORTED_PROVIDERS
from .exceptions import (
    DiagnosticError,
    ConfigurationError,
    TokenRefreshError,
    ProviderAPIError
)

__all__ = [
    'TokenGuard',
    'CallLogAdapter',
    'CallLogFetcher',
    'RingCentralAdapter',
    'RingCentralCallLogFetcher',
    'ZoomPhoneAdapter',
    'ZoomPhoneCallLogFetcher',
    'Provider',
    'build_provider',
    'resolve_provider_name',
    'SUPPORTED_PROVIDERS',
    'DiagnosticError',
    'ConfigurationError',
    'TokenRefreshError',
    'ProviderAPIError'
]
