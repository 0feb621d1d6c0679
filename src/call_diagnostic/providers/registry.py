"""
Provider registry
Wires each supported provider's adapter, fetcher and token guard from settings
"""

from dataclasses import dataclass
from typing import Dict, Optional

import requests

from .auth import TokenGuard
from .base import CallLogAdapter, CallLogFetcher
from . import ringcentral, zoom

# URL slug -> provider name
PROVIDER_SLUGS: Dict[str, str] = {
    'ringcentral': ringcentral.PROVIDER_NAME,
    'zoom': zoom.PROVIDER_NAME,
}

SUPPORTED_PROVIDERS = tuple(PROVIDER_SLUGS.values())


@dataclass
class Provider:
    """
    Everything the analysis pipeline needs for one provider
    """
    name: str
    adapter: CallLogAdapter
    fetcher: CallLogFetcher
    token_guard: TokenGuard
    default_revenue_per_call: float


def resolve_provider_name(value: str) -> Optional[str]:
    """Accept either a provider name or its URL slug"""
    if not isinstance(value, str):
        return None
    if value in SUPPORTED_PROVIDERS:
        return value
    return PROVIDER_SLUGS.get(value.lower())


def build_provider(
    name: str,
    settings,
    connection_store,
    session: Optional[requests.Session] = None
) -> Provider:
    """
    Build the provider bundle for a provider name

    Args:
        name: Provider name or slug
        settings: Settings instance
        connection_store: Store used by the token guard to persist refreshes
        session: Optional requests session shared by guard and fetcher

    Raises:
        ValueError: If the provider is not supported
    """
    provider_name = resolve_provider_name(name)
    timeout = settings.http_timeout

    if provider_name == ringcentral.PROVIDER_NAME:
        return Provider(
            name=provider_name,
            adapter=ringcentral.RingCentralAdapter(),
            fetcher=ringcentral.RingCentralCallLogFetcher(
                settings.ringcentral_server_url, timeout=timeout, session=session
            ),
            token_guard=TokenGuard(
                provider=provider_name,
                token_url=ringcentral.token_url(settings.ringcentral_server_url),
                connection_store=connection_store,
                client_id=settings.ringcentral_client_id,
                client_secret=settings.ringcentral_client_secret,
                timeout=timeout,
                session=session
            ),
            default_revenue_per_call=settings.ringcentral_default_revenue
        )

    if provider_name == zoom.PROVIDER_NAME:
        return Provider(
            name=provider_name,
            adapter=zoom.ZoomPhoneAdapter(),
            fetcher=zoom.ZoomPhoneCallLogFetcher(
                settings.zoom_api_url, timeout=timeout, session=session
            ),
            token_guard=TokenGuard(
                provider=provider_name,
                token_url=settings.zoom_token_url,
                connection_store=connection_store,
                client_id=settings.zoom_client_id,
                client_secret=settings.zoom_client_secret,
                timeout=timeout,
                session=session
            ),
            default_revenue_per_call=settings.zoom_default_revenue
        )

    raise ValueError(f"Unsupported provider: {name}")
