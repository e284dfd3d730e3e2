from __future__ import annotations

import asyncio
import logging

import google.auth.exceptions
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from spinbook.application.exceptions import CalendarProviderError, ProviderErrorKind

SCOPES = [
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/calendar.events",
]


class ServiceAccountTokenProvider:
    """Mints OAuth access tokens for a service account. google-auth refreshes synchronously,
    so the refresh runs in a worker thread."""

    def __init__(self, client_email: str, private_key: str, token_uri: str) -> None:
        self._client_email = client_email
        self._private_key = private_key
        self._token_uri = token_uri
        self._credentials: service_account.Credentials | None = None
        self._refresh_lock = asyncio.Lock()
        self._logger = logging.getLogger(__name__)

    def _build_credentials(self) -> service_account.Credentials:
        info = {
            "type": "service_account",
            "client_email": self._client_email,
            "private_key": self._private_key,
            "token_uri": self._token_uri,
        }
        try:
            return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
        except (ValueError, KeyError) as e:
            self._logger.error("Service account credentials rejected", extra={"reason": str(e)})
            raise CalendarProviderError(
                ProviderErrorKind.authentication,
                "Invalid service account credentials. Verify GOOGLE_PRIVATE_KEY and GOOGLE_CLIENT_EMAIL.",
            ) from e

    async def get_token(self) -> str:
        # The provider is cached per process; one refresh at a time across requests.
        async with self._refresh_lock:
            if self._credentials is None:
                self._credentials = self._build_credentials()
            credentials = self._credentials
            if not credentials.valid:
                try:
                    await asyncio.to_thread(credentials.refresh, Request())
                except google.auth.exceptions.RefreshError as e:
                    raise CalendarProviderError(
                        ProviderErrorKind.authentication,
                        f"Google Calendar authentication failed: {e}",
                    ) from e
                except google.auth.exceptions.TransportError as e:
                    raise CalendarProviderError(
                        ProviderErrorKind.unavailable,
                        f"Token endpoint unreachable: {e}",
                    ) from e
            return credentials.token
