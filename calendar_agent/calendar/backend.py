"""Calendar backend capability and its Google Calendar implementation."""

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

import httplib2
from google.auth.exceptions import TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google.oauth2.service_account import Credentials as ServiceAccountCredentials
from google_auth_httplib2 import AuthorizedHttp
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .errors import CalendarBackendError, CredentialsError

SCOPES = ["https://www.googleapis.com/auth/calendar"]
TOKEN_URI = "https://oauth2.googleapis.com/token"

logger = logging.getLogger(__name__)


class CalendarBackend(ABC):
    """Event store operations the search and creation logic depend on."""

    @abstractmethod
    async def list_events(
        self,
        calendar_id: str,
        time_min: str,
        time_max: str,
        q: str = "",
        single_events: bool = True,
        order_by: str = "startTime",
        max_results: int = 50,
    ) -> List[Dict[str, Any]]:
        """
        List events in a calendar.

        Args:
            calendar_id: Calendar to search
            time_min: Lower bound (RFC 3339)
            time_max: Upper bound (RFC 3339)
            q: Free-text filter, empty for no filter
            single_events: Expand recurring events into instances
            order_by: Sort order requested from the backend
            max_results: Maximum number of events

        Returns:
            Event resources as returned by the API
        """
        pass

    @abstractmethod
    async def get_event(self, calendar_id: str, event_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def insert_event(
        self,
        calendar_id: str,
        body: Dict[str, Any],
        send_updates: Optional[str] = None,
        conference_data_version: Optional[int] = None,
    ) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def update_event(
        self,
        calendar_id: str,
        event_id: str,
        body: Dict[str, Any],
        send_updates: Optional[str] = None,
    ) -> Dict[str, Any]:
        pass


class GoogleCredentialsProvider:
    """Resolves Google credentials from the configured sources."""

    def __init__(
        self,
        access_token: Optional[str] = None,
        credentials_path: Optional[str] = None,
        token_path: Optional[str] = None,
        service_account_email: Optional[str] = None,
        service_account_key: Optional[str] = None,
    ):
        """
        Initialize credentials provider.

        Args:
            access_token: Bearer token supplied by the session layer
            credentials_path: Path to OAuth2 client secrets JSON file
            token_path: Path where authorized user tokens are cached
            service_account_email: Service account email (alternative auth)
            service_account_key: Service account private key (alternative auth)
        """
        self.access_token = access_token
        self.credentials_path = credentials_path
        self.token_path = token_path
        self.service_account_email = service_account_email
        self.service_account_key = service_account_key

    def get_credentials(self):
        """
        Get valid credentials, trying each configured source in turn.

        Raises:
            CredentialsError: If no source yields usable credentials
        """
        if self.access_token:
            return Credentials(token=self.access_token)

        creds = None

        if self.service_account_email and self.service_account_key:
            try:
                creds = ServiceAccountCredentials.from_service_account_info(
                    {
                        "type": "service_account",
                        "client_email": self.service_account_email,
                        "private_key": self.service_account_key,
                        "token_uri": TOKEN_URI,
                    },
                    scopes=SCOPES,
                )
            except ValueError as e:
                logger.warning(f"Service account credentials rejected: {e}")

        if not creds and self.token_path and Path(self.token_path).exists():
            creds = Credentials.from_authorized_user_file(self.token_path, SCOPES)

        if not creds and self.credentials_path:
            flow = InstalledAppFlow.from_client_secrets_file(
                self.credentials_path, SCOPES
            )
            creds = flow.run_local_server(port=0)
            if self.token_path:
                Path(self.token_path).write_text(creds.to_json(), encoding="utf-8")

        if not creds:
            raise CredentialsError(
                "No Google Calendar credentials configured (authentication required)"
            )

        if not creds.valid:
            try:
                creds.refresh(Request())
            except Exception as e:
                raise CredentialsError(
                    f"Failed to refresh Google Calendar token: {e}"
                ) from e

        return creds


class GoogleCalendarBackend(CalendarBackend):
    """CalendarBackend over the Google Calendar v3 API."""

    def __init__(self, credentials_provider: GoogleCredentialsProvider):
        self.credentials_provider = credentials_provider
        self.credentials = None
        self.service = None

    def _get_service(self):
        """Get or create Google Calendar service."""
        if self.service:
            return self.service

        self.credentials = self.credentials_provider.get_credentials()
        self.service = build(
            "calendar", "v3", credentials=self.credentials, cache_discovery=False
        )
        return self.service

    def connect(self) -> "GoogleCalendarBackend":
        """Build the API service now so credential failures surface early."""
        self._get_service()
        return self

    def _authorized_http(self) -> AuthorizedHttp:
        """Get a transport for one request; httplib2 connections are not thread-safe."""
        return AuthorizedHttp(self.credentials, http=httplib2.Http())

    async def _execute(self, request) -> Dict[str, Any]:
        http = self._authorized_http()
        try:
            return await asyncio.to_thread(request.execute, http=http)
        except HttpError as e:
            status = getattr(e.resp, "status", None)
            raise CalendarBackendError(str(e), status=status) from e
        except (OSError, httplib2.HttpLib2Error, TransportError) as e:
            raise CalendarBackendError(f"Calendar transport error: {e}") from e

    async def list_events(
        self,
        calendar_id: str,
        time_min: str,
        time_max: str,
        q: str = "",
        single_events: bool = True,
        order_by: str = "startTime",
        max_results: int = 50,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {
            "calendarId": calendar_id,
            "timeMin": time_min,
            "timeMax": time_max,
            "singleEvents": single_events,
            "maxResults": max_results,
        }
        if order_by:
            params["orderBy"] = order_by
        if q:
            params["q"] = q

        result = await self._execute(self._get_service().events().list(**params))
        return result.get("items", [])

    async def get_event(self, calendar_id: str, event_id: str) -> Dict[str, Any]:
        return await self._execute(
            self._get_service().events().get(calendarId=calendar_id, eventId=event_id)
        )

    async def insert_event(
        self,
        calendar_id: str,
        body: Dict[str, Any],
        send_updates: Optional[str] = None,
        conference_data_version: Optional[int] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"calendarId": calendar_id, "body": body}
        if send_updates:
            params["sendUpdates"] = send_updates
        if conference_data_version is not None:
            params["conferenceDataVersion"] = conference_data_version
        return await self._execute(self._get_service().events().insert(**params))

    async def update_event(
        self,
        calendar_id: str,
        event_id: str,
        body: Dict[str, Any],
        send_updates: Optional[str] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "calendarId": calendar_id,
            "eventId": event_id,
            "body": body,
        }
        if send_updates:
            params["sendUpdates"] = send_updates
        return await self._execute(self._get_service().events().update(**params))
