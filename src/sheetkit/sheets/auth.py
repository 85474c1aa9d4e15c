"""Credential loading for the Sheets API."""

import logging

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from ..config import Settings

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def load_service_account_credentials(settings: Settings) -> service_account.Credentials:
    """Load service account credentials, delegated to the configured subject."""
    creds = service_account.Credentials.from_service_account_file(
        str(settings.google_service_account_path), scopes=SCOPES
    )
    if settings.google_subject:
        creds = creds.with_subject(settings.google_subject)
    return creds


def load_user_credentials(settings: Settings) -> Credentials:
    """Get or refresh OAuth2 user credentials."""
    creds = None

    if settings.google_token_path.exists():
        creds = Credentials.from_authorized_user_file(str(settings.google_token_path), SCOPES)

    if not creds or not creds.valid:
        refreshed = False
        if creds and creds.expired and creds.refresh_token:
            logger.info("Refreshing expired Google token")
            try:
                creds.refresh(Request())
                refreshed = True
            except RefreshError as e:
                logger.warning(f"Stored Google token could not be refreshed, authorizing again: {e}")
        if not refreshed:
            if not settings.google_credentials_path.exists():
                raise FileNotFoundError(
                    f"Google credentials file not found at {settings.google_credentials_path}. "
                    "Please download it from Google Cloud Console."
                )
            flow = InstalledAppFlow.from_client_secrets_file(
                str(settings.google_credentials_path), SCOPES
            )
            creds = flow.run_local_server(port=0)

        settings.google_token_path.parent.mkdir(parents=True, exist_ok=True)
        with open(settings.google_token_path, "w") as token:
            token.write(creds.to_json())

    return creds


def load_credentials(settings: Settings):
    """Load credentials for the configured authentication mode."""
    if settings.google_service_account_path is not None:
        return load_service_account_credentials(settings)
    return load_user_credentials(settings)
