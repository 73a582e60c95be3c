"""
Topic submission ("Themen einreichen").

Students propose a topic for the next SV-Stunde. Each submission is appended
as a small text block to the end of a shared Google Docs document via the
Docs REST API, signed with a Google service account:

    GET  {base}/{document_id}               -> find the end index
    POST {base}/{document_id}:batchUpdate   -> insertText before the last newline

Request payload (as sent by the web form):

    {"name": "...", "thema": "...",
     "nextStunde": {"date": "...", "dateString": "19.01", "fs": "3.FS"}}
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo

import requests
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

from svarchiv.config import Settings, get_settings
from svarchiv.model import SVStunde, TopicSubmission

logger = logging.getLogger(__name__)

SEPARATOR = "─" * 60

DOCS_SCOPES = [
    "https://www.googleapis.com/auth/documents",
    "https://www.googleapis.com/auth/drive.file",
]

UNAVAILABLE_MESSAGE = "Die Themeneingabe ist momentan nicht verfügbar. Bitte kontaktiere die Administratoren."


class TopicError(Exception):
    pass


class TopicValidationError(TopicError):
    """The submitted payload is incomplete."""


class TopicServiceUnavailable(TopicError):
    """Document id or service account credentials are missing or invalid."""


class TopicSubmissionError(TopicError):
    """The Docs API call failed."""


# ---------------------------------------------------------------------------
# Validation & formatting
# ---------------------------------------------------------------------------


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def validate_submission(payload: Dict[str, Any]) -> TopicSubmission:
    """
    Check a submission payload and turn it into a TopicSubmission.
    """
    name = _text(payload.get("name"))
    if not name:
        raise TopicValidationError("Name is required")

    thema = _text(payload.get("thema"))
    if not thema:
        raise TopicValidationError("Thema is required")

    stunde = payload.get("nextStunde")
    if not isinstance(stunde, dict) or not _text(stunde.get("dateString")) or not _text(stunde.get("fs")):
        raise TopicValidationError("Next SV-Stunde information is required")

    return TopicSubmission(
        name=name,
        thema=thema,
        date_label=_text(stunde.get("dateString")),
        fs=_text(stunde.get("fs")),
        stunde_start=_text(stunde.get("date")) or None,
    )


def submission_payload(name: str, thema: str, stunde: SVStunde) -> Dict[str, Any]:
    """
    Build the request payload for a topic aimed at the given SV-Stunde.
    """
    return {
        "name": name,
        "thema": thema,
        "nextStunde": {
            "date": stunde.start.isoformat(),
            "dateString": stunde.date_label,
            "fs": stunde.fs,
        },
    }


def format_submission_text(submission: TopicSubmission, submitted_at: datetime) -> str:
    return (
        f"\n\nSV-Stunde: {submission.date_label} ({submission.fs})"
        f"\nEingereicht von: {submission.name}"
        f"\nThema: {submission.thema}"
        f"\nZeitpunkt: {submitted_at:%d.%m.%Y, %H:%M}"
        f"\n{SEPARATOR}"
    )


# ---------------------------------------------------------------------------
# Google Docs client
# ---------------------------------------------------------------------------


def authorized_session(settings: Settings) -> AuthorizedSession:
    """
    requests session signed with the service account credentials.

    Credentials come from GOOGLE_SERVICE_ACCOUNT_JSON (the key as JSON text)
    or, if that is unset, from the key file GOOGLE_SERVICE_ACCOUNT_FILE.
    Access tokens are refreshed by the session itself.
    """
    try:
        if settings.google_service_account_json:
            info = json.loads(settings.google_service_account_json)
            credentials = service_account.Credentials.from_service_account_info(info, scopes=DOCS_SCOPES)
        elif settings.google_service_account_file:
            credentials = service_account.Credentials.from_service_account_file(
                str(settings.google_service_account_file), scopes=DOCS_SCOPES
            )
        else:
            raise TopicServiceUnavailable(UNAVAILABLE_MESSAGE)
    except (OSError, ValueError) as exc:
        # json.JSONDecodeError is a ValueError, so is a malformed key
        logger.error("Invalid Google service account credentials: %s", exc)
        raise TopicServiceUnavailable(UNAVAILABLE_MESSAGE) from exc

    return AuthorizedSession(credentials)


class ThemenDocClient:
    """
    Minimal Google Docs API client for appending text to one document.

    session must add authorization itself (see authorized_session).
    """

    def __init__(
        self,
        document_id: str,
        session: requests.Session,
        base_url: str,
        timeout: float = 30,
    ) -> None:
        self.document_id = document_id
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def document_url(self) -> str:
        return f"{self.base_url}/{self.document_id}"

    def end_index(self) -> int:
        """
        Index after the last structural element of the document body.
        """
        resp = self.session.get(self.document_url, timeout=self.timeout)
        resp.raise_for_status()

        content = (resp.json().get("body") or {}).get("content") or []
        if not content:
            raise TopicSubmissionError("Document has no content")

        end_index = content[-1].get("endIndex")
        if not end_index:
            raise TopicSubmissionError("Could not determine document end index")

        return int(end_index)

    def append_text(self, text: str) -> None:
        # Insert before the trailing newline every document ends with
        index = self.end_index() - 1
        body = {"requests": [{"insertText": {"location": {"index": index}, "text": text}}]}

        resp = self.session.post(f"{self.document_url}:batchUpdate", json=body, timeout=self.timeout)
        resp.raise_for_status()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def submit_topic(
    payload: Dict[str, Any],
    settings: Optional[Settings] = None,
    client: Optional[ThemenDocClient] = None,
    now: Optional[datetime] = None,
) -> TopicSubmission:
    """
    Validate a submission and append it to the topics document.
    """
    settings = settings or get_settings()
    submission = validate_submission(payload)

    if client is None:
        if not settings.topics_configured():
            logger.error(
                "Google Docs API not configured (THEMEN_DOC_ID: %s, service account: %s)",
                "SET" if settings.themen_doc_id else "MISSING",
                "SET" if settings.service_account_configured() else "MISSING",
            )
            raise TopicServiceUnavailable(UNAVAILABLE_MESSAGE)
        client = ThemenDocClient(
            document_id=str(settings.themen_doc_id),
            session=authorized_session(settings),
            base_url=settings.docs_api_url,
        )

    submitted_at = now if now is not None else datetime.now(ZoneInfo(settings.timezone))
    text = format_submission_text(submission, submitted_at)

    try:
        client.append_text(text)
    except (requests.RequestException, GoogleAuthError) as exc:
        logger.error("Error submitting topic: %s", exc)
        raise TopicSubmissionError(
            "Fehler beim Einreichen des Themas. Bitte versuche es später erneut."
        ) from exc

    logger.info("Topic submitted for SV-Stunde %s (%s)", submission.date_label, submission.fs)
    return submission
