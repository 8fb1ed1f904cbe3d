#!/usr/bin/env python3
"""
Google Drive / Docs Client
==========================
Lists Drive folders and Google Docs and fetches document text over the
Drive v3 and Docs v1 REST APIs.

Authentication is an OAuth access token with the drive.readonly and
documents.readonly scopes, obtained by the browser client and forwarded
in the Authorization header, or configured server-side.
"""

import re
from typing import Any, Dict, List, Optional

import requests

from config_logging import AuthenticationError, DriveError, ValidationError, get_logger

__version__ = "1.0.0"

logger = get_logger('drive_client')

DRIVE_FILES_URL = 'https://www.googleapis.com/drive/v3/files'
DOCS_DOCUMENTS_URL = 'https://docs.googleapis.com/v1/documents'

FOLDER_MIME_TYPE = 'application/vnd.google-apps.folder'
DOCUMENT_MIME_TYPE = 'application/vnd.google-apps.document'

# Drive ids are URL-safe base64; anything else could break out of the query string
_ID_PATTERN = re.compile(r'^[A-Za-z0-9_-]+$')


def validate_drive_id(value: str, field: str = 'id') -> str:
    """Reject ids that are not plain Drive identifiers."""
    if not value or not _ID_PATTERN.match(value):
        raise ValidationError(f"Invalid Google Drive {field}", field=field)
    return value


def extract_text_from_document(document: Dict[str, Any]) -> str:
    """
    Concatenate the text runs of a Docs API document body.

    Each paragraph contributes its text runs followed by a newline; tables,
    section breaks and other structural elements are skipped.
    """
    parts: List[str] = []
    for element in (document.get('body') or {}).get('content') or []:
        paragraph = element.get('paragraph')
        if not paragraph:
            continue
        for para_element in paragraph.get('elements') or []:
            text_run = para_element.get('textRun')
            if text_run:
                parts.append(text_run.get('content', ''))
        parts.append('\n')
    return ''.join(parts).strip()


class DriveClient:
    """Thin wrapper over the Drive and Docs REST endpoints."""

    def __init__(self, access_token: str, timeout: float = 15,
                 session: Optional[requests.Session] = None):
        if not access_token:
            raise AuthenticationError("Google access token required")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'Authorization': f'Bearer {access_token}',
            'Accept': 'application/json',
            'User-Agent': 'Typopp/1.0 DriveClient',
        })

    def _get(self, url: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout:
            logger.warning("Google API request timed out", url=url)
            raise DriveError("Google API request timed out")
        except requests.exceptions.ConnectionError as e:
            logger.warning(f"Google API connection failed: {e}", url=url)
            raise DriveError("Could not connect to Google API")
        except requests.RequestException as e:
            logger.error(f"Google API request failed: {e}", url=url)
            raise DriveError(f"Google API request failed: {e}")

        if response.status_code in (401, 403):
            raise AuthenticationError(
                "Google rejected the access token",
                upstream_status=response.status_code,
            )
        if response.status_code == 404:
            raise DriveError("Google Drive item not found", upstream_status=404)
        if not response.ok:
            logger.error("Google API returned an error", url=url, status=response.status_code)
            raise DriveError("Google API returned an error", upstream_status=response.status_code)

        try:
            return response.json()
        except ValueError:
            raise DriveError("Google API returned invalid JSON", upstream_status=response.status_code)

    def list_folders(self) -> List[Dict[str, Any]]:
        """All non-trashed folders, ordered by name."""
        data = self._get(DRIVE_FILES_URL, params={
            'q': f"mimeType='{FOLDER_MIME_TYPE}' and trashed=false",
            'fields': 'files(id, name, parents)',
            'orderBy': 'name',
        })
        return data.get('files', [])

    def list_documents(self, folder_id: str) -> List[Dict[str, Any]]:
        """Google Docs directly inside a folder, most recently modified first."""
        validate_drive_id(folder_id, 'folder id')
        data = self._get(DRIVE_FILES_URL, params={
            'q': f"'{folder_id}' in parents and mimeType='{DOCUMENT_MIME_TYPE}' and trashed=false",
            'fields': 'files(id, name, createdTime, modifiedTime)',
            'orderBy': 'modifiedTime desc',
        })
        return data.get('files', [])

    def get_document(self, document_id: str) -> Dict[str, Any]:
        """Fetch a Google Doc as ``{id, title, content, lastModified}``."""
        validate_drive_id(document_id, 'document id')
        document = self._get(f"{DOCS_DOCUMENTS_URL}/{document_id}")
        return {
            'id': document_id,
            'title': document.get('title', ''),
            'content': extract_text_from_document(document),
            'lastModified': document.get('revisionId'),
        }
