"""
Inspection Intake – Google Drive Gateway
========================================

Narrow wrapper around the Drive v3 API with exactly the calls the intake
workflow needs: list children, create a folder, create a file.

Guardrails:
- Every call passes supportsAllDrives=True; listings also pass
  includeItemsFromAllDrives=True, because the intake root may live in a
  Shared Drive.
- Never touches file permissions. Shared Drives reject per-file overrides
  of inherited permissions; sharing is configured on the folder/drive.
- Client errors (googleapiclient.errors.HttpError) propagate to the caller.
"""
from __future__ import annotations

from typing import BinaryIO, Dict, List, Optional

from googleapiclient.discovery import build
from googleapiclient.http import MediaIoBaseUpload

from inspection_intake import config

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"

# Resumable uploads stream the file in chunks of this size
UPLOAD_CHUNK_SIZE = 5 * 1024 * 1024


def _get_drive_service(intake_config: config.IntakeConfig):
    """Create a Google Drive API service using service account credentials."""
    creds = intake_config.service_account_credentials(config.DRIVE_SCOPES)
    return build("drive", "v3", credentials=creds, cache_discovery=False)


def _quote_query_value(value: str) -> str:
    """Escape a string literal for the Drive search query language."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def file_view_link(file_id: str) -> str:
    """Deterministic browser link for a Drive file."""
    return f"https://drive.google.com/file/d/{file_id}/view"


class DriveGateway:
    """
    Object storage gateway backed by Google Drive.

    For tests, pass a fake `service` to avoid building a real client.
    """

    def __init__(self, intake_config: Optional[config.IntakeConfig] = None, service: Optional[object] = None):
        if service is not None:
            self.service = service
        else:
            if intake_config is None:
                raise ValueError("intake_config is required when no Drive service is given")
            self.service = _get_drive_service(intake_config)

    def list_children(self, parent_id: str, name: str, mime_type: str) -> List[Dict]:
        """Return [{id, name}] for non-trashed children of parent_id matching name and type."""
        query = (
            f"'{_quote_query_value(parent_id)}' in parents"
            f" and mimeType = '{_quote_query_value(mime_type)}'"
            f" and name = '{_quote_query_value(name)}'"
            " and trashed = false"
        )
        response = self.service.files().list(
            q=query,
            fields="files(id, name)",
            spaces="drive",
            supportsAllDrives=True,
            includeItemsFromAllDrives=True,
        ).execute()
        return response.get("files", [])

    def create_folder(self, parent_id: str, name: str) -> Optional[str]:
        metadata = {
            "name": name,
            "mimeType": FOLDER_MIME_TYPE,
            "parents": [parent_id],
        }
        created = self.service.files().create(
            body=metadata,
            fields="id",
            supportsAllDrives=True,
        ).execute()
        return created.get("id")

    def create_file(self, parent_id: str, name: str, mime_type: str, stream: BinaryIO) -> Dict:
        """
        Stream a binary payload into a new file.

        Only the id and the web view link are requested back.
        """
        media = MediaIoBaseUpload(
            stream,
            mimetype=mime_type,
            chunksize=UPLOAD_CHUNK_SIZE,
            resumable=True,
        )
        metadata = {
            "name": name,
            "parents": [parent_id],
        }
        return self.service.files().create(
            body=metadata,
            media_body=media,
            fields="id, webViewLink",
            supportsAllDrives=True,
        ).execute()
