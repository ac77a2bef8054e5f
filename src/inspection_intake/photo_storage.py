"""
Inspection Intake – Photo Storage
=================================

Places inspection photos in Drive:

1. StoreFolderLocator finds (or creates) the per-store folder under the
   intake root.
2. PhotoUploader names the photo "<Store> - <epoch millis>.<ext>" and
   streams it into the destination folder.

Known limitation: folder resolution is lookup-then-create with no lock.
Two first-ever submissions for the same store arriving together can each
create a folder, leaving duplicates with the same name. Later lookups pick
the first match, so this only splits photos between the two folders.
"""
from __future__ import annotations

import re
import time
from typing import Callable

from inspection_intake.drive_gateway import FOLDER_MIME_TYPE, file_view_link
from inspection_intake.errors import StorageBackendError, UploadError
from inspection_intake.models import (
    DEFAULT_PHOTO_EXTENSION,
    DEFAULT_PHOTO_MIME_TYPE,
    PhotoPayload,
    UploadedPhoto,
)
from inspection_intake.name_sanitizer import sanitize_store_name


def current_epoch_millis() -> int:
    return int(time.time() * 1000)


def photo_extension(filename: str) -> str:
    """Lower-cased extension of filename, or "jpg" when it has none."""
    # Some browsers send the full client path, with either separator
    name = re.split(r"[\\/]", filename or "")[-1]
    if "." not in name:
        return DEFAULT_PHOTO_EXTENSION
    ext = "".join(ch for ch in name.rsplit(".", 1)[1] if ch.isalnum()).lower()
    return ext or DEFAULT_PHOTO_EXTENSION


def build_photo_file_name(store_name: str, epoch_millis: int, filename: str) -> str:
    return f"{sanitize_store_name(store_name)} - {epoch_millis}.{photo_extension(filename)}"


class StoreFolderLocator:
    """Find-or-create the folder that holds one store's photos."""

    def __init__(self, gateway):
        self.gateway = gateway

    def resolve_store_folder(self, root_folder_id: str, store_name: str) -> str:
        """
        Return the id of the folder named after the sanitized store name
        directly under root_folder_id, creating it on first use.

        Raises:
            StorageBackendError: lookup or creation failed, or creation
                returned no id.
        """
        folder_name = sanitize_store_name(store_name)

        try:
            matches = self.gateway.list_children(root_folder_id, folder_name, FOLDER_MIME_TYPE)
        except Exception as e:
            raise StorageBackendError(f"Folder lookup failed for '{folder_name}': {e}") from e

        for match in matches or []:
            if match.get("id"):
                return match["id"]

        try:
            folder_id = self.gateway.create_folder(root_folder_id, folder_name)
        except Exception as e:
            raise StorageBackendError(f"Folder creation failed for '{folder_name}': {e}") from e

        if not folder_id:
            raise StorageBackendError(f"Folder creation for '{folder_name}' returned no id")
        return folder_id


class PhotoUploader:
    """
    Streams inspection photos into Drive.

    Args:
        gateway: DriveGateway (or a fake with the same methods).
        per_store_folders: upload into a per-store subfolder when True,
            directly into the intake root when False.
        clock: returns the current epoch time in milliseconds.
    """

    def __init__(
        self,
        gateway,
        per_store_folders: bool = True,
        clock: Callable[[], int] = current_epoch_millis,
    ):
        self.gateway = gateway
        self.locator = StoreFolderLocator(gateway)
        self.per_store_folders = per_store_folders
        self.clock = clock

    def upload(self, photo: PhotoPayload, store_name: str, intake_root_id: str) -> UploadedPhoto:
        """
        Store the photo and return its id, display name and view link.

        Raises:
            StorageBackendError: from the folder locator, unchanged.
            UploadError: the file could not be created.
        """
        if self.per_store_folders:
            parent_id = self.locator.resolve_store_folder(intake_root_id, store_name)
        else:
            parent_id = intake_root_id

        file_name = build_photo_file_name(store_name, self.clock(), photo.filename)
        mime_type = photo.content_type or DEFAULT_PHOTO_MIME_TYPE

        try:
            created = self.gateway.create_file(parent_id, file_name, mime_type, photo.stream)
        except Exception as e:
            raise UploadError(f"Photo upload failed for '{file_name}': {e}") from e

        file_id = (created or {}).get("id")
        if not file_id:
            raise UploadError(f"Photo upload for '{file_name}' returned no file id")

        link = created.get("webViewLink") or file_view_link(file_id)
        return UploadedPhoto(file_id=file_id, display_file_name=file_name, view_link=link)
