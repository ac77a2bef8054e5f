"""
Inspection Intake – Error Taxonomy
==================================

Every failure of a submission maps onto one of these classes so the API
layer can decide between a client error (400) and a server error (500),
and so operators can tell from the logs what was left behind.

- ValidationError     : bad input, nothing was touched
- StorageBackendError : Drive folder lookup/create failed, nothing stored
- UploadError         : photo file creation failed, no row appended
- AppendError         : sheet append failed, photo may already be stored
- ConfigurationError  : missing/invalid settings, fatal at startup
"""
from __future__ import annotations

from typing import Optional


class IntakeError(Exception):
    """Base class for all inspection intake failures."""


class ValidationError(IntakeError):
    """A required form field is missing or invalid."""


class StorageBackendError(IntakeError):
    """Folder lookup or creation in the storage backend failed."""


class UploadError(IntakeError):
    """The photo file could not be created in the storage backend."""


class AppendError(IntakeError):
    """
    The row append failed.

    If a photo was uploaded before the append, it is kept on the error so
    the orphaned file can be reported and reconciled by hand.
    """

    def __init__(self, message: str, uploaded_photo: Optional[object] = None):
        super().__init__(message)
        self.uploaded_photo = uploaded_photo


class ConfigurationError(IntakeError):
    """Required configuration is missing or invalid."""
