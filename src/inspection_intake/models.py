"""
Inspection Intake Data Models
Dataclasses passed between the API route, the submission service and the
storage/sheet gateways.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Final, List, Optional


# Item categories offered by the inspection form. Order matches the form.
ITEM_TYPES: Final[List[str]] = [
    "Display Case Gasket",
    "Under Counter Gasket",
    "Upright Gasket",
    "Walk In Gasket",
    "Hold Open",
    "Bumper",
    "Electrical Cover",
    "Torque Rod",
    "Torque Master",
    "Door Hinge",
    "Door Sweep",
    "Replacement Door",
]

DEFAULT_PHOTO_MIME_TYPE: Final[str] = "image/jpeg"
DEFAULT_PHOTO_EXTENSION: Final[str] = "jpg"


@dataclass(frozen=True)
class PhotoPayload:
    """An uploaded photo as received from the form, not yet stored."""
    filename: str
    content_type: str
    stream: BinaryIO
    size: int

    @property
    def is_empty(self) -> bool:
        return self.size <= 0


@dataclass(frozen=True)
class InspectionSubmission:
    """A validated inspection record."""
    store_name: str
    item_type: str
    level: int
    store_address: str = ""
    notes: str = ""
    photo: Optional[PhotoPayload] = None


@dataclass(frozen=True)
class UploadedPhoto:
    """Reference to a photo stored in Drive for the duration of one request."""
    file_id: str
    display_file_name: str
    view_link: str


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a successful submission."""
    row: List[object]
    photo: Optional[UploadedPhoto] = None

    @property
    def photo_url(self) -> Optional[str]:
        return self.photo.view_link if self.photo else None
