"""
Inspection Intake – Submission Service
======================================

Orchestrates one inspection submission:

1. Validate: trim fields, parse level, reject bad input before any I/O.
2. Photo:    if a non-empty photo was sent, store it in Drive.
3. Append:   format the row and append it to the inspection sheet.

Failure policy:
- A failed photo upload aborts the submission; no row is written without
  its photo.
- A failed append after a successful upload leaves the photo in Drive with
  no row. This is not rolled back; it is raised as AppendError carrying the
  photo and logged as an orphaned upload for manual reconciliation.
- Nothing is retried.
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional

from inspection_intake import config
from inspection_intake.errors import AppendError, ValidationError
from inspection_intake.models import (
    ITEM_TYPES,
    InspectionSubmission,
    PhotoPayload,
    SubmissionResult,
)
from inspection_intake.photo_storage import PhotoUploader, current_epoch_millis
from inspection_intake.row_formatter import format_row
from inspection_intake.sheets.inspection_sheet import build_append_range
from inspection_intake.utils.logger import get_logger


def _text(fields: Mapping, name: str) -> str:
    value = fields.get(name)
    if value is None:
        return ""
    return str(value).strip()


def parse_level(raw) -> Optional[int]:
    """Parse a level value; None unless it is a finite whole number > 0."""
    text = str(raw if raw is not None else "").strip()
    # int() and Decimal() both accept "1_000"; a form value never should
    if not text or "_" in text:
        return None
    try:
        value = int(text)
    except ValueError:
        # "2.0"-style input; Decimal keeps large values exact. No exponents.
        if "e" in text.lower():
            return None
        try:
            decimal_value = Decimal(text)
        except InvalidOperation:
            return None
        if not decimal_value.is_finite() or decimal_value != decimal_value.to_integral_value():
            return None
        value = int(decimal_value)
    return value if value > 0 else None


def validate_submission(
    fields: Mapping,
    photo: Optional[PhotoPayload] = None,
    enforce_item_catalog: bool = True,
) -> InspectionSubmission:
    """
    Build an InspectionSubmission from raw form fields.

    Field names are the form's: storeName, storeAddress, itemType, level,
    notes. An empty photo is dropped.

    Raises:
        ValidationError: storeName or itemType missing, itemType not in the
            catalog (when enforced), or level not a positive whole number.
    """
    store_name = _text(fields, "storeName")
    item_type = _text(fields, "itemType")
    level = parse_level(fields.get("level"))

    missing = []
    if not store_name:
        missing.append("storeName")
    if not item_type:
        missing.append("itemType")
    if level is None and not _text(fields, "level"):
        missing.append("level")
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    if level is None:
        raise ValidationError("level must be a whole number greater than 0")
    if enforce_item_catalog and item_type not in ITEM_TYPES:
        raise ValidationError(f"Unknown item type: {item_type}")

    if photo is not None and photo.is_empty:
        photo = None

    return InspectionSubmission(
        store_name=store_name,
        store_address=_text(fields, "storeAddress"),
        item_type=item_type,
        level=level,
        notes=_text(fields, "notes"),
        photo=photo,
    )


class SubmissionService:
    """
    The only entry point callers use to record an inspection.

    Holds the immutable config and the two gateways; keeps no per-request
    state, so one instance serves concurrent requests.
    """

    def __init__(self, intake_config: config.IntakeConfig, drive_gateway, sheet_gateway, clock=current_epoch_millis, logger=None):
        self.config = intake_config
        self.sheet_gateway = sheet_gateway
        self.uploader = PhotoUploader(
            drive_gateway,
            per_store_folders=intake_config.per_store_folders,
            clock=clock,
        )
        self.append_range = build_append_range(intake_config.sheet_name, intake_config.column_count)
        self.logger = logger or get_logger()

    def submit(self, fields: Mapping, photo: Optional[PhotoPayload] = None) -> SubmissionResult:
        """
        Validate, store the photo (if any) and append the row.

        Raises:
            ValidationError: bad input; nothing was stored.
            StorageBackendError / UploadError: photo could not be stored; no row.
            AppendError: row append failed; `uploaded_photo` is set if a photo
                was already stored.
        """
        try:
            submission = validate_submission(
                fields, photo, enforce_item_catalog=self.config.enforce_item_catalog
            )
        except ValidationError as e:
            self.logger.log_submission_rejected(str(e))
            raise

        self.logger.log_submission_start(
            submission.store_name, submission.item_type, submission.photo is not None
        )

        uploaded = None
        if submission.photo is not None:
            uploaded = self.uploader.upload(
                submission.photo, submission.store_name, self.config.intake_folder_id
            )
            self.logger.log_photo_stored(
                submission.store_name, uploaded.file_id, uploaded.display_file_name
            )

        row = format_row(
            submission,
            uploaded,
            row_layout=self.config.row_layout,
            photo_cell_style=self.config.photo_cell_style,
        )

        try:
            self.sheet_gateway.append_row(self.config.spreadsheet_id, self.append_range, row)
        except Exception as e:
            if uploaded is not None:
                self.logger.log_orphaned_upload(
                    submission.store_name,
                    uploaded.file_id,
                    uploaded.display_file_name,
                    uploaded.view_link,
                )
            raise AppendError(f"Failed to append row to {self.append_range}: {e}", uploaded_photo=uploaded) from e

        self.logger.log_row_appended(submission.store_name, self.append_range, len(row))
        return SubmissionResult(row=row, photo=uploaded)
