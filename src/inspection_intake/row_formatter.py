"""
Row formatter: maps a validated submission onto the inspection sheet columns.

    A Store Name | B Store Address | C Item Type | D Level | E Notes | F Photo
    G Internal Brand | H Internal Measurement | I Internal Notes   (extended only)

G-I are left empty here; downstream sheet automation fills them.

Rows are appended with USER_ENTERED so the photo formula evaluates. Typed
text goes through literal_text() so Sheets stores it verbatim instead of
evaluating it as a formula or reparsing it as a number or date.
"""
from __future__ import annotations

import re
from typing import List, Optional

from inspection_intake import config
from inspection_intake.models import InspectionSubmission, UploadedPhoto

# Leading characters that make Sheets read typed text as a formula
FORMULA_PREFIXES = ("=", "+", "-", "@")

# Text Sheets would reparse as a number, date or time, e.g. "3-4", "12/5", "10:30"
_NUMBER_OR_DATE_LIKE = re.compile(r"^[\d\s.,/:-]+$")


def literal_text(value: str) -> str:
    """
    Prefix an apostrophe so Sheets keeps user text as plain text.

    The apostrophe is not displayed in the cell. Text that already starts
    with one gets a second so the original survives.
    """
    if not value:
        return value
    if value.startswith(FORMULA_PREFIXES) or value.startswith("'") or _NUMBER_OR_DATE_LIKE.match(value):
        return "'" + value
    return value


def escape_formula_string(value: str) -> str:
    """Escape a value for a Sheets formula string literal ("" stands for ")."""
    return value.replace('"', '""')


def hyperlink_formula(link: str, label: str) -> str:
    """
    Clickable cell that shows `label` and opens `link`.

    Quotes in the link are percent-encoded, quotes in the label doubled.
    """
    safe_link = link.replace('"', "%22")
    return f'=HYPERLINK("{safe_link}","{escape_formula_string(label)}")'


def photo_cell(photo: Optional[UploadedPhoto], style: str = config.PHOTO_CELL_HYPERLINK) -> str:
    if photo is None:
        return ""
    if style == config.PHOTO_CELL_LINK:
        return photo.view_link
    return hyperlink_formula(photo.view_link, photo.display_file_name)


def format_row(
    submission: InspectionSubmission,
    photo: Optional[UploadedPhoto] = None,
    row_layout: str = config.ROW_LAYOUT_EXTENDED,
    photo_cell_style: str = config.PHOTO_CELL_HYPERLINK,
) -> List:
    row = [
        literal_text(submission.store_name),
        literal_text(submission.store_address),
        literal_text(submission.item_type),
        submission.level,
        literal_text(submission.notes),
        photo_cell(photo, photo_cell_style),
    ]
    if row_layout == config.ROW_LAYOUT_EXTENDED:
        reserved = len(config.INSPECTION_COLUMNS) - len(row)
        row.extend([""] * reserved)
    return row
