"""
Google Sheets Integration
Appends inspection rows to the destination sheet tab
"""
from __future__ import annotations

from typing import List, Optional

import gspread

from inspection_intake import config


def get_column_letter(col_num):
    """
    Convert column number to Excel-style column letter
    1 -> A, 26 -> Z, 27 -> AA, etc.

    Args:
        col_num: Column number (1-indexed)

    Returns:
        Column letter(s)
    """
    result = ""
    while col_num > 0:
        col_num -= 1
        result = chr(col_num % 26 + 65) + result
        col_num //= 26
    return result


def quote_sheet_name(sheet_name: str) -> str:
    """
    Quote a tab name for use in A1 notation.

    Line breaks are removed, single quotes doubled, and the result wrapped
    in single quotes so names with spaces or punctuation resolve.
    """
    cleaned = sheet_name.replace("\r", "").replace("\n", "").strip()
    return "'" + cleaned.replace("'", "''") + "'"


def build_append_range(sheet_name: str, column_count: int) -> str:
    """
    Build the append range for a tab, e.g. ("Inspection Log", 9) -> "'Inspection Log'!A:I".
    """
    return f"{quote_sheet_name(sheet_name)}!A:{get_column_letter(column_count)}"


def _get_client(intake_config: config.IntakeConfig):
    """Create a gspread client from the service account credentials."""
    creds = intake_config.service_account_credentials(config.SHEETS_SCOPES)
    return gspread.authorize(creds)


class InspectionSheet:
    """
    Tabular append gateway backed by Google Sheets.

    For tests, inject a fake gspread-like client via `client`, avoiding any
    real API calls.
    """

    def __init__(self, intake_config: Optional[config.IntakeConfig] = None, client: Optional[object] = None):
        if client is not None:
            self.client = client
        else:
            if intake_config is None:
                raise ValueError("intake_config is required when no Sheets client is given")
            self.client = _get_client(intake_config)

    def append_row(self, spreadsheet_id: str, range_spec: str, row: List) -> None:
        """
        Append a single row to range_spec.

        USER_ENTERED makes Sheets evaluate formula cells such as =HYPERLINK(...).
        Errors from gspread (gspread.exceptions.APIError) propagate.
        """
        spreadsheet = self.client.open_by_key(spreadsheet_id)
        spreadsheet.values_append(
            range_spec,
            params={
                "valueInputOption": "USER_ENTERED",
                "insertDataOption": "INSERT_ROWS",
            },
            body={"values": [list(row)]},
        )
