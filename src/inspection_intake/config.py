"""
Configuration module for the Inspection Intake service
Environment-agnostic: Works locally, in Docker, and on Google Cloud Run
Loads environment variables and validates configuration
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from google.oauth2 import service_account

from inspection_intake.errors import ConfigurationError

# Project root (parent of src/)
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# Load environment variables from .env file (if exists - local dev only)
env_file = PROJECT_ROOT / '.env'
if env_file.exists():
    load_dotenv(env_file)

# ═══════════════════════════════════════════════════════════════════
# ENVIRONMENT DETECTION
# ═══════════════════════════════════════════════════════════════════

def detect_environment() -> str:
    """
    Detect which environment we're running in

    Returns:
        'cloud_run', 'kubernetes', 'docker', or 'local'
    """
    # Cloud Run sets K_SERVICE
    if os.getenv('K_SERVICE'):
        return 'cloud_run'

    # Kubernetes sets KUBERNETES_SERVICE_HOST
    if os.getenv('KUBERNETES_SERVICE_HOST'):
        return 'kubernetes'

    # Docker typically has /.dockerenv file
    if Path('/.dockerenv').exists():
        return 'docker'

    return 'local'

RUNTIME_ENVIRONMENT = detect_environment()

# ═══════════════════════════════════════════════════════════════════
# SERVER & LOGGING
# ═══════════════════════════════════════════════════════════════════

API_HOST = os.getenv('API_HOST', '0.0.0.0')
API_PORT = int(os.getenv('API_PORT', '8000'))

# Cloud Run injects PORT; it wins over API_PORT
_cloud_run_port = os.getenv('PORT')
if _cloud_run_port:
    API_PORT = int(_cloud_run_port)

API_CORS_ORIGINS = os.getenv('API_CORS_ORIGINS', 'http://localhost:3000').split(',')

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_DIR = os.getenv('LOG_DIR', str(PROJECT_ROOT / 'logs'))

# ═══════════════════════════════════════════════════════════════════
# GOOGLE APIS
# ═══════════════════════════════════════════════════════════════════

GOOGLE_TOKEN_URI = 'https://oauth2.googleapis.com/token'
DRIVE_SCOPES = ['https://www.googleapis.com/auth/drive']
SHEETS_SCOPES = ['https://www.googleapis.com/auth/spreadsheets']

# ═══════════════════════════════════════════════════════════════════
# SUBMISSION POLICIES
# One choice per deployment: the sheet's column count and any downstream
# automation depend on these.
# ═══════════════════════════════════════════════════════════════════

FOLDER_LAYOUT_PER_STORE = 'per_store'
FOLDER_LAYOUT_FLAT = 'flat'
FOLDER_LAYOUTS = (FOLDER_LAYOUT_PER_STORE, FOLDER_LAYOUT_FLAT)

ROW_LAYOUT_EXTENDED = 'extended'
ROW_LAYOUT_BASIC = 'basic'
ROW_LAYOUTS = (ROW_LAYOUT_EXTENDED, ROW_LAYOUT_BASIC)

PHOTO_CELL_HYPERLINK = 'hyperlink'
PHOTO_CELL_LINK = 'link'
PHOTO_CELL_STYLES = (PHOTO_CELL_HYPERLINK, PHOTO_CELL_LINK)

# Inspection Sheet column mapping (A-I). The basic layout uses A-F only.
INSPECTION_COLUMNS = [
    'Store Name',
    'Store Address',
    'Item Type',
    'Level',
    'Notes',
    'Photo',
    'Internal Brand',
    'Internal Measurement',
    'Internal Notes',
]
BASIC_COLUMN_COUNT = 6


def unescape_private_key(key: str) -> str:
    """Turn literal backslash-n sequences (as stored in env vars) into newlines."""
    return key.replace('\\n', '\n').strip()


def _flag(value: Optional[str], default: bool) -> bool:
    if value is None or value.strip() == '':
        return default
    return value.strip().lower() == 'true'


@dataclass(frozen=True)
class IntakeConfig:
    """Settings for one running service, built once at startup."""
    intake_folder_id: str
    spreadsheet_id: str
    sheet_name: str
    service_account_email: str = ''
    service_account_key: str = ''
    service_account_file: Optional[str] = None
    folder_layout: str = FOLDER_LAYOUT_PER_STORE
    row_layout: str = ROW_LAYOUT_EXTENDED
    photo_cell_style: str = PHOTO_CELL_HYPERLINK
    return_photo_url: bool = True
    enforce_item_catalog: bool = True

    @property
    def column_count(self) -> int:
        if self.row_layout == ROW_LAYOUT_BASIC:
            return BASIC_COLUMN_COUNT
        return len(INSPECTION_COLUMNS)

    @property
    def per_store_folders(self) -> bool:
        return self.folder_layout == FOLDER_LAYOUT_PER_STORE

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'IntakeConfig':
        """
        Build the configuration from environment variables.

        Collects every problem before failing so a misconfigured deployment
        is fixed in one pass.

        Raises:
            ConfigurationError: if a required value is missing or a policy
                value is not recognised.
        """
        env = os.environ if environ is None else environ
        errors: List[str] = []

        def get(name: str, default: str = '') -> str:
            return (env.get(name) or default).strip()

        intake_folder_id = get('DRIVE_INTAKE_FOLDER_ID')
        spreadsheet_id = get('SPREADSHEET_ID')
        # Line breaks sneak in when the value is pasted into a secret manager
        sheet_name = get('SHEET_NAME').replace('\r', '').replace('\n', '')

        if not intake_folder_id:
            errors.append('DRIVE_INTAKE_FOLDER_ID is not set')
        if not spreadsheet_id:
            errors.append('SPREADSHEET_ID is not set')
        if not sheet_name:
            errors.append('SHEET_NAME is not set')

        email = get('GOOGLE_SERVICE_ACCOUNT_EMAIL')
        key = unescape_private_key(env.get('GOOGLE_SERVICE_ACCOUNT_KEY') or '')
        creds_file = get('GOOGLE_SERVICE_ACCOUNT_FILE') or None

        if creds_file:
            # Handle relative paths
            if not os.path.isabs(creds_file):
                creds_file = str(PROJECT_ROOT / creds_file)
            if not os.path.exists(creds_file):
                errors.append(f'Service account key file not found: {creds_file}')
        elif not (email and key):
            if not email:
                errors.append('GOOGLE_SERVICE_ACCOUNT_EMAIL is not set')
            if not key:
                errors.append('GOOGLE_SERVICE_ACCOUNT_KEY is not set')

        folder_layout = get('INSPECTION_FOLDER_LAYOUT', FOLDER_LAYOUT_PER_STORE).lower()
        if folder_layout not in FOLDER_LAYOUTS:
            errors.append(f'INSPECTION_FOLDER_LAYOUT must be one of {", ".join(FOLDER_LAYOUTS)}')

        row_layout = get('INSPECTION_ROW_LAYOUT', ROW_LAYOUT_EXTENDED).lower()
        if row_layout not in ROW_LAYOUTS:
            errors.append(f'INSPECTION_ROW_LAYOUT must be one of {", ".join(ROW_LAYOUTS)}')

        photo_cell_style = get('INSPECTION_PHOTO_CELL', PHOTO_CELL_HYPERLINK).lower()
        if photo_cell_style not in PHOTO_CELL_STYLES:
            errors.append(f'INSPECTION_PHOTO_CELL must be one of {", ".join(PHOTO_CELL_STYLES)}')

        if errors:
            raise ConfigurationError('Configuration errors:\n' + '\n'.join(errors))

        return cls(
            intake_folder_id=intake_folder_id,
            spreadsheet_id=spreadsheet_id,
            sheet_name=sheet_name,
            service_account_email=email,
            service_account_key=key,
            service_account_file=creds_file,
            folder_layout=folder_layout,
            row_layout=row_layout,
            photo_cell_style=photo_cell_style,
            return_photo_url=_flag(env.get('INSPECTION_RETURN_PHOTO_URL'), True),
            enforce_item_catalog=_flag(env.get('ENFORCE_ITEM_CATALOG'), True),
        )

    def service_account_credentials(self, scopes: List[str]) -> service_account.Credentials:
        """Build scoped service account credentials from the key file or the email/key pair."""
        if self.service_account_file:
            print(f"[CONFIG] Using credentials file: {self.service_account_file}")
            return service_account.Credentials.from_service_account_file(
                self.service_account_file, scopes=scopes
            )
        info = {
            'type': 'service_account',
            'client_email': self.service_account_email,
            'private_key': self.service_account_key,
            'token_uri': GOOGLE_TOKEN_URI,
        }
        return service_account.Credentials.from_service_account_info(info, scopes=scopes)
