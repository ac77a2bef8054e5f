"""
Inspection Intake
Accepts store inspection submissions, files any photo in Google Drive and
appends the record to the inspection Google Sheet.
"""

__version__ = "1.0.0"
