#!/usr/bin/env python3
"""
Launcher script for the Inspection Intake API
Handles path setup and starts uvicorn
"""
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

import uvicorn

from inspection_intake import config
from inspection_intake.api.main import create_app


def main():
    app = create_app()
    print(f"[API] Inspection Intake API on http://{config.API_HOST}:{config.API_PORT} (Swagger: /docs)")
    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT, log_level="info")


if __name__ == "__main__":
    main()
