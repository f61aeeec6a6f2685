"""
agmaint.settings
================

Configuration for the CLI and web app. Every value can be overridden with
an environment variable.
"""

import os
from pathlib import Path

# Project root (the directory holding maint.py)
BASE_DIR = Path(__file__).resolve().parent.parent

# Data files
# ---------------------------------------------------------------------------
DATA_DIR = Path(os.environ.get("AGMAINT_DATA_DIR", BASE_DIR / "data"))
FARM_FILE = Path(os.environ.get("AGMAINT_FARM_FILE", DATA_DIR / "farm.yaml"))

# Web settings
# ---------------------------------------------------------------------------
SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")
HOST = os.environ.get("AGMAINT_HOST", "0.0.0.0")
# 5001 avoids the macOS AirPlay Receiver on 5000
PORT = int(os.environ.get("AGMAINT_PORT", "5001"))
DEBUG = os.environ.get("AGMAINT_DEBUG", "False").lower() == "true"

# Display settings
# ---------------------------------------------------------------------------
LOG_LEVEL = os.environ.get("AGMAINT_LOG_LEVEL", "WARNING").upper()
SCHEDULE_WINDOW_DAYS = int(os.environ.get("AGMAINT_SCHEDULE_WINDOW_DAYS", "14"))
