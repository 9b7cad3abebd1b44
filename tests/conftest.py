"""Pytest configuration: ensure env vars and import path are set early.

This runs before any tests, so modules can import without local path hacks.
Also load .env before setting defaults so local overrides are honoured.
"""
from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Ensure repository root is on sys.path for local package imports
sys.path.append(str(Path(__file__).resolve().parents[1]))

load_dotenv(override=False)

# Keep tests off the network and off the origin check unless a test opts in.
os.environ.setdefault("STATUS_SOURCE_URL", "https://status.invalid/")
os.environ.setdefault("TRAIN_TRAFFIC_LOG_LEVEL", "debug")
os.environ.pop("SKILL_APPLICATION_ID", None)
