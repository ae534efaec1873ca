"""Pytest configuration shared by every test package."""

import os

# Settings are read once at import time; pin the values tests rely on.
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("CURRENT_ACADEMIC_YEAR", "2024-2025")
os.environ.setdefault("LOG_LEVEL", "WARNING")
