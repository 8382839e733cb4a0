"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database or print fault details by accident
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)
os.environ.setdefault("ENVIRONMENT", "production")
os.environ.setdefault("LOG_FORMAT", "text")
