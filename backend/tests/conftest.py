"""Root conftest — shared test configuration."""

import os

# Tests sign and verify their own tokens; never use a real secret or database
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("LOG_FORMAT", "text")
