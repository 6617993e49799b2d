"""Root conftest — shared test configuration."""

import os

# Never pick up a real database or real secrets from the environment
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("PLATFORM_ADMIN_KEY", "test-admin-key")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("LOGOS_DIR", "nonexistent-logos-dir")
