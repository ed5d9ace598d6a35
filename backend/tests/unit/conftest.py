"""Unit test conftest for setting up test environment."""

import os
import tempfile

# Set minimal required environment variables before importing any sessionpurge modules
# This keeps Settings deterministic during test collection
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_USER", "test_user")
os.environ.setdefault("POSTGRES_PASSWORD", "test_password")
os.environ.setdefault("POSTGRES_DB", "test_db")
os.environ.setdefault("STORAGE_PATH", os.path.join(tempfile.gettempdir(), "sessionpurge-tests"))
os.environ.setdefault("RESEND_API_KEY", "re_test_key")
