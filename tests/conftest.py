# tests/conftest.py
import os

# Must be set before foodprint.core.config is imported anywhere.
os.environ.setdefault("DB_USE_SQLITE", "true")
os.environ.setdefault("SQLITE_PATH", ":memory:")
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.setdefault("WALLET_EMAIL_DOMAIN", "foodprint")
