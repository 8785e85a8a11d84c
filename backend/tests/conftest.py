"""Root conftest: shared test configuration."""

import os

# Tests never reach a real store
os.environ.setdefault("REDIS_HOST", "localhost")
os.environ.setdefault("DB_PORT", "6379")
os.environ.setdefault("LOG_FORMAT", "text")
