"""
Test Configuration

Environment variables are set before any eventia import, because settings
and the loguru sinks are configured at import time.

Architecture:
- Unit tests run against in-memory fakes (see service/registration/conftest.py)
- Redis is replaced by mocked async clients
- Integration tests (service/registration/integration/) use a real Postgres
  and are skipped when it is not reachable
"""

import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['POSTGRES_DB'] = 'eventia_test_db'
    os.environ['CACHE_BACKEND'] = 'memory'
    os.environ['REDIS_KEY_PREFIX'] = 'test_'
    os.environ.setdefault('DB_POOL_SIZE', '2')
    os.environ.setdefault('DB_POOL_MAX_OVERFLOW', '2')


# Call immediately to set env vars before any imports
_early_setup_test_environment()

import pytest  # noqa: E402

from eventia.platform.config.core_setting import Settings  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    return Settings()
