"""
Shared test fixtures.
"""
import pytest

from invest_stream.config.settings import Settings

from tests.fixtures.streams import fake_connector


@pytest.fixture
def test_settings():
    """Settings independent of the environment."""
    return Settings(
        invest_token="test-token",
        invest_app_name="test-app",
        invest_api_host="api.test",
        invest_sandbox_host="sandbox.test",
        invest_connect_timeout=1.0,
        invest_request_timeout=1.0,
        _env_file=None,
    )
