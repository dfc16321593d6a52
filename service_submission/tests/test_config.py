"""
Unit tests for submission settings.
"""

import pytest

from shared.config import DEFAULT_API_URL, SubmissionConfig, get_config
from shared.errors import ConfigError


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep a developer .env or exported variables out of the tests."""
    monkeypatch.chdir(tmp_path)
    for name in ("API_URL", "REQUEST_LIMIT", "PERIOD_SECONDS", "HTTP_TIMEOUT_SECONDS", "LOG_LEVEL", "ENV"):
        monkeypatch.delenv(f"SUBMISSION_{name}", raising=False)


class TestSubmissionConfig:
    """Test cases for SubmissionConfig."""

    def test_defaults(self):
        config = get_config()

        assert config.api_url == DEFAULT_API_URL
        assert config.request_limit == 5
        assert config.period_seconds == 1.0
        assert config.http_timeout_seconds == 10.0
        assert config.log_level == "info"
        assert config.service_name == "submission"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("SUBMISSION_REQUEST_LIMIT", "20")
        monkeypatch.setenv("SUBMISSION_PERIOD_SECONDS", "60")
        monkeypatch.setenv("SUBMISSION_LOG_LEVEL", "DEBUG")

        config = get_config()

        assert config.request_limit == 20
        assert config.period_seconds == 60.0
        assert config.log_level == "debug"

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("SUBMISSION_API_URL=http://localhost:9000/create\n")

        assert get_config().api_url == "http://localhost:9000/create"

    def test_explicit_overrides_win(self, monkeypatch):
        monkeypatch.setenv("SUBMISSION_REQUEST_LIMIT", "20")

        config = get_config(request_limit=3, period_seconds=None)

        assert config.request_limit == 3
        assert config.period_seconds == 1.0

    @pytest.mark.parametrize("overrides", [
        {"request_limit": 0},
        {"period_seconds": 0},
        {"period_seconds": -1},
        {"http_timeout_seconds": 0},
        {"log_level": "verbose"},
    ])
    def test_invalid_values_raise_config_error(self, overrides):
        with pytest.raises(ConfigError) as exc_info:
            get_config(**overrides)

        assert exc_info.value.code == "CONFIG_ERROR"
        assert exc_info.value.details["errors"]

    def test_direct_construction(self):
        config = SubmissionConfig(request_limit=2)

        assert config.request_limit == 2
