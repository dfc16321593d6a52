"""
Tests for the demo entry point.
"""

import pytest

from service_submission.app import main as main_module


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SUBMISSION_API_URL", raising=False)
    monkeypatch.delenv("SUBMISSION_REQUEST_LIMIT", raising=False)
    monkeypatch.delenv("SUBMISSION_PERIOD_SECONDS", raising=False)


class TestMain:
    """Test cases for the command line demo."""

    def test_parse_args_defaults(self):
        args = main_module.parse_args([])

        assert args.signature == "signature123"
        assert args.count == 1
        assert args.dry_run is False
        assert args.limit is None

    def test_dry_run_succeeds(self):
        assert main_module.main(["--dry-run", "--count", "3", "--limit", "2", "--period", "0.05"]) == 0

    def test_failures_give_exit_code_one(self, monkeypatch):
        real_transport = main_module.StaticTransport

        def failing_transport(*args, **kwargs):
            return real_transport(status_code=500, body="bad request")

        monkeypatch.setattr(main_module, "StaticTransport", failing_transport)

        assert main_module.main(["--dry-run"]) == 1

    def test_invalid_limit_gives_exit_code_two(self, capsys):
        assert main_module.main(["--dry-run", "--limit", "0"]) == 2
        assert "Invalid configuration" in capsys.readouterr().err

    def test_metrics_port_starts_exporter(self, monkeypatch):
        ports = []
        monkeypatch.setattr(
            "shared.metrics.MetricsCollector.start_metrics_server",
            lambda self, port=9090: ports.append(port)
        )

        assert main_module.main(["--dry-run", "--metrics-port", "9109"]) == 0
        assert ports == [9109]
