"""Tests for the process entry point."""

import os
import threading
from unittest.mock import MagicMock, patch

import pytest

from zte_sms_notice import main as main_module
from zte_sms_notice.config import (
    AppConfig,
    BarkConfig,
    NotificationConfig,
    RouterConfig,
    SchedulerConfig,
)
from zte_sms_notice.exceptions import AuthenticationError, TransportError


def _config():
    return AppConfig(
        router=RouterConfig(base_url="http://192.168.0.1", password="secret", page_size=25, mem_store=1),
        bark=BarkConfig(keys=["KEY"], sound="bell"),
        scheduler=SchedulerConfig(interval_seconds=1),
        notification=NotificationConfig(title_template="From {number}"),
    )


@pytest.fixture
def router_client():
    with patch.object(main_module, "RouterClient") as client_cls:
        client = MagicMock()
        client.base_url = "http://192.168.0.1"
        client_cls.return_value = client
        yield client


class TestRun:

    def test_once_runs_single_cycle_and_logs_out(self, router_client):
        with patch.object(main_module, "run_cycle") as run_cycle:
            code = main_module.run(_config(), once=True)

        assert code == 0
        router_client.login.assert_called_once_with("secret")
        run_cycle.assert_called_once()
        kwargs = run_cycle.call_args[1]
        assert kwargs["page_size"] == 25
        assert kwargs["mem_store"] == 1
        assert kwargs["title_template"] == "From {number}"
        router_client.logout.assert_called_once()

    def test_login_failure_exits_with_1(self, router_client):
        router_client.login.side_effect = AuthenticationError("rejected", code=1)

        with patch.object(main_module, "run_cycle") as run_cycle:
            assert main_module.run(_config(), once=True) == 1

        run_cycle.assert_not_called()

    def test_logout_failure_is_not_raised(self, router_client):
        router_client.logout.side_effect = TransportError("down")

        with patch.object(main_module, "run_cycle"):
            assert main_module.run(_config(), once=True) == 0

    def test_stopped_loop_still_logs_out(self, router_client):
        stop = threading.Event()
        stop.set()

        with patch.object(main_module, "run_cycle") as run_cycle:
            assert main_module.run(_config(), stop_event=stop) == 0

        run_cycle.assert_not_called()
        router_client.logout.assert_called_once()

    def test_loop_runs_until_stopped(self, router_client):
        stop = threading.Event()

        with patch.object(main_module, "run_cycle", side_effect=lambda *a, **k: stop.set()) as run_cycle:
            main_module.run(_config(), stop_event=stop)

        assert run_cycle.call_count == 1
        router_client.logout.assert_called_once()


class TestMain:

    def test_missing_config_exits_1(self):
        with patch.dict(os.environ, {}, clear=True), \
                patch("sys.argv", ["zte-sms-notice"]):
            with pytest.raises(SystemExit) as excinfo:
                main_module.main()

        assert excinfo.value.code == 1

    def test_unknown_title_placeholder_exits_1(self):
        env = {"ZTE_PASSWORD": "x", "BARK_KEYS": "k", "TITLE_TEMPLATE": "SMS {sender}"}

        with patch.dict(os.environ, env, clear=True), \
                patch("sys.argv", ["zte-sms-notice"]), \
                patch.object(main_module, "run") as run:
            with pytest.raises(SystemExit) as excinfo:
                main_module.main()

        assert excinfo.value.code == 1
        run.assert_not_called()

    def test_flags_override_environment(self):
        env = {"ZTE_PASSWORD": "from-env", "BARK_KEYS": "env-key"}
        argv = ["zte-sms-notice", "-p", "from-flag", "-b", "a,b", "-s", "bell",
                "--url", "http://10.0.0.1", "-i", "9", "--once"]

        with patch.dict(os.environ, env, clear=True), \
                patch("sys.argv", argv), \
                patch.object(main_module, "run", return_value=0) as run:
            with pytest.raises(SystemExit) as excinfo:
                main_module.main()

        assert excinfo.value.code == 0
        config = run.call_args[0][0]
        assert run.call_args[1]["once"] is True
        assert config.router.password == "from-flag"
        assert config.router.base_url == "http://10.0.0.1"
        assert config.bark.keys == ["a", "b"]
        assert config.bark.sound == "bell"
        assert config.scheduler.interval_seconds == 9
