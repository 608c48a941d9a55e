"""
Tests for provisioner.resilience (retry wrapper).
"""

from unittest.mock import MagicMock, call

import pytest

from provisioner.observability import COMMAND_RETRIES
from provisioner.resilience import retry


class TestRetry:

    def test_success_first_attempt(self):
        """First attempt succeeds → one call, no delay."""
        runner = MagicMock(return_value=0)
        sleep = MagicMock()

        assert retry(3, ["yum", "-y", "install", "docker"], runner=runner, sleep=sleep) == 0

        runner.assert_called_once_with(["yum", "-y", "install", "docker"], check=False)
        sleep.assert_called_once_with(0)

    def test_fails_twice_then_succeeds(self):
        """2 failures then success → 3 calls with delays 0, 1, 2."""
        runner = MagicMock(side_effect=[1, 1, 0])
        sleep = MagicMock()

        assert retry(3, ["flaky"], runner=runner, sleep=sleep) == 0

        assert runner.call_count == 3
        assert sleep.call_args_list == [call(0), call(1), call(2)]
        assert sum(c.args[0] for c in sleep.call_args_list) == 3

    def test_all_attempts_fail(self):
        """Returns the status of the last attempt."""
        runner = MagicMock(side_effect=[1, 100])
        sleep = MagicMock()

        assert retry(2, ["broken"], runner=runner, sleep=sleep) == 100
        assert runner.call_count == 2

    def test_failures_counted(self):
        before = COMMAND_RETRIES._value.get()
        retry(3, ["flaky"], runner=MagicMock(side_effect=[1, 0]), sleep=MagicMock())
        assert COMMAND_RETRIES._value.get() == before + 1

    def test_failed_attempts_logged(self, caplog):
        with caplog.at_level("INFO", logger="guac-provisioner"):
            retry(2, ["flaky", "cmd"], runner=MagicMock(side_effect=[1, 0]), sleep=MagicMock())
        assert "Will try 2 time(s) :: flaky cmd" in caplog.text
        assert "Attempt 1, command failed :: flaky cmd" in caplog.text

    @pytest.mark.parametrize("attempts", [0, -1])
    def test_needs_one_attempt(self, attempts):
        runner = MagicMock()
        with pytest.raises(ValueError):
            retry(attempts, ["cmd"], runner=runner, sleep=MagicMock())
        runner.assert_not_called()

    def test_default_runner_does_not_raise(self, mocker):
        """The default runner is called with check=False, so failures are returned."""
        run = mocker.patch("provisioner.domain.host.run_command", return_value=3)
        assert retry(1, ["cmd"], sleep=MagicMock()) == 3
        run.assert_called_once_with(["cmd"], check=False)
