"""
Retry wrapper for flaky host commands (package repository mirrors).
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Sequence

from provisioner.config.settings import LOGGER_NAME
from provisioner.observability import COMMAND_RETRIES, log_step

logger = logging.getLogger(LOGGER_NAME)

Runner = Callable[..., int]


def retry(
    attempts: int,
    command: Sequence[str],
    runner: Runner | None = None,
    sleep: Callable[[float], None] | None = None,
) -> int:
    """
    Run *command* up to *attempts* times, stopping on the first success.

    Before each attempt the wrapper waits as many seconds as there were
    failed attempts so far (0, 1, 2, ...). The runner is called with
    ``check=False`` so a failing attempt does not abort the run; the
    caller decides what to do with the final status.

    Args:
        attempts: Maximum number of attempts
        command: Command line to execute
        runner: Callable ``runner(command, check=...) -> int``
        sleep: Delay function, time.sleep by default

    Returns:
        Exit status of the last attempt

    Raises:
        ValueError: If attempts is lower than 1
    """
    if attempts < 1:
        raise ValueError("retry needs at least one attempt")
    sleep = sleep or time.sleep
    if runner is None:
        from provisioner.domain.host import run_command

        runner = run_command

    cmd = " ".join(command)
    log_step(f"Will try {attempts} time(s) :: {cmd}")

    failures = 0
    result = 1
    while failures < attempts:
        sleep(failures)
        result = runner(command, check=False)
        if result == 0:
            break
        failures += 1
        COMMAND_RETRIES.inc()
        log_step(f"Attempt {failures}, command failed :: {cmd}", logging.WARNING)

    return result
