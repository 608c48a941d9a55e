"""
Observability module: console/audit logging and run metrics.

- Every step message goes to two sinks: the console (stdout) and the
  audit log (system log, JSON via python-json-logger)
- Run metrics in a dedicated Prometheus registry, exported to a
  node-exporter textfile on demand
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import re
import sys
from pathlib import Path

from prometheus_client import CollectorRegistry, Counter, Histogram, write_to_textfile
from pythonjsonlogger.json import JsonFormatter

from provisioner.config.models import LoggingConfig
from provisioner.config.settings import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)

# Dedicated audit logger, written to the system log
audit_logger = logging.getLogger("audit")
audit_logger.setLevel(logging.INFO)
audit_logger.propagate = False

# =============================================================================
# Prometheus Metrics
# =============================================================================

REGISTRY = CollectorRegistry()

RUN_DURATION = Histogram(
    "guac_provisioner_run_duration_seconds",
    "Duration of a provisioning run",
    buckets=(10, 30, 60, 120, 300, 600, 1200),
    registry=REGISTRY,
)

COMMAND_RETRIES = Counter(
    "guac_provisioner_command_retries_total",
    "Number of failed attempts of retried host commands",
    registry=REGISTRY,
)

STEP_FAILURES = Counter(
    "guac_provisioner_step_failures_total",
    "Number of failed provisioning steps",
    ["step"],
    registry=REGISTRY,
)

CONTAINERS_STARTED = Counter(
    "guac_provisioner_containers_started_total",
    "Number of containers started",
    ["container"],
    registry=REGISTRY,
)


def write_metrics(path: Path) -> None:
    """Write the run metrics in the Prometheus textfile format."""
    path.parent.mkdir(parents=True, exist_ok=True)
    write_to_textfile(str(path), REGISTRY)


# =============================================================================
# Logging
# =============================================================================

class SensitiveDataFilter(logging.Filter):
    """Filter to mask sensitive data in log messages."""

    SENSITIVE_PATTERNS = [
        (re.compile(r'password["\']?\s*[:=]\s*["\']?[^"\'}\s]+', re.I), 'password=***'),
        (re.compile(r'token["\']?\s*[:=]\s*["\']?[^"\'}\s]+', re.I), 'token=***'),
        (re.compile(r'secret["\']?\s*[:=]\s*["\']?[^"\'}\s]+', re.I), 'secret=***'),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            for pattern, replacement in self.SENSITIVE_PATTERNS:
                record.msg = pattern.sub(replacement, record.msg)
        return True


def _json_formatter() -> JsonFormatter:
    return JsonFormatter(
        fmt="%(timestamp)s %(name)s %(levelname)s %(message)s",
        rename_fields={"levelname": "level", "asctime": "timestamp"},
        timestamp=True,
    )


def _audit_handler(address: str) -> logging.Handler:
    """
    Build the system log handler.

    Falls back to stderr when the syslog socket is missing (containers,
    CI runners) or the syslog host cannot be reached.
    """
    if address.startswith("/"):
        if not os.path.exists(address):
            return logging.StreamHandler(sys.stderr)
        target: str | tuple[str, int] = address
    else:
        host, _, port = address.partition(":")
        target = (host, int(port or 514))

    try:
        handler: logging.Handler = logging.handlers.SysLogHandler(address=target)
    except OSError as e:
        logger.warning(f"System log unavailable at {address}, auditing to stderr: {e}")
        return logging.StreamHandler(sys.stderr)
    handler.ident = f"{LOGGER_NAME}: "
    return handler


def setup_logging(config: LoggingConfig | None = None) -> None:
    """
    Configure the console and audit sinks.

    The console handler writes to stdout, as plain ``name: message`` lines
    or JSON when ``format`` is ``json``. The audit logger always emits JSON.
    """
    config = config or LoggingConfig()

    console = logging.StreamHandler(sys.stdout)
    if config.format == "json":
        console.setFormatter(_json_formatter())
    else:
        console.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root.setLevel(config.level.upper())

    audit = _audit_handler(config.audit_address)
    audit.setFormatter(_json_formatter())
    audit_logger.handlers.clear()
    audit_logger.addHandler(audit)

    for log in (logger, audit_logger):
        if not any(isinstance(f, SensitiveDataFilter) for f in log.filters):
            log.addFilter(SensitiveDataFilter())


def log_step(message: str, level: int = logging.INFO) -> None:
    """Log a message to both the console and the audit log."""
    logger.log(level, message)
    audit_logger.log(level, message)
