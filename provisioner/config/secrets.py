"""
Secrets lookup in AWS Systems Manager Parameter Store.
"""

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from provisioner.config.settings import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


class ParameterStore:
    """
    Reads SecureString/String parameters from SSM Parameter Store.

    Lookups are best-effort: a parameter that does not exist, or any AWS
    error, yields ``None`` instead of raising, so callers can skip the
    feature that needed the secret.
    """

    def __init__(self, region: str | None = None, client: Any = None) -> None:
        self.region = region
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            if self.region:
                self._client = boto3.client("ssm", region_name=self.region)
            else:
                self._client = boto3.client("ssm")
        return self._client

    def get(self, path: str) -> str | None:
        """
        Retrieve a decrypted parameter value.

        Args:
            path: Full parameter name, e.g. ``/guacamole/docker/username``

        Returns:
            Parameter value, or None if missing or unreadable
        """
        try:
            resp = self.client.get_parameters(Names=[path], WithDecryption=True)
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"Unable to read SSM parameter {path}: {e}")
            return None

        if path in resp.get("InvalidParameters", []):
            logger.warning(f"SSM parameter not found: {path}")
            return None

        parameters = resp.get("Parameters", [])
        if not parameters:
            return None
        return parameters[0].get("Value")
