"""
Shared construction logic for management API managers.
"""

from __future__ import annotations

import logging
from typing import Any

from idmgmt.config import ManagerOptions
from idmgmt.exceptions import ArgumentError
from idmgmt.rest import RestClient

logger = logging.getLogger(__name__)


class BaseManager:
    """
    Base class for managers.

    Validates the options once and hands out resource bindings that share
    the configured headers and transport settings. List query values are
    always sent comma-joined rather than as repeated keys.
    """

    def __init__(self, options: Any):
        self.options = ManagerOptions.coerce(options)

    def _bind(self, path: str) -> RestClient:
        client = RestClient(
            self.options.url_for(path),
            headers=self.options.headers or {},
            repeat_params=False,
            timeout=self.options.timeout,
            verify_ssl=self.options.verify_ssl,
            transport=self.options.transport,
        )
        logger.debug(f"{type(self).__name__} bound resource {client.url_template}")
        return client


def require_string(value: Any, message: str) -> str:
    """Return ``value`` if it is a non-empty string, otherwise raise ArgumentError."""
    if not value or not isinstance(value, str):
        raise ArgumentError(message)
    return value
