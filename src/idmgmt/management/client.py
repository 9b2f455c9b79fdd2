"""
Management API Client

Entry point that builds the shared manager options from a tenant domain and
an API token.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, Optional

import httpx

from idmgmt.config import DEFAULT_TIMEOUT, ManagerOptions, env_transport_settings
from idmgmt.exceptions import ArgumentError
from idmgmt.management.base import require_string
from idmgmt.management.user_blocks import UserBlocksManager
from idmgmt.management.users import UsersManager

logger = logging.getLogger(__name__)

API_PATH = "/api/v2"


class ManagementClient:
    """
    Management API client.

    Example:
        >>> client = ManagementClient("tenant.example.com", token)
        >>> users = await client.users.get_all({"q": "email:*@example.com"})
        >>> await client.user_blocks.delete({"id": users[0]["user_id"]})
    """

    def __init__(
        self,
        domain: str,
        token: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the management client.

        Args:
            domain: Tenant domain, e.g. "tenant.example.com". A scheme may be included.
            token: Management API access token
            headers: Extra headers merged over the defaults
            timeout: Request timeout in seconds
            verify_ssl: Whether to verify SSL certificates
            transport: Optional httpx transport used instead of the network

        Raises:
            ArgumentError: If the domain or token is missing
        """
        require_string(domain, "Must provide a domain")
        require_string(token, "An access token must be provided")

        self.domain = domain.rstrip("/")
        base = self.domain if "://" in self.domain else f"https://{self.domain}"

        self.options = ManagerOptions(
            base_url=f"{base}{API_PATH}",
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
                **(headers or {}),
            },
            timeout=timeout,
            verify_ssl=verify_ssl,
            transport=transport,
        )

        self.users = UsersManager(self.options)
        self.user_blocks = UserBlocksManager(self.options)

        logger.info(f"Management client initialized: {self.options.base_url}")

    @classmethod
    def from_env(cls) -> "ManagementClient":
        """Create a client from IDMGMT_DOMAIN and IDMGMT_API_TOKEN."""
        domain = os.getenv("IDMGMT_DOMAIN")
        token = os.getenv("IDMGMT_API_TOKEN")
        if not domain:
            raise ArgumentError("IDMGMT_DOMAIN is not set")
        if not token:
            raise ArgumentError("IDMGMT_API_TOKEN is not set")

        return cls(domain, token, **env_transport_settings())
