"""
Manager Configuration

Connection settings shared by every resource binding a manager creates.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import httpx

from idmgmt.exceptions import ArgumentError


DEFAULT_TIMEOUT = 30.0


def env_transport_settings() -> Dict[str, Any]:
    """Read the request timeout and SSL verification from the environment."""
    return {
        "timeout": float(os.getenv("IDMGMT_TIMEOUT", str(DEFAULT_TIMEOUT))),
        "verify_ssl": os.getenv("IDMGMT_VERIFY_SSL", "true").lower() == "true",
    }


@dataclass
class ManagerOptions:
    """Options for a management API manager."""

    base_url: Optional[str] = None  # e.g. "https://tenant.example.com/api/v2"
    headers: Optional[Mapping[str, str]] = field(default_factory=dict)  # Sent with every request
    timeout: float = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    transport: Optional[httpx.AsyncBaseTransport] = None  # Custom httpx transport (tests, proxies)

    @classmethod
    def from_env(cls) -> "ManagerOptions":
        """Create ManagerOptions from environment variables."""
        headers = {}
        if token := os.getenv("IDMGMT_API_TOKEN"):
            headers["Authorization"] = f"Bearer {token}"

        return cls(
            base_url=os.getenv("IDMGMT_BASE_URL"),
            headers=headers,
            **env_transport_settings(),
        )

    @classmethod
    def coerce(cls, options: Any) -> "ManagerOptions":
        """
        Build validated options from a ManagerOptions instance or a mapping.

        Mappings may use either ``base_url`` or ``baseUrl``.

        Raises:
            ArgumentError: If the options, the base URL or the headers are missing or invalid
        """
        if isinstance(options, cls):
            options.validate()
            return options

        if not isinstance(options, Mapping):
            raise ArgumentError("Must provide manager options")

        resolved = cls(
            base_url=options.get("base_url", options.get("baseUrl")),
            headers=options.get("headers"),
            timeout=options.get("timeout", DEFAULT_TIMEOUT),
            verify_ssl=options.get("verify_ssl", True),
            transport=options.get("transport"),
        )
        resolved.validate()
        resolved.headers = dict(resolved.headers or {})
        return resolved

    def validate(self) -> None:
        """Check the base URL and headers. Raises ArgumentError when either is unusable."""
        if self.base_url is None:
            raise ArgumentError("Must provide a base URL for the API")

        if not isinstance(self.base_url, str) or len(self.base_url) == 0:
            raise ArgumentError("The provided base URL is invalid")

        if self.headers is not None and not isinstance(self.headers, Mapping):
            raise ArgumentError("The provided headers are invalid")

    def url_for(self, path: str) -> str:
        """Join a resource path onto the base URL."""
        return self.base_url.rstrip("/") + path
