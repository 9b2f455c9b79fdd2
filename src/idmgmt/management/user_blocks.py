"""
User Blocks Manager

Reads and clears the blocks placed on users after repeated failed logins.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from idmgmt.management.base import BaseManager, require_string
from idmgmt.utils import Callback, with_callback


class UserBlocksManager(BaseManager):
    """
    Abstracts interaction with the user-blocks endpoints.

    Example:
        >>> blocks = UserBlocksManager({"base_url": "https://tenant/api/v2", "headers": headers})
        >>> await blocks.get({"id": "auth0|123"})
        >>> blocks.delete({"id": "auth0|123"}, lambda err, _: print(err or "unblocked"))
    """

    def __init__(self, options: Any):
        """
        Args:
            options: ManagerOptions or a mapping with ``base_url`` and optional ``headers``
        """
        super().__init__(options)
        self.resource = self._bind("/user-blocks/:id")
        self.identifier_resource = self._bind("/user-blocks")

    def get(self, params: Optional[Mapping[str, Any]] = None, callback: Optional[Callback] = None):
        """Get the blocks for a user. ``params`` holds the user ``id``."""
        return self.resource.get(*with_callback((params,), callback))

    def delete(self, params: Optional[Mapping[str, Any]] = None, callback: Optional[Callback] = None):
        """Remove the blocks for a user. ``params`` holds the user ``id``."""
        return self.resource.delete(*with_callback((params,), callback))

    def get_by_identifier(self, identifier: str, callback: Optional[Callback] = None):
        """
        Get the blocks for a user by identifier (username, phone number or email).

        Raises:
            ArgumentError: If the identifier is empty or not a string
        """
        require_string(identifier, "You must provide an identifier")
        return self.identifier_resource.get(*with_callback(({"identifier": identifier},), callback))

    def delete_by_identifier(self, identifier: str, callback: Optional[Callback] = None):
        """
        Remove the blocks for a user by identifier (username, phone number or email).

        Raises:
            ArgumentError: If the identifier is empty or not a string
        """
        require_string(identifier, "You must provide an identifier")
        return self.identifier_resource.delete(*with_callback(({"identifier": identifier},), callback))
