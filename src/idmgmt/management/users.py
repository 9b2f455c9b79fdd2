"""
Users Manager

Client for the users endpoints of the management API: user records,
multifactor providers and linked identities.
"""

from __future__ import annotations

from numbers import Number
from typing import Any, Dict, Mapping, Optional

from idmgmt.exceptions import ArgumentError
from idmgmt.management.base import BaseManager, require_string
from idmgmt.utils import Callback, with_callback


class UsersManager(BaseManager):
    """
    Abstracts interaction with the users endpoint.

    Every method accepts an optional trailing callback. Without one it returns
    an awaitable; with one it returns None and calls ``callback(error, result)``.

    Example:
        >>> users = UsersManager({"base_url": "https://tenant/api/v2", "headers": headers})
        >>> user = await users.create({"connection": "Username-Password", "email": "a@b.c"})
        >>> await users.update_app_metadata({"id": user["user_id"]}, {"plan": "pro"})
    """

    def __init__(self, options: Any):
        """
        Args:
            options: ManagerOptions or a mapping with ``base_url`` and optional ``headers``
        """
        super().__init__(options)

        self.users = self._bind("/users/:id")

        # Multifactor providers enrolled for a user
        self.multifactor = self._bind("/users/:id/multifactor/:provider")

        # Secondary accounts linked to a user
        self.identities = self._bind("/users/:id/identities/:provider/:user_id")

    def create(self, data: Dict[str, Any], callback: Optional[Callback] = None):
        """
        Create a new user.

        Args:
            data: User data
            callback: Optional ``(error, user)`` callback
        """
        return self.users.create(*with_callback((data,), callback))

    def get_all(self, *args):
        """Get all users. Arguments are passed through as ``(query?, callback?)``."""
        return self.users.get_all(*args)

    def get(self, *args):
        """Get a user by id. Arguments are passed through as ``(params, callback?)``."""
        return self.users.get(*args)

    def update(self, *args):
        """Update a user by id. Arguments are passed through as ``(params, data, callback?)``."""
        return self.users.patch(*args)

    def update_user_metadata(
        self,
        params: Mapping[str, Any],
        metadata: Any,
        callback: Optional[Callback] = None,
    ):
        """Replace the user's ``user_metadata``."""
        data = {"user_metadata": metadata}
        return self.users.patch(*with_callback((params, data), callback))

    def update_app_metadata(
        self,
        params: Mapping[str, Any],
        metadata: Any,
        callback: Optional[Callback] = None,
    ):
        """Replace the user's ``app_metadata``."""
        data = {"app_metadata": metadata}
        return self.users.patch(*with_callback((params, data), callback))

    def delete(self, params: Mapping[str, Any], *args):
        """
        Delete a user by id.

        Args:
            params: Mapping holding the user ``id``
            *args: Optional callback

        Raises:
            ArgumentError: If no usable id is given
        """
        if not isinstance(params, Mapping) or not _is_valid_id(params.get("id")):
            raise ArgumentError("You must provide an id for the delete method")

        return self.users.delete(params, *args)

    def delete_all(self, callback: Callback):
        """
        Delete all users. Only the callback convention is supported.

        Raises:
            ArgumentError: If ``callback`` is not callable
        """
        if not callable(callback):
            raise ArgumentError("The delete_all method only accepts a callback as argument")

        return self.users.delete(callback)

    def delete_multifactor_provider(self, params: Optional[Mapping[str, Any]], callback: Optional[Callback] = None):
        """
        Remove a multifactor provider from a user.

        Args:
            params: Mapping with the user ``id`` and the ``provider`` name
            callback: Optional ``(error, result)`` callback

        Raises:
            ArgumentError: If the id or the provider is missing
        """
        params = params or {}

        require_string(params.get("id"), "The id parameter must be a valid user id")
        require_string(params.get("provider"), "Must specify a provider")

        return self.multifactor.delete(*with_callback((params,), callback))

    def link(self, user_id: str, params: Optional[Mapping[str, Any]] = None, callback: Optional[Callback] = None):
        """
        Link the user with another account.

        Args:
            user_id: Id of the primary user
            params: Link payload, e.g. ``{"provider": "google-oauth2", "user_id": "..."}``
            callback: Optional ``(error, identities)`` callback

        Raises:
            ArgumentError: If ``user_id`` is missing
        """
        require_string(user_id, "The user_id cannot be null or undefined")

        query = {"id": user_id}
        return self.identities.create(*with_callback((query, params or {}), callback))

    def unlink(self, params: Optional[Mapping[str, Any]], callback: Optional[Callback] = None):
        """
        Unlink a secondary account from a user.

        Args:
            params: Mapping with ``id``, ``provider`` and the secondary ``user_id``
            callback: Optional ``(error, identities)`` callback

        Raises:
            ArgumentError: If any of the three fields is missing
        """
        params = params or {}

        require_string(params.get("id"), "id field is required")
        require_string(params.get("user_id"), "user_id field is required")
        require_string(params.get("provider"), "provider field is required")

        return self.identities.delete(*with_callback((params,), callback))


def _is_valid_id(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, Number):
        return value == value  # NaN != NaN
    return isinstance(value, str) and len(value) > 0
