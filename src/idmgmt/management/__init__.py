"""
Managers for the management API.
"""

from idmgmt.management.base import BaseManager
from idmgmt.management.client import ManagementClient
from idmgmt.management.user_blocks import UserBlocksManager
from idmgmt.management.users import UsersManager

__all__ = [
    "BaseManager",
    "ManagementClient",
    "UserBlocksManager",
    "UsersManager",
]
