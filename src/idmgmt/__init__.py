"""
idmgmt - Identity Management API Client

Managers for a multi-tenant identity-management REST API.

Modules:
- rest: Templated resource client over httpx
- management: Users and user-blocks managers, plus the ManagementClient facade
- config: Manager options
- exceptions: ArgumentError and ManagementAPIError
"""

__version__ = "0.1.0"

from idmgmt.config import ManagerOptions
from idmgmt.exceptions import (
    ArgumentError,
    ManagementAPIError,
    ManagementError,
)
from idmgmt.rest import RestClient
from idmgmt.management import (
    ManagementClient,
    UserBlocksManager,
    UsersManager,
)

__all__ = [
    # Version
    "__version__",
    # Config
    "ManagerOptions",
    # Errors
    "ArgumentError",
    "ManagementAPIError",
    "ManagementError",
    # Resources
    "RestClient",
    # Managers
    "ManagementClient",
    "UserBlocksManager",
    "UsersManager",
]
