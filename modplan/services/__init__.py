"""
ModPlan 服务层

包含业务逻辑服务：API 客户端、版本评分与选择、版本标签清理、依赖处理。
"""

from modplan.services.api_client import ModrinthClient
from modplan.services.version_selector import VersionSelector, SelectionResult
from modplan.services.dependency_resolver import (
    DependencyResolver,
    DependencyPlan,
    DependencyFailure,
    install_order,
)
from modplan.services.installed import (
    InstalledIndex,
    find_installed_project,
    find_installed_version,
)
from modplan.services.mod_resolver import ModResolver, InstallPlan

__all__ = [
    "ModrinthClient",
    "VersionSelector",
    "SelectionResult",
    "DependencyResolver",
    "DependencyPlan",
    "DependencyFailure",
    "install_order",
    "InstalledIndex",
    "find_installed_project",
    "find_installed_version",
    "ModResolver",
    "InstallPlan",
]
