"""
ModPlan

Minecraft 模组版本选择与依赖安装计划。
"""

from modplan.logger import logger, setup_logger
from modplan.models import (
    ModProject,
    ModVersion,
    InstalledModRecord,
    ResolvedDependencyNode,
)
from modplan.services import (
    ModrinthClient,
    ModResolver,
    DependencyResolver,
    VersionSelector,
)

__version__ = "0.2.0"

__all__ = [
    "logger",
    "setup_logger",
    "ModProject",
    "ModVersion",
    "InstalledModRecord",
    "ResolvedDependencyNode",
    "ModrinthClient",
    "ModResolver",
    "DependencyResolver",
    "VersionSelector",
    "__version__",
]
