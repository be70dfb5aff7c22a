"""
ModPlan 数据模型包

包含配置模型和 API 模型定义。
"""

from modplan.models.config import (
    ModLoader,
    ProjectType,
    Provider,
    MinecraftConfig,
    CatalogConfig,
    ResolveConfig,
)
from modplan.models.api import (
    VersionType,
    DependencyType,
    ModProject,
    FileInfo,
    DependencyInfo,
    ModVersion,
    InstalledModRecord,
    ResolvedDependencyNode,
)

__all__ = [
    # 配置模型
    "ModLoader",
    "ProjectType",
    "Provider",
    "MinecraftConfig",
    "CatalogConfig",
    "ResolveConfig",
    # API 模型
    "VersionType",
    "DependencyType",
    "ModProject",
    "FileInfo",
    "DependencyInfo",
    "ModVersion",
    "InstalledModRecord",
    "ResolvedDependencyNode",
]
