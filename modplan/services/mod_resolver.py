"""
模组解析服务

处理模组 ID/slug 解析、版本选择与依赖展开，返回安装计划。
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from loguru import logger

from modplan.models import (
    FileInfo,
    InstalledModRecord,
    ModProject,
    ModVersion,
    ProjectType,
    ResolvedDependencyNode,
)
from modplan.services.api_client import ModrinthClient
from modplan.services.dependency_resolver import (
    DependencyFailure,
    DependencyPlan,
    DependencyResolver,
)
from modplan.services.installed import InstalledIndex
from modplan.services.version_selector import SelectionResult, VersionSelector


@dataclass
class InstallPlan:
    """单个模组的安装计划"""

    project: ModProject
    selection: SelectionResult
    dependencies: DependencyPlan = field(default_factory=DependencyPlan)

    @property
    def version(self) -> Optional[ModVersion]:
        return self.selection.first()

    @property
    def file(self) -> Optional[FileInfo]:
        return self.version.primary_file if self.version else None

    @property
    def found(self) -> bool:
        """是否找到兼容版本"""
        return self.version is not None

    @property
    def failures(self) -> List[DependencyFailure]:
        return self.dependencies.failures

    def install_order(self, include_optional: bool = True) -> List[ResolvedDependencyNode]:
        return self.dependencies.install_order(include_optional)


class ModResolver:
    """模组解析器"""

    def __init__(
        self,
        client: ModrinthClient,
        installed: Optional[Iterable[InstalledModRecord]] = None,
        selector: Optional[VersionSelector] = None,
    ):
        self.client = client
        self.installed = InstalledIndex(installed)
        self.selector = selector or VersionSelector()
        self._cache: dict[str, ModProject] = {}

    async def get_project(self, mod_id: str) -> Optional[ModProject]:
        """获取项目信息（使用缓存）"""
        if mod_id in self._cache:
            return self._cache[mod_id]
        project = await self.client.get_project(mod_id)
        if project:
            for idx in {mod_id, *project.identifiers}:
                self._cache[idx] = project
        return project

    async def select_versions(
        self,
        project: ModProject,
        game_version: Optional[str],
        loader: Optional[str],
        project_type: Optional[ProjectType] = None,
    ) -> SelectionResult:
        """
        获取并评分项目的候选版本

        目录按游戏版本精确过滤后没有结果时，再取全部版本在本地评分，
        以便找到近似兼容的版本。
        """
        project_type = project_type or project.project_type
        if project_type not in (ProjectType.MOD, ProjectType.MODPACK):
            loader = None

        versions = await self.client.get_versions(project.id, game_version, loader)
        selection = self.selector.select(versions, game_version, loader, project_type)
        if selection.is_empty and game_version:
            logger.debug(f"'{project.title}' 没有精确匹配 {game_version} 的版本，尝试近似匹配")
            versions = await self.client.get_versions(project.id, None, loader)
            selection = self.selector.select(
                versions, game_version, loader, project_type
            )
        return selection

    async def fetch_compatible_version(
        self,
        project: ModProject,
        game_version: Optional[str],
        loader: Optional[str],
    ) -> Optional[ModVersion]:
        """依赖解析回调：选出项目的最佳兼容版本"""
        selection = await self.select_versions(project, game_version, loader)
        return selection.first()

    async def resolve(
        self,
        mod_id: str,
        game_version: Optional[str],
        loader: Optional[str],
        project_type: Optional[ProjectType] = None,
        with_dependencies: bool = True,
    ) -> Optional[InstallPlan]:
        """
        解析模组

        Args:
            mod_id: 模组 ID 或 slug
            game_version: Minecraft 版本
            loader: 模组加载器
            project_type: 项目类型，默认取项目自身的类型
            with_dependencies: 是否展开依赖

        Returns:
            InstallPlan；项目不存在时返回 None，没有兼容版本时 plan.found 为 False
        """
        if not mod_id:
            return None

        project = await self.get_project(mod_id)
        if not project:
            logger.warning(f"模组 {mod_id} 不存在")
            return None

        selection = await self.select_versions(
            project, game_version, loader, project_type
        )
        plan = InstallPlan(project=project, selection=selection)

        if not plan.found:
            logger.warning(f"'{project.title}' 没有兼容 {game_version}/{loader} 的版本")
            return plan

        if selection.show_fallback_notice:
            logger.info(f"'{project.title}' 只找到近似兼容的版本")

        if with_dependencies and plan.version.dependencies:
            resolver = DependencyResolver(
                self.get_project,
                self.fetch_compatible_version,
                self.installed.is_installed,
            )
            plan.dependencies = await resolver.resolve_plan(
                plan.version, game_version, loader, root_project=project
            )
        return plan
