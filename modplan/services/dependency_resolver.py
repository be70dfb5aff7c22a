"""
依赖处理服务

将一个版本声明的依赖展开为去重后的安装计划：
依赖去重、循环依赖检测、optional -> required 的类型升级。
"""

import inspect
from dataclasses import dataclass, field
from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    Optional,
)

from loguru import logger

from modplan.exceptions import (
    APINotFoundError,
    DependencyFetchError,
    ModPlanError,
    ResolutionError,
)
from modplan.models import (
    DependencyInfo,
    DependencyType,
    InstalledModRecord,
    ModProject,
    ModVersion,
    ResolvedDependencyNode,
)

# 回调既可以是普通函数也可以是协程函数
FetchProject = Callable[[str], Any]
FetchCompatibleVersion = Callable[[ModProject, Optional[str], Optional[str]], Any]
IsInstalled = Callable[[ModProject], Any]


async def _call(func, *args):
    result = func(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


@dataclass
class DependencyFailure:
    """单个依赖分支的失败记录"""

    project_id: str
    error: ModPlanError

    @property
    def reason(self) -> str:
        return self.error.message

    @property
    def code(self) -> str:
        return self.error.code

    def to_dict(self) -> Dict[str, Any]:
        return self.error.to_dict()


@dataclass
class DependencyPlan:
    """依赖解析结果"""

    nodes: List[ResolvedDependencyNode] = field(default_factory=list)
    failures: List[DependencyFailure] = field(default_factory=list)

    @property
    def required(self) -> List[ResolvedDependencyNode]:
        return [node for node in self.nodes if node.required]

    @property
    def optional(self) -> List[ResolvedDependencyNode]:
        return [node for node in self.nodes if not node.required]

    @property
    def has_new_dependencies(self) -> bool:
        return any(not node.already_installed for node in self.nodes)

    def install_order(self, include_optional: bool = True) -> List[ResolvedDependencyNode]:
        nodes = self.nodes if include_optional else self.required
        return install_order(nodes)


def install_order(nodes: List[ResolvedDependencyNode]) -> List[ResolvedDependencyNode]:
    """未安装的节点，最深的依赖先装（同深度保持发现顺序）"""
    pending = [node for node in nodes if not node.already_installed]
    return sorted(pending, key=lambda node: -node.depth)


@dataclass
class _Frame:
    dependencies: Iterator[DependencyInfo]
    parent: DependencyType
    depth: int


@dataclass
class _Resolution:
    """一次 resolve() 独占的状态，不跨调用复用"""

    visited: Dict[str, DependencyType] = field(default_factory=dict)
    # 同一项目的其他标识 -> 首次登记时使用的标识
    aliases: Dict[str, str] = field(default_factory=dict)
    nodes: Dict[str, ResolvedDependencyNode] = field(default_factory=dict)
    failures: List[DependencyFailure] = field(default_factory=list)
    stack: List[_Frame] = field(default_factory=list)


class DependencyResolver:
    """依赖解析器"""

    def __init__(
        self,
        fetch_project: FetchProject,
        fetch_compatible_version: FetchCompatibleVersion,
        is_installed: Optional[IsInstalled] = None,
    ):
        self.fetch_project = fetch_project
        self.fetch_compatible_version = fetch_compatible_version
        self.is_installed = is_installed

    async def resolve(
        self,
        root_version: ModVersion,
        game_version: Optional[str] = None,
        loader: Optional[str] = None,
        root_project: Optional[ModProject] = None,
    ) -> List[ResolvedDependencyNode]:
        """
        解析依赖

        Args:
            root_version: 要安装的版本
            game_version: Minecraft 版本
            loader: 模组加载器
            root_project: 要安装的项目，其 id / slug 会预先标记为已访问

        Returns:
            依赖节点列表（按发现顺序）
        """
        plan = await self.resolve_plan(root_version, game_version, loader, root_project)
        return plan.nodes

    async def resolve_plan(
        self,
        root_version: ModVersion,
        game_version: Optional[str] = None,
        loader: Optional[str] = None,
        root_project: Optional[ModProject] = None,
    ) -> DependencyPlan:
        """解析依赖，同时返回失败的分支"""
        state = _Resolution()

        # 预先登记根项目，防止依赖图把它自己再加回来
        root_ids = [root_version.project_id]
        if root_project is not None:
            root_ids.extend(root_project.identifiers)
        for idx in root_ids:
            if idx:
                state.visited[idx] = DependencyType.REQUIRED

        state.stack.append(
            _Frame(iter(root_version.dependencies), DependencyType.REQUIRED, 1)
        )

        while state.stack:
            frame = state.stack[-1]
            dep = next(frame.dependencies, None)
            if dep is None:
                state.stack.pop()
                continue
            child = await self._visit(state, dep, frame, game_version, loader)
            if child is not None:
                state.stack.append(child)

        for failure in state.failures:
            logger.debug(f"依赖解析失败: {failure.to_dict()}")
        if state.failures:
            logger.warning(f"{len(state.failures)} 个依赖解析失败，已跳过")
        return DependencyPlan(
            nodes=list(state.nodes.values()), failures=state.failures
        )

    def _fail(self, state: _Resolution, dep_id: str, error: ModPlanError):
        error.context.setdefault("project_id", dep_id)
        logger.warning(f"依赖 {dep_id}: {error}")
        state.failures.append(DependencyFailure(dep_id, error))

    async def _visit(
        self,
        state: _Resolution,
        dep: DependencyInfo,
        frame: _Frame,
        game_version: Optional[str],
        loader: Optional[str],
    ) -> Optional[_Frame]:
        """处理单个依赖声明，需要继续深入时返回子帧"""
        dep_id = dep.project_id
        if not dep_id:
            return None

        if (
            dep.dependency_type is DependencyType.OPTIONAL
            or frame.parent is DependencyType.OPTIONAL
        ):
            current = DependencyType.OPTIONAL
        else:
            current = DependencyType.REQUIRED

        if dep_id in state.visited:
            return self._upgrade(state, dep_id, current)

        if not dep.actionable:
            return None

        state.visited[dep_id] = current

        try:
            project = await _call(self.fetch_project, dep_id)
            if project is None:
                self._fail(state, dep_id, APINotFoundError(f"项目 {dep_id} 不存在"))
                return None

            # 同一项目可能先后以 id 和 slug 被引用
            known = next(
                (
                    idx
                    for idx in project.identifiers
                    if idx != dep_id and idx in state.visited
                ),
                None,
            )
            if known is not None:
                state.aliases[dep_id] = state.aliases.get(known, known)
                return self._upgrade(state, dep_id, current)
            for idx in project.identifiers:
                if idx != dep_id:
                    state.visited[idx] = current
                    state.aliases[idx] = dep_id

            installed: Optional[InstalledModRecord] = None
            if self.is_installed is not None:
                installed = await _call(self.is_installed, project)

            if installed:
                logger.debug(f"依赖 '{project.title}' 已安装")
                state.nodes[dep_id] = ResolvedDependencyNode(
                    project=project,
                    classification=current,
                    already_installed=True,
                    installed_record=installed,
                    depth=frame.depth,
                )
                return None

            version = await _call(
                self.fetch_compatible_version, project, game_version, loader
            )
        except Exception as e:
            context = {"project_id": dep_id, "cause": type(e).__name__}
            if isinstance(e, ModPlanError):
                context["cause_code"] = e.code
            self._fail(
                state,
                dep_id,
                DependencyFetchError(f"获取依赖元数据失败: {e}", context=context),
            )
            return None

        if version is None:
            self._fail(
                state,
                dep_id,
                ResolutionError(
                    f"'{project.title}' 没有兼容 {game_version}/{loader} 的版本",
                    context={"game_version": game_version, "loader": loader},
                ),
            )
            return None

        logger.debug(f"依赖 '{project.title}' -> {version.version_number} ({current.value})")
        state.nodes[dep_id] = ResolvedDependencyNode(
            project=project,
            classification=current,
            version=version,
            depth=frame.depth,
        )
        if version.dependencies:
            return _Frame(iter(version.dependencies), current, frame.depth + 1)
        return None

    def _upgrade(
        self, state: _Resolution, dep_id: str, current: DependencyType
    ) -> Optional[_Frame]:
        """已访问的依赖被 required 再次引用时升级，并重新遍历其子依赖"""
        key = state.aliases.get(dep_id, dep_id)
        if not (
            current is DependencyType.REQUIRED
            and state.visited[key] is DependencyType.OPTIONAL
        ):
            return None

        state.visited[key] = DependencyType.REQUIRED
        node = state.nodes.get(key)
        if node is None:
            return None

        node.classification = DependencyType.REQUIRED
        for idx in node.project.identifiers:
            state.visited[idx] = DependencyType.REQUIRED
        logger.debug(f"依赖 '{node.project.title}' 由 optional 升级为 required")
        if node.version is not None and node.version.dependencies:
            return _Frame(
                iter(node.version.dependencies), DependencyType.REQUIRED, node.depth + 1
            )
        return None
