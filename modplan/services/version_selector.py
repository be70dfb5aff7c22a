"""
版本选择服务

在候选版本中按加载器过滤、按兼容性评分选出最佳版本子集，
并判断是否需要提示“仅找到近似版本”。
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from loguru import logger

from modplan.models import ModVersion, ProjectType
from modplan.services import compatibility

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _published(version: ModVersion) -> datetime:
    value = version.date_published
    if value is None:
        return _EPOCH
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def sort_versions(versions: Sequence[ModVersion]) -> List[ModVersion]:
    """release < beta < alpha，同级按发布时间倒序"""
    by_date = sorted(versions, key=_published, reverse=True)
    return sorted(by_date, key=lambda v: v.version_type.rank)


@dataclass
class SelectionResult:
    """版本选择结果"""

    best_score: int = 0
    best_versions: List[ModVersion] = field(default_factory=list)
    has_direct_match: bool = False
    candidates: List[ModVersion] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.best_versions

    @property
    def show_fallback_notice(self) -> bool:
        """只找到近似（更旧/更新）版本时需要提示用户"""
        return (
            0 < self.best_score < compatibility.DIRECT_MATCH_SCORE
            and not self.has_direct_match
        )

    def visible(self, show_all: bool = False) -> List[ModVersion]:
        """默认展示最佳子集，show_all 时展示全部候选"""
        return sort_versions(self.candidates if show_all else self.best_versions)

    def first(self) -> Optional[ModVersion]:
        ordered = self.visible()
        return ordered[0] if ordered else None


class VersionSelector:
    """版本选择器"""

    def select(
        self,
        versions: Sequence[ModVersion],
        game_version: Optional[str],
        loader: Optional[str],
        project_type: Optional[ProjectType] = ProjectType.MOD,
    ) -> SelectionResult:
        """
        选出最佳版本子集

        Args:
            versions: 候选版本列表
            game_version: 请求的游戏版本
            loader: 请求的加载器
            project_type: 项目类型（决定是否校验加载器）

        Returns:
            SelectionResult，得分相同的版本全部保留
        """
        result = SelectionResult(candidates=list(versions))

        for version in versions:
            if not compatibility.loader_compatible(
                version.loaders, loader, project_type
            ):
                logger.debug(f"版本 {version.version_number} 加载器不兼容: {version.loaders}")
                continue

            value = compatibility.score(version.game_versions, game_version)
            if value <= 0:
                continue

            if compatibility.has_direct_match(version.game_versions, game_version):
                result.has_direct_match = True

            if value > result.best_score:
                result.best_score = value
                result.best_versions = [version]
            elif value == result.best_score:
                result.best_versions.append(version)

        if result.is_empty:
            logger.debug(f"没有与 {game_version}/{loader} 兼容的版本")
        return result

    def pick(
        self,
        versions: Sequence[ModVersion],
        game_version: Optional[str],
        loader: Optional[str],
        project_type: Optional[ProjectType] = ProjectType.MOD,
    ) -> Optional[ModVersion]:
        """返回排序后的首个最佳版本"""
        return self.select(versions, game_version, loader, project_type).first()
