"""
API 数据模型

定义目录 API 相关的数据类，包括项目信息、版本信息、已安装记录与依赖节点。
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Set

from modplan.models.config import Provider, ProjectType


class VersionType(Enum):
    """版本成熟度"""

    RELEASE = "release"
    BETA = "beta"
    ALPHA = "alpha"

    @property
    def rank(self) -> int:
        return _VERSION_TYPE_RANK[self]

    @classmethod
    def parse(cls, value: Optional[str]) -> "VersionType":
        try:
            return cls(str(value or "release").lower())
        except ValueError:
            return cls.RELEASE


_VERSION_TYPE_RANK = {
    VersionType.RELEASE: 0,
    VersionType.BETA: 1,
    VersionType.ALPHA: 2,
}


class DependencyType(Enum):
    """依赖类型"""

    REQUIRED = "required"
    OPTIONAL = "optional"
    INCOMPATIBLE = "incompatible"
    EMBEDDED = "embedded"

    @classmethod
    def parse(cls, value: Optional[str]) -> "DependencyType":
        try:
            return cls(str(value or "required").lower())
        except ValueError:
            return cls.REQUIRED


def _parse_datetime(value) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass
class ModProject:
    """
    模组项目信息。
    """

    id: str
    slug: str
    title: str
    provider: Provider = Provider.MODRINTH
    author: str = ""
    description: str = ""
    icon_url: Optional[str] = None
    project_type: ProjectType = ProjectType.MOD
    categories: Set[str] = field(default_factory=set)
    loaders: Set[str] = field(default_factory=set)
    game_versions: Set[str] = field(default_factory=set)

    @property
    def identifiers(self) -> List[str]:
        """项目的所有稳定标识（id、slug）"""
        return [idx for idx in (self.id, self.slug) if idx]

    @classmethod
    def from_modrinth(cls, data: dict) -> "ModProject":
        """
        将 Modrinth API 返回的项目信息转换为 ModProject 对象。
        """
        return cls(
            id=data.get("id") or data.get("project_id", ""),
            slug=data.get("slug", ""),
            title=data.get("title", ""),
            provider=Provider.MODRINTH,
            author=data.get("author", ""),
            description=data.get("description", ""),
            icon_url=data.get("icon_url"),
            project_type=ProjectType.parse(data.get("project_type")),
            categories=set(data.get("categories", [])),
            loaders=set(data.get("loaders", [])),
            game_versions=set(data.get("game_versions", [])),
        )


@dataclass
class FileInfo:
    """文件信息"""

    url: str
    filename: str
    primary: bool = False
    size: int = 0
    hashes: Optional[Dict[str, str]] = None


@dataclass
class DependencyInfo:
    """依赖信息"""

    project_id: str
    dependency_type: DependencyType = DependencyType.REQUIRED

    @property
    def actionable(self) -> bool:
        """只有 required / optional 需要处理"""
        return self.dependency_type in (
            DependencyType.REQUIRED,
            DependencyType.OPTIONAL,
        )


@dataclass
class ModVersion:
    """
    模组版本信息。

    game_versions / loaders 保持目录返回的原始顺序和写法，
    不保证是规范的版本号。
    """

    id: str
    project_id: str
    name: str
    version_number: str
    version_type: VersionType = VersionType.RELEASE
    game_versions: List[str] = field(default_factory=list)
    loaders: List[str] = field(default_factory=list)
    dependencies: List[DependencyInfo] = field(default_factory=list)
    files: List[FileInfo] = field(default_factory=list)
    date_published: Optional[datetime] = None

    @property
    def primary_file(self) -> Optional[FileInfo]:
        """获取主文件信息"""
        if not self.files:
            return None

        # 优先选择 primary 文件
        for file in self.files:
            if file.primary:
                return file

        # 否则返回第一个文件
        return self.files[0]

    @classmethod
    def from_modrinth(cls, data: dict) -> "ModVersion":
        """
        将 Modrinth API 返回的版本信息转换为 ModVersion 对象。
        """
        files = [
            FileInfo(
                url=file["url"],
                filename=file["filename"],
                primary=file.get("primary", False),
                size=file.get("size", 0),
                hashes=file.get("hashes"),
            )
            for file in data.get("files", [])
        ]

        dependencies = [
            DependencyInfo(
                project_id=dep.get("project_id") or "",
                dependency_type=DependencyType.parse(dep.get("dependency_type")),
            )
            for dep in data.get("dependencies", [])
        ]

        return cls(
            id=data.get("id", ""),
            project_id=data.get("project_id", ""),
            name=data.get("name", ""),
            version_number=data.get("version_number", ""),
            version_type=VersionType.parse(data.get("version_type")),
            game_versions=list(data.get("game_versions", [])),
            loaders=list(data.get("loaders", [])),
            dependencies=dependencies,
            files=files,
            date_published=_parse_datetime(data.get("date_published")),
        )


@dataclass
class InstalledModRecord:
    """已安装的模组记录（只读）"""

    filename: str
    project_id: Optional[str] = None
    version_id: Optional[str] = None
    provider: Optional[Provider] = None
    version: Optional[str] = None
    enabled: bool = True
    name: Optional[str] = None


@dataclass
class ResolvedDependencyNode:
    """依赖解析得到的节点"""

    project: ModProject
    classification: DependencyType
    version: Optional[ModVersion] = None
    already_installed: bool = False
    installed_record: Optional[InstalledModRecord] = None
    depth: int = 1

    @property
    def required(self) -> bool:
        return self.classification is DependencyType.REQUIRED
