"""
配置数据模型

定义请求目标（游戏版本、加载器、项目类型）与目录客户端配置。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from modplan.exceptions import ConfigValidationError


class ModLoader(Enum):
    """模组加载器"""

    VANILLA = "vanilla"
    FABRIC = "fabric"
    FORGE = "forge"
    NEOFORGE = "neoforge"
    QUILT = "quilt"


class ProjectType(Enum):
    """项目类型"""

    MOD = "mod"
    MODPACK = "modpack"
    RESOURCE_PACK = "resourcepack"
    SHADER = "shader"
    DATAPACK = "datapack"
    PLUGIN = "plugin"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ProjectType":
        """宽松解析项目类型，未知值按 mod 处理"""
        if not value:
            return cls.MOD
        key = str(value).strip().lower().replace("_", "").replace("-", "")
        for member in cls:
            if member.value == key:
                return member
        return cls.MOD


class Provider(Enum):
    """模组目录"""

    MODRINTH = "modrinth"
    CURSEFORGE = "curseforge"


@dataclass
class MinecraftConfig:
    """请求目标"""

    version: Optional[str] = None
    mod_loader: Optional[ModLoader] = None
    project_type: ProjectType = ProjectType.MOD

    @property
    def loader_name(self) -> Optional[str]:
        return self.mod_loader.value if self.mod_loader else None


@dataclass
class CatalogConfig:
    """目录客户端配置"""

    provider: Provider = Provider.MODRINTH
    base_url: str = "https://api.modrinth.com/v2"
    user_agent: str = "modplan/0.2.0"
    timeout: float = 30.0


@dataclass
class ResolveConfig:
    """ModPlan 配置"""

    minecraft: MinecraftConfig = field(default_factory=MinecraftConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResolveConfig":
        """
        从配置字典构建

        Args:
            data: 形如 {"minecraft": {...}, "catalog": {...}} 的字典

        Raises:
            ConfigValidationError: 字段值无效
        """
        if not isinstance(data, dict):
            raise ConfigValidationError("配置必须是一个字典")

        mc = data.get("minecraft", {}) or {}
        version = mc.get("version")
        # 兼容旧格式的版本列表，取第一个
        if isinstance(version, list):
            version = version[0] if version else None
        if version is not None:
            version = str(version).strip() or None

        loader = mc.get("mod_loader") or mc.get("loader")
        mod_loader = None
        if loader:
            try:
                mod_loader = ModLoader(str(loader).lower())
            except ValueError:
                raise ConfigValidationError(
                    f"未知的模组加载器: {loader}", context={"mod_loader": loader}
                )

        minecraft = MinecraftConfig(
            version=version,
            mod_loader=mod_loader,
            project_type=ProjectType.parse(mc.get("project_type")),
        )

        cat = data.get("catalog", {}) or {}
        provider = cat.get("provider", Provider.MODRINTH.value)
        try:
            provider = Provider(str(provider).lower())
        except ValueError:
            raise ConfigValidationError(
                f"未知的模组目录: {provider}", context={"provider": provider}
            )

        timeout = cat.get("timeout", 30.0)
        if not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigValidationError(
                "timeout 必须为正数", context={"timeout": timeout}
            )

        catalog = CatalogConfig(
            provider=provider,
            base_url=cat.get("base_url", CatalogConfig.base_url),
            user_agent=cat.get("user_agent", CatalogConfig.user_agent),
            timeout=float(timeout),
        )
        return cls(minecraft=minecraft, catalog=catalog)
