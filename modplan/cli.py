"""
CLI 模块

命令行接口实现。
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import click
import toml
import yaml
from loguru import logger

from modplan import __version__
from modplan.models import (
    ModLoader,
    ProjectType,
    Provider,
    ResolveConfig,
    ResolvedDependencyNode,
)
from modplan.services import ModrinthClient, ModResolver, InstallPlan
from modplan.services.version_label import (
    strip_version_from_number,
    strip_version_from_title,
    with_version_prefix,
)
from modplan.exceptions import (
    ConfigError,
    ConfigParseError,
    ModPlanError,
    ResolutionError,
)
from modplan.logger import setup_logger


def load_config(config_path: Optional[str]) -> dict:
    """加载配置文件，未指定时返回空配置"""
    if not config_path:
        return {}

    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"配置文件不存在: {config_path}")

    suffix = path.suffix.lower()

    try:
        if suffix == ".toml":
            return toml.load(config_path)
        elif suffix == ".json":
            return json.loads(path.read_text(encoding="utf-8"))
        elif suffix in (".yaml", ".yml"):
            return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (toml.TomlDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigParseError(f"配置文件解析失败: {e}", context={"path": config_path})

    raise ConfigError(f"不支持的配置文件格式: {suffix}")


def build_config(
    config_path: Optional[str],
    game_version: Optional[str],
    loader: Optional[str],
    project_type: Optional[str],
) -> ResolveConfig:
    """读取配置文件并应用命令行覆盖"""
    data = load_config(config_path)
    minecraft = dict(data.get("minecraft", {}) or {})
    if game_version:
        minecraft["version"] = game_version
    if loader:
        minecraft["mod_loader"] = loader
    if project_type:
        minecraft["project_type"] = project_type
    data["minecraft"] = minecraft
    return ResolveConfig.from_dict(data)


def _version_label(plan: InstallPlan, game_version: Optional[str]) -> str:
    version = plan.version
    number = strip_version_from_number(version.version_number, game_version)
    title = strip_version_from_title(version.name, game_version)
    label = with_version_prefix(number) or ""
    if title and title != number:
        label = f"{title} ({label})"
    return label


def _echo_node(node: ResolvedDependencyNode, game_version: Optional[str]):
    if node.already_installed:
        click.echo(f"  ✓ {node.project.title} (已安装)")
        return
    number = strip_version_from_number(
        node.version.version_number if node.version else None, game_version
    )
    click.echo(f"  - {node.project.title} {with_version_prefix(number) or ''}".rstrip())


def print_plan(plan: InstallPlan, game_version: Optional[str], show_all: bool = False):
    """输出安装计划"""
    if not plan.found:
        click.echo(f"{plan.project.title}: 没有找到兼容的版本")
        return

    click.echo(f"{plan.project.title} {_version_label(plan, game_version)}")
    if plan.file:
        click.echo(f"  文件: {plan.file.filename}")
    if plan.selection.show_fallback_notice:
        click.echo("  注意: 没有精确匹配的版本，已选择最接近的版本")

    if show_all:
        click.echo("候选版本:")
        for version in plan.selection.visible(show_all=True):
            click.echo(
                f"  {version.version_number} [{version.version_type.value}] "
                f"{', '.join(version.game_versions)}"
            )

    deps = plan.dependencies
    if deps.required:
        click.echo("必需依赖:")
        for node in deps.required:
            _echo_node(node, game_version)
    if deps.optional:
        click.echo("可选依赖:")
        for node in deps.optional:
            _echo_node(node, game_version)

    order = plan.install_order()
    if order:
        click.echo("安装顺序: " + " -> ".join(node.project.title for node in order))
    for failure in plan.failures:
        click.echo(f"  ! 依赖 {failure.project_id}: [{failure.code}] {failure.reason}")


async def run_async(
    config: ResolveConfig,
    project: str,
    show_all: bool = False,
    with_dependencies: bool = True,
) -> Optional[InstallPlan]:
    """异步运行"""
    if config.catalog.provider is not Provider.MODRINTH:
        raise ConfigError(f"暂不支持的模组目录: {config.catalog.provider.value}")

    mc = config.minecraft
    async with ModrinthClient(
        base_url=config.catalog.base_url,
        user_agent=config.catalog.user_agent,
        timeout=config.catalog.timeout,
    ) as client:
        resolver = ModResolver(client)
        plan = await resolver.resolve(
            project,
            mc.version,
            mc.loader_name,
            mc.project_type,
            with_dependencies=with_dependencies,
        )

    if plan is None:
        raise ResolutionError(f"模组不存在: {project}", context={"project_id": project})
    print_plan(plan, mc.version, show_all)
    return plan


@click.command()
@click.argument("project")
@click.option("-c", "--config", "config_path", type=click.Path(), help="配置文件路径")
@click.option("-g", "--game-version", help="Minecraft 版本")
@click.option(
    "-l",
    "--loader",
    type=click.Choice([loader.value for loader in ModLoader], case_sensitive=False),
    help="模组加载器",
)
@click.option(
    "-t",
    "--project-type",
    type=click.Choice([t.value for t in ProjectType], case_sensitive=False),
    help="项目类型",
)
@click.option("--show-all", is_flag=True, help="列出全部候选版本")
@click.option("--no-deps", is_flag=True, help="不展开依赖")
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.option("--log-file", type=click.Path(dir_okay=False), help="同时写入日志文件")
@click.version_option(version=__version__)
def main(
    project: str,
    config_path: Optional[str],
    game_version: Optional[str],
    loader: Optional[str],
    project_type: Optional[str],
    show_all: bool,
    no_deps: bool,
    debug: bool,
    log_file: Optional[str],
):
    """ModPlan - Minecraft 模组版本选择与依赖计划工具"""
    setup_logger(level="DEBUG" if debug else None, log_file=log_file)

    try:
        config = build_config(config_path, game_version, loader, project_type)
        asyncio.run(run_async(config, project, show_all, not no_deps))
    except ModPlanError as e:
        logger.error(f"{e}")
        raise click.ClickException(str(e))
    except Exception as e:
        logger.exception(f"运行时错误: {e}")
        raise click.ClickException(f"运行时错误: {e}")


if __name__ == "__main__":
    main()
