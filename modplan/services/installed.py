"""
已安装模组查询

按稳定项目 ID 查找已安装记录，找不到时退回到文件名 / 标题的模糊匹配。
"""

import re
from typing import Iterable, List, Optional, Sequence

from modplan.models import InstalledModRecord, ModProject, ModVersion

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def _squash(value: Optional[str]) -> str:
    return _NON_ALNUM_RE.sub("", str(value or "").lower())


def find_installed_project(
    records: Optional[Sequence[InstalledModRecord]],
    project: Optional[ModProject],
    normalized: bool = True,
) -> Optional[InstalledModRecord]:
    """
    查找项目对应的已安装记录

    Args:
        records: 已安装记录
        project: 要查找的项目
        normalized: 模糊匹配时是否去掉所有非字母数字字符

    Returns:
        匹配到的记录或 None
    """
    if not records or project is None:
        return None

    ids = set(project.identifiers)
    if ids:
        for record in records:
            if record.project_id and record.project_id in ids:
                return record

    if normalized:
        slug = _squash(project.slug)
        title = _squash(project.title)
        for record in records:
            filename = _squash(record.filename)
            name = _squash(record.name)
            for needle in (slug, title):
                if needle and (needle in filename or needle in name):
                    return record
        return None

    search_title = (project.title or "").lower().strip()
    search_slug = (project.slug or "").lower().strip()
    for record in records:
        item_title = (record.name or "").lower().strip()
        item_filename = (record.filename or "").lower().strip()
        if search_title and (
            item_title == search_title or search_title in item_filename
        ):
            return record
        if search_slug and (
            search_slug in item_filename or search_slug in item_title
        ):
            return record
    return None


def find_installed_version(
    versions: Iterable[ModVersion],
    record: Optional[InstalledModRecord],
) -> Optional[ModVersion]:
    """在获取到的版本列表中定位已安装的版本"""
    if record is None:
        return None
    versions = list(versions)

    if record.version_id:
        for version in versions:
            if version.id == record.version_id:
                return version

    if record.version:
        for version in versions:
            if version.version_number == record.version:
                return version

    filename = (record.filename or "").lower()
    if filename:
        # 被禁用的模组文件名带有 .disabled 后缀
        if filename.endswith(".disabled"):
            filename = filename[: -len(".disabled")]
        for version in versions:
            if any(f.filename.lower() == filename for f in version.files):
                return version
    return None


class InstalledIndex:
    """已安装记录的查询入口，供依赖解析器作为回调使用"""

    def __init__(self, records: Optional[Iterable[InstalledModRecord]] = None):
        self.records: List[InstalledModRecord] = list(records or [])

    def is_installed(self, project: ModProject) -> Optional[InstalledModRecord]:
        return find_installed_project(self.records, project, normalized=True)
