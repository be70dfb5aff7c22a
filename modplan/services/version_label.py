"""
版本标签清理

去掉厂商版本标题 / 版本号中重复的游戏版本信息（如 "Fabric 1.20.1-3.2.0"），
得到干净的展示标签。所有函数都是纯字符串变换，不会抛出异常，
无法清理时返回原始输入。
"""

import re
from typing import Callable, Optional

from modplan.models import Provider

_ARCHIVE_EXT_RE = re.compile(r"\.(?:jar(?:\.disabled)?|zip)$", re.IGNORECASE)
_MC_VERSION_RE = re.compile(r"\b\d+\.\d+(?:\.\d+)?\b")
_TRAILING_VERSION_RE = re.compile(
    r"(\d+(?:\.\d+){1,4}(?:[-+._][0-9a-z]+)*)$", re.IGNORECASE
)
_LEADING_TAG_RE = re.compile(r"^\s*\[[^\]]*?\d+\.\d+(?:\.\d+)?[^\]]*?\]\s*")
_MC_VERSION_PHRASE_RE = re.compile(r"\b(?:minecraft|mc)\s*version\b", re.IGNORECASE)
_TITLE_PUNCT_RE = re.compile(r"[|()\[\]{}_-]+")
_SPACES_RE = re.compile(r"\s{2,}")
# "." 只在 mc 前缀前算分隔符，避免吃掉 3.2.0 自身的分量
_BARE_SUFFIX_RE = re.compile(
    r"(?:[+_-]|\.(?=mc))(?:mc)?\d+\.\d+(?:\.\d+)?$", re.IGNORECASE
)
_DOTTED_RE = re.compile(r"\d+\.\d+")
_MC_TAG_RE = re.compile(r"(?:^|[+._-])mc\d", re.IGNORECASE)
_REPEATED_SEP_RE = re.compile(r"[+._-]{2,}")
_TRAILING_SEP_RE = re.compile(r"[+._-]+$")
_ZEROS_RE = re.compile(r"^0+$")
_DIGITS_RE = re.compile(r"^\d+$")

_MAX_PASSES = 8


def _text(value) -> Optional[str]:
    text = str(value or "").strip()
    return text or None


def _game_version(value: Optional[str]) -> str:
    text = str(value or "").strip()
    if text[:1] in ("v", "V"):
        text = text[1:]
    return text


def _fixed_point(func: Callable[[str], str], value: str) -> str:
    for _ in range(_MAX_PASSES):
        updated = func(value)
        if updated == value:
            break
        value = updated
    return value


def strip_version_from_title(title: Optional[str], game_version: Optional[str]) -> Optional[str]:
    """
    从版本标题中去掉游戏版本

    例如 "[1.20] Release" -> "Release"，"Fabric 1.20.1-3.2.0" -> "Fabric 3.2.0"
    """
    raw = _text(title)
    if raw is None:
        return None

    gv = _game_version(game_version)
    exact_re = None
    if gv:
        exact_re = re.compile(
            rf"(?<![\w.])(?:mc\s*)?{re.escape(gv)}(?!\w|\.\d)", re.IGNORECASE
        )

    def clean(text: str) -> str:
        text = _LEADING_TAG_RE.sub("", text)
        if exact_re is not None:
            text = exact_re.sub("", text)
        text = _MC_VERSION_PHRASE_RE.sub("", text)
        text = _TITLE_PUNCT_RE.sub(" ", text)
        return _SPACES_RE.sub(" ", text).strip()

    result = _fixed_point(clean, raw)
    if not result or _ZEROS_RE.match(result):
        return raw
    return result


def strip_version_from_number(number: Optional[str], game_version: Optional[str]) -> Optional[str]:
    """
    从版本号中去掉游戏版本

    例如 "3.2.0+1.20.1" -> "3.2.0"，"mod-2.1-1.19.2-forge" 中间的游戏版本被折叠
    """
    raw = _text(number)
    if raw is None:
        return None

    gv = _game_version(game_version)
    suffix_re = infix_re = None
    if gv:
        escaped = re.escape(gv)
        suffix_re = re.compile(rf"(?:[+._-](?:mc)?{escaped})+$", re.IGNORECASE)
        infix_re = re.compile(rf"([+._-])(?:mc)?{escaped}([+._-])", re.IGNORECASE)

    def strip_bare_suffix(text: str) -> str:
        # 只有前面还留着自身版本号时，末尾的 N.N 才是游戏版本
        match = _BARE_SUFFIX_RE.search(text)
        if not match:
            return text
        head = text[: match.start()]
        if not _DOTTED_RE.search(head) or _MC_TAG_RE.search(head):
            return text
        if gv and gv.lower() in head.lower():
            return text
        return head

    def clean(text: str) -> str:
        if suffix_re is not None:
            text = suffix_re.sub("", text)
            text = infix_re.sub(r"\1", text)
        text = strip_bare_suffix(text)
        text = _REPEATED_SEP_RE.sub(".", text)
        return _TRAILING_SEP_RE.sub("", text).strip()

    result = _fixed_point(clean, raw)

    if _ZEROS_RE.match(result):
        return raw
    if _DIGITS_RE.match(result) and gv and gv.lower() in raw.lower():
        return raw
    if not result:
        fallback = _MC_VERSION_RE.search(raw)
        return fallback.group(0) if fallback else raw
    return result


def format_installed_version_label(
    version: Optional[str],
    provider: Optional[Provider],
    filename: Optional[str] = None,
) -> Optional[str]:
    """
    已安装模组的版本标签

    CurseForge 记录的版本往往是文件名，尽量取出末尾的版本号；
    只是重复文件名或过长时返回 None。
    """
    raw = _text(version)
    if raw is None:
        return None
    if provider is not Provider.CURSEFORGE:
        return raw

    base = _ARCHIVE_EXT_RE.sub("", raw).strip()
    if not base:
        return None

    trailing = _TRAILING_VERSION_RE.search(base)
    if trailing:
        return trailing.group(1)

    filename_base = _ARCHIVE_EXT_RE.sub("", _text(filename) or "").strip().lower()
    if filename_base and filename_base == base.lower():
        return None
    if len(base) > 32:
        return None
    return base


def with_version_prefix(label: Optional[str]) -> Optional[str]:
    """加上 v 前缀（已有则不变）"""
    text = _text(label)
    if text is None:
        return None
    return text if text.lower().startswith("v") else f"v{text}"
