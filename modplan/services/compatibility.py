"""
兼容性评分

根据远程版本声明的游戏版本标记，为请求的游戏版本打分；
并判断加载器是否兼容。分数只用于排序，0 表示不兼容。
"""

import re
import sys
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from modplan.models import ModLoader, ProjectType
from modplan.services.version_tokens import (
    compare_parts,
    parse_parts,
    patch_of,
    same_prefix,
)

MAX_SCORE = sys.maxsize
DIRECT_MATCH_SCORE = 4900
EXACT_TEXT_SCORE = 1000
UNTAGGED_SCORE = 1

# 支持 -、en-dash、em-dash 三种范围写法
_RANGE_RE = re.compile(r"^(.+?)\s*[-–—]\s*(.+)$")


@dataclass
class TokenShape:
    """解析后的版本标记：单个版本或 [lower, upper] 范围"""

    parts: Optional[List[int]] = None
    lower: Optional[List[int]] = None
    upper: Optional[List[int]] = None

    @property
    def is_range(self) -> bool:
        return self.upper is not None


@dataclass(frozen=True)
class CompatibilityRule:
    """评分规则：命中时得分为 base (+ 参照版本的补丁号)"""

    name: str
    matches: Callable[[TokenShape, List[int]], bool]
    base: int
    patch_bonus: bool = False

    def score(self, shape: TokenShape) -> int:
        if not self.patch_bonus:
            return self.base
        ref = shape.upper if shape.is_range else shape.parts
        return self.base + patch_of(ref)


def _in_range(t: TokenShape, req: List[int]) -> bool:
    return (
        t.is_range
        and compare_parts(req, t.lower) >= 0
        and compare_parts(req, t.upper) <= 0
    )


def _range_newer_patch(t: TokenShape, req: List[int]) -> bool:
    return (
        t.is_range
        and same_prefix(req, t.upper, 2)
        and compare_parts(req, t.upper) > 0
    )


def _exact(t: TokenShape, req: List[int]) -> bool:
    return not t.is_range and compare_parts(t.parts, req) == 0


def _minor_tag(t: TokenShape, req: List[int]) -> bool:
    # 1.20 这类两段标记视为 1.20.x 全系列
    return (
        not t.is_range
        and len(t.parts) <= 2
        and list(t.parts) == list(req[: len(t.parts)])
    )


def _newer_patch(t: TokenShape, req: List[int]) -> bool:
    return (
        not t.is_range
        and same_prefix(req, t.parts, 2)
        and compare_parts(req, t.parts) > 0
    )


def _older_patch(t: TokenShape, req: List[int]) -> bool:
    return (
        not t.is_range
        and same_prefix(req, t.parts, 2)
        and compare_parts(req, t.parts) <= 0
    )


def _same_major_older(t: TokenShape, req: List[int]) -> bool:
    return (
        not t.is_range
        and same_prefix(req, t.parts, 1)
        and compare_parts(req, t.parts) > 0
    )


# 自上而下求值，第一个命中的规则决定分数
COMPATIBILITY_RULES: Tuple[CompatibilityRule, ...] = (
    CompatibilityRule("range", _in_range, 5000, patch_bonus=True),
    CompatibilityRule("range-newer-patch", _range_newer_patch, 4000, patch_bonus=True),
    CompatibilityRule("exact", _exact, DIRECT_MATCH_SCORE, patch_bonus=True),
    CompatibilityRule("minor-tag", _minor_tag, 3500),
    CompatibilityRule("newer-patch", _newer_patch, 4000, patch_bonus=True),
    CompatibilityRule("older-patch", _older_patch, 3000, patch_bonus=True),
    CompatibilityRule("same-major", _same_major_older, 1000),
)


def normalize_token(value: Optional[str]) -> str:
    """小写、去掉开头的 v、去空白"""
    text = str(value or "").strip().lower()
    if text.startswith("v"):
        text = text[1:]
    return text.strip()


def _shape(token: str) -> Optional[TokenShape]:
    match = _RANGE_RE.match(token)
    if match:
        lower = parse_parts(match.group(1))
        upper = parse_parts(match.group(2))
        if lower is not None and upper is not None:
            return TokenShape(lower=lower, upper=upper)
    parts = parse_parts(token)
    if parts is None:
        return None
    return TokenShape(parts=parts)


def token_score(token: Optional[str], requested: Optional[str]) -> int:
    """单个版本标记对请求版本的得分"""
    token = normalize_token(token)
    requested = normalize_token(requested)

    req = parse_parts(requested)
    if req is None:
        return EXACT_TEXT_SCORE if token and token == requested else 0

    shape = _shape(token)
    if shape is None:
        return 0

    for rule in COMPATIBILITY_RULES:
        if rule.matches(shape, req):
            return rule.score(shape)
    return 0


def score(tokens: Optional[Iterable[str]], requested: Optional[str]) -> int:
    """
    版本整体得分：所有标记得分的最大值

    - 请求版本为空：与一切兼容，返回 MAX_SCORE
    - 版本没有任何游戏版本标记：弱兼容，返回 1
    """
    tokens = list(tokens or [])
    if not normalize_token(requested):
        return MAX_SCORE
    if not tokens:
        return UNTAGGED_SCORE
    return max(token_score(token, requested) for token in tokens)


def has_direct_match(tokens: Optional[Iterable[str]], requested: Optional[str]) -> bool:
    """是否存在精确（或接近精确）的数值匹配"""
    return any(
        token_score(token, requested) >= DIRECT_MATCH_SCORE for token in tokens or []
    )


# 优先级顺序：neoforge 必须先于更宽泛的 forge
_LOADER_ALIASES: Tuple[Tuple[str, str], ...] = (
    ("neoforge", ModLoader.NEOFORGE.value),
    ("fabric", ModLoader.FABRIC.value),
    ("quilt", ModLoader.QUILT.value),
    ("forge", ModLoader.FORGE.value),
    ("vanilla", ModLoader.VANILLA.value),
)


def canonical_loader(token: Optional[str]) -> str:
    """将加载器写法归一化（如 "NeoForge 47" -> "neoforge"）"""
    text = str(token or "").strip().lower()
    for needle, canonical in _LOADER_ALIASES:
        if needle in text:
            return canonical
    return text


def loader_matters(project_type: Optional[ProjectType]) -> bool:
    """只有模组和整合包需要校验加载器"""
    return project_type in (None, ProjectType.MOD, ProjectType.MODPACK)


def loader_compatible(
    version_loaders: Optional[Sequence[str]],
    requested_loader: Optional[str],
    project_type: Optional[ProjectType] = ProjectType.MOD,
) -> bool:
    """加载器兼容性（二元判断）"""
    if not loader_matters(project_type):
        return True

    requested = canonical_loader(requested_loader)
    if not requested or requested == ModLoader.VANILLA.value:
        return True

    available = {canonical_loader(loader) for loader in version_loaders or []}
    available.discard("")
    if not available:
        return True
    return requested in available
