"""
版本号数值运算

解析、比较点分数字版本号（如 1.20.1），供兼容性评分与版本范围判断使用。
"""

import re
from typing import List, Optional, Sequence

_PARTS_RE = re.compile(r"(\d+)\.(\d+)(?:\.(\d+))?(?:\.(\d+))?")

# 缺失分量的占位值，不等于任何整数
_MISSING = object()


def parse_parts(token: Optional[str]) -> Optional[List[int]]:
    """
    提取字符串中第一段 N.N[.N[.N]] 数字

    Returns:
        整数分量列表，没有匹配时返回 None
    """
    if not token:
        return None
    match = _PARTS_RE.search(str(token))
    if not match:
        return None
    return [int(part) for part in match.groups() if part is not None]


def compare_parts(a: Sequence[int], b: Sequence[int]) -> int:
    """逐位比较，缺失的尾部分量按 0 处理（1.20 == 1.20.0）"""
    for i in range(max(len(a), len(b))):
        left = a[i] if i < len(a) else 0
        right = b[i] if i < len(b) else 0
        if left != right:
            return 1 if left > right else -1
    return 0


def same_prefix(a: Sequence[int], b: Sequence[int], depth: int) -> bool:
    """前 depth 个分量是否相同，缺失分量不与任何整数相等"""
    for i in range(depth):
        left = a[i] if i < len(a) else _MISSING
        right = b[i] if i < len(b) else _MISSING
        if left is _MISSING or right is _MISSING:
            if left is not right:
                return False
            continue
        if left != right:
            return False
    return True


def patch_of(parts: Sequence[int]) -> int:
    """第三个分量（补丁号），没有时为 0"""
    return parts[2] if len(parts) > 2 else 0
