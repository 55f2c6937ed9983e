"""版本号比较

按 "." 分段比较：两段都是 ASCII 整数时按数值比较，否则按字符串比较；
数值段排在字符串段之前，保证全序（可传递、反对称）。
末尾的 0 段不参与比较，因此 1.0 == 1.0.0，而 1.0 < 1.0.1。
"""

from __future__ import annotations

from collections.abc import Iterable

# 段类型标记: 数值段 < 字符串段
_NUM = 0
_STR = 1


def version_key(version: str) -> tuple[tuple[int, int | str], ...]:
    """把版本字符串转为可直接比较的 key，可用于 sorted(key=...)"""
    segments: list[tuple[int, int | str]] = []
    for seg in str(version).strip().split("."):
        if seg.isascii() and seg.isdecimal():
            segments.append((_NUM, int(seg)))
        else:
            segments.append((_STR, seg))
    while segments and segments[-1] == (_NUM, 0):
        segments.pop()
    return tuple(segments)


def compare(a: str, b: str) -> int:
    """比较两个版本号，返回 -1 / 0 / 1"""
    ka, kb = version_key(a), version_key(b)
    if ka == kb:
        return 0
    return -1 if ka < kb else 1


def sort(versions: Iterable[str]) -> list[str]:
    """升序"""
    return sorted(versions, key=version_key)


def rsort(versions: Iterable[str]) -> list[str]:
    """降序（列表输出用）"""
    return sorted(versions, key=version_key, reverse=True)


def newest(versions: Iterable[str]) -> str | None:
    """最新版本；空输入返回 None"""
    ordered = rsort(versions)
    return ordered[0] if ordered else None
