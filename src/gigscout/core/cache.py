"""
进程内 TTL 缓存：键 → 值，过期后在读取时惰性删除，不做后台清扫。

每个进程构造一个实例，经依赖注入交给搜索服务；clock 可注入，测试时用假时钟。
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable


@dataclass
class CacheEntry:
    key: str
    value: Any
    expires_at: float


class TTLCache:
    """
    简单过期缓存。单键读写依赖 dict 的原子性，不提供跨键一致性。
    get 命中过期条目时删除并返回 None；set 总是覆盖并重置过期时间。
    """

    def __init__(self, default_ttl: float = 300.0, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() > entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        self._entries[key] = CacheEntry(key=key, value=value, expires_at=self._clock() + ttl)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


# ---------- 缓存键 ----------


def search_key(keyword: str) -> str:
    return f"search:{keyword.strip().casefold()}"


def category_key(category: str) -> str:
    # 分类 id 原样使用（上游分类 id 区分大小写）
    return f"category:{category.strip()}"


def batch_key(keywords: Iterable[str]) -> str:
    normalized = sorted(k.strip().casefold() for k in keywords)
    return "batch:" + ",".join(normalized)
