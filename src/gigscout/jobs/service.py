"""
职位搜索服务：缓存查找 → 未命中时调用职位源 → 写回缓存。

批量搜索为 scatter join：各关键词独立执行，单个失败转成 {"keyword", "error"}，不影响整批。
并发的相同请求不做 in-flight 去重，后完成者覆盖缓存。
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

from gigscout.core.cache import TTLCache, batch_key, category_key, search_key
from gigscout.core.log import get_logger
from gigscout.jobs.schemas import Posting
from gigscout.jobs.sources.base import JobSource

log = get_logger(__name__)

MAX_BATCH_KEYWORDS = 10
# 缓存键不含 limit，拉取固定上限再按请求切片，小 limit 请求不会截短后续命中
FETCH_LIMIT = 100


@dataclass
class SearchResult:
    postings: list[Posting]
    cached: bool = False


class JobSearchService:
    def __init__(self, cache: TTLCache, source: JobSource):
        self.cache = cache
        self.source = source

    async def search(self, keyword: str, limit: int = 20) -> SearchResult:
        key = search_key(keyword)
        hit = self.cache.get(key)
        if hit is not None:
            log.info("Cache hit for %s", key)
            return SearchResult(postings=hit[:limit], cached=True)
        log.info("Fetching keyword %r", keyword)
        postings = await self.source.search(keyword, limit=max(limit, FETCH_LIMIT))
        self.cache.set(key, postings)
        return SearchResult(postings=postings[:limit])

    async def category(self, category: str, limit: int = 20) -> SearchResult:
        key = category_key(category)
        hit = self.cache.get(key)
        if hit is not None:
            log.info("Cache hit for %s", key)
            return SearchResult(postings=hit[:limit], cached=True)
        log.info("Fetching category %r", category)
        postings = await self.source.category(category, limit=max(limit, FETCH_LIMIT))
        self.cache.set(key, postings)
        return SearchResult(postings=postings[:limit])

    async def _batch_item(self, keyword: str, limit: int) -> dict[str, Any]:
        try:
            result = await self.search(keyword, limit=limit)
        except Exception as e:
            log.warning("Batch item %r failed: %s", keyword, e)
            return {"keyword": keyword, "error": str(e) or type(e).__name__}
        return {
            "keyword": keyword,
            "count": len(result.postings),
            "jobs": [p.model_dump() for p in result.postings],
            "cached": result.cached,
        }

    async def batch(self, keywords: list[str], limit: int = 20) -> tuple[list[dict[str, Any]], bool]:
        """
        批量搜索，最多取前 MAX_BATCH_KEYWORDS 个关键词。
        返回 (每个关键词一条结果, 是否整批命中缓存)；整批只在无失败项时写入缓存。
        """
        keywords = [k for k in keywords if k and k.strip()][:MAX_BATCH_KEYWORDS]
        key = batch_key(keywords)
        hit = self.cache.get(key)
        if hit is not None:
            log.info("Cache hit for %s", key)
            stored = {r["keyword"].strip().casefold(): r for r in hit}
            return [{**stored[k.strip().casefold()], "keyword": k, "cached": True} for k in keywords], True
        results = list(await asyncio.gather(*(self._batch_item(k, limit) for k in keywords)))
        if not any("error" in r for r in results):
            self.cache.set(key, results)
        return results, False
