"""
职位：Upwork 职位源（Apify 远程任务）+ 搜索服务（TTL 缓存、批量）+ 置信度打分。
"""
from .schemas import ClientInfo, Offering, Posting, ScoreBreakdown, ScoreComponent
from .scoring import bid_recommendation, complexity_for, score_posting
from .service import JobSearchService, SearchResult

__all__ = [
    "ClientInfo",
    "Offering",
    "Posting",
    "ScoreBreakdown",
    "ScoreComponent",
    "bid_recommendation",
    "complexity_for",
    "score_posting",
    "JobSearchService",
    "SearchResult",
]
