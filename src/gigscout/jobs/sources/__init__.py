"""
职位源：拉取 Upwork 职位列表，供搜索服务缓存与打分。
- apify_upwork：Apify 上的 Upwork 爬虫 actor，需 APIFY_API_KEY。
- mock：内置几条示例职位，无需 API Key，用于本地演示与测试。
"""
from .base import JobSource
from .mock import MockJobSource
from .registry import get_job_source

__all__ = ["JobSource", "MockJobSource", "get_job_source"]
