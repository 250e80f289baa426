# 配置、日志、错误、TTL 缓存、LiteLLM 封装、tiktoken 计数

from .cache import TTLCache, batch_key, category_key, search_key
from .config import (
    apify_api_key,
    cache_ttl_seconds,
    default_job_limit,
    get_default_model,
    has_llm_key,
    job_source_id,
    max_poll_attempts,
    poll_interval_seconds,
    upwork_actor_id,
)
from .errors import (
    ConfigurationError,
    GigScoutError,
    JobTimeout,
    MalformedOutput,
    UpstreamError,
    UpstreamJobFailed,
)
from .llm import ask_ai
from .log import get_logger
from .tokens import count_tokens

__all__ = [
    "TTLCache",
    "search_key",
    "category_key",
    "batch_key",
    "apify_api_key",
    "cache_ttl_seconds",
    "default_job_limit",
    "get_default_model",
    "has_llm_key",
    "job_source_id",
    "max_poll_attempts",
    "poll_interval_seconds",
    "upwork_actor_id",
    "GigScoutError",
    "ConfigurationError",
    "UpstreamError",
    "UpstreamJobFailed",
    "JobTimeout",
    "MalformedOutput",
    "ask_ai",
    "get_logger",
    "count_tokens",
]
