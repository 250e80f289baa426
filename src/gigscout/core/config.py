"""
配置：从环境变量读取，供职位搜索、打分与提案生成各模块使用。

所有取值在调用时读取（而非导入时），凭据缺失只在对应能力被调用时报错，不影响启动。
"""
import math
import os
from pathlib import Path

# 可选加载 .env（若存在）：先项目根（与 pyproject.toml 同层），再当前工作目录
_env_paths = [
    Path(__file__).resolve().parents[3] / ".env",  # src/gigscout/core -> 项目根
    Path.cwd() / ".env",
]
for _p in _env_paths:
    if _p.exists():
        from dotenv import load_dotenv

        load_dotenv(_p)
        break

# Apify 上常见的 Upwork 职位爬虫 actor（按结果付费），实际以 Apify 控制台为准
DEFAULT_UPWORK_ACTOR_ID = "arlusm/upwork-scraper-with-fresh-job-posts"

# 生成式后端凭据：任选其一，LiteLLM 会按模型前缀自动读取
LLM_KEY_VARS = ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "DEEPSEEK_API_KEY", "GEMINI_API_KEY")


def _float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if math.isfinite(value) else default


def _int_env(name: str, default: int) -> int:
    return int(_float_env(name, float(default)))


def apify_api_key() -> str:
    """职位后端凭据；为空时远程任务在调用时抛 ConfigurationError。"""
    return (os.getenv("APIFY_API_KEY") or "").strip()


def upwork_actor_id() -> str:
    return (os.getenv("APIFY_UPWORK_ACTOR_ID") or DEFAULT_UPWORK_ACTOR_ID).strip()


def llm_api_key() -> str:
    """生成式后端凭据：按 LLM_KEY_VARS 顺序取第一个非空值。"""
    for name in LLM_KEY_VARS:
        value = (os.getenv(name) or "").strip()
        if value:
            return value
    return ""


def has_llm_key() -> bool:
    return bool(llm_api_key())


def get_default_model() -> str:
    return os.getenv("GIGSCOUT_DEFAULT_MODEL", "openai/gpt-4o-mini")


def job_source_id() -> str:
    """职位源：apify_upwork（默认）或 mock。"""
    return (os.getenv("GIGSCOUT_JOB_SOURCE") or "apify_upwork").strip().lower()


def cache_ttl_seconds() -> float:
    """响应缓存 TTL，默认 5 分钟。"""
    return _float_env("GIGSCOUT_CACHE_TTL", 300.0)


def poll_interval_seconds() -> float:
    """远程任务轮询间隔，默认 2 秒。"""
    return _float_env("GIGSCOUT_POLL_INTERVAL", 2.0)


def max_poll_attempts() -> int:
    """远程任务最多轮询次数，默认 30 次（约 60 秒上限）。"""
    return max(1, _int_env("GIGSCOUT_MAX_POLLS", 30))


def default_job_limit() -> int:
    return max(1, _int_env("GIGSCOUT_DEFAULT_LIMIT", 20))


def frontend_origins() -> list[str]:
    """CORS 允许的前端来源：本地开发端口 + FRONTEND_URL（部署时配置）。"""
    origins = ["http://localhost:3000", "http://localhost:5173"]
    extra = (os.getenv("FRONTEND_URL") or "").strip()
    if extra:
        origins.append(extra)
    return origins
