"""
gigscout HTTP 入口：Upwork 职位搜索（带缓存）、批量搜索、置信度打分、提案生成。

职位搜索：缓存命中直接返回；未命中时经 Apify 远程任务拉取并写回缓存。
提案生成：打分 → 生成式后端 → 解析/回退，不缓存。
所有失败路径都返回结构良好的 JSON 信封，而不是原始异常。
"""
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gigscout import __version__
from gigscout.core.cache import TTLCache
from gigscout.core.config import cache_ttl_seconds, default_job_limit, frontend_origins
from gigscout.core.errors import ConfigurationError, GigScoutError
from gigscout.core.log import get_logger
from gigscout.jobs.scoring import score_posting
from gigscout.jobs.service import MAX_BATCH_KEYWORDS, JobSearchService
from gigscout.jobs.sources.registry import get_job_source
from gigscout.proposals.repair import build_fallback
from gigscout.proposals.synthesizer import ProposalSynthesizer, compute_estimates

from .schemas import (
    BatchRequest,
    BatchResponse,
    JobsResponse,
    ProposalRequest,
    ProposalResponse,
    ScoreRequest,
    ScoreResponse,
)

log = get_logger(__name__)

app = FastAPI(
    title="gigscout API",
    description="Upwork 职位搜索、置信度打分与提案生成",
    version=__version__,
)

# 本地开发端口 + FRONTEND_URL；常见静态托管域名按正则放行
app.add_middleware(
    CORSMiddleware,
    allow_origins=frontend_origins(),
    allow_origin_regex=r"https://.*\.(vercel\.app|netlify\.app|github\.io)",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 进程级缓存：只构造一次，经依赖注入交给搜索服务（测试可 override）
_cache = TTLCache(default_ttl=cache_ttl_seconds())


def get_cache() -> TTLCache:
    return _cache


def get_job_service(cache: TTLCache = Depends(get_cache)) -> JobSearchService:
    return JobSearchService(cache=cache, source=get_job_source())


def get_synthesizer() -> ProposalSynthesizer:
    return ProposalSynthesizer()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "error": message, "timestamp": _now()})


@app.exception_handler(GigScoutError)
async def gigscout_error_handler(request: Request, exc: GigScoutError):
    """配置缺失 503、上游失败 502、轮询超时 504，统一信封。"""
    log.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": str(exc),
            "error_type": type(exc).__name__,
            "timestamp": _now(),
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """参数校验失败统一按 400 返回信封。"""
    first = exc.errors()[0] if exc.errors() else {}
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{where}: {first.get('msg', 'invalid request')}" if where else "Invalid request"
    return _bad_request(message)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    """未预期异常也按 500 返回信封。"""
    log.error("%s %s crashed: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": str(exc) or type(exc).__name__,
            "error_type": type(exc).__name__,
            "timestamp": _now(),
        },
    )


@app.get("/health")
def health():
    """探活。"""
    return {"status": "ok", "service": "gigscout"}


@app.get("/")
def index(cache: TTLCache = Depends(get_cache)):
    """服务说明与缓存状态。"""
    return {
        "status": "running",
        "service": "gigscout",
        "version": __version__,
        "endpoints": {
            "GET /health": "Health check",
            "GET /v1/jobs/search?keyword=<keyword>": "Search by keyword",
            "GET /v1/jobs/category?category=<category>": "Search by category",
            "POST /v1/jobs/batch": f"Batch search up to {MAX_BATCH_KEYWORDS} keywords",
            "POST /v1/jobs/score": "Score a posting against offerings",
            "POST /v1/proposals/generate": "Generate a proposal",
            "POST /v1/cache/clear": "Clear response cache",
        },
        "cache_status": f"{len(cache)} items cached",
    }


@app.get("/v1/jobs/search", response_model=JobsResponse)
async def jobs_search(
    keyword: Optional[str] = Query(None, description="搜索关键词"),
    limit: Optional[int] = Query(None, ge=1, le=100, description="最多返回条数"),
    service: JobSearchService = Depends(get_job_service),
):
    """按关键词搜索，缓存键为小写关键词。"""
    if not keyword or not keyword.strip():
        return _bad_request("Keyword parameter is required")
    result = await service.search(keyword.strip(), limit=limit or default_job_limit())
    return JobsResponse(
        keyword=keyword.strip(),
        count=len(result.postings),
        jobs=result.postings,
        cached=result.cached,
        timestamp=_now(),
    )


@app.get("/v1/jobs/category", response_model=JobsResponse)
async def jobs_category(
    category: Optional[str] = Query(None, description="Upwork 分类 id"),
    limit: Optional[int] = Query(None, ge=1, le=100, description="最多返回条数"),
    service: JobSearchService = Depends(get_job_service),
):
    """按分类搜索，缓存键为原始分类 id。"""
    if not category or not category.strip():
        return _bad_request("Category parameter is required")
    result = await service.category(category.strip(), limit=limit or default_job_limit())
    return JobsResponse(
        category=category.strip(),
        count=len(result.postings),
        jobs=result.postings,
        cached=result.cached,
        timestamp=_now(),
    )


@app.post("/v1/jobs/batch", response_model=BatchResponse)
async def jobs_batch(body: BatchRequest, service: JobSearchService = Depends(get_job_service)):
    """批量搜索：单个关键词失败只影响该条结果，整批不报错。"""
    keywords = [k.strip() for k in body.keywords if k and k.strip()][:MAX_BATCH_KEYWORDS]
    if not keywords:
        return _bad_request("Keywords array is required")
    results, cached = await service.batch(keywords, limit=body.limit or default_job_limit())
    return BatchResponse(keywords=keywords, results=results, cached=cached, timestamp=_now())


@app.post("/v1/jobs/score", response_model=ScoreResponse)
def jobs_score(body: ScoreRequest):
    """只打分，不调用生成式后端。"""
    breakdown = score_posting(body.job, body.offering, body.offerings)
    return ScoreResponse(job_title=body.job.title, breakdown=breakdown, timestamp=_now())


@app.post("/v1/proposals/generate", response_model=ProposalResponse)
def proposals_generate(body: ProposalRequest, synthesizer: ProposalSynthesizer = Depends(get_synthesizer)):
    """
    打分 → 生成提案。后端失败或输出无法解析时返回回退结果 + warning（仍为 200）；
    缺少后端凭据返回 503，但附带估算与置信度等部分分析字段。
    """
    breakdown = score_posting(body.job, body.offering, body.offerings)
    try:
        result = synthesizer.synthesize(
            body.job,
            body.offering,
            body.offerings,
            body.template,
            breakdown,
            estimated_hours=body.estimated_hours,
        )
    except ConfigurationError as e:
        log.error("Proposal generation unavailable: %s", e)
        estimates = compute_estimates(body.offering, body.estimated_hours)
        _, analysis = build_fallback(body.job, breakdown, estimates)
        return JSONResponse(
            status_code=e.status_code,
            content={
                "success": False,
                "error": str(e),
                "error_type": type(e).__name__,
                "job_title": body.job.title,
                "analysis": analysis,
                "timestamp": _now(),
            },
        )
    return ProposalResponse(
        job_title=body.job.title,
        proposal=result.proposal_text,
        analysis=result.analysis,
        source=result.source,
        warning=result.warning,
        timestamp=_now(),
    )


@app.post("/v1/cache/clear")
def cache_clear(cache: TTLCache = Depends(get_cache)):
    """管理用：清空响应缓存。"""
    cache.clear()
    log.info("Cache cleared")
    return {"success": True, "message": "Cache cleared"}
