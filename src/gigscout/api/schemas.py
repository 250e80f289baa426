"""
HTTP 请求与响应模型：统一信封 {success, 回显参数, count/jobs 或 proposal/analysis, timestamp}。
"""
from typing import Any, Optional

from pydantic import BaseModel, Field

from gigscout.jobs.schemas import Offering, Posting, ScoreBreakdown


class JobsResponse(BaseModel):
    """GET /v1/jobs/search 与 /v1/jobs/category 响应。"""
    success: bool = True
    keyword: Optional[str] = Field(None, description="回显关键词（search）")
    category: Optional[str] = Field(None, description="回显分类（category）")
    count: int = Field(0, description="职位条数")
    jobs: list[Posting] = Field(default_factory=list, description="职位列表")
    cached: bool = Field(False, description="是否命中缓存")
    timestamp: str


class BatchRequest(BaseModel):
    """POST /v1/jobs/batch 请求；超过 10 个的关键词被忽略。"""
    keywords: list[str] = Field(..., description="关键词列表")
    limit: Optional[int] = Field(None, ge=1, le=100, description="每个关键词最多返回条数")


class BatchResponse(BaseModel):
    success: bool = True
    keywords: list[str] = Field(default_factory=list, description="实际执行的关键词")
    results: list[dict[str, Any]] = Field(default_factory=list, description="每个关键词一条：jobs 或 error")
    cached: bool = False
    timestamp: str


class ScoreRequest(BaseModel):
    """POST /v1/jobs/score 请求。"""
    job: Posting = Field(..., description="待打分职位")
    offering: Optional[Offering] = Field(None, description="主服务项（用于预算匹配）")
    offerings: list[Offering] = Field(default_factory=list, description="全部服务项（用于技能覆盖）")


class ScoreResponse(BaseModel):
    success: bool = True
    job_title: str
    breakdown: ScoreBreakdown
    timestamp: str


class ProposalRequest(BaseModel):
    """POST /v1/proposals/generate 请求。"""
    job: Posting = Field(..., description="目标职位")
    offering: Optional[Offering] = Field(None, description="主服务项")
    offerings: list[Offering] = Field(default_factory=list, description="全部服务项")
    template: Optional[str] = Field(None, description="可选：提案风格模板")
    estimated_hours: Optional[float] = Field(None, gt=0, description="可选：预估工时，默认 20")


class ProposalResponse(BaseModel):
    success: bool = True
    job_title: str
    proposal: str = Field(..., description="提案正文")
    analysis: dict[str, Any] = Field(default_factory=dict, description="结构化分析")
    source: str = Field("backend", description="backend | fallback")
    warning: Optional[str] = Field(None, description="软错误说明")
    timestamp: str
