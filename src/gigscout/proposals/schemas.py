"""
提案生成结果的数据边界。

analysis 保留生成式后端返回的 JSON 原样（仅在缺少置信度明细时补入打分结果）；
source 标明结果来自后端解析还是确定性回退，便于排查。
"""
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

ProposalSource = Literal["backend", "fallback"]


class Estimates(BaseModel):
    """与生成式后端无关的估算字段。"""
    estimated_hours: float = Field(20.0, description="预估工时")
    recommended_rate: float = Field(100.0, description="建议时薪（服务项报价区间中点）")
    cost_min: float = Field(..., description="预估费用下限 = 工时 × 时薪下限")
    cost_max: float = Field(..., description="预估费用上限 = 工时 × 时薪上限")


class ProposalResult(BaseModel):
    proposal_text: str = Field(..., description="可直接提交的提案正文")
    analysis: dict[str, Any] = Field(default_factory=dict, description="结构化分析字段")
    source: ProposalSource = Field("backend", description="backend=解析自后端，fallback=确定性回退")
    warning: Optional[str] = Field(None, description="软错误：后端失败或输出被修复时的说明")
