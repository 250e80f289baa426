"""
生成式输出的两段式处理：先严格解析，失败再走纯函数回退构造。

后端可能输出散文、用 Markdown 代码块包 JSON、或漏字段；这里保证无论后端如何表现，
都能得到结构完整的结果。
"""
from __future__ import annotations

import json
import re
from typing import Any, Optional

from gigscout.core.errors import MalformedOutput
from gigscout.jobs.schemas import Posting, ScoreBreakdown
from gigscout.jobs.scoring import bid_recommendation, complexity_for
from gigscout.proposals.schemas import Estimates

PLACEHOLDER_PROPOSAL = (
    "Proposal could not be generated automatically. "
    "Please review the analysis below and write the proposal manually."
)

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*([\s\S]*?)```")


def strip_code_fence(text: str) -> str:
    """去掉 Markdown 代码块包裹；无代码块时原样返回（去首尾空白）。"""
    text = (text or "").strip()
    if "```" in text:
        m = _FENCE_RE.search(text)
        if m:
            return m.group(1).strip()
    return text


def parse_backend_output(text: str) -> dict[str, Any]:
    """严格解析：必须是 JSON 对象，否则抛 MalformedOutput。"""
    body = strip_code_fence(text)
    if not body:
        raise MalformedOutput("Empty response from generative backend")
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise MalformedOutput(f"Response is not valid JSON: {e.msg}") from e
    if not isinstance(data, dict):
        raise MalformedOutput(f"Expected a JSON object, got {type(data).__name__}")
    return data


def inject_breakdown(analysis: dict[str, Any], breakdown: ScoreBreakdown) -> dict[str, Any]:
    """后端漏掉置信度明细时补入打分结果，保证与打分引擎一致。"""
    if not analysis.get("confidence_breakdown"):
        analysis["confidence_breakdown"] = breakdown.lines()
    return analysis


def build_fallback(
    posting: Posting,
    breakdown: ScoreBreakdown,
    estimates: Estimates,
    raw_text: Optional[str] = None,
) -> tuple[str, dict[str, Any]]:
    """确定性回退：返回 (提案正文, analysis)。无共享状态，可单独测试。"""
    proposal = (raw_text or "").strip() or PLACEHOLDER_PROPOSAL
    analysis = {
        "project_summary": posting.title,
        "complexity": complexity_for(posting),
        "recommended_rate": estimates.recommended_rate,
        "estimated_hours": estimates.estimated_hours,
        "cost_range": {"min": estimates.cost_min, "max": estimates.cost_max},
        "confidence_score": breakdown.confidence,
        "confidence_breakdown": breakdown.lines(),
        "matched_skills": list(breakdown.matched_skills),
        "missing_skills": list(breakdown.missing_skills),
        "bid_recommendation": bid_recommendation(breakdown.confidence),
        "deliverables": [],
        "risks": [],
        "timeline": "",
        "questions": [],
    }
    return proposal, analysis
