"""提案 prompt：职位 + 打分明细 + 服务项技能 + 可选风格模板，要求后端只回 JSON。"""
from __future__ import annotations

from typing import Iterable, Optional

from gigscout.jobs.schemas import Offering, Posting, ScoreBreakdown
from gigscout.jobs.scoring import capability_set
from gigscout.proposals.schemas import Estimates

# 描述过长时截断，控制单次调用成本
MAX_DESCRIPTION_CHARS = 4000

SYSTEM_PROMPT = (
    "You are an expert Upwork freelancer writing winning proposals. "
    "Reply with a single JSON object and nothing else: no greeting, no explanation, no Markdown."
)

RESPONSE_KEYS = """{
  "proposal": "full proposal text, first person, under 250 words",
  "project_summary": "one or two sentences",
  "complexity": "Low | Medium | High",
  "recommended_rate": number,
  "estimated_hours": number,
  "cost_range": {"min": number, "max": number},
  "confidence_score": number,
  "confidence_breakdown": ["label: +points", ...],
  "matched_skills": [string],
  "missing_skills": [string],
  "bid_recommendation": "STRONG BID | BID | CONSIDER | SKIP",
  "deliverables": [string],
  "risks": [string],
  "timeline": "string",
  "questions": [string]
}"""


def _budget_line(posting: Posting) -> str:
    if posting.engagement == "hourly":
        return f"Hourly, ${posting.hourly_min or 0:g}-${posting.hourly_max or posting.hourly_min or 0:g}/hr"
    if posting.engagement == "fixed":
        return f"Fixed price, ${posting.budget or 0:g}"
    return "Not specified"


def build_prompt(
    posting: Posting,
    offering: Optional[Offering],
    breakdown: ScoreBreakdown,
    estimates: Estimates,
    template: Optional[str] = None,
    offerings: Iterable[Offering] = (),
) -> str:
    client = posting.client
    capabilities = capability_set(offering, offerings)
    offering_block = "No specific service selected."
    if offering is not None:
        offering_block = (
            f"Service: {offering.name}\n"
            f"Skills: {', '.join(offering.skills) or 'n/a'}\n"
            f"Rate: ${offering.rate_min:g}-${offering.rate_max:g}/hr"
        )
    if capabilities:
        offering_block += f"\nAll skills I offer: {', '.join(capabilities)}"
    parts = [
        "Write a proposal for this Upwork job and analyse whether to bid.",
        "",
        "## Job",
        f"Title: {posting.title}",
        f"Budget: {_budget_line(posting)}",
        f"Experience level: {posting.experience_level or 'n/a'}",
        f"Required skills: {', '.join(posting.skills) or 'n/a'}",
        f"Client: payment verified={client.payment_verified}, total spent=${client.total_spent:g}, "
        f"rating={client.rating if client.rating is not None else 'n/a'}, "
        f"hire rate={client.hire_rate if client.hire_rate is not None else 'n/a'}, "
        f"country={posting.country or 'n/a'}",
        "Description:",
        (posting.description or "")[:MAX_DESCRIPTION_CHARS],
        "",
        "## My service",
        offering_block,
        "",
        "## Fit analysis (already computed, keep these numbers)",
        f"Confidence: {breakdown.confidence}%",
        *[f"- {line}" for line in breakdown.lines()],
        f"Matched skills: {', '.join(breakdown.matched_skills) or 'none'}",
        f"Missing skills: {', '.join(breakdown.missing_skills) or 'none'}",
        f"Estimated hours: {estimates.estimated_hours:g}",
        f"Recommended rate: ${estimates.recommended_rate:g}/hr",
        f"Cost range: ${estimates.cost_min:g}-${estimates.cost_max:g}",
    ]
    if template and template.strip():
        parts += ["", "## Style template (follow its tone and structure)", template.strip()]
    parts += ["", "Respond with JSON using exactly these keys:", RESPONSE_KEYS]
    return "\n".join(parts)
