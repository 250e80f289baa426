"""
职位 vs 服务项置信度打分：纯函数、确定性、无 I/O。

基础分 50，按「技能 → 付款验证 → 高消费客户 → 高评分 → 预算匹配」顺序累加，
每一项加分都记一行明细，最终截断到 [20, 95]。
"""
from __future__ import annotations

from typing import Iterable, Optional

from gigscout.jobs.schemas import Offering, Posting, ScoreBreakdown, ScoreComponent

BASE_SCORE = 50
SKILL_POINTS = 25
CLIENT_SIGNAL_POINTS = 5
BUDGET_POINTS = 10
MIN_CONFIDENCE = 20
MAX_CONFIDENCE = 95

HIGH_SPEND_THRESHOLD = 10_000
HIGH_RATING_THRESHOLD = 4.5
HOURLY_BUDGET_RATIO = 0.8
FIXED_BUDGET_RATIO = 15


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def capability_set(offering: Optional[Offering], offerings: Iterable[Offering]) -> list[str]:
    """所有服务项技能的并集（小写、去重、保持首次出现顺序）。"""
    skills: list[str] = []
    pool = list(offerings)
    if offering is not None:
        pool.append(offering)
    for o in pool:
        for s in o.skills:
            s = s.strip().casefold()
            if s and s not in skills:
                skills.append(s)
    return skills


def required_skills(skills: Iterable[str]) -> list[str]:
    """职位要求技能按集合处理：小写、去空、去重，保持首次出现顺序。"""
    unique: list[str] = []
    for raw in skills:
        skill = raw.strip().casefold()
        if skill and skill not in unique:
            unique.append(skill)
    return unique


def match_skills(required: Iterable[str], capabilities: list[str]) -> tuple[list[str], list[str]]:
    """
    要求技能分为 matched / missing。
    任一能力与要求互为子串即算覆盖（python 覆盖 python3，react native 覆盖 react）。
    """
    matched: list[str] = []
    missing: list[str] = []
    for skill in required_skills(required):
        if any(skill in cap or cap in skill for cap in capabilities):
            matched.append(skill)
        else:
            missing.append(skill)
    return matched, missing


def _budget_aligned(posting: Posting, offering: Offering) -> bool:
    rate = offering.average_rate
    engagement = posting.engagement
    if engagement == "hourly":
        return posting.max_budget >= HOURLY_BUDGET_RATIO * rate
    if engagement == "fixed":
        return posting.max_budget >= FIXED_BUDGET_RATIO * rate
    return False


def score_posting(
    posting: Posting,
    offering: Optional[Offering] = None,
    offerings: Iterable[Offering] = (),
) -> ScoreBreakdown:
    """对单条职位打分，返回置信度与明细。"""
    capabilities = capability_set(offering, offerings)
    matched, missing = match_skills(posting.skills, capabilities)
    required = len(matched) + len(missing)

    score = BASE_SCORE
    components: list[ScoreComponent] = []

    skill_points = _round_half_up(SKILL_POINTS * len(matched) / max(required, 1))
    if skill_points:
        score += skill_points
        components.append(ScoreComponent(label=f"Skills match ({len(matched)}/{required})", points=skill_points))

    client = posting.client
    if client.payment_verified:
        score += CLIENT_SIGNAL_POINTS
        components.append(ScoreComponent(label="Payment verified", points=CLIENT_SIGNAL_POINTS))
    if client.total_spent > HIGH_SPEND_THRESHOLD:
        score += CLIENT_SIGNAL_POINTS
        components.append(ScoreComponent(label="High-spending client", points=CLIENT_SIGNAL_POINTS))
    if client.rating is not None and client.rating >= HIGH_RATING_THRESHOLD:
        score += CLIENT_SIGNAL_POINTS
        components.append(ScoreComponent(label="Highly rated client", points=CLIENT_SIGNAL_POINTS))

    if offering is not None and _budget_aligned(posting, offering):
        score += BUDGET_POINTS
        components.append(ScoreComponent(label="Budget aligned with rate", points=BUDGET_POINTS))

    confidence = max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, score))
    return ScoreBreakdown(
        confidence=confidence,
        components=components,
        matched_skills=matched,
        missing_skills=missing,
    )


def bid_recommendation(confidence: int) -> str:
    """无生成式结果时的投标建议。"""
    if confidence >= 75:
        return "BID"
    if confidence >= 60:
        return "CONSIDER"
    return "REVIEW"


def complexity_for(posting: Posting) -> str:
    """按要求技能数估计复杂度。"""
    n = len(required_skills(posting.skills))
    if n > 5:
        return "High"
    if n > 2:
        return "Medium"
    return "Low"
