"""
提案生成：估算 → 构造 prompt → 调生成式后端 → 解析/修复输出。

生成式后端对结构不可信（可能输出散文、代码块包裹或漏字段），但内容质量可信。
缺少后端凭据时抛 ConfigurationError；后端调用失败或输出无法解析时不向外抛错，
返回确定性回退结果并在 warning 中说明。
"""
from __future__ import annotations

from typing import Callable, Iterable, Optional

from gigscout.core.config import get_default_model, has_llm_key
from gigscout.core.errors import ConfigurationError, MalformedOutput
from gigscout.core.llm import ask_ai
from gigscout.core.log import get_logger
from gigscout.core.tokens import count_tokens
from gigscout.jobs.schemas import Offering, Posting, ScoreBreakdown
from gigscout.proposals.prompt import SYSTEM_PROMPT, build_prompt
from gigscout.proposals.repair import (
    PLACEHOLDER_PROPOSAL,
    build_fallback,
    inject_breakdown,
    parse_backend_output,
)
from gigscout.proposals.schemas import Estimates, ProposalResult

log = get_logger(__name__)

DEFAULT_HOURS = 20.0
DEFAULT_RATE = 100.0
DEFAULT_RATE_MIN = 75.0
DEFAULT_RATE_MAX = 120.0


def compute_estimates(offering: Optional[Offering], estimated_hours: Optional[float] = None) -> Estimates:
    """与后端无关的估算：工时（默认 20）、建议时薪（区间中点，默认 100）、费用区间。"""
    hours = float(estimated_hours) if estimated_hours else DEFAULT_HOURS
    if offering is not None:
        rate = offering.average_rate
        rate_min, rate_max = offering.rate_min, offering.rate_max
    else:
        rate = DEFAULT_RATE
        rate_min, rate_max = DEFAULT_RATE_MIN, DEFAULT_RATE_MAX
    return Estimates(
        estimated_hours=hours,
        recommended_rate=rate,
        cost_min=hours * rate_min,
        cost_max=hours * rate_max,
    )


def fallback_result(
    posting: Posting,
    breakdown: ScoreBreakdown,
    estimates: Estimates,
    raw_text: Optional[str] = None,
    warning: Optional[str] = None,
) -> ProposalResult:
    proposal, analysis = build_fallback(posting, breakdown, estimates, raw_text=raw_text)
    return ProposalResult(proposal_text=proposal, analysis=analysis, source="fallback", warning=warning)


class ProposalSynthesizer:
    """
    ask: prompt -> 回复正文，默认 LiteLLM ask_ai；测试时注入假实现。
    key_present: 判断后端凭据是否存在。
    """

    def __init__(
        self,
        ask: Callable[..., str] = ask_ai,
        key_present: Callable[[], bool] = has_llm_key,
        model: Optional[str] = None,
    ):
        self._ask = ask
        self._key_present = key_present
        self.model = model

    def synthesize(
        self,
        posting: Posting,
        offering: Optional[Offering],
        offerings: Iterable[Offering],
        template: Optional[str],
        breakdown: ScoreBreakdown,
        estimated_hours: Optional[float] = None,
    ) -> ProposalResult:
        if not self._key_present():
            raise ConfigurationError("No generative backend API key is configured")

        estimates = compute_estimates(offering, estimated_hours)
        prompt = build_prompt(posting, offering, breakdown, estimates, template=template, offerings=offerings)
        model = self.model or get_default_model()
        log.info("Generating proposal for %r (%d prompt tokens)", posting.title, count_tokens(prompt, model))

        try:
            text = self._ask(prompt, model=model, system=SYSTEM_PROMPT)
        except Exception as e:
            log.warning("Generative backend failed for %r: %s", posting.title, e)
            return fallback_result(posting, breakdown, estimates, warning=f"Generative backend failed: {e}")

        try:
            analysis = parse_backend_output(text)
        except MalformedOutput as e:
            log.warning("Malformed backend output for %r, using fallback: %s", posting.title, e)
            return fallback_result(posting, breakdown, estimates, raw_text=text, warning=str(e))

        proposal = analysis.get("proposal")
        if not isinstance(proposal, str) or not proposal.strip():
            proposal = PLACEHOLDER_PROPOSAL
        return ProposalResult(
            proposal_text=proposal.strip(),
            analysis=inject_breakdown(analysis, breakdown),
            source="backend",
        )
