"""
提案生成：职位 + 打分明细 + 服务项 → 生成式后端 → 结构化提案（含确定性回退）。
"""
from .repair import build_fallback, parse_backend_output, strip_code_fence
from .schemas import Estimates, ProposalResult
from .synthesizer import ProposalSynthesizer, compute_estimates, fallback_result

__all__ = [
    "build_fallback",
    "parse_backend_output",
    "strip_code_fence",
    "Estimates",
    "ProposalResult",
    "ProposalSynthesizer",
    "compute_estimates",
    "fallback_result",
]
