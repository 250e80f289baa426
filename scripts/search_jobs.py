#!/usr/bin/env python3
"""
命令行：按关键词拉取 Upwork 职位并按置信度排序打印，可选对第一条生成提案。

用法:
  uv run python scripts/search_jobs.py "react dashboard" --skills Python,React --rate 60-110
  uv run python scripts/search_jobs.py shopify --source mock --propose
"""
import argparse
import asyncio
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from gigscout.core.errors import GigScoutError  # noqa: E402
from gigscout.jobs.schemas import Offering  # noqa: E402
from gigscout.jobs.scoring import score_posting  # noqa: E402
from gigscout.jobs.sources import get_job_source  # noqa: E402
from gigscout.proposals import ProposalSynthesizer  # noqa: E402


def _parse_rate(text: str) -> tuple[float, float]:
    lo, _, hi = text.partition("-")
    return float(lo), float(hi or lo)


def main():
    parser = argparse.ArgumentParser(description="Search Upwork jobs and rank them by confidence")
    parser.add_argument("keyword")
    parser.add_argument("--limit", type=int, default=10)
    parser.add_argument("--source", default=None, help="apify_upwork | mock")
    parser.add_argument("--skills", default="", help="逗号分隔的服务技能")
    parser.add_argument("--rate", default="75-120", help="时薪区间，如 60-110")
    parser.add_argument("--propose", action="store_true", help="对置信度最高的职位生成提案")
    args = parser.parse_args()

    rate_min, rate_max = _parse_rate(args.rate)
    offering = Offering(
        name="CLI offering",
        skills=[s.strip() for s in args.skills.split(",") if s.strip()],
        rate_min=rate_min,
        rate_max=rate_max,
    )

    try:
        postings = asyncio.run(get_job_source(args.source).search(args.keyword, limit=args.limit))
    except GigScoutError as e:
        print(f"拉取失败: {e}")
        sys.exit(1)

    ranked = sorted(
        ((score_posting(p, offering, [offering]), p) for p in postings),
        key=lambda pair: pair[0].confidence,
        reverse=True,
    )
    for breakdown, posting in ranked:
        print(f"[{breakdown.confidence:>2}%] {posting.title}  {posting.url or ''}")
        for line in breakdown.lines():
            print(f"       {line}")

    if args.propose and ranked:
        breakdown, posting = ranked[0]
        try:
            result = ProposalSynthesizer().synthesize(posting, offering, [offering], None, breakdown)
        except GigScoutError as e:
            print(f"\n提案生成不可用: {e}")
            sys.exit(1)
        print(f"\n=== 提案（{result.source}）: {posting.title} ===\n")
        print(result.proposal_text)
        if result.warning:
            print(f"\n(warning: {result.warning})")


if __name__ == "__main__":
    main()
