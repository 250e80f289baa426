"""
置信度打分：加分顺序、截断、技能子串匹配与预算匹配规则。
"""
import pytest

from gigscout.jobs.schemas import ClientInfo, Offering, Posting
from gigscout.jobs.scoring import (
    bid_recommendation,
    capability_set,
    complexity_for,
    match_skills,
    score_posting,
)


def test_fully_matched_strong_posting_caps_at_95(strong_posting, web_offering):
    result = score_posting(strong_posting, web_offering, [web_offering])
    assert result.confidence == 95
    assert [c.points for c in result.components] == [25, 5, 5, 5, 10]
    labels = [c.label for c in result.components]
    assert labels[0].startswith("Skills match")
    assert labels[1:] == ["Payment verified", "High-spending client", "Highly rated client", "Budget aligned with rate"]
    assert result.matched_skills == ["python", "react"]
    assert result.missing_skills == []


def test_bare_posting_scores_base(bare_posting):
    result = score_posting(bare_posting)
    assert result.confidence == 50
    assert result.components == []


def test_partial_skill_coverage_rounds_half_up(web_offering):
    posting = Posting(title="x", skills=["Python", "Go"])
    result = score_posting(posting, None, [web_offering])
    # 25 * 1/2 = 12.5 -> 13
    assert result.components[0].points == 13
    assert result.confidence == 63
    assert result.missing_skills == ["go"]


def test_one_of_three_skills(web_offering):
    posting = Posting(title="x", skills=["python", "rust", "elixir"])
    result = score_posting(posting, None, [web_offering])
    assert result.components[0].points == 8
    assert result.components[0].label == "Skills match (1/3)"


def test_substring_match_both_directions():
    caps = ["react", "machine learning engineering"]
    matched, missing = match_skills(["React Native", "Machine Learning", "Rust"], caps)
    assert matched == ["react native", "machine learning"]
    assert missing == ["rust"]


def test_capability_set_unions_all_offerings(web_offering, design_offering):
    caps = capability_set(design_offering, [web_offering, design_offering])
    assert caps == ["python", "react", "node.js", "figma", "ui/ux"]


def test_skills_from_other_offerings_count(web_offering, design_offering):
    posting = Posting(title="x", skills=["figma", "react"])
    result = score_posting(posting, design_offering, [web_offering, design_offering])
    assert result.matched_skills == ["figma", "react"]


def test_client_signal_thresholds():
    posting = Posting(
        title="x",
        client=ClientInfo(payment_verified=False, total_spent=10000, rating=4.49),
    )
    # 恰好 10000 不算高消费，4.49 不够高评分
    assert score_posting(posting).components == []
    posting = Posting(title="x", client=ClientInfo(total_spent=10000.01, rating=4.5))
    assert [c.label for c in score_posting(posting).components] == ["High-spending client", "Highly rated client"]


@pytest.mark.parametrize(
    "kwargs,aligned",
    [
        ({"job_type": "hourly", "hourly_max": 78.5}, True),  # 0.8 * 97.5 = 78
        ({"job_type": "hourly", "hourly_max": 77.9}, False),
        ({"hourly_min": 80}, True),                           # 仅下限且未标类型，按时薪处理
        ({"job_type": "fixed", "budget": 1462.5}, True),      # 15 * 97.5
        ({"job_type": "fixed", "budget": 1400}, False),
        ({"budget": 5000}, True),                             # 仅固定预算，按固定价处理
        ({}, False),
    ],
)
def test_budget_alignment(kwargs, aligned, web_offering):
    posting = Posting(title="x", **kwargs)
    result = score_posting(posting, web_offering, [web_offering])
    has_budget_line = any(c.label == "Budget aligned with rate" for c in result.components)
    assert has_budget_line is aligned


def test_budget_requires_primary_offering(web_offering):
    posting = Posting(title="x", job_type="fixed", budget=100000)
    result = score_posting(posting, None, [web_offering])
    assert result.confidence == 50


def test_score_is_deterministic(strong_posting, web_offering):
    a = score_posting(strong_posting, web_offering, [web_offering])
    b = score_posting(strong_posting, web_offering, [web_offering])
    assert a == b


def test_breakdown_lines(strong_posting, web_offering):
    lines = score_posting(strong_posting, web_offering, [web_offering]).lines()
    assert lines[0] == "Skills match (2/2): +25"
    assert lines[-1] == "Budget aligned with rate: +10"


@pytest.mark.parametrize("confidence,expected", [(95, "BID"), (75, "BID"), (74, "CONSIDER"), (60, "CONSIDER"), (59, "REVIEW"), (20, "REVIEW")])
def test_bid_recommendation(confidence, expected):
    assert bid_recommendation(confidence) == expected


@pytest.mark.parametrize("n,expected", [(0, "Low"), (2, "Low"), (3, "Medium"), (5, "Medium"), (6, "High")])
def test_complexity_for(n, expected):
    posting = Posting(title="x", skills=[f"skill{i}" for i in range(n)])
    assert complexity_for(posting) == expected


def test_duplicate_required_skills_count_once():
    posting = Posting(title="API", skills=["Python", "python", " go "])
    result = score_posting(posting, None, [Offering(name="Backend", skills=["python"])])
    assert result.matched_skills == ["python"]
    assert result.missing_skills == ["go"]
    assert result.components[0].label == "Skills match (1/2)"
    assert result.components[0].points == 13


def test_complexity_ignores_duplicate_skills():
    posting = Posting(title="x", skills=["React", "react", "REACT", "Python", "python", "Go"])
    assert complexity_for(posting) == "Medium"
