"""
公共 fixture：Posting / Offering 样例；tiktoken 编码表需联网下载，单测里统一打桩。
"""
from unittest.mock import patch

import pytest

from gigscout.jobs.schemas import ClientInfo, Offering, Posting


@pytest.fixture(autouse=True)
def _no_tiktoken_download():
    with patch("gigscout.proposals.synthesizer.count_tokens", return_value=42):
        yield


@pytest.fixture
def web_offering() -> Offering:
    return Offering(name="Web Development", skills=["Python", "React", "Node.js"], rate_min=75, rate_max=120)


@pytest.fixture
def design_offering() -> Offering:
    return Offering(name="Design", skills=["Figma", "UI/UX"], rate_min=50, rate_max=80)


@pytest.fixture
def strong_posting() -> Posting:
    return Posting(
        id="job-1",
        title="React + Python dashboard",
        description="Build an internal dashboard.",
        skills=["python", "react"],
        job_type="hourly",
        hourly_min=60,
        hourly_max=100,
        client=ClientInfo(payment_verified=True, total_spent=20000, rating=4.8, hire_rate=70),
    )


@pytest.fixture
def bare_posting() -> Posting:
    return Posting(title="Something vague")
