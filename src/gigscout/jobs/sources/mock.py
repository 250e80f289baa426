"""Mock 职位源：返回固定示例职位，无需 Apify，用于本地演示与测试。"""
from gigscout.jobs.schemas import ClientInfo, Posting
from .base import JobSource

_JOBS = [
    Posting(
        id="mock-1",
        title="Build a React dashboard with Python API",
        description="Looking for a developer to build an analytics dashboard in React backed by a FastAPI service.",
        url="https://www.upwork.com/jobs/mock-1",
        skills=["React", "Python", "FastAPI"],
        job_type="hourly",
        hourly_min=40,
        hourly_max=90,
        experience_level="Intermediate",
        country="United States",
        client=ClientInfo(payment_verified=True, total_spent=25000, rating=4.9, hire_rate=80),
    ),
    Posting(
        id="mock-2",
        title="Shopify store migration",
        description="Migrate an existing WooCommerce store to Shopify, including products and customer data.",
        url="https://www.upwork.com/jobs/mock-2",
        skills=["Shopify", "WooCommerce", "Data Migration"],
        job_type="fixed",
        budget=1500,
        experience_level="Intermediate",
        country="Canada",
        client=ClientInfo(payment_verified=True, total_spent=3200, rating=4.6, hire_rate=55),
    ),
    Posting(
        id="mock-3",
        title="Machine learning model for churn prediction",
        description="Train and deploy a churn model on tabular data; experience with scikit-learn and AWS required.",
        url="https://www.upwork.com/jobs/mock-3",
        skills=["Python", "Machine Learning", "scikit-learn", "AWS", "SQL", "Docker"],
        job_type="fixed",
        budget=4000,
        experience_level="Expert",
        country="United Kingdom",
        client=ClientInfo(payment_verified=False, total_spent=0),
    ),
    Posting(
        id="mock-4",
        title="WordPress landing page fixes",
        description="Small CSS and layout fixes on an Elementor landing page.",
        url="https://www.upwork.com/jobs/mock-4",
        skills=["WordPress", "CSS"],
        job_type="hourly",
        hourly_min=15,
        hourly_max=25,
        experience_level="Entry",
        country="Australia",
        client=ClientInfo(payment_verified=True, total_spent=800, rating=4.2, hire_rate=40),
    ),
]


class MockJobSource(JobSource):
    """内置 4 条示例职位；关键词命中标题/描述/技能时优先返回，否则返回全部。"""

    async def search(self, keyword: str, limit: int = 20) -> list[Posting]:
        kw = keyword.strip().casefold()
        hits = [
            j for j in _JOBS
            if kw in j.title.casefold()
            or kw in j.description.casefold()
            or any(kw in s.casefold() for s in j.skills)
        ]
        return (hits or list(_JOBS))[:limit]

    async def category(self, category: str, limit: int = 20) -> list[Posting]:
        return list(_JOBS)[:limit]
