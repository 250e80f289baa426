"""根据配置返回当前使用的职位源。"""
from gigscout.core.config import job_source_id
from gigscout.jobs.sources.base import JobSource
from gigscout.jobs.sources.mock import MockJobSource


def get_job_source(source_id: str | None = None) -> JobSource:
    """
    返回职位源实例。
    source_id 可选：apify_upwork（默认）、mock。
    不传则从环境变量 GIGSCOUT_JOB_SOURCE 读取。
    """
    sid = (source_id or job_source_id()).strip().lower()
    if sid == "mock":
        return MockJobSource()
    from gigscout.jobs.sources.apify_upwork import ApifyUpworkJobSource
    return ApifyUpworkJobSource()
