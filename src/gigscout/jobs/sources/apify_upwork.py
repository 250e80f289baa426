"""
Apify Upwork 职位源：通过 Apify 上的 Upwork 爬虫 actor 拉取职位。
需配置 APIFY_API_KEY；可选 APIFY_UPWORK_ACTOR_ID 指定 actor。

不同 actor 的输出字段命名不一，_posting_from_item 兼容常见写法（驼峰、嵌套 client/budget 对象、
金额字符串如 "$10K+"）；无法解析的条目跳过并记 warning。
"""
from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import ValidationError

from gigscout.core.log import get_logger
from gigscout.jobs.runner import RemoteJobRunner, get_runner
from gigscout.jobs.schemas import ClientInfo, Posting
from .base import JobSource

log = get_logger(__name__)

_MONEY_RE = re.compile(r"(\d+(?:\.\d+)?)\s*([kKmM]?)")


def _first(d: dict[str, Any], *keys: str) -> Any:
    for k in keys:
        v = d.get(k)
        if v not in (None, "", [], {}):
            return v
    return None


def _money(value: Any) -> Optional[float]:
    """金额兼容数字与 "$1,500" / "$10K+" / "1.2M" 等字符串；无法识别返回 None。"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, dict):
        return _money(_first(value, "amount", "value", "rawValue"))
    m = _MONEY_RE.search(str(value).replace(",", ""))
    if not m:
        return None
    amount = float(m.group(1))
    suffix = m.group(2).lower()
    if suffix == "k":
        amount *= 1_000
    elif suffix == "m":
        amount *= 1_000_000
    return amount


def _rating(value: Any) -> Optional[float]:
    r = _money(value)
    if r is None:
        return None
    return min(max(r, 0.0), 5.0)


def _percent(value: Any) -> Optional[float]:
    p = _money(value)
    if p is None:
        return None
    return min(max(p, 0.0), 100.0)


def _skills(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [s.strip() for s in value.split(",") if s.strip()]
    if not isinstance(value, (list, tuple)):
        return []
    skills: list[str] = []
    for s in value:
        if isinstance(s, dict):
            s = _first(s, "prettyName", "name", "label")
        if s and str(s).strip():
            skills.append(str(s).strip())
    return skills


def _job_type(value: Any) -> Optional[str]:
    t = str(value or "").lower()
    if "hour" in t:
        return "hourly"
    if "fixed" in t:
        return "fixed"
    return None


def _verified(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "verified", "yes", "1")
    return bool(value)


def _client_from_item(item: dict[str, Any]) -> tuple[ClientInfo, Optional[str]]:
    client = item.get("client") if isinstance(item.get("client"), dict) else {}
    location = client.get("location") if isinstance(client.get("location"), dict) else {}
    info = ClientInfo(
        payment_verified=_verified(
            _first(client, "paymentVerified", "isPaymentVerified", "paymentVerificationStatus")
            or _first(item, "clientPaymentVerified", "paymentVerified")
        ),
        total_spent=_money(_first(client, "totalSpent", "spent") or _first(item, "clientTotalSpent", "clientSpent")) or 0.0,
        rating=_rating(_first(client, "rating", "feedback", "totalFeedback") or _first(item, "clientRating", "clientFeedback")),
        hire_rate=_percent(_first(client, "hireRate") or _first(item, "clientHireRate")),
    )
    country = _first(location, "country") or _first(client, "country") or _first(item, "clientCountry", "country")
    return info, country


def _posting_from_item(item: dict[str, Any]) -> Posting:
    budget = item.get("budget") if isinstance(item.get("budget"), dict) else {}
    hourly = item.get("hourlyBudget") if isinstance(item.get("hourlyBudget"), dict) else {}
    job_type = _job_type(_first(item, "jobType", "type", "engagementType", "budgetType") or _first(budget, "type"))
    client, country = _client_from_item(item)
    url = _first(item, "url", "link", "jobUrl")
    return Posting(
        id=str(_first(item, "id", "uid", "ciphertext") or url or "") or None,
        title=str(_first(item, "title", "jobTitle") or "Untitled job"),
        description=str(_first(item, "description", "descriptionText", "snippet") or ""),
        url=url,
        skills=_skills(_first(item, "skills", "tags", "attrs")),
        job_type=job_type,
        hourly_min=_money(_first(item, "hourlyMin", "hourlyRateMin") or _first(hourly, "min") or _first(budget, "hourlyMin", "min")),
        hourly_max=_money(_first(item, "hourlyMax", "hourlyRateMax") or _first(hourly, "max") or _first(budget, "hourlyMax", "max")),
        budget=_money(_first(item, "fixedBudget", "amount") or _first(budget, "amount", "fixed") or (item.get("budget") if not budget else None)),
        experience_level=_first(item, "experienceLevel", "tier", "contractorTier"),
        country=country,
        posted_at=_first(item, "postedAt", "publishedOn", "createdOn", "date"),
        client=client,
    )


def postings_from_items(items: list[dict[str, Any]]) -> list[Posting]:
    """批量转换 actor 输出，跳过无法解析的条目。"""
    jobs: list[Posting] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            jobs.append(_posting_from_item(item))
        except ValidationError as e:
            log.warning("Skipping unparseable posting %r: %s", item.get("title"), e.error_count())
        except (TypeError, ValueError) as e:
            log.warning("Skipping malformed posting %r: %s", item.get("title"), e)
    return jobs


class ApifyUpworkJobSource(JobSource):
    """从 Apify Upwork actor 拉取职位；凭据缺失时在调用时抛 ConfigurationError。"""

    def __init__(self, runner: RemoteJobRunner | None = None):
        self.runner = runner or get_runner()

    async def _fetch(self, run_input: dict[str, Any], limit: int) -> list[Posting]:
        items = await self.runner.run(run_input, limit=limit)
        jobs = postings_from_items(items)
        log.info("Actor returned %d items, %d postings", len(items), len(jobs))
        return jobs[:limit]

    async def search(self, keyword: str, limit: int = 20) -> list[Posting]:
        run_input = {"searchQuery": keyword, "maxItems": limit, "sort": "recency"}
        return await self._fetch(run_input, limit)

    async def category(self, category: str, limit: int = 20) -> list[Posting]:
        run_input = {"category": category, "maxItems": limit, "sort": "recency"}
        return await self._fetch(run_input, limit)
