"""
Apify 远程任务执行：提交 actor run → 固定间隔轮询状态 → 成功后读取数据集。

上游没有推送通知，只能轮询；轮询次数有硬上限（默认 30 次 × 2 秒），调用方总能拿到终态。
sleep 可注入，测试时不必真的等待。
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union

from gigscout.core.config import (
    apify_api_key,
    max_poll_attempts,
    poll_interval_seconds,
    upwork_actor_id,
)
from gigscout.core.errors import ConfigurationError, JobTimeout, UpstreamError, UpstreamJobFailed
from gigscout.core.log import get_logger

log = get_logger(__name__)


class JobStatus(str, Enum):
    PENDING = "PENDING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    ABORTED = "ABORTED"
    TIMED_OUT = "TIMED_OUT"

    @property
    def is_terminal(self) -> bool:
        return self is not JobStatus.PENDING


# Apify run 状态 → 本地状态；未知状态按进行中处理
_APIFY_STATUS = {
    "READY": JobStatus.PENDING,
    "RUNNING": JobStatus.PENDING,
    "TIMING-OUT": JobStatus.PENDING,
    "ABORTING": JobStatus.PENDING,
    "SUCCEEDED": JobStatus.SUCCEEDED,
    "FAILED": JobStatus.FAILED,
    "ABORTED": JobStatus.ABORTED,
    "TIMED-OUT": JobStatus.TIMED_OUT,
}


def map_status(raw: Optional[str]) -> JobStatus:
    return _APIFY_STATUS.get((raw or "").upper(), JobStatus.PENDING)


@dataclass
class RemoteJob:
    """一次提交对应一个远程任务；只由轮询循环修改。"""
    id: str
    status: JobStatus = JobStatus.PENDING
    result_handle: Optional[str] = None


@dataclass
class JobSucceeded:
    job: RemoteJob
    items: list[dict[str, Any]]


@dataclass
class JobFailed:
    job: RemoteJob
    reason: str


@dataclass
class JobTimedOut:
    job: RemoteJob
    attempts: int


JobOutcome = Union[JobSucceeded, JobFailed, JobTimedOut]


class RemoteJobRunner:
    """
    执行单个 Apify actor 任务。
    client 为 ApifyClientAsync 兼容对象；不传则在首次调用时按 api_key 构造。
    """

    def __init__(
        self,
        api_key: str,
        actor_id: str,
        client: Any = None,
        poll_interval: float = 2.0,
        max_polls: int = 30,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.api_key = (api_key or "").strip()
        self.actor_id = actor_id
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self._client = client
        self._sleep = sleep

    def _get_client(self) -> Any:
        if not self.api_key:
            raise ConfigurationError("APIFY_API_KEY is not configured")
        if self._client is None:
            from apify_client import ApifyClientAsync

            self._client = ApifyClientAsync(self.api_key)
        return self._client

    async def _submit(self, client: Any, run_input: dict[str, Any]) -> RemoteJob:
        try:
            run = await client.actor(self.actor_id).start(run_input=run_input)
        except Exception as e:
            raise UpstreamError(f"Actor submission failed: {e}") from e
        if not run or not run.get("id"):
            raise UpstreamError("Actor submission returned no run id")
        job = RemoteJob(id=run["id"], result_handle=run.get("defaultDatasetId"))
        log.info("Submitted actor %s run %s", self.actor_id, job.id)
        return job

    async def _poll(self, client: Any, job: RemoteJob) -> JobOutcome | None:
        """轮询直到终态；成功时返回 None，由调用方继续读取数据集。"""
        for attempt in range(1, self.max_polls + 1):
            await self._sleep(self.poll_interval)
            try:
                run = await client.run(job.id).get()
            except Exception as e:
                raise UpstreamError(f"Status query for run {job.id} failed: {e}") from e
            if not run:
                raise UpstreamError(f"Run {job.id} not found")
            job.status = map_status(run.get("status"))
            job.result_handle = run.get("defaultDatasetId") or job.result_handle
            log.debug("Run %s poll %d/%d: %s", job.id, attempt, self.max_polls, run.get("status"))
            if job.status is JobStatus.SUCCEEDED:
                log.info("Run %s succeeded after %d polls", job.id, attempt)
                return None
            if job.status.is_terminal:
                log.warning("Run %s ended with %s", job.id, job.status.value)
                return JobFailed(job=job, reason=str(run.get("statusMessage") or job.status.value))
        job.status = JobStatus.TIMED_OUT
        log.warning("Run %s still pending after %d polls", job.id, self.max_polls)
        return JobTimedOut(job=job, attempts=self.max_polls)

    async def _fetch(self, client: Any, job: RemoteJob, limit: Optional[int]) -> list[dict[str, Any]]:
        if not job.result_handle:
            raise UpstreamError(f"Run {job.id} has no result dataset")
        try:
            page = await client.dataset(job.result_handle).list_items(limit=limit)
        except Exception as e:
            raise UpstreamError(f"Dataset fetch for run {job.id} failed: {e}") from e
        return list(page.items)

    async def execute(self, run_input: dict[str, Any], limit: Optional[int] = None) -> JobOutcome:
        """提交并等待任务；返回带标签的结果，不因失败/超时抛错。"""
        client = self._get_client()
        job = await self._submit(client, run_input)
        outcome = await self._poll(client, job)
        if outcome is not None:
            return outcome
        items = await self._fetch(client, job, limit)
        return JobSucceeded(job=job, items=items)

    async def run(self, run_input: dict[str, Any], limit: Optional[int] = None) -> list[dict[str, Any]]:
        """提交并等待任务，返回数据集条目；失败抛 UpstreamJobFailed，超时抛 JobTimeout。"""
        outcome = await self.execute(run_input, limit=limit)
        if isinstance(outcome, JobFailed):
            raise UpstreamJobFailed(outcome.job.id, outcome.job.status.value)
        if isinstance(outcome, JobTimedOut):
            raise JobTimeout(outcome.job.id, outcome.attempts)
        return outcome.items


def get_runner(actor_id: str | None = None) -> RemoteJobRunner:
    """按环境变量构造 runner；凭据缺失在 run 时才报错。"""
    return RemoteJobRunner(
        api_key=apify_api_key(),
        actor_id=actor_id or upwork_actor_id(),
        poll_interval=poll_interval_seconds(),
        max_polls=max_poll_attempts(),
    )
