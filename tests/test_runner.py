"""
Apify 远程任务执行：提交 → 轮询 → 读取数据集的状态机。

用假 Apify 客户端记录调用次数；sleep 打桩，不真实等待。
"""
import asyncio
from types import SimpleNamespace

import pytest

from gigscout.core.errors import ConfigurationError, JobTimeout, UpstreamError, UpstreamJobFailed
from gigscout.jobs.runner import (
    JobFailed,
    JobStatus,
    JobSucceeded,
    JobTimedOut,
    RemoteJobRunner,
    get_runner,
    map_status,
)


class FakeApify:
    """模拟 ApifyClientAsync：statuses 按轮询顺序返回，最后一个重复。"""

    def __init__(self, statuses, items=None, submit_error=None, fetch_error=None, status_error=None):
        self.statuses = list(statuses)
        self.items = items if items is not None else [{"title": "Job A"}, {"title": "Job B"}]
        self.submit_error = submit_error
        self.fetch_error = fetch_error
        self.status_error = status_error
        self.submit_calls = 0
        self.status_calls = 0
        self.fetch_calls = 0
        self.run_inputs = []
        self.fetch_limits = []

    def actor(self, actor_id):
        fake = self

        class _Actor:
            async def start(self, run_input=None):
                fake.submit_calls += 1
                fake.run_inputs.append(run_input)
                if fake.submit_error:
                    raise fake.submit_error
                return {"id": "run-1", "status": "READY", "defaultDatasetId": "ds-1"}

        return _Actor()

    def run(self, run_id):
        fake = self

        class _Run:
            async def get(self):
                idx = min(fake.status_calls, len(fake.statuses) - 1)
                fake.status_calls += 1
                if fake.status_error:
                    raise fake.status_error
                return {"id": run_id, "status": fake.statuses[idx], "defaultDatasetId": "ds-1"}

        return _Run()

    def dataset(self, dataset_id):
        fake = self

        class _Dataset:
            async def list_items(self, limit=None):
                fake.fetch_calls += 1
                fake.fetch_limits.append(limit)
                if fake.fetch_error:
                    raise fake.fetch_error
                return SimpleNamespace(items=list(fake.items))

        return _Dataset()


def _runner(client, **kwargs):
    sleeps = []

    async def fake_sleep(seconds):
        sleeps.append(seconds)

    runner = RemoteJobRunner(api_key="apify-test", actor_id="actor/upwork", client=client, sleep=fake_sleep, **kwargs)
    return runner, sleeps


def test_succeeds_on_first_poll():
    client = FakeApify(["SUCCEEDED"])
    runner, sleeps = _runner(client)
    items = asyncio.run(runner.run({"searchQuery": "python"}, limit=10))
    assert items == [{"title": "Job A"}, {"title": "Job B"}]
    assert (client.submit_calls, client.status_calls, client.fetch_calls) == (1, 1, 1)
    assert client.run_inputs == [{"searchQuery": "python"}]
    assert client.fetch_limits == [10]
    # 先等待再查询
    assert sleeps == [2.0]


def test_pending_then_succeeded():
    client = FakeApify(["READY", "RUNNING", "RUNNING", "SUCCEEDED"])
    runner, sleeps = _runner(client)
    outcome = asyncio.run(runner.execute({"searchQuery": "react"}))
    assert isinstance(outcome, JobSucceeded)
    assert outcome.job.status is JobStatus.SUCCEEDED
    assert outcome.job.result_handle == "ds-1"
    assert client.status_calls == 4
    assert len(sleeps) == 4


def test_always_pending_times_out_after_30_polls():
    client = FakeApify(["RUNNING"])
    runner, sleeps = _runner(client)
    with pytest.raises(JobTimeout) as exc_info:
        asyncio.run(runner.run({"searchQuery": "python"}))
    assert client.status_calls == 30
    assert client.fetch_calls == 0
    assert exc_info.value.attempts == 30
    assert len(sleeps) == 30


def test_timeout_outcome_is_tagged():
    client = FakeApify(["RUNNING"])
    runner, _ = _runner(client, max_polls=3)
    outcome = asyncio.run(runner.execute({}))
    assert isinstance(outcome, JobTimedOut)
    assert outcome.attempts == 3
    assert outcome.job.status is JobStatus.TIMED_OUT


@pytest.mark.parametrize("status", ["FAILED", "ABORTED", "TIMED-OUT"])
def test_failed_terminal_state_stops_polling(status):
    client = FakeApify([status])
    runner, _ = _runner(client)
    with pytest.raises(UpstreamJobFailed):
        asyncio.run(runner.run({"searchQuery": "python"}))
    assert client.status_calls == 1
    assert client.fetch_calls == 0


def test_failed_outcome_carries_reason():
    client = FakeApify(["RUNNING", "FAILED"])
    runner, _ = _runner(client)
    outcome = asyncio.run(runner.execute({}))
    assert isinstance(outcome, JobFailed)
    assert outcome.job.status is JobStatus.FAILED
    assert outcome.reason == "FAILED"


def test_missing_api_key_is_configuration_error():
    client = FakeApify(["SUCCEEDED"])
    runner = RemoteJobRunner(api_key="", actor_id="actor/upwork", client=client)
    with pytest.raises(ConfigurationError):
        asyncio.run(runner.run({}))
    assert client.submit_calls == 0


def test_submit_error_is_upstream_error_without_retry():
    client = FakeApify(["SUCCEEDED"], submit_error=RuntimeError("403 Forbidden"))
    runner, _ = _runner(client)
    with pytest.raises(UpstreamError, match="403"):
        asyncio.run(runner.run({}))
    assert client.submit_calls == 1
    assert client.status_calls == 0


def test_fetch_error_is_upstream_error():
    client = FakeApify(["SUCCEEDED"], fetch_error=RuntimeError("dataset gone"))
    runner, _ = _runner(client)
    with pytest.raises(UpstreamError, match="dataset gone"):
        asyncio.run(runner.run({}))
    assert client.fetch_calls == 1


def test_status_query_error_is_upstream_error():
    client = FakeApify(["RUNNING"], status_error=RuntimeError("502 Bad Gateway"))
    runner, _ = _runner(client)
    with pytest.raises(UpstreamError):
        asyncio.run(runner.run({}))
    assert client.status_calls == 1


def test_each_run_submits_a_fresh_job():
    client = FakeApify(["SUCCEEDED"])
    runner, _ = _runner(client)
    asyncio.run(runner.run({"searchQuery": "a"}))
    asyncio.run(runner.run({"searchQuery": "b"}))
    assert client.submit_calls == 2


def test_status_mapping():
    assert map_status("READY") is JobStatus.PENDING
    assert map_status("RUNNING") is JobStatus.PENDING
    assert map_status("ABORTING") is JobStatus.PENDING
    assert map_status("succeeded") is JobStatus.SUCCEEDED
    assert map_status("TIMED-OUT") is JobStatus.TIMED_OUT
    assert map_status(None) is JobStatus.PENDING
    assert not JobStatus.PENDING.is_terminal
    assert JobStatus.ABORTED.is_terminal


@pytest.mark.parametrize("raw", ["nan", "inf", "-inf", "lots"])
def test_get_runner_ignores_unusable_numbers(monkeypatch, raw):
    monkeypatch.setenv("GIGSCOUT_MAX_POLLS", raw)
    monkeypatch.setenv("GIGSCOUT_POLL_INTERVAL", raw)
    runner = get_runner()
    assert runner.max_polls == 30
    assert runner.poll_interval == 2.0
