#!/usr/bin/env python3
"""
本地验收：在进程内用 FastAPI TestClient 验证「健康检查 → 搜索（含缓存命中）→ 批量 → 打分 → 提案」是否跑通。
不依赖已启动的 uvicorn，职位源强制使用 mock；未配置 LLM Key 时提案接口返回 503 + 部分分析也算通过。

用法：uv run python scripts/verify_demo.py
结果会打印到终端，并写入项目根目录 verify_demo_result.txt。
"""
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))
os.environ["GIGSCOUT_JOB_SOURCE"] = "mock"

from fastapi.testclient import TestClient  # noqa: E402

from gigscout.api.app import app  # noqa: E402

client = TestClient(app)

OFFERING = {"name": "Web Development", "skills": ["Python", "React", "FastAPI"], "rate_min": 60, "rate_max": 110}


def main():
    out_path = ROOT / "verify_demo_result.txt"
    lines = []

    def log(msg: str):
        lines.append(msg)
        print(msg)

    ok = 0
    fail = 0

    def check(name: str, passed: bool, detail: str = ""):
        nonlocal ok, fail
        if passed:
            ok += 1
            log(f"   OK: {name} {detail}".rstrip())
        else:
            fail += 1
            log(f"   失败: {name} {detail}".rstrip())

    log("1. GET /health ...")
    r = client.get("/health")
    check("health", r.status_code == 200 and r.json().get("service") == "gigscout", str(r.json()))

    log("2. POST /v1/cache/clear + GET /v1/jobs/search 两次 ...")
    client.post("/v1/cache/clear")
    first = client.get("/v1/jobs/search", params={"keyword": "react"}).json()
    second = client.get("/v1/jobs/search", params={"keyword": "React"}).json()
    check("search", first.get("success") is True and first.get("count", 0) > 0, f"count={first.get('count')}")
    check("cache hit", second.get("cached") is True)

    log("3. POST /v1/jobs/batch ...")
    r = client.post("/v1/jobs/batch", json={"keywords": ["python", "shopify", "wordpress"]})
    results = r.json().get("results") or []
    check("batch", r.status_code == 200 and len(results) == 3, f"results={len(results)}")

    job = (first.get("jobs") or [{}])[0]

    log("4. POST /v1/jobs/score ...")
    r = client.post("/v1/jobs/score", json={"job": job, "offering": OFFERING, "offerings": [OFFERING]})
    breakdown = r.json().get("breakdown") or {}
    check("score", r.status_code == 200 and 20 <= breakdown.get("confidence", 0) <= 95, f"confidence={breakdown.get('confidence')}")
    for c in breakdown.get("components") or []:
        log(f"      {c['label']}: +{c['points']}")

    log("5. POST /v1/proposals/generate ...")
    r = client.post("/v1/proposals/generate", json={"job": job, "offering": OFFERING, "offerings": [OFFERING]})
    data = r.json()
    if r.status_code == 503:
        check("proposal（未配置 LLM Key，仅部分分析）", "analysis" in data, f"confidence={data['analysis'].get('confidence_score')}")
    else:
        check("proposal", r.status_code == 200 and bool(data.get("proposal")), f"source={data.get('source')}")
        if data.get("warning"):
            log(f"      warning: {data['warning']}")

    log("")
    log(f"--- 合计: 通过 {ok} 项, 失败 {fail} 项 ---")
    out_path.write_text("\n".join(lines), encoding="utf-8")
    sys.exit(1 if fail else 0)


if __name__ == "__main__":
    main()
