"""
错误分类：远程任务与提案生成在 API 边界统一转成结构化错误响应。

MalformedOutput 仅在提案生成内部使用，总是被回退逻辑吸收，不会传到调用方。
"""


class GigScoutError(Exception):
    """所有可预期错误的基类；API 层按子类映射 HTTP 状态码。"""

    status_code = 500


class ConfigurationError(GigScoutError):
    """缺少后端凭据：本次调用直接失败，不重试。"""

    status_code = 503


class UpstreamError(GigScoutError):
    """远程调用返回非成功状态：本次调用直接失败，不重试。"""

    status_code = 502


class UpstreamJobFailed(UpstreamError):
    """远程任务进入 FAILED / ABORTED / TIMED-OUT 终态。"""

    def __init__(self, job_id: str, status: str):
        super().__init__(f"Remote job {job_id} finished with status {status}")
        self.job_id = job_id
        self.status = status


class JobTimeout(UpstreamError):
    """轮询次数用尽仍未成功。"""

    status_code = 504

    def __init__(self, job_id: str, attempts: int):
        super().__init__(f"Remote job {job_id} did not finish after {attempts} polls")
        self.job_id = job_id
        self.attempts = attempts


class MalformedOutput(GigScoutError):
    """生成式后端输出无法解析为 JSON 对象。"""
