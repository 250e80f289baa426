"""
提案生成的模型调用：经 LiteLLM 走任意平台，换模型只改 GIGSCOUT_DEFAULT_MODEL。

凭据（OPENAI_API_KEY、ANTHROPIC_API_KEY 等）由 LiteLLM 按模型前缀自动读取；
是否具备凭据由 config.has_llm_key 判断，本模块不做检查。
"""
from __future__ import annotations

from typing import Any

from gigscout.core.config import get_default_model
from gigscout.core.log import get_logger

log = get_logger(__name__)


def ask_ai(prompt: str, model: str | None = None, system: str | None = None, **kwargs: Any) -> str:
    """单轮调用，返回去掉首尾空白的回复正文；后端异常原样抛出，由调用方决定回退。"""
    from litellm import completion

    model = model or get_default_model()
    messages = [{"role": "user", "content": prompt}]
    if system:
        messages.insert(0, {"role": "system", "content": system})
    log.debug("Calling %s with %d messages", model, len(messages))
    resp = completion(model=model, messages=messages, **kwargs)
    return (resp.choices[0].message.content or "").strip()
