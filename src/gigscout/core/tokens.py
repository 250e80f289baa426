"""
tiktoken：提案 prompt 发送前计数，便于日志里追踪单次调用的输入规模。
"""
from __future__ import annotations

from typing import Optional

# OpenAI 兼容 API 多用 cl100k_base；其它厂商按 cl100k_base 近似
_MODEL_ENCODING = {
    "gpt-4o": "o200k_base",
    "gpt-4o-mini": "o200k_base",
    "gpt-4": "cl100k_base",
    "gpt-3.5-turbo": "cl100k_base",
}
_DEFAULT_ENCODING = "cl100k_base"


def _get_encoding_for_model(model_name: Optional[str] = None) -> "tiktoken.Encoding | None":
    """根据模型名取编码；编码表加载失败（如离线）时返回 None。"""
    import tiktoken

    name = (model_name or "").strip().lower().split("/")[-1]
    enc_name = _DEFAULT_ENCODING
    # 先匹配更长的键，避免 gpt-4o 被 gpt-4 截胡
    for key in sorted(_MODEL_ENCODING, key=len, reverse=True):
        if name.startswith(key):
            enc_name = _MODEL_ENCODING[key]
            break
    try:
        return tiktoken.get_encoding(enc_name)
    except Exception:
        return None


def count_tokens(text: str, model_name: Optional[str] = None) -> int:
    """
    计算文本 token 数。
    若 tiktoken 编码表不可用，回退为约 len(text)//4 的近似值（英文文本的常见比例）。
    """
    if not text:
        return 0
    enc = _get_encoding_for_model(model_name)
    if enc is not None:
        return len(enc.encode(text))
    return max(1, len(text) // 4)
