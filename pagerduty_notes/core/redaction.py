"""
日志脱敏工具
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping

MASK = "***"


def mask_secret(value: str | None) -> str:
    """
    打码显示（前4后4），过短的值整体隐藏。
    """
    if not value:
        return "<unset>"
    return f"{value[:4]}...{value[-4:]}" if len(value) > 8 else MASK


def redact_options(
    options: Mapping[str, Any], secure_keys: Iterable[str]
) -> dict[str, Any]:
    secure = set(secure_keys)
    return {k: (MASK if k in secure else v) for k, v in options.items()}
