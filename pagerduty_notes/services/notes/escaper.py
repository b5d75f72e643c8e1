from __future__ import annotations

# 先处理反斜杠，避免把后面插入的转义序列再次转义
_ESCAPES = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
)


def escape_json_content(content: str | None) -> str:
    """
    转义文本，使其可以直接放进 JSON 双引号字符串里。
    """
    if not content:
        return ""
    escaped = str(content)
    for raw, replacement in _ESCAPES:
        escaped = escaped.replace(raw, replacement)
    # 其余控制字符在 JSON 字符串里不合法
    return "".join(
        f"\\u{ord(ch):04x}" if ord(ch) < 0x20 else ch for ch in escaped
    )
