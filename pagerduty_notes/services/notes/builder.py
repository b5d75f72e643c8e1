"""
Note 构建器：把一次执行事件格式化为 PagerDuty incident note 的纯文本。
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from pagerduty_notes.core.models import ExecutionEvent, NotifierConfig
from pagerduty_notes.core.triggers import START, normalize_trigger

UNKNOWN_JOB = "Unknown Job"
UNKNOWN_TIMESTAMP = "Unknown"
NO_URL = "No URL available"


def format_timestamp(value: Optional[datetime]) -> str:
    """
    渲染为默认的可读日期格式，如 "Mon Oct 18 11:43:00 UTC 2026"（统一按 UTC）。
    """
    if value is None:
        return UNKNOWN_TIMESTAMP
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%a %b %d %H:%M:%S %Z %Y")


def _job_full_name(event: ExecutionEvent) -> str:
    job = event.job
    name = (job.name if job else None) or UNKNOWN_JOB
    group = f"{job.group}/" if job and job.group else ""
    return f"{group}{name}"


def build_note_lines(
    trigger: str,
    event: ExecutionEvent,
    config: NotifierConfig | None = None,
) -> List[str]:
    """
    按固定顺序构建 note 行。空行是输出格式的一部分，不能合并。

    Args:
        trigger: start / success / failure（其他值按大写原样显示）
        event: 已校验的执行事件
        config: 当前不参与内容生成，保留参数便于扩展

    Returns:
        note 的行列表
    """
    _ = config
    status = normalize_trigger(trigger)
    is_start = trigger == START

    lines = [f'Job "{_job_full_name(event)}" has {status.past_tense}']

    description = event.job.description if event.job else None
    if is_start and description:
        lines.append(f'Job Description: "{description}"')

    lines.append("")

    if is_start:
        timestamp = event.date_started
    else:
        timestamp = event.date_ended or event.date_started
    # 未知 trigger 没有对应动词，留空
    verb = status.verb or ""
    lines.append(f"Execution {verb} at {format_timestamp(timestamp)}")

    options = event.options
    if is_start and options:
        secure = event.secure_options
        lines.append("")
        lines.append("USER OPTIONS:")
        for key, value in options.items():
            # secure option 的值无论如何都不输出
            if key in secure:
                continue
            lines.append(f"{key}: {value}")

    if event.aborted_by:
        lines.append("")
        lines.append(f"Job was aborted by: {event.aborted_by}")

    lines.append("")
    lines.append(f"View execution: {event.href or NO_URL}")
    return lines


def build_note_content(
    trigger: str,
    event: ExecutionEvent,
    config: NotifierConfig | None = None,
) -> str:
    return "\n".join(build_note_lines(trigger, event, config))
