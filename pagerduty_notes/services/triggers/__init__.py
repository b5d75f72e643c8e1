"""
触发层（Triggers）

Rundeck 的 start / success / failure 通知统一交给 TriggerHandler：
校验必填输入、构建 note、投递到 PagerDuty，并把结果归一为 bool。
"""

from pagerduty_notes.services.triggers.handler import TriggerHandler

__all__ = ["TriggerHandler"]
