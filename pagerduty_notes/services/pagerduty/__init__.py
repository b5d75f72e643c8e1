"""
PagerDuty API 客户端模块

目前只封装 incident note 写入：
- client: POST /incidents/{id}/notes
"""
from __future__ import annotations

from pagerduty_notes.core.errors import PagerDutyAPIError
from pagerduty_notes.services.pagerduty.client import PagerDutyNotesClient

__all__ = [
    "PagerDutyNotesClient",
    "PagerDutyAPIError",
]
