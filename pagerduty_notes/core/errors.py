"""
通知插件异常定义
"""
from typing import Optional


class NotifierError(Exception):
    """
    所有通知相关异常的基类。
    """


class MissingInputError(NotifierError):
    """
    必填输入缺失（incident id / API token / requester email）。
    """

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Missing required input: {', '.join(missing)}")
        self.missing = missing


class PagerDutyAPIError(NotifierError):
    """
    PagerDuty API 返回非 2xx。
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
