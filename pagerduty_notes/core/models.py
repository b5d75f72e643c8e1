"""
Rundeck 执行事件 / 通知配置的强类型模型。

Rundeck 传入的 execution 数据字段可能缺失、拼写也不统一（dateStarted / date-started，
abortedBy / abortedby），在边界处统一校验一次，后续格式化逻辑只面对干净的结构。
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from pagerduty_notes.config import Settings


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class JobInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    group: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name", "group", "description", mode="before")
    @classmethod
    def blank_strings(cls, value: Any) -> Any:
        return _blank_to_none(value)


class ExecutionContext(BaseModel):
    """
    execution.context：只关心 job option 与 secure option。
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    option: Dict[str, Any] = Field(default_factory=dict, description="option 名 -> 值，保持原顺序")
    secure_option: FrozenSet[str] = Field(
        default_factory=frozenset,
        validation_alias=AliasChoices("secureOption", "secure_option"),
        description="值绝不能输出的 option 名集合",
    )

    @field_validator("option", mode="before")
    @classmethod
    def none_option(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("secure_option", mode="before")
    @classmethod
    def secure_option_keys(cls, value: Any) -> Any:
        # Rundeck 里 secureOption 是 name -> value 的 map，这里只保留 key
        if value is None:
            return frozenset()
        if isinstance(value, Mapping):
            return frozenset(str(k) for k in value.keys())
        if isinstance(value, str):
            return frozenset([value])
        return frozenset(str(k) for k in value)


class ExecutionEvent(BaseModel):
    """
    一次 Rundeck 执行生命周期事件（start / success / failure）。
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    trigger: Optional[str] = None
    job: Optional[JobInfo] = None
    href: Optional[str] = None
    user: Optional[str] = None
    project: Optional[str] = None
    id: Optional[str] = None
    date_started: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("dateStarted", "date-started", "date_started"),
    )
    date_ended: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("dateEnded", "date-ended", "date_ended"),
    )
    aborted_by: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("abortedBy", "abortedby", "aborted_by"),
    )
    context: Optional[ExecutionContext] = None

    @field_validator("href", "user", "project", "aborted_by", "trigger", mode="before")
    @classmethod
    def blank_strings(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("date_started", "date_ended", mode="before")
    @classmethod
    def coerce_timestamp(cls, value: Any) -> Any:
        """
        数字一律按毫秒时间戳处理；Rundeck webhook 里的 {"unixtime": ms, "date": "..."} 也兼容。
        """
        if isinstance(value, Mapping):
            value = value.get("time", value.get("unixtime", value.get("date")))
        if value is None or value == "":
            return None
        if isinstance(value, str) and value.isdigit():
            value = int(value)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        return value

    @property
    def options(self) -> Dict[str, Any]:
        return self.context.option if self.context else {}

    @property
    def secure_options(self) -> FrozenSet[str]:
        return self.context.secure_option if self.context else frozenset()


class NotifierConfig(BaseModel):
    """
    通知插件配置：API token + 请求人邮箱。

    兼容 Rundeck 插件属性名（pagerdutyApiToken / pagerdutyEmail）。
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    api_token: Optional[str] = Field(
        default=None,
        repr=False,
        validation_alias=AliasChoices("apiToken", "pagerdutyApiToken", "api_token"),
    )
    requester_email: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("requesterEmail", "pagerdutyEmail", "requester_email"),
    )

    @field_validator("api_token", "requester_email", mode="before")
    @classmethod
    def blank_strings(cls, value: Any) -> Any:
        return _blank_to_none(value)

    def with_fallback(self, settings: Settings) -> "NotifierConfig":
        """
        配置缺失的项用环境变量兜底。
        """
        return NotifierConfig(
            api_token=self.api_token or settings.PAGERDUTY_API_TOKEN,
            requester_email=self.requester_email or settings.PAGERDUTY_REQUESTER_EMAIL,
        )


@dataclass
class DeliveryOutcome:
    """
    一次投递的结果：成功与否 + 诊断信息。
    """

    success: bool
    message: Optional[str] = None
    status_code: Optional[int] = None
    note_id: Optional[str] = None
