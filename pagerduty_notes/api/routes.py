from __future__ import annotations

import hmac
import logging
from functools import lru_cache
from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field

from pagerduty_notes.config import Settings, get_settings
from pagerduty_notes.core.triggers import TRIGGER_STATUSES
from pagerduty_notes.services.triggers import TriggerHandler

logger = logging.getLogger(__name__)

router = APIRouter()


class RundeckNotification(BaseModel):
    """
    Rundeck webhook 通知（JSON 格式）

    - 标准 envelope：{"trigger": "...", "execution": {...}}
    - 也允许直接 POST execution 对象本身
    - config 可选，覆盖环境变量里的 PagerDuty 凭证
    """

    model_config = ConfigDict(extra="allow")

    trigger: Optional[str] = None
    execution: Optional[Dict[str, Any]] = None
    config: Optional[Dict[str, Any]] = None

    def execution_payload(self) -> Dict[str, Any]:
        if self.execution is not None:
            return self.execution
        return dict(self.model_extra or {})


class NotificationAccepted(BaseModel):
    trigger: str
    delivered: bool
    status: Literal["delivered", "failed"] = Field(default="failed")


@lru_cache
def get_trigger_handler() -> TriggerHandler:
    return TriggerHandler()


def verify_webhook_token(
    x_webhook_token: Optional[str] = Header(default=None),
    token: Optional[str] = Query(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    未配置 WEBHOOK_SHARED_SECRET 时不校验；配置后头或 query 中的 token 必须一致。
    """
    expected = settings.WEBHOOK_SHARED_SECRET
    if not expected:
        return
    provided = x_webhook_token or token or ""
    if not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("Rejected notification with invalid webhook token")
        raise HTTPException(status_code=401, detail="Invalid webhook token")


def _dispatch(
    trigger: str, payload: RundeckNotification, handler: TriggerHandler
) -> NotificationAccepted:
    delivered = handler.handle(trigger, payload.execution_payload(), payload.config)
    return NotificationAccepted(
        trigger=trigger,
        delivered=delivered,
        status="delivered" if delivered else "failed",
    )


@router.post(
    "/notifications",
    summary="接收 Rundeck webhook 通知（trigger 取自请求体）",
    response_model=NotificationAccepted,
    dependencies=[Depends(verify_webhook_token)],
)
def receive_notification(
    payload: RundeckNotification,
    handler: TriggerHandler = Depends(get_trigger_handler),
) -> NotificationAccepted:
    if not payload.trigger:
        raise HTTPException(status_code=400, detail="trigger is required")
    return _dispatch(payload.trigger, payload, handler)


@router.post(
    "/notifications/{trigger}",
    summary="接收指定 trigger 的 Rundeck 通知",
    response_model=NotificationAccepted,
    dependencies=[Depends(verify_webhook_token)],
)
def receive_trigger_notification(
    trigger: str,
    payload: RundeckNotification,
    handler: TriggerHandler = Depends(get_trigger_handler),
) -> NotificationAccepted:
    if trigger not in TRIGGER_STATUSES:
        # 未知 trigger 照常投递，note 里按大写原样显示
        logger.warning("Received unknown trigger=%s", trigger)
    return _dispatch(trigger, payload, handler)
