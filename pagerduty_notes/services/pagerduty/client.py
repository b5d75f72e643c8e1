"""
PagerDuty Incident Notes API 客户端

POST /incidents/{id}/notes，把 HTTP 结果归类为 DeliveryOutcome，任何异常都不向外抛出。
"""
from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from pagerduty_notes.config import Settings
from pagerduty_notes.core.errors import PagerDutyAPIError
from pagerduty_notes.core.models import DeliveryOutcome
from pagerduty_notes.core.redaction import mask_secret
from pagerduty_notes.services.notes.escaper import escape_json_content

logger = logging.getLogger(__name__)


class PagerDutyNotesClient:
    """
    PagerDuty REST API（v2）note 写入封装

    每次调用新建并关闭自己的 httpx.Client，不跨调用共享连接。
    """

    PAGERDUTY_HOST = "https://api.pagerduty.com"
    ACCEPT = "application/vnd.pagerduty+json;version=2"

    def __init__(
        self,
        *,
        api_base: Optional[str] = None,
        timeout_s: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._base = (api_base or self.PAGERDUTY_HOST).rstrip("/")
        self._timeout = timeout_s
        # 测试时注入 httpx.MockTransport
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "PagerDutyNotesClient":
        return cls(api_base=settings.PAGERDUTY_API_BASE, timeout_s=settings.PAGERDUTY_TIMEOUT_S)

    def notes_url(self, incident_id: str) -> str:
        return f"{self._base}/incidents/{quote(str(incident_id), safe='')}/notes"

    def add_note(
        self,
        *,
        incident_id: str,
        note_content: str,
        api_token: str,
        requester_email: str,
    ) -> DeliveryOutcome:
        """
        给 incident 追加一条 note。

        Args:
            incident_id: PagerDuty incident id
            note_content: note 纯文本
            api_token: PagerDuty REST API token（日志中打码）
            requester_email: From 头，需对应 PagerDuty 用户

        Returns:
            DeliveryOutcome：2xx 为成功；其余状态码或网络异常均为失败，message 为诊断信息
        """
        url = self.notes_url(incident_id)
        headers = {
            "Authorization": f"Token token={api_token}",
            "Content-Type": "application/json",
            "Accept": self.ACCEPT,
            "From": requester_email,
        }
        payload = f'{{"note": {{"content": "{escape_json_content(note_content)}"}}}}'

        logger.info(
            "PagerDuty API Request: POST %s\n  Headers: %s\n  BodySummary: %s",
            url,
            {"Authorization": mask_secret(api_token), "From": requester_email},
            {"content_len": len(note_content or "")},
        )

        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                resp = client.post(url, content=payload.encode("utf-8"), headers=headers)
                return self._classify(incident_id, resp)
        except PagerDutyAPIError as exc:
            logger.error("PagerDuty API error: %s", exc)
            return DeliveryOutcome(success=False, message=str(exc), status_code=exc.status_code)
        except httpx.HTTPError as exc:
            logger.error("HTTP error while adding note to incident %s: %s", incident_id, exc)
            return DeliveryOutcome(success=False, message=str(exc) or type(exc).__name__)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error while adding note to incident %s", incident_id)
            return DeliveryOutcome(success=False, message=str(exc) or type(exc).__name__)

    def _classify(self, incident_id: str, resp: httpx.Response) -> DeliveryOutcome:
        logger.info(
            "PagerDuty API Response: POST incidents/%s/notes -> status=%s",
            incident_id,
            resp.status_code,
        )
        if not 200 <= resp.status_code < 300:
            message = (
                f"Failed to add note to PagerDuty incident {incident_id}. "
                f"Response Code: {resp.status_code}"
            )
            if resp.text:
                message += f"\nError Response: {resp.text}"
            raise PagerDutyAPIError(message, status_code=resp.status_code)

        note_id: Optional[str] = None
        # note id 只是附带信息，响应体解析失败不影响投递结果
        try:
            data = resp.json()
        except ValueError:
            data = None
            logger.warning(
                "PagerDuty API non-JSON success response: status=%s, body=%s",
                resp.status_code,
                resp.text[:200],
            )
        note = data.get("note") if isinstance(data, dict) else None
        if isinstance(note, dict) and note.get("id") is not None:
            note_id = str(note["id"])

        logger.info(
            "Successfully added note to PagerDuty incident %s (note_id=%s)", incident_id, note_id
        )
        return DeliveryOutcome(success=True, status_code=resp.status_code, note_id=note_id)
