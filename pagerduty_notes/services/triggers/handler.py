from __future__ import annotations

import logging
import sys
from typing import Any, Callable, List, Mapping, Optional

from pagerduty_notes.config import Settings, get_settings
from pagerduty_notes.core.errors import MissingInputError
from pagerduty_notes.core.models import ExecutionEvent, NotifierConfig
from pagerduty_notes.core.redaction import mask_secret, redact_options
from pagerduty_notes.core.triggers import FAILURE, START, SUCCESS
from pagerduty_notes.services.notes.builder import build_note_content
from pagerduty_notes.services.pagerduty.client import PagerDutyNotesClient

logger = logging.getLogger(__name__)

DiagnosticFn = Callable[[str], None]


def stderr_diagnostic(message: str) -> None:
    print(message, file=sys.stderr)


class TriggerHandler:
    """
    Rundeck 通知入口：校验输入 -> 构建 note -> 发送到 PagerDuty，返回 bool 给宿主。

    任何异常都在 handle() 内部兜住，宿主只看到 True / False 与诊断输出。
    """

    def __init__(
        self,
        *,
        sender: Optional[PagerDutyNotesClient] = None,
        settings: Optional[Settings] = None,
        diagnostic: Optional[DiagnosticFn] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._sender = sender or PagerDutyNotesClient.from_settings(self._settings)
        self._diagnostic = diagnostic or stderr_diagnostic

    def on_start(self, execution: Mapping[str, Any], config: Mapping[str, Any] | None = None) -> bool:
        return self.handle(START, execution, config)

    def on_success(self, execution: Mapping[str, Any], config: Mapping[str, Any] | None = None) -> bool:
        return self.handle(SUCCESS, execution, config)

    def on_failure(self, execution: Mapping[str, Any], config: Mapping[str, Any] | None = None) -> bool:
        return self.handle(FAILURE, execution, config)

    def handle(
        self,
        trigger: str,
        execution: Mapping[str, Any] | ExecutionEvent,
        config: Mapping[str, Any] | NotifierConfig | None = None,
    ) -> bool:
        try:
            event = self._parse_event(execution)
            cfg = self._parse_config(config)

            logger.info(
                "Notification triggered: trigger=%s execution_id=%s project=%s user=%s "
                "options=%s token=%s from=%s",
                trigger,
                event.id,
                event.project,
                event.user,
                redact_options(event.options, event.secure_options),
                mask_secret(cfg.api_token),
                cfg.requester_email,
            )

            incident_id = self._validate(event, cfg)

            note_content = build_note_content(trigger, event, cfg)
            logger.debug("Generated note content (%d chars)", len(note_content))

            outcome = self._sender.add_note(
                incident_id=incident_id,
                note_content=note_content,
                api_token=cfg.api_token,
                requester_email=cfg.requester_email,
            )
            if not outcome.success:
                self._diagnostic(outcome.message or "Failed to add note to PagerDuty incident.")
            logger.info(
                "Notification result: trigger=%s incident=%s success=%s",
                trigger,
                incident_id,
                outcome.success,
            )
            return outcome.success
        except MissingInputError as exc:
            logger.error("Notification skipped: %s", exc)
            return False
        except Exception as exc:  # noqa: BLE001
            logger.exception("Notification failed: trigger=%s", trigger)
            self._diagnostic(f"Error sending PagerDuty notification: {exc}")
            return False

    def _parse_event(self, execution: Mapping[str, Any] | ExecutionEvent) -> ExecutionEvent:
        if isinstance(execution, ExecutionEvent):
            return execution
        return ExecutionEvent.model_validate(dict(execution or {}))

    def _parse_config(self, config: Mapping[str, Any] | NotifierConfig | None) -> NotifierConfig:
        if not isinstance(config, NotifierConfig):
            config = NotifierConfig.model_validate(dict(config or {}))
        return config.with_fallback(self._settings)

    def _validate(self, event: ExecutionEvent, cfg: NotifierConfig) -> str:
        """
        逐项检查必填输入，每一项缺失都单独上报；有缺失则抛 MissingInputError。
        """
        option_name = self._settings.INCIDENT_ID_OPTION
        raw_incident = event.options.get(option_name)
        incident_id = str(raw_incident).strip() if raw_incident is not None else ""

        missing: List[str] = []
        if not incident_id:
            self._diagnostic(
                f"PagerDuty Incident ID is required. Please set '{option_name}' as a job option."
            )
            missing.append(option_name)
        if not cfg.api_token:
            self._diagnostic("PagerDuty API Token is not configured.")
            missing.append("apiToken")
        if not cfg.requester_email:
            self._diagnostic("PagerDuty Email is not configured.")
            missing.append("requesterEmail")

        if missing:
            raise MissingInputError(missing)
        return incident_id
