from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

START = "start"
SUCCESS = "success"
FAILURE = "failure"


@dataclass(frozen=True)
class TriggerStatus:
    past_tense: str
    verb: Optional[str] = None


TRIGGER_STATUSES: Dict[str, TriggerStatus] = {
    START: TriggerStatus(past_tense="STARTED", verb="started"),
    SUCCESS: TriggerStatus(past_tense="SUCCEEDED", verb="succeeded"),
    FAILURE: TriggerStatus(past_tense="FAILED", verb="failed"),
}


def normalize_trigger(trigger: str | None) -> TriggerStatus:
    """
    trigger -> (状态大写过去式, 动词)。未知 trigger 不报错，直接使用其大写形式，动词为 None。
    """
    value = trigger or ""
    status = TRIGGER_STATUSES.get(value)
    if status is not None:
        return status
    return TriggerStatus(past_tense=value.upper())
