from __future__ import annotations

import json
import os
from threading import Lock
from typing import Any, Dict, Iterator

from models.schemas import EligibilityDecisionLog
from settings import SETTINGS


class AuditLogger:
    """Append-only JSONL trail of eligibility decisions."""

    def __init__(self, path: str | None = None) -> None:
        self.path = path or SETTINGS.audit_log_path
        self._lock = Lock()
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)

    def log_decision(self, record: EligibilityDecisionLog) -> None:
        self.log_json(record.model_dump(mode="json"))

    def log_json(self, payload: Dict[str, Any]) -> None:
        line = json.dumps(payload, ensure_ascii=True, sort_keys=True)
        with self._lock:
            with open(self.path, "a", encoding="utf-8") as fh:
                fh.write(line + "\n")

    def read_decisions(self) -> Iterator[EligibilityDecisionLog]:
        if not os.path.exists(self.path):
            return
        with self._lock:
            with open(self.path, "r", encoding="utf-8") as fh:
                lines = fh.readlines()
        for line in lines:
            if not line.strip():
                continue
            try:
                yield EligibilityDecisionLog.model_validate_json(line)
            except ValueError:
                continue
