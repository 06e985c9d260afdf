"""Persistent console preferences.

The consent choice is always stored. Every other preference is kept in memory
and written to disk only once consent has been accepted.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

from loguru import logger

log = logger.bind(component="preferences")

type Consent = Literal["accepted", "rejected"]

CONSENT_KEY = "consent"
CHAT_BUBBLE_DISMISSED = "chat_bubble_dismissed"


class PreferenceStore:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._values: dict[str, Any] = {}

    def load(self) -> PreferenceStore:
        if not self.path.is_file():
            self._values = {}
            return self
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.warning("Ignoring unreadable preferences at {path}: {error}", path=str(self.path), error=str(e))
            data = {}
        self._values = data if isinstance(data, dict) else {}
        if self._values.get(CONSENT_KEY) not in ("accepted", "rejected"):
            self._values.pop(CONSENT_KEY, None)
        return self

    def save(self) -> None:
        if self.consent == "accepted":
            data = dict(self._values)
        elif self.consent == "rejected":
            data = {CONSENT_KEY: "rejected"}
        else:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    @property
    def consent(self) -> Consent | None:
        return self._values.get(CONSENT_KEY)

    def accept(self) -> None:
        self._values[CONSENT_KEY] = "accepted"
        self.save()

    def reject(self) -> None:
        self._values = {CONSENT_KEY: "rejected"}
        self.save()

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        if key == CONSENT_KEY:
            raise ValueError("Use accept() or reject() to record consent")
        self._values[key] = value
        if self.consent == "accepted":
            self.save()

    @property
    def chat_bubble_dismissed(self) -> bool:
        return bool(self._values.get(CHAT_BUBBLE_DISMISSED, False))

    def dismiss_chat_bubble(self) -> None:
        self.set(CHAT_BUBBLE_DISMISSED, True)
