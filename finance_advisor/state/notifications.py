"""
Status notifications

Short-lived messages telling the user how an intent went.
Each message is shown for a fixed time (3 seconds by default) and then
disappears on its own. A new message replaces the current one and its
dismissal deadline; nothing is queued or persisted.
"""

import time
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict


class StatusLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


class StatusMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    level: StatusLevel = StatusLevel.INFO
    expires_at: float


class StatusNotifier:
    """
    Holds at most one status message.

    Args:
        display_seconds: How long a message stays visible
        clock: Monotonic time source, replaceable in tests
    """

    def __init__(
        self,
        display_seconds: float = 3.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._display_seconds = display_seconds
        self._clock = clock
        self._message: Optional[StatusMessage] = None

    @property
    def display_seconds(self) -> float:
        return self._display_seconds

    def show(self, text: str, level: StatusLevel = StatusLevel.INFO) -> StatusMessage:
        self._message = StatusMessage(
            text=text,
            level=level,
            expires_at=self._clock() + self._display_seconds,
        )
        return self._message

    def success(self, text: str) -> StatusMessage:
        return self.show(text, StatusLevel.SUCCESS)

    def error(self, text: str) -> StatusMessage:
        return self.show(text, StatusLevel.ERROR)

    def current(self) -> Optional[StatusMessage]:
        """The visible message, or None once it has been dismissed."""
        if self._message is not None and self._clock() >= self._message.expires_at:
            self._message = None
        return self._message

    def remaining_seconds(self) -> float:
        message = self.current()
        if message is None:
            return 0.0
        return max(0.0, message.expires_at - self._clock())

    def dismiss(self) -> None:
        self._message = None
