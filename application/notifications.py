"""Notification Queue - self-expiring toasts"""
import asyncio
import logging
from typing import Dict, List, Optional

from domain.enums import ToastSeverity
from domain.value_objects import Toast

logger = logging.getLogger(__name__)

DEFAULT_TOAST_DURATION = 3.5


class NotificationQueue:
    """
    Toasts in insertion order. Each one schedules its own removal on the
    running event loop; dismissing early cancels that timer only.
    """

    def __init__(self, duration: float = DEFAULT_TOAST_DURATION):
        self.duration = duration
        self._toasts: List[Toast] = []
        self._timers: Dict[str, asyncio.TimerHandle] = {}

    @property
    def toasts(self) -> List[Toast]:
        return list(self._toasts)

    def push(self, message: str, severity: ToastSeverity = ToastSeverity.SUCCESS) -> Toast:
        toast = Toast(message=message, severity=severity)
        self._toasts.append(toast)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: the toast stays until dismissed
            logger.debug("No running loop; toast %s will not expire", toast.id)
        else:
            self._timers[toast.id] = loop.call_later(self.duration, self._expire, toast.id)
        return toast

    def success(self, message: str) -> Toast:
        return self.push(message, ToastSeverity.SUCCESS)

    def error(self, message: str) -> Toast:
        return self.push(message, ToastSeverity.ERROR)

    def dismiss(self, toast_id: str) -> bool:
        timer = self._timers.pop(toast_id, None)
        if timer is not None:
            timer.cancel()
        return self._remove(toast_id)

    def clear(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self._toasts.clear()

    def _expire(self, toast_id: str) -> None:
        self._timers.pop(toast_id, None)
        self._remove(toast_id)

    def _remove(self, toast_id: str) -> bool:
        before = len(self._toasts)
        self._toasts = [t for t in self._toasts if t.id != toast_id]
        return len(self._toasts) != before
