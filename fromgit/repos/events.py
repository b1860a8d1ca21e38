"""
이벤트 스트림 모듈

엔진이 오케스트레이터에 전달하는 info/warn 이벤트를 콜백과 누적 로그로 제공합니다.
"""

from typing import Any, Callable, Optional

from ..models.base import Event
from ..models.enums import EventCode, EventLevel
from ..utils.logging import get_logger

logger = get_logger(__name__)

EventCallback = Callable[[Event], None]


class EventLog:
    """동기 콜백 기반 이벤트 로그"""

    def __init__(
        self,
        on_info: Optional[EventCallback] = None,
        on_warn: Optional[EventCallback] = None,
        verbose: bool = False,
    ):
        """
        이벤트 로그 초기화

        Args:
            on_info: info 이벤트 콜백
            on_warn: warn 이벤트 콜백
            verbose: 상세 이벤트를 info로 승격할지 여부
        """
        self.on_info = on_info
        self.on_warn = on_warn
        self.verbose_enabled = verbose
        self.events: list[Event] = []
        self.diagnostics: list[str] = []

    def child(self, verbose: bool = False) -> "EventLog":
        """
        콜백과 누적 목록을 공유하는 하위 로그 생성

        중첩 clone의 이벤트를 같은 형태로 상위 스트림에 전달할 때 사용합니다.
        """
        child = EventLog(self.on_info, self.on_warn, verbose)
        child.events = self.events
        child.diagnostics = self.diagnostics
        return child

    def info(self, code: EventCode, message: str, **context: Any) -> Event:
        event = Event(level=EventLevel.INFO, code=code, message=message, context=context)
        logger.info(f"[{code.value}] {message}")
        self.events.append(event)
        if self.on_info:
            self.on_info(event)
        return event

    def warn(self, code: EventCode, message: str, **context: Any) -> Event:
        event = Event(level=EventLevel.WARN, code=code, message=message, context=context)
        logger.warning(f"[{code.value}] {message}")
        self.events.append(event)
        if self.on_warn:
            self.on_warn(event)
        return event

    def verbose(self, code: EventCode, message: str, **context: Any) -> Optional[Event]:
        """verbose가 켜져 있을 때만 info로 전달"""
        if self.verbose_enabled:
            return self.info(code, message, **context)
        logger.debug(f"[{code.value}] {message}")
        return None

    def diagnostic(self, message: str) -> None:
        """치명적이지 않은 정리 실패 기록"""
        logger.debug(message)
        self.diagnostics.append(message)

    def codes(self, level: Optional[EventLevel] = None) -> list[EventCode]:
        return [e.code for e in self.events if level is None or e.level == level]
