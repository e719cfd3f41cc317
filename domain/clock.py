"""Domain Clock - source of "today" for date-driven rules"""
from abc import ABC, abstractmethod
from datetime import date


class Clock(ABC):
    """Calendar clock injected into date-driven services"""

    @abstractmethod
    def today(self) -> date:
        pass


class SystemClock(Clock):
    """Wall-clock calendar date of the host"""

    def today(self) -> date:
        return date.today()


class FixedClock(Clock):
    """Clock pinned to a given date, movable by hand"""

    def __init__(self, current: date):
        self.current = current

    def today(self) -> date:
        return self.current

    def set(self, current: date) -> None:
        self.current = current
