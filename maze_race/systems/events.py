from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple, Type

from maze_race.utils.directions import XY


class Side(Enum):
    HUMAN = "human"
    AI = "ai"


@dataclass(frozen=True)
class RaceEvent:
    epoch: int


@dataclass(frozen=True)
class MazeReady(RaceEvent):
    maze: object


@dataclass(frozen=True)
class PositionChanged(RaceEvent):
    side: Side
    position: XY


@dataclass(frozen=True)
class RaceWon(RaceEvent):
    side: Side
    elapsed: float


@dataclass(frozen=True)
class FlavorMessage(RaceEvent):
    text: str


Listener = Callable[[RaceEvent], None]


class EventChannel:
    """Typed publish/subscribe channel owned by one race session."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: List[Tuple[Listener, Optional[Type[RaceEvent]]]] = []

    def subscribe(self, callback: Listener, event_type: Optional[Type[RaceEvent]] = None) -> Listener:
        with self._lock:
            self._listeners.append((callback, event_type))
        return callback

    def unsubscribe(self, callback: Listener) -> None:
        with self._lock:
            self._listeners = [(cb, et) for (cb, et) in self._listeners if cb is not callback]

    def clear(self) -> None:
        with self._lock:
            self._listeners = []

    def publish(self, event: RaceEvent) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for callback, event_type in listeners:
            if event_type is None or isinstance(event, event_type):
                callback(event)
