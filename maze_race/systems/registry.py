from __future__ import annotations

import random
import threading
import uuid
from typing import Dict, Optional, Union

from maze_race.config import AI_TICK_INTERVAL
from maze_race.errors import RaceNotFound
from maze_race.log import get_logger
from maze_race.systems.race import GameMode, RaceSession, RaceSnapshot
from maze_race.systems.ticker import AiTicker
from maze_race.utils.directions import Dir, parse_direction

logger = get_logger(__name__)


class RaceRegistry:
    """
    Handle-based front door for callers that do not hold session objects
    (the HTTP API). Each ``vs_ai`` race gets its own AiTicker unless
    ``tick_interval`` is None, in which case callers drive ``ai_tick`` themselves.
    """

    def __init__(self, tick_interval: Optional[float] = AI_TICK_INTERVAL, seed: Optional[int] = None) -> None:
        self.tick_interval = tick_interval
        self._seed_rng = random.Random(seed)
        self._lock = threading.Lock()
        # Serializes ticker and session lifecycle per registry; re-entrant so a
        # leave issued from inside a reset on the same thread does not deadlock
        self._lifecycle = threading.RLock()
        self._sessions: Dict[str, RaceSession] = {}
        self._tickers: Dict[str, AiTicker] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def start_race(self, difficulty: str, mode: Union[str, GameMode] = GameMode.SINGLE) -> str:
        with self._lock:
            rng = random.Random(self._seed_rng.getrandbits(64))
        session = RaceSession(difficulty, mode, rng=rng)
        session.start()

        handle = uuid.uuid4().hex
        with self._lifecycle:
            with self._lock:
                self._sessions[handle] = session
            self._start_ticker(handle, session)
        logger.info("Race %s created (%s, %s)", handle, difficulty, session.mode.value)
        return handle

    def session(self, handle: str) -> RaceSession:
        with self._lock:
            try:
                return self._sessions[handle]
            except KeyError:
                raise RaceNotFound(f"Unknown race handle: {handle}") from None

    def submit_direction(self, handle: str, direction: Union[str, Dir]) -> bool:
        d = parse_direction(direction)
        return self.session(handle).submit_direction(d)

    def reset_race(self, handle: str) -> None:
        with self._lifecycle:
            session = self.session(handle)
            self._stop_ticker(handle)
            # the race may have been left while its ticker was stopping
            with self._lock:
                if self._sessions.get(handle) is not session:
                    raise RaceNotFound(f"Unknown race handle: {handle}")
            session.reset()
            self._start_ticker(handle, session)

    def leave_race(self, handle: str) -> None:
        with self._lifecycle:
            with self._lock:
                session = self._sessions.pop(handle, None)
            if session is None:
                raise RaceNotFound(f"Unknown race handle: {handle}")
            self._stop_ticker(handle)
            session.close()
            session.events.clear()
        logger.info("Race %s closed", handle)

    def snapshot(self, handle: str) -> RaceSnapshot:
        return self.session(handle).snapshot()

    def close_all(self) -> None:
        with self._lifecycle:
            with self._lock:
                handles = list(self._sessions)
            for handle in handles:
                self.leave_race(handle)

    def _start_ticker(self, handle: str, session: RaceSession) -> None:
        if self.tick_interval is None or session.mode != GameMode.VS_AI:
            return
        ticker = AiTicker(session, self.tick_interval).start()
        with self._lock:
            self._tickers[handle] = ticker

    def _stop_ticker(self, handle: str) -> None:
        with self._lock:
            ticker = self._tickers.pop(handle, None)
        if ticker is not None:
            ticker.stop()
