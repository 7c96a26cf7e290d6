from __future__ import annotations

import threading
from typing import Optional

from maze_race.config import AI_TICK_INTERVAL
from maze_race.log import get_logger
from maze_race.systems.race import RaceSession

logger = get_logger(__name__)


class AiTicker:
    """
    Background thread that polls ``session.ai_tick`` for one session epoch.

    Polling faster than the navigator cadence is harmless, the navigator
    rate-limits itself. The ticker exits on ``stop()`` or once its epoch is no
    longer the active race.
    """

    def __init__(self, session: RaceSession, interval: float = AI_TICK_INTERVAL) -> None:
        self.session = session
        self.interval = float(interval)
        self.epoch = session.epoch
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.error: Optional[BaseException] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "AiTicker":
        if self._thread is not None:
            raise RuntimeError("AiTicker already started")
        self._thread = threading.Thread(target=self._run, name=f"ai-ticker-{self.epoch}", daemon=True)
        self._thread.start()
        return self

    def stop(self, timeout: Optional[float] = 1.0) -> None:
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            if not self.session.is_active(self.epoch):
                break
            try:
                self.session.ai_tick(epoch=self.epoch)
            except Exception as e:
                self.error = e
                logger.exception("AI tick failed for epoch %d", self.epoch)
                return
        logger.debug("AI ticker for epoch %d stopped", self.epoch)
