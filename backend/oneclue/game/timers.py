from __future__ import annotations

import logging
import threading
import time
from threading import RLock
from typing import Callable

from .errors import RoomNotFoundError
from .models import room_snapshot
from .notifier import Notifier
from .registry import RoomRegistry

logger = logging.getLogger(__name__)


def _spawn_thread(target: Callable, *args) -> threading.Thread:
    t = threading.Thread(target=target, args=args, daemon=True)
    t.start()
    return t


class TimerHandle:
    __slots__ = ("room_code", "cancelled")

    def __init__(self, room_code: str):
        self.room_code = room_code
        self.cancelled = False


class TimerService:
    """One countdown per room, ticking every ``interval`` seconds.

    Handles are kept here and never on the Room. A tick takes the room's lock
    first and then checks that its handle is still the live one for the room,
    so a tick that wakes up after ``cancel`` or a newer ``start`` does nothing.

    With ``autostart`` off no worker is spawned and ``tick`` is driven by the
    caller (tests).
    """

    def __init__(
        self,
        registry: RoomRegistry,
        notifier: Notifier,
        interval: float = 1.0,
        spawn: Callable | None = None,
        sleep: Callable[[float], None] | None = None,
        autostart: bool = True,
    ):
        self._registry = registry
        self._notifier = notifier
        self.interval = interval
        self.autostart = autostart
        self._spawn = spawn or _spawn_thread
        self._sleep = sleep or time.sleep
        self._lock = RLock()
        self._handles: dict[str, TimerHandle] = {}

    def start(self, room_code: str) -> TimerHandle:
        with self._lock:
            self._cancel_locked(room_code)
            handle = TimerHandle(room_code)
            self._handles[room_code] = handle

        logger.info("[timer-start] room=%s interval=%ss", room_code, self.interval)
        if self.autostart:
            self._spawn(self._run, handle)
        return handle

    def cancel(self, room_code: str) -> bool:
        with self._lock:
            return self._cancel_locked(room_code)

    def _cancel_locked(self, room_code: str) -> bool:
        handle = self._handles.pop(room_code, None)
        if handle is None:
            return False
        handle.cancelled = True
        logger.info("[timer-cancel] room=%s", room_code)
        return True

    def is_running(self, room_code: str) -> bool:
        with self._lock:
            return room_code in self._handles

    def current(self, room_code: str) -> TimerHandle | None:
        with self._lock:
            return self._handles.get(room_code)

    def tick(self, room_code: str, handle: TimerHandle | None = None) -> bool:
        """Apply one second to the room. Returns False once the countdown is over."""
        try:
            with self._registry.locked(room_code) as room:
                with self._lock:
                    live = self._handles.get(room_code)
                if live is None or live.cancelled or (handle is not None and live is not handle):
                    logger.debug("[timer-stale] room=%s", room_code)
                    return False

                gs = room.game_state
                if room.state != "PLAYING" or gs is None or not gs.turn_active:
                    self.cancel(room_code)
                    return False

                gs.time_remaining -= 1
                self._notifier.timer_tick(room.code, gs.time_remaining)

                if gs.time_remaining <= 0:
                    self.cancel(room_code)
                    gs.turn_active = False
                    logger.info("[timer-expire] room=%s", room_code)
                    self._notifier.turn_ended(room.code, room_snapshot(room))
                    return False
                return True
        except RoomNotFoundError:
            with self._lock:
                if handle is None or self._handles.get(room_code) is handle:
                    self._cancel_locked(room_code)
            return False

    def _run(self, handle: TimerHandle) -> None:
        while not handle.cancelled:
            self._sleep(self.interval)
            if not self.tick(handle.room_code, handle):
                return
