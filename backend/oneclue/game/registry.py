from __future__ import annotations

import logging
import random
import string
import time
from contextlib import contextmanager
from threading import RLock
from typing import Iterator

from .errors import RoomNotFoundError
from .models import Room, Settings

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


def now_ms() -> int:
    return int(time.time() * 1000)


def normalize_code(code: str | None) -> str:
    return (code or "").strip().upper()


class RoomRegistry:
    """Live rooms by code, each paired with the lock that serializes its mutations.

    The registry lock only guards the two dicts. Anything that changes a room
    goes through ``locked(code)``, which holds that room's own lock.
    """

    def __init__(self, code_length: int = 4, empty_room_ttl_sec: int = 60, rng: random.Random | None = None):
        self.code_length = code_length
        self.empty_room_ttl_sec = empty_room_ttl_sec
        self._rng = rng or random.Random()
        self._lock = RLock()
        self._rooms: dict[str, Room] = {}
        self._room_locks: dict[str, RLock] = {}

    def _generate_code(self) -> str:
        while True:
            code = "".join(self._rng.choices(CODE_ALPHABET, k=self.code_length))
            if code not in self._rooms:
                return code

    def create_room(self, host_id: str, categories: list[str], turn_duration: int = 30) -> Room:
        with self._lock:
            self._sweep_unjoined_locked(now_ms())

            code = self._generate_code()
            room = Room(
                code=code,
                host_id=host_id,
                settings=Settings(active_categories=list(categories), turn_duration=turn_duration),
                created_at_ms=now_ms(),
            )
            self._rooms[code] = room
            self._room_locks[code] = RLock()

        logger.info("[room-create] room=%s host=%s", code, host_id)
        return room

    def get_room(self, code: str | None) -> Room | None:
        with self._lock:
            return self._rooms.get(normalize_code(code))

    @contextmanager
    def locked(self, code: str | None) -> Iterator[Room]:
        """Hold the room's lock for the duration of the block.

        Raises ``RoomNotFoundError`` if the room does not exist, or was
        destroyed while we were waiting for its lock.
        """
        code = normalize_code(code)
        with self._lock:
            room = self._rooms.get(code)
            room_lock = self._room_locks.get(code)
        if room is None or room_lock is None:
            raise RoomNotFoundError()

        with room_lock:
            if self._rooms.get(code) is not room:
                raise RoomNotFoundError()
            yield room

    def destroy_room(self, code: str) -> bool:
        with self._lock:
            code = normalize_code(code)
            if code not in self._rooms:
                return False
            del self._rooms[code]
            self._room_locks.pop(code, None)

        logger.info("[room-destroy] room=%s", code)
        return True

    def _sweep_unjoined_locked(self, now: int) -> None:
        # Rooms are destroyed as soon as their last player leaves, so an empty
        # room here was created and never joined.
        ttl_ms = self.empty_room_ttl_sec * 1000
        for code, room in list(self._rooms.items()):
            if room.players or now - room.created_at_ms < ttl_ms:
                continue
            room_lock = self._room_locks[code]
            if not room_lock.acquire(blocking=False):
                continue
            try:
                if not room.players:
                    del self._rooms[code]
                    del self._room_locks[code]
                    logger.info("[room-destroy] room=%s reason=never_joined", code)
            finally:
                room_lock.release()
