from __future__ import annotations

from threading import RLock


class SessionTable:
    """Which user each live socket speaks for.

    A user who reconnects gets a new sid; the old sid stays mapped until its
    own disconnect arrives, and that disconnect must not evict the user.
    """

    def __init__(self):
        self._lock = RLock()
        self._sid_to_user: dict[str, str] = {}
        self._user_to_sid: dict[str, str] = {}

    def bind(self, sid: str, user_id: str) -> None:
        with self._lock:
            previous = self._sid_to_user.get(sid)
            if previous and previous != user_id and self._user_to_sid.get(previous) == sid:
                del self._user_to_sid[previous]
            self._sid_to_user[sid] = user_id
            self._user_to_sid[user_id] = sid

    def user_for(self, sid: str) -> str | None:
        with self._lock:
            return self._sid_to_user.get(sid)

    def release(self, sid: str) -> str | None:
        """Forget ``sid``. Returns the user only if this was their current socket."""
        with self._lock:
            user_id = self._sid_to_user.pop(sid, None)
            if user_id is None or self._user_to_sid.get(user_id) != sid:
                return None
            del self._user_to_sid[user_id]
            return user_id
