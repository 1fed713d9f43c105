from __future__ import annotations

import logging
import random
from threading import RLock
from typing import Any, Callable, Mapping

from .errors import RoomNotFoundError, ValidationError
from .models import Player, Room, room_snapshot
from .notifier import Notifier
from .registry import RoomRegistry, normalize_code
from .timers import TimerService
from .turns import TurnEngine
from .users import User, UserDirectory

logger = logging.getLogger(__name__)


class GameService:
    """Entry point for every client command.

    Each command runs while holding the target room's lock, so commands and
    timer ticks for one room never interleave while different rooms proceed
    independently.
    """

    def __init__(
        self,
        dictionary: dict[str, list[str]],
        notifier: Notifier | None = None,
        turn_duration: int = 30,
        words_per_game: int = 10,
        clue_max_length: int = 12,
        clue_similarity_max: float = 0.30,
        guess_similarity_min: float = 0.80,
        room_code_length: int = 4,
        empty_room_ttl_sec: int = 60,
        tick_interval: float = 1.0,
        timer_autostart: bool = True,
        spawn: Callable | None = None,
        sleep: Callable[[float], None] | None = None,
        rng: random.Random | None = None,
    ):
        self.dictionary = dictionary
        self.notifier = notifier or Notifier()
        self.turn_duration = turn_duration

        self.registry = RoomRegistry(code_length=room_code_length, empty_room_ttl_sec=empty_room_ttl_sec, rng=rng)
        self.timers = TimerService(
            self.registry,
            self.notifier,
            interval=tick_interval,
            spawn=spawn,
            sleep=sleep,
            autostart=timer_autostart,
        )
        self.turns = TurnEngine(
            self.timers,
            self.notifier,
            dictionary,
            words_per_game=words_per_game,
            clue_max_length=clue_max_length,
            clue_similarity_max=clue_similarity_max,
            guess_similarity_min=guess_similarity_min,
            rng=rng,
        )
        self.users = UserDirectory(self.notifier)

        self._lock = RLock()
        self._memberships: dict[str, str] = {}

    @classmethod
    def from_config(cls, config: Mapping[str, Any], dictionary: dict[str, list[str]], notifier: Notifier, **kwargs) -> "GameService":
        return cls(
            dictionary,
            notifier,
            turn_duration=int(config.get("TURN_DURATION_SEC", 30)),
            words_per_game=int(config.get("WORDS_PER_GAME", 10)),
            clue_max_length=int(config.get("CLUE_MAX_LENGTH", 12)),
            clue_similarity_max=float(config.get("CLUE_SIMILARITY_MAX", 0.30)),
            guess_similarity_min=float(config.get("GUESS_SIMILARITY_MIN", 0.80)),
            room_code_length=int(config.get("ROOM_CODE_LENGTH", 4)),
            empty_room_ttl_sec=int(config.get("EMPTY_ROOM_TTL_SEC", 60)),
            tick_interval=float(config.get("TICK_INTERVAL_SEC", 1.0)),
            timer_autostart=bool(config.get("TIMER_AUTOSTART", True)),
            **kwargs,
        )

    # -- users --

    def register_user(self, user_id: str | None = None, username: str | None = None) -> dict:
        user = self.users.register(user_id, username)
        return self.users.profile(user)

    def rename_user(self, user_id: str, username: str) -> str:
        user = self.users.rename(user_id, username)
        code = self.room_of(user_id)
        if code:
            try:
                with self.registry.locked(code) as room:
                    player = room.find_player(user_id)
                    if player is not None:
                        player.name = user.username
                        self.notifier.room_update(room.code, room_snapshot(room))
            except RoomNotFoundError:
                logger.debug("rename: room %s vanished for user %s", code, user_id)
        return user.username

    def add_friend(self, user_id: str, friend_id: str) -> dict:
        return self.users.add_friend(user_id, (friend_id or "").strip())

    def invite_friend(self, user_id: str, friend_id: str, room_code: str) -> None:
        room = self.registry.get_room(room_code)
        if room is None:
            raise RoomNotFoundError()
        self.users.invite(user_id, friend_id, room.code)

    def decline_invite(self, user_id: str, room_code: str) -> list[dict]:
        return self.users.decline_invite(user_id, normalize_code(room_code))

    # -- membership --

    def room_of(self, user_id: str) -> str | None:
        with self._lock:
            return self._memberships.get(user_id)

    def room_state(self, room_code: str) -> dict:
        with self.registry.locked(room_code) as room:
            return room_snapshot(room)

    def create_room(self, user_id: str) -> str:
        self.users.require(user_id)
        room = self.registry.create_room(user_id, list(self.dictionary.keys()), self.turn_duration)
        return room.code

    def join_room(self, user_id: str, room_code: str) -> dict:
        user = self.users.require(user_id)
        code = normalize_code(room_code)
        if not code:
            raise ValidationError("Room code is required")
        if self.registry.get_room(code) is None:
            raise RoomNotFoundError()

        current = self.room_of(user_id)
        if current and current != code:
            self.leave_room(user_id)

        with self.registry.locked(code) as room:
            self._add_player_locked(room, user)
            snapshot = room_snapshot(room)
            self.notifier.room_update(room.code, snapshot)

        self.users.drop_invites_for_room(code, user_id)
        return snapshot

    def _add_player_locked(self, room: Room, user: User) -> None:
        if room.find_player(user.user_id) is None:
            room.players.append(Player(id=user.user_id, name=user.username))
        if room.find_player(room.host_id) is None:
            room.host_id = user.user_id
        with self._lock:
            self._memberships[user.user_id] = room.code

    def leave_room(self, user_id: str) -> str | None:
        """Remove the user from the room they are in. Returns that room's code."""
        self.users.require(user_id)
        code = self.room_of(user_id)
        if code is None:
            return None
        try:
            with self.registry.locked(code) as room:
                self._remove_player_locked(room, user_id)
        except RoomNotFoundError:
            with self._lock:
                self._memberships.pop(user_id, None)
        return code

    def disconnect(self, user_id: str) -> str | None:
        if self.users.get(user_id) is None:
            return None
        code = self.leave_room(user_id)
        self.users.mark_offline(user_id)
        return code

    def _remove_player_locked(self, room: Room, user_id: str) -> None:
        with self._lock:
            if self._memberships.get(user_id) == room.code:
                del self._memberships[user_id]

        idx = room.player_index(user_id)
        if idx == -1:
            return

        gs = room.game_state
        was_speaker = gs is not None and gs.current_speaker_id == user_id
        del room.players[idx]

        if not room.players:
            self._destroy_room_locked(room)
            return

        if room.host_id == user_id:
            room.host_id = room.players[0].id
        if was_speaker:
            self.turns.abandon_turn(room)
        self.notifier.room_update(room.code, room_snapshot(room))

    def _destroy_room_locked(self, room: Room) -> None:
        self.timers.cancel(room.code)
        self.registry.destroy_room(room.code)
        self.users.drop_invites_for_room(room.code)

    # -- game commands --

    def toggle_category(self, user_id: str, room_code: str, category: str) -> list[str]:
        self.users.require(user_id)
        with self.registry.locked(room_code) as room:
            return self.turns.toggle_category(room, user_id, category)

    def start_game(self, user_id: str, room_code: str) -> None:
        self.users.require(user_id)
        with self.registry.locked(room_code) as room:
            self.turns.start_game(room, user_id)

    def submit_clue(self, user_id: str, room_code: str, text: str) -> str:
        self.users.require(user_id)
        with self.registry.locked(room_code) as room:
            return self.turns.submit_clue(room, user_id, text)

    def submit_guess(self, user_id: str, room_code: str, text: str) -> bool:
        self.users.require(user_id)
        with self.registry.locked(room_code) as room:
            return self.turns.submit_guess(room, user_id, text)

    def speaker_skip(self, user_id: str, room_code: str) -> None:
        self.users.require(user_id)
        with self.registry.locked(room_code) as room:
            self.turns.speaker_skip(room, user_id)

    def end_turn_early(self, user_id: str, room_code: str) -> None:
        self.users.require(user_id)
        with self.registry.locked(room_code) as room:
            self.turns.end_turn_early(room, user_id)

    def next_turn(self, user_id: str, room_code: str) -> None:
        self.users.require(user_id)
        with self.registry.locked(room_code) as room:
            self.turns.next_turn(room, user_id)

    def return_to_lobby(self, user_id: str, room_code: str) -> None:
        self.users.require(user_id)
        with self.registry.locked(room_code) as room:
            self.turns.return_to_lobby(room, user_id)
