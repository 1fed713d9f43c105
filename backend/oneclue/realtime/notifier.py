from __future__ import annotations

from flask_socketio import SocketIO

from ..game.notifier import Notifier
from . import events


class SocketIONotifier(Notifier):
    """Publishes game events to Socket.IO rooms.

    Room broadcasts go to the room code, private messages to ``user:<id>``,
    which every registered socket joins.
    """

    def __init__(self, socketio: SocketIO):
        self.socketio = socketio

    def _to_room(self, event: str, payload, room_code: str) -> None:
        self.socketio.emit(event, payload, to=room_code)

    def _to_user(self, event: str, payload, user_id: str) -> None:
        self.socketio.emit(event, payload, to=events.user_channel(user_id))

    def room_update(self, room_code: str, room: dict) -> None:
        self._to_room(events.ROOM_STATE, room, room_code)

    def game_state_update(self, room_code: str, game_state: dict | None) -> None:
        self._to_room(events.GAME_STATE, game_state, room_code)

    def timer_tick(self, room_code: str, time_remaining: int) -> None:
        self._to_room(events.GAME_TICK, {"timeRemaining": time_remaining}, room_code)

    def turn_ended(self, room_code: str, room: dict) -> None:
        self._to_room(events.TURN_ENDED, room, room_code)

    def correct_guess(self, room_code: str, by: str, word: str) -> None:
        self._to_room(events.GUESS_CORRECT, {"by": by, "word": word}, room_code)

    def wrong_guess(self, user_id: str) -> None:
        self._to_user(events.GUESS_WRONG, {}, user_id)

    def user_updated(self, user_id: str, changes: dict) -> None:
        self._to_user(events.USER_UPDATED, changes, user_id)

    def friend_added(self, user_id: str, friend: dict) -> None:
        self._to_user(events.FRIEND_ADDED, friend, user_id)

    def friend_online(self, user_id: str, friend_id: str) -> None:
        self._to_user(events.FRIEND_ONLINE, {"userId": friend_id}, user_id)

    def friend_offline(self, user_id: str, friend_id: str) -> None:
        self._to_user(events.FRIEND_OFFLINE, {"userId": friend_id}, user_id)

    def game_invite(self, user_id: str, invite: dict) -> None:
        self._to_user(events.INVITE_RECEIVED, invite, user_id)
