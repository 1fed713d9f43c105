from __future__ import annotations

import functools
import logging
from typing import Any, Callable

from flask import request
from flask_socketio import SocketIO, join_room, leave_room

from ..game.errors import GameError, NotRegisteredError, ValidationError
from ..game.registry import normalize_code
from ..game.service import GameService
from . import events
from .sessions import SessionTable

logger = logging.getLogger(__name__)


def _payload(data: Any) -> dict:
    return data if isinstance(data, dict) else {}


def _text(payload: dict, key: str) -> str:
    value = payload.get(key)
    return value if isinstance(value, str) else ""


def _room_code(payload: dict) -> str:
    code = _text(payload, "roomId").strip()
    if not code:
        raise ValidationError("Room code is required")
    return code


def register_socketio_handlers(socketio: SocketIO, service: GameService, sessions: SessionTable) -> None:
    def _current_user() -> str:
        user_id = sessions.user_for(request.sid)
        if not user_id:
            raise NotRegisteredError()
        return user_id

    def acked(handler: Callable) -> Callable:
        """Turn the handler's result into ``{"status": "success", ...}`` and a GameError into an error ack."""

        @functools.wraps(handler)
        def wrapper(data=None):
            try:
                result = handler(_payload(data))
            except GameError as exc:
                logger.debug("[cmd-rejected] sid=%s cmd=%s reason=%s", request.sid, handler.__name__, exc.message)
                return {"status": "error", "message": exc.message}
            ack = {"status": "success"}
            if result:
                ack.update(result)
            return ack

        return wrapper

    def unacked(handler: Callable) -> Callable:
        """Commands without an ack: a rejected one is logged and dropped."""

        @functools.wraps(handler)
        def wrapper(data=None):
            try:
                handler(_payload(data))
            except GameError as exc:
                logger.debug("[cmd-rejected] sid=%s cmd=%s reason=%s", request.sid, handler.__name__, exc.message)

        return wrapper

    # === users ===

    @socketio.on(events.USER_REGISTER)
    @acked
    def user_register(payload):
        user_id = _text(payload, "userId").strip() or None
        profile = service.register_user(user_id, _text(payload, "username"))

        sessions.bind(request.sid, profile["userId"])
        join_room(events.user_channel(profile["userId"]))

        # Reconnect: resubscribe to the room the user never left.
        code = service.room_of(profile["userId"])
        if code:
            join_room(code)
        return {"user": profile}

    @socketio.on(events.USER_RENAME)
    @acked
    def user_rename(payload):
        username = service.rename_user(_current_user(), _text(payload, "username"))
        return {"username": username}

    @socketio.on(events.FRIEND_ADD)
    @acked
    def friend_add(payload):
        friend = service.add_friend(_current_user(), _text(payload, "friendId"))
        return {"friend": friend}

    @socketio.on(events.FRIEND_INVITE)
    @acked
    def friend_invite(payload):
        service.invite_friend(_current_user(), _text(payload, "friendId"), _room_code(payload))

    @socketio.on(events.INVITE_DECLINE)
    @acked
    def invite_decline(payload):
        pending = service.decline_invite(_current_user(), _room_code(payload))
        return {"pendingInvites": pending}

    # === rooms ===

    @socketio.on(events.ROOM_CREATE)
    @acked
    def room_create(payload):
        return {"roomId": service.create_room(_current_user())}

    @socketio.on(events.ROOM_JOIN)
    @acked
    def room_join(payload):
        user_id = _current_user()
        code = normalize_code(_room_code(payload))
        previous = service.room_of(user_id)

        # Subscribe first so the joiner gets the room:state broadcast too.
        join_room(code)
        try:
            room = service.join_room(user_id, code)
        except GameError:
            if code != previous:
                leave_room(code)
            raise
        if previous and previous != code:
            leave_room(previous)
        return {"room": room}

    @socketio.on(events.ROOM_LEAVE)
    @acked
    def room_leave(payload):
        code = service.leave_room(_current_user())
        if code:
            leave_room(code)

    @socketio.on(events.ROOM_TOGGLE_CATEGORY)
    @unacked
    def room_toggle_category(payload):
        service.toggle_category(_current_user(), _room_code(payload), _text(payload, "category"))

    # === game ===

    @socketio.on(events.GAME_START)
    @acked
    def game_start(payload):
        service.start_game(_current_user(), _room_code(payload))

    @socketio.on(events.CLUE_SUBMIT)
    @acked
    def clue_submit(payload):
        clue = service.submit_clue(_current_user(), _room_code(payload), _text(payload, "text"))
        return {"clue": clue}

    @socketio.on(events.GUESS_SUBMIT)
    @unacked
    def guess_submit(payload):
        service.submit_guess(_current_user(), _room_code(payload), _text(payload, "text"))

    @socketio.on(events.TURN_SKIP)
    @acked
    def turn_skip(payload):
        service.speaker_skip(_current_user(), _room_code(payload))

    @socketio.on(events.TURN_END)
    @acked
    def turn_end(payload):
        service.end_turn_early(_current_user(), _room_code(payload))

    @socketio.on(events.TURN_NEXT)
    @acked
    def turn_next(payload):
        service.next_turn(_current_user(), _room_code(payload))

    @socketio.on(events.GAME_RETURN_LOBBY)
    @acked
    def game_return_lobby(payload):
        service.return_to_lobby(_current_user(), _room_code(payload))

    @socketio.on("disconnect")
    def on_disconnect(*args):
        user_id = sessions.release(request.sid)
        if not user_id:
            return
        code = service.disconnect(user_id)
        logger.info("[user-offline] user=%s left_room=%s", user_id, code)
