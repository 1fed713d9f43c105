import random

import pytest

from oneclue.config import Config
from oneclue.game.notifier import Notifier
from oneclue.game.service import GameService
from oneclue.server import create_app


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    TRUST_PROXY_HEADERS = False
    SOCKETIO_ASYNC_MODE = "threading"
    TIMER_AUTOSTART = False
    LOG_LEVEL = "warning"


class RecordingNotifier(Notifier):
    """Keeps every publish as ``(event, args)`` in order."""

    def __init__(self):
        self.events = []

    def names(self):
        return [name for name, _ in self.events]

    def of(self, name):
        return [args for n, args in self.events if n == name]

    def clear(self):
        self.events.clear()


def _recorder(name):
    def method(self, *args):
        self.events.append((name, args))

    method.__name__ = name
    return method


for _name in (
    "room_update",
    "game_state_update",
    "timer_tick",
    "turn_ended",
    "correct_guess",
    "wrong_guess",
    "user_updated",
    "friend_added",
    "friend_online",
    "friend_offline",
    "game_invite",
):
    setattr(RecordingNotifier, _name, _recorder(_name))


WORDS = {"champions": ["Draven"], "items": ["Infinity Edge"]}


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def service(notifier):
    # Only "champions" is switched on by the room helper, so every draw is "Draven".
    return GameService(
        {cat: list(words) for cat, words in WORDS.items()},
        notifier,
        timer_autostart=False,
        rng=random.Random(7),
    )


@pytest.fixture()
def make_room(service):
    """Register users, let the first create the room, everyone joins in order."""

    def _make(*user_ids, categories=("champions",)):
        for uid in user_ids:
            service.register_user(uid, uid.capitalize())
        code = service.create_room(user_ids[0])
        for uid in user_ids:
            service.join_room(uid, code)
        room = service.registry.get_room(code)
        room.settings.active_categories = list(categories)
        return code

    return _make


@pytest.fixture()
def flask_app():
    application, sio = create_app(TestConfig)
    application.extensions["oneclue_socketio"] = sio
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    sio = flask_app.extensions["oneclue_socketio"]
    clients = []

    def _connect():
        c = sio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(c)
        return c

    yield _connect

    for c in clients:
        try:
            c.disconnect()
        except Exception:
            pass
