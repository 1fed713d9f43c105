import random

import pytest

from oneclue.game.errors import NotRegisteredError, RoomNotFoundError, ValidationError
from oneclue.game.registry import CODE_ALPHABET, RoomRegistry


def test_registry_codes_are_unique_and_short():
    registry = RoomRegistry(code_length=4, rng=random.Random(1))
    codes = {registry.create_room("host", ["champions"]).code for _ in range(200)}
    assert len(codes) == 200
    assert all(len(c) == 4 and set(c) <= set(CODE_ALPHABET) for c in codes)


def test_registry_lookup_is_case_insensitive():
    registry = RoomRegistry()
    room = registry.create_room("host", ["champions"])
    assert registry.get_room(f" {room.code.lower()} ") is room


def test_new_room_defaults():
    registry = RoomRegistry()
    room = registry.create_room("host", ["champions", "items"], turn_duration=30)
    assert room.state == "LOBBY"
    assert room.host_id == "host"
    assert room.players == []
    assert room.game_state is None
    assert room.settings.active_categories == ["champions", "items"]
    assert room.settings.turn_duration == 30


def test_locked_rejects_destroyed_room():
    registry = RoomRegistry()
    room = registry.create_room("host", [])
    registry.destroy_room(room.code)
    with pytest.raises(RoomNotFoundError):
        with registry.locked(room.code):
            pass
    assert registry.destroy_room(room.code) is False


def test_unjoined_rooms_are_swept_after_ttl():
    registry = RoomRegistry(empty_room_ttl_sec=60)
    stale = registry.create_room("host", [])
    stale.created_at_ms -= 61_000
    fresh = registry.create_room("host", [])

    assert registry.get_room(stale.code) is None
    assert registry.get_room(fresh.code) is fresh


def test_create_room_requires_registration(service):
    with pytest.raises(NotRegisteredError):
        service.create_room("ghost")


def test_join_unknown_room(service):
    service.register_user("alice", "Alice")
    with pytest.raises(RoomNotFoundError) as exc:
        service.join_room("alice", "ZZZZ")
    assert exc.value.message == "Room not found"


def test_join_twice_does_not_duplicate(service, make_room):
    code = make_room("alice", "bob")
    snapshot = service.join_room("bob", code.lower())
    assert [p["id"] for p in snapshot["players"]] == ["alice", "bob"]


def test_joining_another_room_leaves_the_first(service, make_room):
    first = make_room("alice", "bob")
    second = service.create_room("bob")
    service.join_room("bob", second)

    room = service.registry.get_room(first)
    assert [p.id for p in room.players] == ["alice"]
    assert service.room_of("bob") == second


def test_host_leaving_promotes_first_player(service, make_room, notifier):
    code = make_room("alice", "bob", "cara")
    notifier.clear()

    assert service.leave_room("alice") == code

    room = service.registry.get_room(code)
    assert room.host_id == "bob"
    assert [p.id for p in room.players] == ["bob", "cara"]
    assert notifier.of("room_update")[-1][1]["hostId"] == "bob"


def test_last_player_leaving_destroys_room_and_timer(service, make_room):
    code = make_room("alice", "bob")
    service.start_game("alice", code)
    assert service.timers.is_running(code)

    service.leave_room("alice")
    service.leave_room("bob")

    assert service.registry.get_room(code) is None
    assert not service.timers.is_running(code)
    with pytest.raises(RoomNotFoundError):
        service.room_state(code)


def test_leave_when_not_in_a_room(service):
    service.register_user("alice", "Alice")
    assert service.leave_room("alice") is None


def test_speaker_leaving_ends_the_turn(service, make_room, notifier):
    code = make_room("alice", "bob", "cara")
    service.start_game("alice", code)
    notifier.clear()

    service.leave_room("alice")

    room = service.registry.get_room(code)
    assert not room.game_state.turn_active
    assert not service.timers.is_running(code)
    assert room.game_state.word_stats == []
    assert notifier.names() == ["turn_ended", "room_update"]

    service.next_turn("bob", code)
    assert room.game_state.current_speaker_id == "bob"


def test_first_joiner_of_hostless_room_becomes_host(service):
    service.register_user("alice", "Alice")
    service.register_user("bob", "Bob")
    code = service.create_room("alice")
    service.join_room("bob", code)
    assert service.registry.get_room(code).host_id == "bob"


def test_disconnect_leaves_room_and_keeps_profile(service, make_room, notifier):
    code = make_room("alice", "bob")
    service.add_friend("alice", "bob")
    notifier.clear()

    assert service.disconnect("bob") == code

    assert service.users.get("bob") is not None
    assert not service.users.get("bob").online
    assert [p.id for p in service.registry.get_room(code).players] == ["alice"]
    assert ("friend_offline", ("alice", "bob")) in notifier.events


def test_register_reuses_existing_user(service):
    first = service.register_user("alice", "Alice")
    again = service.register_user("alice", "Ally")
    assert first["userId"] == again["userId"] == "alice"
    assert again["username"] == "Ally"


def test_register_without_id_creates_guest(service):
    profile = service.register_user()
    assert profile["username"] == f"Guest_{profile['userId'][:4]}"


def test_rename_updates_room_player(service, make_room, notifier):
    code = make_room("alice", "bob")
    notifier.clear()

    assert service.rename_user("bob", "  Bobby ") == "Bobby"

    assert service.registry.get_room(code).players[1].name == "Bobby"
    assert notifier.of("user_updated") == [("bob", {"username": "Bobby"})]
    assert notifier.of("room_update")[-1][1]["players"][1]["name"] == "Bobby"

    with pytest.raises(ValidationError):
        service.rename_user("bob", "   ")


def test_friends_are_mutual(service, notifier):
    service.register_user("alice", "Alice")
    service.register_user("bob", "Bob")

    friend = service.add_friend("alice", "bob")

    assert friend == {"userId": "bob", "username": "Bob", "online": True}
    assert "alice" in service.users.get("bob").friends
    assert notifier.of("friend_added") == [("bob", {"userId": "alice", "username": "Alice"})]

    with pytest.raises(ValidationError):
        service.add_friend("alice", "nobody")


def test_invites_are_dropped_on_join_and_on_room_destroy(service, make_room):
    code = make_room("alice")
    service.register_user("bob", "Bob")
    service.register_user("cara", "Cara")
    service.invite_friend("alice", "bob", code)
    service.invite_friend("alice", "cara", code)

    service.join_room("bob", code)
    assert service.users.get("bob").pending_invites == []
    assert len(service.users.get("cara").pending_invites) == 1

    service.leave_room("alice")
    service.leave_room("bob")
    assert service.users.get("cara").pending_invites == []


def test_decline_invite(service, make_room):
    code = make_room("alice")
    service.register_user("bob", "Bob")
    service.invite_friend("alice", "bob", code)

    assert service.decline_invite("bob", code.lower()) == []


def test_invite_to_unknown_room(service):
    service.register_user("alice", "Alice")
    service.register_user("bob", "Bob")
    with pytest.raises(RoomNotFoundError):
        service.invite_friend("alice", "bob", "NOPE")
