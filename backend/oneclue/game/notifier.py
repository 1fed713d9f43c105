from __future__ import annotations


class Notifier:
    """Publishing seam between the game core and the transport.

    Every method receives plain dict snapshots taken at the moment of the call.
    The base implementation drops everything; the Socket.IO adapter overrides
    each event.
    """

    # room broadcasts
    def room_update(self, room_code: str, room: dict) -> None:
        pass

    def game_state_update(self, room_code: str, game_state: dict | None) -> None:
        pass

    def timer_tick(self, room_code: str, time_remaining: int) -> None:
        pass

    def turn_ended(self, room_code: str, room: dict) -> None:
        pass

    def correct_guess(self, room_code: str, by: str, word: str) -> None:
        pass

    # private messages
    def wrong_guess(self, user_id: str) -> None:
        pass

    def user_updated(self, user_id: str, changes: dict) -> None:
        pass

    def friend_added(self, user_id: str, friend: dict) -> None:
        pass

    def friend_online(self, user_id: str, friend_id: str) -> None:
        pass

    def friend_offline(self, user_id: str, friend_id: str) -> None:
        pass

    def game_invite(self, user_id: str, invite: dict) -> None:
        pass
