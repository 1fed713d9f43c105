from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union


RoomState = Literal["LOBBY", "PLAYING", "END"]
SubTurn = Literal["CLUE", "GUESS"]

# attempts marker for a word the speaker passed on
PASSED = "passed"


@dataclass
class Player:
    id: str
    name: str
    score: int = 0


@dataclass
class WordStat:
    word: str
    attempts: Union[int, str]


@dataclass
class Settings:
    active_categories: list[str] = field(default_factory=list)
    turn_duration: int = 30


@dataclass
class GameState:
    current_speaker_id: str | None = None
    current_word: str | None = None
    clues: list[str] = field(default_factory=list)
    guesses: list[str] = field(default_factory=list)
    time_remaining: int = 0
    turn_active: bool = False
    sub_turn: SubTurn = "CLUE"
    words_played: list[str] = field(default_factory=list)
    word_stats: list[WordStat] = field(default_factory=list)
    # set by a skip, which already picked who speaks next
    next_speaker_chosen: bool = False


@dataclass
class Room:
    code: str
    host_id: str
    state: RoomState = "LOBBY"
    settings: Settings = field(default_factory=Settings)
    players: list[Player] = field(default_factory=list)
    game_state: GameState | None = None
    created_at_ms: int = 0

    def find_player(self, user_id: str | None) -> Player | None:
        if user_id is None:
            return None
        for p in self.players:
            if p.id == user_id:
                return p
        return None

    def player_index(self, user_id: str | None) -> int:
        for idx, p in enumerate(self.players):
            if p.id == user_id:
                return idx
        return -1

    def is_host(self, user_id: str | None) -> bool:
        return user_id is not None and self.host_id == user_id


def game_state_snapshot(gs: GameState | None) -> dict | None:
    if gs is None:
        return None
    return {
        "currentSpeakerId": gs.current_speaker_id,
        "currentWord": gs.current_word,
        "clues": list(gs.clues),
        "guesses": list(gs.guesses),
        "timeRemaining": gs.time_remaining,
        "turnActive": gs.turn_active,
        "subTurn": gs.sub_turn,
        "wordsPlayed": list(gs.words_played),
        "wordStats": [{"word": s.word, "attempts": s.attempts} for s in gs.word_stats],
    }


def room_snapshot(room: Room) -> dict:
    """Value copy of the room in the shape clients render."""
    return {
        "roomId": room.code,
        "hostId": room.host_id,
        "state": room.state,
        "players": [{"id": p.id, "name": p.name, "score": p.score} for p in room.players],
        "settings": {
            "activeCategories": list(room.settings.active_categories),
            "turnDuration": room.settings.turn_duration,
        },
        "gameState": game_state_snapshot(room.game_state),
    }
