from __future__ import annotations

import logging
import random

from . import scoring
from .errors import AuthorizationError, GameStateError, ValidationError
from .models import PASSED, GameState, Player, Room, game_state_snapshot, room_snapshot
from .notifier import Notifier
from .similarity import is_clue_too_similar, is_guess_correct
from .timers import TimerService
from .words import pick_word

logger = logging.getLogger(__name__)


def pick_next_speaker(players: list[Player], previous_id: str | None) -> str | None:
    """Round-robin over the current player order.

    A previous speaker who is no longer in ``players`` wraps the rotation back
    to ``players[0]``.
    """
    if not players:
        return None
    if previous_id is None:
        return players[0].id
    for idx, p in enumerate(players):
        if p.id == previous_id:
            if idx + 1 < len(players):
                return players[idx + 1].id
            break
    return players[0].id


class TurnEngine:
    """Turn and game transitions for a single room.

    Callers hold the room's lock (``RoomRegistry.locked``) around every method.
    """

    def __init__(
        self,
        timers: TimerService,
        notifier: Notifier,
        dictionary: dict[str, list[str]],
        words_per_game: int = 10,
        clue_max_length: int = 12,
        clue_similarity_max: float = 0.30,
        guess_similarity_min: float = 0.80,
        rng: random.Random | None = None,
    ):
        self.timers = timers
        self.notifier = notifier
        self.dictionary = dictionary
        self.words_per_game = words_per_game
        self.clue_max_length = clue_max_length
        self.clue_similarity_max = clue_similarity_max
        self.guess_similarity_min = guess_similarity_min
        self.rng = rng or random.Random()

    # -- guards --

    def _require_host(self, room: Room, user_id: str) -> None:
        if not room.is_host(user_id):
            raise AuthorizationError("Only the host can do that")

    def _require_live_turn(self, room: Room) -> GameState:
        gs = room.game_state
        if room.state != "PLAYING" or gs is None or not gs.turn_active:
            raise GameStateError("Game not active")
        return gs

    def _require_speaker(self, gs: GameState, user_id: str) -> None:
        if gs.current_speaker_id != user_id:
            raise AuthorizationError("Only the speaker can do that")

    # -- lobby --

    def toggle_category(self, room: Room, user_id: str, category: str) -> list[str]:
        self._require_host(room, user_id)
        if room.state not in ("LOBBY", "PLAYING"):
            raise GameStateError("Categories can only change before or during a game")
        if category not in self.dictionary:
            raise ValidationError("Unknown category")

        cats = room.settings.active_categories
        if category in cats:
            cats.remove(category)
        else:
            cats.append(category)

        self.notifier.room_update(room.code, room_snapshot(room))
        return list(cats)

    def start_game(self, room: Room, user_id: str) -> None:
        self._require_host(room, user_id)
        if room.state != "LOBBY":
            raise GameStateError("Game already started")

        room.state = "PLAYING"
        room.game_state = GameState(time_remaining=room.settings.turn_duration)
        logger.info("[game-start] room=%s players=%d", room.code, len(room.players))
        self.advance_turn(room)

    def return_to_lobby(self, room: Room, user_id: str) -> None:
        self._require_host(room, user_id)
        if room.state != "END":
            raise GameStateError("Game is not over")

        room.state = "LOBBY"
        room.game_state = None
        scoring.reset_scores(room)
        self.notifier.room_update(room.code, room_snapshot(room))

    # -- turns --

    def advance_turn(self, room: Room) -> None:
        if not room.players:
            self.timers.cancel(room.code)
            room.state = "LOBBY"
            room.game_state = None
            self.notifier.room_update(room.code, room_snapshot(room))
            return

        gs = room.game_state
        if gs is None:
            gs = room.game_state = GameState()

        if not (gs.next_speaker_chosen and room.find_player(gs.current_speaker_id)):
            gs.current_speaker_id = pick_next_speaker(room.players, gs.current_speaker_id)
        gs.next_speaker_chosen = False
        gs.current_word = pick_word(self.dictionary, room.settings.active_categories, self.rng)
        gs.time_remaining = room.settings.turn_duration
        gs.turn_active = True
        gs.sub_turn = "CLUE"
        gs.guesses = []
        gs.clues = []

        logger.info("[turn-start] room=%s speaker=%s word_no=%d", room.code, gs.current_speaker_id, len(gs.word_stats) + 1)
        self.notifier.room_update(room.code, room_snapshot(room))
        self.timers.start(room.code)

    def next_turn(self, room: Room, user_id: str) -> None:
        self._require_host(room, user_id)
        if room.state != "PLAYING" or room.game_state is None:
            raise GameStateError("Game not active")
        if room.game_state.turn_active:
            raise GameStateError("Turn still running")
        self.advance_turn(room)

    def submit_clue(self, room: Room, user_id: str, text: str) -> str:
        gs = self._require_live_turn(room)
        self._require_speaker(gs, user_id)
        if gs.sub_turn != "CLUE":
            raise GameStateError("Not the time for a clue")

        clue = (text or "").strip()
        if not clue:
            raise ValidationError("Clue cannot be empty")
        if len(clue) > self.clue_max_length:
            raise ValidationError(f"Clue is limited to {self.clue_max_length} characters max")
        if is_clue_too_similar(gs.current_word or "", clue, self.clue_similarity_max):
            raise ValidationError("Clue too similar to the hidden word!")

        gs.clues.append(clue)
        gs.sub_turn = "GUESS"
        self.notifier.game_state_update(room.code, game_state_snapshot(gs))
        return clue

    def submit_guess(self, room: Room, user_id: str, text: str) -> bool:
        gs = self._require_live_turn(room)
        guesser = room.find_player(user_id)
        if guesser is None:
            raise AuthorizationError("Not in this room")
        if gs.current_speaker_id == user_id:
            raise AuthorizationError("The speaker cannot guess")

        # An empty guess is still a miss and hands the turn back to the speaker.
        guess = (text or "").strip().lower()
        if not guess or not is_guess_correct(gs.current_word or "", guess, self.guess_similarity_min):
            gs.guesses.append(guess)
            gs.sub_turn = "CLUE"
            self.notifier.game_state_update(room.code, game_state_snapshot(gs))
            self.notifier.wrong_guess(user_id)
            return False

        scoring.award_correct_guess(room, guesser)
        scoring.record_word(gs, len(gs.guesses) + 1)
        self.notifier.correct_guess(room.code, guesser.name, guess)

        if scoring.is_game_over(gs, self.words_per_game):
            self._end_game(room)
        else:
            self.advance_turn(room)
        return True

    def speaker_skip(self, room: Room, user_id: str) -> None:
        gs = self._require_live_turn(room)
        self._require_speaker(gs, user_id)

        scoring.record_word(gs, PASSED)
        if scoring.is_game_over(gs, self.words_per_game):
            self._end_game(room)
            return

        self.timers.cancel(room.code)
        gs.current_speaker_id = pick_next_speaker(room.players, gs.current_speaker_id)
        gs.next_speaker_chosen = True
        gs.turn_active = False
        gs.clues = []
        gs.guesses = []
        gs.sub_turn = "CLUE"
        self.notifier.turn_ended(room.code, room_snapshot(room))

    def end_turn_early(self, room: Room, user_id: str) -> None:
        gs = self._require_live_turn(room)
        self._require_speaker(gs, user_id)
        gs.time_remaining = 0
        self.abandon_turn(room)

    def abandon_turn(self, room: Room) -> bool:
        """Stop the running turn without recording the word or rotating."""
        gs = room.game_state
        if room.state != "PLAYING" or gs is None or not gs.turn_active:
            return False
        self.timers.cancel(room.code)
        gs.turn_active = False
        self.notifier.turn_ended(room.code, room_snapshot(room))
        return True

    def _end_game(self, room: Room) -> None:
        room.state = "END"
        self.timers.cancel(room.code)
        if room.game_state is not None:
            room.game_state.turn_active = False
        logger.info("[game-end] room=%s words=%d", room.code, len(room.game_state.word_stats) if room.game_state else 0)
        self.notifier.room_update(room.code, room_snapshot(room))
