from __future__ import annotations

from typing import Union

from .models import GameState, Player, Room, WordStat


def award_correct_guess(room: Room, guesser: Player) -> None:
    """+1 to the guesser and +1 to the speaker of the current turn."""
    guesser.score += 1
    speaker = room.find_player(room.game_state.current_speaker_id) if room.game_state else None
    if speaker is not None:
        speaker.score += 1


def record_word(gs: GameState, attempts: Union[int, str]) -> None:
    gs.words_played.append(gs.current_word)
    gs.word_stats.append(WordStat(word=gs.current_word, attempts=attempts))


def is_game_over(gs: GameState, words_per_game: int = 10) -> bool:
    return len(gs.word_stats) >= words_per_game


def reset_scores(room: Room) -> None:
    for p in room.players:
        p.score = 0
