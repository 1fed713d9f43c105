from __future__ import annotations

import json
import logging
import random
from pathlib import Path

logger = logging.getLogger(__name__)


# Drawn when the host has switched every category off.
OUT_OF_WORDS = "Select a category!"


DEFAULT_DICTIONARY: dict[str, list[str]] = {
    "champions": [
        "Ahri", "Akali", "Ashe", "Blitzcrank", "Caitlyn", "Darius", "Draven",
        "Ezreal", "Garen", "Jinx", "Katarina", "Lee Sin", "Lux", "Master Yi",
        "Miss Fortune", "Nunu (et Willump)", "Renata Glasc", "Teemo", "Thresh",
        "Twisted Fate", "Xin Zhao", "Yasuo", "Zed",
    ],
    "items": [
        "Infinity Edge", "Rabadon's Deathcap", "Trinity Force", "Zhonya's Hourglass",
        "Warmog's Armor", "Thornmail", "Guardian Angel", "Blade of the Ruined King",
        "Doran's Blade", "Control Ward", "Boots of Swiftness", "Sunfire Aegis",
    ],
    "lol": [
        "Baron Nashor", "Dragon", "Rift Herald", "Nexus", "Inhibitor", "Jungle",
        "Flash", "Ignite", "Teleport", "Smite", "Minion", "Pentakill", "Ward",
        "Summoner's Rift", "Howling Abyss",
    ],
    "esport": [
        "Worlds", "MSI", "LEC", "LCK", "Faker", "T1", "G2 Esports", "Fnatic",
        "Karmine Corp", "Caps", "Rekkles", "Caster", "Draft", "Bo5",
    ],
    "streamers": [
        "Kameto", "Gotaga", "Squeezie", "Domingo", "Ibai", "Caedrel", "Tyler1",
        "Baiano", "Thebausffs", "Zerator",
    ],
}


def load_dictionary(path: str | None = None) -> dict[str, list[str]]:
    """Read a category -> words JSON object, or fall back to the built-in one."""
    if not path:
        return {cat: list(words) for cat, words in DEFAULT_DICTIONARY.items()}

    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"dictionary file {path} must hold a JSON object")

    dictionary: dict[str, list[str]] = {}
    for cat, words in raw.items():
        if not isinstance(words, list):
            raise ValueError(f"category {cat!r} in {path} must be a list of words")
        cleaned = [w.strip() for w in words if isinstance(w, str) and w.strip()]
        if cleaned:
            dictionary[str(cat)] = cleaned

    logger.info("[dictionary] loaded %d categories from %s", len(dictionary), path)
    return dictionary


def pick_word(
    dictionary: dict[str, list[str]],
    categories: list[str],
    rng: random.Random | None = None,
) -> str:
    """Uniform category, then uniform word inside it. Repeats are allowed."""
    rng = rng or random
    usable = [c for c in categories if dictionary.get(c)]
    if not usable:
        return OUT_OF_WORDS
    category = rng.choice(usable)
    return rng.choice(dictionary[category])
