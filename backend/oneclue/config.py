import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Socket.IO (empty -> eventlet, or threading on Windows / Python >= 3.13)
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    # Words (empty -> built-in dictionary)
    DICTIONARY_PATH = os.environ.get("DICTIONARY_PATH", "")

    # Rooms
    ROOM_CODE_LENGTH = int(os.environ.get("ROOM_CODE_LENGTH", "4"))
    EMPTY_ROOM_TTL_SEC = int(os.environ.get("EMPTY_ROOM_TTL_SEC", "60"))

    # Game
    TURN_DURATION_SEC = int(os.environ.get("TURN_DURATION_SEC", "30"))
    WORDS_PER_GAME = int(os.environ.get("WORDS_PER_GAME", "10"))
    CLUE_MAX_LENGTH = int(os.environ.get("CLUE_MAX_LENGTH", "12"))
    CLUE_SIMILARITY_MAX = float(os.environ.get("CLUE_SIMILARITY_MAX", "0.30"))
    GUESS_SIMILARITY_MIN = float(os.environ.get("GUESS_SIMILARITY_MIN", "0.80"))

    # Timers
    TICK_INTERVAL_SEC = float(os.environ.get("TICK_INTERVAL_SEC", "1.0"))
    TIMER_AUTOSTART = os.environ.get("TIMER_AUTOSTART", "1") == "1"
