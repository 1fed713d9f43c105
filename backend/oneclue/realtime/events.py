# Client -> server
USER_REGISTER = "user:register"
USER_RENAME = "user:rename"
FRIEND_ADD = "friend:add"
FRIEND_INVITE = "friend:invite"
INVITE_DECLINE = "invite:decline"
ROOM_CREATE = "room:create"
ROOM_JOIN = "room:join"
ROOM_LEAVE = "room:leave"
ROOM_TOGGLE_CATEGORY = "room:toggle_category"
GAME_START = "game:start"
CLUE_SUBMIT = "clue:submit"
GUESS_SUBMIT = "guess:submit"
TURN_SKIP = "turn:skip"
TURN_END = "turn:end"
TURN_NEXT = "turn:next"
GAME_RETURN_LOBBY = "game:return_lobby"

# Server -> client
ROOM_STATE = "room:state"
GAME_STATE = "game:state"
GAME_TICK = "game:tick"
TURN_ENDED = "turn:ended"
GUESS_CORRECT = "guess:correct"
GUESS_WRONG = "guess:wrong"
USER_UPDATED = "user:updated"
FRIEND_ADDED = "friend:added"
FRIEND_ONLINE = "friend:online"
FRIEND_OFFLINE = "friend:offline"
INVITE_RECEIVED = "invite:received"


def user_channel(user_id: str) -> str:
    return f"user:{user_id}"
