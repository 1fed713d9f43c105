class GameError(Exception):
    """Base class for a command that could not be applied to a room."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GameError):
    pass


class RoomNotFoundError(ValidationError):
    def __init__(self, message: str = "Room not found"):
        super().__init__(message)


class AuthorizationError(GameError):
    pass


class GameStateError(GameError):
    pass


class NotRegisteredError(GameError):
    def __init__(self, message: str = "Not registered"):
        super().__init__(message)
