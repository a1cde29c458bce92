# engine_py/src/cah_engine/errors.py

class GameError(Exception):
    """Base exception for game-related errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class PackLoadError(GameError):
    """A pack file could not be read or parsed."""
    def __init__(self, message: str):
        super().__init__(PACK_LOAD_FAILED, message)


# Specific error codes
LOBBY_FULL = "LOBBY_FULL"
LOBBY_CLOSED = "LOBBY_CLOSED"
ALREADY_JOINED = "ALREADY_JOINED"
NOT_IN_LOBBY = "NOT_IN_LOBBY"
UNKNOWN_COMPONENT = "UNKNOWN_COMPONENT"
NO_BLACK_CARDS = "NO_BLACK_CARDS"
NOT_ENOUGH_WHITE_CARDS = "NOT_ENOUGH_WHITE_CARDS"
PACK_LOAD_FAILED = "PACK_LOAD_FAILED"
