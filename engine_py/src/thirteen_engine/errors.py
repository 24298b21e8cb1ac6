# engine_py/src/thirteen_engine/errors.py

class GameError(Exception):
    """Base exception for lobby and game-setup errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

# Specific error codes
VALIDATION_ERROR = "VALIDATION_ERROR"
MEMBERSHIP_CONFLICT = "MEMBERSHIP_CONFLICT"
NOT_FOUND = "NOT_FOUND"
CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
ALREADY_STARTED = "ALREADY_STARTED"
DUPLICATE_NAME = "DUPLICATE_NAME"
AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"
INSUFFICIENT_PLAYERS = "INSUFFICIENT_PLAYERS"
INVALID_EVENT = "INVALID_EVENT"
INTERNAL_ERROR = "INTERNAL_ERROR"

# Helper function to raise common errors
def raise_error(code: str, message: str):
    raise GameError(code, message)
