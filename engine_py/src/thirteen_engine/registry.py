"""
Process-wide lobby registry.

Owns both indexes (lobby code -> session, connection id -> lobby code) so
they can only change together.
"""

import logging
import random
from typing import Dict, Iterator, Optional

from .constants import CODE_ALPHABET, CODE_LENGTH
from .errors import MEMBERSHIP_CONFLICT, NOT_FOUND, raise_error
from .models import Session

logger = logging.getLogger(__name__)


def normalize_code(code: Optional[str]) -> str:
    """Codes are matched case-insensitively and stored uppercase."""
    return (code or "").strip().upper()


class SessionRegistry:
    def __init__(self, rng: Optional[random.Random] = None, code_length: int = CODE_LENGTH):
        self.rng = rng or random.Random()
        self.code_length = code_length
        self._sessions: Dict[str, Session] = {}
        self._connection_codes: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, code: str) -> bool:
        return normalize_code(code) in self._sessions

    @property
    def connection_count(self) -> int:
        return len(self._connection_codes)

    def sessions(self) -> Iterator[Session]:
        return iter(list(self._sessions.values()))

    def generate_code(self) -> str:
        """Draw random codes until one is free."""
        while True:
            code = "".join(self.rng.choice(CODE_ALPHABET) for _ in range(self.code_length))
            if code not in self._sessions:
                return code
            logger.debug(f"Lobby code collision on {code}, retrying")

    def create_session(self, name: str) -> Session:
        """Register an empty session under a fresh code."""
        code = self.generate_code()
        session = Session(code=code, name=name)
        self._sessions[code] = session
        return session

    def lookup(self, code: Optional[str]) -> Optional[Session]:
        return self._sessions.get(normalize_code(code))

    def require(self, code: Optional[str]) -> Session:
        session = self.lookup(code)
        if session is None:
            raise_error(NOT_FOUND, "Lobby not found")
        return session

    def code_for(self, connection_id: str) -> Optional[str]:
        return self._connection_codes.get(connection_id)

    def session_for(self, connection_id: str) -> Optional[Session]:
        code = self._connection_codes.get(connection_id)
        if code is None:
            return None
        return self._sessions.get(code)

    def bind(self, connection_id: str, code: str):
        """Record that a connection sits in a lobby. One lobby per connection."""
        code = normalize_code(code)
        if code not in self._sessions:
            raise_error(NOT_FOUND, "Lobby not found")

        current = self._connection_codes.get(connection_id)
        if current is not None and current != code:
            raise_error(MEMBERSHIP_CONFLICT, "You are already in a lobby")

        self._connection_codes[connection_id] = code

    def unbind(self, connection_id: str) -> Optional[str]:
        return self._connection_codes.pop(connection_id, None)

    def delete_if_empty(self, code: str) -> bool:
        """Drop a session with no players. Safe to call repeatedly."""
        code = normalize_code(code)
        session = self._sessions.get(code)
        if session is None or session.players:
            return False

        del self._sessions[code]
        logger.info(f"Lobby {code} deleted")
        return True

    def is_consistent(self) -> bool:
        """
        Check that bound connections and seated players are the same set,
        and that every binding points at the session that seats it.
        """
        seated = {}
        for code, session in self._sessions.items():
            if session.code != code:
                return False
            for player in session.players:
                if player.id in seated:
                    return False
                seated[player.id] = code

        return seated == self._connection_codes
