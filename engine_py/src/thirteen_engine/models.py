"""Game models and data structures"""

from dataclasses import dataclass, field
from typing import List, Optional

from .constants import RANK_ORDER, SUIT_ORDER


@dataclass(frozen=True)
class Card:
    rank: str
    suit: str

    def __post_init__(self):
        if self.rank not in RANK_ORDER:
            raise ValueError(f"Invalid rank: {self.rank}")
        if self.suit not in SUIT_ORDER:
            raise ValueError(f"Invalid suit: {self.suit}")

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def to_dict(self) -> dict:
        return {"rank": self.rank, "suit": self.suit}


@dataclass
class Player:
    id: str  # connection id supplied by the transport
    name: str
    is_host: bool = False
    hand: List[Card] = field(default_factory=list)


@dataclass
class Session:
    code: str
    name: str
    players: List[Player] = field(default_factory=list)  # join order
    started: bool = False
    turn_index: int = 0
    deck: List[Card] = field(default_factory=list)
    pile: List[Card] = field(default_factory=list)  # trick pile, unused until play exists

    @property
    def host(self) -> Optional[Player]:
        for player in self.players:
            if player.is_host:
                return player
        return None

    def find_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def player_names(self) -> List[str]:
        return [player.name for player in self.players]

    def is_full(self, max_players: int) -> bool:
        return len(self.players) >= max_players
