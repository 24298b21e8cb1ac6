"""
Card comparison logic for the Thirteen rank and suit orders.
"""

from typing import Tuple

from .constants import RANK_ORDER, SUIT_ORDER
from .models import Card


def get_rank_index(rank: str) -> int:
    """Get the index of a rank in the low-to-high ordering."""
    try:
        return RANK_ORDER.index(rank)
    except ValueError:
        raise ValueError(f"Invalid rank: {rank}")


def get_suit_index(suit: str) -> int:
    """Get the index of a suit in the low-to-high ordering."""
    try:
        return SUIT_ORDER.index(suit)
    except ValueError:
        raise ValueError(f"Invalid suit: {suit}")


def card_sort_key(card: Card) -> Tuple[int, int]:
    """Rank first, then suit."""
    return get_rank_index(card.rank), get_suit_index(card.suit)


def compare_cards(card_a: Card, card_b: Card) -> int:
    """
    Compare two cards.

    Returns:
        < 0 if card_a is lower than card_b
        0 if the cards are the same card
        > 0 if card_a is higher than card_b
    """
    rank_diff = get_rank_index(card_a.rank) - get_rank_index(card_b.rank)
    if rank_diff:
        return rank_diff
    return get_suit_index(card_a.suit) - get_suit_index(card_b.suit)

