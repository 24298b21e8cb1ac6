"""
Card shuffling and dealing utilities.
"""

import logging
import random
from typing import List, Optional, Sequence

from .comparator import card_sort_key
from .constants import HAND_SIZE, MAX_PLAYERS, RANK_ORDER, STARTING_RANK, STARTING_SUIT, SUIT_ORDER
from .models import Card, Player, Session
from .rules import RuleConfig, default_rules

logger = logging.getLogger(__name__)

STARTING_CARD = Card(STARTING_RANK, STARTING_SUIT)


def create_deck() -> List[Card]:
    """Create the standard 52-card deck, no jokers."""
    deck = []

    for suit in SUIT_ORDER:
        for rank in RANK_ORDER:
            deck.append(Card(rank, suit))

    return deck


def shuffle_deck(deck: List[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    Shuffle a deck in place with Fisher-Yates.

    Args:
        deck: List of cards to shuffle
        rng: Random source; pass a seeded ``random.Random`` for reproducible deals

    Returns:
        The same list, shuffled
    """
    rng = rng or random.Random()

    for i in range(len(deck) - 1, 0, -1):
        j = rng.randint(0, i)
        deck[i], deck[j] = deck[j], deck[i]

    return deck


def new_shuffled_deck(rng: Optional[random.Random] = None) -> List[Card]:
    """Build a fresh deck and shuffle it."""
    return shuffle_deck(create_deck(), rng)


def deal_cards(deck: Sequence[Card], player_count: int = MAX_PLAYERS,
               hand_size: int = HAND_SIZE) -> List[List[Card]]:
    """
    Deal contiguous slices of the deck, one per seat.

    Args:
        deck: Shuffled deck of cards
        player_count: Number of seats to deal to
        hand_size: Cards per seat

    Returns:
        One hand per seat, in seat order. Cards past
        ``player_count * hand_size`` stay undealt.
    """
    needed = player_count * hand_size
    if len(deck) < needed:
        raise ValueError(f"Deck has {len(deck)} cards, need {needed} to deal")

    return [
        list(deck[seat * hand_size:(seat + 1) * hand_size])
        for seat in range(player_count)
    ]


def sort_hand(hand: Sequence[Card]) -> List[Card]:
    """Sort a hand low to high by rank, then suit."""
    return sorted(hand, key=card_sort_key)


def find_starting_player_index(players: Sequence[Player]) -> int:
    """
    Find the seat holding the 3 of spades.

    Falls back to seat 0 if nobody holds it, which only happens
    when dealing was skipped or the deck was short.
    """
    for index, player in enumerate(players):
        if STARTING_CARD in player.hand:
            return index

    return 0


def setup_round(session: Session, rng: Optional[random.Random] = None,
                rules: RuleConfig = default_rules) -> Session:
    """
    Shuffle, deal and sort hands, then pick the starting player.

    Args:
        session: Session with a full table
        rng: Random source for the shuffle
        rules: Table size and hand size

    Returns:
        The session, mutated in place
    """
    if len(session.players) != rules.max_players:
        raise ValueError(
            f"Dealing needs exactly {rules.max_players} players, got {len(session.players)}"
        )

    deck = new_shuffled_deck(rng)
    hands = deal_cards(deck, len(session.players), rules.hand_size)

    for player, hand in zip(session.players, hands):
        player.hand = sort_hand(hand)

    session.deck = deck
    session.pile = []
    session.turn_index = find_starting_player_index(session.players)

    starter = session.players[session.turn_index]
    logger.info(f"Lobby {session.code}: dealt {rules.hand_size} cards each, {starter.name} starts")

    return session


def validate_deck_integrity(session: Session) -> bool:
    """
    Validate that all cards are accounted for and no duplicates exist.

    Args:
        session: Session to validate

    Returns:
        True if the hands are disjoint slices of a complete deck
    """
    expected_cards = set(create_deck())

    if len(session.deck) != len(expected_cards) or set(session.deck) != expected_cards:
        return False

    dealt = []
    for player in session.players:
        dealt.extend(player.hand)

    deck_cards = set(session.deck)
    return len(dealt) == len(set(dealt)) and all(card in deck_cards for card in dealt)
