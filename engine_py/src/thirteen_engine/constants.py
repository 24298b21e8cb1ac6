"""Game constants"""

import string

# Low -> high. 2 is the top rank in this game.
RANK_ORDER = ['3', '4', '5', '6', '7', '8', '9', '10', 'J', 'Q', 'K', 'A', '2']
SUIT_ORDER = ['♠', '♣', '♦', '♥']

STARTING_RANK = '3'
STARTING_SUIT = '♠'

DECK_SIZE = len(RANK_ORDER) * len(SUIT_ORDER)
MAX_PLAYERS = 4
HAND_SIZE = 13

CODE_LENGTH = 4
CODE_ALPHABET = string.ascii_uppercase
